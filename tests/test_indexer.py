import logging

import pytest

from bertrank.errors import StoreIOFailure
from bertrank.search.indexer import BatchStats, embed_directory, list_inputs
from bertrank.search.store import content_address, read_records

from conftest import FailingRuntime


@pytest.fixture
def input_dir(tmp_path):
    d = tmp_path / "texts"
    d.mkdir()
    (d / "a.txt").write_text("The cat sat", encoding="utf-8")
    (d / "b.txt").write_text("the dog ran", encoding="utf-8")
    return d


def test_embed_directory_writes_one_record_per_file(input_dir, tmp_path, make_engine):
    out = tmp_path / "out"
    stats = BatchStats()
    results = list(embed_directory(list_inputs(input_dir), make_engine("mean"), out, stats=stats))

    assert [r.source.name for r in results] == ["a.txt", "b.txt"]
    assert stats.written == 2 and stats.failed == []
    # content address is taken over the lower-cased text
    assert results[0].output.name == f"{content_address('the cat sat')}.json"
    assert sorted(r.identifier for r in read_records(out)) == sorted(
        str(input_dir / n) for n in ("a.txt", "b.txt")
    )


def test_lowercase_can_be_disabled(input_dir, tmp_path, make_engine):
    results = list(
        embed_directory(list_inputs(input_dir), make_engine("cls"), tmp_path / "out", lowercase=False)
    )
    assert results[0].text == "The cat sat"
    assert results[0].output.name == f"{content_address('The cat sat')}.json"


def test_bad_files_are_skipped(input_dir, tmp_path, make_engine, caplog):
    (input_dir / "c.bin").write_bytes(b"\xff\xfe\x00bad")
    stats = BatchStats()
    with caplog.at_level(logging.WARNING, logger="bertrank"):
        results = list(
            embed_directory(list_inputs(input_dir), make_engine("mean"), tmp_path / "out", stats=stats)
        )

    assert len(results) == 2
    assert [p.name for p in stats.failed] == ["c.bin"]
    assert "skipping" in caplog.text


def test_inference_failures_are_counted(input_dir, tmp_path, make_engine):
    stats = BatchStats()
    engine = make_engine("mean", runtime=FailingRuntime())
    results = list(embed_directory(list_inputs(input_dir), engine, tmp_path / "out", stats=stats))

    assert results == []
    assert len(stats.failed) == 2
    assert not (tmp_path / "out").exists()


def test_missing_input_directory(tmp_path):
    with pytest.raises(StoreIOFailure):
        list_inputs(tmp_path / "missing")


def test_subdirectories_are_ignored(input_dir):
    (input_dir / "nested").mkdir()
    assert [p.name for p in list_inputs(input_dir)] == ["a.txt", "b.txt"]
