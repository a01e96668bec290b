import pytest

from bertrank.embedding.vocab import Vocabulary
from bertrank.errors import VocabularyLoadFailure


def test_tokenize_splits_into_wordpieces(vocab_file):
    vocab = Vocabulary.from_file(vocab_file)

    assert vocab.tokenize("the cats sat.") == ["the", "cat", "##s", "sat", "."]
    assert vocab.tokenize("") == []


def test_no_special_tokens_are_added(vocab_file):
    tokens = Vocabulary.from_file(vocab_file).tokenize("hello world")
    assert "[CLS]" not in tokens and "[SEP]" not in tokens


def test_unknown_words_become_unknown_token(vocab_file):
    vocab = Vocabulary.from_file(vocab_file)

    assert vocab.tokenize("the zebra") == ["the", "[UNK]"]
    assert vocab.id_of("zebra") == vocab.unknown_id == 1
    assert vocab.id_of("cat") == 6


def test_adapter_does_not_lowercase(vocab_file):
    vocab = Vocabulary.from_file(vocab_file)
    assert vocab.tokenize("The") == ["[UNK]"]
    assert Vocabulary.from_file(vocab_file, lowercase=True).tokenize("The") == ["the"]


def test_size_counts_vocab_entries(vocab_file):
    assert Vocabulary.from_file(vocab_file).size == 16


def test_missing_vocab_file(tmp_path):
    with pytest.raises(VocabularyLoadFailure, match="not found"):
        Vocabulary.from_file(tmp_path / "nope.txt")


def test_vocab_without_unknown_token(tmp_path):
    path = tmp_path / "vocab.txt"
    path.write_text("the\ncat\n", encoding="utf-8")
    with pytest.raises(VocabularyLoadFailure, match=r"\[UNK\]"):
        Vocabulary.from_file(path)
