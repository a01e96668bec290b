# The bertrank search indexer
# ======================================================
# Batch embedding of a directory of text files
# ======================================================
# Purpose:
#   • Read every file of <input_dir> as UTF-8 text
#   • Embed it with one EmbeddingEngine call per file
#   • Save <out_dir>/<md5 of text>.json per file
# Bad files and failed inferences are logged and skipped;
# a missing input directory aborts the batch.
# ======================================================

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List

import numpy as np

from ..errors import InferenceFailure, StoreIOFailure
from .store import write_record

logger = logging.getLogger(__name__)


@dataclass
class EmbeddedFile:
    source: Path
    text: str
    vector: np.ndarray
    output: Path


@dataclass
class BatchStats:
    written: int = 0
    failed: List[Path] = field(default_factory=list)


def list_inputs(input_dir: str | Path) -> List[Path]:
    dir_path = Path(input_dir)
    if not dir_path.is_dir():
        raise StoreIOFailure(f"Input path is not a directory: {dir_path}")
    try:
        return sorted(p for p in dir_path.iterdir() if p.is_file())
    except OSError as exc:
        raise StoreIOFailure(f"Cannot list {dir_path}: {exc}") from exc


def embed_directory(
    files: List[Path],
    engine,
    out_dir: str | Path,
    lowercase: bool = True,
    stats: BatchStats | None = None,
) -> Iterator[EmbeddedFile]:
    """
    Embed each file and write its record; yields one EmbeddedFile per success.
    The identifier stored in the record is the file path; the content address
    is computed over the (possibly lower-cased) text that was embedded.
    StoreIOFailure on the output side is not per-item and propagates.
    """
    stats = stats if stats is not None else BatchStats()
    for path in files:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("skipping %s: %s", path, exc)
            stats.failed.append(path)
            continue
        if lowercase:
            text = text.lower()

        try:
            vector = engine.embed(text)
        except InferenceFailure as exc:
            logger.error("embedding failed for %s: %s", path, exc)
            stats.failed.append(path)
            continue

        out_path = write_record(out_dir, str(path), vector, text)
        stats.written += 1
        yield EmbeddedFile(source=path, text=text, vector=vector, output=out_path)
