# bertrank/search/store.py
# Content-addressed embedding records on disk.
#   <out_dir>/<md5 of source text>.json = {"filename": <identifier>, "embeddings": [...]}

from __future__ import annotations
import hashlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

import numpy as np

from ..errors import StoreIOFailure

RECORD_EXT = ".json"

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class EmbeddingRecord:
    """(identifier, vector). Identifiers are caller supplied and may repeat."""
    identifier: str
    vector: np.ndarray

    @property
    def dimension(self) -> int:
        return int(self.vector.shape[0])


def content_address(text: str) -> str:
    """Lowercase hex MD5 of the UTF-8 bytes of the source text."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def record_path(out_dir: str | Path, text: str) -> Path:
    return Path(out_dir) / f"{content_address(text)}{RECORD_EXT}"


def _as_vector(values) -> np.ndarray:
    vec = np.asarray(values, dtype=np.float32)
    if vec.ndim != 1:
        raise ValueError(f"embeddings must be a flat list, got shape {vec.shape}")
    if not np.isfinite(vec).all():
        raise ValueError("embeddings contain null, NaN or out-of-range values")
    vec.flags.writeable = False
    return vec


def write_record(out_dir: str | Path, identifier: str, vector: Sequence[float], text: str) -> Path:
    """
    Save one record named after the hash of `text` (not of the vector).
    An existing file with the same address is replaced.
    """
    path = record_path(out_dir, text)
    payload = {
        "filename": identifier,
        "embeddings": [float(x) for x in np.asarray(vector, dtype=np.float32)],
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False)
    except OSError as exc:
        raise StoreIOFailure(f"Cannot write record {path}: {exc}") from exc
    return path


def load_record(path: Path) -> EmbeddingRecord:
    """Parse one record file; raises ValueError/OSError on bad content."""
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("record is not a JSON object")
    identifier = data.get("filename")
    if not isinstance(identifier, str):
        raise ValueError("missing string field 'filename'")
    if "embeddings" not in data:
        raise ValueError("missing field 'embeddings'")
    return EmbeddingRecord(identifier, _as_vector(data["embeddings"]))


def read_records(directory: str | Path) -> List[EmbeddingRecord]:
    """
    Load every *.json record of a directory (best effort).
    Files that do not parse are skipped with a warning; an unreadable
    directory raises StoreIOFailure. Order is not part of the contract.
    """
    dir_path = Path(directory)
    if not dir_path.is_dir():
        raise StoreIOFailure(f"The provided path is not a valid directory: {dir_path}")
    try:
        files = sorted(
            p for p in dir_path.iterdir()
            if p.suffix.lower() == RECORD_EXT and p.is_file()
        )
    except OSError as exc:
        raise StoreIOFailure(f"Cannot list {dir_path}: {exc}") from exc

    records = []
    for p in files:
        try:
            records.append(load_record(p))
        except (OSError, ValueError, TypeError) as exc:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
            logger.warning("skipping unreadable record %s: %s", p.name, exc)
    return records
