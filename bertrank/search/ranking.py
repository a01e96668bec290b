# bertrank/search/ranking.py
# Exact cosine ranking of stored records against a query vector (linear scan).

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Sequence

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as _pairwise_cosine

from ..errors import DimensionMismatch
from .store import EmbeddingRecord


@dataclass(frozen=True)
class RankingEntry:
    record: EmbeddingRecord
    score: float

    @property
    def identifier(self) -> str:
        return self.record.identifier


def _scores(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    if matrix.shape[1] == 0:
        return np.zeros(matrix.shape[0])
    # sklearn leaves zero-norm rows at zero, so their similarity is 0 not NaN
    sims = _pairwise_cosine(query.reshape(1, -1), matrix)[0]
    return np.clip(sims, -1.0, 1.0)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    dot(a, b) / (|a| * |b|); 0.0 when either vector has zero norm.
    Raises DimensionMismatch when the lengths differ.
    """
    va = np.asarray(a, dtype=np.float64).ravel()
    vb = np.asarray(b, dtype=np.float64).ravel()
    if va.shape[0] != vb.shape[0]:
        raise DimensionMismatch("<vector>", va.shape[0], vb.shape[0])
    return float(_scores(va, vb.reshape(1, -1))[0])


def rank(query: Sequence[float], records: Iterable[EmbeddingRecord]) -> List[RankingEntry]:
    """
    Score every record and sort by score, highest first.
    - fails fast: one record with a different dimension aborts the whole call
    - equal scores keep the input order (stable sort)
    - no records -> []
    """
    q = np.asarray(query, dtype=np.float64).ravel()
    records = list(records)
    if not records:
        return []

    dim = q.shape[0]
    for rec in records:
        if rec.dimension != dim:
            raise DimensionMismatch(rec.identifier, dim, rec.dimension)

    matrix = np.vstack([np.asarray(r.vector, dtype=np.float64) for r in records])
    scores = _scores(q, matrix)
    order = np.argsort(-scores, kind="stable")
    return [RankingEntry(records[i], float(scores[i])) for i in order]
