# bertrank/search/checker.py
from __future__ import annotations
from typing import List, Sequence

from .ranking import RankingEntry, rank
from .store import EmbeddingRecord


class EmbeddingChecker:
    """
    Query-time helper:
      1. embed the query with the given engine,
      2. compare it with the precomputed document vectors,
      3. return the ranking, most similar first.
    The engine must be of the same model family as the one that produced
    the records; this is not checked.
    """
    def __init__(self, engine, records: Sequence[EmbeddingRecord]):
        self.engine = engine
        self.records = list(records)

    def check(self, query: str) -> List[RankingEntry]:
        return rank(self.engine.embed(query), self.records)

    def top(self, query: str) -> RankingEntry | None:
        if not self.records:
            return None
        return self.check(query)[0]
