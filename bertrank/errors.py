# bertrank/errors.py
# Error taxonomy shared by the embedding pipeline, the record store and ranking.
#   - construction time (fatal to an engine): ModelLoadFailure, VocabularyLoadFailure
#   - per call: InferenceFailure, UnsupportedOutputShape, DimensionMismatch
#   - storage: StoreIOFailure
from __future__ import annotations


class BertRankError(Exception):
    """Base class for every error raised by bertrank."""


class ModelLoadFailure(BertRankError):
    pass


class VocabularyLoadFailure(BertRankError):
    pass


class InferenceFailure(BertRankError):
    pass


class UnsupportedOutputShape(BertRankError):
    def __init__(self, shape):
        self.shape = tuple(shape)
        super().__init__(f"Unexpected output format: {list(self.shape)}")


class DimensionMismatch(BertRankError):
    def __init__(self, identifier: str, expected: int, actual: int):
        self.identifier = identifier
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Vectors have different dimensions: query={expected}, "
            f"{identifier!r}={actual}"
        )


class StoreIOFailure(BertRankError):
    pass
