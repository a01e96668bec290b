# bertrank/embedding/translator.py
# ======================================================
# Text <-> tensor translation, one strategy per model family
# ======================================================
#   • "cls"  : BERT style. input_ids + attention_mask + token_type_ids,
#              sentence vector = hidden state at position 0 ([CLS])
#   • "mean" : sentence-embedding style. input_ids + attention_mask,
#              sentence vector = mean over the sequence axis
# Sequences are single-example and never padded.
# ======================================================

from __future__ import annotations
import logging
from typing import Dict, List

import numpy as np

from ..errors import UnsupportedOutputShape

MAX_SEQ_LENGTH = 512

logger = logging.getLogger(__name__)


class Translator:
    """
    Shared tokenize/truncate logic; subclasses decide which tensors to emit
    and how to pool the model output.
    - vocab: object exposing tokenize(text), id_of(token), unknown_token
    - max_seq_length: tokens kept from the start of the sequence
    - log: sink for diagnostics (truncation, unknown tokens)
    """
    family = ""

    def __init__(self, vocab, max_seq_length: int = MAX_SEQ_LENGTH, log: logging.Logger | None = None):
        if max_seq_length < 1:
            raise ValueError(f"max_seq_length must be positive, got {max_seq_length}")
        self.vocab = vocab
        self.max_seq_length = max_seq_length
        self.log = log or logger

    # ------------------------------------------------------
    # Input side
    # ------------------------------------------------------
    def tokenize(self, text: str) -> List[str]:
        tokens = list(self.vocab.tokenize(text))
        self.log.debug("tokens for input: %s", tokens)
        if self.vocab.unknown_token in tokens:
            self.log.warning(
                "%s token generated for this input (%d occurrences)",
                self.vocab.unknown_token, tokens.count(self.vocab.unknown_token),
            )
        return tokens

    def truncate(self, tokens: List[str]) -> List[str]:
        if len(tokens) > self.max_seq_length:
            self.log.debug(
                "truncated %d tokens to the first %d", len(tokens), self.max_seq_length
            )
            return tokens[: self.max_seq_length]
        return tokens

    def _ids_and_mask(self, tokens: List[str]) -> Dict[str, np.ndarray]:
        input_ids = np.array([self.vocab.id_of(t) for t in tokens], dtype=np.int64)
        return {
            "input_ids": input_ids,
            "attention_mask": np.ones_like(input_ids),
        }

    def build_inputs(self, tokens: List[str]) -> Dict[str, np.ndarray]:
        raise NotImplementedError

    def process_input(self, text: str) -> Dict[str, np.ndarray]:
        """tokenize -> truncate -> named int64 tensors of equal length."""
        return self.build_inputs(self.truncate(self.tokenize(text)))

    # ------------------------------------------------------
    # Output side
    # ------------------------------------------------------
    def _sequence_view(self, raw) -> np.ndarray:
        """Return the [seq_length, hidden_size] slice of a rank-2 or rank-3 output."""
        arr = np.asarray(raw)
        if arr.ndim == 3:
            if arr.shape[0] == 0:
                raise UnsupportedOutputShape(arr.shape)
            arr = arr[0]
        elif arr.ndim != 2:
            raise UnsupportedOutputShape(arr.shape)
        if arr.shape[0] == 0:
            raise UnsupportedOutputShape(np.shape(raw))
        return arr

    def pool(self, hidden: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def reduce_output(self, raw) -> np.ndarray:
        vec = np.array(self.pool(self._sequence_view(raw)), dtype=np.float32)
        vec.flags.writeable = False
        return vec


class ClsPoolingTranslator(Translator):
    family = "cls"

    def build_inputs(self, tokens: List[str]) -> Dict[str, np.ndarray]:
        tensors = self._ids_and_mask(tokens)
        tensors["token_type_ids"] = np.zeros_like(tensors["input_ids"])
        return tensors

    def pool(self, hidden: np.ndarray) -> np.ndarray:
        return hidden[0]


class MeanPoolingTranslator(Translator):
    family = "mean"

    def build_inputs(self, tokens: List[str]) -> Dict[str, np.ndarray]:
        return self._ids_and_mask(tokens)

    def pool(self, hidden: np.ndarray) -> np.ndarray:
        # no padding is ever added, so a plain mean needs no mask weighting
        return hidden.mean(axis=0)


TRANSLATORS = {
    ClsPoolingTranslator.family: ClsPoolingTranslator,
    MeanPoolingTranslator.family: MeanPoolingTranslator,
}


def build_translator(
    family: str,
    vocab,
    max_seq_length: int = MAX_SEQ_LENGTH,
    log: logging.Logger | None = None,
) -> Translator:
    """Pick the pooling strategy for a model family ("cls" or "mean")."""
    try:
        cls = TRANSLATORS[family.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown model family {family!r}; expected one of {sorted(TRANSLATORS)}"
        ) from None
    return cls(vocab, max_seq_length=max_seq_length, log=log)
