# The bertrank embedder module:
# goal: turn one text into one sentence vector (translator + inference runtime).

from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, List

import numpy as np

from ..errors import InferenceFailure
from .runtime import OnnxRuntime
from .translator import MAX_SEQ_LENGTH, Translator, build_translator
from .vocab import Vocabulary

logger = logging.getLogger(__name__)


class EmbeddingEngine:
    """
    Single entry point `embed(text) -> vector`.
    - translator: builds the input tensors and pools the raw output
    - runtime: anything with run(dict[str, ndarray]) -> ndarray
    The engine does not normalise text (no lower-casing); callers do.
    One synchronous inference per call, no batching, no retry.
    """
    def __init__(self, translator: Translator, runtime):
        self.translator = translator
        self.runtime = runtime

    @classmethod
    def from_model_dir(
        cls,
        model_dir: str | Path,
        family: str = "mean",
        model_file: str = "model.onnx",
        vocab_file: str = "vocab.txt",
        max_seq_length: int = MAX_SEQ_LENGTH,
        unknown_token: str = "[UNK]",
    ) -> "EmbeddingEngine":
        """
        Load <model_dir>/vocab.txt then <model_dir>/model.onnx.
        Raises VocabularyLoadFailure / ModelLoadFailure; both are fatal.
        """
        model_dir = Path(model_dir)
        vocab = Vocabulary.from_file(model_dir / vocab_file, unknown_token=unknown_token)
        translator = build_translator(family, vocab, max_seq_length=max_seq_length)
        runtime = OnnxRuntime(model_dir / model_file)
        logger.info(
            "loaded %s (family=%s, vocab=%d tokens, inputs=%s)",
            model_dir / model_file, family, vocab.size, runtime.input_names,
        )
        return cls(translator, runtime)

    @property
    def family(self) -> str:
        return self.translator.family

    def embed(self, text: str) -> np.ndarray:
        inputs = self.translator.process_input(text)
        try:
            raw = self.runtime.run(inputs)
        except InferenceFailure:
            raise
        except Exception as exc:
            raise InferenceFailure(f"Inference failed: {exc}") from exc
        return self.translator.reduce_output(raw)

    def embed_many(self, texts: Iterable[str]) -> List[np.ndarray]:
        return [self.embed(t) for t in texts]
