"""
Shared pytest fixtures.

Nothing here needs a real transformer model:
    • FakeVocab tokenizes on whitespace with a fixed word list
    • FakeRuntime stands in for onnxruntime and returns a deterministic
      hidden-state tensor derived from input_ids
    • vocab_file writes a tiny BERT-style vocab.txt for the real adapter
"""

from pathlib import Path

import numpy as np
import pytest
from click.testing import CliRunner

from bertrank.embedding.embedder import EmbeddingEngine
from bertrank.embedding.translator import build_translator

HIDDEN_SIZE = 4

VOCAB_TOKENS = [
    "[PAD]", "[UNK]", "[CLS]", "[SEP]", "[MASK]",
    "the", "cat", "sat", "on", "mat", "dog", "ran", "##s", "hello", "world", ".",
]


class FakeVocab:
    unknown_token = "[UNK]"

    def __init__(self, words=VOCAB_TOKENS):
        self.ids = {w: i for i, w in enumerate(words)}
        self.unknown_id = self.ids[self.unknown_token]

    def tokenize(self, text):
        return [w if w in self.ids else self.unknown_token for w in text.split()]

    def id_of(self, token):
        return self.ids.get(token, self.unknown_id)


class FakeRuntime:
    """
    Row i of the output is [input_id, 1.0, i, 0.0].
    Records every feed so tests can inspect what the engine sent.
    """

    def __init__(self, batch_axis=True):
        self.batch_axis = batch_axis
        self.calls = []

    def run(self, inputs):
        self.calls.append(inputs)
        ids = np.asarray(inputs["input_ids"], dtype=np.float32)
        positions = np.arange(ids.shape[0], dtype=np.float32)
        hidden = np.stack(
            [ids, np.ones_like(ids), positions, np.zeros_like(ids)], axis=1
        )
        return hidden[np.newaxis] if self.batch_axis else hidden


class FailingRuntime:
    def run(self, inputs):
        raise RuntimeError("[ONNXRuntimeError] : 2 : INVALID_ARGUMENT")


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def fake_vocab() -> FakeVocab:
    return FakeVocab()


@pytest.fixture
def fake_runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def make_engine(fake_vocab):
    """Factory: EmbeddingEngine(family) over FakeVocab + the given runtime."""

    def _make(family="mean", runtime=None, max_seq_length=512):
        translator = build_translator(family, fake_vocab, max_seq_length=max_seq_length)
        return EmbeddingEngine(translator, runtime or FakeRuntime())

    return _make


@pytest.fixture
def vocab_file(tmp_path) -> Path:
    path = tmp_path / "vocab.txt"
    path.write_text("\n".join(VOCAB_TOKENS) + "\n", encoding="utf-8")
    return path
