# bertrank/embedding/vocab.py
# WordPiece vocabulary adapter: text -> subword tokens, token -> integer id.
# Backed by the HF `tokenizers` library, built from a BERT-style vocab.txt.

from __future__ import annotations
from pathlib import Path
from typing import List

from tokenizers import Tokenizer
from tokenizers.models import WordPiece
from tokenizers.normalizers import BertNormalizer
from tokenizers.pre_tokenizers import BertPreTokenizer

from ..errors import VocabularyLoadFailure


class Vocabulary:
    """
    Black-box tokenizer service used by the translators.
    - tokenize(text): ordered subword strings, no [CLS]/[SEP] added
    - id_of(token): integer id, unknown_id for out-of-vocabulary tokens
    Case folding is left to the caller (lowercase=False by default).
    """
    def __init__(self, tokenizer: Tokenizer, unknown_token: str = "[UNK]"):
        unknown_id = tokenizer.token_to_id(unknown_token)
        if unknown_id is None:
            raise VocabularyLoadFailure(
                f"Unknown token {unknown_token!r} is missing from the vocabulary"
            )
        self._tokenizer = tokenizer
        self.unknown_token = unknown_token
        self.unknown_id = unknown_id

    @classmethod
    def from_file(
        cls,
        vocab_path: str | Path,
        unknown_token: str = "[UNK]",
        lowercase: bool = False,
    ) -> "Vocabulary":
        vocab_path = Path(vocab_path)
        if not vocab_path.is_file():
            raise VocabularyLoadFailure(f"Vocabulary file not found: {vocab_path}")
        try:
            model = WordPiece.from_file(str(vocab_path), unk_token=unknown_token)
        except Exception as exc:  # tokenizers raises plain Exception on bad files
            raise VocabularyLoadFailure(
                f"Could not read vocabulary {vocab_path}: {exc}"
            ) from exc
        tokenizer = Tokenizer(model)
        tokenizer.normalizer = BertNormalizer(lowercase=lowercase)
        tokenizer.pre_tokenizer = BertPreTokenizer()
        return cls(tokenizer, unknown_token=unknown_token)

    @property
    def size(self) -> int:
        return self._tokenizer.get_vocab_size()

    def tokenize(self, text: str) -> List[str]:
        return self._tokenizer.encode(text, add_special_tokens=False).tokens

    def id_of(self, token: str) -> int:
        idx = self._tokenizer.token_to_id(token)
        return self.unknown_id if idx is None else idx
