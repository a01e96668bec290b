# bertrank/utils/config.py
from __future__ import annotations

import copy
from pathlib import Path

import yaml

# this file lives at .../bertrank/bertrank/utils/config.py
# parents[0] = utils, [1] = bertrank, [2] = project root
DEFAULT_CONFIG = Path(__file__).resolve().parents[2] / "config.yaml"

DEFAULTS = {
    "paths": {
        "embeddings": "/tmp/embeddings",
    },
    "model": {
        "family": "mean",
        "model_file": "model.onnx",
        "vocab_file": "vocab.txt",
        "max_seq_length": 512,
        "unknown_token": "[UNK]",
    },
    "text": {
        "lowercase": True,
        "preview_chars": 200,
        "sample_size": 10,
    },
    "logging": {
        "level": "WARNING",
    },
}


def _merge(base: dict, override: dict) -> dict:
    """Recursively overlay `override` on top of `base` (returns a new dict)."""
    out = copy.deepcopy(base)
    for key, val in (override or {}).items():
        if isinstance(val, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], val)
        else:
            out[key] = val
    return out


def load_config(path: str | Path | None = None) -> dict:
    """
    Load config.yaml on top of DEFAULTS.
    An explicit path must exist; the project-root default is optional.
    """
    if path:
        cfg_path = Path(path)
        if not cfg_path.exists():
            raise FileNotFoundError(f"Config not found: {cfg_path}")
    else:
        cfg_path = DEFAULT_CONFIG
        if not cfg_path.exists():
            return copy.deepcopy(DEFAULTS)
    with cfg_path.open("r", encoding="utf-8") as f:
        return _merge(DEFAULTS, yaml.safe_load(f) or {})
