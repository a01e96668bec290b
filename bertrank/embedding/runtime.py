# bertrank/embedding/runtime.py
# Thin adapter over onnxruntime: named int64 tensors in, first output tensor out.

from __future__ import annotations
from pathlib import Path
from typing import Dict, List

import numpy as np
import onnxruntime as ort

from ..errors import ModelLoadFailure


class OnnxRuntime:
    """
    Frozen ONNX graph on the CPU execution provider.
    Inputs are single-example 1-D sequences; a batch axis of size 1 is added
    before the forward pass.
    """
    def __init__(self, model_path: str | Path, providers: List[str] | None = None):
        self.model_path = Path(model_path)
        if not self.model_path.is_file():
            raise ModelLoadFailure(f"Model file not found: {self.model_path}")
        try:
            self.session = ort.InferenceSession(
                str(self.model_path),
                providers=providers or ["CPUExecutionProvider"],
            )
        except Exception as exc:  # onnxruntime raises its own pybind error types
            raise ModelLoadFailure(
                f"Could not load ONNX model {self.model_path}: {exc}"
            ) from exc

    @property
    def input_names(self) -> List[str]:
        return [i.name for i in self.session.get_inputs()]

    def run(self, inputs: Dict[str, np.ndarray]) -> np.ndarray:
        feed = {name: np.asarray(t, dtype=np.int64)[np.newaxis, :] for name, t in inputs.items()}
        outputs = self.session.run(None, feed)
        # first output is the last hidden state: [batch, seq_length, hidden_size]
        return outputs[0]
