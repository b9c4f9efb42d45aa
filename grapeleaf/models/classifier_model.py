# models/classifier_model.py
"""
Process-wide wrapper around the pretrained grape leaf classifier.

• Loads the TorchScript artifact once per path per Python process.
• Exposes .predict(tensor)  →  float scores (4,), ordered like CLASS_NAMES.
"""
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from pathlib import Path
from typing import Dict
import logging
import os
import threading

import numpy as np
import torch
from dotenv import load_dotenv

from ..exceptions import ModelLoadError
from .disease_record import CLASS_NAMES

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

INPUT_SIZE = 224
INPUT_SHAPE = (1, INPUT_SIZE, INPUT_SIZE, 3)
DEFAULT_MODEL_PATH = "models/grape_leaf_classifier.pt"


class ClassifierModel:
    """
    Cached wrapper around a frozen TorchScript classifier.
    • One instance per resolved artifact path (failed loads are not cached)
    • predict() keeps no state between calls, so concurrent calls are fine
    """

    _instances: Dict[str, "ClassifierModel"] = {}
    _lock = threading.RLock()

    # ───────────────────────── cached ctor
    def __new__(cls, model_path: str | Path | None = None, load_timeout: float | None = None):
        if model_path is None:
            model_path = os.getenv("MODEL_PATH", DEFAULT_MODEL_PATH)
        if load_timeout is None:
            load_timeout = float(os.getenv("MODEL_LOAD_TIMEOUT_S", "60"))
        key = str(Path(model_path).resolve())

        with cls._lock:
            instance = cls._instances.get(key)
            if instance is None:
                instance = super().__new__(cls)
                instance._init(Path(key), load_timeout)
                cls._instances[key] = instance
            return instance

    # ───────────────────────── actual init
    def _init(self, path: Path, load_timeout: float) -> None:
        if not path.is_file():
            raise ModelLoadError(f"Model artifact not found: {path}")

        logger.info(f"Loading classifier from {path} (timeout {load_timeout:.0f}s)")
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="model-load")
        try:
            future = pool.submit(torch.jit.load, str(path), map_location="cpu")
            module = future.result(timeout=load_timeout)
        except FutureTimeout as err:
            raise ModelLoadError(f"Loading {path} timed out after {load_timeout}s") from err
        except (RuntimeError, ValueError, OSError) as err:
            raise ModelLoadError(f"Could not load model {path}: {err}") from err
        finally:
            # never block on a hung loader thread
            pool.shutdown(wait=False)

        self.path = path
        self.module = module.eval()

        # Dry run: the artifact must accept the fixed input and emit one score per class
        try:
            scores = self.predict(np.zeros(INPUT_SHAPE, dtype=np.float32))
        except (RuntimeError, TypeError) as err:
            raise ModelLoadError(f"Model {path} is incompatible with input {INPUT_SHAPE}: {err}") from err
        if scores.size != len(CLASS_NAMES):
            raise ModelLoadError(
                f"Model {path} returns {scores.size} scores, expected {len(CLASS_NAMES)}"
            )
        logger.info(f"Classifier ready: {path.name}")

    # ───────────────────────── public API
    @torch.inference_mode()
    def predict(self, tensor: np.ndarray) -> np.ndarray:
        """
        tensor : (1,224,224,3) float32, values 0-255
        Returns a flat float64 score vector.
        """
        x = torch.from_numpy(np.ascontiguousarray(tensor, dtype=np.float32))
        out = self.module(x)
        if isinstance(out, (tuple, list)):
            out = out[0]
        if not isinstance(out, torch.Tensor):
            raise TypeError(f"Model output must be a tensor, got {type(out).__name__}")
        return out.detach().cpu().numpy().astype(np.float64).reshape(-1)
