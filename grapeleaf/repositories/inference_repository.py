from __future__ import annotations
from typing import Protocol
import numpy as np

from ..models.classifier_model import ClassifierModel


class ScoringModel(Protocol):
    def predict(self, tensor: np.ndarray) -> np.ndarray: ...


class InferenceRepository:
    """
    Thin wrapper around the classifier that gives low-level access to raw scores.
    """

    def __init__(self, model: ScoringModel | None = None):
        self._model = model

    @property
    def model(self) -> ScoringModel:
        # Cached per path inside ClassifierModel; first access loads the artifact
        if self._model is None:
            self._model = ClassifierModel()
        return self._model

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    def infer_scores(self, tensor: np.ndarray) -> np.ndarray:
        return np.asarray(self.model.predict(tensor), dtype=np.float64).reshape(-1)
