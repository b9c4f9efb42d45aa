from __future__ import annotations
import logging
import numpy as np

from ..exceptions import ModelLoadError
from ..models.classifier_model import INPUT_SHAPE
from ..models.disease_record import CLASS_NAMES
from ..repositories.inference_repository import InferenceRepository, ScoringModel

logger = logging.getLogger(__name__)


class InferenceService:
    """
    Runs the pretrained classifier once per call.
    Holds no per-call state, so one instance can serve concurrent requests.
    """

    def __init__(self, model: ScoringModel | None = None):
        self.repository = InferenceRepository(model)

    def warm_up(self) -> None:
        """Load the model now instead of on the first request."""
        _ = self.repository.model

    @property
    def is_ready(self) -> bool:
        return self.repository.is_loaded

    def run(self, tensor: np.ndarray) -> np.ndarray:
        """
        Args:
            tensor (np.ndarray): (1, 224, 224, 3) float input.

        Returns:
            np.ndarray: 4 scores, index-aligned to CLASS_NAMES.
        """
        if tuple(tensor.shape) != INPUT_SHAPE:
            raise ValueError(f"Expected tensor of shape {INPUT_SHAPE}, got {tuple(tensor.shape)}")

        scores = self.repository.infer_scores(tensor)
        if scores.size != len(CLASS_NAMES):
            raise ModelLoadError(
                f"Model returned {scores.size} scores, expected {len(CLASS_NAMES)}"
            )
        logger.debug(f"Scores: {np.round(scores, 4).tolist()}")
        return scores
