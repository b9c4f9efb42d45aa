# repositories/segmentation_repository.py
import logging
import os

import cv2
import numpy as np
from dotenv import load_dotenv

from ..models.hsv import rgb_to_hsv_pixels

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class HsvThresholdSegmenter:
    """
    Pointwise green-leaf detector on 0-360 / 0-255 / 0-255 HSV.
    Bounds are inclusive on all three channels.
    """

    HUE_MIN, HUE_MAX = 60.0, 180.0
    SAT_MIN = 25.0
    VAL_MIN = 25.0

    def foliage_mask(self, pixels: np.ndarray) -> np.ndarray:
        hsv = rgb_to_hsv_pixels(pixels)
        h, s, v = hsv[:, :, 0], hsv[:, :, 1], hsv[:, :, 2]
        return (
            (h >= self.HUE_MIN) & (h <= self.HUE_MAX)
            & (s >= self.SAT_MIN) & (v >= self.VAL_MIN)
        )


class OpenCvThresholdSegmenter:
    """
    Same contract on OpenCV's HSV scale (hue 0-179) via cv2.inRange.
    """

    LOWER = np.array([30, 40, 40], dtype=np.uint8)
    UPPER = np.array([80, 255, 255], dtype=np.uint8)

    def foliage_mask(self, pixels: np.ndarray) -> np.ndarray:
        rgb = np.ascontiguousarray(pixels[:, :, :3])
        hsv = cv2.cvtColor(rgb, cv2.COLOR_RGB2HSV)
        return cv2.inRange(hsv, self.LOWER, self.UPPER) > 0


class SegmentationRepository:
    """
    One-image foliage mask.

    • Picks the threshold strategy by name ("hsv" or "opencv").
    • Returns a boolean keep/discard mask (H, W); no spatial cleanup.
    """

    STRATEGIES = {
        "hsv": HsvThresholdSegmenter,
        "opencv": OpenCvThresholdSegmenter,
    }

    def __init__(self, strategy: str = None) -> None:
        name = (strategy or os.getenv("SEGMENTATION_STRATEGY", "hsv")).strip().lower()
        if name not in self.STRATEGIES:
            raise ValueError(
                f"Unknown segmentation strategy {name!r}; expected one of {sorted(self.STRATEGIES)}"
            )
        self.strategy = name
        self.segmenter = self.STRATEGIES[name]()
        logger.debug(f"Segmentation strategy: {name}")

    # ---------- public API ----------
    def retrieve_mask(self, pixels: np.ndarray) -> np.ndarray:
        """
        pixels : (H, W, 3|4) uint8 RGB(A)
        Returns bool mask (H, W), True = foliage.
        """
        return self.segmenter.foliage_mask(pixels)
