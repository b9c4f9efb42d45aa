from __future__ import annotations
from dataclasses import dataclass
import numpy as np
from .image import LeafImage


@dataclass
class PreprocessedImage:
    """
    Data object produced by the preprocessing step.
    """
    original: LeafImage   # Decoded input, untouched
    segmented: LeafImage  # Foliage-masked copy, same dimensions as original
    tensor: np.ndarray    # Shape (1, 224, 224, 3), float32, values 0-255
