from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass
class LeafImage:
    """
    Simple data object: RGB or RGBA pixels (+ optional source path for bookkeeping).
    The pipeline never writes into `pixels` in place; every stage returns a new LeafImage.
    """
    pixels: np.ndarray # Shape (H, W, 3|4), dtype uint8, RGB(A) order, row-major.
    path: Path | None = None # Source of the image.

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def has_alpha(self) -> bool:
        return self.pixels.shape[2] == 4

    @property
    def rgb(self) -> np.ndarray:
        """RGB view of the pixels (alpha dropped)."""
        return self.pixels[:, :, :3]
