from __future__ import annotations
import base64
import numpy as np

from ..models.image import LeafImage
from ..models.classifier_model import INPUT_SIZE
from ..repositories.image_repository import ImageRepository, ImageSource


class ImageService:
    """I/O and tensor helpers.  No segmentation logic."""

    def __init__(self):
        self.image_repository = ImageRepository()

    def load(self, source: ImageSource) -> LeafImage:
        """Decode bytes, a path or a binary stream into a LeafImage."""
        return self.image_repository.load(source)

    # ─── ML-friendly utilities ────────────────────────────────────────
    @staticmethod
    def resize_nearest(pixels: np.ndarray, size: int = INPUT_SIZE) -> np.ndarray:
        """
        Nearest-neighbour resize to (size, size).

        Source index on each axis is floor(dst * in / out): corners not
        aligned, no half-pixel offset. Integer arithmetic keeps it exact.
        """
        h, w = pixels.shape[:2]
        rows = (np.arange(size) * h) // size
        cols = (np.arange(size) * w) // size
        return pixels[rows[:, None], cols[None, :]]

    def to_tensor(self, img: LeafImage, size: int = INPUT_SIZE) -> np.ndarray:
        """
        Convert LeafImage.pixels → (1, size, size, 3) float32, values kept in 0-255.
        Alpha is dropped; no mean/std normalisation.
        """
        resized = self.resize_nearest(img.rgb, size)
        return np.expand_dims(resized.astype(np.float32), axis=0)

    def to_data_url(self, img: LeafImage) -> str:
        """PNG data URL for JSON responses."""
        png = self.image_repository.encode_png(img)
        return "data:image/png;base64," + base64.b64encode(png).decode("utf-8")
