# services/segmentation_service.py
import numpy as np
from ..models.image import LeafImage
from ..repositories.segmentation_repository import SegmentationRepository


class SegmentationService:
    """
    Foliage masking at the business-logic layer.
    No cache: every call allocates its own output buffer.
    """

    def __init__(self, strategy: str = None) -> None:
        self.repo = SegmentationRepository(strategy)

    def foliage_mask(self, img: LeafImage) -> np.ndarray:
        return self.repo.retrieve_mask(img.pixels)

    def mask_foliage(self, img: LeafImage) -> LeafImage:
        """
        Return a new LeafImage where non-foliage pixels are black.
        Alpha, when present, is copied unchanged.
        """
        keep = self.foliage_mask(img)
        pixels = img.pixels.copy()
        pixels[~keep, :3] = 0
        return LeafImage(pixels=pixels, path=img.path)

