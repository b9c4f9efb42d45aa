# pipeline/preprocess_image.py
import logging

from ..models.preprocessed_image import PreprocessedImage
from ..repositories.image_repository import ImageSource
from ..services.image_service import ImageService
from ..services.segmentation_service import SegmentationService

logger = logging.getLogger(__name__)


def preprocess_image(
    source: ImageSource,
    *,
    image_service: ImageService = ImageService(),
    segmentation_service: SegmentationService = None,
) -> PreprocessedImage:
    """
    Decode *source*, black out non-foliage pixels, and build the model input.

        • decode → RGB(A) LeafImage           (DecodeError / ContextError)
        • foliage mask on a copy              (same dimensions, alpha kept)
        • nearest-neighbour 224×224, float32, batch axis in front

    The caller's data is never modified.
    """
    segmentation_service = segmentation_service or SegmentationService()

    original = image_service.load(source)
    segmented = segmentation_service.mask_foliage(original)
    tensor = image_service.to_tensor(segmented)

    logger.debug(
        f"Preprocessed {original.width}x{original.height} image → tensor {tensor.shape}"
    )
    return PreprocessedImage(original=original, segmented=segmented, tensor=tensor)
