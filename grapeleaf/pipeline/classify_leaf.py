# pipeline/classify_leaf.py
from typing import Callable, Optional
import logging

from ..models.classification_result import ClassificationResult
from ..models.image import LeafImage
from ..repositories.image_repository import ImageSource
from ..services.image_service import ImageService
from ..services.inference_service import InferenceService
from ..services.result_service import ResultService
from ..services.segmentation_service import SegmentationService
from .preprocess_image import preprocess_image

logger = logging.getLogger(__name__)


def classify_leaf(
    source: ImageSource,
    *,
    inference_service: Optional[InferenceService] = None,
    result_service: ResultService = ResultService(),
    image_service: ImageService = ImageService(),
    segmentation_service: Optional[SegmentationService] = None,
    on_segmented: Optional[Callable[[LeafImage], None]] = None,
) -> ClassificationResult:
    """
    Single entry point: image source → ClassificationResult.

    Steps run strictly in order (preprocess → inference → resolve). Any
    stage error propagates unchanged; there is no retry and no partial result.
    *on_segmented* receives the masked image before inference starts.
    """
    inference_service = inference_service or InferenceService()

    prepared = preprocess_image(
        source,
        image_service=image_service,
        segmentation_service=segmentation_service,
    )
    if on_segmented is not None:
        on_segmented(prepared.segmented)

    scores = inference_service.run(prepared.tensor)
    result = result_service.resolve(scores)

    result.segmented = prepared.segmented
    result.original = prepared.original
    logger.info(f"Classified leaf as {result.label!r} (index {result.index})")
    return result


# Short alias matching the public name of the orchestrator
classify = classify_leaf
