from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
from .disease_record import DiseaseRecord
from .image import LeafImage


@dataclass
class ClassificationResult:
    """
    Terminal output of the pipeline.
    Carries the segmented image as well, because the display layer shows it next to the label.
    """
    label: str
    record: DiseaseRecord
    index: int                     # Winning position in the score vector
    scores: Tuple[float, ...]      # Raw model scores, ordered like CLASS_NAMES
    segmented: LeafImage | None = None
    original: LeafImage | None = None
