from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple


@dataclass(frozen=True)
class DiseaseRecord:
    """Static information shown next to a predicted label."""
    label: str
    description: str
    remedy: str


# Positional contract with the model output: index i of the score vector
# belongs to CLASS_NAMES[i].
CLASS_NAMES: Tuple[str, ...] = ("Black Rot", "Black Measles", "Leaf Blight", "Healthy")

DISEASE_RECORDS: Mapping[str, DiseaseRecord] = MappingProxyType({
    "Black Rot": DiseaseRecord(
        label="Black Rot",
        description="Fungal disease that causes black spots on leaves and fruit.",
        remedy="Prune infected leaves and apply a fungicide as recommended.",
    ),
    "Black Measles": DiseaseRecord(
        label="Black Measles",
        description="Disease that causes black spots and tissue necrosis.",
        remedy="Keep the vineyard clean and control humidity.",
    ),
    "Leaf Blight": DiseaseRecord(
        label="Leaf Blight",
        description="Infection that makes leaves dry out and drop.",
        remedy="Avoid excess moisture and spray a preventive fungicide.",
    ),
    "Healthy": DiseaseRecord(
        label="Healthy",
        description="The leaf is healthy with no signs of disease.",
        remedy="Keep up regular care to prevent disease.",
    ),
})
