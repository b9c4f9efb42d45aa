from __future__ import annotations
from typing import Mapping, Sequence
import math

from ..exceptions import UnknownClassError
from ..models.classification_result import ClassificationResult
from ..models.disease_record import CLASS_NAMES, DISEASE_RECORDS, DiseaseRecord


class ResultService:
    """
    Turns a score vector into a label and its static disease record.
    """

    def __init__(
        self,
        class_names: Sequence[str] = CLASS_NAMES,
        records: Mapping[str, DiseaseRecord] = DISEASE_RECORDS,
    ):
        self.class_names = tuple(class_names)
        self.records = records

    @staticmethod
    def first_max_index(scores: Sequence[float]) -> int:
        """
        Index of the first occurrence of the maximum, scanning upward.
        Returns -1 when there is no comparable maximum (empty or NaN scores).
        """
        values = [float(x) for x in scores]
        if not values or any(math.isnan(x) for x in values):
            return -1
        best = max(values)
        return values.index(best)

    def get_record(self, index: int) -> DiseaseRecord:
        if not 0 <= index < len(self.class_names):
            raise UnknownClassError(index)
        record = self.records.get(self.class_names[index])
        if record is None:
            raise UnknownClassError(index)
        return record

    def resolve(self, scores: Sequence[float]) -> ClassificationResult:
        index = self.first_max_index(scores)
        record = self.get_record(index)
        return ClassificationResult(
            label=record.label,
            record=record,
            index=index,
            scores=tuple(float(x) for x in scores),
        )
