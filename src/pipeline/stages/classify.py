"""
Classify stage for single-vector model output.
"""

from __future__ import annotations

import logging
from typing import Optional

from algorithms.classification.threshold import NO_CLASS, ThresholdClassifier
from inference.backend import InferenceResult
from models.labels import LabelsTable


class ClassifyStage:
    """
    Pipeline stage selecting one class per cycle from a confidence vector.

    Example:
        stage = ClassifyStage(ThresholdClassifier(ClassifierConfig(threshold=0.5)))
        class_index = stage.process(result)
    """

    def __init__(self, classifier: ThresholdClassifier, labels: Optional[LabelsTable] = None):
        self._classifier = classifier
        self._labels = labels

    @property
    def classifier(self) -> ThresholdClassifier:
        return self._classifier

    def process(self, result: InferenceResult) -> int:
        """
        Returns:
            Winning class index, or NO_CLASS when nothing met the threshold.

        Raises:
            InvalidInputError: If the confidence vector is missing or empty.
        """
        class_index = self._classifier.classify(result.scores)
        if class_index != NO_CLASS:
            logging.debug(f"[CLASSIFY] frame={result.frame_index} class={self.describe(class_index)}")
        return class_index

    def describe(self, class_index: int) -> str:
        """Human-readable name for a class index."""
        if class_index == NO_CLASS:
            return "none"
        if self._labels is not None and self._labels.contains(class_index):
            return self._labels[class_index]
        return str(class_index)
