"""
Threshold classifier.

Picks the highest-scoring class index from a confidence vector and rejects
it when its score does not exceed the configured threshold.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from models.config import ClassifierConfig
from models.errors import InvalidInputError


# Returned when no class met the threshold
NO_CLASS = -1


def classify(scores: Sequence[float], threshold: float) -> int:
    """
    Select the winning class index.

    Ties resolve to the lowest index. The threshold comparison is strict:
    a score equal to the threshold is rejected.

    Args:
        scores: Non-empty confidence vector.
        threshold: Minimum score (exclusive) for a class to be accepted.

    Returns:
        The winning index, or NO_CLASS (-1) if it did not exceed the threshold.

    Raises:
        InvalidInputError: If scores is missing or empty.
    """
    if scores is None or len(scores) == 0:
        raise InvalidInputError("Confidence vector is empty")

    max_index = 0
    for i in range(1, len(scores)):
        if scores[i] > scores[max_index]:
            max_index = i

    logging.debug(f"Max index: {max_index} value: {scores[max_index]}")
    if scores[max_index] > threshold:
        return max_index
    return NO_CLASS


def softmax(logits: Sequence[float]) -> np.ndarray:
    """Numerically stable softmax over a 1-D vector."""
    x = np.asarray(logits, dtype=np.float64).reshape(-1)
    if x.size == 0:
        raise InvalidInputError("Logit vector is empty")
    e = np.exp(x - np.max(x))
    return e / e.sum()


class ThresholdClassifier:
    """
    Stateless classifier bound to a configured threshold.

    Example:
        classifier = ThresholdClassifier(ClassifierConfig(threshold=0.5))
        class_index = classifier.classify(model_output)
    """

    def __init__(self, config: ClassifierConfig):
        self._config = config

    @property
    def threshold(self) -> float:
        return self._config.threshold

    def classify(self, scores: Sequence[float]) -> int:
        """
        Classify one confidence vector.

        Raw logits are softmax-normalized first when apply_softmax is set.
        """
        if self._config.apply_softmax:
            if scores is None or len(scores) == 0:
                raise InvalidInputError("Confidence vector is empty")
            scores = softmax(scores).tolist()
        return classify(scores, self._config.threshold)
