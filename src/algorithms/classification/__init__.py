"""
Classification algorithms for single-vector model output.

Available classifiers:
- ThresholdClassifier: highest-scoring class, rejected below a threshold
"""

from .threshold import NO_CLASS, ThresholdClassifier, classify, softmax

__all__ = [
    "NO_CLASS",
    "ThresholdClassifier",
    "classify",
    "softmax",
]
