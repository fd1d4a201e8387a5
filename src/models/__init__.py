"""
Typed models for the detection overlay.

Raw inference output, per-frame annotations, colors, labels and config.
Use the adapter functions to convert from tensors and config dicts.
"""

from .errors import InvalidInputError
from .detection import (
    Annotation,
    RawDetection,
    detections_from_tensors,
    detections_to_numpy,
)
from .color import RGBA, ClassColorEntry, ClassColorTable, normalize_class_key
from .labels import LabelsTable
from .config import Config, ProjectorConfig, ClassifierConfig

__all__ = [
    # Errors
    "InvalidInputError",
    # Detection
    "RawDetection",
    "Annotation",
    "detections_from_tensors",
    "detections_to_numpy",
    # Colors
    "RGBA",
    "ClassColorEntry",
    "ClassColorTable",
    "normalize_class_key",
    # Labels
    "LabelsTable",
    # Config
    "Config",
    "ProjectorConfig",
    "ClassifierConfig",
]
