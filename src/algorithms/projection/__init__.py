"""
Projection of detections into display and world space.

- geometry: pure coordinate remapping helpers
- pool: MarkerPool of reusable marker slots
- projector: AnnotationProjector tying labels, colors, raycast and pool together
"""

from .pool import MarkerPool, MarkerSlot
from .projector import (
    DEFAULT_MAX_ANNOTATIONS,
    AnnotationProjector,
    create_projector_from_config,
    format_label,
    normalize_class_name,
)

__all__ = [
    "MarkerPool",
    "MarkerSlot",
    "AnnotationProjector",
    "DEFAULT_MAX_ANNOTATIONS",
    "create_projector_from_config",
    "format_label",
    "normalize_class_name",
]
