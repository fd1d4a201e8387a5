"""
Pipeline stages for the detection overlay.

Each stage handles a specific part of the processing cycle:
- annotate: project detection boxes to pooled markers
- classify: pick one class from a confidence vector
"""

from .annotate import AnnotateStage
from .classify import ClassifyStage

__all__ = ["AnnotateStage", "ClassifyStage"]
