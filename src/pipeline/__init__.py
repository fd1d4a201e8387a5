"""
Pipeline module for the detection overlay.

The pipeline orchestrates the per-cycle flow:
- Inference results from a backend
- Annotation of detection boxes (AnnotateStage)
- Threshold classification of confidence vectors (ClassifyStage)
"""

from .engine import (
    CycleOutcome,
    OverlayEngine,
    OverlayStats,
    PipelineConfig,
    create_engine_from_config,
)
from .stages.annotate import AnnotateStage
from .stages.classify import ClassifyStage

__all__ = [
    "OverlayEngine",
    "OverlayStats",
    "CycleOutcome",
    "PipelineConfig",
    "create_engine_from_config",
    "AnnotateStage",
    "ClassifyStage",
]
