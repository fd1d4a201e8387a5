"""
Annotate stage for projecting detections onto the display.

This stage converts inference tensors to RawDetections and hands them to
an AnnotationProjector, which owns the marker pool.
"""

from __future__ import annotations

import logging
from typing import List

from algorithms.projection.projector import AnnotationProjector
from inference.backend import InferenceResult
from models.detection import Annotation, detections_from_tensors
from models.errors import InvalidInputError


class AnnotateStage:
    """
    Pipeline stage producing this cycle's annotations.

    Structural failures (InvalidInputError) propagate to the engine, which
    treats them as "no annotations this cycle".

    Example:
        stage = AnnotateStage(projector)

        # Each cycle:
        annotations = stage.process(result)
    """

    def __init__(self, projector: AnnotationProjector):
        self._projector = projector

    @property
    def projector(self) -> AnnotationProjector:
        return self._projector

    def process(self, result: InferenceResult) -> List[Annotation]:
        """
        Project the boxes of one inference result.

        Raises:
            InvalidInputError: If the box or label tensor is missing or malformed.
        """
        if not result.has_boxes:
            raise InvalidInputError(f"Frame {result.frame_index} carries no box tensors")

        detections = detections_from_tensors(result.boxes, result.label_ids)
        annotations = self._projector.project(detections, image_size=result.image_size)
        logging.debug(
            f"[ANNOTATE] frame={result.frame_index} boxes={len(detections)} "
            f"annotations={len(annotations)}"
        )
        return annotations

    def fail(self) -> None:
        """Reset the overlay after a failed cycle."""
        self._projector.on_detection_error()
