"""
Pipeline engine for the detection overlay.

This module drives the per-cycle processing loop: each inference result is
passed to the annotate stage (boxes) and/or the classify stage (confidence
vector), failures are contained to the cycle that produced them, and
registered callbacks observe the outcome.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import cv2

from algorithms.classification.threshold import NO_CLASS, ThresholdClassifier
from algorithms.projection.projector import create_projector_from_config
from inference.backend import InferenceBackend, InferenceResult
from models.config import Config
from models.detection import Annotation
from models.errors import InvalidInputError
from models.labels import LabelsTable
from placement.raycast import RaycastService
from rendering.base import MarkerFactory
from pipeline.stages.annotate import AnnotateStage
from pipeline.stages.classify import ClassifyStage


@dataclass
class PipelineConfig:
    """
    Configuration for the pipeline engine.

    Attributes:
        stats_log_interval: Seconds between status log messages.
        display: Show the OpenCV preview window.
        frame_delay: Seconds to sleep between cycles (replay pacing).
    """
    stats_log_interval: float = 60.0
    display: bool = False
    frame_delay: float = 0.0


@dataclass
class OverlayStats:
    """Runtime statistics for the pipeline."""
    cycle_count: int = 0
    annotation_count: int = 0
    failed_cycles: int = 0
    last_annotation_count: int = 0
    last_class_index: int = NO_CLASS
    class_hits: Dict[int, int] = field(default_factory=dict)
    start_time: float = field(default_factory=time.time)
    last_stats_log_time: float = field(default_factory=time.time)


@dataclass
class CycleOutcome:
    """What one processing cycle produced."""
    frame_index: int
    annotations: List[Annotation] = field(default_factory=list)
    class_index: Optional[int] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class OverlayEngine:
    """
    Main processing engine over an InferenceBackend.

    This engine:
    - Reads inference results from any backend
    - Projects boxes through the AnnotateStage
    - Classifies confidence vectors through the ClassifyStage
    - Treats a structural failure as "no annotations this cycle" and keeps going

    Example:
        engine = OverlayEngine(ReplayBackend.from_npz(path), annotate, classify, config)
        engine.run()
    """

    def __init__(
        self,
        source: InferenceBackend,
        annotate_stage: Optional[AnnotateStage],
        classify_stage: Optional[ClassifyStage],
        config: PipelineConfig,
    ):
        self.source = source
        self._annotate_stage = annotate_stage
        self._classify_stage = classify_stage
        self.config = config
        self.stats = OverlayStats()
        self._running = False
        self._callbacks: List[Callable[[CycleOutcome], None]] = []

    @property
    def annotate_stage(self) -> Optional[AnnotateStage]:
        return self._annotate_stage

    @property
    def classify_stage(self) -> Optional[ClassifyStage]:
        return self._classify_stage

    def add_callback(self, callback: Callable[[CycleOutcome], None]) -> None:
        """
        Add a callback to be called after each cycle is processed.

        Args:
            callback: Function taking the CycleOutcome.
        """
        self._callbacks.append(callback)

    def run(self) -> OverlayStats:
        """
        Run the processing loop until the backend is exhausted or stop() is called.
        """
        self._running = True
        self.stats = OverlayStats()
        logging.info("Pipeline started")

        try:
            for result in self.source.results():
                if not self._running:
                    break

                outcome = self.process(result)

                for callback in self._callbacks:
                    try:
                        callback(outcome)
                    except Exception as e:
                        logging.warning(f"Callback error: {e}")

                if self.config.display:
                    if not self._handle_display():
                        break

                self._handle_periodic_tasks()

                if self.config.frame_delay > 0:
                    time.sleep(self.config.frame_delay)

        except KeyboardInterrupt:
            logging.info("Pipeline interrupted by user")
        finally:
            self._cleanup()

        return self.stats

    def stop(self) -> None:
        """Signal the pipeline to stop after the current cycle."""
        self._running = False

    def process(self, result: InferenceResult) -> CycleOutcome:
        """
        Process one inference result.

        Structural failures are logged and reported in the outcome; the
        overlay is cleared for the cycle instead of crashing the loop.
        """
        self.stats.cycle_count += 1
        outcome = CycleOutcome(frame_index=result.frame_index)

        if self._annotate_stage is not None and result.has_boxes:
            try:
                outcome.annotations = self._annotate_stage.process(result)
            except InvalidInputError as e:
                logging.error(f"Annotation failed for frame {result.frame_index}: {e}")
                self._annotate_stage.fail()
                outcome.error = str(e)

        if self._classify_stage is not None and result.has_scores:
            try:
                outcome.class_index = self._classify_stage.process(result)
            except InvalidInputError as e:
                logging.error(f"Classification failed for frame {result.frame_index}: {e}")
                outcome.error = str(e)

        self._record(outcome)
        return outcome

    def _record(self, outcome: CycleOutcome) -> None:
        if outcome.failed:
            self.stats.failed_cycles += 1
        self.stats.last_annotation_count = len(outcome.annotations)
        self.stats.annotation_count += len(outcome.annotations)
        if outcome.class_index is not None:
            self.stats.last_class_index = outcome.class_index
            if outcome.class_index != NO_CLASS:
                self.stats.class_hits[outcome.class_index] = (
                    self.stats.class_hits.get(outcome.class_index, 0) + 1
                )

    def _handle_display(self) -> bool:
        """
        Show the marker preview.

        Returns False if user pressed 'q' to quit.
        """
        factory = self._annotate_stage.projector.pool.factory if self._annotate_stage else None
        if factory is None or not hasattr(factory, "render"):
            return True
        cv2.imshow("Detection Overlay", factory.render())
        key = cv2.waitKey(1) & 0xFF
        return key != ord('q')

    def _handle_periodic_tasks(self) -> None:
        now = time.time()
        if now - self.stats.last_stats_log_time >= self.config.stats_log_interval:
            logging.info(
                f"Pipeline stats: cycles={self.stats.cycle_count}, "
                f"annotations={self.stats.annotation_count}, "
                f"failed={self.stats.failed_cycles}"
            )
            self.stats.last_stats_log_time = now

    def _cleanup(self) -> None:
        self._running = False
        if self.config.display:
            cv2.destroyAllWindows()
        elapsed = time.time() - self.stats.start_time
        logging.info(
            f"Pipeline stopped: cycles={self.stats.cycle_count}, "
            f"annotations={self.stats.annotation_count}, "
            f"failed={self.stats.failed_cycles}, elapsed={elapsed:.1f}s"
        )


def create_engine_from_config(
    config: Dict[str, Any],
    source: InferenceBackend,
    labels: Optional[LabelsTable],
    marker_factory: MarkerFactory,
    raycast: Optional[RaycastService] = None,
    display: bool = False,
    on_objects_detected: Optional[Callable[[int], None]] = None,
) -> OverlayEngine:
    """
    Factory function to create an OverlayEngine from a raw config dict.

    Args:
        config: Full application config dict.
        source: Inference backend to read results from.
        labels: Labels table shared by both stages.
        marker_factory: Rendering collaborator for the projector.
        raycast: World placement service; misses everywhere when omitted.
        display: Enable the preview window.
        on_objects_detected: Notification sink for annotation counts.
    """
    cfg = Config.from_dict(config)

    projector = create_projector_from_config(
        cfg.projector,
        labels=labels,
        raycast=raycast,
        marker_factory=marker_factory,
        on_objects_detected=on_objects_detected,
    )
    annotate_stage = AnnotateStage(projector)

    classify_stage = None
    if cfg.classifier is not None:
        classify_stage = ClassifyStage(ThresholdClassifier(cfg.classifier), labels=labels)

    return OverlayEngine(source, annotate_stage, classify_stage, PipelineConfig(display=display))
