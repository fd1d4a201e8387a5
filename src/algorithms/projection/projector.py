"""
Annotation projector.

Turns raw detections (inference-image space) into display-space annotations,
anchors each one in the world through a raycast service, and keeps a pool of
reusable markers in sync with the current frame.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

from models.color import ClassColorTable
from models.detection import Annotation, RawDetection
from models.errors import InvalidInputError
from models.labels import LabelsTable
from placement.raycast import AsyncRaycastService, NoRaycast, RaycastService
from rendering.base import MarkerFactory
from .geometry import (
    Vec2,
    Vec3,
    compute_scale,
    facing_rotation,
    marker_position,
    percentage_to_pixel,
    scale_size,
    to_percentage,
    to_screen,
    validate_size,
)
from .pool import MarkerPool


DEFAULT_MAX_ANNOTATIONS = 200

LabelsSource = Union[LabelsTable, str, Sequence[str]]


def normalize_class_name(label: str) -> str:
    """Stored class name: trimmed, inner spaces replaced by underscores."""
    return label.strip().replace(" ", "_")


def format_label(class_name: str) -> str:
    return f"Class: {class_name}"


@dataclass(frozen=True)
class _Pending:
    """A validated detection waiting for its raycast result."""
    screen_center: Vec2
    screen_size: Vec2
    class_name: str
    pixel: Tuple[int, int]


class AnnotationProjector:
    """
    Projects detections to annotations and pooled markers.

    One instance owns one marker pool. Calls are expected to be serialized
    (once per processing cycle); each call supersedes the previous frame.

    Example:
        projector = AnnotationProjector(
            labels=LabelsTable.from_text(text),
            color_table=ClassColorTable.from_config(cfg["class_colors"]),
            raycast=NoRaycast(),
            marker_factory=RecordingMarkerFactory(),
            camera_resolution=(1280, 960),
            display_size=(640, 640),
        )
        annotations = projector.project(detections, image_size=(640, 640))
    """

    def __init__(
        self,
        labels: Optional[LabelsSource],
        color_table: ClassColorTable,
        raycast: Optional[RaycastService],
        marker_factory: MarkerFactory,
        camera_resolution: Sequence[int],
        display_size: Optional[Vec2] = None,
        max_annotations: int = DEFAULT_MAX_ANNOTATIONS,
        on_objects_detected: Optional[Callable[[int], None]] = None,
        viewer_position: Optional[Callable[[], Optional[Vec3]]] = None,
        async_raycast: Optional[AsyncRaycastService] = None,
    ):
        """
        Initialize the projector.

        Args:
            labels: Labels table, raw labels text or a sequence of names.
                May be None until set_labels() is called.
            color_table: Class-to-color lookup with its default color.
            raycast: Synchronous raycast service used by project().
            marker_factory: Rendering collaborator for pooled markers.
            camera_resolution: Camera intrinsic resolution (width, height).
            display_size: Default display size for project().
            max_annotations: Cap on detections processed per call.
            on_objects_detected: Notification sink for the annotation count.
            viewer_position: Returns the captured camera position, used to
                orient markers toward the viewer.
            async_raycast: Coroutine raycast service used by project_async().
        """
        if max_annotations < 1:
            raise ValueError(f"max_annotations must be >= 1, got {max_annotations}")
        self._labels: Optional[LabelsTable] = (
            LabelsTable.coerce(labels) if labels is not None else None
        )
        self._colors = color_table
        self._raycast = raycast if raycast is not None else NoRaycast()
        self._async_raycast = async_raycast
        self._pool = MarkerPool(marker_factory)
        self._camera_resolution = tuple(int(v) for v in camera_resolution)
        self._display_size = display_size
        self._max_annotations = max_annotations
        self._on_objects_detected = on_objects_detected
        self._viewer_position = viewer_position
        self._annotations: List[Annotation] = []

    @property
    def pool(self) -> MarkerPool:
        return self._pool

    @property
    def labels(self) -> Optional[LabelsTable]:
        return self._labels

    @property
    def max_annotations(self) -> int:
        return self._max_annotations

    @property
    def annotations(self) -> List[Annotation]:
        """Annotations of the most recent call (a copy)."""
        return list(self._annotations)

    def set_labels(self, labels: LabelsSource) -> None:
        """Replace the labels table."""
        self._labels = LabelsTable.coerce(labels)
        logging.info(f"Labels loaded: {len(self._labels)} classes")

    def clear(self) -> None:
        """Hide every marker and drop the current annotations (no notification)."""
        self._pool.release_from(0)
        self._annotations = []

    def on_detection_error(self) -> None:
        """Host-side inference failure: clear the overlay and report zero objects."""
        self.clear()
        self._notify(0)

    def project(
        self,
        detections: Sequence[RawDetection],
        image_size: Vec2,
        display_size: Optional[Vec2] = None,
    ) -> List[Annotation]:
        """
        Project one frame of detections.

        Args:
            detections: Raw detections in input order.
            image_size: Inference image (width, height).
            display_size: Display (width, height); defaults to the configured one.

        Returns:
            The new annotation list, in input order.

        Raises:
            InvalidInputError: On missing labels or malformed geometry. The
                previous frame's markers are left untouched.
        """
        pending, processed = self._prepare(detections, image_size, display_size)
        worlds = [self._cast(p.pixel) for p in pending]
        return self._commit(pending, worlds, processed)

    async def project_async(
        self,
        detections: Sequence[RawDetection],
        image_size: Vec2,
        display_size: Optional[Vec2] = None,
    ) -> List[Annotation]:
        """
        Same as project(), awaiting an asynchronous raycast service.

        Raycasts are awaited one detection at a time in input order. Falls back
        to the synchronous service when no async one is configured.
        """
        pending, processed = self._prepare(detections, image_size, display_size)
        worlds: List[Optional[Vec3]] = []
        for p in pending:
            if self._async_raycast is not None:
                worlds.append(await self._cast_async(p.pixel))
            else:
                worlds.append(self._cast(p.pixel))
        return self._commit(pending, worlds, processed)

    def _cast(self, pixel: Tuple[int, int]) -> Optional[Vec3]:
        """Raycast one pixel; a failing service counts as a miss."""
        try:
            return self._raycast.cast(pixel)
        except Exception as e:
            logging.warning(f"Raycast failed at pixel {pixel}: {e}")
            return None

    async def _cast_async(self, pixel: Tuple[int, int]) -> Optional[Vec3]:
        try:
            return await self._async_raycast.cast(pixel)
        except Exception as e:
            logging.warning(f"Async raycast failed at pixel {pixel}: {e}")
            return None

    def _prepare(
        self,
        detections: Sequence[RawDetection],
        image_size: Vec2,
        display_size: Optional[Vec2],
    ) -> Tuple[List[_Pending], int]:
        """
        Validate the call and compute everything but world positions.

        Returns:
            The pending annotations and the processed (capped) detection count.
        """
        if self._labels is None:
            raise InvalidInputError("Labels table is not set")
        if detections is None:
            raise InvalidInputError("Detections are missing")

        image_w, image_h = validate_size("image_size", image_size)
        disp = validate_size(
            "display_size", display_size if display_size is not None else self._display_size
        )
        scale = compute_scale((image_w, image_h), disp)

        detections = list(detections)
        capped = detections[: self._max_annotations]
        for n, det in enumerate(capped):
            if not det.is_finite:
                raise InvalidInputError(f"Detection {n} has non-finite geometry: {det}")
        if len(detections) > self._max_annotations:
            logging.debug(
                f"Dropping {len(detections) - self._max_annotations} detections over the cap"
            )

        pending: List[_Pending] = []
        for n, det in enumerate(capped):
            screen_center = to_screen(det.position, scale, disp)
            per = to_percentage(screen_center, disp)

            if not self._labels.contains(det.class_id):
                logging.warning(f"Invalid label ID: {det.class_id}, skipping box {n}")
                continue

            class_name = normalize_class_name(self._labels[det.class_id])
            logging.debug(f"Drawing box {n}: ClassName = '{class_name}'")
            pending.append(
                _Pending(
                    screen_center=screen_center,
                    screen_size=scale_size(det.size, scale),
                    class_name=class_name,
                    pixel=percentage_to_pixel(per, self._camera_resolution),
                )
            )
        return pending, len(capped)

    def _commit(
        self,
        pending: List[_Pending],
        worlds: List[Optional[Vec3]],
        processed: int,
    ) -> List[Annotation]:
        """Build annotations, update pooled markers and notify the processed count."""
        viewer = self._viewer_position() if self._viewer_position is not None else None
        annotations: List[Annotation] = []

        for p, world in zip(pending, worlds):
            annotation = Annotation(
                screen_center=p.screen_center,
                screen_size=p.screen_size,
                label=format_label(p.class_name),
                class_name=p.class_name,
                world_position=world,
            )
            self._draw(annotation, len(annotations), viewer)
            annotations.append(annotation)

        released = self._pool.release_from(len(annotations))
        if released:
            logging.debug(f"Deactivated {released} unused markers")

        self._annotations = annotations
        self._notify(processed)
        return list(annotations)

    def _draw(self, annotation: Annotation, index: int, viewer: Optional[Vec3]) -> None:
        color = self._colors.resolve(annotation.class_name)
        slot = self._pool.acquire(index, color)
        factory = self._pool.factory

        position = marker_position(annotation.screen_center, annotation.world_position)
        rotation = facing_rotation(annotation.world_position, viewer)
        factory.set_transform(slot.handle, position, rotation, annotation.screen_size)
        factory.set_label_text(slot.handle, annotation.label, color)

    def _notify(self, count: int) -> None:
        if self._on_objects_detected is not None:
            self._on_objects_detected(count)


def create_projector_from_config(
    projector_config,
    labels: Optional[LabelsSource],
    raycast: Optional[RaycastService],
    marker_factory: MarkerFactory,
    on_objects_detected: Optional[Callable[[int], None]] = None,
    viewer_position: Optional[Callable[[], Optional[Vec3]]] = None,
) -> AnnotationProjector:
    """
    Factory function to create an AnnotationProjector from a ProjectorConfig.
    """
    color_table = projector_config.color_table()
    color_table.log_entries()
    return AnnotationProjector(
        labels=labels,
        color_table=color_table,
        raycast=raycast,
        marker_factory=marker_factory,
        camera_resolution=projector_config.camera_resolution,
        display_size=tuple(projector_config.display_size),
        max_annotations=projector_config.max_annotations,
        on_objects_detected=on_objects_detected,
        viewer_position=viewer_position,
    )
