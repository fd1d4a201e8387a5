"""
Detection models for raw inference output and per-frame annotations.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidInputError

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class RawDetection:
    """
    A single detection as produced by the inference engine.

    Attributes:
        position: Box center (x, y) in inference-image pixel space.
        size: Box (width, height) in the same space.
        class_id: Index into the labels table.
    """
    position: Vec2
    size: Vec2
    class_id: int

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (*self.position, *self.size))

    @classmethod
    def from_numpy_row(cls, row: np.ndarray, class_id: int) -> "RawDetection":
        """
        Adapter: Convert a box row [cx, cy, w, h] plus its label id.
        """
        return cls(
            position=(float(row[0]), float(row[1])),
            size=(float(row[2]), float(row[3])),
            class_id=int(class_id),
        )

    def to_numpy(self) -> np.ndarray:
        """Convert to numpy array [cx, cy, w, h]."""
        return np.array([*self.position, *self.size], dtype=np.float32)


@dataclass(frozen=True)
class Annotation:
    """
    A detection remapped to display space, recomputed every frame.

    Attributes:
        screen_center: Center relative to the display center, display units.
        screen_size: (width, height) in display units.
        label: Text shown on the marker.
        class_name: Normalized class name (trimmed, spaces as underscores).
        world_position: Optional 3D anchor from the raycast service.
    """
    screen_center: Vec2
    screen_size: Vec2
    label: str
    class_name: str
    world_position: Optional[Vec3] = None

    @property
    def has_world_position(self) -> bool:
        return self.world_position is not None

    @property
    def depth(self) -> float:
        """Marker depth: world z when anchored, otherwise 0."""
        return self.world_position[2] if self.world_position is not None else 0.0


def detections_from_tensors(
    boxes: Optional[np.ndarray],
    label_ids: Optional[np.ndarray],
) -> List[RawDetection]:
    """
    Adapter: Convert inference output tensors to RawDetection objects.

    Args:
        boxes: Array of shape (N, 4) with [center_x, center_y, width, height].
        label_ids: Array of shape (N,) with integer class ids.

    Raises:
        InvalidInputError: If the tensors are missing or their shapes disagree.
    """
    if boxes is None or label_ids is None:
        raise InvalidInputError("Box and label tensors are both required")

    boxes = np.asarray(boxes, dtype=np.float32)
    label_ids = np.asarray(label_ids).reshape(-1)
    if boxes.size == 0 and label_ids.size == 0:
        return []
    if boxes.ndim != 2 or boxes.shape[1] < 4:
        raise InvalidInputError(f"Box tensor must be shaped [count, 4], got {boxes.shape}")
    if boxes.shape[0] != label_ids.shape[0]:
        raise InvalidInputError(
            f"Box count {boxes.shape[0]} does not match label count {label_ids.shape[0]}"
        )
    return [RawDetection.from_numpy_row(row, k) for row, k in zip(boxes, label_ids)]


def detections_to_numpy(detections: Sequence[RawDetection]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Adapter: Convert RawDetection objects back to (boxes, label_ids) arrays.
    """
    if not detections:
        return np.zeros((0, 4), dtype=np.float32), np.zeros((0,), dtype=np.int32)
    boxes = np.stack([d.to_numpy() for d in detections])
    labels = np.array([d.class_id for d in detections], dtype=np.int32)
    return boxes, labels
