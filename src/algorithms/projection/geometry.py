"""
Projection geometry.

Pure helpers for remapping inference-image coordinates to display space
and to camera pixels.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from models.errors import InvalidInputError

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]

# Facing used when no viewer position is known
DEFAULT_FACING: Vec3 = (0.0, 0.0, 1.0)


def validate_size(name: str, size: Optional[Sequence[float]]) -> Vec2:
    """
    Check a (width, height) pair is present, finite and positive.

    Raises:
        InvalidInputError: If the pair is missing or malformed.
    """
    if size is None or len(size) != 2:
        raise InvalidInputError(f"{name} must be a (width, height) pair, got {size!r}")
    w, h = float(size[0]), float(size[1])
    if not (math.isfinite(w) and math.isfinite(h)) or w <= 0 or h <= 0:
        raise InvalidInputError(f"{name} must be finite and positive, got ({w}, {h})")
    return (w, h)


def compute_scale(image_size: Vec2, display_size: Vec2) -> Vec2:
    """Per-axis image-to-display scale; the two axes are independent."""
    return (display_size[0] / image_size[0], display_size[1] / image_size[1])


def to_screen(position: Vec2, scale: Vec2, display_size: Vec2) -> Vec2:
    """Image-space center to display space, relative to the display center."""
    return (
        position[0] * scale[0] - display_size[0] / 2,
        position[1] * scale[1] - display_size[1] / 2,
    )


def scale_size(size: Vec2, scale: Vec2) -> Vec2:
    return (size[0] * scale[0], size[1] * scale[1])


def to_percentage(screen_center: Vec2, display_size: Vec2) -> Vec2:
    """
    Normalized display position, origin top-left.

    Values are not clamped; off-screen centers fall outside [0, 1].
    """
    return (
        (screen_center[0] + display_size[0] / 2) / display_size[0],
        (screen_center[1] + display_size[1] / 2) / display_size[1],
    )


def percentage_to_pixel(per: Vec2, resolution: Sequence[int]) -> Tuple[int, int]:
    """
    Normalized display position to a camera pixel.

    The vertical axis is flipped: camera pixels have their origin at the
    bottom-left. Rounds half to even.
    """
    return (
        int(round(per[0] * resolution[0])),
        int(round((1.0 - per[1]) * resolution[1])),
    )


def marker_position(screen_center: Vec2, world_position: Optional[Vec3]) -> Vec3:
    """Marker local position: y up, depth from the world anchor or 0."""
    depth = world_position[2] if world_position is not None else 0.0
    return (screen_center[0], -screen_center[1], depth)


def facing_rotation(target: Optional[Vec3], viewer: Optional[Vec3]) -> Vec3:
    """Unit direction from viewer to target, DEFAULT_FACING if unknown."""
    if target is None or viewer is None:
        return DEFAULT_FACING
    d = (target[0] - viewer[0], target[1] - viewer[1], target[2] - viewer[2])
    norm = math.sqrt(d[0] ** 2 + d[1] ** 2 + d[2] ** 2)
    if norm == 0 or not math.isfinite(norm):
        return DEFAULT_FACING
    return (d[0] / norm, d[1] / norm, d[2] / norm)
