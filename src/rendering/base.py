"""
MarkerFactory interface for pluggable marker rendering.

A factory creates visual markers and applies updates to them. It never
decides marker lifetime: the annotation projector owns the pool and only
asks the factory to create, show/hide and update markers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Tuple

from models.color import RGBA

# Opaque per-marker handle returned by create_marker
MarkerHandle = Any

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]


class MarkerFactory(ABC):
    """
    Abstract base class for marker factories.

    Lifecycle of a marker:
        1. create_marker(color) returns a handle (marker starts active)
        2. set_transform / set_label_text / set_color update it each frame
        3. set_active(handle, False) hides it when the frame has fewer markers
    """

    @abstractmethod
    def create_marker(self, color: RGBA) -> MarkerHandle:
        """Create a new, active marker tinted with color."""
        pass

    @abstractmethod
    def set_active(self, handle: MarkerHandle, active: bool) -> None:
        pass

    @abstractmethod
    def set_transform(
        self,
        handle: MarkerHandle,
        position: Vec3,
        rotation: Vec3,
        size: Vec2,
    ) -> None:
        """
        Place a marker.

        Args:
            handle: Marker handle.
            position: (x, y, depth) local to the display; y points up.
            rotation: Unit facing direction (viewer to marker).
            size: (width, height) in display units.
        """
        pass

    @abstractmethod
    def set_label_text(self, handle: MarkerHandle, text: str, color: RGBA) -> None:
        pass

    def set_color(self, handle: MarkerHandle, color: RGBA) -> None:
        """Re-tint the marker box. Factories without a separate box tint may ignore it."""
        pass
