"""
In-memory marker factories.

InMemoryMarkerFactory keeps only the last state applied to each marker, so
its memory is bounded by the pool size. RecordingMarkerFactory also logs
every call and is meant for tests and short diagnostic runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from models.color import RGBA
from .base import MarkerFactory, Vec2, Vec3


@dataclass
class MarkerState:
    """Last known state of one marker."""
    handle: int
    color: RGBA
    active: bool = True
    position: Vec3 = (0.0, 0.0, 0.0)
    rotation: Vec3 = (0.0, 0.0, 1.0)
    size: Vec2 = (0.0, 0.0)
    text: str = ""
    text_color: Optional[RGBA] = None


class InMemoryMarkerFactory(MarkerFactory):
    def __init__(self):
        self.markers: List[MarkerState] = []

    def create_marker(self, color: RGBA) -> int:
        handle = len(self.markers)
        self.markers.append(MarkerState(handle=handle, color=color))
        return handle

    def set_active(self, handle: int, active: bool) -> None:
        self.markers[handle].active = active

    def set_transform(self, handle: int, position: Vec3, rotation: Vec3, size: Vec2) -> None:
        marker = self.markers[handle]
        marker.position = position
        marker.rotation = rotation
        marker.size = size

    def set_label_text(self, handle: int, text: str, color: RGBA) -> None:
        self.markers[handle].text = text
        self.markers[handle].text_color = color

    def set_color(self, handle: int, color: RGBA) -> None:
        self.markers[handle].color = color

    def active_markers(self) -> List[MarkerState]:
        return [m for m in self.markers if m.active]

    def snapshot(self) -> Dict[int, bool]:
        """Handle -> active flag."""
        return {m.handle: m.active for m in self.markers}


class RecordingMarkerFactory(InMemoryMarkerFactory):
    """In-memory factory that also logs every call in order (unbounded)."""

    def __init__(self):
        super().__init__()
        self.calls: List[Tuple[str, Any]] = []

    def create_marker(self, color: RGBA) -> int:
        handle = super().create_marker(color)
        self.calls.append(("create", handle))
        return handle

    def set_active(self, handle: int, active: bool) -> None:
        super().set_active(handle, active)
        self.calls.append(("active", (handle, active)))

    def set_transform(self, handle: int, position: Vec3, rotation: Vec3, size: Vec2) -> None:
        super().set_transform(handle, position, rotation, size)
        self.calls.append(("transform", handle))

    def set_label_text(self, handle: int, text: str, color: RGBA) -> None:
        super().set_label_text(handle, text, color)
        self.calls.append(("label", handle))

    def set_color(self, handle: int, color: RGBA) -> None:
        super().set_color(handle, color)
        self.calls.append(("color", handle))

    def count_calls(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)
