"""
Colors and the class-to-color table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

ColorValue = Union[str, Sequence[float], "RGBA"]


@dataclass(frozen=True)
class RGBA:
    """
    A color with float channels in [0, 1].
    """
    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_value(cls, value: ColorValue) -> "RGBA":
        """
        Adapter: Build a color from a config value.

        Accepts an RGBA instance, "#rrggbb" / "#rrggbbaa" hex strings, or
        [r, g, b] / [r, g, b, a] float lists.
        """
        if isinstance(value, RGBA):
            return value
        if isinstance(value, str):
            return cls.from_hex(value)
        channels = [float(c) for c in value]
        if len(channels) not in (3, 4):
            raise ValueError(f"Color needs 3 or 4 channels, got {len(channels)}")
        if any(c < 0.0 or c > 1.0 for c in channels):
            raise ValueError(f"Color channels must be within [0, 1]: {channels}")
        return cls(*channels)

    @classmethod
    def from_hex(cls, text: str) -> "RGBA":
        digits = text.strip().lstrip("#")
        if len(digits) not in (6, 8):
            raise ValueError(f"Invalid hex color: {text!r}")
        values = [int(digits[i:i + 2], 16) / 255.0 for i in range(0, len(digits), 2)]
        return cls(*values)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)

    def to_bgr255(self) -> Tuple[int, int, int]:
        """Return an OpenCV BGR tuple (alpha dropped)."""
        return (round(self.b * 255), round(self.g * 255), round(self.r * 255))

    def to_list(self) -> List[float]:
        return list(self.as_tuple())


RED = RGBA(1.0, 0.0, 0.0)
GREEN = RGBA(0.0, 1.0, 0.0)
BLUE = RGBA(0.0, 0.0, 1.0)
YELLOW = RGBA(1.0, 0.92, 0.016)
WHITE = RGBA(1.0, 1.0, 1.0)


def normalize_class_key(name: Optional[str]) -> str:
    """Matching key for class names: trimmed and case-folded."""
    return (name or "").strip().casefold()


@dataclass(frozen=True)
class ClassColorEntry:
    """One configured (class name, color) pair."""
    class_name: str
    color: RGBA

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ClassColorEntry":
        return cls(
            class_name=str(d.get("class_name", "")),
            color=RGBA.from_value(d.get("color", [1.0, 1.0, 1.0, 1.0])),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"class_name": self.class_name, "color": self.color.to_list()}


@dataclass
class ClassColorTable:
    """
    Ordered class-to-color lookup.

    Entries are scanned in list order; the first case-insensitive,
    whitespace-trimmed match wins. An empty or unmatched class name
    resolves to the default color.
    """
    entries: List[ClassColorEntry] = field(default_factory=list)
    default: RGBA = WHITE

    def resolve(self, class_name: Optional[str]) -> RGBA:
        if not class_name:
            return self.default

        key = normalize_class_key(class_name)
        for entry in self.entries:
            if normalize_class_key(entry.class_name) == key:
                return entry.color

        logging.warning(f"No color match for class '{class_name}', using default color")
        return self.default

    def log_entries(self) -> None:
        logging.info("Class colors configured:")
        for entry in self.entries:
            logging.info(f"Class: {entry.class_name}, Color: {entry.color.as_tuple()}")

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def from_config(
        cls,
        class_colors: Optional[Sequence[Dict[str, Any]]],
        default_color: ColorValue = (1.0, 1.0, 1.0, 1.0),
    ) -> "ClassColorTable":
        """Adapter: Build from the YAML `class_colors` list and `default_color`."""
        entries = [ClassColorEntry.from_dict(d) for d in (class_colors or [])]
        return cls(entries=entries, default=RGBA.from_value(default_color))
