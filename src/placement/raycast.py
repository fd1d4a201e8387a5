"""
Raycast service interface.

A raycast service maps a camera pixel to an optional world-space point
against the current scene depth. A miss is None, never an error.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol, Tuple

Pixel = Tuple[int, int]
Vec3 = Tuple[float, float, float]


class RaycastService(Protocol):
    def cast(self, pixel: Pixel) -> Optional[Vec3]:
        ...


class AsyncRaycastService(Protocol):
    async def cast(self, pixel: Pixel) -> Optional[Vec3]:
        ...


class NoRaycast:
    """Raycast service that never hits (no depth available)."""

    def cast(self, pixel: Pixel) -> Optional[Vec3]:
        return None


class CallableRaycast:
    """
    Adapt a plain function into a RaycastService.

    Exceptions raised by the function are logged and reported as a miss.
    """

    def __init__(self, fn: Callable[[Pixel], Optional[Vec3]]):
        self._fn = fn

    def cast(self, pixel: Pixel) -> Optional[Vec3]:
        try:
            hit = self._fn(pixel)
        except Exception as e:
            logging.warning(f"Raycast failed at pixel {pixel}: {e}")
            return None
        if hit is None:
            return None
        x, y, z = hit
        return (float(x), float(y), float(z))
