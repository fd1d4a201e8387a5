"""
World placement services.

The projector asks a raycast service for a 3D anchor at a camera pixel.
The service is external; these are its contract and small adapters.
"""

from .raycast import (
    AsyncRaycastService,
    CallableRaycast,
    NoRaycast,
    RaycastService,
)

__all__ = [
    "RaycastService",
    "AsyncRaycastService",
    "NoRaycast",
    "CallableRaycast",
]
