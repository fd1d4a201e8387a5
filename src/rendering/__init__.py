"""
Marker rendering collaborators.

The projector drives markers through the MarkerFactory interface; concrete
factories decide how a marker is actually drawn.
"""

from .base import MarkerFactory, MarkerHandle
from .recording import InMemoryMarkerFactory, MarkerState, RecordingMarkerFactory
from .opencv_markers import OpenCVMarkerFactory

__all__ = [
    "MarkerFactory",
    "MarkerHandle",
    "InMemoryMarkerFactory",
    "MarkerState",
    "RecordingMarkerFactory",
    "OpenCVMarkerFactory",
]
