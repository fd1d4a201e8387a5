"""
Inference output adapters.

Model execution is external; this package only describes and replays
its output.
"""

from .backend import InferenceBackend, InferenceResult
from .replay import ReplayBackend

__all__ = ["InferenceBackend", "InferenceResult", "ReplayBackend"]
