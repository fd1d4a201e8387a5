"""
Replay backend (development path).

Feeds recorded inference output back through the overlay pipeline, so the
projector can be exercised without a camera or a model.

Recording format (.npz):
    boxes:      [frames, max_count, 4] or [count, 4] for a single frame
    labels:     [frames, max_count] or [count]
    counts:     optional [frames] number of valid rows per frame
    scores:     optional [frames, classes] or [classes]
    image_size: optional [2], defaults to (640, 640)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Union

import numpy as np

from models.errors import InvalidInputError
from .backend import InferenceResult

DEFAULT_IMAGE_SIZE = (640.0, 640.0)


class ReplayBackend:
    """
    Inference backend that yields pre-recorded results.

    Example:
        backend = ReplayBackend.from_npz("recordings/run1.npz")
        for result in backend.results():
            ...
    """

    def __init__(self, results: List[InferenceResult]):
        self._results = results

    def __len__(self) -> int:
        return len(self._results)

    def results(self) -> Iterator[InferenceResult]:
        return iter(self._results)

    @classmethod
    def from_npz(cls, path: Union[str, Path]) -> "ReplayBackend":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Recording not found: {path}")

        with np.load(path) as data:
            boxes = data["boxes"] if "boxes" in data else None
            labels = data["labels"] if "labels" in data else None
            counts = data["counts"] if "counts" in data else None
            scores = data["scores"] if "scores" in data else None
            image_size = (
                tuple(float(v) for v in data["image_size"])
                if "image_size" in data
                else DEFAULT_IMAGE_SIZE
            )

        results = cls.split_frames(boxes, labels, scores, image_size, counts)
        logging.info(f"Loaded {len(results)} recorded frames from {path}")
        return cls(results)

    @staticmethod
    def split_frames(
        boxes: Optional[np.ndarray],
        labels: Optional[np.ndarray],
        scores: Optional[np.ndarray],
        image_size,
        counts: Optional[np.ndarray] = None,
    ) -> List[InferenceResult]:
        """Split stacked recording arrays into one InferenceResult per frame."""
        if boxes is None and scores is None:
            raise InvalidInputError("Recording holds neither boxes nor scores")
        if (boxes is None) != (labels is None):
            raise InvalidInputError("Recording must hold both boxes and labels, or neither")

        if boxes is not None and boxes.ndim == 2:
            boxes = boxes[np.newaxis]
            labels = np.asarray(labels).reshape(1, -1)
        if scores is not None and scores.ndim == 1:
            scores = scores[np.newaxis]

        num_frames = len(boxes) if boxes is not None else len(scores)
        if scores is not None and boxes is not None and len(scores) != num_frames:
            raise InvalidInputError(
                f"Recording has {num_frames} box frames but {len(scores)} score frames"
            )

        results: List[InferenceResult] = []
        for i in range(num_frames):
            frame_boxes = frame_labels = None
            if boxes is not None:
                n = int(counts[i]) if counts is not None else boxes.shape[1]
                frame_boxes = boxes[i, :n]
                frame_labels = labels[i, :n]
            results.append(
                InferenceResult(
                    image_size=image_size,
                    boxes=frame_boxes,
                    label_ids=frame_labels,
                    scores=scores[i] if scores is not None else None,
                    frame_index=i,
                )
            )
        return results
