"""
Inference backend interface.

Inference itself is external. Backends hand over raw tensors per frame:
a detection-box tensor [count, 4] (center_x, center_y, width, height in
inference-image pixels), a label-id tensor [count], and/or a flat
confidence vector for single-class classification.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Tuple

import numpy as np


@dataclass(frozen=True)
class InferenceResult:
    """
    Raw output of one inference call.

    Attributes:
        image_size: Inference image (width, height) the boxes refer to.
        boxes: Box tensor shaped [count, 4], or None.
        label_ids: Label-id tensor shaped [count], or None.
        scores: Confidence vector for the classifier, or None.
        frame_index: Sequential cycle number.
    """
    image_size: Tuple[float, float]
    boxes: Optional[np.ndarray] = None
    label_ids: Optional[np.ndarray] = None
    scores: Optional[np.ndarray] = None
    frame_index: int = 0

    @property
    def has_boxes(self) -> bool:
        return self.boxes is not None and self.label_ids is not None

    @property
    def has_scores(self) -> bool:
        return self.scores is not None

    @property
    def box_count(self) -> int:
        return 0 if self.boxes is None else int(np.asarray(self.boxes).reshape(-1, 4).shape[0])


class InferenceBackend(Protocol):
    def results(self) -> Iterator[InferenceResult]:
        ...
