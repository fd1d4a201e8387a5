"""
OpenCV preview renderer for projected markers.

Markers are kept as plain state and drawn onto a BGR canvas on demand,
which makes the overlay viewable on a desktop without the AR host.
"""

from __future__ import annotations

from typing import Optional, Tuple

import cv2
import numpy as np

from .recording import InMemoryMarkerFactory, MarkerState


class OpenCVMarkerFactory(InMemoryMarkerFactory):
    """
    Marker factory that can draw its active markers with OpenCV.

    Marker positions are display-centered with y pointing up; the canvas
    is assumed to cover the display area (scaled if sizes differ).

    Example:
        factory = OpenCVMarkerFactory(display_size=(640, 640))
        projector = AnnotationProjector(..., marker_factory=factory)
        projector.project(detections, image_size=(640, 640))
        frame = factory.render()
    """

    def __init__(
        self,
        display_size: Tuple[float, float],
        font_scale: float = 0.5,
        thickness: int = 2,
    ):
        super().__init__()
        self.display_size = (float(display_size[0]), float(display_size[1]))
        self.font_scale = font_scale
        self.thickness = thickness

    def _to_canvas(self, marker: MarkerState, canvas_w: int, canvas_h: int) -> Tuple[int, int, int, int]:
        """Return (x1, y1, x2, y2) canvas pixels for a marker box."""
        disp_w, disp_h = self.display_size
        sx = canvas_w / disp_w
        sy = canvas_h / disp_h
        cx = (marker.position[0] + disp_w / 2) * sx
        cy = (disp_h / 2 - marker.position[1]) * sy
        half_w = marker.size[0] * sx / 2
        half_h = marker.size[1] * sy / 2
        return (int(cx - half_w), int(cy - half_h), int(cx + half_w), int(cy + half_h))

    def render(self, canvas: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Draw active markers.

        Args:
            canvas: BGR image to draw on (copied). A black display-sized
                canvas is used when omitted.
        """
        if canvas is None:
            frame = np.zeros((int(self.display_size[1]), int(self.display_size[0]), 3), dtype=np.uint8)
        else:
            frame = canvas.copy()
        frame_h, frame_w = frame.shape[:2]

        font = cv2.FONT_HERSHEY_SIMPLEX
        for marker in self.active_markers():
            x1, y1, x2, y2 = self._to_canvas(marker, frame_w, frame_h)
            color = marker.color.to_bgr255()
            cv2.rectangle(frame, (x1, y1), (x2, y2), color, self.thickness)

            if marker.text:
                text_color = (marker.text_color or marker.color).to_bgr255()
                (tw, th), _ = cv2.getTextSize(marker.text, font, self.font_scale, 1)
                cv2.rectangle(frame, (x1, y1 - th - 6), (x1 + tw + 4, y1), (0, 0, 0), -1)
                cv2.putText(frame, marker.text, (x1 + 2, y1 - 4), font, self.font_scale, text_color, 1)

        return frame
