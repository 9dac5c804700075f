"""Zoom state and pinch-to-zoom gesture interpretation."""
import math
from typing import Optional

MIN_ZOOM = 0.4
MAX_ZOOM = 8.0
ZOOM_STEP = 1.25


def clamp_zoom(value: float) -> float:
    return min(max(value, MIN_ZOOM), MAX_ZOOM)


def touch_distance(a, b) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def fit_width_zoom(viewport_width: float, native_width: float) -> float:
    """Zoom that makes the document width fill the viewport."""
    if native_width <= 0:
        return 1.0
    return clamp_zoom(viewport_width / native_width)


class ViewportController:
    def __init__(self, zoom: float = 1.0):
        self.zoom = clamp_zoom(zoom)
        self._start_distance: Optional[float] = None
        self._start_zoom = self.zoom

    @classmethod
    def for_document(cls, viewport_width: float, native_width: float) -> "ViewportController":
        return cls(fit_width_zoom(viewport_width, native_width))

    @property
    def gesture_active(self) -> bool:
        return self._start_distance is not None

    def on_gesture_start(self, touches) -> None:
        if len(touches) < 2:
            return
        dist = touch_distance(touches[0], touches[1])
        if dist <= 0:
            return
        self._start_distance = dist
        self._start_zoom = self.zoom

    def on_gesture_move(self, touches) -> float:
        if len(touches) < 2 or self._start_distance is None:
            return self.zoom
        ratio = touch_distance(touches[0], touches[1]) / self._start_distance
        self.zoom = clamp_zoom(self._start_zoom * ratio)
        return self.zoom

    def on_gesture_end(self) -> None:
        self._start_distance = None

    def zoom_in(self) -> float:
        self.zoom = clamp_zoom(self.zoom * ZOOM_STEP)
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = clamp_zoom(self.zoom / ZOOM_STEP)
        return self.zoom
