"""Routes pointer events to the annotation engine or the zoom gesture."""
from zenstudy.annotations import AnnotationEngine
from zenstudy.coords import (
    POINTER_DOWN, POINTER_LEAVE, POINTER_MOVE, POINTER_UP, PointerEvent, drawing_point,
)
from zenstudy.viewport import ViewportController


class AnnotationCanvas:
    """One document page: a stroke engine plus the viewport it is shown through.

    Two contacts start a zoom gesture, which discards any stroke in flight and
    suppresses drawing until every finger is lifted.
    """

    def __init__(self, engine: AnnotationEngine, viewport: ViewportController, origin=(0.0, 0.0)):
        self.engine = engine
        self.viewport = viewport
        self.origin = origin
        self._gesture = False

    def set_origin(self, origin) -> None:
        self.origin = origin

    def handle(self, event: PointerEvent) -> None:
        if event.kind in (POINTER_DOWN, POINTER_MOVE):
            if event.is_multi_touch:
                self._gesture_step(event)
            elif not self._gesture:
                self._draw_step(event)
        elif event.kind in (POINTER_UP, POINTER_LEAVE):
            self._release(event)

    def _gesture_step(self, event: PointerEvent) -> None:
        if not self._gesture or not self.viewport.gesture_active:
            self.engine.cancel_stroke()
            self.viewport.on_gesture_start(event.touches)
            self._gesture = True
        else:
            self.viewport.on_gesture_move(event.touches)

    def _draw_step(self, event: PointerEvent) -> None:
        point = drawing_point(event, self.origin, self.viewport.zoom)
        if point is None:
            return
        if event.kind == POINTER_DOWN:
            self.engine.begin_stroke(point)
        else:
            self.engine.extend_stroke(point)

    def _release(self, event: PointerEvent) -> None:
        if self._gesture:
            if len(event.touches) < 2:
                self.viewport.on_gesture_end()
            if not event.touches:
                self._gesture = False
            return
        self.engine.commit_stroke()

    def render(self) -> list:
        return self.engine.render(self.viewport.zoom)
