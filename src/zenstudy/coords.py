"""Screen to document-space coordinate mapping and pointer events."""
from dataclasses import dataclass

from zenstudy.models import Point

POINTER_DOWN = "down"
POINTER_MOVE = "move"
POINTER_UP = "up"
POINTER_LEAVE = "leave"


@dataclass(frozen=True)
class PointerEvent:
    """A mouse or touch event in screen coordinates.

    `touches` holds every active contact point; a mouse event carries a
    single entry. On `up`/`leave`, `touches` lists the contacts that remain.
    """
    kind: str
    touches: tuple = ()

    @property
    def is_multi_touch(self) -> bool:
        return len(self.touches) >= 2

    @property
    def primary(self):
        return self.touches[0] if self.touches else None


def to_document_space(screen_point, viewport_origin, scale: float) -> Point:
    """Map a screen position to document space: (screen - origin) / scale."""
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")
    sx, sy = screen_point
    ox, oy = viewport_origin
    return Point((sx - ox) / scale, (sy - oy) / scale)


def to_screen_space(point: Point, scale: float) -> tuple:
    return (point.x * scale, point.y * scale)


def drawing_point(event: PointerEvent, viewport_origin, scale: float):
    """Document-space point to draw with, or None when the event cannot draw.

    Only the first contact draws; two or more contacts form a zoom gesture.
    """
    if not event.touches or event.is_multi_touch:
        return None
    return to_document_space(event.primary, viewport_origin, scale)
