"""Freehand annotation engine for a single document page.

Strokes live in document space, so zoom never changes stored geometry;
scale is applied only when producing render calls.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from zenstudy.models import Annotation, Point, generate_id

ERASE_RADIUS = 15.0
HIGHLIGHT_OPACITY = 0.35
MIN_STROKE_WIDTH = 1
MAX_STROKE_WIDTH = 15
DEFAULT_STROKE_WIDTH = 3
DEFAULT_COLOR = "#4f46e5"

DRAW_COLORS = {
    "indigo": "#4f46e5",
    "emerald": "#10b981",
    "rose": "#f43f5e",
    "amber": "#f59e0b",
    "sky": "#0ea5e9",
    "black": "#0f172a",
}


class Tool(str, Enum):
    PEN = "pen"
    HIGHLIGHTER = "highlighter"
    ERASER = "eraser"
    SCROLL = "scroll"
    SELECT = "select"


class EngineState(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    ERASING = "erasing"


STROKE_TOOLS = (Tool.PEN, Tool.HIGHLIGHTER)


@dataclass(frozen=True)
class DrawCall:
    """One polyline for the renderer, already in screen units."""
    points: tuple
    color: str
    line_width: float
    opacity: float
    line_cap: str = "round"
    line_join: str = "round"


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def stroke_touches(annotation: Annotation, point: Point, radius: float) -> bool:
    return any(distance(p, point) < radius for p in annotation.points)


def erase_near(annotations: list, point: Point, radius: float = ERASE_RADIUS) -> Optional[list]:
    """Drop every stroke with a point closer than `radius` to `point`.

    Returns the filtered list, or None when nothing was removed.
    """
    kept = [a for a in annotations if not stroke_touches(a, point, radius)]
    if len(kept) == len(annotations):
        return None
    return kept


def _polyline(points, scale: float) -> tuple:
    return tuple((p.x * scale, p.y * scale) for p in points)


def render_calls(annotations: list, scale: float, in_progress=None, style=None) -> list:
    """Draw calls in document order, with the in-progress stroke last.

    `style` is a (color, width, opacity) triple for the in-progress buffer.
    """
    calls = []
    for ann in annotations:
        if len(ann.points) < 2:
            continue
        calls.append(DrawCall(
            points=_polyline(ann.points, scale),
            color=ann.color,
            line_width=ann.width * scale,
            opacity=ann.opacity,
        ))
    if in_progress and len(in_progress) > 1 and style is not None:
        color, width, opacity = style
        calls.append(DrawCall(
            points=_polyline(in_progress, scale),
            color=color,
            line_width=width * scale,
            opacity=opacity,
        ))
    return calls


class AnnotationEngine:
    """Idle -> Drawing -> Idle for pen/highlighter, Idle -> Erasing -> Idle for the eraser.

    `on_change` receives the new annotation list after every commit or
    effective erase, so the owner can persist it.
    """

    def __init__(
        self,
        annotations=None,
        tool: Tool = Tool.SCROLL,
        color: str = DEFAULT_COLOR,
        width: float = DEFAULT_STROKE_WIDTH,
        erase_radius: float = ERASE_RADIUS,
        on_change: Optional[Callable[[list], None]] = None,
    ):
        self._annotations = list(annotations or [])
        self.tool = Tool(tool)
        self.color = color
        self.width = self._clamp_width(width)
        self.erase_radius = erase_radius
        self.on_change = on_change
        self.state = EngineState.IDLE
        self._buffer = []
        self._stroke_tool = None

    @property
    def annotations(self) -> list:
        return list(self._annotations)

    @property
    def in_progress(self) -> tuple:
        if self.state is not EngineState.DRAWING:
            return ()
        return tuple(self._buffer)

    @staticmethod
    def _clamp_width(width: float) -> float:
        return max(MIN_STROKE_WIDTH, min(MAX_STROKE_WIDTH, width))

    def set_width(self, width: float) -> None:
        self.width = self._clamp_width(width)

    def set_color(self, color: str) -> None:
        """Pick a palette colour by name or by its hex value."""
        color = DRAW_COLORS.get(color, color)
        if color not in DRAW_COLORS.values():
            raise ValueError(f"{color!r} is not in the drawing palette")
        self.color = color

    def set_tool(self, tool: Tool) -> None:
        # Switching tools ends any in-flight stroke first.
        if self.state is not EngineState.IDLE:
            self.commit_stroke()
        self.tool = Tool(tool)

    def stroke_style(self, tool: Optional[Tool] = None) -> tuple:
        tool = tool or self.tool
        opacity = HIGHLIGHT_OPACITY if tool is Tool.HIGHLIGHTER else 1.0
        return (self.color, self.width, opacity)

    def begin_stroke(self, point: Point) -> None:
        if self.state is not EngineState.IDLE:
            return
        if self.tool is Tool.ERASER:
            self.state = EngineState.ERASING
            self.erase_at(point)
        elif self.tool in STROKE_TOOLS:
            self.state = EngineState.DRAWING
            self._stroke_tool = self.tool
            self._buffer = [point]

    def extend_stroke(self, point: Point) -> None:
        if self.state is EngineState.DRAWING:
            self._buffer.append(point)
        elif self.state is EngineState.ERASING:
            self.erase_at(point)

    def commit_stroke(self) -> Optional[Annotation]:
        """Finish the gesture. Returns the new annotation, if one was created."""
        created = None
        if self.state is EngineState.DRAWING and len(self._buffer) >= 2:
            color, width, opacity = self.stroke_style(self._stroke_tool)
            created = Annotation(
                id=generate_id(),
                kind="highlight" if self._stroke_tool is Tool.HIGHLIGHTER else "draw",
                points=list(self._buffer),
                color=color,
                width=width,
                opacity=opacity,
            )
            self._annotations = self._annotations + [created]
        self._reset()
        if created is not None:
            self._notify()
        return created

    def cancel_stroke(self) -> None:
        """Discard the in-flight stroke without creating an annotation."""
        self._reset()

    def erase_at(self, point: Point, radius: Optional[float] = None) -> bool:
        """Remove whole strokes near `point`. Returns True if anything changed."""
        remaining = erase_near(
            self._annotations, point, self.erase_radius if radius is None else radius
        )
        if remaining is None:
            return False
        self._annotations = remaining
        self._notify()
        return True

    def render(self, scale: float) -> list:
        style = self.stroke_style(self._stroke_tool) if self.state is EngineState.DRAWING else None
        return render_calls(self._annotations, scale, self.in_progress, style)

    def _reset(self) -> None:
        self.state = EngineState.IDLE
        self._buffer = []
        self._stroke_tool = None

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.annotations)
