# tests/test_annotations.py
import pytest

from zenstudy.annotations import (
    DRAW_COLORS, AnnotationEngine, EngineState, Tool, HIGHLIGHT_OPACITY, MAX_STROKE_WIDTH,
    erase_near, render_calls,
)
from zenstudy.models import Annotation, Point


def stroke(*coords, kind="draw", id="s"):
    return Annotation(id=id, kind=kind, points=[Point(x, y) for x, y in coords],
                      color="#000000", width=2, opacity=1.0)


def draw(engine, *coords):
    engine.begin_stroke(Point(*coords[0]))
    for c in coords[1:]:
        engine.extend_stroke(Point(*c))
    return engine.commit_stroke()


def test_commit_creates_annotation_with_buffered_points():
    engine = AnnotationEngine(tool=Tool.PEN)
    ann = draw(engine, (0, 0), (1, 1), (2, 3))
    assert engine.annotations == [ann]
    assert ann.points == [Point(0, 0), Point(1, 1), Point(2, 3)]
    assert ann.kind == "draw"
    assert ann.opacity == 1.0
    assert engine.state is EngineState.IDLE


def test_tap_creates_nothing():
    engine = AnnotationEngine(tool=Tool.PEN)
    engine.begin_stroke(Point(5, 5))
    assert engine.commit_stroke() is None
    assert engine.annotations == []
    assert engine.state is EngineState.IDLE


def test_highlighter_sets_kind_and_opacity():
    engine = AnnotationEngine(tool=Tool.HIGHLIGHTER, color="#f59e0b")
    ann = draw(engine, (0, 0), (10, 0))
    assert ann.kind == "highlight"
    assert ann.opacity == HIGHLIGHT_OPACITY
    assert ann.color == "#f59e0b"


def test_scroll_and_select_never_draw():
    for tool in (Tool.SCROLL, Tool.SELECT):
        engine = AnnotationEngine(tool=tool)
        engine.begin_stroke(Point(0, 0))
        assert engine.state is EngineState.IDLE
        engine.extend_stroke(Point(1, 1))
        assert engine.commit_stroke() is None
        assert engine.annotations == []


def test_extend_outside_drawing_is_noop():
    engine = AnnotationEngine(tool=Tool.PEN)
    engine.extend_stroke(Point(1, 1))
    assert engine.in_progress == ()


def test_erase_removes_stroke_within_radius():
    remaining = erase_near([stroke((0, 0), (10, 0))], Point(0, 0), 5)
    assert remaining == []


def test_erase_keeps_distant_stroke():
    assert erase_near([stroke((0, 0), (10, 0))], Point(100, 100), 5) is None


def test_erase_boundary_is_exclusive():
    # distance exactly equal to the radius does not erase
    assert erase_near([stroke((0, 0), (10, 0))], Point(0, 5), 5) is None


def test_erase_removes_whole_strokes_only():
    a = stroke((0, 0), (50, 0), id="a")
    b = stroke((0, 100), (50, 100), id="b")
    remaining = erase_near([a, b], Point(50, 1), 5)
    assert remaining == [b]
    assert a.points == [Point(0, 0), Point(50, 0)]


def test_eraser_acts_continuously_and_notifies():
    changes = []
    engine = AnnotationEngine(
        [stroke((0, 0), (1, 0), id="a"), stroke((100, 0), (101, 0), id="b")],
        tool=Tool.ERASER, on_change=changes.append,
    )
    engine.begin_stroke(Point(50, 50))
    assert engine.state is EngineState.ERASING
    assert engine.in_progress == ()
    engine.extend_stroke(Point(0, 2))
    engine.extend_stroke(Point(100, 2))
    engine.commit_stroke()
    assert engine.annotations == []
    assert len(changes) == 2
    assert engine.state is EngineState.IDLE


def test_eraser_without_hit_does_not_notify():
    changes = []
    engine = AnnotationEngine([stroke((0, 0), (1, 0))], tool=Tool.ERASER, on_change=changes.append)
    engine.begin_stroke(Point(500, 500))
    engine.commit_stroke()
    assert changes == []


def test_begin_ignored_while_drawing():
    engine = AnnotationEngine(tool=Tool.PEN)
    engine.begin_stroke(Point(0, 0))
    engine.begin_stroke(Point(9, 9))
    engine.extend_stroke(Point(1, 1))
    ann = engine.commit_stroke()
    assert ann.points == [Point(0, 0), Point(1, 1)]


def test_tool_switch_commits_in_flight_stroke():
    engine = AnnotationEngine(tool=Tool.PEN)
    engine.begin_stroke(Point(0, 0))
    engine.extend_stroke(Point(3, 4))
    engine.set_tool(Tool.HIGHLIGHTER)
    assert engine.state is EngineState.IDLE
    assert engine.tool is Tool.HIGHLIGHTER
    assert len(engine.annotations) == 1
    assert engine.annotations[0].kind == "draw"


def test_tool_switch_discards_tap():
    engine = AnnotationEngine(tool=Tool.PEN)
    engine.begin_stroke(Point(0, 0))
    engine.set_tool(Tool.ERASER)
    assert engine.annotations == []
    assert engine.in_progress == ()


def test_cancel_stroke_discards_buffer():
    engine = AnnotationEngine(tool=Tool.PEN)
    engine.begin_stroke(Point(0, 0))
    engine.extend_stroke(Point(1, 1))
    engine.cancel_stroke()
    assert engine.commit_stroke() is None
    assert engine.annotations == []


def test_width_is_clamped():
    engine = AnnotationEngine(tool=Tool.PEN, width=40)
    assert engine.width == MAX_STROKE_WIDTH
    engine.set_width(0)
    assert engine.width == 1


def test_color_comes_from_palette():
    engine = AnnotationEngine(tool=Tool.PEN)
    engine.set_color("rose")
    assert engine.color == DRAW_COLORS["rose"]
    engine.set_color("#10b981")
    assert engine.color == "#10b981"
    with pytest.raises(ValueError):
        engine.set_color("#123456")
    assert engine.color == "#10b981"


def test_render_calls_scale_geometry_and_keep_order():
    anns = [stroke((0, 0), (1, 1), id="old"), stroke((2, 2), (3, 3), id="new")]
    calls = render_calls(anns, 2.0)
    assert [c.points for c in calls] == [((0, 0), (2, 2)), ((4, 4), (6, 6))]
    assert all(c.line_width == 4 for c in calls)
    assert all(c.line_cap == "round" and c.line_join == "round" for c in calls)


def test_render_draws_in_progress_stroke_last():
    engine = AnnotationEngine([stroke((0, 0), (1, 1))], tool=Tool.HIGHLIGHTER, width=4)
    engine.begin_stroke(Point(5, 5))
    engine.extend_stroke(Point(6, 6))
    calls = engine.render(0.5)
    assert len(calls) == 2
    assert calls[-1].points == ((2.5, 2.5), (3.0, 3.0))
    assert calls[-1].line_width == 2
    assert calls[-1].opacity == HIGHLIGHT_OPACITY


def test_render_skips_single_point_strokes():
    assert render_calls([stroke((0, 0))], 1.0) == []
