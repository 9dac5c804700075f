# tests/test_coords.py
import pytest

from zenstudy.coords import PointerEvent, drawing_point, to_document_space, to_screen_space
from zenstudy.models import Point


def test_to_document_space_applies_origin_and_scale():
    assert to_document_space((110, 60), (10, 20), 2.0) == Point(50, 20)


def test_to_document_space_rejects_non_positive_scale():
    with pytest.raises(ValueError):
        to_document_space((0, 0), (0, 0), 0)


def test_screen_space_inverts_document_space():
    p = to_document_space((30, 40), (0, 0), 4.0)
    assert to_screen_space(p, 4.0) == (30, 40)


def test_drawing_point_uses_first_contact():
    event = PointerEvent("down", ((20, 20),))
    assert drawing_point(event, (0, 0), 2.0) == Point(10, 10)


def test_drawing_point_suppressed_for_two_fingers():
    event = PointerEvent("move", ((0, 0), (50, 50)))
    assert event.is_multi_touch
    assert drawing_point(event, (0, 0), 1.0) is None


def test_drawing_point_without_touches():
    assert drawing_point(PointerEvent("up"), (0, 0), 1.0) is None
