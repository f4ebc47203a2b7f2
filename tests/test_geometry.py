"""Test line geometry helpers."""

import pytest

from schematic_core.geometry import (
    corner_for_directions,
    find_all_intersections,
    find_lines_at_point,
    find_point_on_line,
    get_corner,
    get_corner_char,
    get_direction,
    get_endpoint_type,
    get_preview_path,
    get_segment_midpoint,
    get_segment_orientation,
    get_segments,
    get_style_chars,
    is_endpoint,
    is_orthogonal,
    merge_lines,
    opposite_direction,
    orthogonalize,
    point_on_segment,
    segment_intersection,
    simplify_points,
    square_off,
)
from schematic_core.models import Corner, Direction, EndpointSide, LineObject, LineStyle, Point


def _pts(*coords) -> list[Point]:
    return [Point(x=x, y=y) for x, y in coords]


def _line(line_id: str, *coords, style=LineStyle.SINGLE) -> LineObject:
    return LineObject(id=line_id, points=_pts(*coords), style=style)


def test_segments_in_order():
    segments = get_segments(_line("a", (0, 0), (5, 0), (5, 5)))
    assert [s.index for s in segments] == [0, 1]
    assert segments[0].is_horizontal
    assert segments[1].is_vertical


def test_segments_of_degenerate_line_are_empty():
    assert get_segments(_line("a", (0, 0))) == []
    assert get_segments(None) == []


def test_direction_and_orientation():
    assert get_direction(Point(x=0, y=0), Point(x=3, y=0)) == Direction.RIGHT
    assert get_direction(Point(x=0, y=0), Point(x=0, y=-3)) == Direction.UP
    assert get_direction(Point(x=1, y=1), Point(x=1, y=1)) == Direction.NONE
    assert get_segment_orientation(Point(x=0, y=0), Point(x=2, y=2)) == "diagonal"


def test_point_on_segment_is_inclusive():
    p1, p2 = Point(x=0, y=5), Point(x=10, y=5)
    assert point_on_segment(Point(x=0, y=5), p1, p2)
    assert point_on_segment(Point(x=7, y=5), p1, p2)
    assert not point_on_segment(Point(x=11, y=5), p1, p2)
    assert not point_on_segment(Point(x=7, y=6), p1, p2)


def test_point_on_diagonal_segment_never_matches():
    assert not point_on_segment(Point(x=1, y=1), Point(x=0, y=0), Point(x=2, y=2))


def test_find_point_on_line_prefers_vertices():
    line = _line("a", (0, 0), (5, 0), (5, 5))
    hit = find_point_on_line(Point(x=5, y=0), line)
    assert hit.is_vertex and hit.vertex_index == 1

    hit = find_point_on_line(Point(x=5, y=3), line)
    assert not hit.is_vertex and hit.segment_index == 1

    assert find_point_on_line(Point(x=9, y=9), line) is None


def test_endpoint_type():
    line = _line("a", (0, 0), (5, 0))
    assert get_endpoint_type(Point(x=0, y=0), line) == EndpointSide.START
    assert get_endpoint_type(Point(x=5, y=0), line) == EndpointSide.END
    assert get_endpoint_type(Point(x=3, y=0), line) is None


def test_simplify_drops_duplicates_and_collinear_points():
    points = _pts((0, 0), (0, 0), (3, 0), (5, 0), (5, 5), (5, 5))
    assert simplify_points(points) == _pts((0, 0), (5, 0), (5, 5))


def test_simplify_is_idempotent():
    points = _pts((0, 0), (2, 0), (2, 0), (4, 0), (4, 3), (4, 6), (1, 6), (1, 6))
    once = simplify_points(points)
    assert simplify_points(once) == once


def test_simplify_collapses_backtrack():
    # Out and back along the same row leaves only the ends
    assert simplify_points(_pts((0, 0), (5, 0), (2, 0))) == _pts((0, 0), (2, 0))


def test_square_off_and_orthogonalize():
    assert square_off(_pts((0, 0), (4, 3))) == _pts((0, 0), (4, 0), (4, 3))
    assert square_off(_pts((0, 0), (4, 3)), horizontal_first=False) == _pts((0, 0), (0, 3), (4, 3))
    result = orthogonalize(_pts((0, 0), (0, 0), (4, 3)))
    assert is_orthogonal(result)


def test_preview_path():
    anchor, cursor = Point(x=0, y=0), Point(x=4, y=3)
    assert get_preview_path(anchor, cursor) == _pts((0, 0), (4, 0), (4, 3))
    assert get_preview_path(anchor, cursor, horizontal_first=False) == _pts((0, 0), (0, 3), (4, 3))
    assert get_preview_path(anchor, Point(x=0, y=7)) == _pts((0, 0), (0, 7))
    assert get_preview_path(None, cursor) == []


def test_segment_intersection():
    cross = segment_intersection(Point(x=0, y=5), Point(x=10, y=5), Point(x=5, y=0), Point(x=5, y=10))
    assert cross == Point(x=5, y=5)
    # Parallel segments never intersect
    assert segment_intersection(Point(x=0, y=0), Point(x=5, y=0), Point(x=0, y=1), Point(x=5, y=1)) is None
    # Near miss
    assert segment_intersection(Point(x=0, y=5), Point(x=4, y=5), Point(x=5, y=0), Point(x=5, y=10)) is None


def test_find_all_intersections():
    lines = [_line("h", (0, 5), (10, 5)), _line("v", (5, 0), (5, 10))]
    found = find_all_intersections(lines)
    assert len(found) == 1
    assert found[0].point == Point(x=5, y=5)
    assert (found[0].first_id, found[0].second_id) == ("h", "v")


def test_corner_chars():
    assert get_corner_char(Point(x=0, y=0), Point(x=5, y=0), Point(x=5, y=5)) == "┐"
    assert get_corner_char(Point(x=0, y=0), Point(x=5, y=0), Point(x=5, y=5), LineStyle.DOUBLE) == "╗"
    assert get_corner_char(Point(x=0, y=0), Point(x=5, y=0), Point(x=9, y=0)) is None
    assert get_style_chars("bogus") == get_style_chars(LineStyle.SINGLE)


def test_merge_lines_at_shared_endpoint():
    a = _line("a", (0, 0), (5, 0))
    b = _line("b", (5, 5), (5, 0))
    merged = merge_lines(a, b)
    assert merged.id == "a"
    assert merged.points == _pts((0, 0), (5, 0), (5, 5))


def test_merge_lines_without_shared_endpoint():
    assert merge_lines(_line("a", (0, 0), (5, 0)), _line("b", (6, 0), (9, 0))) is None


def test_opposite_direction_and_midpoint():
    assert opposite_direction(Direction.LEFT) == Direction.RIGHT
    assert opposite_direction(Direction.NONE) == Direction.NONE
    assert get_segment_midpoint(Point(x=0, y=0), Point(x=5, y=0)) == Point(x=3, y=0)


def test_lines_at_point():
    objects = [_line("a", (0, 0), (5, 0)), _line("b", (3, -2), (3, 4)), _line("c", (9, 9), (9, 12))]
    hits = find_lines_at_point(Point(x=3, y=0), objects)
    assert [h.obj.id for h in hits] == ["a", "b"]
    assert is_endpoint(Point(x=5, y=0), objects[0])
    assert not is_endpoint(Point(x=3, y=0), objects[0])


def test_simplify_never_collapses_below_two_points():
    assert simplify_points(_pts((4, 2), (4, 2))) == _pts((4, 2), (4, 2))
    folded = simplify_points(_pts((0, 0), (5, 0), (5, 0), (0, 0)))
    assert folded == _pts((0, 0), (0, 0))
    assert simplify_points(folded) == folded
    assert simplify_points(_pts((3, 3))) == _pts((3, 3))


@pytest.mark.parametrize("incoming, outgoing, corner", [
    (Direction.RIGHT, Direction.DOWN, Corner.TR),
    (Direction.RIGHT, Direction.UP, Corner.BR),
    (Direction.LEFT, Direction.DOWN, Corner.TL),
    (Direction.LEFT, Direction.UP, Corner.BL),
    (Direction.DOWN, Direction.RIGHT, Corner.BL),
    (Direction.DOWN, Direction.LEFT, Corner.BR),
    (Direction.UP, Direction.RIGHT, Corner.TL),
    (Direction.UP, Direction.LEFT, Corner.TR),
])
def test_corner_for_every_turn(incoming, outgoing, corner):
    assert corner_for_directions(incoming, outgoing) == corner


@pytest.mark.parametrize("incoming, outgoing", [
    (Direction.RIGHT, Direction.RIGHT),
    (Direction.DOWN, Direction.DOWN),
    (Direction.RIGHT, Direction.LEFT),
    (Direction.UP, Direction.DOWN),
    (Direction.NONE, Direction.RIGHT),
])
def test_no_corner_for_straight_runs_and_reversals(incoming, outgoing):
    assert corner_for_directions(incoming, outgoing) is None


def test_get_corner_from_points():
    assert get_corner(Point(x=0, y=5), Point(x=0, y=0), Point(x=5, y=0)) == Corner.TL
    assert get_corner(Point(x=0, y=0), Point(x=5, y=0), Point(x=2, y=0)) is None
