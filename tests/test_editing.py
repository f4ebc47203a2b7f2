"""Test interactive vertex and segment drags."""

import pytest

from schematic_core.editing import (
    PinMove,
    apply_pin_moves,
    drag_segment,
    drag_vertex,
    drag_wire_segment,
)
from schematic_core.geometry import is_orthogonal
from schematic_core.models import Pin, PinBinding, PinEdge, Point, SymbolObject, WireObject


def _pts(*coords) -> list[Point]:
    return [Point(x=x, y=y) for x, y in coords]


def test_drag_vertex_pulls_neighbours_along():
    points = _pts((0, 0), (5, 0), (5, 5))
    assert drag_vertex(points, 1, Point(x=7, y=2)) == _pts((0, 2), (7, 2), (7, 5))


def test_drag_end_vertex():
    points = _pts((0, 0), (5, 0), (5, 5))
    result = drag_vertex(points, 2, Point(x=9, y=8))
    assert result == _pts((0, 0), (9, 0), (9, 8))
    assert is_orthogonal(result)


def test_drag_vertex_out_of_range():
    points = _pts((0, 0), (5, 0))
    assert drag_vertex(points, 4, Point(x=1, y=1)) == points


def test_drag_vertical_segment_moves_horizontally():
    points = _pts((0, 0), (5, 0), (5, 5), (10, 5))
    assert drag_segment(points, 1, Point(x=8, y=3)) == _pts((0, 0), (8, 0), (8, 5), (10, 5))


def test_drag_horizontal_segment_moves_vertically():
    points = _pts((0, 0), (5, 0), (5, 5), (10, 5))
    assert drag_segment(points, 0, Point(x=99, y=2)) == _pts((0, 2), (5, 2), (5, 5), (10, 5))


def test_drag_segment_simplifies_on_commit():
    points = _pts((0, 0), (5, 0), (5, 5), (10, 5))
    # Lining the last segment up with the first collapses the jog
    assert drag_segment(points, 2, Point(x=7, y=0)) == _pts((0, 0), (10, 0))
    # Live frames keep every point
    assert drag_segment(points, 2, Point(x=7, y=0), simplify=False) == _pts((0, 0), (5, 0), (5, 0), (10, 0))


def test_diagonal_segment_does_not_move():
    points = _pts((0, 0), (3, 3))
    assert drag_segment(points, 0, Point(x=9, y=9), simplify=False) == points


# --- Wire segment drags with bound pins ---

def test_bound_pin_slides_along_edge(resistor, bound_wire):
    result = drag_wire_segment(bound_wire, 0, Point(x=6, y=12), [resistor, bound_wire])
    assert result is not None
    assert result.wire.points == _pts((10, 12), (4, 12), (4, 6))
    assert len(result.pin_moves) == 1
    move = result.pin_moves[0]
    assert (move.symbol_id, move.pin_id) == ("R1", "p1")
    assert move.offset == pytest.approx(1 / 3)


def test_drag_onto_corner_is_rejected(resistor, bound_wire):
    assert drag_wire_segment(bound_wire, 0, Point(x=6, y=10), [resistor, bound_wire]) is None


def test_drag_off_symbol_is_rejected(resistor, bound_wire):
    assert drag_wire_segment(bound_wire, 0, Point(x=6, y=8), [resistor, bound_wire]) is None


def test_drag_into_other_pin_is_rejected(resistor, bound_wire):
    crowded = resistor.model_copy(update={
        "pins": [*resistor.pins, Pin(id="p3", edge=PinEdge.LEFT, offset=0.0)],
    })
    assert drag_wire_segment(bound_wire, 0, Point(x=6, y=11), [crowded, bound_wire]) is None


def test_drag_with_missing_symbol_is_rejected(bound_wire):
    assert drag_wire_segment(bound_wire, 0, Point(x=6, y=12), [bound_wire]) is None


def test_drag_unbound_segment(resistor, bound_wire):
    result = drag_wire_segment(bound_wire, 1, Point(x=2, y=0), [resistor, bound_wire])
    assert result.wire.points == _pts((10, 13), (2, 13), (2, 6))
    assert result.pin_moves == []


def test_zero_delta_drag_is_unchanged(resistor, bound_wire):
    result = drag_wire_segment(bound_wire, 0, Point(x=6, y=13), [resistor, bound_wire])
    assert result.wire.points == bound_wire.points
    assert result.pin_moves == []


def test_both_ends_bound_to_same_symbol():
    symbol = SymbolObject(
        id="U1", x=0, y=0, width=10, height=6,
        pins=[
            Pin(id="a", edge=PinEdge.TOP, offset=0.0),
            Pin(id="b", edge=PinEdge.TOP, offset=1.0),
        ],
    )
    # Pins at (1, 0) and (8, 0); a two-point wire along the top edge
    wire = WireObject(
        id="w",
        points=_pts((1, 0), (8, 0)),
        start_binding=PinBinding(symbol_id="U1", pin_id="a"),
        end_binding=PinBinding(symbol_id="U1", pin_id="b"),
    )
    # Moving off the top row takes both pins off their edge
    assert drag_wire_segment(wire, 0, Point(x=4, y=2), [symbol, wire]) is None


def test_apply_pin_moves(resistor):
    updated = apply_pin_moves(resistor, [PinMove(symbol_id="R1", pin_id="p1", offset=0.0)])
    assert updated.pins[0].offset == 0.0
    assert updated.pins[1].offset == 0.5
    assert resistor.pins[0].offset == 0.5
    # Moves for other symbols are ignored
    assert apply_pin_moves(resistor, [PinMove(symbol_id="X", pin_id="p1", offset=0.0)]) is resistor
