"""
Interactive edit helpers - Vertex and segment drags that keep paths orthogonal.

Each helper computes the edited geometry for the select tool; the tool
shows intermediate frames with `simplify=False` and commits the
simplified result through an undoable command. Dragging a wire segment
that carries a bound end slides the pin along its symbol edge; that
relocation is all-or-nothing.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .geometry import orthogonalize, simplify_points
from .models import Point, SymbolObject, WireObject
from .symbols import (
    calculate_edge_offset,
    check_pin_collision,
    find_edge,
    find_pin_by_id,
    find_symbol_by_id,
)

logger = logging.getLogger(__name__)


@dataclass
class PinMove:
    """A pin relocated along its edge."""
    symbol_id: str
    pin_id: str
    offset: float


@dataclass
class SegmentDrag:
    """Result of a wire segment drag: the new wire and any pins it carried along."""
    wire: WireObject
    pin_moves: list[PinMove] = field(default_factory=list)


def drag_vertex(points: Sequence[Point], index: int, target: Point, simplify: bool = True) -> list[Point]:
    """
    Move one vertex, dragging its neighbours so both adjoining segments stay orthogonal.

    A neighbour joined by a horizontal segment follows the new row; one
    joined by a vertical segment follows the new column.

    Args:
        points: Current polyline points
        index: Vertex to move
        target: New vertex position
        simplify: Drop duplicate and collinear points (on commit)

    Returns:
        New point list (unchanged copy for an out-of-range index)
    """
    if not 0 <= index < len(points):
        return list(points)

    original = list(points)
    result = list(points)
    result[index] = target
    current = original[index]

    for neighbour in (index - 1, index + 1):
        if not 0 <= neighbour < len(original):
            continue
        other = original[neighbour]
        if other.y == current.y:
            result[neighbour] = Point(x=result[neighbour].x, y=target.y)
        elif other.x == current.x:
            result[neighbour] = Point(x=target.x, y=result[neighbour].y)

    return simplify_points(result) if simplify else result


def drag_segment(points: Sequence[Point], segment_index: int, target: Point, simplify: bool = True) -> list[Point]:
    """
    Translate one segment perpendicular to itself.

    Horizontal segments only move vertically, vertical segments only
    horizontally; diagonal segments do not move.

    Args:
        points: Current polyline points
        segment_index: Segment between points[i] and points[i + 1]
        target: Cursor position; only the perpendicular coordinate is used
        simplify: Clean up the path (on commit)

    Returns:
        New point list
    """
    if not 0 <= segment_index < len(points) - 1:
        return list(points)

    result = list(points)
    p1, p2 = result[segment_index], result[segment_index + 1]

    if p1.y == p2.y:
        result[segment_index] = Point(x=p1.x, y=target.y)
        result[segment_index + 1] = Point(x=p2.x, y=target.y)
    elif p1.x == p2.x:
        result[segment_index] = Point(x=target.x, y=p1.y)
        result[segment_index + 1] = Point(x=target.x, y=p2.y)

    return orthogonalize(result) if simplify else result


def apply_pin_moves(symbol: SymbolObject, moves: Sequence[PinMove]) -> SymbolObject:
    """Copy of a symbol with the given pin offsets applied."""
    offsets = {m.pin_id: m.offset for m in moves if m.symbol_id == symbol.id}
    if not offsets:
        return symbol
    pins = [
        pin.model_copy(update={"offset": offsets[pin.id]}) if pin.id in offsets else pin
        for pin in symbol.pins
    ]
    return symbol.model_copy(update={"pins": pins})


def drag_wire_segment(
    wire: WireObject,
    segment_index: int,
    target: Point,
    objects: Sequence,
) -> Optional[SegmentDrag]:
    """
    Drag a wire segment, sliding bound pins along their edges.

    If the dragged segment moves a bound end, the bound pin must stay on
    the same edge of its symbol and must not land on another pin's cell.

    Args:
        wire: Wire being edited
        segment_index: Segment to drag
        target: Cursor position
        objects: All page objects (symbols are read from here)

    Returns:
        SegmentDrag with the new wire and pin moves, or None when any pin
        relocation is rejected (nothing is applied in that case)
    """
    moved = drag_segment(wire.points, segment_index, target, simplify=False)
    if moved == list(wire.points):
        return SegmentDrag(wire=wire.model_copy())

    pin_moves: list[PinMove] = []
    symbols: dict[str, SymbolObject] = {}
    last_segment = len(wire.points) - 2

    for is_start, touches in ((True, segment_index == 0), (False, segment_index == last_segment)):
        binding = wire.start_binding if is_start else wire.end_binding
        if not touches or binding is None:
            continue

        symbol = symbols.get(binding.symbol_id) or find_symbol_by_id(binding.symbol_id, objects)
        pin = find_pin_by_id(symbol, binding.pin_id) if symbol else None
        if pin is None:
            logger.warning("Rejected drag of %s: binding %s/%s does not resolve",
                           wire.id, binding.symbol_id, binding.pin_id)
            return None

        end = moved[0] if is_start else moved[-1]
        edge = find_edge(end.x, end.y, symbol)
        if edge != pin.edge:
            logger.warning("Rejected drag of %s: pin %s would leave the %s edge", wire.id, pin.id, pin.edge.value)
            return None

        offset = calculate_edge_offset(end.x, end.y, symbol, edge)
        if check_pin_collision(symbol, edge, offset, exclude_pin_id=pin.id):
            logger.warning("Rejected drag of %s: pin %s collides on %s", wire.id, pin.id, symbol.id)
            return None

        move = PinMove(symbol_id=symbol.id, pin_id=pin.id, offset=offset)
        symbols[symbol.id] = apply_pin_moves(symbol, [move])
        pin_moves.append(move)

    return SegmentDrag(
        wire=wire.model_copy(update={"points": orthogonalize(moved)}),
        pin_moves=pin_moves,
    )
