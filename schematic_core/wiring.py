"""
Wire connectivity - Endpoint bindings, floating ends, merging and rubberbanding.

Built on the line geometry module and the symbol pin contract. Nothing
here mutates the objects it is given: every operation returns new wire
objects (or the ids to delete) and the caller wraps them in an undoable
edit before committing. All returned paths are orthogonal.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from .geometry import (
    find_point_on_line,
    get_direction,
    orthogonalize,
    points_equal,
)
from .models import (
    Direction,
    ObjectType,
    PinBinding,
    PinEdge,
    Point,
    SymbolObject,
    WireObject,
    generate_wire_id,
)
from .symbols import edge_axis, find_pin_at_point, find_pin_by_id, get_pin_position

logger = logging.getLogger(__name__)


@dataclass
class EndpointRef:
    """One end of a wire."""
    point: Point
    is_start: bool


@dataclass
class BoundEnd:
    """A wire end bound to a pin."""
    wire: WireObject
    is_start: bool
    binding: PinBinding


@dataclass
class FloatingEnd:
    """A wire end that is neither bound nor touching anything."""
    wire: WireObject
    is_start: bool
    point: Point


@dataclass
class SharedEnd:
    """Another wire whose end coincides with an end of this wire."""
    wire: WireObject
    point: Point
    this_is_start: bool
    other_is_start: bool


@dataclass
class WireMerge:
    """Result of merging two wires: the wire to create and the ids to delete."""
    wire: WireObject
    deleted_ids: list[str] = field(default_factory=list)


# --- Wire Search ---

def find_all_wires(objects: Iterable) -> list[WireObject]:
    return [o for o in objects if o.type == ObjectType.WIRE.value]


def find_wire_by_id(wire_id: str, objects: Iterable) -> Optional[WireObject]:
    for obj in objects:
        if obj.type == ObjectType.WIRE.value and obj.id == wire_id:
            return obj
    return None


# --- Endpoint Utilities ---

def get_start_point(wire: WireObject) -> Optional[Point]:
    return wire.points[0] if wire.points else None


def get_end_point(wire: WireObject) -> Optional[Point]:
    return wire.points[-1] if wire.points else None


def get_endpoint(wire: WireObject, is_start: bool) -> Optional[Point]:
    return get_start_point(wire) if is_start else get_end_point(wire)


def get_endpoint_by_index(wire: WireObject, index: int) -> Optional[EndpointRef]:
    """Endpoint for a point index (0 or last), None for interior indexes."""
    if not wire.points:
        return None
    if index == 0:
        return EndpointRef(point=wire.points[0], is_start=True)
    if index == len(wire.points) - 1:
        return EndpointRef(point=wire.points[-1], is_start=False)
    return None


def get_endpoint_exit_direction(wire: WireObject, is_start: bool) -> Direction:
    """
    Direction a wire leaves one of its ends, pointing into the wire.

    Returns Direction.NONE for wires with fewer than 2 points.
    """
    if not wire.points or len(wire.points) < 2:
        return Direction.NONE
    if is_start:
        return get_direction(wire.points[0], wire.points[1])
    return get_direction(wire.points[-1], wire.points[-2])


# --- Binding Utilities ---

def get_endpoint_binding(wire: WireObject, is_start: bool) -> Optional[PinBinding]:
    return wire.start_binding if is_start else wire.end_binding


def is_endpoint_bound(wire: WireObject, is_start: bool) -> bool:
    return get_endpoint_binding(wire, is_start) is not None


def has_any_binding(wire: WireObject) -> bool:
    return is_endpoint_bound(wire, True) or is_endpoint_bound(wire, False)


def find_wires_bound_to_symbol(symbol_id: str, objects: Iterable) -> list[BoundEnd]:
    """Find every wire end bound to any pin of a symbol."""
    results: list[BoundEnd] = []
    for wire in find_all_wires(objects):
        if wire.start_binding and wire.start_binding.symbol_id == symbol_id:
            results.append(BoundEnd(wire=wire, is_start=True, binding=wire.start_binding))
        if wire.end_binding and wire.end_binding.symbol_id == symbol_id:
            results.append(BoundEnd(wire=wire, is_start=False, binding=wire.end_binding))
    return results


def find_wires_bound_to_pin(symbol_id: str, pin_id: str, objects: Iterable) -> list[BoundEnd]:
    """Find every wire end bound to one specific pin."""
    return [
        bound for bound in find_wires_bound_to_symbol(symbol_id, objects)
        if bound.binding.pin_id == pin_id
    ]


# --- Floating Endpoint Detection ---

def is_floating_endpoint(wire: WireObject, is_start: bool, objects: Sequence) -> bool:
    """
    Check if a wire end is floating.

    An end is connected if, checked in this order:
    1. it is bound to a pin
    2. it lies on any point of another wire (vertex or segment)
    3. it sits on a pin position of any symbol

    Args:
        wire: Wire to check
        is_start: True for the start end, False for the end end
        objects: All page objects

    Returns:
        True only if none of the three apply
    """
    if is_endpoint_bound(wire, is_start):
        return False

    point = get_endpoint(wire, is_start)
    if point is None:
        return False

    for other in find_all_wires(objects):
        if other.id == wire.id:
            continue
        if find_point_on_line(point, other):
            return False

    if find_pin_at_point(point.x, point.y, objects):
        return False

    return True


def find_all_floating_endpoints(objects: Sequence) -> list[FloatingEnd]:
    results: list[FloatingEnd] = []
    for wire in find_all_wires(objects):
        for is_start in (True, False):
            if is_floating_endpoint(wire, is_start, objects):
                results.append(FloatingEnd(wire=wire, is_start=is_start, point=get_endpoint(wire, is_start)))
    return results


def find_floating_endpoint_at_point(col: int, row: int, objects: Iterable) -> Optional[FloatingEnd]:
    """Find an unbound wire end exactly at a cell (drop target for merges)."""
    point = Point(x=col, y=row)
    for wire in find_all_wires(objects):
        for is_start in (True, False):
            end = get_endpoint(wire, is_start)
            if points_equal(point, end) and not is_endpoint_bound(wire, is_start):
                return FloatingEnd(wire=wire, is_start=is_start, point=end)
    return None


# --- Wire-to-Wire Connections ---

def is_point_on_any_wire(col: int, row: int, objects: Iterable, exclude_wire_id: Optional[str] = None) -> bool:
    point = Point(x=col, y=row)
    for wire in find_all_wires(objects):
        if wire.id == exclude_wire_id:
            continue
        if find_point_on_line(point, wire):
            return True
    return False


def find_connected_wires(wire: WireObject, objects: Iterable) -> list[SharedEnd]:
    """Find wires with an end coinciding with an end of `wire`."""
    results: list[SharedEnd] = []
    this_ends = [(get_start_point(wire), True), (get_end_point(wire), False)]

    for other in find_all_wires(objects):
        if other.id == wire.id:
            continue
        other_ends = [(get_start_point(other), True), (get_end_point(other), False)]
        for this_point, this_is_start in this_ends:
            for other_point, other_is_start in other_ends:
                if points_equal(this_point, other_point):
                    results.append(SharedEnd(
                        wire=other,
                        point=this_point,
                        this_is_start=this_is_start,
                        other_is_start=other_is_start,
                    ))
    return results


# --- Wire Merging ---

def merge_wires(
    wire1: WireObject,
    wire1_is_start: bool,
    wire2: WireObject,
    wire2_is_start: bool,
) -> Optional[WireMerge]:
    """
    Merge two wires whose chosen ends coincide.

    The merged wire runs from wire1's other end to wire2's other end and
    keeps the bindings of those two outer ends. Its net is wire1's, or
    wire2's when wire1 has none.

    Args:
        wire1: Primary wire (style and net come from here)
        wire1_is_start: Which end of wire1 is being joined
        wire2: Secondary wire
        wire2_is_start: Which end of wire2 is being joined

    Returns:
        WireMerge with a new wire and both original ids to delete,
        or None if the chosen ends are not the same point
    """
    if len(wire1.points) < 2 or len(wire2.points) < 2:
        return None
    if not points_equal(get_endpoint(wire1, wire1_is_start), get_endpoint(wire2, wire2_is_start)):
        return None

    points1 = list(reversed(wire1.points)) if wire1_is_start else list(wire1.points)
    points2 = list(wire2.points) if wire2_is_start else list(reversed(wire2.points))

    # Shared point appears once, in the interior
    merged_points = points1 + points2[1:]

    start_binding = wire1.end_binding if wire1_is_start else wire1.start_binding
    end_binding = wire2.end_binding if wire2_is_start else wire2.start_binding

    merged = WireObject(
        id=generate_wire_id(),
        points=orthogonalize(merged_points),
        style=wire1.style,
        net=wire1.net or wire2.net or "",
        start_binding=start_binding,
        end_binding=end_binding,
        z_index=wire1.z_index,
    )
    logger.debug("Merged wires %s and %s into %s", wire1.id, wire2.id, merged.id)
    return WireMerge(wire=merged, deleted_ids=[wire1.id, wire2.id])


def extend_wire(
    wire: WireObject,
    from_start: bool,
    new_points: Sequence[Point],
    new_binding: Optional[PinBinding] = None,
) -> WireObject:
    """
    Extend a wire from one of its ends.

    Args:
        wire: Existing wire
        from_start: True to extend from the start end, False from the end end
        new_points: Path drawn outward, beginning at the extended end
        new_binding: Binding for the new outer end (or None)

    Returns:
        Copy of the wire with the extended path; the untouched end keeps its binding
    """
    if not new_points:
        return wire.model_copy()

    if from_start:
        extended = list(reversed(new_points))[:-1] + list(wire.points)
        start_binding, end_binding = new_binding, wire.end_binding
    else:
        extended = list(wire.points) + list(new_points[1:])
        start_binding, end_binding = wire.start_binding, new_binding

    return wire.model_copy(update={
        "points": orthogonalize(extended),
        "start_binding": start_binding,
        "end_binding": end_binding,
    })


# --- Wire Rubberbanding (endpoint follows pin) ---

def update_endpoint_position(
    wire: WireObject,
    is_start: bool,
    new_pin_position: Point,
    edge: Optional[PinEdge] = None,
) -> list[Point]:
    """
    Move a bound wire end to its pin's new position, keeping the path orthogonal.

    The pin edge decides the exit axis: left/right pins keep the end
    segment horizontal, top/bottom pins keep it vertical. Without an edge
    the current end segment's orientation is kept.

    - 3+ points: the adjacent vertex moves on that one axis. If the end
      segment was not on the exit axis, a corner is inserted instead.
    - 2 points: if the move would leave a diagonal, two interior points
      are inserted as a staircase through the midpoint on the exit axis.
    - 1 point: the wire is rebuilt from that point to the new position.

    Returns:
        New point list for the wire (always orthogonal)
    """
    points = list(wire.points)
    if not points:
        return points
    if len(points) == 1:
        # Collapsed wire: both ends sit on the single point
        points = [points[0], points[0]]

    end_index = 0 if is_start else len(points) - 1
    adjacent_index = 1 if is_start else len(points) - 2
    old_end = points[end_index]
    adjacent = points[adjacent_index]

    axis = edge_axis(edge)
    if axis is None:
        axis = "vertical" if old_end.x == adjacent.x and old_end.y != adjacent.y else "horizontal"
    horizontal = axis == "horizontal"

    points[end_index] = new_pin_position

    if len(points) >= 3:
        was_horizontal = old_end.y == adjacent.y
        was_vertical = old_end.x == adjacent.x
        if horizontal and was_horizontal:
            points[adjacent_index] = Point(x=adjacent.x, y=new_pin_position.y)
        elif not horizontal and was_vertical:
            points[adjacent_index] = Point(x=new_pin_position.x, y=adjacent.y)
        else:
            if horizontal:
                corner = Point(x=adjacent.x, y=new_pin_position.y)
            else:
                corner = Point(x=new_pin_position.x, y=adjacent.y)
            points.insert(1 if is_start else len(points) - 1, corner)
    else:
        first, last = points[0], points[1]
        if first.x != last.x and first.y != last.y:
            if horizontal:
                mid_x = (first.x + last.x) // 2
                points = [first, Point(x=mid_x, y=first.y), Point(x=mid_x, y=last.y), last]
            else:
                mid_y = (first.y + last.y) // 2
                points = [first, Point(x=first.x, y=mid_y), Point(x=last.x, y=mid_y), last]

    return orthogonalize(points, horizontal_first=horizontal)


def rubberband_symbol(symbol: SymbolObject, objects: Iterable) -> list[WireObject]:
    """
    Re-route every wire bound to a symbol after the symbol has moved.

    Pin positions are read from the symbol as given (its new state).

    Args:
        symbol: The symbol in its new position
        objects: All page objects (wires are read from here)

    Returns:
        Updated copies of the affected wires, one per wire
    """
    updated: dict[str, WireObject] = {}

    for bound in find_wires_bound_to_symbol(symbol.id, objects):
        pin = find_pin_by_id(symbol, bound.binding.pin_id)
        if pin is None:
            logger.debug("Wire %s bound to missing pin %s on %s", bound.wire.id, bound.binding.pin_id, symbol.id)
            continue

        wire = updated.get(bound.wire.id, bound.wire)
        new_points = update_endpoint_position(
            wire, bound.is_start, get_pin_position(symbol, pin), edge=pin.edge
        )
        updated[wire.id] = wire.model_copy(update={"points": new_points})

    return list(updated.values())
