"""
Symbol pin geometry - Pin positions, edge detection and pin collisions.

A symbol occupies the cells x..x+width-1, y..y+height-1. Pins live on
its border, never on the four corner cells, and are placed by a
fractional offset along their edge. Pin positions are always computed
from the live symbol state; wires never cache them.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from .models import ObjectType, Pin, PinEdge, Point, SymbolObject


DEFAULT_PIN_OFFSET = 0.5


@dataclass
class SymbolBounds:
    """Inclusive cell bounds of a symbol."""
    x: int
    y: int
    width: int
    height: int
    right: int
    bottom: int


@dataclass
class EdgeHit:
    """A point on a symbol edge, with its normalized offset along that edge."""
    symbol: SymbolObject
    edge: PinEdge
    offset: float
    position: Point


@dataclass
class ClosestEdge:
    """Nearest valid pin cell on one edge of a symbol."""
    edge: PinEdge
    offset: float
    distance: int
    position: Point


@dataclass
class PinHit:
    """A pin found at a grid position."""
    symbol: SymbolObject
    pin: Pin


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def edge_axis(edge: Optional[PinEdge]) -> Optional[str]:
    """
    Axis a wire must leave a pin on.

    Left/right pins exit horizontally, top/bottom pins vertically.
    """
    if edge in (PinEdge.LEFT, PinEdge.RIGHT):
        return "horizontal"
    if edge in (PinEdge.TOP, PinEdge.BOTTOM):
        return "vertical"
    return None


def _edge_length(symbol: SymbolObject, edge: PinEdge) -> int:
    if edge in (PinEdge.LEFT, PinEdge.RIGHT):
        return symbol.height
    return symbol.width


# --- Symbol Bounds ---

def get_bounds(symbol: SymbolObject) -> SymbolBounds:
    return SymbolBounds(
        x=symbol.x,
        y=symbol.y,
        width=symbol.width,
        height=symbol.height,
        right=symbol.x + symbol.width - 1,
        bottom=symbol.y + symbol.height - 1,
    )


def contains_point(symbol: SymbolObject, col: int, row: int) -> bool:
    """Check if a cell is inside a symbol, border included."""
    return (symbol.x <= col < symbol.x + symbol.width
            and symbol.y <= row < symbol.y + symbol.height)


def is_on_border(symbol: SymbolObject, col: int, row: int) -> bool:
    """Check if a cell is on the symbol border, corners included."""
    x, y, width, height = symbol.x, symbol.y, symbol.width, symbol.height
    on_vertical = (col == x or col == x + width - 1) and y <= row < y + height
    on_horizontal = (row == y or row == y + height - 1) and x <= col < x + width
    return on_vertical or on_horizontal


# --- Edge Detection ---

def find_edge(col: int, row: int, symbol: SymbolObject) -> Optional[PinEdge]:
    """
    Find which edge of a symbol a cell is on.

    Corner cells belong to no edge.

    Returns:
        The edge, or None if the cell is not on a pin-capable edge cell
    """
    x, y, width, height = symbol.x, symbol.y, symbol.width, symbol.height

    if col == x and y < row < y + height - 1:
        return PinEdge.LEFT
    if col == x + width - 1 and y < row < y + height - 1:
        return PinEdge.RIGHT
    if row == y and x < col < x + width - 1:
        return PinEdge.TOP
    if row == y + height - 1 and x < col < x + width - 1:
        return PinEdge.BOTTOM
    return None


def calculate_edge_offset(col: int, row: int, symbol: SymbolObject, edge: PinEdge) -> float:
    """Normalized (0-1) offset of a cell along an edge, corners excluded."""
    if edge in (PinEdge.LEFT, PinEdge.RIGHT):
        span = symbol.height - 3
        return (row - symbol.y - 1) / span if span > 0 else DEFAULT_PIN_OFFSET
    if edge in (PinEdge.TOP, PinEdge.BOTTOM):
        span = symbol.width - 3
        return (col - symbol.x - 1) / span if span > 0 else DEFAULT_PIN_OFFSET
    return DEFAULT_PIN_OFFSET


def find_edge_with_offset(col: int, row: int, symbol: SymbolObject) -> Optional[tuple[PinEdge, float]]:
    """Edge and offset for a border cell, or None."""
    edge = find_edge(col, row, symbol)
    if edge is None:
        return None
    return edge, calculate_edge_offset(col, row, symbol, edge)


def find_closest_edge(col: int, row: int, symbol: SymbolObject) -> Optional[ClosestEdge]:
    """
    Find the nearest pin-capable cell on any edge of a symbol.

    Candidates are clamped away from the corners and ranked by Manhattan
    distance; ties go to left, right, top, bottom in that order.
    """
    x, y, width, height = symbol.x, symbol.y, symbol.width, symbol.height
    candidates: list[ClosestEdge] = []

    if height > 2:
        clamped_row = max(y + 1, min(y + height - 2, row))
        offset = (clamped_row - y - 1) / max(1, height - 3)
        for edge, edge_col in ((PinEdge.LEFT, x), (PinEdge.RIGHT, x + width - 1)):
            candidates.append(ClosestEdge(
                edge=edge,
                offset=offset,
                distance=abs(col - edge_col) + abs(row - clamped_row),
                position=Point(x=edge_col, y=clamped_row),
            ))

    if width > 2:
        clamped_col = max(x + 1, min(x + width - 2, col))
        offset = (clamped_col - x - 1) / max(1, width - 3)
        for edge, edge_row in ((PinEdge.TOP, y), (PinEdge.BOTTOM, y + height - 1)):
            candidates.append(ClosestEdge(
                edge=edge,
                offset=offset,
                distance=abs(row - edge_row) + abs(col - clamped_col),
                position=Point(x=clamped_col, y=edge_row),
            ))

    if not candidates:
        return None
    return min(candidates, key=lambda c: c.distance)


# --- Pin Position Calculation ---

def get_pin_position(symbol: SymbolObject, pin: Pin) -> Point:
    """
    Grid position of a pin (x = column, y = row).

    Deterministic in the symbol bounds, the pin edge and the pin offset.
    """
    x, y, width, height = symbol.x, symbol.y, symbol.width, symbol.height
    offset = pin.offset

    if pin.edge == PinEdge.LEFT:
        return Point(x=x, y=_round_half_up(y + 1 + offset * (height - 3)))
    if pin.edge == PinEdge.RIGHT:
        return Point(x=x + width - 1, y=_round_half_up(y + 1 + offset * (height - 3)))
    if pin.edge == PinEdge.TOP:
        return Point(x=_round_half_up(x + 1 + offset * (width - 3)), y=y)
    if pin.edge == PinEdge.BOTTOM:
        return Point(x=_round_half_up(x + 1 + offset * (width - 3)), y=y + height - 1)
    return Point(x=x, y=y)


def get_all_pin_positions(symbol: SymbolObject) -> list[tuple[Pin, Point]]:
    return [(pin, get_pin_position(symbol, pin)) for pin in symbol.pins]


def find_pin_at_position(col: int, row: int, symbol: SymbolObject) -> Optional[Pin]:
    """Find the pin of one symbol at a grid position."""
    for pin in symbol.pins:
        pos = get_pin_position(symbol, pin)
        if pos.x == col and pos.y == row:
            return pin
    return None


def find_pin_by_id(symbol: SymbolObject, pin_id: str) -> Optional[Pin]:
    for pin in symbol.pins:
        if pin.id == pin_id:
            return pin
    return None


# --- Pin Validation ---

def _pin_slot(symbol: SymbolObject, edge: PinEdge, offset: float) -> int:
    """Cell index along an edge that an offset quantizes to."""
    return _round_half_up(offset * (_edge_length(symbol, edge) - 3))


def check_pin_collision(
    symbol: SymbolObject,
    edge: PinEdge,
    offset: float,
    exclude_pin_id: Optional[str] = None,
) -> bool:
    """
    Check if a pin at (edge, offset) would land on the cell of another pin.

    Args:
        symbol: Symbol to check
        edge: Edge of the candidate pin
        offset: Normalized offset of the candidate pin
        exclude_pin_id: Pin to ignore (the one being moved)

    Returns:
        True if another pin on that edge quantizes to the same cell
    """
    slot = _pin_slot(symbol, edge, offset)
    for pin in symbol.pins:
        if pin.id == exclude_pin_id or pin.edge != edge:
            continue
        if _pin_slot(symbol, edge, pin.offset) == slot:
            return True
    return False


def is_pin_on_valid_edge(symbol: SymbolObject, pin: Pin) -> bool:
    """Check that a pin resolves to a non-corner edge cell."""
    pos = get_pin_position(symbol, pin)
    return find_edge(pos.x, pos.y, symbol) is not None


# --- Symbol Search ---

def find_all_symbols(objects: Iterable) -> list[SymbolObject]:
    return [o for o in objects if o.type == ObjectType.SYMBOL.value]


def find_symbol_by_id(symbol_id: str, objects: Iterable) -> Optional[SymbolObject]:
    for obj in objects:
        if obj.type == ObjectType.SYMBOL.value and obj.id == symbol_id:
            return obj
    return None


def find_symbol_at_position(col: int, row: int, objects: Iterable) -> Optional[SymbolObject]:
    for symbol in find_all_symbols(objects):
        if contains_point(symbol, col, row):
            return symbol
    return None


def find_symbol_edge_at_point(col: int, row: int, objects: Iterable) -> Optional[EdgeHit]:
    """
    Find the symbol edge under a cell, for pin placement and wire binding.

    Returns:
        EdgeHit for the first symbol whose non-corner edge holds the cell, or None
    """
    for symbol in find_all_symbols(objects):
        edge = find_edge(col, row, symbol)
        if edge:
            return EdgeHit(
                symbol=symbol,
                edge=edge,
                offset=calculate_edge_offset(col, row, symbol, edge),
                position=Point(x=col, y=row),
            )
    return None


def find_pin_at_point(col: int, row: int, objects: Iterable) -> Optional[PinHit]:
    """Find a pin at a grid position across all symbols."""
    for symbol in find_all_symbols(objects):
        pin = find_pin_at_position(col, row, symbol)
        if pin:
            return PinHit(symbol=symbol, pin=pin)
    return None
