"""Shared fixtures for schematic core tests."""

import pytest

from schematic_core.models import Pin, PinBinding, PinEdge, Point, SymbolObject, WireObject


@pytest.fixture
def resistor() -> SymbolObject:
    """8x6 symbol at (10, 10) with one pin on the left and one on the right edge.

    Pin cells: left (10, 13), right (17, 13) at offset 0.5 over a 3-cell span.
    """
    return SymbolObject(
        id="R1",
        x=10,
        y=10,
        width=8,
        height=6,
        pins=[
            Pin(id="p1", edge=PinEdge.LEFT, offset=0.5, name="1"),
            Pin(id="p2", edge=PinEdge.RIGHT, offset=0.5, name="2"),
        ],
    )


@pytest.fixture
def bound_wire() -> WireObject:
    """Wire from the resistor's left pin out to the left, then up."""
    return WireObject(
        id="w-bound",
        points=[Point(x=10, y=13), Point(x=4, y=13), Point(x=4, y=6)],
        start_binding=PinBinding(symbol_id="R1", pin_id="p1"),
    )
