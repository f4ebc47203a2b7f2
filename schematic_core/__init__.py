"""
Schematic Core - Wire connectivity and derived state for ASCII schematics.

This package provides the pure engine used by both the backend API and
the CLI: models, line geometry, the symbol pin contract, wire operations,
interactive edit helpers, derived-state computation, validation and
analysis.
"""

import logging

from .models import (
    # Enums
    ObjectType,
    LineStyle,
    PinEdge,
    Direction,
    Corner,
    EndpointSide,
    # Core models
    Point,
    PinBinding,
    Pin,
    LineObject,
    WireObject,
    BoxObject,
    SymbolObject,
    TextObject,
    Junction,
    WireJunction,
    WireNoConnect,
    Page,
    # Request models (for API)
    PageRequest,
    MergeWiresRequest,
    ExtendWireRequest,
    RubberbandRequest,
    DragSegmentRequest,
    PreviewPathRequest,
)

from .geometry import simplify_points, orthogonalize, get_preview_path, merge_lines
from .wiring import merge_wires, extend_wire, update_endpoint_position, rubberband_symbol, is_floating_endpoint
from .editing import drag_vertex, drag_segment, drag_wire_segment, apply_pin_moves
from .derived import DerivedStateComputer, DerivedState, compute
from .validation import validate_page, validation_summary, ValidationIssue, IssueSeverity
from .analysis import summarize_page, find_wire_networks

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Enums
    "ObjectType",
    "LineStyle",
    "PinEdge",
    "Direction",
    "Corner",
    "EndpointSide",
    # Models
    "Point",
    "PinBinding",
    "Pin",
    "LineObject",
    "WireObject",
    "BoxObject",
    "SymbolObject",
    "TextObject",
    "Junction",
    "WireJunction",
    "WireNoConnect",
    "Page",
    # Request models
    "PageRequest",
    "MergeWiresRequest",
    "ExtendWireRequest",
    "RubberbandRequest",
    "DragSegmentRequest",
    "PreviewPathRequest",
    # Geometry
    "simplify_points",
    "orthogonalize",
    "get_preview_path",
    "merge_lines",
    # Wires
    "merge_wires",
    "extend_wire",
    "update_endpoint_position",
    "rubberband_symbol",
    "is_floating_endpoint",
    # Editing
    "drag_vertex",
    "drag_segment",
    "drag_wire_segment",
    "apply_pin_moves",
    # Derived state
    "DerivedStateComputer",
    "DerivedState",
    "compute",
    # Validation
    "validate_page",
    "validation_summary",
    "ValidationIssue",
    "IssueSeverity",
    # Analysis
    "summarize_page",
    "find_wire_networks",
]
