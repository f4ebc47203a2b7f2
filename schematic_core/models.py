"""
Core data models for schematic pages.

These models define the canonical schema for a page:
- Primitives authored by the user (lines, wires, boxes, symbols, text)
- Derived objects computed from primitives (junctions, no-connect markers)
- Request models for the backend API

Field Naming Convention:
- Python attributes are snake_case (`start_binding`, `z_index`)
- JSON uses camelCase (`startBinding`, `zIndex`), matching the editor's
  saved page format; both spellings are accepted on input
"""

import uuid
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ObjectType(str, Enum):
    """Type tags for every object that can appear in a render list."""
    LINE = "line"
    JUNCTION = "junction"
    WIRE = "wire"
    WIRE_JUNCTION = "wire-junction"
    WIRE_NOCONNECT = "wire-noconnect"
    BOX = "box"
    SYMBOL = "symbol"
    TEXT = "text"


DERIVED_TYPES = frozenset({
    ObjectType.JUNCTION.value,
    ObjectType.WIRE_JUNCTION.value,
    ObjectType.WIRE_NOCONNECT.value,
})


class LineStyle(str, Enum):
    """Visual styles for lines and wires."""
    SINGLE = "single"
    DOUBLE = "double"
    THICK = "thick"


class PinEdge(str, Enum):
    """Edge of a symbol that a pin sits on."""
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


class Direction(str, Enum):
    """Grid direction of a segment, from its first point to its second."""
    RIGHT = "right"
    LEFT = "left"
    UP = "up"
    DOWN = "down"
    NONE = "none"


class Corner(str, Enum):
    """Corner roles used to pick a corner glyph."""
    TL = "tl"
    TR = "tr"
    BL = "bl"
    BR = "br"


class EndpointSide(str, Enum):
    """Which end of a polyline."""
    START = "start"
    END = "end"


def generate_line_id() -> str:
    """Generate a unique line ID."""
    return f"line-{uuid.uuid4().hex[:8]}"


def generate_wire_id() -> str:
    """Generate a unique wire ID."""
    return f"wire-{uuid.uuid4().hex[:8]}"


class SchematicModel(BaseModel):
    """Base model: camelCase JSON aliases, snake_case attributes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Convert to a JSON-serializable dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class Point(SchematicModel):
    """An integer grid cell. Equality is exact."""
    model_config = ConfigDict(frozen=True)

    x: int
    y: int

    def __repr__(self) -> str:
        return f"Point({self.x}, {self.y})"


class PinBinding(SchematicModel):
    """Logical reference from a wire end to a symbol pin (no geometry)."""
    model_config = ConfigDict(frozen=True)

    symbol_id: str
    pin_id: str


class Pin(SchematicModel):
    """A connection point on a symbol edge."""
    id: str = Field(default_factory=lambda: f"pin-{uuid.uuid4().hex[:8]}")
    edge: PinEdge = PinEdge.LEFT
    offset: float = 0.5  # 0.0 - 1.0 along the edge, corner cells excluded
    name: str = ""


# --- Primitives ---

class LineObject(SchematicModel):
    """A purely visual orthogonal polyline."""
    type: Literal["line"] = "line"
    id: str = Field(default_factory=generate_line_id)
    points: list[Point] = Field(default_factory=list)
    style: LineStyle = LineStyle.SINGLE
    z_index: int = 0


class WireObject(SchematicModel):
    """An electrical orthogonal polyline, optionally bound to pins at its ends."""
    type: Literal["wire"] = "wire"
    id: str = Field(default_factory=generate_wire_id)
    points: list[Point] = Field(default_factory=list)
    style: LineStyle = LineStyle.SINGLE
    net: str = ""
    start_binding: Optional[PinBinding] = None
    end_binding: Optional[PinBinding] = None
    z_index: int = 0


class BoxObject(SchematicModel):
    """A rectangle drawn on the page."""
    type: Literal["box"] = "box"
    id: str = Field(default_factory=lambda: f"box-{uuid.uuid4().hex[:8]}")
    x: int = 0
    y: int = 0
    width: int = 10
    height: int = 3
    style: LineStyle = LineStyle.SINGLE
    z_index: int = 0


class SymbolObject(SchematicModel):
    """A component body with pins on its edges."""
    type: Literal["symbol"] = "symbol"
    id: str = Field(default_factory=lambda: f"sym-{uuid.uuid4().hex[:8]}")
    x: int = 0
    y: int = 0
    width: int = 8
    height: int = 6
    pins: list[Pin] = Field(default_factory=list)
    z_index: int = 0


class TextObject(SchematicModel):
    """A free text label."""
    type: Literal["text"] = "text"
    id: str = Field(default_factory=lambda: f"text-{uuid.uuid4().hex[:8]}")
    x: int = 0
    y: int = 0
    text: str = ""
    z_index: int = 0


PrimitiveObject = Annotated[
    Union[LineObject, WireObject, BoxObject, SymbolObject, TextObject],
    Field(discriminator="type"),
]

Polyline = Union[LineObject, WireObject]


# --- Derived objects (never persisted, never selectable) ---

class Junction(SchematicModel):
    """Visual junction where lines meet in a T or at an interior vertex."""
    type: Literal["junction"] = "junction"
    id: str
    x: int
    y: int
    connected_lines: list[str] = Field(default_factory=list)
    style: LineStyle = LineStyle.SINGLE
    derived: bool = True
    selectable: bool = False

    @property
    def point(self) -> Point:
        return Point(x=self.x, y=self.y)


class WireJunction(SchematicModel):
    """Electrical junction where wires meet in a T or at an interior vertex."""
    type: Literal["wire-junction"] = "wire-junction"
    id: str
    x: int
    y: int
    connected_wires: list[str] = Field(default_factory=list)
    net: str = ""
    style: LineStyle = LineStyle.SINGLE
    derived: bool = True
    selectable: bool = False

    @property
    def point(self) -> Point:
        return Point(x=self.x, y=self.y)


class WireNoConnect(SchematicModel):
    """Marker on a wire end that connects to nothing."""
    type: Literal["wire-noconnect"] = "wire-noconnect"
    id: str
    x: int
    y: int
    wire_id: str
    endpoint: EndpointSide
    derived: bool = True
    selectable: bool = False

    @property
    def point(self) -> Point:
        return Point(x=self.x, y=self.y)


DerivedObject = Annotated[
    Union[Junction, WireJunction, WireNoConnect],
    Field(discriminator="type"),
]


def drop_derived_entries(entries: list) -> list:
    """Strip derived objects from raw page entries; non-dict entries are kept for validation."""
    return [
        o for o in entries
        if not isinstance(o, dict)
        or (o.get("type") not in DERIVED_TYPES and not o.get("derived", False))
    ]


class Page(SchematicModel):
    """
    A page of primitives.
    This is the unit handed to the derived-state computer; derived objects
    are never part of it.
    """
    id: str = Field(default_factory=lambda: f"page-{uuid.uuid4().hex[:8]}")
    name: str = "Untitled Page"
    objects: list[PrimitiveObject] = Field(default_factory=list)

    @classmethod
    def from_json_dict(cls, data: dict) -> "Page":
        """Create a Page from a JSON dict, dropping any derived objects."""
        return cls(
            id=data.get("id", f"page-{uuid.uuid4().hex[:8]}"),
            name=data.get("name", "Untitled Page"),
            objects=drop_derived_entries(data.get("objects", [])),
        )

    def get_object(self, object_id: str) -> Optional[Any]:
        """Get an object by ID (O(n))."""
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        return None


# --- API Request/Response Models ---

class PageRequest(SchematicModel):
    """A snapshot of a page's primitive objects."""
    objects: list[PrimitiveObject] = Field(default_factory=list)

    @field_validator("objects", mode="before")
    @classmethod
    def _drop_derived(cls, value: Any) -> Any:
        if isinstance(value, list):
            return drop_derived_entries(value)
        return value


class MergeWiresRequest(SchematicModel):
    """Request to merge two wires at coinciding free ends."""
    wire1: WireObject
    wire1_is_start: bool
    wire2: WireObject
    wire2_is_start: bool


class ExtendWireRequest(SchematicModel):
    """Request to extend a wire from one of its ends."""
    wire: WireObject
    from_start: bool
    new_points: list[Point]
    new_binding: Optional[PinBinding] = None


class RubberbandRequest(PageRequest):
    """Request to re-route wires bound to a symbol that has moved."""
    symbol_id: str


class DragSegmentRequest(PageRequest):
    """Request to drag one segment of a wire."""
    wire_id: str
    segment_index: int
    target: Point


class PreviewPathRequest(SchematicModel):
    """Request for an orthogonal preview path."""
    anchor: Point
    cursor: Point
    horizontal_first: bool = True
