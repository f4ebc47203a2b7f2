"""
Derived state - Junctions and no-connect markers computed from primitives.

Derived objects are ephemeral: they are recomputed from scratch after every
committed change to a page and never stored with it. The computer holds no
state between calls, so compute(objects) is a pure transform of a snapshot.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from .geometry import point_on_segment
from .models import (
    DerivedObject,
    EndpointSide,
    Junction,
    LineStyle,
    ObjectType,
    WireJunction,
    WireNoConnect,
)

logger = logging.getLogger(__name__)


# Lower renders first (further back)
RENDER_ORDER: dict[str, int] = {
    ObjectType.LINE.value: 20,
    ObjectType.JUNCTION.value: 25,
    ObjectType.WIRE.value: 30,
    ObjectType.WIRE_JUNCTION.value: 35,
    ObjectType.WIRE_NOCONNECT.value: 36,
    ObjectType.BOX.value: 40,
    ObjectType.SYMBOL.value: 50,
    ObjectType.TEXT.value: 60,
}

DEFAULT_RENDER_ORDER = 50

_STYLE_PRECEDENCE = (LineStyle.THICK, LineStyle.DOUBLE)


@dataclass
class _Touch:
    """One polyline touching a grid point."""
    obj: object
    is_endpoint: bool


@dataclass
class DerivedState:
    """Output of one compute: derived objects and the sorted render list."""
    derived_objects: list[DerivedObject] = field(default_factory=list)
    render_list: list = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "derivedObjects": [o.to_json_dict() for o in self.derived_objects],
            "renderList": [o.to_json_dict() for o in self.render_list],
        }


def _usable(objects: Iterable, type_name: str) -> list:
    result = []
    for obj in objects:
        if obj.type != type_name:
            continue
        if len(obj.points) < 2:
            logger.debug("Skipping %s %s with %d point(s)", type_name, obj.id, len(obj.points))
            continue
        result.append(obj)
    return result


def _collect_touches(polylines: Sequence) -> dict[tuple[int, int], list[_Touch]]:
    """
    Group every point touched by a polyline, in first-seen order.

    Every vertex is recorded, flagged when it is one of the polyline's two
    ends. Then, wherever a vertex of one polyline lies inside a segment of
    another, the segment's owner is recorded at that point as a
    non-endpoint touch. Crossings with no vertex at the crossing point are
    not touches.
    """
    touches: dict[tuple[int, int], list[_Touch]] = {}

    for obj in polylines:
        last = len(obj.points) - 1
        for i, pt in enumerate(obj.points):
            touches.setdefault((pt.x, pt.y), []).append(_Touch(obj=obj, is_endpoint=i in (0, last)))

    for obj in polylines:
        for p1, p2 in zip(obj.points, obj.points[1:]):
            for other in polylines:
                if other.id == obj.id:
                    continue
                for pt in other.points:
                    if (pt.x == p1.x and pt.y == p1.y) or (pt.x == p2.x and pt.y == p2.y):
                        continue
                    if not point_on_segment(pt, p1, p2):
                        continue
                    existing = touches.get((pt.x, pt.y))
                    if existing is not None and not any(t.obj.id == obj.id for t in existing):
                        existing.append(_Touch(obj=obj, is_endpoint=False))

    return touches


def _is_junction(refs: list[_Touch]) -> bool:
    """Two or more distinct polylines, at least one touching mid-path."""
    if len({t.obj.id for t in refs}) < 2:
        return False
    return any(not t.is_endpoint for t in refs)


def _junction_style(refs: list[_Touch]) -> LineStyle:
    styles = {t.obj.style for t in refs}
    for style in _STYLE_PRECEDENCE:
        if style in styles:
            return style
    return LineStyle.SINGLE


def _connected_ids(refs: list[_Touch]) -> list[str]:
    return list(dict.fromkeys(t.obj.id for t in refs))


class DerivedStateComputer:
    """
    Computes junctions, wire junctions and no-connects, and the render list.

    Args:
        render_order: Per-type render priority, defaults to RENDER_ORDER
    """

    def __init__(self, render_order: Optional[dict[str, int]] = None):
        self.render_order = dict(render_order) if render_order is not None else dict(RENDER_ORDER)

    def compute(self, objects: Sequence) -> DerivedState:
        """Main entry point: compute all derived objects from the primitives."""
        lines = _usable(objects, ObjectType.LINE.value)
        wires = _usable(objects, ObjectType.WIRE.value)

        # No-connects depend on the wire junction positions
        wire_junctions = self.compute_wire_junctions(wires)

        derived = [
            *self.compute_line_junctions(lines),
            *wire_junctions,
            *self.compute_wire_no_connects(wires, wire_junctions),
        ]
        logger.debug(
            "Derived %d object(s) from %d line(s) and %d wire(s)",
            len(derived), len(lines), len(wires),
        )
        return DerivedState(
            derived_objects=derived,
            render_list=self.build_render_list(objects, derived),
        )

    def compute_line_junctions(self, lines: Sequence) -> list[Junction]:
        junctions: list[Junction] = []
        for (x, y), refs in _collect_touches(lines).items():
            if not _is_junction(refs):
                continue
            junctions.append(Junction(
                id=f"junc-{x}-{y}",
                x=x,
                y=y,
                connected_lines=_connected_ids(refs),
                style=_junction_style(refs),
            ))
        return junctions

    def compute_wire_junctions(self, wires: Sequence) -> list[WireJunction]:
        """
        Wire junctions, with the net of the first contributing wire that has one.

        A point where wires only meet end to end is a merge candidate and
        yields nothing.
        """
        junctions: list[WireJunction] = []
        for (x, y), refs in _collect_touches(wires).items():
            if not _is_junction(refs):
                continue

            nets = list(dict.fromkeys(t.obj.net for t in refs if t.obj.net))
            if len(nets) > 1:
                logger.warning("Conflicting nets %s meet at (%d, %d); using %r", nets, x, y, nets[0])

            junctions.append(WireJunction(
                id=f"wjunc-{x}-{y}",
                x=x,
                y=y,
                connected_wires=_connected_ids(refs),
                net=nets[0] if nets else "",
                style=_junction_style(refs),
            ))
        return junctions

    def compute_wire_no_connects(self, wires: Sequence, wire_junctions: Sequence[WireJunction]) -> list[WireNoConnect]:
        """
        No-connect markers for unbound wire ends that touch nothing.

        An unbound end gets a marker unless it is at a wire junction or
        another wire end lands on the same point.
        """
        junction_positions = {(j.x, j.y) for j in wire_junctions}

        endpoint_counts: dict[tuple[int, int], int] = {}
        for wire in wires:
            for pt in (wire.points[0], wire.points[-1]):
                endpoint_counts[(pt.x, pt.y)] = endpoint_counts.get((pt.x, pt.y), 0) + 1

        markers: list[WireNoConnect] = []
        for wire in wires:
            ends = (
                (EndpointSide.START, wire.points[0], wire.start_binding),
                (EndpointSide.END, wire.points[-1], wire.end_binding),
            )
            for side, pt, binding in ends:
                if binding is not None:
                    continue
                key = (pt.x, pt.y)
                if key in junction_positions or endpoint_counts.get(key) != 1:
                    continue
                markers.append(WireNoConnect(
                    id=f"wnc-{wire.id}-{side.value}",
                    x=pt.x,
                    y=pt.y,
                    wire_id=wire.id,
                    endpoint=side,
                ))
        return markers

    def build_render_list(self, primary: Sequence, derived: Sequence) -> list:
        """Primary then derived objects, stably sorted by type priority, then z_index."""
        return sorted(
            [*primary, *derived],
            key=lambda obj: (self.get_render_order(obj), getattr(obj, "z_index", 0) or 0),
        )

    def get_render_order(self, obj) -> int:
        return self.render_order.get(obj.type, DEFAULT_RENDER_ORDER)


_default_computer = DerivedStateComputer()


def compute(objects: Sequence) -> DerivedState:
    """Compute derived state with the default render order."""
    return _default_computer.compute(objects)
