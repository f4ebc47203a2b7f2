"""
Page analysis - Connectivity analysis and summarization utilities.

Provides analysis functions that can be used by both the backend and the
CLI to understand how the wires of a page hang together.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Sequence

from .derived import compute
from .geometry import find_point_on_line
from .models import ObjectType
from .wiring import find_all_floating_endpoints, find_all_wires


@dataclass
class WireNetwork:
    """A group of wires that touch each other, directly or transitively."""
    wire_ids: list[str] = field(default_factory=list)
    nets: list[str] = field(default_factory=list)
    pins: list[str] = field(default_factory=list)   # "symbol_id:pin_id"

    @property
    def size(self) -> int:
        return len(self.wire_ids)

    def to_dict(self) -> dict:
        return {"wire_ids": self.wire_ids, "nets": self.nets, "pins": self.pins}


@dataclass
class PageSummary:
    """Complete summary of a page's structure."""
    name: str
    total_objects: int
    objects_by_type: dict[str, int]
    junctions: int
    wire_junctions: int
    no_connects: int
    floating_endpoints: int
    networks: int
    nets_in_use: list[str]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "total_objects": self.total_objects,
            "objects_by_type": self.objects_by_type,
            "junctions": self.junctions,
            "wire_junctions": self.wire_junctions,
            "no_connects": self.no_connects,
            "floating_endpoints": self.floating_endpoints,
            "networks": self.networks,
            "nets_in_use": self.nets_in_use
        }


def _wires_touch(a, b) -> bool:
    """True if any vertex of one wire lies on the other."""
    return (any(find_point_on_line(pt, b) for pt in a.points)
            or any(find_point_on_line(pt, a) for pt in b.points))


def find_wire_networks(objects: Sequence) -> list[WireNetwork]:
    """
    Find all connected groups of wires using BFS.

    Two wires are adjacent when a vertex of one lies on the other. Wires
    that merely cross without a shared vertex are not connected.

    Args:
        objects: Page objects (non-wires are ignored)

    Returns:
        List of WireNetwork objects, in order of each network's first wire
    """
    wires = [w for w in find_all_wires(objects) if len(w.points) >= 2]
    if not wires:
        return []

    by_id = {w.id: w for w in wires}

    # Build adjacency list (undirected)
    adjacency: dict[str, set[str]] = defaultdict(set)
    for i, a in enumerate(wires):
        for b in wires[i + 1:]:
            if _wires_touch(a, b):
                adjacency[a.id].add(b.id)
                adjacency[b.id].add(a.id)

    visited: set[str] = set()
    networks: list[WireNetwork] = []

    for start in wires:
        if start.id in visited:
            continue

        wire_ids: list[str] = []
        queue = [start.id]
        while queue:
            current = queue.pop(0)
            if current in visited:
                continue
            visited.add(current)
            wire_ids.append(current)
            queue.extend(n for n in adjacency[current] if n not in visited)

        members = [by_id[w] for w in wire_ids]
        nets = sorted({w.net for w in members if w.net})
        pins = []
        for wire in members:
            for binding in (wire.start_binding, wire.end_binding):
                if binding is not None:
                    pins.append(f"{binding.symbol_id}:{binding.pin_id}")

        networks.append(WireNetwork(wire_ids=wire_ids, nets=nets, pins=sorted(set(pins))))

    return networks


def summarize_page(objects: Sequence, name: str = "") -> PageSummary:
    """
    Generate a comprehensive summary of a page.

    Args:
        objects: Primitive objects of the page
        name: Page name to report

    Returns:
        PageSummary object with all analysis results
    """
    type_counts: dict[str, int] = defaultdict(int)
    for obj in objects:
        type_counts[obj.type] += 1

    derived_counts: dict[str, int] = defaultdict(int)
    for obj in compute(objects).derived_objects:
        derived_counts[obj.type] += 1

    wires = find_all_wires(objects)

    return PageSummary(
        name=name,
        total_objects=len(objects),
        objects_by_type=dict(type_counts),
        junctions=derived_counts[ObjectType.JUNCTION.value],
        wire_junctions=derived_counts[ObjectType.WIRE_JUNCTION.value],
        no_connects=derived_counts[ObjectType.WIRE_NOCONNECT.value],
        floating_endpoints=len(find_all_floating_endpoints(objects)),
        networks=len(find_wire_networks(objects)),
        nets_in_use=sorted({w.net for w in wires if w.net})
    )
