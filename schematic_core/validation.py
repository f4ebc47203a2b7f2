"""
Page validation - Check schematic pages for structural issues.

Provides validation that can be used by both the backend and the CLI
to catch primitives the engine would otherwise silently skip.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .derived import DerivedStateComputer
from .models import ObjectType
from .symbols import find_pin_by_id, find_symbol_by_id, get_pin_position


class IssueSeverity(str, Enum):
    """Severity levels for validation issues."""
    ERROR = "error"      # Invalid state, must be fixed
    WARNING = "warning"  # Potential problem, should review
    INFO = "info"        # Informational, may be intentional


@dataclass
class ValidationIssue:
    """A single validation issue found on a page."""
    severity: IssueSeverity
    message: str
    object_id: str | None = None
    point: tuple[int, int] | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "type": self.severity.value,
            "message": self.message
        }
        if self.object_id:
            result["object_id"] = self.object_id
        if self.point is not None:
            result["point"] = {"x": self.point[0], "y": self.point[1]}
        return result


def _check_polyline(obj) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    points = obj.points

    if len(points) < 2:
        issues.append(ValidationIssue(
            severity=IssueSeverity.ERROR,
            message=f"{obj.type.capitalize()} has {len(points)} point(s), needs at least 2",
            object_id=obj.id
        ))
        return issues

    for i, (p1, p2) in enumerate(zip(points, points[1:])):
        if p1.x == p2.x and p1.y == p2.y:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=f"Duplicate consecutive point at index {i + 1}",
                object_id=obj.id,
                point=(p2.x, p2.y)
            ))
        elif p1.x != p2.x and p1.y != p2.y:
            issues.append(ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=f"Diagonal segment {i} from ({p1.x}, {p1.y}) to ({p2.x}, {p2.y})",
                object_id=obj.id
            ))

    for i in range(1, len(points) - 1):
        prev, curr, nxt = points[i - 1], points[i], points[i + 1]
        if curr in (prev, nxt):
            continue
        if prev.x == curr.x == nxt.x or prev.y == curr.y == nxt.y:
            issues.append(ValidationIssue(
                severity=IssueSeverity.INFO,
                message=f"Collinear interior point at index {i}",
                object_id=obj.id,
                point=(curr.x, curr.y)
            ))

    return issues


def _check_bindings(wire, objects: Sequence) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if not wire.points:
        return issues

    for label, binding, end in (
        ("start", wire.start_binding, wire.points[0]),
        ("end", wire.end_binding, wire.points[-1]),
    ):
        if binding is None:
            continue

        symbol = find_symbol_by_id(binding.symbol_id, objects)
        if symbol is None:
            issues.append(ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=f"Wire {label} is bound to non-existent symbol: {binding.symbol_id}",
                object_id=wire.id
            ))
            continue

        pin = find_pin_by_id(symbol, binding.pin_id)
        if pin is None:
            issues.append(ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=f"Wire {label} is bound to non-existent pin {binding.pin_id} on {symbol.id}",
                object_id=wire.id
            ))
            continue

        pos = get_pin_position(symbol, pin)
        if pos.x != end.x or pos.y != end.y:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=f"Wire {label} at ({end.x}, {end.y}) is not on pin {pin.id} at ({pos.x}, {pos.y})",
                object_id=wire.id,
                point=(end.x, end.y)
            ))

    return issues


def validate_page(objects: Sequence) -> list[ValidationIssue]:
    """
    Validate the primitives of a page and return a list of issues.

    Checks for:
    - Empty page - INFO
    - Duplicate object ids - ERROR
    - Lines/wires with fewer than 2 points - ERROR
    - Diagonal segments - ERROR
    - Duplicate consecutive points - WARNING
    - Collinear interior points - INFO
    - Bindings to missing symbols or pins - ERROR
    - Bound ends away from their pin - WARNING
    - Conflicting nets at a wire junction - WARNING

    Args:
        objects: Primitive objects of the page

    Returns:
        List of ValidationIssue objects
    """
    issues: list[ValidationIssue] = []

    if not objects:
        issues.append(ValidationIssue(
            severity=IssueSeverity.INFO,
            message="Page has no objects"
        ))
        return issues

    id_counts = Counter(obj.id for obj in objects)
    for object_id, count in id_counts.items():
        if count > 1:
            issues.append(ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=f"Duplicate object id used {count} times",
                object_id=object_id
            ))

    wires = []
    for obj in objects:
        if obj.type in (ObjectType.LINE.value, ObjectType.WIRE.value):
            issues.extend(_check_polyline(obj))
        if obj.type == ObjectType.WIRE.value:
            issues.extend(_check_bindings(obj, objects))
            if len(obj.points) >= 2:
                wires.append(obj)

    nets_by_wire = {w.id: w.net for w in wires}
    for junction in DerivedStateComputer().compute_wire_junctions(wires):
        nets = sorted({nets_by_wire[w] for w in junction.connected_wires if nets_by_wire.get(w)})
        if len(nets) > 1:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=f"Conflicting nets meet at a wire junction: {', '.join(nets)}",
                object_id=junction.id,
                point=(junction.x, junction.y)
            ))

    return issues


def validation_summary(issues: list[ValidationIssue]) -> dict:
    """
    Create a summary of validation issues.

    Args:
        issues: List of validation issues

    Returns:
        Dictionary with counts by severity
    """
    errors = len([i for i in issues if i.severity == IssueSeverity.ERROR])
    return {
        "total": len(issues),
        "errors": errors,
        "warnings": len([i for i in issues if i.severity == IssueSeverity.WARNING]),
        "info": len([i for i in issues if i.severity == IssueSeverity.INFO]),
        "valid": errors == 0
    }
