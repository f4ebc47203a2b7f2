"""
Line geometry - Pure functions over orthogonal polylines.

Used by the wire module, the edit helpers and the derived-state computer:
- Segment extraction and point-on-segment tests
- Collinear/duplicate point simplification
- Orthogonal preview paths and corner selection
- Perpendicular segment intersection
- Polyline merging at a shared endpoint

Every function here is total: missing or malformed input yields an empty
list or None instead of raising, because "no match" is the common case.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from .models import Corner, Direction, EndpointSide, LineStyle, ObjectType, Point

if TYPE_CHECKING:
    from .models import Polyline


# Glyphs per style: h/v for straight runs, tl/tr/bl/br for corners
STYLE_CHARS: dict[LineStyle, dict[str, str]] = {
    LineStyle.SINGLE: {"h": "─", "v": "│", "tl": "┌", "tr": "┐", "bl": "└", "br": "┘"},
    LineStyle.DOUBLE: {"h": "═", "v": "║", "tl": "╔", "tr": "╗", "bl": "╚", "br": "╝"},
    LineStyle.THICK: {"h": "█", "v": "█", "tl": "█", "tr": "█", "bl": "█", "br": "█"},
}

# (incoming, outgoing) -> corner role
_CORNER_MAP: dict[tuple[Direction, Direction], Corner] = {
    (Direction.RIGHT, Direction.DOWN): Corner.TR,
    (Direction.RIGHT, Direction.UP): Corner.BR,
    (Direction.LEFT, Direction.DOWN): Corner.TL,
    (Direction.LEFT, Direction.UP): Corner.BL,
    (Direction.DOWN, Direction.RIGHT): Corner.BL,
    (Direction.DOWN, Direction.LEFT): Corner.BR,
    (Direction.UP, Direction.RIGHT): Corner.TL,
    (Direction.UP, Direction.LEFT): Corner.TR,
}

_OPPOSITES = {
    Direction.RIGHT: Direction.LEFT,
    Direction.LEFT: Direction.RIGHT,
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.NONE: Direction.NONE,
}


@dataclass
class Segment:
    """One segment of a polyline, between points[index] and points[index + 1]."""
    start: Point
    end: Point
    index: int

    @property
    def is_horizontal(self) -> bool:
        return is_horizontal(self.start, self.end)

    @property
    def is_vertical(self) -> bool:
        return is_vertical(self.start, self.end)


@dataclass
class PointHit:
    """Where a point touches a polyline."""
    segment_index: int
    is_vertex: bool
    vertex_index: Optional[int] = None


@dataclass
class LineHit:
    """A line or wire found at a point, with hit details."""
    obj: "Polyline"
    hit: PointHit


@dataclass
class Intersection:
    """A crossing between two polylines."""
    point: Point
    first_id: str
    second_id: str


# --- Point Utilities ---

def points_equal(p1: Optional[Point], p2: Optional[Point]) -> bool:
    """Check if two points are the same grid cell."""
    if p1 is None or p2 is None:
        return False
    return p1.x == p2.x and p1.y == p2.y


def get_direction(from_point: Point, to_point: Point) -> Direction:
    """Direction of travel from one point to another (x axis checked first)."""
    dx = to_point.x - from_point.x
    dy = to_point.y - from_point.y
    if dx > 0:
        return Direction.RIGHT
    if dx < 0:
        return Direction.LEFT
    if dy > 0:
        return Direction.DOWN
    if dy < 0:
        return Direction.UP
    return Direction.NONE


def opposite_direction(direction: Direction) -> Direction:
    """Get the opposite direction."""
    return _OPPOSITES.get(direction, Direction.NONE)


# --- Segment Utilities ---

def get_segments(line: Optional["Polyline"]) -> list[Segment]:
    """
    Get all segments of a polyline in order.

    Args:
        line: Line or wire object

    Returns:
        List of Segment objects (empty for fewer than 2 points)
    """
    if line is None or not line.points or len(line.points) < 2:
        return []

    points = line.points
    return [
        Segment(start=points[i], end=points[i + 1], index=i)
        for i in range(len(points) - 1)
    ]


def is_horizontal(p1: Point, p2: Point) -> bool:
    return p1.y == p2.y


def is_vertical(p1: Point, p2: Point) -> bool:
    return p1.x == p2.x


def get_segment_orientation(p1: Point, p2: Point) -> str:
    """Returns 'horizontal', 'vertical' or 'diagonal'."""
    if p1.y == p2.y:
        return "horizontal"
    if p1.x == p2.x:
        return "vertical"
    return "diagonal"


def get_segment_midpoint(p1: Point, p2: Point) -> Point:
    """Midpoint of a segment, rounded half-up to the grid."""
    return Point(x=(p1.x + p2.x + 1) // 2, y=(p1.y + p2.y + 1) // 2)


def point_on_segment(point: Optional[Point], p1: Optional[Point], p2: Optional[Point]) -> bool:
    """
    Check if a point lies on an orthogonal segment, endpoints included.

    Diagonal segments never match.
    """
    if point is None or p1 is None or p2 is None:
        return False

    if p1.x == p2.x:
        return point.x == p1.x and min(p1.y, p2.y) <= point.y <= max(p1.y, p2.y)
    if p1.y == p2.y:
        return point.y == p1.y and min(p1.x, p2.x) <= point.x <= max(p1.x, p2.x)
    return False


def find_point_on_line(point: Optional[Point], line: Optional["Polyline"]) -> Optional[PointHit]:
    """
    Find where a point touches a polyline.

    Vertices are checked before segments, so a point that is both a vertex
    and on a segment reports as a vertex.

    Returns:
        PointHit, or None if the point is not on the polyline
    """
    if point is None or line is None or not line.points or len(line.points) < 2:
        return None

    points = line.points
    for i, vertex in enumerate(points):
        if points_equal(vertex, point):
            return PointHit(segment_index=i - 1 if i > 0 else 0, is_vertex=True, vertex_index=i)

    for i in range(len(points) - 1):
        if point_on_segment(point, points[i], points[i + 1]):
            return PointHit(segment_index=i, is_vertex=False)

    return None


def find_lines_at_point(point: Optional[Point], objects: Iterable) -> list[LineHit]:
    """Find all lines and wires that touch a point."""
    results: list[LineHit] = []
    if point is None:
        return results

    for obj in objects:
        if obj.type not in (ObjectType.LINE.value, ObjectType.WIRE.value):
            continue
        hit = find_point_on_line(point, obj)
        if hit:
            results.append(LineHit(obj=obj, hit=hit))
    return results


def is_endpoint(point: Optional[Point], line: Optional["Polyline"]) -> bool:
    """Check if a point is the first or last point of a polyline."""
    return get_endpoint_type(point, line) is not None


def get_endpoint_type(point: Optional[Point], line: Optional["Polyline"]) -> Optional[EndpointSide]:
    """Which end of the polyline a point is at, if any (start wins on loops)."""
    if point is None or line is None or not line.points or len(line.points) < 2:
        return None
    if points_equal(point, line.points[0]):
        return EndpointSide.START
    if points_equal(point, line.points[-1]):
        return EndpointSide.END
    return None


def is_orthogonal(points: Optional[Sequence[Point]]) -> bool:
    """True if every consecutive pair of points differs on exactly one axis."""
    if not points or len(points) < 2:
        return False
    for p1, p2 in zip(points, points[1:]):
        if (p1.x == p2.x) == (p1.y == p2.y):
            return False
    return True


# --- Segment Intersection ---

def segment_intersection(
    a1: Optional[Point],
    a2: Optional[Point],
    b1: Optional[Point],
    b2: Optional[Point],
) -> Optional[Point]:
    """
    Intersection of one horizontal and one vertical segment.

    Returns None for parallel, diagonal or non-overlapping segments.
    There is no tolerance: touching is inclusive, near misses are misses.
    """
    if a1 is None or a2 is None or b1 is None or b2 is None:
        return None

    a_horiz = a1.y == a2.y
    b_horiz = b1.y == b2.y
    if a_horiz == b_horiz:
        return None

    horiz = (a1, a2) if a_horiz else (b1, b2)
    vert = (b1, b2) if a_horiz else (a1, a2)
    if vert[0].x != vert[1].x:
        return None

    h_min_x = min(horiz[0].x, horiz[1].x)
    h_max_x = max(horiz[0].x, horiz[1].x)
    h_y = horiz[0].y

    v_min_y = min(vert[0].y, vert[1].y)
    v_max_y = max(vert[0].y, vert[1].y)
    v_x = vert[0].x

    if h_min_x <= v_x <= h_max_x and v_min_y <= h_y <= v_max_y:
        return Point(x=v_x, y=h_y)
    return None


def find_all_intersections(lines: Sequence["Polyline"]) -> list[Intersection]:
    """
    Find every perpendicular crossing between pairs of polylines.

    Args:
        lines: Lines or wires to test against each other

    Returns:
        List of Intersection records, one per crossing segment pair
    """
    intersections: list[Intersection] = []

    for i in range(len(lines)):
        for j in range(i + 1, len(lines)):
            for seg1 in get_segments(lines[i]):
                for seg2 in get_segments(lines[j]):
                    point = segment_intersection(seg1.start, seg1.end, seg2.start, seg2.end)
                    if point:
                        intersections.append(Intersection(
                            point=point,
                            first_id=lines[i].id,
                            second_id=lines[j].id,
                        ))

    return intersections


# --- Point Simplification ---

def _drop_duplicates(points: Sequence[Point]) -> list[Point]:
    result = [points[0]]
    for point in points[1:]:
        if not points_equal(point, result[-1]):
            result.append(point)
    return result


def _drop_collinear(points: Sequence[Point]) -> list[Point]:
    if len(points) < 3:
        return list(points)

    result = [points[0]]
    for i in range(1, len(points) - 1):
        prev = result[-1]
        curr = points[i]
        nxt = points[i + 1]

        same_x = prev.x == curr.x == nxt.x
        same_y = prev.y == curr.y == nxt.y
        # Keep only real corners
        if not same_x and not same_y:
            result.append(curr)

    result.append(points[-1])
    return result


def simplify_points(points: Optional[Sequence[Point]]) -> list[Point]:
    """
    Remove consecutive duplicates and collinear interior points.

    First and last points are always kept. Repeats until nothing changes,
    so simplify_points(simplify_points(p)) == simplify_points(p). A path
    of two or more points never shrinks below two: one that folds back
    onto its start becomes [first, last].
    """
    if not points:
        return []

    result = list(points)
    while True:
        simplified = _drop_collinear(_drop_duplicates(result))
        if len(simplified) < 2 <= len(result):
            simplified = [result[0], result[-1]]
        if simplified == result:
            return simplified
        result = simplified


def square_off(points: Optional[Sequence[Point]], horizontal_first: bool = True) -> list[Point]:
    """
    Replace every diagonal segment with a right-angle bend, then simplify.

    Args:
        points: Polyline points
        horizontal_first: Leave each bend horizontally (True) or vertically

    Returns:
        Points of a fully orthogonal polyline
    """
    if not points:
        return []

    result = [points[0]]
    for p1, p2 in zip(points, points[1:]):
        if p1.x != p2.x and p1.y != p2.y:
            if horizontal_first:
                result.append(Point(x=p2.x, y=p1.y))
            else:
                result.append(Point(x=p1.x, y=p2.y))
        result.append(p2)
    return simplify_points(result)


def orthogonalize(points: Optional[Sequence[Point]], horizontal_first: bool = True) -> list[Point]:
    """Simplify a path, squaring off anything still diagonal."""
    result = simplify_points(points)
    if len(result) >= 2 and not is_orthogonal(result):
        result = square_off(result, horizontal_first=horizontal_first)
    return result


# --- Orthogonal Path Generation ---

def get_preview_path(
    anchor: Optional[Point],
    cursor: Optional[Point],
    horizontal_first: bool = True,
) -> list[Point]:
    """
    Orthogonal path from anchor to cursor.

    Two points when the pair is axis-aligned, otherwise three points with a
    single bend; horizontal_first picks which axis moves first.
    """
    if anchor is None or cursor is None:
        return []

    if anchor.x == cursor.x or anchor.y == cursor.y:
        return [anchor, cursor]

    if horizontal_first:
        bend = Point(x=cursor.x, y=anchor.y)
    else:
        bend = Point(x=anchor.x, y=cursor.y)
    return [anchor, bend, cursor]


# --- Corners ---

def corner_for_directions(incoming: Direction, outgoing: Direction) -> Optional[Corner]:
    """Corner role for a turn; straight runs and reversals have none."""
    return _CORNER_MAP.get((incoming, outgoing))


def get_corner(prev: Point, curr: Point, nxt: Point) -> Optional[Corner]:
    """Corner role at `curr` for the path prev -> curr -> nxt."""
    return corner_for_directions(get_direction(prev, curr), get_direction(curr, nxt))


def get_style_chars(style: Optional[str]) -> dict[str, str]:
    """Glyph table for a style, falling back to single."""
    try:
        return STYLE_CHARS[LineStyle(style)]
    except ValueError:
        return STYLE_CHARS[LineStyle.SINGLE]


def get_corner_char(prev: Point, curr: Point, nxt: Point, style: str = LineStyle.SINGLE) -> Optional[str]:
    """Corner glyph at `curr`, or None when the path does not turn."""
    corner = get_corner(prev, curr, nxt)
    if corner is None:
        return None
    return get_style_chars(style)[corner.value]


# --- Line Merging ---

def merge_lines(line1: Optional["Polyline"], line2: Optional["Polyline"]) -> Optional["Polyline"]:
    """
    Merge two polylines at a common endpoint.

    Whichever operand needs it is reversed so the shared point ends up in
    the interior; the result keeps line1's other fields.

    Returns:
        A copy of line1 with the merged points, or None if no endpoint is shared
    """
    if line1 is None or line2 is None:
        return None
    if len(line1.points) < 2 or len(line2.points) < 2:
        return None

    p1_start, p1_end = line1.points[0], line1.points[-1]
    p2_start, p2_end = line2.points[0], line2.points[-1]

    if points_equal(p1_end, p2_start):
        merged = list(line1.points) + list(line2.points[1:])
    elif points_equal(p1_end, p2_end):
        merged = list(line1.points) + list(reversed(line2.points[:-1]))
    elif points_equal(p1_start, p2_end):
        merged = list(line2.points) + list(line1.points[1:])
    elif points_equal(p1_start, p2_start):
        merged = list(reversed(line1.points)) + list(line2.points[1:])
    else:
        return None

    return line1.model_copy(update={"points": simplify_points(merged)})
