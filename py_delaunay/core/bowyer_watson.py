"""
Bowyer-Watson incremental Delaunay triangulation.

Points are inserted one at a time into a working set seeded with a super
triangle that encloses every input point. Each insertion removes the
triangles whose circumcircle contains the new point and fills the resulting
hole with triangles fanning out from it. Once every point is in, triangles
touching the super triangle are discarded.
"""

import itertools
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import structlog

from ..config import settings
from .edge import Edge
from .errors import DegenerateTriangleError, InvalidInputError
from .point import Point
from .triangle import Triangle

logger = structlog.get_logger()

# Below this margin the super triangle no longer strictly encloses the
# bounding box of the points.
MIN_SUPER_TRIANGLE_MARGIN = 0.625


class Triangulation:
    """Mutable working set of triangles keyed by stable integer IDs.

    Removal goes through the ID, never through object identity or value
    equality, so two triangles with equal vertices can coexist.
    """

    def __init__(self, triangles: Iterable[Triangle] = ()):
        self._triangles: Dict[int, Triangle] = {}
        self._next_id = itertools.count()
        for triangle in triangles:
            self.add(triangle)

    def add(self, triangle: Triangle) -> int:
        triangle_id = next(self._next_id)
        self._triangles[triangle_id] = triangle
        return triangle_id

    def remove(self, triangle_ids: Iterable[int]) -> None:
        for triangle_id in triangle_ids:
            self._triangles.pop(triangle_id, None)

    def get(self, triangle_id: int) -> Triangle:
        return self._triangles[triangle_id]

    def items(self):
        return self._triangles.items()

    def triangles(self) -> List[Triangle]:
        return list(self._triangles.values())

    def __len__(self) -> int:
        return len(self._triangles)

    def __iter__(self) -> Iterator[Triangle]:
        return iter(self._triangles.values())


@dataclass
class TriangulationStep:
    """Snapshot of one stage of the algorithm, for visualisation."""
    kind: str  # init, add_point, find_bad, find_boundary, remove_bad, retriangulate, cleanup
    description: str
    triangles: List[Triangle]
    bad_triangles: Optional[List[Triangle]] = None
    boundary: Optional[List[Edge]] = None
    current_point: Optional[Point] = None


def find_bad_triangles(triangulation: Triangulation, point: Point) -> List[int]:
    """
    Find every triangle whose circumcircle strictly contains the point.

    Args:
        triangulation: Current working set
        point: Point being inserted

    Returns:
        IDs of the "bad" triangles, in working-set order
    """
    return [
        triangle_id
        for triangle_id, triangle in triangulation.items()
        if triangle.contains_point_in_circumcircle(point)
    ]


def find_boundary_polygon(triangles: Sequence[Triangle]) -> List[Edge]:
    """
    Find the outline of the hole left by removing `triangles`.

    An edge is on the boundary when no other triangle in the set has it.
    Edges are counted by their canonical key, so this is linear in the
    number of edges. Boundary edges keep the orientation and order in which
    they were first seen.

    Args:
        triangles: The bad triangles

    Returns:
        Boundary edges
    """
    counts = Counter()
    first_seen: Dict[tuple, Edge] = {}

    for triangle in triangles:
        for edge in triangle.edges():
            key = edge.key()
            counts[key] += 1
            first_seen.setdefault(key, edge)

    return [edge for key, edge in first_seen.items() if counts[key] == 1]


def retriangulate_hole(triangulation: Triangulation, polygon: Iterable[Edge],
                       point: Point) -> List[int]:
    """Connect every boundary edge to `point` and add the new triangles."""
    return [triangulation.add(Triangle(edge.p1, edge.p2, point)) for edge in polygon]


def add_point(triangulation: Triangulation, point: Point) -> None:
    """
    Insert a single point into the triangulation.

    Raises:
        DegenerateTriangleError: if a collinear triangle is met on the way
    """
    bad_ids = find_bad_triangles(triangulation, point)
    polygon = find_boundary_polygon([triangulation.get(i) for i in bad_ids])
    triangulation.remove(bad_ids)
    retriangulate_hole(triangulation, polygon, point)


def remove_super_triangle_vertices(triangulation: Triangulation,
                                   super_triangle: Triangle) -> None:
    """Drop every triangle that shares a vertex with the super triangle."""
    triangulation.remove([
        triangle_id
        for triangle_id, triangle in triangulation.items()
        if triangle.shares_vertex_with(super_triangle)
    ])


def create_super_triangle(points: Sequence[Point], margin: Optional[float] = None, *,
                          width: Optional[float] = None,
                          height: Optional[float] = None) -> Triangle:
    """
    Create a triangle that strictly encloses all points.

    Two forms are supported:
      - margin form: scaled from the bounding box of the points
      - canvas form (width and height given): encloses [0, width] x [0, height]

    With s = max(box width, box height) * margin, the vertices are
    (cx - 2s, cy + s), (cx + 2s, cy + s) and (cx, cy - 2s). The flat side
    clears the box iff margin > 1/2 and the slanted sides clear the box
    corners iff margin > 5/8, so margins at or below 5/8 are rejected.

    Enclosing the points is not enough for a complete hull. A convex hull
    triangle whose circumcircle reaches a super triangle vertex is never
    formed, so it is missing after cleanup. Near-flat hull triangles have
    huge circumcircles, so the default margin and the canvas form can lose
    a few of them on random input. A large margin (e.g. 100) recovers the
    full hull for well-spread points.

    Args:
        points: Points to enclose
        margin: Scale factor, defaults to settings.super_triangle_margin
        width: Canvas width (canvas form)
        height: Canvas height (canvas form)

    Returns:
        The super triangle

    Raises:
        InvalidInputError: on an empty point set, a margin that cannot
            enclose the points, or only one of width/height
    """
    if not points:
        raise InvalidInputError("Cannot create super triangle for empty point set")

    if width is not None or height is not None:
        if width is None or height is None:
            raise InvalidInputError("Height must be provided when calling with width")
        m = max(width, height)
        return Triangle(
            Point(-m, -m),
            Point(width + m * 2, -m),
            Point(width / 2, height + m * 2),
        )

    if margin is None:
        margin = settings.super_triangle_margin
    if margin <= MIN_SUPER_TRIANGLE_MARGIN:
        raise InvalidInputError(
            f"Super triangle margin must exceed {MIN_SUPER_TRIANGLE_MARGIN}, got {margin}"
        )

    min_x = min(p.x for p in points)
    max_x = max(p.x for p in points)
    min_y = min(p.y for p in points)
    max_y = max(p.y for p in points)

    center_x = (min_x + max_x) / 2
    center_y = (min_y + max_y) / 2

    # Coincident points give an empty box
    extent = max(max_x - min_x, max_y - min_y) or 1.0
    size = extent * margin

    return Triangle(
        Point(center_x - size * 2, center_y + size),
        Point(center_x + size * 2, center_y + size),
        Point(center_x, center_y - size * 2),
    )


def _unique_points(points: Iterable[Point]) -> List[Point]:
    seen = set()
    unique = []
    for point in points:
        if point in seen:
            continue
        seen.add(point)
        unique.append(point)
    return unique


def _check_super_arguments(super_triangle: Optional[Triangle],
                           width: Optional[float], height: Optional[float]) -> None:
    if super_triangle is not None and (width is not None or height is not None):
        raise InvalidInputError("Pass either a super triangle or width/height, not both")
    if (width is None) != (height is None):
        raise InvalidInputError("Height must be provided when calling with width")


def _resolve_super_triangle(points: Sequence[Point], super_triangle: Optional[Triangle],
                            width: Optional[float], height: Optional[float]) -> Triangle:
    _check_super_arguments(super_triangle, width, height)
    if super_triangle is not None:
        return super_triangle
    if width is not None:
        return create_super_triangle(points, width=width, height=height)
    return create_super_triangle(points)


def triangulate(points: Sequence[Point], super_triangle: Optional[Triangle] = None, *,
                width: Optional[float] = None,
                height: Optional[float] = None) -> List[Triangle]:
    """
    Compute the Delaunay triangulation of a point set.

    The seed triangle is either `super_triangle`, a canvas triangle built
    from `width`/`height`, or one derived from the points' bounding box.
    Exact duplicate points are inserted once. Inputs are not mutated.

    Args:
        points: Points to triangulate
        super_triangle: Triangle strictly containing every point
        width: Canvas width
        height: Canvas height

    Returns:
        Triangles of the triangulation, none touching the super triangle.
        Fewer than 3 distinct points, or all-collinear input, give [].
        Convex hull triangles whose circumcircle contains a super triangle
        vertex are missing; see create_super_triangle().

    Raises:
        InvalidInputError: on inconsistent super triangle arguments
        DegenerateTriangleError: if a collinear triangle arises mid-build
    """
    _check_super_arguments(super_triangle, width, height)

    unique = _unique_points(points)
    if len(unique) != len(points):
        logger.warning("Skipping duplicate points",
                       duplicates=len(points) - len(unique))

    if len(unique) < 3:
        logger.info("Too few points to triangulate", points=len(unique))
        return []

    seed = _resolve_super_triangle(unique, super_triangle, width, height)
    logger.debug("Starting triangulation", points=len(unique), super_triangle=repr(seed))

    triangulation = Triangulation([seed])
    for index, point in enumerate(unique):
        try:
            add_point(triangulation, point)
        except DegenerateTriangleError:
            logger.error("Degenerate geometry while inserting point",
                         index=index, x=point.x, y=point.y)
            raise

    remove_super_triangle_vertices(triangulation, seed)
    result = triangulation.triangles()

    if not result:
        logger.warning("No triangles produced, input points may be collinear",
                       points=len(unique))
    logger.info("Triangulation complete", points=len(unique), triangles=len(result))
    return result


def triangulate_steps(points: Sequence[Point], super_triangle: Optional[Triangle] = None, *,
                      width: Optional[float] = None,
                      height: Optional[float] = None) -> Iterator[TriangulationStep]:
    """
    Run the triangulation while yielding a snapshot after every stage.

    Takes the same arguments as triangulate(); the triangles of the final
    "cleanup" step are the triangulation result.
    """
    _check_super_arguments(super_triangle, width, height)
    unique = _unique_points(points)
    if not unique:
        yield TriangulationStep(kind="init", description="No points to triangulate", triangles=[])
        yield TriangulationStep(kind="cleanup", description="Nothing to clean up", triangles=[])
        return

    seed = _resolve_super_triangle(unique, super_triangle, width, height)
    triangulation = Triangulation([seed])

    yield TriangulationStep(
        kind="init",
        description="Initialize with super-triangle that encompasses all points",
        triangles=triangulation.triangles(),
    )

    for i, point in enumerate(unique):
        yield TriangulationStep(
            kind="add_point",
            description=f"Adding point {i + 1} of {len(unique)} at ({point.x:.1f}, {point.y:.1f})",
            triangles=triangulation.triangles(),
            current_point=point,
        )

        bad_ids = find_bad_triangles(triangulation, point)
        bad = [triangulation.get(t) for t in bad_ids]
        yield TriangulationStep(
            kind="find_bad",
            description=f"Found {len(bad)} triangle(s) whose circumcircle contains the new point",
            triangles=triangulation.triangles(),
            bad_triangles=bad,
            current_point=point,
        )

        polygon = find_boundary_polygon(bad)
        yield TriangulationStep(
            kind="find_boundary",
            description=f"Identified boundary polygon with {len(polygon)} edge(s)",
            triangles=triangulation.triangles(),
            bad_triangles=bad,
            boundary=list(polygon),
            current_point=point,
        )

        triangulation.remove(bad_ids)
        yield TriangulationStep(
            kind="remove_bad",
            description="Removed bad triangles from triangulation",
            triangles=triangulation.triangles(),
            boundary=list(polygon),
            current_point=point,
        )

        retriangulate_hole(triangulation, polygon, point)
        yield TriangulationStep(
            kind="retriangulate",
            description=f"Created {len(polygon)} new triangle(s) connecting boundary to new point",
            triangles=triangulation.triangles(),
            current_point=point,
        )

    remove_super_triangle_vertices(triangulation, seed)
    yield TriangulationStep(
        kind="cleanup",
        description="Removed triangles connected to super-triangle vertices",
        triangles=triangulation.triangles(),
    )
