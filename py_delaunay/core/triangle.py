"""Triangle primitive with circumcircle math."""

import math
from typing import List, Optional

from ..config import settings
from .edge import Edge
from .errors import DegenerateTriangleError
from .point import Point


class Triangle:
    """
    Triangle defined by three vertices.

    The circumcenter and squared circumradius are computed on first use and
    cached. Vertices are read-only, so the cache only needs clearing through
    invalidate_cache() when a caller explicitly wants a fresh computation.
    """

    __slots__ = ("_a", "_b", "_c", "_circumcenter", "_circumradius_squared")

    def __init__(self, a: Point, b: Point, c: Point):
        self._a = a
        self._b = b
        self._c = c
        self._circumcenter: Optional[Point] = None
        self._circumradius_squared: Optional[float] = None

    @property
    def a(self) -> Point:
        return self._a

    @property
    def b(self) -> Point:
        return self._b

    @property
    def c(self) -> Point:
        return self._c

    def vertices(self) -> List[Point]:
        return [self._a, self._b, self._c]

    def edges(self) -> List[Edge]:
        """Boundary edges in cyclic order (a, b), (b, c), (c, a)."""
        return [Edge(self._a, self._b), Edge(self._b, self._c), Edge(self._c, self._a)]

    def has_vertex(self, vertex: Point) -> bool:
        return self._a.equals(vertex) or self._b.equals(vertex) or self._c.equals(vertex)

    def has_edge(self, edge: Edge) -> bool:
        return any(e.equals(edge) for e in self.edges())

    def shares_vertex_with(self, other: "Triangle") -> bool:
        return any(other.has_vertex(v) for v in self.vertices())

    def _determinant(self) -> float:
        a, b, c = self._a, self._b, self._c
        return 2 * (a.x * (b.y - c.y) + b.x * (c.y - a.y) + c.x * (a.y - b.y))

    def is_degenerate(self) -> bool:
        """
        True when the vertices are collinear (or coincide).

        The determinant is compared against the squared longest edge so the
        check does not depend on the coordinate scale.
        """
        longest_squared = max(
            self._a.distance_to_squared(self._b),
            self._b.distance_to_squared(self._c),
            self._c.distance_to_squared(self._a),
        )
        if longest_squared == 0:
            return True
        return abs(self._determinant()) <= settings.degenerate_tolerance * longest_squared

    def circumcenter(self) -> Point:
        """
        Center of the circle through all three vertices.

        Raises:
            DegenerateTriangleError: if the vertices are collinear
        """
        if self._circumcenter is not None:
            return self._circumcenter

        if self.is_degenerate():
            raise DegenerateTriangleError(
                f"Circumcenter undefined for collinear vertices {self}",
                vertices=self.vertices(),
            )

        a, b, c = self._a, self._b, self._c
        d = self._determinant()

        a2 = a.x * a.x + a.y * a.y
        b2 = b.x * b.x + b.y * b.y
        c2 = c.x * c.x + c.y * c.y

        x = (a2 * (b.y - c.y) + b2 * (c.y - a.y) + c2 * (a.y - b.y)) / d
        y = (a2 * (c.x - b.x) + b2 * (a.x - c.x) + c2 * (b.x - a.x)) / d

        self._circumcenter = Point(x, y)
        return self._circumcenter

    def circumradius_squared(self) -> float:
        if self._circumradius_squared is None:
            self._circumradius_squared = self.circumcenter().distance_to_squared(self._a)
        return self._circumradius_squared

    def circumradius(self) -> float:
        return math.sqrt(self.circumradius_squared())

    def contains_point_in_circumcircle(self, point: Point) -> bool:
        """
        Check whether `point` lies strictly inside the circumcircle.

        Points exactly on the circle are not inside.
        """
        return point.distance_to_squared(self.circumcenter()) < self.circumradius_squared()

    def area(self) -> float:
        """Unsigned shoelace area, independent of winding order."""
        return abs(self._determinant()) / 4

    def centroid(self) -> Point:
        return Point(
            (self._a.x + self._b.x + self._c.x) / 3,
            (self._a.y + self._b.y + self._c.y) / 3,
        )

    def contains_point(self, point: Point) -> bool:
        """
        Barycentric point-in-triangle test, boundary inclusive.

        Raises:
            DegenerateTriangleError: if the triangle has zero area
        """
        if self.is_degenerate():
            raise DegenerateTriangleError(
                f"Point containment undefined for zero-area triangle {self}",
                vertices=self.vertices(),
            )

        v0 = self._c.sub(self._a)
        v1 = self._b.sub(self._a)
        v2 = point.sub(self._a)

        dot00 = v0.x * v0.x + v0.y * v0.y
        dot01 = v0.x * v1.x + v0.y * v1.y
        dot02 = v0.x * v2.x + v0.y * v2.y
        dot11 = v1.x * v1.x + v1.y * v1.y
        dot12 = v1.x * v2.x + v1.y * v2.y

        inv_denom = 1 / (dot00 * dot11 - dot01 * dot01)
        u = (dot11 * dot02 - dot01 * dot12) * inv_denom
        v = (dot00 * dot12 - dot01 * dot02) * inv_denom

        return u >= 0 and v >= 0 and u + v <= 1

    def invalidate_cache(self) -> None:
        self._circumcenter = None
        self._circumradius_squared = None

    def __repr__(self) -> str:
        return f"Triangle({self._a}, {self._b}, {self._c})"
