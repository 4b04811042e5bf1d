"""Undirected edge between two points."""

from typing import List, Sequence, Tuple

from .point import Point

EdgeKey = Tuple[Tuple[float, float], Tuple[float, float]]


class Edge:
    """
    Line segment between two points.

    Edges are undirected: Edge(a, b) == Edge(b, a). The edge references its
    endpoints and does not copy them.
    """

    __slots__ = ("p1", "p2")

    def __init__(self, p1: Point, p2: Point):
        self.p1 = p1
        self.p2 = p2

    def key(self) -> EdgeKey:
        """
        Canonical hashable key, identical for both orientations.

        Endpoints are ordered by (x, y) so that counting edges in a dict
        is O(1) per edge.
        """
        t1 = self.p1.to_tuple()
        t2 = self.p2.to_tuple()
        return (t1, t2) if t1 <= t2 else (t2, t1)

    def equals(self, other: "Edge") -> bool:
        return (
            (self.p1.equals(other.p1) and self.p2.equals(other.p2))
            or (self.p1.equals(other.p2) and self.p2.equals(other.p1))
        )

    def __eq__(self, other):
        if not isinstance(other, Edge):
            return NotImplemented
        return self.equals(other)

    def __hash__(self):
        return hash(self.key())

    def shares_endpoint_with(self, other: "Edge") -> bool:
        return (
            self.p1.equals(other.p1)
            or self.p1.equals(other.p2)
            or self.p2.equals(other.p1)
            or self.p2.equals(other.p2)
        )

    def length(self) -> float:
        return self.p1.distance_to(self.p2)

    def length_squared(self) -> float:
        return self.p1.distance_to_squared(self.p2)

    def midpoint(self) -> Point:
        return self.p1.add(self.p2).div(2)

    def interpolated_points(self, count: int) -> List[Point]:
        """Return `count` evenly spaced points strictly between the endpoints."""
        delta = self.p2.sub(self.p1).div(count + 1)
        return [self.p1.add(delta.mult(i)) for i in range(1, count + 1)]

    def to_list(self) -> List[Point]:
        return [self.p1, self.p2]

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> "Edge":
        return cls(points[0], points[1])

    def __repr__(self) -> str:
        return f"Edge({self.p1} -> {self.p2})"
