"""
Quadtree spatial index over points.

Each node covers an axis-aligned rectangle and holds up to `capacity`
points before splitting into four equal quadrants (NW, NE, SW, SE).
Nodes at `max_depth` never split and keep accepting points.
"""

import heapq
import itertools
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import structlog

from ..config import settings
from ..core.point import Point

logger = structlog.get_logger()


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle; (x, y) is the top-left corner."""
    x: float
    y: float
    width: float
    height: float

    def contains(self, point: Point) -> bool:
        """Half-open containment, so adjacent quadrants never share a point."""
        return (
            self.x <= point.x < self.x + self.width
            and self.y <= point.y < self.y + self.height
        )

    def intersects(self, other: "Bounds") -> bool:
        return not (
            other.x > self.x + self.width
            or other.x + other.width < self.x
            or other.y > self.y + self.height
            or other.y + other.height < self.y
        )

    def distance_squared_to(self, x: float, y: float) -> float:
        """Squared distance from (x, y) to the closest point of the rectangle."""
        closest_x = max(self.x, min(x, self.x + self.width))
        closest_y = max(self.y, min(y, self.y + self.height))
        dx = x - closest_x
        dy = y - closest_y
        return dx * dx + dy * dy

    def intersects_circle(self, cx: float, cy: float, radius: float) -> bool:
        return self.distance_squared_to(cx, cy) <= radius * radius


class Quadtree:
    """
    Point quadtree supporting range, circle and nearest-neighbour queries.

    Not safe for concurrent mutation.
    """

    def __init__(self, bounds: Bounds, capacity: Optional[int] = None,
                 max_depth: Optional[int] = None, depth: int = 0):
        self.bounds = bounds
        self.capacity = settings.quadtree_capacity if capacity is None else capacity
        self.max_depth = settings.quadtree_max_depth if max_depth is None else max_depth
        self.depth = depth
        self.points: List[Point] = []
        self.children: List["Quadtree"] = []  # NW, NE, SW, SE once divided

    @property
    def divided(self) -> bool:
        return bool(self.children)

    def _subdivide(self) -> None:
        x, y = self.bounds.x, self.bounds.y
        half_w = self.bounds.width / 2
        half_h = self.bounds.height / 2

        quadrants = [
            Bounds(x, y, half_w, half_h),
            Bounds(x + half_w, y, half_w, half_h),
            Bounds(x, y + half_h, half_w, half_h),
            Bounds(x + half_w, y + half_h, half_w, half_h),
        ]
        self.children = [
            Quadtree(b, self.capacity, self.max_depth, self.depth + 1) for b in quadrants
        ]

    def insert(self, point: Point) -> bool:
        """
        Insert a point.

        Returns:
            False (and leaves the tree untouched) if the point lies outside
            this node's bounds, True otherwise
        """
        if not self.bounds.contains(point):
            return False

        if len(self.points) < self.capacity or self.depth >= self.max_depth:
            self.points.append(point)
            return True

        if not self.divided:
            self._subdivide()

        for child in self.children:
            if child.insert(point):
                return True

        # Rounding of the half extents can leave a sliver no child covers
        self.points.append(point)
        return True

    def query_range(self, bounds: Bounds, found: Optional[List[Point]] = None) -> List[Point]:
        """Collect every point inside `bounds`."""
        if found is None:
            found = []
        if not self.bounds.intersects(bounds):
            return found

        found.extend(p for p in self.points if bounds.contains(p))
        for child in self.children:
            child.query_range(bounds, found)
        return found

    def query_circle(self, cx: float, cy: float, radius: float,
                     found: Optional[List[Point]] = None) -> List[Point]:
        """Collect every point within `radius` of (cx, cy), boundary inclusive."""
        if found is None:
            found = []
        if not self.bounds.intersects_circle(cx, cy, radius):
            return found

        radius_squared = radius * radius
        for p in self.points:
            dx = p.x - cx
            dy = p.y - cy
            if dx * dx + dy * dy <= radius_squared:
                found.append(p)

        for child in self.children:
            child.query_circle(cx, cy, radius, found)
        return found

    def find_nearest(self, x: float, y: float,
                     max_distance: float = math.inf) -> Optional[Point]:
        """
        Find the point closest to (x, y), strictly within `max_distance`.

        Nodes are visited best-first by distance from the query point to
        their bounds; the search stops once the closest unvisited node is
        further away than the best point found so far.
        """
        nearest = None
        best = max_distance * max_distance
        tie_breaker = itertools.count()
        heap = [(self.bounds.distance_squared_to(x, y), next(tie_breaker), self)]

        while heap:
            node_distance, _, node = heapq.heappop(heap)
            if node_distance > best:
                break

            for p in node.points:
                dx = p.x - x
                dy = p.y - y
                d = dx * dx + dy * dy
                if d < best:
                    best = d
                    nearest = p

            for child in node.children:
                child_distance = child.bounds.distance_squared_to(x, y)
                if child_distance <= best:
                    heapq.heappush(heap, (child_distance, next(tie_breaker), child))

        return nearest

    def all_points(self) -> List[Point]:
        points = list(self.points)
        for child in self.children:
            points.extend(child.all_points())
        return points

    def size(self) -> int:
        return len(self.points) + sum(child.size() for child in self.children)

    __len__ = size

    def clear(self) -> None:
        self.points = []
        self.children = []

    @classmethod
    def from_points(cls, points: Sequence[Point], width: float, height: float,
                    capacity: Optional[int] = None) -> "Quadtree":
        """
        Build a tree covering [0, width) x [0, height) from `points`.

        Points outside the area are dropped.
        """
        tree = cls(Bounds(0, 0, width, height), capacity)
        rejected = sum(1 for p in points if not tree.insert(p))
        if rejected:
            logger.warning("Points outside quadtree bounds were dropped",
                           rejected=rejected, width=width, height=height)
        logger.debug("Quadtree built", points=tree.size(), capacity=tree.capacity)
        return tree
