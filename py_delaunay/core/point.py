"""2D point/vector primitive."""

import math
import numbers
from dataclasses import dataclass
from typing import Iterator, Tuple


@dataclass(frozen=True)
class Point:
    """Immutable 2D point with vector arithmetic.

    Every operation returns a new Point. Equality and hashing compare the
    exact coordinates.
    """
    x: float
    y: float

    def add(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def sub(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def mult(self, n: float) -> "Point":
        return Point(self.x * n, self.y * n)

    def div(self, n: float) -> "Point":
        """Scale by 1/n. A zero divisor raises ZeroDivisionError."""
        return Point(self.x / n, self.y / n)

    def __add__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, n):
        if not isinstance(n, numbers.Real):
            return NotImplemented
        return self.mult(n)

    __rmul__ = __mul__

    def __truediv__(self, n):
        if not isinstance(n, numbers.Real):
            return NotImplemented
        return self.div(n)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def distance_to(self, other: "Point") -> float:
        return math.sqrt(self.distance_to_squared(other))

    def distance_to_squared(self, other: "Point") -> float:
        """Squared Euclidean distance, avoids the square root on hot paths."""
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def angle(self) -> float:
        """Angle of the vector in radians, measured from the +x axis."""
        return math.atan2(self.y, self.x)

    def copy(self) -> "Point":
        return Point(self.x, self.y)

    def equals(self, other: "Point") -> bool:
        return self.x == other.x and self.y == other.y

    def approximately_equals(self, other: "Point", epsilon: float = 1e-10) -> bool:
        return abs(self.x - other.x) < epsilon and abs(self.y - other.y) < epsilon

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __str__(self) -> str:
        return f"Point({self.x}, {self.y})"

    @classmethod
    def from_polar(cls, angle: float, length: float) -> "Point":
        return cls(math.cos(angle) * length, math.sin(angle) * length)

    @classmethod
    def zero(cls) -> "Point":
        return cls(0.0, 0.0)
