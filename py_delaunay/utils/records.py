"""
Plain-record marshaling for geometry crossing a process or thread boundary.

Points, edges and triangles are flattened to dicts of floats (the shapes
used by worker messages) or to numpy arrays. Object identity is not
preserved: rebuilding triangles from records yields new Point objects,
shared only where coordinates are equal.
"""

from typing import Any, Dict, Iterable, List, Mapping

import numpy as np

from ..core.edge import Edge
from ..core.errors import InvalidInputError
from ..core.point import Point
from ..core.triangle import Triangle

PointRecord = Dict[str, float]


def point_to_record(point: Point) -> PointRecord:
    return {"x": float(point.x), "y": float(point.y)}


def point_from_record(record: Mapping[str, Any]) -> Point:
    try:
        return Point(float(record["x"]), float(record["y"]))
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidInputError(f"Malformed point record {record!r}") from e


def points_to_records(points: Iterable[Point]) -> List[PointRecord]:
    return [point_to_record(p) for p in points]


def points_from_records(records: Iterable[Mapping[str, Any]]) -> List[Point]:
    return [point_from_record(r) for r in records]


def edges_to_records(edges: Iterable[Edge]) -> List[Dict[str, PointRecord]]:
    return [{"p1": point_to_record(e.p1), "p2": point_to_record(e.p2)} for e in edges]


def triangles_to_records(triangles: Iterable[Triangle]) -> List[Dict[str, PointRecord]]:
    return [
        {"p1": point_to_record(t.a), "p2": point_to_record(t.b), "p3": point_to_record(t.c)}
        for t in triangles
    ]


def triangles_from_records(records: Iterable[Mapping[str, Any]]) -> List[Triangle]:
    """
    Rebuild triangles from records.

    Vertices with equal coordinates are shared between triangles, so the
    result can be walked by vertex like the serialized triangulation.
    """
    cache: Dict[Point, Point] = {}

    def vertex(record):
        p = point_from_record(record)
        return cache.setdefault(p, p)

    triangles = []
    for r in records:
        try:
            triangles.append(Triangle(vertex(r["p1"]), vertex(r["p2"]), vertex(r["p3"])))
        except KeyError as e:
            raise InvalidInputError(f"Triangle record missing vertex {e}") from e
    return triangles


def points_from_array(array) -> List[Point]:
    """
    Convert an (N, 2) array of [x, y] coordinates to Points.

    Args:
        array: Anything numpy can read as an (N, 2) float array

    Returns:
        List of Points in row order
    """
    coords = np.asarray(array, dtype=float)
    if coords.size == 0:
        return []
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise InvalidInputError(f"Expected an (N, 2) array, got shape {coords.shape}")
    return [Point(float(x), float(y)) for x, y in coords]


def points_to_array(points: Iterable[Point]) -> np.ndarray:
    return np.array([[p.x, p.y] for p in points], dtype=float).reshape(-1, 2)


def triangles_to_array(triangles: Iterable[Triangle]) -> np.ndarray:
    """Return an (N, 3, 2) array of vertex coordinates."""
    return np.array(
        [[[v.x, v.y] for v in t.vertices()] for t in triangles], dtype=float
    ).reshape(-1, 3, 2)
