"""Incremental Delaunay triangulation with a quadtree point index."""

from .core import (Point, Edge, Triangle, triangulate, triangulate_steps,
                   create_super_triangle, TriangulationError, InvalidInputError,
                   DegenerateTriangleError, DegenerateGeometryError)
from .spatial import Bounds, Quadtree

__version__ = "0.1.0"

__all__ = ['Point', 'Edge', 'Triangle', 'triangulate', 'triangulate_steps',
           'create_super_triangle', 'TriangulationError', 'InvalidInputError',
           'DegenerateTriangleError', 'DegenerateGeometryError',
           'Bounds', 'Quadtree']
