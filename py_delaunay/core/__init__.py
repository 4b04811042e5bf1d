"""
Geometry primitives and the Bowyer-Watson triangulation engine.
"""

from .errors import (TriangulationError, InvalidInputError,
                     DegenerateTriangleError, DegenerateGeometryError)
from .point import Point
from .edge import Edge
from .triangle import Triangle
from .bowyer_watson import (Triangulation, TriangulationStep, triangulate,
                            triangulate_steps, create_super_triangle)

__all__ = ['TriangulationError', 'InvalidInputError', 'DegenerateTriangleError',
           'DegenerateGeometryError', 'Point', 'Edge', 'Triangle',
           'Triangulation', 'TriangulationStep', 'triangulate',
           'triangulate_steps', 'create_super_triangle']
