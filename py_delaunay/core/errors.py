"""Exception types raised by the geometry core."""


class TriangulationError(Exception):
    """Base class for triangulation failures."""


class InvalidInputError(TriangulationError, ValueError):
    """Input rejected before any geometry is built (e.g. an empty point set)."""


class DegenerateTriangleError(TriangulationError, ArithmeticError):
    """Triangle vertices are collinear, so its circumcircle is undefined."""

    def __init__(self, message, vertices=None):
        super().__init__(message)
        self.vertices = vertices


DegenerateGeometryError = DegenerateTriangleError
