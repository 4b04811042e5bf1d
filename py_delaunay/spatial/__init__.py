"""
Spatial indexing for point queries.
"""

from .quadtree import Bounds, Quadtree

__all__ = ['Bounds', 'Quadtree']
