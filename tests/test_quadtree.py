"""Tests for the quadtree spatial index."""

import numpy as np
import pytest
from scipy.spatial import cKDTree

from py_delaunay.core.point import Point
from py_delaunay.spatial.quadtree import Bounds, Quadtree
from py_delaunay.utils.records import points_from_array


@pytest.fixture
def random_tree():
    """Quadtree over 1000 uniform points in a 100x100 area."""
    coords = np.random.default_rng(1234).uniform(0, 100, (1000, 2))
    points = points_from_array(coords)
    tree = Quadtree.from_points(points, 100, 100)
    return tree, points, coords


class TestBounds:
    """Test rectangle predicates."""

    def test_contains_half_open(self):
        b = Bounds(0, 0, 10, 10)
        assert b.contains(Point(0, 0))
        assert b.contains(Point(9.999, 5))
        assert not b.contains(Point(10, 5))
        assert not b.contains(Point(5, 10))
        assert not b.contains(Point(-0.1, 5))

    def test_intersects(self):
        b = Bounds(0, 0, 10, 10)
        assert b.intersects(Bounds(5, 5, 10, 10))
        assert b.intersects(Bounds(10, 0, 5, 5))
        assert not b.intersects(Bounds(11, 0, 5, 5))

    def test_intersects_circle(self):
        b = Bounds(0, 0, 10, 10)
        assert b.intersects_circle(5, 5, 1)
        assert b.intersects_circle(13, 5, 3)
        assert not b.intersects_circle(14, 14, 5)
        assert b.distance_squared_to(13, 14) == 25


class TestInsert:
    """Test insertion and subdivision."""

    def test_reject_outside(self):
        tree = Quadtree(Bounds(0, 0, 10, 10), capacity=4)
        assert not tree.insert(Point(20, 20))
        assert tree.size() == 0
        assert not tree.divided

    def test_subdivide_on_overflow(self):
        tree = Quadtree(Bounds(0, 0, 100, 100), capacity=4)
        points = [Point(10, 10), Point(60, 10), Point(10, 60), Point(60, 60), Point(70, 70)]
        for p in points:
            assert tree.insert(p)

        assert tree.divided
        assert len(tree.children) == 4
        assert tree.size() == 5
        assert sorted(tree.all_points(), key=Point.to_tuple) == sorted(points, key=Point.to_tuple)

    def test_children_quadrants(self):
        tree = Quadtree(Bounds(0, 0, 100, 50), capacity=1)
        tree.insert(Point(1, 1))
        tree.insert(Point(2, 2))
        nw, ne, sw, se = tree.children
        assert nw.bounds == Bounds(0, 0, 50, 25)
        assert ne.bounds == Bounds(50, 0, 50, 25)
        assert sw.bounds == Bounds(0, 25, 50, 25)
        assert se.bounds == Bounds(50, 25, 50, 25)

    def test_points_stay_in_node_bounds(self, random_tree):
        tree, _, _ = random_tree

        def check(node):
            for p in node.points:
                assert node.bounds.contains(p)
            for child in node.children:
                check(child)

        check(tree)

    def test_max_depth_keeps_points(self):
        """Identical points pile up at max depth instead of being lost."""
        tree = Quadtree(Bounds(0, 0, 10, 10), capacity=1, max_depth=3)
        for _ in range(100):
            assert tree.insert(Point(1, 1))
        assert len(tree) == 100

    def test_defaults_from_settings(self):
        tree = Quadtree(Bounds(0, 0, 1, 1))
        assert tree.capacity == 4
        assert tree.max_depth == 8

    def test_clear(self, random_tree):
        tree, _, _ = random_tree
        tree.clear()
        assert tree.size() == 0
        assert not tree.divided

    def test_from_points_drops_outside(self):
        tree = Quadtree.from_points([Point(1, 1), Point(50, 50), Point(150, 10)], 100, 100)
        assert tree.size() == 2


class TestQueries:
    """Cross-check queries against brute force and scipy."""

    def test_size(self, random_tree):
        tree, points, _ = random_tree
        assert tree.size() == len(points)

    @pytest.mark.parametrize("cx,cy,r", [(50, 50, 10), (0, 0, 10), (95, 20, 7.5), (30, 70, 0.5)])
    def test_query_circle_matches_brute_force(self, random_tree, cx, cy, r):
        tree, points, _ = random_tree
        expected = {p for p in points if (p.x - cx) ** 2 + (p.y - cy) ** 2 <= r * r}
        found = tree.query_circle(cx, cy, r)
        assert len(found) == len(expected)
        assert set(found) == expected

    def test_query_circle_matches_kdtree(self, random_tree):
        tree, _, coords = random_tree
        kd = cKDTree(coords)
        expected = {tuple(coords[i]) for i in kd.query_ball_point([50, 50], 10)}
        found = {p.to_tuple() for p in tree.query_circle(50, 50, 10)}
        assert found == expected

    def test_query_range(self, random_tree):
        tree, points, _ = random_tree
        rect = Bounds(20, 30, 25, 40)
        expected = {p for p in points if rect.contains(p)}
        assert set(tree.query_range(rect)) == expected

    def test_query_range_outside(self, random_tree):
        tree, _, _ = random_tree
        assert tree.query_range(Bounds(200, 200, 10, 10)) == []

    @pytest.mark.parametrize("x,y", [(50, 50), (0, 0), (99, 1), (-20, 130)])
    def test_find_nearest_matches_kdtree(self, random_tree, x, y):
        tree, _, coords = random_tree
        _, index = cKDTree(coords).query([x, y])
        nearest = tree.find_nearest(x, y)
        assert nearest.to_tuple() == tuple(coords[index])

    def test_find_nearest_max_distance(self):
        tree = Quadtree(Bounds(0, 0, 100, 100))
        tree.insert(Point(10, 10))
        assert tree.find_nearest(50, 50, max_distance=5) is None
        assert tree.find_nearest(12, 10, max_distance=5) == Point(10, 10)

    def test_find_nearest_empty(self):
        assert Quadtree(Bounds(0, 0, 10, 10)).find_nearest(5, 5) is None

    def test_find_nearest_infinite_default(self):
        tree = Quadtree(Bounds(0, 0, 100, 100))
        tree.insert(Point(99, 99))
        assert tree.find_nearest(0, 0) == Point(99, 99)
