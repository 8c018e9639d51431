"""
Tests for pure geometry helpers.
"""

import math

import pytest

from shape_annotator.core.annotation import Annotation, Bounds, Point, ShapeType
from shape_annotator.core.annotation.geometry import (
    bounds_from_points,
    clamp_bounds_size,
    contains_point,
    distance,
    legacy_bounds,
    migrate_bounds,
    normalize_bounds,
    point_in_ellipse,
    points_from_bounds,
)


class TestPrimitives:
    def test_distance(self):
        assert distance(Point(0, 0), Point(3, 4)) == 5
        assert distance(Point(1, 1), Point(1, 1)) == 0

    def test_contains_point_inclusive_edges(self):
        box = Bounds(10, 20, 30, 40)
        assert contains_point(box, Point(10, 20))
        assert contains_point(box, Point(40, 60))
        assert contains_point(box, Point(25, 60))
        assert not contains_point(box, Point(9.999, 30))
        assert not contains_point(box, Point(25, 60.001))

    def test_contains_point_matches_interval_definition(self, rng):
        for _ in range(200):
            x, y = rng.uniform(-50, 50, 2)
            w, h = rng.uniform(0, 40, 2)
            px, py = rng.uniform(-60, 100, 2)
            box = Bounds(x, y, w, h)
            expected = x <= px <= x + w and y <= py <= y + h
            assert contains_point(box, Point(px, py)) == expected

    def test_point_in_ellipse(self):
        center = Point(0, 0)
        assert point_in_ellipse(Point(10, 0), center, 10, 5)
        assert point_in_ellipse(Point(0, 5), center, 10, 5)
        assert not point_in_ellipse(Point(8, 4), center, 10, 5)
        assert not point_in_ellipse(Point(0, 0), center, 0, 5)


class TestBoundsPointsConversion:
    def test_round_trip(self, rng):
        for _ in range(100):
            x, y = rng.uniform(-100, 100, 2)
            w, h = rng.uniform(0, 100, 2)
            box = Bounds(x, y, w, h)
            a, b = points_from_bounds(box)
            rebuilt = bounds_from_points(a, b)
            assert rebuilt.to_dict() == pytest.approx(box.to_dict())

    def test_bounds_from_points_any_order(self):
        expected = Bounds(10, 10, 50, 30)
        assert bounds_from_points(Point(60, 40), Point(10, 10)) == expected
        assert bounds_from_points(Point(10, 40), Point(60, 10)) == expected

    def test_normalize_flips_negative_sizes(self):
        assert normalize_bounds(Bounds(10, 20, -5, -8)) == Bounds(5, 12, 5, 8)
        assert normalize_bounds(Bounds(1, 2, 3, 4)) == Bounds(1, 2, 3, 4)

    def test_clamp_keeps_origin(self):
        assert clamp_bounds_size(Bounds(3, 4, 2, 20), 10) == Bounds(3, 4, 10, 20)


class TestLegacyMigration:
    def test_rectangle_bounds_from_unordered_points(self):
        annotation = Annotation(
            "r", ShapeType.RECTANGLE, points=(Point(60, 40), Point(10, 10))
        )
        assert legacy_bounds(annotation) == Bounds(10, 10, 50, 30)

    def test_circle_bounds_from_center_and_radius(self, legacy_circle):
        assert legacy_bounds(legacy_circle) == Bounds(40, 40, 20, 20)

    def test_migrate_keeps_existing_bounds(self, rectangle):
        assert migrate_bounds(rectangle) is rectangle

    def test_migrate_skips_single_point(self):
        annotation = Annotation("c", ShapeType.CIRCLE, points=(Point(1, 1),))
        assert migrate_bounds(annotation) is annotation

    def test_migrate_skips_unsupported_type(self):
        annotation = Annotation("p", "polygon", points=(Point(0, 0), Point(1, 1)))
        assert migrate_bounds(annotation).bounds is None

    def test_diagonal_radius(self):
        annotation = Annotation(
            "c", ShapeType.CIRCLE, points=(Point(0, 0), Point(3, 4))
        )
        bounds = legacy_bounds(annotation)
        assert bounds.width == pytest.approx(10)
        assert bounds.x == pytest.approx(-5)
        assert math.isclose(bounds.height, bounds.width)
