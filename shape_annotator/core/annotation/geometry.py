"""
Pure geometry helpers for annotation shapes.

These functions have no side effects and can be tested in isolation.
"""

import logging
import math
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from .state import Annotation, Bounds, Point, ShapeType

logger = logging.getLogger(__name__)


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(a.x - b.x, a.y - b.y)


def contains_point(bounds: Bounds, point: Point) -> bool:
    """
    Check whether a point lies inside a box.

    Both ends are inclusive, so points exactly on an edge are inside.
    """
    return (
        bounds.x <= point.x <= bounds.x + bounds.width
        and bounds.y <= point.y <= bounds.y + bounds.height
    )


def point_in_ellipse(point: Point, center: Point, rx: float, ry: float) -> bool:
    """
    Check whether a point lies inside an axis-aligned ellipse.

    Degenerate ellipses (a non-positive radius) contain nothing.
    """
    if rx <= 0 or ry <= 0:
        return False
    dx = (point.x - center.x) / rx
    dy = (point.y - center.y) / ry
    return dx * dx + dy * dy <= 1


def bounds_from_points(a: Point, b: Point) -> Bounds:
    """Normalized box spanned by two opposite corners in any order."""
    return Bounds(
        x=min(a.x, b.x),
        y=min(a.y, b.y),
        width=abs(b.x - a.x),
        height=abs(b.y - a.y),
    )


def points_from_bounds(bounds: Bounds) -> Tuple[Point, Point]:
    """Top-left and bottom-right corners of a box."""
    return (
        Point(bounds.x, bounds.y),
        Point(bounds.x + bounds.width, bounds.y + bounds.height),
    )


def normalize_bounds(bounds: Bounds) -> Bounds:
    """
    Fold negative sizes into the origin.

    A box with ``width == -5`` at ``x == 10`` becomes ``x == 5, width == 5``.
    """
    x, width = bounds.x, bounds.width
    y, height = bounds.y, bounds.height
    if width < 0:
        x += width
        width = -width
    if height < 0:
        y += height
        height = -height
    return Bounds(x, y, width, height)


def clamp_bounds_size(bounds: Bounds, min_size: float) -> Bounds:
    """Raise width and height to at least ``min_size``, keeping the origin."""
    return Bounds(
        bounds.x,
        bounds.y,
        max(min_size, bounds.width),
        max(min_size, bounds.height),
    )


def translate_bounds(bounds: Bounds, dx: float, dy: float) -> Bounds:
    return Bounds(bounds.x + dx, bounds.y + dy, bounds.width, bounds.height)


def bounds_center(bounds: Bounds) -> Point:
    return Point(bounds.x + bounds.width / 2, bounds.y + bounds.height / 2)


def circle_from_points(points: Sequence[Point]) -> Optional[Tuple[Point, float]]:
    """
    Center and radius of a legacy circle.

    ``points[0]`` is the center and ``points[1]`` any point on the circle.

    Returns:
        (center, radius), or None when fewer than two points are given
    """
    if len(points) < 2:
        return None
    return points[0], distance(points[0], points[1])


def legacy_bounds(annotation: Annotation) -> Optional[Bounds]:
    """
    Derive bounds for an annotation stored before bounds existed.

    Returns:
        The derived box, or None if the points cannot describe the shape
    """
    points = annotation.points
    if len(points) < 2:
        return None

    if annotation.type is ShapeType.RECTANGLE:
        return bounds_from_points(points[0], points[1])
    if annotation.type is ShapeType.CIRCLE:
        center, radius = circle_from_points(points)
        return Bounds(center.x - radius, center.y - radius, 2 * radius, 2 * radius)
    return None


def migrate_bounds(annotation: Annotation) -> Annotation:
    """
    One-time migration filling in ``bounds`` from legacy ``points``.

    Annotations that already have bounds, or whose points cannot be
    interpreted, are returned unchanged.
    """
    if annotation.bounds is not None:
        return annotation

    bounds = legacy_bounds(annotation)
    if bounds is None:
        logger.debug(
            "Cannot derive bounds for annotation %s (%s, %d points)",
            annotation.id,
            annotation.type_name,
            len(annotation.points),
        )
        return annotation
    return replace(annotation, bounds=bounds)
