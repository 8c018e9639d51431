"""
Interactive transform engine.

Resizes, rotates and moves annotations. Every function here is pure:
the result depends only on the arguments, and the input annotation is
never modified.
"""

import logging
import math
from dataclasses import replace

from .geometry import (
    bounds_center,
    clamp_bounds_size,
    normalize_bounds,
    points_from_bounds,
    translate_bounds,
)
from .state import Annotation, Bounds, HandlePosition, HandleType, Point, TransformHandle

logger = logging.getLogger(__name__)

MIN_SIZE = 10.0

# How the drag delta feeds (x, y, width, height) for each resize handle.
# nw moves the origin and shrinks by the same amount; se only grows.
_RESIZE_FACTORS = {
    HandlePosition.NW: (1, 1, -1, -1),
    HandlePosition.NE: (0, 1, 1, -1),
    HandlePosition.SW: (1, 0, -1, 1),
    HandlePosition.SE: (0, 0, 1, 1),
    HandlePosition.N: (0, 1, 0, -1),
    HandlePosition.S: (0, 0, 0, 1),
    HandlePosition.E: (0, 0, 1, 0),
    HandlePosition.W: (1, 0, -1, 0),
}


def resize_bounds(bounds: Bounds, position: HandlePosition, dx: float, dy: float) -> Bounds:
    """
    Apply a drag delta to the edges attached to a handle.

    The result is not normalized; width and height may be negative.
    """
    fx, fy, fw, fh = _RESIZE_FACTORS[position]
    return Bounds(
        x=bounds.x + fx * dx,
        y=bounds.y + fy * dy,
        width=bounds.width + fw * dx,
        height=bounds.height + fh * dy,
    )


def rotation_delta(center: Point, start: Point, current: Point) -> float:
    """Signed angle swept around ``center`` from ``start`` to ``current``."""
    start_angle = math.atan2(start.y - center.y, start.x - center.x)
    current_angle = math.atan2(current.y - center.y, current.x - center.x)
    return current_angle - start_angle


def apply_transform(
    annotation: Annotation,
    handle: TransformHandle,
    start_point: Point,
    current_point: Point,
    min_size: float = MIN_SIZE,
) -> Annotation:
    """
    Compute the geometry produced by dragging a handle.

    Both points must already be in image space. Dragging a handle past the
    opposite edge flips the box, so it behaves like grabbing the opposite
    handle; afterwards each dimension is raised to ``min_size``.

    Args:
        annotation: Annotation as it was when the drag started
        handle: Handle being dragged
        start_point: Pointer position at drag start
        current_point: Current pointer position
        min_size: Smallest width/height a resize may produce

    Returns:
        New annotation. Without bounds the input is returned unchanged.
    """
    if annotation.bounds is None:
        logger.debug("Ignoring transform of boundless annotation %s", annotation.id)
        return annotation

    if handle.type is HandleType.ROTATION:
        angle = rotation_delta(bounds_center(annotation.bounds), start_point, current_point)
        return replace(annotation, rotation=(annotation.rotation or 0.0) + angle)

    if handle.position not in _RESIZE_FACTORS:
        logger.debug("Ignoring unknown resize handle %s", handle.position)
        return annotation

    dx = current_point.x - start_point.x
    dy = current_point.y - start_point.y
    bounds = resize_bounds(annotation.bounds, handle.position, dx, dy)
    bounds = clamp_bounds_size(normalize_bounds(bounds), min_size)

    return replace(annotation, bounds=bounds, points=points_from_bounds(bounds))


def move_annotation(
    annotation: Annotation, start_point: Point, current_point: Point
) -> Annotation:
    """
    Translate a whole annotation by the drag delta.

    Both ``bounds`` and ``points`` move, so legacy annotations without
    bounds can be dragged as well.
    """
    dx = current_point.x - start_point.x
    dy = current_point.y - start_point.y
    if dx == 0 and dy == 0:
        return annotation

    points = tuple(Point(p.x + dx, p.y + dy) for p in annotation.points)
    bounds = (
        translate_bounds(annotation.bounds, dx, dy)
        if annotation.bounds is not None
        else None
    )
    return replace(annotation, points=points, bounds=bounds)
