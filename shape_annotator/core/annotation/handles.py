"""
Transform handles derived from a bounding box.

Handles are never stored; they are recomputed from bounds whenever the
interaction layer needs them.
"""

from typing import List, Optional

from .geometry import distance
from .state import Bounds, HandlePosition, HandleType, Point, TransformHandle

ROTATION_HANDLE_OFFSET = 30.0
HANDLE_TOLERANCE = 8.0

_CURSORS = {
    HandlePosition.NW: "nw-resize",
    HandlePosition.SE: "nw-resize",
    HandlePosition.NE: "ne-resize",
    HandlePosition.SW: "ne-resize",
    HandlePosition.N: "ns-resize",
    HandlePosition.S: "ns-resize",
    HandlePosition.E: "ew-resize",
    HandlePosition.W: "ew-resize",
    HandlePosition.ROTATE: "grab",
}


def handles_for(
    bounds: Bounds, rotation_offset: float = ROTATION_HANDLE_OFFSET
) -> List[TransformHandle]:
    """
    Build the nine handles of a box.

    The order is fixed (corners nw, ne, sw, se; edges n, s, e, w; rotation)
    and ``handle_at_point`` relies on it to break ties.

    Args:
        bounds: Box to derive handles from
        rotation_offset: Distance of the rotation handle above the top edge,
            in image units

    Returns:
        List of nine TransformHandle
    """
    x, y, width, height = bounds.x, bounds.y, bounds.width, bounds.height
    center_x = x + width / 2
    center_y = y + height / 2

    return [
        TransformHandle(HandleType.CORNER, HandlePosition.NW, Point(x, y)),
        TransformHandle(HandleType.CORNER, HandlePosition.NE, Point(x + width, y)),
        TransformHandle(HandleType.CORNER, HandlePosition.SW, Point(x, y + height)),
        TransformHandle(
            HandleType.CORNER, HandlePosition.SE, Point(x + width, y + height)
        ),
        TransformHandle(HandleType.EDGE, HandlePosition.N, Point(center_x, y)),
        TransformHandle(HandleType.EDGE, HandlePosition.S, Point(center_x, y + height)),
        TransformHandle(HandleType.EDGE, HandlePosition.E, Point(x + width, center_y)),
        TransformHandle(HandleType.EDGE, HandlePosition.W, Point(x, center_y)),
        TransformHandle(
            HandleType.ROTATION,
            HandlePosition.ROTATE,
            Point(center_x, y - rotation_offset),
        ),
    ]


def handle_at_point(
    point: Point,
    bounds: Bounds,
    tolerance: float = HANDLE_TOLERANCE,
    rotation_offset: float = ROTATION_HANDLE_OFFSET,
) -> Optional[TransformHandle]:
    """
    Find the first handle within ``tolerance`` of a point.

    Callers working in image space should pass ``tolerance / scale`` so the
    grab area stays constant on screen.

    Returns:
        The matching handle, or None
    """
    for handle in handles_for(bounds, rotation_offset):
        if distance(point, handle.point) <= tolerance:
            return handle
    return None


def cursor_for_handle(handle: Optional[TransformHandle]) -> str:
    """Cursor hint shown while hovering or dragging a handle."""
    if handle is None:
        return "default"
    return _CURSORS.get(handle.position, "default")
