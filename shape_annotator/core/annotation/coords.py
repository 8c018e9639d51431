"""
Coordinate mapping between device (screen) space and image space.

The render pipeline applies ``scale`` first and then ``translate(offset)``,
so an image point ``p`` lands at ``(p + offset) * scale + origin`` on the
device. ``to_canvas_space`` is the exact inverse of that mapping.
"""

from dataclasses import dataclass, field
from typing import Tuple

from .state import Point

ZOOM_STEP = 1.2
MIN_SCALE = 0.1
MAX_SCALE = 5.0


def to_canvas_space(
    device_point: Point, surface_origin: Point, scale: float, offset: Point
) -> Point:
    """Map a device pointer position to image-space coordinates."""
    return Point(
        (device_point.x - surface_origin.x) / scale - offset.x,
        (device_point.y - surface_origin.y) / scale - offset.y,
    )


def to_device_space(
    canvas_point: Point, surface_origin: Point, scale: float, offset: Point
) -> Point:
    """Map an image-space point to device coordinates (the render transform)."""
    return Point(
        (canvas_point.x + offset.x) * scale + surface_origin.x,
        (canvas_point.y + offset.y) * scale + surface_origin.y,
    )


@dataclass(frozen=True)
class ViewState:
    """
    Zoom and pan of a view.

    ``offset`` is expressed in image units and applied after ``scale``.
    The core never owns a view; callers pass it into every operation and
    get a new one back when it changes.
    """

    scale: float = 1.0
    offset: Point = field(default_factory=lambda: Point(0.0, 0.0))

    def __post_init__(self):
        if not self.scale > 0:
            raise ValueError(f"View scale must be positive, got {self.scale}")

    def to_canvas(self, device_point: Point, surface_origin: Point = Point(0, 0)) -> Point:
        return to_canvas_space(device_point, surface_origin, self.scale, self.offset)

    def to_device(self, canvas_point: Point, surface_origin: Point = Point(0, 0)) -> Point:
        return to_device_space(canvas_point, surface_origin, self.scale, self.offset)

    def pan(self, device_dx: float, device_dy: float) -> "ViewState":
        """Move the view by a pointer delta measured on the device."""
        return ViewState(
            self.scale,
            Point(
                self.offset.x + device_dx / self.scale,
                self.offset.y + device_dy / self.scale,
            ),
        )

    def zoom_in(self, step: float = ZOOM_STEP, max_scale: float = MAX_SCALE) -> "ViewState":
        return ViewState(min(max_scale, self.scale * step), self.offset)

    def zoom_out(self, step: float = ZOOM_STEP, min_scale: float = MIN_SCALE) -> "ViewState":
        return ViewState(max(min_scale, self.scale / step), self.offset)

    @classmethod
    def fit(
        cls,
        surface_size: Tuple[int, int],
        image_size: Tuple[int, int],
        allow_upscale: bool = False,
    ) -> "ViewState":
        """
        View showing the whole image centered on the surface.

        Args:
            surface_size: (width, height) of the drawing surface in device pixels
            image_size: (width, height) of the image
            allow_upscale: If False the scale is capped at 1 (reset view);
                if True small images are enlarged to fill the surface

        Raises:
            ValueError: If any size is not positive
        """
        surface_w, surface_h = surface_size
        image_w, image_h = image_size
        if min(surface_w, surface_h, image_w, image_h) <= 0:
            raise ValueError(
                f"Sizes must be positive, got surface {surface_size} and image {image_size}"
            )

        scale = min(surface_w / image_w, surface_h / image_h)
        if not allow_upscale:
            scale = min(scale, 1.0)
        return cls(
            scale,
            Point(
                (surface_w / scale - image_w) / 2,
                (surface_h / scale - image_h) / 2,
            ),
        )
