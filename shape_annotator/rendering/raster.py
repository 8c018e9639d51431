"""
OpenCV drawing surface rendering into a numpy RGB image.
"""

from typing import Sequence, Tuple

import cv2
import numpy as np
from matplotlib.colors import to_rgba

from .surface import DrawingSurface

Color = Tuple[int, int, int]


def parse_color(color) -> Tuple[Color, float]:
    """
    Convert any matplotlib color spec to an 8-bit RGB tuple plus alpha.

    Accepts ``#rgb``, ``#rrggbb``, ``#rrggbbaa``, color names and RGB(A)
    float tuples.
    """
    r, g, b, a = to_rgba(color)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255))), a


class RasterSurface(DrawingSurface):
    """
    Surface drawing into an ``(H, W, 3)`` uint8 RGB array.

    Fills honour the alpha of the fill color by blending with what is
    already on the canvas. Strokes are opaque.
    """

    FONT = cv2.FONT_HERSHEY_SIMPLEX
    # Approximate pixel height of FONT_HERSHEY_SIMPLEX at font scale 1
    FONT_PIXEL_HEIGHT = 22.0
    ELLIPSE_DELTA_DEGREES = 5

    def __init__(self, width: int, height: int, background: Color = (0, 0, 0)):
        super().__init__()
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self.background = background
        self.image = np.zeros((height, width, 3), dtype=np.uint8)
        self.clear()

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]

    def clear(self):
        self.image[:] = self.background

    def draw_image(self, image: np.ndarray):
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
        if image.dtype != np.uint8:
            image = np.clip(image, 0, 255).astype(np.uint8)

        state = self.state
        matrix = np.float32(
            [
                [state.scale, 0, state.translate_x],
                [0, state.scale, state.translate_y],
            ]
        )
        self.image = cv2.warpAffine(
            image,
            matrix,
            (self.width, self.height),
            self.image,
            cv2.INTER_LINEAR,
            cv2.BORDER_TRANSPARENT,
        )

    # Geometry helpers

    def _device_polygon(self, points: Sequence[Tuple[float, float]]) -> np.ndarray:
        device = [self.to_device(x, y) for x, y in points]
        return np.round(np.array(device, dtype=np.float64)).astype(np.int32)

    def _rect_polygon(self, x, y, width, height) -> np.ndarray:
        return self._device_polygon(
            [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
        )

    def _ellipse_polygon(self, cx, cy, rx, ry) -> np.ndarray:
        center_x, center_y = self.to_device(cx, cy)
        axes = (
            max(0, int(round(self.to_device_length(abs(rx))))),
            max(0, int(round(self.to_device_length(abs(ry))))),
        )
        return cv2.ellipse2Poly(
            (int(round(center_x)), int(round(center_y))),
            axes,
            0,
            0,
            360,
            self.ELLIPSE_DELTA_DEGREES,
        )

    def _thickness(self) -> int:
        return max(1, int(round(self.to_device_length(self.state.line_width))))

    # Painting

    def _fill_polygon(self, polygon: np.ndarray):
        rgb, alpha = parse_color(self.state.fill_color)
        if alpha <= 0 or len(polygon) < 3:
            return
        if alpha >= 1:
            cv2.fillPoly(self.image, [polygon], rgb)
            return

        mask = np.zeros(self.image.shape[:2], dtype=np.uint8)
        cv2.fillPoly(mask, [polygon], 1)
        area = mask > 0
        self.image[area] = (
            alpha * np.array(rgb, dtype=np.float64) + (1 - alpha) * self.image[area]
        ).astype(np.uint8)

    def _stroke_polyline(self, polygon: np.ndarray, closed: bool):
        rgb, _ = parse_color(self.state.stroke_color)
        thickness = self._thickness()
        pattern = [self.to_device_length(d) for d in self.state.line_dash]
        if not pattern or sum(pattern) <= 0:
            cv2.polylines(self.image, [polygon], closed, rgb, thickness, cv2.LINE_AA)
            return

        vertices = polygon.astype(np.float64)
        if closed:
            vertices = np.vstack([vertices, vertices[:1]])

        index = 0
        remaining = pattern[0]
        for start, end in zip(vertices[:-1], vertices[1:]):
            segment = end - start
            length = float(np.hypot(*segment))
            if length == 0:
                continue
            direction = segment / length
            position = 0.0
            while position < length:
                step = min(remaining, length - position)
                if index % 2 == 0 and step > 0:
                    a = start + direction * position
                    b = start + direction * (position + step)
                    cv2.line(
                        self.image,
                        (int(round(a[0])), int(round(a[1]))),
                        (int(round(b[0])), int(round(b[1]))),
                        rgb,
                        thickness,
                        cv2.LINE_AA,
                    )
                position += step
                remaining -= step
                if remaining <= 1e-9:
                    index = (index + 1) % len(pattern)
                    remaining = pattern[index]

    def fill_rect(self, x, y, width, height):
        self._fill_polygon(self._rect_polygon(x, y, width, height))

    def stroke_rect(self, x, y, width, height):
        self._stroke_polyline(self._rect_polygon(x, y, width, height), closed=True)

    def fill_ellipse(self, cx, cy, rx, ry):
        self._fill_polygon(self._ellipse_polygon(cx, cy, rx, ry))

    def stroke_ellipse(self, cx, cy, rx, ry):
        self._stroke_polyline(self._ellipse_polygon(cx, cy, rx, ry), closed=True)

    def line(self, x1, y1, x2, y2):
        self._stroke_polyline(self._device_polygon([(x1, y1), (x2, y2)]), closed=False)

    # Text

    def _font_scale(self) -> float:
        pixels = max(1.0, self.to_device_length(self.state.font_size))
        return pixels / self.FONT_PIXEL_HEIGHT

    def fill_text(self, text, x, y):
        rgb, _ = parse_color(self.state.fill_color)
        org_x, org_y = self.to_device(x, y)
        cv2.putText(
            self.image,
            text,
            (int(round(org_x)), int(round(org_y))),
            self.FONT,
            self._font_scale(),
            rgb,
            1,
            cv2.LINE_AA,
        )

    def measure_text(self, text: str) -> float:
        (width, _), _ = cv2.getTextSize(text, self.FONT, self._font_scale(), 1)
        return width / self.state.scale
