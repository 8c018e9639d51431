"""
Drawing surface abstraction.

A surface exposes the handful of 2D primitives the shape renderer needs,
with a Canvas-2D-like state stack (colors, line width, dash pattern, font
size and a uniform scale + translate transform). Coordinates passed to the
primitives are in user space; backends map them through the current
transform.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, List, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class SurfaceState:
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    stroke_color: str = "#000000"
    fill_color: str = "#000000"
    line_width: float = 1.0
    line_dash: Tuple[float, ...] = ()
    font_size: float = 10.0


class DrawingSurface(ABC):
    """Base class for rendering backends."""

    def __init__(self):
        self._state = SurfaceState()
        self._stack: List[SurfaceState] = []

    @property
    def state(self) -> SurfaceState:
        return self._state

    # State handling

    def save(self):
        self._stack.append(self._state)

    def restore(self):
        if self._stack:
            self._state = self._stack.pop()

    def scale(self, factor: float):
        self._state = replace(self._state, scale=self._state.scale * factor)

    def translate(self, dx: float, dy: float):
        state = self._state
        self._state = replace(
            state,
            translate_x=state.translate_x + state.scale * dx,
            translate_y=state.translate_y + state.scale * dy,
        )

    def reset_transform(self):
        self._state = replace(self._state, scale=1.0, translate_x=0.0, translate_y=0.0)

    def set_stroke(self, color: str, width: Optional[float] = None):
        self._state = replace(
            self._state,
            stroke_color=color,
            line_width=self._state.line_width if width is None else width,
        )

    def set_fill(self, color: str):
        self._state = replace(self._state, fill_color=color)

    def set_line_dash(self, pattern: Tuple[float, ...]):
        self._state = replace(self._state, line_dash=tuple(pattern))

    def set_font_size(self, size: float):
        self._state = replace(self._state, font_size=size)

    def to_device(self, x: float, y: float) -> Tuple[float, float]:
        """Map a user-space point through the current transform."""
        state = self._state
        return (
            x * state.scale + state.translate_x,
            y * state.scale + state.translate_y,
        )

    def to_device_length(self, length: float) -> float:
        return length * self._state.scale

    # Primitives

    @abstractmethod
    def clear(self):
        pass

    @abstractmethod
    def draw_image(self, image: np.ndarray):
        """Draw an image with its top-left corner at the user-space origin."""

    @abstractmethod
    def fill_rect(self, x: float, y: float, width: float, height: float):
        pass

    @abstractmethod
    def stroke_rect(self, x: float, y: float, width: float, height: float):
        pass

    @abstractmethod
    def fill_ellipse(self, cx: float, cy: float, rx: float, ry: float):
        pass

    @abstractmethod
    def stroke_ellipse(self, cx: float, cy: float, rx: float, ry: float):
        pass

    @abstractmethod
    def line(self, x1: float, y1: float, x2: float, y2: float):
        pass

    @abstractmethod
    def fill_text(self, text: str, x: float, y: float):
        """Draw text with its baseline starting at (x, y)."""

    @abstractmethod
    def measure_text(self, text: str) -> float:
        """Width of ``text`` in user-space units at the current font size."""


@dataclass(frozen=True)
class DrawCall:
    """One recorded primitive with the state it was drawn with."""

    name: str
    args: Tuple[Any, ...]
    state: SurfaceState

    @property
    def stroke_color(self) -> str:
        return self.state.stroke_color

    @property
    def fill_color(self) -> str:
        return self.state.fill_color

    @property
    def line_width(self) -> float:
        return self.state.line_width

    @property
    def line_dash(self) -> Tuple[float, ...]:
        return self.state.line_dash


class RecordingSurface(DrawingSurface):
    """
    Surface that records primitives instead of drawing them.

    The recorded display list is backend independent and is what tests and
    remote front-ends consume.
    """

    # Average glyph width relative to the font size
    GLYPH_WIDTH = 0.6

    def __init__(self):
        super().__init__()
        self.calls: List[DrawCall] = []

    def _record(self, name: str, *args):
        self.calls.append(DrawCall(name, args, self._state))

    def calls_named(self, name: str) -> List[DrawCall]:
        return [call for call in self.calls if call.name == name]

    def clear(self):
        self.calls.clear()
        self._record("clear")

    def draw_image(self, image: np.ndarray):
        self._record("draw_image", tuple(image.shape))

    def fill_rect(self, x, y, width, height):
        self._record("fill_rect", x, y, width, height)

    def stroke_rect(self, x, y, width, height):
        self._record("stroke_rect", x, y, width, height)

    def fill_ellipse(self, cx, cy, rx, ry):
        self._record("fill_ellipse", cx, cy, rx, ry)

    def stroke_ellipse(self, cx, cy, rx, ry):
        self._record("stroke_ellipse", cx, cy, rx, ry)

    def line(self, x1, y1, x2, y2):
        self._record("line", x1, y1, x2, y2)

    def fill_text(self, text, x, y):
        self._record("fill_text", text, x, y)

    def measure_text(self, text: str) -> float:
        return len(text) * self._state.font_size * self.GLYPH_WIDTH
