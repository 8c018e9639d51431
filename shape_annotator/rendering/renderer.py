"""
Shape Renderer.

Draws annotations, their selection decorations, transform handles and
labels onto any ``DrawingSurface``. Renders never modify annotations.

All decoration sizes are given in screen pixels and divided by the view
scale, so strokes and handles keep a constant size on screen at any zoom.
"""

import logging
from typing import Callable, Container, Dict, Iterable, Optional

import numpy as np
from easydict import EasyDict as edict
from matplotlib.colors import to_hex, to_rgba

from ..config import get_default_config
from ..core.annotation.coords import ViewState
from ..core.annotation.geometry import bounds_from_points, circle_from_points
from ..core.annotation.handles import handles_for
from ..core.annotation.state import Annotation, Bounds, HandleType, ShapeType
from .surface import DrawingSurface

logger = logging.getLogger(__name__)


def with_alpha(color: str, alpha: float) -> str:
    """``#rrggbbaa`` variant of a color with the given alpha."""
    try:
        r, g, b, _ = to_rgba(color)
    except ValueError:
        logger.debug("Unparseable color %r, using black", color)
        r, g, b = 0.0, 0.0, 0.0
    return to_hex((r, g, b, alpha), keep_alpha=True)


class ShapeRenderer:
    """
    Renders annotations to a DrawingSurface.

    Provides methods to:
    - Render a single annotation with selection, handles and label
    - Render a whole scene (image, annotations and the draft in progress)
    """

    def __init__(self, config: Optional[edict] = None):
        cfg = config if config is not None else get_default_config()
        self.cfg = cfg.render
        self.rotation_handle_offset = cfg.rotation_handle_offset

        # Every ShapeType must have an entry
        self._shape_painters: Dict[
            ShapeType, Callable[[DrawingSurface, Annotation], None]
        ] = {
            ShapeType.RECTANGLE: self._draw_rectangle,
            ShapeType.CIRCLE: self._draw_circle,
        }

    @property
    def supported_types(self):
        return frozenset(self._shape_painters)

    def render(
        self,
        surface: DrawingSurface,
        annotation: Annotation,
        scale: float = 1.0,
        is_selected: bool = False,
        show_label: bool = True,
        show_handles: bool = False,
    ):
        """
        Render one annotation.

        Args:
            surface: Surface to draw on, already carrying the view transform
            annotation: Annotation to draw
            scale: Current view scale, used to keep decorations screen-sized
            is_selected: Draw with the dashed selection stroke
            show_label: Draw the label box at the top-left corner
            show_handles: Draw transform handles (only when selected)
        """
        painter = (
            self._shape_painters.get(annotation.type)
            if annotation.is_supported
            else None
        )
        if painter is None:
            logger.debug(
                "Skipping annotation %s with unsupported type %r",
                annotation.id,
                annotation.type_name,
            )
            return

        cfg = self.cfg
        surface.save()
        surface.set_fill(with_alpha(annotation.color, cfg.fill_alpha))
        if is_selected:
            surface.set_stroke(cfg.selection_color, cfg.selected_line_width / scale)
            surface.set_line_dash((cfg.dash / scale, cfg.dash / scale))
        else:
            surface.set_stroke(annotation.color, cfg.line_width / scale)
            surface.set_line_dash(())

        painter(surface, annotation)

        if is_selected and show_handles and annotation.bounds is not None:
            self._draw_handles(surface, annotation.bounds, scale)

        if show_label and annotation.label and annotation.bounds is not None:
            self._draw_label(surface, annotation.label, annotation.bounds, scale)

        surface.restore()

    def _draw_rectangle(self, surface: DrawingSurface, annotation: Annotation):
        bounds = annotation.bounds
        if bounds is None:
            if len(annotation.points) < 2:
                logger.debug("Rectangle %s has too few points", annotation.id)
                return
            bounds = bounds_from_points(annotation.points[0], annotation.points[1])

        surface.fill_rect(bounds.x, bounds.y, bounds.width, bounds.height)
        surface.stroke_rect(bounds.x, bounds.y, bounds.width, bounds.height)

    def _draw_circle(self, surface: DrawingSurface, annotation: Annotation):
        bounds = annotation.bounds
        if bounds is not None:
            cx = bounds.x + bounds.width / 2
            cy = bounds.y + bounds.height / 2
            rx = bounds.width / 2
            ry = bounds.height / 2
        else:
            # Circles stored before bounds existed: center + point on radius
            circle = circle_from_points(annotation.points)
            if circle is None:
                logger.debug("Circle %s has too few points", annotation.id)
                return
            center, radius = circle
            cx, cy, rx, ry = center.x, center.y, radius, radius

        surface.fill_ellipse(cx, cy, rx, ry)
        surface.stroke_ellipse(cx, cy, rx, ry)

    def _draw_handles(self, surface: DrawingSurface, bounds: Bounds, scale: float):
        cfg = self.cfg
        size = cfg.handle_size / scale
        half = size / 2

        surface.save()
        surface.set_fill(cfg.handle_fill_color)
        surface.set_stroke(cfg.handle_stroke_color, 1 / scale)
        surface.set_line_dash(())

        for handle in handles_for(bounds, self.rotation_handle_offset):
            x, y = handle.point.x, handle.point.y
            if handle.type is HandleType.ROTATION:
                surface.fill_ellipse(x, y, half, half)
                surface.stroke_ellipse(x, y, half, half)
                surface.line(x, y + half, bounds.x + bounds.width / 2, bounds.y)
            else:
                surface.fill_rect(x - half, y - half, size, size)
                surface.stroke_rect(x - half, y - half, size, size)

        surface.restore()

    def _draw_label(
        self, surface: DrawingSurface, label: str, bounds: Bounds, scale: float
    ):
        cfg = self.cfg
        surface.save()
        surface.set_font_size(cfg.label_font_size / scale)
        surface.set_line_dash(())

        text_width = surface.measure_text(label)
        padding = cfg.label_padding / scale
        height = cfg.label_height / scale

        surface.set_fill(cfg.label_background)
        surface.fill_rect(
            bounds.x, bounds.y - height - padding, text_width + padding * 2, height
        )

        surface.set_fill(cfg.label_text_color)
        surface.fill_text(label, bounds.x + padding, bounds.y - padding)
        surface.restore()

    def render_scene(
        self,
        surface: DrawingSurface,
        image: Optional[np.ndarray],
        annotations: Iterable[Annotation],
        view: ViewState,
        selected_id: Optional[str] = None,
        visible_ids: Optional[Container[str]] = None,
        draft: Optional[Annotation] = None,
        show_labels: bool = False,
        show_handles: bool = True,
    ) -> bool:
        """
        Render a full frame: image, visible annotations and the draft.

        Nothing is drawn while the image is missing (not loaded yet) or empty.

        Returns:
            True if a frame was drawn
        """
        if image is None or image.size == 0:
            logger.debug("Image not ready, skipping frame")
            return False

        surface.clear()
        surface.save()
        surface.scale(view.scale)
        surface.translate(view.offset.x, view.offset.y)

        surface.draw_image(image)
        for annotation in annotations:
            if visible_ids is not None and annotation.id not in visible_ids:
                continue
            self.render(
                surface,
                annotation,
                view.scale,
                is_selected=annotation.id == selected_id,
                show_label=show_labels,
                show_handles=show_handles,
            )

        if draft is not None:
            self.render(surface, draft, view.scale, is_selected=True, show_label=False)

        surface.restore()
        return True
