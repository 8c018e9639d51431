"""
GUI adapter for the interaction session.

Bridges the InteractionSession with a raster GUI (the OpenCV preview
window, or any toolkit able to show a numpy image).
"""

import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np
from easydict import EasyDict as edict

from ..config import get_default_config
from ..core.annotation import (
    Annotation,
    AnnotationEvent,
    EventType,
    FrameClock,
    InteractionResult,
    InteractionSession,
    Point,
    PointerEvent,
    PointerKind,
    RedrawScheduler,
    Scene,
    Tool,
    ViewState,
    color_for_label,
)
from ..rendering import RasterSurface, ShapeRenderer

logger = logging.getLogger(__name__)


def validate_image(image: np.ndarray) -> None:
    """
    Validate that image has correct format.

    Raises:
        ValueError: If image is invalid
    """
    if image is None:
        raise ValueError("Image is None")

    if not isinstance(image, np.ndarray):
        raise ValueError(f"Image must be numpy array, got {type(image)}")

    if image.ndim == 3 and image.shape[2] != 3:
        raise ValueError(f"Image must have 3 channels, got {image.shape[2]}")

    if image.ndim not in (2, 3):
        raise ValueError(f"Image must be (H, W) or (H, W, 3), got shape {image.shape}")

    if image.shape[0] == 0 or image.shape[1] == 0:
        raise ValueError(f"Image is empty, got shape {image.shape}")


class CanvasAdapter:
    """
    Adapter connecting InteractionSession to a GUI canvas.

    Owns what the core deliberately does not:
    - The annotation store (last writer for an id wins)
    - Selection, visibility, active tool and view
    - Redraw scheduling and the composed visualization
    """

    def __init__(
        self,
        surface_size: Tuple[int, int],
        session: Optional[InteractionSession] = None,
        config: Optional[edict] = None,
        request_frame: Optional[Callable[[Callable[[], None]], Any]] = None,
        cancel_frame: Optional[Callable[[Any], None]] = None,
        update_image_callback: Optional[Callable[[np.ndarray], None]] = None,
    ):
        """
        Initialize adapter.

        Args:
            surface_size: (width, height) of the display surface in pixels
            session: Core interaction session, created from ``config`` if omitted
            config: Configuration (see ``shape_annotator.config``)
            request_frame: Host hook scheduling a callback on the next
                display refresh. Defaults to an internal FrameClock that the
                host must ``tick()``
            cancel_frame: Host hook cancelling a scheduled callback
            update_image_callback: Called with every newly rendered frame
        """
        self.cfg = config if config is not None else get_default_config()
        self.session = session if session is not None else InteractionSession(self.cfg)
        self.renderer = ShapeRenderer(self.cfg)
        self.update_image_callback = update_image_callback

        self.surface_size = surface_size
        self.surface_origin = Point(0.0, 0.0)

        self.clock: Optional[FrameClock] = None
        if request_frame is None:
            self.clock = FrameClock()
            request_frame = self.clock.request_frame
            cancel_frame = self.clock.cancel_frame
        self.redraw = RedrawScheduler(self._render_frame, request_frame, cancel_frame)

        self._annotations: Dict[str, Annotation] = {}
        self.selected_id: Optional[str] = None
        self.visible_ids = set()
        self.view = ViewState()
        self.tool = Tool.SELECT
        self.cursor = "default"
        self.show_labels = False

        self._image: Optional[np.ndarray] = None
        self._draft: Optional[Annotation] = None
        self._frame: Optional[np.ndarray] = None

        # Subscribe to session events
        self._setup_event_handlers()

    def _setup_event_handlers(self):
        """Setup event handlers for session events."""
        handlers = {
            EventType.ANNOTATION_COMMITTED: self._on_annotation_committed,
            EventType.ANNOTATION_UPDATED: self._on_annotation_updated,
            EventType.SELECTION_CHANGED: self._on_selection_changed,
            EventType.VIEW_CHANGED: self._on_view_changed,
        }
        self._unsubscribers = [
            self.session.events.on(event_type, handler)
            for event_type, handler in handlers.items()
        ]

    def _on_annotation_committed(self, event: AnnotationEvent):
        annotation = event.data["annotation"]
        self._store(annotation)
        self.visible_ids.add(annotation.id)

    def _on_annotation_updated(self, event: AnnotationEvent):
        self._store(event.data["annotation"])

    def _on_selection_changed(self, event: AnnotationEvent):
        self.selected_id = event.data["selected_id"]

    def _on_view_changed(self, event: AnnotationEvent):
        self.view = event.data["view"]

    def _store(self, annotation: Annotation):
        self._annotations[annotation.id] = annotation

    # Store access

    @property
    def annotations(self) -> List[Annotation]:
        return list(self._annotations.values())

    def get_annotation(self, annotation_id: str) -> Optional[Annotation]:
        return self._annotations.get(annotation_id)

    @property
    def image(self) -> Optional[np.ndarray]:
        return self._image

    @property
    def draft(self) -> Optional[Annotation]:
        return self._draft

    def scene(self) -> Scene:
        """Snapshot of everything the session needs for one event."""
        return Scene(
            annotations=tuple(self._annotations.values()),
            selected_id=self.selected_id,
            visible_ids=frozenset(self.visible_ids),
            view=self.view,
            surface_origin=self.surface_origin,
        )

    # Image and view

    def load_image(self, image: np.ndarray, annotations=()):
        """
        Show a new image, replacing the current annotation set.

        Args:
            image: RGB (H, W, 3) or grayscale (H, W) image
            annotations: Annotations already attached to the image
        """
        validate_image(image)
        self.session.cancel()
        self._image = image
        self._draft = None
        self._annotations = {a.id: a for a in annotations}
        self.visible_ids = set(self._annotations)
        self.selected_id = None
        self.reset_view()

        self.session.events.emit(
            AnnotationEvent(
                EventType.IMAGE_LOADED,
                {"image_shape": image.shape, "num_annotations": len(annotations)},
            )
        )

    def _set_view(self, view: ViewState):
        self.view = view
        self.session.events.emit(AnnotationEvent(EventType.VIEW_CHANGED, {"view": view}))
        self.redraw.request_redraw("view")

    def _image_size(self) -> Optional[Tuple[int, int]]:
        if self._image is None:
            return None
        return self._image.shape[1], self._image.shape[0]

    def reset_view(self):
        """Fit the image without enlarging it."""
        image_size = self._image_size()
        if image_size is not None:
            self._set_view(ViewState.fit(self.surface_size, image_size))

    def fit_to_screen(self):
        """Fit the image, enlarging small images."""
        image_size = self._image_size()
        if image_size is not None:
            self._set_view(
                ViewState.fit(self.surface_size, image_size, allow_upscale=True)
            )

    def zoom_in(self):
        self._set_view(self.view.zoom_in(self.cfg.zoom_step, self.cfg.max_scale))

    def zoom_out(self):
        self._set_view(self.view.zoom_out(self.cfg.zoom_step, self.cfg.min_scale))

    def resize(self, surface_size: Tuple[int, int]):
        self.surface_size = surface_size
        self.redraw.request_redraw("resize")

    # Tools and pointer input

    def set_tool(self, tool):
        tool = Tool(tool)
        if tool is self.tool:
            return
        # Switching tools abandons a gesture in progress
        self.session.cancel()
        self._draft = None
        self.tool = tool
        self.cursor = "default" if tool is Tool.SELECT else "crosshair"
        self.session.events.emit(
            AnnotationEvent(EventType.TOOL_CHANGED, {"tool": tool.value})
        )
        self.redraw.request_redraw("tool")

    def pointer(self, kind, x: float, y: float) -> InteractionResult:
        """Feed a device pointer event to the session and apply the result."""
        event = PointerEvent(PointerKind(kind), x, y, self.tool)
        result = self.session.handle(event, self.scene())

        self.cursor = result.cursor
        self.selected_id = result.selected_id
        self._draft = result.draft
        if result.needs_redraw:
            self.redraw.request_redraw(event.kind.value)
        return result

    def pointer_down(self, x: float, y: float) -> InteractionResult:
        return self.pointer(PointerKind.DOWN, x, y)

    def pointer_move(self, x: float, y: float) -> InteractionResult:
        return self.pointer(PointerKind.MOVE, x, y)

    def pointer_up(self, x: float, y: float) -> InteractionResult:
        return self.pointer(PointerKind.UP, x, y)

    # Annotation list operations

    def add_annotation(self, annotation: Annotation):
        self._store(annotation)
        self.visible_ids.add(annotation.id)
        self.redraw.request_redraw("add")

    def delete_annotation(self, annotation_id: str) -> bool:
        """
        Delete an annotation.

        Returns:
            True if the annotation existed
        """
        if self._annotations.pop(annotation_id, None) is None:
            return False
        self.visible_ids.discard(annotation_id)
        if self.selected_id == annotation_id:
            self.selected_id = None
            self.session.cancel()

        self.session.events.emit(
            AnnotationEvent(EventType.ANNOTATION_DELETED, {"annotation_id": annotation_id})
        )
        self.redraw.request_redraw("delete")
        return True

    def delete_selected(self) -> bool:
        if self.selected_id is None:
            return False
        return self.delete_annotation(self.selected_id)

    def set_label(self, annotation_id: str, label: str) -> Optional[Annotation]:
        """Change an annotation's label; its color follows the label."""
        annotation = self._annotations.get(annotation_id)
        if annotation is None:
            return None

        relabeled = replace(annotation, label=label, color=color_for_label(label))
        self._store(relabeled)
        self.session.events.emit(
            AnnotationEvent(EventType.ANNOTATION_RELABELED, {"annotation": relabeled})
        )
        self.redraw.request_redraw("label")
        return relabeled

    def toggle_visibility(self, annotation_id: str) -> bool:
        """
        Show or hide an annotation.

        Returns:
            The new visibility
        """
        if annotation_id in self.visible_ids:
            self.visible_ids.discard(annotation_id)
            visible = False
        else:
            self.visible_ids.add(annotation_id)
            visible = True

        self.session.events.emit(
            AnnotationEvent(
                EventType.VISIBILITY_CHANGED,
                {"annotation_id": annotation_id, "visible": visible},
            )
        )
        self.redraw.request_redraw("visibility")
        return visible

    def select(self, annotation_id: Optional[str]):
        """Select from a list; selecting the selected annotation clears it."""
        previous = self.selected_id
        self.selected_id = None if annotation_id == previous else annotation_id
        self.session.events.emit(
            AnnotationEvent(
                EventType.SELECTION_CHANGED,
                {"selected_id": self.selected_id, "previous_id": previous},
            )
        )
        self.redraw.request_redraw("select")

    # Rendering

    def get_visualization(self) -> Optional[np.ndarray]:
        """
        Get visualization for display.

        Returns:
            RGB image of the whole surface, or None while no image is loaded
        """
        width, height = self.surface_size
        surface = RasterSurface(width, height)
        drawn = self.renderer.render_scene(
            surface,
            self._image,
            self.annotations,
            self.view,
            selected_id=self.selected_id,
            visible_ids=self.visible_ids,
            draft=self._draft,
            show_labels=self.show_labels,
        )
        return surface.image if drawn else None

    def _render_frame(self):
        frame = self.get_visualization()
        if frame is None:
            return
        self._frame = frame
        if self.update_image_callback:
            self.update_image_callback(frame)

    @property
    def frame(self) -> Optional[np.ndarray]:
        """Last rendered frame."""
        return self._frame

    def close(self):
        """Tear down: cancel pending redraws and detach from the session."""
        self.redraw.close()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
