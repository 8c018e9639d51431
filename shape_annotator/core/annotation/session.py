"""
Interaction session management.

Core logic turning a pointer event stream into annotation edits.
UI-agnostic - can be used with any interface (GUI, Web, CLI).
"""

import logging
import random
import string
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import AbstractSet, Callable, Optional, Sequence, Union

from easydict import EasyDict as edict

from ...config import get_default_config
from .coords import ViewState
from .events import AnnotationEvent, EventEmitter, EventType
from .geometry import bounds_from_points
from .handles import cursor_for_handle, handle_at_point
from .hit_test import CIRCLE_POLICIES, find_annotation_at
from .state import Annotation, HandleType, Point, ShapeType, TransformHandle
from .transform import apply_transform, move_annotation

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


class Tool(Enum):
    SELECT = "select"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"


class PointerKind(Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"


@dataclass(frozen=True)
class PointerEvent:
    """A pointer event in device coordinates."""

    kind: PointerKind
    x: float
    y: float
    tool: Tool = Tool.SELECT

    def __post_init__(self):
        # Raises ValueError for unknown names
        object.__setattr__(self, "kind", PointerKind(self.kind))
        object.__setattr__(self, "tool", Tool(self.tool))

    @property
    def device_point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class Scene:
    """
    Everything the caller owns that an event needs to be interpreted.

    ``visible_ids`` of None means every annotation is visible.
    """

    annotations: Sequence[Annotation] = ()
    selected_id: Optional[str] = None
    visible_ids: Optional[AbstractSet[str]] = None
    view: ViewState = field(default_factory=ViewState)
    surface_origin: Point = field(default_factory=lambda: Point(0.0, 0.0))

    def get(self, annotation_id: Optional[str]) -> Optional[Annotation]:
        for annotation in self.annotations:
            if annotation.id == annotation_id:
                return annotation
        return None

    def is_visible(self, annotation_id: str) -> bool:
        return self.visible_ids is None or annotation_id in self.visible_ids

    def to_canvas(self, event: PointerEvent) -> Point:
        return self.view.to_canvas(event.device_point, self.surface_origin)


# Interaction states. Each carries the data of its own gesture only.


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Drawing:
    draft: Annotation


@dataclass(frozen=True)
class Panning:
    last_device_point: Point


@dataclass(frozen=True)
class Transforming:
    annotation_id: str
    original: Annotation
    handle: TransformHandle
    start: Point


@dataclass(frozen=True)
class DraggingShape:
    annotation_id: str
    original: Annotation
    start: Point


InteractionState = Union[Idle, Drawing, Panning, Transforming, DraggingShape]


@dataclass(frozen=True)
class InteractionResult:
    """
    Outcome of one pointer event.

    ``updated`` and ``committed`` are new annotation values for the caller
    to store; ``view`` is set only when the event changed it.
    """

    cursor: str = "default"
    selected_id: Optional[str] = None
    view: Optional[ViewState] = None
    updated: Optional[Annotation] = None
    committed: Optional[Annotation] = None
    draft: Optional[Annotation] = None
    needs_redraw: bool = False


def generate_annotation_id() -> str:
    """Unique id such as ``annotation-1700000000000-k3j9x0a1b``."""
    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(9))
    return f"annotation-{int(time.time() * 1000)}-{suffix}"


def is_committable(annotation: Annotation, min_size: float) -> bool:
    """Whether a finished draft is large enough to keep.

    Both sides must be strictly larger than ``min_size``.
    """
    bounds = annotation.bounds
    return (
        bounds is not None and bounds.width > min_size and bounds.height > min_size
    )


class InteractionSession:
    """
    Drives drawing, selection and transforms from pointer events.

    This class handles:
    - Mode decision on pointer-down (transform / drag / pan / draw)
    - Live geometry updates on pointer-move
    - Commit or discard on pointer-up
    - Event emission for UI updates

    The session never keeps the caller's annotations between events; the
    only thing it remembers is the current gesture, held in ``state``.
    """

    def __init__(
        self,
        config: Optional[edict] = None,
        id_factory: Callable[[], str] = generate_annotation_id,
    ):
        """
        Initialize interaction session.

        Args:
            config: Configuration (see ``shape_annotator.config``)
            id_factory: Produces ids for new annotations
        """
        self.cfg = config if config is not None else get_default_config()
        if self.cfg.circle_hit_policy not in CIRCLE_POLICIES:
            raise ValueError(
                f"Unknown circle hit policy {self.cfg.circle_hit_policy!r}"
            )
        self.id_factory = id_factory

        self.state: InteractionState = Idle()

        # Event emitter for UI notifications
        self.events = EventEmitter()

    @property
    def is_idle(self) -> bool:
        return isinstance(self.state, Idle)

    def handle(self, event: PointerEvent, scene: Scene) -> InteractionResult:
        """Feed one pointer event through the state machine."""
        if event.kind is PointerKind.DOWN:
            return self.pointer_down(event, scene)
        if event.kind is PointerKind.MOVE:
            return self.pointer_move(event, scene)
        return self.pointer_up(event, scene)

    def cancel(self):
        """Abandon the gesture in progress without committing anything."""
        if not self.is_idle:
            logger.debug("Cancelling %s", type(self.state).__name__)
        self.state = Idle()

    def _set_state(self, state: InteractionState):
        logger.debug(
            "Interaction state %s -> %s",
            type(self.state).__name__,
            type(state).__name__,
        )
        self.state = state

    # Pointer down

    def pointer_down(self, event: PointerEvent, scene: Scene) -> InteractionResult:
        if not self.is_idle:
            # A lost pointer-up must not leave two gestures running
            logger.debug(
                "Pointer down while %s, resetting", type(self.state).__name__
            )
            self.state = Idle()

        point = scene.to_canvas(event)
        if event.tool is Tool.SELECT:
            return self._begin_select(point, event, scene)
        return self._begin_draw(point, event.tool, scene)

    def _begin_select(
        self, point: Point, event: PointerEvent, scene: Scene
    ) -> InteractionResult:
        selected = scene.get(scene.selected_id)
        if (
            selected is not None
            and selected.bounds is not None
            and scene.is_visible(selected.id)
        ):
            handle = handle_at_point(
                point,
                selected.bounds,
                self.cfg.handle_tolerance / scene.view.scale,
                self.cfg.rotation_handle_offset,
            )
            if handle is not None:
                self._set_state(Transforming(selected.id, selected, handle, point))
                self.events.emit(
                    AnnotationEvent(
                        EventType.TRANSFORM_STARTED,
                        {"annotation_id": selected.id, "handle": handle.position.value},
                    )
                )
                return InteractionResult(
                    cursor=cursor_for_handle(handle), selected_id=selected.id
                )

        hit_id = find_annotation_at(
            point, scene.annotations, scene.visible_ids, self.cfg.circle_hit_policy
        )
        if hit_id is not None:
            self._set_state(DraggingShape(hit_id, scene.get(hit_id), point))
            if hit_id != scene.selected_id:
                self.events.emit(
                    AnnotationEvent(
                        EventType.SELECTION_CHANGED,
                        {"selected_id": hit_id, "previous_id": scene.selected_id},
                    )
                )
            return InteractionResult(
                cursor="move",
                selected_id=hit_id,
                needs_redraw=hit_id != scene.selected_id,
            )

        self._set_state(Panning(event.device_point))
        return InteractionResult(cursor="grabbing", selected_id=scene.selected_id)

    def _begin_draw(self, point: Point, tool: Tool, scene: Scene) -> InteractionResult:
        draft = Annotation(
            id=self.id_factory(),
            type=ShapeType(tool.value),
            points=(point,),
            bounds=bounds_from_points(point, point),
        )
        self._set_state(Drawing(draft))
        self.events.emit(
            AnnotationEvent(
                EventType.DRAW_STARTED, {"annotation_id": draft.id, "type": tool.value}
            )
        )
        return InteractionResult(
            cursor="crosshair",
            selected_id=scene.selected_id,
            draft=draft,
            needs_redraw=True,
        )

    # Pointer move

    def pointer_move(self, event: PointerEvent, scene: Scene) -> InteractionResult:
        state = self.state

        if isinstance(state, Drawing):
            draft = self._extend_draft(state.draft, scene.to_canvas(event))
            self.state = Drawing(draft)
            return InteractionResult(
                cursor="crosshair",
                selected_id=scene.selected_id,
                draft=draft,
                needs_redraw=True,
            )

        if isinstance(state, Panning):
            device_point = event.device_point
            view = scene.view.pan(
                device_point.x - state.last_device_point.x,
                device_point.y - state.last_device_point.y,
            )
            self.state = Panning(device_point)
            self.events.emit(AnnotationEvent(EventType.VIEW_CHANGED, {"view": view}))
            return InteractionResult(
                cursor="grabbing",
                selected_id=scene.selected_id,
                view=view,
                needs_redraw=True,
            )

        if isinstance(state, (Transforming, DraggingShape)):
            updated = self._edit(state, scene.to_canvas(event))
            self.events.emit(
                AnnotationEvent(
                    EventType.ANNOTATION_UPDATED,
                    {"annotation": updated, "final": False},
                )
            )
            return InteractionResult(
                cursor=self._gesture_cursor(state),
                selected_id=state.annotation_id,
                updated=updated,
                needs_redraw=True,
            )

        return InteractionResult(
            cursor=self.hover_cursor(event, scene), selected_id=scene.selected_id
        )

    def hover_cursor(self, event: PointerEvent, scene: Scene) -> str:
        """Cursor hint for a pointer moving with no button held."""
        if event.tool is not Tool.SELECT:
            return "crosshair"

        point = scene.to_canvas(event)
        selected = scene.get(scene.selected_id)
        if (
            selected is not None
            and selected.bounds is not None
            and scene.is_visible(selected.id)
        ):
            handle = handle_at_point(
                point,
                selected.bounds,
                self.cfg.handle_tolerance / scene.view.scale,
                self.cfg.rotation_handle_offset,
            )
            if handle is not None:
                return cursor_for_handle(handle)

        hit_id = find_annotation_at(
            point, scene.annotations, scene.visible_ids, self.cfg.circle_hit_policy
        )
        return "move" if hit_id is not None else "default"

    @staticmethod
    def _gesture_cursor(state: Union[Transforming, DraggingShape]) -> str:
        if isinstance(state, Transforming):
            if state.handle.type is HandleType.ROTATION:
                return "grabbing"
            return cursor_for_handle(state.handle)
        return "move"

    @staticmethod
    def _extend_draft(draft: Annotation, point: Point) -> Annotation:
        anchor = draft.points[0]
        return replace(
            draft, points=(anchor, point), bounds=bounds_from_points(anchor, point)
        )

    def _edit(
        self, state: Union[Transforming, DraggingShape], point: Point
    ) -> Annotation:
        # Always recompute from the snapshot taken at pointer-down
        if isinstance(state, Transforming):
            return apply_transform(
                state.original, state.handle, state.start, point, self.cfg.min_size
            )
        return move_annotation(state.original, state.start, point)

    # Pointer up

    def pointer_up(self, event: PointerEvent, scene: Scene) -> InteractionResult:
        state = self.state
        self._set_state(Idle())

        if isinstance(state, Drawing):
            return self._finish_draw(state, event, scene)

        if isinstance(state, (Transforming, DraggingShape)):
            updated = self._edit(state, scene.to_canvas(event))
            if updated == state.original:
                return InteractionResult(
                    cursor=self._gesture_cursor(state), selected_id=state.annotation_id
                )
            self.events.emit(
                AnnotationEvent(
                    EventType.ANNOTATION_UPDATED, {"annotation": updated, "final": True}
                )
            )
            return InteractionResult(
                cursor=self._gesture_cursor(state),
                selected_id=state.annotation_id,
                updated=updated,
                needs_redraw=True,
            )

        return InteractionResult(
            cursor=self.hover_cursor(event, scene), selected_id=scene.selected_id
        )

    def _finish_draw(
        self, state: Drawing, event: PointerEvent, scene: Scene
    ) -> InteractionResult:
        draft = self._extend_draft(state.draft, scene.to_canvas(event))

        if not is_committable(draft, self.cfg.commit_min_size):
            logger.debug(
                "Discarding %s draft %s below %s units",
                draft.type_name,
                draft.id,
                self.cfg.commit_min_size,
            )
            self.events.emit(
                AnnotationEvent(EventType.DRAW_DISCARDED, {"annotation_id": draft.id})
            )
            return InteractionResult(
                cursor="crosshair", selected_id=scene.selected_id, needs_redraw=True
            )

        self.events.emit(
            AnnotationEvent(EventType.ANNOTATION_COMMITTED, {"annotation": draft})
        )
        return InteractionResult(
            cursor="crosshair",
            selected_id=scene.selected_id,
            committed=draft,
            needs_redraw=True,
        )
