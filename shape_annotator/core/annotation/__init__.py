"""
Core annotation module - UI-agnostic annotation geometry.

This module provides the shape model, hit-testing, transform handles,
the transform engine and the pointer interaction state machine. It can
be used with any UI framework (OpenCV, Qt, Web, CLI).
"""

from .coords import ViewState, to_canvas_space, to_device_space
from .events import AnnotationEvent, EventEmitter, EventType
from .handles import cursor_for_handle, handle_at_point, handles_for
from .hit_test import find_annotation_at, point_in_annotation
from .labels import DEFAULT_LABELS, Label, color_for_label
from .redraw import FrameClock, RedrawScheduler
from .session import (
    InteractionResult,
    InteractionSession,
    PointerEvent,
    PointerKind,
    Scene,
    Tool,
)
from .state import (
    Annotation,
    Bounds,
    HandlePosition,
    HandleType,
    Point,
    ShapeType,
    TransformHandle,
)
from .transform import apply_transform, move_annotation

__all__ = [
    "Annotation",
    "AnnotationEvent",
    "Bounds",
    "DEFAULT_LABELS",
    "EventEmitter",
    "EventType",
    "FrameClock",
    "HandlePosition",
    "HandleType",
    "InteractionResult",
    "InteractionSession",
    "Label",
    "Point",
    "PointerEvent",
    "PointerKind",
    "RedrawScheduler",
    "Scene",
    "ShapeType",
    "Tool",
    "TransformHandle",
    "ViewState",
    "apply_transform",
    "color_for_label",
    "cursor_for_handle",
    "find_annotation_at",
    "handle_at_point",
    "handles_for",
    "move_annotation",
    "point_in_annotation",
    "to_canvas_space",
    "to_device_space",
]
