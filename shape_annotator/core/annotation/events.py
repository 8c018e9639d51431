"""
Event system for the annotation workflow.

Provides a decoupled way for the annotation core to notify UI components
about state changes without depending on specific UI frameworks.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

Listener = Callable[["AnnotationEvent"], None]

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events that can occur during annotation."""

    # Image events
    IMAGE_LOADED = "image_loaded"

    # Drawing events
    DRAW_STARTED = "draw_started"
    DRAW_DISCARDED = "draw_discarded"
    ANNOTATION_COMMITTED = "annotation_committed"

    # Editing events
    TRANSFORM_STARTED = "transform_started"
    ANNOTATION_UPDATED = "annotation_updated"
    ANNOTATION_RELABELED = "annotation_relabeled"
    ANNOTATION_DELETED = "annotation_deleted"

    # Selection and visibility
    SELECTION_CHANGED = "selection_changed"
    VISIBILITY_CHANGED = "visibility_changed"

    # View events
    VIEW_CHANGED = "view_changed"
    TOOL_CHANGED = "tool_changed"


@dataclass
class AnnotationEvent:
    """Event that occurs during annotation."""

    event_type: EventType
    data: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if self.data is None:
            self.data = {}


class EventEmitter:
    """
    Publish/subscribe hub between the core and its adapters.

    Listeners run synchronously in subscription order. A failing listener
    is logged and skipped so it cannot break the pointer loop.
    """

    def __init__(self):
        self._listeners: Dict[EventType, List[Listener]] = defaultdict(list)

    def on(self, event_type: EventType, callback: Listener) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Returns:
            Function removing this subscription; calling it twice is harmless
        """
        self._listeners[event_type].append(callback)
        return lambda: self.off(event_type, callback)

    def off(self, event_type: EventType, callback: Listener):
        """Unsubscribe from an event type."""
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event: AnnotationEvent):
        # Copy so listeners may unsubscribe while being notified
        for callback in list(self._listeners.get(event.event_type, ())):
            try:
                callback(event)
            except Exception as e:
                logger.warning(
                    "Error in event listener for %s: %s",
                    event.event_type.value,
                    e,
                    exc_info=True,
                )

    def listener_count(self, event_type: EventType) -> int:
        return len(self._listeners.get(event_type, ()))

    def clear(self):
        """Clear all event listeners."""
        self._listeners.clear()
