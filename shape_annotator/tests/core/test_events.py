"""
Tests for the event emitter.
"""

import logging
from unittest.mock import Mock

from shape_annotator.core.annotation import AnnotationEvent, EventEmitter, EventType


class TestEventEmitter:
    """Test EventEmitter functionality."""

    def test_subscribe_and_emit(self):
        emitter = EventEmitter()
        callback = Mock()
        emitter.on(EventType.ANNOTATION_COMMITTED, callback)

        event = AnnotationEvent(EventType.ANNOTATION_COMMITTED, {"annotation": "a"})
        emitter.emit(event)

        callback.assert_called_once_with(event)

    def test_only_matching_type_notified(self):
        emitter = EventEmitter()
        callback = Mock()
        emitter.on(EventType.VIEW_CHANGED, callback)

        emitter.emit(AnnotationEvent(EventType.TOOL_CHANGED))

        callback.assert_not_called()

    def test_unsubscribe(self):
        emitter = EventEmitter()
        callback = Mock()
        emitter.on(EventType.VIEW_CHANGED, callback)
        emitter.off(EventType.VIEW_CHANGED, callback)

        emitter.emit(AnnotationEvent(EventType.VIEW_CHANGED))

        callback.assert_not_called()

    def test_listener_error_is_logged_and_others_still_run(self, caplog):
        emitter = EventEmitter()
        failing = Mock(side_effect=RuntimeError("boom"))
        after = Mock()
        emitter.on(EventType.SELECTION_CHANGED, failing)
        emitter.on(EventType.SELECTION_CHANGED, after)

        with caplog.at_level(logging.WARNING):
            emitter.emit(AnnotationEvent(EventType.SELECTION_CHANGED))

        after.assert_called_once()
        assert "boom" in caplog.text

    def test_listener_may_unsubscribe_itself(self):
        emitter = EventEmitter()
        calls = []

        def once(event):
            calls.append(event)
            emitter.off(EventType.IMAGE_LOADED, once)

        emitter.on(EventType.IMAGE_LOADED, once)
        emitter.emit(AnnotationEvent(EventType.IMAGE_LOADED))
        emitter.emit(AnnotationEvent(EventType.IMAGE_LOADED))

        assert len(calls) == 1

    def test_event_data_defaults_to_dict(self):
        assert AnnotationEvent(EventType.TOOL_CHANGED).data == {}

    def test_clear(self):
        emitter = EventEmitter()
        callback = Mock()
        emitter.on(EventType.VIEW_CHANGED, callback)
        emitter.clear()

        emitter.emit(AnnotationEvent(EventType.VIEW_CHANGED))

        callback.assert_not_called()

    def test_on_returns_unsubscribe(self):
        emitter = EventEmitter()
        callback = Mock()
        unsubscribe = emitter.on(EventType.VIEW_CHANGED, callback)

        unsubscribe()
        unsubscribe()
        emitter.emit(AnnotationEvent(EventType.VIEW_CHANGED))

        callback.assert_not_called()
        assert emitter.listener_count(EventType.VIEW_CHANGED) == 0

    def test_off_unknown_callback_is_ignored(self):
        emitter = EventEmitter()
        emitter.off(EventType.VIEW_CHANGED, Mock())
        assert emitter.listener_count(EventType.VIEW_CHANGED) == 0
