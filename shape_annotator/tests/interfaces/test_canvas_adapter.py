"""
Tests for CanvasAdapter.

Exercises the full pipeline: pointer events through the session into the
annotation store, and redraws through the scheduler into frames.
"""

from unittest.mock import Mock

import numpy as np
import pytest

from shape_annotator.core.annotation import (
    Bounds,
    EventType,
    Point,
    Tool,
    ViewState,
)
from shape_annotator.interfaces import CanvasAdapter
from shape_annotator.interfaces.gui_adapter import validate_image


@pytest.fixture
def frames():
    return Mock()


@pytest.fixture
def adapter(session, config, test_image, frames):
    # Surface matches the image so device and image coordinates coincide
    adapter = CanvasAdapter(
        (160, 120), session=session, config=config, update_image_callback=frames
    )
    adapter.load_image(test_image)
    adapter.clock.tick()
    frames.reset_mock()
    yield adapter
    adapter.close()


def draw(adapter, tool, start, end):
    adapter.set_tool(tool)
    adapter.pointer_down(*start)
    adapter.pointer_move(*end)
    return adapter.pointer_up(*end)


class TestValidateImage:
    def test_accepts_rgb_and_grayscale(self, test_image):
        validate_image(test_image)
        validate_image(test_image[..., 0])

    @pytest.mark.parametrize(
        "image",
        [
            None,
            [[0, 1]],
            np.zeros((4, 4, 4)),
            np.zeros((2, 2, 3, 1)),
            np.zeros(5),
            np.zeros((0, 0, 3)),
            np.zeros((10, 0)),
        ],
    )
    def test_rejects_invalid(self, image):
        with pytest.raises(ValueError):
            validate_image(image)


class TestLoading:
    def test_load_image_resets_state(self, adapter, test_image, rectangle, circle):
        adapter.selected_id = "something"
        listener = Mock()
        adapter.session.events.on(EventType.IMAGE_LOADED, listener)

        adapter.load_image(test_image, [rectangle, circle])

        assert [a.id for a in adapter.annotations] == ["rect", "circle"]
        assert adapter.visible_ids == {"rect", "circle"}
        assert adapter.selected_id is None
        assert adapter.view == ViewState(1.0, Point(0, 0))
        assert listener.call_args.args[0].data["num_annotations"] == 2

    def test_rejected_image_keeps_previous_state(self, adapter, test_image, rectangle):
        adapter.load_image(test_image, [rectangle])
        adapter.select("rect")

        with pytest.raises(ValueError):
            adapter.load_image(np.zeros((0, 0, 3), dtype=np.uint8))

        assert adapter.image is test_image
        assert adapter.get_annotation("rect") == rectangle
        assert adapter.selected_id == "rect"
        assert adapter.get_visualization().shape == (120, 160, 3)

    def test_reset_view_centers_small_image(self, session, config, test_image):
        adapter = CanvasAdapter((200, 150), session=session, config=config)
        adapter.load_image(test_image)
        assert adapter.view == ViewState(1.0, Point(20, 15))

    def test_fit_to_screen_enlarges(self, adapter):
        adapter.resize((320, 240))
        adapter.fit_to_screen()
        assert adapter.view.scale == 2.0

    def test_zoom(self, adapter):
        adapter.zoom_in()
        assert adapter.view.scale == pytest.approx(1.2)
        adapter.zoom_out()
        assert adapter.view.scale == pytest.approx(1.0)

    def test_no_frame_without_image(self, session, config, frames):
        adapter = CanvasAdapter((50, 50), session=session, config=config, update_image_callback=frames)
        assert adapter.get_visualization() is None

        adapter.zoom_in()
        adapter.clock.tick()

        frames.assert_not_called()
        assert adapter.frame is None


class TestDrawing:
    def test_draw_commits_to_store(self, adapter):
        result = draw(adapter, Tool.RECTANGLE, (10, 10), (60, 40))

        stored = adapter.get_annotation(result.committed.id)
        assert stored.bounds == Bounds(10, 10, 50, 30)
        assert stored.id in adapter.visible_ids
        assert adapter.draft is None

    def test_draft_exposed_while_drawing(self, adapter):
        adapter.set_tool("circle")
        adapter.pointer_down(10, 10)
        adapter.pointer_move(30, 30)

        assert adapter.draft.bounds == Bounds(10, 10, 20, 20)
        assert adapter.cursor == "crosshair"
        assert adapter.annotations == []

    def test_tool_switch_cancels_draft(self, adapter):
        adapter.set_tool(Tool.RECTANGLE)
        adapter.pointer_down(10, 10)
        adapter.pointer_move(50, 50)
        adapter.set_tool(Tool.SELECT)
        adapter.pointer_up(50, 50)

        assert adapter.draft is None
        assert adapter.annotations == []
        assert adapter.cursor != "crosshair"

    def test_small_draw_discarded(self, adapter):
        draw(adapter, Tool.RECTANGLE, (10, 10), (12, 40))
        assert adapter.annotations == []


class TestEditing:
    def test_select_then_resize(self, adapter):
        committed = draw(adapter, Tool.RECTANGLE, (10, 10), (60, 40)).committed

        adapter.set_tool(Tool.SELECT)
        adapter.pointer_down(30, 20)
        adapter.pointer_up(30, 20)
        assert adapter.selected_id == committed.id

        adapter.pointer_down(60, 40)
        adapter.pointer_move(80, 50)
        adapter.pointer_up(80, 50)

        assert adapter.get_annotation(committed.id).bounds == Bounds(10, 10, 70, 40)

    def test_pan_updates_view(self, adapter):
        adapter.pointer_down(150, 110)
        adapter.pointer_move(140, 100)
        assert adapter.view.offset == Point(-10, -10)

    def test_set_label_recolors(self, adapter, rectangle):
        adapter.add_annotation(rectangle)

        relabeled = adapter.set_label("rect", "Tumor")

        assert relabeled.color == "#EF4444"
        assert adapter.get_annotation("rect").label == "Tumor"
        assert adapter.set_label("missing", "Tumor") is None

    def test_delete(self, adapter, rectangle):
        adapter.add_annotation(rectangle)
        adapter.select("rect")
        listener = Mock()
        adapter.session.events.on(EventType.ANNOTATION_DELETED, listener)

        assert adapter.delete_selected()

        assert adapter.get_annotation("rect") is None
        assert "rect" not in adapter.visible_ids
        assert adapter.selected_id is None
        listener.assert_called_once()
        assert not adapter.delete_annotation("rect")
        assert not adapter.delete_selected()

    def test_toggle_visibility(self, adapter, rectangle):
        adapter.add_annotation(rectangle)

        assert adapter.toggle_visibility("rect") is False
        adapter.pointer_down(30, 20)
        assert adapter.selected_id is None

        assert adapter.toggle_visibility("rect") is True

    def test_list_selection_toggles(self, adapter, rectangle):
        adapter.add_annotation(rectangle)
        adapter.select("rect")
        assert adapter.selected_id == "rect"
        adapter.select("rect")
        assert adapter.selected_id is None


class TestRedraw:
    def test_events_coalesce_into_one_frame(self, adapter, frames):
        adapter.set_tool(Tool.RECTANGLE)
        adapter.pointer_down(10, 10)
        for x in range(20, 60, 5):
            adapter.pointer_move(x, 40)

        assert adapter.clock.pending == 1
        adapter.clock.tick()

        frames.assert_called_once()
        frame = frames.call_args.args[0]
        assert frame.shape == (120, 160, 3)
        assert adapter.frame is frame

    def test_frame_shows_annotation(self, adapter, rectangle):
        adapter.add_annotation(rectangle)
        adapter.clock.tick()
        # Stroke pixels take the annotation color
        np.testing.assert_allclose(adapter.frame[10, 35], [59, 130, 246], atol=8)

    def test_host_frame_hooks(self, session, config, test_image):
        request_frame = Mock(return_value=7)
        cancel_frame = Mock()
        adapter = CanvasAdapter(
            (160, 120),
            session=session,
            config=config,
            request_frame=request_frame,
            cancel_frame=cancel_frame,
        )
        adapter.load_image(test_image)
        adapter.zoom_in()

        request_frame.assert_called_once()
        adapter.close()
        cancel_frame.assert_called_once_with(7)

    def test_close_stops_rendering_and_detaches(self, adapter, frames):
        adapter.zoom_in()
        adapter.close()
        adapter.clock.tick()

        frames.assert_not_called()
        assert not adapter.redraw.request_redraw()
        for event_type in (EventType.ANNOTATION_COMMITTED, EventType.VIEW_CHANGED):
            assert adapter.session.events.listener_count(event_type) == 0

        # A second close is harmless
        adapter.close()
