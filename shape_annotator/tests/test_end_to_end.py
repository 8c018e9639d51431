"""
End-to-end integration tests.

Tests complete workflows from start to finish.
"""

import json
import tempfile
from pathlib import Path

import numpy as np
import pytest

from shape_annotator.core.annotation import Annotation, Bounds, Point, ShapeType, Tool
from shape_annotator.interfaces import CanvasAdapter


pytestmark = pytest.mark.integration


class TestAnnotationWorkflow:
    """Test complete annotation workflow."""

    def test_annotate_save_and_load(self, session, config, test_image):
        """Draw two shapes, label them, save to JSON and load them back."""
        adapter = CanvasAdapter((160, 120), session=session, config=config)
        adapter.load_image(test_image)

        # Annotate first object
        adapter.set_tool(Tool.RECTANGLE)
        adapter.pointer_down(10, 10)
        adapter.pointer_move(40, 30)
        rect = adapter.pointer_up(60, 40).committed

        # Annotate second object
        adapter.set_tool(Tool.CIRCLE)
        adapter.pointer_down(100, 60)
        circle = adapter.pointer_up(140, 100).committed

        adapter.set_label(rect.id, "Tumor")
        adapter.set_label(circle.id, "Cyst")

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "annotations.json"
            path.write_text(json.dumps([a.to_dict() for a in adapter.annotations]))

            loaded = [Annotation.from_dict(d) for d in json.loads(path.read_text())]

        assert loaded == adapter.annotations
        assert [a.type for a in loaded] == [ShapeType.RECTANGLE, ShapeType.CIRCLE]

        # Reload into a fresh canvas and keep editing
        new_adapter = CanvasAdapter((160, 120), config=config)
        new_adapter.load_image(test_image, loaded)
        new_adapter.pointer_down(30, 20)
        new_adapter.pointer_move(35, 25)
        new_adapter.pointer_up(35, 25)

        assert new_adapter.get_annotation(rect.id).bounds == Bounds(15, 15, 50, 30)
        assert new_adapter.get_annotation(rect.id).label == "Tumor"
        adapter.close()
        new_adapter.close()

    def test_legacy_annotations_render_and_edit(self, config, test_image):
        """Annotations stored before bounds existed are migrated on load."""
        stored = [
            {
                "id": "old-rect",
                "type": "rectangle",
                "label": "Lesion",
                "color": "#F59E0B",
                "points": [{"x": 80, "y": 60}, {"x": 20, "y": 20}],
            },
            {"id": "future", "type": "polygon", "points": [{"x": 1, "y": 1}]},
        ]
        annotations = [Annotation.from_dict(d) for d in stored]

        adapter = CanvasAdapter((160, 120), config=config)
        adapter.load_image(test_image, annotations)

        assert adapter.get_annotation("old-rect").bounds == Bounds(20, 20, 60, 40)

        # Select and resize from the se corner
        adapter.pointer_down(50, 40)
        adapter.pointer_up(50, 40)
        adapter.pointer_down(80, 60)
        adapter.pointer_move(90, 70)
        adapter.pointer_up(90, 70)
        assert adapter.get_annotation("old-rect").bounds == Bounds(20, 20, 70, 50)

        # The unknown shape survives untouched and does not break rendering
        frame = adapter.get_visualization()
        assert frame.shape == (120, 160, 3)
        assert adapter.get_annotation("future").to_dict()["type"] == "polygon"
        adapter.close()

    def test_zoomed_workflow(self, session, config):
        """Shapes drawn while zoomed land at image coordinates."""
        image = np.zeros((100, 100, 3), dtype=np.uint8)
        adapter = CanvasAdapter((100, 100), session=session, config=config)
        adapter.load_image(image)
        adapter.zoom_in()
        adapter.zoom_in()

        scale = adapter.view.scale
        device = adapter.view.to_device

        adapter.set_tool(Tool.RECTANGLE)
        start = device(Point(10, 10))
        end = device(Point(30, 40))
        adapter.pointer_down(start.x, start.y)
        committed = adapter.pointer_up(end.x, end.y).committed

        assert scale == pytest.approx(1.44)
        assert committed.bounds.x == pytest.approx(10)
        assert committed.bounds.y == pytest.approx(10)
        assert committed.bounds.width == pytest.approx(20)
        assert committed.bounds.height == pytest.approx(30)
        adapter.close()
