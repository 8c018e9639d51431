"""
Test fixtures and utilities for shape_annotator tests.

Provides reusable fixtures for annotations, views, sessions and images.
"""

import itertools

import numpy as np
import pytest

from shape_annotator.config import get_default_config
from shape_annotator.core.annotation import (
    Annotation,
    Bounds,
    InteractionSession,
    Point,
    Scene,
    ShapeType,
    ViewState,
)
from shape_annotator.core.annotation.geometry import points_from_bounds


def make_annotation(
    annotation_id="a1", shape=ShapeType.RECTANGLE, bounds=None, **kwargs
) -> Annotation:
    """Annotation whose points agree with its bounds."""
    if bounds is not None and "points" not in kwargs:
        kwargs["points"] = points_from_bounds(bounds)
    return Annotation(id=annotation_id, type=shape, bounds=bounds, **kwargs)


@pytest.fixture
def annotation_factory():
    return make_annotation


@pytest.fixture
def config():
    return get_default_config()


@pytest.fixture
def rectangle():
    return make_annotation("rect", ShapeType.RECTANGLE, Bounds(10, 10, 50, 30))


@pytest.fixture
def circle():
    return make_annotation("circle", ShapeType.CIRCLE, Bounds(100, 100, 40, 20))


@pytest.fixture
def legacy_circle():
    """Circle stored before bounds existed: center + point on its radius."""
    return Annotation(
        id="legacy", type=ShapeType.CIRCLE, points=(Point(50, 50), Point(60, 50))
    )


@pytest.fixture
def identity_view():
    return ViewState()


@pytest.fixture
def zoomed_view():
    return ViewState(scale=2.0, offset=Point(5.0, 5.0))


@pytest.fixture
def session(config):
    ids = itertools.count(1)
    return InteractionSession(config, id_factory=lambda: f"annotation-{next(ids)}")


@pytest.fixture
def scene_factory():
    def factory(*annotations, **kwargs):
        return Scene(annotations=tuple(annotations), **kwargs)

    return factory


@pytest.fixture
def test_image():
    """Create a test RGB image."""
    return np.random.RandomState(0).randint(0, 255, (120, 160, 3), dtype=np.uint8)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)



def pytest_configure(config):
    config.addinivalue_line("markers", "integration: complete annotation workflows")
