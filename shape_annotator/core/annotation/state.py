"""
State types for annotation geometry.

Contains the value classes shared by every part of the core: points,
bounding boxes, annotations and transform handles. All of them are
immutable; operations return new values instead of mutating their inputs.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#3B82F6"


class ShapeType(Enum):
    """Closed set of shape variants understood by the core."""

    RECTANGLE = "rectangle"
    CIRCLE = "circle"

    @classmethod
    def parse(cls, value) -> Union["ShapeType", str]:
        """
        Parse a shape type, keeping unknown names as plain strings.

        Unknown types survive loading so newer data does not break older
        code; renderer and hit-tester treat them as no-ops.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            logger.debug("Keeping unsupported shape type %r", value)
            return str(value)


class HandleType(Enum):
    CORNER = "corner"
    EDGE = "edge"
    ROTATION = "rotation"


class HandlePosition(Enum):
    NW = "nw"
    NE = "ne"
    SW = "sw"
    SE = "se"
    N = "n"
    S = "s"
    E = "e"
    W = "w"
    ROTATE = "rotate"


@dataclass(frozen=True)
class Point:
    """A 2D coordinate in image space."""

    x: float
    y: float

    def to_dict(self):
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict):
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass(frozen=True)
class Bounds:
    """
    Axis-aligned box with a top-left origin.

    ``width`` and ``height`` may be negative while a resize is in progress;
    see ``geometry.normalize_bounds``.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def to_dict(self):
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: dict):
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )


@dataclass(frozen=True)
class Annotation:
    """
    A labeled geometric region attached to an image.

    When ``bounds`` is set it is authoritative for rendering, hit-testing
    and transforms. ``points`` is kept for annotations created before
    bounds existed; for two-point shapes ``points[0]`` is the anchor and
    ``points[1]`` the opposite corner (or, for a legacy circle without
    bounds, a point on its radius).
    """

    id: str
    type: Union[ShapeType, str]
    label: str = ""
    color: str = DEFAULT_COLOR
    points: Tuple[Point, ...] = ()
    bounds: Optional[Bounds] = None
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    confidence: Optional[float] = None
    notes: Optional[str] = None

    def __post_init__(self):
        # Accept lists from callers but store an immutable tuple
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))
        object.__setattr__(self, "type", ShapeType.parse(self.type))

    @property
    def is_supported(self) -> bool:
        return isinstance(self.type, ShapeType)

    @property
    def type_name(self) -> str:
        return self.type.value if isinstance(self.type, ShapeType) else self.type

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type_name,
            "label": self.label,
            "color": self.color,
            "points": [p.to_dict() for p in self.points],
            "rotation": self.rotation,
            "scaleX": self.scale_x,
            "scaleY": self.scale_y,
        }
        if self.bounds is not None:
            data["bounds"] = self.bounds.to_dict()
        if self.confidence is not None:
            data["confidence"] = self.confidence
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict, migrate: bool = True):
        """
        Create from dictionary.

        Args:
            data: Serialized annotation
            migrate: Derive ``bounds`` from ``points`` when the stored
                annotation predates bounds. Stored bounds are always
                normalized to non-negative sizes.

        Raises:
            ValueError: If the mandatory ``id`` or ``type`` is missing
        """
        if "id" not in data or "type" not in data:
            raise ValueError("Annotation data requires 'id' and 'type'")

        bounds = Bounds.from_dict(data["bounds"]) if data.get("bounds") else None
        annotation = cls(
            id=str(data["id"]),
            type=data["type"],
            label=data.get("label", ""),
            color=data.get("color", DEFAULT_COLOR),
            points=tuple(Point.from_dict(p) for p in data.get("points", [])),
            bounds=bounds,
            rotation=float(data.get("rotation") or 0.0),
            scale_x=float(data.get("scaleX", 1.0)),
            scale_y=float(data.get("scaleY", 1.0)),
            confidence=data.get("confidence"),
            notes=data.get("notes"),
        )

        from .geometry import migrate_bounds, normalize_bounds

        if annotation.bounds is not None:
            annotation = replace(annotation, bounds=normalize_bounds(annotation.bounds))
        elif migrate:
            annotation = migrate_bounds(annotation)
        return annotation


@dataclass(frozen=True)
class TransformHandle:
    """An interaction point derived from an annotation's bounds."""

    type: HandleType
    position: HandlePosition
    point: Point
