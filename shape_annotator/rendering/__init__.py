"""
Rendering of annotations onto drawing surfaces.
"""

from .raster import RasterSurface, parse_color
from .renderer import ShapeRenderer, with_alpha
from .surface import DrawCall, DrawingSurface, RecordingSurface, SurfaceState

__all__ = [
    "DrawCall",
    "DrawingSurface",
    "RasterSurface",
    "RecordingSurface",
    "ShapeRenderer",
    "SurfaceState",
    "parse_color",
    "with_alpha",
]
