"""
Label palette and label-derived colors.
"""

import zlib
from dataclasses import dataclass
from typing import Optional, Sequence

from matplotlib import colormaps
from matplotlib.colors import to_hex

from .state import DEFAULT_COLOR


@dataclass(frozen=True)
class Label:
    name: str
    color: str
    description: Optional[str] = None


DEFAULT_LABELS = (
    Label("Normal Tissue", "#10B981", "Healthy tissue region"),
    Label("Tumor", "#EF4444", "Malignant or suspicious mass"),
    Label("Lesion", "#F59E0B", "Abnormal tissue change"),
    Label("Inflammation", "#F97316", "Inflammatory region"),
    Label("Calcification", "#8B5CF6", "Calcium deposits"),
    Label("Fibrosis", "#06B6D4", "Fibrous tissue"),
    Label("Necrosis", "#64748B", "Dead tissue area"),
    Label("Blood Vessel", "#DC2626", "Vascular structure"),
    Label("Organ Boundary", "#059669", "Anatomical boundary"),
    Label("Artifact", "#6B7280", "Imaging artifact"),
)


def color_for_label(
    label: str, labels: Sequence[Label] = DEFAULT_LABELS, colormap: str = "tab20"
) -> str:
    """
    Stroke color for an annotation label.

    Known labels use their palette color and an empty label the default
    blue. Any other label gets a stable color from a qualitative colormap,
    so the same name always renders the same way.

    Args:
        label: Label text
        labels: Palette to look the label up in
        colormap: Matplotlib colormap for labels outside the palette

    Returns:
        Hex color string ``#rrggbb``
    """
    if not label:
        return DEFAULT_COLOR

    for known in labels:
        if known.name == label:
            return known.color

    cmap = colormaps[colormap]
    index = zlib.crc32(label.encode("utf-8")) % cmap.N
    return to_hex(cmap(index))
