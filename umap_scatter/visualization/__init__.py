"""Chart building blocks for UMAP scatter plots."""

from .colors import colour_mapping, marker_for, shape_mapping
from .ellipses import add_group_ellipses, confidence_ellipse
from .scatter import (
    Scale,
    UMAPPlot,
    add_labels,
    add_name_tags,
    build_scatter,
    marker_area,
)

__all__ = [
    "colour_mapping",
    "shape_mapping",
    "marker_for",
    "confidence_ellipse",
    "add_group_ellipses",
    "Scale",
    "UMAPPlot",
    "build_scatter",
    "add_labels",
    "add_name_tags",
    "marker_area",
]
