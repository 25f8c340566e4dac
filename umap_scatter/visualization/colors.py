"""Discrete colour and marker mappings for categorical plot variables."""

from __future__ import annotations

from collections.abc import Mapping
from itertools import cycle, islice
from typing import Any, Sequence

import numpy as np
import pandas as pd
import plotly.colors as pcolors
import plotly.express as px
from matplotlib import colors as mcolors

from ..exceptions import PlotSpecError
from . import theme


def _to_hex(color: str) -> str:
    # plotly palettes mix "#rrggbb" and "rgb(r, g, b)" strings
    if color.startswith("rgb"):
        return mcolors.to_hex(pcolors.unconvert_from_RGB_255(pcolors.unlabel_rgb(color)))
    return color


DEFAULT_PALETTE = tuple(
    _to_hex(c) for c in px.colors.qualitative.Plotly + px.colors.qualitative.Safe
)
DEFAULT_SHAPES = ("o", "^", "s", "D", "v", "P")

# R plotting symbols (pch) to matplotlib markers
PCH_MARKERS = {
    0: "s", 1: "o", 2: "^", 3: "+", 4: "x", 5: "D", 6: "v", 7: "s", 8: "*",
    9: "D", 10: "o", 11: "*", 12: "s", 13: "o", 14: "s",
    15: "s", 16: "o", 17: "^", 18: "D", 19: "o", 20: ".",
    21: "o", 22: "s", 23: "D", 24: "^", 25: "v",
}


def category_levels(series: pd.Series) -> list:
    """Levels of *series* in legend order.

    Categorical columns keep their category order (unused categories are
    dropped); anything else is sorted.
    """
    if isinstance(series.dtype, pd.CategoricalDtype):
        present = set(series.dropna().tolist())
        return [c for c in series.cat.categories if c in present]
    return sorted(pd.unique(series.dropna()).tolist())


def _manual_values(
    levels: Sequence, values, default: Sequence, what: str
) -> dict[Any, Any]:
    if values is None:
        return dict(zip(levels, islice(cycle(default), len(levels))))

    if isinstance(values, Mapping):
        missing = [lvl for lvl in levels if lvl not in values and str(lvl) not in values]
        if missing:
            raise PlotSpecError(f"No {what} given for levels {missing}.")
        return {lvl: values[lvl] if lvl in values else values[str(lvl)] for lvl in levels}

    values = [values] if isinstance(values, (str, int)) else list(values)
    if len(values) < len(levels):
        raise PlotSpecError(
            f"Insufficient values in manual {what} scale. "
            f"{len(levels)} needed but only {len(values)} provided."
        )
    return dict(zip(levels, values))


def colour_mapping(levels: Sequence, colors=None) -> dict[Any, str]:
    """Assign a colour to each level.

    Parameters
    ----------
    levels : sequence
        Category levels in legend order.
    colors : sequence or mapping, optional
        Colours in level order, or a level -> colour mapping.  The Plotly
        qualitative palette is cycled when ``None``.
    """
    mapping = _manual_values(levels, colors, DEFAULT_PALETTE, "colour")
    bad = [c for c in mapping.values() if not mcolors.is_color_like(c)]
    if bad:
        raise PlotSpecError(f"Unrecognised colours: {bad}")
    return mapping


def marker_for(shape) -> str:
    """Translate an R ``pch`` code or pass a matplotlib marker through."""
    if isinstance(shape, (int, np.integer)) and not isinstance(shape, bool):
        if int(shape) not in PCH_MARKERS:
            raise PlotSpecError(f"Unsupported pch shape code: {shape}")
        return PCH_MARKERS[int(shape)]
    return str(shape)


def shape_mapping(levels: Sequence, shapes=None) -> dict[Any, str]:
    """Assign a matplotlib marker to each level."""
    mapping = _manual_values(levels, shapes, DEFAULT_SHAPES, "shape")
    return {lvl: marker_for(s) for lvl, s in mapping.items()}


def rgba_for(values: pd.Series, mapping: Mapping, na_color: str = theme.NA_FILL) -> np.ndarray:
    """Map *values* to an ``(n, 4)`` RGBA array; unknown or missing -> *na_color*."""
    hexes = [mapping.get(v, na_color) if not pd.isna(v) else na_color for v in values]
    return mcolors.to_rgba_array(hexes)


def diverging_cmap() -> mcolors.LinearSegmentedColormap:
    """Blue-white-red gradient for numeric fill values."""
    return mcolors.LinearSegmentedColormap.from_list(
        "umap_diverging",
        [theme.GRADIENT_LOW, theme.GRADIENT_MID, theme.GRADIENT_HIGH],
    )
