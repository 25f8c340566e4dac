"""Build the layered UMAP scatter chart."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.colors import CenteredNorm, Colormap, Normalize
from matplotlib.figure import Figure
from matplotlib.lines import Line2D
from matplotlib.patches import Patch
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from ..aesthetics import (
    Aesthetics,
    FillShapeEllipseAesthetics,
    LabelSpec,
    NameTagSpec,
)
from . import theme
from .colors import category_levels, colour_mapping, diverging_cmap, rgba_for, shape_mapping
from .ellipses import add_group_ellipses

logger = logging.getLogger(__name__)

X_COL, Y_COL = "X1", "X2"


def marker_area(size: float) -> float:
    """Scatter ``s`` (pt^2) for a ggplot-style point size in mm."""
    return (size * theme.PT_PER_MM) ** 2


@dataclass
class Scale:
    """One aesthetic mapping of the chart and the guide it produces.

    ``aesthetic`` is the scale namespace: ``"fill"``, ``"shape"`` or
    ``"ellipse_fill"``.  Discrete scales carry a level -> value ``mapping``;
    continuous ones a colormap and norm.
    """

    aesthetic: str
    name: str
    kind: str
    mapping: dict = field(default_factory=dict)
    cmap: Colormap | None = None
    norm: Normalize | None = None
    has_missing: bool = False

    @property
    def is_continuous(self) -> bool:
        return self.kind == "continuous"

    def legend_handles(self) -> list:
        """Legend entries for a discrete scale."""
        key_size = theme.LEGEND_KEY_SIZE * theme.PT_PER_MM
        if self.aesthetic == "shape":
            return [
                Line2D([], [], linestyle="", marker=marker, markersize=key_size,
                       markerfacecolor="none", markeredgecolor=theme.POINT_EDGE,
                       label=str(level))
                for level, marker in self.mapping.items()
            ]
        if self.aesthetic == "ellipse_fill":
            return [
                Patch(facecolor=color, edgecolor="none", alpha=theme.ELLIPSE_ALPHA,
                      label=str(level))
                for level, color in self.mapping.items()
            ]

        entries = list(self.mapping.items())
        if self.has_missing:
            entries.append(("NA", theme.NA_FILL))
        return [
            Line2D([], [], linestyle="", marker=theme.POINT_SHAPE, markersize=key_size,
                   markerfacecolor=color, markeredgecolor=theme.POINT_EDGE,
                   markeredgewidth=theme.POINT_EDGE_WIDTH, label=str(level))
            for level, color in entries
        ]


@dataclass
class UMAPPlot:
    """A UMAP scatter chart under construction.

    Attributes
    ----------
    figure, ax : matplotlib Figure and Axes
    data : pd.DataFrame
        The joined embedding/annotation table being drawn.
    aesthetics : Aesthetics
        The plot request that selected the layers.
    scales : dict[str, Scale]
        Scale namespace -> scale, in legend order.
    guides : list
        Legends and colourbars added by :meth:`PlotStyle.apply`.
    """

    figure: Figure
    ax: Axes
    data: pd.DataFrame
    aesthetics: Aesthetics
    scales: dict[str, Scale] = field(default_factory=dict)
    guides: list = field(default_factory=list)

    @property
    def point_layers(self) -> list:
        return [c for c in self.ax.collections if c.get_gid() == "points"]

    @property
    def ellipse_layers(self) -> list:
        return [p for p in self.ax.patches if p.get_gid() == "ellipse"]

    def savefig(self, path, **kwargs: Any) -> None:
        kwargs.setdefault("bbox_inches", "tight")
        self.figure.savefig(path, **kwargs)


def fill_scale(series: pd.Series, name: str, colors=None) -> Scale:
    """Continuous diverging scale for numeric values, discrete otherwise."""
    if is_numeric_dtype(series) and not is_bool_dtype(series):
        values = series.astype(float)
        halfrange = float(np.nanmax(np.abs(values.to_numpy()))) if values.notna().any() else 0.0
        cmap = diverging_cmap().with_extremes(bad=theme.NA_FILL)
        return Scale(
            aesthetic="fill", name=name, kind="continuous", cmap=cmap,
            norm=CenteredNorm(vcenter=0.0, halfrange=halfrange or 1.0),
        )
    levels = category_levels(series)
    return Scale(
        aesthetic="fill", name=name, kind="discrete",
        mapping=colour_mapping(levels, colors),
        has_missing=bool(series.isna().any()),
    )


def shape_scale(series: pd.Series, name: str, shapes=None) -> Scale:
    return Scale(
        aesthetic="shape", name=name, kind="discrete",
        mapping=shape_mapping(category_levels(series), shapes),
    )


def ellipse_scale(series: pd.Series, name: str) -> Scale:
    return Scale(
        aesthetic="ellipse_fill", name=name, kind="discrete",
        mapping=colour_mapping(category_levels(series), theme.ELLIPSE_PALETTE),
    )


def _draw_points(
    plot: UMAPPlot,
    fill_col: str,
    shape_col: str | None,
    size: float,
    alpha: float,
) -> None:
    data = plot.data
    fscale = plot.scales["fill"]

    if shape_col is None:
        groups = [(theme.POINT_SHAPE, np.ones(len(data), dtype=bool))]
    else:
        shape_values = data[shape_col]
        n_missing = int(shape_values.isna().sum())
        if n_missing:
            logger.warning("Removed %d rows with missing %r values", n_missing, shape_col)
        groups = [
            (marker, (shape_values == level).to_numpy())
            for level, marker in plot.scales["shape"].mapping.items()
        ]

    for marker, mask in groups:
        if not mask.any():
            continue
        sub = data[mask]
        if fscale.is_continuous:
            colour_kwargs = dict(
                c=sub[fill_col].astype(float).to_numpy(), cmap=fscale.cmap, norm=fscale.norm
            )
        else:
            colour_kwargs = dict(c=rgba_for(sub[fill_col], fscale.mapping))
        plot.ax.scatter(
            sub[X_COL].to_numpy(),
            sub[Y_COL].to_numpy(),
            marker=marker,
            s=marker_area(size),
            alpha=alpha,
            edgecolors=theme.POINT_EDGE,
            linewidths=theme.POINT_EDGE_WIDTH,
            zorder=3,
            gid="points",
            **colour_kwargs,
        )


def build_scatter(
    data: pd.DataFrame,
    aesthetics: Aesthetics,
    *,
    size: float = 5,
    alpha: float = 1,
    colors=None,
    shapes=None,
    figsize: tuple[float, float] = (8.0, 6.0),
) -> UMAPPlot:
    """Create the base chart: optional ellipses, then the point layer.

    Parameters
    ----------
    data : pd.DataFrame
        Joined table with ``X1``, ``X2`` and every column named by
        *aesthetics*.
    aesthetics : Aesthetics
        One-, two- or three-variable plot request.
    size, alpha : float
        Marker size (mm) and opacity.
    colors : sequence or mapping, optional
        Colours for a discrete fill variable.
    shapes : sequence or mapping, optional
        Markers (matplotlib or R ``pch`` codes) for the shape variable.

    Returns
    -------
    UMAPPlot
    """
    shape_col = getattr(aesthetics, "shape", None)

    # scales first, so bad colour/shape requests fail before a figure exists
    scales = {"fill": fill_scale(data[aesthetics.fill], aesthetics.fill_name, colors)}
    if shape_col is not None:
        scales["shape"] = shape_scale(data[shape_col], aesthetics.shape_name, shapes)
    if isinstance(aesthetics, FillShapeEllipseAesthetics):
        scales["ellipse_fill"] = ellipse_scale(data[aesthetics.ellipse], aesthetics.ellipse_name)

    fig, ax = plt.subplots(figsize=figsize)
    plot = UMAPPlot(figure=fig, ax=ax, data=data.copy(), aesthetics=aesthetics, scales=scales)

    if "ellipse_fill" in scales:
        patches = add_group_ellipses(
            ax, plot.data, aesthetics.ellipse, scales["ellipse_fill"].mapping,
            x_col=X_COL, y_col=Y_COL,
        )
        for patch in patches:
            patch.set_gid("ellipse")

    _draw_points(plot, aesthetics.fill, shape_col, size, alpha)
    return plot


def add_labels(plot: UMAPPlot, spec: LabelSpec) -> None:
    """Write a label in the centre of every marker."""
    data = plot.data
    if spec.column is None:
        data["label"] = np.arange(1, len(data) + 1)
    else:
        data["label"] = data[spec.column]

    for x, y, text in zip(data[X_COL], data[Y_COL], data["label"]):
        plot.ax.text(
            x, y, str(text),
            ha="center", va="center",
            color=theme.TEXT,
            fontsize=spec.size * theme.PT_PER_MM,
            zorder=4,
            gid="label",
        )


def add_name_tags(plot: UMAPPlot, spec: NameTagSpec, repel: Callable) -> None:
    """Add name tags next to the markers and let *repel* untangle them.

    *repel* follows the ``adjustText.adjust_text`` call signature.
    """
    data = plot.data
    data["tag"] = data[spec.column]
    fontsize = spec.size * theme.PT_PER_MM

    texts = [
        plot.ax.text(x, y, str(tag), color=theme.TEXT, fontsize=fontsize, zorder=5, gid="name_tag")
        for x, y, tag in zip(data[X_COL], data[Y_COL], data["tag"])
    ]

    expand = 1 + 2 * spec.box_padding * theme.LINE_PT / fontsize
    min_arrow_px = spec.min_segment_length * theme.LINE_PT * plot.figure.dpi / 72
    repel(
        texts,
        x=data[X_COL].to_numpy(),
        y=data[Y_COL].to_numpy(),
        ax=plot.ax,
        expand=(expand, expand),
        min_arrow_len=min_arrow_px,
        arrowprops=dict(arrowstyle="-", color=theme.TEXT, lw=0.5),
    )
