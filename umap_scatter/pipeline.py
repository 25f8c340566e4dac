"""UMAP scatter plot of a feature-by-sample matrix."""

from __future__ import annotations

import logging
from typing import Sequence

import pandas as pd

from ._compat import Capabilities, resolve_capabilities
from .aesthetics import (
    AESTHETIC_TYPES,
    Aesthetics,
    LabelSpec,
    NameTagSpec,
    aesthetics_from_variables,
    validate_columns,
)
from .clustering import add_cluster_column, cluster_samples
from .embedding import DEFAULT_COMPONENTS, EmbeddingConfig, EmbeddingResult, compute_embedding
from .exceptions import PlotSpecError
from .io import join_annotations, log2_transform, require_annotations
from .style import PlotStyle
from .visualization.scatter import UMAPPlot, add_labels, add_name_tags, build_scatter

logger = logging.getLogger(__name__)


def plot_umap(
    matrix: pd.DataFrame,
    annotations: pd.DataFrame | None = None,
    *,
    neighbors: int = 5,
    components: int = DEFAULT_COMPONENTS,
    epochs: int = 10000,
    seed: int = 0,
    variables: Sequence[str] | Aesthetics = ("VarFill", "VarShape"),
    legend_names: Sequence[str] | None = None,
    size: float = 5,
    alpha: float = 1,
    colors=None,
    shapes=None,
    title: str | None = None,
    legend_title: float = 16,
    legend_elements: float = 14,
    legend_pos: tuple[float, float] | None = None,
    labels=None,
    name_tags=None,
    cluster_data: bool = False,
    min_points: int = 7,
    transform: bool = False,
    return_data: bool = False,
    style: PlotStyle | None = None,
    capabilities: Capabilities | None = None,
    prefer_gpu: bool = False,
) -> UMAPPlot | EmbeddingResult:
    """Embed the samples of *matrix* with UMAP and draw them as a scatter plot.

    Parameters
    ----------
    matrix : pd.DataFrame
        Counts with features (genes) as rows and sample IDs as columns.
    annotations : pd.DataFrame, optional
        Per-sample table with an ``id`` column and the variables to plot.
        Required unless *return_data* is True.
    neighbors : int
        Number of nearest neighbours considered by UMAP.
    components : int
        Output dimensionality.  Only the first two axes (``X1``, ``X2``) are
        plotted; extra axes are kept in the raw result only.  The helper this
        function replaces documented a default of 3 but always ran with 2;
        the default here is the one it actually used.
    epochs : int
        Number of optimisation epochs.
    seed : int
        Random seed, used for both UMAP's ``random_state`` and
        ``transform_seed``.
    variables : sequence of str or Aesthetics
        One to three annotation columns: fill, shape and ellipse grouping.
    legend_names : sequence of str, optional
        Legend titles for *variables*.  Defaults to the column names.
    size, alpha : float
        Marker size (mm) and opacity.
    colors : sequence or mapping, optional
        Colours for the categories of a discrete fill variable.
    shapes : sequence or mapping, optional
        Markers for the categories of the shape variable (matplotlib markers
        or R ``pch`` codes).
    title : str, optional
        Plot title.
    legend_title, legend_elements : float
        Font sizes of legend titles and legend entries.
    legend_pos : (float, float), optional
        Legend position inside the plot as axes fractions, e.g. ``(0.8, 0.8)``.
    labels : float or (str, float), optional
        Label size alone (numbers ``1..N``), or the column to use and size.
    name_tags : float or (str, float, float, float), optional
        Tag size alone (sample IDs), or column, size, minimum leader-line
        length and box padding (both in lines).
    cluster_data : bool
        Run HDBSCAN on the samples and add a ``cluster`` annotation column
        that can be used as a plot variable.
    min_points : int
        Minimum number of neighbours to form a cluster.
    transform : bool
        Apply ``log2(x + 0.001)`` to *matrix* first.
    return_data : bool
        Return the :class:`EmbeddingResult` instead of a plot.
    style : PlotStyle, optional
        Full style object; overrides *title*, *legend_title*,
        *legend_elements* and *legend_pos*.
    capabilities : Capabilities, optional
        Engines to use instead of the auto-detected ones.
    prefer_gpu : bool
        Prefer cuML's UMAP when auto-detecting.

    Returns
    -------
    UMAPPlot or EmbeddingResult

    Raises
    ------
    AnnotationError
        If *annotations* is missing on the plotting path or shares no IDs with
        *matrix*.
    PlotSpecError
        If the plot variables, labels or name tags are invalid.
    MissingDependencyError
        If a required engine library is not installed.
    """
    plotting = not return_data
    caps = resolve_capabilities(
        capabilities,
        clustering=plotting and cluster_data,
        name_tags=plotting and name_tags is not None,
        prefer_gpu=prefer_gpu,
    )

    if plotting:
        require_annotations(annotations)
        if isinstance(variables, AESTHETIC_TYPES):
            aesthetics = variables
        else:
            aesthetics = aesthetics_from_variables(variables, legend_names)
        label_spec = LabelSpec.parse(labels) if labels is not None else None
        tag_spec = NameTagSpec.parse(name_tags) if name_tags is not None else None
        if components < 2:
            raise PlotSpecError(f"At least 2 components are needed to plot, got {components}.")
        style = style or PlotStyle(
            legend_title_size=legend_title,
            legend_text_size=legend_elements,
            legend_position=tuple(legend_pos) if legend_pos is not None else None,
            title=title,
        )

    expr = log2_transform(matrix, transform)

    config = EmbeddingConfig(
        n_neighbors=neighbors,
        n_components=components,
        n_epochs=epochs,
        seed=seed,
    )
    result = compute_embedding(expr, config, umap_class=caps.umap_class)

    if return_data:
        return result

    if cluster_data:
        report = cluster_samples(expr, min_points, hdbscan_class=caps.hdbscan_class)
        logger.info("\n%s", report.summary())
        annotations = add_cluster_column(annotations, report)

    data = join_annotations(result.plot_coordinates, annotations)
    validate_columns(data, aesthetics, label_spec, tag_spec)

    plot = build_scatter(
        data,
        aesthetics,
        size=size,
        alpha=alpha,
        colors=colors,
        shapes=shapes,
        figsize=style.figsize,
    )
    style.apply(plot)

    if label_spec is not None:
        add_labels(plot, label_spec)
    if tag_spec is not None:
        add_name_tags(plot, tag_spec, caps.repel)

    return plot
