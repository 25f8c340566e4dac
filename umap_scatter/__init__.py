"""umap_scatter: UMAP scatter plots of annotated feature-by-sample matrices."""

from ._compat import Capabilities, resolve_capabilities
from .aesthetics import (
    FillAesthetics,
    FillShapeAesthetics,
    FillShapeEllipseAesthetics,
    LabelSpec,
    NameTagSpec,
    aesthetics_from_variables,
)
from .clustering import ClusterReport, add_cluster_column, cluster_samples
from .embedding import DEFAULT_COMPONENTS, EmbeddingConfig, EmbeddingResult, compute_embedding
from .exceptions import (
    AnnotationError,
    MissingDependencyError,
    PlotSpecError,
    UMAPScatterError,
)
from .io import join_annotations, load_annotations, load_matrix, log2_transform
from .pipeline import plot_umap
from .style import PlotStyle
from .visualization.scatter import Scale, UMAPPlot

__all__ = [
    # pipeline
    "plot_umap",
    # embedding
    "compute_embedding",
    "EmbeddingConfig",
    "EmbeddingResult",
    "DEFAULT_COMPONENTS",
    # io
    "load_matrix",
    "load_annotations",
    "log2_transform",
    "join_annotations",
    # clustering
    "cluster_samples",
    "add_cluster_column",
    "ClusterReport",
    # plot requests
    "FillAesthetics",
    "FillShapeAesthetics",
    "FillShapeEllipseAesthetics",
    "LabelSpec",
    "NameTagSpec",
    "aesthetics_from_variables",
    # chart
    "UMAPPlot",
    "Scale",
    "PlotStyle",
    # engines
    "Capabilities",
    "resolve_capabilities",
    # errors
    "UMAPScatterError",
    "MissingDependencyError",
    "AnnotationError",
    "PlotSpecError",
]
