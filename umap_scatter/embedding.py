"""Single canonical UMAP embedding computation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import pandas as pd

from ._compat import get_umap_class
from .io import ID_COLUMN

logger = logging.getLogger(__name__)

# Operative default; only the first two axes are ever plotted.
DEFAULT_COMPONENTS = 2
PLOT_AXES = ("X1", "X2")


def axis_names(n_components: int) -> list[str]:
    """Positional coordinate names ``X1 .. Xn``."""
    return [f"X{i}" for i in range(1, n_components + 1)]


@dataclass(frozen=True)
class EmbeddingConfig:
    """UMAP hyper-parameters.

    ``seed`` is used both as ``random_state`` and as ``transform_seed``.
    """

    n_neighbors: int = 5
    n_components: int = DEFAULT_COMPONENTS
    n_epochs: int = 10000
    seed: int = 0
    min_dist: float = 0.1
    metric: str = "euclidean"
    verbose: bool = True

    def umap_kwargs(self, umap_class=None) -> dict[str, Any]:
        """Keyword arguments for the UMAP constructor."""
        kwargs = dict(
            n_neighbors=self.n_neighbors,
            n_components=self.n_components,
            n_epochs=self.n_epochs,
            min_dist=self.min_dist,
            metric=self.metric,
            random_state=self.seed,
            verbose=self.verbose,
        )
        # cuML's UMAP has no transform_seed
        module = getattr(umap_class, "__module__", "") or ""
        if not module.startswith("cuml"):
            kwargs["transform_seed"] = self.seed
        return kwargs


@dataclass
class EmbeddingResult:
    """Raw UMAP output.

    Attributes
    ----------
    layout : pd.DataFrame
        One row per sample (index named ``id``, matrix column order) and one
        column per component, named ``X1 .. Xn``.
    reducer : object
        The fitted UMAP instance.
    config : EmbeddingConfig
        Parameters the embedding was computed with.
    """

    layout: pd.DataFrame
    reducer: Any
    config: EmbeddingConfig

    @property
    def plot_coordinates(self) -> pd.DataFrame:
        """The first two axes, the only ones used for plotting."""
        return self.layout.loc[:, list(PLOT_AXES)]


def compute_embedding(
    expr: pd.DataFrame,
    config: EmbeddingConfig | None = None,
    *,
    umap_class=None,
    prefer_gpu: bool = False,
) -> EmbeddingResult:
    """Compute a UMAP embedding of the samples of *expr*.

    Parameters
    ----------
    expr : pd.DataFrame
        Feature matrix of shape ``(n_features, n_samples)``; column labels are
        sample IDs.  Samples are embedded, so the matrix is transposed first.
    config : EmbeddingConfig, optional
        UMAP hyper-parameters.  Defaults to ``EmbeddingConfig()``.
    umap_class : class, optional
        Explicit UMAP class to use.  When ``None`` the best available class
        is auto-detected via :func:`get_umap_class`.
    prefer_gpu : bool
        Prefer GPU-accelerated UMAP (cuML) when auto-detecting.

    Returns
    -------
    EmbeddingResult
    """
    config = config or EmbeddingConfig()
    UMAP_Class = umap_class or get_umap_class(prefer_gpu=prefer_gpu)

    logger.info(
        "Running UMAP on %d samples x %d features (n_neighbors=%d, n_components=%d, n_epochs=%d)",
        expr.shape[1], expr.shape[0],
        config.n_neighbors, config.n_components, config.n_epochs,
    )
    reducer = UMAP_Class(**config.umap_kwargs(UMAP_Class))
    embedding = reducer.fit_transform(expr.T.to_numpy())

    layout = pd.DataFrame(
        embedding,
        index=pd.Index(expr.columns, name=ID_COLUMN),
        columns=axis_names(embedding.shape[1]),
    )
    return EmbeddingResult(layout=layout, reducer=reducer, config=config)
