"""Density-based sample clustering with HDBSCAN."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from ._compat import get_hdbscan_class
from .io import ID_COLUMN

logger = logging.getLogger(__name__)

NOISE_LABEL = -1


@dataclass
class ClusterReport:
    """Stores the result of a clustering run."""

    labels: pd.Series  # categorical, indexed by sample ID
    min_points: int
    n_clusters: int
    n_noise: int

    @property
    def n_levels(self) -> int:
        """Distinct labels, counting noise as its own category."""
        return len(self.labels.cat.categories)

    def summary(self) -> str:
        """Return a human-readable report string."""
        counts = self.labels.value_counts(sort=False)
        lines = [
            "HDBSCAN CLUSTERING",
            "=" * 40,
            f"min_points            : {self.min_points}",
            f"Samples               : {len(self.labels):,}",
            f"Clusters              : {self.n_clusters}",
            f"Noise samples         : {self.n_noise}",
            "-" * 40,
        ]
        lines.extend(f"  {label!s:>6} : {count}" for label, count in counts.items())
        return "\n".join(lines)


def cluster_samples(
    expr: pd.DataFrame,
    min_points: int = 7,
    *,
    hdbscan_class=None,
) -> ClusterReport:
    """Cluster the samples (columns) of *expr* with HDBSCAN.

    Parameters
    ----------
    expr : pd.DataFrame
        Feature matrix ``(n_features, n_samples)``, already preprocessed.
    min_points : int
        Used as both ``min_cluster_size`` and ``min_samples``.
    hdbscan_class : class, optional
        Explicit HDBSCAN class.  Auto-detected when ``None``.

    Returns
    -------
    ClusterReport
    """
    HDBSCAN_Class = hdbscan_class or get_hdbscan_class()
    clusterer = HDBSCAN_Class(min_cluster_size=min_points, min_samples=min_points)
    raw = np.asarray(clusterer.fit_predict(expr.T.to_numpy()))

    labels = pd.Series(
        pd.Categorical(raw),
        index=pd.Index(expr.columns, name=ID_COLUMN),
        name="cluster",
    )
    report = ClusterReport(
        labels=labels,
        min_points=min_points,
        n_clusters=int(len(set(raw.tolist()) - {NOISE_LABEL})),
        n_noise=int((raw == NOISE_LABEL).sum()),
    )
    logger.info(
        "HDBSCAN found %d clusters (%d noise samples)", report.n_clusters, report.n_noise
    )
    return report


def add_cluster_column(
    annotations: pd.DataFrame,
    report: ClusterReport,
    column: str = "cluster",
) -> pd.DataFrame:
    """Return a copy of *annotations* with the cluster label of each ``id``.

    Labels are looked up by sample ID, so row order does not matter.  IDs the
    clustering never saw get a missing value.
    """
    annotations = annotations.copy()
    lookup = report.labels.astype(object)
    annotations[column] = pd.Categorical(
        annotations[ID_COLUMN].map(lookup),
        categories=report.labels.cat.categories,
    )
    return annotations
