"""Confidence ellipses drawn behind groups of points."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.patches import Polygon
from scipy import stats

from . import theme

logger = logging.getLogger(__name__)

ELLIPSE_TYPES = ("t", "norm")


def robust_covariance(
    points: np.ndarray,
    nu: float = 5,
    max_iter: int = 25,
    tol: float = 0.01,
) -> tuple[np.ndarray, np.ndarray]:
    """Location and scatter of *points* under a multivariate t model.

    Iteratively reweighted estimate: every point is weighted by
    ``(nu + p) / (nu + d2)``, where ``d2`` is its squared Mahalanobis
    distance, until the weights move by less than *tol*.

    Parameters
    ----------
    points : np.ndarray
        ``(n, p)`` array.
    nu : float
        Degrees of freedom of the t distribution.

    Returns
    -------
    (centre, cov)

    Raises
    ------
    np.linalg.LinAlgError
        If the weighted scatter matrix becomes singular.
    """
    n, p = points.shape
    weights = np.ones(n)
    centre = points.mean(axis=0)
    for _ in range(max_iter):
        previous = weights
        resid = points - centre
        scatter = (weights[:, None] * resid).T @ resid / n
        d2 = np.einsum("ij,jk,ik->i", resid, np.linalg.inv(scatter), resid)
        weights = (nu + p) / (nu + d2)
        centre = (weights[:, None] * points).sum(axis=0) / weights.sum()
        if np.all(np.abs(weights - previous) < tol):
            break
    cov = (weights[:, None] * resid).T @ resid / n
    return centre, cov


def confidence_ellipse(
    x: np.ndarray,
    y: np.ndarray,
    level: float = theme.ELLIPSE_LEVEL,
    segments: int = 51,
    kind: str = "t",
) -> np.ndarray | None:
    """Return the outline of the *level* confidence ellipse of ``(x, y)``.

    With ``kind="t"`` the ellipse is shaped by :func:`robust_covariance`, so a
    few outliers barely stretch it.  ``kind="norm"`` uses the plain sample
    mean and covariance.  Both are scaled by ``sqrt(2 * F(level; 2, n - 1))``.

    Returns
    -------
    np.ndarray or None
        ``(segments + 1, 2)`` closed polygon vertices, or ``None`` when fewer
        than three points are given or the covariance is singular.
    """
    if kind not in ELLIPSE_TYPES:
        raise ValueError(f"kind must be one of {ELLIPSE_TYPES}, got {kind!r}")

    points = np.column_stack([np.asarray(x, dtype=float), np.asarray(y, dtype=float)])
    points = points[np.isfinite(points).all(axis=1)]
    n = len(points)
    if n < 3:
        return None

    try:
        # singular groups are rejected before any reweighting
        chol = np.linalg.cholesky(np.cov(points, rowvar=False))
        if kind == "t":
            centre, cov = robust_covariance(points)
            chol = np.linalg.cholesky(cov)
        else:
            centre = points.mean(axis=0)
    except np.linalg.LinAlgError:
        return None

    radius = np.sqrt(2 * stats.f.ppf(level, 2, n - 1))
    angles = np.linspace(0, 2 * np.pi, segments + 1)
    unit_circle = np.column_stack([np.cos(angles), np.sin(angles)])
    return centre + radius * unit_circle @ chol.T


def add_group_ellipses(
    ax: Axes,
    data: pd.DataFrame,
    group_col: str,
    color_map: dict,
    x_col: str = "X1",
    y_col: str = "X2",
    alpha: float = theme.ELLIPSE_ALPHA,
) -> list[Polygon]:
    """Add one filled ellipse per level of *group_col* to *ax*.

    Parameters
    ----------
    ax : matplotlib Axes
    data : pd.DataFrame
        Must have *x_col*, *y_col* and *group_col* columns.
    color_map : dict
        Group level -> fill colour.  Only these levels are drawn.
    alpha : float
        Fill transparency.

    Returns
    -------
    list of Polygon
        The patches that were added.
    """
    patches = []
    for level, color in color_map.items():
        sub = data[data[group_col] == level]
        outline = confidence_ellipse(sub[x_col].values, sub[y_col].values)
        if outline is None:
            logger.warning(
                "Too few points to calculate an ellipse for %s=%r (%d points)",
                group_col, level, len(sub),
            )
            continue
        patch = Polygon(
            outline,
            closed=True,
            facecolor=color,
            edgecolor="none",
            alpha=alpha,
            zorder=1,
            label=str(level),
        )
        ax.add_patch(patch)
        patches.append(patch)

    if patches:
        ax.autoscale_view()
    return patches
