"""Optional engine detection and injection utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

from .exceptions import MissingDependencyError

logger = logging.getLogger(__name__)


def get_umap_class(prefer_gpu: bool = False):
    """Return the best available UMAP class.

    Parameters
    ----------
    prefer_gpu : bool
        If True, try to import cuML's GPU UMAP first.

    Returns
    -------
    UMAP class
        Either ``cuml.UMAP`` or ``umap.UMAP``.

    Raises
    ------
    MissingDependencyError
        If no UMAP implementation can be imported.
    """
    if prefer_gpu:
        try:
            from cuml import UMAP as GPU_UMAP
            return GPU_UMAP
        except ImportError:
            logger.info("cuML is not available, falling back to umap-learn")

    try:
        import umap as cpu_umap_module
    except ImportError as exc:
        raise MissingDependencyError(
            'Package "umap-learn" must be installed to compute embeddings '
            "(pip install umap-learn)."
        ) from exc
    return cpu_umap_module.UMAP


def get_hdbscan_class():
    """Return the best available HDBSCAN class.

    The standalone ``hdbscan`` package is preferred; scikit-learn's
    implementation (>= 1.3) is used otherwise.
    """
    try:
        from hdbscan import HDBSCAN
        return HDBSCAN
    except ImportError:
        pass

    try:
        from sklearn.cluster import HDBSCAN
    except ImportError as exc:
        raise MissingDependencyError(
            'Package "hdbscan" (or scikit-learn >= 1.3) must be installed to '
            "perform clustering (pip install hdbscan)."
        ) from exc
    return HDBSCAN


def get_text_repeller() -> Callable:
    """Return ``adjustText.adjust_text``."""
    try:
        from adjustText import adjust_text
    except ImportError as exc:
        raise MissingDependencyError(
            'Package "adjustText" must be installed to add name tags '
            "(pip install adjustText)."
        ) from exc
    return adjust_text


@dataclass(frozen=True)
class Capabilities:
    """Engines used by :func:`umap_scatter.plot_umap`.

    Any field left as ``None`` is resolved on demand by
    :func:`resolve_capabilities`; explicit values are used as given, which is
    how tests and callers inject alternative engines.
    """

    umap_class: type | None = None
    hdbscan_class: type | None = None
    repel: Callable | None = None


def resolve_capabilities(
    provided: Capabilities | None = None,
    *,
    clustering: bool = False,
    name_tags: bool = False,
    prefer_gpu: bool = False,
) -> Capabilities:
    """Fill in the engines a call needs, failing fast on missing libraries.

    Parameters
    ----------
    provided : Capabilities, optional
        Engines supplied by the caller.
    clustering : bool
        Whether an HDBSCAN engine is needed.
    name_tags : bool
        Whether a text-repelling engine is needed.
    prefer_gpu : bool
        Forwarded to :func:`get_umap_class`.

    Returns
    -------
    Capabilities
    """
    caps = provided or Capabilities()

    if caps.umap_class is None:
        caps = replace(caps, umap_class=get_umap_class(prefer_gpu=prefer_gpu))
    if clustering and caps.hdbscan_class is None:
        caps = replace(caps, hdbscan_class=get_hdbscan_class())
    if name_tags and caps.repel is None:
        caps = replace(caps, repel=get_text_repeller())
    return caps
