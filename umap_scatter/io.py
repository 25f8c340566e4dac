"""Data loading and table preparation for UMAP plots.

Handles expression matrices, annotation tables, the optional log2 transform
and the join between embedding coordinates and annotations.
"""

from __future__ import annotations

import logging
import os

import numpy as np
import pandas as pd

from .exceptions import AnnotationError

logger = logging.getLogger(__name__)

ID_COLUMN = "id"
LOG_OFFSET = 0.001


def _infer_sep(path: str) -> str:
    return "\t" if os.path.splitext(path)[1].lower() in {".tsv", ".txt"} else ","


def load_matrix(path: str, sep: str | None = None) -> pd.DataFrame:
    """Load a feature-by-sample matrix.

    Parameters
    ----------
    path : str
        CSV or TSV file.  The first column holds feature names and the header
        row holds sample IDs.
    sep : str, optional
        Field separator.  Inferred from the file extension when ``None``.

    Returns
    -------
    pd.DataFrame
        Numeric matrix with features as rows and sample IDs as columns.
    """
    matrix = pd.read_csv(path, sep=sep or _infer_sep(path), index_col=0)
    matrix.columns = matrix.columns.astype(str)
    return matrix.apply(pd.to_numeric)


def load_annotations(
    path: str,
    sep: str | None = None,
    id_column: str = ID_COLUMN,
) -> pd.DataFrame:
    """Load a per-sample annotation table.

    The ID column is read as strings so it matches the matrix header, and is
    renamed to ``id`` when *id_column* differs.
    """
    sep = sep or _infer_sep(path)
    header = pd.read_csv(path, sep=sep, nrows=0).columns
    if id_column not in header:
        raise AnnotationError(
            f"Annotation file {path!r} has no {id_column!r} column."
        )
    annotations = pd.read_csv(path, sep=sep, dtype={id_column: str})
    if id_column != ID_COLUMN:
        annotations = annotations.rename(columns={id_column: ID_COLUMN})
    return annotations


def log2_transform(matrix: pd.DataFrame, transform: bool = True) -> pd.DataFrame:
    """Return ``log2(matrix + 0.001)``, or *matrix* itself when *transform* is False."""
    if not transform:
        return matrix
    return np.log2(matrix + LOG_OFFSET)


def require_annotations(annotations: pd.DataFrame | None) -> pd.DataFrame:
    """Check that *annotations* can be joined to an embedding.

    Raises
    ------
    AnnotationError
        If *annotations* is ``None`` or lacks the ``id`` column.
    """
    if annotations is None:
        raise AnnotationError(
            "`annotations` must be supplied when return_data=False."
        )
    if ID_COLUMN not in annotations.columns:
        raise AnnotationError(
            f"`annotations` must contain an {ID_COLUMN!r} column matching the "
            "matrix column names."
        )
    return annotations


def join_annotations(layout: pd.DataFrame, annotations: pd.DataFrame) -> pd.DataFrame:
    """Inner-join embedding coordinates with annotations on ``id``.

    Parameters
    ----------
    layout : pd.DataFrame
        Embedding coordinates indexed by sample ID.
    annotations : pd.DataFrame
        Annotation table with an ``id`` column.

    Returns
    -------
    pd.DataFrame
        One row per sample present in both tables, in *layout* order.
    """
    require_annotations(annotations)
    coords = layout.rename_axis(ID_COLUMN).reset_index()
    joined = coords.merge(annotations, on=ID_COLUMN, how="inner")

    if joined.empty:
        raise AnnotationError(
            "No sample IDs are shared between the matrix columns and "
            f"annotations[{ID_COLUMN!r}]."
        )

    n_dropped = len(coords) - coords[ID_COLUMN].isin(joined[ID_COLUMN]).sum()
    if n_dropped:
        logger.info("%d embedded samples have no annotation and were dropped", n_dropped)
    logger.info("Joined %d samples with annotations", len(joined))
    return joined
