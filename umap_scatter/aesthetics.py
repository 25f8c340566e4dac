"""Plot requests: which columns drive fill, shape, ellipses, labels and tags.

A plot request is one of three variants, chosen once from the number of
variables passed by the caller:

* :class:`FillAesthetics` - points coloured by one variable.
* :class:`FillShapeAesthetics` - fill plus marker shape.
* :class:`FillShapeEllipseAesthetics` - fill, shape and a confidence ellipse
  per group of a third variable.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from numbers import Number
from typing import Union

import pandas as pd

from .exceptions import PlotSpecError
from .io import ID_COLUMN


@dataclass(frozen=True)
class FillAesthetics:
    fill: str
    fill_name: str

    @property
    def columns(self) -> tuple[str, ...]:
        return (self.fill,)


@dataclass(frozen=True)
class FillShapeAesthetics:
    fill: str
    shape: str
    fill_name: str
    shape_name: str

    @property
    def columns(self) -> tuple[str, ...]:
        return (self.fill, self.shape)


@dataclass(frozen=True)
class FillShapeEllipseAesthetics:
    fill: str
    shape: str
    ellipse: str
    fill_name: str
    shape_name: str
    ellipse_name: str

    @property
    def columns(self) -> tuple[str, ...]:
        return (self.fill, self.shape, self.ellipse)


Aesthetics = Union[FillAesthetics, FillShapeAesthetics, FillShapeEllipseAesthetics]
AESTHETIC_TYPES = (FillAesthetics, FillShapeAesthetics, FillShapeEllipseAesthetics)


def _as_list(value) -> list:
    if isinstance(value, str):
        return [value]
    return list(value)


def aesthetics_from_variables(
    variables: Sequence[str] | str,
    legend_names: Sequence[str] | str | None = None,
) -> Aesthetics:
    """Build the plot request for 1, 2 or 3 variable names.

    Parameters
    ----------
    variables : sequence of str
        Column names used, in order, for fill, shape and ellipse grouping.
    legend_names : sequence of str, optional
        Legend titles in the same order.  Missing entries fall back to the
        variable name.

    Returns
    -------
    Aesthetics
    """
    variables = _as_list(variables)
    names = _as_list(legend_names) if legend_names is not None else []
    names = [str(n) for n in names[: len(variables)]]
    names += [str(v) for v in variables[len(names):]]

    if len(variables) == 1:
        return FillAesthetics(fill=variables[0], fill_name=names[0])
    if len(variables) == 2:
        return FillShapeAesthetics(
            fill=variables[0], shape=variables[1],
            fill_name=names[0], shape_name=names[1],
        )
    if len(variables) == 3:
        return FillShapeEllipseAesthetics(
            fill=variables[0], shape=variables[1], ellipse=variables[2],
            fill_name=names[0], shape_name=names[1], ellipse_name=names[2],
        )
    raise PlotSpecError(
        f"`variables` must name 1, 2 or 3 columns, got {len(variables)}: {variables}"
    )


@dataclass(frozen=True)
class LabelSpec:
    """Text drawn inside each marker.

    ``column=None`` numbers the points ``1..N`` in table order.
    """

    size: float
    column: str | None = None

    @classmethod
    def parse(cls, value) -> "LabelSpec":
        """Accept a font size, ``(column, size)`` or ``{"var": ..., "size": ...}``."""
        if isinstance(value, LabelSpec):
            return value
        if isinstance(value, Mapping):
            if "size" not in value:
                raise PlotSpecError(f"`labels` mapping needs a 'size' entry: {dict(value)}")
            try:
                size = float(value["size"])
            except (TypeError, ValueError) as exc:
                raise PlotSpecError(f"Invalid label size in `labels`: {dict(value)}") from exc
            column = value.get("var")
            return cls(size=size, column=None if column is None else str(column))
        if isinstance(value, (Number, str)):
            value = [value]
        value = list(value)

        try:
            if len(value) == 1:
                return cls(size=float(value[0]))
            if len(value) >= 2:
                return cls(size=float(value[1]), column=str(value[0]))
        except (TypeError, ValueError) as exc:
            raise PlotSpecError(f"Invalid label size in `labels`: {value}") from exc
        raise PlotSpecError("`labels` must not be empty.")


@dataclass(frozen=True)
class NameTagSpec:
    """Text placed next to each marker and repelled from its neighbours.

    ``min_segment_length`` and ``box_padding`` are in text lines.
    """

    size: float
    column: str = ID_COLUMN
    min_segment_length: float = 2.0
    box_padding: float = 0.5

    @classmethod
    def parse(cls, value) -> "NameTagSpec":
        """Accept a font size, ``(column, size, minlen, box)`` or a mapping.

        Mapping keys are ``var``, ``size``, ``minlen`` and ``box``.  Missing
        ``minlen``/``box`` take the defaults.
        """
        if isinstance(value, NameTagSpec):
            return value
        if isinstance(value, Mapping):
            if "size" not in value:
                raise PlotSpecError(f"`name_tags` mapping needs a 'size' entry: {dict(value)}")
            try:
                return cls(
                    size=float(value["size"]),
                    column=str(value.get("var", ID_COLUMN)),
                    min_segment_length=float(value.get("minlen", cls.min_segment_length)),
                    box_padding=float(value.get("box", cls.box_padding)),
                )
            except (TypeError, ValueError) as exc:
                raise PlotSpecError(
                    f"Invalid numeric field in `name_tags`: {dict(value)}"
                ) from exc
        if isinstance(value, (Number, str)):
            value = [value]
        value = list(value)

        try:
            if len(value) == 1:
                return cls(size=float(value[0]))
            if len(value) >= 2:
                extra = [float(v) for v in value[2:4]]
                defaults = [cls.min_segment_length, cls.box_padding]
                minlen, box = extra + defaults[len(extra):]
                return cls(
                    size=float(value[1]), column=str(value[0]),
                    min_segment_length=minlen, box_padding=box,
                )
        except (TypeError, ValueError) as exc:
            raise PlotSpecError(f"Invalid numeric field in `name_tags`: {value}") from exc
        raise PlotSpecError("`name_tags` must not be empty.")


def validate_columns(
    data: pd.DataFrame,
    aesthetics: Aesthetics,
    labels: LabelSpec | None = None,
    name_tags: NameTagSpec | None = None,
) -> None:
    """Check that every column the plot refers to exists in *data*.

    Raises
    ------
    PlotSpecError
        Naming the first missing column.
    """
    for column in aesthetics.columns:
        if column not in data.columns:
            raise PlotSpecError(
                f"Plot variable {column!r} must be a column in `annotations`."
            )
    if labels is not None and labels.column is not None and labels.column not in data.columns:
        raise PlotSpecError(
            f"`labels[0]` ({labels.column!r}) must be a column in `annotations`."
        )
    if name_tags is not None and name_tags.column not in data.columns:
        raise PlotSpecError(
            f"`name_tags[0]` ({name_tags.column!r}) must be a column in `annotations`."
        )
