from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
import math
from typing import Any

import numpy as np

from pareto_plot.errors import ParetoDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


CellObjects = tuple[Mapping[str, Any] | None, ...]


@dataclass(frozen=True)
class ColumnSource:
    display_name: str
    query_name: str


@dataclass(frozen=True)
class CategoryColumn:
    values: tuple[Any, ...]
    source: ColumnSource | None
    objects: CellObjects | None = None


@dataclass(frozen=True)
class ValueColumn:
    values: tuple[Any, ...]
    source: ColumnSource | None = None
    objects: CellObjects | None = None


@dataclass(frozen=True)
class QueryResult:
    """One category column and one value column, as bound by the host."""

    categories: CategoryColumn | None
    values: ValueColumn | None


def coerce_number(raw: Any) -> float | None:
    """Numeric view of a cell: ``None`` for missing, non-numeric or non-finite."""
    if raw is None or isinstance(raw, (str, bytes, bytearray)):
        return None
    if isinstance(raw, Decimal):
        out = float(raw)
    else:
        try:
            out = float(raw)
        except (TypeError, ValueError):
            return None
    if not math.isfinite(out):
        return None
    return out


def cell_object_value(
    objects: CellObjects | None,
    index: int,
    object_name: str,
    property_name: str,
    default: Any = None,
) -> Any:
    if not objects or index < 0 or index >= len(objects):
        return default
    cell = objects[index]
    if not isinstance(cell, Mapping):
        return default
    group = cell.get(object_name)
    if not isinstance(group, Mapping):
        return default
    value = group.get(property_name, default)
    return default if value is None else value


def query_from_sequences(
    categories: Any,
    values: Any,
    *,
    category_name: str = "category",
    value_name: str = "value",
    category_objects: Sequence[Mapping[str, Any] | None] | None = None,
    value_objects: Sequence[Mapping[str, Any] | None] | None = None,
) -> QueryResult:
    category_cells = _as_cells(categories, label="categories")
    value_cells = _as_cells(values, label="values")
    return QueryResult(
        categories=CategoryColumn(
            values=category_cells,
            source=ColumnSource(display_name=category_name, query_name=f"Table.{category_name}"),
            objects=tuple(category_objects) if category_objects is not None else None,
        ),
        values=ValueColumn(
            values=value_cells,
            source=ColumnSource(display_name=value_name, query_name=f"Sum(Table.{value_name})"),
            objects=tuple(value_objects) if value_objects is not None else None,
        ),
    )


def query_from_dataframe(
    data: Any,
    *,
    category: str,
    value: str | None = None,
    format_string: str | None = None,
) -> QueryResult:
    if pd is None:
        raise ParetoDataError("pandas is required for DataFrame input")
    if not isinstance(data, pd.DataFrame):
        raise ParetoDataError("`data` must be a pandas DataFrame")
    if category not in data.columns:
        raise ParetoDataError(f"column not found: {category}")
    if value is None:
        numeric_cols = [c for c in data.columns if c != category and _is_numeric_dtype(data[c])]
        if len(numeric_cols) != 1:
            raise ParetoDataError("when value is omitted, data must have exactly one numeric column")
        value = str(numeric_cols[0])
    elif value not in data.columns:
        raise ParetoDataError(f"column not found: {value}")

    value_objects = None
    if format_string is not None:
        value_objects = [{"general": {"formatString": format_string}} for _ in range(len(data))]
    return query_from_sequences(
        data[category],
        data[value],
        category_name=category,
        value_name=value,
        value_objects=value_objects,
    )


def _is_numeric_dtype(series: Any) -> bool:
    if pd is None:
        return False
    try:
        return bool(pd.api.types.is_numeric_dtype(series))
    except Exception:
        return False


def _as_cells(value: Any, *, label: str) -> tuple[Any, ...]:
    if value is None:
        return ()
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise ParetoDataError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tuple(tensor.tolist())

    if pd is not None and isinstance(value, pd.Series):
        return tuple(None if _is_missing(v) else v for v in value.tolist())

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise ParetoDataError(f"{label} must be 1-D")
        return tuple(value.tolist())

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return tuple(value)

    raise ParetoDataError(f"unsupported {label} input type: {type(value)!r}")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
