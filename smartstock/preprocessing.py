"""
Data preparation pass over an uploaded CSV.

    duplicates -> missing values -> outliers -> encoding -> scaling -> re-profile

Column roles come from profiling the INPUT once: "number" columns get
imputed, fenced and scaled; "string" columns get encoded; dates and the rest
pass through untouched. Cells are kept as text, rewritten values use 2
decimals (imputation, capping) or 4 decimals (scaling).
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from smartstock.infra.logging_std import get_logger, log_kv
from smartstock.infra.settings import PreprocessConfig
from smartstock.profiling import DataProfile, profile_csv

logger = get_logger(__name__)

Rows = List[List[str]]

# kind of the one-hot indicator columns (never imputed or scaled)
INDICATOR = "indicator"

_LEADING_FLOAT = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class PreprocessResult:
    csv_text: str
    profile: DataProfile
    steps: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, object]:
        out = self.profile.to_dict()
        out["csvData"] = self.csv_text
        out["steps"] = list(self.steps)
        return out


def parse_float(raw: str) -> Optional[float]:
    """Leading number of a cell: "12.5" -> 12.5, "12kg" -> 12.0, "" / "abc" -> None."""
    m = _LEADING_FLOAT.match(raw)
    if not m:
        return None
    return float(m.group(0))


def _copy(rows: Sequence[Sequence[str]]) -> Rows:
    return [list(r) for r in rows]


def _column_values(rows: Sequence[Sequence[str]], col: int) -> List[float]:
    values: List[float] = []
    for row in rows:
        v = parse_float(row[col])
        if v is not None:
            values.append(v)
    return values


def remove_duplicates(rows: Sequence[Sequence[str]]) -> Tuple[Rows, int]:
    """First occurrence wins; rows compare as their joined text."""
    seen = set()
    unique: Rows = []
    for row in rows:
        key = ",".join(row)
        if key in seen:
            continue
        seen.add(key)
        unique.append(list(row))
    return unique, len(rows) - len(unique)


def drop_missing(rows: Sequence[Sequence[str]]) -> Rows:
    return [list(r) for r in rows if all(cell != "" for cell in r)]


def _median(values: Sequence[float]) -> float:
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2.0


def _nearest(rows: Sequence[Sequence[str]], col: int, indexes: range) -> Optional[float]:
    for i in indexes:
        if rows[i][col] != "":
            v = parse_float(rows[i][col])
            if v is not None:
                return v
    return None


def fill_missing(rows: Sequence[Sequence[str]], columns: Sequence[int], strategy: str) -> Rows:
    """
    Impute blank cells of the given numeric columns.

    mean / median -> one fill value per column
    interpolate   -> midpoint of the nearest values above and below; a blank
                     tail repeats the last value, a blank head stays blank.
                     Cells filled earlier in the pass count as neighbours.

    A column with no numeric value at all is left alone.
    """
    out = _copy(rows)
    for col in columns:
        valid = _column_values(out, col)
        if not valid:
            continue

        if strategy in ("mean", "median"):
            fill = sum(valid) / len(valid) if strategy == "mean" else _median(valid)
            for row in out:
                if row[col] == "":
                    row[col] = f"{fill:.2f}"
            continue

        if strategy != "interpolate":
            raise ValueError(f"unknown missing value strategy: {strategy!r}")
        for i, row in enumerate(out):
            if row[col] != "":
                continue
            prev_val = _nearest(out, col, range(i - 1, -1, -1))
            next_val = _nearest(out, col, range(i + 1, len(out)))
            if prev_val is not None and next_val is not None:
                row[col] = f"{(prev_val + next_val) / 2.0:.2f}"
            elif prev_val is not None:
                row[col] = f"{prev_val:.2f}"
    return out


def iqr_bounds(values: Sequence[float]) -> Tuple[float, float]:
    """Tukey fences with positional quartiles: q1 = v[n//4], q3 = v[3n//4]."""
    ordered = sorted(values)
    n = len(ordered)
    q1 = ordered[n // 4]
    q3 = ordered[(n * 3) // 4]
    iqr = q3 - q1
    return q1 - 1.5 * iqr, q3 + 1.5 * iqr


def handle_outliers(rows: Sequence[Sequence[str]], columns: Sequence[int], strategy: str) -> Rows:
    """
    remove -> drop rows outside the fences; cap -> clip to the fence.

    Columns with fewer than 4 numeric values are skipped. Non-numeric cells
    are never treated as outliers. Columns are handled one after another, so
    a removal shapes the fences of the next column.
    """
    if strategy not in ("remove", "cap"):
        raise ValueError(f"unknown outlier strategy: {strategy!r}")

    out = _copy(rows)
    for col in columns:
        values = _column_values(out, col)
        if len(values) < 4:
            continue
        low, high = iqr_bounds(values)

        if strategy == "remove":
            kept: Rows = []
            for row in out:
                v = parse_float(row[col])
                if v is None or low <= v <= high:
                    kept.append(row)
            out = kept
        else:
            for row in out:
                v = parse_float(row[col])
                if v is None:
                    continue
                if v < low:
                    row[col] = f"{low:.2f}"
                elif v > high:
                    row[col] = f"{high:.2f}"
    return out


def _categories(rows: Sequence[Sequence[str]], col: int) -> List[str]:
    # first-seen order, blanks are not a category
    return [v for v in dict.fromkeys(r[col] for r in rows) if v != ""]


def label_encode(rows: Sequence[Sequence[str]], columns: Sequence[int]) -> Rows:
    out = _copy(rows)
    for col in columns:
        codes = {value: str(i) for i, value in enumerate(_categories(out, col))}
        for row in out:
            if row[col] != "":
                row[col] = codes[row[col]]
    return out


def one_hot_encode(
    header: Sequence[str],
    rows: Sequence[Sequence[str]],
    columns: Sequence[int],
) -> Tuple[List[str], Rows, List[int]]:
    """
    Replace each categorical column by `<name>_<value>` 0/1 columns.

    Returns the new header, the new rows and, for every new column, the index
    it had before encoding (-1 for indicator columns).
    """
    new_header = list(header)
    out = _copy(rows)
    origin = list(range(len(header)))

    for col in columns:
        values = _categories(rows, col)
        new_header.extend(f"{header[col]}_{v}" for v in values)
        origin.extend(-1 for _ in values)
        for src, row in zip(rows, out):
            row.extend("1" if src[col] == v else "0" for v in values)

    drop = set(columns)
    keep = [i for i in range(len(new_header)) if i not in drop]
    return (
        [new_header[i] for i in keep],
        [[row[i] for i in keep] for row in out],
        [origin[i] for i in keep],
    )


def min_max_scale(rows: Sequence[Sequence[str]], columns: Sequence[int]) -> Rows:
    """(v - min) / (max - min); constant columns are left as they are."""
    out = _copy(rows)
    for col in columns:
        values = _column_values(out, col)
        if not values:
            continue
        low, high = min(values), max(values)
        if high == low:
            continue
        for row in out:
            v = parse_float(row[col])
            if v is not None:
                row[col] = f"{(v - low) / (high - low):.4f}"
    return out


def _to_csv(header: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    return "\n".join([",".join(header)] + [",".join(r) for r in rows])


def preprocess_csv(
    csv_text: str,
    config: Optional[PreprocessConfig] = None,
    file_name: str = "",
) -> PreprocessResult:
    cfg = config if config is not None else PreprocessConfig()
    lines = csv_text.strip().splitlines()
    if len(lines) <= 1:
        return PreprocessResult(csv_text=csv_text.strip(), profile=profile_csv(csv_text, file_name))

    header = [h.strip() for h in lines[0].split(",")]
    width = len(header)
    # short rows are padded with blanks, extra cells dropped
    rows: Rows = []
    for line in lines[1:]:
        cells = [c.strip() for c in line.split(",")][:width]
        rows.append(cells + [""] * (width - len(cells)))
    rows_in = len(rows)

    kinds = [c.data_type for c in profile_csv(csv_text).column_info]
    numeric = [i for i, k in enumerate(kinds) if k == "number"]
    categorical = [i for i, k in enumerate(kinds) if k == "string"]

    steps: List[str] = []

    if cfg.remove_duplicates:
        rows, removed = remove_duplicates(rows)
        if removed:
            steps.append(f"Removed {removed} duplicate rows.")

    if cfg.missing_values == "drop":
        rows = drop_missing(rows)
        steps.append("Dropped rows with missing values.")
    elif cfg.missing_values != "none":
        rows = fill_missing(rows, numeric, cfg.missing_values)
        steps.append(f"Filled missing values using {cfg.missing_values}.")

    if cfg.outliers != "none":
        rows = handle_outliers(rows, numeric, cfg.outliers)
        steps.append(f"Handled outliers using {cfg.outliers} strategy.")

    if cfg.encoding != "none" and categorical:
        if cfg.encoding == "label":
            rows = label_encode(rows, categorical)
            steps.append("Applied Label Encoding to categorical columns.")
        else:
            header, rows, origin = one_hot_encode(header, rows, categorical)
            numeric = [i for i, src in enumerate(origin) if src in numeric]
            steps.append("Applied One-Hot Encoding to categorical columns.")

    if cfg.scale:
        rows = min_max_scale(rows, numeric)
        steps.append("Scaled numeric data (Normalization).")

    final = _to_csv(header, rows)
    log_kv(logger, "preprocess done", rows_in=rows_in, rows_out=len(rows), steps=len(steps))
    return PreprocessResult(csv_text=final, profile=profile_csv(final, file_name), steps=tuple(steps))
