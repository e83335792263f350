from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(eq=False)
class ForecastError(Exception):
    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


@dataclass(eq=False)
class DataError(ForecastError, ValueError):
    """
    Historical data cannot support a forecast.

    NO_VALID_ROWS: nothing usable survived parsing (header only, all zero sales...).
    INSUFFICIENT_ROWS: some rows parsed, but fewer than the minimum for a split.
    """

    rows_found: int = 0
    rows_required: int = 0


@dataclass(eq=False)
class UnknownModelError(ForecastError, ValueError):
    label: Optional[str] = None


def no_valid_rows(rows_required: int) -> DataError:
    return DataError(
        code="NO_VALID_ROWS",
        message="no valid rows: the CSV has no data rows with a positive sales value.",
        rows_found=0,
        rows_required=rows_required,
    )


def insufficient_rows(rows_found: int, rows_required: int) -> DataError:
    return DataError(
        code="INSUFFICIENT_ROWS",
        message=(
            f"insufficient historical data: found {rows_found} valid rows, "
            f"need at least {rows_required} months of sales."
        ),
        rows_found=rows_found,
        rows_required=rows_required,
    )


def unknown_model(label: str) -> UnknownModelError:
    return UnknownModelError(
        code="UNKNOWN_MODEL",
        message=f"unknown model label: {label!r}",
        label=label,
    )
