from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Literal, Optional, Tuple

from smartstock.forecast.parsing import month_index

DataType = Literal["number", "date", "string", "object"]


@dataclass(frozen=True)
class ColumnInfo:
    name: str
    data_type: DataType = "object"
    missing_values: int = 0
    missing_percentage: float = 0.0
    status: str = "OK"


@dataclass(frozen=True)
class DataProfile:
    """
    Quick look at an uploaded CSV before it is sent to the forecaster.

    missing    -> number of COLUMNS with at least one blank cell
    duplicates -> rows minus distinct rows (exact text match)
    """

    rows: int = 0
    columns: int = 0
    missing: int = 0
    duplicates: int = 0
    file_name: str = ""
    column_info: Tuple[ColumnInfo, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, object]:
        return {
            "stats": {
                "rows": self.rows,
                "columns": self.columns,
                "missing": self.missing,
                "duplicates": self.duplicates,
                "fileName": self.file_name,
            },
            "columns": [
                {
                    "name": c.name,
                    "dataType": c.data_type,
                    "missingValues": c.missing_values,
                    "missingPercentage": c.missing_percentage,
                    "status": c.status,
                }
                for c in self.column_info
            ],
        }


_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%d/%m/%Y", "%m/%d/%Y", "%Y-%m", "%b %Y", "%B %Y")


def _is_number(value: str) -> bool:
    try:
        number = float(value)
    except ValueError:
        return False
    # "NaN" / "inf" parse but are not data
    return math.isfinite(number)


def _is_date(value: str) -> bool:
    v = value.strip()
    if month_index(v) is not None:
        return True
    for fmt in _DATE_FORMATS:
        try:
            datetime.strptime(v, fmt)
        except ValueError:
            continue
        return True
    return False


def infer_type(sample: Optional[str]) -> DataType:
    if sample is None:
        return "object"
    if _is_number(sample):
        return "number"
    if _is_date(sample):
        return "date"
    return "string"


def profile_csv(csv_text: str, file_name: str = "") -> DataProfile:
    lines = csv_text.strip().splitlines()
    if len(lines) <= 1:
        return DataProfile(file_name=file_name)

    header = [h.strip() for h in lines[0].split(",")]
    rows = [line.split(",") for line in lines[1:]]

    missing_by_col: Dict[int, int] = {}
    for row in rows:
        for i, val in enumerate(row):
            if i < len(header) and val.strip() == "":
                missing_by_col[i] = missing_by_col.get(i, 0) + 1

    cols: List[ColumnInfo] = []
    for i, name in enumerate(header):
        missing = missing_by_col.get(i, 0)
        sample = next((r[i] for r in rows if i < len(r) and r[i].strip() != ""), None)
        cols.append(
            ColumnInfo(
                name=name,
                data_type=infer_type(sample),
                missing_values=missing,
                missing_percentage=(missing / len(rows)) * 100.0,
                status="Some Missing" if missing > 0 else "OK",
            )
        )

    distinct = {",".join(r) for r in rows}
    return DataProfile(
        rows=len(rows),
        columns=len(header),
        missing=sum(1 for c in missing_by_col.values() if c > 0),
        duplicates=len(rows) - len(distinct),
        file_name=file_name,
        column_info=tuple(cols),
    )
