from __future__ import annotations

import re
from typing import List, Optional, Tuple

import deal

from smartstock.forecast.models import HistoricalPoint

MONTH_ABBR: Tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# second half of the year: what the dashboard always showed for a Jan..Jun upload
DEFAULT_FORECAST_LABELS: Tuple[str, ...] = MONTH_ABBR[6:]

_MONTH_NAMES: Tuple[str, ...] = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")


def parse_sales(raw: str) -> int:
    """
    Leading-integer parse: "120" -> 120, "120.7" -> 120, "12abc" -> 12.
    No leading digits -> 0 (the row is then dropped as non-positive).
    """
    m = _LEADING_INT.match(raw)
    if not m:
        return 0
    return int(m.group(1))


@deal.post(lambda result: all(p.sales > 0 for p in result), message="only positive sales survive")
def parse_history(csv_text: str) -> Tuple[HistoricalPoint, ...]:
    """
    CSV text -> historical points, in file order.

    - first line is a header and is skipped
    - column 0 = month label, column 1 = sales
    - naive comma split: quoted fields with commas are NOT supported
    - rows with < 2 columns or sales <= 0 are dropped
    """
    lines = csv_text.strip().splitlines()
    out: List[HistoricalPoint] = []
    for line in lines[1:]:
        values = line.split(",")
        if len(values) < 2:
            continue
        sales = parse_sales(values[1])
        if sales <= 0:
            continue
        out.append(HistoricalPoint(month=values[0].strip(), sales=sales))
    return tuple(out)


def month_index(label: str) -> Optional[int]:
    key = label.strip().rstrip(".").lower()
    if key == "sept":
        return 8
    if len(key) < 3:
        return None
    for i, name in enumerate(_MONTH_NAMES):
        if name.startswith(key):
            return i
    return None


def next_period_labels(last_label: str, horizon: int) -> Tuple[str, ...]:
    """
    Labels for the `horizon` periods after `last_label`.

    "Nov" -> Dec, Jan, ...   |   "2024-11" -> 2024-12, 2025-01, ...
    Unrecognised labels fall back to Jul..Dec (cycled past 6).
    """
    ym = _YEAR_MONTH.match(last_label.strip())
    if ym and 1 <= int(ym.group(2)) <= 12:
        year, month = int(ym.group(1)), int(ym.group(2))
        labels = []
        for _ in range(horizon):
            month += 1
            if month > 12:
                month = 1
                year += 1
            labels.append(f"{year:04d}-{month:02d}")
        return tuple(labels)

    idx = month_index(last_label)
    if idx is not None:
        return tuple(MONTH_ABBR[(idx + k) % 12] for k in range(1, horizon + 1))

    n = len(DEFAULT_FORECAST_LABELS)
    return tuple(DEFAULT_FORECAST_LABELS[k % n] for k in range(horizon))
