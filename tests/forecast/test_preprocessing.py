from __future__ import annotations

import pytest

from smartstock.infra.settings import PreprocessConfig
from smartstock.preprocessing import (
    drop_missing,
    fill_missing,
    handle_outliers,
    iqr_bounds,
    label_encode,
    min_max_scale,
    one_hot_encode,
    parse_float,
    preprocess_csv,
    remove_duplicates,
)


def _col(rows, i=1):
    return [r[i] for r in rows]


def test_parse_float_takes_the_leading_number() -> None:
    assert parse_float("12.5") == 12.5
    assert parse_float(" 12kg") == 12.0
    assert parse_float("-3e2") == -300.0
    assert parse_float(".5") == 0.5
    assert parse_float("") is None
    assert parse_float("abc") is None


def test_remove_duplicates_keeps_first() -> None:
    rows, removed = remove_duplicates([["a", "1"], ["a", "1"], ["b", "2"], ["a", "1"]])
    assert rows == [["a", "1"], ["b", "2"]]
    assert removed == 2


def test_drop_missing() -> None:
    assert drop_missing([["a", "1"], ["b", ""], ["", "3"]]) == [["a", "1"]]


@pytest.mark.parametrize("strategy,expected", [("mean", "23.33"), ("median", "20.00")])
def test_fill_missing_mean_and_median(strategy: str, expected: str) -> None:
    rows = [["Jan", "10"], ["Feb", ""], ["Mar", "20"], ["Apr", "40"]]
    out = fill_missing(rows, [1], strategy)
    assert _col(out) == ["10", expected, "20", "40"]
    # input untouched
    assert rows[1][1] == ""


def test_fill_missing_median_even_count() -> None:
    out = fill_missing([["a", "10"], ["b", ""], ["c", "20"]], [1], "median")
    assert out[1][1] == "15.00"


def test_interpolate_midpoints_tail_and_head() -> None:
    rows = [[m, v] for m, v in zip("abcdef", ["", "10", "", "", "30", ""])]
    out = fill_missing(rows, [1], "interpolate")
    # head has no previous value: stays blank
    # second gap uses the value filled just before it
    # tail repeats the last value
    assert _col(out) == ["", "10", "20.00", "25.00", "30", "30.00"]


def test_all_missing_column_is_skipped() -> None:
    rows = [["a", ""], ["b", ""]]
    for strategy in ("mean", "median", "interpolate"):
        assert fill_missing(rows, [1], strategy) == rows


def test_iqr_bounds_positional_quartiles() -> None:
    # sorted 10 11 12 13 100 -> q1 = 11, q3 = 13
    assert iqr_bounds([10, 12, 11, 13, 100]) == (8.0, 16.0)


def test_outliers_remove_and_cap() -> None:
    rows = [["a", "10"], ["b", "12"], ["c", "11"], ["d", "13"], ["e", "100"], ["f", ""]]
    removed = handle_outliers(rows, [1], "remove")
    assert _col(removed, 0) == ["a", "b", "c", "d", "f"]

    capped = handle_outliers(rows, [1], "cap")
    assert _col(capped) == ["10", "12", "11", "13", "16.00", ""]


def test_outliers_need_four_values() -> None:
    rows = [["a", "1"], ["b", "1000"], ["c", "2"]]
    assert handle_outliers(rows, [1], "remove") == rows


def test_label_encode_first_seen_order() -> None:
    rows = [["north"], ["south"], [""], ["north"]]
    assert label_encode(rows, [0]) == [["0"], ["1"], [""], ["0"]]


def test_one_hot_encode_replaces_the_column() -> None:
    header, rows, origin = one_hot_encode(
        ["Month", "Region", "Sales"],
        [["Jan", "north", "1"], ["Feb", "south", "2"], ["Mar", "", "3"]],
        [1],
    )
    assert header == ["Month", "Sales", "Region_north", "Region_south"]
    assert rows == [["Jan", "1", "1", "0"], ["Feb", "2", "0", "1"], ["Mar", "3", "0", "0"]]
    assert origin == [0, 2, -1, -1]


def test_min_max_scale_with_constant_guard() -> None:
    out = min_max_scale([["a", "10", "5"], ["b", "20", "5"], ["c", "30", "5"]], [1, 2])
    assert _col(out) == ["0.0000", "0.5000", "1.0000"]
    assert _col(out, 2) == ["5", "5", "5"]


def test_preprocess_pipeline_end_to_end() -> None:
    text = "Month,Sales,Region\nJan,100,north\nJan,100,north\nFeb,,south\nMar,300,north\n"
    cfg = PreprocessConfig(missing_values="mean", encoding="label", scale=True)

    res = preprocess_csv(text, cfg, file_name="s.csv")

    assert res.csv_text == "Month,Sales,Region\nJan,0.0000,0\nFeb,0.5000,1\nMar,1.0000,0"
    assert res.steps == (
        "Removed 1 duplicate rows.",
        "Filled missing values using mean.",
        "Applied Label Encoding to categorical columns.",
        "Scaled numeric data (Normalization).",
    )
    assert res.profile.rows == 3
    assert res.profile.duplicates == 0
    assert res.profile.missing == 0
    assert res.to_dict()["stats"]["fileName"] == "s.csv"


def test_preprocess_one_hot_then_scale_only_numeric() -> None:
    text = "Month,Region,Sales\nJan,north,10\nFeb,south,30\n"
    cfg = PreprocessConfig(missing_values="none", encoding="one-hot", scale=True)

    res = preprocess_csv(text, cfg)

    assert res.csv_text == "Month,Sales,Region_north,Region_south\nJan,0.0000,1,0\nFeb,1.0000,0,1"


def test_preprocess_defaults_drop_incomplete_rows() -> None:
    res = preprocess_csv("Month,Sales\nJan,10\nFeb\nMar,\nApr,40\n")
    assert res.csv_text == "Month,Sales\nJan,10\nApr,40"
    assert res.steps == ("Dropped rows with missing values.",)


def test_preprocess_header_only() -> None:
    res = preprocess_csv("Month,Sales\n")
    assert res.csv_text == "Month,Sales"
    assert res.steps == ()
    assert res.profile.rows == 0
