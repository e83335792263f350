from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from smartstock.cli.main import cli
from smartstock.infra.settings import reset_config_cache

HALF_YEAR = "Month,Sales\nJan,100\nFeb,120\nMar,90\nApr,150\nMay,200\nJun,180\n"


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config_cache()
    yield
    reset_config_cache()


def _csv(tmp_path: Path, text: str) -> str:
    p = tmp_path / "sales.csv"
    p.write_text(text, encoding="utf-8")
    return str(p)


def test_forecast_command_prints_json(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["forecast", "--input", _csv(tmp_path, HALF_YEAR), "--model", "xgboost", "--seed", "1"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["modelUsed"] == "XGBoost"
    assert payload["confidence"] == "High"
    assert len(payload["chartData"]) == 12
    assert payload["predictedUnits"] == sum(r["predicted"] for r in payload["chartData"][6:])


def test_forecast_command_is_reproducible_with_seed(tmp_path: Path) -> None:
    runner = CliRunner()
    path = _csv(tmp_path, HALF_YEAR)
    a = runner.invoke(cli, ["forecast", "--input", path, "--model", "LSTM", "--seed", "5"])
    b = runner.invoke(cli, ["forecast", "--input", path, "--model", "LSTM", "--seed", "5"])
    assert a.exit_code == 0 and b.exit_code == 0
    assert a.output == b.output


def test_forecast_command_writes_output_file(tmp_path: Path) -> None:
    out = tmp_path / "out" / "result.json"
    result = CliRunner().invoke(
        cli, ["forecast", "--input", _csv(tmp_path, HALF_YEAR), "--seed", "2", "--output", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert "Results saved to" in result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["modelUsed"] == "ARIMA"


def test_forecast_command_reports_data_error(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["forecast", "--input", _csv(tmp_path, "Month,Sales\nJan,5\n")])
    assert result.exit_code == 1
    assert "INSUFFICIENT_ROWS" in result.output


def test_config_option_changes_horizon(tmp_path: Path) -> None:
    cfg = tmp_path / "c.yml"
    cfg.write_text("forecast:\n  horizon: 3\n", encoding="utf-8")
    result = CliRunner().invoke(
        cli, ["--config", str(cfg), "forecast", "--input", _csv(tmp_path, HALF_YEAR), "--seed", "3"]
    )
    assert result.exit_code == 0, result.output
    assert len(json.loads(result.output)["chartData"]) == 9


def test_models_command() -> None:
    result = CliRunner().invoke(cli, ["models"])
    assert result.exit_code == 0
    rows = json.loads(result.output)
    assert [r["model"] for r in rows] == ["ARIMA", "Prophet", "LSTM", "Random Forest", "XGBoost"]
    assert rows[0] == {"model": "ARIMA", "accuracy": 0.85, "f1Score": 0.82}


def test_profile_command(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["profile", "--input", _csv(tmp_path, HALF_YEAR)])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["stats"]["rows"] == 6
    assert data["stats"]["fileName"] == "sales.csv"


def test_roc_command() -> None:
    result = CliRunner().invoke(cli, ["roc", "--auc", "0.9", "--points", "4"])
    assert result.exit_code == 0
    pts = json.loads(result.output)
    assert [p["fpr"] for p in pts] == [0.0, 0.25, 0.5, 0.75, 1.0]


@pytest.mark.parametrize("raw", ["RandomForest", "random forest", "Random Forest"])
def test_forecast_command_accepts_model_aliases(tmp_path: Path, raw: str) -> None:
    result = CliRunner().invoke(cli, ["forecast", "--input", _csv(tmp_path, HALF_YEAR), "--model", raw, "--seed", "4"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["modelUsed"] == "Random Forest"


def test_forecast_command_rejects_unknown_model(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["forecast", "--input", _csv(tmp_path, HALF_YEAR), "--model", "GPT"])
    assert result.exit_code == 2
    assert "unknown model label" in result.output


def test_preprocess_command_prints_profile_and_csv(tmp_path: Path) -> None:
    text = "Month,Sales\nJan,100\nJan,100\nFeb,\nMar,300\n"
    result = CliRunner().invoke(cli, ["preprocess", "--input", _csv(tmp_path, text), "--missing", "interpolate"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["csvData"] == "Month,Sales\nJan,100\nFeb,200.00\nMar,300"
    assert data["stats"]["rows"] == 3
    assert data["steps"][0] == "Removed 1 duplicate rows."


def test_preprocess_command_writes_output_file(tmp_path: Path) -> None:
    out = tmp_path / "prepared" / "clean.csv"
    text = "Month,Sales\nJan,10\nFeb,20\nMar,30\n"
    result = CliRunner().invoke(
        cli, ["preprocess", "--input", _csv(tmp_path, text), "--scale", "--output", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert "Results saved to" in result.output
    assert out.read_text(encoding="utf-8") == "Month,Sales\nJan,0.0000\nFeb,0.5000\nMar,1.0000\n"
