import json
from pathlib import Path
from typing import Any, Optional

import click

from smartstock.forecast import (
    ForecastEngine,
    ForecastError,
    ModelLabel,
    SeededRandomSource,
    UnknownModelError,
    get_model_performance,
    parse_model_label,
    roc_curve,
)
from smartstock.forecast.schemas import ForecastResultSchema
from smartstock.infra.logging_std import configure_logging
from smartstock.infra.settings import load_config
from smartstock.preprocessing import preprocess_csv
from smartstock.profiling import profile_csv

MODEL_CHOICES = [m.value for m in ModelLabel]


def _emit(payload: Any, output_path: Optional[str]) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output_path:
        out = Path(output_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text + "\n", encoding="utf-8")
        click.echo(f"Results saved to {output_path}")
    else:
        click.echo(text)


def _read_input(input_path: str) -> str:
    return Path(input_path).read_text(encoding="utf-8")


def _model_label(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[ModelLabel]:
    if value is None:
        return None
    try:
        return parse_model_label(value)
    except UnknownModelError as e:
        raise click.BadParameter(f"{e.message}; one of: {', '.join(MODEL_CHOICES)}") from None


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="YAML config file")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str]) -> None:
    """SmartStock demand forecasting CLI"""
    app_config = load_config(Path(config_path) if config_path else None)
    configure_logging(
        level=app_config.logging.level,
        json_output=app_config.logging.format == "json",
    )
    ctx.obj = app_config


@cli.command()
@click.option("--input", "input_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Input CSV file path (month,sales)")
@click.option("--model", "model", callback=_model_label, help="Model preset, e.g. ARIMA, Prophet, LSTM, RandomForest, XGBoost (default from config)")
@click.option("--seed", type=int, help="Seed for reproducible noise")
@click.option("--output", "output_path", help="Output JSON file path")
@click.pass_obj
def forecast(app_config, input_path: str, model: Optional[ModelLabel], seed: Optional[int], output_path: Optional[str]) -> None:
    """Forecast the next periods from a sales CSV"""
    cfg = app_config.forecast
    rng = SeededRandomSource(seed) if seed is not None else None
    engine = ForecastEngine(config=cfg, rng=rng)

    try:
        result = engine.forecast(_read_input(input_path), model)
    except ForecastError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    payload = ForecastResultSchema.model_validate(result.to_dict()).model_dump()
    _emit(payload, output_path)


@cli.command()
def models() -> None:
    """Show the static model performance sheet"""
    _emit([p.to_dict() for p in get_model_performance()], None)


@cli.command()
@click.option("--input", "input_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Input CSV file path")
def profile(input_path: str) -> None:
    """Rows, columns, blanks and duplicates of a CSV"""
    prof = profile_csv(_read_input(input_path), file_name=Path(input_path).name)
    _emit(prof.to_dict(), None)


@cli.command()
@click.option("--input", "input_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Input CSV file path")
@click.option("--remove-duplicates/--keep-duplicates", "remove_duplicates", default=None, help="Drop repeated rows")
@click.option("--missing", "missing_values", type=click.Choice(["none", "drop", "mean", "median", "interpolate"]), help="Missing value strategy")
@click.option("--outliers", type=click.Choice(["none", "remove", "cap"]), help="IQR outlier strategy")
@click.option("--encoding", type=click.Choice(["none", "label", "one-hot"]), help="Categorical encoding")
@click.option("--scale/--no-scale", "scale", default=None, help="Min-max scale numeric columns")
@click.option("--output", "output_path", help="Write the prepared CSV here")
@click.pass_obj
def preprocess(
    app_config,
    input_path: str,
    remove_duplicates: Optional[bool],
    missing_values: Optional[str],
    outliers: Optional[str],
    encoding: Optional[str],
    scale: Optional[bool],
    output_path: Optional[str],
) -> None:
    """Clean and transform a CSV (options override the config)"""
    overrides = {
        "remove_duplicates": remove_duplicates,
        "missing_values": missing_values,
        "outliers": outliers,
        "encoding": encoding,
        "scale": scale,
    }
    cfg = app_config.preprocess.model_copy(update={k: v for k, v in overrides.items() if v is not None})
    result = preprocess_csv(_read_input(input_path), cfg, file_name=Path(input_path).name)

    if output_path:
        out = Path(output_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(result.csv_text + "\n", encoding="utf-8")
        click.echo(f"Results saved to {output_path}")
        for step in result.steps:
            click.echo(f"- {step}")
    else:
        _emit(result.to_dict(), None)


@cli.command()
@click.option("--auc", type=click.FloatRange(0.0, 1.0), required=True, help="ROC-AUC score")
@click.option("--points", type=click.IntRange(min=1), default=20, show_default=True)
def roc(auc: float, points: int) -> None:
    """ROC curve series for a given AUC"""
    _emit([{"fpr": p.fpr, "tpr": p.tpr, "baseline": p.baseline} for p in roc_curve(auc, points)], None)


if __name__ == "__main__":
    cli()
