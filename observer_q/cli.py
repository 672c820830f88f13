"""
Observer-Q — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Run the engine.
  5. Report result to stdout (plain text, or JSON with ``--json``).

Install and run::

    pip install -e .
    observer-q --help
    observer-q validate-config
    observer-q evaluate --mood 7 --stress 3 --baseline-q 0.6
    observer-q simulate --q 0.9 --trials 10000 --seed 42
    observer-q summarize --file measurements.json --baseline-q 0.6
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="observer-q",
    help="Observer-Q — Q-score and collapse-bias engine for calibration sessions.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from observer_q.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from observer_q.utils.logging import configure_logging
    configure_logging(config.logging)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)
    plan = config.session.plan()

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  k_symbiosis:      {config.engine.k_symbiosis}")
    typer.echo(f"  Monte-Carlo runs: {config.engine.n_trials}")
    typer.echo(f"  Seed:             {config.engine.seed if config.engine.seed is not None else 'unseeded'}")
    typer.echo(f"  Thresholds:       tank={config.thresholds.tank}  ocean={config.thresholds.ocean}")
    typer.echo(
        f"  Session:          {plan.duration_minutes} min, every {plan.interval_seconds}s "
        f"({plan.total_intervals} intervals)"
    )
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("evaluate")
def evaluate(
    mood: float = typer.Option(..., "--mood", help="Mood, 0 (low) to 10 (high)."),
    stress: float = typer.Option(..., "--stress", help="Stress, 0 (calm) to 10 (max)."),
    baseline_q: Optional[float] = typer.Option(
        None,
        "--baseline-q",
        help="Baseline Q (default: config session.default_baseline_q).",
    ),
    interval: int = typer.Option(1, "--interval", help="1-based interval number."),
    trials: Optional[int] = typer.Option(
        None, "--trials", help="Monte-Carlo die rolls (default: config engine.n_trials).",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for reproducible sampling (default: config engine.seed).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit the evaluation as JSON."),
) -> None:
    """Score one mood / stress report and show its collapse bias and guidance."""
    from pydantic import ValidationError

    from observer_q.engine.evaluator import evaluate_interval
    from observer_q.engine.exceptions import InvalidArgumentError, InvalidDistributionError
    from observer_q.models.engine import ManualInput
    from observer_q.reporting.formatters import format_interval_report

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        evaluation = evaluate_interval(
            ManualInput(mood=mood, stress=stress),
            baseline_q if baseline_q is not None else config.session.default_baseline_q,
            config.calibration_settings(),
            interval_number=interval,
            n_trials=trials if trials is not None else config.engine.n_trials,
            seed=seed if seed is not None else config.engine.seed,
        )
    except (ValidationError, InvalidArgumentError, InvalidDistributionError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(evaluation.model_dump(mode="json"), indent=2))
    else:
        typer.echo(format_interval_report(evaluation))


@app.command("simulate")
def simulate(
    q: float = typer.Option(..., "--q", help="Q score to compute the collapse bias for."),
    k_symbiosis: Optional[float] = typer.Option(
        None, "--k", help="Symbiosis constant (default: config engine.k_symbiosis).",
    ),
    trials: Optional[int] = typer.Option(
        None, "--trials", help="Monte-Carlo die rolls (default: config engine.n_trials).",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for reproducible sampling (default: config engine.seed).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit the bias result as JSON."),
) -> None:
    """Run the collapse-bias die simulation for a given Q score."""
    from observer_q.engine.bias import compute_collapse_bias
    from observer_q.engine.exceptions import InvalidArgumentError, InvalidDistributionError
    from observer_q.reporting.formatters import format_bias_report

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        bias = compute_collapse_bias(
            q,
            k_symbiosis if k_symbiosis is not None else config.engine.k_symbiosis,
            n_trials=trials if trials is not None else config.engine.n_trials,
            seed=seed if seed is not None else config.engine.seed,
        )
    except (InvalidArgumentError, InvalidDistributionError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(bias.model_dump(mode="json"), indent=2))
    else:
        typer.echo(format_bias_report(bias))


@app.command("summarize")
def summarize(
    measurements_file: str = typer.Option(
        ...,
        "--file",
        "-f",
        help="JSON file holding an array of interval measurement objects.",
    ),
    baseline_q: Optional[float] = typer.Option(
        None,
        "--baseline-q",
        help="Baseline Q the session started from (default: config session.default_baseline_q).",
    ),
    session_id: Optional[str] = typer.Option(
        None,
        "--session-id",
        help="Only summarise measurements with this session_id.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Summarise a completed calibration session from exported measurements.

    \b
    The file must contain a JSON array of objects with at least:
      session_id, interval_number, q_score, fear_density, mood_input,
      stress_input, collapse_bias, mean_dice, recommendation
    """
    from pydantic import ValidationError

    from observer_q.engine.exceptions import InvalidArgumentError
    from observer_q.models.session import IntervalMeasurement
    from observer_q.reporting.formatters import format_session_summary
    from observer_q.session.tracker import q_trend, summarize_session

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    path = Path(measurements_file)
    if not path.exists():
        typer.echo(f"[ERROR] Measurements file not found: {path}", err=True)
        raise typer.Exit(code=1)

    try:
        with open(path, encoding="utf-8") as f:
            raw_rows = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        typer.echo(f"[ERROR] JSON parse error: {exc}", err=True)
        raise typer.Exit(code=1)

    if not isinstance(raw_rows, list):
        typer.echo("[ERROR] Measurements file must contain a JSON array.", err=True)
        raise typer.Exit(code=1)

    measurements: list[IntervalMeasurement] = []
    errors: list[tuple[int, str]] = []
    for i, raw in enumerate(raw_rows):
        try:
            measurements.append(IntervalMeasurement(**raw))
        except (ValidationError, TypeError) as exc:
            errors.append((i, str(exc)))

    if errors:
        typer.echo(f"[ERROR] {len(errors)} measurement(s) failed validation:", err=True)
        for idx, msg in errors[:5]:
            typer.echo(f"  Row #{idx}: {msg}", err=True)
        if len(errors) > 5:
            typer.echo(f"  ... and {len(errors) - 5} more.", err=True)
        raise typer.Exit(code=1)

    session_ids = sorted({m.session_id for m in measurements})
    if session_id is None:
        if len(session_ids) > 1:
            typer.echo(
                f"[ERROR] File holds {len(session_ids)} sessions; pass --session-id "
                f"(one of: {', '.join(session_ids)}).",
                err=True,
            )
            raise typer.Exit(code=1)
        session_id = session_ids[0] if session_ids else "unknown"
    measurements = [m for m in measurements if m.session_id == session_id]

    try:
        summary = summarize_session(
            session_id,
            baseline_q if baseline_q is not None else config.session.default_baseline_q,
            measurements,
            config.calibration_settings(),
        )
    except InvalidArgumentError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(format_session_summary(summary))
    typer.echo("")
    typer.echo("  Interval  Q score  Fear density")
    for interval_number, q_score, fear_density in q_trend(measurements):
        typer.echo(f"  {interval_number:>8}  {q_score:.4f}  {fear_density:+.4f}")

    plan = config.session.plan()
    if len(measurements) < plan.total_intervals:
        typer.echo("")
        typer.echo(
            f"  [WARN] Only {len(measurements)} of "
            f"{plan.total_intervals} planned intervals recorded."
        )


if __name__ == "__main__":
    app()
