"""Tests for observer_q.reporting.formatters."""

from __future__ import annotations

import pytest

from observer_q.engine.bias import compute_collapse_bias
from observer_q.engine.evaluator import evaluate_interval
from observer_q.models.engine import ManualInput
from observer_q.reporting.formatters import (
    format_bias_report,
    format_interval_report,
    format_session_summary,
)
from observer_q.session.tracker import summarize_session


# ── format_bias_report ────────────────────────────────────────────────────────


def test_bias_report_headline() -> None:
    """First line shows the bias and its interpretation."""
    report = format_bias_report(compute_collapse_bias(0.9, 2.8, n_trials=100, seed=1))
    first = report.split("\n")[0]
    assert "Theoretical bias:" in first
    assert "Tank Drag (-)" in first


def test_bias_report_has_one_row_per_face() -> None:
    report = format_bias_report(compute_collapse_bias(0.5, 2.8, n_trials=100, seed=1))
    rows = [line for line in report.split("\n") if line.strip()[:1].isdigit()]
    assert len(rows) == 6


def test_bias_report_fair_die_bars_are_half_width() -> None:
    """k=0, q=1 gives bias 1.0 exactly -> fair die -> 12-char bars."""
    report = format_bias_report(compute_collapse_bias(1.0, 0.0, n_trials=50, seed=1))
    assert "1.000" in report
    assert "#" * 12 in report
    assert "#" * 13 not in report


def test_bias_report_ocean_tilt_label() -> None:
    report = format_bias_report(compute_collapse_bias(1.0, 2.8, n_trials=50, seed=1))
    assert "Ocean Tilt (+)" in report


# ── format_interval_report ────────────────────────────────────────────────────


def test_interval_report_contents(sample_settings) -> None:
    ev = evaluate_interval(ManualInput(mood=10, stress=0), 0.0, sample_settings,
                           interval_number=2, seed=1)
    report = format_interval_report(ev)
    assert report.startswith("Interval 2")
    assert "Q score:          1.0000" in report
    assert "OCEAN: High Q Achieved" in report
    assert "Loving awareness" in report
    assert "Theoretical bias:" in report


# ── format_session_summary ────────────────────────────────────────────────────


def test_session_summary_contents(sample_measurements, sample_settings) -> None:
    summary = summarize_session("session-0001", 0.4, sample_measurements, sample_settings)
    text = format_session_summary(summary)
    assert "session-0001" in text
    assert "3 intervals" in text
    assert "+0.4500, up" in text
    assert "OCEAN: High Q Achieved" in text


@pytest.mark.parametrize("baseline, word", [(0.85, "flat"), (0.95, "down")])
def test_session_summary_direction(sample_measurements, sample_settings, baseline, word) -> None:
    summary = summarize_session("s", baseline, sample_measurements, sample_settings)
    assert f", {word})" in format_session_summary(summary)
