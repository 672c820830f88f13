"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept engine / session models and return plain multi-line
strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Probability bars
----------------
``format_bias_report()`` draws one bar per die face scaled so that a
probability of 1/3 fills ``_BAR_WIDTH`` characters; a fair die (1/6 per face)
therefore shows half-width bars, which makes tilts easy to spot::

     1  0.2000  ##############
     4  0.1333  ##########
"""

from __future__ import annotations

from observer_q.engine.classifier import state_label
from observer_q.models.engine import BiasResult, IntervalEvaluation
from observer_q.models.session import SessionSummary

_BAR_WIDTH = 24
_BAR_FULL_SCALE = 1.0 / 3.0


# ── Bias ──────────────────────────────────────────────────────────────────────


def format_bias_report(bias: BiasResult) -> str:
    """Format collapse-bias output: headline numbers plus a per-face table.

    Returns:
        Multi-line string; the first line names the bias and interpretation.
    """
    lines = [
        f"  Theoretical bias: {bias.theoretical_bias:.3f}  [{bias.interpretation.value}]",
        f"  Q factor:         {bias.q_factor:.4f}",
        f"  Mean dice:        {bias.mean_dice:.3f}  "
        f"(expected {bias.expected_face:.3f}, {bias.n_trials} trials)",
        f"  Favorable (4-6):  {bias.favorable_rate:.1%}",
        "",
        "  Face  Prob    Distribution",
        "  " + "-" * (14 + _BAR_WIDTH),
    ]
    for face, p in enumerate(bias.probabilities, start=1):
        lines.append(f"  {face:>4}  {p:.4f}  {_bar(p)}")
    return "\n".join(lines)


def _bar(p: float) -> str:
    filled = round(min(p / _BAR_FULL_SCALE, 1.0) * _BAR_WIDTH)
    return "#" * max(filled, 0)


# ── Interval ──────────────────────────────────────────────────────────────────


def format_interval_report(evaluation: IntervalEvaluation) -> str:
    """Format one interval evaluation: inputs, score, state, guidance, bias."""
    score = evaluation.score
    lines = [
        f"Interval {evaluation.interval_number}",
        f"  Inputs:           mood={evaluation.manual_input.mood:g}  "
        f"stress={evaluation.manual_input.stress:g}  baseline_q={evaluation.baseline_q:.3f}",
        f"  Q score:          {score.q_score:.4f}",
        f"  Fear density:     {score.fear_density:.4f}",
        f"  Sync EEG / HRV:   {score.sync_eeg:.3f} / {score.sync_hrv:.3f}",
        f"  State:            {state_label(evaluation.state)}",
        f"  Recommendation:   {evaluation.recommendation}",
        "",
        format_bias_report(evaluation.bias),
    ]
    return "\n".join(lines)


# ── Session ───────────────────────────────────────────────────────────────────


def format_session_summary(summary: SessionSummary) -> str:
    """Format a completed session roll-up."""
    direction = "up" if summary.q_improvement > 0 else "down" if summary.q_improvement < 0 else "flat"
    lines = [
        f"Session {summary.session_id}  ({summary.n_intervals} intervals)",
        f"  Baseline Q:        {summary.baseline_q:.4f}",
        f"  Final Q:           {summary.final_q:.4f}  ({summary.q_improvement:+.4f}, {direction})",
        f"  Average Q:         {summary.avg_q:.4f}",
        f"  Avg collapse bias: {summary.avg_collapse_bias:.4f}",
        f"  Avg mean dice:     {summary.avg_mean_dice:.3f}",
        f"  Final state:       {state_label(summary.final_state)}",
    ]
    return "\n".join(lines)
