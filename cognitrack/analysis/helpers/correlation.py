"""Before/after supplement impact and personal baselines.

Pure functions over scored results (objects with ``timestamp``, ``score``,
``reaction_time`` and ``accuracy`` attributes). The impact and confidence
values produced here are what :mod:`impact` classifies for display.
"""

from __future__ import annotations

import datetime
import math
import statistics
from typing import Sequence

from cognitrack.analysis.helpers.impact import get_confidence_level
from cognitrack.analysis.helpers.impact import get_impact_significance
from cognitrack.analysis.helpers.period_stats import METRICS

DEFAULT_WINDOW_DAYS = 30
# Sample size at which confidence reaches 1.0
FULL_CONFIDENCE_SAMPLE_SIZE = 10

BASELINE_METHODS = ("first_n_tests", "pre_supplement", "date_range")


def _mean(results: Sequence, metric: str) -> float | None:
    values = [getattr(r, metric) for r in results]
    return statistics.mean(values) if values else None


def sample_confidence(sample_size: int) -> float:
    """Confidence grows linearly with the number of tests, reaching 1.0 at ten."""
    return min(1.0, sample_size / FULL_CONFIDENCE_SAMPLE_SIZE)


def calculate_supplement_correlation(
    results: Sequence,
    intake_time: datetime.datetime,
    onset_delay_days: int = 0,
    period_start: datetime.datetime | None = None,
    period_end: datetime.datetime | None = None,
) -> dict:
    """Return the change in mean performance after a supplement started taking effect.

    The supplement is assumed to act *onset_delay_days* after *intake_time*.
    Results in ``[period_start, effective_date)`` count as before and results
    in ``[effective_date, period_end]`` as after; the window defaults to 30
    days either side of intake. A side with no results contributes a mean of
    zero to the impact, and the per-metric significance reflects that.

    Returns dict with:
      score_impact, reaction_time_impact, accuracy_impact — after minus before
      confidence_level  — 0–1, from the combined sample size
      sample_size
      score_significance, reaction_time_significance, accuracy_significance
      confidence_category
      analysis_parameters — the underlying means, sample sizes and effective date
    """
    if period_start is None:
        period_start = intake_time - datetime.timedelta(days=DEFAULT_WINDOW_DAYS)
    if period_end is None:
        period_end = intake_time + datetime.timedelta(days=DEFAULT_WINDOW_DAYS)
    effective_date = intake_time + datetime.timedelta(days=onset_delay_days)

    before = [r for r in results if period_start <= r.timestamp < effective_date]
    after = [r for r in results if effective_date <= r.timestamp <= period_end]

    parameters = {
        "sample_size_before": len(before),
        "sample_size_after": len(after),
        "effective_date": effective_date,
    }
    correlation = {}
    for metric in METRICS:
        avg_before = _mean(before, metric)
        avg_after = _mean(after, metric)
        parameters[f"avg_{metric}_before"] = avg_before
        parameters[f"avg_{metric}_after"] = avg_after
        impact = (avg_after or 0) - (avg_before or 0)
        correlation[f"{metric}_impact"] = impact
        correlation[f"{metric}_significance"] = str(
            get_impact_significance(impact, is_inverted=metric == "reaction_time")
        )

    sample_size = len(before) + len(after)
    confidence = sample_confidence(sample_size)
    correlation.update(
        {
            "confidence_level": confidence,
            "confidence_category": str(get_confidence_level(confidence)),
            "sample_size": sample_size,
            "analysis_parameters": parameters,
        }
    )
    return correlation


def calculate_baseline(
    results: Sequence,
    method: str = "first_n_tests",
    sample_size: int = 3,
    first_intake_time: datetime.datetime | None = None,
    start: datetime.datetime | None = None,
    end: datetime.datetime | None = None,
) -> dict:
    """Return a personal baseline (means and sample variances) from a subset of results.

    Methods:
      "first_n_tests"   — the user's first *sample_size* results
      "pre_supplement"  — every result before *first_intake_time*
      "date_range"      — results within ``[start, end]`` (either bound optional)

    Raises ``ValueError`` for any other method.
    """
    ordered = sorted(results, key=lambda r: r.timestamp)
    if method == "first_n_tests":
        subset = ordered[:sample_size]
    elif method == "pre_supplement":
        subset = [r for r in ordered if first_intake_time is not None and r.timestamp < first_intake_time]
    elif method == "date_range":
        subset = [
            r for r in ordered
            if (start is None or r.timestamp >= start) and (end is None or r.timestamp <= end)
        ]
    else:
        raise ValueError(f"Unknown baseline method {method!r}; expected one of {', '.join(BASELINE_METHODS)}")

    baseline = {"method": method, "sample_size": len(subset)}
    for metric in METRICS:
        values = [getattr(r, metric) for r in subset]
        baseline[f"baseline_{metric}"] = statistics.mean(values) if values else None
        baseline[f"variance_{metric}"] = statistics.variance(values) if len(values) > 1 else None
    baseline["confidence_level"] = baseline_confidence(len(subset), baseline["variance_score"])
    return baseline


def baseline_confidence(sample_size: int, variance_score: float | None) -> float:
    """Blend sample size (70%) and score stability (30%) into a 0–1 confidence.

    Stability is ``1 / (1 + log10(variance))``, capped at 1.0 for variances
    of 1 or less; an unknown variance counts as 0.5.
    """
    if sample_size <= 0:
        return 0.0
    if variance_score is None or variance_score <= 0:
        stability = 0.5
    elif variance_score <= 1:
        stability = 1.0
    else:
        stability = 1.0 / (1.0 + math.log10(variance_score))
    return 0.7 * sample_confidence(sample_size) + 0.3 * stability
