"""Pure functions comparing test performance between a baseline and a comparison period.

No Django ORM calls are made here; all inputs are plain Python objects so
these functions can be tested without a database. Each scored result must
have ``timestamp``, ``score``, ``reaction_time`` and ``accuracy`` attributes.
"""

from __future__ import annotations

import datetime
import logging
import math
import statistics
from typing import Sequence

from django.conf import settings
from scipy import stats

from cognitrack.analysis.helpers.significance import EffectSizeInterpretation

logger = logging.getLogger(__name__)

# Defaults, overridable via settings
SIGNIFICANCE_ALPHA: float = getattr(settings, "COGNITRACK_SIGNIFICANCE_ALPHA", 0.05)
MIN_PERIOD_SAMPLE_SIZE: int = getattr(settings, "COGNITRACK_MIN_PERIOD_SAMPLE_SIZE", 3)

METRICS = ("score", "reaction_time", "accuracy")


def results_in_period(
    results: Sequence,
    start: datetime.datetime,
    end: datetime.datetime,
) -> list:
    """Return the results with ``start <= timestamp <= end``, oldest first."""
    return sorted(
        (r for r in results if start <= r.timestamp <= end),
        key=lambda r: r.timestamp,
    )


def _summarize(in_period: list, start: datetime.datetime, end: datetime.datetime) -> dict:
    summary = {"start": start, "end": end, "sample_size": len(in_period)}
    for metric in METRICS:
        values = [getattr(r, metric) for r in in_period]
        summary[f"mean_{metric}"] = statistics.mean(values) if values else None
        summary[f"std_dev_{metric}"] = statistics.stdev(values) if len(values) > 1 else None
    return summary


def period_stats(results: Sequence, start: datetime.datetime, end: datetime.datetime) -> dict:
    """Return sample size, means and sample standard deviations for the results within a period.

    Means are ``None`` for an empty period; standard deviations are ``None``
    with fewer than two results.
    """
    return _summarize(results_in_period(results, start, end), start, end)


def calculate_t_statistic(sample1: Sequence[float], sample2: Sequence[float]) -> float | None:
    """Paired-samples t-statistic of ``sample1 - sample2``.

    Returns ``None`` when the samples differ in length, have fewer than two
    pairs, or the differences have zero variance.
    """
    if len(sample1) != len(sample2) or len(sample1) < 2:
        return None
    diffs = [a - b for a, b in zip(sample1, sample2)]
    if statistics.stdev(diffs) == 0:
        return None
    return float(stats.ttest_rel(sample1, sample2).statistic)


def welch_t_test(
    baseline_values: Sequence[float],
    comparison_values: Sequence[float],
) -> tuple[float | None, float | None]:
    """Welch's unequal-variance t-test of the comparison values against the baseline.

    Returns ``(t_statistic, degrees_of_freedom)``, or ``(None, None)`` when
    either side has fewer than two values or both sides are constant.
    """
    if len(baseline_values) < 2 or len(comparison_values) < 2:
        return None, None
    if statistics.stdev(baseline_values) == 0 and statistics.stdev(comparison_values) == 0:
        return None, None
    result = stats.ttest_ind(comparison_values, baseline_values, equal_var=False)
    return float(result.statistic), float(result.df)


def calculate_p_value(t_statistic: float | None, degrees_of_freedom: float | None) -> float | None:
    """Two-tailed p-value of *t_statistic* under Student's t distribution."""
    if t_statistic is None or not degrees_of_freedom or degrees_of_freedom <= 0:
        return None
    return min(1.0, float(2 * stats.t.sf(abs(t_statistic), degrees_of_freedom)))


def is_statistically_significant(p_value: float | None, alpha: float = SIGNIFICANCE_ALPHA) -> bool:
    if p_value is None:
        return False
    return p_value <= alpha


def calculate_effect_size(mean1: float, mean2: float, std_dev1: float | None, std_dev2: float | None) -> float | None:
    """Cohen's d using the root-mean-square of the two standard deviations.

    Returns ``None`` if the pooled standard deviation is zero.
    """
    pooled = math.sqrt(((std_dev1 or 0) ** 2 + (std_dev2 or 0) ** 2) / 2)
    if pooled == 0:
        return None
    return abs(mean1 - mean2) / pooled


def interpret_effect_size(effect_size: float | None) -> EffectSizeInterpretation:
    if effect_size is None:
        return EffectSizeInterpretation.UNKNOWN
    if effect_size < 0.2:
        return EffectSizeInterpretation.NEGLIGIBLE
    if effect_size < 0.5:
        return EffectSizeInterpretation.SMALL
    if effect_size < 0.8:
        return EffectSizeInterpretation.MEDIUM
    return EffectSizeInterpretation.LARGE


def change_percent(baseline_mean: float, comparison_mean: float) -> float | None:
    """Percentage change from baseline; ``None`` when the baseline mean is zero."""
    if not baseline_mean:
        return None
    return (comparison_mean - baseline_mean) / baseline_mean * 100


def metric_significance(
    baseline_values: Sequence[float],
    comparison_values: Sequence[float],
    alpha: float,
) -> dict:
    """Welch t-test, effect size and percentage change for one metric."""
    t_stat, degrees_of_freedom = welch_t_test(baseline_values, comparison_values)
    p_value = calculate_p_value(t_stat, degrees_of_freedom)
    baseline_mean = statistics.mean(baseline_values)
    comparison_mean = statistics.mean(comparison_values)
    effect_size = calculate_effect_size(
        baseline_mean,
        comparison_mean,
        statistics.stdev(baseline_values) if len(baseline_values) > 1 else None,
        statistics.stdev(comparison_values) if len(comparison_values) > 1 else None,
    )
    return {
        "t_statistic": t_stat,
        "degrees_of_freedom": degrees_of_freedom,
        "p_value": p_value,
        "is_significant": is_statistically_significant(p_value, alpha),
        "effect_size": effect_size,
        "effect_size_interpretation": str(interpret_effect_size(effect_size)),
        "change_percent": change_percent(baseline_mean, comparison_mean),
    }


def analyze_statistical_significance(
    results: Sequence,
    baseline_period: tuple[datetime.datetime, datetime.datetime],
    comparison_period: tuple[datetime.datetime, datetime.datetime],
    alpha: float | None = None,
) -> dict:
    """Compare score, reaction time and accuracy between two periods.

    Returns ``{"success": False, "error", "baseline_sample_size",
    "comparison_sample_size"}`` when either period holds fewer than
    ``MIN_PERIOD_SAMPLE_SIZE`` results. Otherwise returns ``{"success": True,
    "baseline_period", "comparison_period", "significance_analysis"}`` where
    ``significance_analysis`` maps each metric to its significance dict and
    carries the ``alpha`` used.
    """
    if alpha is None:
        alpha = SIGNIFICANCE_ALPHA

    baseline_results = results_in_period(results, *baseline_period)
    comparison_results = results_in_period(results, *comparison_period)

    if len(baseline_results) < MIN_PERIOD_SAMPLE_SIZE or len(comparison_results) < MIN_PERIOD_SAMPLE_SIZE:
        logger.debug(
            "Insufficient data for significance analysis: baseline=%d comparison=%d",
            len(baseline_results),
            len(comparison_results),
        )
        return {
            "success": False,
            "error": (
                "Insufficient data for statistical analysis. "
                f"Need at least {MIN_PERIOD_SAMPLE_SIZE} data points in each period."
            ),
            "baseline_sample_size": len(baseline_results),
            "comparison_sample_size": len(comparison_results),
        }

    significance_analysis = {
        metric: metric_significance(
            [getattr(r, metric) for r in baseline_results],
            [getattr(r, metric) for r in comparison_results],
            alpha,
        )
        for metric in METRICS
    }
    significance_analysis["alpha"] = alpha

    return {
        "success": True,
        "baseline_period": _summarize(baseline_results, *baseline_period),
        "comparison_period": _summarize(comparison_results, *comparison_period),
        "significance_analysis": significance_analysis,
    }
