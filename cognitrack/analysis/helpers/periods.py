"""Classification of test results into supplement, washout and off periods.

Pure functions over plain attribute objects. Supplement records carry
``id``, ``name``, ``intake_time`` and an optional ``frequency``; washout
records carry ``id``, ``supplement_name``, ``start_date``, ``end_date``,
``status`` and ``expected_duration_days``. Scored results carry
``timestamp``, ``score``, ``reaction_time`` and ``accuracy``.
"""

from __future__ import annotations

import calendar
import datetime
from types import SimpleNamespace
from typing import Sequence

from django.db.models import TextChoices

from cognitrack.analysis.helpers.period_stats import change_percent


class PeriodType(TextChoices):
    BASELINE = "baseline", "Baseline"
    SUPPLEMENT = "supplement", "Supplement"
    WASHOUT = "washout", "Washout"
    UNKNOWN = "unknown", "Unknown"


class WashoutStatus(TextChoices):
    ACTIVE = "active", "Active"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class ComparisonType(TextChoices):
    ON_OFF = "on_off", "On/off"
    BETWEEN_SUPPLEMENTS = "between_supplements", "Between supplements"
    BEFORE_AFTER = "before_after", "Before/after"


# Length of the supplement period opened by one intake, by frequency
SUPPLEMENT_PERIOD_DAYS = {"daily": 1, "weekly": 7}
DEFAULT_SUPPLEMENT_PERIOD_DAYS = 7

MIN_COMPARISON_SAMPLE_SIZE = 2
DEFAULT_BEFORE_AFTER_DAYS = 30

# Rule-of-thumb significance for comparisons
SIGNIFICANT_SAMPLE_SIZE = 5
SIGNIFICANT_CHANGE_PERCENT = 10


def add_months(dt: datetime.datetime, months: int) -> datetime.datetime:
    """Shift *dt* by calendar months, clamping the day to the target month's length."""
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def supplement_period_end(intake_time: datetime.datetime, frequency: str | None) -> datetime.datetime:
    """Return when the period opened by an intake ends: a day, a week or a calendar month later."""
    if frequency == "monthly":
        return add_months(intake_time, 1)
    days = SUPPLEMENT_PERIOD_DAYS.get(frequency, DEFAULT_SUPPLEMENT_PERIOD_DAYS)
    return intake_time + datetime.timedelta(days=days)


def washout_period_end(washout) -> datetime.datetime | None:
    """
    Return the end of a washout period.

    An explicit ``end_date`` wins; an active washout without one ends after
    its expected duration; otherwise the period is open-ended (``None``).
    """
    end_date = getattr(washout, "end_date", None)
    if end_date is not None:
        return end_date
    expected_days = getattr(washout, "expected_duration_days", None)
    if washout.status == WashoutStatus.ACTIVE and expected_days:
        return washout.start_date + datetime.timedelta(days=expected_days)
    return None


def generate_periods(supplements: Sequence, washout_periods: Sequence) -> list[dict]:
    """
    Build the supplement and washout periods, sorted by start.

    Every intake opens its own supplement period. Each period is a dict with
    ``type``, ``start``, ``end`` (``None`` for open-ended), ``supplement_id``,
    ``supplement_name`` and ``washout_period_id``.
    """
    periods = []
    for supplement in sorted(supplements, key=lambda s: s.intake_time):
        periods.append(
            {
                "type": PeriodType.SUPPLEMENT,
                "start": supplement.intake_time,
                "end": supplement_period_end(supplement.intake_time, getattr(supplement, "frequency", None)),
                "supplement_id": supplement.id,
                "supplement_name": supplement.name,
                "washout_period_id": None,
            }
        )
    for washout in washout_periods:
        periods.append(
            {
                "type": PeriodType.WASHOUT,
                "start": washout.start_date,
                "end": washout_period_end(washout),
                "supplement_id": None,
                "supplement_name": washout.supplement_name,
                "washout_period_id": washout.id,
            }
        )
    return sorted(periods, key=lambda p: p["start"])


def determine_period_type(result, periods: Sequence[dict]) -> dict:
    """
    Classify *result* by the first period containing its timestamp (bounds inclusive).

    Returns ``{"period_type", "supplement_id", "supplement_name"}``; a result
    outside every period is UNKNOWN.
    """
    for period in periods:
        if period["start"] <= result.timestamp and (period["end"] is None or result.timestamp <= period["end"]):
            return {
                "period_type": period["type"],
                "supplement_id": period["supplement_id"],
                "supplement_name": period["supplement_name"],
            }
    return {"period_type": PeriodType.UNKNOWN, "supplement_id": None, "supplement_name": None}


def enrich_results(results: Sequence, periods: Sequence[dict]) -> list[SimpleNamespace]:
    """Return copies of *results* with ``period_type``, ``supplement_id`` and ``supplement_name`` added."""
    return [SimpleNamespace(**{**vars(result), **determine_period_type(result, periods)}) for result in results]


def _find_supplement(supplements: Sequence, supplement_id):
    return next((s for s in supplements if s.id == supplement_id), None)


def on_off_comparison(results, supplements, washout_periods, supplement_id) -> dict | None:
    """
    Split results into on-supplement and off (baseline or washout) groups.

    Returns ``None`` for an unknown supplement or when either group has
    fewer than two results.
    """
    supplement = _find_supplement(supplements, supplement_id)
    if supplement is None:
        return None
    periods = generate_periods(supplements, washout_periods)

    on_results, off_results = [], []
    for result in results:
        classification = determine_period_type(result, periods)
        if (
            classification["period_type"] == PeriodType.SUPPLEMENT
            and classification["supplement_id"] == supplement_id
        ):
            on_results.append(result)
        elif classification["period_type"] in (PeriodType.BASELINE, PeriodType.WASHOUT):
            off_results.append(result)

    if len(on_results) < MIN_COMPARISON_SAMPLE_SIZE or len(off_results) < MIN_COMPARISON_SAMPLE_SIZE:
        return None
    return {
        "comparison_type": ComparisonType.ON_OFF,
        "baseline_results": off_results,
        "comparison_results": on_results,
        "baseline_period_type": PeriodType.BASELINE,
        "comparison_period_type": PeriodType.SUPPLEMENT,
        "baseline_label": "Off Period",
        "comparison_label": f"On {supplement.name}",
        "baseline_supplement_id": None,
        "comparison_supplement_id": supplement_id,
    }


def between_supplements_comparison(results, supplements, washout_periods, first_id, second_id) -> dict | None:
    """Split the results taken during two supplements' periods; ``None`` if either is unknown or too small."""
    first = _find_supplement(supplements, first_id)
    second = _find_supplement(supplements, second_id)
    if first is None or second is None:
        return None
    periods = generate_periods(supplements, washout_periods)

    first_results, second_results = [], []
    for result in results:
        classification = determine_period_type(result, periods)
        if classification["period_type"] != PeriodType.SUPPLEMENT:
            continue
        if classification["supplement_id"] == first_id:
            first_results.append(result)
        elif classification["supplement_id"] == second_id:
            second_results.append(result)

    if len(first_results) < MIN_COMPARISON_SAMPLE_SIZE or len(second_results) < MIN_COMPARISON_SAMPLE_SIZE:
        return None
    return {
        "comparison_type": ComparisonType.BETWEEN_SUPPLEMENTS,
        "baseline_results": first_results,
        "comparison_results": second_results,
        "baseline_period_type": PeriodType.SUPPLEMENT,
        "comparison_period_type": PeriodType.SUPPLEMENT,
        "baseline_label": first.name,
        "comparison_label": second.name,
        "baseline_supplement_id": first_id,
        "comparison_supplement_id": second_id,
    }


def before_after_comparison(results, supplements, supplement_id, days=DEFAULT_BEFORE_AFTER_DAYS) -> dict | None:
    """
    Split results around a supplement's intake time.

    Before is ``[intake - days, intake)`` and after is ``[intake, intake + days]``.
    """
    supplement = _find_supplement(supplements, supplement_id)
    if supplement is None:
        return None

    window = datetime.timedelta(days=days)
    intake_time = supplement.intake_time
    before = [r for r in results if intake_time - window <= r.timestamp < intake_time]
    after = [r for r in results if intake_time <= r.timestamp <= intake_time + window]

    if len(before) < MIN_COMPARISON_SAMPLE_SIZE or len(after) < MIN_COMPARISON_SAMPLE_SIZE:
        return None
    return {
        "comparison_type": ComparisonType.BEFORE_AFTER,
        "baseline_results": before,
        "comparison_results": after,
        "baseline_period_type": PeriodType.BASELINE,
        "comparison_period_type": PeriodType.SUPPLEMENT,
        "baseline_label": f"Before {supplement.name}",
        "comparison_label": f"After {supplement.name}",
        "baseline_supplement_id": None,
        "comparison_supplement_id": supplement_id,
    }


def _mean(results: Sequence, metric: str) -> float | None:
    if not results:
        return None
    return sum(getattr(r, metric) for r in results) / len(results)


def _percent_change(baseline: Sequence, comparison: Sequence, metric: str) -> float | None:
    baseline_mean = _mean(baseline, metric)
    comparison_mean = _mean(comparison, metric)
    if baseline_mean is None or comparison_mean is None:
        return None
    return change_percent(baseline_mean, comparison_mean)


def calculate_comparison_metrics(baseline_results: Sequence, comparison_results: Sequence) -> dict:
    """
    Percentage changes in mean score, reaction time and accuracy between two groups.

    ``reaction_time_change`` is positive when the comparison group is faster.
    A change is ``None`` when either group is empty or the baseline mean is
    zero. ``is_significant`` needs at least five results per group and some
    change beyond 10%.
    """
    score_change = _percent_change(baseline_results, comparison_results, "score")
    reaction_time_change = _percent_change(baseline_results, comparison_results, "reaction_time")
    if reaction_time_change is not None:
        reaction_time_change = -reaction_time_change
    accuracy_change = _percent_change(baseline_results, comparison_results, "accuracy")

    changes = [c for c in (score_change, reaction_time_change, accuracy_change) if c is not None]
    is_significant = (
        len(baseline_results) >= SIGNIFICANT_SAMPLE_SIZE
        and len(comparison_results) >= SIGNIFICANT_SAMPLE_SIZE
        and any(abs(c) > SIGNIFICANT_CHANGE_PERCENT for c in changes)
    )
    return {
        "score_change": score_change,
        "reaction_time_change": reaction_time_change,
        "accuracy_change": accuracy_change,
        "sample_size_baseline": len(baseline_results),
        "sample_size_comparison": len(comparison_results),
        "is_significant": is_significant,
    }
