"""Helper functions relating confounding factors (sleep, stress, exercise, diet, mood) to test scores.

Scored results need ``timestamp`` and ``score`` attributes; factor records
need ``recorded_at`` plus whichever factor attributes were logged (missing
or ``None`` values are skipped).
"""

from __future__ import annotations

import datetime
from typing import Sequence

from scipy import stats

# factor group -> (output key, factor attribute) pairs correlated against score
FACTOR_GROUPS: dict[str, tuple[tuple[str, str], ...]] = {
    "sleep": (("correlation", "sleep_duration"), ("quality_correlation", "sleep_quality")),
    "stress": (("correlation", "stress_level"),),
    "exercise": (("duration_correlation", "exercise_duration"), ("intensity_correlation", "exercise_intensity")),
    "caffeine": (("correlation", "caffeine_intake"),),
    "mood": (("correlation", "mood"), ("energy_correlation", "energy_level")),
}


def pearson_correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Return Pearson's r for paired values, or 0.0 when it is undefined.

    Undefined means fewer than two pairs or a constant series.
    """
    if len(xs) != len(ys) or len(xs) < 2:
        return 0.0
    if len(set(xs)) == 1 or len(set(ys)) == 1:
        return 0.0
    return float(stats.pearsonr(xs, ys).statistic)


def same_day_pairs(results: Sequence, factors: Sequence) -> list[tuple]:
    """Return every (result, factor) pair recorded on the same calendar day."""
    by_day: dict[datetime.date, list] = {}
    for factor in factors:
        by_day.setdefault(factor.recorded_at.date(), []).append(factor)
    return [
        (result, factor)
        for result in results
        for factor in by_day.get(result.timestamp.date(), [])
    ]


def analyze_confounding_factors(results: Sequence, factors: Sequence) -> list[dict]:
    """Correlate test scores with same-day confounding factors.

    Returns one dict per factor group, e.g.
    ``{"factor": "sleep", "correlation": 0.42, "quality_correlation": 0.1, "sample_size": 12}``.
    ``sample_size`` counts same-day pairs; each correlation only uses the
    pairs where that factor was logged.
    """
    pairs = same_day_pairs(results, factors)
    analysis = []
    for group, columns in FACTOR_GROUPS.items():
        entry = {"factor": group}
        for key, attribute in columns:
            logged = [
                (result.score, getattr(factor, attribute, None))
                for result, factor in pairs
                if getattr(factor, attribute, None) is not None
            ]
            entry[key] = pearson_correlation([s for s, _ in logged], [v for _, v in logged])
        entry["sample_size"] = len(pairs)
        analysis.append(entry)
    return analysis


def factors_for_result(result, factors: Sequence):
    """Return the factor record from the same day as *result* that is closest in time, or ``None``."""
    same_day = [f for f in factors if f.recorded_at.date() == result.timestamp.date()]
    if not same_day:
        return None
    return min(same_day, key=lambda f: abs((f.recorded_at - result.timestamp).total_seconds()))
