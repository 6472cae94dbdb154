"""Human-facing interpretation of before/after significance results.

Each metric result is a dict in the shape produced by
:func:`cognitrack.analysis.helpers.period_stats.analyze_statistical_significance`::

    {"t_statistic", "p_value", "is_significant", "effect_size",
     "effect_size_interpretation", "change_percent"}

Nothing here raises: missing or ``None`` values read as "not significant" /
"no change".
"""
from django.db.models import TextChoices

from cognitrack.tasks.helpers.rounding import to_fixed


class EffectSizeInterpretation(TextChoices):
    NEGLIGIBLE = "Negligible", "Negligible"
    SMALL = "Small", "Small"
    MEDIUM = "Medium", "Medium"
    LARGE = "Large", "Large"
    UNKNOWN = "Unknown", "Unknown"


LARGE_EFFECT = 0.8
MEDIUM_EFFECT = 0.5

RECOMMENDATION_POSITIVE = (
    "The changes show a positive impact on cognitive performance. "
    "Consider continuing with the current approach."
)
RECOMMENDATION_NEGATIVE = (
    "The changes show a negative impact on cognitive performance. "
    "Consider adjusting your approach."
)
RECOMMENDATION_MIXED = (
    "The changes show mixed effects on cognitive performance. "
    "Consider focusing on specific aspects that showed improvement."
)
RECOMMENDATION_NONE = (
    "No statistically significant changes were detected. "
    "Consider collecting more data or trying different approaches."
)


def _is_significant(significance) -> bool:
    return bool((significance or {}).get("is_significant"))


def _change(significance) -> float:
    return (significance or {}).get("change_percent") or 0


def get_significance_interpretation(significance: dict | None) -> str:
    """Return e.g. "Statistically significant increase of 12.5% (medium effect)"."""
    if not _is_significant(significance):
        return "Not statistically significant"
    change = _change(significance)
    direction = "increase" if change > 0 else "decrease"
    effect = str(significance.get("effect_size_interpretation") or EffectSizeInterpretation.UNKNOWN).lower()
    return f"Statistically significant {direction} of {to_fixed(abs(change))}% ({effect} effect)"


def get_significance_color(significance: dict | None, is_positive_good: bool = True) -> str:
    """
    Return a colour token for a metric result.

    Grey when not significant; otherwise green for a change in the good
    direction and red for the bad one, darker for larger effects.
    """
    if not _is_significant(significance):
        return "text-gray-500"

    is_good_change = (_change(significance) > 0) == is_positive_good
    hue = "green" if is_good_change else "red"
    effect_size = significance.get("effect_size") or 0
    if effect_size >= LARGE_EFFECT:
        return f"text-{hue}-600"
    if effect_size >= MEDIUM_EFFECT:
        return f"text-{hue}-500"
    return f"text-{hue}-400"


def get_recommendation(analysis: dict | None) -> str:
    """
    Return an overall recommendation for a significance analysis.

    Counts the significant changes that went the good way (score up,
    reaction time down, accuracy up) against those that went the bad way.
    """
    analysis = analysis or {}
    # (metric, whether a positive change_percent is an improvement)
    metrics = (("score", True), ("reaction_time", False), ("accuracy", True))

    positive_changes = 0
    negative_changes = 0
    for key, is_positive_good in metrics:
        significance = analysis.get(key)
        if not _is_significant(significance):
            continue
        change = _change(significance)
        improved = change > 0 if is_positive_good else change < 0
        if improved:
            positive_changes += 1
        else:
            negative_changes += 1

    if positive_changes and not negative_changes:
        return RECOMMENDATION_POSITIVE
    if negative_changes and not positive_changes:
        return RECOMMENDATION_NEGATIVE
    if positive_changes and negative_changes:
        return RECOMMENDATION_MIXED
    return RECOMMENDATION_NONE
