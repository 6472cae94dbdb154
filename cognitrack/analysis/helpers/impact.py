"""Bucketing of supplement impact percentages and confidence values into display tiers."""
from django.conf import settings
from django.db.models import TextChoices

from cognitrack.tasks.helpers.rounding import to_fixed


# Default, overridable via settings
IMPACT_THRESHOLD: float = getattr(settings, "COGNITRACK_IMPACT_THRESHOLD", 5)


class ImpactSignificance(TextChoices):
    VERY_POSITIVE = "very_positive", "Very positive"
    POSITIVE = "positive", "Positive"
    NEUTRAL = "neutral", "Neutral"
    NEGATIVE = "negative", "Negative"
    VERY_NEGATIVE = "very_negative", "Very negative"
    INSUFFICIENT_DATA = "insufficient_data", "Insufficient data"


class ConfidenceLevel(TextChoices):
    VERY_LOW = "very_low", "Very low"  # 0–0.2
    LOW = "low", "Low"  # 0.2–0.4
    MODERATE = "moderate", "Moderate"  # 0.4–0.6
    HIGH = "high", "High"  # 0.6–0.8
    VERY_HIGH = "very_high", "Very high"  # 0.8–1.0


def get_impact_significance(
    impact: float | None,
    is_inverted: bool = False,
    threshold: float | None = None,
) -> ImpactSignificance:
    """
    Classify an impact percentage into one of five tiers.

    *is_inverted* marks metrics where lower is better (reaction time), so
    the sign is flipped before comparing. Tiers start at *threshold* and
    twice *threshold*, both inclusive: with the default of 5, an impact of
    exactly 5.0 is POSITIVE and 4.99 is NEUTRAL.
    """
    if impact is None:
        return ImpactSignificance.INSUFFICIENT_DATA
    if threshold is None:
        threshold = IMPACT_THRESHOLD

    normalized = -impact if is_inverted else impact

    if normalized >= threshold * 2:
        return ImpactSignificance.VERY_POSITIVE
    if normalized >= threshold:
        return ImpactSignificance.POSITIVE
    if normalized <= -threshold * 2:
        return ImpactSignificance.VERY_NEGATIVE
    if normalized <= -threshold:
        return ImpactSignificance.NEGATIVE
    return ImpactSignificance.NEUTRAL


def get_confidence_level(confidence: float | None) -> ConfidenceLevel:
    """Bucket a 0–1 confidence value at 0.2 / 0.4 / 0.6 / 0.8; None is VERY_LOW."""
    if confidence is None:
        return ConfidenceLevel.VERY_LOW
    if confidence >= 0.8:
        return ConfidenceLevel.VERY_HIGH
    if confidence >= 0.6:
        return ConfidenceLevel.HIGH
    if confidence >= 0.4:
        return ConfidenceLevel.MODERATE
    if confidence >= 0.2:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.VERY_LOW


def get_impact_description(
    impact: float | None,
    metric: str,
    is_inverted: bool | None = None,
) -> str:
    """
    Return a sentence such as "Significantly improved reaction time by 12.0%".

    *metric* is one of "score", "reaction_time" or "accuracy"; *is_inverted*
    defaults to True for reaction time only.
    """
    if impact is None:
        return "Insufficient data"
    if is_inverted is None:
        is_inverted = metric == "reaction_time"

    significance = get_impact_significance(impact, is_inverted)
    metric_name = metric.replace("_", " ")
    direction = "improved" if (-impact if is_inverted else impact) > 0 else "decreased"

    if significance in (ImpactSignificance.VERY_POSITIVE, ImpactSignificance.VERY_NEGATIVE):
        return f"Significantly {direction} {metric_name} by {to_fixed(abs(impact))}%"
    if significance in (ImpactSignificance.POSITIVE, ImpactSignificance.NEGATIVE):
        return f"Moderately {direction} {metric_name} by {to_fixed(abs(impact))}%"
    return f"No significant change in {metric_name}"
