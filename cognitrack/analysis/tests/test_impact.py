"""Unit tests for impact and confidence classification."""
import pytest

from cognitrack.analysis.helpers.impact import ConfidenceLevel
from cognitrack.analysis.helpers.impact import ImpactSignificance
from cognitrack.analysis.helpers.impact import get_confidence_level
from cognitrack.analysis.helpers.impact import get_impact_description
from cognitrack.analysis.helpers.impact import get_impact_significance


class TestGetImpactSignificance:
    def test_none_is_insufficient_data(self):
        assert get_impact_significance(None) == ImpactSignificance.INSUFFICIENT_DATA

    def test_threshold_is_inclusive(self):
        assert get_impact_significance(5.0, False, 5) == ImpactSignificance.POSITIVE

    def test_just_below_threshold_is_neutral(self):
        assert get_impact_significance(4.99, False, 5) == ImpactSignificance.NEUTRAL

    @pytest.mark.parametrize(
        "impact, expected",
        [
            (10.0, ImpactSignificance.VERY_POSITIVE),
            (25.0, ImpactSignificance.VERY_POSITIVE),
            (7.5, ImpactSignificance.POSITIVE),
            (0.0, ImpactSignificance.NEUTRAL),
            (-4.99, ImpactSignificance.NEUTRAL),
            (-5.0, ImpactSignificance.NEGATIVE),
            (-9.99, ImpactSignificance.NEGATIVE),
            (-10.0, ImpactSignificance.VERY_NEGATIVE),
        ],
    )
    def test_buckets(self, impact, expected):
        assert get_impact_significance(impact) == expected

    def test_inverted_for_reaction_time(self):
        assert get_impact_significance(-12.0, is_inverted=True) == ImpactSignificance.VERY_POSITIVE
        assert get_impact_significance(6.0, is_inverted=True) == ImpactSignificance.NEGATIVE

    def test_custom_threshold(self):
        assert get_impact_significance(3.0, threshold=2) == ImpactSignificance.POSITIVE
        assert get_impact_significance(4.0, threshold=2) == ImpactSignificance.VERY_POSITIVE

    def test_values_are_plain_strings(self):
        assert get_impact_significance(50) == "very_positive"


class TestGetConfidenceLevel:
    @pytest.mark.parametrize(
        "confidence, expected",
        [
            (None, ConfidenceLevel.VERY_LOW),
            (0.0, ConfidenceLevel.VERY_LOW),
            (0.19, ConfidenceLevel.VERY_LOW),
            (0.2, ConfidenceLevel.LOW),
            (0.4, ConfidenceLevel.MODERATE),
            (0.59, ConfidenceLevel.MODERATE),
            (0.6, ConfidenceLevel.HIGH),
            (0.8, ConfidenceLevel.VERY_HIGH),
            (1.0, ConfidenceLevel.VERY_HIGH),
        ],
    )
    def test_cutoffs(self, confidence, expected):
        assert get_confidence_level(confidence) == expected


class TestGetImpactDescription:
    def test_none(self):
        assert get_impact_description(None, "score") == "Insufficient data"

    def test_large_score_gain(self):
        assert get_impact_description(12.0, "score") == "Significantly improved score by 12.0%"

    def test_moderate_accuracy_drop(self):
        assert get_impact_description(-6.25, "accuracy") == "Moderately decreased accuracy by 6.3%"

    def test_reaction_time_defaults_to_inverted(self):
        assert get_impact_description(-7.0, "reaction_time") == "Moderately improved reaction time by 7.0%"
        assert get_impact_description(12.0, "reaction_time") == "Significantly decreased reaction time by 12.0%"

    def test_no_change(self):
        assert get_impact_description(2.0, "score") == "No significant change in score"

    def test_explicit_inversion_overrides_metric_default(self):
        assert get_impact_description(-7.0, "reaction_time", is_inverted=False) == (
            "Moderately decreased reaction time by 7.0%"
        )
