"""Tests for supplement impact and baseline calculation."""

import datetime
from types import SimpleNamespace

import pytest

from cognitrack.analysis.helpers.correlation import baseline_confidence
from cognitrack.analysis.helpers.correlation import calculate_baseline
from cognitrack.analysis.helpers.correlation import calculate_supplement_correlation
from cognitrack.analysis.helpers.correlation import sample_confidence

INTAKE = datetime.datetime(2024, 6, 15, 12, 0, 0, tzinfo=datetime.timezone.utc)


def _result(days_from_intake, score, reaction_time, accuracy):
    return SimpleNamespace(
        timestamp=INTAKE + datetime.timedelta(days=days_from_intake),
        score=score,
        reaction_time=reaction_time,
        accuracy=accuracy,
    )


def _results():
    return [
        _result(-5, 60, 400, 80),
        _result(-4, 60, 400, 80),
        _result(-3, 60, 400, 80),
        _result(1, 70, 350, 85),
        _result(2, 70, 350, 85),
    ]


class TestSampleConfidence:
    def test_grows_with_sample_size(self):
        assert sample_confidence(5) == pytest.approx(0.5)

    def test_capped_at_one(self):
        assert sample_confidence(40) == 1.0


class TestCalculateSupplementCorrelation:
    def test_impacts(self):
        correlation = calculate_supplement_correlation(_results(), INTAKE)
        assert correlation["score_impact"] == pytest.approx(10.0)
        assert correlation["reaction_time_impact"] == pytest.approx(-50.0)
        assert correlation["accuracy_impact"] == pytest.approx(5.0)
        assert correlation["sample_size"] == 5

    def test_labels(self):
        correlation = calculate_supplement_correlation(_results(), INTAKE)
        assert correlation["score_significance"] == "very_positive"
        # Faster reaction time is an improvement
        assert correlation["reaction_time_significance"] == "very_positive"
        assert correlation["accuracy_significance"] == "positive"
        assert correlation["confidence_level"] == pytest.approx(0.5)
        assert correlation["confidence_category"] == "moderate"

    def test_onset_delay_moves_effective_date(self):
        correlation = calculate_supplement_correlation(_results(), INTAKE, onset_delay_days=2)
        params = correlation["analysis_parameters"]
        assert params["sample_size_before"] == 4
        assert params["sample_size_after"] == 1
        assert params["effective_date"] == INTAKE + datetime.timedelta(days=2)
        assert correlation["score_impact"] == pytest.approx(7.5)

    def test_default_window_is_thirty_days(self):
        results = _results() + [_result(-40, 0, 900, 0), _result(31, 100, 100, 100)]
        correlation = calculate_supplement_correlation(results, INTAKE)
        assert correlation["sample_size"] == 5

    def test_explicit_window(self):
        correlation = calculate_supplement_correlation(
            _results(),
            INTAKE,
            period_start=INTAKE - datetime.timedelta(days=4),
            period_end=INTAKE + datetime.timedelta(days=1),
        )
        assert correlation["analysis_parameters"]["sample_size_before"] == 2
        assert correlation["analysis_parameters"]["sample_size_after"] == 1

    def test_no_results(self):
        correlation = calculate_supplement_correlation([], INTAKE)
        assert correlation["score_impact"] == 0
        assert correlation["score_significance"] == "neutral"
        assert correlation["analysis_parameters"]["avg_score_before"] is None
        assert correlation["confidence_category"] == "very_low"


class TestCalculateBaseline:
    def test_first_n_tests_uses_oldest(self):
        results = list(reversed(_results()))
        baseline = calculate_baseline(results, "first_n_tests", sample_size=3)
        assert baseline["sample_size"] == 3
        assert baseline["baseline_score"] == 60
        assert baseline["variance_score"] == 0

    def test_pre_supplement(self):
        baseline = calculate_baseline(_results(), "pre_supplement", first_intake_time=INTAKE)
        assert baseline["sample_size"] == 3
        assert baseline["baseline_reaction_time"] == 400

    def test_date_range(self):
        baseline = calculate_baseline(
            _results(),
            "date_range",
            start=INTAKE - datetime.timedelta(days=3),
            end=INTAKE + datetime.timedelta(days=1),
        )
        assert baseline["sample_size"] == 2
        assert baseline["baseline_score"] == pytest.approx(65.0)
        assert baseline["variance_score"] == pytest.approx(50.0)

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Unknown baseline method"):
            calculate_baseline(_results(), "median")

    def test_no_results(self):
        baseline = calculate_baseline([], "first_n_tests")
        assert baseline["sample_size"] == 0
        assert baseline["baseline_score"] is None
        assert baseline["confidence_level"] == 0


class TestBaselineConfidence:
    def test_no_samples(self):
        assert baseline_confidence(0, None) == 0

    def test_unknown_variance(self):
        assert baseline_confidence(10, None) == pytest.approx(0.85)

    def test_high_variance_lowers_confidence(self):
        # log10(100) = 2 -> stability 1/3
        assert baseline_confidence(10, 100) == pytest.approx(0.8)

    def test_low_variance_is_fully_stable(self):
        assert baseline_confidence(5, 0.5) == pytest.approx(0.65)
