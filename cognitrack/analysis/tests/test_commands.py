"""Tests for the analyze_periods management command."""
import io
import json

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from cognitrack.analysis.helpers.significance import RECOMMENDATION_POSITIVE

RESULTS = [
    {"timestamp": "2024-06-01T09:00:00", "score": 50, "reaction_time": 400, "accuracy": 80},
    {"timestamp": "2024-06-03T09:00:00", "score": 52, "reaction_time": 410, "accuracy": 82},
    {"timestamp": "2024-06-05T09:00:00", "score": 54, "reaction_time": 420, "accuracy": 84},
    {"timestamp": "2024-06-09T09:00:00", "score": 70, "reaction_time": 300, "accuracy": 80},
    {"timestamp": "2024-06-11T09:00:00", "score": 72, "reaction_time": 310, "accuracy": 82},
    {"timestamp": "2024-06-13T09:00:00", "score": 74, "reaction_time": 320, "accuracy": 84},
]

PERIODS = [
    "--baseline", "2024-06-01T00:00:00", "2024-06-07T23:00:00",
    "--comparison", "2024-06-08T00:00:00", "2024-06-14T23:00:00",
]


def _write(tmp_path, rows):
    path = tmp_path / "results.json"
    path.write_text(json.dumps(rows))
    return path


class TestAnalyzePeriodsCommand:
    def test_prints_interpretation_and_recommendation(self, tmp_path):
        out = io.StringIO()
        call_command("analyze_periods", str(_write(tmp_path, RESULTS)), *PERIODS, stdout=out, no_color=True)
        lines = out.getvalue().splitlines()
        assert lines[0] == "score: Statistically significant increase of 38.5% (large effect)"
        assert lines[1] == "reaction_time: Statistically significant decrease of 24.4% (large effect)"
        assert lines[2] == "accuracy: Not statistically significant"
        assert lines[3] == RECOMMENDATION_POSITIVE

    def test_insufficient_data(self, tmp_path):
        with pytest.raises(CommandError, match="Insufficient data"):
            call_command("analyze_periods", str(_write(tmp_path, RESULTS[1:])), *PERIODS)

    def test_malformed_record(self, tmp_path):
        rows = [{"timestamp": "2024-06-01T09:00:00", "score": 50}]
        with pytest.raises(CommandError, match="Malformed result record"):
            call_command("analyze_periods", str(_write(tmp_path, rows)), *PERIODS)

    def test_missing_file(self, tmp_path):
        with pytest.raises(CommandError, match="No such file"):
            call_command("analyze_periods", str(tmp_path / "missing.json"), *PERIODS)
