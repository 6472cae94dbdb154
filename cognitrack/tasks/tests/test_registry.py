"""Tests for the test-type registry and scorer dispatch."""
import pytest
from django.core.exceptions import ValidationError

from cognitrack.tasks.registry import TEST_REGISTRY
from cognitrack.tasks.registry import score_test


def _reaction_payload(window_switches=0):
    return {
        "trials": [{"reaction_time": 250, "correct": True, "too_early": False}] * 8
        + [{"reaction_time": None, "correct": False, "too_early": False}] * 2,
        "environmental_factors": {"window_switches": window_switches},
    }


def _nback_payload(**extra):
    responses = [
        {"stimulus_index": i, "is_target": i % 3 == 0 and i >= 2, "responded": i % 3 == 0 and i >= 2,
         "correct": True, "reaction_time": 400 if i % 3 == 0 and i >= 2 else None}
        for i in range(12)
    ]
    payload = {
        "stimuli_sequence": list(range(12)),
        "responses": responses,
        "environmental_factors": {"window_switches": 0},
    }
    payload.update(extra)
    return payload


class TestTestRegistry:
    def test_registered_test_types(self):
        assert set(TEST_REGISTRY) == {"n-back", "reaction-time"}

    def test_every_entry_has_label_and_instructions(self):
        for entry in TEST_REGISTRY.values():
            assert entry["label"]
            assert entry["instructions"]


class TestScoreTest:
    def test_reaction_time_dispatch(self):
        result = score_test("reaction-time", _reaction_payload())
        assert result["score"] == 80
        assert result["quality_flags"] == []

    def test_quality_flags_attached(self):
        result = score_test("reaction-time", _reaction_payload(window_switches=1))
        assert result["quality_flags"] == ["window_switches"]

    def test_nback_defaults_to_level_two(self):
        default = score_test("n-back", _nback_payload())
        explicit = score_test("n-back", _nback_payload(n_back_level=2))
        assert default["score"] == explicit["score"]
        assert default["accuracy"] == 100

    def test_nback_level_changes_scored_trials(self):
        result = score_test("n-back", _nback_payload(n_back_level=4))
        assert len(result["raw_data"]["responses"]) == 12
        assert result["accuracy"] == 100

    def test_unknown_test_type_raises(self):
        with pytest.raises(ValidationError):
            score_test("stroop", {})
