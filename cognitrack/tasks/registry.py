# Registry of the cognitive test types a session can be scored as.
# Each entry defines metadata shown by the task runner plus the scorer used server-side.
from django.core.exceptions import ValidationError

from cognitrack.tasks.helpers.metrics.nback import calculate_test_results
from cognitrack.tasks.helpers.metrics.reaction_time import calculate_reaction_test_results
from cognitrack.tasks.helpers.quality import compute_quality_flags

TEST_REGISTRY: dict[str, dict] = {
    "n-back": {
        "label": "N-Back Working Memory Test",
        "default_n_back_level": 2,
        "trial_count": 20,
        "duration_display": "~2 min",
        "instructions": (
            "A square lights up in one of nine grid positions. "
            "Press Match whenever the position is the same as the one shown N steps earlier. "
            "Do nothing when it differs."
        ),
    },
    "reaction-time": {
        "label": "Reaction Time Test",
        "trial_count": 10,
        "duration_display": "~1 min",
        "instructions": (
            "Wait for the screen to turn green, then click as fast as you can. "
            "Clicking before it turns green counts as too early."
        ),
    },
}


def _score_nback(payload: dict) -> dict:
    level = payload.get("n_back_level", TEST_REGISTRY["n-back"]["default_n_back_level"])
    return calculate_test_results(
        level,
        payload.get("stimuli_sequence", []),
        payload.get("responses", []),
        payload.get("environmental_factors", {}),
    )


def _score_reaction_time(payload: dict) -> dict:
    return calculate_reaction_test_results(
        payload.get("trials", []),
        payload.get("environmental_factors", {}),
    )


SCORERS = {
    "n-back": _score_nback,
    "reaction-time": _score_reaction_time,
}


def score_test(test_type: str, payload: dict) -> dict:
    """
    Score a raw session payload for *test_type* and attach its quality flags.

    n-back payloads carry n_back_level, stimuli_sequence and responses;
    reaction-time payloads carry trials. Both carry environmental_factors.
    """
    if test_type not in TEST_REGISTRY:
        raise ValidationError(
            {"test_type": f"'{test_type}' is not a registered test type."}
        )
    result = SCORERS[test_type](payload)
    trials = payload.get("responses") if test_type == "n-back" else payload.get("trials")
    result["quality_flags"] = compute_quality_flags(trials, payload.get("environmental_factors"))
    return result
