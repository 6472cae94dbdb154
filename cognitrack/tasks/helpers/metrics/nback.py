"""Server-side scoring for the n-back working-memory task."""
import logging

from cognitrack.tasks.helpers.inverse_normal import d_prime
from cognitrack.tasks.helpers.quality import validity_factor
from cognitrack.tasks.helpers.rounding import clamp
from cognitrack.tasks.helpers.rounding import round_half_up

logger = logging.getLogger(__name__)

# 200 ms maps to 100, 1 s maps to 0
MIN_REACTION_TIME_MS = 200
MAX_REACTION_TIME_MS = 1000

# d-prime of 4 is excellent performance, 0 is chance
D_PRIME_CEILING = 4

ACCURACY_WEIGHT = 0.5
REACTION_TIME_WEIGHT = 0.2
D_PRIME_WEIGHT = 0.3


def normalize_reaction_time(avg_reaction_time: float) -> float:
    """Linearly map a mean RT onto 0–100 (200 ms -> 100, 1000 ms -> 0); 0 when there is no RT."""
    if avg_reaction_time <= 0:
        return 0.0
    span = MAX_REACTION_TIME_MS - MIN_REACTION_TIME_MS
    return clamp(100 - ((avg_reaction_time - MIN_REACTION_TIME_MS) / span) * 100, 0, 100)


def normalize_d_prime(value: float) -> float:
    return clamp((value / D_PRIME_CEILING) * 100, 0, 100)


def compute_nback_summary(n_back_level, responses, environmental_factors=None):
    """
    Compute n-back signal-detection metrics from a list of trial dicts.

    Each trial dict is expected to have:
      stimulus_index (int)         — presentation position
      is_target (bool)             — position matches the one n steps back
      responded (bool)             — whether the participant pressed "match"
      correct (bool)               — whether the response was correct
      reaction_time (float | None) — response time in ms (None for non-responses)

    The first `n_back_level` trials have nothing to compare against and are
    excluded before counting.

    Returns dict with:
      true_positives, false_positives, false_negatives, true_negatives,
      hit_rate, false_alarm_rate, d_prime,
      accuracy                  — % correct over scored trials (int 0–100)
      reaction_time             — mean RT of hits in ms (int, 0 if none)
      normalized_reaction_time  — 0–100
      normalized_d_prime        — 0–100
      composite_score           — weighted score before the validity penalty
      validity_factor           — 0.7–1.0
      score                     — final score (int 0–100)
    """
    valid = responses[n_back_level:]
    targets = [r for r in valid if r.get("is_target", False)]
    non_targets = [r for r in valid if not r.get("is_target", False)]

    true_positives = sum(1 for r in targets if r.get("responded", False))
    false_negatives = len(targets) - true_positives
    false_positives = sum(1 for r in non_targets if r.get("responded", False))
    true_negatives = len(non_targets) - false_positives

    hit_rate = true_positives / len(targets) if targets else 0
    false_alarm_rate = false_positives / len(non_targets) if non_targets else 0
    sensitivity = d_prime(hit_rate, false_alarm_rate)

    if valid:
        accuracy = round_half_up(((true_positives + true_negatives) / len(valid)) * 100)
    else:
        logger.debug("n-back session with no scorable trials (level=%s, trials=%d)", n_back_level, len(responses))
        accuracy = 0

    # Correct non-responses carry no RT, so only hits contribute.
    hit_rts = [
        r["reaction_time"] for r in targets
        if r.get("responded", False) and r.get("reaction_time") is not None
    ]
    avg_reaction_time = round_half_up(sum(hit_rts) / len(hit_rts)) if hit_rts else 0

    normalized_rt = normalize_reaction_time(avg_reaction_time)
    normalized_dp = normalize_d_prime(sensitivity)

    if valid:
        composite = round_half_up(
            accuracy * ACCURACY_WEIGHT
            + normalized_rt * REACTION_TIME_WEIGHT
            + normalized_dp * D_PRIME_WEIGHT
        )
    else:
        composite = 0

    factor = validity_factor(environmental_factors)

    return {
        "true_positives": true_positives,
        "false_positives": false_positives,
        "false_negatives": false_negatives,
        "true_negatives": true_negatives,
        "hit_rate": hit_rate,
        "false_alarm_rate": false_alarm_rate,
        "d_prime": sensitivity,
        "accuracy": accuracy,
        "reaction_time": avg_reaction_time,
        "normalized_reaction_time": normalized_rt,
        "normalized_d_prime": normalized_dp,
        "composite_score": composite,
        "validity_factor": factor,
        "score": round_half_up(composite * factor),
    }


def calculate_test_results(n_back_level, stimuli_sequence, responses, environmental_factors):
    """
    Score a completed n-back session.

    Returns the result record handed on for storage:
      {"score", "accuracy", "reaction_time", "raw_data": {stimuli_sequence, responses, environmental_factors}}
    """
    summary = compute_nback_summary(n_back_level, responses, environmental_factors)
    return {
        "score": summary["score"],
        "accuracy": summary["accuracy"],
        "reaction_time": summary["reaction_time"],
        "raw_data": {
            "stimuli_sequence": stimuli_sequence,
            "responses": responses,
            "environmental_factors": environmental_factors,
        },
    }
