"""Server-side scoring for the simple reaction-time task."""
import logging

from cognitrack.tasks.helpers.quality import validity_factor
from cognitrack.tasks.helpers.rounding import clamp
from cognitrack.tasks.helpers.rounding import round_half_up

logger = logging.getLogger(__name__)

# Benchmark reaction times (ms)
EXCELLENT_TIME = 200
GOOD_TIME = 300
AVERAGE_TIME = 400
SLOW_TIME = 600

# (upper bound ms, score at lower bound, score at upper bound)
REACTION_TIME_BANDS = (
    (GOOD_TIME, 90, 70),
    (AVERAGE_TIME, 70, 50),
    (SLOW_TIME, 50, 20),
)

SLOW_TAIL_FLOOR = 10

REACTION_TIME_WEIGHT = 0.6
ACCURACY_WEIGHT = 0.4
MAX_EARLY_PENALTY = 30


def reaction_time_band_score(avg_reaction_time: float) -> float:
    """
    Score a mean reaction time against the benchmark bands.

    <= 200 ms scores 100; 200–300 ms falls linearly 90 -> 70; 300–400 ms
    70 -> 50; 400–600 ms 50 -> 20; beyond 600 ms loses 2 points per 100 ms,
    never dropping below 10.
    """
    if avg_reaction_time <= EXCELLENT_TIME:
        return 100.0
    lower = EXCELLENT_TIME
    for upper, start_score, end_score in REACTION_TIME_BANDS:
        if avg_reaction_time <= upper:
            return start_score - ((avg_reaction_time - lower) / (upper - lower)) * (start_score - end_score)
        lower = upper
    return max(SLOW_TAIL_FLOOR, 20 - ((avg_reaction_time - SLOW_TIME) / 100) * 2)


def compute_reaction_time_summary(trials, environmental_factors=None):
    """
    Compute reaction-time metrics from a list of trial dicts.

    Each trial dict is expected to have:
      reaction_time (float | None) — response time in ms
      correct (bool)               — whether the response counted
      too_early (bool)             — pressed before the stimulus appeared

    A too-early trial is never a valid hit, whatever its correct flag says.

    Returns dict with:
      total_trials, correct_count, too_early_count,
      accuracy              — % correct (int 0–100)
      reaction_time         — mean RT of valid trials in ms (int, 0 if none)
      reaction_time_score   — benchmark band score (0 if no valid RT)
      early_penalty         — percentage points subtracted (0–30)
      composite_score       — weighted score before the validity penalty
      validity_factor       — 0.7–1.0
      score                 — final score clamped to 0–100 (int)
    """
    total = len(trials)
    hits = [t for t in trials if t.get("correct", False) and not t.get("too_early", False)]
    valid_rts = [t["reaction_time"] for t in hits if t.get("reaction_time") is not None]
    too_early_count = sum(1 for t in trials if t.get("too_early", False))

    if not total:
        logger.debug("Reaction-time session with no trials")
        return {
            "total_trials": 0,
            "correct_count": 0,
            "too_early_count": 0,
            "accuracy": 0,
            "reaction_time": 0,
            "reaction_time_score": 0.0,
            "early_penalty": 0.0,
            "composite_score": 0,
            "validity_factor": validity_factor(environmental_factors),
            "score": 0,
        }

    accuracy = round_half_up((len(hits) / total) * 100)
    avg_reaction_time = round_half_up(sum(valid_rts) / len(valid_rts)) if valid_rts else 0
    rt_score = reaction_time_band_score(avg_reaction_time) if valid_rts else 0.0
    early_penalty = (too_early_count / total) * MAX_EARLY_PENALTY

    composite = round_half_up(rt_score * REACTION_TIME_WEIGHT + accuracy * ACCURACY_WEIGHT - early_penalty)
    factor = validity_factor(environmental_factors)

    return {
        "total_trials": total,
        "correct_count": len(hits),
        "too_early_count": too_early_count,
        "accuracy": accuracy,
        "reaction_time": avg_reaction_time,
        "reaction_time_score": rt_score,
        "early_penalty": early_penalty,
        "composite_score": composite,
        "validity_factor": factor,
        "score": int(clamp(round_half_up(composite * factor), 0, 100)),
    }


def calculate_reaction_test_results(trials, environmental_factors):
    """
    Score a completed reaction-time session.

    Returns the result record handed on for storage:
      {"score", "accuracy", "reaction_time", "raw_data": {trials, environmental_factors}}
    """
    summary = compute_reaction_time_summary(trials, environmental_factors)
    return {
        "score": summary["score"],
        "accuracy": summary["accuracy"],
        "reaction_time": summary["reaction_time"],
        "raw_data": {
            "trials": trials,
            "environmental_factors": environmental_factors,
        },
    }
