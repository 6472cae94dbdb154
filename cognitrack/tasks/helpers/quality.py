"""
Session validity and quality flag computation.

All functions are pure: they operate on the raw trial list and the
environmental-factors dict captured by the task runner.

The validity factor is the only quality signal that changes a score.
Flag strings follow the naming convention: snake_case identifiers returned
alongside the scored result (a list of strings).
"""
from django.conf import settings


# Defaults, overridable via settings
VALIDITY_PENALTY_PER_SWITCH: float = getattr(settings, "COGNITRACK_VALIDITY_PENALTY_PER_SWITCH", 0.05)
VALIDITY_FACTOR_FLOOR: float = getattr(settings, "COGNITRACK_VALIDITY_FACTOR_FLOOR", 0.7)


def window_switch_count(environmental_factors: dict | None) -> int:
    """Return the number of times the participant left the test window (0 if unknown)."""
    return (environmental_factors or {}).get("window_switches") or 0


def validity_factor(environmental_factors: dict | None) -> float:
    """
    Return the multiplicative score penalty for leaving the test window.

    Each window switch costs 5% of the score, down to a floor of 0.7
    (reached at 6 switches).
    """
    switches = window_switch_count(environmental_factors)
    return max(VALIDITY_FACTOR_FLOOR, 1 - switches * VALIDITY_PENALTY_PER_SWITCH)


def flag_window_switches(environmental_factors: dict | None) -> bool:
    """Return True if the participant switched away from the test window at least once."""
    return window_switch_count(environmental_factors) > 0


def flag_excessive_early_responses(trials: list, threshold: float = 0.3) -> bool:
    """
    Return True if more than `threshold` proportion of trials were responded to too early.

    Only reaction-time trials carry a too_early key; other trial lists never flag.
    """
    if not trials:
        return False
    too_early_count = sum(1 for t in trials if t.get("too_early", False))
    return (too_early_count / len(trials)) > threshold


def flag_excessive_misses(trials: list, threshold: float = 0.5) -> bool:
    """
    Return True if more than `threshold` proportion of trials have no response.

    For n-back sessions a non-response is the correct answer on non-target
    trials, so only targets are considered there (trials with an is_target key).
    """
    if trials and "is_target" in trials[0]:
        trials = [t for t in trials if t.get("is_target", False)]
    if not trials:
        return False
    no_response_count = sum(
        1 for t in trials
        if not t.get("responded", True) or t.get("reaction_time") is None
    )
    return (no_response_count / len(trials)) > threshold


def compute_quality_flags(trials: list, environmental_factors: dict | None) -> list[str]:
    """
    Compute all quality flags for a scored session and return a list of flag strings.

    Flags:
      "window_switches"          — participant left the test window at least once
      "excessive_early_responses" — > 30% of trials answered before the stimulus
      "excessive_misses"         — > 50% of (target) trials have no response
    """
    trials = trials or []
    flags = []
    if flag_window_switches(environmental_factors):
        flags.append("window_switches")
    if flag_excessive_early_responses(trials):
        flags.append("excessive_early_responses")
    if flag_excessive_misses(trials):
        flags.append("excessive_misses")
    return flags
