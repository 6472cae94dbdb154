"""Inverse normal CDF and the signal-detection sensitivity index built on it.

Acklam's rational approximation: three regions (lower tail, central, upper
tail), each a fixed-coefficient rational polynomial. Relative error of the
published algorithm is about 1.15e-9.
"""
import math

# Central region numerator / denominator
A = (
    -3.969683028665376e01,
    2.209460984245205e02,
    -2.759285104469687e02,
    1.383577518672690e02,
    -3.066479806614716e01,
    2.506628277459239e00,
)
B = (
    -5.447609879822406e01,
    1.615858368580409e02,
    -1.556989798598866e02,
    6.680131188771972e01,
    -1.328068155288572e01,
)

# Tail numerator / denominator
C = (
    -7.784894002430293e-03,
    -3.223964580411365e-01,
    -2.400758277161838e00,
    -2.549732539343734e00,
    4.374664141464968e00,
    2.938163982698783e00,
)
D = (
    7.784695709041462e-03,
    3.224671290700398e-01,
    2.445134137142996e00,
    3.754408661907416e00,
)

P_LOW = 0.02425
P_HIGH = 1 - P_LOW

# Rates of exactly 0 or 1 would give infinite z-scores.
RATE_FLOOR = 0.01
RATE_CEILING = 0.99


def _tail(q: float) -> float:
    c1, c2, c3, c4, c5, c6 = C
    d1, d2, d3, d4 = D
    return (((((c1 * q + c2) * q + c3) * q + c4) * q + c5) * q + c6) / (
        (((d1 * q + d2) * q + d3) * q + d4) * q + 1
    )


def inverse_normal_cdf(p: float) -> float:
    """
    Return the standard-normal z-score whose lower-tail probability is *p*.

    Returns 0.0 for p <= 0 or p >= 1 rather than raising.
    """
    if p <= 0 or p >= 1:
        return 0.0

    if p < P_LOW:
        return _tail(math.sqrt(-2 * math.log(p)))

    if p <= P_HIGH:
        a1, a2, a3, a4, a5, a6 = A
        b1, b2, b3, b4, b5 = B
        q = p - 0.5
        r = q * q
        return (
            (((((a1 * r + a2) * r + a3) * r + a4) * r + a5) * r + a6) * q
            / (((((b1 * r + b2) * r + b3) * r + b4) * r + b5) * r + 1)
        )

    return -_tail(math.sqrt(-2 * math.log(1 - p)))


def clamp_rate(rate: float) -> float:
    """Map a rate of exactly 0 to 0.01 and exactly 1 to 0.99; leave others unchanged."""
    if rate == 0:
        return RATE_FLOOR
    if rate == 1:
        return RATE_CEILING
    return rate


def d_prime(hit_rate: float, false_alarm_rate: float) -> float:
    """Signal-detection sensitivity index: z(hit rate) - z(false-alarm rate)."""
    return inverse_normal_cdf(clamp_rate(hit_rate)) - inverse_normal_cdf(clamp_rate(false_alarm_rate))
