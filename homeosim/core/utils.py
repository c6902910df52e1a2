"""
Shared utility functions for HomeoSim.
"""

import math


def clamp(value: float, low: float, high: float) -> float:
    """
    Clamp value to the inclusive range [low, high].
    """
    if low > high:
        low, high = high, low
    return max(low, min(high, value))


def clamp01(value: float) -> float:
    """
    Clamp value to the inclusive range [0.0, 1.0].
    """
    return clamp(value, 0.0, 1.0)


def mean_revert(value: float, baseline: float, theta: float, stddev: float,
                dt: float, low: float, high: float, rng) -> float:
    """
    One Euler step of a clamped Ornstein-Uhlenbeck style process.

    Args:
        value: Current parameter value
        baseline: Level the parameter is pulled toward
        theta: Reversion rate (1/s)
        stddev: Noise magnitude per second of simulated time
        dt: Step size (s)
        low, high: Hard physiological bounds
        rng: Anything exposing numpy's ``normal(loc, scale)``

    Returns:
        The new value, always within [low, high].

    The deterministic pull is capped at the full distance to the baseline so
    a very long step lands on the baseline instead of overshooting it. Noise
    scales with dt, so a zero-length step changes nothing.
    """
    if dt <= 0:
        return clamp(value, low, high)
    pull = min(theta * dt, 1.0) * (baseline - value)
    noise = rng.normal(0.0, stddev * dt) if stddev > 0 else 0.0
    return clamp(value + pull + noise, low, high)


def approach(value: float, target: float, rate: float, dt: float) -> float:
    """
    Exponential relaxation of value toward target at ``rate`` per second.

    Unconditionally stable: the result always lies between value and target.
    """
    if dt <= 0 or rate <= 0:
        return value
    return value + (target - value) * (1.0 - math.exp(-rate * dt))


def require_finite(name: str, value: float, minimum: float = None) -> float:
    """Validate an external numeric input, raising ValueError on NaN/inf or below minimum."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    if minimum is not None and value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def calculate_bmi(weight_kg: float, height_m: float) -> float:
    """
    Body mass index (kg/m^2).

    Raises:
        ValueError: if weight or height is not a positive finite number.
    """
    weight_kg = require_finite("weight", weight_kg)
    height_m = require_finite("height", height_m)
    if weight_kg <= 0 or height_m <= 0:
        raise ValueError("Weight and height must be positive values.")
    return weight_kg / (height_m * height_m)
