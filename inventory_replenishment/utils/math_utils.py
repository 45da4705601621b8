# inventory_replenishment/utils/math_utils.py
import math
from typing import Sequence

import numpy as np

def round_half_up(value: float, digits: int = 1) -> float:
    """Round a value half up to the given number of decimal places.

    Python's built-in round() uses banker's rounding, so 0.25 would become 0.2.
    Demand figures are rounded half up (0.25 -> 0.3, -0.25 -> -0.2).

    Args:
        value: Value to round
        digits: Number of decimal places

    Returns:
        Rounded value
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor

def truncate(value: float, digits: int = 1) -> float:
    """Truncate a value toward negative infinity at the given decimal places."""
    factor = 10 ** digits
    return math.floor(value * factor) / factor

def calculate_moving_average(data: Sequence[float], window_size: int) -> float:
    """Calculate a simple moving average over the most recent values.

    Args:
        data: Values ordered oldest first
        window_size: Number of most recent values to average

    Returns:
        Average of the last window_size values, or of all values when
        there are fewer than window_size of them
    """
    values = np.asarray(data, dtype=float)
    if values.size == 0:
        return 0.0

    if values.size < window_size:
        return float(values.mean())

    return float(values[-window_size:].mean())

def calculate_weighted_moving_average(data: Sequence[float], weights: Sequence[float]) -> float:
    """Calculate a weighted moving average giving more importance to recent data.

    The last weight applies to the most recent value. When there are fewer
    values than weights, only the trailing len(data) weights are used. The
    result is divided by the sum of the weights actually used.

    Args:
        data: Values ordered oldest first
        weights: Weights ordered oldest first

    Returns:
        Weighted average, 0.0 for empty data
    """
    values = np.asarray(data, dtype=float)
    if values.size == 0:
        return 0.0

    w = np.asarray(weights, dtype=float)
    if values.size < w.size:
        w = w[-values.size:]

    window = values[-w.size:]

    return float(np.dot(window, w) / w.sum())

def add_noise(value: float, noise_percentage: float = 0.1, rng=None) -> float:
    """Add symmetric random noise to a value, never going below zero.

    Args:
        value: Value to perturb
        noise_percentage: Maximum relative deviation
        rng: Random generator with a random() method

    Returns:
        Perturbed, non-negative value
    """
    if rng is None:
        rng = np.random.default_rng()

    noise = (rng.random() * 2 - 1) * value * noise_percentage
    return max(0.0, value + noise)

def calculate_accuracy(forecast: float, actual: float) -> float:
    """Calculate forecast accuracy as a percentage.

    Args:
        forecast: Forecast value
        actual: Actual demand

    Returns:
        Accuracy between 0 and 100
    """
    if actual == 0:
        return 100.0 if forecast == 0 else 0.0

    error = abs(forecast - actual)
    return max(0.0, 100.0 - (error / actual) * 100.0)
