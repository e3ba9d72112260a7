"""
Technical indicator utilities.
Pure O(n) recurrences over a close series; undefined points are NaN.
"""

import numpy as np
from typing import Sequence, Tuple, Union


Values = Union[Sequence[float], np.ndarray]


class IndicatorError(Exception):
    """Raised when an indicator is requested with invalid parameters."""
    pass


def _as_array(values: Values) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def _check_period(period: int) -> None:
    if int(period) != period or period < 1:
        raise IndicatorError(f"Period must be a positive integer, got {period}")


def sma(values: Values, period: int) -> np.ndarray:
    """
    Simple moving average using a running-sum sliding window.

    Defined for i >= period - 1, so a series of n >= period points has
    exactly n - period + 1 defined values.

    Args:
        values: Closes in chronological order
        period: Window length

    Returns:
        Array of the same length, NaN before the first full window
    """
    _check_period(period)
    arr = _as_array(values)
    out = np.full(arr.shape, np.nan)

    running = 0.0
    for i, v in enumerate(arr):
        running += v
        if i >= period:
            running -= arr[i - period]
        if i >= period - 1:
            out[i] = running / period

    return out


def ema(values: Values, period: int) -> np.ndarray:
    """
    Exponential moving average seeded at the first value.

    Formula: ema[i] = v[i] * k + ema[i-1] * (1 - k), k = 2 / (period + 1)

    Args:
        values: Values in chronological order
        period: Smoothing period (EMA(1) is the identity)

    Returns:
        Array of the same length, defined everywhere when non-empty
    """
    _check_period(period)
    arr = _as_array(values)
    out = np.empty(arr.shape)
    if arr.size == 0:
        return out

    k = 2.0 / (period + 1)
    out[0] = arr[0]
    for i in range(1, arr.size):
        out[i] = arr[i] * k + out[i - 1] * (1 - k)

    return out


def macd(
    values: Values,
    fast: int = 12,
    slow: int = 26,
    signal: int = 9
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD line, signal line and histogram.

    macd = EMA(fast) - EMA(slow); signal = EMA(signal) of macd;
    hist = macd - signal.

    Returns:
        Tuple of (macd_line, signal_line, histogram)
    """
    macd_line = ema(values, fast) - ema(values, slow)
    signal_line = ema(macd_line, signal)
    return macd_line, signal_line, macd_line - signal_line


def rsi(values: Values, period: int = 14) -> np.ndarray:
    """
    Wilder-style relative strength index.

    The first value is emitted at i = period from simple averages of the
    first `period` changes; later values use Wilder smoothing:
        gain = (gain * (period - 1) + g) / period
    A zero average loss yields 100.

    Args:
        values: Closes in chronological order
        period: Lookback period

    Returns:
        Array of the same length, NaN for i < period
    """
    _check_period(period)
    arr = _as_array(values)
    out = np.full(arr.shape, np.nan)
    if arr.size <= period:
        return out

    gain = 0.0
    loss = 0.0
    for i in range(1, arr.size):
        change = arr[i] - arr[i - 1]
        up = change if change > 0 else 0.0
        down = -change if change < 0 else 0.0

        if i <= period:
            gain += up
            loss += down
            if i < period:
                continue
            gain /= period
            loss /= period
        else:
            gain = (gain * (period - 1) + up) / period
            loss = (loss * (period - 1) + down) / period

        if loss == 0:
            out[i] = 100.0
        else:
            out[i] = 100.0 - 100.0 / (1.0 + gain / loss)

    return out


def bollinger(
    values: Values,
    period: int = 20,
    k: float = 2.0
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger bands: trailing mean +/- k population standard deviations.

    Args:
        values: Closes in chronological order
        period: Window length
        k: Band width in standard deviations

    Returns:
        Tuple of (upper, middle, lower), NaN before the first full window
    """
    _check_period(period)
    arr = _as_array(values)
    upper = np.full(arr.shape, np.nan)
    middle = np.full(arr.shape, np.nan)
    lower = np.full(arr.shape, np.nan)

    total = 0.0
    total_sq = 0.0
    for i, v in enumerate(arr):
        total += v
        total_sq += v * v
        if i >= period:
            old = arr[i - period]
            total -= old
            total_sq -= old * old
        if i >= period - 1:
            mean = total / period
            # Rounding can push the variance of a flat window slightly below 0
            variance = max(total_sq / period - mean * mean, 0.0)
            width = k * np.sqrt(variance)
            middle[i] = mean
            upper[i] = mean + width
            lower[i] = mean - width

    return upper, middle, lower


def last_defined(series: np.ndarray) -> Union[float, None]:
    """Return the final value of an indicator series, or None if undefined."""
    if series.size == 0 or np.isnan(series[-1]):
        return None
    return float(series[-1])
