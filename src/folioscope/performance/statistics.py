"""Statistics primitives shared by the analysis engines.

Pure float functions. Degenerate inputs (empty sequences, zero variance,
zero denominators) produce 0 instead of NaN/Infinity or an exception, so
every engine always has a displayable number.

Variance and covariance are population statistics (divide by n).
"""

import math
from typing import Sequence

TRADING_DAYS_PER_YEAR = 252


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def variance(values: Sequence[float]) -> float:
    """Population variance, 0 for an empty sequence."""
    if not values:
        return 0.0
    avg = mean(values)
    return sum((v - avg) ** 2 for v in values) / len(values)


def covariance(x: Sequence[float], y: Sequence[float]) -> float:
    """Population covariance over the common length of x and y."""
    n = min(len(x), len(y))
    if n == 0:
        return 0.0
    x, y = x[:n], y[:n]
    mean_x = mean(x)
    mean_y = mean(y)
    return sum((a - mean_x) * (b - mean_y) for a, b in zip(x, y)) / n


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient over the common length of x and y.

    Returns 0 when either sequence is empty or has zero variance.

    Example:
        >>> pearson_correlation([1, 2, 3], [2, 4, 6])
        1.0
    """
    n = min(len(x), len(y))
    if n == 0:
        return 0.0

    x, y = x[:n], y[:n]
    mean_x = mean(x)
    mean_y = mean(y)

    numerator = 0.0
    sum_sq_x = 0.0
    sum_sq_y = 0.0
    for a, b in zip(x, y):
        dx = a - mean_x
        dy = b - mean_y
        numerator += dx * dy
        sum_sq_x += dx * dx
        sum_sq_y += dy * dy

    denominator = math.sqrt(sum_sq_x * sum_sq_y)
    if denominator == 0:
        return 0.0
    return numerator / denominator


def simple_returns(levels: Sequence[float]) -> list[float]:
    """
    Period-over-period simple returns.

    Periods whose starting level is exactly 0 are omitted.

    Example:
        >>> simple_returns([100, 110, 99])
        [0.1, -0.1]
    """
    returns = []
    for i in range(1, len(levels)):
        previous = levels[i - 1]
        if previous == 0:
            continue
        returns.append((levels[i] - previous) / previous)
    return returns


def beta(portfolio_returns: Sequence[float], benchmark_returns: Sequence[float]) -> float:
    """OLS slope of portfolio on benchmark returns; 0 if the benchmark has zero variance."""
    n = min(len(portfolio_returns), len(benchmark_returns))
    benchmark_variance = variance(benchmark_returns[:n])
    if benchmark_variance == 0:
        return 0.0
    return covariance(portfolio_returns[:n], benchmark_returns[:n]) / benchmark_variance


def annualize_volatility(period_variance: float, periods: int = TRADING_DAYS_PER_YEAR) -> float:
    """Annualized standard deviation (as a fraction) from a per-period variance."""
    return math.sqrt(period_variance * periods)


def percent_change(first: float, last: float) -> float:
    """(last - first) / first x 100, or 0 when first is 0."""
    if first == 0:
        return 0.0
    return (last - first) / first * 100
