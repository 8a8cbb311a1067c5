"""Risk metrics for the share value series.

Volatility, Sharpe, downside deviation, Sortino and maximum drawdown from
daily simple returns, annualized with a fixed 252 trading days.

Fewer than two records is a defined degenerate case: every metric is 0.
"""

from typing import Sequence

from folioscope.data.models import PortfolioRecord
from folioscope.performance.metrics import THREE_PLACES, TWO_PLACES, round_decimal
from folioscope.performance.models import RiskMetrics
from folioscope.performance.statistics import (
    TRADING_DAYS_PER_YEAR,
    annualize_volatility,
    mean,
    simple_returns,
    variance,
)

DEFAULT_RISK_FREE_RATE = 0.03


def calculate_max_drawdown(values: Sequence[float]) -> float:
    """
    Largest peak-to-value decline, as a percentage of the running peak.

    Example:
        >>> calculate_max_drawdown([100, 105, 95, 110])
        9.523809523809524
    """
    if not values:
        return 0.0

    max_dd = 0.0
    peak = values[0]

    for value in values[1:]:
        if value > peak:
            peak = value
        if peak > 0:
            drawdown = (peak - value) / peak * 100
            if drawdown > max_dd:
                max_dd = drawdown

    return max_dd


def calculate_downside_deviation(returns: Sequence[float], trading_days: int = TRADING_DAYS_PER_YEAR) -> float:
    """
    Annualized downside deviation as a percentage.

    Root of the mean squared strictly-negative return, annualized. 0 when no
    return is negative.
    """
    negative_returns = [r for r in returns if r < 0]
    if not negative_returns:
        return 0.0

    downside_variance = sum(r**2 for r in negative_returns) / len(negative_returns)
    return annualize_volatility(downside_variance, trading_days) * 100


def calculate_risk_metrics(
    records: Sequence[PortfolioRecord],
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
    trading_days: int = TRADING_DAYS_PER_YEAR,
) -> RiskMetrics:
    """
    Calculate risk metrics from the share value series.

    Args:
        records: Records in ascending date order
        risk_free_rate: Annual risk-free rate as a fraction (0.03 = 3%)
        trading_days: Periods per year used for annualization

    Returns:
        RiskMetrics (all zero for fewer than two records)

    Example:
        >>> metrics = calculate_risk_metrics(records, risk_free_rate=0.03)
        >>> metrics.sharpe_ratio
        Decimal('0.812')
    """
    if len(records) < 2:
        return RiskMetrics()

    values = [float(r.share_value) for r in records]
    daily_returns = simple_returns(values)

    volatility = annualize_volatility(variance(daily_returns), trading_days) * 100

    annualized_return = mean(daily_returns) * trading_days * 100
    excess_return = annualized_return - risk_free_rate * 100

    sharpe_ratio = excess_return / volatility if volatility != 0 else 0.0

    downside_deviation = calculate_downside_deviation(daily_returns, trading_days)
    sortino_ratio = excess_return / downside_deviation if downside_deviation != 0 else 0.0

    return RiskMetrics(
        sharpe_ratio=round_decimal(sharpe_ratio, THREE_PLACES),
        max_drawdown=round_decimal(calculate_max_drawdown(values), TWO_PLACES),
        volatility=round_decimal(volatility, TWO_PLACES),
        downside_deviation=round_decimal(downside_deviation, TWO_PLACES),
        sortino_ratio=round_decimal(sortino_ratio, THREE_PLACES),
    )
