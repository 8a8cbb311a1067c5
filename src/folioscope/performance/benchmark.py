"""Portfolio versus benchmark comparison.

For each of the three benchmarks, in fixed order:

    beta              = cov(portfolio, benchmark) / var(benchmark)   (daily returns)
    alpha             = R_p - (rf + beta x (R_b - rf))                (whole period, percent)
    tracking error    = sqrt(var(r_p - r_b) x 252) x 100
    active return     = R_p - R_b
    information ratio = active return / tracking error

R_p and R_b are total returns over the whole period. rf is a fixed number
of percentage points (3 by default) applied to the whole period, not
annualized.
"""

from typing import Sequence

from folioscope.data.models import BENCHMARK_FIELDS, PortfolioRecord
from folioscope.performance.metrics import THREE_PLACES, TWO_PLACES, round_decimal
from folioscope.performance.models import BenchmarkComparison
from folioscope.performance.statistics import (
    TRADING_DAYS_PER_YEAR,
    annualize_volatility,
    beta,
    percent_change,
    simple_returns,
    variance,
)

DEFAULT_BENCHMARK_NAMES = ("SHA", "SHE", "CSI300")
DEFAULT_RISK_FREE_PCT = 3.0


def compare_to_benchmark(
    name: str,
    portfolio_levels: Sequence[float],
    benchmark_levels: Sequence[float],
    risk_free_pct: float = DEFAULT_RISK_FREE_PCT,
    trading_days: int = TRADING_DAYS_PER_YEAR,
) -> BenchmarkComparison:
    """
    Compare one portfolio level series with one benchmark level series.

    Args:
        name: Benchmark display name
        portfolio_levels: Share values in date order
        benchmark_levels: Benchmark levels for the same dates
        risk_free_pct: Whole-period risk-free return in percentage points
        trading_days: Periods per year used to annualize tracking error

    Returns:
        BenchmarkComparison with rounded figures
    """
    portfolio_returns = simple_returns(portfolio_levels)
    benchmark_returns = simple_returns(benchmark_levels)

    portfolio_total = percent_change(portfolio_levels[0], portfolio_levels[-1])
    benchmark_total = percent_change(benchmark_levels[0], benchmark_levels[-1])

    slope = beta(portfolio_returns, benchmark_returns)
    alpha = portfolio_total - (risk_free_pct + slope * (benchmark_total - risk_free_pct))

    excess_returns = [p - b for p, b in zip(portfolio_returns, benchmark_returns)]
    tracking_error = annualize_volatility(variance(excess_returns), trading_days) * 100

    active_return = portfolio_total - benchmark_total
    information_ratio = active_return / tracking_error if tracking_error != 0 else 0.0

    return BenchmarkComparison(
        benchmark=name,
        portfolio_return=round_decimal(portfolio_total, TWO_PLACES),
        benchmark_return=round_decimal(benchmark_total, TWO_PLACES),
        alpha=round_decimal(alpha, TWO_PLACES),
        beta=round_decimal(slope, THREE_PLACES),
        tracking_error=round_decimal(tracking_error, TWO_PLACES),
        information_ratio=round_decimal(information_ratio, THREE_PLACES),
        active_return=round_decimal(active_return, TWO_PLACES),
    )


def calculate_benchmark_comparisons(
    records: Sequence[PortfolioRecord],
    benchmark_names: Sequence[str] = DEFAULT_BENCHMARK_NAMES,
    risk_free_pct: float = DEFAULT_RISK_FREE_PCT,
    trading_days: int = TRADING_DAYS_PER_YEAR,
) -> list[BenchmarkComparison]:
    """
    Compare the portfolio with each benchmark.

    Args:
        records: Records in ascending date order
        benchmark_names: Display names for benchmark a, b and c
        risk_free_pct: Whole-period risk-free return in percentage points
        trading_days: Periods per year used to annualize tracking error

    Returns:
        One comparison per benchmark in a, b, c order; empty for fewer than two records
    """
    if len(records) < 2:
        return []

    if len(benchmark_names) != len(BENCHMARK_FIELDS):
        raise ValueError(f"Expected {len(BENCHMARK_FIELDS)} benchmark names, got {len(benchmark_names)}")

    portfolio_levels = [float(r.share_value) for r in records]

    return [
        compare_to_benchmark(
            name,
            portfolio_levels,
            [float(r.benchmark_value(index)) for r in records],
            risk_free_pct=risk_free_pct,
            trading_days=trading_days,
        )
        for index, name in enumerate(benchmark_names)
    ]
