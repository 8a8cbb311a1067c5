"""Return and correlation metrics.

Pure functions over an ordered sequence of PortfolioRecord. Records are
assumed to be in ascending date order and are never re-sorted.

Usage:
    >>> from folioscope.performance import metrics
    >>> overall = metrics.calculate_overall_metrics(records)
    >>> overall.total_return
    Decimal('125.40')
    >>> for row in metrics.calculate_annual_returns(records):
    ...     print(row.year, row.portfolio_return)
"""

import math
from decimal import Decimal, localcontext
from typing import Sequence

from folioscope.data.models import BENCHMARK_FIELDS, PortfolioRecord
from folioscope.performance.models import AnnualReturn, CorrelationMatrix, OverallMetrics
from folioscope.performance.statistics import pearson_correlation, percent_change

DAYS_PER_YEAR = 365.25

# Enough digits to quantize any finite float (max ~1.8e308)
DECIMAL_PRECISION = 400

TWO_PLACES = Decimal("0.01")
THREE_PLACES = Decimal("0.001")
FOUR_PLACES = Decimal("0.0001")


def round_decimal(value: float, places: Decimal = TWO_PLACES) -> Decimal:
    """
    Convert a float result to a Decimal rounded to `places`.

    Non-finite values become 0. Large finite values keep every integer digit.

    Example:
        >>> round_decimal(9.090909, TWO_PLACES)
        Decimal('9.09')
    """
    if not math.isfinite(value):
        return Decimal("0").quantize(places)
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(str(value)).quantize(places)


def calculate_total_return(first_value: Decimal, last_value: Decimal) -> Decimal:
    """
    Total return percentage between two share values.

    Returns 0 when the first value is 0.

    Example:
        >>> calculate_total_return(Decimal("1.00"), Decimal("1.25"))
        Decimal('25.00')
    """
    return round_decimal(percent_change(float(first_value), float(last_value)))


def calculate_annualized_return(first_value: Decimal, last_value: Decimal, elapsed_days: int) -> Decimal:
    """
    Compound annual growth rate as a percentage.

    years = elapsed_days / 365.25. Returns 0 when no time has elapsed or the
    first value is not positive. A growth factor too large for a float is
    treated as non-finite and becomes 0.

    Example:
        >>> calculate_annualized_return(Decimal("100"), Decimal("121"), 730)
        Decimal('10.01')
    """
    if elapsed_days == 0 or first_value <= 0:
        return Decimal("0.00")

    years = elapsed_days / DAYS_PER_YEAR
    ratio = float(last_value / first_value)
    if ratio <= 0:
        return Decimal("-100.00")

    try:
        annualized = (ratio ** (1 / years)) - 1
    except OverflowError:
        annualized = math.inf
    return round_decimal(annualized * 100)


def calculate_overall_metrics(records: Sequence[PortfolioRecord]) -> OverallMetrics | None:
    """
    Whole-period summary from the first and last record.

    Args:
        records: Records in ascending date order

    Returns:
        OverallMetrics, or None when there are no records
    """
    if not records:
        return None

    first = records[0]
    last = records[-1]
    elapsed_days = (last.trade_date - first.trade_date).days

    return OverallMetrics(
        start_date=first.date,
        end_date=last.date,
        total_return=calculate_total_return(first.share_value, last.share_value),
        annualized_return=calculate_annualized_return(first.share_value, last.share_value, elapsed_days),
        current_share_value=last.share_value,
        total_shares=last.shares,
        total_market_value=last.market_value,
        total_gain_loss=last.gain_loss,
        total_principal=last.principal,
    )


def calculate_annual_returns(records: Sequence[PortfolioRecord]) -> list[AnnualReturn]:
    """
    Calendar-year returns for the portfolio and each benchmark.

    For each year the first and last record seen in input order are
    compared. A year with a single record returns 0 everywhere.

    Returns:
        One AnnualReturn per year, ascending by year
    """
    yearly: dict[int, tuple[PortfolioRecord, PortfolioRecord]] = {}

    for record in records:
        year = record.trade_date.year
        if year not in yearly:
            yearly[year] = (record, record)
        else:
            yearly[year] = (yearly[year][0], record)

    results = []
    for year in sorted(yearly):
        first, last = yearly[year]
        benchmark_returns = [
            round_decimal(percent_change(float(getattr(first, name)), float(getattr(last, name))))
            for name in BENCHMARK_FIELDS
        ]
        results.append(
            AnnualReturn(
                year=year,
                portfolio_return=calculate_total_return(first.share_value, last.share_value),
                benchmark_a_return=benchmark_returns[0],
                benchmark_b_return=benchmark_returns[1],
                benchmark_c_return=benchmark_returns[2],
            )
        )

    return results


def calculate_correlations(records: Sequence[PortfolioRecord]) -> CorrelationMatrix:
    """Pearson correlation of share value against each benchmark over the full history."""
    share_values = [float(r.share_value) for r in records]
    coefficients = [
        round_decimal(pearson_correlation(share_values, [float(getattr(r, name)) for r in records]), FOUR_PLACES)
        for name in BENCHMARK_FIELDS
    ]

    return CorrelationMatrix(
        benchmark_a=coefficients[0],
        benchmark_b=coefficients[1],
        benchmark_c=coefficients[2],
    )
