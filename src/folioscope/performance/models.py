"""Performance analysis data models.

Pydantic models for the results of each analysis engine. All percentage
fields are already scaled x100 and rounded to their documented precision,
so display layers only add symbols.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

ZERO = Decimal("0")


class OverallMetrics(BaseModel):
    """
    Whole-period summary of the share value series.

    The latest-row figures (shares, market value, gain/loss, principal) are
    taken from the last record as-is.
    """

    start_date: str
    end_date: str
    total_return: Decimal  # percent, 2 dp
    annualized_return: Decimal  # percent, 2 dp
    current_share_value: Decimal
    total_shares: Decimal
    total_market_value: Decimal
    total_gain_loss: Decimal
    total_principal: Decimal

    model_config = {"frozen": True}


class AnnualReturn(BaseModel):
    """Calendar-year return of the portfolio and each benchmark (percent, 2 dp)."""

    year: int
    portfolio_return: Decimal
    benchmark_a_return: Decimal
    benchmark_b_return: Decimal
    benchmark_c_return: Decimal

    model_config = {"frozen": True}


class CorrelationMatrix(BaseModel):
    """Pearson correlation of share value against each benchmark level (4 dp)."""

    benchmark_a: Decimal
    benchmark_b: Decimal
    benchmark_c: Decimal

    model_config = {"frozen": True}


class RiskMetrics(BaseModel):
    """
    Risk and risk-adjusted return figures for the share value series.

    All fields are zero when fewer than two records are available.
    """

    sharpe_ratio: Decimal = ZERO  # 3 dp
    max_drawdown: Decimal = ZERO  # percent, 2 dp
    volatility: Decimal = ZERO  # annualized percent, 2 dp
    downside_deviation: Decimal = ZERO  # annualized percent, 2 dp
    sortino_ratio: Decimal = ZERO  # 3 dp

    model_config = {"frozen": True}


class BenchmarkComparison(BaseModel):
    """
    Portfolio versus one benchmark over the whole period.

    Alpha uses CAPM in whole-period (not annualized) terms.
    """

    benchmark: str
    portfolio_return: Decimal  # percent, 2 dp
    benchmark_return: Decimal  # percent, 2 dp
    alpha: Decimal  # percent, 2 dp
    beta: Decimal  # 3 dp
    tracking_error: Decimal  # annualized percent, 2 dp
    information_ratio: Decimal  # 3 dp
    active_return: Decimal  # percent, 2 dp

    model_config = {"frozen": True}


class DrawdownPeriod(BaseModel):
    """
    Record of a drawdown episode (peak to trough to recovery).

    end_date is the date of the deepest point. recovery_date is the first
    date the value rose above the peak (None while the episode is open).
    """

    start_date: str  # Peak date
    end_date: str  # Trough date
    recovery_date: str | None = None
    peak_value: Decimal
    trough_value: Decimal
    drawdown_percent: Decimal  # 2 dp
    duration_days: int  # Calendar days from peak to trough
    recovery_days: int | None = None  # Calendar days from trough to recovery

    model_config = {"frozen": True}

    @property
    def recovered(self) -> bool:
        """Episode closed by a new peak."""
        return self.recovery_date is not None

    @property
    def total_days_underwater(self) -> int | None:
        """Total days from peak to recovery."""
        if self.recovery_date is None or not self.start_date:
            return None
        return (date.fromisoformat(self.recovery_date) - date.fromisoformat(self.start_date)).days

    @classmethod
    def empty(cls) -> "DrawdownPeriod":
        """Zero-valued sentinel used when no episode exists."""
        return cls(
            start_date="",
            end_date="",
            peak_value=ZERO,
            trough_value=ZERO,
            drawdown_percent=ZERO,
            duration_days=0,
        )


class DrawdownAnalysis(BaseModel):
    """Every drawdown episode plus aggregate statistics."""

    max_drawdown: DrawdownPeriod = Field(default_factory=DrawdownPeriod.empty)
    all_drawdowns: list[DrawdownPeriod] = Field(default_factory=list)
    current_drawdown: DrawdownPeriod | None = None
    average_drawdown: Decimal = ZERO  # percent, 2 dp
    average_recovery_time: Decimal = ZERO  # days, 1 dp (closed episodes only)

    model_config = {"frozen": True}

    def recent(self, limit: int = 5) -> list[DrawdownPeriod]:
        """Episodes ordered newest start date first, at most `limit`."""
        ordered = sorted(self.all_drawdowns, key=lambda d: d.start_date, reverse=True)
        return ordered[:limit]


class PortfolioReport(BaseModel):
    """
    Complete analysis of one portfolio series.

    overall is None only when there were no records at all.
    """

    record_count: int
    risk_free_rate: Decimal
    overall: OverallMetrics | None
    annual_returns: list[AnnualReturn] = Field(default_factory=list)
    correlations: CorrelationMatrix
    benchmark_names: list[str] = Field(default_factory=list)
    risk: RiskMetrics
    benchmarks: list[BenchmarkComparison] = Field(default_factory=list)
    drawdowns: DrawdownAnalysis
    warnings: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    def to_dict(self) -> dict[str, Any]:
        """Plain dict with Decimals as floats, ready for json.dumps."""
        return _decimals_to_float(self.model_dump())


def _decimals_to_float(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {k: _decimals_to_float(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_decimals_to_float(v) for v in value]
    return value
