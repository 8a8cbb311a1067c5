"""
Portfolio data contract.

Typed records produced by the CSV parser and consumed by every analysis
engine. The engines assume the record sequence is in ascending date order;
the parser only warns when it is not.

Column order of a data row:
    date, benchmark_a, benchmark_b, benchmark_c, shares, share_value,
    gain_loss, daily_gain, market_value, principal

Design Principles:
- Immutability: All models frozen=True (records are facts)
- Decimal precision for parsed values
- Dates are canonical YYYY-MM-DD strings (lexicographic order == date order)
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

BENCHMARK_FIELDS = ("benchmark_a", "benchmark_b", "benchmark_c")


class PortfolioRecord(BaseModel):
    """
    One trading day of portfolio and benchmark data.

    Attributes:
        date: Canonical YYYY-MM-DD date
        share_value: Net value per share (strictly positive)
        benchmark_a/b/c: Market index levels (units independent of share_value)
        shares: Shares held (negative values are allowed but suspicious)
        gain_loss: Cumulative gain/loss
        daily_gain: Gain/loss for the day
        market_value: Market value of the holding
        principal: Invested principal

    Example:
        >>> record = PortfolioRecord(date="2014-01-20", share_value=Decimal("1.0234"))
        >>> record.trade_date
        datetime.date(2014, 1, 20)
    """

    date: str
    share_value: Decimal = Field(gt=0)
    benchmark_a: Decimal = Decimal("0")
    benchmark_b: Decimal = Decimal("0")
    benchmark_c: Decimal = Decimal("0")
    shares: Decimal = Decimal("0")
    gain_loss: Decimal = Decimal("0")
    daily_gain: Decimal = Decimal("0")
    market_value: Decimal = Decimal("0")
    principal: Decimal = Decimal("0")

    model_config = {"frozen": True}

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        """Dates must already be canonical YYYY-MM-DD."""
        try:
            parsed = date.fromisoformat(v)
        except ValueError as e:
            raise ValueError(f"date must be YYYY-MM-DD, got {v!r}") from e
        if parsed.isoformat() != v:
            raise ValueError(f"date must be YYYY-MM-DD, got {v!r}")
        return v

    @property
    def trade_date(self) -> date:
        """Record date as a datetime.date."""
        return date.fromisoformat(self.date)

    def benchmark_value(self, index: int) -> Decimal:
        """Level of benchmark 0 (a), 1 (b) or 2 (c)."""
        return getattr(self, BENCHMARK_FIELDS[index])


class ParseOutcome(BaseModel):
    """
    Result of one ingestion call.

    Any error makes the batch unusable; warnings are informational.
    """

    records: list[PortfolioRecord] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def is_valid(self) -> bool:
        """True when no fatal error was collected."""
        return not self.errors
