"""Plain-language ratings for report figures.

Each function maps one number to a label plus a Rich style, so the console
report and any other presentation share the same thresholds.
"""

from decimal import Decimal
from typing import NamedTuple


class Rating(NamedTuple):
    label: str
    style: str


def sharpe_rating(sharpe: Decimal) -> Rating:
    """Rate a Sharpe ratio."""
    if sharpe > Decimal("1.5"):
        return Rating("Excellent", "bold green")
    if sharpe > Decimal("1.0"):
        return Rating("Good", "blue")
    if sharpe > Decimal("0.5"):
        return Rating("Fair", "yellow")
    return Rating("Poor", "red")


def drawdown_risk_rating(max_drawdown: Decimal) -> Rating:
    """Rate the running maximum drawdown percentage."""
    if max_drawdown < 5:
        return Rating("Low Risk", "green")
    if max_drawdown < 15:
        return Rating("Moderate Risk", "yellow")
    if max_drawdown < 25:
        return Rating("High Risk", "dark_orange")
    return Rating("Very High Risk", "bold red")


def drawdown_severity(drawdown_percent: Decimal) -> Rating:
    """Severity of a single drawdown episode."""
    if drawdown_percent >= 20:
        return Rating("Severe", "bold red")
    if drawdown_percent >= 10:
        return Rating("Moderate", "dark_orange")
    if drawdown_percent >= 5:
        return Rating("Minor", "yellow")
    return Rating("Minimal", "green")


def describe_beta(beta: Decimal) -> str:
    if beta > Decimal("1.1"):
        return "More volatile than benchmark"
    if beta < Decimal("0.9"):
        return "Less volatile than benchmark"
    return "Similar volatility to benchmark"


def describe_alpha(alpha: Decimal) -> str:
    if alpha > 2:
        return "Strong outperformance"
    if alpha > 0:
        return "Modest outperformance"
    if alpha < -2:
        return "Significant underperformance"
    return "In line with expected returns"


def describe_recovery(average_recovery_days: Decimal) -> str | None:
    """
    Recovery pattern from the average recovery time.

    Returns None when no episode has recovered (average of 0).
    """
    if average_recovery_days <= 0:
        return None
    if average_recovery_days > 365:
        return "Slow recovery, typically over a year"
    if average_recovery_days > 180:
        return "Moderate recovery, typically 6-12 months"
    if average_recovery_days > 90:
        return "Good recovery, typically 3-6 months"
    return "Quick recovery, typically under 3 months"


def describe_risk_profile(max_drawdown_percent: Decimal) -> str:
    """Overall risk profile from the deepest drawdown episode."""
    if max_drawdown_percent > 30:
        return "High risk profile with significant volatility"
    if max_drawdown_percent > 15:
        return "Moderate risk with notable drawdown periods"
    if max_drawdown_percent > 5:
        return "Relatively stable with minor volatility"
    return "Very stable with minimal downside risk"
