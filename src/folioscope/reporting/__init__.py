"""Console reporting for portfolio analysis."""

from folioscope.reporting.formatters import display_portfolio_report
from folioscope.reporting.ratings import Rating, drawdown_risk_rating, drawdown_severity, sharpe_rating

__all__ = [
    "Rating",
    "display_portfolio_report",
    "drawdown_risk_rating",
    "drawdown_severity",
    "sharpe_rating",
]
