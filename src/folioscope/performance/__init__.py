"""Portfolio performance analysis.

1. **Models** (`models.py`): Pydantic result structures
   - OverallMetrics, AnnualReturn, CorrelationMatrix
   - RiskMetrics, BenchmarkComparison
   - DrawdownPeriod, DrawdownAnalysis
   - PortfolioReport: Everything above for one series

2. **Engines**: Pure functions over an ordered record sequence
   - `metrics.py`: total/annualized/annual returns, correlations
   - `risk.py`: volatility, Sharpe, downside deviation, Sortino, max drawdown
   - `benchmark.py`: alpha, beta, tracking error, information ratio
   - `drawdown.py`: drawdown episodes and their aggregates

3. **Analyzer** (`analyzer.py`): Runs every engine and builds a PortfolioReport

Usage:
    >>> from folioscope.performance import analyze_portfolio
    >>> report = analyze_portfolio(records)
    >>> report.drawdowns.max_drawdown.drawdown_percent
    Decimal('12.40')
"""

from folioscope.performance.analyzer import analyze_csv_text, analyze_portfolio
from folioscope.performance.benchmark import calculate_benchmark_comparisons
from folioscope.performance.drawdown import calculate_drawdown_analysis
from folioscope.performance.metrics import (
    calculate_annual_returns,
    calculate_annualized_return,
    calculate_correlations,
    calculate_overall_metrics,
    calculate_total_return,
)
from folioscope.performance.models import (
    AnnualReturn,
    BenchmarkComparison,
    CorrelationMatrix,
    DrawdownAnalysis,
    DrawdownPeriod,
    OverallMetrics,
    PortfolioReport,
    RiskMetrics,
)
from folioscope.performance.risk import calculate_risk_metrics

__all__ = [
    "AnnualReturn",
    "BenchmarkComparison",
    "CorrelationMatrix",
    "DrawdownAnalysis",
    "DrawdownPeriod",
    "OverallMetrics",
    "PortfolioReport",
    "RiskMetrics",
    "analyze_csv_text",
    "analyze_portfolio",
    "calculate_annual_returns",
    "calculate_annualized_return",
    "calculate_benchmark_comparisons",
    "calculate_correlations",
    "calculate_drawdown_analysis",
    "calculate_overall_metrics",
    "calculate_risk_metrics",
    "calculate_total_return",
]
