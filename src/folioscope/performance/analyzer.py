"""Full portfolio analysis.

Runs every engine over one record sequence and collects the results into a
PortfolioReport. The engines are independent; each sees the same records.

Usage:
    >>> from folioscope.performance.analyzer import analyze_csv_text
    >>> outcome, report = analyze_csv_text(text)
    >>> report.risk.sharpe_ratio
    Decimal('0.812')
"""

import time
from decimal import Decimal
from typing import Iterable, Sequence

from folioscope.data.csv_parser import parse_csv_with_validation
from folioscope.data.models import ParseOutcome, PortfolioRecord
from folioscope.performance.benchmark import calculate_benchmark_comparisons
from folioscope.performance.drawdown import calculate_drawdown_analysis
from folioscope.performance.metrics import (
    calculate_annual_returns,
    calculate_correlations,
    calculate_overall_metrics,
)
from folioscope.performance.models import PortfolioReport
from folioscope.performance.risk import calculate_risk_metrics
from folioscope.system import LoggerFactory
from folioscope.system.config import AnalysisConfig

logger = LoggerFactory.get_logger()


def analyze_portfolio(
    records: Sequence[PortfolioRecord],
    config: AnalysisConfig | None = None,
    warnings: Iterable[str] = (),
) -> PortfolioReport:
    """
    Run every analysis engine over the records.

    Args:
        records: Records in ascending date order
        config: Analysis constants (defaults when None)
        warnings: Parser warnings carried into the report

    Returns:
        PortfolioReport
    """
    if config is None:
        config = AnalysisConfig()

    logger.info("analyzer.started", records=len(records), risk_free_rate=config.risk_free_rate)
    start = time.perf_counter()

    report = PortfolioReport(
        record_count=len(records),
        risk_free_rate=Decimal(str(config.risk_free_rate)),
        overall=calculate_overall_metrics(records),
        annual_returns=calculate_annual_returns(records),
        correlations=calculate_correlations(records),
        benchmark_names=list(config.benchmark_names),
        risk=calculate_risk_metrics(
            records,
            risk_free_rate=config.risk_free_rate,
            trading_days=config.trading_days_per_year,
        ),
        benchmarks=calculate_benchmark_comparisons(
            records,
            benchmark_names=config.benchmark_names,
            risk_free_pct=config.benchmark_risk_free_pct,
            trading_days=config.trading_days_per_year,
        ),
        drawdowns=calculate_drawdown_analysis(records, threshold_pct=config.drawdown_threshold_pct),
        warnings=list(warnings),
    )

    logger.info(
        "analyzer.completed",
        records=report.record_count,
        total_return=str(report.overall.total_return) if report.overall else None,
        sharpe=str(report.risk.sharpe_ratio),
        start_date=report.overall.start_date if report.overall else None,
        end_date=report.overall.end_date if report.overall else None,
        drawdowns=len(report.drawdowns.all_drawdowns),
        duration_seconds=round(time.perf_counter() - start, 6),
    )
    return report


def analyze_csv_text(text: str, config: AnalysisConfig | None = None) -> tuple[ParseOutcome, PortfolioReport | None]:
    """
    Parse CSV text and analyze it when the parse is usable.

    Returns:
        (outcome, report); report is None when the outcome has errors
    """
    outcome = parse_csv_with_validation(text)
    if not outcome.is_valid:
        logger.warning("analyzer.skipped", errors=len(outcome.errors))
        return outcome, None
    return outcome, analyze_portfolio(outcome.records, config=config, warnings=outcome.warnings)
