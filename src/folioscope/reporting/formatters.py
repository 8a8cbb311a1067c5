"""Rich console formatters for portfolio reports.

Provides terminal display of a PortfolioReport with tables, colors and
rating labels using the Rich library.
"""

from decimal import Decimal
from typing import Literal

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

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
from folioscope.reporting.ratings import (
    describe_alpha,
    describe_beta,
    describe_recovery,
    describe_risk_profile,
    drawdown_risk_rating,
    drawdown_severity,
    sharpe_rating,
)

DetailLevel = Literal["summary", "standard", "full"]


def _format_pct(value: Decimal, precision: int = 2) -> str:
    """Format percentage."""
    return f"{float(value):.{precision}f}%"


def _format_amount(value: Decimal, precision: int = 2) -> str:
    """Format a money amount with thousands separators."""
    return f"{float(value):,.{precision}f}"


def _format_ratio(value: Decimal, precision: int = 3) -> str:
    return f"{float(value):.{precision}f}"


def _get_color(value: Decimal) -> str:
    """Get color based on positive/negative value."""
    if value > 0:
        return "green"
    elif value < 0:
        return "red"
    return "white"


def _colored_pct(value: Decimal) -> str:
    color = _get_color(value)
    return f"[{color}]{_format_pct(value)}[/{color}]"


def _create_summary_table(overall: OverallMetrics, record_count: int) -> Table:
    """Create overall performance table."""
    table = Table(title="📊 Portfolio Summary", show_header=False, box=None, padding=(0, 2))

    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Period", f"{overall.start_date} to {overall.end_date}")
    table.add_row("Records", f"{record_count:,}")
    table.add_row("", "")  # Spacer

    table.add_row("Total Return", _colored_pct(overall.total_return))
    table.add_row("Annualized Return", _colored_pct(overall.annualized_return))
    table.add_row("Share Value", _format_amount(overall.current_share_value, 4))
    table.add_row("", "")  # Spacer

    table.add_row("Shares", _format_amount(overall.total_shares))
    table.add_row("Market Value", _format_amount(overall.total_market_value))
    table.add_row("Principal", _format_amount(overall.total_principal))

    gain_color = _get_color(overall.total_gain_loss)
    table.add_row("Gain/Loss", f"[{gain_color}]{_format_amount(overall.total_gain_loss)}[/{gain_color}]")

    return table


def _create_risk_table(risk: RiskMetrics, risk_free_rate: Decimal) -> Table:
    """Create risk metrics table with rating labels."""
    table = Table(title="⚠️  Risk Metrics", show_header=False, box=None, padding=(0, 2))

    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Rating")

    sharpe = sharpe_rating(risk.sharpe_ratio)
    table.add_row("Sharpe Ratio", _format_ratio(risk.sharpe_ratio), f"[{sharpe.style}]{sharpe.label}[/{sharpe.style}]")
    table.add_row("Sortino Ratio", _format_ratio(risk.sortino_ratio), "")

    drawdown = drawdown_risk_rating(risk.max_drawdown)
    table.add_row(
        "Max Drawdown",
        f"[red]{_format_pct(risk.max_drawdown)}[/red]",
        f"[{drawdown.style}]{drawdown.label}[/{drawdown.style}]",
    )
    table.add_row("Volatility (Annual)", _format_pct(risk.volatility), "")
    table.add_row("Downside Deviation", _format_pct(risk.downside_deviation), "")
    table.add_row("Risk-Free Rate", _format_pct(risk_free_rate * 100), "")

    return table


def _create_annual_table(annual_returns: list[AnnualReturn], benchmark_names: list[str]) -> Table | None:
    """Create calendar-year returns table."""
    if not annual_returns:
        return None

    table = Table(title="📅 Annual Returns", box=None, padding=(0, 1))

    table.add_column("Year", style="cyan")
    table.add_column("Portfolio", justify="right")
    for name in benchmark_names:
        table.add_column(name, justify="right")

    for row in annual_returns:
        table.add_row(
            str(row.year),
            _colored_pct(row.portfolio_return),
            _colored_pct(row.benchmark_a_return),
            _colored_pct(row.benchmark_b_return),
            _colored_pct(row.benchmark_c_return),
        )

    return table


def _create_correlation_table(correlations: CorrelationMatrix, benchmark_names: list[str]) -> Table:
    """Create correlation table."""
    table = Table(title="🔗 Correlation with Benchmarks", show_header=False, box=None, padding=(0, 2), min_width=40)

    table.add_column("Benchmark", style="cyan")
    table.add_column("Correlation", justify="right")

    coefficients = [correlations.benchmark_a, correlations.benchmark_b, correlations.benchmark_c]
    for name, coefficient in zip(benchmark_names, coefficients):
        table.add_row(name, _format_ratio(coefficient, 4))

    return table


def _create_benchmark_table(comparisons: list[BenchmarkComparison]) -> Table | None:
    """Create portfolio versus benchmark table."""
    if not comparisons:
        return None

    table = Table(title="🎯 Benchmark Comparison", box=None, padding=(0, 1))

    table.add_column("Benchmark", style="cyan")
    table.add_column("Portfolio", justify="right")
    table.add_column("Benchmark", justify="right")
    table.add_column("Active", justify="right")
    table.add_column("Alpha", justify="right")
    table.add_column("Beta", justify="right")
    table.add_column("Tracking Error", justify="right")
    table.add_column("Info Ratio", justify="right")

    for comparison in comparisons:
        table.add_row(
            comparison.benchmark,
            _colored_pct(comparison.portfolio_return),
            _colored_pct(comparison.benchmark_return),
            _colored_pct(comparison.active_return),
            _colored_pct(comparison.alpha),
            _format_ratio(comparison.beta),
            _format_pct(comparison.tracking_error),
            _format_ratio(comparison.information_ratio),
        )

    return table


def _create_benchmark_notes(comparisons: list[BenchmarkComparison]) -> Text:
    notes = Text()
    for comparison in comparisons:
        notes.append(f"{comparison.benchmark}: ", style="bold")
        notes.append(f"beta {_format_ratio(comparison.beta)} {describe_beta(comparison.beta).lower()}; ")
        notes.append(f"alpha {_format_pct(comparison.alpha)} {describe_alpha(comparison.alpha).lower()}\n")
    return notes


def _create_drawdown_summary_table(analysis: DrawdownAnalysis) -> Table:
    """Create drawdown aggregate table."""
    table = Table(title="📉 Drawdown Analysis", show_header=False, box=None, padding=(0, 2))

    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    deepest = analysis.max_drawdown
    severity = drawdown_severity(deepest.drawdown_percent)
    table.add_row(
        "Max Drawdown",
        f"[red]{_format_pct(deepest.drawdown_percent)}[/red] [{severity.style}]({severity.label})[/{severity.style}]",
    )
    if deepest.start_date:
        table.add_row("Max DD Period", f"{deepest.start_date} to {deepest.end_date}")
        table.add_row("Max DD Duration", f"{deepest.duration_days} days")
        if deepest.recovery_days is not None:
            table.add_row("Max DD Recovery", f"{deepest.recovery_days} days (recovered {deepest.recovery_date})")

    table.add_row("Episodes", str(len(analysis.all_drawdowns)))
    table.add_row("Avg Drawdown", _format_pct(analysis.average_drawdown))
    table.add_row("Avg Recovery", f"{float(analysis.average_recovery_time):.1f} days")

    if analysis.current_drawdown is not None:
        current = analysis.current_drawdown
        table.add_row(
            "Current Drawdown",
            f"[red]{_format_pct(current.drawdown_percent)}[/red] since {current.start_date}",
        )

    return table


def _create_drawdown_table(drawdowns: list[DrawdownPeriod], max_rows: int = 5) -> Table | None:
    """Create recent drawdowns table."""
    if not drawdowns:
        return None

    table = Table(title=f"📉 Recent {len(drawdowns)} Drawdowns", box=None, padding=(0, 1))

    table.add_column("Start", style="cyan")
    table.add_column("Trough")
    table.add_column("Depth", justify="right", style="red")
    table.add_column("Severity")
    table.add_column("Duration", justify="right")
    table.add_column("Recovery", justify="right")
    table.add_column("Status", justify="center")

    for dd in drawdowns[:max_rows]:
        status = "✅" if dd.recovered else "🔴"
        recovery_str = f"{dd.recovery_days} days" if dd.recovery_days is not None else "—"
        severity = drawdown_severity(dd.drawdown_percent)

        table.add_row(
            dd.start_date,
            dd.end_date,
            _format_pct(dd.drawdown_percent),
            f"[{severity.style}]{severity.label}[/{severity.style}]",
            f"{dd.duration_days} days",
            recovery_str,
            status,
        )

    return table


def _create_insights_text(analysis: DrawdownAnalysis) -> Text:
    insights = Text()
    insights.append("Analysis: ", style="bold")
    insights.append(describe_risk_profile(analysis.max_drawdown.drawdown_percent))

    recovery = describe_recovery(analysis.average_recovery_time)
    if recovery is not None:
        insights.append("\nRecovery Pattern: ", style="bold")
        insights.append(recovery)

    return insights


def display_portfolio_report(
    report: PortfolioReport,
    detail_level: DetailLevel = "standard",
    console: Console | None = None,
    drawdown_history_rows: int = 5,
) -> None:
    """
    Display a portfolio report in Rich-formatted console output.

    Args:
        report: Complete portfolio analysis
        detail_level: Level of detail to display:
            - "summary": Overall figures and risk metrics
            - "standard": Summary + annual returns, benchmarks, drawdowns
            - "full": Everything including correlations, drawdown history
              and interpretation notes
        console: Rich Console instance (creates new if None)
        drawdown_history_rows: Rows in the recent drawdowns table

    Example:
        >>> report = analyze_portfolio(records)
        >>> display_portfolio_report(report, detail_level="full")
    """
    if console is None:
        console = Console()

    console.print()  # Blank line

    if report.overall is None:
        console.print(Panel("No records to analyze", border_style="red"))
        return

    # Always show summary
    console.print(_create_summary_table(report.overall, report.record_count))
    console.print()
    console.print(_create_risk_table(report.risk, report.risk_free_rate))
    console.print()

    if detail_level in ["standard", "full"]:
        table = _create_annual_table(report.annual_returns, report.benchmark_names)
        if table:
            console.print(table)
            console.print()

        table = _create_benchmark_table(report.benchmarks)
        if table:
            console.print(table)
            console.print()

        console.print(_create_drawdown_summary_table(report.drawdowns))
        console.print()

    if detail_level == "full":
        console.print(_create_correlation_table(report.correlations, report.benchmark_names))
        console.print()

        if report.benchmarks:
            console.print(Panel(_create_benchmark_notes(report.benchmarks), title="Benchmark Notes", border_style="blue"))
            console.print()

        # History needs two or more episodes
        if len(report.drawdowns.all_drawdowns) > 1:
            table = _create_drawdown_table(report.drawdowns.recent(drawdown_history_rows), drawdown_history_rows)
            if table:
                console.print(table)
                console.print()

        console.print(Panel(_create_insights_text(report.drawdowns), title="Insights", border_style="cyan"))
        console.print()

    if report.warnings:
        console.print(
            Panel(
                "\n".join(escape(w) for w in report.warnings),
                title=f"⚠️  {len(report.warnings)} Warning(s)",
                border_style="yellow",
            )
        )
        console.print()

    # Final summary panel
    overall = report.overall
    summary_text = Text()
    summary_text.append("🏁 Analysis Complete: ", style="bold")
    summary_text.append(f"{overall.start_date} → {overall.end_date}", style="bold cyan")
    summary_text.append(f" ({_format_pct(overall.total_return)})", style=f"bold {_get_color(overall.total_return)}")

    console.print(Panel(summary_text, border_style="green" if overall.total_return > 0 else "red"))
    console.print()
