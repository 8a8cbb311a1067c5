"""Portfolio analysis command."""

import json
import sys
from pathlib import Path
from typing import Literal, Optional, cast

import click
from rich.console import Console
from rich.markup import escape

from folioscope.data.csv_parser import load_portfolio_file
from folioscope.performance.analyzer import analyze_portfolio
from folioscope.reporting.formatters import display_portfolio_report
from folioscope.system import LoggerFactory
from folioscope.system.config import reload_system_config

console = Console()


@click.command("analyze")
@click.option(
    "--file",
    "-f",
    "data_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Path to portfolio CSV export",
)
@click.option(
    "--risk-free-rate",
    type=float,
    help="Override annual risk-free rate as a fraction (0.03 = 3%)",
)
@click.option(
    "--detail",
    "-d",
    type=click.Choice(["summary", "standard", "full"], case_sensitive=False),
    help="Report detail level (default from config)",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the report as JSON instead of tables",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to folioscope YAML config",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Set logging level (DEBUG shows per-row parse details)",
)
def analyze_command(
    data_file: Path,
    risk_free_rate: Optional[float],
    detail: Optional[str],
    as_json: bool,
    config_file: Optional[Path],
    log_level: Optional[str],
):
    """
    Analyze a portfolio valuation CSV.

    Parses the export, runs every analysis engine and prints the report.
    Any row error aborts the analysis with exit code 1; warnings are shown
    alongside the report.

    \b
    Examples:
        # Standard report
        folioscope analyze --file data/portfolio.csv

        # Everything, with a 2% risk-free rate
        folioscope analyze -f data/portfolio.csv --detail full --risk-free-rate 0.02

        # Machine-readable output
        folioscope analyze -f data/portfolio.csv --json
    """
    system_config = reload_system_config(config_file)

    if log_level:
        system_config.logging.level = log_level.upper()
    LoggerFactory.configure(system_config.logging.to_logger_config())

    if risk_free_rate is not None:
        system_config.analysis.risk_free_rate = risk_free_rate

    detail_level = cast(Literal["summary", "standard", "full"], (detail or system_config.output.detail_level).lower())

    try:
        outcome = load_portfolio_file(data_file)

        if not outcome.is_valid:
            console.print(f"[bold red]✗ Could not analyze {data_file.name}:[/bold red]")
            for error in outcome.errors:
                console.print(f"  [red]•[/red] {escape(error)}")
            sys.exit(1)

        report = analyze_portfolio(outcome.records, config=system_config.analysis, warnings=outcome.warnings)

        if as_json:
            click.echo(json.dumps(report.to_dict(), indent=2))
            return

        console.rule(f"[bold blue]Portfolio Analysis: {data_file.name}[/bold blue]")
        display_portfolio_report(
            report,
            detail_level=detail_level,
            console=console,
            drawdown_history_rows=system_config.output.drawdown_history_rows,
        )

    except Exception as e:
        console.print()
        console.print(f"[bold red]✗ Analysis failed:[/bold red] {escape(str(e))}")
        import traceback

        console.print()
        console.print("[dim]" + escape(traceback.format_exc()) + "[/dim]")
        sys.exit(1)
