"""Portfolio data ingestion: date normalization, CSV validation and records."""

from folioscope.data.csv_parser import (
    CSVParseError,
    load_portfolio_file,
    parse_csv,
    parse_csv_with_validation,
)
from folioscope.data.dates import InvalidDateFormat, normalize_date, parse_portfolio_date
from folioscope.data.models import ParseOutcome, PortfolioRecord

__all__ = [
    "CSVParseError",
    "InvalidDateFormat",
    "ParseOutcome",
    "PortfolioRecord",
    "load_portfolio_file",
    "normalize_date",
    "parse_csv",
    "parse_csv_with_validation",
    "parse_portfolio_date",
]
