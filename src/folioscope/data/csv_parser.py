"""Portfolio CSV parser with row-level validation.

Reads the spreadsheet export of a portfolio valuation series:

    line 1   title (ignored)
    line 2   column headers (ignored)
    line 3+  date, benchmark_a, benchmark_b, benchmark_c, shares, share_value,
             gain_loss, daily_gain, market_value, principal[, extra columns...]

Problems are collected rather than raised. Errors make the batch unusable
(too few columns, bad or missing date, empty file); warnings leave it usable
(blank rows, bad numbers defaulted to zero, non-positive share value rows
skipped, negative share counts, dates out of order). One bad row never
discards the rest.

Numbers follow the accounting convention: "(1,234.50)" is -1234.50.

Example:
    >>> outcome = parse_csv_with_validation(text)
    >>> if outcome.is_valid:
    ...     analyze(outcome.records)
    >>> records = parse_csv(text)  # raises CSVParseError on any error
"""

import csv
import re
from decimal import Decimal, InvalidOperation
from pathlib import Path

from folioscope.data.dates import InvalidDateFormat, normalize_date
from folioscope.data.models import ParseOutcome, PortfolioRecord
from folioscope.system import LoggerFactory

logger = LoggerFactory.get_logger()

HEADER_LINES = 2
MIN_COLUMNS = 10

# Column index -> (record field, display name)
NUMERIC_COLUMNS: dict[int, tuple[str, str]] = {
    1: ("benchmark_a", "benchmark A"),
    2: ("benchmark_b", "benchmark B"),
    3: ("benchmark_c", "benchmark C"),
    4: ("shares", "shares"),
    5: ("share_value", "share value"),
    6: ("gain_loss", "gain/loss"),
    7: ("daily_gain", "daily gain"),
    8: ("market_value", "market value"),
    9: ("principal", "principal"),
}

_ACCOUNTING_NOISE = re.compile(r"[(),\s]")


class CSVParseError(ValueError):
    """Raised by parse_csv when the batch contains fatal errors."""

    def __init__(self, errors: list[str], warnings: list[str] | None = None):
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        super().__init__(f"CSV parsing errors: {', '.join(self.errors)}")


def parse_numeric(value: str, field_name: str, line_number: int, warnings: list[str]) -> Decimal:
    """
    Parse a numeric field using the accounting convention.

    Parentheses mark a negative number; commas and whitespace are dropped.
    An empty field is zero. An unparseable field is zero plus a warning.
    """
    if not value:
        return Decimal("0")

    is_negative = "(" in value
    clean = _ACCOUNTING_NOISE.sub("", value)

    try:
        parsed = Decimal(clean)
    except InvalidOperation:
        parsed = None

    if parsed is None or not parsed.is_finite():
        warnings.append(f"Row {line_number}: Invalid {field_name} '{value}', using 0")
        return Decimal("0")

    return -parsed if is_negative else parsed


def _split_row(line: str) -> list[str]:
    return [field.strip() for field in next(csv.reader([line]), [])]


def _parse_row(line: str, line_number: int, errors: list[str], warnings: list[str]) -> PortfolioRecord | None:
    """Parse a single data row, appending problems to errors/warnings."""
    if not line.strip():
        warnings.append(f"Row {line_number}: Empty row skipped")
        return None

    values = _split_row(line)

    if all(value == "" for value in values):
        warnings.append(f"Row {line_number}: Empty row skipped")
        return None

    if len(values) < MIN_COLUMNS:
        errors.append(f"Row {line_number}: Insufficient columns (expected {MIN_COLUMNS}, got {len(values)})")
        return None

    if not values[0]:
        errors.append(f"Row {line_number}: Date is required")
        return None

    try:
        row_date = normalize_date(values[0])
    except InvalidDateFormat as e:
        errors.append(f"Row {line_number}: {e}")
        return None

    fields = {
        name: parse_numeric(values[index], display, line_number, warnings)
        for index, (name, display) in NUMERIC_COLUMNS.items()
    }

    if fields["share_value"] <= 0:
        warnings.append(f"Row {line_number}: Share value must be positive ({fields['share_value']}), skipping row")
        return None

    if fields["shares"] < 0:
        warnings.append(f"Row {line_number}: Shares cannot be negative ({fields['shares']})")

    try:
        return PortfolioRecord(date=row_date, **fields)
    except ValueError as e:
        errors.append(f"Row {line_number}: Parsing error - {e}")
        return None


def _is_chronological(records: list[PortfolioRecord]) -> bool:
    return all(records[i].date >= records[i - 1].date for i in range(1, len(records)))


def parse_csv_with_validation(text: str) -> ParseOutcome:
    """
    Parse portfolio CSV text, collecting errors and warnings.

    Args:
        text: Raw CSV content

    Returns:
        ParseOutcome with accepted records (input order), errors and warnings
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not text or not text.strip():
        errors.append("CSV file is empty")
        logger.error("csv_parser.rejected", reason="empty file")
        return ParseOutcome(errors=errors)

    lines = [line.rstrip("\r") for line in text.strip().split("\n")]

    if len(lines) <= HEADER_LINES:
        errors.append(
            f"Insufficient rows: CSV file must have a title row, a header row and at least one data row "
            f"(got {len(lines)})"
        )
        logger.error("csv_parser.rejected", reason="insufficient rows", lines=len(lines))
        return ParseOutcome(errors=errors)

    records: list[PortfolioRecord] = []
    for offset, line in enumerate(lines[HEADER_LINES:]):
        line_number = offset + HEADER_LINES + 1
        record = _parse_row(line, line_number, errors, warnings)
        if record is not None:
            records.append(record)

    if not records and not errors:
        errors.append("No valid data rows found after parsing")

    if len(records) > 1 and not _is_chronological(records):
        warnings.append("Data is not in chronological order - this may affect analysis accuracy")

    for message in errors:
        logger.debug("csv_parser.row_error", reason=message)
    for message in warnings:
        logger.debug("csv_parser.row_warning", reason=message)

    logger.info(
        "csv_parser.completed",
        records=len(records),
        errors=len(errors),
        warnings=len(warnings),
    )

    return ParseOutcome(records=records, errors=errors, warnings=warnings)


def parse_csv(text: str) -> list[PortfolioRecord]:
    """
    Parse portfolio CSV text, all or nothing.

    Warnings never block success.

    Raises:
        CSVParseError: If any error was collected (message joins all errors)
    """
    outcome = parse_csv_with_validation(text)
    if outcome.errors:
        raise CSVParseError(outcome.errors, outcome.warnings)
    return outcome.records


def load_portfolio_file(path: Path | str) -> ParseOutcome:
    """Read a UTF-8 portfolio CSV file (BOM tolerated) and validate it."""
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        logger.error("csv_parser.rejected", reason="invalid encoding", path=str(file_path))
        return ParseOutcome(errors=[f"CSV file is not valid UTF-8 (byte {e.start}: {e.reason})"])
    logger.info("csv_parser.file_loaded", path=str(file_path), bytes=len(text))
    return parse_csv_with_validation(text)
