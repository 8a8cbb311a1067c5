"""Tests for the portfolio CSV parser."""

from decimal import Decimal

import pytest

from folioscope.data.csv_parser import (
    CSVParseError,
    load_portfolio_file,
    parse_csv,
    parse_csv_with_validation,
    parse_numeric,
)

GOOD_ROW = "20/01/2014,2000.00,7500.00,2200.00,1000.00,1.0000,0.00,0.00,1000.00,1000.00"


class TestParseNumeric:
    """Test accounting-style number parsing."""

    def test_plain_number(self):
        assert parse_numeric("1.2345", "share value", 3, []) == Decimal("1.2345")

    def test_thousands_separators_dropped(self):
        assert parse_numeric("1,234,567.89", "market value", 3, []) == Decimal("1234567.89")

    def test_parentheses_mean_negative(self):
        """Test (1,234.50) is -1234.50."""
        assert parse_numeric("(1,234.50)", "gain/loss", 3, []) == Decimal("-1234.50")

    def test_empty_is_zero_without_warning(self):
        warnings: list[str] = []

        assert parse_numeric("", "daily gain", 3, warnings) == Decimal("0")
        assert warnings == []

    def test_garbage_is_zero_with_warning(self):
        """Test an unparseable field becomes 0 and is reported."""
        warnings: list[str] = []

        result = parse_numeric("abc", "shares", 7, warnings)

        assert result == Decimal("0")
        assert warnings == ["Row 7: Invalid shares 'abc', using 0"]

    @pytest.mark.parametrize("token", ["NaN", "Infinity", "-inf"])
    def test_non_finite_is_zero_with_warning(self, token):
        warnings: list[str] = []

        assert parse_numeric(token, "principal", 4, warnings) == Decimal("0")
        assert len(warnings) == 1


class TestParseCsvWithValidation:
    """Test whole-file parsing, errors and warnings."""

    def test_valid_rows(self, csv_text):
        """Test a clean file yields records and nothing else."""
        outcome = parse_csv_with_validation(
            csv_text(GOOD_ROW, "21/01/2014,2010.00,7550.00,2210.00,1000.00,1.0100,10.00,10.00,1010.00,1000.00")
        )

        assert outcome.is_valid
        assert outcome.warnings == []
        assert [r.date for r in outcome.records] == ["2014-01-20", "2014-01-21"]
        assert outcome.records[1].share_value == Decimal("1.0100")
        assert outcome.records[1].benchmark_c == Decimal("2210.00")

    def test_quoted_fields_with_commas(self, sample_csv_text):
        """Test quoted thousands-separated amounts stay in one column."""
        outcome = parse_csv_with_validation(sample_csv_text)

        assert outcome.is_valid
        assert len(outcome.records) == 7
        assert outcome.records[0].market_value == Decimal("10000.00")
        assert outcome.records[1].gain_loss == Decimal("-500.00")

    def test_extra_columns_ignored(self, csv_text):
        outcome = parse_csv_with_validation(csv_text(GOOD_ROW + ",extra,more"))

        assert outcome.is_valid
        assert len(outcome.records) == 1

    def test_empty_text(self):
        """Test empty input is an error."""
        outcome = parse_csv_with_validation("   \n  ")

        assert outcome.errors == ["CSV file is empty"]
        assert outcome.records == []

    def test_header_only_is_insufficient_rows(self):
        """Test two lines (title and header) is an error."""
        outcome = parse_csv_with_validation("Title\nDate,SHA,SHE,CSI300\n")

        assert len(outcome.errors) == 1
        assert outcome.errors[0].startswith("Insufficient rows")
        assert outcome.records == []

    def test_insufficient_columns(self, csv_text):
        """Test a short row is an error naming the row and column count."""
        outcome = parse_csv_with_validation(csv_text(GOOD_ROW, "21/01/2014,1,2,3"))

        assert outcome.errors == ["Row 4: Insufficient columns (expected 10, got 4)"]
        assert not outcome.is_valid

    def test_missing_date(self, csv_text):
        outcome = parse_csv_with_validation(csv_text(",2000,7500,2200,1000,1.0,0,0,1000,1000"))

        assert outcome.errors[0] == "Row 3: Date is required"

    def test_invalid_date(self, csv_text):
        """Test a bad calendar date is an error for that row only."""
        outcome = parse_csv_with_validation(
            csv_text(GOOD_ROW, "29/02/2019,2000,7500,2200,1000,1.0,0,0,1000,1000")
        )

        assert len(outcome.errors) == 1
        assert outcome.errors[0].startswith("Row 4:")
        assert len(outcome.records) == 1

    def test_blank_row_skipped_with_warning(self, csv_text):
        outcome = parse_csv_with_validation(
            csv_text(GOOD_ROW, ",,,,,,,,,", "22/01/2014,2000,7500,2200,1000,1.02,0,0,1000,1000")
        )

        assert outcome.is_valid
        assert outcome.warnings == ["Row 4: Empty row skipped"]
        assert len(outcome.records) == 2

    def test_non_positive_share_value_skipped(self, csv_text):
        """Test share value <= 0 drops the row with a warning, not an error."""
        outcome = parse_csv_with_validation(
            csv_text(GOOD_ROW, "21/01/2014,2000,7500,2200,1000,0,0,0,1000,1000")
        )

        assert outcome.is_valid
        assert len(outcome.records) == 1
        assert outcome.warnings[0].startswith("Row 4: Share value must be positive")

    def test_negative_shares_kept_with_warning(self, csv_text):
        outcome = parse_csv_with_validation(
            csv_text("20/01/2014,2000,7500,2200,(5),1.0,0,0,1000,1000")
        )

        assert outcome.is_valid
        assert outcome.records[0].shares == Decimal("-5")
        assert outcome.warnings == ["Row 3: Shares cannot be negative (-5)"]

    def test_out_of_order_dates_warned_not_sorted(self, csv_text):
        """Test unsorted input gets one warning and keeps its order."""
        outcome = parse_csv_with_validation(
            csv_text(
                "22/01/2014,2000,7500,2200,1000,1.02,0,0,1000,1000",
                GOOD_ROW,
                "21/01/2014,2000,7500,2200,1000,1.01,0,0,1000,1000",
            )
        )

        assert outcome.is_valid
        assert outcome.warnings == ["Data is not in chronological order - this may affect analysis accuracy"]
        assert [r.date for r in outcome.records] == ["2014-01-22", "2014-01-20", "2014-01-21"]

    def test_no_surviving_rows(self, csv_text):
        """Test a file whose every row is skipped is an error."""
        outcome = parse_csv_with_validation(csv_text(",,,,,,,,,", "21/01/2014,2000,7500,2200,1000,0,0,0,0,0"))

        assert outcome.errors == ["No valid data rows found after parsing"]

    def test_windows_line_endings(self, csv_text):
        outcome = parse_csv_with_validation(csv_text(GOOD_ROW).replace("\n", "\r\n"))

        assert outcome.is_valid
        assert outcome.records[0].principal == Decimal("1000.00")

    def test_rows_split_on_newline_only(self, csv_text):
        """Test form feeds and Unicode line separators do not start a new row."""
        text = csv_text(GOOD_ROW).replace("Portfolio", "Portfolio\u2028Q1\x0c")

        outcome = parse_csv_with_validation(text)

        assert outcome.is_valid
        assert len(outcome.records) == 1


class TestParseCsv:
    """Test the all-or-nothing entry point."""

    def test_returns_records(self, sample_csv_text):
        records = parse_csv(sample_csv_text)

        assert len(records) == 7
        assert records[-1].date == "2016-12-30"

    def test_raises_with_all_errors(self, csv_text):
        """Test every error is carried by the exception."""
        with pytest.raises(CSVParseError) as exc_info:
            parse_csv(csv_text("bad,1,2", "21/01/2014,1,2"))

        assert len(exc_info.value.errors) == 2
        assert str(exc_info.value).startswith("CSV parsing errors: Row 3:")

    def test_warnings_do_not_block(self, csv_text):
        records = parse_csv(csv_text(GOOD_ROW, ",,,,,,,,,"))

        assert len(records) == 1


class TestLoadPortfolioFile:
    """Test reading CSV files from disk."""

    def test_loads_file(self, sample_csv_file):
        outcome = load_portfolio_file(sample_csv_file)

        assert outcome.is_valid
        assert len(outcome.records) == 7

    def test_tolerates_byte_order_mark(self, tmp_path, csv_text):
        """Test a UTF-8 BOM does not leak into the title line."""
        path = tmp_path / "bom.csv"
        path.write_text("\ufeff" + csv_text(GOOD_ROW), encoding="utf-8")

        outcome = load_portfolio_file(path)

        assert outcome.is_valid
        assert outcome.records[0].date == "2014-01-20"

    def test_non_utf8_file_is_an_error(self, tmp_path, csv_text):
        """Test undecodable bytes become a parse error instead of raising."""
        path = tmp_path / "latin.csv"
        path.write_bytes(csv_text(GOOD_ROW).replace("Portfolio", "Café portfolio").encode("latin-1"))

        outcome = load_portfolio_file(path)

        assert not outcome.is_valid
        assert outcome.records == []
        assert outcome.errors[0].startswith("CSV file is not valid UTF-8")
