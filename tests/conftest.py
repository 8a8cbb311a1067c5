"""Shared fixtures for folioscope tests."""

from decimal import Decimal
from pathlib import Path

import pytest

from folioscope.data.models import PortfolioRecord
from folioscope.system import LoggerFactory

CSV_TITLE = "Portfolio valuation export"
CSV_HEADER = (
    "Date,SHA,SHE,CSI300,Shares,Share Value,Gain/Loss,Daily Gain,Market Value,Principal"
)


def make_record(date: str, share_value, benchmarks=(3000, 10000, 3500), **fields) -> PortfolioRecord:
    """Build a record with sensible defaults for the latest-row fields."""
    a, b, c = benchmarks
    return PortfolioRecord(
        date=date,
        share_value=Decimal(str(share_value)),
        benchmark_a=Decimal(str(a)),
        benchmark_b=Decimal(str(b)),
        benchmark_c=Decimal(str(c)),
        **{name: Decimal(str(value)) for name, value in fields.items()},
    )


def make_series(values, start_day: int = 1, benchmarks=None) -> list[PortfolioRecord]:
    """Records on consecutive January 2015 days, one per share value."""
    records = []
    for i, value in enumerate(values):
        levels = benchmarks[i] if benchmarks is not None else (3000, 10000, 3500)
        records.append(make_record(f"2015-01-{start_day + i:02d}", value, levels))
    return records


def build_csv(*rows: str) -> str:
    """CSV text with the title and header lines followed by data rows."""
    return "\n".join([CSV_TITLE, CSV_HEADER, *rows]) + "\n"


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before and after each test."""
    LoggerFactory.reset()
    yield
    LoggerFactory.reset()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config lookup at an empty location so tests use built-in defaults."""
    monkeypatch.setenv("FOLIOSCOPE_CONFIG", str(tmp_path / "absent.yaml"))


@pytest.fixture
def sample_csv_text() -> str:
    """Three years of a small portfolio, DD/MM/YYYY dates."""
    return build_csv(
        "02/01/2014,2100.00,8000.00,2300.00,\"10,000.00\",1.0000,0.00,0.00,\"10,000.00\",\"10,000.00\"",
        "30/06/2014,2050.00,7600.00,2200.00,\"10,000.00\",0.9500,(500.00),(20.00),\"9,500.00\",\"10,000.00\"",
        "31/12/2014,3200.00,11000.00,3500.00,\"10,000.00\",1.1000,\"1,000.00\",30.00,\"11,000.00\",\"10,000.00\"",
        "30/06/2015,4200.00,14000.00,4400.00,\"10,000.00\",1.3000,\"3,000.00\",50.00,\"13,000.00\",\"10,000.00\"",
        "31/12/2015,3500.00,12500.00,3700.00,\"10,000.00\",1.2000,\"2,000.00\",(40.00),\"12,000.00\",\"10,000.00\"",
        "30/06/2016,2900.00,10000.00,3150.00,\"10,000.00\",1.0800,800.00,10.00,\"10,800.00\",\"10,000.00\"",
        "30/12/2016,3100.00,10200.00,3300.00,\"10,000.00\",1.2500,\"2,500.00\",25.00,\"12,500.00\",\"10,000.00\"",
    )


@pytest.fixture
def sample_csv_file(tmp_path: Path, sample_csv_text: str) -> Path:
    path = tmp_path / "portfolio.csv"
    path.write_text(sample_csv_text, encoding="utf-8")
    return path


@pytest.fixture
def record():
    """Factory fixture: record(date, share_value, benchmarks=..., **fields)."""
    return make_record


@pytest.fixture
def series():
    """Factory fixture: series(values, start_day=1, benchmarks=None)."""
    return make_series


@pytest.fixture
def csv_text():
    """Factory fixture: csv_text(*rows) adds the title and header lines."""
    return build_csv
