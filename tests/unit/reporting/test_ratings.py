"""Tests for report rating labels."""

from decimal import Decimal

import pytest

from folioscope.reporting.ratings import (
    describe_alpha,
    describe_beta,
    describe_recovery,
    describe_risk_profile,
    drawdown_risk_rating,
    drawdown_severity,
    sharpe_rating,
)


class TestSharpeRating:
    @pytest.mark.parametrize(
        "value, label",
        [("1.6", "Excellent"), ("1.5", "Good"), ("1.01", "Good"), ("1.0", "Fair"), ("0.5", "Poor"), ("-0.2", "Poor")],
    )
    def test_thresholds(self, value, label):
        """Test bounds are exclusive: exactly 1.5 is Good, not Excellent."""
        assert sharpe_rating(Decimal(value)).label == label


class TestDrawdownRatings:
    @pytest.mark.parametrize(
        "value, label",
        [("4.99", "Low Risk"), ("5", "Moderate Risk"), ("15", "High Risk"), ("25", "Very High Risk")],
    )
    def test_drawdown_risk(self, value, label):
        assert drawdown_risk_rating(Decimal(value)).label == label

    @pytest.mark.parametrize(
        "value, label",
        [("20", "Severe"), ("19.99", "Moderate"), ("10", "Moderate"), ("5", "Minor"), ("4.99", "Minimal")],
    )
    def test_severity(self, value, label):
        """Test severity bounds are inclusive."""
        assert drawdown_severity(Decimal(value)).label == label

    def test_rating_carries_style(self):
        assert drawdown_severity(Decimal("25")).style == "bold red"


class TestDescriptions:
    def test_beta(self):
        assert describe_beta(Decimal("1.2")) == "More volatile than benchmark"
        assert describe_beta(Decimal("0.8")) == "Less volatile than benchmark"
        assert describe_beta(Decimal("1.1")) == "Similar volatility to benchmark"

    def test_alpha(self):
        assert describe_alpha(Decimal("2.5")) == "Strong outperformance"
        assert describe_alpha(Decimal("0.5")) == "Modest outperformance"
        assert describe_alpha(Decimal("-2.5")) == "Significant underperformance"
        assert describe_alpha(Decimal("-1")) == "In line with expected returns"

    def test_recovery(self):
        """Test no recovered episode means no recovery pattern."""
        assert describe_recovery(Decimal("0")) is None
        assert describe_recovery(Decimal("400")).startswith("Slow")
        assert describe_recovery(Decimal("200")).startswith("Moderate")
        assert describe_recovery(Decimal("100")).startswith("Good")
        assert describe_recovery(Decimal("30")).startswith("Quick")

    def test_risk_profile(self):
        assert describe_risk_profile(Decimal("31")).startswith("High risk")
        assert describe_risk_profile(Decimal("16")).startswith("Moderate risk")
        assert describe_risk_profile(Decimal("6")).startswith("Relatively stable")
        assert describe_risk_profile(Decimal("5")).startswith("Very stable")
