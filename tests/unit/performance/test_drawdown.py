"""Tests for drawdown episode extraction."""

from decimal import Decimal

from folioscope.performance.drawdown import calculate_drawdown_analysis
from folioscope.performance.models import DrawdownAnalysis, DrawdownPeriod


class TestDrawdownAnalysis:
    """Test the drawdown state machine."""

    def test_fewer_than_two_records(self, series):
        """Test the degenerate case returns the empty sentinel."""
        analysis = calculate_drawdown_analysis(series([1.0]))

        assert analysis.all_drawdowns == []
        assert analysis.current_drawdown is None
        assert analysis.max_drawdown.drawdown_percent == Decimal("0")
        assert analysis.max_drawdown.start_date == ""

    def test_monotonic_increase_has_no_episodes(self, series):
        analysis = calculate_drawdown_analysis(series([1.00, 1.01, 1.02, 1.05]))

        assert analysis.all_drawdowns == []
        assert analysis.max_drawdown == DrawdownPeriod.empty()
        assert analysis.average_drawdown == Decimal("0")

    def test_single_recovered_episode(self, series):
        """Test 100, 90, 95, 110 is one closed 10% episode."""
        # Act
        analysis = calculate_drawdown_analysis(series([100, 90, 95, 110]))

        # Assert
        assert len(analysis.all_drawdowns) == 1
        episode = analysis.all_drawdowns[0]
        assert episode.start_date == "2015-01-01"
        assert episode.end_date == "2015-01-02"
        assert episode.recovery_date == "2015-01-04"
        assert episode.peak_value == Decimal("100")
        assert episode.trough_value == Decimal("90")
        assert episode.drawdown_percent == Decimal("10.00")
        assert episode.duration_days == 1
        assert episode.recovery_days == 2
        assert episode.recovered
        assert episode.total_days_underwater == 3
        assert analysis.current_drawdown is None
        assert analysis.max_drawdown == episode
        assert analysis.average_drawdown == Decimal("10.00")
        assert analysis.average_recovery_time == Decimal("2.0")

    def test_open_episode_is_current(self, series):
        """Test an episode with no recovery is current and still listed."""
        analysis = calculate_drawdown_analysis(series([100, 95, 90, 92]))

        assert analysis.current_drawdown is not None
        assert analysis.current_drawdown.recovery_date is None
        assert analysis.current_drawdown.recovery_days is None
        assert analysis.current_drawdown.end_date == "2015-01-03"
        assert analysis.all_drawdowns == [analysis.current_drawdown]
        assert analysis.average_recovery_time == Decimal("0")

    def test_deepest_point_is_trough(self, series):
        """Test a partial bounce does not move the trough; a deeper low does."""
        analysis = calculate_drawdown_analysis(series([100, 90, 95, 85, 101]))

        episode = analysis.all_drawdowns[0]
        assert episode.trough_value == Decimal("85")
        assert episode.end_date == "2015-01-04"
        assert episode.drawdown_percent == Decimal("15.00")

    def test_return_to_peak_does_not_recover(self, series):
        """Test recovery requires a value strictly above the peak."""
        analysis = calculate_drawdown_analysis(series([100, 90, 100, 95, 101]))

        assert len(analysis.all_drawdowns) == 1
        assert analysis.all_drawdowns[0].trough_value == Decimal("90")
        assert analysis.all_drawdowns[0].recovery_date == "2015-01-05"

    def test_noise_below_threshold_ignored(self, series):
        """Test declines of at most 0.1% never open an episode."""
        analysis = calculate_drawdown_analysis(series([100, 99.95, 101]))

        assert analysis.all_drawdowns == []

    def test_custom_threshold(self, series):
        analysis = calculate_drawdown_analysis(series([100, 98, 101]), threshold_pct=5.0)

        assert analysis.all_drawdowns == []

    def test_max_drawdown_ties_keep_first(self, series):
        analysis = calculate_drawdown_analysis(series([100, 90, 105, 94.5, 110]))

        assert len(analysis.all_drawdowns) == 2
        assert analysis.max_drawdown.start_date == "2015-01-01"

    def test_average_recovery_excludes_open_episode(self, series):
        """Test the open episode counts toward average drawdown but not recovery."""
        # Arrange: 10% closed after 1 day, then a 5.94% open decline
        records = series([100, 90, 101, 95])

        # Act
        analysis = calculate_drawdown_analysis(records)

        # Assert
        assert len(analysis.all_drawdowns) == 2
        assert analysis.current_drawdown is not None
        assert analysis.current_drawdown.drawdown_percent == Decimal("5.94")
        assert analysis.average_drawdown == Decimal("7.97")
        assert analysis.average_recovery_time == Decimal("1.0")
        assert analysis.max_drawdown.drawdown_percent == Decimal("10.00")


class TestRecentDrawdowns:
    """Test newest-first history."""

    def test_recent_orders_by_start_date_descending(self, series):
        analysis = calculate_drawdown_analysis(series([100, 90, 101, 95, 102, 97, 103]))

        recent = analysis.recent(2)

        assert [d.start_date for d in recent] == ["2015-01-05", "2015-01-03"]

    def test_recent_on_empty(self):
        assert DrawdownAnalysis().recent() == []
