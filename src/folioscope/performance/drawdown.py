"""Drawdown episode extraction.

Single forward pass over the share value series. An episode opens when the
value falls more than the noise threshold below the running peak, keeps
its deepest point, and closes on the first value strictly above that peak.
An episode still open at the end of the series is the current drawdown.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from folioscope.data.models import PortfolioRecord
from folioscope.performance.metrics import TWO_PLACES, round_decimal
from folioscope.performance.models import DrawdownAnalysis, DrawdownPeriod
from folioscope.system import LoggerFactory

logger = LoggerFactory.get_logger()

DEFAULT_THRESHOLD_PCT = 0.1
ONE_PLACE = Decimal("0.1")


@dataclass
class _EpisodeState:
    """Mutable scan state; never escapes this module."""

    peak: PortfolioRecord
    in_drawdown: bool = False
    trough: PortfolioRecord | None = None
    deepest_pct: float = 0.0


def _decline_pct(peak_value: Decimal, value: Decimal) -> float:
    if peak_value <= 0:
        return 0.0
    return float((peak_value - value) / peak_value) * 100


def _build_period(peak: PortfolioRecord, trough: PortfolioRecord, recovery: PortfolioRecord | None) -> DrawdownPeriod:
    return DrawdownPeriod(
        start_date=peak.date,
        end_date=trough.date,
        recovery_date=recovery.date if recovery is not None else None,
        peak_value=peak.share_value,
        trough_value=trough.share_value,
        drawdown_percent=round_decimal(_decline_pct(peak.share_value, trough.share_value), TWO_PLACES),
        duration_days=(trough.trade_date - peak.trade_date).days,
        recovery_days=(recovery.trade_date - trough.trade_date).days if recovery is not None else None,
    )


def calculate_drawdown_analysis(
    records: Sequence[PortfolioRecord],
    threshold_pct: float = DEFAULT_THRESHOLD_PCT,
) -> DrawdownAnalysis:
    """
    Segment the share value series into drawdown episodes.

    Args:
        records: Records in ascending date order
        threshold_pct: Declines at or below this percentage from peak are ignored

    Returns:
        DrawdownAnalysis; empty when fewer than two records are available

    Example:
        >>> analysis = calculate_drawdown_analysis(records)
        >>> analysis.max_drawdown.drawdown_percent
        Decimal('10.00')
    """
    if len(records) < 2:
        return DrawdownAnalysis()

    state = _EpisodeState(peak=records[0])
    episodes: list[DrawdownPeriod] = []

    for record in records[1:]:
        if record.share_value > state.peak.share_value:
            if state.in_drawdown and state.trough is not None:
                episodes.append(_build_period(state.peak, state.trough, record))
            state = _EpisodeState(peak=record)
            continue

        decline = _decline_pct(state.peak.share_value, record.share_value)
        if decline <= threshold_pct:
            continue

        if not state.in_drawdown:
            state.in_drawdown = True
            state.trough = record
            state.deepest_pct = decline
        elif decline > state.deepest_pct:
            state.trough = record
            state.deepest_pct = decline

    current = None
    if state.in_drawdown and state.trough is not None:
        current = _build_period(state.peak, state.trough, None)
        episodes.append(current)

    if not episodes:
        return DrawdownAnalysis()

    deepest = episodes[0]
    for episode in episodes[1:]:
        if episode.drawdown_percent > deepest.drawdown_percent:
            deepest = episode

    average_drawdown = sum(float(e.drawdown_percent) for e in episodes) / len(episodes)
    recovery_times = [e.recovery_days for e in episodes if e.recovery_days is not None]
    average_recovery = sum(recovery_times) / len(recovery_times) if recovery_times else 0.0

    logger.debug(
        "drawdown.extracted",
        episodes=len(episodes),
        open_episode=current is not None,
        max_drawdown=str(deepest.drawdown_percent),
    )

    return DrawdownAnalysis(
        max_drawdown=deepest,
        all_drawdowns=episodes,
        current_drawdown=current,
        average_drawdown=round_decimal(average_drawdown, TWO_PLACES),
        average_recovery_time=round_decimal(average_recovery, ONE_PLACE),
    )
