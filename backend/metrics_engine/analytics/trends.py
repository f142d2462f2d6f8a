"""Percent trends over sampled series."""
from statistics import mean
from typing import Optional, Sequence, Union

from metrics_engine.schemas.context import MetricSeries
from metrics_engine.schemas.enums import TrendDirection
from metrics_engine.services.scoring_config import TrendConfig

Series = Union[MetricSeries, Sequence[float]]


def series_values(series: Series) -> list[float]:
    if isinstance(series, MetricSeries):
        return series.values
    return list(series)


def _signed(change: float, invert: bool) -> float:
    if change == 0:
        return 0.0
    return -change if invert else change


def percent_change(previous: Optional[float], current: Optional[float]) -> Optional[float]:
    """Percent change from ``previous`` to ``current``; None without a usable base."""
    if previous is None or current is None or previous == 0:
        return None
    return (current - previous) / previous * 100


def percent_trend(series: Series, invert: bool = False) -> float:
    """
    Change between the two most recent samples, in percent.

    Fewer than two samples, or a zero previous sample, give 0. With
    ``invert`` the sign is flipped so a positive result always means
    "improving" for metrics where lower is better.
    """
    values = series_values(series)
    if len(values) < 2:
        return 0.0
    change = percent_change(values[-2], values[-1])
    if change is None:
        return 0.0
    return _signed(change, invert)


def window_trend(series: Series, span: int = 3, invert: bool = False) -> float:
    """Mean of the newest ``span`` samples against the mean of the oldest ``span``."""
    values = series_values(series)
    if len(values) < 2 or span <= 0:
        return 0.0
    older = mean(values[:span])
    recent = mean(values[-span:])
    change = percent_change(older, recent)
    if change is None:
        return 0.0
    return _signed(change, invert)


def trend_direction(percent: float, stable_threshold: float = 2.0) -> TrendDirection:
    """Interpret an (already inverted, if needed) trend percentage."""
    if abs(percent) < stable_threshold:
        return TrendDirection.STABLE
    return TrendDirection.IMPROVING if percent > 0 else TrendDirection.DECLINING


class TrendCalculator:
    """Trend helpers bound to one TrendConfig."""

    def __init__(self, config: Optional[TrendConfig] = None):
        self.config = config or TrendConfig()

    def percent_trend(self, series: Series, invert: bool = False) -> float:
        return percent_trend(series, invert=invert)

    def window_trend(self, series: Series, invert: bool = False) -> float:
        return window_trend(series, span=self.config.window_span, invert=invert)

    def direction(self, percent: float) -> TrendDirection:
        return trend_direction(percent, self.config.stable_threshold_percent)
