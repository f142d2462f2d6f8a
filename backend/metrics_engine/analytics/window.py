"""
Window Sampler - Extracts a gap-skipping series for one field.

For the N calendar days ending on ``as_of``, a day contributes its value only
when a record exists and the value is present (strictly positive). Missing
days are dropped, never interpolated or zero-filled. Output is oldest first.
"""
import logging
import threading
from datetime import date, timedelta
from typing import Optional

from metrics_engine.exceptions import InvalidWindow
from metrics_engine.schemas.context import MetricSeries, SeriesPoint
from metrics_engine.schemas.enums import MetricField
from metrics_engine.services.store import DailyMetricsStore

logger = logging.getLogger(__name__)


def window_start(as_of: date, days: int) -> date:
    """First day of the ``days``-long window ending on ``as_of``."""
    if days <= 0:
        raise InvalidWindow.for_length(days)
    try:
        return as_of - timedelta(days=days - 1)
    except OverflowError:
        raise InvalidWindow.before_calendar_start(as_of, days) from None


class WindowSampler:
    """Samples MetricSeries from a store, memoised per (field, days, as_of)."""

    def __init__(self, store: DailyMetricsStore, cache_enabled: bool = True, max_cache_size: int = 256):
        self.store = store
        self.cache_enabled = cache_enabled
        self.max_cache_size = max_cache_size
        self._cache: dict[tuple[MetricField, int, date], MetricSeries] = {}
        self._cache_version: Optional[int] = None
        self._lock = threading.Lock()

    @property
    def cached_entries(self) -> int:
        with self._lock:
            return len(self._cache)

    def sample(self, field: MetricField, days: int, as_of: date) -> MetricSeries:
        start = window_start(as_of, days)

        key = (field, days, as_of)
        if self.cache_enabled:
            with self._lock:
                self._invalidate_if_stale()
                cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Series cache hit", extra={"field": field.value, "days": days})
                return cached

        version = self.store.version
        series = self._build(field, days, start, as_of)

        if self.cache_enabled:
            with self._lock:
                # Drop the result if a write landed while we were sampling
                if version == self.store.version:
                    self._invalidate_if_stale()
                    self._store_in_cache(key, series)
        return series

    def _store_in_cache(self, key: tuple[MetricField, int, date], series: MetricSeries) -> None:
        # Evict oldest entries first; dicts keep insertion order
        while len(self._cache) >= self.max_cache_size:
            self._cache.pop(next(iter(self._cache)))
        self._cache[key] = series

    def _invalidate_if_stale(self) -> None:
        if self._cache_version != self.store.version:
            if self._cache:
                logger.debug("Series cache invalidated", extra={"entries": len(self._cache)})
            self._cache.clear()
            self._cache_version = self.store.version

    def _build(self, field: MetricField, days: int, start: date, as_of: date) -> MetricSeries:
        # One range read gives a consistent copy of the whole window
        by_day = {record.date: record for record in self.store.range(start, as_of)}

        points: list[SeriesPoint] = []
        for offset in range(days):
            day = as_of - timedelta(days=offset)
            record = by_day.get(day)
            if record is None:
                continue
            value = record.value(field)
            if value is not None and value > 0:
                points.append(SeriesPoint(date=day, value=value))
        points.reverse()

        logger.debug(
            "Sampled window",
            extra={
                "field": field.value,
                "days": days,
                "as_of": as_of.isoformat(),
                "points": len(points),
            },
        )
        return MetricSeries(field=field, days=days, as_of=as_of, points=tuple(points))
