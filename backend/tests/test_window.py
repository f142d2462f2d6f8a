"""Tests for WindowSampler."""
from datetime import date, timedelta

import pytest

from metrics_engine.analytics.window import WindowSampler, window_start
from metrics_engine.exceptions import InvalidWindow
from metrics_engine.schemas.enums import MetricField
from metrics_engine.schemas.metrics import DailyMetrics
from metrics_engine.services.store import InMemoryMetricsStore

TODAY = date(2024, 3, 15)


def day(offset: int) -> date:
    return TODAY - timedelta(days=offset)


class TestSampling:
    """Tests for gap skipping and ordering."""

    def test_series_is_oldest_first(self):
        store = InMemoryMetricsStore([
            DailyMetrics(date=day(0), step_count=3000),
            DailyMetrics(date=day(1), step_count=2000),
            DailyMetrics(date=day(2), step_count=1000),
        ])
        series = WindowSampler(store).sample(MetricField.STEP_COUNT, 3, TODAY)

        assert series.values == [1000, 2000, 3000]
        assert [p.date for p in series.points] == [day(2), day(1), day(0)]

    def test_missing_days_are_skipped(self):
        store = InMemoryMetricsStore([
            DailyMetrics(date=day(0), hrv=50),
            DailyMetrics(date=day(3), hrv=40),
        ])
        series = WindowSampler(store).sample(MetricField.HRV, 7, TODAY)

        assert series.values == [40, 50]

    def test_zero_values_are_skipped(self):
        store = InMemoryMetricsStore([
            DailyMetrics(date=day(0), resting_heart_rate=60),
            DailyMetrics(date=day(1), resting_heart_rate=0),
            DailyMetrics(date=day(2), resting_heart_rate=58),
        ])
        series = WindowSampler(store).sample(MetricField.RESTING_HEART_RATE, 3, TODAY)

        assert series.values == [58, 60]

    def test_days_outside_window_are_ignored(self):
        store = InMemoryMetricsStore([
            DailyMetrics(date=day(0), sleep_hours=7),
            DailyMetrics(date=day(5), sleep_hours=8),
            DailyMetrics(date=TODAY + timedelta(days=1), sleep_hours=9),
        ])
        series = WindowSampler(store).sample(MetricField.SLEEP_HOURS, 5, TODAY)

        assert series.values == [7]

    def test_empty_store_gives_empty_series(self):
        series = WindowSampler(InMemoryMetricsStore()).sample(MetricField.VO2_MAX, 90, TODAY)

        assert len(series) == 0
        assert series.values == []
        assert series.days == 90
        assert series.as_of == TODAY

    @pytest.mark.parametrize("days", [0, -1, -14])
    def test_non_positive_window_raises(self, days):
        with pytest.raises(InvalidWindow) as exc_info:
            WindowSampler(InMemoryMetricsStore()).sample(MetricField.HRV, days, TODAY)
        assert exc_info.value.code == "INVALID_WINDOW"


class TestSeriesCache:
    """Tests for memoisation and invalidation on write."""

    def test_repeated_sample_is_cached(self):
        store = InMemoryMetricsStore([DailyMetrics(date=TODAY, hrv=50)])
        sampler = WindowSampler(store)

        first = sampler.sample(MetricField.HRV, 7, TODAY)
        second = sampler.sample(MetricField.HRV, 7, TODAY)

        assert first is second

    def test_write_invalidates_cache(self):
        store = InMemoryMetricsStore([DailyMetrics(date=day(1), hrv=50)])
        sampler = WindowSampler(store)
        assert sampler.sample(MetricField.HRV, 7, TODAY).values == [50]

        store.put(DailyMetrics(date=TODAY, hrv=55))

        assert sampler.sample(MetricField.HRV, 7, TODAY).values == [50, 55]

    def test_intraday_update_replaces_value(self):
        store = InMemoryMetricsStore([DailyMetrics(date=TODAY, step_count=1200)])
        sampler = WindowSampler(store)
        sampler.sample(MetricField.STEP_COUNT, 1, TODAY)

        store.put(DailyMetrics(date=TODAY, step_count=5400))

        assert sampler.sample(MetricField.STEP_COUNT, 1, TODAY).values == [5400]

    def test_cache_disabled_rebuilds(self):
        store = InMemoryMetricsStore([DailyMetrics(date=TODAY, hrv=50)])
        sampler = WindowSampler(store, cache_enabled=False)

        first = sampler.sample(MetricField.HRV, 7, TODAY)
        second = sampler.sample(MetricField.HRV, 7, TODAY)

        assert first is not second
        assert first == second

    def test_keys_include_as_of(self):
        store = InMemoryMetricsStore([
            DailyMetrics(date=day(0), hrv=50),
            DailyMetrics(date=day(1), hrv=40),
        ])
        sampler = WindowSampler(store)

        assert sampler.sample(MetricField.HRV, 1, TODAY).values == [50]
        assert sampler.sample(MetricField.HRV, 1, day(1)).values == [40]

    def test_cache_is_bounded(self):
        store = InMemoryMetricsStore([DailyMetrics(date=day(i), hrv=40 + i) for i in range(10)])
        sampler = WindowSampler(store, max_cache_size=3)

        for i in range(10):
            sampler.sample(MetricField.HRV, 7, day(i))

        assert sampler.cached_entries == 3
        # Most recent keys survive eviction
        assert sampler.sample(MetricField.HRV, 7, day(9)) is sampler.sample(MetricField.HRV, 7, day(9))


class TestWindowStart:
    """Tests for window start computation."""

    def test_start(self):
        assert window_start(TODAY, 7) == day(6)
        assert window_start(TODAY, 1) == TODAY

    def test_non_positive(self):
        with pytest.raises(InvalidWindow):
            window_start(TODAY, 0)

    def test_before_first_representable_date(self):
        with pytest.raises(InvalidWindow) as exc_info:
            window_start(date(1, 1, 5), 30)
        assert exc_info.value.details == {"days": 30, "as_of": "0001-01-05"}

    def test_sampler_rejects_huge_window(self):
        with pytest.raises(InvalidWindow):
            WindowSampler(InMemoryMetricsStore()).sample(MetricField.HRV, 10**7, TODAY)
