"""Tests for CompositeScoreCalculator."""
import itertools
from datetime import date

import pytest

from metrics_engine.schemas.enums import ActivityWeightPreset, MetricField
from metrics_engine.schemas.metrics import DailyMetrics
from metrics_engine.services.scoring import CompositeScoreCalculator, capped_ratio, clamp_score, tier_points
from metrics_engine.services.scoring_config import ActivityScoreConfig, RecoveryScoreConfig, ScoringConfig

TODAY = date(2024, 3, 15)


def record(**values) -> DailyMetrics:
    return DailyMetrics(date=TODAY, **values)


@pytest.fixture
def calculator() -> CompositeScoreCalculator:
    return CompositeScoreCalculator()


class TestHealthScore:
    """Tests for the simple four-term health score."""

    def test_full_day_scores_100(self, calculator):
        m = record(step_count=10000, active_calories=500, sleep_hours=8, resting_heart_rate=65)
        result = calculator.health_score(m)

        assert result.score == 100
        assert result.components == {"steps": 35.0, "sleep": 25.0, "calories": 25.0, "heart_rate": 15.0}

    def test_terms_are_capped(self, calculator):
        m = record(step_count=30000, active_calories=2000, sleep_hours=12, resting_heart_rate=50)
        assert calculator.health_score(m).score == 100

    def test_near_miss_is_not_perfect(self, calculator):
        m = record(step_count=9990, active_calories=500, sleep_hours=8, resting_heart_rate=65)
        # 34.965 + 25 + 25 + 15 truncates to 99
        assert calculator.health_score(m).score == 99

    def test_partial_day(self, calculator):
        m = record(step_count=5000, sleep_hours=4)
        # 17.5 + 12.5, no calories, no heart-rate bonus
        assert calculator.health_score(m).score == 30

    def test_zero_resting_heart_rate_earns_no_bonus(self, calculator):
        m = record(step_count=10000, active_calories=500, sleep_hours=8, resting_heart_rate=0)
        assert calculator.health_score(m).score == 85


class TestReadinessScore:
    """Tests for the six-term readiness variant."""

    def test_full_day_scores_100(self, calculator):
        m = record(
            step_count=10000,
            active_calories=500,
            sleep_hours=8,
            resting_heart_rate=60,
            sleep_quality=10,
            hrv=50,
        )
        result = calculator.readiness_score(m)

        assert result.score == 100
        assert result.components == {
            "steps": 35.0,
            "sleep": 20.0,
            "calories": 20.0,
            "heart_rate": 10.0,
            "sleep_quality": 5.0,
            "hrv": 10.0,
        }

    def test_differs_from_health_score(self, calculator):
        m = record(step_count=10000, active_calories=500, sleep_hours=8, resting_heart_rate=65)
        assert calculator.health_score(m).score == 100
        assert calculator.readiness_score(m).score == 85


class TestActivityScore:
    """Tests for the configurable activity split."""

    def test_balanced_preset(self, calculator):
        m = record(step_count=10000)
        assert calculator.activity_score(m).score == 50

    def test_steps_weighted_preset(self):
        config = ScoringConfig(activity=ActivityScoreConfig.from_preset(ActivityWeightPreset.STEPS_WEIGHTED))
        calculator = CompositeScoreCalculator(config)

        assert calculator.activity_score(record(step_count=10000)).score == 60
        assert calculator.activity_score(record(active_calories=500)).score == 40

    def test_half_goals(self, calculator):
        assert calculator.activity_score(record(step_count=5000, active_calories=250)).score == 50


class TestSleepScore:
    """Tests for duration and quality sub-scores."""

    @pytest.mark.parametrize(
        "hours,expected",
        [(7, 70), (8, 70), (9, 70), (6, 60), (10, 60), (5.5, 55), (0.5, 5)],
    )
    def test_duration_points(self, calculator, hours, expected):
        assert calculator.sleep_duration_points(hours) == pytest.approx(expected)

    def test_duration_never_negative(self, calculator):
        assert calculator.sleep_duration_points(20) == 0

    def test_full_score(self, calculator):
        assert calculator.sleep_score(record(sleep_hours=8, sleep_quality=10)).score == 100

    def test_short_sleep_mid_quality(self, calculator):
        assert calculator.sleep_score(record(sleep_hours=6, sleep_quality=5)).score == 75

    def test_no_sleep_recorded(self, calculator):
        assert calculator.sleep_score(record()).score == 0


class TestSleepArchitectureScore:
    """Tests for the stage-based sleep score."""

    def test_ideal_night(self, calculator):
        m = record(sleep_hours=8, deep_sleep_hours=1.6, rem_sleep_hours=1.8, time_in_bed=8.5)
        result = calculator.sleep_architecture_score(m)
        assert result.score == 100

    def test_efficiency_defaults_without_time_in_bed(self, calculator):
        m = record(sleep_hours=8, deep_sleep_hours=1.6, rem_sleep_hours=1.8)
        assert calculator.sleep_architecture_score(m).components["efficiency"] == 12.0

    def test_no_sleep(self, calculator):
        assert calculator.sleep_architecture_score(record()).score == 0


class TestRecoveryScore:
    """Tests for the discrete recovery tiers."""

    def test_top_tiers(self, calculator):
        m = record(hrv=65, resting_heart_rate=65, energy_level=8)
        assert calculator.recovery_score(m).score == 100

    def test_low_tiers(self, calculator):
        m = record(hrv=20, resting_heart_rate=85, energy_level=4)
        assert calculator.recovery_score(m).score == 15 + 10 + 10

    @pytest.mark.parametrize(
        "rhr,expected",
        [(55, 30), (60, 35), (70, 35), (75, 20), (80, 20), (81, 10)],
    )
    def test_resting_hr_tiers(self, calculator, rhr, expected):
        assert calculator.resting_hr_recovery_points(rhr) == expected

    def test_energy_falls_back_to_sleep_quality(self, calculator):
        assert calculator.recovery_score(record(sleep_quality=9)).score == 18
        assert calculator.recovery_score(record(sleep_quality=6)).score == 14
        assert calculator.recovery_score(record(sleep_quality=3)).score == 10

    def test_fallback_can_be_disabled(self):
        config = ScoringConfig(recovery=RecoveryScoreConfig(estimate_energy_from_sleep_quality=False))
        calculator = CompositeScoreCalculator(config)
        assert calculator.recovery_score(record(sleep_quality=9)).score == 12

    def test_nothing_recorded(self, calculator):
        result = calculator.recovery_score(record())
        assert result.score == 12
        assert result.components == {"hrv": 0.0, "resting_hr": 0.0, "energy": 12.0}

    def test_energy_default_when_neither_recorded(self, calculator):
        result = calculator.recovery_score(record(hrv=65, resting_heart_rate=65))
        assert result.score == 45 + 35 + 12


class TestHeartAndStress:
    """Tests for the heart score and stress estimate."""

    def test_heart_score_best(self, calculator):
        assert calculator.heart_score(record(resting_heart_rate=55, hrv=55)).score == 100

    def test_heart_score_uses_whole_beats(self, calculator):
        assert calculator.heart_score(record(resting_heart_rate=60.5)).score == 75
        assert calculator.heart_score(record(hrv=49.9)).score == 65
        assert calculator.heart_score(record(hrv=0.4)).score == 50

    def test_heart_score_base_only(self, calculator):
        assert calculator.heart_score(record()).score == 50

    def test_recorded_stress(self, calculator):
        assert calculator.estimated_stress(record(stress_level=4)).score == 40

    def test_estimated_stress_is_clamped(self, calculator):
        m = record(hrv=20, resting_heart_rate=85, sleep_hours=5)
        assert calculator.estimated_stress(m).score == 100

    def test_estimated_stress_relaxed(self, calculator):
        m = record(hrv=60, resting_heart_rate=55, sleep_hours=8)
        assert calculator.estimated_stress(m).score == 0

    def test_estimated_stress_default(self, calculator):
        assert calculator.estimated_stress(record()).score == 30


class TestScoreAll:
    """Tests for the combined score bundle."""

    def test_overall_blend(self, calculator):
        m = record(
            step_count=12000,
            active_calories=600,
            sleep_hours=8,
            deep_sleep_hours=1.6,
            rem_sleep_hours=1.8,
            time_in_bed=8.5,
            resting_heart_rate=58,
            hrv=65,
            energy_level=8,
            active_minutes=45,
        )
        scores = calculator.score_all(m)

        assert scores.activity == 100
        assert scores.sleep_architecture == 100
        assert scores.heart == 100
        assert scores.recovery == 95  # athletic resting HR earns 30
        # Overall blends the dashboard activity and recovery terms, both 100 here
        assert scores.overall == 100
        assert set(scores.breakdowns) == {
            "health", "readiness", "activity", "sleep", "recovery",
            "heart", "sleep_architecture", "stress", "overall",
        }

    def test_overall_uses_active_minutes_and_stored_recovery(self, calculator):
        m = record(recovery_score=90, active_minutes=30, step_count=10000)
        overall = calculator.score_all(m).breakdowns["overall"]

        assert overall["activity"] == 25.0
        assert overall["recovery"] == 18.0

    def test_overall_without_active_minutes(self, calculator):
        m = record(step_count=12000, active_calories=600)
        # Calories do not count toward the dashboard activity term
        assert calculator.dashboard_activity_score(m).score == 50

    def test_dashboard_recovery_estimate(self, calculator):
        result = calculator.dashboard_recovery_score(record(hrv=25, sleep_hours=8))
        assert result.components == {"hrv": 25.0, "sleep": 50.0}
        assert result.score == 75

    def test_dashboard_recovery_prefers_stored_value(self, calculator):
        m = record(recovery_score=42, hrv=80, sleep_hours=8)
        assert calculator.dashboard_recovery_score(m).score == 42

    def test_scores_always_in_range(self, calculator):
        extremes = [None, 0.001, 1.0, 7.0, 60.0, 1e9]
        fields = [
            MetricField.STEP_COUNT,
            MetricField.ACTIVE_CALORIES,
            MetricField.SLEEP_HOURS,
            MetricField.SLEEP_QUALITY,
            MetricField.RESTING_HEART_RATE,
            MetricField.HRV,
            MetricField.ENERGY_LEVEL,
            MetricField.STRESS_LEVEL,
        ]
        for combo in itertools.product(extremes, repeat=3):
            for offset in range(len(fields)):
                chosen = [fields[(offset + i) % len(fields)] for i in range(3)]
                m = record(**{f.value: v for f, v in zip(chosen, combo)})
                scores = calculator.score_all(m)
                for name in ("health", "readiness", "activity", "sleep", "recovery",
                             "heart", "sleep_architecture", "stress", "overall"):
                    assert 0 <= getattr(scores, name) <= 100


class TestHelpers:
    """Tests for the scoring helpers."""

    def test_clamp_score(self):
        assert clamp_score(-5) == 0
        assert clamp_score(140.2) == 100
        assert clamp_score(72.6) == 72
        assert clamp_score(0.29 * 100) == 29

    def test_capped_ratio(self):
        assert capped_ratio(None, 100, 10) == 0
        assert capped_ratio(50, 100, 10) == 5
        assert capped_ratio(500, 100, 10) == 10

    def test_tier_points(self):
        tiers = [[60, 45], [40, 35]]
        assert tier_points(None, tiers, 15) == 0
        assert tier_points(70, tiers, 15) == 45
        assert tier_points(40, tiers, 15) == 35
        assert tier_points(10, tiers, 15) == 15
