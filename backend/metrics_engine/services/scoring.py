"""
Composite Score Calculator - Turns one day's record into 0-100 scores.

Every score is a sum of capped, non-negative terms, clamped to [0, 100].
Scores are pure functions of a single DailyMetrics; none reads history.
Absent inputs contribute their floor value (normally 0).

Two health-score formulas exist side by side: the simple four-term
``health_score`` and the six-term ``readiness_score`` that also weighs
sleep quality and HRV. Both stay callable on their own.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from metrics_engine.schemas.context import CompositeScores
from metrics_engine.schemas.metrics import DailyMetrics
from metrics_engine.services.scoring_config import ScoringConfig

logger = logging.getLogger(__name__)


@dataclass
class ScoreResult:
    """A composite score and the terms it was summed from."""
    score: int = 0
    components: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"score": self.score, **self.components}


def clamp_score(raw: float) -> int:
    """Truncate toward zero, then clamp to [0, 100]."""
    # Absorb float error so 28.999999999999996 still counts as 29
    return min(100, max(0, int(raw + 1e-9)))


def capped_ratio(value: Optional[float], goal: float, points: float) -> float:
    """``min(value / goal, 1) * points``; 0 when the value is absent."""
    if value is None or goal <= 0:
        return 0.0
    return min(value / goal, 1.0) * points


def tier_points(
    value: Optional[float],
    tiers: Sequence[Sequence[float]],
    floor_points: float,
) -> float:
    """
    Evaluate a higher-is-better step function.

    ``tiers`` are (minimum, points) pairs, highest minimum first. A present
    value below every minimum earns ``floor_points``; an absent value earns 0.
    """
    if value is None:
        return 0.0
    for minimum, points in tiers:
        if value >= minimum:
            return float(points)
    return float(floor_points)


class CompositeScoreCalculator:
    """Calculates the day-level composite scores."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    # ------------------------------------------------------------------
    # Health & readiness
    # ------------------------------------------------------------------

    def health_score(self, m: DailyMetrics) -> ScoreResult:
        cfg = self.config.health
        components = {
            "steps": capped_ratio(m.step_count, cfg.step_goal, cfg.steps_points),
            "sleep": capped_ratio(m.sleep_hours, cfg.sleep_goal_hours, cfg.sleep_points),
            "calories": capped_ratio(m.active_calories, cfg.active_calorie_goal, cfg.calories_points),
            "heart_rate": cfg.heart_rate_bonus if m.resting_heart_rate is not None else 0.0,
        }
        return self._result(components)

    def readiness_score(self, m: DailyMetrics) -> ScoreResult:
        cfg = self.config.readiness
        components = {
            "steps": capped_ratio(m.step_count, cfg.step_goal, cfg.steps_points),
            "sleep": capped_ratio(m.sleep_hours, cfg.sleep_goal_hours, cfg.sleep_points),
            "calories": capped_ratio(m.active_calories, cfg.active_calorie_goal, cfg.calories_points),
            "heart_rate": cfg.heart_rate_bonus if m.resting_heart_rate is not None else 0.0,
            "sleep_quality": capped_ratio(m.sleep_quality, 10.0, cfg.sleep_quality_points),
            "hrv": capped_ratio(m.hrv, cfg.hrv_reference_ms, cfg.hrv_points),
        }
        return self._result(components)

    # ------------------------------------------------------------------
    # Activity
    # ------------------------------------------------------------------

    def activity_score(self, m: DailyMetrics) -> ScoreResult:
        cfg = self.config.activity
        components = {
            "steps": capped_ratio(m.step_count, cfg.step_goal, cfg.steps_weight),
            "calories": capped_ratio(m.active_calories, cfg.active_calorie_goal, cfg.calories_weight),
        }
        return self._result(components)

    # ------------------------------------------------------------------
    # Sleep
    # ------------------------------------------------------------------

    def sleep_duration_points(self, hours: Optional[float]) -> float:
        """Peak inside the optimal band, minus a fixed penalty per hour outside it."""
        cfg = self.config.sleep
        if hours is None:
            return 0.0
        if hours < cfg.optimal_min_hours:
            deviation = cfg.optimal_min_hours - hours
        elif hours > cfg.optimal_max_hours:
            deviation = hours - cfg.optimal_max_hours
        else:
            deviation = 0.0
        return max(0.0, cfg.duration_points - deviation * cfg.penalty_per_hour)

    def sleep_score(self, m: DailyMetrics) -> ScoreResult:
        cfg = self.config.sleep
        components = {
            "duration": self.sleep_duration_points(m.sleep_hours),
            "quality": capped_ratio(m.sleep_quality, cfg.quality_scale, cfg.quality_points),
        }
        return self._result(components)

    def sleep_architecture_score(self, m: DailyMetrics) -> ScoreResult:
        """Duration, deep/REM share and efficiency, as shown on the sleep card."""
        hours = m.sleep_hours
        if hours is None:
            return ScoreResult()

        if 7 <= hours <= 9:
            duration = 40.0
        elif hours >= 6:
            duration = 30.0
        else:
            duration = 15.0

        deep_pct = (m.deep_sleep_hours or 0.0) / hours * 100
        if 15 <= deep_pct <= 25:
            deep = 25.0
        elif deep_pct >= 10:
            deep = 18.0
        else:
            deep = 10.0

        rem_pct = (m.rem_sleep_hours or 0.0) / hours * 100
        if 20 <= rem_pct <= 25:
            rem = 20.0
        elif rem_pct >= 15:
            rem = 15.0
        else:
            rem = 8.0

        # Assume typical efficiency when time in bed was not captured
        efficiency_pct = hours / m.time_in_bed * 100 if m.time_in_bed else 85.0
        if efficiency_pct >= 90:
            efficiency = 15.0
        elif efficiency_pct >= 85:
            efficiency = 12.0
        else:
            efficiency = 8.0

        return self._result({
            "duration": duration,
            "deep": deep,
            "rem": rem,
            "efficiency": efficiency,
        })

    # ------------------------------------------------------------------
    # Recovery & heart
    # ------------------------------------------------------------------

    def resting_hr_recovery_points(self, rhr: Optional[float]) -> float:
        cfg = self.config.recovery
        if rhr is None:
            return 0.0
        if cfg.rhr_optimal_min <= rhr <= cfg.rhr_optimal_max:
            return cfg.rhr_optimal_points
        if rhr < cfg.rhr_optimal_min:
            return cfg.rhr_athletic_points
        if rhr <= cfg.rhr_good_max:
            return cfg.rhr_good_points
        return cfg.rhr_elevated_points

    def energy_recovery_points(self, m: DailyMetrics) -> float:
        cfg = self.config.recovery
        if m.energy_level is not None:
            return tier_points(m.energy_level, cfg.energy_tiers, cfg.energy_floor_points)
        if cfg.estimate_energy_from_sleep_quality and m.sleep_quality is not None:
            return tier_points(m.sleep_quality, cfg.sleep_quality_tiers, cfg.sleep_quality_floor_points)
        return cfg.energy_default_points

    def recovery_score(self, m: DailyMetrics) -> ScoreResult:
        cfg = self.config.recovery
        components = {
            "hrv": tier_points(m.hrv, cfg.hrv_tiers, cfg.hrv_floor_points),
            "resting_hr": self.resting_hr_recovery_points(m.resting_heart_rate),
            "energy": self.energy_recovery_points(m),
        }
        return self._result(components)

    def heart_score(self, m: DailyMetrics) -> ScoreResult:
        cfg = self.config.heart
        # Whole beats and milliseconds, so 60.5 bpm still reads as 60
        rhr = int(m.resting_heart_rate or 0) or None
        hrv = int(m.hrv or 0) or None

        rhr_points = 0.0
        if rhr is not None:
            for maximum, points in cfg.rhr_tiers:
                if rhr <= maximum:
                    rhr_points = float(points)
                    break
        components = {
            "base": cfg.base_points,
            "resting_hr": rhr_points,
            "hrv": tier_points(hrv, cfg.hrv_tiers, cfg.hrv_floor_points),
        }
        return self._result(components)

    # ------------------------------------------------------------------
    # Stress & overall
    # ------------------------------------------------------------------

    def estimated_stress(self, m: DailyMetrics) -> ScoreResult:
        """Recorded stress (1-10) as a percentage, else an estimate from vitals."""
        if m.stress_level is not None:
            return self._result({"recorded": m.stress_level * 10})

        hrv_adj = 0.0
        if m.hrv is not None:
            if m.hrv < 25:
                hrv_adj = 40.0
            elif m.hrv < 40:
                hrv_adj = 25.0
            elif m.hrv < 50:
                hrv_adj = 10.0
            else:
                hrv_adj = -10.0

        rhr_adj = 0.0
        if m.resting_heart_rate is not None:
            if m.resting_heart_rate > 80:
                rhr_adj = 20.0
            elif m.resting_heart_rate > 70:
                rhr_adj = 10.0
            elif m.resting_heart_rate < 60:
                rhr_adj = -10.0

        sleep = m.sleep_hours if m.sleep_hours is not None else 7.0
        if sleep < 6:
            sleep_adj = 15.0
        elif sleep > 7:
            sleep_adj = -10.0
        else:
            sleep_adj = 0.0

        return self._result({
            "base": 30.0,
            "hrv": hrv_adj,
            "resting_hr": rhr_adj,
            "sleep": sleep_adj,
        })

    def dashboard_activity_score(self, m: DailyMetrics) -> ScoreResult:
        """Steps and active minutes, each worth half; feeds the overall score."""
        cfg = self.config.overall
        components = {
            "steps": capped_ratio(m.step_count, cfg.step_goal, cfg.activity_term_points),
            "active_minutes": capped_ratio(m.active_minutes, cfg.active_minutes_goal, cfg.activity_term_points),
        }
        return self._result(components)

    def dashboard_recovery_score(self, m: DailyMetrics) -> ScoreResult:
        """
        The stored recovery score when one was recorded upstream.

        Otherwise an estimate from HRV and sleep duration, each worth half.
        """
        if m.recovery_score is not None:
            return self._result({"stored": m.recovery_score})
        cfg = self.config.overall
        components = {
            "hrv": capped_ratio(m.hrv, cfg.hrv_reference_ms, cfg.recovery_term_points),
            "sleep": capped_ratio(m.sleep_hours, cfg.sleep_goal_hours, cfg.recovery_term_points),
        }
        return self._result(components)

    def overall_score(
        self,
        activity: ScoreResult,
        sleep_architecture: ScoreResult,
        heart: ScoreResult,
        recovery: ScoreResult,
    ) -> ScoreResult:
        cfg = self.config.overall
        components = {
            "activity": activity.score * cfg.activity_weight,
            "sleep": sleep_architecture.score * cfg.sleep_weight,
            "heart": heart.score * cfg.heart_weight,
            "recovery": recovery.score * cfg.recovery_weight,
        }
        return self._result(components)

    def score_all(self, m: DailyMetrics) -> CompositeScores:
        health = self.health_score(m)
        readiness = self.readiness_score(m)
        activity = self.activity_score(m)
        sleep = self.sleep_score(m)
        recovery = self.recovery_score(m)
        heart = self.heart_score(m)
        sleep_architecture = self.sleep_architecture_score(m)
        stress = self.estimated_stress(m)
        overall = self.overall_score(
            self.dashboard_activity_score(m),
            sleep_architecture,
            heart,
            self.dashboard_recovery_score(m),
        )

        results = {
            "health": health,
            "readiness": readiness,
            "activity": activity,
            "sleep": sleep,
            "recovery": recovery,
            "heart": heart,
            "sleep_architecture": sleep_architecture,
            "stress": stress,
            "overall": overall,
        }
        logger.debug(
            "Composite scores calculated",
            extra={"date": m.date.isoformat(), "scores": {k: r.score for k, r in results.items()}},
        )
        return CompositeScores(
            **{name: r.score for name, r in results.items()},
            breakdowns={name: dict(r.components) for name, r in results.items()},
        )

    @staticmethod
    def _result(components: dict[str, float]) -> ScoreResult:
        rounded = {k: round(v, 2) for k, v in components.items()}
        return ScoreResult(score=clamp_score(sum(components.values())), components=rounded)
