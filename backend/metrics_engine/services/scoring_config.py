"""
Scoring Configuration - Weights, goals and tier tables for every composite score.

All "magic numbers" are centralized here for easy tuning without code changes.
The host builds one ScoringConfig and passes it to the engine.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from metrics_engine.schemas.enums import ACTIVITY_WEIGHT_PRESETS, ActivityWeightPreset


@dataclass
class HealthScoreConfig:
    """Simple four-term health score."""
    step_goal: float = 10000.0
    sleep_goal_hours: float = 8.0
    active_calorie_goal: float = 500.0

    # Term ceilings
    steps_points: float = 35.0
    sleep_points: float = 25.0
    calories_points: float = 25.0
    heart_rate_bonus: float = 15.0  # Awarded when resting HR is recorded


@dataclass
class ReadinessScoreConfig:
    """Extended six-term variant of the health score."""
    step_goal: float = 10000.0
    sleep_goal_hours: float = 8.0
    active_calorie_goal: float = 500.0
    hrv_reference_ms: float = 50.0  # HRV at or above this earns the full term

    # Term ceilings (sum to 100)
    steps_points: float = 35.0
    sleep_points: float = 20.0
    calories_points: float = 20.0
    heart_rate_bonus: float = 10.0
    sleep_quality_points: float = 5.0
    hrv_points: float = 10.0


@dataclass
class ActivityScoreConfig:
    """Steps + active calories, with a configurable weight split."""
    step_goal: float = 10000.0
    active_calorie_goal: float = 500.0
    steps_weight: float = 50.0
    calories_weight: float = 50.0

    def __post_init__(self):
        if abs(self.steps_weight + self.calories_weight - 100.0) > 1e-9:
            raise ValueError(
                f"Activity weights must sum to 100, got "
                f"{self.steps_weight} + {self.calories_weight}"
            )

    @classmethod
    def from_preset(cls, preset: ActivityWeightPreset | str, **overrides) -> "ActivityScoreConfig":
        steps_weight, calories_weight = ACTIVITY_WEIGHT_PRESETS[ActivityWeightPreset(preset)]
        return cls(steps_weight=steps_weight, calories_weight=calories_weight, **overrides)


@dataclass
class SleepScoreConfig:
    """Duration sub-score plus quality sub-score."""
    optimal_min_hours: float = 7.0
    optimal_max_hours: float = 9.0
    duration_points: float = 70.0  # Peak, reached inside the optimal band
    penalty_per_hour: float = 10.0  # Per hour outside the optimal band
    quality_points: float = 30.0
    quality_scale: float = 10.0


@dataclass
class RecoveryScoreConfig:
    """Discrete tiers: HRV (45) + resting HR (35) + energy (20)."""
    # HRV tiers, highest first: (minimum ms, points)
    hrv_tiers: list = field(default_factory=lambda: [[60.0, 45.0], [40.0, 35.0], [25.0, 25.0]])
    hrv_floor_points: float = 15.0

    # Resting HR
    rhr_optimal_min: float = 60.0
    rhr_optimal_max: float = 70.0
    rhr_optimal_points: float = 35.0
    rhr_athletic_points: float = 30.0  # Below the optimal band
    rhr_good_max: float = 80.0
    rhr_good_points: float = 20.0
    rhr_elevated_points: float = 10.0

    # Energy level tiers, highest first
    energy_tiers: list = field(default_factory=lambda: [[7.0, 20.0], [5.0, 15.0]])
    energy_floor_points: float = 10.0

    # Used when energy is not recorded but sleep quality is
    estimate_energy_from_sleep_quality: bool = True
    sleep_quality_tiers: list = field(default_factory=lambda: [[8.0, 18.0], [6.0, 14.0]])
    sleep_quality_floor_points: float = 10.0
    energy_default_points: float = 12.0  # Neither energy nor sleep quality recorded


@dataclass
class HeartScoreConfig:
    base_points: float = 50.0
    rhr_tiers: list = field(default_factory=lambda: [[60.0, 25.0], [70.0, 20.0], [80.0, 10.0]])  # (max bpm, points)
    hrv_tiers: list = field(default_factory=lambda: [[50.0, 25.0], [30.0, 15.0]])  # (min ms, points)
    hrv_floor_points: float = 5.0


@dataclass
class OverallScoreConfig:
    """Dashboard blend of activity, sleep architecture, heart and recovery."""
    activity_weight: float = 0.25
    sleep_weight: float = 0.30
    heart_weight: float = 0.25
    recovery_weight: float = 0.20

    # Activity input: steps plus active minutes, 50 points each
    step_goal: float = 10000.0
    active_minutes_goal: float = 30.0
    activity_term_points: float = 50.0

    # Recovery input when no stored recovery score exists: HRV plus sleep, 50 points each
    hrv_reference_ms: float = 50.0
    sleep_goal_hours: float = 8.0
    recovery_term_points: float = 50.0


@dataclass
class TrendConfig:
    stable_threshold_percent: float = 2.0  # |change| below this is "stable"
    window_span: int = 3  # Days averaged on each side for window-over-window


@dataclass
class WindowConfig:
    default_days: int = 14
    vo2_max_days: int = 90
    breakdown_days: int = 7
    workout_summary_days: int = 7


@dataclass
class ScoringConfig:
    """Master configuration for all scoring parameters."""
    health: HealthScoreConfig = field(default_factory=HealthScoreConfig)
    readiness: ReadinessScoreConfig = field(default_factory=ReadinessScoreConfig)
    activity: ActivityScoreConfig = field(default_factory=ActivityScoreConfig)
    sleep: SleepScoreConfig = field(default_factory=SleepScoreConfig)
    recovery: RecoveryScoreConfig = field(default_factory=RecoveryScoreConfig)
    heart: HeartScoreConfig = field(default_factory=HeartScoreConfig)
    overall: OverallScoreConfig = field(default_factory=OverallScoreConfig)
    trend: TrendConfig = field(default_factory=TrendConfig)
    window: WindowConfig = field(default_factory=WindowConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ScoringConfig":
        """Load configuration from a YAML file. Missing sections keep defaults."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        config = cls()

        if "health" in data:
            config.health = HealthScoreConfig(**data["health"])
        if "readiness" in data:
            config.readiness = ReadinessScoreConfig(**data["readiness"])
        if "activity" in data:
            activity = dict(data["activity"])
            preset = activity.pop("preset", None)
            if preset is not None:
                config.activity = ActivityScoreConfig.from_preset(preset, **activity)
            else:
                config.activity = ActivityScoreConfig(**activity)
        if "sleep" in data:
            config.sleep = SleepScoreConfig(**data["sleep"])
        if "recovery" in data:
            config.recovery = RecoveryScoreConfig(**data["recovery"])
        if "heart" in data:
            config.heart = HeartScoreConfig(**data["heart"])
        if "overall" in data:
            config.overall = OverallScoreConfig(**data["overall"])
        if "trend" in data:
            config.trend = TrendConfig(**data["trend"])
        if "window" in data:
            config.window = WindowConfig(**data["window"])

        return config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return {
            "health": self.health.__dict__,
            "readiness": self.readiness.__dict__,
            "activity": self.activity.__dict__,
            "sleep": self.sleep.__dict__,
            "recovery": self.recovery.__dict__,
            "heart": self.heart.__dict__,
            "overall": self.overall.__dict__,
            "trend": self.trend.__dict__,
            "window": self.window.__dict__,
        }


def build_scoring_config(
    path: Optional[str | Path] = None,
    activity_preset: Optional[ActivityWeightPreset | str] = None,
) -> ScoringConfig:
    """Build the config the host injects: YAML overrides, then the activity preset."""
    config = ScoringConfig.from_yaml(path) if path else ScoringConfig()
    if activity_preset is not None:
        config.activity = ActivityScoreConfig.from_preset(
            activity_preset,
            step_goal=config.activity.step_goal,
            active_calorie_goal=config.activity.active_calorie_goal,
        )
    return config
