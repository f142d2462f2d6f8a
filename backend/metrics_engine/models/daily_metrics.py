from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column

from metrics_engine.database import Base


class DailyMetricsRow(Base):
    """One row per calendar day, written by the ingestion layer."""

    __tablename__ = "daily_metrics"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    date: Mapped[date] = mapped_column(Date, unique=True, index=True, nullable=False)

    # Activity
    step_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    active_calories: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_calories: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_distance: Mapped[float | None] = mapped_column(Float, nullable=True)  # km
    active_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Heart & vitals
    resting_heart_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    hrv: Mapped[float | None] = mapped_column(Float, nullable=True)  # ms
    vo2_max: Mapped[float | None] = mapped_column(Float, nullable=True)
    blood_oxygen: Mapped[float | None] = mapped_column(Float, nullable=True)  # %
    respiratory_rate: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Sleep
    sleep_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    sleep_quality: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 0-10
    deep_sleep_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    rem_sleep_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    time_in_bed: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Subjective & derived
    stress_level: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 1-10
    energy_level: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 1-10
    recovery_score: Mapped[float | None] = mapped_column(Float, nullable=True)  # 0-100

    # Body
    body_fat_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    hydration_level: Mapped[float | None] = mapped_column(Float, nullable=True)  # liters

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
