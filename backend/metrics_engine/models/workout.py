from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from metrics_engine.database import Base


class WorkoutRow(Base):
    __tablename__ = "workouts"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    workout_type: Mapped[str] = mapped_column(String(50), nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime, index=True, nullable=False)
    duration_minutes: Mapped[float] = mapped_column(Float, nullable=False)

    # Heart rate data
    avg_heart_rate: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_heart_rate: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Performance data
    calories: Mapped[float | None] = mapped_column(Float, nullable=True)
    distance_km: Mapped[float | None] = mapped_column(Float, nullable=True)
    perceived_exertion: Mapped[int | None] = mapped_column(Integer, nullable=True)  # RPE 1-10

    source: Mapped[str | None] = mapped_column(String(50), nullable=True)  # healthkit, manual

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
