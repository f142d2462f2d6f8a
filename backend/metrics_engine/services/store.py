"""
Daily metrics stores.

The engine only reads from a store. ``InMemoryMetricsStore`` is the
synchronous store the engine computes against; ``SqlAlchemyMetricsStore``
is the asynchronous adapter over the database that loads a window of rows
into an in-memory store in one call.
"""
import logging
import threading
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from metrics_engine.exceptions import InvalidWindow, StoreUnavailable
from metrics_engine.models import DailyMetricsRow, WorkoutRow
from metrics_engine.schemas.metrics import DailyMetrics, WorkoutRecord

logger = logging.getLogger(__name__)


class DailyMetricsStore(Protocol):
    """Read interface the engine depends on."""

    @property
    def version(self) -> int:
        """Changes on every write; used to invalidate cached windows."""
        ...

    def get(self, day: date) -> Optional[DailyMetrics]:
        ...

    def range(self, start: date, end: date) -> list[DailyMetrics]:
        """Records with start <= date <= end, ascending by date."""
        ...

    def workouts(self, start: date, end: date) -> list[WorkoutRecord]:
        ...


class InMemoryMetricsStore:
    """Thread-safe day-keyed store. Reads return point-in-time copies."""

    def __init__(
        self,
        records: Iterable[DailyMetrics] = (),
        workouts: Iterable[WorkoutRecord] = (),
    ):
        self._lock = threading.RLock()
        self._records: dict[date, DailyMetrics] = {}
        self._workouts: list[WorkoutRecord] = []
        self._version = 0
        self.put_many(records)
        for workout in workouts:
            self.add_workout(workout)

    @property
    def version(self) -> int:
        return self._version

    def put(self, record: DailyMetrics) -> None:
        """Insert or replace the record for ``record.date``."""
        with self._lock:
            self._records[record.date] = record
            self._version += 1

    def put_many(self, records: Iterable[DailyMetrics]) -> None:
        with self._lock:
            for record in records:
                self.put(record)

    def add_workout(self, workout: WorkoutRecord) -> None:
        with self._lock:
            self._workouts.append(workout)
            self._version += 1

    def get(self, day: date) -> Optional[DailyMetrics]:
        with self._lock:
            return self._records.get(day)

    def range(self, start: date, end: date) -> list[DailyMetrics]:
        if start > end:
            raise InvalidWindow.for_range(start, end)
        with self._lock:
            selected = [r for d, r in self._records.items() if start <= d <= end]
        return sorted(selected, key=lambda r: r.date)

    def workouts(self, start: date, end: date) -> list[WorkoutRecord]:
        if start > end:
            raise InvalidWindow.for_range(start, end)
        with self._lock:
            selected = [w for w in self._workouts if start <= w.day <= end]
        return sorted(selected, key=lambda w: w.start_time)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class SqlAlchemyMetricsStore:
    """Async reads over the daily_metrics and workouts tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, day: date) -> Optional[DailyMetrics]:
        try:
            result = await self.db.execute(
                select(DailyMetricsRow).where(DailyMetricsRow.date == day)
            )
            row = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise self._unavailable(exc, start=day, end=day) from exc
        return DailyMetrics.model_validate(row) if row else None

    async def range(self, start: date, end: date) -> list[DailyMetrics]:
        if start > end:
            raise InvalidWindow.for_range(start, end)
        try:
            result = await self.db.execute(
                select(DailyMetricsRow)
                .where(
                    DailyMetricsRow.date >= start,
                    DailyMetricsRow.date <= end,
                )
                .order_by(DailyMetricsRow.date.asc())
            )
            rows = result.scalars().all()
        except SQLAlchemyError as exc:
            raise self._unavailable(exc, start=start, end=end) from exc
        return [DailyMetrics.model_validate(row) for row in rows]

    async def workouts(self, start: date, end: date) -> list[WorkoutRecord]:
        if start > end:
            raise InvalidWindow.for_range(start, end)
        try:
            result = await self.db.execute(
                select(WorkoutRow)
                .where(
                    WorkoutRow.start_time >= datetime.combine(start, time.min),
                    WorkoutRow.start_time < datetime.combine(end + timedelta(days=1), time.min),
                )
                .order_by(WorkoutRow.start_time.asc())
            )
            rows = result.scalars().all()
        except SQLAlchemyError as exc:
            raise self._unavailable(exc, start=start, end=end) from exc
        return [WorkoutRecord.model_validate(row) for row in rows]

    async def load_snapshot(self, start: date, end: date) -> InMemoryMetricsStore:
        """Copy every record and workout in [start, end] into a fresh in-memory store."""
        records = await self.range(start, end)
        workouts = await self.workouts(start, end)
        logger.debug(
            "Loaded store snapshot",
            extra={
                "start": start.isoformat(),
                "end": end.isoformat(),
                "records": len(records),
                "workouts": len(workouts),
            },
        )
        return InMemoryMetricsStore(records, workouts)

    @staticmethod
    def _unavailable(exc: SQLAlchemyError, start: date, end: date) -> StoreUnavailable:
        logger.warning(
            "Daily metrics store read failed",
            extra={"start": start.isoformat(), "end": end.isoformat(), "error": str(exc)},
        )
        return StoreUnavailable(
            "Daily metrics store is unavailable.",
            details={"start": start.isoformat(), "end": end.isoformat()},
        )
