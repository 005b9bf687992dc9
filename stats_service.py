from __future__ import annotations
import datetime
import math
from typing import Callable, Iterable, Optional, Sequence

import structlog

from models import Workout, as_utc, utc_now
from tools import MathTools

log = structlog.get_logger(__name__)

STREAK_DAYS = 3
RECENT_LIMIT = 3
COACH_TIP = "Fit Mind. Fit Body. Consistency is the key to your transformation."
MOTTOS = ("Stronger Every Day.", "Train. Transform. Thrive.")


def total_workouts(workouts: Sequence[Workout]) -> int:
    return len(workouts)


def total_minutes(workouts: Iterable[Workout]) -> int:
    return sum(w.duration_minutes for w in workouts)


def total_volume(workout: Workout) -> float:
    """Sum of ``weight * reps`` over every set of every exercise."""
    return MathTools.volume(
        (s.reps, s.weight) for ex in workout.exercises for s in ex.sets
    )


def days_since_last(
    workouts: Sequence[Workout], now: datetime.datetime
) -> float:
    """Whole days between ``now`` and the newest workout, infinite if none."""
    if not workouts:
        return math.inf
    delta = (as_utc(now) - workouts[0].timestamp).total_seconds()
    return MathTools.days_between(delta)


def streak_active(
    workouts: Sequence[Workout],
    now: datetime.datetime,
    window_days: int = STREAK_DAYS,
) -> bool:
    """Return True when the newest workout (index 0) lies within the window."""
    return days_since_last(workouts, now) <= window_days


def volume_series(workouts: Iterable[Workout]) -> list[dict]:
    """Per-workout volume in ascending date order for trend charts."""
    ordered = sorted(workouts, key=lambda w: w.timestamp)
    series = []
    for w in ordered:
        ts = w.timestamp
        series.append(
            {
                "date": w.date,
                "label": f"{ts.strftime('%b')} {ts.day}",
                "volume": total_volume(w),
                "name": w.name,
            }
        )
    return series


def weekly_frequency(
    workouts: Iterable[Workout], now: datetime.datetime
) -> list[dict]:
    """Workout counts for the six days before ``now`` and ``now`` itself."""
    today = as_utc(now).date()
    days = [today - datetime.timedelta(days=6 - i) for i in range(7)]
    counts = {d: 0 for d in days}
    for w in workouts:
        day = w.timestamp.date()
        if day in counts:
            counts[day] += 1
    return [
        {"date": d.isoformat(), "day": d.strftime("%a"), "count": counts[d]}
        for d in days
    ]


def lifted_pounds(workouts: Iterable[Workout]) -> float:
    return sum(total_volume(w) for w in workouts)


def total_lifted_tons(workouts: Iterable[Workout]) -> float:
    return MathTools.tons(lifted_pounds(workouts))


def car_equivalent(workouts: Iterable[Workout]) -> int:
    return MathTools.cars(lifted_pounds(workouts))


def recent_workouts(
    workouts: Sequence[Workout], limit: int = RECENT_LIMIT
) -> list[Workout]:
    return list(workouts[: max(limit, 0)])


def workout_summary(workout: Workout) -> dict:
    return {
        "id": workout.id,
        "name": workout.name,
        "day": workout.timestamp.day,
        "exercise_count": len(workout.exercises),
        "duration_minutes": workout.duration_minutes,
        "volume": total_volume(workout),
    }


class StatisticsService:
    """Dashboard and progress figures for the current workout collection."""

    def __init__(
        self,
        workouts: Callable[[], Sequence[Workout]],
        clock: Callable[[], datetime.datetime] = utc_now,
        streak_days: int = STREAK_DAYS,
        recent_limit: int = RECENT_LIMIT,
    ) -> None:
        self.workouts = workouts
        self.clock = clock
        self.streak_days = streak_days
        self.recent_limit = recent_limit

    def overview(self, now: Optional[datetime.datetime] = None) -> dict:
        """Return the dashboard metrics."""
        rows = self.workouts()
        now = now or self.clock()
        active = streak_active(rows, now, self.streak_days)
        log.debug("overview computed", workouts=len(rows), streak_active=active)
        return {
            "workouts": total_workouts(rows),
            "minutes": total_minutes(rows),
            "streak_active": active,
            "recent": [
                workout_summary(w) for w in recent_workouts(rows, self.recent_limit)
            ],
        }

    def progress(self, now: Optional[datetime.datetime] = None) -> dict:
        """Return chart series and lifetime totals for the progress page."""
        rows = self.workouts()
        now = now or self.clock()
        return {
            "volume": volume_series(rows),
            "frequency": weekly_frequency(rows, now),
            "tons": total_lifted_tons(rows),
            "cars": car_equivalent(rows),
        }
