import datetime
from typing import Optional

from models import Exercise, ExerciseSet, Workout, as_utc, utc_now


def _sets(prefix: int, rows: list[tuple[int, float]]) -> list[ExerciseSet]:
    return [
        ExerciseSet(id=f"s-{prefix + i}", reps=reps, weight=weight, completed=True)
        for i, (reps, weight) in enumerate(rows)
    ]


def sample_workouts(now: Optional[datetime.datetime] = None) -> list[Workout]:
    """Demo workouts dated relative to ``now``, newest first."""
    now = as_utc(now or utc_now())
    return [
        Workout(
            id="w-1",
            name="Upper Body Power",
            date=(now - datetime.timedelta(days=2)).isoformat(),
            duration_minutes=45,
            exercises=[
                Exercise(
                    id="e-1",
                    name="Bench Press",
                    sets=_sets(1, [(10, 135), (8, 155), (5, 175)]),
                ),
                Exercise(id="e-2", name="Pull Ups", sets=_sets(4, [(12, 0), (10, 0)])),
            ],
        ),
        Workout(
            id="w-2",
            name="Leg Day",
            date=(now - datetime.timedelta(days=5)).isoformat(),
            duration_minutes=60,
            exercises=[
                Exercise(
                    id="e-3",
                    name="Squat",
                    sets=_sets(6, [(10, 185), (10, 185), (10, 185)]),
                )
            ],
        ),
    ]
