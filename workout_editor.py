from __future__ import annotations
import datetime
from typing import Any, Callable, Optional

import structlog

from id_generator import IdGenerator, RandomIdGenerator
from models import (
    DEFAULT_DURATION,
    DEFAULT_REPS,
    DEFAULT_WEIGHT,
    Exercise,
    ExerciseSet,
    Workout,
    WorkoutValidationError,
    as_utc,
    utc_now,
)
from observable import Observable
from tools import MathTools

log = structlog.get_logger(__name__)

SET_FIELDS = ("reps", "weight", "completed")


class WorkoutEditor(Observable):
    """Build a single draft workout through add/update/remove operations.

    The draft is the only state; ``save`` hands a frozen copy to ``on_save``
    and starts a fresh draft, ``cancel`` simply discards it.
    """

    def __init__(
        self,
        on_save: Optional[Callable[[Workout], None]] = None,
        id_generator: Optional[IdGenerator] = None,
        clock: Callable[[], datetime.datetime] = utc_now,
        default_duration: int = DEFAULT_DURATION,
    ) -> None:
        super().__init__()
        self.on_save = on_save
        self.ids = id_generator or RandomIdGenerator()
        self.clock = clock
        self.default_duration = default_duration
        self._reset()

    def _reset(self) -> None:
        self.name = ""
        self.duration_minutes = self.default_duration
        self.notes: Optional[str] = None
        self.exercises: list[Exercise] = []

    def _new_set(self) -> ExerciseSet:
        return ExerciseSet(
            id=self.ids.next(),
            reps=DEFAULT_REPS,
            weight=DEFAULT_WEIGHT,
            completed=True,
        )

    def _find_exercise(self, exercise_id: str) -> Optional[Exercise]:
        for ex in self.exercises:
            if ex.id == exercise_id:
                return ex
        return None

    def _replace_exercise(self, updated: Exercise) -> None:
        self.exercises = [
            updated if ex.id == updated.id else ex for ex in self.exercises
        ]
        self._notify()

    @property
    def is_empty(self) -> bool:
        return (
            not self.name
            and not self.exercises
            and self.notes is None
            and self.duration_minutes == self.default_duration
        )

    def set_name(self, name: str) -> None:
        self.name = name
        self._notify()

    def set_duration(self, value: Any) -> None:
        self.duration_minutes = MathTools.to_int(value)
        self._notify()

    def set_notes(self, notes: Optional[str]) -> None:
        self.notes = notes or None
        self._notify()

    def add_exercise(self) -> str:
        exercise = Exercise(id=self.ids.next(), name="", sets=[self._new_set()])
        self.exercises = [*self.exercises, exercise]
        self._notify()
        return exercise.id

    def rename_exercise(self, exercise_id: str, new_name: str) -> None:
        exercise = self._find_exercise(exercise_id)
        if exercise is None:
            return
        self._replace_exercise(exercise.model_copy(update={"name": new_name}))

    def remove_exercise(self, exercise_id: str) -> None:
        remaining = [ex for ex in self.exercises if ex.id != exercise_id]
        if len(remaining) == len(self.exercises):
            return
        self.exercises = remaining
        self._notify()

    def add_set(self, exercise_id: str) -> Optional[str]:
        """Append a set, copying the previous one when there is one."""
        exercise = self._find_exercise(exercise_id)
        if exercise is None:
            return None
        if exercise.sets:
            new_set = exercise.sets[-1].model_copy(update={"id": self.ids.next()})
        else:
            new_set = self._new_set()
        self._replace_exercise(
            exercise.model_copy(update={"sets": [*exercise.sets, new_set]})
        )
        return new_set.id

    def update_set_field(
        self, exercise_id: str, set_id: str, field: str, value: Any
    ) -> None:
        if field not in SET_FIELDS:
            raise ValueError(f"unknown set field: {field}")
        exercise = self._find_exercise(exercise_id)
        if exercise is None:
            return
        if not any(s.id == set_id for s in exercise.sets):
            return
        if field == "reps":
            coerced: Any = MathTools.to_int(value)
        elif field == "weight":
            coerced = MathTools.to_float(value)
        else:
            coerced = MathTools.to_bool(value)
        sets = [
            s.model_copy(update={field: coerced}) if s.id == set_id else s
            for s in exercise.sets
        ]
        self._replace_exercise(exercise.model_copy(update={"sets": sets}))

    def remove_set(self, exercise_id: str, set_id: str) -> None:
        exercise = self._find_exercise(exercise_id)
        if exercise is None:
            return
        remaining = [s for s in exercise.sets if s.id != set_id]
        if len(remaining) == len(exercise.sets):
            return
        self._replace_exercise(exercise.model_copy(update={"sets": remaining}))

    def validate(self) -> None:
        if not self.name.strip():
            raise WorkoutValidationError("Please give your workout a name!")
        if not self.exercises:
            raise WorkoutValidationError("Please add at least one exercise.")

    def save(self) -> Workout:
        """Freeze the draft into a Workout, hand it over and start afresh."""
        try:
            self.validate()
        except WorkoutValidationError as e:
            log.info("workout rejected", reason=str(e))
            raise
        now = as_utc(self.clock())
        workout = Workout(
            id=self.ids.next(),
            name=self.name,
            date=now.isoformat(),
            duration_minutes=self.duration_minutes,
            exercises=[ex.model_copy(deep=True) for ex in self.exercises],
            notes=self.notes,
        )
        if self.on_save is not None:
            self.on_save(workout)
        log.info(
            "workout saved",
            workout_id=workout.id,
            exercises=len(workout.exercises),
        )
        self._reset()
        self._notify()
        return workout

    def cancel(self) -> None:
        self._reset()
        self._notify()
