from __future__ import annotations
import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ViewState = Literal["dashboard", "log", "progress", "coach"]
VIEWS: tuple[str, ...] = ("dashboard", "log", "progress", "coach")

Role = Literal["user", "model"]

DEFAULT_REPS = 10
DEFAULT_WEIGHT = 0.0
DEFAULT_DURATION = 45


class WorkoutValidationError(ValueError):
    """Raised when a draft workout cannot be saved."""


def parse_timestamp(ts: str) -> datetime.datetime:
    """Return ``ts`` as timezone-aware datetime in UTC."""
    return as_utc(datetime.datetime.fromisoformat(ts))


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def as_utc(dt: datetime.datetime) -> datetime.datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


class ExerciseSet(BaseModel):
    """One block of repetitions at a given weight."""

    id: str
    reps: int = Field(default=DEFAULT_REPS, ge=0)
    weight: float = Field(default=DEFAULT_WEIGHT, ge=0)
    completed: bool = True


class Exercise(BaseModel):
    id: str
    name: str = ""
    sets: list[ExerciseSet] = Field(default_factory=list)


class Workout(BaseModel):
    """A saved training session. Instances are frozen once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    date: str
    duration_minutes: int = Field(default=0, ge=0)
    exercises: list[Exercise] = Field(default_factory=list)
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        parse_timestamp(value)
        return value

    @property
    def timestamp(self) -> datetime.datetime:
        return parse_timestamp(self.date)


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    role: Role
    text: str
    timestamp: int

    def as_history(self) -> dict[str, str]:
        return {"role": self.role, "text": self.text}
