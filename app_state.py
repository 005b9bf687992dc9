from __future__ import annotations
import datetime
from typing import Callable, Iterable, Optional

import structlog

from coach_service import CoachService
from conversation_store import Advisor, ConversationStore
from id_generator import IdGenerator, RandomIdGenerator
from models import VIEWS, Workout, utc_now
from observable import Observable
from seed_sample_data import sample_workouts
from settings_schema import SettingsSchema
from stats_service import StatisticsService
from workout_editor import WorkoutEditor

log = structlog.get_logger(__name__)


class AppState(Observable):
    """Current view plus the workout collection, draft editor and chat.

    Leaving the log view discards the draft; the chat and the workout list
    survive every view switch.
    """

    def __init__(
        self,
        advisor: Advisor,
        workouts: Optional[Iterable[Workout]] = None,
        id_generator: Optional[IdGenerator] = None,
        clock: Callable[[], datetime.datetime] = utc_now,
        settings: Optional[SettingsSchema] = None,
    ) -> None:
        super().__init__()
        self.settings = settings or SettingsSchema()
        self.ids = id_generator or RandomIdGenerator()
        self.clock = clock
        self.view = "dashboard"
        self.workouts: list[Workout] = list(workouts or [])
        self.editor = WorkoutEditor(
            on_save=self.save_workout,
            id_generator=self.ids,
            clock=clock,
            default_duration=self.settings.default_duration,
        )
        self.conversation = ConversationStore(advisor, id_generator=self.ids)
        self.stats = StatisticsService(
            lambda: self.workouts,
            clock=clock,
            streak_days=self.settings.streak_days,
            recent_limit=self.settings.recent_limit,
        )

    @classmethod
    def from_settings(
        cls,
        settings: SettingsSchema,
        now: Optional[datetime.datetime] = None,
    ) -> "AppState":
        """Build the default application seeded with the demo workouts."""
        coach = CoachService(api_key=settings.api_key, model=settings.model)
        return cls(coach, workouts=sample_workouts(now), settings=settings)

    def navigate(self, view: str) -> None:
        if view not in VIEWS:
            raise ValueError(f"unknown view: {view}")
        if view == self.view:
            return
        if self.view == "log":
            if not self.editor.is_empty:
                log.info("draft discarded", exercises=len(self.editor.exercises))
            self.editor.cancel()
        log.debug("view changed", previous=self.view, view=view)
        self.view = view
        self._notify()

    def save_workout(self, workout: Workout) -> None:
        """Persistence boundary for the editor: prepend and go back to the dashboard."""
        self.workouts = [workout, *self.workouts]
        self.view = "dashboard"
        self._notify()

    def cancel_log(self) -> None:
        self.editor.cancel()
        self.navigate("dashboard")
