import os
import sys
import asyncio
import datetime
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from app_state import AppState
from coach_service import CoachService
from id_generator import SequentialIdGenerator
from models import WorkoutValidationError
from seed_sample_data import sample_workouts
from settings_schema import SettingsSchema

NOW = datetime.datetime(2024, 3, 15, 9, 0, tzinfo=datetime.timezone.utc)


class EchoAdvisor:
    async def advise(self, query, history=()):
        return f"echo: {query}"


class AppStateTest(unittest.TestCase):
    def setUp(self) -> None:
        self.state = AppState(
            EchoAdvisor(),
            workouts=sample_workouts(NOW),
            id_generator=SequentialIdGenerator("a"),
            clock=lambda: NOW,
        )

    def test_defaults(self) -> None:
        self.assertEqual(self.state.view, "dashboard")
        self.assertEqual([w.id for w in self.state.workouts], ["w-1", "w-2"])
        self.assertEqual(len(self.state.conversation.messages), 1)

    def test_navigate_rejects_unknown_view(self) -> None:
        with self.assertRaises(ValueError):
            self.state.navigate("settings")

    def test_save_prepends_and_returns_to_dashboard(self) -> None:
        self.state.navigate("log")
        editor = self.state.editor
        editor.set_name("Leg Day")
        editor.add_exercise()
        workout = editor.save()
        self.assertEqual(self.state.workouts[0], workout)
        self.assertEqual(len(self.state.workouts), 3)
        self.assertEqual(self.state.view, "dashboard")
        self.assertEqual(self.state.stats.overview()["workouts"], 3)

    def test_failed_save_keeps_state(self) -> None:
        self.state.navigate("log")
        self.state.editor.add_exercise()
        with self.assertRaises(WorkoutValidationError):
            self.state.editor.save()
        self.assertEqual(self.state.view, "log")
        self.assertEqual(len(self.state.workouts), 2)
        self.assertEqual(len(self.state.editor.exercises), 1)

    def test_leaving_log_discards_draft(self) -> None:
        self.state.navigate("log")
        self.state.editor.set_name("Half done")
        self.state.editor.add_exercise()
        self.state.navigate("progress")
        self.assertTrue(self.state.editor.is_empty)
        self.assertEqual(len(self.state.workouts), 2)

    def test_leaving_log_resets_duration_only_draft(self) -> None:
        self.state.navigate("log")
        self.state.editor.set_duration(90)
        self.state.navigate("dashboard")
        self.state.navigate("log")
        self.assertEqual(self.state.editor.duration_minutes, 45)
        self.assertTrue(self.state.editor.is_empty)

    def test_cancel_log(self) -> None:
        self.state.navigate("log")
        self.state.editor.add_exercise()
        self.state.cancel_log()
        self.assertEqual(self.state.view, "dashboard")
        self.assertTrue(self.state.editor.is_empty)

    def test_conversation_survives_navigation(self) -> None:
        self.state.navigate("coach")
        asyncio.run(self.state.conversation.send("hello"))
        self.state.navigate("dashboard")
        self.state.navigate("coach")
        texts = [m.text for m in self.state.conversation.messages]
        self.assertEqual(texts[-2:], ["hello", "echo: hello"])

    def test_subscribers_see_view_changes(self) -> None:
        seen = []
        self.state.subscribe(lambda: seen.append(self.state.view))
        self.state.navigate("progress")
        self.state.navigate("progress")
        self.assertEqual(seen, ["progress"])

    def test_from_settings(self) -> None:
        settings = SettingsSchema(api_key="k", model="gemini-test", default_duration=30)
        state = AppState.from_settings(settings, now=NOW)
        self.assertIsInstance(state.conversation.advisor, CoachService)
        self.assertEqual(state.conversation.advisor.model, "gemini-test")
        self.assertEqual(state.editor.duration_minutes, 30)
        self.assertEqual(len(state.workouts), 2)


if __name__ == "__main__":
    unittest.main()
