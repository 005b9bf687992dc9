import os
import sys
import unittest
import warnings
from altair.utils.deprecation import AltairDeprecationWarning

warnings.simplefilter("ignore", AltairDeprecationWarning)

from streamlit.testing.v1 import AppTest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from conversation_store import WELCOME_TEXT

APP_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "streamlit_app.py")


class EchoAdvisor:
    async def advise(self, query, history=()):
        return f"**echo** {query}"


class StreamlitAppTest(unittest.TestCase):
    def setUp(self) -> None:
        self.yaml_path = "test_gui_settings.yaml"
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)
        os.environ["YAML_PATH"] = self.yaml_path
        self.at = AppTest.from_file(APP_PATH, default_timeout=20)
        self.at.run(timeout=20)

    def tearDown(self) -> None:
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)
        os.environ.pop("YAML_PATH", None)

    def _state(self):
        return self.at.session_state["app_state"]

    def _go(self, view: str) -> None:
        self.at.sidebar.radio[0].set_value(view).run()
        self.assertFalse(self.at.exception)

    def test_dashboard_renders(self) -> None:
        self.assertFalse(self.at.exception)
        self.assertIn("Stronger Every Day.", [t.value for t in self.at.title])
        metrics = {m.label: m.value for m in self.at.metric}
        self.assertEqual(metrics["Workouts"], "2")
        self.assertEqual(metrics["Minutes"], "105")
        self.assertEqual(metrics["Streak"], "Active")

    def test_log_workout_flow(self) -> None:
        self._go("log")
        self.assertEqual(self._state().view, "log")
        self.at.button(key="draft_add_exercise").click().run()
        self.assertEqual(len(self._state().editor.exercises), 1)
        self.at.button(key="save_workout").click().run()
        self.assertEqual(self.at.warning[0].value, "Please give your workout a name!")
        self.assertEqual(len(self._state().workouts), 2)
        self.at.text_input(key="draft_name").input("Leg Day").run()
        self.at.button(key="save_workout").click().run()
        self.assertFalse(self.at.exception)
        state = self._state()
        self.assertEqual(len(state.workouts), 3)
        self.assertEqual(state.workouts[0].name, "Leg Day")
        self.assertEqual(state.view, "dashboard")
        self.assertTrue(state.editor.is_empty)

    def test_leaving_log_discards_draft(self) -> None:
        self._go("log")
        self.at.button(key="draft_add_exercise").click().run()
        self._go("dashboard")
        self.assertEqual(self._state().editor.exercises, [])

    def test_progress_renders(self) -> None:
        self._go("progress")
        metrics = {m.label: m.value for m in self.at.metric}
        self.assertEqual(metrics["Lifetime"], "4.5 Tons")

    def test_coach_chat(self) -> None:
        self._go("coach")
        self.assertEqual(self.at.chat_message[0].markdown[0].value, WELCOME_TEXT)
        self._state().conversation.advisor = EchoAdvisor()
        self.at.chat_input[0].set_value("hi").run()
        self.assertFalse(self.at.exception)
        messages = self._state().conversation.messages
        self.assertEqual([m.role for m in messages], ["model", "user", "model"])
        self.assertEqual(messages[-1].text, "**echo** hi")


if __name__ == "__main__":
    unittest.main()
