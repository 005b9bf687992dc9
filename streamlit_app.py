import asyncio
import os
import warnings
from contextlib import contextmanager
from typing import Generator

import altair as alt
import pandas as pd
import streamlit as st
from altair.utils.deprecation import AltairDeprecationWarning

warnings.filterwarnings("ignore", category=AltairDeprecationWarning)
from app_state import AppState
from config import load_settings
from logging_config import configure_logging
from models import VIEWS, Exercise, WorkoutValidationError
from stats_service import COACH_TIP, MOTTOS

NAV_LABELS = {
    "dashboard": "🏠 Dashboard",
    "log": "➕ Log Workout",
    "progress": "📈 Progress",
    "coach": "💬 AI Coach",
}


class FitApp:
    """Streamlit front end for workout logging, progress and the AI coach."""

    def __init__(self, yaml_path: str = "settings.yaml") -> None:
        self.settings = load_settings(yaml_path)
        if "app_state" not in st.session_state:
            configure_logging(self.settings.log_level)
            st.session_state.app_state = AppState.from_settings(self.settings)
        self.state: AppState = st.session_state.app_state
        self.weight_unit = self.settings.weight_unit

    def _configure_page(self) -> None:
        st.set_page_config(
            page_title="FitWithFaisal",
            page_icon="🏋️",
            layout="wide",
        )

    @contextmanager
    def _section(self, title: str) -> Generator[None, None, None]:
        st.header(title)
        yield

    def _metric_grid(self, metrics: list[tuple[str, str]]) -> None:
        """Render metrics in a row of columns."""
        cols = st.columns(len(metrics))
        for col, (label, val) in zip(cols, metrics):
            with col:
                st.metric(label, val)

    def _line_chart(self, df: pd.DataFrame, x: str, y: str, *, x_label: str, y_label: str) -> None:
        chart = (
            alt.Chart(df)
            .mark_line(point=True)
            .encode(
                x=alt.X(x, title=x_label, sort=None),
                y=alt.Y(y, title=y_label),
                tooltip=list(df.columns),
            )
        )
        st.altair_chart(chart, use_container_width=True)

    def _bar_chart(self, df: pd.DataFrame, x: str, y: str, *, x_label: str, y_label: str) -> None:
        chart = (
            alt.Chart(df)
            .mark_bar()
            .encode(
                x=alt.X(x, title=x_label, sort=None),
                y=alt.Y(y, title=y_label),
                tooltip=list(df.columns),
            )
        )
        st.altair_chart(chart, use_container_width=True)

    def _sidebar(self) -> None:
        st.sidebar.title("🏋️ FitWithFaisal")
        st.session_state.nav = self.state.view
        st.sidebar.radio(
            "Navigation",
            list(VIEWS),
            format_func=lambda v: NAV_LABELS[v],
            key="nav",
            on_change=self._on_nav,
        )
        st.sidebar.divider()
        st.sidebar.caption("Guest User · Pro Member")

    def _on_nav(self) -> None:
        if self.state.view == "log":
            self._clear_draft_widgets()
        self.state.navigate(st.session_state.nav)

    def _clear_draft_widgets(self) -> None:
        for key in [k for k in st.session_state.keys() if str(k).startswith("draft_")]:
            del st.session_state[key]

    def _dashboard_tab(self) -> None:
        st.title(MOTTOS[0])
        st.subheader(MOTTOS[1])
        overview = self.state.stats.overview()
        self._metric_grid(
            [
                ("Workouts", str(overview["workouts"])),
                ("Minutes", str(overview["minutes"])),
                ("Level", "Pro"),
                ("Streak", "Active" if overview["streak_active"] else "Inactive"),
            ]
        )
        with self._section("Recent Activity"):
            if st.button("+ LOG NEW", key="dash_log_new"):
                self.state.navigate("log")
                st.rerun()
            if not overview["recent"]:
                st.info("No workouts logged yet. Start today!")
            for row in overview["recent"]:
                with st.container(border=True):
                    left, right = st.columns([3, 1])
                    with left:
                        st.markdown(f"**{row['day']}** · **{row['name']}**")
                        st.caption(
                            f"{row['exercise_count']} Exercises • {row['duration_minutes']} Min"
                        )
                    with right:
                        st.caption("Total Volume")
                        st.markdown(f"**{row['volume']:,.0f} {self.weight_unit}**")
        with st.container(border=True):
            st.subheader("Coach's Tip")
            st.markdown(f"_\"{COACH_TIP}\"_")

    def _update_name(self) -> None:
        self.state.editor.set_name(st.session_state.get("draft_name", ""))

    def _update_duration(self) -> None:
        self.state.editor.set_duration(st.session_state.get("draft_duration"))

    def _update_notes(self) -> None:
        self.state.editor.set_notes(st.session_state.get("draft_notes", ""))

    def _update_exercise_name(self, exercise_id: str) -> None:
        self.state.editor.rename_exercise(
            exercise_id, st.session_state.get(f"draft_ex_{exercise_id}", "")
        )

    def _update_set(self, exercise_id: str, set_id: str, field: str) -> None:
        self.state.editor.update_set_field(
            exercise_id, set_id, field, st.session_state.get(f"draft_{field}_{set_id}")
        )

    def _exercise_card(self, index: int, exercise: Exercise) -> None:
        editor = self.state.editor
        with st.container(border=True):
            cols = st.columns([6, 1])
            with cols[0]:
                st.text_input(
                    f"Exercise {index + 1}",
                    value=exercise.name,
                    placeholder="Exercise Name (e.g. Bench Press)",
                    key=f"draft_ex_{exercise.id}",
                    on_change=self._update_exercise_name,
                    args=(exercise.id,),
                )
            with cols[1]:
                st.button(
                    "🗑️",
                    key=f"draft_rm_ex_{exercise.id}",
                    on_click=editor.remove_exercise,
                    args=(exercise.id,),
                )
            for num, s in enumerate(exercise.sets, start=1):
                c_num, c_weight, c_reps, c_done, c_rm = st.columns([1, 3, 3, 2, 1])
                with c_num:
                    st.markdown(f"**{num}**")
                with c_weight:
                    st.number_input(
                        f"Weight ({self.weight_unit})",
                        min_value=0.0,
                        value=float(s.weight),
                        key=f"draft_weight_{s.id}",
                        on_change=self._update_set,
                        args=(exercise.id, s.id, "weight"),
                    )
                with c_reps:
                    st.number_input(
                        "Reps",
                        min_value=0,
                        step=1,
                        value=int(s.reps),
                        key=f"draft_reps_{s.id}",
                        on_change=self._update_set,
                        args=(exercise.id, s.id, "reps"),
                    )
                with c_done:
                    st.checkbox(
                        "Done",
                        value=s.completed,
                        key=f"draft_completed_{s.id}",
                        on_change=self._update_set,
                        args=(exercise.id, s.id, "completed"),
                    )
                with c_rm:
                    st.button(
                        "✖",
                        key=f"draft_rm_set_{s.id}",
                        on_click=editor.remove_set,
                        args=(exercise.id, s.id),
                    )
            st.button(
                "+ Add Set",
                key=f"draft_add_set_{exercise.id}",
                on_click=editor.add_set,
                args=(exercise.id,),
            )

    def _log_tab(self) -> None:
        editor = self.state.editor
        with self._section("Log Workout"):
            st.text_input(
                "Workout Name",
                value=editor.name,
                placeholder="e.g. Morning Cardio, Leg Destroyer",
                key="draft_name",
                on_change=self._update_name,
            )
            st.number_input(
                "Duration (Minutes)",
                min_value=0,
                step=1,
                value=editor.duration_minutes,
                key="draft_duration",
                on_change=self._update_duration,
            )
            st.text_area(
                "Notes",
                value=editor.notes or "",
                key="draft_notes",
                on_change=self._update_notes,
            )
        for index, exercise in enumerate(editor.exercises):
            self._exercise_card(index, exercise)
        st.button("+ Add Exercise", key="draft_add_exercise", on_click=editor.add_exercise)
        save_col, cancel_col = st.columns(2)
        with save_col:
            if st.button("💾 Finish Workout", key="save_workout", type="primary"):
                try:
                    editor.save()
                except WorkoutValidationError as e:
                    st.warning(str(e))
                else:
                    self._clear_draft_widgets()
                    st.rerun()
        with cancel_col:
            if st.button("Cancel", key="cancel_workout"):
                self._clear_draft_widgets()
                self.state.cancel_log()
                st.rerun()

    def _progress_tab(self) -> None:
        with self._section("Your Progress"):
            progress = self.state.stats.progress()
            st.subheader("Volume Load Trend")
            if progress["volume"]:
                df_vol = pd.DataFrame(progress["volume"])
                self._line_chart(
                    df_vol, "label", "volume", x_label="Date", y_label="Volume"
                )
            else:
                st.info("Log a workout to see your volume trend.")
            st.subheader("Weekly Frequency")
            df_freq = pd.DataFrame(progress["frequency"])
            self._bar_chart(df_freq, "day", "count", x_label="Day", y_label="Workouts")
            with st.container(border=True):
                st.subheader("Total Lifted")
                st.metric("Lifetime", f"{progress['tons']:.1f} Tons")
                st.caption(f"That's roughly equal to {progress['cars']} small cars!")

    def _coach_tab(self) -> None:
        conversation = self.state.conversation
        with self._section("Coach Faisal (AI)"):
            for msg in conversation.messages:
                with st.chat_message("user" if msg.role == "user" else "assistant"):
                    st.markdown(msg.text)
            prompt = st.chat_input(
                "Ask about workouts, diet, or form...",
                disabled=conversation.awaiting_response,
            )
            if prompt:
                with st.spinner("Faisal is typing..."):
                    asyncio.run(conversation.send(prompt))
                st.rerun()

    def run(self) -> None:
        self._configure_page()
        self._sidebar()
        view = self.state.view
        if view == "dashboard":
            self._dashboard_tab()
        elif view == "log":
            self._log_tab()
        elif view == "progress":
            self._progress_tab()
        else:
            self._coach_tab()


if __name__ == "__main__":
    yaml_path = os.environ.get("YAML_PATH", "settings.yaml")
    FitApp(yaml_path=yaml_path).run()
