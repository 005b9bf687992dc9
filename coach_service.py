from __future__ import annotations
from typing import Any, Iterable, Mapping, Optional

import structlog
from google import genai
from google.genai import types

log = structlog.get_logger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

SYSTEM_INSTRUCTION = """You are "Faisal", the elite personal trainer behind "FitWithFaisal".
Your mottos are "Train. Transform. Thrive." and "Stronger Every Day".
Your tone is high-energy, motivating, concise, and professional.
You help users build habits, track workouts, and understand fitness concepts.
Keep answers under 200 words unless asked for a detailed plan.
Format your response with Markdown (lists, bold text) for readability.
If asked for a workout plan, provide a structured list with exercises, sets, and reps."""

EMPTY_RESPONSE = (
    "Let's crush this workout! (I couldn't generate a specific response right now)."
)
FALLBACK_RESPONSE = (
    "I'm having trouble connecting to the FitWithFaisal server. "
    "Please ensure your API key is correctly configured in the environment."
)


class CoachService:
    """Gemini-backed fitness advice. ``advise`` never raises."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        client: Any = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self._client = client

    def _get_client(self) -> Any:
        # a fresh client per call; its async transport is bound to the running loop
        if self._client is not None:
            return self._client
        return genai.Client(api_key=self.api_key)

    @staticmethod
    def _history(history: Iterable[Mapping[str, str]]) -> list[types.Content]:
        return [
            types.Content(
                role="user" if h["role"] == "user" else "model",
                parts=[types.Part(text=h["text"])],
            )
            for h in history
        ]

    async def advise(
        self, query: str, history: Iterable[Mapping[str, str]] = ()
    ) -> str:
        try:
            contents = self._history(history)
            chat = self._get_client().aio.chats.create(
                model=self.model,
                config=types.GenerateContentConfig(
                    system_instruction=SYSTEM_INSTRUCTION
                ),
                history=contents,
            )
            log.debug("advice requested", model=self.model, history=len(contents))
            result = await chat.send_message(query)
            return result.text or EMPTY_RESPONSE
        except Exception:
            log.exception("advice request failed", model=self.model)
            return FALLBACK_RESPONSE
