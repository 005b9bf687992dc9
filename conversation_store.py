from __future__ import annotations
import time
from typing import Callable, Iterable, Mapping, Optional, Protocol

import structlog

from coach_service import FALLBACK_RESPONSE
from id_generator import IdGenerator, RandomIdGenerator
from models import ChatMessage, Role
from observable import Observable

log = structlog.get_logger(__name__)

WELCOME_TEXT = (
    "Hey! I'm Faisal, your personal AI coach. I can build you a custom workout "
    "plan, check your form cues, or explain nutrition. What's your goal today?"
)


class Advisor(Protocol):
    async def advise(
        self, query: str, history: Iterable[Mapping[str, str]] = ()
    ) -> str: ...


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class ConversationStore(Observable):
    """Append-only chat log with at most one outstanding advice request."""

    def __init__(
        self,
        advisor: Advisor,
        id_generator: Optional[IdGenerator] = None,
        clock: Callable[[], int] = _epoch_ms,
    ) -> None:
        super().__init__()
        self.advisor = advisor
        self.ids = id_generator or RandomIdGenerator()
        self.clock = clock
        self.awaiting_response = False
        self.messages: list[ChatMessage] = [
            ChatMessage(id="welcome", role="model", text=WELCOME_TEXT, timestamp=clock())
        ]

    def _append(self, role: Role, text: str) -> ChatMessage:
        msg = ChatMessage(id=self.ids.next(), role=role, text=text, timestamp=self.clock())
        self.messages = [*self.messages, msg]
        self._notify()
        return msg

    def history(self) -> list[dict[str, str]]:
        return [m.as_history() for m in self.messages]

    async def send(self, user_text: str) -> Optional[ChatMessage]:
        """Post ``user_text`` and append the coach's reply.

        Blank input, or input arriving while a reply is pending, is dropped and
        ``None`` is returned. Otherwise the reply message is returned.
        """
        if not user_text or not user_text.strip() or self.awaiting_response:
            return None
        history = self.history()
        self._append("user", user_text)
        self.awaiting_response = True
        self._notify()
        try:
            text = await self.advisor.advise(user_text, history)
        except Exception:
            log.exception("advisor raised")
            text = FALLBACK_RESPONSE
        finally:
            self.awaiting_response = False
        return self._append("model", text)
