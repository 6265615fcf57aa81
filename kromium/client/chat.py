from datetime import datetime, timedelta
from typing import Callable, List, Optional
import logging
import uuid

from pydantic import ValidationError

from .http import ApiError
from .services.chat import ChatService
from .session import Session
from .storage import ChatHistoryStore
from ..schemas.chat import ChatMessage

logger = logging.getLogger(__name__)

GREETING = (
    "Hi, I'm Kromium Assistant! I can help you with your healthcare questions, "
    "booking a consultation, or learning about our services.\n\n"
    "I provide general health information and advice only. For medical "
    "emergencies, please contact emergency services immediately."
)
SIGN_IN_PROMPT = (
    "Please sign in to use the chat assistant. This helps us provide you "
    "with personalized healthcare support."
)
COOLDOWN_MESSAGE = (
    "I'm receiving many requests right now. Please wait 10 seconds before "
    "sending another message."
)
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again to continue chatting."
CONNECTION_MESSAGE = "Sorry, I'm having trouble connecting. Please try again later."
EMPTY_REPLY = "I apologize, but I couldn't generate a response."

COOLDOWN = timedelta(seconds=10)


class ChatWidget:
    """Conversation with the assistant, persisted through a ChatHistoryStore."""

    def __init__(
        self,
        session: Session,
        chat: ChatService,
        history: ChatHistoryStore,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.session = session
        self.chat = chat
        self.history = history
        self.clock = clock
        self.messages: List[ChatMessage] = []
        self.is_open = False
        self.loading = False
        self.cooldown_until: Optional[datetime] = None

    def _message(self, text: str, sender: str) -> ChatMessage:
        return ChatMessage(id=uuid.uuid4().hex, text=text, sender=sender, timestamp=self.clock())

    def _append(self, text: str, sender: str) -> ChatMessage:
        message = self._message(text, sender)
        self.messages.append(message)
        self.history.save(self.messages)
        return message

    def _greet(self) -> None:
        self.messages = [self._message(GREETING, "bot")]
        self.history.save(self.messages)

    def _server_history(self) -> List[ChatMessage]:
        try:
            response = self.chat.history()
        except ApiError as e:
            logger.error(f"Error loading chat history: {e.message}")
            return []
        try:
            return [ChatMessage.model_validate(m) for m in response.get("messages") or []]
        except ValidationError as e:
            logger.warning(f"Discarding malformed server chat history: {e}")
            return []

    def open(self) -> None:
        """Show the widget, restoring saved history or greeting on first use.

        Signed-in users get the server's copy of the conversation; the local
        store is the fallback when the server has none or is unreachable.
        """
        self.is_open = True
        if self.messages:
            return
        if self.session.is_authenticated:
            self.messages = self._server_history()
            if self.messages:
                self.history.save(self.messages)
                return
        self.messages = self.history.load()
        if not self.messages:
            self._greet()

    def close(self) -> None:
        self.is_open = False

    @property
    def in_cooldown(self) -> bool:
        return self.cooldown_until is not None and self.clock() < self.cooldown_until

    def send(self, text: str) -> Optional[ChatMessage]:
        """Send a message and return the bot's answer, if one was appended."""
        text = (text or "").strip()
        if not text or self.loading or self.in_cooldown:
            return None

        if not self.session.is_authenticated:
            return self._append(SIGN_IN_PROMPT, "bot")

        self._append(text, "user")
        self.loading = True
        try:
            response = self.chat.send(text)
        except ApiError as e:
            logger.error(f"Chatbot error: {e.message}")
            if e.is_rate_limited:
                self.cooldown_until = self.clock() + COOLDOWN
                return self._append(COOLDOWN_MESSAGE, "bot")
            if e.is_unauthorized:
                return self._append(SESSION_EXPIRED_MESSAGE, "bot")
            if e.status_code is None:
                return self._append(CONNECTION_MESSAGE, "bot")
            return self._append(e.payload.get("reply") or e.message, "bot")
        finally:
            self.loading = False

        return self._append(response.get("reply") or EMPTY_REPLY, "bot")

    def clear(self) -> None:
        """Drop the conversation locally and, when signed in, on the server."""
        if self.session.is_authenticated:
            try:
                self.chat.clear_history()
            except ApiError as e:
                logger.error(f"Error clearing chat history: {e.message}")
        self.history.clear()
        self._greet()
