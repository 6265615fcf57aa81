from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from datetime import datetime, timezone
from typing import List, Optional
import logging
import time

import httpx

from ..core.config import settings
from ..models.chat import ChatHistory
from ..schemas.chat import ChatMessage

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are Kromium Assistant, a friendly healthcare AI that helps users with digital medical services, teleconsultation, and health-related questions.

Your responsibilities:
- Answer health and medical questions clearly and empathetically
- Provide information about teleconsultation services
- Guide users on booking appointments
- Explain Kromium Health platform features
- Offer general wellness advice

Important guidelines:
- ONLY respond to healthcare, medical, or Kromium Health service questions
- If asked about non-health topics, politely decline: "I'm sorry, I can only assist with healthcare-related inquiries or Kromium Health services."
- Always be empathetic, clear, and accurate
- Recommend consulting a doctor for serious medical concerns
- Never provide specific medical diagnoses or prescriptions
- Keep responses concise and user-friendly
- Use a warm, professional tone"""

UNAVAILABLE_REPLY = "I'm currently unavailable. Please try again later."
BUSY_REPLY = "I'm experiencing high traffic. Please try again in a moment."
FAILED_REPLY = "I'm having trouble processing your request. Please try again."
RATE_LIMITED_REPLY = "I'm receiving too many requests right now. Please wait 10 seconds and try again."


class ChatProviderError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ChatFailure(Exception):
    """A chat request that must be answered with a fallback reply."""

    def __init__(self, status_code: int, reply: str):
        super().__init__(reply)
        self.status_code = status_code
        self.reply = reply


class ChatCompletionClient:
    """Calls an OpenAI-compatible chat completion endpoint."""

    def __init__(
        self,
        api_key: str,
        url: str = settings.CHAT_API_URL,
        model: str = settings.CHAT_MODEL,
        timeout: float = settings.CHAT_TIMEOUT_SECONDS,
    ):
        self.api_key = api_key
        self.url = url
        self.model = model
        self.timeout = timeout

    async def complete(self, message: str) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": message},
            ],
            "max_tokens": settings.CHAT_MAX_TOKENS,
            "temperature": settings.CHAT_TEMPERATURE,
            "top_p": 1,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(self.url, json=payload, headers=headers)
            except httpx.HTTPError as e:
                raise ChatProviderError(f"Chat provider unreachable: {e}") from e

        if response.status_code != 200:
            raise ChatProviderError(
                f"Chat provider returned {response.status_code}",
                status_code=response.status_code,
            )

        choices = response.json().get("choices") or [{}]
        reply = ((choices[0].get("message") or {}).get("content") or "").strip()
        if not reply:
            raise ChatProviderError("No response from AI")
        return reply


def get_chat_client() -> Optional[ChatCompletionClient]:
    """Completion client dependency; None when no API key is configured."""
    if not settings.chat_configured:
        return None
    return ChatCompletionClient(api_key=settings.GROQ_API_KEY)


class ChatService:
    def __init__(self, db: Session, client: Optional[ChatCompletionClient]):
        self.db = db
        self.client = client

    @staticmethod
    def validate_message(message) -> str:
        if not isinstance(message, str) or not message.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please provide a valid message"
            )
        if len(message) > settings.CHAT_MESSAGE_MAX_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Message too long. Please keep it under {settings.CHAT_MESSAGE_MAX_LENGTH} characters."
            )
        return message.strip()

    async def reply(self, message: str) -> str:
        if self.client is None:
            logger.error("Chat provider API key not configured")
            raise ChatFailure(status.HTTP_500_INTERNAL_SERVER_ERROR, UNAVAILABLE_REPLY)

        try:
            return await self.client.complete(message)
        except ChatProviderError as e:
            logger.error(f"Chat API error: {e}")
            if e.status_code == 429:
                raise ChatFailure(status.HTTP_429_TOO_MANY_REQUESTS, BUSY_REPLY) from e
            if e.status_code in (401, 403):
                logger.error("Chat provider authentication failed")
                raise ChatFailure(status.HTTP_500_INTERNAL_SERVER_ERROR, UNAVAILABLE_REPLY) from e
            raise ChatFailure(status.HTTP_500_INTERNAL_SERVER_ERROR, FAILED_REPLY) from e

    def history(self, user_id: int) -> List[ChatMessage]:
        chat_history = self._find(user_id)
        if not chat_history:
            return []
        return [ChatMessage.model_validate(m) for m in chat_history.messages]

    def save_exchange(self, user_id: int, text: str, reply: str) -> None:
        """Append a user/bot pair; failures are logged, never raised."""
        now = datetime.now(timezone.utc)
        stamp = int(time.time() * 1000)
        exchange = [
            ChatMessage(id=str(stamp), text=text, sender="user", timestamp=now),
            ChatMessage(id=str(stamp + 1), text=reply, sender="bot", timestamp=now),
        ]

        try:
            chat_history = self._find(user_id)
            if chat_history is None:
                chat_history = ChatHistory(user_id=user_id, messages=[])
                self.db.add(chat_history)

            messages = list(chat_history.messages or [])
            messages.extend(m.model_dump(mode="json") for m in exchange)
            # Keep the most recent messages only
            chat_history.messages = messages[-settings.CHAT_HISTORY_LIMIT:]
            self.db.commit()
            logger.info(f"Chat history saved for user {user_id}")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving chat history: {e}")

    def clear(self, user_id: int) -> None:
        chat_history = self._find(user_id)
        if chat_history:
            self.db.delete(chat_history)
            self.db.commit()

    def _find(self, user_id: int) -> Optional[ChatHistory]:
        return self.db.query(ChatHistory).filter(ChatHistory.user_id == user_id).first()
