from datetime import datetime
from typing import Any, List, Literal, Optional

from .common import CamelModel


class ChatRequest(CamelModel):
    # Checked by ChatService so blank and oversized input get a 400
    message: Any = None


class ChatMessage(CamelModel):
    id: str
    text: str
    sender: Literal["user", "bot"]
    timestamp: datetime


class ChatReply(CamelModel):
    success: bool = True
    reply: str
    guest: Optional[bool] = None


class ChatHistoryResponse(CamelModel):
    success: bool = True
    messages: List[ChatMessage]


class ChatHealth(CamelModel):
    success: bool = True
    status: Literal["operational", "degraded"]
    service: str
    api_key_configured: bool
