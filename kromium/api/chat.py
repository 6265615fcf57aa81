from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import Optional

from ..core.config import settings
from ..core.database import get_db
from ..api.deps import get_current_user, rate_limit
from ..services.chat_service import (
    ChatCompletionClient, ChatFailure, ChatService, get_chat_client, RATE_LIMITED_REPLY
)
from ..schemas.chat import ChatHealth, ChatHistoryResponse, ChatReply, ChatRequest
from ..schemas.common import MessageResponse
from ..models.user import User

router = APIRouter(prefix="/chat", tags=["Chat"])

chat_rate_limit = rate_limit(
    "chat",
    max_requests=settings.CHAT_RATE_LIMIT_PER_MINUTE,
    window_seconds=60,
    detail=RATE_LIMITED_REPLY,
)


def _failure_response(failure: ChatFailure) -> JSONResponse:
    return JSONResponse(
        status_code=failure.status_code,
        content={"success": False, "reply": failure.reply, "message": failure.reply},
    )


@router.post("", response_model=ChatReply, response_model_exclude_none=True)
async def chat(
    payload: ChatRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: Optional[ChatCompletionClient] = Depends(get_chat_client),
    _: None = Depends(chat_rate_limit)
):
    """Answer a message and keep the exchange in the user's history."""
    service = ChatService(db, client)
    message = service.validate_message(payload.message)
    try:
        reply = await service.reply(message)
    except ChatFailure as failure:
        return _failure_response(failure)

    service.save_exchange(current_user.id, message, reply)
    return ChatReply(reply=reply)


@router.post("/guest", response_model=ChatReply, response_model_exclude_none=True)
async def guest_chat(
    payload: ChatRequest,
    db: Session = Depends(get_db),
    client: Optional[ChatCompletionClient] = Depends(get_chat_client),
    _: None = Depends(chat_rate_limit)
):
    """Answer without an account; nothing is stored."""
    service = ChatService(db, client)
    message = service.validate_message(payload.message)
    try:
        reply = await service.reply(message)
    except ChatFailure as failure:
        return _failure_response(failure)

    return ChatReply(reply=reply, guest=True)


@router.get("/history", response_model=ChatHistoryResponse)
async def chat_history(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return ChatHistoryResponse(messages=ChatService(db, None).history(current_user.id))


@router.delete("/history", response_model=MessageResponse)
async def clear_chat_history(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    ChatService(db, None).clear(current_user.id)
    return MessageResponse(message="Chat history cleared successfully")


@router.get("/health", response_model=ChatHealth)
async def chat_health():
    configured = settings.chat_configured
    return ChatHealth(
        status="operational" if configured else "degraded",
        service="Kromium Assistant",
        api_key_configured=configured,
    )
