"""Chat API: SDLC assistant."""

from fastapi import APIRouter, Depends, HTTPException
from openai import OpenAI

from app.api.deps import (
    get_app_settings,
    get_current_user_id,
    get_llm_client,
    get_store,
    require_text,
)
from app.chains.chat_response import chat_response
from app.core.config import Settings
from app.core.errors import AppError
from app.core.logging import get_logger
from app.core.schemas_api import ChatRequest, ChatResponse
from app.db.memory_store import MemoryStore, RecordKind

logger = get_logger(__name__)

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
def chat_endpoint(
    request: ChatRequest,
    store: MemoryStore = Depends(get_store),
    client: OpenAI = Depends(get_llm_client),
    settings: Settings = Depends(get_app_settings),
    user_id: str = Depends(get_current_user_id),
) -> ChatResponse:
    message = require_text(request.message, "Message is required")

    try:
        reply = chat_response(message, settings=settings, client=client)
        chat_message = store.create(
            RecordKind.CHAT_MESSAGE,
            {"user_id": user_id, "message": message, "response": reply},
        )
    except AppError:
        raise
    except Exception as e:
        logger.exception("Chat failed")
        raise HTTPException(status_code=500, detail="Failed to process chat message") from e

    return ChatResponse(chat_message=chat_message, response=reply)
