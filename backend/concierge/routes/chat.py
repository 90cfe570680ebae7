# /concierge/routes/chat.py

from fastapi import APIRouter

from concierge.models.api import ChatRequest
from concierge.services.chat_service import get_chat_service

# Chat turns. Validation failures come back as {"error": {...}} via the
# ConciergeError handler; every other failure is an error-shaped chat reply.

router = APIRouter(
    prefix="/chat",
    tags=["Chat"]
)


@router.post("")
async def chat_turn(chat_request: ChatRequest):
    result = await get_chat_service().handle_turn(chat_request)
    return result.model_dump(by_alias=True, mode="json", exclude_none=True)
