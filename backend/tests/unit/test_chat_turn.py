# backend/tests/unit/test_chat_turn.py
import pytest
from unittest.mock import AsyncMock, MagicMock

from concierge.config import strings
from concierge.models.api import ChatErrorResponse, ChatRequest, ChatResponse
from concierge.services.admission_service import Admitter, InMemoryWindowStore
from concierge.services.ai_service import Completion
from concierge.services.chat_service import ChatService
from concierge.utils.errors import InvalidRequestError


@pytest.fixture
def ai():
    ai = MagicMock()
    ai.complete = AsyncMock(return_value=Completion(
        text="Dana, let's get quotes for movers this week. Want me to get quotes?"
    ))
    return ai


@pytest.fixture
def chat(ai, mock_db):
    return ChatService(Admitter(InMemoryWindowStore(), limit=2, window_seconds=60), ai=ai)


def _request(message="I need movers", **user_state):
    return ChatRequest.model_validate({
        "message": message,
        "userState": {"userId": "user-1", "name": "Dana", **user_state},
        "conversationHistory": [{"role": "assistant", "content": "Hey Dana!"}],
    })


@pytest.mark.asyncio
async def test_successful_turn(chat, ai, mock_db):
    result = await chat.handle_turn(_request())

    assert isinstance(result, ChatResponse)
    assert result.text.startswith("Dana, let's get quotes")
    assert result.state_updates["vendorInteractions"]["movers"]["mentioned"] is True
    assert result.meta.duration >= 0

    system_prompt, history, message = ai.complete.await_args.args
    assert "Dana" in system_prompt
    assert [m.content for m in history] == ["Hey Dana!"]
    assert message == "I need movers"
    mock_db.get_user_knowledge.assert_awaited_once_with("user-1")


@pytest.mark.asyncio
async def test_missing_user_id_raises_invalid_request(chat, ai):
    request = ChatRequest.model_validate({"message": "hi", "userState": {}})
    with pytest.raises(InvalidRequestError):
        await chat.handle_turn(request)
    ai.complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_blank_message_gets_nudge_without_provider_call(chat, ai):
    result = await chat.handle_turn(_request(message="  <br>  "))
    assert result.text == strings.EMPTY_MESSAGE_NUDGE
    ai.complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_rate_limited_turn(chat, ai):
    await chat.handle_turn(_request())
    await chat.handle_turn(_request())
    result = await chat.handle_turn(_request())

    assert isinstance(result, ChatErrorResponse)
    assert result.text == strings.SLOW_DOWN
    assert result.retryable is True
    assert result.meta.rate_limited is True
    assert ai.complete.await_count == 2


@pytest.mark.asyncio
async def test_provider_failure_is_error_shaped(chat, ai):
    ai.complete.return_value = Completion(
        error_type="timeout", retryable=True, user_message=strings.PROVIDER_TIMEOUT
    )
    result = await chat.handle_turn(_request())

    assert isinstance(result, ChatErrorResponse)
    assert result.error is True
    assert result.text == strings.PROVIDER_TIMEOUT
    assert result.internal_notes == {"errorType": "timeout"}


@pytest.mark.asyncio
async def test_unexpected_failure_is_generic(chat, mock_db):
    mock_db.get_user_knowledge.side_effect = KeyError("entries")
    result = await chat.handle_turn(_request())

    assert isinstance(result, ChatErrorResponse)
    assert result.text == strings.UNEXPECTED_FAILURE
    assert "entries" not in result.text


@pytest.mark.asyncio
async def test_stored_profile_feeds_the_prompt(chat, ai, mock_db):
    mock_db.get_user_knowledge.return_value = {"entries": {"origin_city": {"value": "Austin"}}}
    await chat.handle_turn(_request())
    system_prompt = ai.complete.await_args.args[0]
    assert "From: Austin" in system_prompt


@pytest.mark.asyncio
async def test_response_serializes_with_meta_alias(chat):
    result = await chat.handle_turn(_request())
    body = result.model_dump(by_alias=True, mode="json", exclude_none=True)
    assert set(body) >= {"text", "suggestedActions", "stateUpdates", "internalNotes", "_meta"}
