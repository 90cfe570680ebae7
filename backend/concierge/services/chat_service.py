# /concierge/services/chat_service.py

import time
import logging
from datetime import datetime, timezone
from typing import Optional

import structlog

from concierge.config import strings
from concierge.config.settings import settings
from concierge.models.api import ChatErrorResponse, ChatRequest, ChatResponse, ChatResult, ResponseMeta
from concierge.services.admission_service import Admitter, build_admitter
from concierge.services.ai_service import AIService, ai_service
from concierge.services.cache_service import cache_service
from concierge.services.context_service import (
    ContextService,
    build_conversation_history,
    context_service,
    sanitize_input,
    validate_request,
)
from concierge.services.db_service import db_service
from concierge.services.prompt_service import compose_system_prompt
from concierge.services.response_service import ResponseService, response_service
from concierge.utils.errors import InvalidRequestError
from concierge.utils.metrics import chat_turns_counter

# One chat turn: validate -> sanitize -> stored profile -> assemble context ->
# compose prompt -> admit -> provider -> interpret -> quality log. Only
# request validation raises; every other failure becomes an error-shaped
# response the client can show as-is.

logger = logging.getLogger(__name__)


def _meta(started: float, **extra) -> ResponseMeta:
    return ResponseMeta(
        duration=int((time.perf_counter() - started) * 1000),
        timestamp=datetime.now(timezone.utc),
        **extra,
    )


class ChatService:
    def __init__(
        self,
        admitter: Admitter,
        ai: AIService = ai_service,
        contexts: ContextService = context_service,
        responses: ResponseService = response_service,
    ):
        self.admitter = admitter
        self.ai = ai
        self.contexts = contexts
        self.responses = responses

    async def handle_turn(self, request: ChatRequest) -> ChatResult:
        started = time.perf_counter()
        user_id = validate_request(request)

        with structlog.contextvars.bound_contextvars(user_id=user_id):
            try:
                return await self._handle_turn(request, user_id, started)
            except InvalidRequestError:
                raise
            except Exception as e:
                chat_turns_counter.labels(outcome="unexpected_error").inc()
                logger.error(f"Unexpected chat failure for user {user_id}: {type(e).__name__}", exc_info=True)
                return ChatErrorResponse(
                    text=strings.UNEXPECTED_FAILURE,
                    retryable=True,
                    internal_notes={"errorType": "unexpected"},
                    meta=_meta(started, error_type="unexpected"),
                )

    async def _handle_turn(self, request: ChatRequest, user_id: str, started: float) -> ChatResult:
        message = sanitize_input(request.message)
        logger.info(
            f"Chat turn received: user={user_id} message_length={len(message)} "
            f"history_length={len(request.conversation_history)} "
            f"has_current_task={bool(request.current_task)} "
            f"move_distance={(request.user_state or {}).get('moveDistance')}"
        )

        if not message:
            chat_turns_counter.labels(outcome="empty_message").inc()
            return ChatResponse(text=strings.EMPTY_MESSAGE_NUDGE, meta=_meta(started))

        stored_profile = await db_service.get_user_knowledge(user_id)
        context = self.contexts.assemble(request, message, stored_profile)
        system_prompt = compose_system_prompt(context)
        history = build_conversation_history(request.conversation_history, settings.max_history_messages)

        if not await self.admitter.allow(user_id):
            chat_turns_counter.labels(outcome="rate_limited").inc()
            return ChatErrorResponse(
                text=strings.SLOW_DOWN,
                retryable=True,
                internal_notes={"errorType": "rate_limited"},
                meta=_meta(started, rate_limited=True, error_type="rate_limited"),
            )

        completion = await self.ai.complete(system_prompt, history, message, user_id=user_id)
        if not completion.ok:
            chat_turns_counter.labels(outcome=f"provider_{completion.error_type}").inc()
            return ChatErrorResponse(
                text=completion.user_message,
                retryable=completion.retryable,
                internal_notes={"errorType": completion.error_type},
                meta=_meta(started, error_type=completion.error_type),
            )

        response = self.responses.interpret(completion.text, context)
        self.responses.log_validation(response.text, user_id)
        response.meta = _meta(started)

        chat_turns_counter.labels(outcome="success").inc()
        logger.info(
            f"Chat turn answered: user={user_id} duration_ms={response.meta.duration} "
            f"response_length={len(response.text)} has_state_updates={bool(response.state_updates)} "
            f"vendors_surfaced={len(response.internal_notes.get('vendorsSurfaced', []))}"
        )
        return response


_chat_service: Optional[ChatService] = None


def get_chat_service() -> ChatService:
    """Built on first use so the admission store picks up the configured backend."""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService(build_admitter(cache_service.redis))
    return _chat_service
