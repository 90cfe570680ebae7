# /concierge/services/ai_service.py

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

import openai
from openai import AsyncOpenAI

from concierge.config import strings
from concierge.config.settings import settings
from concierge.models.context import ConversationMessage
from concierge.utils.alerting import alerting_service
from concierge.utils.circuit_breaker import CircuitBreaker, CircuitOpenError
from concierge.utils.metrics import llm_requests_counter
from concierge.utils.tasks import fire_and_forget

# This service is the only place that talks to the LLM provider. It never
# retries and never raises: every failure comes back as a Completion carrying
# a fixed user-safe message, so provider error text cannot leak to callers.

logger = logging.getLogger(__name__)

# The client timeout fires first so the breaker sees the APITimeoutError
DEADLINE_SLACK_SECONDS = 2


@dataclass(frozen=True)
class Completion:
    text: Optional[str] = None
    error_type: Optional[str] = None
    retryable: bool = False
    user_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_type is None


def _failure(error_type: str, retryable: bool, user_message: str) -> Completion:
    return Completion(error_type=error_type, retryable=retryable, user_message=user_message)


class AIService:
    def __init__(self, api_key: Optional[str] = settings.openai_api_key):
        if api_key:
            # Retries belong to the caller; the request deadline covers one attempt
            self.openai_client = AsyncOpenAI(
                api_key=api_key,
                max_retries=0,
                timeout=settings.llm_timeout_seconds,
            )
        else:
            self.openai_client = None
        self._missing_key_alerted = False
        self.model = settings.llm_model
        # Bad requests and credentials say nothing about provider health
        self.breaker = CircuitBreaker(
            "openai",
            ignored_exceptions=(openai.BadRequestError, openai.AuthenticationError),
        )

    def build_messages(self, system_prompt: str, history: List[ConversationMessage], message: str) -> List[dict]:
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend({"role": m.role, "content": m.content} for m in history)
        messages.append({"role": "user", "content": message})
        return messages

    async def _create(self, messages: List[dict]) -> str:
        response = await self.openai_client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        )
        return response.choices[0].message.content or ""

    async def complete(
        self,
        system_prompt: str,
        history: List[ConversationMessage],
        message: str,
        user_id: Optional[str] = None,
    ) -> Completion:
        """
        Ask the model for the next assistant reply.

        Returns:
            Completion with `text` on success, otherwise the mapped failure
        """
        if not self.openai_client:
            logger.error("LLM call skipped: OPENAI_API_KEY is not configured.")
            if not self._missing_key_alerted:
                self._missing_key_alerted = True
                self._alert_operators("LLM provider key is not configured", "alert_llm_missing_key")
            llm_requests_counter.labels(model=self.model, status="not_configured").inc()
            return _failure("not_configured", False, strings.PROVIDER_AUTH_FAILURE)

        messages = self.build_messages(system_prompt, history, message)
        try:
            text = await asyncio.wait_for(
                self.breaker.call(self._create, messages),
                timeout=settings.llm_timeout_seconds + DEADLINE_SLACK_SECONDS,
            )
        except Exception as e:
            completion = self._map_failure(e, user_id)
            llm_requests_counter.labels(model=self.model, status=completion.error_type).inc()
            return completion

        llm_requests_counter.labels(model=self.model, status="success").inc()
        return Completion(text=text)

    def _alert_operators(self, error: str, name: str):
        fire_and_forget(
            alerting_service.send_critical_alert(error, {"provider": "openai", "model": self.model}),
            name=name,
        )

    def _map_failure(self, error: Exception, user_id: Optional[str]) -> Completion:
        status = getattr(error, "status_code", None)

        if isinstance(error, openai.RateLimitError) or status == 429:
            logger.warning(f"LLM provider rate limited the request for user {user_id}")
            return _failure("rate_limit", True, strings.PROVIDER_RATE_LIMITED)

        if isinstance(error, (asyncio.TimeoutError, openai.APITimeoutError, openai.APIConnectionError)):
            logger.warning(f"LLM provider timed out or was unreachable for user {user_id}: {type(error).__name__}")
            return _failure("timeout", True, strings.PROVIDER_TIMEOUT)

        if isinstance(error, openai.AuthenticationError) or status == 401:
            logger.critical("LLM provider rejected our credentials. Chat is down until the key is fixed.")
            self._alert_operators("LLM provider authentication failed", "alert_llm_auth_failure")
            return _failure("auth_error", False, strings.PROVIDER_AUTH_FAILURE)

        if isinstance(error, CircuitOpenError) or (status is not None and status >= 500):
            logger.error(f"LLM provider unavailable for user {user_id}: {type(error).__name__} (status={status})")
            return _failure("api_error", True, strings.PROVIDER_UNAVAILABLE)

        logger.error(f"Unexpected LLM failure for user {user_id}: {type(error).__name__}", exc_info=error)
        return _failure("unknown", True, strings.PROVIDER_UNKNOWN_FAILURE)


# Globally accessible instance
ai_service = AIService()
