# backend/tests/unit/test_ai_client.py
import asyncio
import httpx
import openai
import pytest
from unittest.mock import AsyncMock

from concierge.config import strings
from concierge.config.settings import settings
from concierge.models.context import ConversationMessage
from concierge.services.ai_service import AIService
from concierge.utils.circuit_breaker import CircuitOpenError

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _status_error(cls, status):
    return cls("provider said no", response=httpx.Response(status, request=_REQUEST), body=None)


@pytest.fixture
def service():
    return AIService(api_key="sk-test")


@pytest.mark.asyncio
async def test_missing_key_is_not_retryable(mocker):
    mocker.patch("concierge.services.ai_service.alerting_service.send_critical_alert", new_callable=AsyncMock)
    completion = await AIService(api_key=None).complete("system", [], "hi")
    assert not completion.ok
    assert completion.error_type == "not_configured"
    assert completion.retryable is False
    assert completion.user_message == strings.PROVIDER_AUTH_FAILURE


@pytest.mark.asyncio
async def test_missing_key_alerts_operators_once(mocker):
    alert = mocker.patch("concierge.services.ai_service.alerting_service.send_critical_alert", new_callable=AsyncMock)
    service = AIService(api_key=None)

    await service.complete("system", [], "hi")
    await service.complete("system", [], "hi again")
    await asyncio.sleep(0)

    alert.assert_awaited_once()
    assert "not configured" in alert.await_args.args[0]


@pytest.mark.asyncio
async def test_success_returns_text(service, mocker):
    create = mocker.patch.object(service, "_create", new_callable=AsyncMock, return_value="Let's book movers.")
    history = [ConversationMessage(role="user", content="hey"), ConversationMessage(role="assistant", content="hi!")]

    completion = await service.complete("system", history, "movers?", user_id="user-1")

    assert completion.ok and completion.text == "Let's book movers."
    messages = create.await_args.args[0]
    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert messages[-1]["content"] == "movers?"


@pytest.mark.parametrize("error, error_type, retryable, user_message", [
    (_status_error(openai.RateLimitError, 429), "rate_limit", True, strings.PROVIDER_RATE_LIMITED),
    (openai.APITimeoutError(request=_REQUEST), "timeout", True, strings.PROVIDER_TIMEOUT),
    (openai.APIConnectionError(request=_REQUEST), "timeout", True, strings.PROVIDER_TIMEOUT),
    (asyncio.TimeoutError(), "timeout", True, strings.PROVIDER_TIMEOUT),
    (_status_error(openai.InternalServerError, 503), "api_error", True, strings.PROVIDER_UNAVAILABLE),
    (CircuitOpenError("openai"), "api_error", True, strings.PROVIDER_UNAVAILABLE),
    (ValueError("weird"), "unknown", True, strings.PROVIDER_UNKNOWN_FAILURE),
])
@pytest.mark.asyncio
async def test_failure_mapping(service, mocker, error, error_type, retryable, user_message):
    mocker.patch.object(service, "_create", new_callable=AsyncMock, side_effect=error)

    completion = await service.complete("system", [], "hi")

    assert completion.error_type == error_type
    assert completion.retryable is retryable
    assert completion.user_message == user_message
    assert completion.text is None


@pytest.mark.asyncio
async def test_auth_failure_alerts_operators(service, mocker):
    alert = mocker.patch("concierge.services.ai_service.alerting_service.send_critical_alert", new_callable=AsyncMock)
    mocker.patch.object(service, "_create", new_callable=AsyncMock,
                        side_effect=_status_error(openai.AuthenticationError, 401))

    completion = await service.complete("system", [], "hi")
    await asyncio.sleep(0)

    assert completion.error_type == "auth_error"
    assert completion.retryable is False
    assert "technical issue" in completion.user_message
    alert.assert_awaited_once()


@pytest.mark.asyncio
async def test_provider_error_text_never_leaks(service, mocker):
    mocker.patch.object(service, "_create", new_callable=AsyncMock,
                        side_effect=RuntimeError("sk-secret-key leaked in stack trace"))
    completion = await service.complete("system", [], "hi")
    assert "sk-secret" not in completion.user_message


@pytest.mark.asyncio
async def test_breaker_opens_after_repeated_server_errors(service, mocker):
    create = mocker.patch.object(service, "_create", new_callable=AsyncMock,
                                 side_effect=_status_error(openai.InternalServerError, 500))
    for _ in range(service.breaker.failure_threshold):
        await service.complete("system", [], "hi")

    completion = await service.complete("system", [], "hi")

    assert completion.error_type == "api_error"
    assert create.await_count == service.breaker.failure_threshold


@pytest.mark.asyncio
async def test_client_timeouts_count_toward_opening_the_breaker(service, mocker):
    create = mocker.patch.object(service, "_create", new_callable=AsyncMock,
                                 side_effect=openai.APITimeoutError(request=_REQUEST))
    for _ in range(service.breaker.failure_threshold):
        completion = await service.complete("system", [], "hi")
        assert completion.error_type == "timeout"

    completion = await service.complete("system", [], "hi")

    assert completion.error_type == "api_error"
    assert completion.retryable is True
    assert create.await_count == service.breaker.failure_threshold


@pytest.mark.asyncio
async def test_client_timeout_at_the_deadline_is_seen_by_the_breaker(service, mocker):
    mocker.patch.object(settings, "llm_timeout_seconds", 0.05)

    async def slow_then_timeout(messages):
        await asyncio.sleep(0.08)
        raise openai.APITimeoutError(request=_REQUEST)

    mocker.patch.object(service, "_create", side_effect=slow_then_timeout)

    completion = await service.complete("system", [], "hi")

    assert completion.error_type == "timeout"
    assert service.breaker.failure_count == 1
