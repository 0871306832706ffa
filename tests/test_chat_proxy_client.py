# =============================================================================
# tests/test_chat_proxy_client.py - Chat Proxy Client Tests
# =============================================================================
# Tests for ChatProxyClient.send and error categorisation, using
# httpx.MockTransport in place of the proxy endpoint.
# =============================================================================

import asyncio
import json

import httpx
import pytest

from core.models.chat import ChatTurn, ProxyErrorCategory
from lib.chat_proxy_client import (
    CATEGORY_MESSAGES,
    NETWORK_ERROR_MESSAGE,
    ChatProxyClient,
    ChatProxyError,
    category_message,
)

PROXY_URL = "http://proxy.test/api/chat"

TURNS = [
    ChatTurn(role="system", content="You are a helpful AI assistant."),
    ChatTurn(role="user", content="Which optimization fits?"),
]


def _client(handler) -> ChatProxyClient:
    return ChatProxyClient(url=PROXY_URL, timeout=5, transport=httpx.MockTransport(handler))


def _send(client: ChatProxyClient) -> str:
    return asyncio.run(client.send(TURNS))


def _respond(status_code: int, body=None):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body if body is not None else {})
    return handler


class TestSuccess:
    """Test successful round-trips."""

    def test_returns_message(self):
        """The reply text comes from the message field."""
        client = _client(_respond(200, {"message": "Try price recommendation."}))

        assert _send(client) == "Try price recommendation."

    def test_request_body_shape(self):
        """The proxy receives {messages: [{role, content}, ...]} in order."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"message": "ok"})

        _send(_client(handler))

        assert seen["method"] == "POST"
        assert seen["url"] == PROXY_URL
        assert seen["body"] == {
            "messages": [
                {"role": "system", "content": "You are a helpful AI assistant."},
                {"role": "user", "content": "Which optimization fits?"},
            ]
        }

    def test_success_without_message_is_unknown(self):
        """A 2xx body lacking a message string is a failure."""
        with pytest.raises(ChatProxyError) as exc_info:
            _send(_client(_respond(200, {"reply": "wrong field"})))

        assert exc_info.value.category == ProxyErrorCategory.UNKNOWN


class TestStatusMapping:
    """Test non-2xx responses."""

    @pytest.mark.parametrize("status_code, category", [
        (400, ProxyErrorCategory.BAD_REQUEST),
        (401, ProxyErrorCategory.UNAUTHORIZED),
        (429, ProxyErrorCategory.RATE_LIMITED),
        (500, ProxyErrorCategory.UPSTREAM_UNAVAILABLE),
    ])
    def test_known_statuses(self, status_code, category):
        """Each known status maps to its own category and text."""
        with pytest.raises(ChatProxyError) as exc_info:
            _send(_client(_respond(status_code, {"error": "provider said no"})))

        error = exc_info.value
        assert error.category == category
        assert error.status_code == status_code
        assert error.user_message == CATEGORY_MESSAGES[category]
        assert error.detail == "provider said no"

    def test_configuration_error_code(self):
        """A 500 flagged as CONFIGURATION_ERROR is not retryable."""
        body = {"error": "Missing GROQ_API_KEY in environment", "code": "CONFIGURATION_ERROR"}

        with pytest.raises(ChatProxyError) as exc_info:
            _send(_client(_respond(500, body)))

        error = exc_info.value
        assert error.category == ProxyErrorCategory.CONFIGURATION_ERROR
        assert error.retryable is False
        assert "GROQ_API_KEY" not in error.user_message

    def test_other_status_uses_provider_text(self):
        """Unlisted statuses show the provider's message when there is one."""
        with pytest.raises(ChatProxyError) as exc_info:
            _send(_client(_respond(418, {"error": "Model is warming up"})))

        assert exc_info.value.category == ProxyErrorCategory.UNKNOWN
        assert exc_info.value.user_message == "Model is warming up"

    def test_other_status_without_text(self):
        """Unlisted statuses fall back to the generic message."""
        with pytest.raises(ChatProxyError) as exc_info:
            _send(_client(_respond(418)))

        assert exc_info.value.user_message == CATEGORY_MESSAGES[ProxyErrorCategory.UNKNOWN]

    def test_non_json_error_body(self):
        """A plain-text error body still maps by status."""
        def handler(request):
            return httpx.Response(429, text="slow down")

        with pytest.raises(ChatProxyError) as exc_info:
            _send(_client(handler))

        assert exc_info.value.category == ProxyErrorCategory.RATE_LIMITED


class TestTransportFailures:
    """Test network errors and timeouts."""

    def test_network_error(self):
        """Connection failures are upstream-unavailable with a connectivity hint."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ChatProxyError) as exc_info:
            _send(_client(handler))

        assert exc_info.value.category == ProxyErrorCategory.UPSTREAM_UNAVAILABLE
        assert exc_info.value.user_message == NETWORK_ERROR_MESSAGE
        assert exc_info.value.retryable is True

    def test_timeout(self):
        """Timeouts are upstream-unavailable."""
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ChatProxyError) as exc_info:
            _send(_client(handler))

        assert exc_info.value.category == ProxyErrorCategory.UPSTREAM_UNAVAILABLE
        assert exc_info.value.user_message == CATEGORY_MESSAGES[ProxyErrorCategory.UPSTREAM_UNAVAILABLE]


class TestCategoryMessages:
    """Test the category text table."""

    def test_every_category_has_message(self):
        """No category is left without a user-facing text."""
        for category in ProxyErrorCategory:
            assert category_message(category)

    def test_messages_are_distinct(self):
        """Each category reads differently."""
        assert len(set(CATEGORY_MESSAGES.values())) == len(ProxyErrorCategory)
