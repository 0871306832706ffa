# =============================================================================
# lib/chat_proxy_client.py - Chat Proxy Client
# =============================================================================
# Sends an ordered message list to the chat proxy endpoint and returns the
# assistant's text. Every transport or HTTP failure is translated into one
# of a small closed set of ProxyErrorCategory values with a user-facing
# message, raised as ChatProxyError.
#
# Status mapping:
#   500 + CONFIGURATION_ERROR code -> configuration_error
#   400                            -> bad_request
#   401                            -> unauthorized
#   429                            -> rate_limited
#   500, network failure, timeout  -> upstream_unavailable
#   anything else non-2xx          -> unknown (provider message if present)
#
# Usage:
#   client = ChatProxyClient()
#   reply = await client.send([ChatTurn(role="user", content="hi")])
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from app.config import settings
from core.models.chat import ChatTurn, ProxyErrorCategory

logger = logging.getLogger(__name__)

CONFIGURATION_ERROR_CODE = "CONFIGURATION_ERROR"

# User-facing text per category
CATEGORY_MESSAGES: dict[ProxyErrorCategory, str] = {
    ProxyErrorCategory.CONFIGURATION_ERROR: "The AI assistant is not configured yet. Please contact support.",
    ProxyErrorCategory.BAD_REQUEST: "Invalid request to AI service. Please try rephrasing your message.",
    ProxyErrorCategory.UNAUTHORIZED: "Invalid API key or permission denied. Please contact support.",
    ProxyErrorCategory.RATE_LIMITED: "Too many requests. Please wait a moment and try again.",
    ProxyErrorCategory.UPSTREAM_UNAVAILABLE: "LLM server error - try again shortly.",
    ProxyErrorCategory.UNKNOWN: "Oops! AI assistant failed to respond.",
}

NETWORK_ERROR_MESSAGE = (
    "Failed to connect to AI assistant. Please check your connection and try again."
)

STATUS_CATEGORIES: dict[int, ProxyErrorCategory] = {
    400: ProxyErrorCategory.BAD_REQUEST,
    401: ProxyErrorCategory.UNAUTHORIZED,
    429: ProxyErrorCategory.RATE_LIMITED,
    500: ProxyErrorCategory.UPSTREAM_UNAVAILABLE,
}


class ChatProxyError(Exception):
    """
    A failed round-trip, already mapped to a user-facing category.

    Attributes:
        category: Which ProxyErrorCategory this failure belongs to
        user_message: Text safe to show in the conversation
        status_code: HTTP status from the proxy, if one was received
        detail: Raw error text for logs (never shown to the user)
    """

    def __init__(
        self,
        category: ProxyErrorCategory,
        user_message: str | None = None,
        status_code: int | None = None,
        detail: str | None = None,
    ):
        self.category = category
        self.user_message = user_message or category_message(category)
        self.status_code = status_code
        self.detail = detail
        super().__init__(self.user_message)

    @property
    def retryable(self) -> bool:
        """Configuration errors will not fix themselves."""
        return self.category != ProxyErrorCategory.CONFIGURATION_ERROR


def category_message(category: ProxyErrorCategory) -> str:
    """User-facing text for a category."""
    try:
        return CATEGORY_MESSAGES[category]
    except KeyError:
        raise ValueError(f"No message for proxy error category: {category!r}")


def _read_json_body(response: httpx.Response) -> dict[str, Any]:
    """Parse a JSON object body, tolerating anything else."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def map_error_response(response: httpx.Response) -> ChatProxyError:
    """
    Translate a non-2xx proxy response into a ChatProxyError.

    Args:
        response: The proxy's HTTP response

    Returns:
        ChatProxyError with the matching category
    """
    status = response.status_code
    body = _read_json_body(response)
    provider_error = body.get("error") if isinstance(body.get("error"), str) else None

    if body.get("code") == CONFIGURATION_ERROR_CODE:
        category = ProxyErrorCategory.CONFIGURATION_ERROR
    else:
        category = STATUS_CATEGORIES.get(status, ProxyErrorCategory.UNKNOWN)

    user_message = None
    if category == ProxyErrorCategory.UNKNOWN and provider_error:
        user_message = provider_error

    return ChatProxyError(
        category,
        user_message=user_message,
        status_code=status,
        detail=provider_error,
    )


class ChatProxyClient:
    """
    Client for the chat proxy endpoint.

    Args:
        url: Proxy endpoint (default: settings.CHAT_PROXY_URL)
        timeout: Transport timeout in seconds (default: settings.CHAT_PROXY_TIMEOUT)
        transport: Optional httpx transport (tests use MockTransport or ASGITransport)
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or settings.CHAT_PROXY_URL
        self.timeout = timeout or settings.CHAT_PROXY_TIMEOUT
        self._transport = transport

    @staticmethod
    def build_request_body(messages: Sequence[ChatTurn]) -> dict[str, Any]:
        """Shape the outbound body: {messages: [{role, content}, ...]}."""
        return {"messages": [turn.model_dump() for turn in messages]}

    async def send(self, messages: Sequence[ChatTurn]) -> str:
        """
        Post messages to the proxy and return the assistant's text.

        Args:
            messages: Ordered turns, system instruction first

        Returns:
            The assistant's reply text

        Raises:
            ChatProxyError: For every failure, already categorised
        """
        body = self.build_request_body(messages)
        logger.debug(f"Sending {len(messages)} messages to chat proxy at {self.url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=body)
        except httpx.TimeoutException as e:
            logger.error(f"Chat proxy timed out: {e}")
            raise ChatProxyError(ProxyErrorCategory.UPSTREAM_UNAVAILABLE, detail=str(e))
        except httpx.HTTPError as e:
            logger.error(f"Chat proxy unreachable: {e}")
            raise ChatProxyError(
                ProxyErrorCategory.UPSTREAM_UNAVAILABLE,
                user_message=NETWORK_ERROR_MESSAGE,
                detail=str(e),
            )

        if response.is_success:
            data = _read_json_body(response)
            message = data.get("message")
            if not isinstance(message, str):
                raise ChatProxyError(
                    ProxyErrorCategory.UNKNOWN,
                    status_code=response.status_code,
                    detail="Proxy response has no message",
                )
            return message

        error = map_error_response(response)
        logger.error(
            f"Chat proxy returned {response.status_code} ({error.category.value}): {error.detail}"
        )
        raise error
