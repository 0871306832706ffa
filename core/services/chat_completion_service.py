# =============================================================================
# core/services/chat_completion_service.py - Chat Proxy Service
# =============================================================================
# Stateless forwarder between the chat proxy endpoint and the completion
# provider (any OpenAI-compatible API, Groq by default).
#
# Responsibilities:
# - check the server-held credential at request time
# - attach model and sampling parameters to the caller's messages
# - return only the assistant's reply text
# - translate provider failures into (status, message) pairs
#
# The credential never leaves this module: it is not logged and not echoed
# in any error.
# =============================================================================

import logging
from typing import Any

import openai
from openai import AsyncOpenAI

from app.config import settings
from core.models.chat import ChatTurn

logger = logging.getLogger(__name__)

NO_RESPONSE_FALLBACK = "No response from AI model"
PROVIDER_ERROR_FALLBACK = "LLM server error - try again shortly."
MISSING_CREDENTIAL_MESSAGE = "Missing GROQ_API_KEY in environment"

# Lazy-loaded provider client, rebuilt if the credential changes
_client: AsyncOpenAI | None = None
_client_key: str | None = None


class ChatCompletionError(Exception):
    """
    Raised when a completion cannot be produced.

    Carries the HTTP status and the message to return to the proxy caller.
    """

    def __init__(self, status_code: int, message: str, code: str = "PROVIDER_ERROR"):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


class ConfigurationError(ChatCompletionError):
    """Raised when the provider credential is not configured."""

    def __init__(self):
        super().__init__(500, MISSING_CREDENTIAL_MESSAGE, code="CONFIGURATION_ERROR")


def get_provider_client(api_key: str) -> AsyncOpenAI:
    """Get or create the provider client (lazy initialization)."""
    global _client, _client_key
    if _client is None or _client_key != api_key:
        _client = AsyncOpenAI(
            api_key=api_key,
            base_url=settings.CHAT_PROVIDER_BASE_URL,
            timeout=settings.CHAT_PROVIDER_TIMEOUT,
            max_retries=0,
        )
        _client_key = api_key
    return _client


def build_completion_request(messages: list[ChatTurn]) -> dict[str, Any]:
    """
    Build the upstream request body.

    Returns:
        {model, messages, temperature, max_tokens}
    """
    return {
        "model": settings.CHAT_MODEL,
        "messages": [turn.model_dump() for turn in messages],
        "temperature": settings.CHAT_TEMPERATURE,
        "max_tokens": settings.CHAT_MAX_TOKENS,
    }


def require_credential() -> str:
    """
    Return the provider credential.

    Raises:
        ConfigurationError: If GROQ_API_KEY is not set
    """
    api_key = settings.GROQ_API_KEY
    if not api_key:
        raise ConfigurationError()
    return api_key


def _provider_message(error: openai.APIStatusError) -> str | None:
    """Pull the provider's own error text out of an error response."""
    body = error.body
    if isinstance(body, dict):
        message = body.get("message")
        if not message and isinstance(body.get("error"), dict):
            message = body["error"].get("message")
        if isinstance(message, str) and message:
            return message
    return None


def extract_reply(response: Any) -> str:
    """
    Extract the assistant text from a completion response.

    Empty or absent content becomes NO_RESPONSE_FALLBACK, never an error.
    """
    choices = getattr(response, "choices", None) or []
    if not choices:
        return NO_RESPONSE_FALLBACK
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content or NO_RESPONSE_FALLBACK


class ChatCompletionService:
    """
    Service for forwarding conversations to the completion provider.
    """

    @staticmethod
    async def complete(messages: list[ChatTurn], api_key: str | None = None) -> str:
        """
        Send messages to the provider and return the reply text.

        Args:
            messages: Ordered turns, system instruction first
            api_key: Credential (default: require_credential())

        Returns:
            Assistant reply text, or NO_RESPONSE_FALLBACK

        Raises:
            ConfigurationError: No credential configured
            ChatCompletionError: Provider or transport failure
        """
        key = api_key or require_credential()
        request = build_completion_request(messages)
        client = get_provider_client(key)

        logger.info(f"Forwarding {len(messages)} messages to {request['model']}")

        try:
            response = await client.chat.completions.create(**request)
        except openai.APIStatusError as e:
            message = _provider_message(e) or PROVIDER_ERROR_FALLBACK
            logger.error(f"Provider API error {e.status_code}: {message}")
            raise ChatCompletionError(e.status_code, message)
        except openai.APIConnectionError as e:
            # APITimeoutError is a subclass of APIConnectionError
            logger.error(f"Provider unreachable: {e}")
            raise ChatCompletionError(500, PROVIDER_ERROR_FALLBACK, code="PROVIDER_UNAVAILABLE")
        except openai.APIError as e:
            # e.g. APIResponseValidationError: the provider answered, but unusably
            logger.error(f"Provider returned an unusable response: {e}")
            raise ChatCompletionError(500, PROVIDER_ERROR_FALLBACK)

        return extract_reply(response)
