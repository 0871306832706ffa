# =============================================================================
# app/routers/chat_proxy.py - Chat Proxy Endpoint
# =============================================================================
# POST /api/chat
#
# Accepts {messages: [{role, content}, ...]}, forwards them to the
# completion provider with the server-held credential, and answers with
# {message} on success or {error, code} with a non-2xx status on failure.
#
# Order of checks:
# 1. credential configured        -> 500 CONFIGURATION_ERROR
# 2. messages is a well-formed list -> 400 BAD_REQUEST
# 3. provider call                -> provider status passed through
# =============================================================================

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core.models.chat import ProxyChatRequest, ProxyChatResponse, ProxyErrorResponse
from core.services.chat_completion_service import (
    ChatCompletionError,
    ChatCompletionService,
    require_credential,
)

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_MESSAGES = "Invalid messages format"


def _error_response(status_code: int, message: str, code: str) -> JSONResponse:
    """Render a proxy error body."""
    return JSONResponse(
        status_code=status_code,
        content=ProxyErrorResponse(error=message, code=code).model_dump(),
    )


@router.post(
    "/chat",
    response_model=ProxyChatResponse,
    responses={
        400: {"model": ProxyErrorResponse},
        401: {"model": ProxyErrorResponse},
        429: {"model": ProxyErrorResponse},
        500: {"model": ProxyErrorResponse},
    },
)
async def chat_proxy(request: Request):
    """
    Forward a conversation to the completion provider.

    The body is validated by hand so that malformed input is reported as
    400 with {error}, the same shape as every other proxy failure.
    """
    try:
        api_key = require_credential()
    except ChatCompletionError as e:
        logger.error("Chat proxy called without a provider credential")
        return _error_response(e.status_code, e.message, e.code)

    try:
        payload = await request.json()
        chat_request = ProxyChatRequest.model_validate(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        logger.warning(f"Rejected malformed chat proxy request: {e}")
        return _error_response(400, INVALID_MESSAGES, "BAD_REQUEST")

    try:
        reply = await ChatCompletionService.complete(chat_request.messages, api_key=api_key)
    except ChatCompletionError as e:
        return _error_response(e.status_code, e.message, e.code)

    return ProxyChatResponse(message=reply)
