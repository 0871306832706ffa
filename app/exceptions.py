# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from core.models.dataset import ParseErrorKind


class OptiChatException(Exception):
    """
    Base exception for the OptiChat API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "OPTICHAT_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Session Exceptions
# =============================================================================

class SessionNotFoundError(OptiChatException):
    """Raised when a session ID doesn't exist."""

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session not found: {session_id}",
            code="SESSION_NOT_FOUND",
            status_code=404,
            suggestion="Create a new session with POST /api/v1/sessions",
            details={"session_id": session_id}
        )


class NoDataError(OptiChatException):
    """Raised when an optimization is chosen before any data was uploaded."""

    def __init__(self):
        super().__init__(
            message="No data uploaded yet",
            code="NO_DATA",
            status_code=400,
            suggestion="Upload a CSV file first using POST /api/v1/sessions/{id}/upload",
        )


# =============================================================================
# Conversation Exceptions
# =============================================================================

class ConversationBusyError(OptiChatException):
    """Raised when a message is sent while a reply is still pending."""

    def __init__(self):
        super().__init__(
            message="The assistant is still thinking about your last message",
            code="CONVERSATION_BUSY",
            status_code=409,
            suggestion="Wait for the current reply before sending another message",
        )


class EmptyMessageError(OptiChatException):
    """Raised when a message is empty or whitespace only."""

    def __init__(self):
        super().__init__(
            message="Message is empty",
            code="EMPTY_MESSAGE",
            status_code=400,
            suggestion="Type a question about your data or the available optimizations",
        )


# =============================================================================
# Model Project Exceptions
# =============================================================================

class ModelProjectNotFoundError(OptiChatException):
    """Raised when a model project ID doesn't exist in the registry."""

    def __init__(self, project_id: str):
        super().__init__(
            message=f"Model project not found: {project_id}",
            code="MODEL_PROJECT_NOT_FOUND",
            status_code=404,
            suggestion="List projects with GET /api/v1/sessions/{id}/models",
            details={"project_id": project_id}
        )


class InvalidStatusTransitionError(OptiChatException):
    """Raised when an update would move a project backwards in its lifecycle."""

    def __init__(self, project_id: str, current: str, requested: str):
        super().__init__(
            message=f"Cannot change status from {current} to {requested}",
            code="INVALID_STATUS_TRANSITION",
            status_code=400,
            suggestion="A completed project stays completed",
            details={"project_id": project_id, "current": current, "requested": requested}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class ParseError(OptiChatException):
    """
    Base class for files the ingestor refuses.

    `message` is the text shown in the upload area.
    """

    kind: ParseErrorKind

    def __init__(self, kind: ParseErrorKind, message: str, status_code: int, **kwargs):
        super().__init__(
            message=message,
            code=kind.value.upper(),
            status_code=status_code,
            **kwargs,
        )
        self.kind = kind


class UnsupportedFileTypeError(ParseError):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            ParseErrorKind.UNSUPPORTED_TYPE,
            "Please upload a CSV file only.",
            status_code=415,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed}
        )


class FileTooLargeError(ParseError):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_bytes: int, max_mb: int):
        super().__init__(
            ParseErrorKind.SIZE_EXCEEDED,
            f"File size must be less than {max_mb}MB.",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": round(size_bytes / (1024 * 1024), 1), "max_mb": max_mb}
        )


class EmptyFileError(ParseError):
    """Raised when a file has no non-blank lines."""

    def __init__(self, filename: str):
        super().__init__(
            ParseErrorKind.EMPTY_FILE,
            "Error parsing CSV file. Please ensure it's properly formatted.",
            status_code=400,
            suggestion="The file is empty; the first non-blank line must hold the column names",
            details={"filename": filename}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def optichat_exception_handler(
    request: Request,
    exc: OptiChatException
) -> JSONResponse:
    """
    Convert OptiChatException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
