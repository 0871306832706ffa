# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================
# session_service is imported directly (it depends on agents/, which in
# turn depends on these services).
# =============================================================================

from .creation_guard import CreationGuard
from .project_registry import ProjectRegistry
from .chat_completion_service import (
    ChatCompletionError,
    ChatCompletionService,
    ConfigurationError,
)

__all__ = [
    "CreationGuard",
    "ProjectRegistry",
    "ChatCompletionError",
    "ChatCompletionService",
    "ConfigurationError",
]
