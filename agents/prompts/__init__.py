# =============================================================================
# agents/prompts/ - System Prompts for the Assistant
# =============================================================================
# This package contains system prompts:
# - assistant_system.py: Optimization assistant prompt (schema-aware)
# =============================================================================

from agents.prompts.assistant_system import (
    ASSISTANT_ROLE,
    build_assistant_prompt,
)

__all__ = [
    "ASSISTANT_ROLE",
    "build_assistant_prompt",
]
