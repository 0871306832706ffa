# =============================================================================
# agents/ - Conversational Assistant
# =============================================================================
# This package contains the guided model-creation conversation:
# - conversation_engine.py: Idle/WaitingForReply state machine, uploads and
#   optimization choices
# - response_generator.py: Scripted assistant texts
#
# Prompts:
# - prompts/assistant_system.py: Schema-aware system instruction
# =============================================================================

from agents.conversation_engine import (
    ChoiceOutcome,
    ConversationEngine,
    new_conversation_state,
)

__all__ = [
    "ChoiceOutcome",
    "ConversationEngine",
    "new_conversation_state",
]
