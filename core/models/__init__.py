# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - dataset.py: TabularDataset produced by the ingestor
# - chat.py: Conversation log and chat proxy wire schemas
# - project.py: Model projects, optimization types and guard decisions
# - session.py: Session snapshot schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Dataset Models - Uploaded tabular data
# -----------------------------------------------------------------------------
from .dataset import (
    FileMeta,
    ParseErrorKind,
    TabularDataset,
)

# -----------------------------------------------------------------------------
# Chat Models - Conversation log and proxy contract
# -----------------------------------------------------------------------------
from .chat import (
    ChatTurn,
    ConversationState,
    Message,
    MessageKind,
    MessageRole,
    ProxyChatRequest,
    ProxyChatResponse,
    ProxyErrorCategory,
    ProxyErrorResponse,
)

# -----------------------------------------------------------------------------
# Project Models - Optimization choices and their projects
# -----------------------------------------------------------------------------
from .project import (
    OPTIMIZATION_CATALOG,
    CreateModelResult,
    GuardDecision,
    ModelProject,
    ModelProjectUpdate,
    OptimizationAvailability,
    OptimizationInfo,
    OptimizationType,
    ProjectStatus,
    optimization_info,
)

# -----------------------------------------------------------------------------
# Session Models
# -----------------------------------------------------------------------------
from .session import (
    SessionCreateResponse,
    SessionResponse,
)

__all__ = [
    # Dataset
    "FileMeta",
    "ParseErrorKind",
    "TabularDataset",
    # Chat
    "ChatTurn",
    "ConversationState",
    "Message",
    "MessageKind",
    "MessageRole",
    "ProxyChatRequest",
    "ProxyChatResponse",
    "ProxyErrorCategory",
    "ProxyErrorResponse",
    # Project
    "OPTIMIZATION_CATALOG",
    "CreateModelResult",
    "GuardDecision",
    "ModelProject",
    "ModelProjectUpdate",
    "OptimizationAvailability",
    "OptimizationInfo",
    "OptimizationType",
    "ProjectStatus",
    "optimization_info",
    # Session
    "SessionCreateResponse",
    "SessionResponse",
]
