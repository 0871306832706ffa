# =============================================================================
# core/models/session.py - Session Schemas
# =============================================================================
# These models define the API contract for session operations:
# - SessionCreateResponse: returned when a session is started
# - SessionResponse: snapshot of one session's conversation and guard state
#
# A session is one user's in-memory workspace: one conversation, one
# creation guard and one project registry. Nothing is persisted.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field

from .chat import Message
from .dataset import TabularDataset
from .project import ModelProject, OptimizationType


class SessionCreateResponse(BaseModel):
    """
    Response when creating a session.

    Example:
        {
            "session_id": "550e8400-e29b-41d4-a716-446655440000",
            "created_at": "2024-01-15T10:30:00Z",
            "message": "Session created successfully"
        }
    """

    session_id: str = Field(..., examples=["550e8400-e29b-41d4-a716-446655440000"])
    created_at: datetime
    message: str = Field(default="Session created successfully")


class SessionResponse(BaseModel):
    """
    Snapshot of a session.

    `processing_types` are optimizations whose project creation is under
    way; `created_types` can never be created again in this session.
    """

    session_id: str
    created_at: datetime
    awaiting_reply: bool = False
    dataset: TabularDataset | None = None
    messages: list[Message] = Field(default_factory=list)
    processing_types: list[OptimizationType] = Field(default_factory=list)
    created_types: list[OptimizationType] = Field(default_factory=list)
    projects: list[ModelProject] = Field(default_factory=list)
