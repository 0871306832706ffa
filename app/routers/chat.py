# =============================================================================
# app/routers/chat.py - Conversation Endpoints
# =============================================================================
# Handles the guided model-creation conversation.
#
# Flow:
# 1. User uploads data (see upload.py) -> assistant offers three optimizations
# 2. User asks free-text questions -> POST /chat (one round-trip at a time)
# 3. User picks an optimization -> POST /optimizations -> at most one project
#    per optimization type is ever created in the session
# =============================================================================

import logging

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.dependencies import SessionDep
from core.models.chat import Message
from core.models.project import (
    OPTIMIZATION_CATALOG,
    GuardDecision,
    ModelProject,
    OptimizationAvailability,
    OptimizationType,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================

class ChatRequest(BaseModel):
    """Request to send a chat message."""
    message: str = Field(
        ...,
        max_length=4000,
        description="Free-text question for the assistant",
        examples=[
            "Which optimization fits my data best?",
            "What does price recommendation need from my columns?",
        ]
    )


class ChatResponse(BaseModel):
    """The assistant's reply (or the user-facing error text) for one turn."""
    session_id: str
    reply: Message
    messages: list[Message]


class OptimizationChoiceRequest(BaseModel):
    """Request to pick an optimization."""
    type: OptimizationType = Field(..., examples=["inventory"])
    label: str | None = Field(
        default=None,
        description="Text shown for the choice (defaults to the catalogue label)"
    )


class OptimizationChoiceResponse(BaseModel):
    """Outcome of an optimization choice."""
    session_id: str
    decision: GuardDecision
    success: bool
    message: str
    project: ModelProject | None = None


class OptimizationOption(BaseModel):
    """One entry of the optimization menu."""
    type: OptimizationType
    label: str
    description: str
    available: bool
    state: OptimizationAvailability


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/{session_id}/chat", response_model=ChatResponse)
async def chat(session: SessionDep, request: ChatRequest):
    """
    Send a chat message to the assistant.

    Rejected with 409 while an earlier message is still waiting for its
    reply, and with 400 when the message is blank. Provider failures are
    not errors here: they come back as an assistant message explaining
    what went wrong.
    """
    reply = await session.engine.submit_user_message(request.message)
    return ChatResponse(
        session_id=session.id,
        reply=reply,
        messages=list(session.state.messages),
    )


@router.get("/{session_id}/optimizations", response_model=list[OptimizationOption])
async def list_optimizations(session: SessionDep):
    """
    The optimization menu with each option's availability.
    """
    created = session.guard.created
    processing = session.guard.processing

    options = []
    for optimization_type, info in OPTIMIZATION_CATALOG.items():
        if optimization_type in created:
            state = OptimizationAvailability.ALREADY_CREATED
        elif optimization_type in processing:
            state = OptimizationAvailability.BEING_PREPARED
        else:
            state = OptimizationAvailability.AVAILABLE
        options.append(OptimizationOption(
            type=optimization_type,
            label=info.label,
            description=info.description,
            available=state == OptimizationAvailability.AVAILABLE,
            state=state,
        ))
    return options


@router.post("/{session_id}/optimizations", response_model=OptimizationChoiceResponse)
async def choose_optimization(session: SessionDep, request: OptimizationChoiceRequest):
    """
    Pick an optimization and create its model project.

    Picking a type that is being prepared or already exists is not an
    error: the response has success=false and a calm explanation.
    """
    outcome = await session.engine.choose_optimization(request.type, request.label)
    return OptimizationChoiceResponse(
        session_id=session.id,
        decision=outcome.decision,
        success=outcome.success,
        message=outcome.reply.content,
        project=outcome.project,
    )
