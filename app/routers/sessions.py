# =============================================================================
# app/routers/sessions.py - Session Endpoints
# =============================================================================
# Handles session creation, inspection and reset.
# A reset is the logout-equivalent: conversation, dataset, creation guard
# and projects are all cleared.
# =============================================================================

from fastapi import APIRouter, status

from app.dependencies import SessionDep, SessionServiceDep
from core.models.session import SessionCreateResponse, SessionResponse

router = APIRouter()


@router.post("", response_model=SessionCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_session(service: SessionServiceDep):
    """
    Create a new session.

    The session starts with the assistant's welcome message. Use
    POST /sessions/{id}/upload to add data.
    """
    session = service.create_session()
    return SessionCreateResponse(session_id=session.id, created_at=session.created_at)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session: SessionDep):
    """
    Get session details.

    Returns the conversation log, the current dataset preview, whether a
    reply is pending, and which optimization types are being prepared or
    already created.
    """
    return session.snapshot()


@router.post("/{session_id}/reset", response_model=SessionResponse)
async def reset_session(session: SessionDep):
    """
    Clear everything in the session and start over.
    """
    session.reset()
    return session.snapshot()


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session: SessionDep, service: SessionServiceDep):
    """
    Delete a session and all of its in-memory state.
    """
    service.delete_session(session.id)
