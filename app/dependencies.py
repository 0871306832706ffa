# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Path, Request

from core.services.session_service import Session, SessionService


def get_session_service(request: Request) -> SessionService:
    """
    Get the in-memory session store.

    The store lives on app.state and is created in app/main.py.
    """
    return request.app.state.session_service


# Type alias for dependency injection
SessionServiceDep = Annotated[SessionService, Depends(get_session_service)]


def get_session(
    session_id: Annotated[UUID, Path(description="Session UUID")],
    service: SessionServiceDep,
) -> Session:
    """
    Resolve the session named in the path.

    Raises:
        SessionNotFoundError: If the session doesn't exist (404)
    """
    return service.get_session(session_id)


SessionDep = Annotated[Session, Depends(get_session)]
