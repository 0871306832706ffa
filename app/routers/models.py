# =============================================================================
# app/routers/models.py - Model Project Endpoints
# =============================================================================
# Lists the session's model projects and applies status updates.
#
# Training itself runs elsewhere; when it finishes, the trainer (or an
# operator) calls POST /models/{id}/complete.
# =============================================================================

import logging

from fastapi import APIRouter

from app.dependencies import SessionDep
from core.models.project import ModelProject, ModelProjectUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{session_id}/models", response_model=list[ModelProject])
async def list_models(session: SessionDep):
    """
    List the session's model projects, newest first.
    """
    return session.registry.list()


@router.get("/{session_id}/models/{model_id}", response_model=ModelProject)
async def get_model(session: SessionDep, model_id: str):
    """
    Get one model project.
    """
    return session.registry.get(model_id)


@router.patch("/{session_id}/models/{model_id}", response_model=ModelProject)
async def update_model(session: SessionDep, model_id: str, changes: ModelProjectUpdate):
    """
    Partially update a model project.

    Only name, status and has_results can change. A completed project
    cannot go back to in-progress.
    """
    return session.registry.update(model_id, changes)


@router.post("/{session_id}/models/{model_id}/complete", response_model=ModelProject)
async def complete_model(session: SessionDep, model_id: str):
    """
    Record that training finished: status completed, results available.
    """
    project = session.registry.mark_completed(model_id)
    logger.info(f"Training completed for model project {model_id} in session {session.id}")
    return project
