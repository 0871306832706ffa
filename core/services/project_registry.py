# =============================================================================
# core/services/project_registry.py - Model Project Registry
# =============================================================================
# In-memory mapping from project id to ModelProject for one session.
#
# The registry does not check for duplicate optimization types: callers
# must obtain ALLOWED from the CreationGuard before calling create().
# =============================================================================

import logging
import threading
from uuid import uuid4

from app.exceptions import InvalidStatusTransitionError, ModelProjectNotFoundError
from core.models.project import (
    ALLOWED_STATUS_TRANSITIONS,
    ModelProject,
    ModelProjectUpdate,
    OptimizationType,
    ProjectStatus,
    optimization_info,
)

logger = logging.getLogger(__name__)


class ProjectRegistry:
    """
    Registry of model projects for one session.

    Projects are never deleted. Status only moves forward:
    in-progress -> completed.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._projects: dict[str, ModelProject] = {}

    def create(self, optimization_type: OptimizationType, dataset_name: str) -> ModelProject:
        """
        Create a project for an optimization type.

        Args:
            optimization_type: Which optimization the project is for
            dataset_name: Name of the dataset the project was created from

        Returns:
            New ModelProject with status in-progress and no results
        """
        project = ModelProject(
            id=str(uuid4()),
            name=optimization_info(optimization_type).label,
            type=optimization_type,
            source_dataset_name=dataset_name,
        )
        with self._lock:
            self._projects[project.id] = project

        logger.info(f"Created model project {project.id} ({optimization_type.value}) from {dataset_name}")
        return project

    def get(self, project_id: str) -> ModelProject:
        """
        Get a project by id.

        Raises:
            ModelProjectNotFoundError: If the id is unknown
        """
        with self._lock:
            project = self._projects.get(project_id)
        if project is None:
            raise ModelProjectNotFoundError(project_id)
        return project

    def update(self, project_id: str, changes: ModelProjectUpdate) -> ModelProject:
        """
        Apply a partial update to a project.

        Only fields explicitly set on `changes` are applied.

        Raises:
            ModelProjectNotFoundError: If the id is unknown (nothing changes)
            InvalidStatusTransitionError: If status would move backwards
        """
        fields = changes.model_dump(exclude_unset=True, exclude_none=True)

        with self._lock:
            project = self._projects.get(project_id)
            if project is None:
                raise ModelProjectNotFoundError(project_id)

            new_status = fields.get("status")
            if new_status is not None and (project.status, new_status) not in ALLOWED_STATUS_TRANSITIONS:
                raise InvalidStatusTransitionError(project_id, project.status.value, new_status.value)

            updated = project.model_copy(update=fields)
            self._projects[project_id] = updated

        if updated.status != project.status:
            logger.info(f"Model project {project_id}: {project.status.value} -> {updated.status.value}")
        return updated

    def mark_completed(self, project_id: str) -> ModelProject:
        """Record that training finished and results are available."""
        return self.update(
            project_id,
            ModelProjectUpdate(status=ProjectStatus.COMPLETED, has_results=True),
        )

    def list(self) -> list[ModelProject]:
        """All projects, newest first."""
        with self._lock:
            return list(reversed(self._projects.values()))

    def has_type(self, optimization_type: OptimizationType) -> bool:
        """Whether any project exists for this optimization type."""
        with self._lock:
            return any(p.type == optimization_type for p in self._projects.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._projects)
