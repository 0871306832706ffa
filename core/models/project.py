# =============================================================================
# core/models/project.py - Model Project Schemas
# =============================================================================
# These models describe the trackable work created from an optimization choice:
# - OptimizationType: the three optimizations the assistant recommends
# - ProjectStatus: in-progress -> completed
# - ModelProject: one project per optimization type per session
# - ModelProjectUpdate: partial update accepted by the registry
# - GuardDecision: tri-state answer of the creation guard
# - CreateModelResult: what the project-creation callback reports back
#
# Status lifecycle:
#     in-progress -> completed
# Completion is signalled from outside (model training finished).
# =============================================================================

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OptimizationType(str, Enum):
    """
    The closed set of optimizations a project can be created for.

    Adding a member requires adding it to OPTIMIZATION_CATALOG as well;
    `optimization_info()` raises for any member without an entry.
    """
    INVENTORY = "inventory"
    PRICE = "price"
    PRODUCT = "product"


class OptimizationInfo(BaseModel):
    """Display name and description for one optimization type."""

    model_config = ConfigDict(frozen=True)

    label: str
    description: str


OPTIMIZATION_CATALOG: dict[OptimizationType, OptimizationInfo] = {
    OptimizationType.INVENTORY: OptimizationInfo(
        label="Inventory Optimization",
        description="Optimize stock levels to reduce costs while maintaining service levels",
    ),
    OptimizationType.PRICE: OptimizationInfo(
        label="Price Recommendation",
        description="AI-powered pricing strategies to maximize revenue and competitiveness",
    ),
    OptimizationType.PRODUCT: OptimizationInfo(
        label="Product Recommendation",
        description="Personalized product recommendations to increase customer engagement",
    ),
}


def optimization_info(optimization_type: OptimizationType) -> OptimizationInfo:
    """Look up the catalogue entry for a type."""
    try:
        return OPTIMIZATION_CATALOG[optimization_type]
    except KeyError:
        raise ValueError(f"No catalogue entry for optimization type: {optimization_type!r}")


class ProjectStatus(str, Enum):
    """
    Lifecycle of a model project.

    - in-progress: created, waiting for model training to finish
    - completed: training finished and results are available
    """
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# Allowed (from, to) status pairs
ALLOWED_STATUS_TRANSITIONS: frozenset[tuple[ProjectStatus, ProjectStatus]] = frozenset({
    (ProjectStatus.IN_PROGRESS, ProjectStatus.IN_PROGRESS),
    (ProjectStatus.IN_PROGRESS, ProjectStatus.COMPLETED),
    (ProjectStatus.COMPLETED, ProjectStatus.COMPLETED),
})


class ModelProject(BaseModel):
    """
    A tracked unit of work: one optimization type applied to one dataset.

    Instances are immutable; the registry replaces a record on update.

    Example:
        {
            "id": "660e8400-e29b-41d4-a716-446655440001",
            "name": "Inventory Optimization",
            "type": "inventory",
            "status": "in-progress",
            "created_at": "2024-01-15T10:30:00Z",
            "source_dataset_name": "sales_q1.csv",
            "has_results": false
        }
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Assigned at creation, never reused")
    name: str
    type: OptimizationType
    status: ProjectStatus = ProjectStatus.IN_PROGRESS
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source_dataset_name: str
    has_results: bool = False


class ModelProjectUpdate(BaseModel):
    """
    Partial update for a model project.

    Only the fields set on the instance are applied. Identity fields
    (id, type, created_at, source_dataset_name) cannot be changed.

    Example:
        {"status": "completed", "has_results": true}
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    status: ProjectStatus | None = None
    has_results: bool | None = None


class GuardDecision(str, Enum):
    """
    Outcome of asking the creation guard for permission.

    Not an error: ALREADY_CREATED and ALREADY_PROCESSING are the expected
    result of repeated or overlapping selections.
    """
    ALLOWED = "allowed"
    ALREADY_CREATED = "already_created"
    ALREADY_PROCESSING = "already_processing"


class OptimizationAvailability(str, Enum):
    """
    How an optimization appears in the menu, derived from the guard sets.

    - available: can be chosen
    - being_prepared: a creation is under way
    - already_created: a project exists for this session
    """
    AVAILABLE = "available"
    BEING_PREPARED = "being_prepared"
    ALREADY_CREATED = "already_created"


class CreateModelResult(BaseModel):
    """
    Result of the project-creation callback.

    `message` is only set when `success` is false and explains why.
    """

    success: bool
    message: str | None = None
    project: ModelProject | None = None
