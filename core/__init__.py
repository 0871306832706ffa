# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API:
# - models/: Pydantic schemas for data validation
# - services/: Creation guard, project registry, chat completion, sessions
# =============================================================================
