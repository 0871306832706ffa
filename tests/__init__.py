# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the OptiChat API:
# - test_models.py: Model validation and enum coverage
# - test_ingestor.py: CSV parsing and upload rejections
# - test_creation_guard.py / test_project_registry.py: Project creation rules
# - test_conversation_engine.py: Round-trips, uploads and optimization choice
# - test_chat_proxy_client.py / test_chat_completion_service.py: Chat proxy
# - test_session_service.py: Session lookup, reset and deletion
# - test_config.py: Settings loading and the uvicorn entry point
# - test_api.py: Integration tests for the session endpoints
#
# Run tests with: pytest
# =============================================================================
