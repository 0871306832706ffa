# =============================================================================
# tests/test_session_service.py - Session Store Tests
# =============================================================================
# Tests for session lookup, reset and deletion.
# =============================================================================

import uuid
from uuid import UUID

import pytest

from app.exceptions import SessionNotFoundError
from core.models.project import OptimizationType


class TestLookup:
    """Test finding sessions by id."""

    def test_string_and_uuid_ids_find_same_session(self, session_service):
        """Path parameters arrive as UUID objects, stored ids are strings."""
        session = session_service.create_session()

        assert session_service.get_session(session.id) is session
        assert session_service.get_session(UUID(session.id)) is session

    def test_unknown_session(self, session_service):
        missing = uuid.uuid4()

        with pytest.raises(SessionNotFoundError) as exc_info:
            session_service.get_session(missing)

        assert exc_info.value.details == {"session_id": str(missing)}

    def test_delete_by_uuid(self, session_service):
        session = session_service.create_session()

        session_service.delete_session(UUID(session.id))

        assert len(session_service) == 0
        with pytest.raises(SessionNotFoundError):
            session_service.delete_session(session.id)


class TestReset:
    """Test clearing a session."""

    def test_reset_rebuilds_components(self, session_service, sample_dataset):
        session = session_service.create_session()
        session.engine.record_upload(sample_dataset)
        session.create_model(OptimizationType.PRICE, sample_dataset)
        old_engine = session.engine

        session_service.reset_session(UUID(session.id))

        assert session.engine is not old_engine
        assert session.state.dataset is None
        assert len(session.registry) == 0
        assert session.engine.state is session.state
        assert session.engine.guard is session.guard
