# =============================================================================
# core/services/session_service.py - Session Business Logic
# =============================================================================
# A session owns exactly one of each stateful component:
# - ConversationState (message log, dataset, reply gate)
# - CreationGuard (processing / created optimization types)
# - ProjectRegistry (model projects)
# - ConversationEngine wired to the above
#
# SessionService keeps sessions in memory, keyed by id. Nothing is shared
# between sessions and nothing outlives the process.
# =============================================================================

import logging
import threading
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID, uuid4

from agents.conversation_engine import ConversationEngine, new_conversation_state
from app.exceptions import SessionNotFoundError
from core.models.dataset import TabularDataset
from core.models.project import CreateModelResult, OptimizationType
from core.models.session import SessionResponse
from core.services.creation_guard import CreationGuard
from core.services.project_registry import ProjectRegistry
from lib.chat_proxy_client import ChatProxyClient

logger = logging.getLogger(__name__)

ALREADY_IN_PROGRESS_MESSAGE = (
    "This model is already in progress and will appear in the Models section."
)


class Session:
    """
    One user's workspace.

    Args:
        session_id: Session UUID string
        client: Chat proxy client shared by this session's round-trips
    """

    def __init__(self, session_id: str, client: ChatProxyClient):
        self.id = session_id
        self.created_at = datetime.now(timezone.utc)
        self.client = client
        self._build()

    def _build(self) -> None:
        """Create fresh conversation, guard and registry."""
        self.state = new_conversation_state()
        self.guard = CreationGuard()
        self.registry = ProjectRegistry()
        self.engine = ConversationEngine(
            state=self.state,
            client=self.client,
            guard=self.guard,
            on_create_model=self.create_model,
        )

    def reset(self) -> None:
        """Forget everything: messages, dataset, guard sets and projects."""
        self._build()
        logger.info(f"Reset session {self.id}")

    def create_model(self, optimization_type: OptimizationType, dataset: TabularDataset) -> CreateModelResult:
        """
        Project-creation callback used by the conversation engine.

        Only called after the creation guard answered ALLOWED. Refuses if a
        project of this type is already registered.
        """
        if self.registry.has_type(optimization_type):
            return CreateModelResult(success=False, message=ALREADY_IN_PROGRESS_MESSAGE)

        project = self.registry.create(optimization_type, dataset.source_name)
        return CreateModelResult(success=True, project=project)

    def snapshot(self) -> SessionResponse:
        """Current state for the API."""
        return SessionResponse(
            session_id=self.id,
            created_at=self.created_at,
            awaiting_reply=self.state.awaiting_reply,
            dataset=self.state.dataset,
            messages=list(self.state.messages),
            processing_types=sorted(self.guard.processing, key=lambda t: t.value),
            created_types=sorted(self.guard.created, key=lambda t: t.value),
            projects=self.registry.list(),
        )


class SessionService:
    """
    In-memory session store.

    Args:
        client_factory: Builds the chat proxy client for each new session
    """

    def __init__(self, client_factory: Callable[[], ChatProxyClient] = ChatProxyClient):
        self._client_factory = client_factory
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def create_session(self) -> Session:
        """Start a new session."""
        session = Session(str(uuid4()), self._client_factory())
        with self._lock:
            self._sessions[session.id] = session
        logger.info(f"Created session: {session.id}")
        return session

    def get_session(self, session_id: str | UUID) -> Session:
        """
        Get a session by ID.

        Raises:
            SessionNotFoundError: If no such session exists
        """
        key = str(session_id)
        with self._lock:
            session = self._sessions.get(key)
        if session is None:
            raise SessionNotFoundError(key)
        return session

    def reset_session(self, session_id: str | UUID) -> Session:
        """Clear a session in place (logout-equivalent)."""
        session = self.get_session(session_id)
        session.reset()
        return session

    def delete_session(self, session_id: str | UUID) -> None:
        """
        Remove a session.

        Raises:
            SessionNotFoundError: If no such session exists
        """
        key = str(session_id)
        with self._lock:
            if self._sessions.pop(key, None) is None:
                raise SessionNotFoundError(key)
        logger.info(f"Deleted session: {key}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
