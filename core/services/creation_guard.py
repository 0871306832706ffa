# =============================================================================
# core/services/creation_guard.py - Optimization Selection Guard
# =============================================================================
# Decides whether a model project may be created for an optimization type.
#
# Two-phase protocol:
#   decision = guard.attempt_create(type)   # atomic check-and-insert
#   ... create the project (may be slow, may fail) ...
#   guard.resolve(type, succeeded)          # processing -> created, or release
#
# Invariants:
# - processing and created never share a member
# - once a type is in created it never re-enters processing
# =============================================================================

import logging
import threading

from core.models.project import GuardDecision, OptimizationType

logger = logging.getLogger(__name__)


class CreationGuard:
    """
    At-most-one-creation-per-type guard, owned by one session.

    The membership checks and the insertion in `attempt_create` run under
    one lock, so a second call for the same type always sees the first.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._processing: set[OptimizationType] = set()
        self._created: set[OptimizationType] = set()

    @property
    def processing(self) -> frozenset[OptimizationType]:
        """Types whose creation is under way."""
        with self._lock:
            return frozenset(self._processing)

    @property
    def created(self) -> frozenset[OptimizationType]:
        """Types that have a project, permanently."""
        with self._lock:
            return frozenset(self._created)

    def attempt_create(self, optimization_type: OptimizationType) -> GuardDecision:
        """
        Ask for permission to create a project for `optimization_type`.

        Returns:
            ALREADY_CREATED if a project exists (terminal),
            ALREADY_PROCESSING if a creation is under way,
            ALLOWED otherwise; the type is then marked as processing and the
            caller must call `resolve` once the attempt finishes.
        """
        with self._lock:
            if optimization_type in self._created:
                decision = GuardDecision.ALREADY_CREATED
            elif optimization_type in self._processing:
                decision = GuardDecision.ALREADY_PROCESSING
            else:
                self._processing.add(optimization_type)
                decision = GuardDecision.ALLOWED

        logger.info(f"Guard decision for {optimization_type.value}: {decision.value}")
        return decision

    def resolve(self, optimization_type: OptimizationType, succeeded: bool) -> None:
        """
        Finish a creation attempt started by an ALLOWED decision.

        On success the type becomes permanently created; on failure it is
        released so a later attempt can be allowed again.
        """
        with self._lock:
            if optimization_type not in self._processing:
                logger.warning(f"resolve() for {optimization_type.value} without a pending attempt")
                return
            self._processing.discard(optimization_type)
            if succeeded:
                self._created.add(optimization_type)

        logger.info(
            f"Creation of {optimization_type.value} "
            f"{'succeeded' if succeeded else 'failed, type released for retry'}"
        )
