# =============================================================================
# tests/test_creation_guard.py - Optimization Selection Guard Tests
# =============================================================================
# Tests for the two-phase attempt_create / resolve protocol:
# - at most one ALLOWED per type until resolved
# - success is permanent, failure re-opens the type
# - concurrent attempts from many threads
# =============================================================================

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from core.models.project import GuardDecision, OptimizationType
from core.services.creation_guard import CreationGuard


class TestAttemptCreate:
    """Test the atomic check-and-insert."""

    def test_first_attempt_allowed(self):
        """A fresh type is allowed and marked as processing."""
        guard = CreationGuard()

        assert guard.attempt_create(OptimizationType.INVENTORY) == GuardDecision.ALLOWED
        assert guard.processing == {OptimizationType.INVENTORY}
        assert guard.created == set()

    @pytest.mark.parametrize("repeats", [2, 5])
    def test_repeated_attempts_without_resolve(self, repeats):
        """Only the first of several unresolved attempts is allowed."""
        guard = CreationGuard()

        decisions = [guard.attempt_create(OptimizationType.PRICE) for _ in range(repeats)]

        assert decisions[0] == GuardDecision.ALLOWED
        assert decisions[1:] == [GuardDecision.ALREADY_PROCESSING] * (repeats - 1)

    def test_types_are_independent(self):
        """Processing one type does not block another."""
        guard = CreationGuard()
        guard.attempt_create(OptimizationType.INVENTORY)

        assert guard.attempt_create(OptimizationType.PRICE) == GuardDecision.ALLOWED
        assert guard.attempt_create(OptimizationType.PRODUCT) == GuardDecision.ALLOWED


class TestResolve:
    """Test finishing a creation attempt."""

    def test_success_is_permanent(self):
        """After a successful resolve every attempt is ALREADY_CREATED."""
        guard = CreationGuard()
        guard.attempt_create(OptimizationType.INVENTORY)
        guard.resolve(OptimizationType.INVENTORY, succeeded=True)

        for _ in range(3):
            assert guard.attempt_create(OptimizationType.INVENTORY) == GuardDecision.ALREADY_CREATED

        assert guard.created == {OptimizationType.INVENTORY}
        assert guard.processing == set()

    def test_failure_allows_exactly_one_retry(self):
        """After a failed resolve the next attempt is allowed once more."""
        guard = CreationGuard()
        guard.attempt_create(OptimizationType.PRODUCT)
        guard.resolve(OptimizationType.PRODUCT, succeeded=False)

        assert guard.attempt_create(OptimizationType.PRODUCT) == GuardDecision.ALLOWED
        assert guard.attempt_create(OptimizationType.PRODUCT) == GuardDecision.ALREADY_PROCESSING

    def test_processing_and_created_disjoint(self):
        """A type is never in both sets."""
        guard = CreationGuard()
        for optimization_type in OptimizationType:
            guard.attempt_create(optimization_type)
        guard.resolve(OptimizationType.PRICE, succeeded=True)
        guard.resolve(OptimizationType.PRODUCT, succeeded=False)

        assert guard.processing.isdisjoint(guard.created)
        assert guard.processing == {OptimizationType.INVENTORY}
        assert guard.created == {OptimizationType.PRICE}

    def test_resolve_without_attempt_is_ignored(self):
        """A stray resolve does not mark a type as created."""
        guard = CreationGuard()
        guard.resolve(OptimizationType.INVENTORY, succeeded=True)

        assert guard.created == set()
        assert guard.attempt_create(OptimizationType.INVENTORY) == GuardDecision.ALLOWED

    def test_created_type_never_reenters_processing(self):
        """A late resolve(False) cannot reopen a created type."""
        guard = CreationGuard()
        guard.attempt_create(OptimizationType.INVENTORY)
        guard.resolve(OptimizationType.INVENTORY, succeeded=True)
        guard.resolve(OptimizationType.INVENTORY, succeeded=False)

        assert guard.attempt_create(OptimizationType.INVENTORY) == GuardDecision.ALREADY_CREATED


class TestConcurrency:
    """Test attempts racing from several threads."""

    def test_one_allowed_among_concurrent_attempts(self):
        """Exactly one of many simultaneous attempts wins."""
        guard = CreationGuard()
        start = threading.Barrier(16)

        def attempt():
            start.wait()
            return guard.attempt_create(OptimizationType.INVENTORY)

        with ThreadPoolExecutor(max_workers=16) as pool:
            decisions = list(pool.map(lambda _: attempt(), range(16)))

        assert decisions.count(GuardDecision.ALLOWED) == 1
        assert decisions.count(GuardDecision.ALREADY_PROCESSING) == 15
