"""
Audit and Metrics Tests
=======================

The observability layer records what the consolidator did without
changing what it does.
"""

import logging
from datetime import timezone

import pytest

from consolidation import (
    AtomicEvent, ConsolidationAuditLog, ConsolidationMetrics, Consolidator,
    ConsolidatorConfig, InvalidArity, OperationKind,
)
from consolidation.contracts.events import AuditEventType


SWAP_WINDOW = [
    AtomicEvent.write("x", 5, previous=3),
    AtomicEvent.write("y", 3, previous=5),
]
NOT_A_SWAP = [
    AtomicEvent.write("x", 5, previous=3),
    AtomicEvent.write("y", 9, previous=5),
]


class TestAuditLog:

    def test_register_and_unregister_are_recorded(self):
        consolidator = Consolidator()
        consolidator.unregister(OperationKind.SWAP, 2)

        audit = consolidator.audit
        registered = audit.get_entries(AuditEventType.REGISTER)
        unregistered = audit.get_entries(AuditEventType.UNREGISTER)

        assert len(registered) == 1
        assert registered[0].kind == "swap"
        assert registered[0].arity == 2
        assert len(unregistered) == 1

    def test_noop_calls_are_not_recorded(self):
        consolidator = Consolidator()
        before = consolidator.audit.entry_count

        consolidator.unregister(OperationKind.MESSAGE, 4)
        consolidator.register(consolidator.recognizers_for(2)[0])

        assert consolidator.audit.entry_count == before

    def test_matches_are_recorded(self):
        consolidator = Consolidator()
        consolidator.try_consolidate(SWAP_WINDOW)
        consolidator.try_consolidate(NOT_A_SWAP)

        matches = consolidator.audit.get_entries(AuditEventType.MATCH)
        assert len(matches) == 1
        assert matches[0].kind == "swap"

    def test_invalid_arity_is_recorded(self):
        consolidator = Consolidator()

        with pytest.raises(InvalidArity):
            consolidator.unregister(OperationKind.SWAP, 1000)

        errors = consolidator.audit.get_entries(AuditEventType.ERROR)
        assert len(errors) == 1
        assert errors[0].action == "invalid_arity"
        assert ("arity", "1000") in errors[0].metadata

    def test_invalid_arity_records_current_bounds(self, make_recognizer):
        consolidator = Consolidator()
        consolidator.register(make_recognizer("wide", 5))

        with pytest.raises(InvalidArity):
            consolidator.try_consolidate([None] * 500)

        error = consolidator.audit.get_entries(AuditEventType.ERROR)[0]
        assert ("bounds", "(2, 5)") in error.metadata
        assert ("action", "try_consolidate") in error.metadata

    def test_invalid_arity_on_empty_registry_records_no_bounds(self):
        consolidator = Consolidator(register_defaults=False)

        with pytest.raises(InvalidArity):
            consolidator.unregister(OperationKind.SWAP, -1)

        error = consolidator.audit.get_entries(AuditEventType.ERROR)[0]
        assert ("bounds", "None") in error.metadata

    def test_audit_can_be_disabled(self):
        consolidator = Consolidator(ConsolidatorConfig(audit_enabled=False))
        assert consolidator.audit is None
        assert consolidator.try_consolidate(SWAP_WINDOW) is not None

    def test_shared_audit_log(self):
        audit = ConsolidationAuditLog(layer_name="shared")
        Consolidator(audit=audit)
        Consolidator(audit=audit)

        assert audit.layer_name == "shared"
        assert len(audit.get_entries(AuditEventType.REGISTER)) == 2

    def test_entries_are_copies(self):
        consolidator = Consolidator()
        entries = consolidator.audit.get_entries()
        entries.clear()
        assert consolidator.audit.entry_count == 1

    def test_entry_timestamps_are_utc(self):
        consolidator = Consolidator()
        entry = consolidator.audit.get_entries()[0]
        assert entry.timestamp.value.tzinfo is timezone.utc

    def test_entry_ids_are_unique(self):
        audit = ConsolidationAuditLog()
        for _ in range(5):
            audit.record(AuditEventType.MATCH, "consolidated", kind="swap", arity=2)

        ids = {e.entry_id for e in audit.get_entries()}
        assert len(ids) == 5


class TestAuditRetention:

    def test_oldest_entries_are_dropped(self):
        audit = ConsolidationAuditLog(max_entries=3)
        for arity in range(1, 6):
            audit.record(AuditEventType.MATCH, "consolidated", kind="swap", arity=arity)

        assert audit.entry_count == 3
        assert audit.total_recorded == 5
        assert [e.arity for e in audit.get_entries()] == [3, 4, 5]

    def test_repeated_matches_stay_within_limit(self):
        consolidator = Consolidator(ConsolidatorConfig(audit_max_entries=10))
        for _ in range(50):
            consolidator.try_consolidate(SWAP_WINDOW)

        assert consolidator.audit.max_entries == 10
        assert consolidator.audit.entry_count == 10
        assert consolidator.metrics.matches_total == 50

    def test_unbounded_log(self):
        audit = ConsolidationAuditLog(max_entries=None)
        for _ in range(20):
            audit.record(AuditEventType.MATCH, "consolidated")

        assert audit.max_entries is None
        assert audit.entry_count == 20

    @pytest.mark.parametrize("max_entries", [0, -3])
    def test_rejects_non_positive_limit(self, max_entries):
        with pytest.raises(ValueError):
            ConsolidationAuditLog(max_entries=max_entries)


class TestMetrics:

    def test_counts_attempts(self):
        consolidator = Consolidator()
        consolidator.try_consolidate(SWAP_WINDOW)
        consolidator.try_consolidate(NOT_A_SWAP)
        consolidator.try_consolidate([])

        snapshot = consolidator.metrics.snapshot()
        assert snapshot['attempts_total'] == 3
        assert snapshot['matches_total'] == 1
        assert snapshot['misses_total'] == 2
        assert snapshot['attempts_by_arity'] == {2: 2, 0: 1}
        assert snapshot['matches_by_kind'] == {"swap": 1}

    def test_reset(self):
        metrics = ConsolidationMetrics()
        metrics.record_attempt(2, None)
        metrics.reset()
        assert metrics.attempts_total == 0


class TestLogging:

    def test_registration_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="consolidation"):
            Consolidator()

        assert any("Registered" in r.getMessage() for r in caplog.records)

    def test_misses_logged_at_debug(self, caplog):
        consolidator = Consolidator()
        with caplog.at_level(logging.DEBUG, logger="consolidation"):
            consolidator.try_consolidate(NOT_A_SWAP)

        assert any("No consolidation" in r.getMessage() for r in caplog.records)
