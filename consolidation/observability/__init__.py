"""
Observability & Audit Layer

RESPONSIBILITY: Audit trail and counters for registry changes and
consolidation attempts.

WHAT THIS LAYER MUST NOT DO:
============================
- Change which recognizer matches a window
- Raise from a recording call
- Hold references to caller windows (only kinds, arities and counts)
"""

from __future__ import annotations
from collections import Counter, deque
from typing import Deque, Dict, Hashable, List, Optional
import hashlib
import logging

from ..config import DEFAULT_AUDIT_MAX_ENTRIES
from ..contracts.base import Error, Timestamp
from ..contracts.events import AuditEventType, AuditLogEntry


logger = logging.getLogger(__name__)


def _kind_label(kind: Optional[Hashable]) -> Optional[str]:
    if kind is None:
        return None
    return str(getattr(kind, 'value', kind))


# =============================================================================
# AUDIT LOG
# =============================================================================

class ConsolidationAuditLog:
    """
    Append-only collector of audit entries.

    Entries are never modified. Once max_entries is reached the oldest
    entry is dropped for each new one; None keeps every entry.
    get_entries() returns copies.
    """

    def __init__(
        self,
        layer_name: str = "consolidation",
        max_entries: Optional[int] = DEFAULT_AUDIT_MAX_ENTRIES
    ):
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be >= 1 or None, got {max_entries!r}")
        self._layer_name = layer_name
        self._entries: Deque[AuditLogEntry] = deque(maxlen=max_entries)
        self._sequence: int = 0

    def record(
        self,
        event_type: AuditEventType,
        action: str,
        kind: Optional[Hashable] = None,
        arity: Optional[int] = None,
        metadata: Optional[Dict[str, str]] = None
    ) -> AuditLogEntry:
        """Append an entry and return it."""
        timestamp = Timestamp.now()
        seed = f"{self._layer_name}|{self._sequence}|{action}|{timestamp.to_iso()}"
        entry = AuditLogEntry(
            entry_id=f"audit_{hashlib.sha256(seed.encode('utf-8')).hexdigest()[:16]}",
            event_type=event_type,
            timestamp=timestamp,
            action=action,
            kind=_kind_label(kind),
            arity=arity,
            metadata=tuple(sorted(metadata.items())) if metadata else ()
        )
        self._entries.append(entry)
        self._sequence += 1
        return entry

    def record_error(self, error: Error) -> AuditLogEntry:
        """Append an entry describing a caller error."""
        logger.warning("%s: %s", error.code.name, error.message)
        return self.record(
            AuditEventType.ERROR,
            action=error.code.name.lower(),
            metadata=dict(error.context, message=error.message)
        )

    def get_entries(self, event_type: Optional[AuditEventType] = None) -> List[AuditLogEntry]:
        """Get entries, optionally filtered by type."""
        if event_type is None:
            return list(self._entries)
        return [e for e in self._entries if e.event_type == event_type]

    @property
    def layer_name(self) -> str:
        return self._layer_name

    @property
    def entry_count(self) -> int:
        return len(self._entries)

    @property
    def total_recorded(self) -> int:
        """Entries recorded over the log's lifetime, including dropped ones."""
        return self._sequence

    @property
    def max_entries(self) -> Optional[int]:
        return self._entries.maxlen


# =============================================================================
# METRICS
# =============================================================================

class ConsolidationMetrics:
    """
    Counters for consolidation attempts.

    attempts, misses: keyed by window length
    matches: keyed by the kind of the produced operation
    """

    def __init__(self):
        self._attempts: Counter = Counter()
        self._matches: Counter = Counter()
        self._misses: Counter = Counter()

    def record_attempt(self, arity: int, matched_kind: Optional[Hashable]):
        self._attempts[arity] += 1
        if matched_kind is None:
            self._misses[arity] += 1
        else:
            self._matches[_kind_label(matched_kind)] += 1

    @property
    def attempts_total(self) -> int:
        return sum(self._attempts.values())

    @property
    def matches_total(self) -> int:
        return sum(self._matches.values())

    @property
    def misses_total(self) -> int:
        return sum(self._misses.values())

    def snapshot(self) -> Dict[str, object]:
        """Plain-dict copy of all counters."""
        return {
            'attempts_total': self.attempts_total,
            'matches_total': self.matches_total,
            'misses_total': self.misses_total,
            'attempts_by_arity': dict(self._attempts),
            'misses_by_arity': dict(self._misses),
            'matches_by_kind': dict(self._matches),
        }

    def reset(self):
        self._attempts.clear()
        self._matches.clear()
        self._misses.clear()
