"""
Consolidator
============

Arity-indexed registry of recognizers and the matching entry point.

INVARIANTS:
- At most one recognizer per operation kind. Uniqueness is checked in the
  target arity slot only, since a kind's arity never changes.
- Within a slot, registration order is match precedence (first match wins).
- bounds() always reflects the registered arities, or None when empty.
- Valid arities are 1 .. max_size - 1; window lengths are 0 .. max_size - 1.
"""

from __future__ import annotations
from typing import Dict, Hashable, Iterator, List, Optional, Sequence, Tuple
import logging

from ..config import ConsolidatorConfig, DEFAULT_MAX_SIZE
from ..contracts.base import ConsolidationError, InvalidArity
from ..contracts.events import AtomicEvent, AuditEventType, CompositeOperation
from ..observability import ConsolidationAuditLog, ConsolidationMetrics
from .recognizers import HighLevelOperation, SwapRecognizer


logger = logging.getLogger(__name__)

# Upper bound (exclusive) on the number of atomic events one operation may consist of.
MAX_SIZE = DEFAULT_MAX_SIZE


def default_recognizers() -> List[HighLevelOperation]:
    """Recognizers registered by a Consolidator built with defaults."""
    return [SwapRecognizer()]


class Consolidator:
    """
    Attempts to consolidate low-level read/write events into higher-level
    operations.

    The caller chooses the candidate windows; the consolidator only answers
    whether a given window forms a registered operation, and which one.

    Not thread-safe. Callers sharing an instance across threads must guard
    every call with a single lock of their own.
    """

    def __init__(
        self,
        config: Optional[ConsolidatorConfig] = None,
        audit: Optional[ConsolidationAuditLog] = None,
        metrics: Optional[ConsolidationMetrics] = None,
        register_defaults: Optional[bool] = None
    ):
        self._config = config or ConsolidatorConfig()
        self._slots: Dict[int, List[HighLevelOperation]] = {}
        self._min_arity: Optional[int] = None
        self._max_arity: Optional[int] = None

        if audit is None and self._config.audit_enabled:
            audit = ConsolidationAuditLog(max_entries=self._config.audit_max_entries)
        self._audit = audit
        self._metrics = metrics or ConsolidationMetrics()

        if register_defaults is None:
            register_defaults = self._config.register_defaults
        if register_defaults:
            for recognizer in default_recognizers():
                self.register(recognizer)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, recognizer: HighLevelOperation) -> bool:
        """
        Add a recognizer. Registering a kind that is already present is a
        no-op.

        Returns:
            True if the recognizer was added, False if its kind was present.

        Raises:
            InvalidArity: if recognizer.arity is outside 1 .. max_size - 1
        """
        arity = recognizer.arity
        self._check_arity(arity, minimum=1, action="register")

        slot = self._slots.setdefault(arity, [])
        for existing in slot:
            if existing.kind == recognizer.kind:
                logger.debug("%r already registered at arity %d", recognizer.kind, arity)
                return False

        slot.append(recognizer)
        if self._min_arity is None or arity < self._min_arity:
            self._min_arity = arity
        if self._max_arity is None or arity > self._max_arity:
            self._max_arity = arity

        logger.info("Registered %r", recognizer)
        self._record(AuditEventType.REGISTER, "register", recognizer.kind, arity)
        return True

    def unregister(self, kind: Hashable, arity: int) -> Optional[HighLevelOperation]:
        """
        Remove the recognizer of kind at arity. When this method returns the
        kind is guaranteed absent from that slot, whether or not it was there.

        Returns:
            The removed recognizer, or None if there was nothing to remove.

        Raises:
            InvalidArity: if arity is outside 0 .. max_size - 1
        """
        self._check_arity(arity, minimum=0, action="unregister")

        slot = self._slots.get(arity, [])
        victim = None
        for recognizer in slot:
            if recognizer.kind == kind:
                victim = recognizer
                break

        if victim is None:
            return None

        slot.remove(victim)
        if not slot:
            del self._slots[arity]

        if arity == self._max_arity:
            self._max_arity = self._rescan_max()
        if arity == self._min_arity:
            self._min_arity = self._rescan_min()

        logger.info("Unregistered %r", victim)
        self._record(AuditEventType.UNREGISTER, "unregister", kind, arity)
        return victim

    def _rescan_max(self) -> Optional[int]:
        arities = [a for a, slot in self._slots.items() if slot]
        return max(arities) if arities else None

    def _rescan_min(self) -> Optional[int]:
        arities = [a for a, slot in self._slots.items() if slot]
        return min(arities) if arities else None

    # -------------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------------

    def try_consolidate(self, window: Sequence[AtomicEvent]) -> Optional[CompositeOperation]:
        """
        Attempt to consolidate window into a higher-level operation.

        Recognizers registered for len(window) are tried in registration
        order; the first one that matches wins.

        Returns:
            The composite operation, or None if no recognizer matched.

        Raises:
            InvalidArity: if len(window) is outside 0 .. max_size - 1
        """
        size = len(window)
        self._check_arity(size, minimum=0, action="try_consolidate")

        result = None
        for recognizer in self._slots.get(size, ()):
            result = recognizer.consolidate(window)
            if result is not None:
                break

        self._metrics.record_attempt(size, result.kind if result is not None else None)
        if result is None:
            logger.debug("No consolidation for window of %d events", size)
        else:
            logger.debug("Consolidated %d events into %r", size, result.kind)
            self._record(AuditEventType.MATCH, "consolidated", result.kind, size)
        return result

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def list_kinds(self) -> List[Hashable]:
        """All registered kinds, ascending by arity then registration order."""
        return [r.kind for r in self._iter_recognizers()]

    def is_registered(self, kind: Hashable) -> bool:
        """True if a recognizer of kind is registered at any arity."""
        return any(r.kind == kind for r in self._iter_recognizers())

    def recognizers_for(self, arity: int) -> Tuple[HighLevelOperation, ...]:
        """Recognizers registered at arity, in match order."""
        return tuple(self._slots.get(arity, ()))

    def bounds(self) -> Optional[Tuple[int, int]]:
        """(min_arity, max_arity), or None when nothing is registered."""
        if self._min_arity is None or self._max_arity is None:
            return None
        return (self._min_arity, self._max_arity)

    @property
    def minimum_set_size(self) -> Optional[int]:
        return self._min_arity

    @property
    def maximum_set_size(self) -> Optional[int]:
        return self._max_arity

    @property
    def max_size(self) -> int:
        return self._config.max_size

    @property
    def config(self) -> ConsolidatorConfig:
        return self._config

    @property
    def audit(self) -> Optional[ConsolidationAuditLog]:
        return self._audit

    @property
    def metrics(self) -> ConsolidationMetrics:
        return self._metrics

    def __contains__(self, kind: Hashable) -> bool:
        return self.is_registered(kind)

    def __len__(self) -> int:
        return sum(len(slot) for slot in self._slots.values())

    def __repr__(self) -> str:
        return f"Consolidator(kinds={self.list_kinds()!r}, bounds={self.bounds()!r})"

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _iter_recognizers(self) -> Iterator[HighLevelOperation]:
        for arity in sorted(self._slots):
            yield from self._slots[arity]

    def _check_arity(self, arity: int, minimum: int, action: str):
        if isinstance(arity, bool) or not isinstance(arity, int) \
                or not minimum <= arity < self._config.max_size:
            error = InvalidArity(
                f"{action}: arity {arity!r} outside [{minimum}, {self._config.max_size})",
                action=action,
                arity=arity,
                max_size=self._config.max_size
            )
            self._record_error(error)
            raise error

    def _record(self, event_type: AuditEventType, action: str, kind, arity: int):
        if self._audit is not None:
            self._audit.record(event_type, action, kind=kind, arity=arity)

    def _record_error(self, error: ConsolidationError):
        if self._audit is not None:
            self._audit.record_error(error.error.with_context("bounds", repr(self.bounds())))
