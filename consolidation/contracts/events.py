"""
Trace Event Contracts

Immutable types for the two ends of consolidation:
- AtomicEvent: a single read or write produced by the instrumented algorithm
- CompositeOperation: the higher-level operation a recognizer rebuilds
  from a window of atomic events

Plus the audit entry types recorded by the observability layer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union
from enum import Enum

from .base import Timestamp


Number = Union[int, float]
VariableId = str


# =============================================================================
# OPERATION KINDS
# =============================================================================

class OperationKind(str, Enum):
    """
    Operation varieties known to the tracer.

    Used as an equality key only. The consolidator accepts any hashable
    kind, so recognizers for kinds outside this enum can be registered.
    """
    READ = "read"
    WRITE = "write"
    SWAP = "swap"
    MESSAGE = "message"
    REMOVE = "remove"


def _as_tuple(value) -> Tuple:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


# =============================================================================
# ATOMIC EVENTS (trace input)
# =============================================================================

@dataclass(frozen=True)
class AtomicEvent:
    """
    IMMUTABLE read or write on a single variable.

    value and index are tuples so that multi-dimensional arrays can be
    traced. previous holds the value a write overwrote, when the tracer
    recorded it. source names the variable a written value was read from.
    """
    kind: OperationKind
    target: Optional[VariableId]
    value: Tuple[Number, ...] = field(default_factory=tuple)
    index: Tuple[int, ...] = field(default_factory=tuple)
    source: Optional[VariableId] = None
    previous: Optional[Tuple[Number, ...]] = None

    def __post_init__(self):
        if self.kind not in (OperationKind.READ, OperationKind.WRITE):
            raise ValueError(f"AtomicEvent kind must be READ or WRITE, got {self.kind!r}")

    @property
    def is_write(self) -> bool:
        return self.kind == OperationKind.WRITE

    @property
    def is_read(self) -> bool:
        return self.kind == OperationKind.READ

    @property
    def location(self) -> Tuple[Optional[VariableId], Tuple[int, ...]]:
        """(target, index) pair identifying the slot touched."""
        return (self.target, self.index)

    @staticmethod
    def read(
        source: VariableId,
        value,
        index=None,
        target: Optional[VariableId] = None
    ) -> AtomicEvent:
        """Factory for a read of source (optionally into target)."""
        return AtomicEvent(
            kind=OperationKind.READ,
            target=target,
            value=_as_tuple(value),
            index=_as_tuple(index),
            source=source
        )

    @staticmethod
    def write(
        target: VariableId,
        value,
        index=None,
        previous=None,
        source: Optional[VariableId] = None
    ) -> AtomicEvent:
        """Factory for a write into target."""
        return AtomicEvent(
            kind=OperationKind.WRITE,
            target=target,
            value=_as_tuple(value),
            index=_as_tuple(index),
            source=source,
            previous=_as_tuple(previous) if previous is not None else None
        )


# =============================================================================
# COMPOSITE OPERATIONS (consolidation output)
# =============================================================================

@dataclass(frozen=True)
class CompositeOperation:
    """
    Immutable high-level operation rebuilt from a window of atomic events.
    Carries its own kind for downstream identification.
    """
    kind: OperationKind
    events: Tuple[AtomicEvent, ...]

    @property
    def arity(self) -> int:
        return len(self.events)


@dataclass(frozen=True)
class SwapOperation(CompositeOperation):
    """Pairwise exchange of the values held by two locations."""
    var1: Optional[VariableId] = None
    var2: Optional[VariableId] = None
    index1: Tuple[int, ...] = field(default_factory=tuple)
    index2: Tuple[int, ...] = field(default_factory=tuple)
    values: Tuple[Tuple[Number, ...], Tuple[Number, ...]] = ((), ())

    @staticmethod
    def from_writes(first: AtomicEvent, second: AtomicEvent) -> SwapOperation:
        return SwapOperation(
            kind=OperationKind.SWAP,
            events=(first, second),
            var1=first.target,
            var2=second.target,
            index1=first.index,
            index2=second.index,
            values=(first.value, second.value)
        )


def window_of(events: Sequence[AtomicEvent]) -> Tuple[AtomicEvent, ...]:
    """Freeze a caller-supplied window so results never alias caller lists."""
    return tuple(events)


# =============================================================================
# AUDIT CONTRACTS
# =============================================================================

class AuditEventType(Enum):
    """Explicit audit event types."""
    REGISTER = "register"
    UNREGISTER = "unregister"
    MATCH = "match"
    ERROR = "error"


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable audit log entry."""
    entry_id: str
    event_type: AuditEventType
    timestamp: Timestamp
    action: str
    kind: Optional[str] = None
    arity: Optional[int] = None
    metadata: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
