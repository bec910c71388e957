"""
Contracts Module

Types that cross the boundary between the trace producer, the recognizers
and the consolidator. The consolidator imports only these types, never a
recognizer implementation.

DESIGN PRINCIPLES:
==================
1. Atomic events and composite operations are immutable (frozen dataclasses)
2. Every failure a caller can cause has an explicit ErrorCode
3. An ordinary pattern mismatch is None, never an exception
"""

from .base import (
    ErrorCode,
    Error,
    ConsolidationError,
    InvalidArity,
    WindowLengthMismatch,
    Timestamp,
)
from .events import (
    OperationKind,
    AtomicEvent,
    CompositeOperation,
    SwapOperation,
    AuditEventType,
    AuditLogEntry,
)

__all__ = [
    'ErrorCode',
    'Error',
    'ConsolidationError',
    'InvalidArity',
    'WindowLengthMismatch',
    'Timestamp',
    'OperationKind',
    'AtomicEvent',
    'CompositeOperation',
    'SwapOperation',
    'AuditEventType',
    'AuditLogEntry',
]
