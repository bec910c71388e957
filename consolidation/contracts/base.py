"""
Base Contracts and Shared Types

Foundational types used by every layer of the consolidation engine.
All data types here are IMMUTABLE.

BOUNDARY ENFORCEMENT:
=====================
- Recognizers and the consolidator import from here, never from each other
- Errors are data first (Error), exceptions second (ConsolidationError)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Tuple
from enum import Enum, auto


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Caller errors the consolidation engine can report.

    Pattern mismatches and empty lookups are NOT listed here: they are
    expected outcomes and are returned as None.
    """
    INVALID_ARITY = auto()
    WINDOW_LENGTH_MISMATCH = auto()


@dataclass(frozen=True)
class Timestamp:
    """
    Immutable timestamp with explicit semantics.
    All timestamps are UTC, never local time.
    """
    value: datetime

    @staticmethod
    def now() -> Timestamp:
        return Timestamp(value=datetime.now(timezone.utc))

    def to_iso(self) -> str:
        return self.value.isoformat()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and queried.
    """
    code: ErrorCode
    message: str
    timestamp: Timestamp
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            timestamp=self.timestamp,
            context=self.context + ((key, value),)
        )


# =============================================================================
# EXCEPTIONS (raised only for caller errors)
# =============================================================================

class ConsolidationError(Exception):
    """Base class for errors raised by the consolidation engine."""

    code: ErrorCode

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.error = Error(
            code=self.code,
            message=message,
            timestamp=Timestamp.now(),
            context=tuple((k, str(v)) for k, v in sorted(context.items()))
        )


class InvalidArity(ConsolidationError, ValueError):
    """Raised when an arity or window length falls outside [0, max_size)."""
    code = ErrorCode.INVALID_ARITY


class WindowLengthMismatch(ConsolidationError, ValueError):
    """Raised when a recognizer is handed a window of the wrong length."""
    code = ErrorCode.WINDOW_LENGTH_MISMATCH
