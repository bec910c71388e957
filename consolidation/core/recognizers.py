"""
Composite Operation Recognizers
===============================

A recognizer knows one operation kind and the exact number of atomic
events (its arity) that make up that operation. Given a window of that
many events it either rebuilds the composite operation or returns None.

CONTRACT:
- consolidate() never raises for a window that simply does not fit the
  pattern; it returns None
- a window of the wrong length is a caller error (WindowLengthMismatch)
- recognizers are stateless; one instance may serve any number of windows
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Hashable, Optional, Sequence

from ..contracts.base import WindowLengthMismatch
from ..contracts.events import (
    AtomicEvent, CompositeOperation, OperationKind, SwapOperation, window_of
)


class HighLevelOperation(ABC):
    """
    Base class for recognizers.

    Subclasses set the class attributes kind and arity and implement
    _match(), which only ever sees windows of exactly arity events.
    """

    kind: Hashable
    arity: int

    def consolidate(self, window: Sequence[AtomicEvent]) -> Optional[CompositeOperation]:
        """
        Attempt to rebuild this recognizer's operation from window.

        Returns:
            The composite operation, or None if the events do not form it.

        Raises:
            WindowLengthMismatch: if len(window) != arity
        """
        if len(window) != self.arity:
            raise WindowLengthMismatch(
                f"{type(self).__name__} consumes {self.arity} events, got {len(window)}",
                kind=self.kind,
                arity=self.arity,
                window_length=len(window)
            )
        return self._match(window_of(window))

    @abstractmethod
    def _match(self, window: tuple) -> Optional[CompositeOperation]:
        pass

    def accepts(self, kind: Hashable) -> bool:
        """True if this recognizer produces operations of kind."""
        return self.kind == kind

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, arity={self.arity})"


class SwapRecognizer(HighLevelOperation):
    """
    Recognizes a pairwise exchange from two consecutive writes.

    [write(x, 5, previous=3), write(y, 3, previous=5)] is a swap: each
    location received exactly the value the other one held before.
    """

    kind = OperationKind.SWAP
    arity = 2

    def _match(self, window: tuple) -> Optional[SwapOperation]:
        first, second = window

        if not (first.is_write and second.is_write):
            return None
        if first.location == second.location:
            return None
        # Without the overwritten values the exchange can't be verified.
        if first.previous is None or second.previous is None:
            return None
        if first.value != second.previous or second.value != first.previous:
            return None

        return SwapOperation.from_writes(first, second)
