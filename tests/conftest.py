"""
Shared test recognizers.

StubRecognizer lets tests register arbitrary kinds at arbitrary arities
with a scripted match decision.
"""

from typing import Callable, Hashable, Optional

import pytest

from consolidation.contracts.events import CompositeOperation
from consolidation.core.recognizers import HighLevelOperation


class StubRecognizer(HighLevelOperation):
    """Recognizer whose match decision is a plain predicate over the window."""

    def __init__(
        self,
        kind: Hashable,
        arity: int,
        predicate: Optional[Callable[[tuple], bool]] = None
    ):
        self.kind = kind
        self.arity = arity
        self._predicate = predicate or (lambda window: True)
        self.calls = 0

    def _match(self, window: tuple) -> Optional[CompositeOperation]:
        self.calls += 1
        if not self._predicate(window):
            return None
        return CompositeOperation(kind=self.kind, events=window)


@pytest.fixture(scope="session")
def make_recognizer():
    """Factory fixture: make_recognizer(kind, arity, predicate=None)."""
    return StubRecognizer
