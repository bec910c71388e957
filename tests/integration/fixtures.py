"""
Integration Test Fixtures

Hand-written trace fragments for deterministic testing.
All fixtures are explicit - no random generation.
"""

from typing import List

from consolidation import AtomicEvent


# =============================================================================
# SWAP WINDOWS
# =============================================================================

def create_swap_window() -> List[AtomicEvent]:
    """x and y exchange their prior values 3 and 5."""
    return [
        AtomicEvent.write("x", 5, previous=3),
        AtomicEvent.write("y", 3, previous=5),
    ]


def create_false_swap_window() -> List[AtomicEvent]:
    """Two writes that look like a swap but y does not receive x's old value."""
    return [
        AtomicEvent.write("x", 5, previous=3),
        AtomicEvent.write("y", 9, previous=5),
    ]


# =============================================================================
# TRACE FIXTURES
# =============================================================================

def create_bubble_pass_trace() -> List[AtomicEvent]:
    """
    One bubble-sort pass over a = [4, 1, 3] as the tracer records it:
    compare-reads followed by the swapping writes.
    """
    return [
        AtomicEvent.read("a", 4, index=0),
        AtomicEvent.read("a", 1, index=1),
        AtomicEvent.write("a", 1, index=0, previous=4),
        AtomicEvent.write("a", 4, index=1, previous=1),
        AtomicEvent.read("a", 4, index=1),
        AtomicEvent.read("a", 3, index=2),
        AtomicEvent.write("a", 3, index=1, previous=4),
        AtomicEvent.write("a", 4, index=2, previous=3),
    ]
