"""
Consolidation Core
==================

Matching of atomic read/write windows against registered recognizers.

Modules:
- recognizers: recognizer base class and the built-in swap recognizer
- consolidator: arity-indexed registry and first-match-wins lookup
"""

from .recognizers import HighLevelOperation, SwapRecognizer
from .consolidator import Consolidator, MAX_SIZE

__all__ = [
    'HighLevelOperation',
    'SwapRecognizer',
    'Consolidator',
    'MAX_SIZE',
]
