"""
Trace Consolidation Engine

Recognizes higher-level algorithmic operations (such as a swap) in
windows of low-level read/write events taken from an instrumented
algorithm trace.

LAYERS:
=======
- contracts: immutable event, operation and error types
- core: recognizers and the arity-indexed Consolidator
- observability: audit log and counters
- config: ConsolidatorConfig
"""

__version__ = "0.1.0"

from .config import ConsolidatorConfig
from .contracts import (
    AtomicEvent,
    CompositeOperation,
    ConsolidationError,
    InvalidArity,
    OperationKind,
    SwapOperation,
    WindowLengthMismatch,
)
from .core import Consolidator, HighLevelOperation, MAX_SIZE, SwapRecognizer
from .observability import ConsolidationAuditLog, ConsolidationMetrics

__all__ = [
    'ConsolidatorConfig',
    'AtomicEvent',
    'CompositeOperation',
    'ConsolidationError',
    'InvalidArity',
    'OperationKind',
    'SwapOperation',
    'WindowLengthMismatch',
    'Consolidator',
    'HighLevelOperation',
    'MAX_SIZE',
    'SwapRecognizer',
    'ConsolidationAuditLog',
    'ConsolidationMetrics',
]
