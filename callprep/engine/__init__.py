"""Engine package - Call preparation logic.

Modules:
    - strategies: Dial strategy resolution and call ids
    - dialer: CallService (prepare_call, get_status, record_attempt)
    - call_log: Call log recorder interface and in-memory recorder
"""

from callprep.engine.call_log import CallAttempt, CallLogRecorder, InMemoryCallLog
from callprep.engine.dialer import CallRequest, CallResponse, CallService
from callprep.engine.strategies import (
    DialStrategy,
    StrategyKind,
    StrategyResolver,
    generate_call_id,
)

__all__ = [
    # Strategies
    "DialStrategy",
    "StrategyKind",
    "StrategyResolver",
    "generate_call_id",
    # Service
    "CallRequest",
    "CallResponse",
    "CallService",
    # Call log
    "CallAttempt",
    "CallLogRecorder",
    "InMemoryCallLog",
]
