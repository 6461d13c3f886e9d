"""Phase evaluators: preparedness, response, recovery."""

from phases.preparedness import (
    PreparednessRecord,
    calculate_preparedness_score,
    can_advance_preparedness,
    finalize_preparedness,
)
from phases.response import (
    ResponseState,
    ResponseStatus,
    ResponseRecord,
    Tick,
    ResolveEvent,
    AdvanceEvent,
    OrderEvacuation,
    ContactAgency,
    new_response_state,
    initialize_response,
    reduce,
    finalize_response,
)
from phases.recovery import (
    RecoveryRecord,
    calculate_recovery_score,
    can_advance_recovery,
    finalize_recovery,
)

__all__ = [
    "PreparednessRecord",
    "calculate_preparedness_score",
    "can_advance_preparedness",
    "finalize_preparedness",
    "ResponseState",
    "ResponseStatus",
    "ResponseRecord",
    "Tick",
    "ResolveEvent",
    "AdvanceEvent",
    "OrderEvacuation",
    "ContactAgency",
    "new_response_state",
    "initialize_response",
    "reduce",
    "finalize_response",
    "RecoveryRecord",
    "calculate_recovery_score",
    "can_advance_recovery",
    "finalize_recovery",
]
