from lifecycle.status_engine import (
    derive_status,
    is_latest_interview_result,
    status_for_new_event,
    recompute_status,
)

__all__ = [
    "derive_status",
    "is_latest_interview_result",
    "status_for_new_event",
    "recompute_status",
]
