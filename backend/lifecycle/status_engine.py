"""
Job status derivation from lifecycle events.

Job.status is a projection of the event history. Providers call
status_for_new_event() exactly once per event creation (never on update or
delete) right after the event is written, and write the result onto the job
when it is not None. recompute_status() rebuilds the projection from the full
history and is the reconciliation path when a status write was lost.

Rules, first match wins:

    interview_scheduled          -> interview
    interview                    -> interview
    rejected                     -> rejected
    offer_received               -> offer
    offer_accepted               -> accepted
    interview_result + failed    -> rejected (only if it is the latest result)
    anything else                -> no change
"""

from typing import Iterable, Optional, Protocol, Union

from models.enums import EventType, InterviewResult, JobStatus


class EventLike(Protocol):
    """Anything carrying the fields the engine reads (schemas.JobEvent, ORM rows)."""
    id: Optional[int]
    event_type: EventType
    event_date: object
    interview_result: Optional[InterviewResult]


EVENT_STATUS: dict[EventType, JobStatus] = {
    EventType.INTERVIEW_SCHEDULED: JobStatus.INTERVIEW,
    EventType.INTERVIEW: JobStatus.INTERVIEW,
    EventType.REJECTED: JobStatus.REJECTED,
    EventType.OFFER_RECEIVED: JobStatus.OFFER,
    EventType.OFFER_ACCEPTED: JobStatus.ACCEPTED,
}


def derive_status(
    event_type: Union[EventType, str],
    interview_result: Union[InterviewResult, str, None] = None,
) -> Optional[JobStatus]:
    """
    Map an event to the job status it implies.

    Args:
        event_type: Event type (enum or its string value)
        interview_result: Interview result, only read for interview_result events

    Returns:
        New JobStatus, or None when the event does not change the status

    Raises:
        ValueError: If event_type or interview_result is not a known value

    Example:
        >>> derive_status("offer_accepted")
        <JobStatus.ACCEPTED: 'accepted'>
        >>> derive_status("interview_result", "passed") is None
        True
    """
    event_type = EventType(event_type)
    if event_type in EVENT_STATUS:
        return EVENT_STATUS[event_type]
    if event_type == EventType.INTERVIEW_RESULT and interview_result is not None:
        if InterviewResult(interview_result) == InterviewResult.FAILED:
            return JobStatus.REJECTED
    return None


def event_order_key(event: EventLike) -> tuple:
    """Chronological order: event date, then creation order (id)."""
    return (event.event_date, event.id or 0)


def is_latest_interview_result(event: EventLike, job_events: Iterable[EventLike]) -> bool:
    """
    Check that event is the most recent interview_result of its job.

    Args:
        event: The interview_result event being evaluated
        job_events: All events of the same job (may or may not include event)

    Returns:
        True if no other interview_result is ordered after it
    """
    key = event_order_key(event)
    for other in job_events:
        if other.event_type != EventType.INTERVIEW_RESULT or other.id == event.id:
            continue
        if event_order_key(other) > key:
            return False
    return True


def status_for_new_event(event: EventLike, job_events: Iterable[EventLike]) -> Optional[JobStatus]:
    """
    Status to write onto the job after event was created.

    A failed interview_result only demotes the job when no later
    interview_result exists, so an out-of-order failed result cannot
    override a more recent pass.
    """
    status = derive_status(event.event_type, event.interview_result)
    if status is None:
        return None
    if EventType(event.event_type) == EventType.INTERVIEW_RESULT:
        if not is_latest_interview_result(event, job_events):
            return None
    return status


def recompute_status(job_events: Iterable[EventLike]) -> Optional[JobStatus]:
    """
    Rebuild the derived status from a job's full event history.

    Replays derive_status over the events in chronological order; the last
    status implied wins.

    Returns:
        Derived JobStatus, or None if no event implies a status (the caller
        keeps the stored/manual status in that case)
    """
    status = None
    for event in sorted(job_events, key=event_order_key):
        derived = derive_status(event.event_type, event.interview_result)
        if derived is not None:
            status = derived
    return status
