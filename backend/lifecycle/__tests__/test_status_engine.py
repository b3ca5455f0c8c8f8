"""
Test suite for job status derivation.

Pure functions, no fixtures needed.

Run: python3 -m pytest lifecycle/__tests__/test_status_engine.py -v
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pytest

from lifecycle.status_engine import (
    derive_status,
    is_latest_interview_result,
    recompute_status,
    status_for_new_event,
)
from models.enums import EventType, InterviewResult, JobStatus


@dataclass
class Event:
    id: Optional[int]
    event_type: EventType
    event_date: datetime
    interview_result: Optional[InterviewResult] = None


class TestDeriveStatus:
    """
    Rule table, first match wins.

    Run: python3 -m pytest lifecycle/__tests__/test_status_engine.py::TestDeriveStatus -v
    """

    @pytest.mark.parametrize("event_type,expected", [
        (EventType.INTERVIEW_SCHEDULED, JobStatus.INTERVIEW),
        (EventType.INTERVIEW, JobStatus.INTERVIEW),
        (EventType.REJECTED, JobStatus.REJECTED),
        (EventType.OFFER_RECEIVED, JobStatus.OFFER),
        (EventType.OFFER_ACCEPTED, JobStatus.ACCEPTED),
    ])
    def test_status_changing_events(self, event_type, expected):
        assert derive_status(event_type) == expected

    @pytest.mark.parametrize("event_type", [
        EventType.APPLIED,
        EventType.OFFER_DECLINED,
        EventType.WITHDRAWN,
        EventType.GHOSTED,
    ])
    def test_events_without_status_change(self, event_type):
        assert derive_status(event_type) is None

    def test_failed_interview_result_rejects(self):
        assert derive_status(EventType.INTERVIEW_RESULT, InterviewResult.FAILED) == JobStatus.REJECTED

    @pytest.mark.parametrize("result", [
        None,
        InterviewResult.PENDING,
        InterviewResult.PASSED,
        InterviewResult.WAITING,
        InterviewResult.CANCELLED,
    ])
    def test_other_interview_results_keep_status(self, result):
        assert derive_status(EventType.INTERVIEW_RESULT, result) is None

    def test_interview_result_ignored_on_other_event_types(self):
        """A failed result attached to an interview event still means 'interview'."""
        assert derive_status(EventType.INTERVIEW, InterviewResult.FAILED) == JobStatus.INTERVIEW

    def test_accepts_string_values(self):
        assert derive_status("offer_accepted") == JobStatus.ACCEPTED
        assert derive_status("interview_result", "failed") == JobStatus.REJECTED

    def test_unknown_event_type_raises(self):
        with pytest.raises(ValueError):
            derive_status("promoted")

    def test_result_always_valid_status(self):
        for event_type in EventType:
            for result in [None, *InterviewResult]:
                derived = derive_status(event_type, result)
                assert derived is None or derived in set(JobStatus)


class TestLatestInterviewResult:
    """Only the most recent interview_result of a job may demote it."""

    def test_latest_by_date(self):
        earlier = Event(1, EventType.INTERVIEW_RESULT, datetime(2024, 3, 1), InterviewResult.PASSED)
        later = Event(2, EventType.INTERVIEW_RESULT, datetime(2024, 3, 5), InterviewResult.FAILED)

        assert is_latest_interview_result(later, [earlier, later]) is True
        assert is_latest_interview_result(earlier, [earlier, later]) is False

    def test_same_date_ordered_by_id(self):
        first = Event(1, EventType.INTERVIEW_RESULT, datetime(2024, 3, 5))
        second = Event(2, EventType.INTERVIEW_RESULT, datetime(2024, 3, 5))

        assert is_latest_interview_result(second, [first, second]) is True
        assert is_latest_interview_result(first, [first, second]) is False

    def test_other_event_types_ignored(self):
        result = Event(1, EventType.INTERVIEW_RESULT, datetime(2024, 3, 1), InterviewResult.FAILED)
        later_interview = Event(2, EventType.INTERVIEW, datetime(2024, 3, 9))

        assert is_latest_interview_result(result, [result, later_interview]) is True

    def test_out_of_order_failed_result_does_not_demote(self):
        passed = Event(1, EventType.INTERVIEW_RESULT, datetime(2024, 3, 10), InterviewResult.PASSED)
        backdated_fail = Event(2, EventType.INTERVIEW_RESULT, datetime(2024, 3, 1), InterviewResult.FAILED)

        assert status_for_new_event(backdated_fail, [passed, backdated_fail]) is None

    def test_latest_failed_result_demotes(self):
        passed = Event(1, EventType.INTERVIEW_RESULT, datetime(2024, 3, 1), InterviewResult.PASSED)
        failed = Event(2, EventType.INTERVIEW_RESULT, datetime(2024, 3, 10), InterviewResult.FAILED)

        assert status_for_new_event(failed, [passed, failed]) == JobStatus.REJECTED

    def test_non_result_events_skip_latest_check(self):
        offer = Event(3, EventType.OFFER_RECEIVED, datetime(2024, 1, 1))
        later_result = Event(4, EventType.INTERVIEW_RESULT, datetime(2024, 6, 1), InterviewResult.PASSED)

        assert status_for_new_event(offer, [offer, later_result]) == JobStatus.OFFER


class TestRecomputeStatus:
    """Replaying the event history."""

    def test_acme_history(self):
        """applied -> interview_scheduled -> interview -> failed result = rejected"""
        events = [
            Event(1, EventType.APPLIED, datetime(2024, 3, 1)),
            Event(2, EventType.INTERVIEW_SCHEDULED, datetime(2024, 3, 5)),
            Event(3, EventType.INTERVIEW, datetime(2024, 3, 12, 14, 30)),
            Event(4, EventType.INTERVIEW_RESULT, datetime(2024, 3, 15), InterviewResult.FAILED),
        ]
        assert recompute_status(events) == JobStatus.REJECTED

    def test_order_independent_of_input_order(self):
        events = [
            Event(3, EventType.OFFER_ACCEPTED, datetime(2024, 4, 1)),
            Event(1, EventType.INTERVIEW, datetime(2024, 3, 1)),
            Event(2, EventType.OFFER_RECEIVED, datetime(2024, 3, 20)),
        ]
        assert recompute_status(events) == JobStatus.ACCEPTED

    def test_no_status_events(self):
        events = [
            Event(1, EventType.APPLIED, datetime(2024, 3, 1)),
            Event(2, EventType.GHOSTED, datetime(2024, 5, 1)),
        ]
        assert recompute_status(events) is None

    def test_empty_history(self):
        assert recompute_status([]) is None

    def test_passed_result_after_interview_keeps_interview(self):
        events = [
            Event(1, EventType.INTERVIEW, datetime(2024, 3, 1)),
            Event(2, EventType.INTERVIEW_RESULT, datetime(2024, 3, 2), InterviewResult.PASSED),
        ]
        assert recompute_status(events) == JobStatus.INTERVIEW
