"""
Demo data for the mock provider.

build_seed() returns fresh copies on every call so each MockProvider
instance starts from the same state.
"""

from datetime import date, datetime, time, timedelta, timezone

from models.enums import EventType, InterviewResult, InterviewType, JobStatus
from schemas import Job, JobEvent


_JOBS = [
    # id, company, position, url, applied, status, location, notes, favorite
    (1, "Google", "Senior Software Engineer", "https://careers.google.com/jobs/123",
     date(2024, 1, 15), JobStatus.INTERVIEW, "Mountain View, CA",
     "Great company culture, tech stack matches my skills", True),
    (2, "Microsoft", "Frontend Developer", "https://careers.microsoft.com/jobs/456",
     date(2024, 1, 20), JobStatus.APPLIED, "Seattle, WA", "Frontend position with React stack", False),
    (3, "Apple", "iOS Developer", "https://jobs.apple.com/jobs/789",
     date(2024, 1, 25), JobStatus.REJECTED, "Cupertino, CA", "Required more Swift experience", False),
    (4, "Meta", "Full Stack Engineer", "https://www.metacareers.com/jobs/101112",
     date(2024, 2, 1), JobStatus.OFFER, "Menlo Park, CA", "Received offer, considering options", True),
    (5, "Amazon", "Cloud Engineer", "https://amazon.jobs/jobs/131415",
     date(2024, 2, 5), JobStatus.APPLIED, "Austin, TX", "AWS related position", False),
    (6, "Netflix", "Data Engineer", "https://jobs.netflix.com/jobs/161718",
     date(2024, 2, 10), JobStatus.INTERVIEW, "Los Gatos, CA", "Exciting data challenges", True),
    (7, "Spotify", "Backend Engineer", "https://www.lifeatspotify.com/jobs/192021",
     date(2024, 2, 12), JobStatus.APPLIED, "New York, NY", "Music streaming technology", False),
    (8, "Tesla", "Software Engineer", "https://www.tesla.com/careers/job/123",
     date(2024, 2, 15), JobStatus.APPLIED, "Palo Alto, CA", "Electric vehicle technology", False),
    (9, "Uber", "Senior Backend Engineer", "https://www.uber.com/careers/job/456",
     date(2024, 2, 18), JobStatus.INTERVIEW, "San Francisco, CA", "Ride-sharing platform", True),
    (10, "Airbnb", "Product Manager", "https://careers.airbnb.com/job/789",
     date(2024, 2, 20), JobStatus.APPLIED, "San Francisco, CA", "Travel and hospitality", False),
    (11, "Local Startup", "Full Stack Developer", None,
     date(2025, 1, 10), JobStatus.APPLIED, "Remote", "Found through networking, no formal job posting", False),
]

_INTERVIEWS = [
    # job_id, round, type, scheduled (local wall clock), result, notes
    (1, 1, InterviewType.TECHNICAL, datetime(2024, 1, 22, 14, 0), InterviewResult.PASSED,
     "Prepared common algorithm questions"),
    (1, 2, InterviewType.HR, datetime(2024, 12, 25, 10, 0), InterviewResult.PENDING,
     "Waiting for HR interview results"),
    (4, 1, InterviewType.PHONE, datetime(2024, 2, 8, 15, 30), InterviewResult.PASSED,
     "Highlighted React project experience"),
    (4, 2, InterviewType.ONSITE, datetime(2024, 2, 12, 9, 0), InterviewResult.PASSED,
     "Coding exercise completed successfully"),
    (6, 1, InterviewType.VIDEO, datetime(2024, 2, 15, 16, 0), InterviewResult.PASSED,
     "Focused on big data experience"),
    (6, 2, InterviewType.TECHNICAL, datetime(2024, 12, 20, 10, 0), InterviewResult.PENDING,
     "Upcoming technical round"),
    (9, 1, InterviewType.PHONE, datetime(2024, 12, 18, 14, 0), InterviewResult.PENDING,
     "Initial phone screening"),
    (9, 2, InterviewType.TECHNICAL, datetime(2024, 12, 22, 15, 30), InterviewResult.PENDING,
     "Technical assessment"),
]


def _stamp(day: date) -> datetime:
    return datetime.combine(day, time(), tzinfo=timezone.utc)


def build_seed() -> tuple[list[Job], list[JobEvent]]:
    """
    Build demo jobs and their events.

    Every job gets an 'applied' event; rejected/offer jobs get the event that
    explains their status, and interview rounds become 'interview' events.
    """
    jobs: list[Job] = []
    events: list[JobEvent] = []

    def add_event(**fields) -> None:
        created = _stamp(fields["event_date"].date())
        events.append(JobEvent(id=len(events) + 1, created_at=created, updated_at=created, **fields))

    for job_id, company, position, url, applied, status, location, notes, favorite in _JOBS:
        job = Job(
            id=job_id,
            company=company,
            position=position,
            job_url=url,
            application_date=applied,
            status=status,
            location=location,
            notes=notes,
            is_favorite=favorite,
            created_at=_stamp(applied),
            updated_at=_stamp(applied),
        )
        jobs.append(job)

        add_event(
            job_id=job_id,
            event_type=EventType.APPLIED,
            event_date=datetime.combine(applied, time()),
            title=f"Applied to {company}",
            description=f"Applied for {position} position at {company}",
            notes=notes,
        )
        if status == JobStatus.REJECTED:
            add_event(
                job_id=job_id,
                event_type=EventType.REJECTED,
                event_date=datetime.combine(applied + timedelta(days=14), time()),
                title=f"Rejected by {company}",
                description=f"Application for {position} was not successful",
            )
        elif status == JobStatus.OFFER:
            add_event(
                job_id=job_id,
                event_type=EventType.OFFER_RECEIVED,
                event_date=datetime.combine(applied + timedelta(days=21), time()),
                title=f"Offer from {company}",
                description=f"Received job offer for {position} position",
            )

    for job_id, round_number, interview_type, scheduled, result, notes in _INTERVIEWS:
        add_event(
            job_id=job_id,
            event_type=EventType.INTERVIEW,
            event_date=scheduled,
            title=f"{interview_type.value.capitalize()} Interview",
            description=f"Round {round_number} {interview_type.value} interview",
            interview_round=round_number,
            interview_type=interview_type,
            interview_result=result,
            notes=notes,
        )

    return jobs, events
