"""
Hosted (Supabase) provider: ownership scoping, error translation and the
non-transactional write paths.

Uses FakeSupabaseClient from fake_supabase.py; no network access.

Run: python3 -m pytest providers/__tests__/test_hosted_provider.py -v
"""
import asyncio
import time

import httpx
import pytest

from errors import NotFoundError, StorageError
from models.enums import EventType, JobStatus
from providers.field_mapping import JOB_EVENT_FIELDS, JOB_FIELDS, from_storage, to_storage
from providers.hosted import HostedProvider, search_filter
from providers.__tests__.fake_supabase import FakeSupabaseClient, api_error
from schemas import JobCreate, JobEventCreate, JobEventUpdate, JobQuery, JobUpdate, TimelineQuery


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def client():
    return FakeSupabaseClient()


@pytest.fixture
def alice(client):
    return HostedProvider(client, owner_id="alice")


@pytest.fixture
def bob(client):
    return HostedProvider(client, owner_id="bob")


def new_job(company="Acme", position="Engineer"):
    return JobCreate(company=company, position=position, application_date="2024-03-01")


class TestOwnership:
    """
    Rows of other users behave exactly like absent rows.

    Run: python3 -m pytest providers/__tests__/test_hosted_provider.py::TestOwnership -v
    """

    def test_rows_store_owner(self, client, alice):
        job = run(alice.create_job(new_job()))

        assert client.tables["jobs"][0]["user_id"] == "alice"
        assert client.tables["job_events"][0]["user_id"] == "alice"
        assert client.tables["job_events"][0]["job_id"] == job.id

    def test_owner_column_not_returned(self, alice):
        job = run(alice.create_job(new_job()))
        assert "user_id" not in job.model_dump()

    def test_list_only_own_jobs(self, alice, bob):
        run(alice.create_job(new_job("Alice Co")))
        run(bob.create_job(new_job("Bob Co")))

        page = run(alice.fetch_jobs(JobQuery()))

        assert [job.company for job in page.jobs] == ["Alice Co"]
        assert page.pagination.total == 1

    def test_foreign_job_is_not_found(self, alice, bob):
        job = run(alice.create_job(new_job()))

        with pytest.raises(NotFoundError):
            run(bob.get_job(job.id))
        with pytest.raises(NotFoundError):
            run(bob.update_job(job.id, JobUpdate(notes="mine now")))
        with pytest.raises(NotFoundError):
            run(bob.delete_job(job.id))
        with pytest.raises(NotFoundError):
            run(bob.toggle_favorite(job.id, current_value=False))

        assert run(alice.get_job(job.id)).notes is None

    def test_cannot_add_event_to_foreign_job(self, alice, bob):
        job = run(alice.create_job(new_job()))

        with pytest.raises(NotFoundError):
            run(bob.create_job_event(JobEventCreate(
                job_id=job.id, event_type=EventType.REJECTED, event_date="2024-03-02", title="Nope",
            )))

        assert run(alice.get_job(job.id)).status == JobStatus.APPLIED

    def test_foreign_events_are_not_found(self, alice, bob):
        run(alice.create_job(new_job()))
        event = run(alice.fetch_job_events())[0]

        assert run(bob.fetch_job_events()) == []
        with pytest.raises(NotFoundError):
            run(bob.update_job_event(event.id, JobEventUpdate(notes="x")))
        with pytest.raises(NotFoundError):
            run(bob.delete_job_event(event.id))
        assert run(bob.delete_job_events_by_type(event.job_id, [EventType.APPLIED])) == 0

    def test_stats_scoped_to_owner(self, alice, bob):
        run(alice.create_job(new_job()))
        run(alice.create_job(new_job("Other")))
        run(bob.create_job(new_job()))

        assert run(alice.fetch_stats()).total_applications == 2
        assert run(bob.fetch_stats()).total_applications == 1

    def test_timeline_scoped_to_owner(self, alice, bob):
        run(alice.create_job(new_job("Alice Co")))
        run(bob.create_job(new_job("Bob Co")))

        page = run(alice.fetch_timeline_events(TimelineQuery()))

        assert [event.company for event in page.events] == ["Alice Co"]
        assert page.pagination.total == 1


class TestErrorTranslation:

    def test_api_error_becomes_storage_error(self, client, alice):
        client.fail_with = api_error()

        with pytest.raises(StorageError, match="Failed to fetch jobs") as exc_info:
            run(alice.fetch_jobs(JobQuery()))

        assert exc_info.value.original_error is client.fail_with

    def test_transport_error_becomes_storage_error(self, client, alice):
        client.fail_with = httpx.ConnectError("connection refused")

        with pytest.raises(StorageError):
            run(alice.ping())

    def test_ping_succeeds(self, alice):
        assert run(alice.ping()) is None

    def test_missing_row_count_is_an_error(self, client, alice):
        run(alice.create_job(new_job()))
        client.omit_count = True

        with pytest.raises(StorageError, match="Failed to fetch jobs"):
            run(alice.fetch_jobs(JobQuery()))
        with pytest.raises(StorageError, match="Failed to fetch timeline events"):
            run(alice.fetch_timeline_events(TimelineQuery()))


class TestEventLoop:
    """Blocking client calls run on worker threads, so concurrent requests overlap."""

    def test_concurrent_reads_overlap(self, client, alice):
        client.latency = 0.3

        async def two_reads():
            started = time.perf_counter()
            await asyncio.gather(alice.fetch_jobs(JobQuery()), alice.fetch_jobs(JobQuery()))
            return time.perf_counter() - started

        assert run(two_reads()) < 0.55

    def test_loop_stays_responsive_during_request(self, client, alice):
        client.latency = 0.3
        ticks = []

        async def tick():
            for _ in range(3):
                await asyncio.sleep(0.05)
                ticks.append(time.perf_counter())

        async def read_while_ticking():
            started = time.perf_counter()
            await asyncio.gather(alice.ping(), tick())
            return started

        started = run(read_while_ticking())

        assert len(ticks) == 3
        assert ticks[0] - started < 0.25


class TestNonTransactionalWrites:

    def test_job_kept_when_applied_event_fails(self, client, alice):
        """Job + applied event are two requests; the job survives a failed second write."""
        client.fail_inserts_into = "job_events"

        job = run(alice.create_job(new_job()))

        assert run(alice.get_job(job.id)).company == "Acme"
        assert run(alice.fetch_job_events(job.id)) == []

    def test_event_kept_when_status_write_fails(self, client, alice, monkeypatch):
        job = run(alice.create_job(new_job()))

        def fail_status_write(job_id, status):
            raise StorageError("Failed to update job status")

        monkeypatch.setattr(alice, "_set_status", fail_status_write)
        event = run(alice.create_job_event(JobEventCreate(
            job_id=job.id, event_type=EventType.OFFER_RECEIVED, event_date="2024-04-01", title="Offer",
        )))

        assert event.id in {e.id for e in run(alice.fetch_job_events(job.id))}
        assert run(alice.get_job(job.id)).status == JobStatus.APPLIED


class TestSearchFilter:

    def test_plain_term(self):
        assert search_filter("acme") == 'company.ilike."%acme%",position.ilike."%acme%"'

    def test_wildcards_escaped(self):
        assert search_filter("50%") == 'company.ilike."%50\\\\%%",position.ilike."%50\\\\%%"'

    def test_filter_syntax_characters_quoted(self, alice):
        run(alice.create_job(new_job('Smith, Jones (Partners)', "Counsel")))
        run(alice.create_job(new_job("Other", "Engineer")))

        page = run(alice.fetch_jobs(JobQuery(search="jones (part")))

        assert [job.company for job in page.jobs] == ["Smith, Jones (Partners)"]

    def test_double_quote_in_term(self, alice):
        run(alice.create_job(new_job('The "Best" Co')))

        page = run(alice.fetch_jobs(JobQuery(search='"best"')))

        assert page.pagination.total == 1


class TestFieldMapping:

    def test_job_mapping_is_lossless(self):
        payload = {"jobUrl": "https://x", "applicationDate": "2024-03-05", "isFavorite": True, "placeId": "p1"}

        row = to_storage(payload, JOB_FIELDS)

        assert row == {"job_url": "https://x", "application_date": "2024-03-05", "is_favorite": True, "place_id": "p1"}
        assert from_storage(row, JOB_FIELDS) == payload

    def test_event_mapping_covers_every_field(self):
        create_fields = {field.alias for field in JobEventCreate.model_fields.values()}
        assert set(JOB_EVENT_FIELDS) == create_fields | {"id", "createdAt", "updatedAt"}

    def test_storage_only_columns_dropped(self):
        assert from_storage({"id": 1, "user_id": "alice", "is_favorite": False}, JOB_FIELDS) == {
            "id": 1, "isFavorite": False,
        }

    def test_unknown_api_field_rejected(self):
        with pytest.raises(KeyError):
            to_storage({"salary": 100}, JOB_FIELDS)
