from __future__ import annotations

import threading
from datetime import timedelta
from unittest.mock import patch

import pytest
from django.db import DatabaseError, connection
from django.utils import timezone

from apps.research.codec import pack_embedding
from apps.research.jobs import Completed, Failed, JobCoordinator, Processing, Queued, parse_concepts
from apps.research.models import JobStatus, ResearchInterestJob


def _completed_job(coordinator: JobCoordinator, term: str, **kwargs) -> str:
    job_id = coordinator.create(term)
    assert coordinator.try_claim(job_id)
    assert coordinator.mark_completed(job_id, kwargs.pop("vector_2d", (0.1, 0.2)), **kwargs)
    return job_id


@pytest.mark.django_db
def test_create_starts_queued_with_unique_ids() -> None:
    coordinator = JobCoordinator()

    first = coordinator.create("machine learning")
    second = coordinator.create("machine learning")

    assert first != second
    job = coordinator.find(first)
    assert job is not None
    assert isinstance(job.state, Queued)
    assert job.status == "queued"
    assert job.vector_2d is None


@pytest.mark.django_db
def test_find_returns_none_for_unknown_job() -> None:
    assert JobCoordinator().find("missing") is None


@pytest.mark.django_db
def test_exactly_one_claim_wins() -> None:
    coordinator = JobCoordinator()
    job_id = coordinator.create("graph learning")

    results = [JobCoordinator().try_claim(job_id) for _ in range(8)]

    assert results.count(True) == 1
    assert ResearchInterestJob.objects.get(job_id=job_id).status == JobStatus.PROCESSING


@pytest.mark.django_db(transaction=True)
def test_exactly_one_concurrent_claim_wins() -> None:
    job_id = JobCoordinator().create("graph learning")
    workers = 8
    barrier = threading.Barrier(workers)
    results: list[bool] = []
    errors: list[Exception] = []
    lock = threading.Lock()

    def claim() -> None:
        try:
            barrier.wait(timeout=10)
            won = JobCoordinator().try_claim(job_id)
            with lock:
                results.append(won)
        except Exception as exc:
            with lock:
                errors.append(exc)
        finally:
            connection.close()

    threads = [threading.Thread(target=claim) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert errors == []
    assert len(results) == workers
    assert results.count(True) == 1
    assert ResearchInterestJob.objects.get(job_id=job_id).status == JobStatus.PROCESSING


@pytest.mark.django_db
def test_claim_of_unknown_job_is_false() -> None:
    assert JobCoordinator().try_claim("does-not-exist") is False


@pytest.mark.django_db
def test_mark_completed_stores_vector_embedding_and_concepts() -> None:
    coordinator = JobCoordinator()
    job_id = _completed_job(
        coordinator,
        "robotics",
        vector_2d=(0.5, -0.25),
        embedding=[1.0, 0.0, 0.5],
        concepts=["robots", "control"],
    )

    row = ResearchInterestJob.objects.get(job_id=job_id)
    assert row.embedding_dim == 3
    assert bytes(row.embedding) == pack_embedding([1.0, 0.0, 0.5])

    job = coordinator.find(job_id)
    assert isinstance(job.state, Completed)
    assert job.vector_2d == (0.5, -0.25)
    assert job.embedding == (1.0, 0.0, 0.5)
    assert job.embedding_dim == 3
    assert job.concepts == ("robots", "control")


@pytest.mark.django_db
def test_mark_completed_requires_processing() -> None:
    coordinator = JobCoordinator()
    job_id = coordinator.create("optics")

    assert coordinator.mark_completed(job_id, (1.0, 1.0)) is False
    assert coordinator.find(job_id).status == "queued"


@pytest.mark.django_db
def test_terminal_states_are_never_altered() -> None:
    coordinator = JobCoordinator()
    completed_id = _completed_job(coordinator, "astronomy", vector_2d=(0.3, 0.4))
    failed_id = coordinator.create("chemistry")
    assert coordinator.try_claim(failed_id)
    assert coordinator.mark_failed(failed_id, "model offline")

    before = {
        row.job_id: (row.status, row.vector_x, row.vector_y, row.error_message, row.updated_at)
        for row in ResearchInterestJob.objects.all()
    }

    for job_id in (completed_id, failed_id):
        assert coordinator.try_claim(job_id) is False
        assert coordinator.mark_completed(job_id, (9.0, 9.0)) is False
        assert coordinator.mark_failed(job_id, "late failure") is False

    after = {
        row.job_id: (row.status, row.vector_x, row.vector_y, row.error_message, row.updated_at)
        for row in ResearchInterestJob.objects.all()
    }
    assert after == before
    assert isinstance(coordinator.find(failed_id).state, Failed)
    assert coordinator.find(failed_id).error_message == "model offline"


@pytest.mark.django_db
def test_processing_job_maps_to_processing_state() -> None:
    coordinator = JobCoordinator()
    job_id = coordinator.create("ecology")
    coordinator.try_claim(job_id)

    assert isinstance(coordinator.find(job_id).state, Processing)


@pytest.mark.django_db
def test_find_completed_by_term_is_case_insensitive_and_prefers_latest() -> None:
    coordinator = JobCoordinator()
    older = _completed_job(coordinator, "machine learning", vector_2d=(0.0, 0.0))
    newer = _completed_job(coordinator, "machine learning", vector_2d=(1.0, 1.0))
    ResearchInterestJob.objects.filter(job_id=older).update(
        updated_at=timezone.now() - timedelta(hours=1)
    )
    coordinator.create("machine learning")

    found = coordinator.find_completed_by_term("Machine Learning")

    assert found is not None
    assert found.job_id == newer


@pytest.mark.django_db
def test_find_completed_by_term_ignores_unfinished_jobs() -> None:
    coordinator = JobCoordinator()
    coordinator.create("genomics")

    assert coordinator.find_completed_by_term("genomics") is None
    assert coordinator.find_completed_by_term("") is None


@pytest.mark.django_db
def test_find_completed_by_term_treats_database_errors_as_miss() -> None:
    with patch(
        "apps.research.jobs.ResearchInterestJob.objects.filter",
        side_effect=DatabaseError("db down"),
    ):
        assert JobCoordinator().find_completed_by_term("genomics") is None


@pytest.mark.django_db
def test_unreadable_stored_embedding_is_treated_as_absent() -> None:
    coordinator = JobCoordinator()
    job_id = _completed_job(coordinator, "materials", embedding=[1.0, 2.0])
    ResearchInterestJob.objects.filter(job_id=job_id).update(embedding=b"\x00\x01\x02")

    job = coordinator.find(job_id)

    assert job.is_completed
    assert job.embedding is None


def test_parse_concepts_degrades_to_empty_list() -> None:
    assert parse_concepts('["a", "b"]') == ["a", "b"]
    assert parse_concepts("not json") == []
    assert parse_concepts('{"a": 1}') == []
    assert parse_concepts(None) == []


def test_completed_state_requires_two_dimensional_vector() -> None:
    with pytest.raises(ValueError):
        Completed(vector_2d=(1.0,))
