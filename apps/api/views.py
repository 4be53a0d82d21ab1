from __future__ import annotations

import logging
from typing import Any

from django.conf import settings
from django.urls import reverse
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.serializers import (
    ListPapersQueryParamsSerializer,
    PaperSerializer,
    ResearchInterestSubmitSerializer,
)
from apps.common.conditional import (
    apply_cache_headers,
    etag_matches,
    job_fingerprint,
    papers_fingerprint,
)
from apps.common.responses import envelope_response
from apps.common.session_state import (
    get_session_embedding_b64,
    get_session_request_id,
    get_session_term,
    get_session_vector_2d,
    remember_completed_interest,
    remember_pending_interest,
)
from apps.documents.journals import JournalTaxonomyError, load_journal_taxonomy
from apps.documents.services import ListPapersService, PaperListingError
from apps.research.codec import EmbeddingCodecError, decode_embedding_b64, encode_embedding_b64
from apps.research.jobs import EmbeddingJob, JobCoordinator
from apps.research.queue import QueuePublishError
from apps.research.services import ResearchInterestSubmissionService, SubmissionResult
from apps.research.terms import TermValidationError

logger = logging.getLogger(__name__)


def status_url(job_id: str) -> str:
    return reverse("research-interest-status", kwargs={"job_id": job_id})


def _vector_2d(job: EmbeddingJob) -> list[float] | None:
    if job.vector_2d is None:
        return None
    return [float(job.vector_2d[0]), float(job.vector_2d[1])]


def _remember_completed(request: Request, job: EmbeddingJob) -> None:
    embedding_b64 = encode_embedding_b64(job.embedding) if job.embedding else None
    remember_completed_interest(
        request,
        request_id=job.job_id,
        term=job.term,
        vector_2d=job.vector_2d,
        embedding_b64=embedding_b64,
    )


class _PublicAPIView(APIView):
    authentication_classes: list = []
    permission_classes: list = []


class ApiRootView(_PublicAPIView):
    def get(self, request: Request) -> Response:
        return envelope_response(
            "ok",
            "Paper Radar API v1 is up. See /api/v1/papers to get started.",
        )


class _ResearchInterestSubmitView(_PublicAPIView):
    def _submit(self, request: Request) -> SubmissionResult | Response:
        serializer = ResearchInterestSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            return ResearchInterestSubmissionService().submit(serializer.validated_data["term"])
        except TermValidationError as exc:
            return envelope_response(
                "bad_request",
                exc.message,
                {"error_code": exc.code, "error": exc.message},
            )
        except QueuePublishError:
            logger.exception("Failed to queue embedding job.")
            return envelope_response("internal_error", "Failed to queue embedding job")


class ResearchInterestView(_ResearchInterestSubmitView):
    def post(self, request: Request) -> Response:
        result = self._submit(request)
        if isinstance(result, Response):
            return result

        job = result.job
        if job.is_completed:
            _remember_completed(request, job)
            return envelope_response(
                "ok",
                "Research interest already embedded",
                {
                    "cached": True,
                    "status": job.status,
                    "request_id": job.job_id,
                    "term": job.term,
                    "concepts": list(job.concepts),
                    "vector_2d": _vector_2d(job),
                    "status_url": status_url(job.job_id),
                    "percent": 100,
                },
            )

        remember_pending_interest(request, request_id=job.job_id, term=job.term)
        logger.debug("Research interest queued job_id=%s term=%r", job.job_id, job.term)
        return envelope_response(
            "processing",
            "Research interest processing started",
            {
                "status": job.status,
                "request_id": job.job_id,
                "status_url": status_url(job.job_id),
                "percent": 1,
            },
        )


class ResearchInterestAsyncView(_ResearchInterestSubmitView):
    def post(self, request: Request) -> Response:
        result = self._submit(request)
        if isinstance(result, Response):
            return result

        job = result.job
        if job.is_completed:
            _remember_completed(request, job)
            return envelope_response(
                "ok",
                "Research interest already embedded",
                {
                    "cached": True,
                    "status": job.status,
                    "request_id": job.job_id,
                    "term": job.term,
                    "vector_2d": _vector_2d(job),
                    "status_url": status_url(job.job_id),
                },
            )

        remember_pending_interest(request, request_id=job.job_id, term=job.term)
        return envelope_response(
            "processing",
            "Job queued",
            {"job_id": job.job_id, "term": job.term, "status_url": status_url(job.job_id)},
        )


class ResearchInterestStatusView(_PublicAPIView):
    def get(self, request: Request, job_id: str) -> Response:
        job = JobCoordinator().find(job_id)
        if job is None:
            return envelope_response("not_found", "Job not found")

        vector = job.vector_2d
        tag = job_fingerprint(
            job_id=job.job_id,
            status=job.status,
            updated_at=job.updated_at,
            vector_x=vector[0] if vector else None,
            vector_y=vector[1] if vector else None,
            embedding_dim=job.embedding_dim,
        )
        max_age = settings.JOB_STATUS_CACHE_MAX_AGE
        if etag_matches(request, tag):
            return apply_cache_headers(
                envelope_response("not_modified", "Not Modified"),
                tag,
                max_age=max_age,
            )

        logger.debug("Research interest status job_id=%s status=%s", job.job_id, job.status)
        if job.is_completed:
            _remember_completed(request, job)
            response = envelope_response(
                "ok",
                "Job completed",
                {
                    "status": job.status,
                    "job_id": job.job_id,
                    "term": job.term,
                    "vector_2d": _vector_2d(job),
                    "concepts": list(job.concepts),
                },
            )
        elif job.error_message is not None:
            response = envelope_response(
                "internal_error",
                "Job failed",
                {"status": job.status, "job_id": job.job_id, "error": job.error_message},
            )
        else:
            response = envelope_response(
                "processing",
                "Job processing",
                {"status": job.status, "job_id": job.job_id},
            )
        return apply_cache_headers(response, tag, max_age=max_age)


class PapersView(_PublicAPIView):
    def get(self, request: Request) -> Response:
        serializer = ListPapersQueryParamsSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        request_id = params["request_id"] or get_session_request_id(request)
        job = JobCoordinator().find(request_id) if request_id else None

        if request_id and (job is None or not job.is_completed):
            return envelope_response(
                "processing",
                "Research interest still processing",
                {
                    "status": job.status if job is not None else "queued",
                    "request_id": request_id,
                    "status_url": status_url(request_id),
                },
            )

        query_embedding = self._query_embedding(request, job)
        if params["top_n"] is not None and query_embedding is None:
            return envelope_response(
                "bad_request",
                "top_n requires an embedded research interest (request_id)",
            )

        journals = params["journals"]
        tag = papers_fingerprint(journals=journals, page=params["page"], request_id=request_id)
        max_age = settings.PAPERS_CACHE_MAX_AGE
        if etag_matches(request, tag):
            return apply_cache_headers(
                envelope_response("not_modified", "Not Modified"),
                tag,
                max_age=max_age,
            )

        try:
            result = ListPapersService().list(
                journals=journals,
                page=params["page"],
                query_embedding=query_embedding,
                top_n=params["top_n"],
                min_date=params.get("min_date"),
                max_date=params.get("max_date"),
            )
        except PaperListingError:
            return envelope_response("internal_error", "Failed to list papers")

        if job is not None:
            term, vector_2d = job.term, _vector_2d(job)
        else:
            term, vector_2d = get_session_term(request), get_session_vector_2d(request)
        data: dict[str, Any] = {
            "research_interest_term": term,
            "research_interest_2d": vector_2d,
            "journals": journals,
            "papers": {
                "data": PaperSerializer(result.papers, many=True).data,
                "pagination": result.pagination.as_dict(),
            },
        }
        response = envelope_response("ok", "Papers retrieved successfully", data)
        return apply_cache_headers(response, tag, max_age=max_age)

    @staticmethod
    def _query_embedding(request: Request, job: EmbeddingJob | None) -> list[float] | None:
        if job is None:
            return None
        if job.embedding:
            return list(job.embedding)

        encoded = get_session_embedding_b64(request)
        if not encoded:
            return None
        try:
            return decode_embedding_b64(encoded) or None
        except EmbeddingCodecError:
            logger.error("Could not decode session embedding for request_id=%s", job.job_id)
            return None


class JournalsView(_PublicAPIView):
    def get(self, request: Request) -> Response:
        try:
            domains = load_journal_taxonomy(settings.JOURNALS_TAXONOMY_PATH)
        except JournalTaxonomyError:
            logger.exception("Journal taxonomy could not be loaded.")
            return envelope_response("internal_error", "Failed to load journals")
        return envelope_response("ok", "Journals retrieved successfully", {"domains": domains})
