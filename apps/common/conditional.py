"""Content fingerprints and ETag negotiation for polling endpoints."""

from __future__ import annotations

import hashlib
from datetime import datetime
from typing import Iterable

from django.http import HttpRequest
from django.utils.http import parse_etags, quote_etag
from rest_framework.response import Response


def fingerprint(parts: Iterable[object]) -> str:
    source = "|".join(str(part) for part in parts)
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def job_fingerprint(
    *,
    job_id: str,
    status: str,
    updated_at: datetime | None,
    vector_x: float | None,
    vector_y: float | None,
    embedding_dim: int | None,
) -> str:
    """Tag for the job status body; missing numbers count as ``0``."""

    updated_seconds = int(updated_at.timestamp()) if updated_at is not None else 0
    return fingerprint(
        (
            job_id,
            status,
            updated_seconds,
            _number(vector_x),
            _number(vector_y),
            int(embedding_dim or 0),
        )
    )


def papers_fingerprint(*, journals: Iterable[str], page: int, request_id: str | None) -> str:
    return fingerprint((",".join(sorted(journals)), page, request_id or ""))


def etag_matches(request: HttpRequest, tag: str) -> bool:
    header = request.headers.get("If-None-Match")
    if not header:
        return False

    candidates = parse_etags(header)
    if "*" in candidates:
        return True
    return quote_etag(tag) in {_strip_weak(candidate) for candidate in candidates}


def apply_cache_headers(response: Response, tag: str, *, max_age: int) -> Response:
    response["ETag"] = quote_etag(tag)
    response["Cache-Control"] = f"private, max-age={max_age}"
    response["Vary"] = "Cookie"
    return response


def _number(value: float | None) -> float:
    return float(value) if value is not None else 0.0


def _strip_weak(candidate: str) -> str:
    return candidate[2:] if candidate.startswith("W/") else candidate
