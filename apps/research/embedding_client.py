"""HTTP client for the external research-interest embedding service."""

from __future__ import annotations

import json
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from django.conf import settings

logger = logging.getLogger(__name__)


class EmbeddingServiceError(Exception):
    """Raised when the embedding service fails or returns an unusable payload."""


@dataclass(frozen=True)
class EmbeddingResult:
    vector_2d: tuple[float, float]
    embedding: list[float] | None = None
    concepts: list[str] = field(default_factory=list)


class EmbeddingServiceClient:
    """Posts a term to the embedding service; one bounded attempt per call."""

    def __init__(
        self,
        *,
        endpoint: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._endpoint = normalize_endpoint(endpoint or settings.EMBED_SERVICE_URL)
        self._timeout_seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else settings.EMBED_SERVICE_TIMEOUT_SECONDS
        )
        if self._timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be greater than 0.")

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def embed(self, term: str, *, request_id: str) -> EmbeddingResult:
        body = json.dumps({"term": term, "request_id": request_id}).encode("utf-8")
        request = Request(
            url=self._endpoint,
            data=body,
            method="POST",
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": "paper-radar/0.1",
                "X-Request-Id": request_id,
            },
        )

        started = time.monotonic()
        try:
            with urlopen(request, timeout=self._timeout_seconds) as response:
                raw_body = response.read().decode("utf-8")
        except HTTPError as exc:
            raise EmbeddingServiceError(
                f"Embedding service HTTP error {exc.code}: {exc.reason}"
            ) from exc
        except (URLError, TimeoutError, OSError) as exc:
            raise EmbeddingServiceError(f"Embedding service request failed: {exc}") from exc

        logger.debug(
            "Embedding service answered request_id=%s in %.1fms",
            request_id,
            (time.monotonic() - started) * 1000,
        )

        try:
            payload = json.loads(raw_body)
        except json.JSONDecodeError as exc:
            raise EmbeddingServiceError("Embedding service returned invalid JSON.") from exc
        if not isinstance(payload, dict):
            raise EmbeddingServiceError("Embedding service returned non-object JSON payload.")

        return parse_embedding_response(payload)


def normalize_endpoint(raw: str) -> str:
    value = (raw or "").strip() or "http://localhost:8001/embed"
    if value.endswith("/embed"):
        return value
    return f"{value.rstrip('/')}/embed"


def parse_embedding_response(payload: Mapping[str, Any]) -> EmbeddingResult:
    vector_2d = _coerce_vector_2d(payload.get("vector_2d"))
    if vector_2d is None:
        raise EmbeddingServiceError("Invalid vector_2d")

    return EmbeddingResult(
        vector_2d=vector_2d,
        embedding=_coerce_embedding(payload.get("embedding")),
        concepts=_coerce_concepts(payload.get("concepts")),
    )


def _coerce_vector_2d(raw: Any) -> tuple[float, float] | None:
    if isinstance(raw, Mapping):
        values = [raw.get("x"), raw.get("y")]
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        values = list(raw)
    else:
        return None

    coerced = [_as_finite_float(value) for value in values]
    if coerced[0] is None or coerced[1] is None:
        return None
    return (coerced[0], coerced[1])


def _coerce_embedding(raw: Any) -> list[float] | None:
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)):
        raise EmbeddingServiceError("Invalid embedding: expected a flat list of numbers.")
    if not raw:
        return None

    values: list[float] = []
    for item in raw:
        value = _as_finite_float(item)
        if value is None:
            raise EmbeddingServiceError("Invalid embedding: expected a flat list of numbers.")
        values.append(value)
    return values


def _coerce_concepts(raw: Any) -> list[str]:
    if not isinstance(raw, (list, tuple)):
        return []
    concepts: list[str] = []
    for item in raw:
        if isinstance(item, str) and item.strip():
            concepts.append(item.strip())
    return concepts


def _as_finite_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
