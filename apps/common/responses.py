"""JSON response envelope shared by every API endpoint.

Every body has the shape ``{status, code, message, data, meta}`` where
``status`` is a snake_case key (``ok``, ``processing``, ...) and ``code`` the
matching HTTP status. ``meta.timestamp`` is an ISO 8601 UTC timestamp.
"""

from __future__ import annotations

from datetime import date, datetime, timezone as dt_timezone
from typing import Any, Mapping

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler


STATUS_CODES: dict[str, int] = {
    "ok": status.HTTP_200_OK,
    "created": status.HTTP_201_CREATED,
    "processing": status.HTTP_202_ACCEPTED,
    "no_content": status.HTTP_204_NO_CONTENT,
    "not_modified": status.HTTP_304_NOT_MODIFIED,
    "bad_request": status.HTTP_400_BAD_REQUEST,
    "unauthorized": status.HTTP_401_UNAUTHORIZED,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "method_not_allowed": status.HTTP_405_METHOD_NOT_ALLOWED,
    "not_acceptable": status.HTTP_406_NOT_ACCEPTABLE,
    "conflict": status.HTTP_409_CONFLICT,
    "unsupported_media_type": status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    "cannot_process": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "too_many_requests": status.HTTP_429_TOO_MANY_REQUESTS,
    "internal_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "service_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
}
_STATUS_KEYS_BY_CODE = {code: key for key, code in STATUS_CODES.items()}

# 304 responses must not carry a body.
_BODYLESS_STATUSES = {"no_content", "not_modified"}


def envelope(
    status_key: str,
    message: str,
    data: Any = None,
    *,
    meta: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    if status_key not in STATUS_CODES:
        raise ValueError(f"Unknown response status: {status_key!r}")

    body: dict[str, Any] = {
        "status": status_key,
        "code": STATUS_CODES[status_key],
        "message": message,
    }
    if data is not None:
        body["data"] = serialize_data(data)
    body["meta"] = {"timestamp": _utc_timestamp(), **dict(meta or {})}
    return body


def envelope_response(
    status_key: str,
    message: str,
    data: Any = None,
    *,
    meta: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> Response:
    code = STATUS_CODES.get(status_key)
    if code is None:
        raise ValueError(f"Unknown response status: {status_key!r}")

    if status_key in _BODYLESS_STATUSES:
        return Response(status=code, headers=dict(headers or {}))
    return Response(
        envelope(status_key, message, data, meta=meta),
        status=code,
        headers=dict(headers or {}),
    )


def serialize_data(value: Any) -> Any:
    """Convert dates to ISO 8601 strings, recursively."""

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt_timezone.utc)
        return value.isoformat().replace("+00:00", "Z")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {key: serialize_data(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_data(item) for item in value]
    return value


def envelope_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """DRF exception handler that wraps error details into the envelope."""

    response = exception_handler(exc, context)
    if response is None:
        return None

    status_key = _STATUS_KEYS_BY_CODE.get(response.status_code, "internal_error")
    if isinstance(exc, ValidationError):
        message = _first_error_message(response.data) or "Invalid request"
        data: Any = {"errors": response.data}
    elif isinstance(exc, APIException):
        message = str(exc.detail)
        data = None
    else:
        message = "Request failed"
        data = None

    response.data = envelope(status_key, message, data)
    return response


def _first_error_message(detail: Any) -> str | None:
    if isinstance(detail, Mapping):
        for key, value in detail.items():
            message = _first_error_message(value)
            if message:
                return message if key == "non_field_errors" else f"{key}: {message}"
        return None
    if isinstance(detail, (list, tuple)):
        for item in detail:
            message = _first_error_message(item)
            if message:
                return message
        return None
    if detail is None:
        return None
    return str(detail)


def _utc_timestamp() -> str:
    return datetime.now(dt_timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
