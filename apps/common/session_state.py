from __future__ import annotations

from django.http import HttpRequest

SESSION_REQUEST_ID_KEY = "research_interest_request_id"
SESSION_TERM_KEY = "research_interest_term"
SESSION_VECTOR_2D_KEY = "research_interest_2d"
SESSION_EMBEDDING_KEY = "research_interest_embedding_b64"


def get_session_request_id(request: HttpRequest) -> str | None:
    return _session_string(request, SESSION_REQUEST_ID_KEY)


def get_session_term(request: HttpRequest) -> str | None:
    return _session_string(request, SESSION_TERM_KEY)


def get_session_embedding_b64(request: HttpRequest) -> str | None:
    return _session_string(request, SESSION_EMBEDDING_KEY)


def get_session_vector_2d(request: HttpRequest) -> list[float] | None:
    raw = request.session.get(SESSION_VECTOR_2D_KEY)
    if not isinstance(raw, list) or len(raw) != 2:
        return None
    try:
        return [float(raw[0]), float(raw[1])]
    except (TypeError, ValueError):
        return None


def remember_pending_interest(request: HttpRequest, *, request_id: str, term: str) -> None:
    request.session[SESSION_REQUEST_ID_KEY] = request_id
    request.session[SESSION_TERM_KEY] = term
    request.session.pop(SESSION_VECTOR_2D_KEY, None)
    request.session.pop(SESSION_EMBEDDING_KEY, None)


def remember_completed_interest(
    request: HttpRequest,
    *,
    request_id: str,
    term: str,
    vector_2d: tuple[float, float],
    embedding_b64: str | None,
) -> None:
    request.session[SESSION_REQUEST_ID_KEY] = request_id
    request.session[SESSION_TERM_KEY] = term
    request.session[SESSION_VECTOR_2D_KEY] = [float(vector_2d[0]), float(vector_2d[1])]
    if embedding_b64:
        request.session[SESSION_EMBEDDING_KEY] = embedding_b64
    else:
        request.session.pop(SESSION_EMBEDDING_KEY, None)


def _session_string(request: HttpRequest, key: str) -> str | None:
    raw = request.session.get(key)
    if not isinstance(raw, str):
        return None
    value = raw.strip()
    return value or None
