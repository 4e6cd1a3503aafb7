"""Response interpretation: status classification, error bodies, tolerant decoding.

:func:`interpret` is the single place where an HTTP status, headers and raw
body become either a typed value or one exception from
:mod:`rabbitmq_http.exceptions`. Both façades call it with whatever their
:mod:`httpx` client returned, so blocking and async calls fail identically.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Callable, Mapping, Optional

import httpx
from pydantic import ValidationError

from rabbitmq_http.exceptions import (
    BadRequestError,
    BrokerError,
    ClientError,
    ConflictError,
    DecodeError,
    ForbiddenError,
    HealthCheckFailedError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
)
from rabbitmq_http.models.common import Resource, loads_json, render_json

Decoder = Callable[[Any], Any]

_STATUS_ERRORS: dict[int, type[BrokerError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


def interpret(
    status: int,
    headers: Mapping[str, str],
    body: bytes,
    *,
    decode: Optional[Decoder] = None,
    failure_model: Optional[type[Resource]] = None,
    method: Optional[str] = None,
    url: Optional[str] = None,
) -> Any:
    """Turn a raw HTTP response into a value or raise.

    Args:
        status: HTTP status code.
        headers: Response headers. Classification does not depend on them.
        body: Raw response body.
        decode: Converts the parsed JSON body into the result type. ``None``
            marks a no-content operation, which returns ``None`` on success.
        failure_model: For health checks, the model that a 503 body decodes
            into; such failures raise :class:`HealthCheckFailedError`.
        method: HTTP method, attached to errors.
        url: Request URL, attached to errors.

    Raises:
        BrokerError: A subclass matching *status*, for any non-2xx status.
        DecodeError: A 2xx body did not match the expected shape.
    """
    if 200 <= status < 300:
        if decode is None:
            return None
        return decode_body(body, decode)
    raise broker_error(status, body, failure_model=failure_model, method=method, url=url)


def decode_body(body: bytes, decode: Decoder) -> Any:
    """Parse *body* as JSON and run *decode* on it, mapping failures to :class:`DecodeError`."""
    if not body or not body.strip():
        raise DecodeError("Expected a JSON body but the response was empty", body=body)
    try:
        data = loads_json(body)
    except ValueError as exc:
        raise DecodeError(f"Response body is not valid JSON: {exc}", body=body) from exc
    try:
        return decode(data)
    except ValidationError as exc:
        errors = exc.errors(include_url=False)
        field = ".".join(str(part) for part in errors[0]["loc"]) if errors else None
        message = f"Response does not match {exc.title}"
        if field:
            message += f": field '{field}' {errors[0]['msg'].lower()}"
        raise DecodeError(message, field=field, errors=errors, body=body) from exc


def parse_error_body(body: bytes) -> tuple[Optional[str], Optional[dict[str, Any]]]:
    """Extract ``(reason, payload)`` from an error response body.

    The broker usually answers ``{"error": "...", "reason": "..."}``, but
    some failures come with plain text or nothing at all.
    """
    if not body or not body.strip():
        return None, None
    try:
        data = loads_json(body)
    except ValueError:
        text = body.decode("utf-8", errors="replace").strip()
        return (text[:200] or None), None
    if not isinstance(data, dict):
        return None, None
    reason = data.get("reason") or data.get("error")
    if reason is not None and not isinstance(reason, str):
        reason = render_json(reason)
    return reason, data


def status_phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Unknown Status"


def broker_error(
    status: int,
    body: bytes,
    *,
    failure_model: Optional[type[Resource]] = None,
    method: Optional[str] = None,
    url: Optional[str] = None,
) -> BrokerError:
    """Build the :class:`BrokerError` subclass for a non-2xx response."""
    reason, payload = parse_error_body(body)
    reason = reason or status_phrase(status)
    context = {"payload": payload, "method": method, "url": url, "body": body}

    if status == 503 and failure_model is not None:
        details = None
        if payload is not None:
            try:
                details = failure_model.decode(payload)
            except ValidationError:
                details = None
        return HealthCheckFailedError(status, details=details, reason=reason, **context)

    error_cls = _STATUS_ERRORS.get(status)
    if error_cls is None:
        error_cls = ServerError if status >= 500 else ClientError
    return error_cls(status, reason=reason, **context)


def describe_response(response: httpx.Response) -> str:
    """Render the status line of *response* for diagnostics, e.g. ``HTTP 204 No Content``."""
    elapsed = ""
    try:
        elapsed = f" ({response.elapsed.total_seconds() * 1000:.0f} ms)"
    except RuntimeError:
        # elapsed is only set once the response has been read
        pass
    return f"HTTP {response.status_code} {response.reason_phrase or status_phrase(response.status_code)}{elapsed}"
