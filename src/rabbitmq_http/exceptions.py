"""Exception hierarchy for rabbitmq_http.

All exceptions inherit from :class:`RabbitMQHttpError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`rabbitmq_http.exit_codes`.
Every fallible client operation either succeeds or raises exactly one of
the four kinds below; the CLI entry point in :func:`rabbitmq_http.app.main`
catches ``RabbitMQHttpError`` and exits with the matching code.

Subclass hierarchy::

    RabbitMQHttpError (exit 1)
    +-- BuildError                  (exit 2)
    |   +-- InvalidIdentityError
    +-- TransportError              (exit 6)
    +-- DecodeError                 (exit 7)
    +-- BrokerError                 (exit 5)
    |   +-- NotFoundError           (exit 4)
    |   +-- AuthError               (exit 3)
    |   |   +-- UnauthorizedError
    |   |   +-- ForbiddenError
    |   +-- ConflictError
    |   +-- ClientError
    |   |   +-- BadRequestError
    |   +-- ServerError
    |       +-- HealthCheckFailedError
    +-- ConfigError                 (exit 1)

``BrokerError`` subclasses are the steady-state vocabulary of a management
API and are meant to be caught for control flow::

    try:
        client.get_queue_info("/", "orders")
    except NotFoundError:
        client.declare_queue("/", QueueParams.quorum("orders"))
"""

from __future__ import annotations

from typing import Any, Optional

from rabbitmq_http.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_BROKER_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
)


class RabbitMQHttpError(Exception):
    """Base exception for all rabbitmq_http errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`rabbitmq_http.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class BuildError(RabbitMQHttpError):
    """Raised when a request cannot be constructed from caller input.

    Never caused by a network condition; the request was not sent.
    """

    exit_code = EXIT_INVALID_USAGE


class InvalidIdentityError(BuildError):
    """Raised when a vhost or resource name is empty where one is required.

    Args:
        parameter: Name of the offending path parameter (e.g. ``"vhost"``).
        template: The path template the parameter was meant for.
    """

    def __init__(self, parameter: str, template: str):
        super().__init__(f"'{parameter}' must be a non-empty name for {template}")
        self.parameter = parameter
        self.template = template


class TransportError(RabbitMQHttpError):
    """Raised when the HTTP transport could not complete the request or read the response.

    Any :class:`httpx.RequestError` maps here, including redirect loops and
    bodies whose ``Content-Encoding`` cannot be decoded.

    The original :mod:`httpx` exception is available as ``__cause__``; no
    interpretation of its specifics is attempted.
    """

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(self, message: str, method: Optional[str] = None, url: Optional[str] = None):
        super().__init__(message)
        self.method = method
        self.url = url


class DecodeError(RabbitMQHttpError):
    """Raised when a 2xx response body does not match the expected shape.

    Indicates a mismatch between the resource model and the broker version.

    Args:
        message: Summary of the failure.
        field: Dotted path of the first offending field, when known.
        errors: The raw validation error list, when decoding got that far.
        body: The raw response body.
    """

    exit_code = EXIT_DECODE_ERROR

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        errors: Optional[list[dict[str, Any]]] = None,
        body: bytes = b"",
    ):
        super().__init__(message)
        self.field = field
        self.errors = errors or []
        self.body = body


class BrokerError(RabbitMQHttpError):
    """The broker understood the request and reported a failure.

    Args:
        status_code: HTTP status returned by the broker.
        reason: Broker-supplied reason, or the HTTP reason phrase when the
            body carried none. Plain-text reasons are shortened for display.
        payload: The decoded JSON error object, if the body was one.
        method: HTTP method of the failed request.
        url: URL of the failed request.
        body: The raw, untruncated response body.
    """

    exit_code = EXIT_BROKER_ERROR

    def __init__(
        self,
        status_code: int,
        reason: Optional[str] = None,
        payload: Optional[dict[str, Any]] = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
        body: bytes = b"",
    ):
        prefix = f"HTTP {status_code}"
        super().__init__(f"{prefix}: {reason}" if reason else prefix)
        self.status_code = status_code
        self.reason = reason
        self.payload = payload
        self.method = method
        self.url = url
        self.body = body

    @property
    def text(self) -> str:
        """The full response body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")

    @property
    def error(self) -> Optional[str]:
        """The short ``error`` token from the broker's JSON body, if any."""
        if self.payload is None:
            return None
        value = self.payload.get("error")
        return value if isinstance(value, str) else None


class NotFoundError(BrokerError):
    """Raised when the broker returns HTTP 404 (resource does not exist)."""

    exit_code = EXIT_NOT_FOUND


class AuthError(BrokerError):
    """Raised when authentication or authorisation fails."""

    exit_code = EXIT_AUTH_FAILURE


class UnauthorizedError(AuthError):
    """HTTP 401: the credentials were rejected."""


class ForbiddenError(AuthError):
    """HTTP 403: the user is authenticated but lacks the required tag or permission."""


class ConflictError(BrokerError):
    """HTTP 409: the resource exists with a different, incompatible definition."""


class ClientError(BrokerError):
    """Any other HTTP 4xx the broker returned."""


class BadRequestError(ClientError):
    """HTTP 400: the broker rejected the request body or arguments."""


class ServerError(BrokerError):
    """HTTP 5xx: the broker failed to process the request."""


class HealthCheckFailedError(ServerError):
    """A health check endpoint reported a failed status (HTTP 503).

    Args:
        details: Decoded failure details (alarms in effect, endangered
            queues), or ``None`` if the body could not be decoded.
    """

    def __init__(self, status_code: int, details: Any = None, **kwargs: Any):
        fallback = kwargs.pop("reason", None)
        super().__init__(status_code, reason=getattr(details, "reason", None) or fallback, **kwargs)
        self.details = details


class ConfigError(RabbitMQHttpError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
