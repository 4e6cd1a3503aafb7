"""Blocking client for the RabbitMQ HTTP management API.

:class:`Client` inherits its operations from
:class:`~rabbitmq_http.client.operations.Operations` and executes each
planned :class:`~rabbitmq_http.client.operations.Call` on an
:class:`httpx.Client`:

1. the request was already built (and validated) by the operation;
2. it is sent as-is -- no retries, no caching, no extra timeouts beyond
   the transport's own;
3. the response is handed to
   :func:`~rabbitmq_http.client.response.interpret`.

See Also:
    :class:`~rabbitmq_http.client.async_client.AsyncClient` for the
    awaitable equivalent with the same method names.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

import httpx

from rabbitmq_http.client.operations import Call, Operations
from rabbitmq_http.client.request import Credentials, RequestBuilder
from rabbitmq_http.client.response import describe_response, interpret
from rabbitmq_http.exceptions import NotFoundError, TransportError
from rabbitmq_http.models.paging import Page, PageRequest
from rabbitmq_http.models.profile import DEFAULT_ENDPOINT, ConnectionProfile
from rabbitmq_http.output import get_output


class Client(Operations):
    """Blocking management API client.

    Args:
        endpoint: Base URL of the management API.
        username: User to authenticate as (HTTP basic auth).
        password: That user's password.
        http_client: An :class:`httpx.Client` to send requests with. When
            omitted, one is created (and closed by :meth:`close`).
        timeout: Timeout in seconds for a client created here.
        verify_ssl: Verify TLS certificates for a client created here.

    Example::

        with Client("http://localhost:15672/api", "guest", "guest") as rc:
            rc.declare_queue("/", QueueParams.quorum("orders"))
            for queue in rc.list_queues("/"):
                print(queue.name, queue.message_count)
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        username: str = "guest",
        password: str = "guest",
        http_client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
        verify_ssl: bool = True,
    ) -> None:
        super().__init__(RequestBuilder(endpoint, Credentials(username, password)))
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout, verify=verify_ssl)

    @classmethod
    def from_profile(cls, profile: ConnectionProfile, password: str, **kwargs: Any) -> Client:
        """Create a client for a saved profile; *password* comes from its credential source."""
        kwargs.setdefault("timeout", profile.request.timeout)
        kwargs.setdefault("verify_ssl", profile.request.verify_ssl)
        return cls(profile.endpoint, profile.username, password, **kwargs)

    @property
    def endpoint(self) -> str:
        return self._builder.endpoint

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            self._http.close()

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def _run(self, call: Call) -> Any:
        spec = call.request
        url = self._builder.url_for(spec)
        output = get_output()
        output.debug(f"{spec.method} {url}")

        try:
            response = self._http.request(
                spec.method, url, headers=spec.header_dict(), content=spec.body
            )
        except httpx.RequestError as exc:
            raise TransportError(f"{spec.method} {url} failed: {exc}", method=spec.method, url=url) from exc

        output.debug(f"{describe_response(response)} from {spec.method} {spec.path}")
        try:
            return interpret(
                response.status_code,
                response.headers,
                response.content,
                decode=call.decode,
                failure_model=call.failure_model,
                method=spec.method,
                url=url,
            )
        except NotFoundError:
            if call.missing_ok:
                return None
            raise

    # ------------------------------------------------------------------ #
    # Paging
    # ------------------------------------------------------------------ #

    def iter_queue_pages(
        self,
        vhost: Optional[str] = None,
        page_size: int = 100,
        name: Optional[str] = None,
        use_regex: bool = False,
    ) -> Iterator[Page]:
        """Yield every page of queues, starting from the first.

        Each page is fetched only when the previous one has been consumed.
        """
        request = PageRequest(page_size=page_size, name=name, use_regex=use_regex)
        while True:
            page = self.list_queues_page(vhost, request)
            yield page
            if page.is_last:
                return
            request = request.next()
