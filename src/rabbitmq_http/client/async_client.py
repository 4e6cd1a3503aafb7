"""Asynchronous client -- the same operations as :class:`~rabbitmq_http.client.sync_client.Client`, awaitable.

Every operation method returns an awaitable that builds nothing new: the
request was planned synchronously (so a
:class:`~rabbitmq_http.exceptions.BuildError` surfaces at call time) and
only the send suspends. Cancellation while awaiting is left to the
caller's event loop; no state survives an interrupted call.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Optional

import httpx

from rabbitmq_http.client.operations import Call, Operations
from rabbitmq_http.client.request import Credentials, RequestBuilder
from rabbitmq_http.client.response import describe_response, interpret
from rabbitmq_http.exceptions import NotFoundError, TransportError
from rabbitmq_http.models.paging import Page, PageRequest
from rabbitmq_http.models.profile import DEFAULT_ENDPOINT, ConnectionProfile
from rabbitmq_http.output import get_output


class AsyncClient(Operations):
    """Non-blocking management API client backed by :class:`httpx.AsyncClient`.

    Takes the same arguments as :class:`~rabbitmq_http.client.sync_client.Client`.

    Example::

        async with AsyncClient("http://localhost:15672/api", "guest", "guest") as rc:
            overview = await rc.get_overview()
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        username: str = "guest",
        password: str = "guest",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        verify_ssl: bool = True,
    ) -> None:
        super().__init__(RequestBuilder(endpoint, Credentials(username, password)))
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout, verify=verify_ssl)

    @classmethod
    def from_profile(cls, profile: ConnectionProfile, password: str, **kwargs: Any) -> AsyncClient:
        kwargs.setdefault("timeout", profile.request.timeout)
        kwargs.setdefault("verify_ssl", profile.request.verify_ssl)
        return cls(profile.endpoint, profile.username, password, **kwargs)

    @property
    def endpoint(self) -> str:
        return self._builder.endpoint

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def _run(self, call: Call) -> Any:
        return self._execute(call)

    async def _execute(self, call: Call) -> Any:
        spec = call.request
        url = self._builder.url_for(spec)
        output = get_output()
        output.debug(f"{spec.method} {url}")

        try:
            response = await self._http.request(
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

    async def iter_queue_pages(
        self,
        vhost: Optional[str] = None,
        page_size: int = 100,
        name: Optional[str] = None,
        use_regex: bool = False,
    ) -> AsyncIterator[Page]:
        """Yield every page of queues, fetching each one on demand."""
        request = PageRequest(page_size=page_size, name=name, use_regex=use_regex)
        while True:
            page = await self.list_queues_page(vhost, request)
            yield page
            if page.is_last:
                return
            request = request.next()
