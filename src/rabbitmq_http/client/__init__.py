"""HTTP clients for the RabbitMQ management API.

Classes:
    :class:`Client` -- blocking client backed by :class:`httpx.Client`.
    :class:`AsyncClient` -- awaitable client backed by :class:`httpx.AsyncClient`.

Both expose the same operations, defined once in
:class:`~rabbitmq_http.client.operations.Operations`, and share request
construction (:mod:`~rabbitmq_http.client.request`) and response
interpretation (:mod:`~rabbitmq_http.client.response`).

Example::

    from rabbitmq_http.client import Client

    with Client("http://localhost:15672/api", "guest", "guest") as rc:
        print(rc.get_overview().rabbitmq_version)
"""

from rabbitmq_http.client.async_client import AsyncClient
from rabbitmq_http.client.operations import Call, Operations
from rabbitmq_http.client.request import Credentials, RequestBuilder, RequestSpec
from rabbitmq_http.client.sync_client import Client

__all__ = [
    "AsyncClient",
    "Call",
    "Client",
    "Credentials",
    "Operations",
    "RequestBuilder",
    "RequestSpec",
]
