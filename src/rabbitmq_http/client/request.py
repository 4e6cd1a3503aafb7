"""Transport-agnostic request construction.

:class:`RequestBuilder` turns an endpoint template, path parameters, query
parameters and an optional body into a :class:`RequestSpec`: a complete,
immutable description of one HTTP call that either façade can hand to its
:mod:`httpx` client.

Path parameters are percent-encoded one segment at a time with no safe
characters, so a name containing ``/`` stays a single segment and the
default virtual host ``/`` becomes ``%2F``::

    builder.build("PUT", "/queues/{vhost}/{name}", {"vhost": "/", "name": "orders/eu"})
    # -> path "/queues/%2F/orders%2Feu"
"""

from __future__ import annotations

import base64
import copy
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence, Union
from urllib.parse import quote

from rabbitmq_http import __version__
from rabbitmq_http.descriptors import ResourceDescriptor, placeholders
from rabbitmq_http.exceptions import BuildError, InvalidIdentityError
from rabbitmq_http.models.common import ArgumentsMap, WireModel, dumps_json
from rabbitmq_http.models.profile import DEFAULT_ENDPOINT, DEFAULT_USERNAME

JSON_CONTENT_TYPE = "application/json"
USER_AGENT = f"rabbitmq-http-client/{__version__}"

QueryValue = Union[str, int, float, bool, None]
Query = Union[Mapping[str, QueryValue], Iterable[tuple[str, QueryValue]], None]


@dataclass(frozen=True)
class Credentials:
    """HTTP basic auth credentials for the management API."""

    username: str = DEFAULT_USERNAME
    password: str = field(default="guest", repr=False)

    @property
    def authorization(self) -> str:
        """The ``Authorization`` header value."""
        raw = f"{self.username}:{self.password}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class RequestSpec:
    """One fully-resolved HTTP call.

    ``path`` is relative to the client's endpoint and already
    percent-encoded; ``query`` keeps the order parameters were supplied in,
    with ``None`` values dropped and each value rendered as text.
    """

    method: str
    path_template: str
    path_params: tuple[tuple[str, str], ...]
    path: str
    query: tuple[tuple[str, str], ...] = ()
    body: Optional[bytes] = None
    content_type: Optional[str] = None
    headers: tuple[tuple[str, str], ...] = field(default=(), repr=False)

    def query_string(self) -> str:
        return "&".join(
            f"{quote(key, safe='')}={quote(value, safe='')}" for key, value in self.query
        )

    def url_for(self, endpoint: str) -> str:
        """Join *endpoint*, the encoded path and the query string."""
        url = endpoint.rstrip("/") + self.path
        query = self.query_string()
        return f"{url}?{query}" if query else url

    def header_dict(self) -> dict[str, str]:
        return dict(self.headers)

    def __repr__(self) -> str:
        shown = [(k, "***" if k.lower() == "authorization" else v) for k, v in self.headers]
        return (
            f"RequestSpec(method={self.method!r}, path={self.path!r}, query={self.query!r}, "
            f"body={len(self.body) if self.body is not None else None} bytes, headers={shown!r})"
        )


def encode_segment(value: str) -> str:
    """Percent-encode *value* as exactly one path segment."""
    return quote(value, safe="")


def render_query_value(value: QueryValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def serialize_body(body: Any) -> bytes:
    """Serialize a request body to JSON bytes.

    Accepts a :class:`~rabbitmq_http.models.common.WireModel`, an
    :class:`~rabbitmq_http.models.common.ArgumentsMap`, or any plain JSON
    value. The value is copied before serialization, and key order is kept.
    """
    if isinstance(body, WireModel):
        payload = body.encode()
    elif isinstance(body, ArgumentsMap):
        payload = body.to_dict()
    else:
        payload = copy.deepcopy(body)
    try:
        return dumps_json(payload)
    except (TypeError, ValueError) as exc:
        raise BuildError(f"Request body is not JSON-serializable: {exc}") from exc


class RequestBuilder:
    """Builds :class:`RequestSpec` values for one endpoint and set of credentials.

    Args:
        endpoint: Base URL of the management API, e.g.
            ``http://localhost:15672/api``.
        credentials: Basic auth credentials injected into every request.
    """

    def __init__(self, endpoint: str = DEFAULT_ENDPOINT, credentials: Optional[Credentials] = None) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.credentials = credentials or Credentials()

    def build(
        self,
        method: str,
        template: str,
        path_params: Optional[Mapping[str, str]] = None,
        query: Query = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        required: Optional[Sequence[str]] = None,
    ) -> RequestSpec:
        """Resolve *template* and assemble a :class:`RequestSpec`.

        Args:
            method: HTTP method.
            template: Path template relative to the endpoint, with
                ``{placeholder}`` segments.
            path_params: Values for the placeholders.
            query: Query parameters, as a mapping or a sequence of pairs.
            body: Request body (see :func:`serialize_body`); ``None`` for none.
            headers: Extra headers, e.g. ``X-Reason``.
            required: Placeholders that must be non-empty. Defaults to all.

        Raises:
            InvalidIdentityError: A required placeholder value is empty.
            BuildError: A placeholder has no value, or a value is unused.
        """
        params = dict(path_params or {})
        names = placeholders(template)
        missing = [name for name in names if name not in params]
        if missing:
            raise BuildError(f"No value for path parameter(s) {', '.join(missing)} in {template}")
        unknown = [name for name in params if name not in names]
        if unknown:
            raise BuildError(f"Unknown path parameter(s) {', '.join(unknown)} for {template}")

        must_be_set = names if required is None else list(required)
        for name in must_be_set:
            if not isinstance(params.get(name), str) or not params[name]:
                raise InvalidIdentityError(name, template)

        ordered = tuple((name, str(params[name])) for name in names)
        path = template.format(**{name: encode_segment(value) for name, value in ordered})

        encoded_query = tuple(
            (key, render_query_value(value))
            for key, value in _query_pairs(query)
            if value is not None
        )

        payload = serialize_body(body) if body is not None else None
        merged_headers: dict[str, str] = {
            "Accept": JSON_CONTENT_TYPE,
            "User-Agent": USER_AGENT,
            "Authorization": self.credentials.authorization,
        }
        if payload is not None:
            merged_headers["Content-Type"] = JSON_CONTENT_TYPE
        merged_headers.update(headers or {})

        return RequestSpec(
            method=method.upper(),
            path_template=template,
            path_params=ordered,
            path=path,
            query=encoded_query,
            body=payload,
            content_type=JSON_CONTENT_TYPE if payload is not None else None,
            headers=tuple(merged_headers.items()),
        )

    def for_descriptor(
        self,
        method: str,
        descriptor: ResourceDescriptor,
        kind: str = "singleton",
        path_params: Optional[Mapping[str, str]] = None,
        **kwargs: Any,
    ) -> RequestSpec:
        """Build a request against one of *descriptor*'s templates.

        ``kind`` is ``"collection"``, ``"collection_in"``, ``"singleton"``
        or the name of one of the descriptor's actions.
        """
        if kind in ("collection", "collection_in", "singleton"):
            template = getattr(descriptor, kind)
        else:
            template = descriptor.actions.get(kind)
        if template is None:
            raise BuildError(f"{descriptor.name} has no {kind} endpoint")
        return self.build(method, template, path_params, **kwargs)

    def url_for(self, spec: RequestSpec) -> str:
        return spec.url_for(self.endpoint)


def _query_pairs(query: Query) -> Iterable[tuple[str, QueryValue]]:
    if query is None:
        return ()
    if isinstance(query, Mapping):
        return query.items()
    return query
