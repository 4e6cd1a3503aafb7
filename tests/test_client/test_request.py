"""Tests for request construction: path encoding, query rendering, headers, bodies."""

from __future__ import annotations

import base64
from decimal import Decimal
from urllib.parse import unquote

import pytest

from rabbitmq_http.client.request import (
    USER_AGENT,
    Credentials,
    RequestBuilder,
    encode_segment,
    render_query_value,
    serialize_body,
)
from rabbitmq_http.descriptors import QUEUE
from rabbitmq_http.exceptions import BuildError, InvalidIdentityError
from rabbitmq_http.models import ArgumentsMap, QueueParams


@pytest.fixture
def builder() -> RequestBuilder:
    return RequestBuilder("http://localhost:15672/api/", Credentials("guest", "guest"))


class TestPathEncoding:
    def test_default_vhost_and_slash_in_name(self, builder: RequestBuilder) -> None:
        spec = builder.build("PUT", QUEUE.singleton, {"vhost": "/", "name": "orders/eu"})
        assert spec.path == "/queues/%2F/orders%2Feu"
        assert builder.url_for(spec) == "http://localhost:15672/api/queues/%2F/orders%2Feu"

    @pytest.mark.parametrize("name", ["orders/eu", "with space", "zażółć", "a?b#c", "100%", "~tilde"])
    def test_segment_round_trips(self, name: str) -> None:
        encoded = encode_segment(name)
        assert "/" not in encoded
        assert unquote(encoded) == name

    def test_path_params_recorded_in_order(self, builder: RequestBuilder) -> None:
        spec = builder.build("GET", QUEUE.singleton, {"name": "q", "vhost": "v"})
        assert spec.path_params == (("vhost", "v"), ("name", "q"))
        assert spec.path_template == "/queues/{vhost}/{name}"

    def test_empty_name_is_rejected(self, builder: RequestBuilder) -> None:
        with pytest.raises(InvalidIdentityError) as exc_info:
            builder.build("GET", QUEUE.singleton, {"vhost": "/", "name": ""})
        assert exc_info.value.parameter == "name"

    def test_none_value_is_rejected(self, builder: RequestBuilder) -> None:
        with pytest.raises(InvalidIdentityError):
            builder.build("GET", QUEUE.singleton, {"vhost": None, "name": "q"})  # type: ignore[dict-item]

    def test_missing_placeholder(self, builder: RequestBuilder) -> None:
        with pytest.raises(BuildError, match="name"):
            builder.build("GET", QUEUE.singleton, {"vhost": "/"})

    def test_unknown_placeholder(self, builder: RequestBuilder) -> None:
        with pytest.raises(BuildError, match="bogus"):
            builder.build("GET", "/overview", {"bogus": "x"})

    def test_for_descriptor_action(self, builder: RequestBuilder) -> None:
        spec = builder.for_descriptor("DELETE", QUEUE, "purge", {"vhost": "/", "name": "q"})
        assert spec.path == "/queues/%2F/q/contents"

    def test_for_descriptor_missing_endpoint(self, builder: RequestBuilder) -> None:
        from rabbitmq_http.descriptors import OVERVIEW

        with pytest.raises(BuildError):
            builder.for_descriptor("GET", OVERVIEW, "collection")

    def test_for_descriptor_unknown_action(self, builder: RequestBuilder) -> None:
        with pytest.raises(BuildError, match="queue has no restart endpoint"):
            builder.for_descriptor("DELETE", QUEUE, "restart", {"vhost": "/", "name": "q"})


class TestQuery:
    def test_order_kept_and_none_dropped(self, builder: RequestBuilder) -> None:
        spec = builder.build(
            "DELETE", QUEUE.singleton, {"vhost": "/", "name": "q"},
            query=[("if-empty", True), ("if-unused", None), ("page", 2)],
        )
        assert spec.query == (("if-empty", "true"), ("page", "2"))
        assert builder.url_for(spec).endswith("/queues/%2F/q?if-empty=true&page=2")

    def test_values_are_percent_encoded(self, builder: RequestBuilder) -> None:
        spec = builder.build("GET", "/queues", query={"name": "^orders/.*"})
        assert spec.query_string() == "name=%5Eorders%2F.%2A"

    def test_render_query_value(self) -> None:
        assert render_query_value(False) == "false"
        assert render_query_value(500) == "500"


class TestHeadersAndBody:
    def test_default_headers(self, builder: RequestBuilder) -> None:
        headers = builder.build("GET", "/overview").header_dict()
        assert headers["Accept"] == "application/json"
        assert headers["User-Agent"] == USER_AGENT
        assert headers["Authorization"] == "Basic " + base64.b64encode(b"guest:guest").decode()
        assert "Content-Type" not in headers

    def test_body_sets_content_type(self, builder: RequestBuilder) -> None:
        spec = builder.build(
            "PUT", QUEUE.singleton, {"vhost": "/", "name": "q"}, body=QueueParams.quorum("q", {"x-max-length": 5})
        )
        assert spec.content_type == "application/json"
        assert spec.header_dict()["Content-Type"] == "application/json"
        assert spec.body == (
            b'{"durable":true,"auto_delete":false,"exclusive":false,'
            b'"arguments":{"x-queue-type":"quorum","x-max-length":5}}'
        )

    def test_extra_headers(self, builder: RequestBuilder) -> None:
        spec = builder.build("DELETE", "/connections/{name}", {"name": "c"}, headers={"X-Reason": "maintenance"})
        assert spec.header_dict()["X-Reason"] == "maintenance"

    def test_credentials_are_masked(self, builder: RequestBuilder) -> None:
        spec = builder.build("GET", "/overview")
        assert "Basic" not in repr(spec)
        assert "s3kr3t" not in repr(Credentials("admin", "s3kr3t"))

    def test_serialize_body(self) -> None:
        assert serialize_body(ArgumentsMap({"b": 1, "a": 2})) == b'{"b":1,"a":2}'
        assert serialize_body({"name": "zażółć"}) == '{"name":"zażółć"}'.encode("utf-8")
        with pytest.raises(BuildError):
            serialize_body({"bad": object()})

    def test_serialize_body_keeps_decimal_digits(self) -> None:
        body = {"x-ratio": Decimal("0.10000000000000000555"), "x-big": Decimal("1.0E+400"), "x-exact": Decimal("1.50")}
        assert serialize_body(body) == b'{"x-ratio":0.10000000000000000555,"x-big":1.0E+400,"x-exact":1.50}'

    @pytest.mark.parametrize("number", [float("inf"), float("nan"), Decimal("Infinity"), Decimal("NaN")])
    def test_non_finite_numbers_are_rejected(self, number: object) -> None:
        with pytest.raises(BuildError, match="not JSON-serializable"):
            serialize_body({"x-ratio": number})
