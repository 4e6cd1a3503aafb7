"""Tests for response interpretation: status classification, error bodies, decoding."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest

from rabbitmq_http.client.operations import many, one
from rabbitmq_http.client.response import broker_error, interpret, parse_error_body, status_phrase
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
from rabbitmq_http.models.resources import ClusterAlarmCheckDetails, QueueInfo


def _body(data: object) -> bytes:
    return json.dumps(data).encode()


class TestSuccess:
    def test_no_content_operation_returns_none(self) -> None:
        assert interpret(204, {}, b"") is None
        assert interpret(201, {}, b'{"ignored": true}') is None

    def test_decodes_resource(self) -> None:
        body = _body({"name": "q", "vhost": "/", "durable": True, "auto_delete": False, "messages": 3})
        queue = interpret(200, {}, body, decode=one(QueueInfo))
        assert isinstance(queue, QueueInfo)
        assert queue.message_count == 3

    def test_decodes_list(self) -> None:
        body = _body([{"name": "a", "vhost": "/", "durable": True, "auto_delete": False}])
        assert [q.name for q in interpret(200, {}, body, decode=many(QueueInfo))] == ["a"]

    def test_empty_body_where_resource_expected(self) -> None:
        with pytest.raises(DecodeError):
            interpret(200, {}, b"", decode=one(QueueInfo))

    def test_invalid_json(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            interpret(200, {}, b"<html>oops</html>", decode=one(QueueInfo))
        assert exc_info.value.body == b"<html>oops</html>"

    def test_arguments_keep_received_digits(self) -> None:
        body = (
            b'{"name": "q", "vhost": "/", "durable": true, "auto_delete": false, '
            b'"arguments": {"x-ratio": 0.10000000000000000555, "x-big": 1.0e400, "x-exact": 1.50, "x-max-length": 1000}}'
        )
        queue = interpret(200, {}, body, decode=one(QueueInfo))
        assert queue.arguments["x-ratio"] == Decimal("0.10000000000000000555")
        assert queue.arguments["x-max-length"] == 1000
        assert queue.arguments.to_json() == (
            b'{"x-ratio":0.10000000000000000555,"x-big":1.0E+400,"x-exact":1.50,"x-max-length":1000}'
        )

    @pytest.mark.parametrize("constant", [b"NaN", b"Infinity", b"-Infinity"])
    def test_non_finite_constants_are_rejected(self, constant: bytes) -> None:
        body = b'{"name": "q", "vhost": "/", "durable": true, "auto_delete": false, "arguments": {"x": ' + constant + b"}}"
        with pytest.raises(DecodeError, match="not valid JSON"):
            interpret(200, {}, body, decode=one(QueueInfo))

    def test_missing_required_field_names_it(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            interpret(200, {}, _body({"name": "q", "durable": True, "auto_delete": False}), decode=one(QueueInfo))
        assert exc_info.value.field == "vhost"
        assert exc_info.value.errors


class TestErrors:
    @pytest.mark.parametrize(
        ("status", "error_cls"),
        [
            (400, BadRequestError),
            (401, UnauthorizedError),
            (403, ForbiddenError),
            (404, NotFoundError),
            (409, ConflictError),
            (405, ClientError),
            (500, ServerError),
            (503, ServerError),
        ],
    )
    def test_status_classification(self, status: int, error_cls: type) -> None:
        with pytest.raises(error_cls) as exc_info:
            interpret(status, {}, b"")
        assert exc_info.value.status_code == status
        assert isinstance(exc_info.value, BrokerError)

    def test_not_found_reason(self) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            interpret(404, {}, _body({"error": "Object Not Found", "reason": "Not Found"}), method="GET", url="http://x/api/queues/%2F/ghost")
        error = exc_info.value
        assert error.reason == "Not Found"
        assert error.error == "Object Not Found"
        assert error.url == "http://x/api/queues/%2F/ghost"
        assert error.method == "GET"

    def test_conflict_keeps_reason(self) -> None:
        reason = "inequivalent arg 'durable' for queue 'q' in vhost '/': received 'false' but current is 'true'"
        with pytest.raises(ConflictError) as exc_info:
            interpret(409, {}, _body({"error": "bad_request", "reason": reason}))
        assert exc_info.value.reason == reason
        assert reason in str(exc_info.value)

    def test_plain_text_error_body(self) -> None:
        reason, payload = parse_error_body(b"Internal Server Error\n")
        assert reason == "Internal Server Error"
        assert payload is None

    def test_empty_error_body_uses_status_phrase(self) -> None:
        error = broker_error(502, b"")
        assert error.reason == status_phrase(502) == "Bad Gateway"

    def test_non_json_body_is_kept_whole(self) -> None:
        body = b"x" * 1000
        reason, _ = parse_error_body(body)
        assert len(reason) == 200
        error = broker_error(500, body)
        assert error.reason == reason
        assert error.body == body
        assert error.text == "x" * 1000

    def test_json_error_body_is_kept(self) -> None:
        body = _body({"error": "bad_request", "reason": "inequivalent arg 'durable'"})
        error = broker_error(400, body)
        assert error.body == body
        assert error.payload == {"error": "bad_request", "reason": "inequivalent arg 'durable'"}

    def test_health_check_failure(self) -> None:
        body = _body({"status": "failed", "reason": "resource alarm(s) in effect", "alarms": [{"node": "rabbit@a", "resource": "disk"}]})
        with pytest.raises(HealthCheckFailedError) as exc_info:
            interpret(503, {}, body, decode=one(QueueInfo), failure_model=ClusterAlarmCheckDetails)
        details = exc_info.value.details
        assert isinstance(details, ClusterAlarmCheckDetails)
        assert details.alarms[0].resource == "disk"
        assert exc_info.value.reason == "resource alarm(s) in effect"

    def test_health_check_failure_with_undecodable_body(self) -> None:
        with pytest.raises(HealthCheckFailedError) as exc_info:
            interpret(503, {}, b"Service Unavailable", failure_model=ClusterAlarmCheckDetails)
        assert exc_info.value.details is None
        assert exc_info.value.reason == "Service Unavailable"
