"""Shared test fixtures for rabbitmq_http.

Provides an in-memory fake management API served through
:class:`httpx.MockTransport`, isolated config directories, and global
output state management. These fixtures are discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Optional
from urllib.parse import unquote

import httpx
import pytest

from rabbitmq_http.output import OutputFormat, OutputManager, reset_output, set_output

ENDPOINT = "http://rabbit.test:15672/api"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Install a quiet manager before each test and forget it afterwards.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which go stale once Typer's CliRunner restores them.
    """
    set_output(OutputManager(no_color=True, quiet=True))
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fake broker
# ---------------------------------------------------------------------------


def queue_document(vhost: str, name: str, **overrides: Any) -> dict[str, Any]:
    """A queue as the management API lists it."""
    document: dict[str, Any] = {
        "name": name,
        "vhost": vhost,
        "type": "classic",
        "durable": True,
        "auto_delete": False,
        "exclusive": False,
        "arguments": {},
        "node": "rabbit@node1",
        "state": "running",
        "consumers": 0,
        "messages": 0,
        "messages_ready": 0,
        "messages_unacknowledged": 0,
    }
    document.update(overrides)
    return document


def _json(data: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=data)


def _not_found() -> httpx.Response:
    return _json({"error": "Object Not Found", "reason": "Not Found"}, 404)


class FakeBroker:
    """A tiny stateful stand-in for the management API.

    Understands enough of the API for the client and CLI tests: the
    overview, virtual hosts, queues (with paging), exchanges, definitions
    and the alarm health checks. Every request is recorded in
    :attr:`requests`.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.vhosts: dict[str, dict[str, Any]] = {"/": {"name": "/", "description": "Default virtual host", "tags": []}}
        self.queues: dict[tuple[str, str], dict[str, Any]] = {}
        self.alarms: list[dict[str, str]] = []
        self.imported: list[Any] = []

    # -- helpers ---------------------------------------------------------

    def add_queue(self, vhost: str, name: str, **overrides: Any) -> None:
        self.queues[(vhost, name)] = queue_document(vhost, name, **overrides)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=self.transport())

    def async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))

    @staticmethod
    def segments(request: httpx.Request) -> list[str]:
        """Decoded path segments after ``/api``."""
        raw = request.url.raw_path.decode("ascii").split("?", 1)[0]
        parts = [unquote(part) for part in raw.split("/")[1:]]
        assert parts[0] == "api", raw
        return parts[1:]

    # -- dispatch --------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not request.headers.get("authorization", "").startswith("Basic "):
            return _json({"error": "not_authorized", "reason": "Login failed"}, 401)

        parts = self.segments(request)
        method = request.method
        head = parts[0] if parts else ""

        if head == "overview" and method == "GET":
            return _json(self.overview())
        if head == "vhosts":
            return self.handle_vhosts(method, parts[1:], request)
        if head == "queues":
            return self.handle_queues(method, parts[1:], request)
        if head == "exchanges" and method == "GET":
            return _json(self.exchanges(parts[1] if len(parts) > 1 else None))
        if head == "definitions":
            return self.handle_definitions(method, request)
        if head == "health" and parts[1:3] in (["checks", "alarms"], ["checks", "local-alarms"]):
            if self.alarms:
                return _json({"status": "failed", "reason": "resource alarm(s) in effect", "alarms": self.alarms}, 503)
            return _json({"status": "ok"})
        return _not_found()

    def overview(self) -> dict[str, Any]:
        return {
            "node": "rabbit@node1",
            "cluster_name": "rabbit@test",
            "rabbitmq_version": "4.0.5",
            "erlang_version": "27.2",
            "object_totals": {
                "connections": 3,
                "channels": 5,
                "queues": len(self.queues),
                "exchanges": 7,
                "consumers": 2,
            },
            "queue_totals": {"messages": 12, "messages_ready": 10, "messages_unacknowledged": 2},
            "listeners": [
                {"node": "rabbit@node1", "protocol": "amqp", "port": 5672, "ip_address": "::"},
            ],
        }

    def handle_vhosts(self, method: str, rest: list[str], request: httpx.Request) -> httpx.Response:
        if not rest:
            return _json(list(self.vhosts.values()))
        name = rest[0]
        if method == "GET":
            return _json(self.vhosts[name]) if name in self.vhosts else _not_found()
        if method == "PUT":
            body = json.loads(request.content or b"{}")
            status = 204 if name in self.vhosts else 201
            self.vhosts[name] = {"name": name, **body}
            return httpx.Response(status)
        if method == "DELETE":
            if self.vhosts.pop(name, None) is None:
                return _not_found()
            return httpx.Response(204)
        return _json({"error": "bad_request", "reason": "method not allowed"}, 405)

    def handle_queues(self, method: str, rest: list[str], request: httpx.Request) -> httpx.Response:
        if len(rest) <= 1 and method == "GET":
            items = [q for (vhost, _), q in sorted(self.queues.items()) if not rest or vhost == rest[0]]
            if "page" in request.url.params:
                return _json(self.page_of(items, request.url.params))
            return _json(items)

        vhost, name = rest[0], rest[1]
        key = (vhost, name)
        if len(rest) == 3 and rest[2] == "contents" and method == "DELETE":
            if key not in self.queues:
                return _not_found()
            self.queues[key]["messages"] = 0
            self.queues[key]["messages_ready"] = 0
            return httpx.Response(204)
        if method == "GET":
            return _json(self.queues[key]) if key in self.queues else _not_found()
        if method == "PUT":
            body = json.loads(request.content)
            arguments = body.get("arguments", {})
            existing = self.queues.get(key)
            if existing is not None and existing["durable"] != body.get("durable", True):
                return _json(
                    {
                        "error": "bad_request",
                        "reason": f"inequivalent arg 'durable' for queue '{name}' in vhost '{vhost}'",
                    },
                    409,
                )
            self.add_queue(
                vhost,
                name,
                type=arguments.get("x-queue-type", "classic"),
                durable=body.get("durable", True),
                auto_delete=body.get("auto_delete", False),
                arguments=arguments,
            )
            return httpx.Response(201 if existing is None else 204)
        if method == "DELETE":
            queue = self.queues.get(key)
            if queue is None:
                return _not_found()
            if request.url.params.get("if-empty") == "true" and queue["messages"]:
                return _json({"error": "bad_request", "reason": f"queue '{name}' is not empty"}, 400)
            del self.queues[key]
            return httpx.Response(204)
        return _not_found()

    @staticmethod
    def page_of(items: list[dict[str, Any]], params: httpx.QueryParams) -> dict[str, Any]:
        name: Optional[str] = params.get("name")
        total = len(items)
        if name:
            items = [item for item in items if name in item["name"]]
        page = int(params["page"])
        page_size = int(params.get("page_size", "100"))
        start = (page - 1) * page_size
        chunk = items[start:start + page_size]
        return {
            "items": chunk,
            "page": page,
            "page_count": max(1, math.ceil(len(items) / page_size)),
            "page_size": page_size,
            "item_count": len(chunk),
            "filtered_count": len(items),
            "total_count": total,
        }

    def exchanges(self, vhost: Optional[str]) -> list[dict[str, Any]]:
        names = [("", "direct"), ("amq.direct", "direct"), ("amq.fanout", "fanout"), ("amq.topic", "topic")]
        vhosts = [vhost] if vhost else list(self.vhosts)
        return [
            {
                "name": name,
                "vhost": v,
                "type": kind,
                "durable": True,
                "auto_delete": False,
                "internal": False,
                "arguments": {},
            }
            for v in vhosts
            for name, kind in names
        ]

    def handle_definitions(self, method: str, request: httpx.Request) -> httpx.Response:
        if method == "POST":
            self.imported.append(json.loads(request.content))
            return httpx.Response(204)
        return _json(
            {
                "rabbitmq_version": "4.0.5",
                "users": [{"name": "guest", "password_hash": "abc", "hashing_algorithm": "rabbit_password_hashing_sha256", "tags": ["administrator"]}],
                "vhosts": list(self.vhosts.values()),
                "permissions": [],
                "topic_permissions": [],
                "parameters": [],
                "global_parameters": [],
                "policies": [],
                "queues": [
                    {"name": q["name"], "vhost": q["vhost"], "durable": q["durable"], "auto_delete": False, "arguments": q["arguments"]}
                    for q in self.queues.values()
                ],
                "exchanges": [],
                "bindings": [],
            }
        )


@pytest.fixture
def broker() -> FakeBroker:
    return FakeBroker()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears the
    RABBITMQ_HTTP_* environment variables and changes the working
    directory to tmp_path.
    """
    monkeypatch.setattr("rabbitmq_http.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ("RABBITMQ_HTTP_PROFILE", "RABBITMQ_HTTP_ENDPOINT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()
