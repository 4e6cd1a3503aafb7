"""Tests for decoding representative management API documents."""

from __future__ import annotations

from rabbitmq_http.models import DefinitionSet, VirtualHostDefinitionSet
from rabbitmq_http.models.common import (
    BindingDestinationType,
    FederationLinkStatus,
    PolicyTarget,
    QueueType,
    SupportedProtocol,
    Unrecognized,
)
from rabbitmq_http.models.resources import (
    BindingInfo,
    Channel,
    ClusterAlarmCheckDetails,
    ClusterNode,
    Connection,
    Consumer,
    FederationLink,
    FederationUpstream,
    Overview,
    Policy,
    QuorumCriticalityCheckDetails,
    VirtualHostLimits,
)


class TestOverview:
    def test_listener_port_from_string(self) -> None:
        overview = Overview.decode(
            {
                "node": "rabbit@a",
                "rabbitmq_version": "3.13.7",
                "object_totals": {"queues": 4},
                "listeners": [
                    {"node": "rabbit@a", "protocol": "amqp", "port": "5672", "ip_address": "::"},
                    {"node": "rabbit@a", "protocol": "x-custom", "port": 1234},
                ],
            }
        )
        assert overview.object_totals.queues == 4
        assert overview.object_totals.connections == 0
        assert overview.listeners[0].port == 5672
        assert overview.listeners[0].protocol is SupportedProtocol.AMQP
        assert overview.listeners[0].interface == "::"
        assert overview.listeners[1].protocol == Unrecognized("x-custom")


class TestNodesAndConnections:
    def test_node_aliases(self) -> None:
        node = ClusterNode.decode(
            {"name": "rabbit@a", "os_pid": "4321", "mem_limit": 1000, "mem_alarm": True, "proc_total": 1048576}
        )
        assert node.os_pid == 4321
        assert node.memory_high_watermark == 1000
        assert node.has_memory_alarm_in_effect
        assert node.total_erlang_processes == 1048576

    def test_connection(self) -> None:
        connection = Connection.decode(
            {
                "name": "127.0.0.1:5000 -> 127.0.0.1:5672",
                "user": "guest",
                "channels": 2,
                "connected_at": 1700000000000,
                "client_properties": {
                    "connection_name": "billing",
                    "capabilities": {"basic.nack": True, "connection.blocked": True},
                },
            }
        )
        assert connection.username == "guest"
        assert connection.channel_count == 2
        assert connection.client_properties.connection_name == "billing"
        assert connection.client_properties.capabilities.basic_nack is True

    def test_channel_number(self) -> None:
        channel = Channel.decode({"number": 1, "name": "conn (1)", "confirm": True})
        assert channel.id == 1
        assert channel.has_publisher_confirms_enabled

    def test_consumer(self) -> None:
        consumer = Consumer.decode(
            {"consumer_tag": "amq.ctag-1", "queue": {"name": "orders", "vhost": "/"}, "ack_required": False}
        )
        assert consumer.queue.name == "orders"
        assert consumer.manual_ack is False


class TestTopology:
    def test_binding(self) -> None:
        binding = BindingInfo.decode(
            {
                "vhost": "/",
                "source": "events",
                "destination": "audit",
                "destination_type": "queue",
                "routing_key": "#",
                "arguments": {},
                "properties_key": "%23",
            }
        )
        assert binding.destination_type is BindingDestinationType.QUEUE
        assert binding.properties_key == "%23"

    def test_policy(self) -> None:
        policy = Policy.decode(
            {"name": "ha", "vhost": "/", "pattern": ".*", "apply-to": "queues", "priority": 1, "definition": {"max-length": 10}}
        )
        assert policy.apply_to is PolicyTarget.QUEUES
        assert policy.definition["max-length"] == 10
        assert policy.encode()["apply-to"] == "queues"

    def test_vhost_limits(self) -> None:
        limits = VirtualHostLimits.decode({"vhost": "events", "value": {"max-connections": 100}})
        assert limits.limits["max-connections"] == 100

    def test_federation(self) -> None:
        upstream = FederationUpstream.decode(
            {"name": "up", "vhost": "/", "component": "federation-upstream", "value": {"uri": "amqp://u", "ack-mode": "on-publish"}}
        )
        assert upstream.uri == "amqp://u"
        assert upstream.ack_mode.value == "on-publish"
        link = FederationLink.decode({"node": "rabbit@a", "vhost": "/", "upstream": "up", "status": "running"})
        assert link.status is FederationLinkStatus.RUNNING


class TestHealthCheckDetails:
    def test_alarms(self) -> None:
        details = ClusterAlarmCheckDetails.decode(
            {"status": "failed", "reason": "resource alarm(s) in effect", "alarms": [{"node": "rabbit@a", "resource": "memory"}]}
        )
        assert details.alarms[0].resource == "memory"

    def test_quorum_critical(self) -> None:
        details = QuorumCriticalityCheckDetails.decode(
            {"status": "failed", "reason": "critical", "queues": [{"name": "q", "virtual_host": "/", "type": "quorum"}]}
        )
        assert details.queues[0].vhost == "/"
        assert details.queues[0].queue_type is QueueType.QUORUM


class TestDefinitions:
    def test_cluster_definitions(self) -> None:
        definitions = DefinitionSet.decode(
            {
                "rabbitmq_version": "4.0.5",
                "users": [{"name": "guest", "password_hash": "h", "tags": ["administrator"]}],
                "vhosts": [{"name": "/"}],
                "queues": [{"name": "orders", "vhost": "/", "durable": True, "arguments": {"x-queue-type": "quorum"}}],
                "exchanges": [{"name": "events", "vhost": "/", "type": "topic"}],
                "bindings": [],
            }
        )
        assert definitions.server_version == "4.0.5"
        assert definitions.summary()["queues"] == 1
        assert definitions.summary()["policies"] == 0
        encoded = definitions.encode()
        assert encoded["rabbitmq_version"] == "4.0.5"
        assert encoded["queues"][0]["arguments"] == {"x-queue-type": "quorum"}

    def test_vhost_definitions_omit_vhost_keys(self) -> None:
        definitions = VirtualHostDefinitionSet.decode(
            {
                "parameters": [
                    {
                        "name": "upstream-a",
                        "component": "federation-upstream",
                        "value": {"uri": "amqp://upstream", "ack-mode": "on-confirm"},
                    }
                ],
                "queues": [{"name": "orders", "durable": True}],
                "exchanges": [],
                "bindings": [],
            }
        )
        assert definitions.queues[0].vhost is None
        assert [parameter.name for parameter in definitions.parameters] == ["upstream-a"]
        assert definitions.parameters[0].vhost is None
        assert definitions.parameters[0].value["uri"] == "amqp://upstream"
        assert definitions.unrecognized == {}
        assert b'"vhost"' not in definitions.to_json()
