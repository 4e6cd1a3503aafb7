"""Typed representations of the resources returned by the management API.

Every class here extends :class:`~rabbitmq_http.models.common.Resource`, so
optional fields decode tolerantly and unknown keys survive a
decode/encode round trip. Field names follow Python conventions; where the
wire name differs it is declared as the field's alias.

Required fields are limited to the identity of a resource (name, vhost,
and the handful of attributes every broker version always reports);
statistics are optional because they depend on the stats collection mode
and on how recently the object was created.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import Field

from rabbitmq_http.models.common import (
    AckMode,
    ArgumentsMap,
    BindingDestinationTypeField,
    ExchangeTypeField,
    FederationLinkStatusField,
    FederationTypeField,
    JsonData,
    NumberFromString,
    PolicyTargetField,
    QueueType,
    QueueTypeField,
    Resource,
    ShovelStateField,
    ShovelTypeField,
    SupportedProtocolField,
    TagList,
    Timestamp,
    Unrecognized,
    UserTagList,
    parse_enum,
)


# --- Virtual hosts and limits ---


class VirtualHostMetadata(Resource):
    tags: TagList = Field(default_factory=list)
    description: Optional[str] = None
    default_queue_type: Optional[QueueTypeField] = None


class VirtualHost(Resource):
    """A `virtual host <https://rabbitmq.com/docs/vhosts>`_."""

    name: str
    description: Optional[str] = None
    tags: TagList = Field(default_factory=list)
    default_queue_type: Optional[QueueTypeField] = None
    tracing: bool = False
    metadata: Optional[VirtualHostMetadata] = None
    messages: Optional[int] = None
    messages_ready: Optional[int] = None
    messages_unacknowledged: Optional[int] = None


class VirtualHostLimits(Resource):
    vhost: str
    limits: ArgumentsMap = Field(default_factory=ArgumentsMap, alias="value")


class UserLimits(Resource):
    username: str = Field(alias="user")
    limits: ArgumentsMap = Field(default_factory=ArgumentsMap, alias="value")


# --- Users and permissions ---


class User(Resource):
    name: str
    tags: UserTagList = Field(default_factory=list)
    password_hash: Optional[str] = None
    hashing_algorithm: Optional[str] = None
    limits: Optional[ArgumentsMap] = None


class CurrentUser(Resource):
    """The user the client authenticated as (``GET /api/whoami``)."""

    name: str
    tags: UserTagList = Field(default_factory=list)


class Permissions(Resource):
    """A user's configure/write/read permission patterns in one virtual host."""

    user: str
    vhost: str
    configure: str
    write: str
    read: str


class TopicPermissions(Resource):
    user: str
    vhost: str
    exchange: str
    write: str
    read: str


# --- Queues, exchanges, bindings ---


class QueueInfo(Resource):
    """A queue or stream as reported by the queue listing endpoints."""

    name: str
    vhost: str
    queue_type: Optional[QueueTypeField] = Field(default=None, alias="type")
    durable: bool
    auto_delete: bool
    exclusive: bool = False
    arguments: ArgumentsMap = Field(default_factory=ArgumentsMap)

    node: Optional[str] = None
    state: Optional[str] = None
    # only quorum queues and streams report these
    leader: Optional[str] = None
    members: Optional[list[str]] = None
    online: Optional[list[str]] = None

    policy: Optional[str] = None
    operator_policy: Optional[str] = None
    effective_policy_definition: Optional[ArgumentsMap] = None
    exclusive_consumer_tag: Optional[str] = None
    idle_since: Optional[str] = None

    memory: Optional[int] = None
    consumer_count: int = Field(default=0, alias="consumers")
    consumer_utilisation: Optional[float] = None

    message_bytes: int = 0
    message_bytes_persistent: int = 0
    message_bytes_ram: int = 0
    message_bytes_ready: int = 0
    message_bytes_unacknowledged: int = 0
    message_count: int = Field(default=0, alias="messages")
    ready_message_count: int = Field(default=0, alias="messages_ready")
    unacknowledged_message_count: int = Field(default=0, alias="messages_unacknowledged")
    on_disk_message_count: int = Field(default=0, alias="messages_persistent")
    in_memory_message_count: int = Field(default=0, alias="messages_ram")

    @property
    def declared_type(self) -> Union[QueueType, Unrecognized, None]:
        """Queue type as reported, or as declared via ``x-queue-type``."""
        return self.queue_type or self.arguments.queue_type


class ExchangeInfo(Resource):
    name: str
    vhost: str
    exchange_type: ExchangeTypeField = Field(alias="type")
    durable: bool
    auto_delete: bool
    internal: bool = False
    arguments: ArgumentsMap = Field(default_factory=ArgumentsMap)
    policy: Optional[str] = None
    user_who_performed_action: Optional[str] = None


class BindingInfo(Resource):
    """A binding between an exchange and a queue or another exchange."""

    vhost: str
    source: str
    destination: str
    destination_type: BindingDestinationTypeField
    routing_key: str
    arguments: ArgumentsMap = Field(default_factory=ArgumentsMap)
    properties_key: Optional[str] = None


# --- Policies and parameters ---


class Policy(Resource):
    """A policy or operator policy."""

    name: str
    vhost: str
    pattern: str
    apply_to: PolicyTargetField = Field(alias="apply-to")
    priority: int = 0
    definition: ArgumentsMap = Field(default_factory=ArgumentsMap)


class OperatorPolicy(Policy):
    """A policy set by operators that caps what regular policies may configure."""


class RuntimeParameter(Resource):
    """A `runtime parameter <https://rabbitmq.com/docs/parameters>`_ of some component."""

    name: str
    vhost: str
    component: str
    value: ArgumentsMap = Field(default_factory=ArgumentsMap)


class FederationUpstream(RuntimeParameter):
    """A runtime parameter of the ``federation-upstream`` component."""

    @property
    def uri(self) -> Union[str, list[str], None]:
        return self.value.get("uri")

    @property
    def ack_mode(self) -> Union[AckMode, Unrecognized, None]:
        value = self.value.get("ack-mode")
        return parse_enum(AckMode, value) if isinstance(value, str) else None


class GlobalParameter(Resource):
    """A cluster-wide parameter such as ``cluster_name``."""

    name: str
    value: JsonData = None


class ClusterIdentity(Resource):
    name: str


# --- Nodes ---


class ClusterNode(Resource):
    name: str
    node_type: Optional[str] = Field(default=None, alias="type")
    running: bool = False
    being_drained: bool = False
    uptime: Optional[int] = None
    run_queue: Optional[int] = None
    processors: Optional[int] = None
    os_pid: Optional[NumberFromString] = None
    fd_total: Optional[int] = None
    fd_used: Optional[int] = None
    sockets_total: Optional[int] = None
    sockets_used: Optional[int] = None
    total_erlang_processes: Optional[int] = Field(default=None, alias="proc_total")
    used_erlang_processes: Optional[int] = Field(default=None, alias="proc_used")
    memory_high_watermark: Optional[int] = Field(default=None, alias="mem_limit")
    memory_used: Optional[int] = Field(default=None, alias="mem_used")
    has_memory_alarm_in_effect: bool = Field(default=False, alias="mem_alarm")
    free_disk_space_low_watermark: Optional[int] = Field(default=None, alias="disk_free_limit")
    free_disk_space: Optional[int] = Field(default=None, alias="disk_free")
    has_free_disk_space_alarm_in_effect: bool = Field(default=False, alias="disk_free_alarm")
    rates_mode: Optional[str] = None
    partitions: list[str] = Field(default_factory=list)
    enabled_plugins: list[str] = Field(default_factory=list)


# --- Connections, channels, consumers ---


class ClientCapabilities(Resource):
    authentication_failure_close: Optional[bool] = None
    basic_nack: Optional[bool] = Field(default=None, alias="basic.nack")
    connection_blocked: Optional[bool] = Field(default=None, alias="connection.blocked")
    consumer_cancel_notify: Optional[bool] = None
    exchange_to_exchange_bindings: Optional[bool] = Field(
        default=None, alias="exchange_exchange_bindings"
    )
    publisher_confirms: Optional[bool] = None


class ClientProperties(Resource):
    connection_name: Optional[str] = None
    platform: Optional[str] = None
    product: Optional[str] = None
    version: Optional[str] = None
    capabilities: Optional[ClientCapabilities] = None


class Connection(Resource):
    """A client connection. Its ``name`` is what :meth:`close_connection` takes."""

    name: str
    node: Optional[str] = None
    vhost: Optional[str] = None
    state: Optional[str] = None
    protocol: Optional[str] = None
    username: Optional[str] = Field(default=None, alias="user")
    connected_at: Optional[Timestamp] = None
    server_hostname: Optional[str] = Field(default=None, alias="host")
    server_port: Optional[int] = Field(default=None, alias="port")
    client_hostname: Optional[str] = Field(default=None, alias="peer_host")
    client_port: Optional[int] = Field(default=None, alias="peer_port")
    channel_max: Optional[int] = None
    channel_count: int = Field(default=0, alias="channels")
    ssl: bool = False
    recv_oct: Optional[int] = None
    send_oct: Optional[int] = None
    client_properties: ClientProperties = Field(default_factory=ClientProperties)


class StreamConnection(Connection):
    """A RabbitMQ Stream protocol connection (``/api/stream/connections``)."""


class UserConnection(Resource):
    name: str
    node: Optional[str] = None
    username: Optional[str] = Field(default=None, alias="user")
    vhost: Optional[str] = None


class ConnectionDetails(Resource):
    name: str
    client_hostname: Optional[str] = Field(default=None, alias="peer_host")
    client_port: Optional[int] = Field(default=None, alias="peer_port")


class Channel(Resource):
    id: int = Field(alias="number")
    name: str
    vhost: Optional[str] = None
    node: Optional[str] = None
    state: Optional[str] = None
    username: Optional[str] = Field(default=None, alias="user")
    connection_details: Optional[ConnectionDetails] = None
    consumer_count: int = 0
    has_publisher_confirms_enabled: bool = Field(default=False, alias="confirm")
    transactional: bool = False
    prefetch_count: int = 0
    global_prefetch_count: int = 0
    messages_unacknowledged: int = 0
    messages_unconfirmed: int = 0
    messages_uncommitted: int = 0


class ChannelDetails(Resource):
    id: Optional[int] = Field(default=None, alias="number")
    name: Optional[str] = None
    connection_name: Optional[str] = None
    node: Optional[str] = None
    client_hostname: Optional[str] = Field(default=None, alias="peer_host")
    client_port: Optional[int] = Field(default=None, alias="peer_port")
    username: Optional[str] = Field(default=None, alias="user")


class NameAndVirtualHost(Resource):
    name: str
    vhost: str


class Consumer(Resource):
    consumer_tag: str
    queue: NameAndVirtualHost
    active: bool = True
    activity_status: Optional[str] = None
    manual_ack: bool = Field(default=True, alias="ack_required")
    prefetch_count: int = 0
    exclusive: bool = False
    arguments: ArgumentsMap = Field(default_factory=ArgumentsMap)
    delivery_ack_timeout: Optional[int] = Field(default=None, alias="consumer_timeout")
    channel_details: Optional[ChannelDetails] = None


# --- Shovels and federation ---


class Shovel(Resource):
    """Status of a dynamic or static shovel."""

    name: str
    vhost: Optional[str] = None
    node: Optional[str] = None
    shovel_type: Optional[ShovelTypeField] = Field(default=None, alias="type")
    state: Optional[ShovelStateField] = None
    reason: Optional[str] = None
    timestamp: Optional[str] = None
    source_uri: Optional[str] = Field(default=None, alias="src_uri")
    source_protocol: Optional[str] = Field(default=None, alias="src_protocol")
    source_queue: Optional[str] = Field(default=None, alias="src_queue")
    source_exchange: Optional[str] = Field(default=None, alias="src_exchange")
    source_exchange_key: Optional[str] = Field(default=None, alias="src_exchange_key")
    destination_uri: Optional[str] = Field(default=None, alias="dest_uri")
    destination_protocol: Optional[str] = Field(default=None, alias="dest_protocol")
    destination_queue: Optional[str] = Field(default=None, alias="dest_queue")
    destination_exchange: Optional[str] = Field(default=None, alias="dest_exchange")
    destination_exchange_key: Optional[str] = Field(default=None, alias="dest_exchange_key")


class FederationLink(Resource):
    """A running (or failed) federation link."""

    id: Optional[str] = None
    node: str
    vhost: str
    upstream: str
    link_type: Optional[FederationTypeField] = Field(default=None, alias="type")
    status: Optional[FederationLinkStatusField] = None
    exchange: Optional[str] = None
    upstream_exchange: Optional[str] = None
    queue: Optional[str] = None
    upstream_queue: Optional[str] = None
    uri: Optional[str] = None
    local_connection: Optional[str] = None
    error: Optional[str] = None
    timestamp: Optional[str] = None


# --- Overview ---


class ChurnRates(Resource):
    connection_created: int = 0
    connection_closed: int = 0
    queue_declared: int = 0
    queue_created: int = 0
    queue_deleted: int = 0
    channel_created: int = 0
    channel_closed: int = 0


class ObjectTotals(Resource):
    connections: int = 0
    channels: int = 0
    queues: int = 0
    exchanges: int = 0
    consumers: int = 0


class QueueTotals(Resource):
    messages: int = 0
    messages_ready: int = 0
    messages_unacknowledged: int = 0


class MessageStats(Resource):
    publish: Optional[int] = None
    deliver_get: Optional[int] = None
    ack: Optional[int] = None
    confirm: Optional[int] = None
    redeliver: Optional[int] = None
    return_unroutable: Optional[int] = None
    drop_unroutable: Optional[int] = None


class Listener(Resource):
    node: str
    protocol: SupportedProtocolField
    port: NumberFromString
    interface: Optional[str] = Field(default=None, alias="ip_address")


class Overview(Resource):
    node: str
    rabbitmq_version: str
    cluster_name: Optional[str] = None
    erlang_version: Optional[str] = None
    erlang_full_version: Optional[str] = None
    product_name: Optional[str] = None
    product_version: Optional[str] = None
    management_version: Optional[str] = None
    rates_mode: Optional[str] = None
    # absent before 4.0
    cluster_tags: Optional[ArgumentsMap] = None
    node_tags: Optional[ArgumentsMap] = None
    statistics_db_event_queue: Optional[int] = None
    churn_rates: Optional[ChurnRates] = None
    object_totals: ObjectTotals = Field(default_factory=ObjectTotals)
    queue_totals: Optional[QueueTotals] = None
    message_stats: Optional[MessageStats] = None
    listeners: list[Listener] = Field(default_factory=list)


# --- Messages ---


class GetMessage(Resource):
    """A message fetched with the queue ``get`` action."""

    payload: str
    payload_bytes: int = 0
    payload_encoding: str = "string"
    redelivered: bool = False
    exchange: str = ""
    routing_key: str = ""
    message_count: int = 0
    properties: ArgumentsMap = Field(default_factory=ArgumentsMap)


class MessageRouted(Resource):
    routed: bool


# --- Health checks ---


class HealthCheckStatus(Resource):
    status: str


class HealthCheckFailure(Resource):
    status: str = "failed"
    reason: Optional[str] = None


class ResourceAlarm(Resource):
    node: str
    resource: str


class ClusterAlarmCheckDetails(HealthCheckFailure):
    alarms: list[ResourceAlarm] = Field(default_factory=list)


class QuorumEndangeredQueue(Resource):
    name: str
    vhost: str = Field(alias="virtual_host")
    queue_type: Optional[QueueTypeField] = Field(default=None, alias="type")


class QuorumCriticalityCheckDetails(HealthCheckFailure):
    queues: list[QuorumEndangeredQueue] = Field(default_factory=list)
