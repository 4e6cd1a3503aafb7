"""Per-resource endpoint table.

The management API does not name its endpoints consistently: some
collections are scoped by ``/vhosts/{vhost}/...``, others by
``/.../{vhost}``; connections of a user live under ``/connections/username``;
health checks and queue actions hang off their own paths. Rather than
deriving paths from resource names, every decodable resource type is
declared here once, with its path templates and the placeholders that
identify a single instance.

Templates use ``{placeholder}`` syntax and are filled in by
:class:`~rabbitmq_http.client.request.RequestBuilder`, which
percent-encodes each value as a single path segment.
"""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from rabbitmq_http.models import definitions, resources
from rabbitmq_http.models.common import Resource


@dataclass(frozen=True)
class ResourceDescriptor:
    """Where a resource type lives in the API and how one instance is identified.

    Attributes:
        name: Stable name of the resource type, e.g. ``"queue"``.
        model: The :class:`~rabbitmq_http.models.common.Resource` subclass
            responses decode into.
        collection: Template listing all instances cluster-wide.
        collection_in: Template listing instances in one scope (usually a
            virtual host).
        singleton: Template addressing one instance.
        identity: Placeholders of ``singleton`` that identify an instance.
        actions: Further endpoints of the resource (purge, publish, ...).
    """

    name: str
    model: type[Resource]
    collection: Optional[str] = None
    collection_in: Optional[str] = None
    singleton: Optional[str] = None
    identity: tuple[str, ...] = ()
    actions: Mapping[str, str] = field(default_factory=dict)

    def action(self, name: str) -> str:
        try:
            return self.actions[name]
        except KeyError:
            raise KeyError(f"{self.name} has no '{name}' endpoint") from None

    @property
    def required_fields(self) -> tuple[str, ...]:
        """Model fields a response must carry for an instance to decode."""
        return tuple(
            name for name, info in self.model.model_fields.items() if info.is_required()
        )

    @property
    def optional_fields(self) -> tuple[str, ...]:
        return tuple(
            name
            for name, info in self.model.model_fields.items()
            if not info.is_required()
        )

    def templates(self) -> list[str]:
        candidates = [self.collection, self.collection_in, self.singleton, *self.actions.values()]
        return [template for template in candidates if template]


def placeholders(template: str) -> list[str]:
    """Return the ``{placeholder}`` names of *template* in order of appearance."""
    return [name for _, name, _, _ in string.Formatter().parse(template) if name]


def _d(name: str, model: type[Resource], **kwargs: Any) -> ResourceDescriptor:
    return ResourceDescriptor(name=name, model=model, **kwargs)


VIRTUAL_HOST = _d(
    "vhost", resources.VirtualHost,
    collection="/vhosts",
    singleton="/vhosts/{vhost}",
    identity=("vhost",),
)
VIRTUAL_HOST_LIMITS = _d(
    "vhost_limits", resources.VirtualHostLimits,
    collection="/vhost-limits",
    collection_in="/vhost-limits/{vhost}",
    singleton="/vhost-limits/{vhost}/{limit}",
    identity=("vhost", "limit"),
)
USER = _d(
    "user", resources.User,
    collection="/users",
    singleton="/users/{user}",
    identity=("user",),
    actions={
        "bulk_delete": "/users/bulk-delete",
        "without_permissions": "/users/without-permissions",
    },
)
USER_LIMITS = _d(
    "user_limits", resources.UserLimits,
    collection="/user-limits",
    collection_in="/user-limits/{user}",
    singleton="/user-limits/{user}/{limit}",
    identity=("user", "limit"),
)
CURRENT_USER = _d("current_user", resources.CurrentUser, singleton="/whoami")
PERMISSIONS = _d(
    "permissions", resources.Permissions,
    collection="/permissions",
    collection_in="/vhosts/{vhost}/permissions",
    singleton="/permissions/{vhost}/{user}",
    identity=("vhost", "user"),
    actions={"of_user": "/users/{user}/permissions"},
)
TOPIC_PERMISSIONS = _d(
    "topic_permissions", resources.TopicPermissions,
    collection="/topic-permissions",
    collection_in="/vhosts/{vhost}/topic-permissions",
    singleton="/topic-permissions/{vhost}/{user}",
    identity=("vhost", "user"),
    actions={"of_user": "/users/{user}/topic-permissions"},
)
QUEUE = _d(
    "queue", resources.QueueInfo,
    collection="/queues",
    collection_in="/queues/{vhost}",
    singleton="/queues/{vhost}/{name}",
    identity=("vhost", "name"),
    actions={
        "purge": "/queues/{vhost}/{name}/contents",
        "get": "/queues/{vhost}/{name}/get",
        "bindings": "/queues/{vhost}/{name}/bindings",
        "rebalance": "/rebalance/queues",
    },
)
EXCHANGE = _d(
    "exchange", resources.ExchangeInfo,
    collection="/exchanges",
    collection_in="/exchanges/{vhost}",
    singleton="/exchanges/{vhost}/{name}",
    identity=("vhost", "name"),
    actions={
        "publish": "/exchanges/{vhost}/{name}/publish",
        "bindings_as_source": "/exchanges/{vhost}/{name}/bindings/source",
        "bindings_as_destination": "/exchanges/{vhost}/{name}/bindings/destination",
    },
)
BINDING = _d(
    "binding", resources.BindingInfo,
    collection="/bindings",
    collection_in="/bindings/{vhost}",
    singleton="/bindings/{vhost}/e/{source}/{kind}/{destination}/{props}",
    identity=("vhost", "source", "kind", "destination", "props"),
    actions={"between": "/bindings/{vhost}/e/{source}/{kind}/{destination}"},
)
POLICY = _d(
    "policy", resources.Policy,
    collection="/policies",
    collection_in="/policies/{vhost}",
    singleton="/policies/{vhost}/{name}",
    identity=("vhost", "name"),
)
OPERATOR_POLICY = _d(
    "operator_policy", resources.OperatorPolicy,
    collection="/operator-policies",
    collection_in="/operator-policies/{vhost}",
    singleton="/operator-policies/{vhost}/{name}",
    identity=("vhost", "name"),
)
RUNTIME_PARAMETER = _d(
    "runtime_parameter", resources.RuntimeParameter,
    collection="/parameters",
    collection_in="/parameters/{component}/{vhost}",
    singleton="/parameters/{component}/{vhost}/{name}",
    identity=("component", "vhost", "name"),
    actions={"of_component": "/parameters/{component}"},
)
GLOBAL_PARAMETER = _d(
    "global_parameter", resources.GlobalParameter,
    collection="/global-parameters",
    singleton="/global-parameters/{name}",
    identity=("name",),
)
CLUSTER_IDENTITY = _d("cluster_identity", resources.ClusterIdentity, singleton="/cluster-name")
NODE = _d(
    "node", resources.ClusterNode,
    collection="/nodes",
    singleton="/nodes/{node}",
    identity=("node",),
)
OVERVIEW = _d("overview", resources.Overview, singleton="/overview")
CONNECTION = _d(
    "connection", resources.Connection,
    collection="/connections",
    collection_in="/vhosts/{vhost}/connections",
    singleton="/connections/{name}",
    identity=("name",),
)
USER_CONNECTION = _d(
    "user_connection", resources.UserConnection,
    collection_in="/connections/username/{user}",
    identity=("user",),
)
STREAM_CONNECTION = _d(
    "stream_connection", resources.StreamConnection,
    collection="/stream/connections",
    collection_in="/stream/connections/{vhost}",
    singleton="/stream/connections/{vhost}/{name}",
    identity=("vhost", "name"),
)
CHANNEL = _d(
    "channel", resources.Channel,
    collection="/channels",
    collection_in="/vhosts/{vhost}/channels",
    singleton="/channels/{name}",
    identity=("name",),
    actions={"on_connection": "/connections/{connection}/channels"},
)
CONSUMER = _d(
    "consumer", resources.Consumer,
    collection="/consumers",
    collection_in="/consumers/{vhost}",
)
SHOVEL = _d(
    "shovel", resources.Shovel,
    collection="/shovels",
    collection_in="/shovels/{vhost}",
    singleton="/shovels/vhost/{vhost}/{name}",
    identity=("vhost", "name"),
    actions={
        "declare": "/parameters/shovel/{vhost}/{name}",
        "restart": "/shovels/vhost/{vhost}/{name}/restart",
    },
)
FEDERATION_UPSTREAM = _d(
    "federation_upstream", resources.FederationUpstream,
    collection="/parameters/federation-upstream",
    collection_in="/parameters/federation-upstream/{vhost}",
    singleton="/parameters/federation-upstream/{vhost}/{name}",
    identity=("vhost", "name"),
)
FEDERATION_LINK = _d(
    "federation_link", resources.FederationLink,
    collection="/federation-links",
    collection_in="/federation-links/{vhost}",
    singleton="/federation-links/vhost/{vhost}/{id}/{node}",
    identity=("vhost", "id", "node"),
    actions={"restart": "/federation-links/vhost/{vhost}/{id}/{node}/restart"},
)
MESSAGE = _d("message", resources.GetMessage, collection_in="/queues/{vhost}/{name}/get")
MESSAGE_ROUTED = _d(
    "message_routed", resources.MessageRouted,
    singleton="/exchanges/{vhost}/{name}/publish",
    identity=("vhost", "name"),
)
DEFINITIONS = _d("definitions", definitions.DefinitionSet, singleton="/definitions")
VIRTUAL_HOST_DEFINITIONS = _d(
    "vhost_definitions", definitions.VirtualHostDefinitionSet,
    singleton="/definitions/{vhost}",
    identity=("vhost",),
)
HEALTH_CHECK = _d(
    "health_check", resources.HealthCheckStatus,
    actions={
        "alarms": "/health/checks/alarms",
        "local_alarms": "/health/checks/local-alarms",
        "quorum_critical": "/health/checks/node-is-quorum-critical",
        "virtual_hosts": "/health/checks/virtual-hosts",
        "port_listener": "/health/checks/port-listener/{port}",
        "protocol_listener": "/health/checks/protocol-listener/{protocol}",
    },
)
ALARM_CHECK_FAILURE = _d(
    "alarm_check_failure", resources.ClusterAlarmCheckDetails,
    singleton="/health/checks/alarms",
)
QUORUM_CHECK_FAILURE = _d(
    "quorum_check_failure", resources.QuorumCriticalityCheckDetails,
    singleton="/health/checks/node-is-quorum-critical",
)


DESCRIPTORS: dict[str, ResourceDescriptor] = {
    descriptor.name: descriptor
    for descriptor in (
        VIRTUAL_HOST, VIRTUAL_HOST_LIMITS, USER, USER_LIMITS, CURRENT_USER,
        PERMISSIONS, TOPIC_PERMISSIONS, QUEUE, EXCHANGE, BINDING, POLICY,
        OPERATOR_POLICY, RUNTIME_PARAMETER, GLOBAL_PARAMETER, CLUSTER_IDENTITY,
        NODE, OVERVIEW, CONNECTION, USER_CONNECTION, STREAM_CONNECTION, CHANNEL,
        CONSUMER, SHOVEL, FEDERATION_UPSTREAM, FEDERATION_LINK, MESSAGE,
        MESSAGE_ROUTED, DEFINITIONS, VIRTUAL_HOST_DEFINITIONS, HEALTH_CHECK,
        ALARM_CHECK_FAILURE, QUORUM_CHECK_FAILURE,
    )
}


def descriptor_for(model: type[Resource]) -> ResourceDescriptor:
    """Return the descriptor whose model is exactly *model*.

    Raises:
        KeyError: If *model* has no descriptor.
    """
    for descriptor in DESCRIPTORS.values():
        if descriptor.model is model:
            return descriptor
    raise KeyError(f"no descriptor for {model.__name__}")
