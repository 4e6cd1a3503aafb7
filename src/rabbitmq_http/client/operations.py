"""The management API's operations, defined once for both façades.

Every public method of :class:`Operations` describes one logical operation
as a :class:`Call` (the request to send, how to decode a success, how to
decode a health check failure) and passes it to :meth:`Operations._run`.
The base implementation returns the :class:`Call` itself, which makes
this class a pure, I/O-free planner::

    call = Operations(RequestBuilder()).declare_queue("/", QueueParams.quorum("orders"))
    call.request.path   # "/queues/%2F/orders"

:class:`~rabbitmq_http.client.sync_client.Client` overrides ``_run`` to
execute the call and return the decoded value;
:class:`~rabbitmq_http.client.async_client.AsyncClient` overrides it to
return an awaitable of the same value.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import TypeAdapter

from rabbitmq_http import descriptors as d
from rabbitmq_http.client.request import Query, RequestBuilder, RequestSpec
from rabbitmq_http.client.response import Decoder
from rabbitmq_http.exceptions import BuildError
from rabbitmq_http.models.common import (
    BindingDestinationType,
    Resource,
    SupportedProtocol,
    UserLimitTarget,
    VirtualHostLimitTarget,
)
from rabbitmq_http.models.definitions import DefinitionSet, VirtualHostDefinitionSet
from rabbitmq_http.models.paging import Page, PageRequest
from rabbitmq_http.models.params import (
    BindingParams,
    EnforcedLimitParams,
    ExchangeParams,
    FederationUpstreamParams,
    GetMessagesParams,
    GlobalParameterParams,
    PermissionParams,
    PolicyParams,
    PublishParams,
    QueueParams,
    RuntimeParameterParams,
    ShovelParams,
    TopicPermissionParams,
    UserParams,
    VirtualHostParams,
)
from rabbitmq_http.models.resources import (
    ClusterAlarmCheckDetails,
    HealthCheckFailure,
    QuorumCriticalityCheckDetails,
)

DEFAULT_EXCHANGE_PATH_NAME = "amq.default"
"""The default exchange has an empty name; its endpoints address it by this one."""


@dataclass(frozen=True)
class Call:
    """One planned operation.

    Attributes:
        request: The request to send.
        decode: Decodes a 2xx JSON body; ``None`` for no-content operations.
        failure_model: Model for the body of a failed (503) health check.
        missing_ok: Treat a 404 as success (idempotent deletes).
    """

    request: RequestSpec
    decode: Optional[Decoder] = None
    failure_model: Optional[type[Resource]] = None
    missing_ok: bool = False


@lru_cache(maxsize=None)
def _list_adapter(model: type[Resource]) -> TypeAdapter:
    return TypeAdapter(list[model])  # type: ignore[valid-type]


@lru_cache(maxsize=None)
def _page_adapter(model: type[Resource]) -> TypeAdapter:
    return TypeAdapter(Page[model])  # type: ignore[valid-type]


def one(model: type[Resource]) -> Decoder:
    return model.decode


def many(model: type[Resource]) -> Decoder:
    return _list_adapter(model).validate_python


def paged(model: type[Resource], name_filter: Optional[str]) -> Decoder:
    adapter = _page_adapter(model)

    def decode(data: Any) -> Page:
        page = adapter.validate_python(data)
        return page.model_copy(update={"name_filter": name_filter})

    return decode


def exchange_path_name(name: str) -> str:
    return name or DEFAULT_EXCHANGE_PATH_NAME


def _known(enum_cls: Any, value: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        raise BuildError(f"{value!r} is not a valid {enum_cls.__name__}") from None


def _destination_kind(destination_type: Union[BindingDestinationType, str]) -> str:
    return _known(BindingDestinationType, destination_type).path_abbreviation


class Operations:
    """Plans every management API operation as a :class:`Call`.

    Args:
        builder: Request builder holding the endpoint and credentials.
    """

    def __init__(self, builder: RequestBuilder) -> None:
        self._builder = builder

    def _run(self, call: Call) -> Any:
        return call

    # ------------------------------------------------------------------ #
    # Call construction helpers
    # ------------------------------------------------------------------ #

    def _call(
        self,
        method: str,
        template: Optional[str],
        path_params: Optional[Mapping[str, Any]] = None,
        *,
        query: Query = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        decode: Optional[Decoder] = None,
        failure_model: Optional[type[Resource]] = None,
        missing_ok: bool = False,
    ) -> Any:
        if template is None:
            raise BuildError(f"No endpoint for {method} operation")
        params = {
            key: value if value is None or isinstance(value, str) else str(value)
            for key, value in (path_params or {}).items()
        }
        request = self._builder.build(method, template, params, query=query, body=body, headers=headers)
        return self._run(
            Call(request=request, decode=decode, failure_model=failure_model, missing_ok=missing_ok)
        )

    def _list(self, descriptor: d.ResourceDescriptor, vhost: Optional[str] = None) -> Any:
        """List all instances, or only those in *vhost* when it is given."""
        if vhost is None:
            return self._call("GET", descriptor.collection, decode=many(descriptor.model))
        return self._call(
            "GET", descriptor.collection_in, {"vhost": vhost}, decode=many(descriptor.model)
        )

    def _get(self, descriptor: d.ResourceDescriptor, **identity: Any) -> Any:
        return self._call("GET", descriptor.singleton, identity, decode=one(descriptor.model))

    def _delete(self, descriptor: d.ResourceDescriptor, idempotently: bool = False,
                query: Query = None, **identity: Any) -> Any:
        return self._call(
            "DELETE", descriptor.singleton, identity, query=query, missing_ok=idempotently
        )

    # ------------------------------------------------------------------ #
    # Overview, cluster, nodes
    # ------------------------------------------------------------------ #

    def get_overview(self):
        """Cluster-wide overview: versions, object totals, listeners. Returns :class:`Overview`."""
        return self._get(d.OVERVIEW)

    def get_cluster_name(self):
        return self._get(d.CLUSTER_IDENTITY)

    def set_cluster_name(self, name: str):
        return self._call("PUT", d.CLUSTER_IDENTITY.singleton, body={"name": name})

    def list_nodes(self):
        return self._list(d.NODE)

    def get_node_info(self, name: str):
        return self._get(d.NODE, node=name)

    def current_user(self):
        """The user these credentials authenticate as. Returns :class:`CurrentUser`."""
        return self._get(d.CURRENT_USER)

    # ------------------------------------------------------------------ #
    # Virtual hosts and their limits
    # ------------------------------------------------------------------ #

    def list_vhosts(self):
        return self._list(d.VIRTUAL_HOST)

    def get_vhost(self, name: str):
        return self._get(d.VIRTUAL_HOST, vhost=name)

    def create_vhost(self, params: VirtualHostParams):
        return self._call("PUT", d.VIRTUAL_HOST.singleton, {"vhost": params.name}, body=params)

    def update_vhost(self, params: VirtualHostParams):
        """Same endpoint as :meth:`create_vhost`; the broker upserts."""
        return self.create_vhost(params)

    def delete_vhost(self, name: str, idempotently: bool = False):
        return self._delete(d.VIRTUAL_HOST, idempotently, vhost=name)

    def list_all_vhost_limits(self):
        return self._list(d.VIRTUAL_HOST_LIMITS)

    def list_vhost_limits(self, vhost: str):
        return self._list(d.VIRTUAL_HOST_LIMITS, vhost)

    def set_vhost_limit(self, vhost: str, params: EnforcedLimitParams):
        return self._call(
            "PUT", d.VIRTUAL_HOST_LIMITS.singleton,
            {"vhost": vhost, "limit": _known(VirtualHostLimitTarget, params.kind).value},
            body=params,
        )

    def clear_vhost_limit(self, vhost: str, kind: Union[VirtualHostLimitTarget, str]):
        return self._delete(
            d.VIRTUAL_HOST_LIMITS, vhost=vhost, limit=_known(VirtualHostLimitTarget, kind).value
        )

    # ------------------------------------------------------------------ #
    # Users and their limits
    # ------------------------------------------------------------------ #

    def list_users(self):
        return self._list(d.USER)

    def list_users_without_permissions(self):
        return self._call("GET", d.USER.action("without_permissions"), decode=many(d.USER.model))

    def get_user(self, name: str):
        return self._get(d.USER, user=name)

    def create_user(self, params: UserParams):
        return self._call("PUT", d.USER.singleton, {"user": params.name}, body=params)

    def delete_user(self, name: str, idempotently: bool = False):
        return self._delete(d.USER, idempotently, user=name)

    def delete_users(self, names: Sequence[str]):
        """Delete several users in one request."""
        if not names or any(not name for name in names):
            raise BuildError("delete_users needs at least one non-empty user name")
        return self._call("POST", d.USER.action("bulk_delete"), body={"users": list(names)})

    def list_all_user_limits(self):
        return self._list(d.USER_LIMITS)

    def list_user_limits(self, username: str):
        return self._call(
            "GET", d.USER_LIMITS.collection_in, {"user": username}, decode=many(d.USER_LIMITS.model)
        )

    def set_user_limit(self, username: str, params: EnforcedLimitParams):
        return self._call(
            "PUT", d.USER_LIMITS.singleton,
            {"user": username, "limit": _known(UserLimitTarget, params.kind).value},
            body=params,
        )

    def clear_user_limit(self, username: str, kind: Union[UserLimitTarget, str]):
        return self._delete(d.USER_LIMITS, user=username, limit=_known(UserLimitTarget, kind).value)

    # ------------------------------------------------------------------ #
    # Permissions
    # ------------------------------------------------------------------ #

    def list_permissions(self, vhost: Optional[str] = None):
        return self._list(d.PERMISSIONS, vhost)

    def list_permissions_of(self, username: str):
        return self._call(
            "GET", d.PERMISSIONS.action("of_user"), {"user": username}, decode=many(d.PERMISSIONS.model)
        )

    def get_permissions(self, vhost: str, username: str):
        return self._get(d.PERMISSIONS, vhost=vhost, user=username)

    def grant_permissions(self, params: PermissionParams):
        return self._call(
            "PUT", d.PERMISSIONS.singleton, {"vhost": params.vhost, "user": params.user}, body=params
        )

    def clear_permissions(self, vhost: str, username: str, idempotently: bool = False):
        return self._delete(d.PERMISSIONS, idempotently, vhost=vhost, user=username)

    def list_topic_permissions(self, vhost: Optional[str] = None):
        return self._list(d.TOPIC_PERMISSIONS, vhost)

    def list_topic_permissions_of(self, username: str):
        return self._call(
            "GET", d.TOPIC_PERMISSIONS.action("of_user"), {"user": username},
            decode=many(d.TOPIC_PERMISSIONS.model),
        )

    def get_topic_permissions(self, vhost: str, username: str):
        """Topic permissions of a user in a vhost, one entry per exchange."""
        return self._call(
            "GET", d.TOPIC_PERMISSIONS.singleton, {"vhost": vhost, "user": username},
            decode=many(d.TOPIC_PERMISSIONS.model),
        )

    def grant_topic_permissions(self, params: TopicPermissionParams):
        return self._call(
            "PUT", d.TOPIC_PERMISSIONS.singleton, {"vhost": params.vhost, "user": params.user},
            body=params,
        )

    def clear_topic_permissions(self, vhost: str, username: str, idempotently: bool = False):
        return self._delete(d.TOPIC_PERMISSIONS, idempotently, vhost=vhost, user=username)

    # ------------------------------------------------------------------ #
    # Connections, channels, consumers
    # ------------------------------------------------------------------ #

    def list_connections(self, vhost: Optional[str] = None):
        return self._list(d.CONNECTION, vhost)

    def list_user_connections(self, username: str):
        return self._call(
            "GET", d.USER_CONNECTION.collection_in, {"user": username},
            decode=many(d.USER_CONNECTION.model),
        )

    def get_connection_info(self, name: str):
        return self._get(d.CONNECTION, name=name)

    def close_connection(self, name: str, reason: Optional[str] = None, idempotently: bool = False):
        """Close a client connection; *reason* is shown to the client."""
        headers = {"X-Reason": reason} if reason else None
        return self._call(
            "DELETE", d.CONNECTION.singleton, {"name": name}, headers=headers, missing_ok=idempotently
        )

    def close_user_connections(self, username: str, reason: Optional[str] = None):
        headers = {"X-Reason": reason} if reason else None
        return self._call("DELETE", d.USER_CONNECTION.collection_in, {"user": username}, headers=headers)

    def list_stream_connections(self, vhost: Optional[str] = None):
        return self._list(d.STREAM_CONNECTION, vhost)

    def list_channels(self, vhost: Optional[str] = None):
        return self._list(d.CHANNEL, vhost)

    def list_channels_on(self, connection_name: str):
        return self._call(
            "GET", d.CHANNEL.action("on_connection"), {"connection": connection_name},
            decode=many(d.CHANNEL.model),
        )

    def get_channel_info(self, name: str):
        return self._get(d.CHANNEL, name=name)

    def list_consumers(self, vhost: Optional[str] = None):
        return self._list(d.CONSUMER, vhost)

    # ------------------------------------------------------------------ #
    # Queues and streams
    # ------------------------------------------------------------------ #

    def list_queues(self, vhost: Optional[str] = None):
        return self._list(d.QUEUE, vhost)

    def list_queues_page(self, vhost: Optional[str] = None, page: Optional[PageRequest] = None):
        """One page of queues. Returns :class:`Page` of :class:`QueueInfo`."""
        page = page or PageRequest()
        decode = paged(d.QUEUE.model, page.name)
        if vhost is None:
            return self._call("GET", d.QUEUE.collection, query=page.query(), decode=decode)
        return self._call("GET", d.QUEUE.collection_in, {"vhost": vhost}, query=page.query(), decode=decode)

    def get_queue_info(self, vhost: str, name: str):
        return self._get(d.QUEUE, vhost=vhost, name=name)

    def get_stream_info(self, vhost: str, name: str):
        return self.get_queue_info(vhost, name)

    def declare_queue(self, vhost: str, params: QueueParams):
        """Declare a queue. A 409 means it exists with different properties."""
        return self._call("PUT", d.QUEUE.singleton, {"vhost": vhost, "name": params.name}, body=params)

    def declare_stream(self, vhost: str, params: QueueParams):
        return self.declare_queue(vhost, params)

    def delete_queue(
        self,
        vhost: str,
        name: str,
        if_empty: bool = False,
        if_unused: bool = False,
        idempotently: bool = False,
    ):
        query = [("if-empty", True if if_empty else None), ("if-unused", True if if_unused else None)]
        return self._delete(d.QUEUE, idempotently, query=query, vhost=vhost, name=name)

    def delete_stream(self, vhost: str, name: str, idempotently: bool = False):
        return self.delete_queue(vhost, name, idempotently=idempotently)

    def purge_queue(self, vhost: str, name: str):
        return self._call("DELETE", d.QUEUE.action("purge"), {"vhost": vhost, "name": name})

    def get_messages(self, vhost: str, queue: str, params: Optional[GetMessagesParams] = None):
        """Fetch messages for inspection. Returns a list of :class:`GetMessage`."""
        return self._call(
            "POST", d.MESSAGE.collection_in, {"vhost": vhost, "name": queue},
            body=params or GetMessagesParams(), decode=many(d.MESSAGE.model),
        )

    def list_queue_bindings(self, vhost: str, queue: str):
        return self._call(
            "GET", d.QUEUE.action("bindings"), {"vhost": vhost, "name": queue},
            decode=many(d.BINDING.model),
        )

    def rebalance_queue_leaders(self):
        return self._call("POST", d.QUEUE.action("rebalance"))

    # ------------------------------------------------------------------ #
    # Exchanges
    # ------------------------------------------------------------------ #

    def list_exchanges(self, vhost: Optional[str] = None):
        return self._list(d.EXCHANGE, vhost)

    def get_exchange_info(self, vhost: str, name: str):
        return self._get(d.EXCHANGE, vhost=vhost, name=exchange_path_name(name))

    def declare_exchange(self, vhost: str, params: ExchangeParams):
        return self._call(
            "PUT", d.EXCHANGE.singleton, {"vhost": vhost, "name": params.name}, body=params
        )

    def delete_exchange(self, vhost: str, name: str, if_unused: bool = False, idempotently: bool = False):
        query = [("if-unused", True if if_unused else None)]
        return self._delete(d.EXCHANGE, idempotently, query=query, vhost=vhost, name=name)

    def publish_message(self, vhost: str, exchange: str, params: PublishParams):
        """Publish through *exchange*. Returns :class:`MessageRouted`."""
        return self._call(
            "POST", d.MESSAGE_ROUTED.singleton, {"vhost": vhost, "name": exchange_path_name(exchange)},
            body=params, decode=one(d.MESSAGE_ROUTED.model),
        )

    def list_exchange_bindings_with_source(self, vhost: str, exchange: str):
        return self._call(
            "GET", d.EXCHANGE.action("bindings_as_source"),
            {"vhost": vhost, "name": exchange_path_name(exchange)}, decode=many(d.BINDING.model),
        )

    def list_exchange_bindings_with_destination(self, vhost: str, exchange: str):
        return self._call(
            "GET", d.EXCHANGE.action("bindings_as_destination"),
            {"vhost": vhost, "name": exchange}, decode=many(d.BINDING.model),
        )

    # ------------------------------------------------------------------ #
    # Bindings
    # ------------------------------------------------------------------ #

    def list_bindings(self, vhost: Optional[str] = None):
        return self._list(d.BINDING, vhost)

    def list_bindings_between(
        self,
        vhost: str,
        source: str,
        destination: str,
        destination_type: Union[BindingDestinationType, str] = BindingDestinationType.QUEUE,
    ):
        path_params = {
            "vhost": vhost,
            "source": source,
            "kind": _destination_kind(destination_type),
            "destination": destination,
        }
        return self._call("GET", d.BINDING.action("between"), path_params, decode=many(d.BINDING.model))

    def declare_binding(self, params: BindingParams):
        path_params = {
            "vhost": params.vhost,
            "source": params.source,
            "kind": _destination_kind(params.destination_type),
            "destination": params.destination,
        }
        return self._call("POST", d.BINDING.action("between"), path_params, body=params)

    def bind_queue(self, vhost: str, queue: str, exchange: str, routing_key: str = "",
                   arguments: Optional[Mapping[str, Any]] = None):
        return self.declare_binding(BindingParams(
            vhost=vhost, source=exchange, destination=queue,
            destination_type=BindingDestinationType.QUEUE,
            routing_key=routing_key, arguments=arguments or {},
        ))

    def bind_exchange(self, vhost: str, destination: str, source: str, routing_key: str = "",
                      arguments: Optional[Mapping[str, Any]] = None):
        return self.declare_binding(BindingParams(
            vhost=vhost, source=source, destination=destination,
            destination_type=BindingDestinationType.EXCHANGE,
            routing_key=routing_key, arguments=arguments or {},
        ))

    def delete_binding(
        self,
        vhost: str,
        source: str,
        destination: str,
        destination_type: Union[BindingDestinationType, str],
        properties_key: str,
        idempotently: bool = False,
    ):
        """Delete one binding, identified by its ``properties_key`` (see :class:`BindingInfo`)."""
        return self._delete(
            d.BINDING, idempotently, vhost=vhost, source=source,
            kind=_destination_kind(destination_type), destination=destination, props=properties_key,
        )

    # ------------------------------------------------------------------ #
    # Policies and operator policies
    # ------------------------------------------------------------------ #

    def list_policies(self, vhost: Optional[str] = None):
        return self._list(d.POLICY, vhost)

    def get_policy(self, vhost: str, name: str):
        return self._get(d.POLICY, vhost=vhost, name=name)

    def declare_policy(self, params: PolicyParams):
        return self._call(
            "PUT", d.POLICY.singleton, {"vhost": params.vhost, "name": params.name}, body=params
        )

    def delete_policy(self, vhost: str, name: str, idempotently: bool = False):
        return self._delete(d.POLICY, idempotently, vhost=vhost, name=name)

    def list_operator_policies(self, vhost: Optional[str] = None):
        return self._list(d.OPERATOR_POLICY, vhost)

    def get_operator_policy(self, vhost: str, name: str):
        return self._get(d.OPERATOR_POLICY, vhost=vhost, name=name)

    def declare_operator_policy(self, params: PolicyParams):
        return self._call(
            "PUT", d.OPERATOR_POLICY.singleton, {"vhost": params.vhost, "name": params.name},
            body=params,
        )

    def delete_operator_policy(self, vhost: str, name: str, idempotently: bool = False):
        return self._delete(d.OPERATOR_POLICY, idempotently, vhost=vhost, name=name)

    # ------------------------------------------------------------------ #
    # Runtime and global parameters
    # ------------------------------------------------------------------ #

    def list_runtime_parameters(self):
        return self._list(d.RUNTIME_PARAMETER)

    def list_runtime_parameters_of_component(self, component: str):
        return self._call(
            "GET", d.RUNTIME_PARAMETER.action("of_component"), {"component": component},
            decode=many(d.RUNTIME_PARAMETER.model),
        )

    def list_runtime_parameters_in(self, component: str, vhost: str):
        return self._call(
            "GET", d.RUNTIME_PARAMETER.collection_in, {"component": component, "vhost": vhost},
            decode=many(d.RUNTIME_PARAMETER.model),
        )

    def get_runtime_parameter(self, component: str, vhost: str, name: str):
        return self._get(d.RUNTIME_PARAMETER, component=component, vhost=vhost, name=name)

    def upsert_runtime_parameter(self, params: RuntimeParameterParams):
        return self._call(
            "PUT", d.RUNTIME_PARAMETER.singleton,
            {"component": params.component, "vhost": params.vhost, "name": params.name},
            body=params,
        )

    def clear_runtime_parameter(self, component: str, vhost: str, name: str, idempotently: bool = False):
        return self._delete(
            d.RUNTIME_PARAMETER, idempotently, component=component, vhost=vhost, name=name
        )

    def list_global_parameters(self):
        return self._list(d.GLOBAL_PARAMETER)

    def get_global_parameter(self, name: str):
        return self._get(d.GLOBAL_PARAMETER, name=name)

    def upsert_global_parameter(self, params: GlobalParameterParams):
        return self._call("PUT", d.GLOBAL_PARAMETER.singleton, {"name": params.name}, body=params)

    def clear_global_parameter(self, name: str, idempotently: bool = False):
        return self._delete(d.GLOBAL_PARAMETER, idempotently, name=name)

    # ------------------------------------------------------------------ #
    # Shovels and federation
    # ------------------------------------------------------------------ #

    def list_shovels(self, vhost: Optional[str] = None):
        return self._list(d.SHOVEL, vhost)

    def declare_shovel(self, params: ShovelParams):
        return self._call(
            "PUT", d.SHOVEL.action("declare"), {"vhost": params.vhost, "name": params.name},
            body=params,
        )

    def delete_shovel(self, vhost: str, name: str, idempotently: bool = False):
        return self._call(
            "DELETE", d.SHOVEL.action("declare"), {"vhost": vhost, "name": name},
            missing_ok=idempotently,
        )

    def restart_shovel(self, vhost: str, name: str):
        return self._call("DELETE", d.SHOVEL.action("restart"), {"vhost": vhost, "name": name})

    def list_federation_upstreams(self, vhost: Optional[str] = None):
        return self._list(d.FEDERATION_UPSTREAM, vhost)

    def get_federation_upstream(self, vhost: str, name: str):
        return self._get(d.FEDERATION_UPSTREAM, vhost=vhost, name=name)

    def declare_federation_upstream(self, params: FederationUpstreamParams):
        return self._call(
            "PUT", d.FEDERATION_UPSTREAM.singleton, {"vhost": params.vhost, "name": params.name},
            body=params,
        )

    def delete_federation_upstream(self, vhost: str, name: str, idempotently: bool = False):
        return self._delete(d.FEDERATION_UPSTREAM, idempotently, vhost=vhost, name=name)

    def list_federation_links(self, vhost: Optional[str] = None):
        return self._list(d.FEDERATION_LINK, vhost)

    def restart_federation_link(self, vhost: str, link_id: str, node: str):
        return self._call(
            "DELETE", d.FEDERATION_LINK.action("restart"),
            {"vhost": vhost, "id": link_id, "node": node},
        )

    # ------------------------------------------------------------------ #
    # Definitions
    # ------------------------------------------------------------------ #

    def export_definitions(self):
        """The whole cluster's definitions. Returns :class:`DefinitionSet`."""
        return self._get(d.DEFINITIONS)

    def export_vhost_definitions(self, vhost: str):
        return self._get(d.VIRTUAL_HOST_DEFINITIONS, vhost=vhost)

    def import_definitions(self, definitions: Union[DefinitionSet, Mapping[str, Any]]):
        """Import a definition document in one request; the broker applies it as a whole."""
        return self._call("POST", d.DEFINITIONS.singleton, body=_definitions_body(definitions))

    def import_vhost_definitions(
        self, vhost: str, definitions: Union[VirtualHostDefinitionSet, Mapping[str, Any]]
    ):
        return self._call(
            "POST", d.VIRTUAL_HOST_DEFINITIONS.singleton, {"vhost": vhost},
            body=_definitions_body(definitions),
        )

    # ------------------------------------------------------------------ #
    # Health checks
    # ------------------------------------------------------------------ #

    def _health_check(self, action: str, path_params: Optional[Mapping[str, Any]] = None,
                      failure_model: type[Resource] = HealthCheckFailure) -> Any:
        return self._call(
            "GET", d.HEALTH_CHECK.action(action), path_params,
            decode=one(d.HEALTH_CHECK.model), failure_model=failure_model,
        )

    def health_check_cluster_wide_alarms(self):
        """Fails with :class:`HealthCheckFailedError` if any node has an alarm in effect."""
        return self._health_check("alarms", failure_model=ClusterAlarmCheckDetails)

    def health_check_local_alarms(self):
        return self._health_check("local_alarms", failure_model=ClusterAlarmCheckDetails)

    def health_check_if_node_is_quorum_critical(self):
        """Fails if stopping the target node would leave a quorum queue without a majority."""
        return self._health_check("quorum_critical", failure_model=QuorumCriticalityCheckDetails)

    def health_check_virtual_hosts(self):
        return self._health_check("virtual_hosts")

    def health_check_port_listener(self, port: int):
        return self._health_check("port_listener", {"port": port})

    def health_check_protocol_listener(self, protocol: Union[SupportedProtocol, str]):
        value = protocol.value if isinstance(protocol, SupportedProtocol) else protocol
        return self._health_check("protocol_listener", {"protocol": value})


def _definitions_body(definitions: Union[Resource, Mapping[str, Any]]) -> Any:
    if isinstance(definitions, Resource):
        return definitions
    return dict(definitions)
