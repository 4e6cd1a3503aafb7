"""Typed resource model for the RabbitMQ HTTP management API."""

from rabbitmq_http.models.common import (
    AckMode,
    ArgumentsMap,
    BindingDestinationType,
    ExchangeType,
    FederationLinkStatus,
    FederationType,
    GetAckMode,
    PolicyTarget,
    QueueType,
    Resource,
    ShovelState,
    ShovelType,
    SupportedProtocol,
    Unrecognized,
    UserLimitTarget,
    UserTag,
    VirtualHostLimitTarget,
    WireModel,
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
from rabbitmq_http.models.profile import ConnectionProfile, GlobalConfig, RequestConfig
from rabbitmq_http.models.resources import (
    BindingInfo,
    Channel,
    ClusterAlarmCheckDetails,
    ClusterIdentity,
    ClusterNode,
    Connection,
    Consumer,
    CurrentUser,
    ExchangeInfo,
    FederationLink,
    FederationUpstream,
    GetMessage,
    GlobalParameter,
    OperatorPolicy,
    HealthCheckStatus,
    MessageRouted,
    Overview,
    Permissions,
    Policy,
    QueueInfo,
    QuorumCriticalityCheckDetails,
    RuntimeParameter,
    Shovel,
    StreamConnection,
    TopicPermissions,
    User,
    UserConnection,
    UserLimits,
    VirtualHost,
    VirtualHostLimits,
)

__all__ = [
    "AckMode",
    "ArgumentsMap",
    "BindingDestinationType",
    "BindingInfo",
    "BindingParams",
    "Channel",
    "ClusterAlarmCheckDetails",
    "ClusterIdentity",
    "ClusterNode",
    "Connection",
    "ConnectionProfile",
    "Consumer",
    "CurrentUser",
    "DefinitionSet",
    "EnforcedLimitParams",
    "ExchangeInfo",
    "ExchangeParams",
    "ExchangeType",
    "FederationLink",
    "FederationLinkStatus",
    "FederationType",
    "FederationUpstream",
    "FederationUpstreamParams",
    "GetAckMode",
    "GetMessage",
    "GetMessagesParams",
    "GlobalConfig",
    "GlobalParameter",
    "GlobalParameterParams",
    "OperatorPolicy",
    "HealthCheckStatus",
    "MessageRouted",
    "Overview",
    "Page",
    "PageRequest",
    "PermissionParams",
    "Permissions",
    "Policy",
    "PolicyParams",
    "PolicyTarget",
    "PublishParams",
    "QueueInfo",
    "QueueParams",
    "QueueType",
    "QuorumCriticalityCheckDetails",
    "RequestConfig",
    "Resource",
    "RuntimeParameter",
    "RuntimeParameterParams",
    "ShovelParams",
    "ShovelState",
    "ShovelType",
    "Shovel",
    "StreamConnection",
    "SupportedProtocol",
    "TopicPermissionParams",
    "TopicPermissions",
    "Unrecognized",
    "User",
    "UserConnection",
    "UserLimitTarget",
    "UserLimits",
    "UserParams",
    "UserTag",
    "VirtualHost",
    "VirtualHostDefinitionSet",
    "VirtualHostLimitTarget",
    "VirtualHostLimits",
    "VirtualHostParams",
    "WireModel",
]
