"""Write-side parameter models: the bodies of PUT and POST requests.

Fields that identify the target of a write (vhost, name, user, ...) are
part of the request path, not the body, and are declared with
``exclude=True`` so that :meth:`~rabbitmq_http.models.common.WireModel.encode`
leaves them out. Unknown keyword arguments are rejected at construction
time rather than silently sent to the broker.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import ConfigDict, Field, field_validator, model_validator

from rabbitmq_http.models.common import (
    AckMode,
    AckModeField,
    ArgumentsMap,
    BindingDestinationType,
    BindingDestinationTypeField,
    ExchangeType,
    ExchangeTypeField,
    GetAckMode,
    GetAckModeField,
    JsonData,
    PolicyTarget,
    PolicyTargetField,
    QueueType,
    QueueTypeField,
    UserLimitTarget,
    UserTagField,
    VirtualHostLimitTarget,
    WireModel,
)

Arguments = Optional[Mapping[str, Any]]


class Params(WireModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


# --- Virtual hosts, users, permissions ---


class VirtualHostParams(Params):
    """Properties of a virtual host to be created or updated."""

    name: str = Field(exclude=True)
    description: Optional[str] = None
    tags: Optional[list[str]] = None
    default_queue_type: Optional[QueueTypeField] = None
    tracing: bool = False

    @classmethod
    def named(cls, name: str) -> VirtualHostParams:
        return cls(name=name)


class UserParams(Params):
    """A user to be created or updated.

    Exactly one of ``password`` (hashed by the broker) or ``password_hash``
    (see :func:`rabbitmq_http.password_hashing.salted_password_hash`) must
    be given. An empty ``password_hash`` creates a user that cannot log in
    with a password.
    """

    name: str = Field(exclude=True)
    password: Optional[str] = Field(default=None, repr=False)
    password_hash: Optional[str] = Field(default=None, repr=False)
    hashing_algorithm: Optional[str] = None
    tags: list[UserTagField] = Field(default_factory=list)

    @model_validator(mode="after")
    def _one_password_form(self) -> UserParams:
        if (self.password is None) == (self.password_hash is None):
            raise ValueError("exactly one of 'password' and 'password_hash' must be set")
        return self

    def encode(self) -> dict[str, Any]:
        data = super().encode()
        # the management API takes tags as one comma-separated string
        data["tags"] = ",".join(str(tag.value) for tag in self.tags)
        return data


class PermissionParams(Params):
    user: str = Field(exclude=True)
    vhost: str = Field(exclude=True)
    configure: str = ".*"
    write: str = ".*"
    read: str = ".*"


class TopicPermissionParams(Params):
    user: str = Field(exclude=True)
    vhost: str = Field(exclude=True)
    exchange: str
    write: str = ".*"
    read: str = ".*"


class EnforcedLimitParams(Params):
    """A resource usage limit enforced on a virtual host or a user.

    A negative value means "no limit" to the broker; ``0`` forbids the
    resource entirely.
    """

    kind: Union[VirtualHostLimitTarget, UserLimitTarget] = Field(exclude=True)
    value: int


# --- Queues, exchanges, bindings ---


class QueueParams(Params):
    """Queue properties used at declaration time.

    The queue type travels as the ``x-queue-type`` argument, which is always
    written first; arguments passed by the caller follow in their own order
    and override it if they repeat the key.

    Example::

        params = QueueParams.quorum("orders", {"x-max-length": 1000})
        params.encode()["arguments"]
        # {"x-queue-type": "quorum", "x-max-length": 1000}
    """

    name: str = Field(exclude=True)
    queue_type: QueueTypeField = Field(default=QueueType.CLASSIC, exclude=True)
    durable: bool = True
    auto_delete: bool = False
    exclusive: bool = False
    arguments: Optional[ArgumentsMap] = None

    @classmethod
    def new(
        cls,
        name: str,
        queue_type: Union[QueueType, str],
        durable: bool = True,
        auto_delete: bool = False,
        arguments: Arguments = None,
    ) -> QueueParams:
        return cls(
            name=name,
            queue_type=queue_type,
            durable=durable,
            auto_delete=auto_delete,
            arguments=cls.combined_arguments(arguments, queue_type),
        )

    @classmethod
    def quorum(cls, name: str, arguments: Arguments = None) -> QueueParams:
        return cls.new(name, QueueType.QUORUM, arguments=arguments)

    @classmethod
    def stream(cls, name: str, arguments: Arguments = None) -> QueueParams:
        return cls.new(name, QueueType.STREAM, arguments=arguments)

    @classmethod
    def durable_classic(cls, name: str, arguments: Arguments = None) -> QueueParams:
        return cls.new(name, QueueType.CLASSIC, arguments=arguments)

    @staticmethod
    def combined_arguments(arguments: Arguments, queue_type: Any) -> ArgumentsMap:
        """Put ``x-queue-type`` first, then the caller's arguments."""
        wire_type = queue_type.value if hasattr(queue_type, "value") else str(queue_type)
        return ArgumentsMap({"x-queue-type": wire_type}).merged(arguments)

    def encode(self) -> dict[str, Any]:
        data = super().encode()
        data["arguments"] = self.combined_arguments(self.arguments, self.queue_type).to_dict()
        return data


class ExchangeParams(Params):
    name: str = Field(exclude=True)
    exchange_type: ExchangeTypeField = Field(alias="type")
    durable: bool = True
    auto_delete: bool = False
    internal: bool = False
    arguments: Optional[ArgumentsMap] = None

    @classmethod
    def of_type(
        cls, name: str, exchange_type: Union[ExchangeType, str], arguments: Arguments = None
    ) -> ExchangeParams:
        return cls(name=name, exchange_type=exchange_type, arguments=arguments)

    @classmethod
    def fanout(cls, name: str, durable: bool = True, auto_delete: bool = False,
               arguments: Arguments = None) -> ExchangeParams:
        return cls(name=name, exchange_type=ExchangeType.FANOUT, durable=durable,
                   auto_delete=auto_delete, arguments=arguments)

    @classmethod
    def topic(cls, name: str, durable: bool = True, auto_delete: bool = False,
              arguments: Arguments = None) -> ExchangeParams:
        return cls(name=name, exchange_type=ExchangeType.TOPIC, durable=durable,
                   auto_delete=auto_delete, arguments=arguments)

    @classmethod
    def direct(cls, name: str, durable: bool = True, auto_delete: bool = False,
               arguments: Arguments = None) -> ExchangeParams:
        return cls(name=name, exchange_type=ExchangeType.DIRECT, durable=durable,
                   auto_delete=auto_delete, arguments=arguments)

    @classmethod
    def headers(cls, name: str, durable: bool = True, auto_delete: bool = False,
                arguments: Arguments = None) -> ExchangeParams:
        return cls(name=name, exchange_type=ExchangeType.HEADERS, durable=durable,
                   auto_delete=auto_delete, arguments=arguments)


class BindingParams(Params):
    """A binding from exchange ``source`` to a queue or exchange ``destination``."""

    vhost: str = Field(exclude=True)
    source: str = Field(exclude=True)
    destination: str = Field(exclude=True)
    destination_type: BindingDestinationTypeField = Field(
        default=BindingDestinationType.QUEUE, exclude=True
    )
    routing_key: str = ""
    arguments: ArgumentsMap = Field(default_factory=ArgumentsMap)


# --- Policies and parameters ---


class PolicyParams(Params):
    vhost: str = Field(exclude=True)
    name: str = Field(exclude=True)
    pattern: str
    apply_to: PolicyTargetField = Field(default=PolicyTarget.QUEUES, alias="apply-to")
    priority: int = 0
    definition: ArgumentsMap = Field(default_factory=ArgumentsMap)


class RuntimeParameterParams(Params):
    """A runtime parameter value for ``component`` (e.g. ``federation-upstream``)."""

    component: str = Field(exclude=True)
    vhost: str = Field(exclude=True)
    name: str = Field(exclude=True)
    value: ArgumentsMap = Field(default_factory=ArgumentsMap)


class GlobalParameterParams(Params):
    name: str
    value: JsonData


class ShovelParams(Params):
    """A dynamic shovel, declared as a runtime parameter of the ``shovel`` component.

    The source is either a queue or an exchange (with an optional routing
    key); the same goes for the destination.
    """

    vhost: str = Field(exclude=True)
    name: str = Field(exclude=True)
    source_uri: str = Field(alias="src-uri")
    source_protocol: str = Field(default="amqp091", alias="src-protocol")
    source_queue: Optional[str] = Field(default=None, alias="src-queue")
    source_exchange: Optional[str] = Field(default=None, alias="src-exchange")
    source_exchange_key: Optional[str] = Field(default=None, alias="src-exchange-key")
    source_delete_after: Optional[Union[int, str]] = Field(default=None, alias="src-delete-after")
    destination_uri: str = Field(alias="dest-uri")
    destination_protocol: str = Field(default="amqp091", alias="dest-protocol")
    destination_queue: Optional[str] = Field(default=None, alias="dest-queue")
    destination_exchange: Optional[str] = Field(default=None, alias="dest-exchange")
    destination_exchange_key: Optional[str] = Field(default=None, alias="dest-exchange-key")
    ack_mode: AckModeField = Field(default=AckMode.ON_CONFIRM, alias="ack-mode")
    reconnect_delay: Optional[int] = Field(default=None, alias="reconnect-delay")

    @model_validator(mode="after")
    def _one_source(self) -> ShovelParams:
        if (self.source_queue is None) == (self.source_exchange is None):
            raise ValueError("exactly one of 'source_queue' and 'source_exchange' must be set")
        return self

    def encode(self) -> dict[str, Any]:
        return {"value": super().encode()}


class FederationUpstreamParams(Params):
    """A federation upstream, declared as a ``federation-upstream`` runtime parameter."""

    vhost: str = Field(exclude=True)
    name: str = Field(exclude=True)
    uri: Union[str, list[str]]
    ack_mode: AckModeField = Field(default=AckMode.ON_CONFIRM, alias="ack-mode")
    prefetch_count: Optional[int] = Field(default=None, alias="prefetch-count")
    reconnect_delay: Optional[int] = Field(default=None, alias="reconnect-delay")
    trust_user_id: Optional[bool] = Field(default=None, alias="trust-user-id")
    # exchange federation
    exchange: Optional[str] = None
    max_hops: Optional[int] = Field(default=None, alias="max-hops")
    expires: Optional[int] = None
    message_ttl: Optional[int] = Field(default=None, alias="message-ttl")
    # queue federation
    queue: Optional[str] = None
    consumer_tag: Optional[str] = Field(default=None, alias="consumer-tag")

    def encode(self) -> dict[str, Any]:
        return {"value": super().encode()}


# --- Messages ---


class PublishParams(Params):
    routing_key: str = ""
    payload: str
    payload_encoding: str = "string"
    properties: ArgumentsMap = Field(default_factory=ArgumentsMap)

    @field_validator("payload_encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        if value not in ("string", "base64"):
            raise ValueError("payload_encoding must be 'string' or 'base64'")
        return value


class GetMessagesParams(Params):
    """Options of the queue ``get`` action.

    This is a diagnostic tool: with any ``ack`` mode it consumes messages,
    and with the ``reject_requeue_*`` ones it redelivers them.
    """

    count: int = Field(default=1, ge=1)
    ackmode: GetAckModeField = GetAckMode.ACK_REQUEUE_TRUE
    encoding: str = "auto"
    truncate: Optional[int] = Field(default=None, ge=0)
