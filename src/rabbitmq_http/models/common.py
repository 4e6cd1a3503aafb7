"""Shared value types and the tolerant decoding base for broker resources.

The management API is irregular: optional fields are sometimes absent and
sometimes ``null``, empty maps are occasionally rendered as ``[]``, numbers
arrive as numeric strings, and enum-like fields grow new values with every
plugin. This module concentrates the handling of all of that in a few
reusable pieces:

* :class:`WireModel` -- explicit, total :meth:`~WireModel.encode` to the
  JSON shape the write endpoints expect.
* :class:`Resource` -- adds :meth:`~Resource.decode` with a single tolerant
  path for every declared-optional field.
* :class:`ArgumentsMap` -- ordered free-form ``x-arguments`` style maps.
* :class:`Unrecognized` and :func:`known_or_unrecognized` -- closed enums
  with an explicit fallback variant.
"""

from __future__ import annotations

import copy
import enum
import json
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Annotated, Any, Iterator, Optional, TypeVar, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ModelWrapValidatorHandler,
    PlainSerializer,
    PlainValidator,
    PrivateAttr,
    RootModel,
    ValidationError,
    model_validator,
)

E = TypeVar("E", bound=enum.Enum)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON number")


def loads_json(text: Union[str, bytes]) -> Any:
    """Parse a JSON document, keeping every non-integer number as a :class:`~decimal.Decimal`.

    Decimals keep the digits that were received, so ``0.10000000000000000555``
    and ``1.50`` are written back exactly rather than rounded through a binary
    double. ``NaN`` and ``Infinity`` are rejected.

    Raises:
        ValueError: If *text* is not valid JSON (``json.JSONDecodeError`` is a subclass).
    """
    return json.loads(text, parse_float=Decimal, parse_constant=_reject_constant)


def render_json(value: Any, indent: Optional[int] = None, default: Optional[Callable[[Any], Any]] = None) -> str:
    """Serialize *value* as JSON text, preserving mapping order and decimal digits.

    Without *indent* the output is compact (no whitespace). Non-finite
    numbers raise :class:`ValueError`; other unsupported values raise
    :class:`TypeError` unless *default* converts them.
    """
    return _render(value, indent, default, 0)


def _render(value: Any, indent: Optional[int], default: Optional[Callable[[Any], Any]], level: int) -> str:
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"{value} is not a valid JSON number")
        return str(value)
    if isinstance(value, dict):
        pairs = []
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"keys must be str, not {type(key).__name__}")
            separator = ":" if indent is None else ": "
            pairs.append(json.dumps(key, ensure_ascii=False) + separator + _render(item, indent, default, level + 1))
        return _join("{", pairs, "}", indent, level)
    if isinstance(value, (list, tuple)):
        return _join("[", [_render(item, indent, default, level + 1) for item in value], "]", indent, level)
    if value is None or isinstance(value, (str, int, float)):
        return json.dumps(value, ensure_ascii=False, allow_nan=False)
    if default is None:
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
    return _render(default(value), indent, None, level)


def _join(opening: str, items: list[str], closing: str, indent: Optional[int], level: int) -> str:
    if not items:
        return opening + closing
    if indent is None:
        return opening + ",".join(items) + closing
    inner = "\n" + " " * (indent * (level + 1))
    return opening + inner + ("," + inner).join(items) + "\n" + " " * (indent * level) + closing


def dumps_json(value: Any) -> bytes:
    """Serialize *value* as compact UTF-8 JSON, preserving mapping order."""
    return render_json(value).encode("utf-8")


def _check_json_data(value: Any) -> Any:
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"{value} is not a valid JSON number")
        return value
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"{value} is not a valid JSON number")
        return value
    if isinstance(value, (list, tuple)):
        return [_check_json_data(item) for item in value]
    if isinstance(value, Mapping):
        checked = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise ValueError(f"object keys must be strings, got {type(key).__name__}")
            checked[key] = _check_json_data(item)
        return checked
    raise ValueError(f"{type(value).__name__} is not a JSON value")


JsonData = Annotated[Any, PlainValidator(_check_json_data)]
"""Any JSON value; non-integer numbers may be :class:`~decimal.Decimal` to keep their digits."""


# --- Enum-like fields ---


@dataclass(frozen=True)
class Unrecognized:
    """A wire value outside the known variants of an enum-like field.

    Kept verbatim so that it is written back unchanged on encode.

    Example::

        match exchange.exchange_type:
            case ExchangeType.TOPIC:
                ...
            case Unrecognized(value=other):
                print(f"plugin exchange type {other}")
    """

    value: str

    def __str__(self) -> str:
        return self.value


def parse_enum(enum_cls: type[E], value: Any) -> Union[E, Unrecognized]:
    """Map a wire string onto *enum_cls*, falling back to :class:`Unrecognized`.

    Raises:
        ValueError: If *value* is not a string (or already a variant).
    """
    if isinstance(value, (enum_cls, Unrecognized)):
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected a string for {enum_cls.__name__}, got {type(value).__name__}")
    try:
        return enum_cls(value)
    except ValueError:
        return Unrecognized(value)


def _enum_wire_value(value: Union[enum.Enum, Unrecognized]) -> str:
    return value.value


def known_or_unrecognized(enum_cls: type[E]) -> Any:
    """Build the pydantic field type for an enum-like wire string."""
    return Annotated[
        Union[enum_cls, Unrecognized],
        PlainValidator(lambda value: parse_enum(enum_cls, value)),
        PlainSerializer(_enum_wire_value, return_type=str),
    ]


class ExchangeType(str, enum.Enum):
    """Exchange types shipped with RabbitMQ and its tier-1 plugins."""

    FANOUT = "fanout"
    TOPIC = "topic"
    DIRECT = "direct"
    HEADERS = "headers"
    CONSISTENT_HASHING = "x-consistent-hash"
    MODULUS_HASH = "x-modulus-hash"
    RANDOM = "x-random"
    LOCAL_RANDOM = "x-local-random"
    JMS_TOPIC = "x-jms-topic"
    RECENT_HISTORY = "x-recent-history"
    DELAYED_MESSAGE = "x-delayed-message"
    MESSAGE_DEDUPLICATION = "x-message-deduplication"


class QueueType(str, enum.Enum):
    CLASSIC = "classic"
    QUORUM = "quorum"
    STREAM = "stream"


class PolicyTarget(str, enum.Enum):
    """What kind of objects a policy applies to (the ``apply-to`` key)."""

    QUEUES = "queues"
    CLASSIC_QUEUES = "classic_queues"
    QUORUM_QUEUES = "quorum_queues"
    STREAMS = "streams"
    EXCHANGES = "exchanges"
    ALL = "all"


class BindingDestinationType(str, enum.Enum):
    QUEUE = "queue"
    EXCHANGE = "exchange"

    @property
    def path_abbreviation(self) -> str:
        """The single-letter segment used in binding endpoint paths."""
        return "q" if self is BindingDestinationType.QUEUE else "e"


class UserTag(str, enum.Enum):
    """User tags, which scope what a user may do in the management UI and API."""

    ADMINISTRATOR = "administrator"
    MONITORING = "monitoring"
    POLICYMAKER = "policymaker"
    MANAGEMENT = "management"
    IMPERSONATOR = "impersonator"
    NONE = "none"


class SupportedProtocol(str, enum.Enum):
    """Listener protocols reported by nodes."""

    CLUSTERING = "clustering"
    AMQP = "amqp"
    AMQP_WITH_TLS = "amqp/ssl"
    STREAM = "stream"
    STREAM_WITH_TLS = "stream/ssl"
    MQTT = "mqtt"
    MQTT_WITH_TLS = "mqtt/ssl"
    STOMP = "stomp"
    STOMP_WITH_TLS = "stomp/ssl"
    MQTT_OVER_WEBSOCKETS = "http/web-mqtt"
    MQTT_OVER_WEBSOCKETS_WITH_TLS = "https/web-mqtt"
    STOMP_OVER_WEBSOCKETS = "http/web-stomp"
    STOMP_OVER_WEBSOCKETS_WITH_TLS = "https/web-stomp"
    PROMETHEUS = "http/prometheus"
    PROMETHEUS_WITH_TLS = "https/prometheus"
    HTTP = "http"
    HTTP_WITH_TLS = "https"


class VirtualHostLimitTarget(str, enum.Enum):
    MAX_CONNECTIONS = "max-connections"
    MAX_QUEUES = "max-queues"


class UserLimitTarget(str, enum.Enum):
    MAX_CONNECTIONS = "max-connections"
    MAX_CHANNELS = "max-channels"


class ShovelType(str, enum.Enum):
    DYNAMIC = "dynamic"
    STATIC = "static"


class ShovelState(str, enum.Enum):
    STARTING = "starting"
    RUNNING = "running"
    TERMINATED = "terminated"


class FederationType(str, enum.Enum):
    EXCHANGE = "exchange"
    QUEUE = "queue"


class FederationLinkStatus(str, enum.Enum):
    STARTING = "starting"
    RUNNING = "running"
    ERROR = "error"
    SHUTDOWN = "shutdown"


class AckMode(str, enum.Enum):
    """How shovels and federation links acknowledge transferred messages."""

    ON_CONFIRM = "on-confirm"
    ON_PUBLISH = "on-publish"
    NO_ACK = "no-ack"


class GetAckMode(str, enum.Enum):
    """What happens to messages fetched with the ``get`` queue action."""

    ACK_REQUEUE_TRUE = "ack_requeue_true"
    ACK_REQUEUE_FALSE = "ack_requeue_false"
    REJECT_REQUEUE_TRUE = "reject_requeue_true"
    REJECT_REQUEUE_FALSE = "reject_requeue_false"


ExchangeTypeField = known_or_unrecognized(ExchangeType)
QueueTypeField = known_or_unrecognized(QueueType)
PolicyTargetField = known_or_unrecognized(PolicyTarget)
BindingDestinationTypeField = known_or_unrecognized(BindingDestinationType)
UserTagField = known_or_unrecognized(UserTag)
SupportedProtocolField = known_or_unrecognized(SupportedProtocol)
ShovelTypeField = known_or_unrecognized(ShovelType)
ShovelStateField = known_or_unrecognized(ShovelState)
FederationTypeField = known_or_unrecognized(FederationType)
FederationLinkStatusField = known_or_unrecognized(FederationLinkStatus)
AckModeField = known_or_unrecognized(AckMode)
GetAckModeField = known_or_unrecognized(GetAckMode)


# --- Loosely typed scalars ---


def _number_from_string(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            raise ValueError(f"not a numeric string: {value!r}") from None
    return value


def _split_tags(value: Any) -> Any:
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    return value


NumberFromString = Annotated[int, BeforeValidator(_number_from_string)]
"""An integer the API emits either as a JSON number or as a numeric string."""

TagList = Annotated[list[str], BeforeValidator(_split_tags)]
"""Tags rendered either as a JSON array or as a comma-separated string."""

UserTagList = Annotated[list[UserTagField], BeforeValidator(_split_tags)]

Timestamp = NumberFromString
"""Milliseconds since the Unix epoch."""


# --- Arguments map ---


class ArgumentsMap(RootModel[dict[str, JsonData]]):
    """Ordered free-form configuration map (``x-arguments``, policy definitions, ...).

    Values are arbitrary JSON; insertion order and numbers are kept exactly
    as received (see :func:`loads_json`). An empty JSON array is accepted as
    an empty map because some endpoints render empty Erlang proplists that way.

    Example::

        args = ArgumentsMap({"x-max-length": 1000, "x-queue-type": "quorum"})
        assert args["x-max-length"] == 1000
        assert args.queue_type is QueueType.QUORUM
    """

    model_config = ConfigDict(frozen=True)

    root: dict[str, JsonData] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _empty_sequence_is_empty_map(cls, data: Any) -> Any:
        if isinstance(data, list) and not data:
            return {}
        if isinstance(data, ArgumentsMap):
            return copy.deepcopy(data.root)
        return data

    def __getitem__(self, key: str) -> Any:
        return self.root[key]

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __contains__(self, key: object) -> bool:
        return key in self.root

    def get(self, key: str, default: Any = None) -> Any:
        return self.root.get(key, default)

    def keys(self):  # noqa: ANN201
        return self.root.keys()

    def values(self):  # noqa: ANN201
        return self.root.values()

    def items(self):  # noqa: ANN201
        return self.root.items()

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the underlying mapping."""
        return copy.deepcopy(self.root)

    def to_json(self) -> bytes:
        """Serialize to compact JSON; identical maps yield identical bytes."""
        return dumps_json(self.root)

    def merged(self, other: Optional[Mapping[str, Any]]) -> ArgumentsMap:
        """Return a new map with *other*'s keys added after (or over) this map's."""
        combined = self.to_dict()
        combined.update(copy.deepcopy(dict(other or {})))
        return ArgumentsMap(combined)

    @property
    def queue_type(self) -> Union[QueueType, Unrecognized, None]:
        """The ``x-queue-type`` argument, decoded."""
        value = self.root.get("x-queue-type")
        if value is None:
            return None
        return parse_enum(QueueType, value if isinstance(value, str) else str(value))


Mapping.register(ArgumentsMap)


# --- Encode / decode bases ---


def _encode_value(value: Any) -> Any:
    if isinstance(value, WireModel):
        return value.encode()
    if isinstance(value, ArgumentsMap):
        return value.to_dict()
    if isinstance(value, (enum.Enum, Unrecognized)):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_encode_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _encode_value(item) for key, item in value.items()}
    return copy.deepcopy(value)


class WireModel(BaseModel):
    """A pydantic model with an explicit encode to the broker's JSON shape.

    :meth:`encode` writes wire names (aliases), leaves out fields whose
    value is ``None`` or that are marked ``exclude=True`` (path identity),
    and re-emits preserved extra keys.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def encode(self) -> dict[str, Any]:
        """Return the JSON-ready representation of this value."""
        data: dict[str, Any] = {}
        for name, info in type(self).model_fields.items():
            if info.exclude:
                continue
            value = getattr(self, name)
            if value is None:
                continue
            data[info.alias or name] = _encode_value(value)
        for key, value in (self.model_extra or {}).items():
            data.setdefault(key, _encode_value(value))
        return data


R = TypeVar("R", bound="Resource")


class Resource(WireModel):
    """Base class for every decoded broker resource.

    Decoding is tolerant of the API's irregularities:

    * an optional field that is absent, ``null``, or well-typed maps to the
      same "absent" state (its default);
    * an optional field holding a value that fails validation is moved,
      verbatim, into :attr:`unrecognized` and takes its default;
    * unknown keys are kept as pydantic extras.

    Only a missing or malformed *required* field fails decoding, with a
    :class:`pydantic.ValidationError` naming the field.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    # private, so a wire key named "unrecognized" stays an ordinary extra
    _unrecognized: dict[str, Any] = PrivateAttr(default_factory=dict)

    @property
    def unrecognized(self) -> dict[str, Any]:
        """Optional-field values that failed validation, keyed by wire name."""
        return self._unrecognized

    @classmethod
    def _optional_keys(cls) -> dict[str, str]:
        keys: dict[str, str] = {}
        for name, info in cls.model_fields.items():
            if info.is_required():
                continue
            keys[name] = name
            if info.alias:
                keys[info.alias] = name
        return keys

    @model_validator(mode="wrap")
    @classmethod
    def _tolerate_optional_fields(cls, data: Any, handler: ModelWrapValidatorHandler[Any]) -> Any:
        if isinstance(data, list) and not data:
            data = {}
        if not isinstance(data, dict):
            return handler(data)

        optional = cls._optional_keys()
        cleaned = {
            key: value
            for key, value in data.items()
            if not (value is None and key in optional)
        }
        try:
            return handler(cleaned)
        except ValidationError as exc:
            offending = {err["loc"][0] for err in exc.errors() if err["loc"]}
            if not offending or any(key not in optional for key in offending):
                raise
            fields = {optional[key] for key in offending}
            raw = {}
            for key in [k for k in cleaned if optional.get(k) in fields]:
                raw[key] = cleaned.pop(key)
            instance = handler(cleaned)
            instance._unrecognized = raw
            return instance

    @classmethod
    def decode(cls: type[R], data: Any) -> R:
        """Decode a JSON-like value into this resource type."""
        return cls.model_validate(data)

    def encode(self) -> dict[str, Any]:
        data = super().encode()
        optional = type(self)._optional_keys()
        for key, value in self.unrecognized.items():
            # the field holds its default only because this value was rejected
            name = optional.get(key)
            if name is not None:
                info = type(self).model_fields[name]
                data.pop(info.alias or name, None)
            data[key] = copy.deepcopy(value)
        return data
