"""Tests for the shared value types: ArgumentsMap, enum fallbacks, tolerant decoding."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from rabbitmq_http.models import (
    ArgumentsMap,
    ExchangeType,
    QueueType,
    Unrecognized,
    UserTag,
)
from rabbitmq_http.models.common import loads_json, parse_enum, render_json
from rabbitmq_http.models.resources import ExchangeInfo, QueueInfo, User, VirtualHost


# ---------------------------------------------------------------------------
# ArgumentsMap
# ---------------------------------------------------------------------------


class TestArgumentsMap:
    def test_preserves_insertion_order(self) -> None:
        args = ArgumentsMap({"x-queue-type": "quorum", "x-max-length": 1000, "x-dead-letter-exchange": "dlx"})
        assert list(args) == ["x-queue-type", "x-max-length", "x-dead-letter-exchange"]

    def test_encoding_is_byte_identical_across_calls(self) -> None:
        args = ArgumentsMap({"x-max-length": 1000, "x-message-ttl": 60000, "x-overflow": "reject-publish"})
        first = args.to_json()
        assert first == b'{"x-max-length":1000,"x-message-ttl":60000,"x-overflow":"reject-publish"}'
        assert args.to_json() == first
        assert ArgumentsMap.model_validate(json.loads(first)).to_json() == first

    def test_integers_stay_integers(self) -> None:
        args = ArgumentsMap.model_validate(json.loads('{"x-max-length": 1000, "ratio": 0.5}'))
        assert args["x-max-length"] == 1000
        assert isinstance(args["x-max-length"], int)
        assert args["ratio"] == 0.5

    def test_empty_list_decodes_as_empty_map(self) -> None:
        assert len(ArgumentsMap.model_validate([])) == 0

    def test_mapping_access(self) -> None:
        args = ArgumentsMap({"a": 1})
        assert "a" in args
        assert "b" not in args
        assert args.get("b", 2) == 2
        assert dict(args.items()) == {"a": 1}

    def test_to_dict_is_a_copy(self) -> None:
        args = ArgumentsMap({"nested": {"k": [1, 2]}})
        copied = args.to_dict()
        copied["nested"]["k"].append(3)
        assert args["nested"] == {"k": [1, 2]}

    def test_merged_adds_and_overrides(self) -> None:
        base = ArgumentsMap({"x-queue-type": "classic", "x-max-length": 10})
        merged = base.merged({"x-max-length": 20, "x-overflow": "drop-head"})
        assert merged.to_dict() == {"x-queue-type": "classic", "x-max-length": 20, "x-overflow": "drop-head"}
        assert base["x-max-length"] == 10

    def test_queue_type_accessor(self) -> None:
        assert ArgumentsMap({"x-queue-type": "quorum"}).queue_type is QueueType.QUORUM
        assert ArgumentsMap({"x-queue-type": "delayed"}).queue_type == Unrecognized("delayed")
        assert ArgumentsMap({}).queue_type is None

    def test_decimal_digits_are_kept(self) -> None:
        document = '{"x-ratio": 0.10000000000000000555, "x-big": 1.0e400, "x-exact": 1.50}'
        args = ArgumentsMap.model_validate(loads_json(document))
        assert args["x-ratio"] == Decimal("0.10000000000000000555")
        assert args.to_json() == b'{"x-ratio":0.10000000000000000555,"x-big":1.0E+400,"x-exact":1.50}'

    @pytest.mark.parametrize("number", [float("inf"), float("nan"), Decimal("NaN")])
    def test_non_finite_numbers_are_rejected(self, number: object) -> None:
        with pytest.raises(ValidationError):
            ArgumentsMap({"x-ratio": number})

    def test_non_json_values_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ArgumentsMap({"x-set": {1, 2}})


class TestJsonText:
    @pytest.mark.parametrize("text", ["NaN", "Infinity", "-Infinity", '{"a": NaN}'])
    def test_loads_rejects_non_finite_constants(self, text: str) -> None:
        with pytest.raises(ValueError):
            loads_json(text)

    def test_loads_keeps_integers_exact(self) -> None:
        assert loads_json("123456789012345678901234567890") == 123456789012345678901234567890

    def test_indented_rendering_matches_json_module(self) -> None:
        value = {"a": [1, {"b": None}, []], "c": {}, "d": "zażółć", "e": True}
        assert render_json(value, indent=2) == json.dumps(value, indent=2, ensure_ascii=False)

    def test_default_converts_unknown_values(self) -> None:
        assert render_json({"when": object}, default=lambda _: "later") == '{"when":"later"}'
        with pytest.raises(TypeError):
            render_json({"when": object})


# ---------------------------------------------------------------------------
# Enum-like fields
# ---------------------------------------------------------------------------


class TestEnumFallback:
    def test_known_value(self) -> None:
        assert parse_enum(ExchangeType, "topic") is ExchangeType.TOPIC

    def test_unknown_value_is_kept_verbatim(self) -> None:
        value = parse_enum(ExchangeType, "x-custom-plugin")
        assert isinstance(value, Unrecognized)
        assert value.value == "x-custom-plugin"
        assert str(value) == "x-custom-plugin"

    def test_non_string_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse_enum(ExchangeType, 3)

    def test_unrecognized_exchange_type_round_trips(self) -> None:
        data = {
            "name": "delayed",
            "vhost": "/",
            "type": "x-delayed-thing",
            "durable": True,
            "auto_delete": False,
            "arguments": {"x-delayed-type": "direct"},
        }
        exchange = ExchangeInfo.decode(data)
        assert exchange.exchange_type == Unrecognized("x-delayed-thing")
        assert exchange.encode()["type"] == "x-delayed-thing"

    def test_user_tags_from_comma_separated_string(self) -> None:
        user = User.decode({"name": "ops", "tags": "administrator, monitoring,custom"})
        assert user.tags == [UserTag.ADMINISTRATOR, UserTag.MONITORING, Unrecognized("custom")]


# ---------------------------------------------------------------------------
# Tolerant decoding
# ---------------------------------------------------------------------------


def _queue(**overrides: object) -> dict:
    data = {"name": "orders", "vhost": "/", "durable": True, "auto_delete": False}
    data.update(overrides)
    return data


class TestTolerantDecoding:
    def test_absent_and_null_optional_fields_are_equivalent(self) -> None:
        absent = QueueInfo.decode(_queue())
        null = QueueInfo.decode(_queue(node=None, consumers=None, policy=None))
        assert absent.node is None and null.node is None
        assert absent.consumer_count == null.consumer_count == 0

    def test_malformed_optional_field_moves_to_unrecognized(self) -> None:
        queue = QueueInfo.decode(_queue(consumers="lots", messages=7))
        assert queue.consumer_count == 0
        assert queue.message_count == 7
        assert queue.unrecognized == {"consumers": "lots"}

    def test_unrecognized_value_is_written_back(self) -> None:
        queue = QueueInfo.decode(_queue(consumers="lots"))
        assert queue.encode()["consumers"] == "lots"

    def test_wire_key_named_unrecognized_is_an_ordinary_extra(self) -> None:
        queue = QueueInfo.decode(_queue(unrecognized={"from": "plugin"}, consumers="lots"))
        assert queue.unrecognized == {"consumers": "lots"}
        assert queue.model_extra == {"unrecognized": {"from": "plugin"}}
        encoded = queue.encode()
        assert encoded["unrecognized"] == {"from": "plugin"}
        assert encoded["consumers"] == "lots"

    def test_unknown_keys_are_preserved(self) -> None:
        queue = QueueInfo.decode(_queue(garbage_collection={"min_heap_size": 233}))
        assert queue.model_extra == {"garbage_collection": {"min_heap_size": 233}}
        assert queue.encode()["garbage_collection"] == {"min_heap_size": 233}

    def test_missing_required_field_fails(self) -> None:
        data = _queue()
        del data["vhost"]
        with pytest.raises(ValidationError) as exc_info:
            QueueInfo.decode(data)
        assert exc_info.value.errors()[0]["loc"] == ("vhost",)

    def test_malformed_required_field_fails(self) -> None:
        with pytest.raises(ValidationError):
            QueueInfo.decode(_queue(durable="sometimes"))

    def test_empty_list_for_an_empty_object(self) -> None:
        vhost = VirtualHost.decode({"name": "/", "metadata": []})
        assert vhost.metadata is not None
        assert vhost.metadata.tags == []

    def test_arguments_decode_with_exact_types(self) -> None:
        queue = QueueInfo.decode(
            _queue(type="quorum", arguments={"x-queue-type": "quorum", "x-max-length": 1000})
        )
        assert queue.queue_type is QueueType.QUORUM
        assert queue.arguments["x-max-length"] == 1000
        assert isinstance(queue.arguments["x-max-length"], int)
        assert queue.arguments.queue_type is QueueType.QUORUM

    def test_declared_type_falls_back_to_arguments(self) -> None:
        queue = QueueInfo.decode(_queue(arguments={"x-queue-type": "stream"}))
        assert queue.queue_type is None
        assert queue.declared_type is QueueType.STREAM

    def test_models_are_frozen(self) -> None:
        queue = QueueInfo.decode(_queue())
        with pytest.raises(ValidationError):
            queue.name = "other"  # type: ignore[misc]
