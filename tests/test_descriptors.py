"""Tests for the per-resource endpoint table."""

from __future__ import annotations

import pytest

from rabbitmq_http import descriptors as d
from rabbitmq_http.models.resources import QueueInfo, VirtualHost


@pytest.mark.parametrize("descriptor", list(d.DESCRIPTORS.values()), ids=lambda desc: desc.name)
def test_singleton_placeholders_match_identity(descriptor: d.ResourceDescriptor) -> None:
    if descriptor.singleton is not None:
        assert tuple(d.placeholders(descriptor.singleton)) == descriptor.identity


@pytest.mark.parametrize("descriptor", list(d.DESCRIPTORS.values()), ids=lambda desc: desc.name)
def test_templates_are_relative_paths(descriptor: d.ResourceDescriptor) -> None:
    assert descriptor.templates()
    for template in descriptor.templates():
        assert template.startswith("/")
        assert not template.endswith("/")
        assert "//" not in template


def test_placeholders_in_order() -> None:
    assert d.placeholders("/bindings/{vhost}/e/{source}/{kind}/{destination}") == [
        "vhost", "source", "kind", "destination",
    ]
    assert d.placeholders("/overview") == []


def test_queue_descriptor() -> None:
    assert d.QUEUE.singleton == "/queues/{vhost}/{name}"
    assert d.QUEUE.action("purge") == "/queues/{vhost}/{name}/contents"
    assert "name" in d.QUEUE.required_fields
    assert "vhost" in d.QUEUE.required_fields
    assert "message_count" in d.QUEUE.optional_fields
    assert "unrecognized" not in d.QUEUE.optional_fields


def test_unknown_action() -> None:
    with pytest.raises(KeyError, match="queue has no 'teleport' endpoint"):
        d.QUEUE.action("teleport")


def test_descriptor_for() -> None:
    assert d.descriptor_for(QueueInfo) is d.QUEUE
    assert d.descriptor_for(VirtualHost) is d.VIRTUAL_HOST


def test_descriptor_for_unknown_model() -> None:
    from rabbitmq_http.models.common import Resource

    class Custom(Resource):
        pass

    with pytest.raises(KeyError, match="no descriptor for Custom"):
        d.descriptor_for(Custom)


def test_names_are_unique() -> None:
    names = [descriptor.name for descriptor in d.DESCRIPTORS.values()]
    assert len(names) == len(set(names)) == 32
