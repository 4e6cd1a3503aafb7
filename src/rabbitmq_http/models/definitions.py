"""Definition sets: the schema of a cluster or of one virtual host, as one JSON document.

Exports can be fed back to the import endpoints unchanged. The topology
entries reuse the resource models with the statistics-free shape the
export endpoints produce; inside a virtual host export the ``vhost`` key
is left out, so it is optional here.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field

from rabbitmq_http.models.common import (
    ArgumentsMap,
    BindingDestinationTypeField,
    ExchangeTypeField,
    PolicyTargetField,
    Resource,
    UserTagList,
    dumps_json,
)
from rabbitmq_http.models.resources import (
    GlobalParameter,
    Permissions,
    TopicPermissions,
    VirtualHost,
)


class UserDefinition(Resource):
    name: str
    password_hash: str = ""
    hashing_algorithm: Optional[str] = None
    tags: UserTagList = Field(default_factory=list)
    limits: Optional[ArgumentsMap] = None


class PolicyDefinition(Resource):
    name: str
    vhost: Optional[str] = None
    pattern: str
    apply_to: PolicyTargetField = Field(alias="apply-to")
    priority: int = 0
    definition: ArgumentsMap = Field(default_factory=ArgumentsMap)


class QueueDefinition(Resource):
    name: str
    vhost: Optional[str] = None
    durable: bool = True
    auto_delete: bool = False
    arguments: ArgumentsMap = Field(default_factory=ArgumentsMap)


class ExchangeDefinition(Resource):
    name: str
    vhost: Optional[str] = None
    exchange_type: ExchangeTypeField = Field(alias="type")
    durable: bool = True
    auto_delete: bool = False
    internal: bool = False
    arguments: ArgumentsMap = Field(default_factory=ArgumentsMap)


class BindingDefinition(Resource):
    vhost: Optional[str] = None
    source: str
    destination: str
    destination_type: BindingDestinationTypeField
    routing_key: str = ""
    arguments: ArgumentsMap = Field(default_factory=ArgumentsMap)


class RuntimeParameterDefinition(Resource):
    name: str
    vhost: Optional[str] = None
    component: str
    value: ArgumentsMap = Field(default_factory=ArgumentsMap)


class VirtualHostDefinitionSet(Resource):
    """Definitions of a single virtual host (``GET /api/definitions/{vhost}``)."""

    server_version: Optional[str] = Field(default=None, alias="rabbitmq_version")
    parameters: list[RuntimeParameterDefinition] = Field(default_factory=list)
    policies: list[PolicyDefinition] = Field(default_factory=list)
    queues: list[QueueDefinition] = Field(default_factory=list)
    exchanges: list[ExchangeDefinition] = Field(default_factory=list)
    bindings: list[BindingDefinition] = Field(default_factory=list)

    def to_json(self) -> bytes:
        return dumps_json(self.encode())


class DefinitionSet(VirtualHostDefinitionSet):
    """Definitions of the whole cluster (``GET /api/definitions``)."""

    users: list[UserDefinition] = Field(default_factory=list)
    vhosts: list[VirtualHost] = Field(default_factory=list)
    permissions: list[Permissions] = Field(default_factory=list)
    topic_permissions: list[TopicPermissions] = Field(default_factory=list)
    global_parameters: list[GlobalParameter] = Field(default_factory=list)

    def summary(self) -> dict[str, Any]:
        """Object counts per section, for display."""
        sections = (
            "users", "vhosts", "permissions", "topic_permissions", "parameters",
            "global_parameters", "policies", "queues", "exchanges", "bindings",
        )
        return {section: len(getattr(self, section)) for section in sections}
