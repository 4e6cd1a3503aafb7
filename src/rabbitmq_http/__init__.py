"""rabbitmq_http -- a typed client for the RabbitMQ HTTP management API.

The package wraps the management plugin's REST API (``/api/...``) in typed
resource models, with a blocking and an asynchronous client that share
request construction and response interpretation, plus a small operator
CLI, ``rabbitmq-http``.

Typical use::

    from rabbitmq_http.client import Client
    from rabbitmq_http.models import QueueParams

    with Client("http://localhost:15672/api", "guest", "guest") as rc:
        rc.declare_queue("/", QueueParams.quorum("orders"))

Modules:
    client: :class:`~rabbitmq_http.client.Client` and
        :class:`~rabbitmq_http.client.AsyncClient`.
    models: Resources, write-side parameters, paging and definitions.
    descriptors: Endpoint templates for every resource type.
    exceptions: Exception hierarchy with exit-code mapping.
    config: XDG-aware connection profiles.
    password_hashing: Salted password hashes for user definitions.
    app: Typer application and CLI entry point.
"""

__version__ = "0.9.0"
