"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~rabbitmq_http.exceptions.RabbitMQHttpError` subclass.
Shell wrappers around the ``rabbitmq-http`` command can inspect the exit
code to tell a missing queue from a refused connection without parsing
stderr.

Example::

    $ rabbitmq-http queues delete ghost
    $ echo $?
    4   # EXIT_NOT_FOUND -- the broker answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""A request could not be built from the supplied arguments."""

EXIT_AUTH_FAILURE = 3
"""The broker rejected the credentials (HTTP 401) or the user lacks access (HTTP 403)."""

EXIT_NOT_FOUND = 4
"""The requested resource does not exist (HTTP 404)."""

EXIT_BROKER_ERROR = 5
"""The broker reported a logical failure (conflict, validation, 5xx)."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DECODE_ERROR = 7
"""A successful response did not match the expected resource shape."""
