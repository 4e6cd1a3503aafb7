"""Sub-commands of the ``rabbitmq-http`` CLI.

* :mod:`~rabbitmq_http.commands.profile` -- manage saved connection profiles.
* :mod:`~rabbitmq_http.commands.overview` -- cluster overview.
* :mod:`~rabbitmq_http.commands.vhosts` -- list, declare and delete virtual hosts.
* :mod:`~rabbitmq_http.commands.queues` -- list, declare, delete and purge queues.
* :mod:`~rabbitmq_http.commands.exchanges` -- list exchanges.
* :mod:`~rabbitmq_http.commands.definitions` -- export and import definitions.
* :mod:`~rabbitmq_http.commands.health` -- health checks.

Each module exports a :class:`typer.Typer` sub-application, except
``overview`` which is a single command registered on the root app.
Broker access goes through :func:`~rabbitmq_http.commands.common.open_client`.
"""
