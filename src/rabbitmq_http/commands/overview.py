"""Overview command -- a one-screen summary of the cluster."""

from __future__ import annotations

import typer

from rabbitmq_http.commands.common import broker_errors, open_client
from rabbitmq_http.output import OutputFormat, format_response, get_output


def overview_command(ctx: typer.Context) -> None:
    """Show the cluster's version, object totals and queued messages.

    With ``--json`` the complete overview document is printed.

    Example::

        rabbitmq-http overview
        rabbitmq-http --json overview | jq .object_totals
    """
    with open_client(ctx) as client, broker_errors():
        overview = client.get_overview()

    if get_output().format == OutputFormat.JSON:
        format_response(overview)
        return

    totals = overview.object_totals
    summary = {
        "cluster_name": overview.cluster_name,
        "node": overview.node,
        "rabbitmq_version": overview.rabbitmq_version,
        "erlang_version": overview.erlang_version,
        "connections": totals.connections,
        "channels": totals.channels,
        "queues": totals.queues,
        "exchanges": totals.exchanges,
        "consumers": totals.consumers,
    }
    if overview.queue_totals is not None:
        summary["messages"] = overview.queue_totals.messages
    format_response(summary)
