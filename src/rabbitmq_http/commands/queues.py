"""Queue commands -- list, declare, delete and purge queues.

Provides the ``rabbitmq-http queues`` sub-command group. Listings can be
paged (``--page``/``--page-size``) and filtered by name; without
``--page`` every queue is listed in one request.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from rabbitmq_http.commands.common import broker_errors, confirm, open_client
from rabbitmq_http.models.common import loads_json
from rabbitmq_http.output import error, info, print_resources, success

queues_app = typer.Typer(no_args_is_help=True)

_COLUMNS = ("vhost", "name", "queue_type", "durable", "message_count", "consumer_count", "state")


def parse_arguments(pairs: Optional[list[str]]) -> dict[str, Any]:
    """Turn ``key=value`` pairs into queue arguments.

    Values that parse as JSON keep their JSON type, so ``x-max-length=1000``
    becomes an integer; anything else is kept as a string.
    """
    arguments: dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            error(f"Invalid argument {pair!r}: expected key=value")
            raise typer.Exit(code=2)
        try:
            arguments[key] = loads_json(raw)
        except ValueError:
            arguments[key] = raw
    return arguments


@queues_app.command("list")
def queues_list(
    ctx: typer.Context,
    vhost: Optional[str] = typer.Option(None, "--vhost", "-V", help="Only this virtual host."),
    page: Optional[int] = typer.Option(None, "--page", min=1, help="Fetch a single page."),
    page_size: int = typer.Option(100, "--page-size", min=1, max=500),
    name: Optional[str] = typer.Option(None, "--name", help="Name filter (paged listings)."),
    use_regex: bool = typer.Option(False, "--regex", help="Treat --name as a regular expression."),
) -> None:
    """List queues and streams.

    Example::

        rabbitmq-http queues list --vhost / --page 2 --page-size 50
    """
    from rabbitmq_http.models import PageRequest

    with open_client(ctx) as client, broker_errors():
        if page is None and name is None:
            queues = client.list_queues(vhost)
        else:
            request = PageRequest(page=page or 1, page_size=page_size, name=name, use_regex=use_regex)
            result = client.list_queues_page(vhost, request)
            queues = result.items
            info(f"Page {result.page} of {result.page_count} ({result.filtered_count} matching queues)")
    print_resources(queues, _COLUMNS, title="Queues")


@queues_app.command("declare")
def queues_declare(
    ctx: typer.Context,
    name: str = typer.Argument(help="Queue name."),
    vhost: str = typer.Option("/", "--vhost", "-V"),
    queue_type: str = typer.Option("classic", "--type", "-t", help="classic, quorum or stream."),
    durable: bool = typer.Option(True, "--durable/--transient"),
    auto_delete: bool = typer.Option(False, "--auto-delete"),
    arguments: Optional[list[str]] = typer.Option(
        None, "--argument", "-a", help="Queue argument as key=value (repeatable)."
    ),
) -> None:
    """Declare a queue.

    Example::

        rabbitmq-http queues declare orders --type quorum -a x-max-length=1000
    """
    from rabbitmq_http.models import QueueParams

    params = QueueParams.new(
        name,
        queue_type,
        durable=durable,
        auto_delete=auto_delete,
        arguments=parse_arguments(arguments),
    )
    with open_client(ctx) as client, broker_errors():
        client.declare_queue(vhost, params)
    success(f'Queue "{name}" declared in virtual host "{vhost}".')


@queues_app.command("delete")
def queues_delete(
    ctx: typer.Context,
    name: str = typer.Argument(help="Queue name."),
    vhost: str = typer.Option("/", "--vhost", "-V"),
    if_empty: bool = typer.Option(False, "--if-empty", help="Only if it has no messages."),
    if_unused: bool = typer.Option(False, "--if-unused", help="Only if it has no consumers."),
    idempotently: bool = typer.Option(False, "--idempotently", help="Succeed if it does not exist."),
) -> None:
    """Delete a queue."""
    confirm(ctx, f'Delete queue "{name}" in virtual host "{vhost}"?')
    with open_client(ctx) as client, broker_errors():
        client.delete_queue(vhost, name, if_empty=if_empty, if_unused=if_unused, idempotently=idempotently)
    success(f'Queue "{name}" deleted.')


@queues_app.command("purge")
def queues_purge(
    ctx: typer.Context,
    name: str = typer.Argument(help="Queue name."),
    vhost: str = typer.Option("/", "--vhost", "-V"),
) -> None:
    """Remove all ready messages from a queue."""
    confirm(ctx, f'Purge all messages from queue "{name}"?')
    with open_client(ctx) as client, broker_errors():
        client.purge_queue(vhost, name)
    success(f'Queue "{name}" purged.')
