"""Virtual host commands."""

from __future__ import annotations

from typing import Optional

import typer

from rabbitmq_http.commands.common import broker_errors, confirm, open_client
from rabbitmq_http.output import print_resources, success

vhosts_app = typer.Typer(no_args_is_help=True)

_COLUMNS = ("name", "description", "default_queue_type", "tags", "messages")


@vhosts_app.command("list")
def vhosts_list(ctx: typer.Context) -> None:
    """List virtual hosts."""
    with open_client(ctx) as client, broker_errors():
        vhosts = client.list_vhosts()
    print_resources(vhosts, _COLUMNS, title="Virtual hosts")


@vhosts_app.command("declare")
def vhosts_declare(
    ctx: typer.Context,
    name: str = typer.Argument(help="Virtual host name."),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    tags: Optional[list[str]] = typer.Option(None, "--tag", "-t", help="Tag (repeatable)."),
    default_queue_type: Optional[str] = typer.Option(
        None, "--default-queue-type", help="classic, quorum or stream."
    ),
    tracing: bool = typer.Option(False, "--tracing", help="Enable message tracing."),
) -> None:
    """Create a virtual host, or update an existing one.

    Example::

        rabbitmq-http vhosts declare events --default-queue-type quorum --tag prod
    """
    from rabbitmq_http.models import VirtualHostParams

    params = VirtualHostParams(
        name=name,
        description=description,
        tags=tags or None,
        default_queue_type=default_queue_type,
        tracing=tracing,
    )
    with open_client(ctx) as client, broker_errors():
        client.create_vhost(params)
    success(f'Virtual host "{name}" declared.')


@vhosts_app.command("delete")
def vhosts_delete(
    ctx: typer.Context,
    name: str = typer.Argument(help="Virtual host name."),
    idempotently: bool = typer.Option(
        False, "--idempotently", help="Succeed if the virtual host does not exist."
    ),
) -> None:
    """Delete a virtual host and everything in it."""
    confirm(ctx, f'Delete virtual host "{name}" and all of its queues, exchanges and bindings?')
    with open_client(ctx) as client, broker_errors():
        client.delete_vhost(name, idempotently=idempotently)
    success(f'Virtual host "{name}" deleted.')
