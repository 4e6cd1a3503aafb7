"""Exchange commands."""

from __future__ import annotations

from typing import Optional

import typer

from rabbitmq_http.commands.common import broker_errors, open_client
from rabbitmq_http.output import print_resources

exchanges_app = typer.Typer(no_args_is_help=True)


@exchanges_app.command("list")
def exchanges_list(
    ctx: typer.Context,
    vhost: Optional[str] = typer.Option(None, "--vhost", "-V", help="Only this virtual host."),
) -> None:
    """List exchanges, including the default and ``amq.*`` ones."""
    with open_client(ctx) as client, broker_errors():
        exchanges = client.list_exchanges(vhost)
    print_resources(
        exchanges,
        ("vhost", "name", "exchange_type", "durable", "auto_delete", "internal"),
        title="Exchanges",
    )
