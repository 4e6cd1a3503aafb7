"""Definitions commands -- export and import the broker's topology.

Exported definitions (users, virtual hosts, permissions, policies,
queues, exchanges, bindings, parameters) are JSON documents that can be
imported into another cluster to recreate the same topology.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from rabbitmq_http.commands.common import broker_errors, open_client
from rabbitmq_http.models.common import loads_json, render_json
from rabbitmq_http.output import error, format_response, get_output, info, success

definitions_app = typer.Typer(no_args_is_help=True)


@definitions_app.command("export")
def definitions_export(
    ctx: typer.Context,
    vhost: Optional[str] = typer.Option(None, "--vhost", "-V", help="Only this virtual host."),
    output_file: Optional[Path] = typer.Option(None, "--file", "-f", help="Write to a file instead of stdout."),
) -> None:
    """Export definitions as JSON.

    Example::

        rabbitmq-http definitions export --file backup.json
    """
    with open_client(ctx) as client, broker_errors():
        if vhost is None:
            definitions = client.export_definitions()
        else:
            definitions = client.export_vhost_definitions(vhost)

    if output_file is None:
        get_output().print_data(render_json(definitions.encode(), indent=2))
        return

    output_file.write_bytes(definitions.to_json())
    success(f"Definitions written to {output_file}")
    if vhost is None:
        format_response(definitions.summary())


@definitions_app.command("import")
def definitions_import(
    ctx: typer.Context,
    source: Path = typer.Argument(help="Definitions file (JSON)."),
    vhost: Optional[str] = typer.Option(None, "--vhost", "-V", help="Import into this virtual host only."),
) -> None:
    """Import definitions from a file.

    The broker applies the whole document or nothing.
    """
    try:
        document = loads_json(source.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        error(f"Cannot read definitions from {source}: {exc}")
        raise typer.Exit(code=2) from None
    if not isinstance(document, dict):
        error(f"{source} does not contain a definitions object")
        raise typer.Exit(code=2)

    info(f"Importing definitions from {source}")
    with open_client(ctx) as client, broker_errors():
        if vhost is None:
            client.import_definitions(document)
        else:
            client.import_vhost_definitions(vhost, document)
    success("Definitions imported.")
