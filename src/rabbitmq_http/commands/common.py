"""Helpers shared by the broker-facing sub-commands."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from rabbitmq_http.client import Client
from rabbitmq_http.exceptions import RabbitMQHttpError
from rabbitmq_http.exit_codes import EXIT_INVALID_USAGE
from rabbitmq_http.output import error, suggest


def open_client(ctx: typer.Context) -> Client:
    """Create a blocking client for the profile selected on the command line.

    The profile comes from ``--profile`` / ``--endpoint`` (stored on
    ``ctx.obj`` by the root callback) and the usual precedence chain; with
    no profile at all, the local broker's defaults are used. An
    ``http_client`` placed on ``ctx.obj`` is used for sending.

    Raises:
        typer.Exit: If the configuration or credential cannot be resolved.
    """
    from rabbitmq_http.config import resolve_config, resolve_credential
    from rabbitmq_http.models import ConnectionProfile

    obj = ctx.obj or {}
    try:
        _, profile = resolve_config(cli_profile=obj.get("profile"), cli_endpoint=obj.get("endpoint"))
        profile = profile or ConnectionProfile(name="default")
        password = resolve_credential(profile.password_source)
    except RabbitMQHttpError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    return Client.from_profile(profile, password, http_client=obj.get("http_client"))


@contextmanager
def broker_errors() -> Iterator[None]:
    """Report a client error on stderr and exit with its code."""
    try:
        yield
    except RabbitMQHttpError as exc:
        error(str(exc))
        if exc.exit_code == EXIT_INVALID_USAGE:
            suggest("Check the command's arguments with --help")
        raise typer.Exit(code=exc.exit_code) from None


def confirm(ctx: typer.Context, question: str) -> None:
    """Ask *question* unless ``--force`` was given; exit quietly on "no"."""
    if ctx.obj and ctx.obj.get("force"):
        return
    if not typer.confirm(question):
        raise typer.Exit()
