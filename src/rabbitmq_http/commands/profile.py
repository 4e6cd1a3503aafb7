"""Profile commands -- manage saved connection profiles.

Provides the ``rabbitmq-http profile`` sub-command group. A profile
names a management endpoint, the user to log in as and where that user's
password comes from; the password itself is never written to disk.

Typical workflow::

    rabbitmq-http profile add staging --endpoint https://rabbit.staging:15671/api \\
        --username ops --password-source env:RABBITMQ_STAGING_PASSWORD --default
    rabbitmq-http --profile staging overview
"""

from __future__ import annotations

from typing import Optional

import typer

from rabbitmq_http.exceptions import ConfigError
from rabbitmq_http.models.profile import DEFAULT_ENDPOINT, DEFAULT_USERNAME
from rabbitmq_http.output import error, format_response, get_output, info, success, suggest

profile_app = typer.Typer(no_args_is_help=True)


@profile_app.command("add")
def profile_add(
    name: str = typer.Argument(help="Profile name."),
    endpoint: str = typer.Option(DEFAULT_ENDPOINT, "--endpoint", "-e", help="Management API base URL."),
    username: str = typer.Option(DEFAULT_USERNAME, "--username", "-u", help="User to log in as."),
    password_source: str = typer.Option(
        "prompt",
        "--password-source",
        "-s",
        help="Password source: env:VAR, file:/path, prompt, literal:value.",
    ),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout in seconds."),
    no_verify_ssl: bool = typer.Option(False, "--no-verify-ssl", help="Skip TLS certificate checks."),
    make_default: bool = typer.Option(False, "--default", help="Make this the default profile."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing profile."),
) -> None:
    """Save a connection profile.

    Example::

        rabbitmq-http profile add local --password-source literal:guest
    """
    from pydantic import ValidationError

    from rabbitmq_http.config import load_global_config, profile_exists, save_global_config, save_profile
    from rabbitmq_http.models import ConnectionProfile, RequestConfig

    try:
        if profile_exists(name) and not overwrite:
            error(f'Profile "{name}" already exists.')
            suggest(f"Replace it: rabbitmq-http profile add {name} --overwrite ...")
            raise typer.Exit(code=2)
        profile = ConnectionProfile(
            name=name,
            endpoint=endpoint,
            username=username,
            password_source=password_source,
            request=RequestConfig(timeout=timeout, verify_ssl=not no_verify_ssl),
        )
        path = save_profile(profile)
        if make_default:
            config = load_global_config()
            save_global_config(config.model_copy(update={"default_profile": name}))
    except ValidationError as exc:
        error(f"Invalid profile: {exc.errors()[0]['msg']}")
        raise typer.Exit(code=2) from None
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f'Profile "{name}" saved to {path}')
    if make_default:
        info(f'"{name}" is now the default profile.')


@profile_app.command("list")
def profile_list() -> None:
    """List saved profiles; the default one is marked with ``*``."""
    from rabbitmq_http.config import list_profiles, load_global_config, load_profile

    try:
        names = list_profiles()
        default = load_global_config().default_profile
        profiles = [load_profile(name) for name in names]
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not profiles:
        info("No profiles saved.")
        suggest("Create one: rabbitmq-http profile add <name> --endpoint <url>")
        return

    rows = [
        ["*" if p.name == default else "", p.name, p.endpoint, p.username]
        for p in profiles
    ]
    get_output().print_table(["default", "name", "endpoint", "username"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    """Show a saved profile."""
    from rabbitmq_http.config import load_profile

    try:
        profile = load_profile(name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    format_response(profile.model_dump(mode="json"))


@profile_app.command("remove")
def profile_remove(
    ctx: typer.Context,
    name: str = typer.Argument(help="Profile name."),
) -> None:
    """Delete a saved profile.

    Clears the global default too if it pointed at this profile.
    """
    from rabbitmq_http.commands.common import confirm
    from rabbitmq_http.config import delete_profile, load_global_config, save_global_config

    confirm(ctx, f'Remove profile "{name}"?')
    try:
        delete_profile(name)
        config = load_global_config()
        if config.default_profile == name:
            save_global_config(config.model_copy(update={"default_profile": None}))
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    success(f'Profile "{name}" removed.')
