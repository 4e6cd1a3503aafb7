"""Typer application and CLI entry point for ``rabbitmq-http``.

The root callback turns the global flags into an
:class:`~rabbitmq_http.output.OutputManager` and stores the connection
options (``--profile``, ``--endpoint``) on the Typer context, where
:func:`~rabbitmq_http.commands.common.open_client` picks them up.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. Client errors that escape a command exit with the
error's ``exit_code``; anything else is written to a crash log under the
data directory.

See Also:
    :mod:`rabbitmq_http.config`: Profile and global configuration resolution.
    :mod:`rabbitmq_http.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from rabbitmq_http import __version__
from rabbitmq_http.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="rabbitmq-http",
    help="Manage a RabbitMQ cluster through its HTTP management API.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Sub-commands
# ------------------------------------------------------------------ #

from rabbitmq_http.commands.definitions import definitions_app  # noqa: E402
from rabbitmq_http.commands.exchanges import exchanges_app  # noqa: E402
from rabbitmq_http.commands.health import health_app  # noqa: E402
from rabbitmq_http.commands.overview import overview_command  # noqa: E402
from rabbitmq_http.commands.profile import profile_app  # noqa: E402
from rabbitmq_http.commands.queues import queues_app  # noqa: E402
from rabbitmq_http.commands.vhosts import vhosts_app  # noqa: E402

app.add_typer(profile_app, name="profile", help="Saved connection profiles.")
app.command("overview")(overview_command)
app.add_typer(vhosts_app, name="vhosts", help="Virtual hosts.")
app.add_typer(queues_app, name="queues", help="Queues and streams.")
app.add_typer(exchanges_app, name="exchanges", help="Exchanges.")
app.add_typer(definitions_app, name="definitions", help="Export and import definitions.")
app.add_typer(health_app, name="health", help="Health checks.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"rabbitmq-http {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", "-e", help="Management API base URL (overrides the profile)."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log every HTTP request to stderr."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        profile: Profile name override (highest precedence).
        endpoint: Endpoint override applied on top of the chosen profile.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
        force: Skip interactive confirmations of destructive commands.
    """
    from rabbitmq_http.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["endpoint"] = endpoint
    ctx.obj["force"] = force


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to the data directory and return its path."""
    from rabbitmq_http.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(f"{type(exc).__name__}: {exc}\n\n{traceback.format_exc()}")
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``rabbitmq-http`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from rabbitmq_http.exceptions import RabbitMQHttpError
        from rabbitmq_http.output import error

        if isinstance(exc, RabbitMQHttpError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
