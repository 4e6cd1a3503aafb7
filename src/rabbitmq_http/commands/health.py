"""Health check commands.

Each command exits with status 0 when the check passes and with the
broker-error exit code when the broker reports a failure, so they can be
used directly as readiness probes.
"""

from __future__ import annotations

import typer

from rabbitmq_http.commands.common import open_client
from rabbitmq_http.exceptions import HealthCheckFailedError, RabbitMQHttpError
from rabbitmq_http.models import ClusterAlarmCheckDetails
from rabbitmq_http.output import error, get_output, success

health_app = typer.Typer(no_args_is_help=True)


@health_app.command("alarms")
def health_alarms(
    ctx: typer.Context,
    local: bool = typer.Option(False, "--local", help="Only check the node serving the request."),
) -> None:
    """Fail if a resource alarm (memory, disk) is in effect.

    Example::

        rabbitmq-http health alarms || echo "publishers are blocked"
    """
    with open_client(ctx) as client:
        try:
            if local:
                client.health_check_local_alarms()
            else:
                client.health_check_cluster_wide_alarms()
        except HealthCheckFailedError as exc:
            error(f"Health check failed: {exc.reason or 'resource alarm in effect'}")
            if isinstance(exc.details, ClusterAlarmCheckDetails) and exc.details.alarms:
                get_output().print_table(
                    ["node", "resource"],
                    [[alarm.node, alarm.resource] for alarm in exc.details.alarms],
                    title="Alarms in effect",
                )
            raise typer.Exit(code=exc.exit_code) from None
        except RabbitMQHttpError as exc:
            error(str(exc))
            raise typer.Exit(code=exc.exit_code) from None
    success("No alarms in effect.")
