import json
import sys

import anyio
import click

from nextcloud_ocs_plugin.client import NextcloudClient
from nextcloud_ocs_plugin.config import DEFAULT_TIMEOUT, ConnectionConfig
from nextcloud_ocs_plugin.exceptions import NextcloudPluginError
from nextcloud_ocs_plugin.observability import (
    setup_logging,
    setup_metrics,
    setup_tracing,
)
from nextcloud_ocs_plugin.plugin import UnknownTableError, get_plugin


def parse_where(ctx, param, values: tuple[str, ...]) -> dict[str, str]:
    quals = {}
    for value in values:
        column, sep, operand = value.partition("=")
        if not sep or not column:
            raise click.BadParameter(f"expected COLUMN=VALUE, got {value!r}")
        quals[column.strip()] = operand
    return quals


def connection_options(func):
    options = [
        click.option(
            "--server-url",
            envvar="NEXTCLOUD_HOST",
            help="Nextcloud instance URL (can also use NEXTCLOUD_HOST env var)",
        ),
        click.option(
            "--username",
            envvar="NEXTCLOUD_USERNAME",
            help="Nextcloud username (can also use NEXTCLOUD_USERNAME env var)",
        ),
        click.option(
            "--password",
            envvar="NEXTCLOUD_PASSWORD",
            help="Nextcloud password or app password (can also use NEXTCLOUD_PASSWORD env var)",
        ),
        click.option(
            "--timeout",
            envvar="NEXTCLOUD_TIMEOUT",
            type=float,
            default=DEFAULT_TIMEOUT,
            show_default=True,
            help="HTTP timeout in seconds",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_config(server_url, username, password, timeout) -> ConnectionConfig:
    return ConnectionConfig(
        server_url=server_url or "",
        username=username or "",
        password=password or "",
        timeout=timeout,
    )


@click.group()
@click.option(
    "--log-level",
    "-l",
    default="warning",
    show_default=True,
    type=click.Choice(["critical", "error", "warning", "info", "debug"]),
    help="Logging level",
)
@click.option(
    "--log-format",
    default="text",
    show_default=True,
    type=click.Choice(["json", "text"]),
    help="Log output format",
)
@click.option(
    "--metrics-port",
    envvar="METRICS_PORT",
    type=int,
    default=None,
    help="Serve Prometheus metrics on this port (can also use METRICS_PORT env var)",
)
@click.option(
    "--otlp-endpoint",
    envvar="OTEL_EXPORTER_OTLP_ENDPOINT",
    default=None,
    help="Export traces to this OTLP gRPC endpoint (can also use OTEL_EXPORTER_OTLP_ENDPOINT env var)",
)
@click.option(
    "--otlp-verify-ssl/--no-otlp-verify-ssl",
    envvar="OTEL_EXPORTER_VERIFY_SSL",
    default=False,
    show_default=True,
    help="Verify TLS certificates of the OTLP endpoint",
)
def cli(
    log_level: str,
    log_format: str,
    metrics_port: int | None,
    otlp_endpoint: str | None,
    otlp_verify_ssl: bool,
):
    """Query the Nextcloud OCS API as tables."""
    setup_logging(log_format=log_format, log_level=log_level)

    if metrics_port is not None:
        setup_metrics(port=metrics_port)

    if otlp_endpoint:
        setup_tracing(otlp_endpoint=otlp_endpoint, otlp_verify_ssl=otlp_verify_ssl)


@cli.command()
def tables():
    """List the available tables and their columns."""
    plugin = get_plugin()
    for table in plugin.table_map.values():
        click.echo(f"{table.name}: {table.description}")
        for column in table.columns:
            click.echo(f"  {column.name} ({column.type.value}) - {column.description}")


@cli.command()
@click.argument("table")
@click.option(
    "--where",
    "-w",
    multiple=True,
    callback=parse_where,
    help="Equality qualifier COLUMN=VALUE. Can be specified multiple times.",
)
@connection_options
def query(table, where, server_url, username, password, timeout):
    """Run a query against TABLE and print rows as JSON lines."""

    def emit(row):
        click.echo(json.dumps(row, default=str))

    async def _run():
        config = _build_config(server_url, username, password, timeout)
        return await get_plugin().execute(table, config, where, emit)

    try:
        count = anyio.run(_run)
    except (NextcloudPluginError, UnknownTableError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"{count} row(s)", err=True)


@cli.command()
@connection_options
def check(server_url, username, password, timeout):
    """Verify that the server is reachable with the given credentials."""

    async def _run():
        config = _build_config(server_url, username, password, timeout)
        async with await NextcloudClient.connect(config) as client:
            return client.base_url

    try:
        base_url = anyio.run(_run)
    except NextcloudPluginError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Connected to {base_url}")


if __name__ == "__main__":
    cli()
