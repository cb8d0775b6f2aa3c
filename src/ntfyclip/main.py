"""CLI handling for ntfyclip.

This module provides the command-line interface for ntfyclip. Every
option can also be given through its environment variable, which is the
usual way to configure the client as a background service.

Usage:
    TOPIC=alerts ntfyclip
    ntfyclip --topic alerts [--server HOST] [--scheme ws|wss]
             [--token TOKEN] [--timeout SECONDS] [--verbose]
"""

import os
import sys

import click

from ntfyclip.config import ConfigError, load_settings
from ntfyclip.main_logging import configure_logging


@click.command()
@click.option(
    "--server",
    envvar="SERVER",
    help="ntfy server host [env: SERVER; default: ntfy.sh]",
)
@click.option(
    "--scheme",
    envvar="SCHEME",
    help="WebSocket scheme, ws or wss [env: SCHEME; default: wss]",
)
@click.option(
    "--topic",
    envvar="TOPIC",
    help="Topic to subscribe to [env: TOPIC; required]",
)
@click.option(
    "--token",
    envvar="TOKEN",
    help="Access token sent as a bearer credential [env: TOKEN]",
)
@click.option(
    "--timeout",
    envvar="TIMEOUT",
    help="Idle timeout in seconds [env: TIMEOUT; default: 120]",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable DEBUG-level logging (also enabled by DEV)",
)
def main(
    server: str | None,
    scheme: str | None,
    topic: str | None,
    token: str | None,
    timeout: str | None,
    verbose: bool,
) -> None:
    """Copy messages published to an ntfy topic to the clipboard."""
    configure_logging(verbose or "DEV" in os.environ)

    try:
        settings = load_settings(
            topic=topic, server=server, scheme=scheme, token=token, timeout=timeout
        )
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _run_client(settings)


def _run_client(settings) -> None:
    """Run the client until it is asked to stop.

    Args:
        settings: The validated Settings.
    """
    import asyncio
    from ntfyclip.client import run_client

    try:
        asyncio.run(run_client(settings))
    except KeyboardInterrupt:
        pass
