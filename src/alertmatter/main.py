"""Main entry point for alertmatter."""

import sys
from typing import Any, Optional

import click
import uvicorn
from pydantic import ValidationError

from alertmatter import __version__
from alertmatter.api import create_app
from alertmatter.config import Settings
from alertmatter.logging import get_logger, setup_logging


def parse_addr(addr: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address; an empty host means all interfaces."""
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise click.BadParameter(f"expected HOST:PORT, got {addr!r}", param_hint="--addr")
    return host or "0.0.0.0", int(port)


def build_settings(**options: Any) -> Settings:
    """Build settings from the environment, overridden by explicit CLI options."""
    addr = options.pop("addr", None)
    if addr:
        options["host"], options["port"] = parse_addr(addr)
    overrides = {key: value for key, value in options.items() if value is not None}
    return Settings(**overrides)


@click.command()
@click.option("--addr", help="Address to run the HTTP server on, e.g. :8080")
@click.option("--host", help="Host to bind (env: ALERTMATTER_HOST)")
@click.option("--port", type=int, help="Port to bind (env: ALERTMATTER_PORT)")
@click.option(
    "--webhook-url",
    help="Mattermost webhook URL (env: ALERTMATTER_WEBHOOK_URL)",
)
@click.option(
    "--timeout",
    "request_timeout",
    type=float,
    help="Timeout in seconds for the Mattermost request",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    help="Log output format",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging",
)
@click.version_option(__version__, prog_name="alertmatter")
def cli(
    addr: Optional[str],
    host: Optional[str],
    port: Optional[int],
    webhook_url: Optional[str],
    request_timeout: Optional[float],
    log_format: Optional[str],
    verbose: bool,
) -> None:
    """Forward Prometheus Alertmanager notifications to Mattermost."""
    try:
        settings = build_settings(
            addr=addr,
            host=host,
            port=port,
            webhook_url=webhook_url,
            request_timeout=request_timeout,
            log_format=log_format,
            verbose=verbose or None,
        )
    except ValidationError as e:
        click.echo(f"Error: invalid configuration: {e}", err=True)
        click.echo("Use the --webhook-url flag or ALERTMATTER_WEBHOOK_URL.", err=True)
        sys.exit(1)

    setup_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting server",
        addr=f"{settings.host}:{settings.port}",
        version=__version__,
    )

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.effective_log_level.lower(),
    )


def main() -> None:
    """Run the alertmatter application."""
    cli()


if __name__ == "__main__":
    main()
