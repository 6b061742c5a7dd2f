"""Command line interface for the Innochannel SDK."""

import json
import sys
from pathlib import Path

import click
import structlog
from dotenv import load_dotenv

from innochannel.auth import mask_secret
from innochannel.client import InnochannelClient
from innochannel.config import ClientConfig
from innochannel.exceptions import ApiError
from innochannel.logging_config import configure_logging
from innochannel.webhook import compute_signature, verify_signature

logger = structlog.get_logger(__name__)


def _client_from_env() -> InnochannelClient:
    try:
        return InnochannelClient(ClientConfig.from_env())
    except ApiError as e:
        raise click.ClickException(f"{e.message}: {e.formatted_errors()}")


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@click.group()
@click.option("--log-level", default="WARNING", help="Log level")
@click.option("--json-logs/--console-logs", default=False, help="Render logs as JSON")
def cli(log_level: str, json_logs: bool) -> None:
    """Innochannel channel manager CLI."""
    load_dotenv()
    configure_logging(log_level, json=json_logs)


@cli.command("test-connection")
@click.option("--detailed", is_flag=True, help="Show configuration and response details")
def test_connection(detailed: bool) -> None:
    """Check the configured credentials against the API."""
    client = _client_from_env()
    config = client.config

    if detailed:
        click.echo(f"Base URL:    {config.base_url}")
        click.echo(f"API key:     {mask_secret(config.api_key)}")
        click.echo(f"API secret:  {mask_secret(config.api_secret)}")
        click.echo(f"Timeout:     {config.timeout}s")
        click.echo(f"Retries:     {config.retry_attempts}")

    with client:
        try:
            result = client.test_connection()
        except ApiError as e:
            logger.error("connection_test_failed", status_code=e.status_code, error=e.message)
            click.echo(f"Connection failed: {e.message}", err=True)
            sys.exit(1)

    click.echo("Connection successful")
    if detailed and result is not None:
        _echo_json(result)


@cli.group()
def webhooks() -> None:
    """Manage registered webhooks."""


@webhooks.command("list")
def list_webhooks() -> None:
    """List registered webhooks."""
    with _client_from_env() as client:
        _echo_json(client.webhooks().list())


@webhooks.command("events")
def list_events() -> None:
    """List the events a webhook can subscribe to."""
    with _client_from_env() as client:
        _echo_json(client.webhooks().get_available_events())


@cli.command()
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--secret", envvar="INNOCHANNEL_WEBHOOK_SECRET", required=True)
def sign(payload_file: str, secret: str) -> None:
    """Print the signature of a webhook payload file."""
    click.echo(compute_signature(Path(payload_file).read_bytes(), secret))


@cli.command()
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--signature", required=True)
@click.option("--secret", envvar="INNOCHANNEL_WEBHOOK_SECRET", required=True)
def verify(payload_file: str, signature: str, secret: str) -> None:
    """Verify the signature of a webhook payload file."""
    if verify_signature(Path(payload_file).read_bytes(), signature, secret):
        click.echo("Signature is valid")
        return
    click.echo("Signature is invalid", err=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()
