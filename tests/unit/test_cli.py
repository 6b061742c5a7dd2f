"""Tests for the command line interface."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from innochannel.cli import cli
from innochannel.exceptions import ApiError, AuthenticationError
from innochannel.webhook import compute_signature


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def payload_file(tmp_path):
    path = tmp_path / "payload.json"
    path.write_bytes(b'{"event":"reservation.created","data":{"id":"R1"}}')
    return path


def test_sign(runner, payload_file, webhook_secret):
    result = runner.invoke(cli, ["sign", str(payload_file), "--secret", webhook_secret])

    assert result.exit_code == 0
    assert result.output.strip() == compute_signature(payload_file.read_bytes(), webhook_secret)


def test_sign_uses_secret_from_env(runner, payload_file, webhook_secret):
    result = runner.invoke(cli, ["sign", str(payload_file)])

    assert result.output.strip() == compute_signature(payload_file.read_bytes(), webhook_secret)


def test_verify(runner, payload_file, webhook_secret):
    signature = compute_signature(payload_file.read_bytes(), webhook_secret)

    valid = runner.invoke(cli, ["verify", str(payload_file), "--signature", signature])
    invalid = runner.invoke(cli, ["verify", str(payload_file), "--signature", "0" * 64])

    assert valid.exit_code == 0
    assert invalid.exit_code == 1


@patch("innochannel.client.InnochannelClient.test_connection")
def test_test_connection_success(mock_test, runner):
    mock_test.return_value = {"status": "ok"}

    result = runner.invoke(cli, ["test-connection", "--detailed"])

    assert result.exit_code == 0
    assert "Connection successful" in result.output
    assert "test_api_key_123" not in result.output
    assert "test********_123" in result.output


@patch("innochannel.client.InnochannelClient.test_connection")
def test_test_connection_failure(mock_test, runner):
    mock_test.side_effect = AuthenticationError("Invalid API key")

    result = runner.invoke(cli, ["test-connection"])

    assert result.exit_code == 1


def test_test_connection_without_credentials(runner, monkeypatch):
    monkeypatch.delenv("INNOCHANNEL_API_KEY")

    result = runner.invoke(cli, ["test-connection"])

    assert result.exit_code != 0
    assert "api_key" in result.output


@patch("innochannel.cli.ClientConfig.from_env")
def test_test_connection_reports_config_api_error(mock_from_env, runner):
    mock_from_env.side_effect = ApiError("Configuration unavailable", errors={"base_url": ["unset"]})

    result = runner.invoke(cli, ["test-connection"])

    assert result.exit_code != 0
    assert "Configuration unavailable: base_url: unset" in result.output


@patch("innochannel.services.webhooks.WebhookService.get_available_events")
def test_webhook_events(mock_events, runner):
    mock_events.return_value = ["reservation.created", "rates.updated"]

    result = runner.invoke(cli, ["webhooks", "events"])

    assert result.exit_code == 0
    assert '"rates.updated"' in result.output
