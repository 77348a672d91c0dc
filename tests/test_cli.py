"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from site_config_drafter.cli import app
from site_config_drafter.webhooks import sign_payload

DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "site_configs"

# Keep the developer's environment out of the commands under test.
CLEAN_ENV = {
    "PROJECT_ID": "",
    "GENERATOR_SERVER_URL": "",
    "GENERATOR_API_KEY": "",
    "WEBHOOK_SECRET": "",
    "ENABLE_WEBHOOKS": "",
    "MAX_FEATURES": "",
    "MAX_PROMPT_LENGTH": "",
}


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


def invoke(runner, args):
    return runner.invoke(app, args, env=CLEAN_ENV)


def test_generate_prints_configuration(cli_runner):
    result = invoke(cli_runner, ["generate", "Create a portfolio site for Creative Studio"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["success"] is True
    assert payload["source"] == "local"
    assert payload["config"]["name"] == "Creative Studio"
    assert len(payload["config"]["pages"]["home"]["features"]) == 3


def test_generate_with_page_flags_and_output_file(cli_runner, tmp_path):
    output = tmp_path / "site.json"

    result = invoke(
        cli_runner,
        ["generate", "A consulting firm named Bright Path", "--contact", "--services", "-n", "2", "-o", str(output)],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert set(payload["config"]["pages"]) == {"home", "contact", "services"}
    assert len(payload["config"]["pages"]["home"]["features"]) == 2


def test_generate_rejects_empty_prompt(cli_runner):
    result = invoke(cli_runner, ["generate", "   "])

    assert result.exit_code == 2


def test_validate_valid_file(cli_runner):
    result = invoke(cli_runner, ["validate", str(DATA_DIR / "creative-studio.json")])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["valid"] is True
    assert payload["pages"] == {"home": "index", "about": "about", "contact": "contact"}


def test_validate_invalid_file(cli_runner):
    result = invoke(cli_runner, ["validate", str(DATA_DIR / "unsafe-launch.json")])

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["valid"] is False
    assert payload["errors"]


def test_validate_missing_file(cli_runner, tmp_path):
    result = invoke(cli_runner, ["validate", str(tmp_path / "missing.json")])

    assert result.exit_code == 2


def test_sanitize_file(cli_runner, tmp_path):
    output = tmp_path / "clean.json"

    result = invoke(
        cli_runner,
        ["sanitize", str(DATA_DIR / "unsafe-launch.json"), "--no-external-links", "-o", str(output)],
    )

    assert result.exit_code == 0, result.output
    sanitized = json.loads(output.read_text(encoding="utf-8"))
    assert sanitized["pages"]["home"]["hero"]["cta"]["primary"]["href"] == "/"
    assert sanitized["description"] == "Product launch consulting"


def test_sign_and_verify(cli_runner, tmp_path):
    body = tmp_path / "body.json"
    body.write_text('{"type": "site-config-generated"}', encoding="utf-8")

    signed = invoke(cli_runner, ["sign", str(body), "--secret", "whsec"])
    signature = signed.stdout.strip()

    assert signed.exit_code == 0
    assert signature == sign_payload(body.read_bytes(), "whsec")

    verified = invoke(cli_runner, ["verify", str(body), "-s", signature, "--secret", "whsec"])
    assert verified.exit_code == 0

    rejected = invoke(cli_runner, ["verify", str(body), "-s", signature, "--secret", "other"])
    assert rejected.exit_code == 1


def test_webhook_command(cli_runner, tmp_path):
    config = json.loads((DATA_DIR / "creative-studio.json").read_text(encoding="utf-8"))
    body = tmp_path / "delivery.json"
    body.write_text(json.dumps({"type": "site-config-update", "data": config}), encoding="utf-8")
    signature = sign_payload(body.read_bytes(), "whsec")

    result = cli_runner.invoke(
        app,
        ["webhook", str(body), "-s", signature, "--secret", "whsec"],
        env={**CLEAN_ENV, "ENABLE_WEBHOOKS": "true"},
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["status"] == 200


def test_webhook_command_refuses_when_webhooks_are_disabled(cli_runner, tmp_path):
    body = tmp_path / "delivery.json"
    body.write_text('{"type": "site-config-generated", "data": {}}', encoding="utf-8")
    signature = sign_payload(body.read_bytes(), "whsec")

    result = invoke(cli_runner, ["webhook", str(body), "-s", signature, "--secret", "whsec"])

    assert result.exit_code == 1
    assert json.loads(result.stdout) == {"status": 403, "body": {"error": "Webhooks not enabled"}}


def test_webhook_command_reads_the_secret_from_the_environment(cli_runner, tmp_path):
    body = tmp_path / "delivery.json"
    body.write_text('{"type": "ping", "data": {"x": 1}}', encoding="utf-8")
    signature = sign_payload(body.read_bytes(), "whsec-env")

    result = cli_runner.invoke(
        app,
        ["webhook", str(body), "-s", signature],
        env={**CLEAN_ENV, "ENABLE_WEBHOOKS": "1", "WEBHOOK_SECRET": "whsec-env"},
    )

    assert result.exit_code == 1
    assert json.loads(result.stdout)["status"] == 400
    assert json.loads(result.stdout)["body"] == {"error": "Unknown webhook type: ping"}


@pytest.mark.parametrize("command", ["sign", "verify", "webhook"])
def test_webhook_commands_report_missing_body_files(cli_runner, tmp_path, command):
    args = [command, str(tmp_path / "missing.json"), "--secret", "whsec"]
    if command != "sign":
        args += ["-s", "sha256=00"]

    result = invoke(cli_runner, args)

    assert result.exit_code == 2
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_sign_rejects_an_empty_secret(cli_runner, tmp_path):
    body = tmp_path / "body.json"
    body.write_text("{}", encoding="utf-8")

    result = invoke(cli_runner, ["sign", str(body), "--secret", ""])

    assert result.exit_code == 2
    assert "Webhook secret not configured" in result.output


def test_config_command_masks_secrets(cli_runner):
    result = cli_runner.invoke(
        app,
        ["config"],
        env={**CLEAN_ENV, "GENERATOR_SERVER_URL": "https://generator.example.com", "GENERATOR_API_KEY": "key-1"},
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["api_key"] == "***"
    assert payload["server_url"] == "https://generator.example.com"
