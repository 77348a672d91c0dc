"""
Command-line interface for site configuration drafting.

Commands for generating, validating and sanitizing site configurations and
for signing and checking webhook deliveries.
"""

import json
import uuid
from pathlib import Path
from typing import Any

import typer

from .config import load_settings, validate_settings
from .events import LoggingObserver
from .generator import InvalidPromptError, SiteConfigGenerator
from .logging_config import set_trace_id, setup_logging
from .models.report import GenerationOptions, SanitizationOptions
from .remote_client import RemoteGenerationClient, RemoteGenerationError, RemoteGenerator
from .sanitizer import sanitize_site_config
from .validation import check_schema, validate_configuration
from .webhooks import process_webhook, sign_payload, verify_signature

app = typer.Typer(help="Draft structured site configurations from free-text prompts")


def _dump(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _emit(payload: Any, output: Path | None) -> None:
    text = _dump(payload)
    if output is not None:
        output.write_text(text + "\n", encoding="utf-8")
        typer.echo(f"✓ Wrote {output}", err=True)
    else:
        typer.echo(text)


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(code=2)
    except ValueError as exc:
        typer.echo(f"Invalid JSON in {path}: {exc}", err=True)
        raise typer.Exit(code=2)


def _read_body(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        typer.echo(f"Cannot read {path}: {exc.strerror or exc}", err=True)
        raise typer.Exit(code=2)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Emit structured logs to stderr"
    ),
) -> None:
    """Draft structured site configurations from free-text prompts."""
    set_trace_id(uuid.uuid4().hex)
    if verbose:
        settings = load_settings()
        setup_logging(environment=settings.environment, project_id=settings.project_id)


@app.command("generate")
def generate(
    prompt: str = typer.Argument(..., help="Description of the site to generate"),
    max_features: int | None = typer.Option(
        None, "--max-features", "-n", min=1, max=6, help="Home page feature count (1-6)"
    ),
    about: bool | None = typer.Option(
        None, "--about/--no-about", help="Force the about page on or off"
    ),
    contact: bool | None = typer.Option(
        None, "--contact/--no-contact", help="Force the contact page on or off"
    ),
    services: bool | None = typer.Option(
        None, "--services/--no-services", help="Force the services page on or off"
    ),
    sanitize: bool = typer.Option(False, "--sanitize", help="Sanitize before validating"),
    local: bool = typer.Option(False, "--local", help="Skip the remote generator"),
    vertex: bool = typer.Option(False, "--vertex", help="Use Vertex AI as the remote generator"),
    fallback: bool = typer.Option(
        True, "--fallback/--no-fallback", help="Fall back to local generation on remote failure"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the result to a file"),
) -> None:
    """Generate a site configuration from a prompt."""
    settings = load_settings()

    remote: RemoteGenerator | None = None
    if vertex and not local:
        if not settings.project_id:
            typer.echo("PROJECT_ID is required for --vertex", err=True)
            raise typer.Exit(code=2)
        from .vertex_ai_adapter import VertexAIAdapter

        remote = VertexAIAdapter(project_id=settings.project_id)
    elif settings.remote_enabled and not local:
        remote = RemoteGenerationClient.from_settings(settings)

    generator = SiteConfigGenerator(
        remote=remote,
        fallback_to_local=fallback,
        observer=LoggingObserver(),
        max_prompt_length=settings.max_prompt_length,
        content_checks=settings.enable_validation,
    )
    options = GenerationOptions(
        max_features=max_features or settings.max_features,
        include_about=about,
        include_contact=contact,
        include_services=services,
        sanitize=sanitize,
    )

    try:
        result = generator.generate(prompt, options)
    except InvalidPromptError as exc:
        typer.echo(f"Invalid prompt: {exc}", err=True)
        raise typer.Exit(code=2)
    except RemoteGenerationError as exc:
        typer.echo(f"Remote generation failed: {exc}", err=True)
        raise typer.Exit(code=1)

    payload: dict[str, Any] = {
        "success": result.success,
        "source": result.source,
        "config": result.config,
        "validation": result.report.to_wire(),
    }
    if result.remote_error:
        payload["remoteError"] = result.remote_error
    _emit(payload, output)

    if not result.success:
        raise typer.Exit(code=1)


@app.command("validate")
def validate(
    path: Path = typer.Argument(..., help="Site configuration JSON file"),
) -> None:
    """Validate a site configuration file."""
    config = _load_json(path)
    report = validate_configuration(config)

    payload = report.to_wire()
    parsed = check_schema(config).config
    if parsed is not None:
        payload["pages"] = parsed.page_identities()
    typer.echo(_dump(payload))

    if not report.valid:
        raise typer.Exit(code=1)


@app.command("sanitize")
def sanitize(
    path: Path = typer.Argument(..., help="Site configuration JSON file"),
    external_links: bool = typer.Option(
        True, "--external-links/--no-external-links", help="Keep absolute http(s) links"
    ),
    allowed_domain: list[str] = typer.Option(
        [], "--allowed-domain", "-d", help="Restrict external links to these hosts"
    ),
    max_url_length: int = typer.Option(200, "--max-url-length", min=1),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the result to a file"),
) -> None:
    """Sanitize a site configuration file."""
    config = _load_json(path)
    options = SanitizationOptions(
        allow_external_links=external_links,
        max_url_length=max_url_length,
        allowed_domains=allowed_domain,
    )
    result = sanitize_site_config(config, options)
    for warning in result.warnings:
        typer.echo(f"⚠ {warning}", err=True)
    _emit(result.sanitized, output)


@app.command("sign")
def sign(
    path: Path = typer.Argument(..., help="Webhook body file"),
    secret: str = typer.Option(..., "--secret", envvar="WEBHOOK_SECRET", help="Shared secret"),
) -> None:
    """Print the signature header value for a webhook body."""
    body = _read_body(path)
    try:
        signature = sign_payload(body, secret)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)
    typer.echo(signature)


@app.command("verify")
def verify(
    path: Path = typer.Argument(..., help="Webhook body file"),
    signature: str = typer.Option(..., "--signature", "-s", help="Signature header value"),
    secret: str = typer.Option(..., "--secret", envvar="WEBHOOK_SECRET", help="Shared secret"),
) -> None:
    """Check a webhook signature."""
    if not verify_signature(_read_body(path), signature, secret):
        typer.echo("✗ Signature mismatch", err=True)
        raise typer.Exit(code=1)
    typer.echo("✓ Signature valid")


@app.command("webhook")
def webhook(
    path: Path = typer.Argument(..., help="Webhook body file"),
    signature: str | None = typer.Option(None, "--signature", "-s", help="Signature header value"),
    secret: str | None = typer.Option(None, "--secret", envvar="WEBHOOK_SECRET", help="Shared secret"),
) -> None:
    """Process a webhook delivery and print the response it would get.

    Deliveries are refused with 403 unless ENABLE_WEBHOOKS is set.
    """
    settings = load_settings()
    outcome = process_webhook(
        _read_body(path),
        signature,
        secret or settings.webhook_secret,
        enabled=settings.enable_webhooks,
    )
    typer.echo(_dump({"status": outcome.status, "body": outcome.body}))
    if not outcome.accepted:
        raise typer.Exit(code=1)


@app.command("config")
def show_config() -> None:
    """Show the effective settings with secrets masked."""
    settings = load_settings()
    check = validate_settings(settings)
    typer.echo(_dump(settings.masked()))
    for warning in check.warnings:
        typer.echo(f"⚠ {warning}", err=True)
    for error in check.errors:
        typer.echo(f"✗ {error}", err=True)
    if not check.valid:
        raise typer.Exit(code=1)


__all__ = ["app"]
