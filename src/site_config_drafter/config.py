from __future__ import annotations

import logging
import os
from typing import Mapping, Sequence

from google.cloud import secretmanager
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


class GeneratorSettings(BaseModel):
    environment: str = "dev"
    project_id: str | None = None
    server_url: str | None = None
    api_key: str | None = None
    timeout: float = 30.0
    retries: int = 2
    retry_delay: float = 0.5
    webhook_secret: str | None = None
    enable_webhooks: bool = False
    enable_validation: bool = True
    max_prompt_length: int = 1000
    max_features: int = Field(default=3, ge=1, le=6)

    @property
    def remote_enabled(self) -> bool:
        return bool(self.server_url)

    def masked(self) -> dict[str, object]:
        data = self.model_dump()
        for key in ("api_key", "webhook_secret"):
            if data.get(key):
                data[key] = "***"
        return data


class SettingsCheck(BaseModel):
    valid: bool
    errors: Sequence[str] = Field(default_factory=list)
    warnings: Sequence[str] = Field(default_factory=list)


def load_settings(environ: Mapping[str, str] | None = None) -> GeneratorSettings:
    """Load generator settings from environment variables.

    Secrets missing from the environment are looked up in Secret Manager
    when ``PROJECT_ID`` is set.

    Args:
        environ: Mapping to read instead of ``os.environ``

    Returns:
        GeneratorSettings instance
    """
    env = os.environ if environ is None else environ
    project_id = env.get("PROJECT_ID") or None

    api_key = env.get("GENERATOR_API_KEY") or None
    webhook_secret = env.get("WEBHOOK_SECRET") or None
    if project_id and not api_key and env.get("GENERATOR_SERVER_URL"):
        api_key = _get_secret(project_id, "generator-api-key")
    if project_id and not webhook_secret and _flag(env.get("ENABLE_WEBHOOKS"), False):
        webhook_secret = _get_secret(project_id, "webhook-secret")

    return GeneratorSettings(
        environment=env.get("ENVIRONMENT", "dev"),
        project_id=project_id,
        server_url=env.get("GENERATOR_SERVER_URL") or None,
        api_key=api_key,
        timeout=_number(env.get("GENERATOR_TIMEOUT"), 30.0, float),
        retries=_number(env.get("GENERATOR_RETRIES"), 2, int),
        retry_delay=_number(env.get("GENERATOR_RETRY_DELAY"), 0.5, float),
        webhook_secret=webhook_secret,
        enable_webhooks=_flag(env.get("ENABLE_WEBHOOKS"), False),
        enable_validation=_flag(env.get("ENABLE_VALIDATION"), True),
        max_prompt_length=_number(env.get("MAX_PROMPT_LENGTH"), 1000, int),
        max_features=min(max(_number(env.get("MAX_FEATURES"), 3, int), 1), 6),
    )


def validate_settings(settings: GeneratorSettings) -> SettingsCheck:
    errors: list[str] = []
    warnings: list[str] = []

    if settings.server_url and not settings.api_key:
        warnings.append("GENERATOR_API_KEY not set - authentication may fail")
    if settings.enable_webhooks and not settings.webhook_secret:
        errors.append("WEBHOOK_SECRET required when webhooks are enabled")
    if not 5 <= settings.timeout <= 300:
        warnings.append("GENERATOR_TIMEOUT should be between 5 and 300 seconds")
    if not 0 <= settings.retries <= 5:
        warnings.append("GENERATOR_RETRIES should be between 0 and 5")
    if settings.max_prompt_length < 1:
        errors.append("MAX_PROMPT_LENGTH must be positive")
    if not settings.server_url:
        warnings.append("GENERATOR_SERVER_URL not set - using local generation")

    return SettingsCheck(valid=not errors, errors=errors, warnings=warnings)


def _flag(raw: str | None, default: bool) -> bool:
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUTHY


def _number(raw: str | None, default, cast):
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring unparseable setting value {raw!r}; using {default}")
        return default


def _get_secret(project_id: str, secret_id: str) -> str | None:
    """Fetch secret from Secret Manager.

    Args:
        project_id: GCP project ID
        secret_id: Secret ID

    Returns:
        Secret value or None if not found
    """
    try:
        client = secretmanager.SecretManagerServiceClient()
        name = f"projects/{project_id}/secrets/{secret_id}/versions/latest"
        response = client.access_secret_version(name=name)
        return response.payload.data.decode("UTF-8")
    except Exception as exc:
        logger.warning(
            f"Failed to fetch secret {secret_id}: {exc}",
            exc_info=True,
        )
        return None


__all__ = ["GeneratorSettings", "SettingsCheck", "load_settings", "validate_settings"]
