from __future__ import annotations

import hashlib
import hmac
import json
import logging
from typing import Any

from pydantic import BaseModel, Field

from .validation import validate_configuration

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="
SIGNATURE_HEADER = "X-Signature-256"

EVENT_CONFIG_GENERATED = "site-config-generated"
EVENT_CONFIG_UPDATE = "site-config-update"


class WebhookOutcome(BaseModel):
    status: int
    body: dict[str, Any] = Field(default_factory=dict)

    @property
    def accepted(self) -> bool:
        return self.status == 200


def _as_bytes(payload: bytes | str) -> bytes:
    return payload.encode("utf-8") if isinstance(payload, str) else payload


def sign_payload(payload: bytes | str, secret: str) -> str:
    if not secret:
        raise ValueError("Webhook secret not configured")
    digest = hmac.new(secret.encode("utf-8"), _as_bytes(payload), hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(payload: bytes | str, signature: str | None, secret: str | None) -> bool:
    """Check a ``sha256=<hex>`` HMAC signature over the exact raw body.

    A missing secret or signature is a failed verification.
    """
    if not secret:
        logger.error("Webhook verification error: secret not configured")
        return False
    if not signature or not signature.startswith(SIGNATURE_PREFIX):
        return False

    try:
        provided = bytes.fromhex(signature[len(SIGNATURE_PREFIX):])
    except ValueError:
        return False
    expected = hmac.new(secret.encode("utf-8"), _as_bytes(payload), hashlib.sha256).digest()
    return hmac.compare_digest(expected, provided)


def process_webhook(
    payload: bytes | str,
    signature: str | None,
    secret: str | None,
    *,
    enabled: bool = True,
) -> WebhookOutcome:
    """Verify and dispatch a site-configuration webhook delivery.

    Framework-agnostic: the caller maps ``status`` and ``body`` onto its
    own response type. A disabled endpoint answers 403 before any other check.
    """
    if not enabled:
        return WebhookOutcome(status=403, body={"error": "Webhooks not enabled"})
    if not secret:
        return WebhookOutcome(status=500, body={"error": "Webhook secret not configured"})
    if not verify_signature(payload, signature, secret):
        logger.warning("Rejected webhook with invalid signature")
        return WebhookOutcome(status=401, body={"error": "Invalid webhook signature"})

    try:
        message = json.loads(_as_bytes(payload))
    except ValueError:
        return WebhookOutcome(status=400, body={"error": "Invalid JSON payload"})

    if not isinstance(message, dict) or not message.get("type") or not message.get("data"):
        return WebhookOutcome(status=400, body={"error": "Missing required fields: type, data"})

    event_type = message["type"]
    if event_type == EVENT_CONFIG_GENERATED:
        report = validate_configuration(message["data"])
        return WebhookOutcome(status=200, body={"success": True, "validation": report.to_wire()})

    if event_type == EVENT_CONFIG_UPDATE:
        report = validate_configuration(message["data"])
        if not report.valid:
            return WebhookOutcome(
                status=400,
                body={"success": False, "error": "Invalid site configuration", "validation": report.to_wire()},
            )
        return WebhookOutcome(
            status=200,
            body={
                "success": True,
                "message": "Site configuration updated successfully",
                "validation": report.to_wire(),
            },
        )

    return WebhookOutcome(status=400, body={"error": f"Unknown webhook type: {event_type}"})


__all__ = [
    "SIGNATURE_HEADER",
    "SIGNATURE_PREFIX",
    "WebhookOutcome",
    "sign_payload",
    "verify_signature",
    "process_webhook",
]
