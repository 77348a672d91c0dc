import hashlib
import hmac
import json

import pytest

from site_config_drafter.webhooks import process_webhook, sign_payload, verify_signature

SECRET = "whsec-test"

VALID_CONFIG = {
    "name": "Webhook Site",
    "description": "Delivered by webhook",
    "pages": {
        "home": {
            "hero": {"title": "Hello", "subtitle": "World"},
            "features": [{"title": "One", "description": "First feature"}],
        }
    },
}


def signed(message: dict) -> tuple[bytes, str]:
    body = json.dumps(message).encode("utf-8")
    return body, sign_payload(body, SECRET)


def test_sign_payload_matches_hmac():
    body = b'{"type": "ping"}'
    expected = hmac.new(SECRET.encode(), body, hashlib.sha256).hexdigest()

    assert sign_payload(body, SECRET) == f"sha256={expected}"
    assert sign_payload(body.decode(), SECRET) == f"sha256={expected}"


def test_sign_payload_requires_secret():
    with pytest.raises(ValueError):
        sign_payload(b"{}", "")


def test_verify_signature_round_trip():
    body = b'{"type": "ping"}'
    assert verify_signature(body, sign_payload(body, SECRET), SECRET)


@pytest.mark.parametrize(
    ("signature", "secret"),
    [
        (None, SECRET),
        ("", SECRET),
        ("md5=abcdef", SECRET),
        ("sha256=not-hex", SECRET),
        ("sha256=" + "0" * 64, SECRET),
        ("sha256=abcd", SECRET),
        ("sha256=" + "0" * 64, None),
        ("sha256=" + "0" * 64, ""),
    ],
)
def test_verify_signature_rejects(signature, secret):
    assert not verify_signature(b'{"type": "ping"}', signature, secret)


def test_tampered_body_is_rejected():
    body, signature = signed({"type": "site-config-generated", "data": VALID_CONFIG})
    assert not verify_signature(body + b" ", signature, SECRET)


def test_missing_secret_is_a_server_error():
    body, signature = signed({"type": "site-config-generated", "data": VALID_CONFIG})

    outcome = process_webhook(body, signature, None)

    assert outcome.status == 500


def test_bad_signature_is_unauthorized():
    body, _ = signed({"type": "site-config-generated", "data": VALID_CONFIG})

    outcome = process_webhook(body, "sha256=" + "0" * 64, SECRET)

    assert outcome.status == 401
    assert not outcome.accepted


def test_invalid_json_is_rejected():
    body = b"{not json"

    outcome = process_webhook(body, sign_payload(body, SECRET), SECRET)

    assert outcome.status == 400
    assert outcome.body == {"error": "Invalid JSON payload"}


@pytest.mark.parametrize("message", [{"type": "site-config-generated"}, {"data": VALID_CONFIG}, ["list"]])
def test_missing_fields_are_rejected(message):
    body, signature = signed(message)

    outcome = process_webhook(body, signature, SECRET)

    assert outcome.status == 400
    assert "Missing required fields" in outcome.body["error"]


def test_unknown_type_is_rejected():
    body, signature = signed({"type": "site-deleted", "data": {"id": 1}})

    outcome = process_webhook(body, signature, SECRET)

    assert outcome.status == 400
    assert outcome.body["error"] == "Unknown webhook type: site-deleted"


def test_generated_event_reports_validation():
    invalid = {**VALID_CONFIG, "pages": {}}
    body, signature = signed({"type": "site-config-generated", "data": invalid})

    outcome = process_webhook(body, signature, SECRET)

    assert outcome.status == 200
    assert outcome.body["success"] is True
    assert outcome.body["validation"]["valid"] is False


def test_update_event_accepts_valid_configuration():
    body, signature = signed({"type": "site-config-update", "data": VALID_CONFIG})

    outcome = process_webhook(body, signature, SECRET)

    assert outcome.accepted
    assert outcome.body["validation"] == {"valid": True}


def test_update_event_rejects_invalid_configuration():
    leaked = {**VALID_CONFIG, "description": "password: hunter2"}
    body, signature = signed({"type": "site-config-update", "data": leaked})

    outcome = process_webhook(body, signature, SECRET)

    assert outcome.status == 400
    assert outcome.body["success"] is False
    assert outcome.body["validation"]["valid"] is False


def test_disabled_endpoint_is_forbidden_before_any_other_check():
    body, signature = signed({"type": "site-config-generated", "data": VALID_CONFIG})

    assert process_webhook(body, signature, SECRET, enabled=False).status == 403

    outcome = process_webhook(b"not json", None, None, enabled=False)
    assert outcome.status == 403
    assert outcome.body == {"error": "Webhooks not enabled"}
