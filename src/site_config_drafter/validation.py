"""Validation stages for candidate site configurations.

Independent checks run over a candidate:

* schema: hard gate, structural and bound conformance
* content: advisory word and length guidance, never fatal
* tone: advisory flags for hype and unprofessional wording, never fatal
* security: hard gate, credential-shaped text anywhere in the document

``validate_configuration`` returns the union of their findings. Content and
tone warnings never influence ``valid``; the schema and security gates
always run.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from .models.report import ContentCheck, FieldError, SchemaCheck, SecurityCheck, ValidationReport
from .models.site_config import FEATURE_DESCRIPTION_MAX, SiteConfiguration

logger = logging.getLogger(__name__)

HERO_TITLE_WORD_LIMIT = 8

SENSITIVE_PATTERNS: Sequence[re.Pattern[str]] = (
    re.compile(r"api[_-]?key", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"private[_-]?key", re.IGNORECASE),
    re.compile(r"[a-f0-9]{32,}", re.IGNORECASE),
)

UNPROFESSIONAL_PATTERNS: Sequence[re.Pattern[str]] = (
    re.compile(r"\b(awesome|amazing|incredible|unbelievable)\b"),
    re.compile(r"!{2,}"),
    re.compile(r"\b(cheap|cheapest)\b"),
    re.compile(r"\b(guarantee|guaranteed)\b"),
    re.compile(r"\b(best|#1|number one)\b"),
)


def as_payload(config: Any) -> Any:
    if isinstance(config, SiteConfiguration):
        return config.to_payload()
    return config


def check_schema(config: Any) -> SchemaCheck:
    payload = as_payload(config)
    try:
        parsed = SiteConfiguration.model_validate(payload)
    except ValidationError as exc:
        errors = [
            FieldError(path=_format_location(error["loc"]), message=error["msg"])
            for error in exc.errors()
        ]
        return SchemaCheck(valid=False, errors=errors)
    return SchemaCheck(valid=True, config=parsed)


def check_content(config: Any) -> ContentCheck:
    payload = as_payload(config)
    warnings: list[str] = []

    home = _get(_get(payload, "pages"), "home")
    title = _get(_get(home, "hero"), "title")
    if isinstance(title, str):
        word_count = len(title.split())
        if word_count > HERO_TITLE_WORD_LIMIT:
            warnings.append(
                f"Hero title has {word_count} words (recommended: ≤{HERO_TITLE_WORD_LIMIT} words)"
            )

    features = _get(home, "features")
    if isinstance(features, list):
        for index, feature in enumerate(features):
            description = _get(feature, "description")
            if isinstance(description, str) and len(description) > FEATURE_DESCRIPTION_MAX:
                warnings.append(
                    f"Feature {index + 1} description is {len(description)} chars "
                    f"(recommended: ≤{FEATURE_DESCRIPTION_MAX} chars)"
                )

    return ContentCheck(valid=not warnings, warnings=warnings)


def check_tone(config: Any) -> ContentCheck:
    """Flag hype and unprofessional wording anywhere in the document.

    Matching runs over the lowercased serialized document, one warning per
    pattern citing its first match.
    """
    serialized = json.dumps(as_payload(config), ensure_ascii=False, default=str).lower()
    warnings = [
        f"Consider revising potentially unprofessional language: {match.group(0)}"
        for match in (pattern.search(serialized) for pattern in UNPROFESSIONAL_PATTERNS)
        if match is not None
    ]
    return ContentCheck(valid=not warnings, warnings=warnings)


def check_security(config: Any) -> SecurityCheck:
    serialized = json.dumps(as_payload(config), ensure_ascii=False, default=str)
    matched = [pattern.pattern for pattern in SENSITIVE_PATTERNS if pattern.search(serialized)]
    if matched:
        # Only the pattern is logged; the matched text may be a live credential.
        logger.warning("Security check rejected configuration", extra={"patterns": matched})
    errors = [f"Potential sensitive data detected: pattern {source}" for source in matched]
    return SecurityCheck(valid=not errors, errors=errors)


def validate_configuration(config: Any, *, content: bool = True) -> ValidationReport:
    schema_result = check_schema(config)
    errors = [str(error) for error in schema_result.errors]
    warnings: list[str] = []

    content_valid = True
    if content:
        for advisory in (check_content(config), check_tone(config)):
            content_valid = content_valid and advisory.valid
            warnings.extend(advisory.warnings)

    security_result = check_security(config)
    security_valid = security_result.valid
    errors.extend(security_result.errors)

    return ValidationReport(
        valid=schema_result.valid and security_valid,
        errors=errors,
        warnings=warnings,
        schema_valid=schema_result.valid,
        content_valid=content_valid,
        security_valid=security_valid,
        field_errors=list(schema_result.errors),
    )


def accepted_configuration(config: Any) -> SiteConfiguration | None:
    """Return the parsed model only when every fatal check passes."""
    report = validate_configuration(config, content=False)
    if not report.valid:
        return None
    return check_schema(config).config


def _format_location(location: Sequence[str | int]) -> str:
    if not location:
        return "root"
    return ".".join(str(part) for part in location)


def _get(container: Any, key: str) -> Any:
    if isinstance(container, Mapping):
        return container.get(key)
    return None


__all__ = [
    "HERO_TITLE_WORD_LIMIT",
    "SENSITIVE_PATTERNS",
    "UNPROFESSIONAL_PATTERNS",
    "check_schema",
    "check_content",
    "check_tone",
    "check_security",
    "validate_configuration",
    "accepted_configuration",
]
