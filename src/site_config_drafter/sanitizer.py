from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterator, Sequence
from urllib.parse import urlparse

from .models.report import SanitizationOptions, SanitizationResult
from .models.site_config import (
    ABOUT_BLURB_MAX,
    ADDRESS_MAX,
    CTA_TEXT_MAX,
    DESCRIPTION_MAX,
    EMAIL_PLACEHOLDER_MAX,
    FEATURE_DESCRIPTION_MAX,
    FEATURE_ICON_MAX,
    FEATURE_TITLE_MAX,
    HERO_SUBTITLE_MAX,
    HERO_TITLE_MAX,
    NAME_MAX,
    SERVICE_DESCRIPTION_MAX,
    SERVICE_FEATURE_MAX,
    SERVICE_TITLE_MAX,
    TEAM_BIO_MAX,
    SiteConfiguration,
)

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 50

DANGEROUS_TEXT_PATTERNS: Sequence[re.Pattern[str]] = (
    re.compile(r"<script[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<iframe[^>]*>.*?</iframe\s*>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<object[^>]*>.*?</object\s*>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<embed[^>]*>", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
    re.compile(r"\bdata:(?!image/)", re.IGNORECASE),
    re.compile(r"\bon\w+\s*=", re.IGNORECASE),
)

DANGEROUS_PROTOCOL = re.compile(r"^\s*(?:javascript|vbscript|data):", re.IGNORECASE)
EXTERNAL_URL = re.compile(r"^(?:https?:)?//", re.IGNORECASE)
URL_SCHEME = re.compile(r"^[a-z][a-z0-9+.\-]*:", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")

_HERO_FIELDS = (
    ("title", HERO_TITLE_MAX),
    ("subtitle", HERO_SUBTITLE_MAX),
    ("cta.primary.text", CTA_TEXT_MAX),
    ("cta.secondary.text", CTA_TEXT_MAX),
)

# "*" walks every key of a mapping or every item of a list.
TEXT_FIELDS: Sequence[tuple[str, int | None]] = (
    ("name", NAME_MAX),
    ("description", DESCRIPTION_MAX),
    *((f"pages.*.hero.{path}", limit) for path, limit in _HERO_FIELDS),
    ("pages.home.features.*.title", FEATURE_TITLE_MAX),
    ("pages.home.features.*.description", FEATURE_DESCRIPTION_MAX),
    ("pages.home.features.*.icon", FEATURE_ICON_MAX),
    ("pages.about.blurb", ABOUT_BLURB_MAX),
    ("pages.about.team.*.name", None),
    ("pages.about.team.*.role", None),
    ("pages.about.team.*.bio", TEAM_BIO_MAX),
    ("pages.contact.emailPlaceholder", EMAIL_PLACEHOLDER_MAX),
    ("pages.contact.address", ADDRESS_MAX),
    ("pages.contact.phone", None),
    ("pages.services.services.*.title", SERVICE_TITLE_MAX),
    ("pages.services.services.*.description", SERVICE_DESCRIPTION_MAX),
    ("pages.services.services.*.features.*", SERVICE_FEATURE_MAX),
    ("images.*.alt", None),
)

LINK_FIELDS: Sequence[str] = (
    "pages.*.hero.cta.primary.href",
    "pages.*.hero.cta.secondary.href",
)


@dataclass
class _Slot:
    container: dict[str, Any] | list[Any]
    key: str | int
    label: str

    @property
    def value(self) -> Any:
        return self.container[self.key]

    @value.setter
    def value(self, new_value: Any) -> None:
        self.container[self.key] = new_value


@dataclass
class _Pass:
    warnings: list[str] = field(default_factory=list)
    changed: bool = False

    def record(self, warning: str | None = None) -> None:
        self.changed = True
        if warning:
            self.warnings.append(warning)


def sanitize_site_config(
    config: SiteConfiguration | dict[str, Any],
    options: SanitizationOptions | None = None,
) -> SanitizationResult:
    """Rewrite a copy of ``config`` so it is safe to substitute into markup.

    The caller's object is never modified. The result may still fail schema
    validation (an empty required field stays empty) and must be validated
    again before it is accepted.

    Args:
        config: Candidate configuration, wire-form dict or parsed model
        options: Link handling options

    Returns:
        SanitizationResult with the rewritten copy and one warning per change
    """
    options = options or SanitizationOptions()
    if isinstance(config, SiteConfiguration):
        sanitized: Any = config.to_payload()
    else:
        sanitized = copy.deepcopy(config)

    state = _Pass()
    if isinstance(sanitized, dict):
        _clean_text_fields(sanitized, state)
        _clean_links(sanitized, options, state)
        _drop_unsafe_images(sanitized, state)
        _enforce_limits(sanitized, state)
    else:
        sanitized = {}
        state.record("Configuration was not an object; replaced with an empty object")

    if state.changed:
        logger.info(
            "Sanitized site configuration",
            extra={"warning_count": len(state.warnings)},
        )
    return SanitizationResult(sanitized=sanitized, warnings=state.warnings, changed=state.changed)


def _clean_text_fields(config: dict[str, Any], state: _Pass) -> None:
    for path, _limit in TEXT_FIELDS:
        for slot in _resolve(config, path):
            if not isinstance(slot.value, str):
                continue
            original = slot.value
            cleaned = _clean_text(original, slot.label, state)
            if cleaned != original:
                slot.value = cleaned
                state.record()


def _clean_text(text: str, label: str, state: _Pass) -> str:
    return _WHITESPACE.sub(" ", _strip_dangerous(text, label, state)).strip()


def _strip_dangerous(text: str, label: str, state: _Pass) -> str:
    # Removing one construct can splice together another, so loop to a fixpoint.
    cleaned = text
    while True:
        removed_any = False
        for pattern in DANGEROUS_TEXT_PATTERNS:
            match = pattern.search(cleaned)
            if match is None:
                continue
            excerpt = match.group(0)[:EXCERPT_LENGTH]
            cleaned = pattern.sub("", cleaned)
            state.record(f"Removed dangerous content from {label}: {excerpt}...")
            removed_any = True
        if not removed_any:
            return cleaned


def _clean_links(config: dict[str, Any], options: SanitizationOptions, state: _Pass) -> None:
    allowed = {domain.lower() for domain in options.allowed_domains}
    for path in LINK_FIELDS:
        for slot in _resolve(config, path):
            if not isinstance(slot.value, str):
                continue
            cleaned = _clean_link(slot.value, slot.label, options, allowed, state)
            if cleaned != slot.value:
                slot.value = cleaned


def _clean_link(
    url: str,
    label: str,
    options: SanitizationOptions,
    allowed_domains: set[str],
    state: _Pass,
) -> str:
    if DANGEROUS_PROTOCOL.match(url):
        state.record(f"Removed dangerous protocol from {label}")
        return "/"

    external = bool(EXTERNAL_URL.match(url))
    if external and not options.allow_external_links:
        state.record(f"Converted external link to internal: {label}")
        return "/"

    if external and allowed_domains:
        host = (urlparse(url if URL_SCHEME.match(url) else f"https:{url}").hostname or "").lower()
        if host not in allowed_domains:
            state.record(f"Blocked non-allowed domain in {label}: {host or 'unknown'}")
            return "/"

    if not external and not URL_SCHEME.match(url) and not url.startswith(("/", "#", "?")):
        state.record(f"Normalized relative link in {label}")
        url = "/" + url

    if len(url) > options.max_url_length:
        state.record(f"Truncated long URL in {label} from {len(url)} to {options.max_url_length} characters")
        url = url[: options.max_url_length]

    return url


def _drop_unsafe_images(config: dict[str, Any], state: _Pass) -> None:
    images = config.get("images")
    if not isinstance(images, list):
        return
    kept = []
    for index, image in enumerate(images):
        url = image.get("url") if isinstance(image, dict) else None
        if isinstance(url, str) and DANGEROUS_PROTOCOL.match(url) and not url.strip().lower().startswith("data:image/"):
            state.record(f"Removed image {index} with dangerous URL protocol")
            continue
        kept.append(image)
    if len(kept) != len(images):
        config["images"] = kept


def _enforce_limits(config: dict[str, Any], state: _Pass) -> None:
    for path, limit in TEXT_FIELDS:
        if limit is None:
            continue
        for slot in _resolve(config, path):
            value = slot.value
            if not isinstance(value, str) or len(value) <= limit:
                continue
            # The cut can split a construct the text pass allowed, so clean again.
            truncated = _clean_text(value[:limit], slot.label, state)
            slot.value = truncated
            state.record(f"Truncated {slot.label} from {len(value)} to {len(truncated)} characters")


def _resolve(root: Any, path: str) -> Iterator[_Slot]:
    parts = path.split(".")

    def walk(node: Any, index: int, label: str) -> Iterator[_Slot]:
        part = parts[index]
        last = index == len(parts) - 1
        if part == "*":
            if isinstance(node, dict):
                children = [(key, f"{label}.{key}" if label else key) for key in node]
            elif isinstance(node, list):
                children = [(position, f"{label}[{position}]") for position in range(len(node))]
            else:
                return
        elif isinstance(node, dict) and part in node:
            children = [(part, f"{label}.{part}" if label else part)]
        else:
            return

        for key, child_label in children:
            if last:
                yield _Slot(container=node, key=key, label=child_label)
            else:
                yield from walk(node[key], index + 1, child_label)

    yield from walk(root, 0, "")


__all__ = [
    "DANGEROUS_TEXT_PATTERNS",
    "TEXT_FIELDS",
    "LINK_FIELDS",
    "sanitize_site_config",
]
