from __future__ import annotations

import logging
from typing import Any

from .events import (
    EXTRACTION_COMPLETED,
    GENERATION_COMPLETED,
    PROMPT_REJECTED,
    REMOTE_ATTEMPT,
    REMOTE_FAILED,
    REMOTE_FALLBACK,
    SANITIZATION_APPLIED,
    SYNTHESIS_COMPLETED,
    VALIDATION_COMPLETED,
    NullObserver,
    PipelineEvent,
    PipelineObserver,
)
from .extractor import PromptExtractor
from .models.extraction import PageFlags, PromptExtraction
from .models.report import (
    GenerationOptions,
    GenerationResult,
    GenerationSource,
    SanitizationOptions,
    SanitizationResult,
    ValidationReport,
)
from .models.site_config import SiteConfiguration
from .remote_client import RemoteGenerationError, RemoteGenerator
from .sanitizer import sanitize_site_config
from .synthesizer import ContentSynthesizer
from .validation import check_schema, validate_configuration

logger = logging.getLogger(__name__)

DEFAULT_MAX_PROMPT_LENGTH = 1000


class InvalidPromptError(ValueError):
    pass


class SiteConfigGenerator:
    """Turns a free-text prompt into a validated site configuration.

    A remote strategy is tried first when one is configured; the local
    extract-then-synthesize path is the fallback and the default. Every
    candidate, wherever it came from, passes the same final validation.
    """

    def __init__(
        self,
        *,
        extractor: PromptExtractor | None = None,
        synthesizer: ContentSynthesizer | None = None,
        remote: RemoteGenerator | None = None,
        fallback_to_local: bool = True,
        observer: PipelineObserver | None = None,
        max_prompt_length: int = DEFAULT_MAX_PROMPT_LENGTH,
        content_checks: bool = True,
    ) -> None:
        self._extractor = extractor or PromptExtractor()
        self._synthesizer = synthesizer or ContentSynthesizer()
        self._remote = remote
        self._fallback_to_local = fallback_to_local
        self._observer = observer or NullObserver()
        self._max_prompt_length = max_prompt_length
        self._content_checks = content_checks

    def check_prompt(self, prompt: str) -> str:
        """Reject prompts the pipeline will not process.

        Raises:
            InvalidPromptError: if the prompt is empty or longer than the limit
        """
        if not isinstance(prompt, str) or not prompt.strip():
            self._emit(PROMPT_REJECTED, reason="empty")
            raise InvalidPromptError("Prompt must be a non-empty string")
        if len(prompt) > self._max_prompt_length:
            self._emit(PROMPT_REJECTED, reason="too_long", length=len(prompt))
            raise InvalidPromptError(
                f"Prompt is too long ({len(prompt)} characters, max {self._max_prompt_length})"
            )
        return prompt

    def generate(self, prompt: str, options: GenerationOptions | None = None) -> GenerationResult:
        """Generate a site configuration for ``prompt``.

        Args:
            prompt: Free-text description of the site
            options: Generation options; defaults apply when omitted

        Returns:
            GenerationResult whose ``success`` mirrors the final validation

        Raises:
            InvalidPromptError: if the prompt is rejected
            RemoteGenerationError: if the remote strategy fails and fallback is disabled
        """
        options = options or GenerationOptions()
        self.check_prompt(prompt)

        source: GenerationSource = "local"
        extraction: PromptExtraction | None = None
        remote_error: str | None = None
        candidate: dict[str, Any] | None = None

        if self._remote is not None and options.use_remote:
            try:
                candidate = self._generate_remote(prompt, options)
                source = "remote"
            except RemoteGenerationError as exc:
                if not self._fallback_to_local:
                    raise
                remote_error = str(exc)
                source = "local-fallback"
                self._emit(REMOTE_FALLBACK, error=remote_error)
                logger.warning(
                    "Remote generation failed, falling back to local generation",
                    extra={"error": remote_error},
                )

        if candidate is None:
            extraction = self._extractor.extract(prompt)
            self._emit(
                EXTRACTION_COMPLETED,
                business_type=extraction.business_type.value,
                name_found=extraction.name is not None,
            )
            candidate = self._synthesizer.synthesize(
                extraction.name,
                extraction.business_type,
                self._resolve_flags(extraction, options),
                options.max_features,
            )
            self._emit(SYNTHESIS_COMPLETED, business_type=extraction.business_type.value)

        sanitization_warnings: list[str] = []
        if options.sanitize:
            sanitized = self.sanitize(candidate, options.sanitization)
            candidate = sanitized.sanitized
            sanitization_warnings = sanitized.warnings

        report = self.validate(candidate)
        if sanitization_warnings:
            report.warnings = [*report.warnings, *sanitization_warnings]
        site_config = check_schema(candidate).config if report.valid else None

        self._emit(GENERATION_COMPLETED, success=report.valid, source=source)
        logger.info(
            "Generated site configuration",
            extra={
                "source": source,
                "valid": report.valid,
                "error_count": len(report.errors),
                "warning_count": len(report.warnings),
            },
        )
        return GenerationResult(
            success=report.valid,
            source=source,
            config=candidate,
            report=report,
            site_config=site_config,
            extraction=extraction,
            remote_error=remote_error,
        )

    def validate(self, config: SiteConfiguration | dict[str, Any]) -> ValidationReport:
        report = validate_configuration(config, content=self._content_checks)
        self._emit(
            VALIDATION_COMPLETED,
            schema_valid=report.schema_valid,
            security_valid=report.security_valid,
            error_count=len(report.errors),
            warning_count=len(report.warnings),
        )
        return report

    def sanitize(
        self,
        config: SiteConfiguration | dict[str, Any],
        options: SanitizationOptions | None = None,
    ) -> SanitizationResult:
        result = sanitize_site_config(config, options)
        if result.changed:
            self._emit(SANITIZATION_APPLIED, warning_count=len(result.warnings))
        return result

    def _generate_remote(self, prompt: str, options: GenerationOptions) -> dict[str, Any]:
        self._emit(REMOTE_ATTEMPT)
        try:
            candidate = self._remote.generate(prompt, options)
        except RemoteGenerationError as exc:
            self._emit(REMOTE_FAILED, error=str(exc), status_code=exc.status_code)
            raise
        if not isinstance(candidate, dict):
            self._emit(REMOTE_FAILED, error="non-object candidate")
            raise RemoteGenerationError("Remote generator returned a non-object candidate")
        return candidate

    def _resolve_flags(self, extraction: PromptExtraction, options: GenerationOptions) -> PageFlags:
        def pick(override: bool | None, detected: bool) -> bool:
            return detected if override is None else override

        return PageFlags(
            wants_about=pick(options.include_about, extraction.wants_about),
            wants_contact=pick(options.include_contact, extraction.wants_contact),
            wants_services=pick(options.include_services, extraction.wants_services),
        )

    def _emit(self, name: str, **attributes: Any) -> None:
        self._observer.record(PipelineEvent(name=name, attributes=attributes))


__all__ = ["SiteConfigGenerator", "InvalidPromptError", "DEFAULT_MAX_PROMPT_LENGTH"]
