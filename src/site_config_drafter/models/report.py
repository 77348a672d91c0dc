from __future__ import annotations

from typing import Any, Literal, Sequence

from pydantic import BaseModel, Field

from .extraction import PromptExtraction
from .site_config import SiteConfiguration


class FieldError(BaseModel):
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class SchemaCheck(BaseModel):
    valid: bool
    errors: Sequence[FieldError] = Field(default_factory=list)
    config: SiteConfiguration | None = None


class ContentCheck(BaseModel):
    valid: bool
    warnings: Sequence[str] = Field(default_factory=list)


class SecurityCheck(BaseModel):
    valid: bool
    errors: Sequence[str] = Field(default_factory=list)


class ValidationReport(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    schema_valid: bool = True
    content_valid: bool = True
    security_valid: bool = True
    field_errors: list[FieldError] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"valid": self.valid}
        if self.errors:
            payload["errors"] = list(self.errors)
        if self.warnings:
            payload["warnings"] = list(self.warnings)
        return payload


class SanitizationOptions(BaseModel):
    allow_external_links: bool = True
    max_url_length: int = Field(default=200, ge=1)
    allowed_domains: Sequence[str] = Field(default_factory=list)


class SanitizationResult(BaseModel):
    sanitized: dict[str, Any]
    warnings: list[str] = Field(default_factory=list)
    changed: bool = False


class GenerationOptions(BaseModel):
    max_features: int = Field(default=3, ge=1, le=6)
    include_about: bool | None = None
    include_contact: bool | None = None
    include_services: bool | None = None
    include_images: bool = False
    sanitize: bool = False
    sanitization: SanitizationOptions = Field(default_factory=SanitizationOptions)
    use_remote: bool = True


GenerationSource = Literal["local", "remote", "local-fallback"]


class GenerationResult(BaseModel):
    success: bool
    source: GenerationSource
    config: dict[str, Any]
    report: ValidationReport
    site_config: SiteConfiguration | None = None
    extraction: PromptExtraction | None = None
    remote_error: str | None = None


__all__ = [
    "FieldError",
    "SchemaCheck",
    "ContentCheck",
    "SecurityCheck",
    "ValidationReport",
    "SanitizationOptions",
    "SanitizationResult",
    "GenerationOptions",
    "GenerationResult",
    "GenerationSource",
]
