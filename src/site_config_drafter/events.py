from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Protocol

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

PROMPT_REJECTED = "prompt.rejected"
EXTRACTION_COMPLETED = "extraction.completed"
SYNTHESIS_COMPLETED = "synthesis.completed"
REMOTE_ATTEMPT = "remote.attempt"
REMOTE_FAILED = "remote.failed"
REMOTE_FALLBACK = "remote.fallback"
SANITIZATION_APPLIED = "sanitization.applied"
VALIDATION_COMPLETED = "validation.completed"
GENERATION_COMPLETED = "generation.completed"


class PipelineEvent(BaseModel):
    name: str
    attributes: Mapping[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class PipelineObserver(Protocol):
    def record(self, event: PipelineEvent) -> None:
        ...


class NullObserver:
    def record(self, event: PipelineEvent) -> None:
        return None


class LoggingObserver:
    """Forwards pipeline events to the structured logger."""

    def __init__(self, *, level: int = logging.INFO) -> None:
        self._level = level

    def record(self, event: PipelineEvent) -> None:
        logger.log(
            self._level,
            f"Pipeline event: {event.name}",
            extra={"event": event.name, "attributes": dict(event.attributes)},
        )


class CompositeObserver:
    def __init__(self, observers: Iterable[PipelineObserver]) -> None:
        self._observers = tuple(observers)

    def record(self, event: PipelineEvent) -> None:
        for observer in self._observers:
            observer.record(event)


class MetricsRecorder:
    """Per-instance counters for generation and validation outcomes.

    Callers own the recorder and pass it into the pipeline; nothing is kept
    at module level.
    """

    def __init__(self, *, max_errors: int = 100) -> None:
        self.generation_requests = 0
        self.generation_successes = 0
        self.generation_failures = 0
        self.prompt_rejections = 0
        self.remote_attempts = 0
        self.remote_failures = 0
        self.remote_fallbacks = 0
        self.validations = 0
        self.schema_failures = 0
        self.content_warnings = 0
        self.security_failures = 0
        self.sanitizations = 0
        self.recent_errors: deque[dict[str, Any]] = deque(maxlen=max_errors)

    def record(self, event: PipelineEvent) -> None:
        attrs = event.attributes
        if event.name == PROMPT_REJECTED:
            self.prompt_rejections += 1
            self._remember(event, "prompt", attrs.get("reason"))
        elif event.name == REMOTE_ATTEMPT:
            self.remote_attempts += 1
        elif event.name == REMOTE_FAILED:
            self.remote_failures += 1
            self._remember(event, "remote_generation", attrs.get("error"))
        elif event.name == REMOTE_FALLBACK:
            self.remote_fallbacks += 1
        elif event.name == SANITIZATION_APPLIED:
            self.sanitizations += 1
        elif event.name == VALIDATION_COMPLETED:
            self.validations += 1
            if not attrs.get("schema_valid", True):
                self.schema_failures += 1
                self._remember(event, "schema_validation", f"{attrs.get('error_count', 0)} schema errors")
            if not attrs.get("security_valid", True):
                self.security_failures += 1
                self._remember(event, "security_violation", "sensitive content detected")
            self.content_warnings += int(attrs.get("warning_count", 0))
        elif event.name == GENERATION_COMPLETED:
            self.generation_requests += 1
            if attrs.get("success"):
                self.generation_successes += 1
            else:
                self.generation_failures += 1

    def snapshot(self) -> dict[str, Any]:
        return {
            "generation": {
                "total": self.generation_requests,
                "successful": self.generation_successes,
                "failed": self.generation_failures,
                "prompt_rejections": self.prompt_rejections,
            },
            "remote": {
                "attempts": self.remote_attempts,
                "failures": self.remote_failures,
                "fallbacks": self.remote_fallbacks,
            },
            "validation": {
                "total": self.validations,
                "schema_failures": self.schema_failures,
                "content_warnings": self.content_warnings,
                "security_failures": self.security_failures,
                "sanitizations": self.sanitizations,
            },
            "errors": list(self.recent_errors),
        }

    def health(self) -> dict[str, Any]:
        attempts = max(self.remote_attempts, 1)
        remote_status = "healthy" if self.remote_failures / attempts < 0.1 else "degraded"
        validation_status = "healthy" if self.security_failures == 0 else "warning"
        schema_failure_rate = (
            f"{self.schema_failures / self.validations * 100:.2f}%" if self.validations else "N/A"
        )
        overall = "healthy" if remote_status == "healthy" and validation_status == "healthy" else "degraded"
        return {
            "status": overall,
            "checks": {
                "remote": {"status": remote_status},
                "validation": {"status": validation_status, "schema_failure_rate": schema_failure_rate},
            },
        }

    def _remember(self, event: PipelineEvent, kind: str, error: Any) -> None:
        self.recent_errors.append(
            {"timestamp": event.timestamp.isoformat(), "type": kind, "error": str(error)}
        )


__all__ = [
    "PipelineEvent",
    "PipelineObserver",
    "NullObserver",
    "LoggingObserver",
    "CompositeObserver",
    "MetricsRecorder",
]
