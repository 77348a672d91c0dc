from __future__ import annotations

import logging
import time
from typing import Any, Callable, Protocol

import httpx

from .config import GeneratorSettings
from .models.report import GenerationOptions

logger = logging.getLogger(__name__)

SCHEMA_IDENTIFIER = "site-config"
TRANSIENT_STATUS_CODES = frozenset({429})


class RemoteGenerationError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        transient: bool = False,
        attempts: int = 1,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.transient = transient
        self.attempts = attempts


class RemoteGenerator(Protocol):
    def generate(self, prompt: str, options: GenerationOptions) -> dict[str, Any]:
        ...


class RemoteGenerationClient:
    """Client for an external site-configuration generation endpoint."""

    def __init__(
        self,
        url: str,
        *,
        api_key: str | None = None,
        timeout: float = 30.0,
        retries: int = 2,
        retry_delay: float = 0.5,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.retries = max(retries, 0)
        self.retry_delay = retry_delay
        self._transport = transport
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: GeneratorSettings, **kwargs: Any) -> "RemoteGenerationClient":
        if not settings.server_url:
            raise ValueError("GENERATOR_SERVER_URL is not configured")
        return cls(
            settings.server_url,
            api_key=settings.api_key,
            timeout=settings.timeout,
            retries=settings.retries,
            retry_delay=settings.retry_delay,
            **kwargs,
        )

    def generate(self, prompt: str, options: GenerationOptions) -> dict[str, Any]:
        """Request a site configuration for ``prompt``.

        Transient failures (network errors, timeouts, 5xx and 429) are retried
        up to ``retries`` more times. Anything else fails on the first attempt.

        Returns:
            The candidate configuration; it has not been validated.

        Raises:
            RemoteGenerationError: when the collaborator cannot supply a config
        """
        body = {
            "prompt": prompt,
            "schema": SCHEMA_IDENTIFIER,
            "options": {
                "maxFeatures": options.max_features,
                "includeImages": options.include_images,
                "format": "json",
            },
        }
        attempts = self.retries + 1
        attempt = 1
        while True:
            try:
                return self._request(body, attempt)
            except RemoteGenerationError as exc:
                exc.attempts = attempt
                if not exc.transient:
                    raise
                if attempt >= attempts:
                    raise RemoteGenerationError(
                        f"Remote generation failed after {attempts} attempts: {exc}",
                        status_code=exc.status_code,
                        transient=True,
                        attempts=attempts,
                    ) from exc
                logger.warning(
                    "Remote generation failed, retrying",
                    extra={"attempt": attempt, "remaining": attempts - attempt, "error": str(exc)},
                )
                self._sleep(self.retry_delay)
            attempt += 1

    def _request(self, body: dict[str, Any], attempt: int) -> dict[str, Any]:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.url, json=body, headers=self._get_headers())
        except httpx.TimeoutException as exc:
            raise RemoteGenerationError(f"Request timed out after {self.timeout}s", transient=True) from exc
        except httpx.RequestError as exc:
            raise RemoteGenerationError(f"Request failed: {exc}", transient=True) from exc

        logger.info(
            "Remote generation responded",
            extra={"status_code": response.status_code, "attempt": attempt},
        )

        if response.status_code >= 500 or response.status_code in TRANSIENT_STATUS_CODES:
            raise RemoteGenerationError(
                f"Server responded with {response.status_code}",
                status_code=response.status_code,
                transient=True,
            )
        if response.status_code >= 400:
            raise RemoteGenerationError(
                f"Server responded with {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteGenerationError("Server returned invalid JSON", status_code=response.status_code) from exc

        return self._unwrap(payload, response.status_code)

    def _unwrap(self, payload: Any, status_code: int) -> dict[str, Any]:
        if not isinstance(payload, dict):
            raise RemoteGenerationError("Server returned a non-object response", status_code=status_code)
        if "success" in payload:
            if not payload.get("success"):
                raise RemoteGenerationError(
                    payload.get("error") or "Server returned unsuccessful response",
                    status_code=status_code,
                )
            data = payload.get("data")
            if not isinstance(data, dict):
                raise RemoteGenerationError("Server response is missing configuration data", status_code=status_code)
            return data
        return payload

    def _get_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers


__all__ = ["RemoteGenerationClient", "RemoteGenerationError", "RemoteGenerator", "SCHEMA_IDENTIFIER"]
