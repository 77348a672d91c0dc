from __future__ import annotations

import json
import logging
import re
from typing import Any

import vertexai
from vertexai.generative_models import GenerationConfig, GenerativeModel

from .models.report import GenerationOptions
from .models.site_config import SiteConfiguration
from .remote_client import RemoteGenerationError

logger = logging.getLogger(__name__)

MAX_USER_PROMPT_LENGTH = 2000

SYSTEM_PROMPT = """You are an expert website generator that writes site configurations.
Generate a configuration that strictly conforms to the JSON schema below.

Rules:
1. Return ONLY valid JSON that matches the schema
2. Keep hero titles under 8 words (60 chars max)
3. Keep feature descriptions under 120 characters
4. Never include credentials or other sensitive data
5. Use professional, business-appropriate language
6. Always provide alt text for images
7. Use placeholder contact information (no real data)

Schema:
{schema}

Include between 1 and {max_features} features on the home page.
"""

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", re.IGNORECASE)
_BARE_JSON = re.compile(r"\{[\s\S]*\}")
_UNSAFE_PROMPT_PATTERNS = (
    re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE),
    re.compile(r"\s*on\w+\s*=\s*[\"'][^\"']*[\"']", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"data:(?!image/(?:png|jpg|jpeg|gif|svg|webp))[^,]*,", re.IGNORECASE),
)


def extract_json_object(content: str) -> str | None:
    """Pull the JSON object out of model output that may carry prose or fences."""
    fenced = _FENCED_JSON.search(content)
    if fenced:
        return fenced.group(1).strip()
    bare = _BARE_JSON.search(content)
    if bare:
        return bare.group(0).strip()
    return None


def clean_user_prompt(prompt: str) -> str:
    cleaned = prompt
    for pattern in _UNSAFE_PROMPT_PATTERNS:
        cleaned = pattern.sub("", cleaned)
    return cleaned.strip()


class VertexAIAdapter:
    """Generates site configurations with a Vertex AI Gemini model."""

    def __init__(
        self,
        *,
        project_id: str,
        location: str = "us-central1",
        model_name: str = "gemini-1.5-pro",
        temperature: float = 0.7,
        max_output_tokens: int = 2048,
        model: Any | None = None,
    ) -> None:
        """Initialize Vertex AI adapter.

        Args:
            project_id: GCP project ID
            location: Vertex AI location
            model_name: Model name (e.g., "gemini-1.5-pro")
            temperature: Sampling temperature (0.0 - 1.0)
            max_output_tokens: Maximum output tokens
            model: Pre-built model object; skips Vertex AI initialisation
        """
        self.project_id = project_id
        self.location = location
        self.model_name = model_name
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

        if model is None:
            vertexai.init(project=project_id, location=location)
            model = GenerativeModel(model_name)
        self.model = model

    def generate(self, prompt: str, options: GenerationOptions) -> dict[str, Any]:
        """Generate a candidate site configuration.

        Args:
            prompt: User prompt describing the site
            options: Generation options (feature count)

        Returns:
            Parsed configuration; it has not been validated

        Raises:
            RemoteGenerationError: when the model output holds no usable JSON
        """
        if len(prompt) > MAX_USER_PROMPT_LENGTH:
            raise RemoteGenerationError(f"User prompt is too long (max {MAX_USER_PROMPT_LENGTH} characters)")

        request = self.build_request(prompt, options)
        try:
            response = self.model.generate_content(
                request,
                generation_config=GenerationConfig(
                    temperature=self.temperature,
                    max_output_tokens=self.max_output_tokens,
                ),
            )
            generated_text = response.text
        except Exception as exc:
            logger.error(
                "Vertex AI generation failed",
                exc_info=True,
                extra={"model": self.model_name},
            )
            raise RemoteGenerationError(f"Vertex AI request failed: {exc}", transient=True) from exc

        logger.info(
            "Generated content with Vertex AI",
            extra={
                "model": self.model_name,
                "temperature": self.temperature,
                "input_length": len(request),
                "output_length": len(generated_text or ""),
            },
        )
        return self.parse_response(generated_text or "")

    def build_request(self, prompt: str, options: GenerationOptions) -> str:
        schema = json.dumps(SiteConfiguration.model_json_schema(by_alias=True), indent=2)
        system = SYSTEM_PROMPT.format(schema=schema, max_features=options.max_features)
        return f"{system}\nUser request:\n{clean_user_prompt(prompt)}"

    def parse_response(self, content: str) -> dict[str, Any]:
        json_content = extract_json_object(content)
        if json_content is None:
            raise RemoteGenerationError("No valid JSON found in model response")
        try:
            parsed = json.loads(json_content)
        except json.JSONDecodeError as exc:
            logger.error(
                "Failed to parse JSON response",
                extra={"output_length": len(content)},
            )
            raise RemoteGenerationError(f"JSON parse error: {exc}") from exc
        if not isinstance(parsed, dict):
            raise RemoteGenerationError("Model response is not a JSON object")
        return parsed


__all__ = ["VertexAIAdapter", "extract_json_object", "clean_user_prompt"]
