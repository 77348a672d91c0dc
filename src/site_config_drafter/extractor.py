from __future__ import annotations

import re
from typing import Sequence

from .dictionaries import (
    DEFAULT_BUSINESS_TYPE,
    DEFAULT_BUSINESS_TYPE_RULES,
    DEFAULT_NAME_PATTERNS,
    LEADING_ARTICLE,
    NAME_LENGTH_EXCLUSIVE_BOUNDS,
    PAGE_INTENT_KEYWORDS,
    TRAILING_PUNCTUATION,
    TRAILING_SUFFIX,
    BusinessTypeRule,
)
from .models.extraction import BusinessType, PromptExtraction

_WHITESPACE = re.compile(r"\s+")


class PromptExtractor:
    def __init__(
        self,
        *,
        name_patterns: Sequence[re.Pattern[str]] = DEFAULT_NAME_PATTERNS,
        business_type_rules: Sequence[BusinessTypeRule] = DEFAULT_BUSINESS_TYPE_RULES,
        default_business_type: BusinessType = DEFAULT_BUSINESS_TYPE,
    ) -> None:
        self._name_patterns = tuple(name_patterns)
        self._rules = tuple(business_type_rules)
        self._default_business_type = default_business_type

    def extract(self, prompt: str) -> PromptExtraction:
        text = prompt or ""
        lowered = text.lower()
        intents = {flag: keyword in lowered for flag, keyword in PAGE_INTENT_KEYWORDS.items()}
        return PromptExtraction(
            name=self.extract_name(text),
            business_type=self.classify(text),
            **intents,
        )

    def extract_name(self, prompt: str) -> str | None:
        lower, upper = NAME_LENGTH_EXCLUSIVE_BOUNDS
        for pattern in self._name_patterns:
            for match in pattern.finditer(prompt):
                candidate = next((group for group in match.groups() if group), None)
                if candidate is None or not lower < len(candidate) < upper:
                    continue
                name = self._normalize_name(candidate)
                if len(name) > lower:
                    return name
        return None

    def classify(self, prompt: str) -> BusinessType:
        lowered = (prompt or "").lower()
        for rule in self._rules:
            if rule.matches(lowered):
                return rule.business_type
        return self._default_business_type

    def _normalize_name(self, raw: str) -> str:
        name = _WHITESPACE.sub(" ", raw).strip()
        name = LEADING_ARTICLE.sub("", name)
        name = TRAILING_SUFFIX.sub("", name)
        return TRAILING_PUNCTUATION.sub("", name)


__all__ = ["PromptExtractor"]
