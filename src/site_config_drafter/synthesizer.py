from __future__ import annotations

from typing import Any, Mapping

from .dictionaries import DEFAULT_CONTENT_BUNDLES, DEFAULT_SITE_NAME, ContentBundle
from .models.extraction import BusinessType, PageFlags
from .models.site_config import FEATURES_MAX, FEATURES_MIN


class ContentSynthesizer:
    """Builds a candidate site configuration from fixed per-type content bundles.

    The output is the JSON wire form. It is not validated here; a long
    extracted name can push a templated field past its bound, which the
    validator reports and the sanitizer can truncate.
    """

    def __init__(
        self,
        *,
        bundles: Mapping[BusinessType, ContentBundle] = DEFAULT_CONTENT_BUNDLES,
        default_name: str = DEFAULT_SITE_NAME,
    ) -> None:
        self._bundles = bundles
        self._default_name = default_name

    def synthesize(
        self,
        name: str | None,
        business_type: BusinessType,
        flags: PageFlags | None = None,
        max_features: int = 3,
    ) -> dict[str, Any]:
        flags = flags or PageFlags()
        bundle = self._bundle_for(business_type)
        site_name = name or self._default_name

        hero: dict[str, Any] = {
            "title": bundle.hero_title.format(name=name) if name else bundle.hero_title_without_name,
            "subtitle": bundle.hero_subtitle,
        }
        cta = self._build_cta(flags)
        if cta:
            hero["cta"] = cta

        pages: dict[str, Any] = {
            "home": {
                "hero": hero,
                "features": self._build_features(bundle, max_features),
            }
        }
        if flags.wants_about:
            pages["about"] = {"blurb": bundle.about_blurb.format(name=site_name)}
        if flags.wants_contact:
            pages["contact"] = {"emailPlaceholder": bundle.contact_placeholder}
        if flags.wants_services:
            pages["services"] = {
                "services": [
                    {
                        "title": service.title,
                        "description": service.description,
                        "features": list(service.features),
                    }
                    for service in bundle.services
                ]
            }

        return {
            "name": site_name,
            "description": bundle.description,
            "pages": pages,
        }

    def _bundle_for(self, business_type: BusinessType) -> ContentBundle:
        bundle = self._bundles.get(business_type)
        if bundle is None:
            bundle = self._bundles[BusinessType.business]
        return bundle

    def _build_features(self, bundle: ContentBundle, max_features: int) -> list[dict[str, str]]:
        count = min(max(max_features, FEATURES_MIN), FEATURES_MAX, len(bundle.features))
        return [
            {"icon": feature.icon, "title": feature.title, "description": feature.description}
            for feature in bundle.features[:count]
        ]

    def _build_cta(self, flags: PageFlags) -> dict[str, Any]:
        cta: dict[str, Any] = {}
        if flags.wants_contact:
            cta["primary"] = {"text": "Get in Touch", "href": "/contact"}
        if flags.wants_about:
            cta["secondary"] = {"text": "Learn More", "href": "/about"}
        return cta


__all__ = ["ContentSynthesizer"]
