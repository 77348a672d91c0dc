from __future__ import annotations

from typing import Any, Sequence

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator

NAME_MAX = 100
DESCRIPTION_MAX = 200
HERO_TITLE_MAX = 60
HERO_SUBTITLE_MAX = 300
CTA_TEXT_MAX = 50
FEATURE_TITLE_MAX = 50
FEATURE_DESCRIPTION_MAX = 120
FEATURE_ICON_MAX = 10
FEATURES_MIN = 1
FEATURES_MAX = 6
ABOUT_BLURB_MAX = 500
TEAM_BIO_MAX = 200
EMAIL_PLACEHOLDER_MAX = 100
ADDRESS_MAX = 200
SERVICE_TITLE_MAX = 50
SERVICE_DESCRIPTION_MAX = 200
SERVICE_FEATURE_MAX = 100

PHONE_PATTERN = r"^\+?[0-9\s()-]+$"

OPTIONAL_PAGES = ("about", "contact", "services")

_url_adapter = TypeAdapter(AnyUrl)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Image(_WireModel):
    url: str
    alt: str = Field(min_length=1)

    @field_validator("url")
    @classmethod
    def _well_formed(cls, value: str) -> str:
        # Keep the caller's spelling; AnyUrl would normalise it.
        _url_adapter.validate_python(value)
        return value


class CallToAction(_WireModel):
    text: str = Field(min_length=1, max_length=CTA_TEXT_MAX)
    href: str = Field(min_length=1)


class CallToActionSet(_WireModel):
    primary: CallToAction | None = None
    secondary: CallToAction | None = None


class Hero(_WireModel):
    title: str = Field(min_length=1, max_length=HERO_TITLE_MAX, description="Keep hero title under 8 words")
    subtitle: str = Field(min_length=1, max_length=HERO_SUBTITLE_MAX)
    cta: CallToActionSet | None = None


class Feature(_WireModel):
    icon: str | None = Field(default=None, max_length=FEATURE_ICON_MAX, description="Single emoji preferred")
    title: str = Field(min_length=1, max_length=FEATURE_TITLE_MAX)
    description: str = Field(min_length=1, max_length=FEATURE_DESCRIPTION_MAX)


class Service(_WireModel):
    title: str = Field(min_length=1, max_length=SERVICE_TITLE_MAX)
    description: str = Field(min_length=1, max_length=SERVICE_DESCRIPTION_MAX)
    features: Sequence[str] | None = None

    @field_validator("features")
    @classmethod
    def _bounded_items(cls, value: Sequence[str] | None) -> Sequence[str] | None:
        if value is None:
            return value
        for index, item in enumerate(value):
            if len(item) > SERVICE_FEATURE_MAX:
                raise ValueError(
                    f"features[{index}] should have at most {SERVICE_FEATURE_MAX} characters"
                )
        return value


class TeamMember(_WireModel):
    name: str = Field(min_length=1)
    role: str = Field(min_length=1)
    bio: str | None = Field(default=None, max_length=TEAM_BIO_MAX)


class HomePage(_WireModel):
    hero: Hero
    features: Sequence[Feature] = Field(min_length=FEATURES_MIN, max_length=FEATURES_MAX)


class AboutPage(_WireModel):
    hero: Hero | None = None
    blurb: str | None = Field(default=None, min_length=1, max_length=ABOUT_BLURB_MAX)
    team: Sequence[TeamMember] | None = None


class ContactPage(_WireModel):
    hero: Hero | None = None
    email_placeholder: str | None = Field(
        default=None, alias="emailPlaceholder", min_length=1, max_length=EMAIL_PLACEHOLDER_MAX
    )
    address: str | None = Field(default=None, max_length=ADDRESS_MAX)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)


class ServicesPage(_WireModel):
    hero: Hero | None = None
    services: Sequence[Service] | None = None


class SitePages(_WireModel):
    home: HomePage
    about: AboutPage | None = None
    contact: ContactPage | None = None
    services: ServicesPage | None = None


class SiteConfiguration(_WireModel):
    name: str = Field(min_length=1, max_length=NAME_MAX)
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX)
    pages: SitePages
    images: Sequence[Image] | None = None

    def to_payload(self) -> dict[str, Any]:
        """Dump the wire form consumed by page rendering and config files."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def page_identities(self) -> dict[str, str]:
        present = ["home", *(key for key in OPTIONAL_PAGES if getattr(self.pages, key) is not None)]
        return {key: page_identity(key) for key in present}


def page_identity(page_key: str) -> str:
    return "index" if page_key == "home" else page_key


__all__ = [
    "Image",
    "CallToAction",
    "CallToActionSet",
    "Hero",
    "Feature",
    "Service",
    "TeamMember",
    "HomePage",
    "AboutPage",
    "ContactPage",
    "ServicesPage",
    "SitePages",
    "SiteConfiguration",
    "page_identity",
    "OPTIONAL_PAGES",
]
