from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class BusinessType(str, Enum):
    design = "design"
    consulting = "consulting"
    agency = "agency"
    restaurant = "restaurant"
    legal = "legal"
    portfolio = "portfolio"
    medical = "medical"
    business = "business"


class PageFlags(BaseModel):
    wants_about: bool = False
    wants_contact: bool = False
    wants_services: bool = False


class PromptExtraction(PageFlags):
    name: str | None = None
    business_type: BusinessType = BusinessType.business

    @property
    def page_flags(self) -> PageFlags:
        return PageFlags(
            wants_about=self.wants_about,
            wants_contact=self.wants_contact,
            wants_services=self.wants_services,
        )


__all__ = ["BusinessType", "PageFlags", "PromptExtraction"]
