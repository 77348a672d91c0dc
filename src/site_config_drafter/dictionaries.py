from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Sequence

from .models.extraction import BusinessType

DEFAULT_SITE_NAME = "Generated Site"


@dataclass(frozen=True)
class BusinessTypeRule:
    business_type: BusinessType
    keywords: Sequence[str]

    def matches(self, lowered_prompt: str) -> bool:
        return any(keyword in lowered_prompt for keyword in self.keywords)


# Order is the tie-break: prompts such as "design agency" hit several rules.
DEFAULT_BUSINESS_TYPE_RULES: Sequence[BusinessTypeRule] = (
    BusinessTypeRule(BusinessType.design, ("studio", "design")),
    BusinessTypeRule(BusinessType.consulting, ("consulting", "consultant")),
    BusinessTypeRule(BusinessType.agency, ("agency", "development", "digital")),
    BusinessTypeRule(BusinessType.restaurant, ("restaurant", "cafe", "food")),
    BusinessTypeRule(BusinessType.legal, ("law", "legal", "attorney")),
    BusinessTypeRule(BusinessType.portfolio, ("portfolio",)),
    BusinessTypeRule(BusinessType.medical, ("medical", "healthcare", "clinic")),
)

DEFAULT_BUSINESS_TYPE = BusinessType.business

PAGE_INTENT_KEYWORDS: Mapping[str, str] = {
    "wants_about": "about",
    "wants_contact": "contact",
    "wants_services": "service",
}


_WORD = r"[A-Z][A-Za-z0-9'&.\-]*"
_PHRASE = rf"{_WORD}(?:[ \t]+(?:(?:&|and|of)[ \t]+)?{_WORD})*"

# Tried in order; the first pattern whose match has a usable length wins.
DEFAULT_NAME_PATTERNS: Sequence[re.Pattern[str]] = (
    re.compile(r"\"([^\"]+)\"|“([^”]+)”|(?<![\w])'([^']+)'(?![\w])"),
    re.compile(
        rf"\b(?i:for|called|named)\s+(?:(?i:the|a|an)\s+)?({_PHRASE})"
        r"(?:\s+(?i:company|corp|inc|llc|studio|agency|co)\b\.?)?"
    ),
    re.compile(rf"({_PHRASE})\s+(?i:studio|agency|consulting|design|development)\b"),
)

NAME_LENGTH_EXCLUSIVE_BOUNDS = (2, 50)
LEADING_ARTICLE = re.compile(r"^(?:the|a|an)\s+", re.IGNORECASE)
TRAILING_SUFFIX = re.compile(r"\s+(?:company|corp|inc|llc|co)\.?$", re.IGNORECASE)
TRAILING_PUNCTUATION = re.compile(r"[\s.,;:!?]+$")


@dataclass(frozen=True)
class FeatureTemplate:
    icon: str
    title: str
    description: str


@dataclass(frozen=True)
class ServiceTemplate:
    title: str
    description: str
    features: Sequence[str]


@dataclass(frozen=True)
class ContentBundle:
    business_type: BusinessType
    description: str
    hero_title: str
    hero_title_without_name: str
    hero_subtitle: str
    features: Sequence[FeatureTemplate]
    about_blurb: str
    contact_placeholder: str
    services: Sequence[ServiceTemplate]


DEFAULT_CONTENT_BUNDLES: Mapping[BusinessType, ContentBundle] = {
    BusinessType.design: ContentBundle(
        business_type=BusinessType.design,
        description="Creative design studio providing innovative solutions for modern brands",
        hero_title="Creative Solutions by {name}",
        hero_title_without_name="Creative Design Solutions",
        hero_subtitle="We transform your vision into stunning digital experiences that captivate and convert.",
        features=(
            FeatureTemplate(
                icon="🎨",
                title="Brand Design",
                description="Complete brand identity packages including logos, typography, and visual guidelines.",
            ),
            FeatureTemplate(
                icon="💻",
                title="Web Development",
                description="Modern, responsive websites built with cutting-edge technology and optimization.",
            ),
            FeatureTemplate(
                icon="📱",
                title="Digital Strategy",
                description="Data-driven marketing strategies to reach and engage the right audience effectively.",
            ),
            FeatureTemplate(
                icon="🚀",
                title="User Experience",
                description="Intuitive user interfaces designed to enhance engagement and conversion rates.",
            ),
        ),
        about_blurb=(
            "{name} is a creative design studio specializing in brand identity and digital experiences. "
            "We help businesses shine brighter in the digital landscape."
        ),
        contact_placeholder="Tell us about your next design project",
        services=(
            ServiceTemplate(
                title="Brand Identity",
                description="Logos, typography and visual systems that make your brand memorable.",
                features=("Logo design", "Style guides", "Brand collateral"),
            ),
            ServiceTemplate(
                title="Website Design",
                description="Responsive websites designed around your customers and your goals.",
                features=("UX research", "Responsive layouts", "Launch support"),
            ),
        ),
    ),
    BusinessType.consulting: ContentBundle(
        business_type=BusinessType.consulting,
        description="Strategic consulting services and business solutions",
        hero_title="Expert Consulting from {name}",
        hero_title_without_name="Expert Consulting Services",
        hero_subtitle="Strategic consulting services to optimize operations, increase profitability, and drive growth.",
        features=(
            FeatureTemplate(
                icon="📊",
                title="Strategic Planning",
                description="Comprehensive business strategy development to align operations with growth objectives.",
            ),
            FeatureTemplate(
                icon="⚡",
                title="Process Optimization",
                description="Streamline operations and eliminate inefficiencies to boost productivity and performance.",
            ),
            FeatureTemplate(
                icon="📈",
                title="Performance Analytics",
                description="Data-driven insights and KPI tracking to measure success and identify opportunities.",
            ),
            FeatureTemplate(
                icon="🎯",
                title="Market Research",
                description="In-depth market analysis to understand trends, competition, and opportunities.",
            ),
        ),
        about_blurb=(
            "{name} provides strategic business consulting services to help companies optimize operations "
            "and achieve sustainable growth. Our experienced team delivers proven solutions."
        ),
        contact_placeholder="Enter your work email address",
        services=(
            ServiceTemplate(
                title="Business Strategy",
                description="Clear roadmaps that connect your vision to measurable outcomes.",
                features=("Market assessment", "Growth planning", "Executive workshops"),
            ),
            ServiceTemplate(
                title="Operations Review",
                description="Hands-on analysis of how work gets done and where it can improve.",
                features=("Process mapping", "Cost analysis", "Change management"),
            ),
        ),
    ),
    BusinessType.agency: ContentBundle(
        business_type=BusinessType.agency,
        description="Professional digital agency delivering results-driven solutions",
        hero_title="{name} Digital Agency",
        hero_title_without_name="Digital Agency Services",
        hero_subtitle="Professional digital services to help your business succeed in the modern marketplace.",
        features=(
            FeatureTemplate(
                icon="⚡",
                title="Fast Development",
                description="Rapid prototyping and development cycles to get your project to market quickly.",
            ),
            FeatureTemplate(
                icon="🛡️",
                title="Secure & Scalable",
                description="Enterprise-grade security and architecture designed to grow with your business.",
            ),
            FeatureTemplate(
                icon="🎯",
                title="Custom Solutions",
                description="Tailored applications built specifically for your business requirements and goals.",
            ),
        ),
        about_blurb=(
            "{name} is a full-service digital agency focused on delivering measurable results. "
            "We combine creativity with data-driven strategies to accelerate business growth."
        ),
        contact_placeholder="Enter your email address",
        services=(
            ServiceTemplate(
                title="Web Applications",
                description="Custom web applications engineered for performance and maintainability.",
                features=("Discovery workshops", "Agile delivery", "Quality assurance"),
            ),
            ServiceTemplate(
                title="Growth Marketing",
                description="Campaigns and analytics that turn visitors into loyal customers.",
                features=("Search marketing", "Conversion optimization", "Reporting"),
            ),
        ),
    ),
    BusinessType.restaurant: ContentBundle(
        business_type=BusinessType.restaurant,
        description="Restaurant and dining experience",
        hero_title="Welcome to {name}",
        hero_title_without_name="Exceptional Dining Experience",
        hero_subtitle="Crafting memorable dining experiences with exceptional food and outstanding service.",
        features=(
            FeatureTemplate(
                icon="🍽️",
                title="Exceptional Dining",
                description="Carefully crafted dishes using the finest ingredients and innovative techniques.",
            ),
            FeatureTemplate(
                icon="🏆",
                title="Award-Winning Service",
                description="Professional staff dedicated to creating memorable dining experiences.",
            ),
            FeatureTemplate(
                icon="🌟",
                title="Ambiance & Atmosphere",
                description="Thoughtfully designed spaces that enhance every aspect of your visit.",
            ),
        ),
        about_blurb=(
            "{name} brings people together around seasonal dishes and warm hospitality. "
            "Every plate is prepared with care by our kitchen team."
        ),
        contact_placeholder="Enter your email to book a table",
        services=(
            ServiceTemplate(
                title="Private Dining",
                description="Intimate spaces and tailored menus for celebrations and business dinners.",
                features=("Custom menus", "Wine pairing", "Dedicated host"),
            ),
            ServiceTemplate(
                title="Catering",
                description="Our kitchen brought to your venue, from small gatherings to large events.",
                features=("Event planning", "Delivery and setup", "Dietary options"),
            ),
        ),
    ),
    BusinessType.legal: ContentBundle(
        business_type=BusinessType.legal,
        description="Professional legal services and expertise",
        hero_title="Trusted Counsel from {name}",
        hero_title_without_name="Trusted Legal Counsel",
        hero_subtitle="Providing expert legal counsel and representation with integrity and dedication.",
        features=(
            FeatureTemplate(
                icon="⚖️",
                title="Expert Representation",
                description="Experienced legal counsel with a proven track record of successful outcomes.",
            ),
            FeatureTemplate(
                icon="🛡️",
                title="Comprehensive Protection",
                description="Full-service legal support to protect your interests and minimize risk.",
            ),
            FeatureTemplate(
                icon="📋",
                title="Strategic Guidance",
                description="Clear, actionable legal advice to help you make informed decisions.",
            ),
        ),
        about_blurb=(
            "{name} is a law practice committed to clear advice and diligent representation. "
            "We stand beside our clients at every stage of their matter."
        ),
        contact_placeholder="Enter your email for a consultation",
        services=(
            ServiceTemplate(
                title="Corporate Law",
                description="Formation, governance and transactions for growing businesses.",
                features=("Contracts", "Mergers and acquisitions", "Compliance"),
            ),
            ServiceTemplate(
                title="Litigation",
                description="Focused representation in negotiations, hearings and trials.",
                features=("Case assessment", "Dispute resolution", "Court representation"),
            ),
        ),
    ),
    BusinessType.portfolio: ContentBundle(
        business_type=BusinessType.portfolio,
        description="Creative portfolio website showcasing work and expertise",
        hero_title="{name} Portfolio",
        hero_title_without_name="Creative Portfolio",
        hero_subtitle="Showcasing innovative projects and creative solutions that make an impact.",
        features=(
            FeatureTemplate(
                icon="🖼️",
                title="Selected Work",
                description="A curated collection of projects that highlight craft, range and results.",
            ),
            FeatureTemplate(
                icon="🧭",
                title="Process",
                description="A transparent look at how each project moves from first idea to final delivery.",
            ),
            FeatureTemplate(
                icon="🤝",
                title="Collaboration",
                description="Partnerships with teams and clients who value thoughtful, well-made work.",
            ),
        ),
        about_blurb=(
            "{name} showcases exceptional work across diverse industries and projects. "
            "We bring expertise, creativity, and proven results to every engagement."
        ),
        contact_placeholder="Enter your email to start a project",
        services=(
            ServiceTemplate(
                title="Commissions",
                description="Original work created to your brief, timeline and audience.",
                features=("Concept development", "Revisions", "Final delivery"),
            ),
        ),
    ),
    BusinessType.medical: ContentBundle(
        business_type=BusinessType.medical,
        description="Healthcare and medical services",
        hero_title="Caring for You at {name}",
        hero_title_without_name="Compassionate Healthcare",
        hero_subtitle="Comprehensive healthcare services focused on your well-being and recovery.",
        features=(
            FeatureTemplate(
                icon="🩺",
                title="Experienced Clinicians",
                description="Qualified practitioners who listen carefully and explain every option clearly.",
            ),
            FeatureTemplate(
                icon="📅",
                title="Convenient Appointments",
                description="Flexible scheduling with same-week availability for most consultations.",
            ),
            FeatureTemplate(
                icon="❤️",
                title="Patient-Centered Care",
                description="Treatment plans built around your needs, history and personal goals.",
            ),
        ),
        about_blurb=(
            "{name} provides attentive, evidence-based care for patients and families. "
            "Our team is dedicated to your long-term health."
        ),
        contact_placeholder="Enter your email to request an appointment",
        services=(
            ServiceTemplate(
                title="General Practice",
                description="Routine checkups, preventive care and ongoing support for common conditions.",
                features=("Annual checkups", "Vaccinations", "Health screenings"),
            ),
        ),
    ),
    BusinessType.business: ContentBundle(
        business_type=BusinessType.business,
        description="Professional business website providing quality services to clients",
        hero_title="Welcome to {name}",
        hero_title_without_name="Welcome to Our Site",
        hero_subtitle="Professional services and solutions for your business needs.",
        features=(
            FeatureTemplate(
                icon="🎯",
                title="Professional Service",
                description="High-quality solutions tailored to your specific business needs and requirements.",
            ),
            FeatureTemplate(
                icon="👥",
                title="Expert Team",
                description="Experienced professionals dedicated to delivering exceptional results for your projects.",
            ),
            FeatureTemplate(
                icon="🛠️",
                title="Reliable Support",
                description="Ongoing support and maintenance to ensure your solutions continue to perform optimally.",
            ),
        ),
        about_blurb=(
            "{name} delivers professional services and expert solutions to help businesses grow. "
            "We are committed to excellence and customer satisfaction."
        ),
        contact_placeholder="Enter your email address",
        services=(
            ServiceTemplate(
                title="Consultation",
                description="A focused conversation to understand your needs and recommend next steps.",
                features=("Needs assessment", "Proposal", "Follow-up plan"),
            ),
            ServiceTemplate(
                title="Ongoing Support",
                description="Dependable help after delivery so your solution keeps working for you.",
                features=("Maintenance", "Priority response", "Quarterly reviews"),
            ),
        ),
    ),
}


__all__ = [
    "DEFAULT_SITE_NAME",
    "DEFAULT_BUSINESS_TYPE",
    "DEFAULT_BUSINESS_TYPE_RULES",
    "DEFAULT_CONTENT_BUNDLES",
    "DEFAULT_NAME_PATTERNS",
    "PAGE_INTENT_KEYWORDS",
    "BusinessTypeRule",
    "ContentBundle",
    "FeatureTemplate",
    "ServiceTemplate",
]
