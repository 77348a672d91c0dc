import copy
import json
from pathlib import Path

import pytest

from site_config_drafter.models.site_config import SiteConfiguration
from site_config_drafter.validation import (
    accepted_configuration,
    check_content,
    check_schema,
    check_security,
    check_tone,
    validate_configuration,
)

DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "site_configs"


def load_fixture(name: str) -> dict:
    return json.loads((DATA_DIR / f"{name}.json").read_text(encoding="utf-8"))


@pytest.fixture
def valid_config() -> dict:
    return load_fixture("creative-studio")


def test_fixture_is_valid(valid_config):
    report = validate_configuration(valid_config)

    assert report.valid
    assert report.errors == []
    assert report.warnings == []
    assert report.to_wire() == {"valid": True}


def test_parsed_model_validates_like_its_payload(valid_config):
    parsed = SiteConfiguration.model_validate(valid_config)

    assert validate_configuration(parsed).valid
    assert parsed.to_payload() == valid_config
    assert parsed.page_identities() == {"home": "index", "about": "about", "contact": "contact"}


def test_missing_home_features_is_a_schema_error(valid_config):
    del valid_config["pages"]["home"]["features"]

    result = check_schema(valid_config)

    assert not result.valid
    assert [error.path for error in result.errors] == ["pages.home.features"]


def test_too_many_features(valid_config):
    feature = valid_config["pages"]["home"]["features"][0]
    valid_config["pages"]["home"]["features"] = [copy.deepcopy(feature) for _ in range(7)]

    report = validate_configuration(valid_config)

    assert not report.valid
    assert not report.schema_valid
    assert any(error.startswith("pages.home.features") for error in report.errors)


def test_bad_phone_and_image_url(valid_config):
    valid_config["pages"]["contact"]["phone"] = "call us maybe"
    valid_config["images"] = [{"url": "not a url", "alt": "Broken"}]

    paths = {error.path for error in check_schema(valid_config).errors}

    assert paths == {"pages.contact.phone", "images.0.url"}


def test_non_object_input_reports_root_error():
    report = validate_configuration(["not", "a", "config"])

    assert not report.valid
    assert report.errors[0].startswith("root:")


def test_content_warnings_do_not_affect_validity(valid_config):
    valid_config["pages"]["home"]["hero"]["title"] = "One Two Three Four Five Six Seven Eight Nine"

    report = validate_configuration(valid_config)

    assert report.valid
    assert not report.content_valid
    assert report.warnings == ["Hero title has 9 words (recommended: ≤8 words)"]


def test_content_check_reports_long_feature_description():
    config = {"pages": {"home": {"features": [{"description": "x" * 10}, {"description": "y" * 130}]}}}

    result = check_content(config)

    assert result.warnings == ["Feature 2 description is 130 chars (recommended: ≤120 chars)"]


def test_content_check_tolerates_malformed_input():
    assert check_content({"pages": "nope"}).valid
    assert check_content(None).valid


def test_security_check_flags_credentials():
    config = {
        "name": "Test Company with API_KEY=secret123",
        "description": "Description",
        "pages": {
            "home": {
                "hero": {"title": "Title", "subtitle": "Subtitle"},
                "features": [{"title": "Feature", "description": "Description"}],
            }
        },
    }

    report = validate_configuration(config)

    assert report.schema_valid
    assert not report.security_valid
    assert not report.valid
    assert any("Potential sensitive data" in error for error in report.errors)
    # The offending text is never echoed back.
    assert not any("secret123" in error for error in report.errors)


def test_security_check_flags_long_hex_strings():
    result = check_security({"description": "build " + "a1b2c3d4" * 4})

    assert not result.valid
    assert result.errors == ["Potential sensitive data detected: pattern [a-f0-9]{32,}"]


def test_security_check_passes_clean_text(valid_config):
    assert check_security(valid_config).valid


def test_content_checks_can_be_disabled_but_security_cannot(valid_config):
    valid_config["pages"]["home"]["hero"]["title"] = "One two three four five six seven eight nine"
    valid_config["description"] = "Reset your password here"

    full = validate_configuration(valid_config)
    lean = validate_configuration(valid_config, content=False)

    assert full.warnings
    assert lean.warnings == []
    assert lean.content_valid
    assert not lean.valid
    assert not lean.security_valid
    assert lean.errors == full.errors


def test_security_switch_is_not_accepted(valid_config):
    with pytest.raises(TypeError):
        validate_configuration(valid_config, security=False)


def test_tone_check_flags_hype_words():
    result = check_tone(
        {"name": "Awesome Co", "description": "The BEST and cheapest service, guaranteed!!!"}
    )

    assert not result.valid
    assert result.warnings == [
        "Consider revising potentially unprofessional language: awesome",
        "Consider revising potentially unprofessional language: !!!",
        "Consider revising potentially unprofessional language: cheapest",
        "Consider revising potentially unprofessional language: guaranteed",
        "Consider revising potentially unprofessional language: best",
    ]


def test_tone_check_ignores_words_inside_other_words(valid_config):
    valid_config["description"] = "Bestow cheaply sourced, unguaranteed results"

    assert check_tone(valid_config).valid


def test_tone_warnings_are_advisory(valid_config):
    valid_config["pages"]["home"]["hero"]["subtitle"] = "Simply amazing design"

    report = validate_configuration(valid_config)

    assert report.valid
    assert not report.content_valid
    assert report.warnings == ["Consider revising potentially unprofessional language: amazing"]
    assert validate_configuration(valid_config, content=False).warnings == []


def test_accepted_configuration(valid_config):
    accepted = accepted_configuration(valid_config)
    assert isinstance(accepted, SiteConfiguration)
    assert accepted.pages.contact.email_placeholder == "hello@example.com"

    valid_config["description"] = "token holder"
    assert accepted_configuration(valid_config) is None


def test_validation_does_not_mutate_input(valid_config):
    before = copy.deepcopy(valid_config)
    validate_configuration(valid_config)
    assert valid_config == before
