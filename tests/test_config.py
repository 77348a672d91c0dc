from site_config_drafter import config as config_module
from site_config_drafter.config import GeneratorSettings, load_settings, validate_settings


def test_defaults_from_empty_environment():
    settings = load_settings({})

    assert settings == GeneratorSettings()
    assert not settings.remote_enabled
    assert settings.max_prompt_length == 1000


def test_values_are_parsed():
    settings = load_settings(
        {
            "ENVIRONMENT": "prod",
            "GENERATOR_SERVER_URL": "https://generator.example.com",
            "GENERATOR_API_KEY": "key-1",
            "GENERATOR_TIMEOUT": "12.5",
            "GENERATOR_RETRIES": "4",
            "ENABLE_WEBHOOKS": "true",
            "WEBHOOK_SECRET": "whsec",
            "ENABLE_VALIDATION": "no",
            "MAX_FEATURES": "9",
        }
    )

    assert settings.environment == "prod"
    assert settings.remote_enabled
    assert settings.timeout == 12.5
    assert settings.retries == 4
    assert settings.enable_webhooks
    assert not settings.enable_validation
    assert settings.max_features == 6


def test_unparseable_numbers_fall_back_to_defaults():
    settings = load_settings({"GENERATOR_TIMEOUT": "soon", "GENERATOR_RETRIES": "many"})

    assert settings.timeout == 30.0
    assert settings.retries == 2


def test_secrets_come_from_secret_manager_when_project_is_set(monkeypatch):
    requested = []

    def fake_get_secret(project_id, secret_id):
        requested.append((project_id, secret_id))
        return f"{secret_id}-value"

    monkeypatch.setattr(config_module, "_get_secret", fake_get_secret)

    settings = load_settings(
        {
            "PROJECT_ID": "demo-project",
            "GENERATOR_SERVER_URL": "https://generator.example.com",
            "ENABLE_WEBHOOKS": "1",
        }
    )

    assert settings.api_key == "generator-api-key-value"
    assert settings.webhook_secret == "webhook-secret-value"
    assert requested == [("demo-project", "generator-api-key"), ("demo-project", "webhook-secret")]


def test_environment_values_win_over_secret_manager(monkeypatch):
    monkeypatch.setattr(config_module, "_get_secret", lambda *args: "from-secret-manager")

    settings = load_settings(
        {
            "PROJECT_ID": "demo-project",
            "GENERATOR_SERVER_URL": "https://generator.example.com",
            "GENERATOR_API_KEY": "from-env",
        }
    )

    assert settings.api_key == "from-env"


def test_masked_hides_secrets():
    settings = GeneratorSettings(api_key="key-1", webhook_secret="whsec")

    masked = settings.masked()

    assert masked["api_key"] == "***"
    assert masked["webhook_secret"] == "***"


def test_validate_settings():
    check = validate_settings(GeneratorSettings(enable_webhooks=True, server_url="https://x.example", timeout=2))

    assert not check.valid
    assert "WEBHOOK_SECRET required when webhooks are enabled" in check.errors
    assert "GENERATOR_API_KEY not set - authentication may fail" in check.warnings
    assert "GENERATOR_TIMEOUT should be between 5 and 300 seconds" in check.warnings


def test_local_only_settings_are_valid():
    check = validate_settings(GeneratorSettings())

    assert check.valid
    assert check.warnings == ["GENERATOR_SERVER_URL not set - using local generation"]
