import pytest

from conftest import UPSTREAM_URL
from search_proxy.core.config import Settings, get_settings
from search_proxy.core.exceptions import ConfigurationError
from search_proxy.main import create_application

REQUIRED = ("WALMART_SEARCH_API_URL", "WALMART_CONSUMER_ID", "PRIVATE_KEY_PATH")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in REQUIRED:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def set_required(monkeypatch, **overrides):
    values = {
        "WALMART_SEARCH_API_URL": UPSTREAM_URL,
        "WALMART_CONSUMER_ID": "consumer",
        "PRIVATE_KEY_PATH": "keys/private.pem",
    }
    values.update(overrides)
    for name, value in values.items():
        if value is None:
            monkeypatch.delenv(name, raising=False)
        else:
            monkeypatch.setenv(name, value)


def test_settings_read_from_environment(clean_env):
    set_required(clean_env)
    clean_env.setenv("UPSTREAM_TIMEOUT_SECONDS", "2.5")

    settings = get_settings()

    assert settings.WALMART_SEARCH_API_URL == UPSTREAM_URL
    assert settings.KEY_VERSION == "1"
    assert settings.UPSTREAM_TIMEOUT_SECONDS == 2.5
    assert settings.PORT == 3111


def test_settings_read_from_dotenv_file(clean_env, tmp_path):
    (tmp_path / ".env").write_text(
        f"WALMART_SEARCH_API_URL={UPSTREAM_URL}\n"
        "WALMART_CONSUMER_ID=from-dotenv\n"
        "PRIVATE_KEY_PATH=key.pem\n"
    )

    assert get_settings().WALMART_CONSUMER_ID == "from-dotenv"


@pytest.mark.parametrize("missing", REQUIRED)
def test_missing_required_setting_is_a_configuration_error(clean_env, missing):
    set_required(clean_env, **{missing: None})

    with pytest.raises(ConfigurationError) as exc_info:
        get_settings()

    assert missing in exc_info.value.context["fields"]


def test_blank_required_setting_is_a_configuration_error(clean_env):
    set_required(clean_env, WALMART_CONSUMER_ID="   ")

    with pytest.raises(ConfigurationError, match="WALMART_CONSUMER_ID"):
        get_settings()


def test_application_refuses_to_start_without_configuration(clean_env):
    set_required(clean_env, PRIVATE_KEY_PATH=None)

    with pytest.raises(ConfigurationError):
        create_application()


def test_cors_origins_accept_comma_separated_values(clean_env):
    set_required(clean_env)
    clean_env.setenv("BACKEND_CORS_ORIGINS", "https://a.example, https://b.example")

    assert get_settings().BACKEND_CORS_ORIGINS == ["https://a.example", "https://b.example"]


def test_timeout_must_be_positive():
    with pytest.raises(ValueError):
        Settings(
            _env_file=None,
            WALMART_SEARCH_API_URL=UPSTREAM_URL,
            WALMART_CONSUMER_ID="consumer",
            PRIVATE_KEY_PATH="key.pem",
            UPSTREAM_TIMEOUT_SECONDS=0,
        )
