import pytest
from pydantic import ValidationError

from chatrelay.core.settings import DEFAULT_CORS_ORIGINS, Settings
from chatrelay.core.test_settings import build_test_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("CHAT_PROVIDER", "GEMINI_API_KEY", "DEEPSEEK_API_KEY", "OPENROUTER_API_KEY", "CORS_ORIGINS",
                "OPENROUTER_SITE_URL", "OPENROUTER_APP_NAME", "APP_ENV"):
        monkeypatch.delenv(var, raising=False)
    yield


def test_defaults():
    s = Settings()
    assert s.CHAT_PROVIDER == "gemini"
    assert s.CORS_ORIGINS == DEFAULT_CORS_ORIGINS
    assert s.provider_config().api_key is None
    assert s.provider_config().key_status == "missing"
    assert not s.is_development


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("CHAT_PROVIDER", "DeepSeek")
    monkeypatch.setenv("DEEPSEEK_API_KEY", "abc")
    monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", "12.5")
    cfg = Settings().provider_config()
    assert cfg.provider == "deepseek"
    assert cfg.api_key == "abc"
    assert cfg.base_url == "https://api.deepseek.com"
    assert cfg.timeout.total == 12.5
    assert cfg.key_status == "configured (length: 3)"


def test_unknown_provider_rejected():
    with pytest.raises(ValidationError):
        Settings(CHAT_PROVIDER="claude")


@pytest.mark.parametrize("raw,expected", [
    ("https://a.example, https://b.example", ["https://a.example", "https://b.example"]),
    ('["https://a.example"]', ["https://a.example"]),
])
def test_cors_origins_env_formats(monkeypatch, raw, expected):
    monkeypatch.setenv("CORS_ORIGINS", raw)
    assert Settings().CORS_ORIGINS == expected


def test_openrouter_attribution_headers():
    s = build_test_settings(CHAT_PROVIDER="openrouter", OPENROUTER_SITE_URL="https://site.example", OPENROUTER_APP_NAME="Relay")
    cfg = s.provider_config()
    assert cfg.model_id == "deepseek/deepseek-chat"
    assert cfg.extra_headers == {"HTTP-Referer": "https://site.example", "X-Title": "Relay"}


def test_gemini_sdk_shares_gemini_key():
    cfg = build_test_settings(CHAT_PROVIDER="gemini-sdk").provider_config()
    assert cfg.provider == "gemini-sdk"
    assert cfg.api_key == "test-gemini-key"
    assert cfg.base_url == ""
