import pytest

from libadmin.utils import runtime
from libadmin.utils.feature_flags import get_feature_flags, is_feature_enabled, refresh_feature_flag_cache


def test_dev_mode_off_by_default(monkeypatch):
    monkeypatch.delenv("DEV_MODE", raising=False)
    assert runtime.dev_mode_requested() is False
    assert runtime.dev_mode_active() is False


def test_dev_mode_allowed_on_localhost(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "http://localhost:5173")
    assert runtime.dev_mode_active() is True


def test_dev_mode_rejected_for_remote_host(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "https://admin.example.org")
    with pytest.raises(RuntimeError):
        runtime.dev_mode_active()


def test_dev_mode_needs_base_url_or_override(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.delenv("APP_BASE_URL", raising=False)
    monkeypatch.delenv("ALLOW_DEV_MODE", raising=False)
    with pytest.raises(RuntimeError):
        runtime.dev_mode_active()
    monkeypatch.setenv("ALLOW_DEV_MODE", "true")
    assert runtime.dev_mode_active() is True


@pytest.mark.parametrize("raw,expected", [(None, 12), ("24", 24), ("0", 12), ("abc", 12)])
def test_session_ttl_hours(monkeypatch, raw, expected):
    if raw is None:
        monkeypatch.delenv("SESSION_TTL_HOURS", raising=False)
    else:
        monkeypatch.setenv("SESSION_TTL_HOURS", raw)
    assert runtime.session_ttl_hours() == expected


def test_cors_origins(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example ,")
    assert runtime.cors_origins() == ["https://a.example", "https://b.example"]
    monkeypatch.delenv("CORS_ORIGINS")
    assert "http://localhost:5173" in runtime.cors_origins()


def test_feature_flags_default_on_and_cached(monkeypatch):
    refresh_feature_flag_cache()
    assert all(get_feature_flags().values())
    monkeypatch.setenv("FEATURE_ANALYTICS_ENABLED", "false")
    # Cached until refreshed
    assert is_feature_enabled("analytics") is True
    refresh_feature_flag_cache()
    assert is_feature_enabled("analytics") is False
    assert is_feature_enabled("corrections") is True
