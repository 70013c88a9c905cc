"""
Test environment validation.
"""

from app.utils import config


def test_defaults_are_valid():
    assert config.Settings().STAT_CACHE_MODE == "recompute"
    assert config.verify_env_variables()


def test_redis_backend_requires_url(monkeypatch):
    monkeypatch.setattr(config.settings, "STAT_CACHE_BACKEND", "redis")
    monkeypatch.setattr(config.settings, "REDIS_URL", "")
    assert not config.verify_env_variables()


def test_unknown_cache_mode_is_rejected(monkeypatch):
    monkeypatch.setattr(config.settings, "STAT_CACHE_MODE", "sometimes")
    assert not config.verify_env_variables()
