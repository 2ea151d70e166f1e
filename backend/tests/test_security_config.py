import importlib
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

STRONG_SECRET = "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"


def reload_config_module():
    config_module = sys.modules.get("guidauth.config")
    if config_module:
        config_module.get_settings.cache_clear()
        sys.modules.pop("guidauth.config", None)
    return importlib.import_module("guidauth.config")


def test_missing_secret_key_fails_closed(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "")

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()

    with pytest.raises(Exception, match="secret_key|SECRET_KEY"):
        config_module.get_settings()


def test_weak_secret_key_fails_closed(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "changeme-in-production")

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()

    with pytest.raises(Exception, match="secret_key|SECRET_KEY"):
        config_module.get_settings()


def test_low_entropy_secret_key_fails_closed(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "ab" * 32)

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()

    with pytest.raises(Exception, match="entropy"):
        config_module.get_settings()


def test_strong_secret_key_passes_with_defaults(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", STRONG_SECRET)

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()
    settings = config_module.get_settings()

    assert settings.secret_key == STRONG_SECRET
    assert settings.algorithm == "HS512"
    assert settings.access_token_expire_minutes == 60
    assert settings.refresh_token_expire_days == 30
    assert settings.bcrypt_rounds == 10
    assert settings.port == 3333
    assert settings.refresh_token_strategy == "random"
    assert settings.strict_rotation is False


def test_asymmetric_algorithm_is_rejected(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", STRONG_SECRET)
    monkeypatch.setenv("ALGORITHM", "RS256")

    config_module = reload_config_module()

    with pytest.raises(Exception, match="ALGORITHM"):
        config_module.get_settings()


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("BCRYPT_ROUNDS", "3"),
        ("ACCESS_TOKEN_EXPIRE_MINUTES", "0"),
        ("REFRESH_TOKEN_EXPIRE_DAYS", "-1"),
        ("LOG_LEVEL", "chatty"),
        ("REFRESH_TOKEN_STRATEGY", "sequential"),
    ],
)
def test_invalid_settings_fail_closed(monkeypatch, name, value):
    monkeypatch.setenv("SECRET_KEY", STRONG_SECRET)
    monkeypatch.setenv(name, value)

    config_module = reload_config_module()

    with pytest.raises(Exception):
        config_module.get_settings()
