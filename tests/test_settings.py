from __future__ import annotations

import importlib

import pytest

from config import get_settings_module


@pytest.mark.parametrize(
    "env, expected",
    [
        ("production", "config.production"),
        ("PROD", "config.production"),
        ("test", "config.testing"),
        ("staging", "config.development"),
    ],
)
def test_app_env_picks_settings_module(monkeypatch, env, expected):
    monkeypatch.delenv("APP_SETTINGS", raising=False)
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == expected


def test_explicit_settings_module_wins(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("APP_SETTINGS", "config.testing")

    assert get_settings_module() == "config.testing"


def test_testing_settings_define_photo_limits():
    settings = importlib.import_module("config.testing")

    assert settings.MAX_PHOTO_BYTES == 5 * 1024 * 1024
    assert settings.PHOTO_URL_PREFIX == "/photos"
    assert settings.TESTING is True
