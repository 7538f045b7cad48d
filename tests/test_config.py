from __future__ import annotations

import os

import pytest

from aws_lite import config
from aws_lite.config import EndpointSettings, load_settings


def test_defaults(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    settings = load_settings()

    assert settings.debug is False
    assert settings.endpoint.protocol == "https"
    assert settings.endpoint.host is None
    assert settings.transport.timeout_seconds == 30.0
    assert settings.catalog.paths == ()
    assert settings.aws.default_region is None


def test_env_overrides(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("AWS_LITE_PROTOCOL", "HTTP")
    monkeypatch.setenv("AWS_LITE_HOST", "localhost")
    monkeypatch.setenv("AWS_LITE_PORT", "4566")
    monkeypatch.setenv("AWS_LITE_PATH_PREFIX", "api")
    monkeypatch.setenv("AWS_LITE_DEBUG", "yes")
    monkeypatch.setenv("AWS_LITE_TIMEOUT_SECONDS", "5.5")
    monkeypatch.setenv("AWS_LITE_CATALOG_PATHS", "/a, /b ,")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    monkeypatch.setenv("AWS_PROFILE", "dev")

    settings = load_settings()

    assert settings.endpoint.protocol == "http"
    assert settings.endpoint.host == "localhost"
    assert settings.endpoint.port == 4566
    assert settings.endpoint.path_prefix == "/api"
    assert settings.debug is True
    assert settings.transport.timeout_seconds == 5.5
    assert settings.catalog.paths == ("/a", "/b")
    assert settings.aws.default_region == "eu-west-1"
    assert settings.aws.default_profile == "dev"


def test_aws_region_wins_over_default_region(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("AWS_REGION", "ap-south-1")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")

    assert load_settings().aws.default_region == "ap-south-1"


def test_invalid_integer_falls_back(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("AWS_LITE_PORT", "not-a-port")

    assert load_settings().endpoint.port is None


def test_invalid_configuration_raises(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("AWS_LITE_PROTOCOL", "ftp")

    with pytest.raises(RuntimeError, match="Invalid configuration"):
        load_settings()


def test_settings_are_cached(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    first = load_settings()
    monkeypatch.setenv("AWS_LITE_HOST", "changed")

    assert load_settings() is first
    config._load_settings_cached.cache_clear()
    assert load_settings().endpoint.host == "changed"


def test_dotenv_file_is_read(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("AWS_LITE_HOST=from-dotenv\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    try:
        assert load_settings().endpoint.host == "from-dotenv"
    finally:
        os.environ.pop("AWS_LITE_HOST", None)


@pytest.mark.parametrize(("value", "expected"), [("", None), ("  ", None), ("v1", "/v1")])
def test_path_prefix_validator(value: str, expected: str | None) -> None:
    assert EndpointSettings(path_prefix=value).path_prefix == expected
