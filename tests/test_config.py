from pathlib import Path

import pytest
from pydantic import ValidationError

from apiline import config
from apiline.config import ApilineSettings, load_config


@pytest.fixture(autouse=True)
def _no_default_files(monkeypatch):
    monkeypatch.setattr(config, "DEFAULT_CONFIG_FILES", [])


def test_defaults_without_files():
    settings = load_config()

    assert settings.base_url == "http://localhost:8080"
    assert settings.api_key == ""
    assert settings.jwt_variable == "jwt_token"


def test_explicit_file_is_loaded(tmp_path: Path):
    path = tmp_path / "apiline.toml"
    path.write_text('base_url = "https://example.com/api/"\napi_key = "secret"\nrequest_timeout = 5\n')

    settings = load_config(path)

    assert settings.base_url == "https://example.com/api"
    assert settings.api_key == "secret"
    assert settings.request_timeout == 5.0


def test_first_existing_default_wins(tmp_path: Path, monkeypatch):
    first = tmp_path / "first.toml"
    second = tmp_path / "second.toml"
    second.write_text('api_key = "second"\n')
    monkeypatch.setattr(config, "DEFAULT_CONFIG_FILES", [first, second])

    assert load_config().api_key == "second"


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        ApilineSettings(request_timeout=0)
