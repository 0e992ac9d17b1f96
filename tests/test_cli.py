from pathlib import Path

import pytest
from typer.testing import CliRunner

from apiline import config
from apiline.cli import app

WORKFLOW = """\
variables:
  user: alice
requests:
  - name: Login
    method: POST
    endpoint: /login
    auth: none
"""


@pytest.fixture(autouse=True)
def _no_default_files(monkeypatch):
    monkeypatch.setattr(config, "DEFAULT_CONFIG_FILES", [])


def test_cli_dry_run(tmp_path: Path) -> None:
    path = tmp_path / "workflow.yaml"
    path.write_text(WORKFLOW)

    result = CliRunner().invoke(app, [str(path), "--dry-run", "--no-color", "--base-url", "http://x:1/"])

    assert result.exit_code == 0, result.output
    assert "configuration" in result.stdout
    assert "http://x:1" in result.stdout
    assert "Login" in result.stdout


def test_cli_fails_on_unparseable_definition(tmp_path: Path) -> None:
    path = tmp_path / "workflow.yaml"
    path.write_text("requests: [")

    result = CliRunner().invoke(app, [str(path), "--no-color"])

    assert result.exit_code == 1
    assert "Failed to parse YAML config" in result.stdout


def test_cli_rejects_invalid_settings(tmp_path: Path) -> None:
    path = tmp_path / "workflow.yaml"
    path.write_text(WORKFLOW)
    settings = tmp_path / "settings.toml"
    settings.write_text("request_timeout = -1\n")

    result = CliRunner().invoke(app, [str(path), "--settings", str(settings), "--dry-run"])

    assert result.exit_code == 2
