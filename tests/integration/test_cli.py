"""The folio CLI against a scratch data directory."""

import json

import pytest

from src.api.deps import reset_dependencies
from src.app_shell.cli import main


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("FOLIO_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("FOLIO_RULES_PATH", str(tmp_path / "missing-rules.yaml"))
    monkeypatch.delenv("FOLIO_BOOTSTRAP_EMAIL", raising=False)
    monkeypatch.delenv("FOLIO_BOOTSTRAP_PASSWORD", raising=False)
    reset_dependencies()
    yield tmp_path
    reset_dependencies()


def test_migrate_bootstrap_and_status(cli_env, capsys):
    assert main(["migrate"]) == 0
    assert "0001_portfolio.sql" in capsys.readouterr().out

    assert main(["owner-status"]) == 0
    assert json.loads(capsys.readouterr().out) == {"canSignup": True, "userCount": 0}

    assert main(["bootstrap", "--email", "owner@example.com", "--password", "password123"]) == 0
    assert "Owner account created." in capsys.readouterr().out

    assert main(["owner-status"]) == 0
    assert json.loads(capsys.readouterr().out) == {"canSignup": False, "userCount": 1}


def test_second_bootstrap_is_skipped(cli_env, capsys):
    args = ["bootstrap", "--email", "owner@example.com", "--password", "password123"]
    assert main(args) == 0
    capsys.readouterr()

    assert main(args) == 0
    assert "Skipped" in capsys.readouterr().out


def test_bootstrap_without_credentials_is_skipped(cli_env, capsys):
    assert main(["bootstrap"]) == 0
    assert "FOLIO_BOOTSTRAP_EMAIL" in capsys.readouterr().out


def test_weak_bootstrap_password_fails(cli_env):
    assert main(["bootstrap", "--email", "owner@example.com", "--password", "short"]) == 1
