"""
Tests for the command line entry point.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from cli.main import main
from redirect_sync.docs_client import DocsClient
from tests.conftest import LOCATION_PREFIX, make_response


@pytest.fixture()
def cli_env(tmp_path, monkeypatch):
    store_file = tmp_path / "metadata.json"
    store_file.write_text(json.dumps({"42": {"_helpscout_data": {"slug": "install", "number": 7}}}))

    monkeypatch.setenv("HELPSCOUT_API_KEY", "test-key")
    monkeypatch.setenv("HELPSCOUT_SITE_ID", "S1")
    monkeypatch.setenv("PERMALINK_TEMPLATE", "https://example.com/?p={record_id}")
    monkeypatch.setenv("METADATA_STORE_FILE", str(store_file))
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    # Keep log handlers out of captured output
    monkeypatch.setattr("cli.main.setup_logger", lambda **kwargs: None)
    return store_file


def run_cli(tmp_path, *args):
    base = ["--env-file", str(tmp_path / ".env"), "--config-file", str(tmp_path / "none.yaml")]
    with pytest.raises(SystemExit) as exc_info:
        main(base + list(args))
    return exc_info.value.code


def test_sync_creates_redirect_and_stores_id(tmp_path, cli_env, capsys):
    docs_client = MagicMock(spec=DocsClient)
    docs_client.post.return_value = make_response(200, {"Location": LOCATION_PREFIX + "xyz"})

    with patch("redirect_sync.core.DocsClient", return_value=docs_client):
        code = run_cli(tmp_path, "--json", "sync", "42")

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["status_code"] == 200
    stored = json.loads(cli_env.read_text())
    assert stored["42"]["_helpscout_data"]["redirectId"] == "xyz"


def test_sync_failure_exits_non_zero(tmp_path, cli_env, capsys):
    docs_client = MagicMock(spec=DocsClient)

    with patch("redirect_sync.core.DocsClient", return_value=docs_client):
        code = run_cli(tmp_path, "sync", "99")

    assert code == 1
    assert "something went wrong." in capsys.readouterr().out
    docs_client.post.assert_not_called()


def test_show_prints_stored_data(tmp_path, cli_env, capsys):
    code = run_cli(tmp_path, "show", "42")

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"slug": "install", "number": 7}


def test_invalid_configuration_exits(tmp_path, cli_env, monkeypatch, capsys):
    monkeypatch.delenv("HELPSCOUT_SITE_ID")

    code = run_cli(tmp_path, "show", "42")

    assert code == 1
    assert "HELPSCOUT_SITE_ID is required" in capsys.readouterr().err


def test_test_command_reports_connection(tmp_path, cli_env, capsys):
    with patch("cli.main.DocsClient") as client_cls:
        client_cls.return_value.test_connection.return_value = False
        code = run_cli(tmp_path, "--json", "test")

    assert code == 1
    assert json.loads(capsys.readouterr().out) == {"helpscout": False}
