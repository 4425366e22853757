import json
import logging
import pytest
from unittest.mock import patch
from pydantic import ValidationError
from sqlmodel import create_engine
from typer.testing import CliRunner
from cmdmanifest.config import Settings
from cmdmanifest.cli import app
from cmdmanifest.logging import ContextFieldsFilter

runner = CliRunner()

MANIFEST = {
    "commands": [
        {
            "name": "Add-Numbers",
            "summary": "Adds two numbers",
            "parameterSets": [{"name": "Default", "parameters": [
                {"name": "a", "type": "Int32", "mandatory": True, "help": "First addend"},
                {"name": "b", "type": "Int32", "mandatory": True, "help": "Second addend"},
            ]}],
        },
        {"name": "Broken", "summary": ""},
    ],
    "aliases": {"add": "Add-Numbers"},
}


@pytest.fixture
def manifest_path(tmp_path):
    path = tmp_path / "commands.json"
    path.write_text(json.dumps(MANIFEST), encoding="utf-8")
    return path


@pytest.fixture
def db_engine(tmp_path):
    url = f"sqlite:///{tmp_path / 'commands.db'}"
    engine = create_engine(url)
    with patch("cmdmanifest.db.engine", engine), patch("cmdmanifest.db.DB_URL", url):
        yield engine


def test_settings_load(monkeypatch):
    """Verify settings defaults and environment overrides."""
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    settings = Settings(_env_file=None)
    assert settings.DEFAULT_PARAMETER_SET_INDEX == 0
    assert settings.COMPRESS_OUTPUT is True
    assert settings.JSON_MAX_DEPTH == 10

    monkeypatch.setenv("JSON_MAX_DEPTH", "12")
    assert Settings(_env_file=None).JSON_MAX_DEPTH == 12


def test_settings_reject_shallow_depth(monkeypatch):
    monkeypatch.setenv("JSON_MAX_DEPTH", "4")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_context_filter_renders_fields():
    record = logging.LogRecord("cmdmanifest", logging.WARNING, __file__, 1, "msg", None, None)
    record.command = "Get-Item"
    record.parameter = "Path"
    ContextFieldsFilter().filter(record)
    assert record.context == " [command=Get-Item parameter=Path]"

    bare = logging.LogRecord("cmdmanifest", logging.INFO, __file__, 1, "msg", None, None)
    ContextFieldsFilter().filter(bare)
    assert bare.context == ""


def test_cli_doctor():
    """Verify the doctor command runs without error."""
    with patch("cmdmanifest.cli.settings") as mock_settings:
        mock_settings.LOG_LEVEL = "INFO"
        mock_settings.REGISTRY_DB_URL = "sqlite://"
        mock_settings.DEFAULT_PARAMETER_SET_INDEX = 0
        mock_settings.COMPRESS_OUTPUT = True
        mock_settings.JSON_MAX_DEPTH = 10

        result = runner.invoke(app, ["doctor"])
        assert result.exit_code == 0
        assert "cmdmanifest Doctor" in result.stdout
        assert "JSON_MAX_DEPTH:               10" in result.stdout


def test_cli_compile_from_manifest(manifest_path):
    result = runner.invoke(app, ["compile", "add", "Broken", "Missing", "--manifest", str(manifest_path)])
    assert result.exit_code == 0
    doc = json.loads(result.stdout)
    assert [t["name"] for t in doc] == ["Add-Numbers"]
    assert doc[0]["inputSchema"]["required"] == ["a", "b"]
    assert "\n" not in result.stdout.strip()


def test_cli_compile_pretty_and_openai(manifest_path):
    result = runner.invoke(app, [
        "compile", "Add-Numbers", "-m", str(manifest_path), "--no-compress", "--format", "openai",
    ])
    assert result.exit_code == 0
    assert "\n  " in result.stdout
    doc = json.loads(result.stdout)
    assert doc[0]["type"] == "function"
    assert doc[0]["function"]["name"] == "Add-Numbers"
    assert doc[0]["function"]["parameters"]["required"] == ["a", "b"]


def test_cli_compile_out_of_range_index(manifest_path):
    result = runner.invoke(app, ["compile", "Add-Numbers", "-m", str(manifest_path), "-p", "2"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == []


def test_cli_compile_bad_manifest(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    result = runner.invoke(app, ["compile", "Add-Numbers", "-m", str(bad)])
    assert result.exit_code == 1


def test_cli_compile_malformed_parameter_sets(tmp_path, caplog):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"commands": [{"name": "X", "summary": "x", "parameterSets": ["oops"]}]}), encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="cmdmanifest"):
        result = runner.invoke(app, ["compile", "X", "-m", str(bad)])
    assert result.exit_code == 1
    assert not isinstance(result.exception, AttributeError)
    assert any(r.levelno == logging.ERROR and "bad.json" in r.getMessage() for r in caplog.records)


def test_cli_db_import_list_and_compile(db_engine, manifest_path):
    result = runner.invoke(app, ["db", "init"])
    assert result.exit_code == 0

    result = runner.invoke(app, ["db", "import", str(manifest_path)])
    assert result.exit_code == 0
    assert "Imported 2 command(s), 1 alias(es)" in result.stdout

    result = runner.invoke(app, ["db", "list"])
    assert result.exit_code == 0
    assert "1. Add-Numbers" in result.stdout
    assert "add -> Add-Numbers" in result.stdout

    result = runner.invoke(app, ["compile", "add"])
    assert result.exit_code == 0
    assert [t["name"] for t in json.loads(result.stdout)] == ["Add-Numbers"]


def test_cli_db_list_without_tables(db_engine):
    result = runner.invoke(app, ["db", "list"])
    assert result.exit_code == 1
