import json
import logging
import pytest
from sqlmodel import Session, SQLModel, create_engine, select
from cmdmanifest.compiler import compile_tools, compile_tools_json
from cmdmanifest.errors import RegistrationError
from cmdmanifest.models import CommandAlias, CommandRecord, ParameterRecord, ParameterSetRecord
from cmdmanifest.registry import (
    CommandDescriptor,
    CommandHelp,
    InMemoryCommandRegistry,
    ParameterDescriptor,
    ParameterSet,
    SqlCommandRegistry,
    load_manifest,
    save_alias,
    save_command,
)

MANIFEST = {
    "commands": [
        {
            "name": "Add-Numbers",
            "summary": "Adds two numbers",
            "parameterSets": [
                {"name": "Default", "parameters": [
                    {"name": "a", "type": "Int32", "mandatory": True, "help": "First addend"},
                    {"name": "b", "type": "Int32", "mandatory": True, "help": "Second addend"},
                    {"name": "Verbose", "type": "SwitchParameter"},
                ]},
                {"name": "Array", "parameters": [
                    {"name": "Values", "type": "Int32[]", "mandatory": True},
                ]},
            ],
        },
        {
            "name": "Get-Date",
            "description": "Gets the current date and time.",
        },
    ],
    "aliases": {"add": "Add-Numbers"},
}


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine("sqlite:///:memory:")
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


# ---------------------------------------------------------------------------
# In-memory registry
# ---------------------------------------------------------------------------
def test_register_duplicate_name_rejected():
    reg = InMemoryCommandRegistry()
    cmd = CommandDescriptor("Get-Thing", (ParameterSet("Default"),), CommandHelp(summary="x"))
    reg.register(cmd)
    with pytest.raises(RegistrationError):
        reg.register(cmd)
    with pytest.raises(RegistrationError):
        reg.register_alias("Get-Thing", "Other")


def test_descriptor_validation():
    with pytest.raises(RegistrationError):
        CommandDescriptor("", (ParameterSet("Default"),))
    with pytest.raises(RegistrationError):
        CommandDescriptor("No-Sets", ())
    with pytest.raises(RegistrationError):
        ParameterSet("Dup", (ParameterDescriptor("a"), ParameterDescriptor("a")))


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------
def test_load_manifest_from_dict():
    reg = load_manifest(MANIFEST)
    assert reg.list_commands() == ["Add-Numbers", "Get-Date"]
    assert reg.list_aliases() == {"add": "Add-Numbers"}

    add = reg.get_command("Add-Numbers")
    assert len(add.parameter_sets) == 2
    assert add.help.parameters == {"a": "First addend", "b": "Second addend"}

    date = reg.get_command("Get-Date")
    assert date.parameter_sets[0].parameters == ()


def test_load_manifest_from_file(tmp_path):
    path = tmp_path / "commands.json"
    path.write_text(json.dumps(MANIFEST), encoding="utf-8")
    doc = json.loads(compile_tools_json(load_manifest(path), ["add", "Get-Date"]))
    assert [t["name"] for t in doc] == ["Add-Numbers", "Get-Date"]
    assert doc[1]["inputSchema"] == {"type": "object", "properties": {}, "required": []}


def test_load_manifest_rejects_bad_entries():
    with pytest.raises(RegistrationError):
        load_manifest({"commands": [{"summary": "no name"}]})


@pytest.mark.parametrize("entry", [
    {"name": "X", "summary": "", "description": 42},
    {"name": "X", "summary": ["not", "text"]},
    {"name": "X", "parameterSets": [{"parameters": [{"name": "a", "help": 7}]}]},
])
def test_load_manifest_rejects_non_string_text(entry):
    with pytest.raises(RegistrationError):
        load_manifest({"commands": [entry]})


@pytest.mark.parametrize("entry", [
    {"name": "X", "parameterSets": ["oops"]},
    {"name": "X", "parameterSets": {"name": "Default"}},
    {"name": "X", "parameterSets": [{"parameters": "a"}]},
    {"name": "X", "parameterSets": [{"parameters": [["a", "Int32"]]}]},
    {"name": "X", "parameterSets": [{"parameters": [{"type": "Int32"}]}]},
    {"name": "X", "parameterSets": [{"parameters": [{"name": "a", "mandatory": "yes"}]}]},
])
def test_load_manifest_rejects_malformed_parameter_sets(entry):
    with pytest.raises(RegistrationError):
        load_manifest({"commands": [entry]})


def test_load_manifest_rejects_malformed_sections():
    with pytest.raises(RegistrationError):
        load_manifest({"commands": {"name": "X"}})
    with pytest.raises(RegistrationError):
        load_manifest({"commands": [], "aliases": {"x": 1}})


# ---------------------------------------------------------------------------
# SQLite-backed registry
# ---------------------------------------------------------------------------
def test_save_and_load_round_trip(session):
    source = load_manifest(MANIFEST)
    for name in source.list_commands():
        save_command(session, source.get_command(name))
    save_alias(session, "add", "Add-Numbers")

    assert len(session.exec(select(ParameterSetRecord)).all()) == 3
    assert len(session.exec(select(ParameterRecord)).all()) == 4

    reg = SqlCommandRegistry(session)
    assert reg.get_command("Add-Numbers") == source.get_command("Add-Numbers")
    assert reg.get_command("Missing") is None
    assert reg.get_alias_target("add") == "Add-Numbers"
    assert reg.list_commands() == ["Add-Numbers", "Get-Date"]

    assert compile_tools_json(reg, ["add", "Get-Date"]) == compile_tools_json(source, ["add", "Get-Date"])


def test_save_command_replaces_existing(session):
    save_command(session, CommandDescriptor(
        "Get-Thing", (ParameterSet("Default", (ParameterDescriptor("Old"),)),), CommandHelp(summary="v1"),
    ))
    save_command(session, CommandDescriptor(
        "Get-Thing", (ParameterSet("Default", (ParameterDescriptor("New", "Int32", True),)),), CommandHelp(summary="v2"),
    ))

    assert len(session.exec(select(CommandRecord)).all()) == 1
    assert [p.name for p in session.exec(select(ParameterRecord)).all()] == ["New"]

    cmd = SqlCommandRegistry(session).get_command("Get-Thing")
    assert cmd.help.summary == "v2"
    assert cmd.parameter_sets[0].parameters == (ParameterDescriptor("New", "Int32", True),)


def test_alias_and_command_names_do_not_clash(session):
    save_command(session, CommandDescriptor("Get-Thing", (ParameterSet("Default"),), CommandHelp(summary="x")))
    with pytest.raises(RegistrationError):
        save_alias(session, "Get-Thing", "Other")

    save_alias(session, "gt", "Get-Thing")
    with pytest.raises(RegistrationError):
        save_command(session, CommandDescriptor("gt", (ParameterSet("Default"),), CommandHelp(summary="x")))


def test_save_alias_updates_target(session):
    save_alias(session, "gt", "Get-Thing")
    save_alias(session, "gt", "Get-Other")
    rows = session.exec(select(CommandAlias)).all()
    assert [(r.alias, r.target) for r in rows] == [("gt", "Get-Other")]


def test_sql_registry_unknown_name_skipped(session):
    assert compile_tools(SqlCommandRegistry(session), ["Nope"]) == []


def test_sql_registry_broken_row_skipped(session, caplog):
    save_command(session, CommandDescriptor(
        "Get-Item",
        (ParameterSet("Default", (ParameterDescriptor("Path", "String", mandatory=True),)),),
        CommandHelp(summary="Gets an item", parameters={"Path": "Item path"}),
    ))
    # A row with no parameter sets cannot become a descriptor
    session.add(CommandRecord(name="Hollow", summary="Has no parameter sets"))
    session.commit()

    with caplog.at_level(logging.DEBUG, logger="cmdmanifest"):
        tools = compile_tools(SqlCommandRegistry(session), ["Hollow", "Get-Item"])

    assert [t.name for t in tools] == ["Get-Item"]
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert errors[0].command == "Hollow"
