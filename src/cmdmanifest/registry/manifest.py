"""
JSON command manifests.

A manifest is how a host ships its command metadata ahead of time:

    {
      "commands": [
        {
          "name": "Add-Numbers",
          "summary": "Adds two numbers",
          "description": "Optional long-form help.",
          "parameterSets": [
            {"name": "Default", "parameters": [
              {"name": "a", "type": "Int32", "mandatory": true, "help": "First addend"}
            ]}
          ]
        }
      ],
      "aliases": {"add": "Add-Numbers"}
    }
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from cmdmanifest.errors import RegistrationError
from cmdmanifest.registry.descriptors import (
    CommandDescriptor,
    CommandHelp,
    ParameterDescriptor,
    ParameterSet,
)
from cmdmanifest.registry.memory import InMemoryCommandRegistry


def _optional_str(value: Any, what: str) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise RegistrationError(f"{what} must be a string, got {type(value).__name__}")
    return value


def _list_of_objects(value: Any, what: str) -> List[Dict[str, Any]]:
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise RegistrationError(f"{what} must be a list of objects")
    return value


def _parameter_from_dict(raw: Dict[str, Any], command: str) -> ParameterDescriptor:
    name = raw.get("name")
    if not isinstance(name, str) or not name:
        raise RegistrationError(f"Command '{command}': parameter entries need a non-empty string 'name'")
    type_name = _optional_str(raw.get("type"), f"Command '{command}' parameter '{name}' type")
    mandatory = raw.get("mandatory", False)
    if not isinstance(mandatory, bool):
        raise RegistrationError(f"Command '{command}' parameter '{name}' mandatory must be true or false")
    return ParameterDescriptor(name=name, type_name=type_name or "String", mandatory=mandatory)


def command_from_dict(data: Dict[str, Any]) -> CommandDescriptor:
    """Build a CommandDescriptor from one manifest entry.

    Raises RegistrationError for any entry whose shape or field types are wrong,
    so malformed manifests fail at load time rather than during compilation.
    """
    if not isinstance(data, dict) or not isinstance(data.get("name"), str):
        raise RegistrationError("Manifest command entries must be objects with a string 'name'")
    command = data["name"]

    summary = _optional_str(data.get("summary"), f"Command '{command}' summary")
    description = _optional_str(data.get("description"), f"Command '{command}' description")

    raw_sets = data.get("parameterSets")
    if raw_sets is None:
        raw_sets = [{"name": "Default", "parameters": []}]

    param_help: Dict[str, str] = {}
    sets = []
    for i, raw_set in enumerate(_list_of_objects(raw_sets, f"Command '{command}' parameterSets")):
        set_name = _optional_str(raw_set.get("name"), f"Command '{command}' parameter set name")
        raw_params = _list_of_objects(
            raw_set.get("parameters", []),
            f"Command '{command}' parameter set {i} parameters",
        )
        params = []
        for raw in raw_params:
            param = _parameter_from_dict(raw, command)
            text = _optional_str(raw.get("help"), f"Command '{command}' parameter '{param.name}' help")
            if text is not None:
                param_help.setdefault(param.name, text)
            params.append(param)
        sets.append(ParameterSet(name=set_name or f"Set{i}", parameters=tuple(params)))

    return CommandDescriptor(
        name=command,
        parameter_sets=tuple(sets),
        help=CommandHelp(summary=summary or "", description=description, parameters=param_help),
    )


def load_manifest(source: Union[str, Path, Dict[str, Any]]) -> InMemoryCommandRegistry:
    """Load a manifest file (or already-parsed manifest data) into an in-memory registry."""
    if isinstance(source, dict):
        data = source
    else:
        with open(source, "r", encoding="utf-8") as f:
            data = json.load(f)

    if not isinstance(data, dict):
        raise RegistrationError("Manifest root must be a JSON object")

    aliases = data.get("aliases") or {}
    if not isinstance(aliases, dict) or not all(isinstance(t, str) for t in aliases.values()):
        raise RegistrationError("Manifest 'aliases' must map names to command names")

    registry = InMemoryCommandRegistry()
    for entry in _list_of_objects(data.get("commands", []), "Manifest 'commands'"):
        registry.register(command_from_dict(entry))
    for alias, target in aliases.items():
        registry.register_alias(alias, target)
    return registry
