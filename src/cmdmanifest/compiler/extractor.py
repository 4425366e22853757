"""
Metadata Extractor.

Turns a command and its selected parameter set into what the emitter needs:
a validated description and the retained parameters, each with a protocol
type and help text.

Rules:
- Description falls back summary -> long description; neither usable is fatal
  for the command.
- Infrastructure parameters the host injects into every command are dropped.
- Missing per-parameter help is substituted, never fatal.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
from cmdmanifest.errors import MissingDescriptionError
from cmdmanifest.logging import logger
from cmdmanifest.registry.descriptors import CommandDescriptor, ParameterSet

PLACEHOLDER_HELP = "No description available for this parameter."

# Common parameters the host runtime adds to every command. Pinned; compared case-insensitively.
EXCLUDED_PARAMETERS = frozenset(name.lower() for name in (
    "Verbose",
    "Debug",
    "ErrorAction",
    "WarningAction",
    "InformationAction",
    "ProgressAction",
    "ErrorVariable",
    "WarningVariable",
    "InformationVariable",
    "OutVariable",
    "OutBuffer",
    "PipelineVariable",
    "WhatIf",
    "Confirm",
))

# Checked in order; the first protocol type with a matching token wins.
TYPE_TOKENS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("string", ("string",)),
    ("number", ("int", "int32", "int64", "double", "float", "decimal")),
    ("boolean", ("boolean", "bool", "switch")),
)
DEFAULT_PROTOCOL_TYPE = "string"


@dataclass(frozen=True)
class ExtractedParameter:
    name: str
    type: str
    description: str
    mandatory: bool


@dataclass(frozen=True)
class ExtractedCommand:
    name: str
    description: str
    parameters: Tuple[ExtractedParameter, ...]


def _simple_type_name(type_name: str) -> str:
    # "System.Collections.Generic.List`1[System.String]" -> "List`1"
    return type_name.split("[", 1)[0].rsplit(".", 1)[-1].strip()


def map_protocol_type(type_name: Optional[str]) -> str:
    """Map a native type tag to one of "string", "number", "boolean"."""
    token = _simple_type_name(type_name or "").lower()
    for protocol_type, needles in TYPE_TOKENS:
        if any(needle in token for needle in needles):
            return protocol_type
    return DEFAULT_PROTOCOL_TYPE


def is_excluded_parameter(name: str) -> bool:
    return name.lower() in EXCLUDED_PARAMETERS


def _trimmed(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    text = text.strip()
    return text or None


def resolve_description(command: CommandDescriptor) -> str:
    candidates: List[Callable[[], Optional[str]]] = [
        lambda: _trimmed(command.help.summary),
        lambda: _trimmed(command.help.description),
    ]
    for produce in candidates:
        text = produce()
        if text:
            return text
    raise MissingDescriptionError(command.name)


def parameter_help(command: CommandDescriptor, parameter_name: str) -> str:
    if parameter_name not in command.help.parameters:
        logger.warning(
            "No help text for parameter; using placeholder",
            extra={"command": command.name, "parameter": parameter_name},
        )
        return PLACEHOLDER_HELP

    text = _trimmed(command.help.parameters[parameter_name])
    if text is None:
        logger.debug(
            "Empty help text for parameter; using placeholder",
            extra={"command": command.name, "parameter": parameter_name},
        )
        return PLACEHOLDER_HELP
    return text


def extract_metadata(command: CommandDescriptor, parameter_set: ParameterSet) -> ExtractedCommand:
    description = resolve_description(command)

    retained: List[ExtractedParameter] = []
    for p in parameter_set.parameters:
        if is_excluded_parameter(p.name):
            logger.debug("Dropping infrastructure parameter", extra={"command": command.name, "parameter": p.name})
            continue

        protocol_type = map_protocol_type(p.type_name)
        logger.debug(
            f"Mapped type '{p.type_name}' to '{protocol_type}'",
            extra={"command": command.name, "parameter": p.name},
        )
        retained.append(ExtractedParameter(
            name=p.name,
            type=protocol_type,
            description=parameter_help(command, p.name),
            mandatory=p.mandatory,
        ))

    return ExtractedCommand(name=command.name, description=description, parameters=tuple(retained))
