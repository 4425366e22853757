"""
Command metadata as the host registry exposes it.

These are read-only views: the compiler never mutates them and holds them
only for the duration of one compile call.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, Tuple

from cmdmanifest.errors import RegistrationError


@dataclass(frozen=True)
class ParameterDescriptor:
    """
    name: unique within its parameter set
    type_name: native type tag, e.g. "Int32", "SwitchParameter", "int"
    """

    name: str
    type_name: str = "String"
    mandatory: bool = False


@dataclass(frozen=True)
class ParameterSet:
    name: str
    parameters: Tuple[ParameterDescriptor, ...] = ()

    def __post_init__(self) -> None:
        seen = set()
        for p in self.parameters:
            if p.name in seen:
                raise RegistrationError(
                    f"Parameter '{p.name}' declared twice in parameter set '{self.name}'"
                )
            seen.add(p.name)


@dataclass(frozen=True)
class CommandHelp:
    summary: str = ""
    description: Optional[str] = None
    parameters: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CommandDescriptor:
    name: str
    parameter_sets: Tuple[ParameterSet, ...]
    help: CommandHelp = field(default_factory=CommandHelp)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise RegistrationError("Command name must be a non-empty string")
        if not self.parameter_sets:
            raise RegistrationError(f"Command '{self.name}' must declare at least one parameter set")


class CommandRegistry(Protocol):
    """
    Read-only view of a host command registry.

    Anything that can answer these two lookups can be compiled: the in-memory
    registry, the SQLite-backed one, or a manifest loaded from disk.
    """

    def get_command(self, name: str) -> Optional[CommandDescriptor]:
        ...

    def get_alias_target(self, name: str) -> Optional[str]:
        """Return the name an alias points at, or None if `name` is not an alias."""
        ...
