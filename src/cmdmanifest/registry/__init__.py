from cmdmanifest.registry.descriptors import (
    CommandDescriptor,
    CommandHelp,
    CommandRegistry,
    ParameterDescriptor,
    ParameterSet,
)
from cmdmanifest.registry.introspect import describe_function
from cmdmanifest.registry.memory import InMemoryCommandRegistry
from cmdmanifest.registry.manifest import load_manifest, command_from_dict
from cmdmanifest.registry.store import SqlCommandRegistry, save_command, save_alias

__all__ = [
    "CommandDescriptor",
    "CommandHelp",
    "CommandRegistry",
    "ParameterDescriptor",
    "ParameterSet",
    "describe_function",
    "InMemoryCommandRegistry",
    "load_manifest",
    "command_from_dict",
    "SqlCommandRegistry",
    "save_command",
    "save_alias",
]
