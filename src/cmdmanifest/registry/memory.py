"""
In-memory command registry.

Hosts register commands explicitly, from Python callables, or via the
`command` decorator:

    registry = InMemoryCommandRegistry()

    @registry.command(aliases=["add"])
    def add_numbers(a: int, b: int) -> int:
        \"\"\"Adds two numbers.\"\"\"
        return a + b
"""
from typing import Callable, Dict, Iterable, List, Optional

from cmdmanifest.errors import RegistrationError
from cmdmanifest.logging import logger
from cmdmanifest.registry.descriptors import CommandDescriptor
from cmdmanifest.registry.introspect import describe_function


class InMemoryCommandRegistry:
    def __init__(self, commands: Iterable[CommandDescriptor] = ()):
        self._commands: Dict[str, CommandDescriptor] = {}
        self._aliases: Dict[str, str] = {}
        for c in commands:
            self.register(c)

    def register(self, descriptor: CommandDescriptor) -> CommandDescriptor:
        """Register a command descriptor. Names must be unique across commands and aliases."""
        if descriptor.name in self._commands or descriptor.name in self._aliases:
            raise RegistrationError(f"Command '{descriptor.name}' is already registered")
        self._commands[descriptor.name] = descriptor
        logger.debug(f"Registered command with {len(descriptor.parameter_sets)} parameter set(s)",
                     extra={"command": descriptor.name})
        return descriptor

    def register_alias(self, alias: str, target: str) -> None:
        if not alias or not target:
            raise RegistrationError("Alias and target must be non-empty strings")
        if alias in self._commands or alias in self._aliases:
            raise RegistrationError(f"Name '{alias}' is already registered")
        self._aliases[alias] = target

    def register_function(
        self,
        fn: Callable,
        name: Optional[str] = None,
        aliases: Iterable[str] = (),
        overloads: Iterable[Callable] = (),
    ) -> CommandDescriptor:
        descriptor = self.register(describe_function(fn, name=name, overloads=overloads))
        for alias in aliases:
            self.register_alias(alias, descriptor.name)
        return descriptor

    def command(self, name: Optional[str] = None, aliases: Iterable[str] = ()):
        """Decorator form of register_function; returns the function unchanged."""
        def decorator(fn: Callable) -> Callable:
            self.register_function(fn, name=name, aliases=aliases)
            return fn
        return decorator

    def get_command(self, name: str) -> Optional[CommandDescriptor]:
        return self._commands.get(name)

    def get_alias_target(self, name: str) -> Optional[str]:
        return self._aliases.get(name)

    def list_commands(self) -> List[str]:
        return list(self._commands.keys())

    def list_aliases(self) -> Dict[str, str]:
        return dict(self._aliases)
