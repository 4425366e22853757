"""Command Resolver: name or alias -> canonical CommandDescriptor."""
from cmdmanifest.errors import CommandNotFoundError
from cmdmanifest.logging import logger
from cmdmanifest.registry.descriptors import CommandDescriptor, CommandRegistry


def resolve_command(registry: CommandRegistry, name: str) -> CommandDescriptor:
    """
    Follow aliases (chains included) to the canonical command.

    Raises CommandNotFoundError when the name, or the end of its alias
    chain, is not a registered command. Alias cycles count as not found.
    """
    seen = set()
    current = name
    while True:
        command = registry.get_command(current)
        if command is not None:
            if current != name:
                logger.debug(f"Alias '{name}' resolved to '{command.name}'", extra={"command": command.name})
            return command

        target = registry.get_alias_target(current)
        if target is None or target in seen:
            raise CommandNotFoundError(name)
        seen.add(current)
        current = target
