"""
Error taxonomy for the command-to-tool compiler.

Compile errors are per-command: the pipeline catches them, logs them at
their `log_level` with their `context` as structured fields, and skips the
command. Registration errors are raised to the host.
"""
import logging
from typing import Any, Dict


class CommandCompileError(Exception):
    """Base class for failures that exclude one command from a batch."""

    log_level = logging.ERROR

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class CommandNotFoundError(CommandCompileError):
    log_level = logging.WARNING

    def __init__(self, name: str):
        super().__init__(f"Command '{name}' was not found", command=name)
        self.name = name


class InvalidParameterSetError(CommandCompileError):
    def __init__(self, name: str, index: int, available: int):
        super().__init__(
            f"Command '{name}' has {available} parameter set(s); index {index} is out of range",
            command=name,
            parameter_set_index=index,
        )
        self.name = name
        self.index = index
        self.available = available


class MissingDescriptionError(CommandCompileError):
    def __init__(self, name: str):
        super().__init__(
            f"Command '{name}' has no summary or description; it cannot be exposed as a tool",
            command=name,
        )
        self.name = name


class SchemaDepthError(ValueError):
    """Serialized manifest nests deeper than the configured budget."""


class RegistrationError(ValueError):
    """A command descriptor, alias or callable could not be registered."""
