"""
Batch compiler: names -> tool descriptors.

Each name goes through Resolve -> Select -> Extract -> Emit on its own. A
failure at any stage, or a registry that cannot describe the command,
skips that name with a diagnostic; the rest of the batch is unaffected and
nothing is raised to the caller.
"""
from typing import Iterable, List, Optional
from cmdmanifest.compiler.emitter import ToolDescriptor, build_tool_descriptor, serialize_tools
from cmdmanifest.compiler.extractor import extract_metadata
from cmdmanifest.compiler.resolver import resolve_command
from cmdmanifest.compiler.selector import select_parameter_set
from cmdmanifest.errors import CommandCompileError, RegistrationError
from cmdmanifest.logging import logger
from cmdmanifest.registry.descriptors import CommandRegistry


def compile_tool(registry: CommandRegistry, name: str, parameter_set_index: int = 0) -> Optional[ToolDescriptor]:
    """Compile one command, returning None (after logging why) if it has to be skipped."""
    try:
        command = resolve_command(registry, name)
        parameter_set = select_parameter_set(command, parameter_set_index)
        extracted = extract_metadata(command, parameter_set)
    except CommandCompileError as e:
        logger.log(e.log_level, f"Skipping '{name}': {e.message}", extra=e.context)
        return None
    except RegistrationError as e:
        # Raised by registries that hold a record they cannot turn into a descriptor
        logger.error(f"Skipping '{name}': registry lookup failed: {e}", extra={"command": name})
        return None

    logger.debug(
        f"Compiled with {len(extracted.parameters)} parameter(s)",
        extra={"command": command.name, "parameter_set_index": parameter_set_index},
    )
    return build_tool_descriptor(extracted)


def compile_tools(
    registry: CommandRegistry,
    names: Iterable[str],
    parameter_set_index: int = 0,
) -> List[ToolDescriptor]:
    """
    Compile a batch of command names.

    Duplicates are compiled independently. The result preserves input order
    and may be shorter than `names` when commands are skipped.
    """
    names = list(names)
    logger.info(f"Compiling {len(names)} command(s) with parameter set {parameter_set_index}")

    tools: List[ToolDescriptor] = []
    for name in names:
        tool = compile_tool(registry, name, parameter_set_index)
        if tool is not None:
            tools.append(tool)

    skipped = len(names) - len(tools)
    if skipped:
        logger.info(f"Compiled {len(tools)} tool(s); skipped {skipped}")
    else:
        logger.info(f"Compiled {len(tools)} tool(s)")
    return tools


def compile_tools_json(
    registry: CommandRegistry,
    names: Iterable[str],
    parameter_set_index: int = 0,
    compress: bool = True,
    max_depth: int = 10,
) -> str:
    """Compile a batch and serialize it as a JSON array (always an array, even for one name)."""
    tools = compile_tools(registry, names, parameter_set_index)
    return serialize_tools(tools, compress=compress, max_depth=max_depth)
