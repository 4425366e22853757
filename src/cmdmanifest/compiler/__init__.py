from cmdmanifest.compiler.pipeline import compile_tool, compile_tools, compile_tools_json
from cmdmanifest.compiler.emitter import (
    ToolDescriptor,
    InputSchema,
    PropertySchema,
    ReturnSchema,
    serialize_tools,
    to_openai_tools,
)
from cmdmanifest.compiler.extractor import map_protocol_type, EXCLUDED_PARAMETERS, PLACEHOLDER_HELP

__all__ = [
    "compile_tool",
    "compile_tools",
    "compile_tools_json",
    "ToolDescriptor",
    "InputSchema",
    "PropertySchema",
    "ReturnSchema",
    "serialize_tools",
    "to_openai_tools",
    "map_protocol_type",
    "EXCLUDED_PARAMETERS",
    "PLACEHOLDER_HELP",
]
