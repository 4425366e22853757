"""
Schema Emitter.

Builds one ToolDescriptor per extracted command and serializes a batch as a
single JSON array. Property order follows parameter declaration order and
is part of the output contract.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple
from cmdmanifest.compiler.extractor import ExtractedCommand
from cmdmanifest.errors import SchemaDepthError

DEFAULT_RETURN_TYPE = "string"
MIN_JSON_DEPTH = 8


@dataclass(frozen=True)
class PropertySchema:
    type: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "description": self.description}


@dataclass(frozen=True)
class InputSchema:
    properties: Tuple[Tuple[str, PropertySchema], ...]
    required: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {name: prop.to_dict() for name, prop in self.properties},
            "required": list(self.required),
        }


@dataclass(frozen=True)
class ReturnSchema:
    type: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "description": self.description}


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: InputSchema
    returns: ReturnSchema

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema.to_dict(),
            "returns": self.returns.to_dict(),
        }


def build_tool_descriptor(extracted: ExtractedCommand) -> ToolDescriptor:
    """
    Assemble the descriptor for one command.

    The validated summary only gates inclusion: `description` and
    `returns.description` carry the canonical command name.
    """
    properties = tuple(
        (p.name, PropertySchema(type=p.type, description=p.description))
        for p in extracted.parameters
    )
    required = tuple(p.name for p in extracted.parameters if p.mandatory)

    return ToolDescriptor(
        name=extracted.name,
        description=extracted.name,
        input_schema=InputSchema(properties=properties, required=required),
        returns=ReturnSchema(type=DEFAULT_RETURN_TYPE, description=extracted.name),
    )


def _depth(value: Any) -> int:
    if isinstance(value, dict):
        return 1 + max((_depth(v) for v in value.values()), default=0)
    if isinstance(value, list):
        return 1 + max((_depth(v) for v in value), default=0)
    return 0


def dump_json(payload: List[Dict[str, Any]], compress: bool = True, max_depth: int = 10) -> str:
    """
    Encode a JSON array, compact or indented.

    Raises SchemaDepthError if the document nests deeper than `max_depth`.
    """
    if max_depth < MIN_JSON_DEPTH:
        raise ValueError(f"max_depth must be at least {MIN_JSON_DEPTH}")

    depth = _depth(payload)
    if depth > max_depth:
        raise SchemaDepthError(f"Manifest nests {depth} levels deep; limit is {max_depth}")

    if compress:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(payload, ensure_ascii=False, indent=2)


def serialize_tools(tools: Sequence[ToolDescriptor], compress: bool = True, max_depth: int = 10) -> str:
    return dump_json([t.to_dict() for t in tools], compress=compress, max_depth=max_depth)


def to_openai_tools(tools: Sequence[ToolDescriptor]) -> List[Dict[str, Any]]:
    """Return the tools in OpenAI function-calling format."""
    return [
        {
            "type": "function",
            "function": {
                "name": t.name,
                "description": t.description,
                "parameters": t.input_schema.to_dict(),
            },
        }
        for t in tools
    ]
