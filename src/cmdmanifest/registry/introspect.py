"""
Build CommandDescriptors from plain Python callables.

Each callable contributes one parameter set. Documentation comes from the
first callable's docstring:
- first paragraph -> summary
- remaining prose before any section header -> long description
- Google-style `Args:` / `Parameters:` section -> per-parameter help
"""
import inspect
from types import UnionType
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union, get_args, get_origin

from cmdmanifest.errors import RegistrationError
from cmdmanifest.registry.descriptors import (
    CommandDescriptor,
    CommandHelp,
    ParameterDescriptor,
    ParameterSet,
)

_SKIPPED_NAMES = {"self", "cls"}
_ARG_SECTIONS = ("args:", "arguments:", "parameters:", "params:")
_OTHER_SECTIONS = ("returns:", "return:", "raises:", "yields:", "examples:", "example:", "notes:", "note:")


def type_name_of(annotation: Any) -> str:
    """Reduce an annotation to the simple name the type mapper understands."""
    if annotation is inspect.Parameter.empty or annotation is None:
        return "str"
    if isinstance(annotation, str):
        # Postponed annotations: keep the outermost simple name
        return annotation.split("[", 1)[0].rsplit(".", 1)[-1].strip() or "str"

    origin = get_origin(annotation)
    if origin is Union or origin is UnionType:
        non_none = [a for a in get_args(annotation) if a is not type(None)]
        if len(non_none) == 1:
            return type_name_of(non_none[0])
        return "object"
    if origin is not None:
        return getattr(origin, "__name__", str(origin))
    return getattr(annotation, "__name__", str(annotation))


def _parse_docstring(doc: str) -> Tuple[str, Optional[str], Dict[str, str]]:
    summary_lines: List[str] = []
    body_lines: List[str] = []
    params: Dict[str, str] = {}

    state = "summary"
    current: Optional[str] = None
    for raw in doc.splitlines():
        stripped = raw.strip()
        lowered = stripped.lower()

        if lowered in _ARG_SECTIONS:
            state, current = "args", None
            continue
        if lowered in _OTHER_SECTIONS:
            state, current = "other", None
            continue

        if state == "summary":
            if not stripped:
                if summary_lines:
                    state = "body"
                continue
            summary_lines.append(stripped)
        elif state == "body":
            body_lines.append(stripped)
        elif state == "args":
            if not stripped:
                current = None
                continue
            name, sep, text = stripped.partition(":")
            # "name (type): text" is accepted as well as "name: text"
            name = name.split("(", 1)[0].strip()
            if sep and name.isidentifier():
                current = name
                params[name] = text.strip()
            elif current is not None:
                params[current] = f"{params[current]} {stripped}".strip()

    summary = " ".join(summary_lines)
    description = "\n".join(body_lines).strip() or None
    return summary, description, params


def _signature(fn: Callable) -> inspect.Signature:
    try:
        return inspect.signature(fn, eval_str=True)
    except (NameError, TypeError):
        # Unresolvable postponed annotations stay as strings
        return inspect.signature(fn)


def _parameter_set_of(fn: Callable, set_name: str) -> ParameterSet:
    params: List[ParameterDescriptor] = []
    for name, p in _signature(fn).parameters.items():
        if name in _SKIPPED_NAMES:
            continue
        if p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        params.append(ParameterDescriptor(
            name=name,
            type_name=type_name_of(p.annotation),
            mandatory=p.default is inspect.Parameter.empty,
        ))
    return ParameterSet(name=set_name, parameters=tuple(params))


def _callable_name(fn: Callable) -> str:
    name = getattr(fn, "__name__", None)
    if not name or name == "<lambda>":
        raise RegistrationError("Anonymous callables cannot be registered as commands")
    return name


def describe_function(
    fn: Callable,
    name: Optional[str] = None,
    overloads: Iterable[Callable] = (),
) -> CommandDescriptor:
    """
    Describe `fn` (and any alternative signatures) as a command.

    Args:
        fn: The callable whose signature becomes parameter set 0.
        name: Command name; defaults to the callable's __name__.
        overloads: Further callables, each becoming the next parameter set.
    """
    command_name = name or _callable_name(fn)
    if name:
        # Explicit names do not make lambdas acceptable
        _callable_name(fn)

    callables = [fn, *overloads]
    sets = tuple(
        _parameter_set_of(c, _callable_name(c) if i else "Default")
        for i, c in enumerate(callables)
    )

    param_help: Dict[str, str] = {}
    summary, description = "", None
    for i, c in enumerate(callables):
        s, d, p = _parse_docstring(inspect.getdoc(c) or "")
        if i == 0:
            summary, description = s, d
        for key, text in p.items():
            param_help.setdefault(key, text)

    return CommandDescriptor(
        name=command_name,
        parameter_sets=sets,
        help=CommandHelp(summary=summary, description=description, parameters=param_help),
    )
