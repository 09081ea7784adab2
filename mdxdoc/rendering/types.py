"""Display formatting for the type-expression union."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Optional, Sequence

from ..models import (
    ArrayType,
    ConditionalType,
    Declaration,
    IndexedAccessType,
    IntersectionType,
    IntrinsicType,
    LiteralType,
    Parameter,
    PredicateType,
    QueryType,
    ReferenceType,
    ReflectionType,
    Signature,
    TupleType,
    Type,
    UnionType,
    UnknownType,
)

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..references import ReferenceMap

_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\([^)]+\)")


def format_type(type_: Optional[Type], refs: Optional["ReferenceMap"] = None) -> str:
    """Return the display string for ``type_``, linking known references when ``refs`` is given.

    Recursion follows the tree as-is; a cyclic type graph does not terminate.
    """
    if type_ is None:
        return "any"

    if isinstance(type_, IntrinsicType):
        return type_.name

    if isinstance(type_, ReferenceType):
        result = type_.name
        if refs is not None and type_.name in refs:
            result = f"[{type_.name}]({refs.href(type_.name)})"
        if type_.type_arguments:
            args = ", ".join(format_type(arg, refs) for arg in type_.type_arguments)
            result += f"<{args}>"
        return result

    if isinstance(type_, ArrayType):
        return f"{format_type(type_.element, refs)}[]"

    if isinstance(type_, UnionType):
        return " | ".join(format_type(member, refs) for member in type_.types)

    if isinstance(type_, IntersectionType):
        return " & ".join(format_type(member, refs) for member in type_.types)

    if isinstance(type_, LiteralType):
        return json.dumps(type_.value, ensure_ascii=False)

    if isinstance(type_, TupleType):
        return "[" + ", ".join(format_type(element, refs) for element in type_.elements) + "]"

    if isinstance(type_, ReflectionType):
        if type_.signature is not None:
            params = format_parameter_list(type_.signature.parameters, refs)
            return f"({params}) => {format_type(type_.signature.type, refs)}"
        if type_.members:
            return "{ " + "; ".join(_format_member(member, refs) for member in type_.members) + " }"
        return "object"

    if isinstance(type_, ConditionalType):
        return (
            f"{format_type(type_.check, refs)} extends {format_type(type_.extends, refs)}"
            f" ? {format_type(type_.true_type, refs)} : {format_type(type_.false_type, refs)}"
        )

    if isinstance(type_, IndexedAccessType):
        return f"{format_type(type_.object_type, refs)}[{format_type(type_.index_type, refs)}]"

    if isinstance(type_, QueryType):
        return f"typeof {type_.name or 'unknown'}"

    if isinstance(type_, PredicateType):
        return f"{type_.name or 'this'} is {format_type(type_.target, refs)}"

    if isinstance(type_, UnknownType):
        return type_.text or "any"

    return getattr(type_, "name", None) or "any"


def format_parameter_list(parameters: Sequence[Parameter], refs: Optional["ReferenceMap"] = None) -> str:
    """Format ``a: T, b?: U`` for call signatures."""
    return ", ".join(
        f"{param.name}{'?' if param.optional else ''}: {format_type(param.type, refs)}"
        for param in parameters
    )


def format_call_signature(name: str, signature: Signature, *, constructor: bool = False) -> str:
    """Return the plain one-line call form of a signature; links never appear here."""
    params = format_parameter_list(signature.parameters)
    if constructor:
        return f"new {name}({params})"
    return f"{name}({params}): {format_type(signature.type) if signature.type else 'void'}"


def has_links(text: str) -> bool:
    return "[" in text and "](" in text


def strip_links(text: str) -> str:
    """Replace ``[Name](url)`` with ``Name``."""
    return _LINK_PATTERN.sub(r"\1", text)


def _format_member(member: Declaration, refs: Optional["ReferenceMap"]) -> str:
    optional = "?" if member.flags.is_optional else ""
    if member.type is None and member.signatures:
        signature = member.signatures[0]
        params = format_parameter_list(signature.parameters, refs)
        return f"{member.name}{optional}({params}): {format_type(signature.type, refs)}"
    return f"{member.name}{optional}: {format_type(member.type, refs)}"


__all__ = [
    "format_call_signature",
    "format_parameter_list",
    "format_type",
    "has_links",
    "strip_links",
]
