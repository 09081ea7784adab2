"""Build a declaration graph from TypeDoc JSON output."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .logging import get_logger
from .models import (
    ArrayType,
    Comment,
    ConditionalType,
    Declaration,
    DeclarationKind,
    Flags,
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

LOGGER = get_logger("loader")

TYPEDOC_KINDS: Dict[int, DeclarationKind] = {
    1: DeclarationKind.PROJECT,
    2: DeclarationKind.MODULE,
    4: DeclarationKind.NAMESPACE,
    8: DeclarationKind.ENUM,
    16: DeclarationKind.ENUM_MEMBER,
    32: DeclarationKind.VARIABLE,
    64: DeclarationKind.FUNCTION,
    128: DeclarationKind.CLASS,
    256: DeclarationKind.INTERFACE,
    512: DeclarationKind.CONSTRUCTOR,
    1024: DeclarationKind.PROPERTY,
    2048: DeclarationKind.METHOD,
    32768: DeclarationKind.PARAMETER,
    65536: DeclarationKind.TYPE_LITERAL,
    262144: DeclarationKind.ACCESSOR,
    2097152: DeclarationKind.TYPE_ALIAS,
}

_BLOCK_TAGS = {
    "@remarks": "remarks",
    "@warning": "warnings",
    "@note": "notes",
    "@example": "examples",
}


class GraphLoadError(RuntimeError):
    """Raised when input cannot be read as a TypeDoc project."""


def load_project(path: Path | str) -> Declaration:
    """Read a TypeDoc JSON file and return the root declaration."""
    source = Path(path)
    if not source.is_file():
        raise GraphLoadError(f"TypeDoc project file not found: {source}")
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise GraphLoadError(f"Unable to read {source}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise GraphLoadError(f"Invalid JSON in {source}: {exc}") from exc
    return project_from_dict(data)


def project_from_dict(data: Any) -> Declaration:
    if not isinstance(data, Mapping) or "kind" not in data or "name" not in data:
        raise GraphLoadError("Input is not a TypeDoc project: expected an object with 'kind' and 'name'")
    root = declaration_from_dict(data)
    LOGGER.debug("Loaded %s with %d declarations", root.name, sum(1 for _ in root.walk()))
    return root


def declaration_from_dict(data: Mapping[str, Any]) -> Declaration:
    kind = _kind_of(data.get("kind"))
    default_value = data.get("defaultValue")
    if default_value is None and kind is DeclarationKind.ENUM_MEMBER:
        literal = data.get("type") or {}
        if literal.get("type") == "literal" and literal.get("value") is not None:
            default_value = json.dumps(literal["value"], ensure_ascii=False)

    declaration = Declaration(
        name=str(data.get("name", "")),
        kind=kind,
        comment=comment_from_dict(data.get("comment")),
        signatures=[signature_from_dict(item) for item in data.get("signatures") or []],
        type=type_from_dict(data.get("type")),
        flags=flags_from_dict(data.get("flags")),
        default_value=str(default_value) if default_value is not None else None,
    )
    for child in data.get("children") or []:
        declaration.add_child(declaration_from_dict(child))
    return declaration


def signature_from_dict(data: Mapping[str, Any]) -> Signature:
    return Signature(
        name=str(data.get("name", "")),
        parameters=[parameter_from_dict(item) for item in data.get("parameters") or []],
        type=type_from_dict(data.get("type")),
        comment=comment_from_dict(data.get("comment")),
    )


def parameter_from_dict(data: Mapping[str, Any]) -> Parameter:
    return Parameter(
        name=str(data.get("name", "")),
        type=type_from_dict(data.get("type")),
        flags=flags_from_dict(data.get("flags")),
        comment=comment_from_dict(data.get("comment")),
    )


def flags_from_dict(data: Optional[Mapping[str, Any]]) -> Flags:
    data = data or {}
    return Flags(
        is_optional=bool(data.get("isOptional")),
        is_static=bool(data.get("isStatic")),
        is_readonly=bool(data.get("isReadonly")),
        is_abstract=bool(data.get("isAbstract")),
    )


def comment_from_dict(data: Optional[Mapping[str, Any]]) -> Optional[Comment]:
    """Flatten TypeDoc comment parts; code parts keep their backticks."""
    if not data:
        return None
    comment = Comment(summary=comment_text(data.get("summary")))
    for tag in data.get("blockTags") or []:
        name = tag.get("tag")
        text = comment_text(tag.get("content"))
        if not text:
            continue
        if name == "@returns":
            comment.returns = text
        elif name in _BLOCK_TAGS:
            getattr(comment, _BLOCK_TAGS[name]).append(text)
        else:
            LOGGER.debug("Ignoring comment tag %s", name)
    return comment


def comment_text(parts: Optional[List[Mapping[str, Any]]]) -> str:
    if not parts:
        return ""
    pieces: List[str] = []
    for part in parts:
        text = part.get("text") or ""
        if part.get("kind") == "code" and text and not text.startswith("`"):
            text = f"`{text}`"
        pieces.append(text)
    return "".join(pieces).strip()


def type_from_dict(data: Optional[Mapping[str, Any]]) -> Optional[Type]:
    """Translate one TypeDoc type node; unmodelled variants become UnknownType."""
    if not data:
        return None
    variant = data.get("type")
    if variant == "intrinsic":
        return IntrinsicType(str(data.get("name", "any")))
    if variant == "reference":
        arguments = tuple(
            converted
            for converted in (type_from_dict(item) for item in data.get("typeArguments") or [])
            if converted is not None
        )
        return ReferenceType(str(data.get("name", "")), arguments)
    if variant == "array":
        return ArrayType(type_from_dict(data.get("elementType")))
    if variant in ("union", "intersection"):
        members = tuple(
            converted for converted in (type_from_dict(item) for item in data.get("types") or []) if converted
        )
        return UnionType(members) if variant == "union" else IntersectionType(members)
    if variant == "literal":
        return LiteralType(_literal_value(data.get("value")))
    if variant == "tuple":
        return TupleType(
            tuple(converted for converted in (type_from_dict(item) for item in data.get("elements") or []) if converted)
        )
    if variant in ("optional", "rest", "namedTupleMember"):
        return type_from_dict(data.get("elementType"))
    if variant == "reflection":
        reflected = data.get("declaration") or {}
        signatures = reflected.get("signatures") or []
        return ReflectionType(
            signature=signature_from_dict(signatures[0]) if signatures else None,
            members=tuple(declaration_from_dict(child) for child in reflected.get("children") or []),
        )
    if variant == "conditional":
        return ConditionalType(
            type_from_dict(data.get("checkType")),
            type_from_dict(data.get("extendsType")),
            type_from_dict(data.get("trueType")),
            type_from_dict(data.get("falseType")),
        )
    if variant == "indexedAccess":
        return IndexedAccessType(type_from_dict(data.get("objectType")), type_from_dict(data.get("indexType")))
    if variant == "query":
        query = data.get("queryType") or {}
        return QueryType(str(query.get("name", "")))
    if variant == "predicate":
        return PredicateType(data.get("name"), type_from_dict(data.get("targetType")))
    if variant == "typeOperator":
        target = type_from_dict(data.get("target"))
        text = getattr(target, "name", None)
        return UnknownType(str(variant), f"{data.get('operator', 'keyof')} {text}" if text else None)

    LOGGER.debug("Unmodelled type variant %s", variant)
    return UnknownType(str(variant), data.get("name"))


def _kind_of(value: Any) -> DeclarationKind:
    if isinstance(value, int):
        kind = TYPEDOC_KINDS.get(value)
    else:
        kind = DeclarationKind.from_name(str(value))
    if kind is None or kind is DeclarationKind.UNKNOWN:
        LOGGER.debug("Unknown declaration kind %r", value)
        return DeclarationKind.UNKNOWN
    return kind


def _literal_value(value: Any) -> Any:
    # Bigint literals arrive as {"negative": bool, "value": "123"}.
    if isinstance(value, Mapping) and "value" in value:
        digits = str(value["value"])
        return int(f"-{digits}" if value.get("negative") else digits)
    return value


__all__ = [
    "GraphLoadError",
    "TYPEDOC_KINDS",
    "comment_from_dict",
    "declaration_from_dict",
    "load_project",
    "project_from_dict",
    "type_from_dict",
]
