"""Core data models for the declaration graph handed to the renderer."""

from __future__ import annotations

import enum
import weakref
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence


class DeclarationKind(enum.Enum):
    """Documentable entity kinds understood by the renderer."""

    PROJECT = "Project"
    MODULE = "Module"
    NAMESPACE = "Namespace"
    ENUM = "Enum"
    ENUM_MEMBER = "EnumMember"
    VARIABLE = "Variable"
    FUNCTION = "Function"
    CLASS = "Class"
    INTERFACE = "Interface"
    CONSTRUCTOR = "Constructor"
    PROPERTY = "Property"
    METHOD = "Method"
    ACCESSOR = "Accessor"
    TYPE_ALIAS = "TypeAlias"
    TYPE_LITERAL = "TypeLiteral"
    PARAMETER = "Parameter"
    UNKNOWN = "Unknown"

    @property
    def label(self) -> str:
        return _KIND_LABELS.get(self, self.value)

    @classmethod
    def from_name(cls, value: str) -> "DeclarationKind":
        """Resolve a kind from its value or member name, case-insensitively."""
        lowered = value.replace(" ", "").replace("_", "").lower()
        for member in cls:
            if member.value.lower() == lowered or member.name.replace("_", "").lower() == lowered:
                return member
        return cls.UNKNOWN


_KIND_LABELS = {
    DeclarationKind.ENUM_MEMBER: "Enum Member",
    DeclarationKind.TYPE_ALIAS: "Type Alias",
    DeclarationKind.TYPE_LITERAL: "Type Literal",
}


@dataclass
class Comment:
    """Flattened doc comment attached to a declaration, signature or parameter."""

    summary: str = ""
    remarks: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    examples: List[str] = field(default_factory=list)
    returns: str = ""

    def is_empty(self) -> bool:
        return not any(
            (self.summary.strip(), self.remarks, self.warnings, self.notes, self.examples, self.returns.strip())
        )


@dataclass
class Flags:
    """Modifier flags carried by declarations and parameters."""

    is_optional: bool = False
    is_static: bool = False
    is_readonly: bool = False
    is_abstract: bool = False


class Type:
    """Base class of the type-expression union."""


@dataclass(frozen=True)
class IntrinsicType(Type):
    name: str


@dataclass(frozen=True)
class ReferenceType(Type):
    name: str
    type_arguments: Sequence[Type] = ()


@dataclass(frozen=True)
class ArrayType(Type):
    element: Optional[Type]


@dataclass(frozen=True)
class UnionType(Type):
    types: Sequence[Type] = ()


@dataclass(frozen=True)
class IntersectionType(Type):
    types: Sequence[Type] = ()


@dataclass(frozen=True)
class LiteralType(Type):
    value: Any


@dataclass(frozen=True)
class TupleType(Type):
    elements: Sequence[Type] = ()


@dataclass(frozen=True, eq=False)
class ReflectionType(Type):
    """Anonymous object or function shape."""

    signature: Optional["Signature"] = None
    members: Sequence["Declaration"] = ()


@dataclass(frozen=True)
class ConditionalType(Type):
    check: Optional[Type]
    extends: Optional[Type]
    true_type: Optional[Type]
    false_type: Optional[Type]


@dataclass(frozen=True)
class IndexedAccessType(Type):
    object_type: Optional[Type]
    index_type: Optional[Type]


@dataclass(frozen=True)
class QueryType(Type):
    name: str


@dataclass(frozen=True)
class PredicateType(Type):
    name: Optional[str]
    target: Optional[Type] = None


@dataclass(frozen=True)
class UnknownType(Type):
    """Variant the loader does not model; keeps whatever text it could recover."""

    kind: str
    text: Optional[str] = None


@dataclass
class Parameter:
    """A single parameter of a signature."""

    name: str
    type: Optional[Type] = None
    flags: Flags = field(default_factory=Flags)
    comment: Optional[Comment] = None

    @property
    def optional(self) -> bool:
        return self.flags.is_optional


@dataclass
class Signature:
    """One callable shape: a constructor, method or function overload."""

    name: str
    parameters: List[Parameter] = field(default_factory=list)
    type: Optional[Type] = None
    comment: Optional[Comment] = None

    @property
    def return_type(self) -> Optional[Type]:
        return self.type


@dataclass(eq=False)
class Declaration:
    """A documentable entity and its owned subtree."""

    name: str
    kind: DeclarationKind
    comment: Optional[Comment] = None
    signatures: List[Signature] = field(default_factory=list)
    children: List["Declaration"] = field(default_factory=list)
    type: Optional[Type] = None
    flags: Flags = field(default_factory=Flags)
    default_value: Optional[str] = None

    def __post_init__(self) -> None:
        self._parent_ref: Optional[weakref.ReferenceType[Declaration]] = None
        for child in self.children:
            child._parent_ref = weakref.ref(self)

    @property
    def parent(self) -> Optional["Declaration"]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def add_child(self, child: "Declaration") -> "Declaration":
        """Append and adopt a child declaration."""
        self.children.append(child)
        child._parent_ref = weakref.ref(self)
        return child

    def children_of(self, kind: DeclarationKind) -> List["Declaration"]:
        return [child for child in self.children if child.kind is kind]

    @property
    def summary(self) -> str:
        return self.comment.summary.strip() if self.comment else ""

    @property
    def remarks(self) -> List[str]:
        return list(self.comment.remarks) if self.comment else []

    @property
    def examples(self) -> List[str]:
        return list(self.comment.examples) if self.comment else []

    def walk(self):
        """Yield this declaration and all descendants in depth-first pre-order."""
        stack = [self]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def __repr__(self) -> str:
        return f"Declaration(name={self.name!r}, kind={self.kind.value})"


PAGE_KINDS: frozenset[DeclarationKind] = frozenset(
    {
        DeclarationKind.CLASS,
        DeclarationKind.INTERFACE,
        DeclarationKind.FUNCTION,
        DeclarationKind.ENUM,
        DeclarationKind.TYPE_ALIAS,
        DeclarationKind.MODULE,
    }
)


__all__ = [
    "ArrayType",
    "Comment",
    "ConditionalType",
    "Declaration",
    "DeclarationKind",
    "Flags",
    "IndexedAccessType",
    "IntersectionType",
    "IntrinsicType",
    "LiteralType",
    "PAGE_KINDS",
    "Parameter",
    "PredicateType",
    "QueryType",
    "ReferenceType",
    "ReflectionType",
    "Signature",
    "TupleType",
    "Type",
    "UnionType",
    "UnknownType",
]
