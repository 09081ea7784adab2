"""Helper utilities for constructing declaration graphs in tests."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from mdxdoc.models import (
    ArrayType,
    Comment,
    Declaration,
    DeclarationKind,
    Flags,
    IntrinsicType,
    Parameter,
    ReferenceType,
    Signature,
    Type,
)


def _comment(summary: Optional[str], **tags: object) -> Optional[Comment]:
    if summary is None and not any(tags.values()):
        return None
    return Comment(summary=summary or "", **{key: value for key, value in tags.items() if value})  # type: ignore[arg-type]


class GraphBuilder:
    """Terse constructors for declarations, signatures and types."""

    @staticmethod
    def intrinsic(name: str) -> IntrinsicType:
        return IntrinsicType(name)

    @staticmethod
    def ref(name: str, *arguments: Type) -> ReferenceType:
        return ReferenceType(name, tuple(arguments))

    @staticmethod
    def array(element: Type) -> ArrayType:
        return ArrayType(element)

    @staticmethod
    def param(
        name: str,
        type_: Optional[Type] = None,
        *,
        optional: bool = False,
        summary: Optional[str] = None,
    ) -> Parameter:
        return Parameter(name=name, type=type_, flags=Flags(is_optional=optional), comment=_comment(summary))

    @staticmethod
    def signature(
        name: str,
        parameters: Sequence[Parameter] = (),
        returns: Optional[Type] = None,
        *,
        summary: Optional[str] = None,
        returns_doc: str = "",
        examples: Sequence[str] = (),
    ) -> Signature:
        return Signature(
            name=name,
            parameters=list(parameters),
            type=returns,
            comment=_comment(summary, returns=returns_doc, examples=list(examples)),
        )

    @staticmethod
    def declaration(
        name: str,
        kind: DeclarationKind,
        children: Iterable[Declaration] = (),
        *,
        summary: Optional[str] = None,
        signatures: Sequence[Signature] = (),
        type_: Optional[Type] = None,
        optional: bool = False,
        default_value: Optional[str] = None,
        remarks: Sequence[str] = (),
        warnings: Sequence[str] = (),
        notes: Sequence[str] = (),
        examples: Sequence[str] = (),
    ) -> Declaration:
        return Declaration(
            name=name,
            kind=kind,
            comment=_comment(
                summary,
                remarks=list(remarks),
                warnings=list(warnings),
                notes=list(notes),
                examples=list(examples),
            ),
            signatures=list(signatures),
            children=list(children),
            type=type_,
            flags=Flags(is_optional=optional),
            default_value=default_value,
        )

    def project(self, *children: Declaration, name: str = "demo-sdk", summary: Optional[str] = None) -> Declaration:
        return self.declaration(name, DeclarationKind.PROJECT, children, summary=summary)

    def function(
        self,
        name: str,
        parameters: Sequence[Parameter] = (),
        returns: Optional[Type] = None,
        *,
        summary: Optional[str] = None,
        **signature_options: object,
    ) -> Declaration:
        signature = self.signature(name, parameters, returns, summary=summary, **signature_options)  # type: ignore[arg-type]
        return self.declaration(name, DeclarationKind.FUNCTION, signatures=[signature])

    def property(
        self,
        name: str,
        type_: Optional[Type] = None,
        *,
        optional: bool = False,
        summary: Optional[str] = None,
    ) -> Declaration:
        return self.declaration(name, DeclarationKind.PROPERTY, type_=type_, optional=optional, summary=summary)

    def method(self, name: str, parameters: Sequence[Parameter] = (), returns: Optional[Type] = None) -> Declaration:
        return self.declaration(
            name, DeclarationKind.METHOD, signatures=[self.signature(name, parameters, returns)]
        )

    def constructor(self, class_name: str, *overloads: Sequence[Parameter]) -> Declaration:
        signatures = [self.signature(f"new {class_name}", params, self.ref(class_name)) for params in overloads]
        return self.declaration("constructor", DeclarationKind.CONSTRUCTOR, signatures=signatures)

    def class_(self, name: str, *members: Declaration, summary: Optional[str] = None) -> Declaration:
        return self.declaration(name, DeclarationKind.CLASS, members, summary=summary)

    def interface(self, name: str, *members: Declaration, summary: Optional[str] = None) -> Declaration:
        return self.declaration(name, DeclarationKind.INTERFACE, members, summary=summary)

    def enum(self, name: str, *members: str, summary: Optional[str] = None) -> Declaration:
        children = [
            self.declaration(member, DeclarationKind.ENUM_MEMBER, default_value=f'"{member.upper()}"')
            for member in members
        ]
        return self.declaration(name, DeclarationKind.ENUM, children, summary=summary)

    def type_alias(self, name: str, type_: Type, *, summary: Optional[str] = None) -> Declaration:
        return self.declaration(name, DeclarationKind.TYPE_ALIAS, type_=type_, summary=summary)


__all__ = ["GraphBuilder"]
