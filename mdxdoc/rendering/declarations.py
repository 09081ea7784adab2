"""Per-kind page layout for declarations."""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional

from ..config import RenderConfig
from ..document import Block, BlockKind, RenderedDocument
from ..logging import get_logger
from ..models import Comment, Declaration, DeclarationKind, IntrinsicType, Parameter, Signature
from ..references import ReferenceMap
from .components import MdxComponents
from .parameters import classify_parameter_location, describe_parameter, ends_with_prose, ensure_period
from .types import format_call_signature, format_type, has_links, strip_links

_CODE_FENCE_PATTERN = re.compile(r"```(\w+)?[^\n]*\n(.*?)```", re.DOTALL)
_CAMEL_PATTERN = re.compile(r"(?<!^)(?=[A-Z])")
_ACTION_PREFIXES = (
    ("get", "retrieve"),
    ("create", "create"),
    ("update", "update"),
    ("delete", "delete"),
    ("fetch", "fetch"),
)
EMPTY_CELL = "—"


def escape_inline(text: str) -> str:
    """Escape JSX-significant characters in text rendered outside literal spans."""
    return (
        text.replace("{", "\\{")
        .replace("}", "\\}")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def plural_of(name: str) -> str:
    lower = name.lower()
    if lower.endswith("y"):
        return f"{lower[:-1]}ies"
    if lower.endswith(("s", "x", "z")):
        return f"{lower}es"
    return f"{lower}s"


def action_of(name: str) -> str:
    lower = name.lower()
    for prefix, verb in _ACTION_PREFIXES:
        if lower.startswith(prefix) and len(lower) > len(prefix):
            return f"{verb} {_words(name[len(prefix):])}"
    return _words(name)


def _words(name: str) -> str:
    return _CAMEL_PATTERN.sub(" ", name).lower().strip()


class DeclarationRenderer:
    """Renders one page-worthy declaration into a RenderedDocument."""

    def __init__(
        self,
        config: RenderConfig | None = None,
        components: MdxComponents | None = None,
    ) -> None:
        self.config = config or RenderConfig()
        self.components = components or MdxComponents(self.config.templates_dir)
        self.logger = get_logger("rendering")
        self._layouts: Dict[DeclarationKind, Callable[[Declaration, ReferenceMap], List[Block]]] = {
            DeclarationKind.CLASS: self._render_class,
            DeclarationKind.INTERFACE: self._render_interface,
            DeclarationKind.FUNCTION: self._render_function,
            DeclarationKind.ENUM: self._render_enum,
            DeclarationKind.TYPE_ALIAS: self._render_type_alias,
        }

    def render(
        self,
        decl: Declaration,
        refs: ReferenceMap,
        *,
        location: Optional[str] = None,
    ) -> RenderedDocument:
        document = RenderedDocument(
            location=location if location is not None else refs.get(decl.name, ""),
            title=decl.name,
        )
        summary = summary_of(decl)
        document.append(self.components.frontmatter(decl.name, self.describe(decl)))
        document.append(self._back_link(decl, refs))
        document.append(Block.heading(2, decl.name))
        if summary:
            document.extend(rich_text_blocks(summary))
        document.extend(self.comment_blocks(decl.comment))

        layout = self._layouts.get(decl.kind)
        if layout is None:
            self.logger.debug("No dedicated layout for %s (%s); rendering summary only", decl.name, decl.kind.value)
        else:
            document.extend(layout(decl, refs))
        return document

    def describe(self, decl: Declaration) -> str:
        """Frontmatter description: the summary, or a sentence generated from the kind."""
        description = " ".join(summary_of(decl).split())
        if not description:
            title = decl.name or "Documentation"
            if decl.kind is DeclarationKind.CLASS:
                description = f"Use the {title} class to manage {plural_of(title)}."
            elif decl.kind is DeclarationKind.INTERFACE:
                description = f"The {title} interface defines the structure for {plural_of(title)}."
            elif decl.kind is DeclarationKind.FUNCTION:
                description = f"Call {title} to {action_of(title)}."
            elif decl.kind is DeclarationKind.ENUM:
                description = f"Use {title} to specify {plural_of(title)}."
            else:
                description = f"Documentation for {title}."
        return ensure_period(description)

    def comment_blocks(self, comment: Optional[Comment]) -> List[Block]:
        """Callouts for remarks, warnings and notes, then examples."""
        if comment is None:
            return []
        blocks: List[Block] = []
        for kind, texts in (("info", comment.remarks), ("warning", comment.warnings), ("note", comment.notes)):
            for text in texts:
                if text.strip():
                    blocks.extend(self.components.callout(kind, rich_text_blocks(text.strip())))

        examples = []
        for text in comment.examples:
            found = [
                {"language": match.group(1) or "typescript", "code": match.group(2).strip()}
                for match in _CODE_FENCE_PATTERN.finditer(text)
            ]
            if not found and text.strip():
                found = [{"language": "typescript", "code": text.strip()}]
            examples.extend(found)
        if len(examples) > 1:
            blocks.extend(
                self.components.code_group(
                    [
                        {"title": example["language"].capitalize(), **example}
                        for example in examples
                    ]
                )
            )
        elif examples:
            blocks.append(Block.code(examples[0]["code"], examples[0]["language"]))
        return blocks

    def _back_link(self, decl: Declaration, refs: ReferenceMap) -> Block:
        text = "← Back to API Reference"
        url = self.config.index_url
        parent = decl.parent
        while parent is not None:
            if parent.kind is DeclarationKind.MODULE:
                break
            if parent.kind in (DeclarationKind.CLASS, DeclarationKind.INTERFACE):
                href = refs.href(parent.name)
                if href:
                    text = f"← Back to {parent.name}"
                    url = href
                break
            parent = parent.parent
        return Block.paragraph(f"[{text}]({url})")

    def _render_class(self, decl: Declaration, refs: ReferenceMap) -> List[Block]:
        constructors = decl.children_of(DeclarationKind.CONSTRUCTOR)
        properties = decl.children_of(DeclarationKind.PROPERTY)
        methods = [method for method in decl.children_of(DeclarationKind.METHOD) if method.signatures]

        toc_items = [
            title
            for title, members in (("Constructor", constructors), ("Properties", properties), ("Methods", methods))
            if members
        ]
        blocks: List[Block] = list(self.components.toc(toc_items))

        if constructors:
            blocks.append(Block.heading(3, "Constructor"))
            for constructor in constructors:
                if not constructor.signatures:
                    continue
                # Only the first overload is documented.
                blocks.extend(
                    self.signature_blocks(decl.name, constructor.signatures[0], refs, constructor=True)
                )

        if properties:
            blocks.append(Block.heading(3, "Properties"))
            if len(properties) > self.config.property_disclosure_threshold:
                blocks.extend(
                    self.components.accordion_group(
                        [(prop.name, self._class_property_blocks(prop, refs)) for prop in properties]
                    )
                )
            else:
                for prop in properties:
                    blocks.append(Block.paragraph(f"**{prop.name}**"))
                    blocks.extend(self._class_property_blocks(prop, refs))

        if methods:
            blocks.append(Block.heading(3, "Methods"))
            if len(methods) > self.config.method_disclosure_threshold:
                blocks.extend(
                    self.components.accordion_group(
                        [
                            (
                                format_call_signature(method.name, method.signatures[0]),
                                self.signature_blocks(method.name, method.signatures[0], refs, call_line=False),
                            )
                            for method in methods
                        ]
                    )
                )
            else:
                for method in methods:
                    blocks.append(Block.heading(4, method.name))
                    blocks.extend(self.signature_blocks(method.name, method.signatures[0], refs))
        return blocks

    def _render_interface(self, decl: Declaration, refs: ReferenceMap) -> List[Block]:
        properties = decl.children_of(DeclarationKind.PROPERTY)
        if not properties:
            return []
        blocks: List[Block] = list(self.components.toc(["Properties"]))
        blocks.append(Block.heading(3, "Properties"))
        if len(properties) > self.config.property_disclosure_threshold:
            blocks.extend(
                self.components.accordion_group(
                    [(prop.name, self._interface_property_blocks(prop, refs)) for prop in properties]
                )
            )
        else:
            for prop in properties:
                blocks.append(Block.paragraph(f"**{prop.name}**"))
                blocks.extend(self._interface_property_blocks(prop, refs))
        return blocks

    def _render_function(self, decl: Declaration, refs: ReferenceMap) -> List[Block]:
        page_summary = summary_of(decl)
        blocks: List[Block] = []
        for signature in decl.signatures:
            blocks.extend(self.signature_blocks(decl.name, signature, refs, skip_summary=page_summary))
        return blocks

    def _render_enum(self, decl: Declaration, refs: ReferenceMap) -> List[Block]:
        members = decl.children_of(DeclarationKind.ENUM_MEMBER)
        if not members:
            return []
        rows = [
            (
                f"`{member.name}`",
                f"`{member.default_value or member.name}`",
                " ".join(member.summary.split()) or EMPTY_CELL,
            )
            for member in members
        ]
        blocks: List[Block] = list(self.components.toc(["Members"]))
        blocks.append(Block.heading(3, "Members"))
        blocks.append(self.components.table(("Name", "Value", "Description"), rows))
        return blocks

    def _render_type_alias(self, decl: Declaration, refs: ReferenceMap) -> List[Block]:
        if decl.type is None:
            return []
        return [Block.paragraph(f"**Type:** {self._display_type(format_type(decl.type, refs))}")]

    def signature_blocks(
        self,
        name: str,
        signature: Signature,
        refs: ReferenceMap,
        *,
        constructor: bool = False,
        call_line: bool = True,
        skip_summary: str = "",
    ) -> List[Block]:
        """Call line, comment, then Parameters and Returns disclosures."""
        blocks: List[Block] = []
        if call_line:
            blocks.append(Block.paragraph(f"`{format_call_signature(name, signature, constructor=constructor)}`"))
        comment = signature.comment
        if comment is not None:
            summary = comment.summary.strip()
            if summary and _normalized(summary) != _normalized(skip_summary):
                blocks.extend(rich_text_blocks(summary))
            blocks.extend(self.comment_blocks(comment))

        if signature.parameters:
            fields: List[Block] = []
            for parameter in signature.parameters:
                fields.extend(self.parameter_blocks(parameter, refs))
            blocks.extend(self.components.expandable("Parameters", fields))

        if not constructor and returns_value(signature):
            blocks.extend(self.components.expandable("Returns", self.return_blocks(signature, refs)))
        return blocks

    def parameter_blocks(self, parameter: Parameter, refs: ReferenceMap) -> List[Block]:
        linked = format_type(parameter.type, refs)
        plain = format_type(parameter.type)
        summary = parameter.comment.summary.strip() if parameter.comment else ""
        description = summary or describe_parameter(parameter.name, plain)
        description = self._with_type_mention(description, linked)
        return self.components.param_field(
            classify_parameter_location(parameter.name),
            parameter.name,
            plain,
            prose_blocks(description),
            required=not parameter.optional,
        )

    def return_blocks(self, signature: Signature, refs: ReferenceMap) -> List[Block]:
        linked = format_type(signature.type, refs)
        plain = format_type(signature.type)
        returns = signature.comment.returns.strip() if signature.comment else ""
        description = append_sentence(returns, f"Returns {self._display_type(linked)}.")
        return self.components.response_field("returns", plain, prose_blocks(description))

    def _class_property_blocks(self, prop: Declaration, refs: ReferenceMap) -> List[Block]:
        linked = format_type(prop.type, refs)
        return [
            Block.paragraph(f"**Type:** {self._display_type(linked)}"),
            *prose_blocks(prop.summary or f"The {prop.name} property."),
        ]

    def _interface_property_blocks(self, prop: Declaration, refs: ReferenceMap) -> List[Block]:
        linked = format_type(prop.type, refs)
        description = prop.summary or f"The {prop.name} property."
        description = self._with_type_mention(description, linked)
        return self.components.response_field(
            prop.name,
            format_type(prop.type),
            prose_blocks(description),
            required=not prop.flags.is_optional,
        )

    @staticmethod
    def _display_type(type_text: str) -> str:
        # Links cannot render inside literal spans.
        if has_links(type_text):
            return escape_inline(type_text)
        return f"`{type_text}`"

    def _with_type_mention(self, description: str, linked: str) -> str:
        if not has_links(linked):
            return description
        type_name = strip_links(linked).lower().split("<")[0]
        if type_name and type_name in description.lower():
            return description
        return append_sentence(description, f"Type: {escape_inline(linked)}.")


def summary_of(decl: Declaration) -> str:
    """Declaration summary, falling back to the first signature's summary."""
    if decl.summary:
        return decl.summary
    for signature in decl.signatures:
        if signature.comment and signature.comment.summary.strip():
            return signature.comment.summary.strip()
    return ""


def returns_value(signature: Signature) -> bool:
    if signature.type is None:
        return False
    return not (isinstance(signature.type, IntrinsicType) and signature.type.name == "void")


def rich_text_blocks(text: str) -> List[Block]:
    """Parse comment text so embedded headings, fences and tags become blocks."""
    return [
        block
        for block in RenderedDocument.parse(text).blocks
        if block.kind is not BlockKind.FRONTMATTER
    ]


def prose_blocks(text: str) -> List[Block]:
    """Like rich_text_blocks, with the closing paragraph punctuated."""
    blocks = rich_text_blocks(text)
    if blocks and blocks[-1].kind is BlockKind.TEXT:
        blocks[-1] = Block.paragraph(ensure_period(blocks[-1].text))
    return blocks


def append_sentence(text: str, sentence: str) -> str:
    """Add ``sentence`` after ``text``; markup endings get it as a new paragraph."""
    text = text.strip()
    if not text:
        return sentence
    if ends_with_prose(text):
        return f"{ensure_period(text)} {sentence}"
    return f"{text}\n\n{sentence}"


def _normalized(text: str) -> str:
    return " ".join(text.split()).rstrip(".")


__all__ = [
    "DeclarationRenderer",
    "EMPTY_CELL",
    "action_of",
    "append_sentence",
    "escape_inline",
    "plural_of",
    "prose_blocks",
    "returns_value",
    "rich_text_blocks",
    "summary_of",
]
