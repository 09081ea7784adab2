"""Rendering of declarations into MDX document blocks."""

from .components import MdxComponents
from .declarations import DeclarationRenderer
from .types import format_call_signature, format_type

__all__ = ["DeclarationRenderer", "MdxComponents", "format_call_signature", "format_type"]
