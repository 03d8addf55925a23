"""Ligature - naming layer for FFI binding backends."""

from .docs import Docs, DocsUrlGenerator, DocType, LinkDisplay, MarkdownStyle, RustLink
from .hir import TypeContext, TypeId
from .backend.c import CFormatter
from .backend.koka import KokaFormatter
from .backend.util import FormatError

__all__ = [
    "CFormatter",
    "DocType",
    "Docs",
    "DocsUrlGenerator",
    "FormatError",
    "KokaFormatter",
    "LinkDisplay",
    "MarkdownStyle",
    "RustLink",
    "TypeContext",
    "TypeId",
]
