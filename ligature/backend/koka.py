"""Koka backend naming: HIR entities -> Koka spellings.

All identifiers from the HIR go through KokaFormatter before they reach
the emitted source. Reserved words and renames are handled in one place,
and C symbol names always come from the injected CFormatter.
"""

from __future__ import annotations

import re

from ..docs import Docs, DocsUrlGenerator, MarkdownStyle
from ..hir import (
    Bool,
    Byte,
    Char,
    EnumVariant,
    Float,
    Int,
    Int128,
    IntSize,
    Lifetime,
    LifetimeEnv,
    Method,
    PrimitiveType,
    TypeContext,
    TypeId,
)
from .c import CFormatter
from .util import FormatError, escape_reserved, to_snake, to_upper_camel, upper_first

# Collide with Koka keywords in call position
_INVALID_METHOD_NAMES = frozenset({"new", "static", "default"})
# Collide with Koka keywords in field/accessor position
_INVALID_FIELD_NAMES = frozenset({"new", "static", "default"})
# Would shadow std/core types; there is no safe automatic rename
_DISALLOWED_CORE_TYPES = frozenset({"Object", "String"})

_NON_IDENT_RE = re.compile(r"\W")


def _unsupported(prim: PrimitiveType) -> FormatError:
    return FormatError("128-bit integers are not supported in Koka", repr(prim))


def _unknown(prim: object) -> TypeError:
    return TypeError(f"not a primitive type: {prim!r}")


class KokaFormatter:
    """Formats HIR names and types for the Koka backend.

    Holds the ABI formatter, the docs URL generator and an optional
    prefix stripped from every type name. None of them change after
    construction.
    """

    def __init__(
        self,
        c: CFormatter,
        docs_url_generator: DocsUrlGenerator,
        strip_prefix: str | None = None,
    ) -> None:
        self._c = c
        self._docs_url_generator = docs_url_generator
        self._strip_prefix = strip_prefix

    @classmethod
    def for_context(
        cls,
        tcx: TypeContext,
        docs_url_generator: DocsUrlGenerator,
        strip_prefix: str | None = None,
    ) -> KokaFormatter:
        return cls(CFormatter(tcx), docs_url_generator, strip_prefix)

    @property
    def tcx(self) -> TypeContext:
        return self._c.tcx

    @property
    def strip_prefix(self) -> str | None:
        return self._strip_prefix

    # ------------------------------------------------------------
    # Files, imports, docs
    # ------------------------------------------------------------

    def fmt_lifetime_edge_array(self, lifetime: Lifetime, lifetime_env: LifetimeEnv) -> str:
        return f"{lifetime_env.fmt_lifetime(lifetime)}Edges"

    def fmt_file_name(self, name: str) -> str:
        return f"{name}.kk"

    def fmt_import(self, path: str, as_show_hide: str | None = None) -> str:
        if as_show_hide:
            return f"import {path} {as_show_hide};"
        return f"import {path};"

    def fmt_docs(self, docs: Docs) -> str:
        """Render docs as the body of a `//` comment block.

        Backtick references to type names are rewritten to the names the
        emitted code uses: the prefix is stripped, then renamed types are
        replaced with their renamed spelling.
        """
        text = (
            docs.to_markdown(self._docs_url_generator, MarkdownStyle.NORMAL)
            .strip()
            .replace("\n", "\n// ")
            .replace(" \n", "\n")
        )
        if self._strip_prefix:
            text = text.replace(f"`{self._strip_prefix}", "`")
        for id, ty in self.tcx.all_types():
            if ty.attrs.rename.is_empty():
                continue
            reference = "`" + self._stripped(ty.name)
            if reference not in text:
                continue
            renamed = "`" + self.fmt_type_name(id)
            text = re.sub(re.escape(reference) + r"(?!\w)", lambda _: renamed, text)
        return text

    # ------------------------------------------------------------
    # ABI names (delegated)
    # ------------------------------------------------------------

    def fmt_destructor_name(self, id: TypeId) -> str:
        return self._c.fmt_dtor_name(id)

    def fmt_c_method_name(self, ty: TypeId, method: Method) -> str:
        return self._c.fmt_method_name(ty, method)

    # ------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------

    def _stripped(self, name: str) -> str:
        if self._strip_prefix and name.startswith(self._strip_prefix):
            return name[len(self._strip_prefix) :]
        return name

    def fmt_type_name(self, id: TypeId) -> str:
        """Resolve and format a named type for use in code."""
        resolved = self.tcx.resolve_type(id)
        candidate = self._stripped(resolved.name)
        if not candidate:
            raise FormatError(
                f"nothing is left after stripping prefix {self._strip_prefix!r}. Please rename.",
                resolved.name,
            )

        if candidate in _DISALLOWED_CORE_TYPES:
            raise FormatError(
                f"{candidate!r} is not a valid Koka type name. Please rename.",
                resolved.name,
            )

        return resolved.attrs.rename.apply(candidate)

    def fmt_type_name_diagnostics(self, id: TypeId) -> str:
        """Resolve and format a named type for diagnostics (no renames or stripping)."""
        return self._c.fmt_type_name_diagnostics(id)

    def fmt_enum_variant(self, variant: EnumVariant) -> str:
        return to_upper_camel(variant.attrs.rename.apply(variant.name))

    # Shared by fields and parameters; would need splitting if renames were supported
    def fmt_param_name(self, ident: str) -> str:
        """Format a field or parameter name. Renames are not supported here."""
        return escape_reserved(to_snake(ident.lower()), _INVALID_FIELD_NAMES)

    def fmt_method_name(self, method: Method) -> str:
        name = to_snake(method.attrs.rename.apply(method.name))
        return escape_reserved(name, _INVALID_METHOD_NAMES)

    def _override_or_renamed(self, name: str | None, method: Method) -> str:
        # explicit name > rename rule > method name
        if name is not None:
            return name
        return method.attrs.rename.apply(method.name)

    def fmt_constructor_name(self, name: str | None, method: Method) -> str:
        """Constructors are snake_case with the first letter uppercased."""
        ctor = upper_first(to_snake(self._override_or_renamed(name, method)))
        return escape_reserved(ctor, _INVALID_METHOD_NAMES)

    def fmt_accessor_name(self, name: str | None, method: Method) -> str:
        accessor = to_snake(self._override_or_renamed(name, method))
        return escape_reserved(accessor, _INVALID_FIELD_NAMES)

    def fmt_type_as_ident(self, ty: str | None) -> str:
        """Strip syntax from a type spelling so it can be part of an identifier.

        "list<int>" -> "listint", "c-pointer<x>" -> "cpointerx", None -> "unit"
        """
        if ty is None:
            return "unit"
        return _NON_IDENT_RE.sub("", ty)

    # ------------------------------------------------------------
    # Fixed spellings
    # ------------------------------------------------------------

    def fmt_nullable(self, ident: str) -> str:
        return f"{ident}?"

    def fmt_string(self) -> str:
        return "string"

    def fmt_utf8_primitive(self) -> str:
        return "int8"

    def fmt_utf16_primitive(self) -> str:
        return "int16"

    def fmt_void(self) -> str:
        return "()"

    def fmt_ffi_void(self) -> str:
        return "()"

    def fmt_pointer(self, target: str) -> str:
        return f"c-pointer<{target}>"

    def fmt_usize(self, cast: bool) -> str:
        return self.fmt_primitive_as_ffi(IntSize("usize"), cast)

    def fmt_enum_as_ffi(self, cast: bool) -> str:
        return self.fmt_primitive_as_ffi(Int("i32"), cast)

    def fmt_utf8_slice_type(self) -> str:
        return "_SliceUtf8"

    def fmt_utf16_slice_type(self) -> str:
        return "_SliceUtf16"

    # ------------------------------------------------------------
    # Primitive tables
    #
    # The five tables below cover the same closed set. A new
    # primitive needs an arm in each of them.
    # ------------------------------------------------------------

    def fmt_primitive_as_ffi(self, prim: PrimitiveType, cast: bool) -> str:
        """Koka spelling of a primitive.

        cast=False gives the precise fixed-width type. cast=True gives the
        coarse class used where values are converted across the boundary.
        """
        if cast:
            match prim:
                case Bool():
                    return "bool"
                case Char():
                    return "char"
                case Int() | IntSize():
                    return "int"
                case Byte():
                    return "int8"
                case Float():
                    return "float64"
                case Int128():
                    raise _unsupported(prim)
                case _:
                    raise _unknown(prim)
        match prim:
            case Bool():
                return "bool"
            case Char():
                return "char"
            case Int(width="i8"):
                return "int8"
            case Int(width="u8") | Byte():
                return "int8"
            case Int(width="i16") | Int(width="u16"):
                return "int16"
            case Int(width="i32") | Int(width="u32"):
                return "int32"
            case Int(width="i64") | Int(width="u64"):
                return "int64"
            case IntSize(width="isize"):
                return "intptr_t"
            case IntSize(width="usize"):
                return "ssize_t"
            case Float(width="f32"):
                return "float32"
            case Float(width="f64"):
                return "float64"
            case Int128():
                raise _unsupported(prim)
            case _:
                raise _unknown(prim)

    def fmt_primitive_list_type(self, prim: PrimitiveType) -> str:
        match prim:
            case Bool():
                return "list<bool>"
            case Char():
                return "list<char>"
            case Byte():
                return "bytes"
            case Int() | IntSize():
                return "list<int>"
            case Float():
                return "list<float64>"
            case Int128():
                raise _unsupported(prim)
            case _:
                raise _unknown(prim)

    def fmt_primitive_list_view(self, prim: PrimitiveType) -> str:
        """Accessor suffix for a typed view over a raw buffer. Bytes need none."""
        match prim:
            case Bool():
                return ".boolView"
            case Char():
                return ".uint32View"
            case Byte():
                return ""
            case Int(width="i8"):
                return ".int8View"
            case Int(width="u8"):
                return ".uint8View"
            case Int(width="i16"):
                return ".int16View"
            case Int(width="u16"):
                return ".uint16View"
            case Int(width="i32"):
                return ".int32View"
            case Int(width="u32"):
                return ".uint32View"
            case Int(width="i64"):
                return ".int64View"
            case Int(width="u64"):
                return ".uint64View"
            case IntSize(width="usize"):
                return ".usizeView"
            case IntSize(width="isize"):
                return ".isizeView"
            case Float(width="f32"):
                return ".float32View"
            case Float(width="f64"):
                return ".float64View"
            case Int128():
                raise _unsupported(prim)
            case _:
                raise _unknown(prim)

    def fmt_slice_type(self, prim: PrimitiveType) -> str:
        """Name of the FFI slice struct for a primitive element type."""
        match prim:
            case Bool():
                return "_SliceBool"
            case Char():
                return "_SliceRune"
            case Int(width="i8"):
                return "_SliceInt8"
            case Int(width="u8") | Byte():
                return "_SliceUint8"
            case Int(width="i16"):
                return "_SliceInt16"
            case Int(width="u16"):
                return "_SliceUint16"
            case Int(width="i32"):
                return "_SliceInt32"
            case Int(width="u32"):
                return "_SliceUint32"
            case Int(width="i64"):
                return "_SliceInt64"
            case Int(width="u64"):
                return "_SliceUint64"
            case IntSize(width="usize"):
                return "_SliceUsize"
            case IntSize(width="isize"):
                return "_SliceIsize"
            case Float(width="f32"):
                return "_SliceFloat"
            case Float(width="f64"):
                return "_SliceDouble"
            case Int128():
                raise _unsupported(prim)
            case _:
                raise _unknown(prim)
