"""C backend naming: the exported ABI surface.

Every other backend calls into the C ABI, so symbol names are decided
here and nowhere else. Backends that need a C symbol must hold a
CFormatter and ask it, never rebuild the name themselves.
"""

from __future__ import annotations

from ..hir import (
    Bool,
    Byte,
    Char,
    Float,
    Int,
    Int128,
    IntSize,
    Method,
    PrimitiveType,
    TypeContext,
    TypeId,
)
from .util import FormatError


class CFormatter:
    """Formats names of C types and exported functions."""

    def __init__(self, tcx: TypeContext) -> None:
        self._tcx = tcx

    @property
    def tcx(self) -> TypeContext:
        return self._tcx

    def fmt_type_name(self, id: TypeId) -> str:
        """Resolve and format a named type as it appears in the C headers."""
        resolved = self._tcx.resolve_type(id)
        return resolved.attrs.abi_rename.apply(resolved.name)

    def fmt_type_name_diagnostics(self, id: TypeId) -> str:
        """Canonical name for error messages; no renames applied."""
        return self._tcx.resolve_type(id).name

    def fmt_dtor_name(self, id: TypeId) -> str:
        return f"{self.fmt_type_name(id)}_destroy"

    def fmt_method_name(self, ty: TypeId, method: Method) -> str:
        """Exported symbol for a method: <type>_<method>, then the method's abi_rename."""
        symbol = f"{self.fmt_type_name(ty)}_{method.name}"
        return method.attrs.abi_rename.apply(symbol)

    def fmt_primitive_as_c(self, prim: PrimitiveType) -> str:
        match prim:
            case Bool():
                return "bool"
            case Char():
                return "char32_t"
            case Byte():
                return "uint8_t"
            case Int(width="i8"):
                return "int8_t"
            case Int(width="u8"):
                return "uint8_t"
            case Int(width="i16"):
                return "int16_t"
            case Int(width="u16"):
                return "uint16_t"
            case Int(width="i32"):
                return "int32_t"
            case Int(width="u32"):
                return "uint32_t"
            case Int(width="i64"):
                return "int64_t"
            case Int(width="u64"):
                return "uint64_t"
            case IntSize(width="isize"):
                return "intptr_t"
            case IntSize(width="usize"):
                return "size_t"
            case Float(width="f32"):
                return "float"
            case Float(width="f64"):
                return "double"
            case Int128(width=width):
                raise FormatError("128-bit integers are not supported over the C ABI", width)
            case _:
                raise TypeError(f"not a primitive type: {prim!r}")

    def fmt_result_name(self, ok: str | None, err: str | None) -> str:
        """Name of the C struct carrying a result, e.g. diplomat_result_double_void."""
        return f"diplomat_result_{ok or 'void'}_{err or 'void'}"
