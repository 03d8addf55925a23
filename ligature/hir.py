"""Ligature HIR - resolved, language-agnostic description of an exported API.

The HIR is built once by the lowering pass and is read-only afterwards.
Every backend reads the same TypeContext; formatters turn HIR entities
into target-language spellings.

Architecture:
    Bridge source -> Lowering -> [HIR + TypeContext] -> Backend formatter -> Target
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Literal

from .docs import Docs


# ============================================================
# PRIMITIVES
#
# Closed algebra. Every primitive-keyed table in every backend
# must handle each member listed in ALL_PRIMITIVES.
# ============================================================


IntType = Literal["i8", "u8", "i16", "u16", "i32", "u32", "i64", "u64"]
Int128Type = Literal["i128", "u128"]
IntSizeType = Literal["isize", "usize"]
FloatType = Literal["f32", "f64"]


@dataclass(frozen=True)
class PrimitiveType:
    """Base for all primitive types. Abstract."""


@dataclass(frozen=True)
class Bool(PrimitiveType):
    """Boolean."""


@dataclass(frozen=True)
class Char(PrimitiveType):
    """A Unicode scalar value (32 bits wide across the ABI)."""


@dataclass(frozen=True)
class Byte(PrimitiveType):
    """An opaque byte. Same width as u8 but never treated as a number in lists."""


@dataclass(frozen=True)
class Int(PrimitiveType):
    """Fixed-width integer.

    | Width | C        | Koka  |
    |-------|----------|-------|
    | i8    | int8_t   | int8  |
    | u16   | uint16_t | int16 |
    | i64   | int64_t  | int64 |
    """

    width: IntType


@dataclass(frozen=True)
class Int128(PrimitiveType):
    """128-bit integer. Not representable in most targets."""

    width: Int128Type


@dataclass(frozen=True)
class IntSize(PrimitiveType):
    """Pointer-sized integer."""

    width: IntSizeType


@dataclass(frozen=True)
class Float(PrimitiveType):
    """IEEE 754 float."""

    width: FloatType


ALL_PRIMITIVES: tuple[PrimitiveType, ...] = (
    Bool(),
    Char(),
    Byte(),
    Int("i8"),
    Int("u8"),
    Int("i16"),
    Int("u16"),
    Int("i32"),
    Int("u32"),
    Int("i64"),
    Int("u64"),
    Int128("i128"),
    Int128("u128"),
    IntSize("isize"),
    IntSize("usize"),
    Float("f32"),
    Float("f64"),
)


# ============================================================
# ATTRIBUTES
# ============================================================


@dataclass(frozen=True)
class RenameRule:
    """Author-supplied name override.

    A pattern containing ``{0}`` wraps the original name (``"ICU4X{0}"``
    turns ``Locale`` into ``ICU4XLocale``); any other pattern replaces it.
    No pattern means identity.

    Invariants:
    - apply() depends only on the pattern and the name passed in
    """

    pattern: str | None = None

    def apply(self, name: str) -> str:
        if self.pattern is None:
            return name
        if "{0}" in self.pattern:
            return self.pattern.replace("{0}", name)
        return self.pattern

    def is_empty(self) -> bool:
        return self.pattern is None


@dataclass(frozen=True)
class Attrs:
    """Backend attributes attached to an entity.

    rename applies to the binding backend's spelling; abi_rename applies
    only to the exported C symbol and is read by the ABI backend alone.
    """

    rename: RenameRule = field(default_factory=RenameRule)
    abi_rename: RenameRule = field(default_factory=RenameRule)


# ============================================================
# LIFETIMES
# ============================================================


@dataclass(frozen=True)
class Lifetime:
    """Index into the owning method's LifetimeEnv."""

    index: int


@dataclass
class LifetimeEnv:
    """Lifetimes declared on a method. None marks an anonymous lifetime."""

    names: list[str | None] = field(default_factory=list)

    def fmt_lifetime(self, lifetime: Lifetime) -> str:
        name = self.names[lifetime.index]
        if name is None:
            return f"anon_{lifetime.index}"
        return name


# ============================================================
# TYPE IDS
# ============================================================


TypeKind = Literal["struct", "out_struct", "opaque", "enum"]


@dataclass(frozen=True)
class TypeId:
    """Stable reference into a TypeContext.

    Invariants:
    - index is valid for the list of its kind in the owning TypeContext
    """

    kind: TypeKind
    index: int


# Types that can appear in signatures. Backends only need primitives
# and named references to build their spellings.
Type = PrimitiveType | TypeId


# ============================================================
# MEMBERS
# ============================================================


@dataclass
class Param:
    """Method parameter. Parameters are positional and cannot be renamed."""

    name: str
    ty: Type


@dataclass
class Method:
    """Method on an exported type."""

    name: str
    params: list[Param] = field(default_factory=list)
    attrs: Attrs = field(default_factory=Attrs)
    docs: Docs = field(default_factory=Docs)
    lifetime_env: LifetimeEnv = field(default_factory=LifetimeEnv)


@dataclass
class StructField:
    """Field of a struct or out-struct."""

    name: str
    ty: Type
    attrs: Attrs = field(default_factory=Attrs)
    docs: Docs = field(default_factory=Docs)


@dataclass
class EnumVariant:
    """Single variant of a C-like enum."""

    name: str
    discriminant: int
    attrs: Attrs = field(default_factory=Attrs)
    docs: Docs = field(default_factory=Docs)


# ============================================================
# TYPE DEFINITIONS
# ============================================================


@dataclass
class TypeDef:
    """Base for named type definitions. Abstract."""

    name: str
    docs: Docs = field(default_factory=Docs)
    attrs: Attrs = field(default_factory=Attrs)
    methods: list[Method] = field(default_factory=list)

    @property
    def kind(self) -> TypeKind:
        raise NotImplementedError


@dataclass
class StructDef(TypeDef):
    """Struct passed by value in both directions."""

    fields: list[StructField] = field(default_factory=list)

    @property
    def kind(self) -> TypeKind:
        return "struct"


@dataclass
class OutStructDef(TypeDef):
    """Struct that is only ever returned, so it may hold borrowed data."""

    fields: list[StructField] = field(default_factory=list)

    @property
    def kind(self) -> TypeKind:
        return "out_struct"


@dataclass
class OpaqueDef(TypeDef):
    """Heap-allocated type only handled through pointers; has a destructor."""

    @property
    def kind(self) -> TypeKind:
        return "opaque"


@dataclass
class EnumDef(TypeDef):
    """C-like enum.

    Invariants:
    - len(variants) >= 1
    - Variant names are unique
    """

    variants: list[EnumVariant] = field(default_factory=list)

    @property
    def kind(self) -> TypeKind:
        return "enum"


# ============================================================
# TYPE CONTEXT
# ============================================================


@dataclass
class TypeContext:
    """Every exported type, indexed by TypeId.

    Fully built before any backend runs and never mutated afterwards,
    so formatters may share it across threads.
    """

    structs: list[StructDef] = field(default_factory=list)
    out_structs: list[OutStructDef] = field(default_factory=list)
    opaques: list[OpaqueDef] = field(default_factory=list)
    enums: list[EnumDef] = field(default_factory=list)

    def _table(self, kind: TypeKind) -> list:
        match kind:
            case "struct":
                return self.structs
            case "out_struct":
                return self.out_structs
            case "opaque":
                return self.opaques
            case "enum":
                return self.enums
            case _:
                raise LookupError(f"unknown type kind {kind!r}")

    def resolve_type(self, id: TypeId) -> TypeDef:
        table = self._table(id.kind)
        if not 0 <= id.index < len(table):
            raise LookupError(f"{id} does not resolve in this type context")
        return table[id.index]

    def all_types(self) -> Iterator[tuple[TypeId, TypeDef]]:
        for kind in ("struct", "out_struct", "opaque", "enum"):
            for i, ty in enumerate(self._table(kind)):
                yield TypeId(kind, i), ty

    def lookup(self, name: str) -> TypeId | None:
        """Find a type by its canonical name."""
        for id, ty in self.all_types():
            if ty.name == name:
                return id
        return None
