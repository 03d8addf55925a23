"""Tests for Koka identifier formatting."""

import pytest

from ligature.backend.c import CFormatter
from ligature.backend.koka import KokaFormatter
from ligature.backend.util import FormatError
from ligature.docs import DocsUrlGenerator
from ligature.hir import (
    Attrs,
    EnumDef,
    EnumVariant,
    Int,
    Lifetime,
    LifetimeEnv,
    Method,
    OpaqueDef,
    Param,
    RenameRule,
    StructDef,
    TypeContext,
    TypeId,
)


def _renamed(pattern: str) -> Attrs:
    return Attrs(rename=RenameRule(pattern))


def _fmt(*opaques: OpaqueDef, strip_prefix: str | None = None) -> KokaFormatter:
    tcx = TypeContext(opaques=list(opaques))
    return KokaFormatter.for_context(tcx, DocsUrlGenerator(), strip_prefix)


def _opaque(index: int) -> TypeId:
    return TypeId("opaque", index)


# ============================================================
# methods
# ============================================================


def test_method_snake_case():
    f = _fmt()
    assert f.fmt_method_name(Method("getValue")) == "get_value"
    assert f.fmt_method_name(Method("HTTPStatus")) == "http_status"


def test_method_already_snake_is_unchanged():
    f = _fmt()
    assert f.fmt_method_name(Method("to_string")) == "to_string"


@pytest.mark.parametrize("name", ["new", "static", "default"])
def test_method_reserved_word_gets_underscore(name):
    f = _fmt()
    result = f.fmt_method_name(Method(name))
    assert result != name
    assert result == name + "_"


def test_method_rename_replaces_name():
    f = _fmt()
    assert f.fmt_method_name(Method("foo", attrs=_renamed("barBaz"))) == "bar_baz"


def test_method_rename_pattern_wraps_name():
    f = _fmt()
    method = Method("to_string", attrs=_renamed("{0}_v2"))
    assert f.fmt_method_name(method) == "to_string_v2"


def test_method_rename_away_from_reserved_word():
    f = _fmt()
    assert f.fmt_method_name(Method("new", attrs=_renamed("create"))) == "create"


def test_method_rename_onto_reserved_word_is_escaped():
    f = _fmt()
    assert f.fmt_method_name(Method("make", attrs=_renamed("New"))) == "new_"


def test_method_name_is_deterministic():
    f = _fmt()
    method = Method("fooBar", attrs=_renamed("{0}Twice"))
    assert f.fmt_method_name(method) == f.fmt_method_name(method)


# ============================================================
# constructors and accessors
# ============================================================


def test_constructor_uppercases_first_letter():
    f = _fmt()
    assert f.fmt_constructor_name(None, Method("new")) == "New"
    assert f.fmt_constructor_name(None, Method("from_bytes")) == "From_bytes"


def test_constructor_explicit_name():
    f = _fmt()
    assert f.fmt_constructor_name("withCapacity", Method("ctor")) == "With_capacity"


def test_constructor_rename_used_without_explicit_name():
    f = _fmt()
    method = Method("create", attrs=_renamed("fromValue"))
    assert f.fmt_constructor_name(None, method) == "From_value"


def test_constructor_explicit_name_wins_over_rename():
    f = _fmt()
    method = Method("create", attrs=_renamed("renamed"))
    assert f.fmt_constructor_name("explicit", method) == "Explicit"


def test_accessor_snake_case():
    f = _fmt()
    assert f.fmt_accessor_name("getLength", Method("len")) == "get_length"
    assert f.fmt_accessor_name(None, Method("byteLen")) == "byte_len"


def test_accessor_rename():
    f = _fmt()
    assert f.fmt_accessor_name(None, Method("len", attrs=_renamed("size"))) == "size"


@pytest.mark.parametrize("name", ["new", "static", "default"])
def test_accessor_reserved_word_gets_underscore(name):
    f = _fmt()
    assert f.fmt_accessor_name(None, Method(name)) == name + "_"
    assert f.fmt_accessor_name(name, Method("other")) == name + "_"


@pytest.mark.parametrize("name", ["new", "static", "default"])
def test_param_reserved_word_gets_underscore(name):
    f = _fmt()
    assert f.fmt_param_name(name) == name + "_"
    assert f.fmt_param_name(name.upper()) == name + "_"


# ============================================================
# enum variants and parameters
# ============================================================


def test_enum_variant_upper_camel():
    f = _fmt()
    assert f.fmt_enum_variant(EnumVariant("big_endian", 0)) == "BigEndian"
    assert f.fmt_enum_variant(EnumVariant("Red", 1)) == "Red"


def test_enum_variant_rename_is_case_converted():
    f = _fmt()
    variant = EnumVariant("Foo", 0, attrs=_renamed("little_endian"))
    assert f.fmt_enum_variant(variant) == "LittleEndian"


def test_param_name_lowercased():
    f = _fmt()
    assert f.fmt_param_name("value") == "value"
    assert f.fmt_param_name("Foo_Bar") == "foo_bar"
    assert f.fmt_param_name("fooBar") == "foobar"


def test_non_ascii_letters_are_kept():
    f = _fmt()
    assert f.fmt_method_name(Method("größe")) == "größe"
    assert f.fmt_param_name("naïve") == "naïve"
    assert f.fmt_enum_variant(EnumVariant("élan_vital", 0)) == "ÉlanVital"


def test_param_name_ignores_renames():
    f = _fmt()
    param = Param("other_value", Int("i32"))
    assert f.fmt_param_name(param.name) == "other_value"


# ============================================================
# type names
# ============================================================


def test_type_name_without_prefix():
    f = _fmt(OpaqueDef("FooBar"))
    assert f.fmt_type_name(_opaque(0)) == "FooBar"


def test_type_name_strips_prefix():
    f = _fmt(OpaqueDef("FooBar"), OpaqueDef("Other"), strip_prefix="Foo")
    assert f.fmt_type_name(_opaque(0)) == "Bar"
    assert f.fmt_type_name(_opaque(1)) == "Other"


def test_type_name_rename_applies_after_stripping():
    f = _fmt(OpaqueDef("FooBar", attrs=_renamed("{0}Wrapper")), strip_prefix="Foo")
    assert f.fmt_type_name(_opaque(0)) == "BarWrapper"


def test_type_name_resolves_every_kind():
    tcx = TypeContext(
        structs=[StructDef("Point")],
        enums=[EnumDef("Color", variants=[EnumVariant("Red", 0)])],
    )
    f = KokaFormatter.for_context(tcx, DocsUrlGenerator())
    assert f.fmt_type_name(TypeId("struct", 0)) == "Point"
    assert f.fmt_type_name(TypeId("enum", 0)) == "Color"


@pytest.mark.parametrize("name", ["Object", "String"])
def test_type_name_disallowed_core_type(name):
    f = _fmt(OpaqueDef(name))
    with pytest.raises(FormatError) as exc_info:
        f.fmt_type_name(_opaque(0))
    assert exc_info.value.entity == name


def test_type_name_disallowed_after_stripping():
    f = _fmt(OpaqueDef("FooString"), strip_prefix="Foo")
    with pytest.raises(FormatError) as exc_info:
        f.fmt_type_name(_opaque(0))
    assert exc_info.value.entity == "FooString"
    assert "'String'" in exc_info.value.msg


def test_type_name_disallowed_even_with_rename():
    f = _fmt(OpaqueDef("String", attrs=_renamed("Text")))
    with pytest.raises(FormatError):
        f.fmt_type_name(_opaque(0))


def test_type_name_equal_to_prefix():
    f = _fmt(OpaqueDef("Foo"), strip_prefix="Foo")
    with pytest.raises(FormatError) as exc_info:
        f.fmt_type_name(_opaque(0))
    assert exc_info.value.entity == "Foo"


def test_type_name_diagnostics_skips_processing():
    f = _fmt(OpaqueDef("FooBar", attrs=_renamed("Renamed")), strip_prefix="Foo")
    assert f.fmt_type_name(_opaque(0)) == "Renamed"
    assert f.fmt_type_name_diagnostics(_opaque(0)) == "FooBar"


# ============================================================
# files, imports, lifetimes
# ============================================================


def test_file_name():
    assert _fmt().fmt_file_name("Locale") == "Locale.kk"


def test_import():
    f = _fmt()
    assert f.fmt_import("std/core") == "import std/core;"
    assert f.fmt_import("std/num/int32", "as i32") == "import std/num/int32 as i32;"


def test_lifetime_edge_array():
    f = _fmt()
    env = LifetimeEnv(["a", None])
    assert f.fmt_lifetime_edge_array(Lifetime(0), env) == "aEdges"
    assert f.fmt_lifetime_edge_array(Lifetime(1), env) == "anon_1Edges"


# ============================================================
# ABI names
# ============================================================


def test_destructor_name_comes_from_c():
    f = _fmt(OpaqueDef("Utf16Wrap"))
    assert f.fmt_destructor_name(_opaque(0)) == "Utf16Wrap_destroy"


def test_c_method_name_comes_from_c():
    f = _fmt(OpaqueDef("Utf16Wrap"))
    method = Method("borrow_cont")
    assert f.fmt_c_method_name(_opaque(0), method) == "Utf16Wrap_borrow_cont"


def test_abi_names_ignore_koka_prefix_and_rename():
    opaque = OpaqueDef("FooBar", attrs=_renamed("Renamed"))
    f = _fmt(opaque, strip_prefix="Foo")
    method = Method("getValue", attrs=_renamed("value"))
    assert f.fmt_destructor_name(_opaque(0)) == "FooBar_destroy"
    assert f.fmt_c_method_name(_opaque(0), method) == "FooBar_getValue"


class _RecordingCFormatter(CFormatter):
    def fmt_dtor_name(self, id):
        return "recorded_dtor"

    def fmt_method_name(self, ty, method):
        return "recorded_" + method.name


def test_abi_names_use_injected_formatter():
    tcx = TypeContext(opaques=[OpaqueDef("Thing")])
    f = KokaFormatter(_RecordingCFormatter(tcx), DocsUrlGenerator())
    assert f.fmt_destructor_name(_opaque(0)) == "recorded_dtor"
    assert f.fmt_c_method_name(_opaque(0), Method("get")) == "recorded_get"
    assert f.tcx is tcx
