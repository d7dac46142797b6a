import pytest

from derivegen.backend.type_printer import (
    render_bounds, render_literal, render_path, render_trait_bound, render_type,
)
from derivegen.internals.errors import UnimplementedForm, UnsupportedTypeForm
from derivegen.semantics.typesys import (
    AngleBracketedArgs, ArrayType, BindingArg, BoundModifier, ConstArg,
    ConstraintArg, Lifetime, LifetimeArg, LifetimeBound, LitExpr, Literal,
    LiteralKind, ParenthesizedArgs, PathSegment, PathType, ReferenceType,
    SliceType, TraitBound, TupleType, TypeArg, UnsupportedExpr, UnsupportedType,
)

from conftest import path


def test_simple_path():
    assert render_type(path("u32")) == "u32"


def test_multi_segment_path_with_args():
    ty = PathType((
        PathSegment("std"),
        PathSegment("collections"),
        PathSegment("HashMap", AngleBracketedArgs((TypeArg(path("K")), TypeArg(path("V"))))),
    ))
    assert render_type(ty) == "std::collections::HashMap<K, V>"


def test_empty_generic_args_render_no_brackets():
    ty = PathType((PathSegment("Foo", AngleBracketedArgs(())),))
    assert render_type(ty) == "Foo"


def test_nested_generics():
    assert render_type(path("Vec", path("Vec", path("u8")))) == "Vec<Vec<u8>>"


def test_references():
    t = path("T")
    assert render_type(ReferenceType(t)) == "& T"
    assert render_type(ReferenceType(t, Lifetime("a"))) == "&'a T"
    assert render_type(ReferenceType(t, mutable=True)) == "& mut T"
    assert render_type(ReferenceType(t, Lifetime("a"), mutable=True)) == "&'a mut T"


def test_array_slice_tuple():
    u8 = path("u8")
    four = LitExpr(Literal(LiteralKind.INT, "4"))
    assert render_type(ArrayType(u8, four)) == "[u8; 4]"
    assert render_type(SliceType(u8)) == "[u8]"
    assert render_type(TupleType((u8, path("bool")))) == "(u8, bool)"
    assert render_type(TupleType(())) == "()"


def test_generic_argument_forms():
    ty = PathType.simple(
        "Foo",
        LifetimeArg(Lifetime("a")),
        BindingArg("Item", path("T")),
        ConstraintArg("Output", (TraitBound(path("Clone")), LifetimeBound(Lifetime("static")))),
        ConstArg(LitExpr(Literal(LiteralKind.INT, "3"))),
    )
    assert render_type(ty) == "Foo<'a, Item = T, Output : Clone + 'static, 3>"


@pytest.mark.parametrize(
    "lit, expected",
    [
        (Literal(LiteralKind.STR, "abc"), "abc"),
        (Literal(LiteralKind.CHAR, "x"), "x"),
        (Literal(LiteralKind.BYTE, 65), "65"),
        (Literal(LiteralKind.INT, "255"), "255"),
        (Literal(LiteralKind.FLOAT, "1.5"), "1.5"),
        (Literal(LiteralKind.BOOL, True), "true"),
        (Literal(LiteralKind.BOOL, False), "false"),
    ],
)
def test_render_literal(lit, expected):
    assert render_literal(lit) == expected


@pytest.mark.parametrize("kind", [LiteralKind.BYTE_STR, LiteralKind.VERBATIM])
def test_unsupported_literal_kinds(kind):
    with pytest.raises(UnsupportedTypeForm) as excinfo:
        render_literal(Literal(kind, "b\"x\""))
    assert excinfo.value.code == "DG1002"


@pytest.mark.parametrize("form", ["BareFn", "TraitObject", "Infer", "Never", "Macro", "Paren", "Ptr", "ImplTrait"])
def test_unsupported_type_forms_name_their_tag(form):
    with pytest.raises(UnsupportedTypeForm) as excinfo:
        render_type(UnsupportedType(form))
    assert excinfo.value.code == "DG1001"
    assert form in excinfo.value.message


def test_unsupported_type_nested_in_args_is_rejected():
    with pytest.raises(UnsupportedTypeForm):
        render_type(path("Box", UnsupportedType("TraitObject")))


def test_non_literal_array_length():
    ty = ArrayType(path("u8"), UnsupportedExpr("Path"))
    with pytest.raises(UnsupportedTypeForm) as excinfo:
        render_type(ty)
    assert excinfo.value.code == "DG1003"


def test_qualified_self_path():
    ty = PathType((PathSegment("Item"),), qself=path("T"))
    with pytest.raises(UnsupportedTypeForm) as excinfo:
        render_path(ty)
    assert excinfo.value.code == "DG1004"


def test_parenthesized_path_args():
    ty = PathType((PathSegment("Fn", ParenthesizedArgs((path("u8"),), path("u8"))),))
    with pytest.raises(UnsupportedTypeForm) as excinfo:
        render_type(ty)
    assert excinfo.value.code == "DG1005"


def test_bounds_join_with_plus():
    bounds = (TraitBound(path("Clone")), TraitBound(path("Debug")), LifetimeBound(Lifetime("a")))
    assert render_bounds(bounds) == "Clone + Debug + 'a"


def test_maybe_bound_is_unimplemented():
    with pytest.raises(UnimplementedForm) as excinfo:
        render_trait_bound(TraitBound(path("Sized"), BoundModifier.MAYBE))
    assert excinfo.value.code == "DG1102"


def test_higher_ranked_bound_is_unimplemented():
    with pytest.raises(UnimplementedForm) as excinfo:
        render_trait_bound(TraitBound(path("Fn"), lifetimes=(Lifetime("a"),)))
    assert excinfo.value.code == "DG1103"


def test_bound_form_is_rejected_before_path_rendering():
    qualified = PathType((PathSegment("Fn", ParenthesizedArgs((path("u8"),))),))
    with pytest.raises(UnimplementedForm) as excinfo:
        render_trait_bound(TraitBound(qualified, BoundModifier.MAYBE))
    assert excinfo.value.code == "DG1102"

    with pytest.raises(UnimplementedForm) as excinfo:
        render_trait_bound(TraitBound(qualified, lifetimes=(Lifetime("a"),)))
    assert excinfo.value.code == "DG1103"
    assert "'Fn'" in excinfo.value.message
