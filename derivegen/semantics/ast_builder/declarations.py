"""Declaration, generics and where-clause parsing."""
from __future__ import annotations
from typing import Optional, Tuple

from lark import Tree

from derivegen.internals.report import span_of
from derivegen.semantics.ast import (
    AdtDescriptor, AdtKind, ConstParam, EqPredicate, FieldDescriptor, FieldStyle,
    GenericParam, LifetimeParam, LifetimePredicate, TypeParam, TypePredicate,
    VariantDescriptor, WhereClause, WherePredicate,
)
from derivegen.semantics.ast_builder.types import (
    TYPE_NODE_NAMES, lifetime_of, parse_bounds, parse_for_binder,
    parse_lifetime_bounds, parse_type,
)
from derivegen.semantics.ast_builder.utils.tree_navigation import (
    first_name, first_token, first_tree, trees,
)

_DECL_KINDS = {
    "enum_def": AdtKind.ENUM,
    "struct_def": AdtKind.STRUCT,
    "union_def": AdtKind.UNION,
}


def _type_child(t: Tree) -> Tree:
    node = next(trees(t.children, *TYPE_NODE_NAMES), None)
    if node is None:
        raise NotImplementedError(f"{t.data}: missing type")
    return node


# === Generics ===

def parse_generic_param(t: Tree) -> GenericParam:
    if t.data == "lifetime_param":
        return LifetimeParam(
            lifetime_of(first_token(t.children, "LIFETIME")),
            parse_lifetime_bounds(first_tree(t.children, "lifetime_bounds")),
        )
    if t.data == "type_param":
        # A default (`T = u8`) is accepted and dropped: impl headers never repeat it
        return TypeParam(str(first_name(t.children)), parse_bounds(first_tree(t.children, "bounds")))
    if t.data == "const_param":
        return ConstParam(str(first_name(t.children)), parse_type(_type_child(t)))
    raise NotImplementedError(f"generic parameter node '{t.data}'")


def parse_generic_params(t: Optional[Tree]) -> Tuple[GenericParam, ...]:
    if t is None:
        return ()
    return tuple(parse_generic_param(p) for p in trees(t.children))


def parse_where_predicate(t: Tree) -> WherePredicate:
    if t.data == "lifetime_predicate":
        return LifetimePredicate(
            lifetime_of(first_token(t.children, "LIFETIME")),
            parse_lifetime_bounds(first_tree(t.children, "lifetime_bounds")),
        )
    if t.data == "type_predicate":
        return TypePredicate(
            bounded_ty=parse_type(_type_child(t)),
            bounds=parse_bounds(first_tree(t.children, "bounds")),
            lifetimes=parse_for_binder(first_tree(t.children, "for_binder")),
        )
    if t.data == "eq_predicate":
        lhs, rhs = list(trees(t.children, *TYPE_NODE_NAMES))
        return EqPredicate(parse_type(lhs), parse_type(rhs))
    raise NotImplementedError(f"where predicate node '{t.data}'")


def parse_where_clause(t: Optional[Tree]) -> Optional[WhereClause]:
    if t is None:
        return None
    return WhereClause(tuple(parse_where_predicate(p) for p in trees(t.children)))


# === Fields and variants ===

def parse_fields(t: Optional[Tree]) -> Tuple[Tuple[FieldDescriptor, ...], FieldStyle]:
    """Fields of a named_fields / tuple_fields node (unit when absent)."""
    if t is None:
        return (), FieldStyle.UNIT

    if t.data == "named_fields":
        fields = tuple(
            FieldDescriptor(parse_type(_type_child(f)), str(first_name(f.children)), span_of(f))
            for f in trees(t.children, "named_field")
        )
        return fields, FieldStyle.NAMED

    fields = tuple(
        FieldDescriptor(parse_type(_type_child(f)), None, span_of(f))
        for f in trees(t.children, "tuple_field")
    )
    return fields, FieldStyle.POSITIONAL


def parse_variant(t: Tree) -> VariantDescriptor:
    """Parse variant: attribute* NAME (named_fields | tuple_fields)? discriminant?"""
    assert t.data == "variant"
    name_tok = first_name(t.children)
    fields, style = parse_fields(first_tree(t.children, "named_fields", "tuple_fields"))
    return VariantDescriptor(str(name_tok), fields, style, loc=span_of(t))


# === Declarations ===

def parse_declaration(t: Tree) -> AdtDescriptor:
    kind = _DECL_KINDS[t.data]
    name = str(first_name(t.children))
    generics = parse_generic_params(first_tree(t.children, "generic_params"))
    where_clause = parse_where_clause(first_tree(t.children, "where_clause"))

    if kind == AdtKind.ENUM:
        variant_list = first_tree(t.children, "variant_list")
        variants = tuple(parse_variant(v) for v in trees(variant_list.children, "variant")) if variant_list else ()
    else:
        # Structs and unions keep their fields as a single pseudo-variant
        fields, style = parse_fields(first_tree(t.children, "named_fields", "tuple_fields"))
        variants = (VariantDescriptor(name, fields, style, loc=span_of(t)),)

    return AdtDescriptor(
        name=name,
        kind=kind,
        generics=generics,
        where_clause=where_clause,
        variants=variants,
        loc=span_of(t),
    )
