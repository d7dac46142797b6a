"""Parsing of type, path, bound and expression subtrees."""
from __future__ import annotations
import re
from typing import Optional, Tuple

from lark import Token, Tree

from derivegen.semantics.typesys import (
    AngleBracketedArgs, ArrayType, BindingArg, Bound, BoundModifier, ConstArg,
    ConstraintArg, Expr, GenericArgument, Lifetime, LifetimeArg, LifetimeBound,
    LitExpr, Literal, LiteralKind, ParenthesizedArgs, PathSegment, PathType,
    ReferenceType, SliceType, TraitBound, TupleType, TypeArg, TypeExpr,
    UnsupportedExpr, UnsupportedType,
)
from derivegen.semantics.ast_builder.utils.tree_navigation import (
    first_token, first_tree, first_tree_child, tokens, trees,
)

# Parse tree tags of type shapes we cannot render, mapped to their form tag
UNSUPPORTED_TYPE_NODES = {
    "never_type": "Never",
    "infer_type": "Infer",
    "paren_type": "Paren",
    "ptr_type": "Ptr",
    "bare_fn_type": "BareFn",
    "trait_object_type": "TraitObject",
    "impl_trait_type": "ImplTrait",
    "macro_type": "Macro",
}

TYPE_NODE_NAMES = {
    "path_type", "ref_type", "array_type", "slice_type", "tuple_type",
} | set(UNSUPPORTED_TYPE_NODES)

EXPR_NODE_NAMES = {
    "lit_expr", "path_expr", "block_expr", "paren_expr", "unary_expr", "binary_expr",
}

_INT_SUFFIX = re.compile(r"[iu](8|16|32|64|128|size)$")
_FLOAT_SUFFIX = re.compile(r"f(32|64)$")
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\", "0": "\0", "'": "'", '"': '"'}


def lifetime_of(tok: Token) -> Lifetime:
    return Lifetime(str(tok)[1:])


def unescape(body: str) -> str:
    """Decode the escapes of a string/char literal body (quotes already removed)."""
    out = []
    i = 0
    while i < len(body):
        c = body[i]
        if c != "\\":
            out.append(c)
            i += 1
            continue
        nxt = body[i + 1]
        if nxt in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[nxt])
            i += 2
        elif nxt == "x":
            out.append(chr(int(body[i + 2:i + 4], 16)))
            i += 4
        elif nxt == "u":
            end = body.index("}", i)
            out.append(chr(int(body[i + 3:end], 16)))
            i = end + 1
        elif nxt == "\n":
            # Line continuation: skip the newline and leading whitespace
            i += 2
            while i < len(body) and body[i].isspace():
                i += 1
        else:
            out.append(nxt)
            i += 2
    return "".join(out)


def parse_int_digits(text: str) -> str:
    """Base-10 digits of an integer literal, suffix and separators removed."""
    digits = _INT_SUFFIX.sub("", text).replace("_", "")
    if digits[:2].lower() in ("0x", "0o", "0b"):
        return str(int(digits, 0))
    return str(int(digits, 10))


def parse_literal(t: Tree) -> Literal:
    tok = t.children[0]
    text = str(tok)
    kind = tok.type

    if kind == "STRING":
        return Literal(LiteralKind.STR, unescape(text[1:-1]))
    if kind == "BYTE_STRING":
        return Literal(LiteralKind.BYTE_STR, text)
    if kind == "BYTE":
        return Literal(LiteralKind.BYTE, ord(unescape(text[2:-1])))
    if kind == "CHAR":
        return Literal(LiteralKind.CHAR, unescape(text[1:-1]))
    if kind == "INT":
        return Literal(LiteralKind.INT, parse_int_digits(text))
    if kind == "FLOAT":
        return Literal(LiteralKind.FLOAT, _FLOAT_SUFFIX.sub("", text).replace("_", ""))
    if kind in ("TRUE", "FALSE"):
        return Literal(LiteralKind.BOOL, kind == "TRUE")
    return Literal(LiteralKind.VERBATIM, text)


def parse_expr(t: Tree) -> Expr:
    if t.data == "lit_expr":
        return LitExpr(parse_literal(first_tree(t.children, "literal")))
    return UnsupportedExpr({
        "path_expr": "Path",
        "block_expr": "Block",
        "paren_expr": "Paren",
        "unary_expr": "Unary",
        "binary_expr": "Binary",
    }.get(t.data, str(t.data)))


# === Paths and generic arguments ===

def parse_generic_arg(t: Tree) -> GenericArgument:
    if t.data == "lifetime_arg":
        return LifetimeArg(lifetime_of(t.children[0]))
    if t.data == "type_arg":
        return TypeArg(parse_type(first_tree_child(t)))
    if t.data == "binding_arg":
        name = first_token(t.children, "NAME")
        return BindingArg(str(name), parse_type(first_tree_child(t)))
    if t.data == "constraint_arg":
        name = first_token(t.children, "NAME")
        return ConstraintArg(str(name), parse_bounds(first_tree(t.children, "bounds")))
    if t.data == "const_arg":
        return ConstArg(parse_expr(first_tree_child(t)))
    raise NotImplementedError(f"generic argument node '{t.data}'")


def parse_path_segment(t: Tree) -> PathSegment:
    ident_node = first_tree(t.children, "path_ident")
    ident = str(ident_node.children[0])

    args_node = first_tree(t.children, "generic_args")
    if args_node is not None:
        args = tuple(parse_generic_arg(a) for a in trees(args_node.children))
        return PathSegment(ident, AngleBracketedArgs(args))

    paren_node = first_tree(t.children, "paren_args")
    if paren_node is not None:
        inputs = tuple(parse_type(c) for c in trees(paren_node.children) if c.data != "paren_output")
        output_node = first_tree(paren_node.children, "paren_output")
        output = parse_type(first_tree_child(output_node)) if output_node is not None else None
        return PathSegment(ident, ParenthesizedArgs(inputs, output))

    return PathSegment(ident)


def parse_path(t: Tree) -> PathType:
    assert t.data == "path"
    segments = tuple(parse_path_segment(s) for s in trees(t.children, "path_segment"))
    return PathType(segments)


# === Bounds ===

def parse_for_binder(t: Optional[Tree]) -> Optional[Tuple[Lifetime, ...]]:
    if t is None:
        return None
    return tuple(lifetime_of(tok) for tok in tokens(t.children, "LIFETIME"))


def parse_bound(t: Tree) -> Bound:
    if t.data == "lifetime_bound":
        return LifetimeBound(lifetime_of(t.children[0]))
    modifier = BoundModifier.MAYBE if first_token(t.children, "MAYBE") else BoundModifier.NONE
    return TraitBound(
        path=parse_path(first_tree(t.children, "path")),
        modifier=modifier,
        lifetimes=parse_for_binder(first_tree(t.children, "for_binder")),
    )


def parse_bounds(t: Optional[Tree]) -> Tuple[Bound, ...]:
    if t is None:
        return ()
    return tuple(parse_bound(b) for b in trees(t.children))


def parse_lifetime_bounds(t: Optional[Tree]) -> Tuple[Lifetime, ...]:
    if t is None:
        return ()
    return tuple(lifetime_of(tok) for tok in tokens(t.children, "LIFETIME"))


# === Types ===

def parse_type(t: Tree) -> TypeExpr:
    """Build a TypeExpr from one of the type nodes of the grammar."""
    kind = t.data

    if kind == "path_type":
        path = parse_path(first_tree(t.children, "path"))
        qself_node = first_tree(t.children, "qself")
        if qself_node is not None:
            return PathType(path.segments, qself=parse_type(first_tree_child(qself_node)))
        return path

    if kind == "ref_type":
        lifetime = first_token(t.children, "LIFETIME")
        return ReferenceType(
            elem=parse_type(first_tree_child(t)),
            lifetime=lifetime_of(lifetime) if lifetime is not None else None,
            mutable=first_token(t.children, "MUT") is not None,
        )

    if kind == "array_type":
        elem, length = list(trees(t.children))
        return ArrayType(parse_type(elem), parse_expr(length))

    if kind == "slice_type":
        return SliceType(parse_type(first_tree_child(t)))

    if kind == "tuple_type":
        return TupleType(tuple(parse_type(c) for c in trees(t.children)))

    if kind in UNSUPPORTED_TYPE_NODES:
        return UnsupportedType(UNSUPPORTED_TYPE_NODES[kind])

    raise NotImplementedError(f"unknown type node '{kind}'")
