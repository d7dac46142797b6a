"""Rendering of type expressions to canonical source text.

The printer is a closed dispatch over the node classes of
`derivegen.semantics.typesys`; every shape it does not know how to name is
rejected with a coded error instead of guessed at.
"""
from __future__ import annotations

from typing import Iterable

from derivegen.internals.errors import raise_derive_error
from derivegen.semantics.typesys import (
    AngleBracketedArgs, ArrayType, BindingArg, Bound, BoundModifier, ConstArg,
    ConstraintArg, Expr, GenericArgument, Lifetime, LifetimeArg, LifetimeBound,
    LitExpr, Literal, LiteralKind, ParenthesizedArgs, PathSegment, PathType,
    ReferenceType, SliceType, TraitBound, TupleType, TypeArg, TypeExpr,
    UnsupportedExpr, UnsupportedType,
)


def render_lifetime(lf: Lifetime) -> str:
    return f"'{lf.name}"


def render_type(ty: TypeExpr) -> str:
    """Render a type expression.

    Raises:
        UnsupportedTypeForm: For any shape outside the accepted grammar
    """
    if isinstance(ty, PathType):
        return render_path(ty)

    if isinstance(ty, ReferenceType):
        lifetime = render_lifetime(ty.lifetime) if ty.lifetime is not None else ""
        mutability = f"&{lifetime} mut" if ty.mutable else f"&{lifetime}"
        return f"{mutability} {render_type(ty.elem)}"

    if isinstance(ty, ArrayType):
        return f"[{render_type(ty.elem)}; {render_expr(ty.length)}]"

    if isinstance(ty, SliceType):
        return f"[{render_type(ty.elem)}]"

    if isinstance(ty, TupleType):
        return f"({', '.join(render_type(e) for e in ty.elems)})"

    if isinstance(ty, UnsupportedType):
        raise_derive_error("DG1001", form=ty.form)

    raise_derive_error("DG1001", form=type(ty).__name__)


def render_literal(lit: Literal) -> str:
    """Render a literal the way it appears inside a type (array length, const argument)."""
    kind = lit.kind
    if kind == LiteralKind.STR or kind == LiteralKind.CHAR:
        return str(lit.value)
    if kind == LiteralKind.BYTE:
        return str(int(lit.value))
    if kind == LiteralKind.INT or kind == LiteralKind.FLOAT:
        return str(lit.value)
    if kind == LiteralKind.BOOL:
        return "true" if lit.value else "false"
    raise_derive_error("DG1002", kind=kind.value)


def render_expr(e: Expr) -> str:
    # Only literals occur in the type positions we accept
    if isinstance(e, LitExpr):
        return render_literal(e.lit)
    form = e.form if isinstance(e, UnsupportedExpr) else type(e).__name__
    raise_derive_error("DG1003", form=form)


def render_generic_argument(arg: GenericArgument) -> str:
    if isinstance(arg, LifetimeArg):
        return render_lifetime(arg.lifetime)
    if isinstance(arg, TypeArg):
        return render_type(arg.ty)
    if isinstance(arg, BindingArg):
        return f"{arg.name} = {render_type(arg.ty)}"
    if isinstance(arg, ConstraintArg):
        return f"{arg.name} : {render_bounds(arg.bounds)}"
    if isinstance(arg, ConstArg):
        return render_expr(arg.expr)
    raise_derive_error("DG1001", form=type(arg).__name__)


def render_generic_arguments(args: Iterable[GenericArgument]) -> str:
    rendered = [render_generic_argument(a) for a in args]
    if not rendered:
        return ""
    return f"<{', '.join(rendered)}>"


def render_path_segment(seg: PathSegment) -> str:
    if seg.args is None:
        return seg.ident
    if isinstance(seg.args, AngleBracketedArgs):
        return f"{seg.ident}{render_generic_arguments(seg.args.args)}"
    if isinstance(seg.args, ParenthesizedArgs):
        raise_derive_error("DG1005", segment=seg.ident)
    raise_derive_error("DG1001", form=type(seg.args).__name__)


def render_path(path: PathType) -> str:
    if path.qself is not None:
        raise_derive_error("DG1004", qself=render_type(path.qself))
    return "::".join(render_path_segment(s) for s in path.segments)


def render_trait_bound(tb: TraitBound) -> str:
    """Render a trait bound, rejecting `?Trait` and `for<'a> Trait`."""
    name = "::".join(s.ident for s in tb.path.segments)
    if tb.modifier != BoundModifier.NONE:
        raise_derive_error("DG1102", modifier=tb.modifier.value, bound=name)
    if tb.lifetimes is not None:
        lifetimes = ", ".join(render_lifetime(lf) for lf in tb.lifetimes)
        raise_derive_error("DG1103", lifetimes=lifetimes, subject=name)
    return render_path(tb.path)


def render_bound(b: Bound) -> str:
    if isinstance(b, TraitBound):
        return render_trait_bound(b)
    if isinstance(b, LifetimeBound):
        return render_lifetime(b.lifetime)
    raise_derive_error("DG1001", form=type(b).__name__)


def render_bounds(bounds: Iterable[Bound]) -> str:
    return " + ".join(render_bound(b) for b in bounds)


def render_lifetime_bounds(bounds: Iterable[Lifetime]) -> str:
    return " + ".join(render_lifetime(lf) for lf in bounds)
