"""Generic parameter lists and where-clauses.

An impl header needs the parameters twice: with their bounds after `impl`
(`impl<'a, T : 'a + Clone>`) and bare after the type name (`Foo<'a, T>`).
"""
from __future__ import annotations

from typing import Optional, Sequence

from derivegen.internals.errors import raise_derive_error
from derivegen.backend.type_printer import (
    render_bounds, render_lifetime, render_lifetime_bounds, render_type,
)
from derivegen.semantics.ast import (
    ConstParam, EqPredicate, GenericParam, LifetimeParam, LifetimePredicate,
    TypeParam, TypePredicate, WhereClause, WherePredicate,
)


def render_param(param: GenericParam, with_bounds: bool) -> str:
    if isinstance(param, TypeParam):
        if not param.bounds or not with_bounds:
            return param.name
        return f"{param.name} : {render_bounds(param.bounds)}"

    if isinstance(param, LifetimeParam):
        ident = render_lifetime(param.lifetime)
        if not param.bounds or not with_bounds:
            return ident
        return f"{ident} : {render_lifetime_bounds(param.bounds)}"

    if isinstance(param, ConstParam):
        raise_derive_error("DG1101", name=param.name)

    raise_derive_error("DG1001", form=type(param).__name__)


def render_params(params: Sequence[GenericParam], with_bounds: bool) -> str:
    """Render `<p1, ..., pn>`, or the empty string when there are no parameters.

    `with_bounds` controls whether we generate `<'a, T1 : 'a, T2 : Clone>` or
    `<'a, T1, T2>`.
    """
    rendered = [render_param(p, with_bounds) for p in params]
    if not rendered:
        return ""
    return f"<{', '.join(rendered)}>"


def render_predicate(pred: WherePredicate) -> str:
    if isinstance(pred, TypePredicate):
        ty = render_type(pred.bounded_ty)
        if pred.lifetimes is not None:
            lifetimes = ", ".join(render_lifetime(lf) for lf in pred.lifetimes)
            raise_derive_error("DG1103", lifetimes=lifetimes, subject=ty)
        if not pred.bounds:
            return ty
        return f"{ty} : {render_bounds(pred.bounds)}"

    if isinstance(pred, LifetimePredicate):
        return f"{render_lifetime(pred.lifetime)} : {render_lifetime_bounds(pred.bounds)}"

    if isinstance(pred, EqPredicate):
        return f"{render_type(pred.lhs)} = {render_type(pred.rhs)}"

    raise_derive_error("DG1001", form=type(pred).__name__)


def render_where(clause: Optional[WhereClause]) -> str:
    """Render an optional where-clause as `\\nwhere\\n    pred,\\n...`."""
    if clause is None:
        return ""
    preds = "".join(f"    {render_predicate(p)},\n" for p in clause.predicates)
    return f"\nwhere\n{preds}"
