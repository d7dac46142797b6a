# semantics/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from derivegen.internals.report import Span
from derivegen.semantics.typesys import Bound, Lifetime, TypeExpr

# === Generic parameters ===

@dataclass(frozen=True)
class TypeParam:
    name: str
    bounds: Tuple[Bound, ...] = ()

@dataclass(frozen=True)
class LifetimeParam:
    lifetime: Lifetime
    bounds: Tuple[Lifetime, ...] = ()

@dataclass(frozen=True)
class ConstParam:
    """const N: usize. Representable so it can be rejected with a precise error."""
    name: str
    ty: TypeExpr

GenericParam = Union[TypeParam, LifetimeParam, ConstParam]

# === Where clauses ===

@dataclass(frozen=True)
class TypePredicate:
    bounded_ty: TypeExpr
    bounds: Tuple[Bound, ...] = ()
    lifetimes: Optional[Tuple[Lifetime, ...]] = None  # for<'a> T : Trait<'a>

@dataclass(frozen=True)
class LifetimePredicate:
    lifetime: Lifetime
    bounds: Tuple[Lifetime, ...] = ()

@dataclass(frozen=True)
class EqPredicate:
    lhs: TypeExpr
    rhs: TypeExpr

WherePredicate = Union[TypePredicate, LifetimePredicate, EqPredicate]

@dataclass(frozen=True)
class WhereClause:
    predicates: Tuple[WherePredicate, ...] = ()

# === Fields and variants ===

class FieldStyle(Enum):
    NAMED = "named"
    POSITIONAL = "positional"
    UNIT = "unit"

@dataclass(frozen=True)
class FieldDescriptor:
    ty: TypeExpr
    name: Optional[str] = None   # None for positional fields
    loc: Optional[Span] = field(default=None, compare=False)

@dataclass(frozen=True)
class VariantDescriptor:
    name: str
    fields: Tuple[FieldDescriptor, ...] = ()
    style: FieldStyle = FieldStyle.UNIT
    loc: Optional[Span] = field(default=None, compare=False)

    def __post_init__(self):
        if self.fields and self.style == FieldStyle.UNIT:
            named = self.fields[0].name is not None
            object.__setattr__(self, "style", FieldStyle.NAMED if named else FieldStyle.POSITIONAL)

    @staticmethod
    def positional(name: str, *types: TypeExpr) -> "VariantDescriptor":
        return VariantDescriptor(name, tuple(FieldDescriptor(ty) for ty in types), FieldStyle.POSITIONAL)

    @staticmethod
    def named(name: str, *fields: Tuple[str, TypeExpr]) -> "VariantDescriptor":
        return VariantDescriptor(
            name, tuple(FieldDescriptor(ty, fname) for fname, ty in fields), FieldStyle.NAMED
        )

# === Declarations ===

class AdtKind(Enum):
    ENUM = "enum"
    STRUCT = "struct"
    UNION = "union"

@dataclass(frozen=True)
class AdtDescriptor:
    """A parsed struct/enum/union declaration.

    `variants` is only meaningful for enums; structs and unions keep their
    fields in a single pseudo-variant named after the declaration so that
    --dump-ast shows them, but no derivation consumes it.
    """
    name: str
    kind: AdtKind
    generics: Tuple[GenericParam, ...] = ()
    where_clause: Optional[WhereClause] = None
    variants: Tuple[VariantDescriptor, ...] = ()
    loc: Optional[Span] = field(default=None, compare=False)

    @property
    def is_enum(self) -> bool:
        return self.kind == AdtKind.ENUM
