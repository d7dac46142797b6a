"""Type expressions, generic arguments and bounds.

All nodes are frozen dataclasses owning their children; ordered collections are
tuples in declaration order. Shapes the renderer cannot name (function pointers,
trait objects, ...) are kept as `UnsupportedType` so that rejection happens at
render time with the offending tag.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Lifetime:
    name: str  # Without the leading quote (e.g., "a")

    def __str__(self) -> str:
        return f"'{self.name}"


class LiteralKind(Enum):
    STR = "Str"
    BYTE_STR = "ByteStr"
    BYTE = "Byte"
    CHAR = "Char"
    INT = "Int"
    FLOAT = "Float"
    BOOL = "Bool"
    VERBATIM = "Verbatim"


@dataclass(frozen=True)
class Literal:
    """A literal token.

    `value` holds the decoded value: str for STR/CHAR, int for BYTE,
    the base-10 digit string for INT/FLOAT, bool for BOOL, raw text otherwise.
    """
    kind: LiteralKind
    value: Union[str, int, bool, bytes]


@dataclass(frozen=True)
class LitExpr:
    lit: Literal


@dataclass(frozen=True)
class UnsupportedExpr:
    """Any non-literal expression (paths, blocks, binary ops, ...)."""
    form: str


Expr = Union[LitExpr, UnsupportedExpr]


# === Type expressions ===

@dataclass(frozen=True)
class ArrayType:
    elem: "TypeExpr"
    length: Expr


@dataclass(frozen=True)
class ReferenceType:
    elem: "TypeExpr"
    lifetime: Optional[Lifetime] = None
    mutable: bool = False


@dataclass(frozen=True)
class SliceType:
    elem: "TypeExpr"


@dataclass(frozen=True)
class TupleType:
    elems: Tuple["TypeExpr", ...] = ()


@dataclass(frozen=True)
class PathSegment:
    ident: str
    args: Optional["AngleBracketedArgs | ParenthesizedArgs"] = None


@dataclass(frozen=True)
class PathType:
    segments: Tuple[PathSegment, ...]
    qself: Optional["TypeExpr"] = None  # Set for <T as Trait>::Name, never renderable

    @staticmethod
    def simple(name: str, *args: "GenericArgument") -> "PathType":
        """Single-segment path, e.g. PathType.simple("Vec", TypeArg(t)) for Vec<t>."""
        seg_args = AngleBracketedArgs(tuple(args)) if args else None
        return PathType((PathSegment(name, seg_args),))


@dataclass(frozen=True)
class UnsupportedType:
    """A type shape outside the accepted grammar, tagged with its kind.

    Tags: BareFn, Group, ImplTrait, Infer, Macro, Never, Paren, Ptr,
    TraitObject, Verbatim.
    """
    form: str


TypeExpr = Union[ArrayType, ReferenceType, SliceType, TupleType, PathType, UnsupportedType]


# === Generic arguments ===

@dataclass(frozen=True)
class LifetimeArg:
    lifetime: Lifetime


@dataclass(frozen=True)
class TypeArg:
    ty: TypeExpr


@dataclass(frozen=True)
class BindingArg:
    """Associated type binding: Iterator<Item = T>."""
    name: str
    ty: TypeExpr


@dataclass(frozen=True)
class ConstraintArg:
    """Associated type constraint: Iterator<Item : Clone>."""
    name: str
    bounds: Tuple["Bound", ...]


@dataclass(frozen=True)
class ConstArg:
    expr: Expr


GenericArgument = Union[LifetimeArg, TypeArg, BindingArg, ConstraintArg, ConstArg]


@dataclass(frozen=True)
class AngleBracketedArgs:
    args: Tuple[GenericArgument, ...] = ()


@dataclass(frozen=True)
class ParenthesizedArgs:
    """Fn(A, B) -> C style arguments. Representable, never renderable."""
    inputs: Tuple[TypeExpr, ...] = ()
    output: Optional[TypeExpr] = None


# === Bounds ===

class BoundModifier(Enum):
    NONE = ""
    MAYBE = "?"


@dataclass(frozen=True)
class TraitBound:
    path: PathType
    modifier: BoundModifier = BoundModifier.NONE
    lifetimes: Optional[Tuple[Lifetime, ...]] = None  # for<'a, ...> binder


@dataclass(frozen=True)
class LifetimeBound:
    lifetime: Lifetime


Bound = Union[TraitBound, LifetimeBound]
