"""
Derived enum methods: VariantName, VariantIndexArity, EnumIsA, EnumAsGetters.

Each derivation renders a complete `impl` block for the enum:

    impl<bounded generics> Name<bare generics><where clause> {
        ...methods...
    }

An enum without variants produces no code at all: an empty match would not
type-check for the value-returning methods, and per-variant derivations have
nothing to emit.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List

from derivegen.internals.errors import raise_derive_error, runtime_message
from derivegen.backend.generics import render_params, render_where
from derivegen.backend.patterns import MatchPattern, build_patterns
from derivegen.semantics.ast import AdtDescriptor
from derivegen.semantics.name_mangling import to_snake_case

TAB = "    "
THREE_TABS = TAB * 3


class DeriveKind(str, Enum):
    VARIANT_NAME = "VariantName"
    VARIANT_INDEX_ARITY = "VariantIndexArity"
    ENUM_IS_A = "EnumIsA"
    ENUM_AS_GETTERS = "EnumAsGetters"

    @classmethod
    def parse(cls, name: str) -> "DeriveKind":
        for kind in cls:
            if kind.value == name:
                return kind
        known = ", ".join(k.value for k in cls)
        raise_derive_error("DG1402", name=name, known=known)


@dataclass(frozen=True)
class ImplHeader:
    """The three generics fragments of an `impl` header."""
    params_with_bounds: str
    params_bare: str
    where_clause: str

    @staticmethod
    def of(adt: AdtDescriptor) -> "ImplHeader":
        return ImplHeader(
            params_with_bounds=render_params(adt.generics, with_bounds=True),
            params_bare=render_params(adt.generics, with_bounds=False),
            where_clause=render_where(adt.where_clause),
        )

    def wrap(self, adt_name: str, body: str) -> str:
        return (f"impl{self.params_with_bounds} {adt_name}{self.params_bare}{self.where_clause} {{\n"
                f"{body}\n"
                f"}}")


def _match_method(signature: str, arms: List[str]) -> str:
    """A method whose body is a single `match self` over the given arms."""
    return (f"{TAB}pub fn {signature} {{\n"
            f"{TAB}{TAB}match self {{\n"
            + "\n".join(arms) + "\n"
            f"{TAB}{TAB}}}\n"
            f"{TAB}}}")


def _check_enum(adt: AdtDescriptor, kind: DeriveKind) -> None:
    if not adt.is_enum:
        raise_derive_error("DG1201", span=adt.loc, derive=kind.value, kind=adt.kind.value)


def derive_variant_name(adt: AdtDescriptor) -> str:
    """`pub fn variant_name(&self) -> &'static str` returning the variant's name."""
    _check_enum(adt, DeriveKind.VARIANT_NAME)
    header = ImplHeader.of(adt)
    patterns = build_patterns(adt.name, adt.variants, None)
    if not patterns:
        return ""

    arms = [f'{THREE_TABS}{mp.pattern} => {{ "{mp.variant_name}" }},' for mp in patterns]
    return header.wrap(adt.name, _match_method("variant_name(&self) -> &'static str", arms))


def derive_variant_index_arity(adt: AdtDescriptor) -> str:
    """`pub fn variant_index_arity(&self) -> (u32, usize)`.

    Indices are positional in declaration order, so they stay stable as long
    as the declaration does.
    """
    _check_enum(adt, DeriveKind.VARIANT_INDEX_ARITY)
    header = ImplHeader.of(adt)
    patterns = build_patterns(adt.name, adt.variants, None)
    if not patterns:
        return ""

    arms = [f"{THREE_TABS}{mp.pattern} => {{ ({i}, {mp.num_args}) }},"
            for i, mp in enumerate(patterns)]
    return header.wrap(adt.name, _match_method("variant_index_arity(&self) -> (u32, usize)", arms))


def _is_a_method(mp: MatchPattern, several_variants: bool) -> str:
    arms = [f"{THREE_TABS}{mp.pattern} => true,"]
    if several_variants:
        arms.append(f"{THREE_TABS}_ => false,")
    return _match_method(f"is_{to_snake_case(mp.variant_name)}(&self) -> bool", arms)


def _as_getter_method(adt: AdtDescriptor, mp: MatchPattern, several_variants: bool) -> str:
    method = to_snake_case(mp.variant_name)
    arms = [f"{THREE_TABS}{mp.pattern} => ({', '.join(mp.named_args)}),"]
    if several_variants:
        msg = runtime_message("DG2001", adt=adt.name, variant=method)
        arms.append(f'{THREE_TABS}_ => unreachable!("{msg}"),')
    ret_ty = "(" + ", ".join(f"&({ty})" for ty in mp.arg_types) + ")"
    return _match_method(f"as_{method}(&self) -> {ret_ty}", arms)


def _derive_per_variant(adt: AdtDescriptor, kind: DeriveKind) -> str:
    """Shared driver for EnumIsA and EnumAsGetters: one method per variant.

    When the enum has several variants every match gets a trailing wildcard
    arm; with a single variant that arm would be unreachable and is omitted.
    """
    _check_enum(adt, kind)
    header = ImplHeader.of(adt)
    several_variants = len(adt.variants) > 1

    if kind == DeriveKind.ENUM_IS_A:
        patterns = build_patterns(adt.name, adt.variants, None)
        methods = [_is_a_method(mp, several_variants) for mp in patterns]
    else:
        patterns = build_patterns(adt.name, adt.variants, "x")
        methods = [_as_getter_method(adt, mp, several_variants) for mp in patterns]

    if not methods:
        return ""
    return header.wrap(adt.name, "\n\n".join(methods))


def derive_enum_is_a(adt: AdtDescriptor) -> str:
    """`pub fn is_<variant>(&self) -> bool` for every variant."""
    return _derive_per_variant(adt, DeriveKind.ENUM_IS_A)


def derive_enum_as_getters(adt: AdtDescriptor) -> str:
    """`pub fn as_<variant>(&self) -> (&(T0), ...)` for every variant.

    Calling the accessor of another variant hits `unreachable!`.
    """
    return _derive_per_variant(adt, DeriveKind.ENUM_AS_GETTERS)


DERIVERS: Dict[DeriveKind, Callable[[AdtDescriptor], str]] = {
    DeriveKind.VARIANT_NAME: derive_variant_name,
    DeriveKind.VARIANT_INDEX_ARITY: derive_variant_index_arity,
    DeriveKind.ENUM_IS_A: derive_enum_is_a,
    DeriveKind.ENUM_AS_GETTERS: derive_enum_as_getters,
}


def derive(kind: DeriveKind, adt: AdtDescriptor) -> str:
    """Run one derivation on a declaration. Pure: same input, same text."""
    return DERIVERS[DeriveKind(kind)](adt)
