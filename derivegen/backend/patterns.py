"""Per-variant match patterns for enum derivations.

The patterns built here are shared by every method derivation: variant
indices, arities, binding names and accessor return types all come from the
same `MatchPattern` list so they cannot drift apart.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from derivegen.internals.errors import DeriveError
from derivegen.backend.type_printer import render_type
from derivegen.semantics.ast import FieldDescriptor, FieldStyle, VariantDescriptor


@dataclass(frozen=True)
class MatchPattern:
    variant_name: str
    pattern: str                    # e.g. `List::Cons(hd, tl)`
    num_args: int                   # Field count, anonymous fields included
    named_args: Tuple[str, ...]     # ("hd", "tl"); empty when bindings are anonymous
    arg_types: Tuple[str, ...]      # Rendered field types, declaration order


def _field_type(f: FieldDescriptor) -> str:
    try:
        return render_type(f.ty)
    except DeriveError as e:
        raise e.with_span(f.loc)


def build_pattern(adt_name: str, variant: VariantDescriptor,
                  binding_basename: Optional[str]) -> MatchPattern:
    """Build the match pattern of a single variant.

    Bindings are `_` when `binding_basename` is None, otherwise the basename
    followed by the field's position within this variant (`x0, x1, ...`).
    """
    def binding(index: int) -> str:
        if binding_basename is None:
            return "_"
        return f"{binding_basename}{index}"

    bindings: List[str] = [binding(i) for i in range(len(variant.fields))]
    arg_types = tuple(_field_type(f) for f in variant.fields)

    if variant.style == FieldStyle.NAMED:
        fields = [f"{f.name}:{b}" for f, b in zip(variant.fields, bindings)]
        suffix = f"{{ {', '.join(fields)} }}"
    elif variant.style == FieldStyle.POSITIONAL:
        suffix = f"({', '.join(bindings)})"
    else:
        suffix = ""

    named = tuple(bindings) if binding_basename is not None else ()
    return MatchPattern(
        variant_name=variant.name,
        pattern=f"{adt_name}::{variant.name}{suffix}",
        num_args=len(variant.fields),
        named_args=named,
        arg_types=arg_types,
    )


def build_patterns(adt_name: str, variants: Sequence[VariantDescriptor],
                   binding_basename: Optional[str] = None) -> List[MatchPattern]:
    """Build match patterns for all variants, in declaration order."""
    return [build_pattern(adt_name, v, binding_basename) for v in variants]
