"""Generation pipeline: describe (parse) -> generate (render) -> text artifact.

Every entry point is a pure function of its inputs; the same declarations and
options always produce byte-identical output.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence

from derivegen.backend.enum_methods import DeriveKind, derive
from derivegen.backend.index_type import IndexTypeOptions, generate_index_type
from derivegen.internals.parser import lex_invocation, parse_declarations
from derivegen.semantics.ast import AdtDescriptor


def join_outputs(parts: Iterable[str]) -> str:
    """Join generated blocks with a blank line; empty blocks are dropped."""
    blocks = [p for p in parts if p]
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def parse_kinds(names: Iterable[str]) -> List[DeriveKind]:
    """Derive kinds from their names ("VariantName", "EnumIsA", ...), duplicates dropped."""
    kinds: List[DeriveKind] = []
    for name in names:
        kind = DeriveKind.parse(name.strip())
        if kind not in kinds:
            kinds.append(kind)
    return kinds


def derive_adt(adt: AdtDescriptor, kinds: Sequence[DeriveKind]) -> List[str]:
    """Run the requested derivations on one declaration, in the order given."""
    return [derive(kind, adt) for kind in kinds]


def derive_all(decls: Sequence[AdtDescriptor], kinds: Sequence[DeriveKind]) -> str:
    """Derive for every declaration (declaration order, then kind order)."""
    parts: List[str] = []
    for adt in decls:
        parts.extend(derive_adt(adt, kinds))
    return join_outputs(parts)


def derive_source(src: str, kinds: Sequence[DeriveKind], dump_parse: bool = False) -> str:
    """Parse declaration source and derive for every declaration in it."""
    return derive_all(parse_declarations(src, dump_parse=dump_parse), kinds)


def generate_index_types(invocations: Iterable[str],
                         options: IndexTypeOptions = IndexTypeOptions()) -> str:
    """Generate one index module per invocation text (each must be a single identifier)."""
    return join_outputs(generate_index_type(lex_invocation(inv), options) for inv in invocations)
