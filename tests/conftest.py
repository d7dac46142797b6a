from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from derivegen.semantics.ast import (
    AdtDescriptor, AdtKind, TypeParam, VariantDescriptor,
)
from derivegen.semantics.typesys import PathType, TypeArg

LIST_SOURCE = """\
enum List<T> {
    Nil,
    Cons(T, List<T>),
}
"""


def path(name: str, *args) -> PathType:
    return PathType.simple(name, *(TypeArg(a) for a in args))


@pytest.fixture
def list_adt() -> AdtDescriptor:
    """enum List<T> { Nil, Cons(T, List<T>) }"""
    t = path("T")
    return AdtDescriptor(
        name="List",
        kind=AdtKind.ENUM,
        generics=(TypeParam("T"),),
        variants=(
            VariantDescriptor("Nil"),
            VariantDescriptor.positional("Cons", t, path("List", t)),
        ),
    )


@pytest.fixture
def single_variant_adt() -> AdtDescriptor:
    """enum Wrapper { Only { value: u32 } }"""
    return AdtDescriptor(
        name="Wrapper",
        kind=AdtKind.ENUM,
        variants=(VariantDescriptor.named("Only", ("value", path("u32"))),),
    )


@pytest.fixture
def empty_enum() -> AdtDescriptor:
    return AdtDescriptor(name="Void", kind=AdtKind.ENUM)


@pytest.fixture
def write_file(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        file_path = tmp_path / name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(dedent(content))
        return file_path

    return _write
