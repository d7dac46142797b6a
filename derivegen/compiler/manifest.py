"""Generation manifest (derive.toml) loading and validation.

A manifest describes a batch of generation requests:

    [[derive]]
    source = "src/values.rs"
    kinds = ["VariantName", "EnumIsA", "EnumAsGetters"]
    out = "src/generated/values_derive.rs"

    [index]
    types = ["VarId", "FunDeclId"]
    out = "src/generated/ids.rs"
    overflow_policy = "abort"
    id_vector_path = "crate::id_vector"

Relative paths are resolved against the manifest's directory. A missing
`out` means the text goes to stdout.
"""
from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from derivegen.backend.enum_methods import DeriveKind
from derivegen.backend.index_type import IndexTypeOptions, OverflowPolicy

MANIFEST_NAME = "derive.toml"

IDENT_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
MODULE_PATH_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(::[A-Za-z_][A-Za-z0-9_]*)*$")


class ManifestError(Exception):
    pass


@dataclass
class DeriveTarget:
    source: Path
    kinds: List[DeriveKind]
    out: Optional[Path] = None


@dataclass
class IndexTarget:
    types: List[str]
    options: IndexTypeOptions = field(default_factory=IndexTypeOptions)
    out: Optional[Path] = None


@dataclass
class DeriveManifest:
    root: Path
    derives: List[DeriveTarget] = field(default_factory=list)
    index: Optional[IndexTarget] = None

    def validate(self) -> None:
        if not self.derives and self.index is None:
            raise ManifestError("Manifest has neither [[derive]] entries nor an [index] table")
        for target in self.derives:
            if not target.kinds:
                raise ManifestError(f"[[derive]] for {target.source}: 'kinds' must not be empty")
        if self.index is not None:
            for name in self.index.types:
                if not IDENT_PATTERN.match(name):
                    raise ManifestError(f"Invalid index type name '{name}'. Must be a single identifier.")
            if not MODULE_PATH_PATTERN.match(self.index.options.id_vector_path):
                raise ManifestError(
                    f"Invalid id_vector_path '{self.index.options.id_vector_path}'. Must be a module path like crate::id_vector."
                )


def load_manifest(path: Path | None = None) -> DeriveManifest:
    """Load and validate a manifest file (default: ./derive.toml)."""
    if path is None:
        path = Path.cwd() / MANIFEST_NAME
    if not path.exists():
        raise ManifestError(f"No manifest found at {path}")
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"{path}: {e}") from e
    return _parse_manifest(data, path.parent)


def load_manifest_from_string(text: str, root: Path | None = None) -> DeriveManifest:
    """Load a manifest from a TOML string; relative paths resolve against `root` (default: cwd)."""
    return _parse_manifest(tomllib.loads(text), root or Path.cwd())


def _resolve(root: Path, value: Optional[str]) -> Optional[Path]:
    if value is None:
        return None
    p = Path(value)
    return p if p.is_absolute() else root / p


def _parse_kinds(source: str, names) -> List[DeriveKind]:
    if not isinstance(names, list):
        raise ManifestError(f"[[derive]] for {source}: 'kinds' must be a list of derive names")
    kinds: List[DeriveKind] = []
    for name in names:
        try:
            kind = DeriveKind(name)
        except ValueError:
            known = ", ".join(k.value for k in DeriveKind)
            raise ManifestError(f"[[derive]] for {source}: unknown kind '{name}' (expected one of: {known})") from None
        if kind not in kinds:
            kinds.append(kind)
    return kinds


def _parse_manifest(data: dict, root: Path) -> DeriveManifest:
    derives: List[DeriveTarget] = []
    for entry in data.get("derive", []):
        source = entry.get("source")
        if not source:
            raise ManifestError("Missing required field: [[derive]] source")
        derives.append(DeriveTarget(
            source=_resolve(root, source),
            kinds=_parse_kinds(source, entry.get("kinds", [])),
            out=_resolve(root, entry.get("out")),
        ))

    index = None
    index_table = data.get("index")
    if index_table is not None:
        policy_name = index_table.get("overflow_policy", OverflowPolicy.ABORT.value)
        try:
            policy = OverflowPolicy(policy_name)
        except ValueError:
            raise ManifestError(
                f"Invalid overflow_policy '{policy_name}'. Must be 'abort' or 'recoverable'."
            ) from None
        index = IndexTarget(
            types=list(index_table.get("types", [])),
            options=IndexTypeOptions(
                overflow_policy=policy,
                id_vector_path=index_table.get("id_vector_path", IndexTypeOptions.id_vector_path),
            ),
            out=_resolve(root, index_table.get("out")),
        )

    manifest = DeriveManifest(root=root, derives=derives, index=index)
    manifest.validate()
    return manifest
