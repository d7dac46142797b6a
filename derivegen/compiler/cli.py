"""CLI entry point and argument parsing."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from derivegen.internals.version import print_banner


def _write_output(text: str, out: Optional[Path]) -> None:
    if out is None:
        sys.stdout.write(text)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")


def _read_source(path: str) -> tuple[str, str]:
    """Return (text, display name); '-' reads stdin."""
    if path == "-":
        return sys.stdin.read(), "<stdin>"
    src_path = Path(path).resolve()
    return src_path.read_text(encoding="utf-8"), str(src_path)


def _split_kinds(values: Sequence[str]) -> List[str]:
    return [name for group in values for name in group.split(",")]


def _warn_empty_enums(decls, kinds, reporter) -> None:
    from derivegen.internals import errors as er

    derive_names = ", ".join(k.value for k in kinds)
    for adt in decls:
        if adt.is_enum and not adt.variants:
            er.emit(reporter, er.ERR.DG1202, adt.loc, name=adt.name, derive=derive_names)


def print_toolchain_version(path: Path) -> int:
    """Print the `+<channel>` override of a rust-toolchain file.

    Returns:
        0 on success, 2 on error.
    """
    from derivegen.internals.errors import ToolchainError, report_exception
    from derivegen.internals.report import Reporter
    from derivegen.internals.toolchain import read_toolchain_channel

    try:
        print(read_toolchain_channel(path))
    except ToolchainError as exc:
        reporter = Reporter(filename=str(path))
        report_exception(reporter, exc)
        reporter.print()
        return 2
    return 0


def run_manifest(path: Path, verbose: bool = False) -> int:
    """Run every generation request of a derive.toml manifest.

    Returns:
        0 on success, 2 on the first failing request.
    """
    from derivegen.compiler.manifest import ManifestError, load_manifest
    from derivegen.compiler.pipeline import derive_all, generate_index_types
    from derivegen.internals.errors import DeriveError, report_exception
    from derivegen.internals.parser import parse_declarations
    from derivegen.internals.report import Reporter

    try:
        manifest = load_manifest(path)
    except ManifestError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    for target in manifest.derives:
        try:
            src = target.source.read_text(encoding="utf-8")
        except OSError as e:
            print(f"error: cannot read {target.source}: {e}", file=sys.stderr)
            return 2

        reporter = Reporter(source=src, filename=str(target.source))
        reporter.stage(f"derive {', '.join(k.value for k in target.kinds)} for {target.source}", verbose)
        try:
            decls = parse_declarations(src)
            text = derive_all(decls, target.kinds)
        except DeriveError as exc:
            report_exception(reporter, exc)
            reporter.print()
            return 2
        _warn_empty_enums(decls, target.kinds, reporter)
        reporter.print()
        _write_output(text, target.out)

    if manifest.index is not None:
        reporter = Reporter(filename=str(path))
        reporter.stage(f"index types {', '.join(manifest.index.types)}", verbose)
        try:
            text = generate_index_types(manifest.index.types, manifest.index.options)
        except DeriveError as exc:
            report_exception(reporter, exc)
            reporter.print()
            return 2
        _write_output(text, manifest.index.out)

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main generator entry point."""
    from derivegen.backend.index_type import IndexTypeOptions, OverflowPolicy
    from derivegen.internals.toolchain import TOOLCHAIN_FILE

    ap = argparse.ArgumentParser(
        prog="derivegen",
        description="Generate enum helper methods and index types as Rust source text",
    )

    ap.add_argument("source", nargs='?', help="Path to a file of enum/struct declarations ('-' for stdin)")
    ap.add_argument("--version", action="store_true", help="Show version and exit")
    ap.add_argument("--derive", metavar="KIND[,KIND]", action="append", default=[],
                    help="Derivation(s) to run on every declaration of SOURCE: "
                         "VariantName, VariantIndexArity, EnumIsA, EnumAsGetters")
    ap.add_argument("--index-type", metavar="NAME", action="append", default=[],
                    help="Generate an index type module named NAME (repeatable)")
    ap.add_argument(
        "--overflow-policy",
        choices=[p.value for p in OverflowPolicy],
        default=OverflowPolicy.ABORT.value,
        help="What generated index types do when incrementing past the maximum id",
    )
    ap.add_argument("--id-vector-path", metavar="PATH", default=IndexTypeOptions.id_vector_path,
                    help="Module providing the Vector type indexed by generated ids")
    ap.add_argument("-o", "--out", metavar="OUT",
                    help="Write generated text to OUT (default: stdout)")
    ap.add_argument("--manifest", metavar="PATH",
                    help="Run the generation requests of a derive.toml manifest")
    ap.add_argument("--toolchain-version", metavar="FILE", nargs='?', const=TOOLCHAIN_FILE,
                    help=f"Print the +channel of a rust-toolchain file (default: ./{TOOLCHAIN_FILE}) and exit")
    ap.add_argument("--dump-parse", action="store_true", help="Print raw Lark tree")
    ap.add_argument("--dump-ast", action="store_true", help="Print parsed declarations")
    ap.add_argument("--verbose", action="store_true", help="Print stage progress to stderr")
    args = ap.parse_args(argv)

    if args.version:
        print_banner()
        return 0

    if args.verbose:
        print_banner(sys.stderr)

    if args.toolchain_version is not None:
        return print_toolchain_version(Path(args.toolchain_version))

    if args.manifest:
        return run_manifest(Path(args.manifest), verbose=args.verbose)

    if not args.source and not args.index_type:
        print("error: source file or --index-type required (unless using --manifest)", file=sys.stderr)
        return 2

    if args.source and not args.derive:
        print("error: --derive is required when a source file is given", file=sys.stderr)
        return 2

    if args.derive and not args.source:
        print("error: --derive needs a source file", file=sys.stderr)
        return 2

    from derivegen.compiler.pipeline import derive_all, generate_index_types, join_outputs, parse_kinds
    from derivegen.internals.errors import DeriveError, report_exception
    from derivegen.internals.parser import parse_declarations
    from derivegen.internals.report import Reporter

    parts: List[str] = []
    reporter = Reporter()

    try:
        if args.source:
            try:
                src, filename = _read_source(args.source)
            except OSError as e:
                print(f"error: cannot read {args.source}: {e}", file=sys.stderr)
                return 2
            reporter = Reporter(source=src, filename=filename)

            kinds = parse_kinds(_split_kinds(args.derive))
            reporter.stage(f"parse {filename}", args.verbose)
            decls = parse_declarations(src, dump_parse=args.dump_parse)

            if args.dump_ast:
                for adt in decls:
                    print(adt, file=sys.stderr)
                print(file=sys.stderr)

            _warn_empty_enums(decls, kinds, reporter)
            reporter.stage(f"derive {', '.join(k.value for k in kinds)} for {len(decls)} declaration(s)",
                           args.verbose)
            parts.append(derive_all(decls, kinds))

        if args.index_type:
            options = IndexTypeOptions(
                overflow_policy=OverflowPolicy(args.overflow_policy),
                id_vector_path=args.id_vector_path,
            )
            reporter.stage(f"index types {', '.join(args.index_type)}", args.verbose)
            parts.append(generate_index_types(args.index_type, options))

    except DeriveError as exc:
        report_exception(reporter, exc)
        reporter.print()
        return 2

    reporter.print()
    _write_output(join_outputs(p.rstrip("\n") for p in parts), Path(args.out) if args.out else None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
