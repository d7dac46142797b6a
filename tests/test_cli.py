import io

import pytest

from derivegen.backend.enum_methods import derive_enum_is_a, derive_variant_name
from derivegen.backend.index_type import IndexTypeOptions, OverflowPolicy, generate_index_module
from derivegen.compiler import cli
from derivegen.compiler.manifest import MANIFEST_NAME
from derivegen.internals.toolchain import TOOLCHAIN_FILE

from conftest import LIST_SOURCE


@pytest.fixture
def list_source(write_file):
    return write_file("list.rs", LIST_SOURCE)


def test_version(capsys):
    assert cli.main(["--version"]) == 0
    assert capsys.readouterr().out.startswith("derivegen ")


def test_derive_to_stdout(list_source, list_adt, capsys):
    rc = cli.main([str(list_source), "--derive", "VariantName,EnumIsA"])

    assert rc == 0
    out = capsys.readouterr().out
    assert out == derive_variant_name(list_adt) + "\n\n" + derive_enum_is_a(list_adt) + "\n"


def test_repeated_derive_flags(list_source, list_adt, capsys):
    rc = cli.main([str(list_source), "--derive", "EnumIsA", "--derive", "VariantName"])

    assert rc == 0
    assert capsys.readouterr().out == derive_enum_is_a(list_adt) + "\n\n" + derive_variant_name(list_adt) + "\n"


def test_derive_to_file(list_source, list_adt, tmp_path):
    out = tmp_path / "gen" / "list_derive.rs"
    rc = cli.main([str(list_source), "--derive", "VariantName", "-o", str(out)])

    assert rc == 0
    assert out.read_text() == derive_variant_name(list_adt) + "\n"


def test_derive_from_stdin(list_adt, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(LIST_SOURCE))
    assert cli.main(["-", "--derive", "VariantName"]) == 0
    assert capsys.readouterr().out == derive_variant_name(list_adt) + "\n"


def test_index_types(capsys):
    rc = cli.main(["--index-type", "FunId", "--index-type", "VarId", "--overflow-policy", "recoverable",
                   "--id-vector-path", "crate::ids"])

    assert rc == 0
    options = IndexTypeOptions(OverflowPolicy.RECOVERABLE, "crate::ids")
    assert capsys.readouterr().out == (
        generate_index_module("FunId", options) + "\n\n" + generate_index_module("VarId", options) + "\n"
    )


def test_derive_and_index_together(list_source, list_adt, capsys):
    rc = cli.main([str(list_source), "--derive", "VariantName", "--index-type", "FunId"])

    assert rc == 0
    assert capsys.readouterr().out == derive_variant_name(list_adt) + "\n\n" + generate_index_module("FunId") + "\n"


def test_struct_is_reported(write_file, capsys):
    src = write_file("point.rs", "struct Point { x: i32 }\n")
    rc = cli.main([str(src), "--derive", "EnumIsA"])

    assert rc == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "error [DG1201]: EnumIsA macro can not be called on structs." in captured.err
    assert "point.rs:1:1" in captured.err


def test_syntax_error_is_reported(write_file, capsys):
    src = write_file("bad.rs", "enum E { A(u8 u8) }\n")
    assert cli.main([str(src), "--derive", "VariantName"]) == 2
    assert "[DG1401]" in capsys.readouterr().err


def test_unknown_kind_is_reported(list_source, capsys):
    assert cli.main([str(list_source), "--derive", "Display"]) == 2
    assert "[DG1402]" in capsys.readouterr().err


def test_malformed_index_type(capsys):
    assert cli.main(["--index-type", "Fun Id"]) == 2
    assert "[DG1301]" in capsys.readouterr().err


def test_empty_enum_warns(write_file, capsys):
    src = write_file("void.rs", "enum Void {}\n")
    assert cli.main([str(src), "--derive", "VariantName"]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "warning [DG1202]" in captured.err


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["list.rs"],
        ["--derive", "VariantName"],
    ],
)
def test_usage_errors(argv, capsys):
    assert cli.main(argv) == 2
    assert capsys.readouterr().err.startswith("error: ")


def test_unreadable_source(tmp_path, capsys):
    assert cli.main([str(tmp_path / "missing.rs"), "--derive", "VariantName"]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_dump_ast_goes_to_stderr(list_source, list_adt, capsys):
    assert cli.main([str(list_source), "--derive", "VariantName", "--dump-ast"]) == 0
    captured = capsys.readouterr()
    assert "AdtDescriptor(name='List'" in captured.err
    assert "AdtDescriptor" not in captured.out
    assert captured.out == derive_variant_name(list_adt) + "\n"


def test_verbose_stages(list_source, capsys):
    assert cli.main([str(list_source), "--derive", "VariantName", "--verbose"]) == 0
    err = capsys.readouterr().err
    assert err.startswith("derivegen ")
    assert "-- parse " in err
    assert "-- derive VariantName for 1 declaration(s)" in err


def test_toolchain_version(write_file, tmp_path, monkeypatch, capsys):
    write_file(TOOLCHAIN_FILE, '[toolchain]\nchannel = "nightly-2022-01-29"\n')
    monkeypatch.chdir(tmp_path)

    assert cli.main(["--toolchain-version"]) == 0
    assert capsys.readouterr().out == "+nightly-2022-01-29\n"


def test_toolchain_version_missing(tmp_path, capsys):
    assert cli.main(["--toolchain-version", str(tmp_path / TOOLCHAIN_FILE)]) == 2
    assert "[DG1501]" in capsys.readouterr().err


def test_manifest_run(write_file, tmp_path, list_adt, capsys):
    write_file("src/list.rs", LIST_SOURCE)
    manifest = write_file(
        MANIFEST_NAME,
        """
        [[derive]]
        source = "src/list.rs"
        kinds = ["VariantName"]
        out = "gen/list_derive.rs"

        [[derive]]
        source = "src/list.rs"
        kinds = ["EnumIsA"]

        [index]
        types = ["FunId"]
        out = "gen/ids.rs"
        """,
    )

    assert cli.main(["--manifest", str(manifest)]) == 0
    assert (tmp_path / "gen" / "list_derive.rs").read_text() == derive_variant_name(list_adt) + "\n"
    assert (tmp_path / "gen" / "ids.rs").read_text() == generate_index_module("FunId") + "\n"
    assert capsys.readouterr().out == derive_enum_is_a(list_adt) + "\n"


def test_manifest_errors(write_file, capsys):
    manifest = write_file(MANIFEST_NAME, '[[derive]]\nsource = "missing.rs"\nkinds = ["EnumIsA"]\n')
    assert cli.main(["--manifest", str(manifest)]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_manifest_validation_error(write_file, capsys):
    manifest = write_file(MANIFEST_NAME, '[index]\ntypes = ["FunId"]\noverflow_policy = "wrap"\n')
    assert cli.main(["--manifest", str(manifest)]) == 2
    assert "Invalid overflow_policy" in capsys.readouterr().err
