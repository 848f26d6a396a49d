from __future__ import annotations

import json

import pytest

import implib_cli
import implib_stubs
from implib_errors import SchemaViolation


def _overrides(config) -> list[str]:
    return [
        f"sdk_lib_root={config.sdk_lib_root}",
        f"sdk_include_root={config.sdk_include_root}",
        f"work_dir={config.work_dir}",
        f"output_root={config.output_root}",
        "dumpbin=dumpbin",
    ]


def test_stubs_command(config, make_lib, exports_text, monkeypatch, capsys):
    make_lib("user32", "x64")
    monkeypatch.setattr(
        implib_stubs,
        "dumpbin",
        lambda cfg, flag, path: exports_text(["MessageBoxW"]) if flag == "/EXPORTS" else "",
    )

    status = implib_cli.main(["stubs", "user32", "architectures=x64", *_overrides(config)])

    assert status == 0
    assert (config.work_dir / "user32.rs").read_text().splitlines() == [
        'extern "system" {',
        "    // pub fn MessageBoxW();",
        "}",
    ]
    assert "Wrote 1 stub files" in capsys.readouterr().out


def test_fatal_error_exits_nonzero(config, make_lib, monkeypatch, capsys):
    make_lib("user32", "x64")

    def _violate(cfg, flag, path):
        raise SchemaViolation("Unexpected export table header")

    monkeypatch.setattr(implib_stubs, "dumpbin", _violate)

    status = implib_cli.main(["stubs", "user32", *_overrides(config)])

    assert status == 1
    assert "error: Unexpected export table header" in capsys.readouterr().err


def test_bad_architecture_is_usage_error(capsys):
    assert implib_cli.main(["stubs", "architectures=sparc"]) == 2
    assert "Unknown architecture" in capsys.readouterr().err


def test_defs_requires_a_name(config, capsys):
    assert implib_cli.main(["defs", *_overrides(config)]) == 2
    assert "at least one library name" in capsys.readouterr().err


def test_includes_command(config, tmp_path):
    config.sdk_include_root.mkdir(parents=True)
    (config.sdk_include_root / "a.h").write_text("#include <b.h>\n")
    out = tmp_path / "graph.json"

    status = implib_cli.main(["includes", "--out", str(out), *_overrides(config)])

    assert status == 0
    assert json.loads(out.read_text())["a.h"] == {"includes": ["b.h"], "included_by": []}


def test_includes_missing_root(config, capsys):
    assert implib_cli.main(["includes", *_overrides(config)]) == 2
    assert "Include root not found" in capsys.readouterr().err


def test_command_is_required():
    with pytest.raises(SystemExit):
        implib_cli.main([])


def test_misspelled_override_is_usage_error(config, make_lib, monkeypatch, capsys):
    make_lib("kernel32", "x64")
    calls = []
    monkeypatch.setattr(implib_stubs, "dumpbin", lambda cfg, flag, path: calls.append(flag) or "")

    status = implib_cli.main(["stubs", "kernel32", "sdk_lib_rot=D:/mysdk", *_overrides(config)])

    assert status == 2
    assert "Unknown option: sdk_lib_rot" in capsys.readouterr().err
    assert calls == []
    assert not config.work_dir.exists()


def test_inventory_missing_index(tmp_path, capsys):
    assert implib_cli.main(["inventory", str(tmp_path)]) == 2
    assert "index.json not found" in capsys.readouterr().err


def test_inventory_bad_index(tmp_path, capsys):
    (tmp_path / "index.json").write_text('{"tables": "nope"}')

    assert implib_cli.main(["inventory", str(tmp_path)]) == 2
    assert "not a fact table index" in capsys.readouterr().err


def test_inventory_without_exports_table(tmp_path, capsys):
    (tmp_path / "index.json").write_text('{"tables": []}')

    assert implib_cli.main(["inventory", str(tmp_path)]) == 2
    assert "exports" in capsys.readouterr().err
