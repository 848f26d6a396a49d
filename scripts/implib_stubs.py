"""Export-table pipeline: SDK import libraries to Rust declaration stubs.

For each architecture the library's export table and symbol table are
dumped and parsed; the records are merged across architectures and written
to `<work_dir>/<name>.rs` as commented-out `extern` blocks guarded by
`target_arch` cfgs.
"""

from __future__ import annotations

import os
from pathlib import Path

from grouping.arch_groups import group_exports, observed_architectures
from implib_config import ToolchainConfig
from outputs.io import write_text
from outputs.stubs import render_stubs
from parsers import DumpMode, parse_dump
from records.types import Arch, ExportRecord, ParseResult
from toolchain.layout import LibraryLayout
from toolchain.tools import dumpbin


def report_gaps(result: ParseResult) -> None:
    for gap in result.gaps:
        print(gap.describe())


def collect_library(config: ToolchainConfig, name: str, arch: Arch) -> list[ExportRecord]:
    """Export-table plus symbol-table records for one architecture.

    A library missing for `arch` just contributes nothing.
    """
    lib_path = LibraryLayout.for_library(config, name).import_library(arch)
    if not lib_path.is_file():
        print(f"Missing {arch.dir_name} library: {lib_path}")
        return []

    exports = parse_dump(dumpbin(config, DumpMode.EXPORTS.flag, lib_path), arch, DumpMode.EXPORTS, name)
    if not exports.found:
        print("No exports found!")
    report_gaps(exports)

    symbols = parse_dump(
        dumpbin(config, DumpMode.SYMBOLS.flag, lib_path),
        arch,
        DumpMode.SYMBOLS,
        name,
        markers=config.artifact_markers,
    )
    return exports.records + symbols.records


def export_library(
    config: ToolchainConfig,
    name: str,
    collected: dict[str, list[ExportRecord]] | None = None,
) -> Path | None:
    """Write the stub file for one library; `collected` receives its records."""
    print(f"Dumping {name!r}")
    records: list[ExportRecord] = []
    for arch in config.architectures:
        records.extend(collect_library(config, name, arch))
    if collected is not None:
        collected[name] = records
    if not records:
        print("Seriously nothing?")
        return None

    groups = group_exports(records)
    content = render_stubs(groups, observed_architectures(records), config.architectures)
    out_path = LibraryLayout.for_library(config, name).stub_path()
    write_text(out_path, content)
    return out_path


def discover_library_names(config: ToolchainConfig) -> list[str]:
    """Lowercased `.lib` stems present under any configured architecture."""
    names: set[str] = set()
    for arch in config.architectures:
        arch_dir = config.sdk_lib_root / arch.dir_name
        if not arch_dir.is_dir():
            print(f"Missing {arch.dir_name} library directory: {arch_dir}")
            continue
        for entry in os.scandir(arch_dir):
            if not entry.is_file():
                continue
            lowered = Path(entry.name.lower())
            if lowered.suffix == ".lib":
                names.add(lowered.stem)
    return sorted(names)


def export_all(
    config: ToolchainConfig,
    names: list[str] | None = None,
    collected: dict[str, list[ExportRecord]] | None = None,
) -> list[Path]:
    written: list[Path] = []
    for name in names or discover_library_names(config):
        out_path = export_library(config, name, collected)
        if out_path is not None:
            written.append(out_path)
    return written
