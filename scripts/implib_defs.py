"""Module-definition pipeline: SDK import libraries to GNU import libraries.

The library's member headers are dumped, code exports are grouped by the DLL
they come from, and one `.def` file per DLL is handed to `dlltool`. When a
library fronts several DLLs the per-DLL archives are merged with an `ar`
MRI script and then removed.
"""

from __future__ import annotations

from pathlib import Path

from grouping.dll_groups import partition_by_module
from implib_config import ToolchainConfig
from outputs.io import ensure_dir, remove_files, write_text
from outputs.moduledef import render_module_definition, render_mri_script
from parsers import DumpMode, parse_dump
from records.types import Arch, ExportRecord
from toolchain.layout import LibraryLayout
from toolchain.tools import ar_merge, dlltool, dumpbin


def collect_headers(config: ToolchainConfig, name: str, arch: Arch) -> list[ExportRecord] | None:
    """Linkable records for one architecture, or None if the library is absent."""
    lib_path = LibraryLayout.for_library(config, name).import_library(arch)
    if not lib_path.is_file():
        print(f"Missing {arch.dir_name} library: {lib_path}")
        return None
    result = parse_dump(dumpbin(config, DumpMode.HEADERS.flag, lib_path), arch, DumpMode.HEADERS)
    return result.records


def _build_single(
    config: ToolchainConfig,
    layout: LibraryLayout,
    arch: Arch,
    module: str,
    records: list[ExportRecord],
) -> list[Path]:
    def_path = layout.definition_path(arch)
    archive_path = layout.archive_path(arch)
    write_text(def_path, render_module_definition(module, records))
    dlltool(config, arch, def_path, archive_path)
    return [def_path, archive_path]


def _build_merged(
    config: ToolchainConfig,
    layout: LibraryLayout,
    arch: Arch,
    partitions: list[tuple[str, list[ExportRecord]]],
) -> list[Path]:
    written: list[Path] = []
    members: list[str] = []
    intermediates: list[Path] = []
    arch_dir = layout.arch_dir(arch)
    script_path = arch_dir / f"{layout.name}.mri"
    merged = False
    try:
        for module, records in partitions:
            def_path = layout.definition_path(arch, module)
            archive_path = layout.archive_path(arch, module)
            intermediates.append(def_path)
            write_text(def_path, render_module_definition(module, records))
            intermediates.append(archive_path)
            dlltool(config, arch, def_path, archive_path)
            written.append(def_path)
            members.append(layout.archive_name(module))

        script = render_mri_script(layout.archive_name(), members)
        intermediates.append(script_path)
        write_text(script_path, script)
        ar_merge(config, script, cwd=arch_dir)
        merged = True
    finally:
        # Per-DLL archives never outlive the run. On failure nothing is left
        # behind, including a merged archive from an earlier run.
        if merged:
            remove_files([path for path in intermediates if path.suffix == ".a"])
        else:
            remove_files(intermediates + [layout.archive_path(arch)])
    written.extend([script_path, layout.archive_path(arch)])
    return written


def build_import_library(
    config: ToolchainConfig,
    name: str,
    arch: Arch,
    collected: dict[str, list[ExportRecord]] | None = None,
) -> list[Path]:
    records = collect_headers(config, name, arch)
    if records is None:
        return []
    if collected is not None:
        collected.setdefault(name, []).extend(records)
    if not records:
        print(f"No exports found! ({name}, {arch.dir_name})")
        return []

    layout = LibraryLayout.for_library(config, name)
    ensure_dir(layout.arch_dir(arch))
    partitions = partition_by_module(records)
    if len(partitions) == 1:
        module, module_records = partitions[0]
        return _build_single(config, layout, arch, module, module_records)
    print(f"Merging {len(partitions)} DLLs into {layout.archive_name()} ({arch.dir_name})")
    return _build_merged(config, layout, arch, partitions)


def build_all(
    config: ToolchainConfig,
    names: list[str],
    collected: dict[str, list[ExportRecord]] | None = None,
) -> list[Path]:
    written: list[Path] = []
    for name in names:
        print(f"Dumping {name!r}")
        for arch in config.architectures:
            written.extend(build_import_library(config, name, arch, collected))
    return written
