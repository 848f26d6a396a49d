"""Module-definition (`.def`) and MRI script rendering."""

from __future__ import annotations

from typing import Iterable

from records.types import Arch, ExportRecord, NameType


def sanitize_symbol(name: str, arch: Arch) -> str:
    """Drop the x86 C prefix underscore; other targets have none.

    Strips at most one character, so an unprefixed name is left untouched.
    """
    if arch is Arch.X86 and name.startswith("_"):
        return name[1:]
    return name


def export_line(record: ExportRecord) -> str:
    if record.linkage is NameType.NAME:
        return record.symbol_name
    name = sanitize_symbol(record.symbol_name, record.arch)
    if record.linkage is NameType.ORDINAL:
        return f"{name} @{record.ordinal}"
    if record.linkage in (NameType.UNDECORATE, NameType.NO_PREFIX):
        return name
    raise ValueError(f"Export {record.symbol_name!r} has no import name type")


def render_module_definition(library: str, records: Iterable[ExportRecord]) -> str:
    lines = [f"LIBRARY {library}", "EXPORTS"]
    lines.extend(f"    {export_line(record)}" for record in records)
    return "\n".join(lines) + "\n"


def render_mri_script(archive: str, members: Iterable[str]) -> str:
    lines = [f"CREATE {archive}"]
    lines.extend(f"ADDLIB {member}" for member in members)
    lines.append("SAVE")
    lines.append("END")
    return "\n".join(lines) + "\n"
