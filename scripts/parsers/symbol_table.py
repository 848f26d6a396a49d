"""Parse `dumpbin /SYMBOLS` output into static (data) exports."""

from __future__ import annotations

import re
from typing import Iterable

from implib_config import LINKER_ARTIFACT_MARKERS
from records.types import Arch, CallLinkage, Classification, ExportRecord, ParseResult

# x86 symbols carry the C prefix underscore; strip exactly one.
X86_EXTERNAL = re.compile(r"^.* External +\| _([a-zA-Z0-9_]+)$")
SYSTEM_EXTERNAL = re.compile(r"^.* External +\| ([a-zA-Z0-9_]+)$")


def is_linker_artifact(name: str, markers: Iterable[str] = LINKER_ARTIFACT_MARKERS) -> bool:
    return any(marker in name for marker in markers)


def parse_symbols_text(
    text: str,
    arch: Arch,
    module: str = "",
    *,
    markers: Iterable[str] = LINKER_ARTIFACT_MARKERS,
) -> ParseResult:
    pattern = X86_EXTERNAL if arch is Arch.X86 else SYSTEM_EXTERNAL
    markers = tuple(markers)
    result = ParseResult()
    for line in text.splitlines():
        found = pattern.match(line)
        if found is None:
            continue
        name = found.group(1)
        if is_linker_artifact(name, markers):
            continue
        result.records.append(
            ExportRecord(
                symbol_name=name,
                origin_module=module,
                linkage=CallLinkage.STATIC,
                arch=arch,
                classification=Classification.CODE,
            )
        )
    return result
