"""Parsers for the text dumps of import libraries.

The export-table, symbol-table and header dumps are read by separate
modules; `parse_dump` picks one by `DumpMode` so callers can stay agnostic
of which `dumpbin` flag produced the text.
"""

from __future__ import annotations

from enum import Enum

from implib_config import LINKER_ARTIFACT_MARKERS
from records.types import Arch, ParseResult

from .exports_table import parse_exports_text
from .header_blocks import parse_header_blocks
from .symbol_table import parse_symbols_text


class DumpMode(Enum):
    EXPORTS = "/EXPORTS"
    SYMBOLS = "/SYMBOLS"
    HEADERS = "/HEADERS"

    @property
    def flag(self) -> str:
        return self.value


def parse_dump(
    text: str,
    arch: Arch,
    mode: DumpMode,
    module: str = "",
    *,
    markers: tuple[str, ...] = LINKER_ARTIFACT_MARKERS,
) -> ParseResult:
    if mode is DumpMode.EXPORTS:
        return parse_exports_text(text, arch, module)
    if mode is DumpMode.SYMBOLS:
        return parse_symbols_text(text, arch, module, markers=markers)
    return parse_header_blocks(text, arch)
