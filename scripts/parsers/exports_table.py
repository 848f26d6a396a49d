"""Parse `dumpbin /EXPORTS` output for an import library."""

from __future__ import annotations

from typing import Iterator

from implib_errors import SchemaViolation
from parsers.decorations import classify_export_line, looks_mangled
from records.types import Arch, Classification, ExportRecord, ParseGap, ParseResult

EXPORTS_MARKER = "     Exports"
EXPORTS_HEADER = ("", "       ordinal    name", "")


def _expect_header(lines: Iterator[str]) -> None:
    for expected in EXPORTS_HEADER:
        line = next(lines, None)
        if line != expected:
            raise SchemaViolation(
                f"Unexpected export table header, wanted {expected!r}",
                line=line,
            )


def parse_exports_text(text: str, arch: Arch, module: str = "") -> ParseResult:
    """Turn the export table of one dump into records for `arch`.

    A dump without the `Exports` marker means the library exports nothing;
    that is reported through `found=False`, not raised.
    """
    lines = iter(text.splitlines())
    for line in lines:
        if line == EXPORTS_MARKER:
            break
    else:
        return ParseResult(found=False)

    _expect_header(lines)
    result = ParseResult()
    for line in lines:
        if line == "":
            break
        classified = classify_export_line(line, arch)
        if classified is None:
            reason = "mangled" if looks_mangled(line) else "unrecognized"
            result.gaps.append(ParseGap(arch=arch, line=line, reason=reason))
            continue
        name, linkage = classified
        result.records.append(
            ExportRecord(
                symbol_name=name,
                origin_module=module,
                linkage=linkage,
                arch=arch,
                classification=Classification.CODE,
            )
        )
    return result
