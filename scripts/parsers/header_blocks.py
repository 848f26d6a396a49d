"""Parse `dumpbin /HEADERS` output for an import library.

Every short-import member of the library is printed as a block of
`  Field name : value` lines:

      Version      : 0
      Machine      : 14C (x86)
      TimeDateStamp: 55A5F2B6 Wed Jul 15 02:45:42 2015
      SizeOfData   : 0000001A
      DLL name     : ADVAPI32.dll
      Symbol name  : _AbortSystemShutdownA@4
      Type         : code
      Name type    : undecorate
      Hint         : 0
      Name         : AbortSystemShutdownA

Any line that is not a field closes the pending block. The field set is
checked strictly; a field this parser does not know about means the tool
changed and the run must stop.
"""

from __future__ import annotations

import re

from implib_errors import SchemaViolation
from records.types import Arch, Classification, ExportRecord, NameType, ParseResult

FIELD_LINE = re.compile(r"^  ([A-Za-z][A-Za-z ]*?) *: ?(.*)$")

REQUIRED_FIELDS = (
    "Version",
    "Machine",
    "TimeDateStamp",
    "SizeOfData",
    "DLL name",
    "Symbol name",
    "Type",
    "Name type",
)

_CLASSIFICATIONS = {item.value: item for item in Classification}
_NAME_TYPES = {item.value: item for item in NameType}


def _take(block: dict[str, str], key: str, snapshot: dict[str, str]) -> str:
    try:
        return block.pop(key)
    except KeyError:
        raise SchemaViolation(f"Missing field {key!r}", block=snapshot) from None


def _hex(value: str, key: str, snapshot: dict[str, str]) -> int:
    token = value.split()[0] if value.split() else ""
    try:
        return int(token, 16)
    except ValueError:
        raise SchemaViolation(f"Field {key!r} is not hexadecimal: {value!r}", block=snapshot) from None


def _dec(value: str, key: str, snapshot: dict[str, str]) -> int:
    try:
        return int(value.strip(), 10)
    except ValueError:
        raise SchemaViolation(f"Field {key!r} is not a decimal number: {value!r}", block=snapshot) from None


def build_record(block: dict[str, str], arch: Arch) -> ExportRecord:
    """Validate one block and turn it into a record.

    Consumes `block`; whatever is left after extraction is an error.
    """
    snapshot = dict(block)
    fields = {key: _take(block, key, snapshot) for key in REQUIRED_FIELDS}

    if fields["Version"].strip() != "0":
        raise SchemaViolation(f"Unsupported import header version {fields['Version']!r}", block=snapshot)

    classification = _CLASSIFICATIONS.get(fields["Type"].strip())
    if classification is None:
        raise SchemaViolation(f"Unknown import type {fields['Type']!r}", block=snapshot)
    name_type = _NAME_TYPES.get(fields["Name type"].strip())
    if name_type is None:
        raise SchemaViolation(f"Unknown name type {fields['Name type']!r}", block=snapshot)

    ordinal = None
    hint = None
    if name_type is NameType.ORDINAL:
        ordinal = _dec(_take(block, "Ordinal", snapshot), "Ordinal", snapshot)
    else:
        hint = _dec(_take(block, "Hint", snapshot), "Hint", snapshot)
    display_name = block.pop("Name", None)

    if block:
        raise SchemaViolation(f"Unexpected fields {sorted(block)}", block=snapshot)

    return ExportRecord(
        symbol_name=fields["Symbol name"],
        origin_module=fields["DLL name"],
        linkage=name_type,
        arch=arch,
        classification=classification,
        display_name=display_name or None,
        ordinal=ordinal,
        hint=hint,
        machine=_hex(fields["Machine"], "Machine", snapshot),
        size_of_data=_hex(fields["SizeOfData"], "SizeOfData", snapshot),
        timestamp=_hex(fields["TimeDateStamp"], "TimeDateStamp", snapshot),
    )


def iter_blocks(text: str):
    block: dict[str, str] = {}
    for line in text.splitlines():
        found = FIELD_LINE.match(line)
        if found is None:
            if block:
                yield block
                block = {}
            continue
        key, value = found.group(1), found.group(2)
        if key in block:
            raise SchemaViolation(f"Field {key!r} repeated in one block", line=line, block=block)
        block[key] = value.rstrip()
    if block:
        yield block


def parse_header_blocks(text: str, arch: Arch, *, linkable_only: bool = True) -> ParseResult:
    result = ParseResult()
    seen = False
    for block in iter_blocks(text):
        seen = True
        record = build_record(block, arch)
        if linkable_only and not record.is_linkable:
            continue
        result.records.append(record)
    result.found = seen
    return result
