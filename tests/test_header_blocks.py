from __future__ import annotations

import pytest

from implib_errors import SchemaViolation
from parsers import DumpMode, parse_dump
from parsers.header_blocks import iter_blocks, parse_header_blocks
from records.types import Arch, Classification, NameType


def test_block_becomes_record(header_block, headers_text):
    text = headers_text(
        [header_block("ADVAPI32.dll", "_AbortSystemShutdownA@4", name_type="undecorate", name="AbortSystemShutdownA", hint=3)]
    )
    result = parse_header_blocks(text, Arch.X86)

    assert len(result.records) == 1
    record = result.records[0]
    assert record.symbol_name == "_AbortSystemShutdownA@4"
    assert record.display_name == "AbortSystemShutdownA"
    assert record.origin_module == "ADVAPI32.dll"
    assert record.linkage is NameType.UNDECORATE
    assert record.classification is Classification.CODE
    assert record.hint == 3
    assert record.ordinal is None
    assert record.machine == 0x14C
    assert record.size_of_data == 0x1A
    assert record.timestamp == 0x55A5F2B6


def test_ordinal_block(header_block, headers_text):
    text = headers_text([header_block("WS2_32.dll", "_accept@12", name_type="ordinal", ordinal=1)])
    record = parse_header_blocks(text, Arch.X86).records[0]

    assert record.linkage is NameType.ORDINAL
    assert record.ordinal == 1
    assert record.hint is None


def test_no_prefix_name_type(header_block, headers_text):
    text = headers_text([header_block("USER32.dll", "wsprintfA", name_type="no prefix", name="wsprintfA")])
    record = parse_header_blocks(text, Arch.X64).records[0]

    assert record.linkage is NameType.NO_PREFIX


def test_data_const_and_mangled_entries_are_dropped(header_block, headers_text):
    text = headers_text(
        [
            header_block("MSVCRT.dll", "_iob", kind="data"),
            header_block("MSVCRT.dll", "_pi", kind="const"),
            header_block("MSVCRT.dll", "?what@exception@@UBEPBDXZ"),
            header_block("MSVCRT.dll", "_strlen", name_type="undecorate", name="strlen"),
        ]
    )
    result = parse_header_blocks(text, Arch.X86)

    assert [r.symbol_name for r in result.records] == ["_strlen"]
    for record in result.records:
        assert record.classification is Classification.CODE
        assert "@@" not in record.symbol_name


def test_linkable_filter_can_be_disabled(header_block, headers_text):
    text = headers_text([header_block("MSVCRT.dll", "_iob", kind="data")])

    assert len(parse_header_blocks(text, Arch.X86, linkable_only=False).records) == 1


def test_nonzero_version_is_fatal(header_block, headers_text):
    text = headers_text([header_block("KERNEL32.dll", "GetTickCount", version="1")])

    with pytest.raises(SchemaViolation, match="version"):
        parse_header_blocks(text, Arch.X64)


def test_missing_required_field_is_fatal():
    text = "  Version      : 0\n  DLL name     : KERNEL32.dll\n\n"

    with pytest.raises(SchemaViolation, match="Missing field"):
        parse_header_blocks(text, Arch.X64)


def test_unknown_leftover_field_is_fatal(header_block, headers_text):
    text = headers_text([header_block("KERNEL32.dll", "GetTickCount", extra={"Flags": "1"})])

    with pytest.raises(SchemaViolation, match="Unexpected fields"):
        parse_header_blocks(text, Arch.X64)


def test_ordinal_type_without_ordinal_is_fatal(header_block, headers_text):
    text = headers_text([header_block("WS2_32.dll", "accept", name_type="ordinal", hint=4)])

    with pytest.raises(SchemaViolation, match="Ordinal"):
        parse_header_blocks(text, Arch.X64)


def test_bad_hex_is_fatal(header_block, headers_text):
    text = headers_text([header_block("KERNEL32.dll", "GetTickCount", machine="zz (x64)")])

    with pytest.raises(SchemaViolation, match="hexadecimal"):
        parse_header_blocks(text, Arch.X64)


def test_unknown_type_is_fatal(header_block, headers_text):
    text = headers_text([header_block("KERNEL32.dll", "GetTickCount", kind="thunk")])

    with pytest.raises(SchemaViolation, match="import type"):
        parse_header_blocks(text, Arch.X64)


def test_repeated_field_is_fatal():
    text = "  Version      : 0\n  Version      : 0\n"

    with pytest.raises(SchemaViolation, match="repeated"):
        list(iter_blocks(text))


def test_blocks_split_on_non_field_lines():
    text = "  Version : 0\n  Type : code\nArchive member name at 8: x/\n  Version : 0\n"

    assert list(iter_blocks(text)) == [{"Version": "0", "Type": "code"}, {"Version": "0"}]


def test_text_without_blocks_is_not_found():
    result = parse_dump("Dump of file empty.lib\n\nFile Type: LIBRARY\n", Arch.X64, DumpMode.HEADERS)

    assert result.found is False
    assert result.records == []
