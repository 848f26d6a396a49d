from __future__ import annotations

from pathlib import Path

import pytest

from implib_config import ToolchainConfig

DUMPBIN_BANNER = [
    "Microsoft (R) COFF/PE Dumper Version 14.00.23026.0",
    "Copyright (C) Microsoft Corporation.  All rights reserved.",
    "",
    "",
    "Dump of file sample.lib",
    "",
    "File Type: LIBRARY",
    "",
]


def _exports_text(names: list[str], *, with_marker: bool = True) -> str:
    lines = list(DUMPBIN_BANNER)
    if with_marker:
        lines += ["     Exports", "", "       ordinal    name", ""]
        lines += [" " * 18 + name for name in names]
        lines += ["", "  Summary", "", "          C3 .debug$S"]
    else:
        lines += ["  Summary", "", "          C3 .debug$S"]
    return "\n".join(lines) + "\n"


def _header_block(
    dll: str,
    symbol: str,
    *,
    kind: str = "code",
    name_type: str = "name",
    name: str | None = None,
    hint: int | None = 0,
    ordinal: int | None = None,
    version: str = "0",
    machine: str = "14C (x86)",
    extra: dict[str, str] | None = None,
) -> str:
    fields = [
        ("Version", version),
        ("Machine", machine),
        ("TimeDateStamp", "55A5F2B6 Wed Jul 15 02:45:42 2015"),
        ("SizeOfData", "0000001A"),
        ("DLL name", dll),
        ("Symbol name", symbol),
        ("Type", kind),
        ("Name type", name_type),
    ]
    if ordinal is not None:
        fields.append(("Ordinal", str(ordinal)))
    elif hint is not None:
        fields.append(("Hint", str(hint)))
    if name is not None:
        fields.append(("Name", name))
    for key, value in (extra or {}).items():
        fields.append((key, value))
    lines = [f"Archive member name at 2C4: {dll}/"]
    lines += [f"  {key:<13}: {value}" if len(key) < 13 else f"  {key}: {value}" for key, value in fields]
    return "\n".join(lines) + "\n"


def _headers_text(blocks: list[str]) -> str:
    return "\n".join(DUMPBIN_BANNER) + "\n" + "\n".join(blocks) + "\n  Summary\n"


@pytest.fixture
def exports_text():
    return _exports_text


@pytest.fixture
def header_block():
    return _header_block


@pytest.fixture
def headers_text():
    return _headers_text


@pytest.fixture
def config(tmp_path: Path) -> ToolchainConfig:
    return ToolchainConfig.from_options(
        {
            "dumpbin": "dumpbin",
            "sdk_lib_root": str(tmp_path / "sdk"),
            "sdk_include_root": str(tmp_path / "include"),
            "work_dir": str(tmp_path / "work"),
            "output_root": str(tmp_path / "out"),
        }
    )


@pytest.fixture
def make_lib(config: ToolchainConfig):
    def _make(name: str, arch_dir: str) -> Path:
        path = config.sdk_lib_root / arch_dir / f"{name}.lib"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"!<arch>\n")
        return path

    return _make
