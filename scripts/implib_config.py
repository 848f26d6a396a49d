"""Defaults and normalized configuration for the import-library tools.

Defaults mirror the layout of a Windows 10 SDK install with Visual Studio 2015
build tools. Every value can be overridden with `key=value` arguments on the
command line; the pipelines only ever see a frozen `ToolchainConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from records.types import Arch

IMPLIB_TOOLS_VERSION = "0.3.0"

DEFAULT_DUMPBIN = r"C:\Program Files (x86)\Microsoft Visual Studio 14.0\VC\bin\amd64\dumpbin.exe"
DEFAULT_SDK_LIB_ROOT = r"C:\Program Files (x86)\Windows Kits\10\Lib\10.0.10240.0\um"
DEFAULT_SDK_INCLUDE_ROOT = r"C:\Program Files (x86)\Windows Kits\10\Include\10.0.10240.0"
DEFAULT_DLLTOOL = "dlltool"
DEFAULT_AR = "ar"
DEFAULT_WORK_DIR = "work"
DEFAULT_OUTPUT_ROOT = "lib"

DEFAULT_ARCHITECTURES: tuple[Arch, ...] = (Arch.X86, Arch.X64, Arch.ARM)

# Machine names accepted by `dlltool -m`.
DEFAULT_DLLTOOL_MACHINES: dict[Arch, str] = {
    Arch.X86: "i386",
    Arch.X64: "i386:x86-64",
    Arch.ARM: "arm",
}

# Substrings of linker-synthesized symbols in import libraries. Only these two
# have been observed; anything else external is treated as a real static.
LINKER_ARTIFACT_MARKERS: tuple[str, ...] = ("IMPORT_DESCRIPTOR", "NULL_THUNK_DATA")

PATH_OPTION_DEFAULTS: tuple[tuple[str, str], ...] = (
    ("dumpbin", DEFAULT_DUMPBIN),
    ("dlltool", DEFAULT_DLLTOOL),
    ("ar", DEFAULT_AR),
    ("sdk_lib_root", DEFAULT_SDK_LIB_ROOT),
    ("sdk_include_root", DEFAULT_SDK_INCLUDE_ROOT),
    ("work_dir", DEFAULT_WORK_DIR),
    ("output_root", DEFAULT_OUTPUT_ROOT),
)

OPTION_KEYS = tuple(key for key, _default in PATH_OPTION_DEFAULTS) + ("architectures",)


def parse_architectures(value: Any) -> tuple[Arch, ...]:
    if value is None:
        return DEFAULT_ARCHITECTURES
    if isinstance(value, str):
        tokens = [token.strip() for token in value.split(",")]
    else:
        tokens = [str(token).strip() for token in value]
    archs = {Arch.from_name(token) for token in tokens if token}
    if not archs:
        return DEFAULT_ARCHITECTURES
    return tuple(sorted(archs))


@dataclass(frozen=True)
class ToolchainConfig:
    """Tool locations, SDK roots and output roots for one run."""

    dumpbin: str
    dlltool: str
    ar: str
    sdk_lib_root: Path
    sdk_include_root: Path
    work_dir: Path
    output_root: Path
    architectures: tuple[Arch, ...] = DEFAULT_ARCHITECTURES
    dlltool_machines: Mapping[Arch, str] = field(
        default_factory=lambda: dict(DEFAULT_DLLTOOL_MACHINES), repr=False
    )
    artifact_markers: tuple[str, ...] = LINKER_ARTIFACT_MARKERS

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None) -> ToolchainConfig:
        options = options or {}
        values: dict[str, str] = {}
        for key, default in PATH_OPTION_DEFAULTS:
            raw = options.get(key)
            values[key] = str(raw) if raw not in (None, "") else default
        return cls(
            dumpbin=values["dumpbin"],
            dlltool=values["dlltool"],
            ar=values["ar"],
            sdk_lib_root=Path(values["sdk_lib_root"]),
            sdk_include_root=Path(values["sdk_include_root"]),
            work_dir=Path(values["work_dir"]),
            output_root=Path(values["output_root"]),
            architectures=parse_architectures(options.get("architectures")),
        )

    @classmethod
    def defaults(cls) -> ToolchainConfig:
        return cls.from_options({})

    def machine_for(self, arch: Arch) -> str:
        return self.dlltool_machines.get(arch, arch.dir_name)


def parse_overrides(args: list[str]) -> tuple[dict[str, str], list[str], list[str]]:
    """Split `key=value` overrides from positional arguments.

    Keys outside `OPTION_KEYS` are returned separately so the caller can
    refuse the run instead of falling back to the default SDK.
    """
    overrides: dict[str, str] = {}
    positional: list[str] = []
    unknown: list[str] = []
    for arg in args:
        if "=" not in arg:
            positional.append(arg)
            continue
        key, value = arg.split("=", 1)
        key = key.strip()
        if key in OPTION_KEYS:
            overrides[key] = value.strip()
        else:
            unknown.append(key)
    return overrides, positional, unknown
