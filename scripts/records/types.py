"""Typed records shared by the parsers, grouping passes and emitters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Iterable, Union


class Arch(IntEnum):
    """Target architectures, ordered the way generated output lists them."""

    X86 = 0
    X64 = 1
    ARM = 2

    @property
    def dir_name(self) -> str:
        return _ARCH_DIR_NAMES[self]

    @property
    def cfg_name(self) -> str:
        return _ARCH_CFG_NAMES[self]

    @classmethod
    def from_name(cls, value: str) -> Arch:
        lowered = (value or "").strip().lower()
        for arch in cls:
            if lowered in (arch.dir_name, arch.cfg_name, arch.name.lower()):
                return arch
        raise ValueError(f"Unknown architecture: {value}")


_ARCH_DIR_NAMES = {Arch.X86: "x86", Arch.X64: "x64", Arch.ARM: "arm"}
_ARCH_CFG_NAMES = {Arch.X86: "x86", Arch.X64: "x86_64", Arch.ARM: "arm"}


class CallLinkage(IntEnum):
    """Calling convention inferred from the decoration of an exported name."""

    CDECL = 0
    FASTCALL = 1
    STDCALL = 2
    STATIC = 3


class NameType(Enum):
    """Import name type as reported by the header dump."""

    UNDECORATE = "undecorate"
    NAME = "name"
    ORDINAL = "ordinal"
    NO_PREFIX = "no prefix"


class Classification(Enum):
    CODE = "code"
    DATA = "data"
    CONST = "const"


Linkage = Union[CallLinkage, NameType]

# Sorted tuple of architectures; tuples compare element-wise, which gives the
# grouping passes a total order over sets.
ArchSet = tuple[Arch, ...]


def arch_set(archs: Iterable[Arch]) -> ArchSet:
    return tuple(sorted(set(archs)))


CPP_MANGLING_MARKER = "@@"


@dataclass(frozen=True)
class ExportRecord:
    """One export observed in a tool dump for a single architecture."""

    symbol_name: str
    origin_module: str
    linkage: Linkage
    arch: Arch
    classification: Classification = Classification.CODE
    display_name: str | None = None
    ordinal: int | None = None
    hint: int | None = None
    machine: int | None = None
    size_of_data: int | None = None
    timestamp: int | None = None

    def __post_init__(self) -> None:
        is_ordinal = self.linkage is NameType.ORDINAL
        if is_ordinal and self.ordinal is None:
            raise ValueError(f"Ordinal export {self.symbol_name!r} has no ordinal")
        if not is_ordinal and self.ordinal is not None:
            raise ValueError(f"Export {self.symbol_name!r} has an ordinal but is not by ordinal")

    @property
    def is_mangled(self) -> bool:
        return CPP_MANGLING_MARKER in self.symbol_name

    @property
    def is_linkable(self) -> bool:
        return self.classification is Classification.CODE and not self.is_mangled


@dataclass(frozen=True)
class ParseGap:
    """A dump line that was skipped instead of parsed."""

    arch: Arch
    line: str
    reason: str = "unrecognized"

    def describe(self) -> str:
        label = "Mangled" if self.reason == "mangled" else "Unknown"
        return f"{label} {self.arch.name}: {self.line!r}"


@dataclass
class ParseResult:
    """Records parsed from one dump plus the lines that were skipped."""

    records: list[ExportRecord] = field(default_factory=list)
    gaps: list[ParseGap] = field(default_factory=list)
    found: bool = True


@dataclass(frozen=True)
class ExportGroup:
    """Names sharing one linkage and exactly one architecture set."""

    linkage: CallLinkage
    archs: ArchSet
    names: tuple[str, ...]


@dataclass
class FactTable:
    """Parquet fact table definition."""

    name: str
    rows: list[dict[str, Any]]
    primary_key: list[str]
    schema: list[tuple[str, str]]
    version: str = "v1"
    description: str | None = None
