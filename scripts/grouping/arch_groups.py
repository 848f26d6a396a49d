"""Merge per-architecture export records into conditioned declaration groups."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from records.types import Arch, ArchSet, CallLinkage, ExportGroup, ExportRecord, arch_set


def combine_architectures(records: Iterable[ExportRecord]) -> dict[tuple[str, CallLinkage], ArchSet]:
    """Map each `(name, linkage)` pair to the architectures it was seen under."""
    seen: dict[tuple[str, CallLinkage], set[Arch]] = defaultdict(set)
    for record in records:
        seen[(record.symbol_name, record.linkage)].add(record.arch)
    return {key: arch_set(archs) for key, archs in seen.items()}


def group_exports(records: Iterable[ExportRecord]) -> list[ExportGroup]:
    """Invert the name map so names sharing a linkage and arch set share a group.

    Output order is `(linkage, archs)` with names sorted inside each group, so
    the same records in any order produce byte-identical stubs.
    """
    grouped: dict[tuple[CallLinkage, ArchSet], list[str]] = defaultdict(list)
    for (name, linkage), archs in combine_architectures(records).items():
        grouped[(linkage, archs)].append(name)
    return [
        ExportGroup(linkage=linkage, archs=archs, names=tuple(sorted(names)))
        for (linkage, archs), names in sorted(grouped.items(), key=lambda item: item[0])
    ]


def observed_architectures(records: Iterable[ExportRecord]) -> ArchSet:
    return arch_set(record.arch for record in records)
