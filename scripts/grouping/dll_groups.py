"""Partition header-dump records by the DLL that exports them."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from records.types import ExportRecord


def _module_key(module: str) -> tuple[str, str]:
    return (module.casefold(), module)


def _record_key(record: ExportRecord) -> tuple[str, str, int]:
    return (record.display_name or record.symbol_name, record.symbol_name, record.ordinal or 0)


def partition_by_module(records: Iterable[ExportRecord]) -> list[tuple[str, list[ExportRecord]]]:
    """Group records by `origin_module`, both levels in a stable order.

    Module names keep their case; ordering is case-insensitive with the exact
    name as a tie-break.
    """
    partitions: dict[str, list[ExportRecord]] = defaultdict(list)
    for record in records:
        partitions[record.origin_module].append(record)
    return [
        (module, sorted(dict.fromkeys(partitions[module]), key=_record_key))
        for module in sorted(partitions, key=_module_key)
    ]
