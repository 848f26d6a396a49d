"""Parquet fact tables for parsed exports."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

import pyarrow as pa
import pyarrow.parquet as pq

from outputs.io import ensure_dir, write_json
from records.types import ExportRecord, FactTable

EXPORTS_TABLE = "exports"
EXPORTS_SCHEMA: list[tuple[str, str]] = [
    ("library", "string"),
    ("arch", "string"),
    ("symbol_name", "string"),
    ("display_name", "string"),
    ("origin_module", "string"),
    ("linkage", "string"),
    ("ordinal", "int64"),
    ("classification", "string"),
]

_ARROW_TYPES = {"string": pa.string(), "int64": pa.int64()}


def _linkage_label(record: ExportRecord) -> str:
    linkage = record.linkage
    if isinstance(linkage.value, str):
        return linkage.value
    return linkage.name.lower()


def export_rows(library: str, records: Iterable[ExportRecord]) -> list[dict[str, Any]]:
    return [
        {
            "library": library,
            "arch": record.arch.dir_name,
            "symbol_name": record.symbol_name,
            "display_name": record.display_name,
            "origin_module": record.origin_module,
            "linkage": _linkage_label(record),
            "ordinal": record.ordinal,
            "classification": record.classification.value,
        }
        for record in records
    ]


def build_exports_table(rows_by_library: dict[str, list[ExportRecord]]) -> FactTable:
    rows: list[dict[str, Any]] = []
    for library in sorted(rows_by_library):
        rows.extend(export_rows(library, rows_by_library[library]))
    rows.sort(key=lambda row: (row["library"], row["arch"], row["origin_module"], row["symbol_name"]))
    return FactTable(
        name=EXPORTS_TABLE,
        rows=rows,
        primary_key=["library", "arch", "origin_module", "symbol_name", "linkage"],
        schema=EXPORTS_SCHEMA,
        description="Exports parsed from SDK import library dumps.",
    )


def write_fact_tables(facts_dir: Path, tables: Iterable[FactTable]) -> dict[str, Any]:
    ensure_dir(facts_dir)

    registry_tables: list[dict[str, Any]] = []
    for table in tables:
        schema_fields = [
            pa.field(name, _ARROW_TYPES[type_name], nullable=True)
            for name, type_name in table.schema
        ]
        schema = pa.schema(schema_fields)
        arrow_table = pa.Table.from_pylist(table.rows, schema=schema)
        filename = f"{table.name}.parquet"
        pq.write_table(arrow_table, facts_dir / filename)
        registry_tables.append(
            {
                "name": table.name,
                "version": table.version,
                "primary_key": list(table.primary_key),
                "paths": [filename],
                "schema": [
                    {"name": name, "type": type_name}
                    for name, type_name in table.schema
                ],
                "row_count": arrow_table.num_rows,
                "description": table.description,
            }
        )

    registry_tables.sort(key=lambda entry: entry["name"])
    registry = {
        "schema": {"name": "implib_facts", "version": "v1"},
        "tables": registry_tables,
        "table_count": len(registry_tables),
    }
    write_json(facts_dir / "index.json", registry)
    return registry
