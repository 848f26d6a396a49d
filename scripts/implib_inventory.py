"""Summarize an exports fact table with DuckDB."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import duckdb

SUMMARY_SQL = """
SELECT library, arch, linkage, count(*) AS exports
FROM exports
GROUP BY library, arch, linkage
ORDER BY library, arch, linkage
"""


def _sql_string(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _load_tables(facts_dir: Path) -> list[dict[str, Any]]:
    index_path = facts_dir / "index.json"
    if not index_path.is_file():
        raise FileNotFoundError(f"index.json not found under {facts_dir}")
    data = json.loads(index_path.read_text())
    if not isinstance(data, dict) or not isinstance(data.get("tables"), list):
        raise ValueError(f"{index_path} is not a fact table index")
    return data["tables"]


def connect_facts(facts_dir: Path) -> duckdb.DuckDBPyConnection:
    """In-memory connection with one view per registered table."""
    tables = _load_tables(facts_dir)
    con = duckdb.connect(database=":memory:")
    for entry in tables:
        source = _sql_string(str(facts_dir / entry["paths"][0]))
        con.execute(f"CREATE OR REPLACE VIEW {entry['name']} AS SELECT * FROM read_parquet({source})")
    return con


def markdown_table(headers: list[str], rows: list[list[str]]) -> str:
    divider = ["---"] * len(headers)
    lines = ["| " + " | ".join(headers) + " |", "| " + " | ".join(divider) + " |"]
    for row in rows:
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines)


def summarize_exports(facts_dir: Path) -> tuple[list[str], list[tuple[Any, ...]]]:
    con = connect_facts(facts_dir)
    try:
        result = con.execute(SUMMARY_SQL)
        columns = [desc[0] for desc in result.description]
        rows = result.fetchall()
    finally:
        con.close()
    return columns, rows


def render_inventory(facts_dir: Path) -> str:
    columns, rows = summarize_exports(facts_dir)
    return markdown_table(columns, [[str(cell) for cell in row] for row in rows]) + "\n"
