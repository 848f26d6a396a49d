#!/usr/bin/env python3
"""Regenerate binding stubs and GNU import libraries from Windows SDK import libraries.

Bare arguments name libraries; `key=value` arguments override toolchain
settings, e.g. `sdk_lib_root=D:\\sdk\\um architectures=x86,x64`.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from implib_config import IMPLIB_TOOLS_VERSION, OPTION_KEYS, ToolchainConfig, parse_overrides
from implib_errors import ImplibError
from outputs.io import write_json
from records.types import ExportRecord


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="implib",
        description=__doc__,
        epilog="Overrides: " + ", ".join(OPTION_KEYS),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=IMPLIB_TOOLS_VERSION)
    commands = parser.add_subparsers(dest="command", required=True)

    stubs = commands.add_parser("stubs", help="Write commented-out extern stubs to work_dir")
    stubs.add_argument("items", nargs="*", help="Library names (default: every SDK library) and key=value overrides")
    stubs.add_argument("--facts", type=Path, default=None, help="Also write parsed exports as a parquet fact table here")

    defs = commands.add_parser("defs", help="Write .def files and build GNU import libraries")
    defs.add_argument("items", nargs="+", help="Library names and key=value overrides")
    defs.add_argument("--facts", type=Path, default=None, help="Also write parsed exports as a parquet fact table here")

    includes = commands.add_parser("includes", help="Dump the SDK header include graph as JSON")
    includes.add_argument("items", nargs="*", help="key=value overrides")
    includes.add_argument("--out", type=Path, default=Path("includes.json"), help="Output file (default: %(default)s)")

    inventory = commands.add_parser("inventory", help="Summarize a fact table written with --facts")
    inventory.add_argument("facts", type=Path, help="Fact table directory")

    return parser.parse_args(argv)


def _write_facts(facts_dir: Path, collected: dict[str, list[ExportRecord]]) -> None:
    from outputs.facts import build_exports_table, write_fact_tables

    registry = write_fact_tables(facts_dir, [build_exports_table(collected)])
    for table in registry["tables"]:
        print(f"Wrote {table['row_count']} rows to {facts_dir / table['paths'][0]}")


def _run_stubs(config: ToolchainConfig, names: list[str], facts_dir: Path | None) -> int:
    from implib_stubs import export_all

    collected: dict[str, list[ExportRecord]] | None = {} if facts_dir else None
    written = export_all(config, names or None, collected)
    print(f"Wrote {len(written)} stub files to {config.work_dir}")
    if facts_dir and collected is not None:
        _write_facts(facts_dir, collected)
    return 0


def _run_defs(config: ToolchainConfig, names: list[str], facts_dir: Path | None) -> int:
    from implib_defs import build_all

    if not names:
        print("defs needs at least one library name.", file=sys.stderr)
        return 2
    collected: dict[str, list[ExportRecord]] | None = {} if facts_dir else None
    written = build_all(config, names, collected)
    print(f"Wrote {len(written)} files under {config.output_root}")
    if facts_dir and collected is not None:
        _write_facts(facts_dir, collected)
    return 0


def _run_includes(config: ToolchainConfig, out_path: Path) -> int:
    from implib_includes import include_summary, scan_includes

    root = config.sdk_include_root
    if not root.is_dir():
        print(f"Include root not found: {root}", file=sys.stderr)
        return 2
    graph = scan_includes(root)
    write_json(out_path, graph)
    summary = include_summary(graph)
    print(f"Wrote {summary['headers']} headers, {summary['edges']} include edges to {out_path}")
    return 0


def _run_inventory(facts_dir: Path) -> int:
    import duckdb

    from implib_inventory import render_inventory

    try:
        print(render_inventory(facts_dir), end="")
    except (OSError, ValueError, duckdb.Error) as exc:
        print(str(exc), file=sys.stderr)
        return 2
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if args.command == "inventory":
        return _run_inventory(args.facts)

    overrides, names, unknown = parse_overrides(args.items)
    if unknown:
        print(f"Unknown option: {', '.join(unknown)}", file=sys.stderr)
        return 2
    try:
        config = ToolchainConfig.from_options(overrides)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    try:
        if args.command == "stubs":
            return _run_stubs(config, names, args.facts)
        if args.command == "defs":
            return _run_defs(config, names, args.facts)
        if names:
            print(f"Ignoring unexpected arguments: {' '.join(names)}", file=sys.stderr)
        return _run_includes(config, args.out)
    except ImplibError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def run() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
