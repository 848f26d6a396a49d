"""Include graph of the SDK headers.

Header names are compared lowercased, the way the Windows filesystem and
the SDK's own `#include` lines treat them.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

ANGLE_INCLUDE = re.compile(r"^#include\s+<(.*)>")
QUOTE_INCLUDE = re.compile(r'^#include\s+"(.*)"')


def include_target(line: str) -> str | None:
    found = ANGLE_INCLUDE.match(line) or QUOTE_INCLUDE.match(line)
    if found is None:
        return None
    return found.group(1)


def iter_headers(root: Path):
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in sorted(filenames):
            if Path(filename).suffix.lower() == ".h":
                yield Path(dirpath) / filename


def scan_includes(root: Path) -> dict[str, dict[str, list[str]]]:
    graph: dict[str, dict[str, list[str]]] = {}

    def _node(name: str) -> dict[str, list[str]]:
        return graph.setdefault(name, {"includes": [], "included_by": []})

    for path in iter_headers(root):
        name = path.name.lower()
        _node(name)
        text = path.read_text(encoding="utf-8", errors="replace")
        for line in text.splitlines():
            target = include_target(line)
            if target is None:
                continue
            target = target.lower()
            _node(name)["includes"].append(target)
            _node(target)["included_by"].append(name)

    for entry in graph.values():
        entry["includes"] = sorted(set(entry["includes"]))
        entry["included_by"] = sorted(set(entry["included_by"]))
    return dict(sorted(graph.items()))


def include_summary(graph: dict[str, Any]) -> dict[str, int]:
    edges = sum(len(entry["includes"]) for entry in graph.values())
    roots = sum(1 for entry in graph.values() if not entry["included_by"])
    return {"headers": len(graph), "edges": edges, "roots": roots}
