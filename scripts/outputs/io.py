"""Filesystem helpers for generated artifacts.

Generated stubs and definition files are committed, so they are always
written as UTF-8 with `\\n` line endings regardless of host platform, and
JSON uses a stable key order.
"""

from __future__ import annotations

import json
import os
from typing import Any

PathLike = str | os.PathLike[str]


def ensure_dir(path: PathLike) -> None:
    os.makedirs(path, exist_ok=True)


def ensure_parent(path: PathLike) -> None:
    parent = os.path.dirname(os.fspath(path))
    if parent:
        ensure_dir(parent)


def write_json(path: PathLike, obj: Any) -> None:
    ensure_parent(path)
    with open(path, "w", encoding="utf-8", newline="\n") as handle:
        handle.write(json.dumps(obj, indent=2, sort_keys=True, ensure_ascii=True))
        handle.write("\n")


def write_text(path: PathLike, content: str) -> None:
    ensure_parent(path)
    with open(path, "w", encoding="utf-8", newline="\n") as handle:
        handle.write(content)


def remove_files(paths: list[PathLike]) -> None:
    for path in paths:
        try:
            os.remove(path)
        except FileNotFoundError:
            continue
