"""Decoration rules for names listed in an export table.

Each architecture has an ordered list of rules; the first rule whose pattern
matches a line decides the linkage. Adding a convention means adding a row.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

from records.types import Arch, CallLinkage

# dumpbin right-aligns the (empty) ordinal column in the first 18 characters.
EXPORT_LINE_PREFIX = r"^[ 0-9]{18}"
SYMBOL_NAME = r"([a-zA-Z0-9_]+)"


@dataclass(frozen=True)
class DecorationRule:
    name: str
    pattern: re.Pattern[str]
    linkage: CallLinkage

    def match(self, line: str) -> str | None:
        found = self.pattern.match(line)
        if found is None:
            return None
        return found.group(1)


def _rule(name: str, body: str, linkage: CallLinkage) -> DecorationRule:
    return DecorationRule(name, re.compile(EXPORT_LINE_PREFIX + body + "$"), linkage)


X86_RULES: tuple[DecorationRule, ...] = (
    _rule("stdcall", "_" + SYMBOL_NAME + "@[0-9]+", CallLinkage.STDCALL),
    _rule("fastcall", "@" + SYMBOL_NAME + "@[0-9]+", CallLinkage.FASTCALL),
    _rule("cdecl", "_" + SYMBOL_NAME, CallLinkage.CDECL),
)

# 64-bit and ARM targets have a single calling convention and no decoration.
SYSTEM_RULES: tuple[DecorationRule, ...] = (
    _rule("system", SYMBOL_NAME, CallLinkage.STDCALL),
)

DECORATION_RULES: Mapping[Arch, tuple[DecorationRule, ...]] = {
    Arch.X86: X86_RULES,
    Arch.X64: SYSTEM_RULES,
    Arch.ARM: SYSTEM_RULES,
}


def classify_export_line(line: str, arch: Arch) -> tuple[str, CallLinkage] | None:
    for rule in DECORATION_RULES[arch]:
        name = rule.match(line)
        if name is not None:
            return name, rule.linkage
    return None


def looks_mangled(line: str) -> bool:
    text = line.strip()
    return text.startswith("?") or "@@" in text
