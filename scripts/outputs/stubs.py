"""Render commented-out Rust declaration stubs for grouped exports."""

from __future__ import annotations

from typing import Iterable

from records.types import Arch, ArchSet, CallLinkage, ExportGroup

EXTERN_OPENERS = {
    CallLinkage.CDECL: 'extern "cdecl" {',
    CallLinkage.FASTCALL: 'extern "fastcall" {',
    CallLinkage.STDCALL: 'extern "system" {',
    CallLinkage.STATIC: "extern {",
}


def cfg_predicate(archs: ArchSet) -> str:
    if not archs:
        raise ValueError("cfg predicate needs at least one architecture")
    terms = [f'target_arch = "{arch.cfg_name}"' for arch in archs]
    if len(terms) == 1:
        return terms[0]
    return "any(" + ", ".join(terms) + ")"


def declaration(linkage: CallLinkage, name: str) -> str:
    if linkage is CallLinkage.STATIC:
        return f"    // pub static {name};"
    return f"    // pub fn {name}();"


def render_group(group: ExportGroup, observed: ArchSet) -> list[str]:
    lines: list[str] = []
    # Groups present everywhere the library exists need no guard of their own.
    if group.archs != observed:
        lines.append(f"#[cfg({cfg_predicate(group.archs)})]")
    lines.append(EXTERN_OPENERS[group.linkage])
    lines.extend(declaration(group.linkage, name) for name in group.names)
    lines.append("}")
    return lines


def render_stubs(
    groups: Iterable[ExportGroup],
    observed: ArchSet,
    supported: Iterable[Arch],
) -> str:
    lines: list[str] = []
    if observed and set(observed) != set(supported):
        lines.append(f"#![cfg({cfg_predicate(observed)})]")
    for group in groups:
        lines.extend(render_group(group, observed))
    return "\n".join(lines) + "\n" if lines else ""
