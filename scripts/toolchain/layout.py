"""Path helpers for SDK inputs and generated outputs."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from implib_config import ToolchainConfig
from records.types import Arch


def dll_stem(module: str) -> str:
    stem = Path(module).stem if module.lower().endswith(".dll") else module
    return stem.lower()


@dataclass(frozen=True)
class LibraryLayout:
    """Computed paths for one library across architectures."""

    sdk_lib_root: Path
    work_dir: Path
    output_root: Path
    name: str

    @classmethod
    def for_library(cls, config: ToolchainConfig, name: str) -> LibraryLayout:
        return cls(
            sdk_lib_root=config.sdk_lib_root,
            work_dir=config.work_dir,
            output_root=config.output_root,
            name=name,
        )

    def import_library(self, arch: Arch) -> Path:
        return self.sdk_lib_root / arch.dir_name / f"{self.name}.lib"

    def stub_path(self) -> Path:
        return self.work_dir / f"{self.name}.rs"

    def arch_dir(self, arch: Arch) -> Path:
        return self.output_root / arch.dir_name

    def definition_path(self, arch: Arch, module: str | None = None) -> Path:
        if module is None:
            return self.arch_dir(arch) / f"{self.name}.def"
        return self.arch_dir(arch) / f"{self.name}-{dll_stem(module)}.def"

    def archive_name(self, module: str | None = None) -> str:
        if module is None:
            return f"lib{self.name}.a"
        return f"lib{self.name}-{dll_stem(module)}.a"

    def archive_path(self, arch: Arch, module: str | None = None) -> Path:
        return self.arch_dir(arch) / self.archive_name(module)
