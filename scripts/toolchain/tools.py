"""Blocking wrappers around the external binary tools.

Every call captures the complete output before returning; there is no
streaming and no timeout. Anything other than a clean exit with UTF-8
output raises `ToolInvocationError`.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from implib_config import ToolchainConfig
from implib_errors import ToolInvocationError
from records.types import Arch


def _decode(argv: list[str], data: bytes, stream: str) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ToolInvocationError(argv, f"Non-UTF-8 {stream} ({exc.reason})") from exc


def run_tool(argv: list[str], *, input_text: str | None = None, cwd: Path | None = None) -> str:
    argv = [str(arg) for arg in argv]
    try:
        result = subprocess.run(
            argv,
            input=input_text.encode("utf-8") if input_text is not None else None,
            capture_output=True,
            cwd=cwd,
        )
    except OSError as exc:
        raise ToolInvocationError(argv, f"Failed to launch tool ({exc})") from exc
    stdout = _decode(argv, result.stdout or b"", "stdout")
    if result.returncode != 0:
        stderr = (result.stderr or b"").decode("utf-8", errors="replace")
        raise ToolInvocationError(
            argv,
            "Tool failed",
            returncode=result.returncode,
            stderr=stderr or stdout,
        )
    return stdout


def dumpbin(config: ToolchainConfig, flag: str, lib_path: Path) -> str:
    return run_tool([config.dumpbin, flag, lib_path])


def dlltool(config: ToolchainConfig, arch: Arch, def_path: Path, archive_path: Path) -> str:
    return run_tool(
        [
            config.dlltool,
            "-m",
            config.machine_for(arch),
            "-d",
            def_path,
            "-l",
            archive_path,
        ]
    )


def ar_merge(config: ToolchainConfig, script: str, cwd: Path) -> str:
    """Run `ar -M` with an MRI script on stdin, relative to `cwd`."""
    return run_tool([config.ar, "-M"], input_text=script, cwd=cwd)
