"""Fatal error types.

Recoverable anomalies (a missing per-architecture library, a dump line that
matches no known shape) are reported and skipped; they never raise. The
exceptions below stop the run, because a definition file built from
misread tool output is worse than no definition file.
"""

from __future__ import annotations


class ImplibError(Exception):
    """Base class for errors that abort a run."""


class SchemaViolation(ImplibError):
    """Tool output no longer matches the format the parsers were written for."""

    def __init__(self, message: str, *, line: str | None = None, block: dict[str, str] | None = None):
        super().__init__(message)
        self.line = line
        self.block = block

    def __str__(self) -> str:
        text = super().__str__()
        if self.line is not None:
            text = f"{text} (line: {self.line!r})"
        if self.block:
            fields = ", ".join(f"{key}={value!r}" for key, value in self.block.items())
            text = f"{text} [block: {fields}]"
        return text


class ToolInvocationError(ImplibError):
    """An external tool could not be launched, failed, or produced unreadable output."""

    def __init__(self, argv: list[str], message: str, *, returncode: int | None = None, stderr: str | None = None):
        super().__init__(message)
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        text = f"{super().__str__()}: {' '.join(self.argv)}"
        if self.returncode is not None:
            text = f"{text} (exit status {self.returncode})"
        if self.stderr:
            text = f"{text}\n{self.stderr.rstrip()}"
        return text
