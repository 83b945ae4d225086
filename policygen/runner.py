"""
Process execution seam.

The Workspace Manager only talks to a Runner, so tests can swap in a fake
that records commands and returns scripted output.
"""
import subprocess
from typing import Optional, Protocol, Sequence

from policygen.errors import ExecutionError


class Runner(Protocol):
    def run(self, args: Sequence[str], cwd: Optional[str] = None) -> None:
        ...

    def output(self, args: Sequence[str], cwd: Optional[str] = None) -> bytes:
        ...


class DefaultRunner:
    """Runs commands with subprocess, capturing stdout and stderr."""

    def _exec(self, args: Sequence[str], cwd: Optional[str]) -> subprocess.CompletedProcess:
        try:
            proc = subprocess.run(
                list(args),
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            raise ExecutionError(args, None, stderr=str(exc).encode()) from exc
        if proc.returncode != 0:
            raise ExecutionError(args, proc.returncode, proc.stdout, proc.stderr)
        return proc

    def run(self, args: Sequence[str], cwd: Optional[str] = None) -> None:
        self._exec(args, cwd)

    def output(self, args: Sequence[str], cwd: Optional[str] = None) -> bytes:
        return self._exec(args, cwd).stdout
