"""
Ephemeral Terraform workspace.

Terraform writes lock files, provider caches and plan files into its working
directory, so plans are computed inside a throwaway copy of the caller's
configs. The copy is removed on every exit path.
"""
import os
import shutil
import tempfile
from typing import Optional

from rich.console import Console
from rich.markup import escape

from policygen.config import Settings
from policygen.errors import (
    ExecutionError,
    ExtractionError,
    InitializationError,
    InvalidPathError,
    PlanError,
    WorkspaceError,
)
from policygen.paths import normalize_path
from policygen.runner import DefaultRunner, Runner

default_console = Console(stderr=True)


class Workspace:
    def __init__(
        self,
        source_dir: str,
        runner: Optional[Runner] = None,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
    ):
        self.source_dir = source_dir
        self.console = console if console is not None else default_console
        self.runner = runner if runner is not None else DefaultRunner()
        self.settings = settings if settings is not None else Settings()
        self.path: Optional[str] = None
        self._tmp: Optional[tempfile.TemporaryDirectory] = None

    def __enter__(self) -> "Workspace":
        src = normalize_path(self.source_dir)
        if not os.path.isdir(src):
            raise InvalidPathError(f"{src} is not a directory")

        try:
            self._tmp = tempfile.TemporaryDirectory(prefix="policygen-")
        except OSError as exc:
            raise WorkspaceError(f"create temp directory: {exc}") from exc
        self.path = self._tmp.name

        try:
            shutil.copytree(src, self.path, symlinks=True, dirs_exist_ok=True)
        except (OSError, shutil.Error) as exc:
            self._cleanup()
            raise WorkspaceError(f"copy configs to temp directory: {exc}") from exc
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._cleanup()

    def _cleanup(self) -> None:
        if self._tmp is not None:
            self._tmp.cleanup()
            self._tmp = None

    @property
    def plan_path(self) -> str:
        return os.path.join(self.path, self.settings.plan_file)

    def _command(self, args):
        cmd = [self.settings.terraform_binary, *args]
        self.console.print(f"[dim]$ {escape(' '.join(cmd))}[/dim]")
        return cmd

    def terraform(self, *args: str) -> None:
        self.runner.run(self._command(args), cwd=self.path)

    def terraform_output(self, *args: str) -> bytes:
        return self.runner.output(self._command(args), cwd=self.path)

    def plan_json(self) -> bytes:
        """Run init, plan and show in sequence and return the plan as JSON bytes."""
        try:
            self.terraform("init", *self.settings.init_args)
        except ExecutionError as exc:
            raise InitializationError(exc) from exc

        try:
            self.terraform("plan", *self.settings.plan_args, "-out", self.plan_path)
        except ExecutionError as exc:
            raise PlanError(exc) from exc

        try:
            return self.terraform_output("show", "-json", self.plan_path)
        except ExecutionError as exc:
            raise ExtractionError(exc) from exc


def plan_json_from_dir(
    source_dir: str,
    runner: Optional[Runner] = None,
    settings: Optional[Settings] = None,
    console: Optional[Console] = None,
) -> bytes:
    with Workspace(source_dir, runner=runner, settings=settings, console=console) as ws:
        return ws.plan_json()
