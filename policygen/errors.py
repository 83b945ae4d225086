"""
Error taxonomy for policygen.

Every failure inside the extraction pipeline is raised as a subclass of
PolicygenError; only the CLI catches them.
"""
from typing import Optional, Sequence


class PolicygenError(Exception):
    pass


class InvalidPathError(PolicygenError):
    """A user supplied path could not be normalized or read."""


class ConfigurationError(PolicygenError):
    """The caller broke the input contract or the settings file is invalid."""


class MalformedInputError(PolicygenError):
    """JSON input is unparsable or does not match the expected schema."""


class WorkspaceError(PolicygenError):
    """The temporary workspace could not be created or populated."""


class ExecutionError(PolicygenError):
    """An external command exited non-zero or could not be started."""

    def __init__(
        self,
        args: Sequence[str],
        returncode: Optional[int],
        stdout: bytes = b"",
        stderr: bytes = b"",
    ):
        self.cmd = list(args)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(self._message())

    def _message(self) -> str:
        cmd = " ".join(self.cmd)
        if self.returncode is None:
            msg = f"command {cmd!r} could not be started"
        else:
            msg = f"command {cmd!r} exited with status {self.returncode}"
        detail = self.stderr.decode("utf-8", "replace").strip()
        if detail:
            msg += f": {detail}"
        return msg


class StageError(PolicygenError):
    """A Terraform lifecycle step failed; wraps the ExecutionError."""

    stage = "terraform"

    def __init__(self, error: ExecutionError):
        self.error = error
        super().__init__(f"{self.stage}: {error}")


class InitializationError(StageError):
    stage = "terraform init"


class PlanError(StageError):
    stage = "terraform plan"


class ExtractionError(StageError):
    stage = "terraform show"


class AcquisitionError(PolicygenError):
    """Failure of one acquisition path (configs directory, plan or state)."""

    def __init__(self, path_kind: str, error: Exception):
        self.path_kind = path_kind
        self.error = error
        super().__init__(f"read resources from {path_kind}: {error}")
