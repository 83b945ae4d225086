"""
Entry point for resource extraction: picks exactly one acquisition path
(configs directory, plan file or state file) and returns the resources.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from rich.console import Console

from policygen.config import Settings
from policygen.errors import AcquisitionError, ConfigurationError, InvalidPathError, PolicygenError
from policygen.models.resource import Resource
from policygen.parsers.plan import read_plan_resources
from policygen.parsers.state import read_state_resources
from policygen.paths import normalize_path
from policygen.runner import Runner
from policygen.workspace import plan_json_from_dir


@dataclass
class Extraction:
    output_dir: str
    resources: List[Resource] = field(default_factory=list)


def validate_inputs(input_dir: str, input_plan: str, input_state: str, output_dir: str) -> None:
    if sum(1 for s in (input_dir, input_plan, input_state) if s) != 1:
        raise ConfigurationError(
            "exactly one of --input_dir, --input_plan or --input_state must be specified"
        )
    if not output_dir:
        raise ConfigurationError("--output_dir must be set")


def _read_file(path: str) -> bytes:
    path = normalize_path(path)
    try:
        with open(path, "rb") as fh:
            return fh.read()
    except OSError as exc:
        raise InvalidPathError(f"read {path}: {exc}") from exc


def resources_from_dir(
    path: str,
    runner: Optional[Runner] = None,
    settings: Optional[Settings] = None,
    console: Optional[Console] = None,
) -> List[Resource]:
    return read_plan_resources(plan_json_from_dir(path, runner=runner, settings=settings, console=console))


def resources_from_plan(path: str) -> List[Resource]:
    return read_plan_resources(_read_file(path))


def resources_from_state(path: str) -> List[Resource]:
    return read_state_resources(_read_file(path))


def extract(
    input_dir: str = "",
    input_plan: str = "",
    input_state: str = "",
    output_dir: str = "",
    runner: Optional[Runner] = None,
    settings: Optional[Settings] = None,
    console: Optional[Console] = None,
) -> Extraction:
    """
    Validate the input contract, then read resources from whichever input
    was given. Failures of the chosen path are raised as AcquisitionError.
    """
    validate_inputs(input_dir, input_plan, input_state, output_dir)
    output_dir = normalize_path(output_dir)

    if input_dir:
        path_kind, read = "configs directory", lambda: resources_from_dir(input_dir, runner, settings, console)
    elif input_plan:
        path_kind, read = "plan", lambda: resources_from_plan(input_plan)
    else:
        path_kind, read = "state", lambda: resources_from_state(input_state)

    try:
        resources = read()
    except PolicygenError as exc:
        raise AcquisitionError(path_kind, exc) from exc
    return Extraction(output_dir=output_dir, resources=resources)
