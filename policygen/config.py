import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from policygen.errors import ConfigurationError

DEFAULT_CONFIG_FILE = "policygen.yaml"

_KNOWN_KEYS = {"binary", "init_args", "plan_args", "plan_file"}


@dataclass
class Settings:
    terraform_binary: str = "terraform"
    init_args: List[str] = field(default_factory=list)   # appended after "init"
    plan_args: List[str] = field(default_factory=list)   # appended after "plan", before "-out"
    plan_file: str = "plan.tfplan"                       # relative to the workspace


def _string_list(section: Dict[str, Any], key: str) -> List[str]:
    val = section.get(key, [])
    if not isinstance(val, list) or not all(isinstance(v, str) for v in val):
        raise ConfigurationError(f"terraform.{key} must be a list of strings")
    return list(val)


def _from_mapping(data: Any) -> Settings:
    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigurationError("settings file must contain a mapping")

    section = data.get("terraform", {}) or {}
    if not isinstance(section, dict):
        raise ConfigurationError("'terraform' must be a mapping")
    unknown = set(section) - _KNOWN_KEYS
    if unknown:
        raise ConfigurationError(f"unknown terraform settings: {', '.join(sorted(unknown))}")

    settings = Settings(
        init_args=_string_list(section, "init_args"),
        plan_args=_string_list(section, "plan_args"),
    )
    if "binary" in section:
        if not isinstance(section["binary"], str) or not section["binary"]:
            raise ConfigurationError("terraform.binary must be a non-empty string")
        settings.terraform_binary = section["binary"]
    if "plan_file" in section:
        plan_file = section["plan_file"]
        if not isinstance(plan_file, str) or not plan_file or os.sep in plan_file or "/" in plan_file:
            raise ConfigurationError("terraform.plan_file must be a bare file name")
        settings.plan_file = plan_file
    return settings


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings from *path*, or from 'policygen.yaml' in the current
    directory when it exists. TERRAFORM_BINARY overrides the binary.
    """
    if path is not None and not os.path.isfile(path):
        raise ConfigurationError(f"settings file {path!r} does not exist")
    if path is None and os.path.isfile(DEFAULT_CONFIG_FILE):
        path = DEFAULT_CONFIG_FILE

    settings = Settings()
    if path is not None:
        try:
            with open(path, "r") as fh:
                settings = _from_mapping(yaml.safe_load(fh))
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"invalid settings file {path!r}: {exc}") from exc

    binary = os.getenv("TERRAFORM_BINARY")
    if binary:
        settings.terraform_binary = binary
    return settings
