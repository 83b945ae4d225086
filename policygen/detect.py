from typing import Any

_PLAN_KEYS = ("planned_values", "resource_changes")
_EMPTY_STATE_KEYS = {"format_version", "terraform_version"}


def detect_format(doc: Any) -> str:
    """
    Return 'plan', 'state', 'tfstate', or 'unknown' for a decoded JSON document.

    'plan' and 'state' are the outputs of `terraform show -json`; 'tfstate'
    is a raw terraform.tfstate file.
    """
    if not isinstance(doc, dict):
        return "unknown"

    if any(k in doc for k in _PLAN_KEYS):
        return "plan"

    if "values" in doc:
        return "state"

    if isinstance(doc.get("version"), int) and isinstance(doc.get("resources"), list):
        return "tfstate"

    # `terraform show -json` on an empty state prints only the format version
    if "format_version" in doc and set(doc) <= _EMPTY_STATE_KEYS:
        return "state"

    return "unknown"


def describe(kind: str) -> str:
    return {
        "plan": "a Terraform plan",
        "state": "a Terraform state",
        "tfstate": "a raw terraform.tfstate file",
    }.get(kind, "neither a Terraform plan nor a state")
