"""
Resources from `terraform show -json <planfile>` output.

Attributes come from each resource change's "after" block. Values Terraform
cannot know until apply are listed in "after_unknown" and show up as UNKNOWN.
"""
import json
from typing import Any, Dict, List, Union

from policygen.detect import describe, detect_format
from policygen.errors import MalformedInputError
from policygen.models.resource import UNKNOWN, Resource, Source

_UNMANAGED_AFTER_APPLY = (["delete"], ["forget"])


def _overlay_unknown(after: Any, unknown: Any) -> Any:
    """Replace every value marked true in *unknown* with UNKNOWN."""
    if unknown is True:
        return UNKNOWN
    if isinstance(unknown, dict):
        base = dict(after) if isinstance(after, dict) else {}
        for k, marker in unknown.items():
            base[k] = _overlay_unknown(base.get(k), marker)
        return base
    if isinstance(unknown, list):
        base = list(after) if isinstance(after, list) else []
        for i, marker in enumerate(unknown):
            if i < len(base):
                base[i] = _overlay_unknown(base[i], marker)
            elif marker is True:
                base.append(UNKNOWN)
        return base
    return after


def _load(data: Union[bytes, str]) -> Dict[str, Any]:
    try:
        doc = json.loads(data)
    except (ValueError, TypeError) as exc:
        raise MalformedInputError(f"invalid plan JSON: {exc}") from exc

    kind = detect_format(doc)
    if kind != "plan":
        raise MalformedInputError(f"expected a Terraform plan, input looks like {describe(kind)}")
    if not isinstance(doc.get("planned_values"), dict):
        raise MalformedInputError("plan has no planned_values object")
    return doc


def _resource_from_change(i: int, rc: Any) -> Union[Resource, None]:
    where = f"resource_changes[{i}]"
    if not isinstance(rc, dict):
        raise MalformedInputError(f"{where}: expected an object")

    resource_type = rc.get("type")
    name = rc.get("name")
    if not isinstance(resource_type, str) or not resource_type:
        raise MalformedInputError(f"{where}: missing resource type")
    if not isinstance(name, str) or not name:
        raise MalformedInputError(f"{where}: missing resource name")

    if rc.get("mode", "managed") != "managed":
        return None

    change = rc.get("change")
    if not isinstance(change, dict) or not isinstance(change.get("actions"), list):
        raise MalformedInputError(f"{where} ({resource_type}.{name}): missing change actions")

    # Deleted and forgotten resources have no "after" and are not managed once applied
    if change["actions"] in _UNMANAGED_AFTER_APPLY:
        return None

    after = change.get("after")
    if not isinstance(after, dict):
        raise MalformedInputError(f"{where} ({resource_type}.{name}): change.after is not an object")
    after_unknown = change.get("after_unknown", {})
    if after_unknown is not None and not isinstance(after_unknown, dict):
        raise MalformedInputError(f"{where} ({resource_type}.{name}): change.after_unknown is not an object")

    return Resource(
        resource_type=resource_type,
        name=name,
        source=Source.PLAN,
        attributes=_overlay_unknown(after, after_unknown or {}),
        address=rc.get("address"),
        provider_name=rc.get("provider_name", ""),
    )


def read_plan_resources(data: Union[bytes, str]) -> List[Resource]:
    doc = _load(data)

    changes = doc.get("resource_changes", [])
    if not isinstance(changes, list):
        raise MalformedInputError("resource_changes is not a list")

    resources: List[Resource] = []
    for i, rc in enumerate(changes):
        r = _resource_from_change(i, rc)
        if r is not None:
            resources.append(r)
    return resources
