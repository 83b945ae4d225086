"""
Resources from Terraform state.

Two layouts are accepted:
  * `terraform show -json` output: values.root_module with nested child_modules
  * a raw terraform.tfstate (version 4): resources -> instances -> attributes
"""
import json
from typing import Any, Dict, Iterator, List, Optional, Union

from policygen.detect import describe, detect_format
from policygen.errors import MalformedInputError
from policygen.models.resource import Resource, Source


def _load(data: Union[bytes, str]) -> Dict[str, Any]:
    try:
        doc = json.loads(data)
    except (ValueError, TypeError) as exc:
        raise MalformedInputError(f"invalid state JSON: {exc}") from exc

    kind = detect_format(doc)
    if kind not in ("state", "tfstate"):
        raise MalformedInputError(f"expected a Terraform state, input looks like {describe(kind)}")
    return doc


def _require_name(where: str, entry: Dict[str, Any]) -> None:
    for key in ("type", "name"):
        val = entry.get(key)
        if not isinstance(val, str) or not val:
            raise MalformedInputError(f"{where}: missing resource {key}")


# ------------------------------------------------------------------ show -json
def _walk_modules(module: Any, where: str) -> Iterator[tuple]:
    """Yield (where, entry) for a module's resources, then its children, depth first."""
    if not isinstance(module, dict):
        raise MalformedInputError(f"{where}: expected a module object")

    resources = module.get("resources", [])
    if not isinstance(resources, list):
        raise MalformedInputError(f"{where}.resources: expected a list")
    for i, entry in enumerate(resources):
        yield f"{where}.resources[{i}]", entry

    children = module.get("child_modules", [])
    if not isinstance(children, list):
        raise MalformedInputError(f"{where}.child_modules: expected a list")
    for i, child in enumerate(children):
        yield from _walk_modules(child, f"{where}.child_modules[{i}]")


def _from_show_json(doc: Dict[str, Any]) -> List[Resource]:
    # The empty state form has no "values" key at all
    if "values" not in doc:
        return []
    values = doc["values"]
    if not isinstance(values, dict):
        raise MalformedInputError("values: expected an object")
    root = values.get("root_module")
    if not isinstance(root, dict):
        raise MalformedInputError("values.root_module: expected a module object")

    resources: List[Resource] = []
    for where, entry in _walk_modules(root, "values.root_module"):
        if not isinstance(entry, dict):
            raise MalformedInputError(f"{where}: expected an object")
        _require_name(where, entry)
        if entry.get("mode", "managed") != "managed":
            continue
        attrs = entry.get("values")
        if not isinstance(attrs, dict):
            raise MalformedInputError(f"{where} ({entry['type']}.{entry['name']}): values is not an object")
        resources.append(Resource(
            resource_type=entry["type"],
            name=entry["name"],
            source=Source.STATE,
            attributes=attrs,
            address=entry.get("address"),
            provider_name=entry.get("provider_name", ""),
        ))
    return resources


# ------------------------------------------------------------------ raw tfstate
def _build_address(module: Optional[str], resource_type: str, name: str, index: Any) -> str:
    address = f"{resource_type}.{name}"
    if index is not None:
        if isinstance(index, int):
            address = f"{address}[{index}]"
        else:
            address = f'{address}["{index}"]'
    if module:
        address = f"{module}.{address}"
    return address


def _from_tfstate(doc: Dict[str, Any]) -> List[Resource]:
    resources: List[Resource] = []
    for i, entry in enumerate(doc["resources"]):
        where = f"resources[{i}]"
        if not isinstance(entry, dict):
            raise MalformedInputError(f"{where}: expected an object")
        _require_name(where, entry)
        if entry.get("mode", "managed") != "managed":
            continue

        instances = entry.get("instances", [])
        if not isinstance(instances, list):
            raise MalformedInputError(f"{where}.instances: expected a list")
        for j, inst in enumerate(instances):
            attrs = inst.get("attributes") if isinstance(inst, dict) else None
            if not isinstance(attrs, dict):
                raise MalformedInputError(
                    f"{where}.instances[{j}] ({entry['type']}.{entry['name']}): attributes is not an object"
                )
            resources.append(Resource(
                resource_type=entry["type"],
                name=entry["name"],
                source=Source.STATE,
                attributes=attrs,
                address=_build_address(entry.get("module"), entry["type"], entry["name"], inst.get("index_key")),
                provider_name=entry.get("provider", ""),
            ))
    return resources


def read_state_resources(data: Union[bytes, str]) -> List[Resource]:
    doc = _load(data)
    if detect_format(doc) == "tfstate":
        return _from_tfstate(doc)
    return _from_show_json(doc)
