from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


class Unknown:
    """Placeholder for a plan value that is only known after apply."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (Unknown, ())


UNKNOWN = Unknown()

UNKNOWN_TEXT = "(known after apply)"


class Source(str, Enum):
    PLAN  = "plan"
    STATE = "state"


def _freeze(val: Any) -> Any:
    """Read-only copy of a JSON value: mappings become proxies, lists tuples."""
    if isinstance(val, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in val.items()})
    if isinstance(val, (list, tuple)):
        return tuple(_freeze(v) for v in val)
    return val


def _jsonable(val: Any) -> Any:
    if val is UNKNOWN:
        return UNKNOWN_TEXT
    if isinstance(val, Mapping):
        return {k: _jsonable(v) for k, v in val.items()}
    if isinstance(val, (list, tuple)):
        return [_jsonable(v) for v in val]
    return val


@dataclass(frozen=True)
class Resource:
    resource_type: str               # e.g. "google_storage_bucket"
    name: str                        # local name in the configuration
    source: Source                   # where the attributes came from
    attributes: Mapping[str, Any] = field(default_factory=dict, hash=False)
    address: Optional[str] = None    # e.g. "module.net.google_compute_network.vpc[0]"
    provider_name: str = ""

    def __post_init__(self):
        if not self.resource_type:
            raise ValueError("resource type must not be empty")
        if not self.name:
            raise ValueError("resource name must not be empty")
        object.__setattr__(self, "attributes", _freeze(self.attributes))

    @property
    def qualified_name(self) -> str:
        return self.address or f"{self.resource_type}.{self.name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.qualified_name,
            "type": self.resource_type,
            "name": self.name,
            "source": self.source.value,
            "provider_name": self.provider_name,
            "attributes": _jsonable(self.attributes),
        }
