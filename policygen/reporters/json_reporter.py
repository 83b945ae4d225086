"""
JSON rendering of extracted resources.
"""
import json
from collections import Counter
from datetime import datetime, timezone
from typing import List

from policygen import __version__
from policygen.models.resource import Resource


def _summary(resources: List[Resource]) -> dict:
    return {
        "total": len(resources),
        "by_source": dict(Counter(r.source.value for r in resources)),
        "by_type": dict(Counter(r.resource_type for r in resources)),
    }


def build_report(resources: List[Resource], source_path: str) -> str:
    report = {
        "meta": {
            "generated": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "source": source_path,
            "tool": "policygen",
            "version": __version__,
        },
        "summary": _summary(resources),
        "resources": [r.to_dict() for r in resources],
    }
    return json.dumps(report, indent=2)
