"""JSON reporter for hooks and CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from reporules.checks.models import CheckResult, Violation


def _violations(items: List[Violation]) -> List[Dict[str, str]]:
    return [{"field": v.field, "message": v.message} for v in items]


def to_dict(result: CheckResult) -> Dict[str, Any]:
    """Convert CheckResult to a JSON-serialisable dict."""
    return {
        "version": "1.0",
        "operation": result.operation,
        "blocked": result.blocked,
        "errors": _violations(result.errors),
        "warnings": _violations(result.warnings),
    }


def render(result: CheckResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)
