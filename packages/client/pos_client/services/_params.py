from __future__ import annotations

from typing import Any


def compact_params(**values: Any) -> dict[str, Any]:
    """Drop None and empty-string values; the backend treats absent and blank differently."""
    return {k: v for k, v in values.items() if v is not None and v != ""}
