from __future__ import annotations

from typing import Any


def ok(data: Any) -> dict[str, Any]:
    """Wrap a payload in the success envelope; the route's response_model serializes it."""
    return {"success": True, "data": data}
