"""
Assistant package

Tool-call bindings that let an external agent drive the REST API.
"""

from .client import AssistantError, ZenSpendClient
from .tools import TOOLS, dispatch

__all__ = [
    "AssistantError",
    "ZenSpendClient",
    "TOOLS",
    "dispatch",
]
