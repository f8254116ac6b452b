"""
Resolution, planning and execution coordination for tag placement requests.
"""

from importlib import import_module
from typing import Any

_EXPORTS = {
    "Resolution": "tagplan.planning.resolver",
    "resolve": "tagplan.planning.resolver",
    "plan": "tagplan.planning.planner",
    "execute": "tagplan.planning.coordinator",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> Any:
    """Lazily import helpers so the pure planner never loads executor code."""
    if name in _EXPORTS:
        module = import_module(_EXPORTS[name])
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
