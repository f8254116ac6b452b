"""Executor adapters that realize operation plans."""

from .awesome import AwesomeExecutor
from .base import SlotExecutor
from .dry_run import DryRunExecutor, DryRunOperation, default_context

__all__ = [
    "AwesomeExecutor",
    "DryRunExecutor",
    "DryRunOperation",
    "SlotExecutor",
    "default_context",
]
