"""Live executor that drives AwesomeWM through ``awesome-client``."""

from __future__ import annotations

import logging
import re
import subprocess
from typing import List

from ..errors import ExecutorError, SlotCreationError
from ..models import ScreenContext, Slot
from .base import SlotExecutor

LOGGER = logging.getLogger(__name__)

DEFAULT_CLIENT = "awesome-client"

_RECORD_SEP = "\x1e"
_FIELD_SEP = "\x1f"
_REPLY_RE = re.compile(r'^\s*string\s+"(.*)"\s*$', re.DOTALL)

_CONTEXT_SCRIPT = """
local awful = require("awful")
local s = awful.screen.focused()
if not s then return "" end
local current = s.selected_tag and s.selected_tag.index or 1
local rows = { tostring(current) }
for _, t in ipairs(s.tags) do
  rows[#rows + 1] = tostring(t.index) .. "\\31" .. (t.name or "")
end
return table.concat(rows, "\\30")
"""

_CREATE_SCRIPT = """
local awful = require("awful")
local s = awful.screen.focused()
if not s then return "" end
local t = awful.tag.add({name}, {{ screen = s }})
return t and tostring(t.index) or ""
"""


def lua_string(value: str) -> str:
    """Quote ``value`` as a Lua string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f'"{escaped}"'


def parse_reply(output: str) -> str:
    """Extract the string payload from an ``awesome-client`` reply."""
    match = _REPLY_RE.match(output)
    if match is None:
        message = output.strip() or "empty reply"
        raise ExecutorError(f"Unexpected awesome-client reply: {message}")
    return match.group(1)


def parse_context(payload: str) -> ScreenContext:
    """Build a :class:`ScreenContext` from the record-separated context payload."""
    if not payload:
        raise ExecutorError("No focused screen available")
    rows = payload.split(_RECORD_SEP)
    try:
        current = int(rows[0])
    except ValueError as error:
        raise ExecutorError(f"Invalid current slot index: {rows[0]!r}") from error

    slots: List[Slot] = []
    for row in rows[1:]:
        index_text, _, name = row.partition(_FIELD_SEP)
        try:
            index = int(index_text)
        except ValueError as error:
            raise ExecutorError(f"Invalid slot record: {row!r}") from error
        slots.append(Slot(index=index, name=name or None))
    return ScreenContext(current_index=current, existing_slots=tuple(slots), slot_count=len(slots))


class AwesomeExecutor(SlotExecutor):
    """Perform real slot mutations on the focused AwesomeWM screen."""

    label = "awesome"

    def __init__(self, *, client: str = DEFAULT_CLIENT, timeout: float = 5.0) -> None:
        self._client = client
        self._timeout = timeout

    def get_screen_context(self) -> ScreenContext:
        return parse_context(self._eval(_CONTEXT_SCRIPT))

    def find_named_slot(self, name: str) -> Slot | None:
        if not name:
            return None
        return self.get_screen_context().find_slot(name)

    def create_named_slot(self, name: str) -> Slot:
        if not name or not name.strip():
            raise SlotCreationError("slot name must be a non-empty string")
        try:
            payload = self._eval(_CREATE_SCRIPT.format(name=lua_string(name)))
        except ExecutorError as error:
            raise SlotCreationError(str(error)) from error
        try:
            index = int(payload.strip())
        except ValueError as error:
            raise SlotCreationError(f"awful.tag.add returned no slot for '{name}'") from error
        return Slot(index=index, name=name)

    # ------------------------------------------------------------ client IO
    def _eval(self, script: str) -> str:
        command = [self._client]
        try:
            process = subprocess.run(
                command,
                input=script,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as error:
            raise ExecutorError(f"{self._client} not found on PATH") from error
        except subprocess.TimeoutExpired as error:
            raise ExecutorError(
                f"{self._client} did not answer within {self._timeout:g}s"
            ) from error
        except OSError as error:
            raise ExecutorError(f"{self._client} could not be run: {error}") from error

        if process.returncode != 0:
            message = process.stderr.strip() or process.stdout.strip() or "unknown error"
            raise ExecutorError(f"{self._client} failed: {message}")
        LOGGER.debug("%s replied: %r", self._client, process.stdout)
        return parse_reply(process.stdout)


__all__ = ["AwesomeExecutor", "DEFAULT_CLIENT", "lua_string", "parse_context", "parse_reply"]
