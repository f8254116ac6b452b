from __future__ import annotations

import sys
import textwrap
from pathlib import Path
from typing import Callable, Iterable, Mapping, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from tagplan.errors import SlotCreationError  # noqa: E402
from tagplan.executors.base import SlotExecutor  # noqa: E402
from tagplan.models import ScreenContext, Slot  # noqa: E402


def build_context(
    current: int = 1,
    count: int = 9,
    named: Sequence[tuple[int, str]] = (),
) -> ScreenContext:
    """Snapshot with ``count`` numbered slots plus extra named slots."""
    slots = [Slot(index=index, name=str(index)) for index in range(1, count + 1)]
    slots.extend(Slot(index=index, name=name) for index, name in named)
    return ScreenContext(
        current_index=current,
        existing_slots=tuple(slots),
        slot_count=len(slots),
    )


class FakeExecutor(SlotExecutor):
    """Minimal executor double that hands out sequential slot indices."""

    label = "fake"

    def __init__(
        self,
        context: ScreenContext | None = None,
        *,
        failing: Iterable[str] = (),
        raising: Mapping[str, Exception] | None = None,
        next_index: int = 10,
    ) -> None:
        self.context = context or build_context()
        self.failing = set(failing)
        self.raising = dict(raising or {})
        self.create_calls: list[str] = []
        self._next_index = next_index

    def get_screen_context(self) -> ScreenContext:
        return self.context

    def find_named_slot(self, name: str) -> Slot | None:
        return self.context.find_slot(name)

    def create_named_slot(self, name: str) -> Slot:
        self.create_calls.append(name)
        if name in self.failing:
            raise SlotCreationError(f"cannot create {name}")
        if name in self.raising:
            raise self.raising[name]
        slot = Slot(index=self._next_index, name=name)
        self._next_index += 1
        return slot


@pytest.fixture()
def make_context() -> Callable[..., ScreenContext]:
    return build_context


@pytest.fixture()
def make_executor() -> Callable[..., FakeExecutor]:
    return FakeExecutor


@pytest.fixture()
def project_file(tmp_path: Path) -> Path:
    """Write a small project mixing relative, absolute and named tags."""

    path = tmp_path / "web.yaml"
    path.write_text(
        textwrap.dedent(
            """
            name: web-development
            resources:
              - name: editor
                tag: 0
              - name: server
                tag: 2
              - name: browser
                tag: "3"
              - name: notes
                tag: notes
              - name: docs
                tag: notes
            """
        ).lstrip(),
        encoding="utf-8",
    )
    return path
