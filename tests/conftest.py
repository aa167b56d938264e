"""
Shared fakes for driving the refresher without touching the real OS.
"""

import asyncio
from typing import List, Optional, Tuple

import pytest

from deskrefresh.playback.os_controller import InjectionError, MouseButton


class FakeController:
    """Records injected events into a shared timeline instead of sending them."""

    def __init__(self, timeline: List[Tuple], fail_on: Optional[Tuple] = None):
        self.timeline = timeline
        self.fail_on = fail_on

    def _record(self, event: Tuple) -> None:
        if event == self.fail_on:
            raise InjectionError(f"injection refused: {event}")
        self.timeline.append(event)

    def key_down(self, key: str) -> None:
        self._record(("key_down", key))

    def key_up(self, key: str) -> None:
        self._record(("key_up", key))

    def move_mouse(self, x: int, y: int) -> None:
        self._record(("move", x, y))

    def mouse_down(self, button: MouseButton = MouseButton.LEFT) -> None:
        self._record(("mouse_down", button.value))

    def mouse_up(self, button: MouseButton = MouseButton.LEFT) -> None:
        self._record(("mouse_up", button.value))


class RecordingSleep:
    """Async sleep replacement that returns immediately and records delays."""

    def __init__(self, timeline: List[Tuple], hang_on_call: Optional[int] = None):
        self.timeline = timeline
        self.calls: List[float] = []
        self.hang_on_call = hang_on_call

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.timeline.append(("sleep", seconds))
        if len(self.calls) == self.hang_on_call:
            await asyncio.Event().wait()
        await asyncio.sleep(0)


@pytest.fixture
def timeline() -> List[Tuple]:
    return []


@pytest.fixture
def controller(timeline) -> FakeController:
    return FakeController(timeline)


@pytest.fixture
def recording_sleep(timeline) -> RecordingSleep:
    return RecordingSleep(timeline)
