"""
The scripted desktop refresh sequence.
"""

from __future__ import annotations
import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence

from deskrefresh.config import RefreshConfig
from deskrefresh.playback.os_controller import InjectionError, MouseButton, OSController

logger = logging.getLogger(__name__)


class SequenceStep(str, Enum):
    SHOW_DESKTOP = "show_desktop"
    MOVE_POINTER = "move_pointer"
    OPEN_CONTEXT_MENU = "open_context_menu"
    REFRESH = "refresh"
    SWITCH_BACK = "switch_back"


class RefreshSequence:
    """
    Emits the fixed show-desktop / right-click / refresh / alt-tab sequence.

    Every delay is a suspension point, so the task running ``perform()`` can
    be cancelled between events. Individual injections are short blocking
    calls and are never interrupted.

    Usage:
        sequence = RefreshSequence(OSController(), RefreshConfig())
        sequence.on_step = lambda step: print(step.value)
        await sequence.perform()
    """

    def __init__(
        self,
        controller: OSController,
        config: RefreshConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.controller = controller
        self.config = config or RefreshConfig()
        self._sleep = sleep

        # Called with each step just before it runs
        self.on_step: Optional[Callable[[SequenceStep], None]] = None

    async def perform(self) -> None:
        """
        Run the whole sequence once.

        Raises:
            InjectionError: on the first event the OS refuses. Later steps
                are skipped and earlier events are not undone.
        """
        timing = self.config.timing
        pointer = self.config.pointer

        self._announce(SequenceStep.SHOW_DESKTOP)
        await self.send_key_combo(self.config.show_desktop_keys)
        await self._sleep(timing.after_show_desktop)

        self._announce(SequenceStep.MOVE_POINTER)
        await self.move_pointer(pointer.x, pointer.y)
        await self._sleep(timing.after_move)

        self._announce(SequenceStep.OPEN_CONTEXT_MENU)
        await self.click(MouseButton.RIGHT)
        await self._sleep(timing.after_click)

        self._announce(SequenceStep.REFRESH)
        await self.send_key_combo(self.config.refresh_keys)
        await self._sleep(timing.after_refresh)

        self._announce(SequenceStep.SWITCH_BACK)
        await self.send_key_combo(self.config.switch_back_keys)
        await self._sleep(timing.after_switch_back)

    async def send_key_combo(self, keys: Sequence[str]) -> None:
        """
        Press every key in order, then release them in reverse order.

        A single key is just a one-element combo.
        """
        delay = self.config.timing.key_delay
        held: List[str] = []
        try:
            for key in keys:
                self.controller.key_down(key)
                held.append(key)
                await self._sleep(delay)
            while held:
                self.controller.key_up(held[-1])
                held.pop()
                await self._sleep(delay)
        except asyncio.CancelledError:
            self._release_keys(held)
            raise

    async def click(self, button: MouseButton) -> None:
        """Press and release a mouse button at the current pointer position."""
        delay = self.config.timing.key_delay
        self.controller.mouse_down(button)
        try:
            await self._sleep(delay)
        except asyncio.CancelledError:
            self._release_button(button)
            raise
        self.controller.mouse_up(button)
        await self._sleep(delay)

    async def move_pointer(self, x: int, y: int) -> None:
        self.controller.move_mouse(x, y)
        await self._sleep(self.config.timing.move_delay)

    def _announce(self, step: SequenceStep) -> None:
        logger.debug(f"Sequence step: {step.value}")
        if self.on_step:
            self.on_step(step)

    def _release_keys(self, held: List[str]) -> None:
        """Let go of keys still down when the sequence is cancelled."""
        for key in reversed(held):
            try:
                self.controller.key_up(key)
            except InjectionError as e:
                logger.warning(f"Could not release {key!r} after cancellation: {e}")

    def _release_button(self, button: MouseButton) -> None:
        try:
            self.controller.mouse_up(button)
        except InjectionError as e:
            logger.warning(f"Could not release {button.value} button after cancellation: {e}")
