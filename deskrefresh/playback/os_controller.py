"""
OS-level input injection for mouse and keyboard.

Uses pyautogui when it is available and falls back to pynput:
- Key press / release by name
- Pointer moves to absolute screen coordinates
- Mouse button press / release

Every backend failure is reported as an InjectionError.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Optional
import logging

logger = logging.getLogger(__name__)


class InjectionError(Exception):
    """A synthetic input event could not be delivered to the OS."""


class MouseButton(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"


# pynput names for the keys pyautogui knows by string
_PYNPUT_KEY_NAMES = {
    'win': 'cmd',
    'command': 'cmd',
    'cmd': 'cmd',
    'ctrl': 'ctrl',
    'control': 'ctrl',
    'alt': 'alt',
    'option': 'alt',
    'shift': 'shift',
    'tab': 'tab',
    'enter': 'enter',
    'return': 'enter',
    'escape': 'esc',
    'esc': 'esc',
    'space': 'space',
    'backspace': 'backspace',
    'delete': 'delete',
}


class OSController:
    """
    Sends real key and mouse events to the OS.

    The backend is loaded on first use, so a missing desktop session only
    fails the call that needed it.

    Usage:
        controller = OSController()

        controller.key_down("win")
        controller.key_down("d")
        controller.key_up("d")
        controller.key_up("win")

        controller.move_mouse(960, 540)
        controller.mouse_down(MouseButton.RIGHT)
        controller.mouse_up(MouseButton.RIGHT)
    """

    def __init__(self, fail_safe: bool = True):
        """
        Initialize the OS controller.

        Args:
            fail_safe: If True, moving mouse to corner aborts (pyautogui safety feature)
        """
        self._pyautogui = None
        self._pynput_mouse = None
        self._pynput_keyboard = None
        self.fail_safe = fail_safe

    @property
    def backend(self) -> Optional[str]:
        """Name of the loaded backend, or None before first use."""
        if self._pyautogui is not None:
            return "pyautogui"
        if self._pynput_keyboard is not None:
            return "pynput"
        return None

    def _ensure_backend(self) -> None:
        """Load an input backend if none is loaded yet."""
        if self.backend is not None:
            return

        try:
            import pyautogui
        except ImportError:
            logger.warning("pyautogui not available, trying pynput")
        except Exception as e:
            # pyautogui talks to the display server at import time
            raise InjectionError(f"pyautogui could not start: {e}") from e
        else:
            pyautogui.FAILSAFE = self.fail_safe
            pyautogui.PAUSE = 0  # delays are driven by the caller
            self._pyautogui = pyautogui
            logger.info("Using pyautogui for OS control")
            return

        try:
            from pynput.mouse import Controller as MouseController
            from pynput.keyboard import Controller as KeyboardController
        except ImportError as e:
            raise InjectionError(
                "No input control library available. "
                "Install with: pip install pyautogui pynput"
            ) from e

        try:
            self._pynput_mouse = MouseController()
            self._pynput_keyboard = KeyboardController()
        except Exception as e:
            raise InjectionError(f"pynput could not start: {e}") from e
        logger.info("Using pynput for OS control")

    def _inject(self, description: str, pyautogui_call, pynput_call) -> None:
        self._ensure_backend()
        try:
            if self._pyautogui is not None:
                pyautogui_call(self._pyautogui)
            else:
                pynput_call()
        except Exception as e:
            raise InjectionError(f"Failed to {description}: {e}") from e

    # =========================================================================
    # Keyboard Control
    # =========================================================================

    def key_down(self, key: str) -> None:
        """Press and hold a key."""
        self._inject(
            f"press {key!r}",
            lambda gui: gui.keyDown(key),
            lambda: self._pynput_keyboard.press(self._pynput_key(key)),
        )

    def key_up(self, key: str) -> None:
        """Release a key."""
        self._inject(
            f"release {key!r}",
            lambda gui: gui.keyUp(key),
            lambda: self._pynput_keyboard.release(self._pynput_key(key)),
        )

    # =========================================================================
    # Mouse Control
    # =========================================================================

    def move_mouse(self, x: int, y: int) -> None:
        """Move the pointer straight to an absolute position."""
        def pynput_move():
            self._pynput_mouse.position = (x, y)

        self._inject(
            f"move pointer to ({x}, {y})",
            lambda gui: gui.moveTo(x, y),
            pynput_move,
        )

    def mouse_down(self, button: MouseButton = MouseButton.LEFT) -> None:
        """Press and hold mouse button."""
        self._inject(
            f"press {button.value} button",
            lambda gui: gui.mouseDown(button=button.value),
            lambda: self._pynput_mouse.press(self._pynput_button(button)),
        )

    def mouse_up(self, button: MouseButton = MouseButton.LEFT) -> None:
        """Release mouse button."""
        self._inject(
            f"release {button.value} button",
            lambda gui: gui.mouseUp(button=button.value),
            lambda: self._pynput_mouse.release(self._pynput_button(button)),
        )

    # =========================================================================
    # Helper Methods
    # =========================================================================

    @staticmethod
    def _pynput_key(key: str) -> Any:
        from pynput.keyboard import Key

        name = _PYNPUT_KEY_NAMES.get(key.lower())
        if name is not None:
            return getattr(Key, name)
        if len(key) == 1:
            return key
        # Function keys and the like share pyautogui's names
        return getattr(Key, key.lower())

    @staticmethod
    def _pynput_button(button: MouseButton) -> Any:
        from pynput.mouse import Button

        return {
            MouseButton.LEFT: Button.left,
            MouseButton.RIGHT: Button.right,
            MouseButton.MIDDLE: Button.middle,
        }[button]
