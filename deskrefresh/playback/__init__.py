"""
OS-level playback of the desktop refresh sequence.

Controls the actual mouse cursor and keyboard so the refresh looks like
a real user operating the computer.
"""

from deskrefresh.playback.os_controller import InjectionError, MouseButton, OSController
from deskrefresh.playback.refresh_sequence import RefreshSequence, SequenceStep

__all__ = ["InjectionError", "MouseButton", "OSController", "RefreshSequence", "SequenceStep"]
