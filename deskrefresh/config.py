"""
Configuration for the desktop refresher.
"""

from __future__ import annotations
from typing import List

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class PointerTarget(BaseModel):
    """Screen position the pointer is moved to before the right-click."""

    model_config = ConfigDict(frozen=True)

    # Centre of a 1920x1080 screen
    x: int = Field(default=960, description="Target X coordinate")
    y: int = Field(default=540, description="Target Y coordinate")


class SequenceTiming(BaseModel):
    """Delays (in seconds) used while emitting the refresh sequence."""

    model_config = ConfigDict(frozen=True)

    key_delay: float = Field(default=0.05, ge=0, description="Pause after every key/button press or release")
    move_delay: float = Field(default=0.01, ge=0, description="Pause right after a pointer move")
    after_show_desktop: float = Field(default=2.0, ge=0, description="Wait for the desktop to appear")
    after_move: float = Field(default=0.5, ge=0, description="Wait after moving the pointer")
    after_click: float = Field(default=0.8, ge=0, description="Wait for the context menu to open")
    after_refresh: float = Field(default=1.0, ge=0, description="Wait after choosing refresh")
    after_switch_back: float = Field(default=1.0, ge=0, description="Wait after switching back to the previous window")


class RefreshConfig(BaseModel):
    """Main configuration for the refresher."""

    model_config = ConfigDict(frozen=True)

    interval: PositiveInt = Field(default=15, description="Minutes between refresh attempts")
    settle_delay: float = Field(default=5.0, ge=0, description="Seconds to wait before the first attempt")

    pointer: PointerTarget = Field(default_factory=PointerTarget)
    timing: SequenceTiming = Field(default_factory=SequenceTiming)

    show_desktop_keys: List[str] = Field(default_factory=lambda: ["win", "d"], min_length=1)
    refresh_keys: List[str] = Field(default_factory=lambda: ["r"], min_length=1)
    switch_back_keys: List[str] = Field(default_factory=lambda: ["alt", "tab"], min_length=1)

    @property
    def interval_seconds(self) -> int:
        """Refresh interval converted to seconds."""
        return self.interval * 60
