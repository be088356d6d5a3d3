"""Input state - keyboard gating, pointer capability, right-click passthrough."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass
class InputState:
    """State for input handling of one viewer."""
    keyboard_enabled: bool = False
    # Right button went down over the nav layer; nav ignores the pointer
    # until the context menu event arrives.
    nav_passthrough: bool = False
    restore_nav_pending: bool = False
    last_mouse: Tuple[float, float] = (0.0, 0.0)

    def enable_keyboard(self) -> None:
        self.keyboard_enabled = True

    def disable_keyboard(self) -> None:
        self.keyboard_enabled = False

    def begin_passthrough(self) -> None:
        self.nav_passthrough = True
        self.restore_nav_pending = False

    def end_passthrough(self) -> bool:
        """Context menu shown: schedule nav restore. Returns True if one was pending."""
        if not self.nav_passthrough:
            return False
        self.restore_nav_pending = True
        return True

    def finish_restore(self) -> None:
        self.nav_passthrough = False
        self.restore_nav_pending = False
