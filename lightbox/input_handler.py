"""Input Handler - maps raylib input events to viewer input handlers.

Polls keyboard and mouse once per frame, hit-tests the pointer against the
last drawn layout and forwards key names and click targets to the viewer,
which turns them into commands.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .viewer import Lightbox

from .rl_compat import rl, KEY_NAMES
from .layout import Layout, hit_test
from .config import MOUSE_LEFT, MOUSE_RIGHT


@dataclass
class MouseState:
    """Current mouse state snapshot."""
    x: float = 0.0
    y: float = 0.0
    dx: float = 0.0
    dy: float = 0.0
    left_pressed: bool = False
    right_pressed: bool = False
    right_released: bool = False


@dataclass
class InputHandler:
    """Feeds one frame of raylib input to a viewer."""

    _last_x: float = -1.0
    _last_y: float = -1.0

    def poll_mouse(self) -> MouseState:
        pos = rl.GetMousePosition()
        x, y = float(pos.x), float(pos.y)
        moved = self._last_x >= 0 and (x, y) != (self._last_x, self._last_y)
        dx = x - self._last_x if moved else 0.0
        dy = y - self._last_y if moved else 0.0
        self._last_x, self._last_y = x, y
        return MouseState(
            x=x, y=y, dx=dx, dy=dy,
            left_pressed=rl.IsMouseButtonPressed(rl.MOUSE_BUTTON_LEFT),
            right_pressed=rl.IsMouseButtonPressed(rl.MOUSE_BUTTON_RIGHT),
            right_released=rl.IsMouseButtonReleased(rl.MOUSE_BUTTON_RIGHT),
        )

    def poll_keys(self) -> List[str]:
        """Names of keys pressed this frame, in press order."""
        keys: List[str] = []
        while True:
            code = rl.GetKeyPressed()
            if not code:
                break
            name = KEY_NAMES.get(code)
            if name is not None:
                keys.append(name)
        return keys

    def poll(self, viewer: "Lightbox", layout: Layout) -> MouseState:
        """Dispatch this frame's input to the viewer. Returns the mouse snapshot."""
        mouse = self.poll_mouse()

        if mouse.dx or mouse.dy:
            viewer.handle_pointer_move(mouse.x, mouse.y)

        for key in self.poll_keys():
            viewer.handle_key(key)

        target: Optional[str] = None
        if mouse.left_pressed or mouse.right_pressed:
            target = hit_test(viewer.nodes, layout, mouse.x, mouse.y)

        if mouse.left_pressed and target:
            viewer.handle_click(target, MOUSE_LEFT)
        if mouse.right_pressed and target:
            viewer.handle_click(target, MOUSE_RIGHT)
        if mouse.right_released:
            viewer.handle_context_menu()
        return mouse

