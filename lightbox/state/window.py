"""Window state - viewport metrics snapshot."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from ..types import Dimension


@dataclass
class WindowState:
    """Viewport and document metrics as last reported by the host."""
    screen_w: int = 0
    screen_h: int = 0
    doc_w: int = 0
    doc_h: int = 0
    scroll_x: float = 0.0
    scroll_y: float = 0.0

    @property
    def viewport(self) -> Dimension:
        return Dimension(self.screen_w, self.screen_h)

    @property
    def document(self) -> Dimension:
        """Document size; never smaller than the viewport."""
        return Dimension(max(self.doc_w, self.screen_w), max(self.doc_h, self.screen_h))

    @property
    def scroll(self) -> Tuple[float, float]:
        return (self.scroll_x, self.scroll_y)

    def resize(self, width: int, height: int) -> bool:
        """Update viewport size. Returns True if it changed."""
        changed = (width, height) != (self.screen_w, self.screen_h)
        self.screen_w, self.screen_h = width, height
        return changed
