"""Host interface - viewport metrics and page affordances the viewer relies on."""

from __future__ import annotations
from typing import Callable, List, Optional, Protocol, Tuple

from .types import Dimension
from .state import WindowState
from .logging import log


ResizeListener = Callable[[], None]


class Host(Protocol):
    """What the viewer needs from the surface it is shown on."""

    def viewport(self) -> Dimension: ...
    def document_size(self) -> Dimension: ...
    def scroll_offset(self) -> Tuple[float, float]: ...
    def add_resize_listener(self, listener: ResizeListener) -> None: ...
    def remove_resize_listener(self, listener: ResizeListener) -> None: ...
    def set_scrolling_disabled(self, disabled: bool) -> None: ...
    def set_embeds_hidden(self, hidden: bool) -> None: ...
    def probe_hover(self) -> bool: ...
    def open_link(self, href: str, target: Optional[str] = None) -> None: ...


class HeadlessHost:
    """In-memory host backed by a WindowState. Used for embedding without a window."""

    def __init__(self, window: Optional[WindowState] = None):
        self.window = window if window is not None else WindowState(screen_w=1024, screen_h=768)
        self.listeners: List[ResizeListener] = []
        self.scrolling_disabled = False
        self.embeds_hidden = False
        self.hover_capable = False
        self.opened_links: List[Tuple[str, Optional[str]]] = []

    def viewport(self) -> Dimension:
        return self.window.viewport

    def document_size(self) -> Dimension:
        return self.window.document

    def scroll_offset(self) -> Tuple[float, float]:
        return self.window.scroll

    def add_resize_listener(self, listener: ResizeListener) -> None:
        if listener not in self.listeners:
            self.listeners.append(listener)

    def remove_resize_listener(self, listener: ResizeListener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    def set_scrolling_disabled(self, disabled: bool) -> None:
        self.scrolling_disabled = disabled

    def set_embeds_hidden(self, hidden: bool) -> None:
        self.embeds_hidden = hidden

    def probe_hover(self) -> bool:
        return self.hover_capable

    def open_link(self, href: str, target: Optional[str] = None) -> None:
        self.opened_links.append((href, target))

    def resize(self, width: int, height: int) -> None:
        """Change the viewport size and notify listeners."""
        if self.window.resize(width, height):
            log(f"[HOST] Resized to {width}x{height}")
            for listener in list(self.listeners):
                listener()
