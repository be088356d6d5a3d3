"""Command Pattern for input handling.

Commands encapsulate actions that can be triggered by various inputs.
Each command has an execute() method and optional can_execute() for guards.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .viewer import Lightbox

from .options import KeyBindings
from .config import MOUSE_LEFT
from .logging import log


class Command(ABC):
    """Base class for all commands."""

    @abstractmethod
    def execute(self, viewer: "Lightbox") -> bool:
        """Execute the command. Returns True if action was taken."""
        pass

    def can_execute(self, viewer: "Lightbox") -> bool:
        """Check if command can be executed. Override for guards."""
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Navigation Commands
# ═══════════════════════════════════════════════════════════════════════════

class NavigateNext(Command):
    """Navigate to next image."""

    def can_execute(self, viewer: "Lightbox") -> bool:
        return viewer.is_open and not viewer.in_transition

    def execute(self, viewer: "Lightbox") -> bool:
        if not self.can_execute(viewer):
            return False
        log(f"[CMD] NavigateNext from {viewer.state.current_index}")
        return viewer.next()


class NavigatePrev(Command):
    """Navigate to previous image."""

    def can_execute(self, viewer: "Lightbox") -> bool:
        return viewer.is_open and not viewer.in_transition

    def execute(self, viewer: "Lightbox") -> bool:
        if not self.can_execute(viewer):
            return False
        log(f"[CMD] NavigatePrev from {viewer.state.current_index}")
        return viewer.previous()


class OpenCaptionLink(Command):
    """Follow the first link of a rich caption."""

    def can_execute(self, viewer: "Lightbox") -> bool:
        return viewer.is_open and viewer.nodes.caption.visible and bool(viewer.nodes.caption.element.links)

    def execute(self, viewer: "Lightbox") -> bool:
        if not self.can_execute(viewer):
            return False
        link = viewer.nodes.caption.element.links[0]
        href = link.get("href")
        if not href:
            return False
        log(f"[CMD] OpenCaptionLink: {href}")
        viewer.host.open_link(href, link.get("target") or None)
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Viewer Control Commands
# ═══════════════════════════════════════════════════════════════════════════

class CloseViewer(Command):
    """Close the viewer."""

    def can_execute(self, viewer: "Lightbox") -> bool:
        return viewer.is_active

    def execute(self, viewer: "Lightbox") -> bool:
        if not self.can_execute(viewer):
            return False
        log("[CMD] CloseViewer")
        viewer.close()
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Input mapping
# ═══════════════════════════════════════════════════════════════════════════

_KEY_COMMANDS = {
    "next": NavigateNext,
    "previous": NavigatePrev,
    "close": CloseViewer,
}

# Click targets that close the viewer
CLOSE_TARGETS = frozenset({"lb-overlay", "lb", "lb-loader", "lb-cancel", "lb-close"})


def command_for_key(bindings: KeyBindings, key: str) -> Optional[Command]:
    """Command bound to a key name, or None."""
    action = bindings.action_for(key)
    if action is None:
        return None
    return _KEY_COMMANDS[action]()


def command_for_click(target: str, button: int = MOUSE_LEFT) -> Optional[Command]:
    """Command for a click on the element with class name target."""
    if button != MOUSE_LEFT:
        return None
    if target == "lb-prev":
        return NavigatePrev()
    if target == "lb-next":
        return NavigateNext()
    if target == "lb-caption":
        return OpenCaptionLink()
    if target in CLOSE_TARGETS:
        return CloseViewer()
    return None
