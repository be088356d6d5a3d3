"""Viewer - orchestrates album navigation, layout and transitions.

A Lightbox instance moves through CLOSED -> OPENING -> OPEN -> CLOSING ->
CLOSED. All work happens on the caller's thread; the only suspension points
are image loads (callback from the ImageSource) and tween chains (callback
from Effects).
"""

from __future__ import annotations
from enum import Enum, auto
from typing import Dict, Iterator, List, Optional, Sequence

from .types import AlbumEntry, Box, Dimension, ImageInfo, LoadPriority
from .options import ViewerOptions
from .state import GalleryState, InputState
from .effects import Effects
from .markup import build_nodes, ViewerNodes
from .host import Host, HeadlessHost
from .loader import ImageSource, ImmediateLoader
from .album import Link, collect_album
from .commands import command_for_key, command_for_click
from .view_math import fit_image_size, container_size, frame_position
from .errors import UnsupportedInputError
from .config import (
    ANIM_FAST_MS, ANIM_SLOW_MS, CONTAINER_PADDING, IMAGE_BORDER,
    MOUSE_LEFT, MOUSE_RIGHT,
)
from .logging import log


class ViewerPhase(Enum):
    CLOSED = auto()
    OPENING = auto()
    OPEN = auto()
    CLOSING = auto()


# Hidden at the start of every image change
_DEPENDENT_NODES = ("image", "nav", "prev", "next", "data_container", "number", "caption")
_NAV_TARGETS = frozenset({"lb-nav", "lb-prev", "lb-next"})


class Lightbox:
    """One modal gallery viewer."""

    def __init__(
        self,
        options: Optional[ViewerOptions] = None,
        host: Optional[Host] = None,
        loader: Optional[ImageSource] = None,
        effects: Optional[Effects] = None,
        padding: Box = Box.uniform(CONTAINER_PADDING),
        border: Box = Box.uniform(IMAGE_BORDER),
    ):
        self.options = options if options is not None else ViewerOptions()
        self.host = host if host is not None else HeadlessHost()
        self.loader = loader if loader is not None else ImmediateLoader()
        self.effects = effects if effects is not None else Effects()
        self.padding = padding
        self.border = border

        self.state = GalleryState()
        self.input = InputState()
        self.nodes: ViewerNodes = build_nodes(self.state, self.options, self.effects)

        self.phase = ViewerPhase.CLOSED
        self.current_image: Optional[ImageInfo] = None
        self.prefetched: Dict[str, ImageInfo] = {}
        self.last_error: Optional[Exception] = None
        self._transition = False
        self._generation = 0
        self._resize_listener = self.size_overlay

    def __repr__(self) -> str:
        return (f"Lightbox(phase={self.phase.name}, index={self.state.current_index}, "
                f"album={self.state.count})")

    # ── status ─────────────────────────────────────────────────────────────

    @property
    def is_open(self) -> bool:
        """Album open (including while the first image is still loading)."""
        return self.phase in (ViewerPhase.OPENING, ViewerPhase.OPEN)

    @property
    def is_active(self) -> bool:
        return self.phase is not ViewerPhase.CLOSED

    @property
    def in_transition(self) -> bool:
        return self._transition

    # ── opening ────────────────────────────────────────────────────────────

    def start(self, links: Sequence[Link], activated: Link) -> int:
        """Open the album the activated link belongs to."""
        entries, index = collect_album(links, activated)
        return self.open_album(entries, entries[index])

    def open_album(self, entries: Sequence[AlbumEntry], selected: Optional[AlbumEntry] = None) -> int:
        """Open an album at the selected entry. Returns the starting index.

        Raises:
            InvalidAlbumError: if entries is empty; the viewer is left as it was.
        """
        index = self.state.open_album(entries, selected)

        if self.phase is ViewerPhase.CLOSING:
            # Reopened mid-close: drop the fade-outs and start clean
            for node in (self.nodes.frame, self.nodes.overlay):
                node.hide_now()

        self._generation += 1
        self._transition = False
        self.current_image = None
        self.prefetched.clear()
        self.last_error = None
        self.phase = ViewerPhase.OPENING
        log(f"[VIEWER] Opening album of {self.state.count} at index {index}")

        self.host.add_resize_listener(self._resize_listener)
        self.host.set_embeds_hidden(True)
        self.size_overlay()

        scroll_x, scroll_y = self.host.scroll_offset()
        top, left = frame_position(scroll_x, scroll_y, self.options.position_from_top)
        self.nodes.frame.element.top = top
        self.nodes.frame.element.left = left
        if not self.nodes.frame.visible:
            self.nodes.frame.show(self.options.fade_duration)

        if self.options.disable_scrolling:
            self.host.set_scrolling_disabled(True)

        self._probe_hover()
        self.change_image(index)
        return index

    def _probe_hover(self) -> None:
        try:
            if self.host.probe_hover() and self.state.mark_hover_capable():
                log("[INPUT] Host reports a hover-capable pointer")
        except UnsupportedInputError as e:
            log(f"[INPUT] Hover probe unsupported: {e}")

    # ── image changes ──────────────────────────────────────────────────────

    def change_image(self, index: int) -> bool:
        """Start the transition to album entry index.

        Returns False (and does nothing) while another transition is in
        flight, when the viewer is not open, or when index is out of range.
        """
        if not self.is_open:
            log(f"[VIEWER] change_image({index}) ignored: viewer {self.phase.name}")
            return False
        if self._transition:
            log(f"[VIEWER] change_image({index}) ignored: transition in flight")
            return False
        if not 0 <= index < self.state.count:
            log(f"[VIEWER][ERR] change_image({index}) out of range 0..{self.state.count - 1}")
            return False

        self._transition = True
        self.input.disable_keyboard()

        n = self.nodes
        if not n.overlay.visible:
            n.overlay.show(self.options.fade_duration)
        n.loader.show(ANIM_SLOW_MS)
        for name in _DEPENDENT_NODES:
            getattr(n, name).hide_now()
        n.outer_container.element.add_class("animating")

        self.state.go_to(index)
        entry = self.state.current_entry
        generation = self._generation
        log(f"[VIEWER] Loading {index + 1}/{self.state.count}: {entry.href}")

        def on_loaded(href: str, info: Optional[ImageInfo], error: Optional[Exception]) -> None:
            self._on_image_loaded(generation, info, error)

        self.loader.submit(entry.href, LoadPriority.CURRENT, on_loaded)
        return True

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation or not self.is_open

    def _on_image_loaded(self, generation: int, info: Optional[ImageInfo],
                         error: Optional[Exception]) -> None:
        if self._is_stale(generation):
            log("[VIEWER] Discarding stale image load")
            return
        if error is not None:
            # Loader stays up; the user can still close via loader/close/overlay
            self.last_error = error
            log(f"[VIEWER][ERR] {error}")
            return

        self.current_image = info
        self.nodes.image.update()

        size = fit_image_size(
            info.size,
            self.host.viewport(),
            self.options.max_width,
            self.options.max_height,
            self.padding,
            self.border,
            fit_enabled=self.options.fit_images_in_viewport,
        )
        log(f"[LAYOUT] {info.width}x{info.height} -> {size.width:.0f}x{size.height:.0f}")
        self.nodes.image.set_size(size.width, size.height)
        self.size_container(generation, size)

    def size_container(self, generation: int, image_size: Dimension) -> None:
        """Resize the outer container around the image, animated if it changes."""
        outer = self.nodes.outer_container
        new_size = container_size(image_size, self.padding, self.border)
        if outer.dimension != new_size:
            self.effects.resize(outer, new_size, self.options.resize_duration,
                                lambda: self._post_resize(generation, new_size))
        else:
            self._post_resize(generation, new_size)

    def _post_resize(self, generation: int, size: Dimension) -> None:
        if self._is_stale(generation):
            return
        self.nodes.data_container.set_width(size.width)
        self.nodes.prev.set_height(size.height)
        self.nodes.next.set_height(size.height)
        self.show_image()

    def show_image(self) -> None:
        """Reveal the loaded image and its chrome, then accept input again."""
        n = self.nodes
        n.loader.hide_now()
        n.image.show(self.options.image_fade_duration)

        self.update_nav()
        self.update_details()
        self.preload_neighboring_images()

        self.input.enable_keyboard()
        self._transition = False
        if self.phase is ViewerPhase.OPENING:
            self.phase = ViewerPhase.OPEN
            log("[VIEWER] Open")

    def update_nav(self) -> None:
        self.nodes.nav.show_now()
        self.nodes.prev.render()
        self.nodes.next.render()

    def update_details(self) -> None:
        n = self.nodes
        entry = self.state.current_entry
        if entry is not None and entry.title:
            n.caption.update()
            n.caption.show(ANIM_FAST_MS)

        if self.state.count > 1 and self.options.show_image_number_label:
            n.number.update()
            n.number.show(ANIM_FAST_MS)
        else:
            n.number.hide_now()

        n.outer_container.element.remove_class("animating")
        n.data_container.show(self.options.resize_duration, self.size_overlay)

    def preload_neighboring_images(self) -> None:
        """Fire-and-forget loads of the entries next to the current one."""
        for idx in self.state.neighbors():
            href = self.state.album[idx].href
            if href not in self.prefetched:
                self.loader.submit(href, LoadPriority.NEIGHBOR, self._on_prefetched)

    def _on_prefetched(self, href: str, info: Optional[ImageInfo], error: Optional[Exception]) -> None:
        if error is not None:
            log(f"[PRELOAD][ERR] {error}")
            return
        if any(entry.href == href for entry in self.state.album):
            self.prefetched[href] = info

    # ── navigation ─────────────────────────────────────────────────────────

    def next(self) -> bool:
        """Advance one entry; wraps to the first only with wrap_around."""
        count = self.state.count
        if count == 0:
            return False
        if not self.state.is_last():
            return self.change_image(self.state.current_index + 1)
        if self.options.wrap_around and count > 1:
            return self.change_image(0)
        return False

    def previous(self) -> bool:
        """Go back one entry; wraps to the last only with wrap_around."""
        count = self.state.count
        if count == 0:
            return False
        if not self.state.is_first():
            return self.change_image(self.state.current_index - 1)
        if self.options.wrap_around and count > 1:
            return self.change_image(count - 1)
        return False

    # ── closing ────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Fade the viewer out and release host resources."""
        if self.phase in (ViewerPhase.CLOSED, ViewerPhase.CLOSING):
            return
        log("[VIEWER] Closing")
        self._generation += 1
        self._transition = False
        self.input.disable_keyboard()
        self.host.remove_resize_listener(self._resize_listener)
        self.phase = ViewerPhase.CLOSING

        remaining = [2]

        def faded() -> None:
            remaining[0] -= 1
            if remaining[0] == 0:
                self._finish_close()

        self.nodes.frame.hide(self.options.fade_duration, faded)
        self.nodes.overlay.hide(self.options.fade_duration, faded)

        self.host.set_embeds_hidden(False)
        if self.options.disable_scrolling:
            self.host.set_scrolling_disabled(False)

    def _finish_close(self) -> None:
        if self.phase is not ViewerPhase.CLOSING:
            return
        self.effects.stop(self.nodes.loader)
        self.effects.stop(self.nodes.outer_container)
        self.state.clear()
        self.current_image = None
        self.prefetched.clear()
        self.phase = ViewerPhase.CLOSED
        log("[VIEWER] Closed")

    # ── host events ────────────────────────────────────────────────────────

    def size_overlay(self) -> None:
        """Stretch the overlay over the whole document."""
        doc = self.host.document_size()
        self.nodes.overlay.set_size(doc.width, doc.height)

    def handle_key(self, key: str) -> bool:
        """Keyboard navigation. Ignored while a transition is running."""
        if not self.input.keyboard_enabled:
            return False
        command = command_for_key(self.options.key_bindings, key)
        if command is None:
            return False
        return command.execute(self)

    def handle_click(self, target: str, button: int = MOUSE_LEFT) -> bool:
        """Mouse button pressed on the element with class name target."""
        if button == MOUSE_RIGHT and target in _NAV_TARGETS:
            if not self.options.enable_right_click:
                return False
            # Let the upcoming context menu reach the image under the nav layer
            self.input.begin_passthrough()
            self.nodes.nav.element.pointer_events = False
            return True
        command = command_for_click(target, button)
        if command is None:
            return False
        return command.execute(self)

    def handle_context_menu(self) -> None:
        if self.input.end_passthrough():
            self.effects.frames.request(self._restore_nav_pointer)

    def _restore_nav_pointer(self) -> None:
        self.nodes.nav.element.pointer_events = True
        self.input.finish_restore()

    def handle_pointer_move(self, x: float, y: float) -> None:
        self.input.last_mouse = (x, y)
        if self.state.mark_hover_capable():
            log("[INPUT] Pointer hover detected")
            if self.phase is ViewerPhase.OPEN and not self._transition:
                self.nodes.prev.render()
                self.nodes.next.render()


class ViewerRegistry:
    """Host-owned collection of viewers, for closing them all at once."""

    def __init__(self):
        self._viewers: List[Lightbox] = []

    def add(self, viewer: Lightbox) -> Lightbox:
        if viewer not in self._viewers:
            self._viewers.append(viewer)
        return viewer

    def remove(self, viewer: Lightbox) -> None:
        if viewer in self._viewers:
            self._viewers.remove(viewer)

    def __iter__(self) -> Iterator[Lightbox]:
        return iter(list(self._viewers))

    def __len__(self) -> int:
        return len(self._viewers)

    def __contains__(self, viewer: object) -> bool:
        return viewer in self._viewers

    def active(self) -> List[Lightbox]:
        return [v for v in self._viewers if v.is_active]

    def close_all(self) -> int:
        """Close every open viewer. Returns how many were closed."""
        closed = 0
        for viewer in list(self._viewers):
            if viewer.is_open:
                viewer.close()
                closed += 1
        log(f"[REGISTRY] Closed {closed} viewer(s)")
        return closed
