"""Application - raylib window and main loop around one Lightbox viewer.

Each frame:
- input is polled and forwarded to the viewer (via InputHandler)
- finished image loads are delivered on the main thread
- pending animation ticks run
- the element tree is drawn (via Renderer)
"""

from __future__ import annotations
import argparse
import os
import sys
import traceback
import webbrowser
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .rl_compat import rl, init_window
from .renderer import Renderer
from .input_handler import InputHandler
from .viewer import Lightbox, ViewerRegistry
from .options import ViewerOptions
from .effects import Effects, FrameCallbacks
from .loader import AsyncImageLoader
from .album import links_from_directory, find_link
from .host import ResizeListener
from .state import WindowState
from .types import Dimension
from .errors import LightboxError, UnsupportedInputError
from .config import TARGET_FPS, WINDOW_TITLE, WINDOW_WIDTH, WINDOW_HEIGHT
from .logging import log, increment_frame


class WindowHost:
    """Host backed by the raylib window. The window is the whole document."""

    def __init__(self):
        self.window = WindowState(rl.GetScreenWidth(), rl.GetScreenHeight())
        self.listeners: List[ResizeListener] = []
        self.scrolling_disabled = False
        self.embeds_hidden = False

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
        # Nothing scrolls inside the window
        self.scrolling_disabled = disabled

    def set_embeds_hidden(self, hidden: bool) -> None:
        self.embeds_hidden = hidden

    def probe_hover(self) -> bool:
        if not rl.IsWindowReady():
            raise UnsupportedInputError("window not ready for pointer queries")
        return rl.IsCursorOnScreen()

    def open_link(self, href: str, target: Optional[str] = None) -> None:
        """Open href in the system browser, in a new tab when a target is set."""
        log(f"[HOST] Opening link {href} target={target}")
        webbrowser.open(href, new=2 if target else 0)

    def poll_resize(self) -> None:
        """Notify listeners if the window size changed since last frame."""
        if self.window.resize(rl.GetScreenWidth(), rl.GetScreenHeight()):
            log(f"[HOST] Window resized to {self.window.screen_w}x{self.window.screen_h}")
            for listener in list(self.listeners):
                listener()


@dataclass
class Application:
    """
    Main application orchestrator.

    Usage:
        app = Application(options)
        if app.initialize(path):
            app.run()
    """

    options: ViewerOptions = field(default_factory=ViewerOptions)
    renderer: Renderer = field(default_factory=Renderer)
    input_handler: InputHandler = field(default_factory=InputHandler)
    registry: ViewerRegistry = field(default_factory=ViewerRegistry)
    frames: FrameCallbacks = field(default_factory=FrameCallbacks)
    host: Optional[WindowHost] = None
    loader: Optional[AsyncImageLoader] = None
    viewer: Optional[Lightbox] = None
    running: bool = False

    def initialize(self, start_path: str) -> bool:
        """Create the window and open the album containing start_path."""
        log("[INIT] Creating window")
        flags = getattr(rl, 'FLAG_WINDOW_RESIZABLE', 0) | getattr(rl, 'FLAG_WINDOW_ALWAYS_RUN', 0)
        rl.SetConfigFlags(flags)
        init_window(WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_TITLE)
        try:
            rl.SetExitKey(0)
        except Exception:
            pass
        rl.SetTargetFPS(TARGET_FPS)

        self.host = WindowHost()
        self.loader = AsyncImageLoader()
        self.viewer = self.registry.add(Lightbox(
            options=self.options,
            host=self.host,
            loader=self.loader,
            effects=Effects(self.frames),
        ))

        if os.path.isdir(start_path):
            dirpath, selected = start_path, None
        else:
            dirpath, selected = os.path.dirname(start_path) or os.getcwd(), start_path

        links = links_from_directory(dirpath)
        log(f"[DIR] Found {len(links)} images in {dirpath}")
        activated = find_link(links, selected) if selected else None
        if activated is None and links:
            activated = links[0]

        try:
            if activated is None:
                self.viewer.open_album([])
            else:
                self.viewer.start(links, activated)
        except LightboxError as e:
            log(f"[INIT][ERR] {e}")
            self._cleanup()
            return False
        return True

    def run(self) -> None:
        """Run frames until the window or the viewer closes."""
        self.running = True
        log("[APP] Starting main loop")
        try:
            while self.running:
                self._frame()
        except Exception as e:
            log(f"[APP][CRITICAL] Unhandled exception: {e!r}")
            log(f"[APP][CRITICAL] Traceback:\n{traceback.format_exc()}")
        finally:
            self._cleanup()

    def _frame(self) -> None:
        if rl.WindowShouldClose():
            self.registry.close_all()
            self.running = False
            return

        self.host.poll_resize()

        # 1. Input
        mouse = self.input_handler.poll(self.viewer, self.renderer.last_layout)

        # 2. Finished loads, then animation ticks
        try:
            self.loader.poll_ui_events()
            self.frames.run_frame()
        except Exception as e:
            log(f"[APP][UPDATE][ERR] {e!r}")

        # 3. Render
        self.renderer.begin_frame()
        self.renderer.draw_viewer(self.viewer, (mouse.x, mouse.y))
        self.renderer.end_frame()

        increment_frame()

        if not self.viewer.is_active:
            log("[APP] Viewer closed")
            self.running = False

    def _cleanup(self) -> None:
        log("[APP] Starting cleanup")
        if self.loader is not None:
            log("[APP] Shutting down async loader")
            self.loader.shutdown()
        self.renderer.unload_all()
        try:
            log("[APP] Closing window")
            rl.CloseWindow()
        except Exception as e:
            log(f"[APP][ERR] CloseWindow: {e!r}")
        log("[APP] Cleanup complete")

    def stop(self) -> None:
        self.running = False


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="lightbox", description="Browse the images of a folder in a lightbox.")
    p.add_argument("path", nargs="?", default=os.getcwd(),
                   help="image file or directory (default: current directory)")
    p.add_argument("--wrap-around", action="store_true", help="wrap from the last image to the first")
    p.add_argument("--max-width", type=int, default=None, help="upper bound on displayed width")
    p.add_argument("--max-height", type=int, default=None, help="upper bound on displayed height")
    p.add_argument("--no-fit", action="store_true", help="show images at natural size")
    p.add_argument("--no-number-label", action="store_true", help="hide the 'Image N of M' label")
    p.add_argument("--album-label", default=None, help="label template, %%1 = current, %%2 = total")
    p.add_argument("--fade-duration", type=int, default=None, help="overlay/frame fade (ms)")
    p.add_argument("--image-fade-duration", type=int, default=None, help="image fade-in (ms)")
    p.add_argument("--resize-duration", type=int, default=None, help="container resize (ms)")
    p.add_argument("--position-from-top", type=int, default=None, help="frame offset from the top (px)")
    p.add_argument("--sanitize-title", action="store_true", help="treat captions as plain text")
    p.add_argument("--always-show-nav", action="store_true", help="keep nav arrows fully visible")
    return p


def options_from_args(args: argparse.Namespace) -> ViewerOptions:
    """ViewerOptions from parsed command-line arguments."""
    overrides = {
        "wrap_around": args.wrap_around,
        "max_width": args.max_width,
        "max_height": args.max_height,
        "fit_images_in_viewport": not args.no_fit,
        "show_image_number_label": not args.no_number_label,
        "sanitize_title": args.sanitize_title,
        "always_show_nav_on_touch_devices": args.always_show_nav,
    }
    for name in ("album_label", "fade_duration", "image_fade_duration",
                 "resize_duration", "position_from_top"):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    return ViewerOptions().with_overrides(**overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    log("[MAIN] Starting application")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = options_from_args(args)
    except LightboxError as e:
        parser.error(str(e))

    start_path = os.path.abspath(args.path)
    if not os.path.exists(start_path):
        parser.error(f"no such file or directory: {args.path}")

    app = Application(options=options)
    if not app.initialize(start_path):
        return 1
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
