"""Renderer - draws the viewer's element tree with raylib.

The Renderer only reads the element tree; it never changes viewer state.
Textures are cached by href and released once they leave the album window
(current image plus prefetched neighbors).
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional, Set, Tuple

if TYPE_CHECKING:
    from .viewer import Lightbox

from .rl_compat import (
    rl,
    make_rect as RL_Rect, make_vec2 as RL_V2, make_color as RL_Color,
    draw_text as RL_DrawText, measure_text as RL_MeasureText,
    load_texture, is_texture_valid,
)
from .layout import Layout, Rect, compute_layout, element_alpha
from .config import (
    OVERLAY_COLOR, FRAME_COLOR, IMAGE_BORDER,
    CLOSE_BTN_RADIUS, NAV_ARROW_SIZE, LOADER_RADIUS,
    CAPTION_FONT_SIZE, NUMBER_FONT_SIZE,
)
from .logging import log, now


@dataclass
class Renderer:
    """
    Draws one viewer per frame.

    Usage:
        renderer = Renderer()
        renderer.begin_frame()
        layout = renderer.draw_viewer(viewer, mouse)
        renderer.end_frame()
    """

    textures: Dict[str, Any] = field(default_factory=dict)
    last_layout: Layout = field(default_factory=dict)
    failed: Set[str] = field(default_factory=set)

    def begin_frame(self) -> None:
        rl.BeginDrawing()
        rl.ClearBackground(RL_Color(24, 24, 24, 255))

    def end_frame(self) -> None:
        rl.EndDrawing()

    # ═══════════════════════════════════════════════════════════════════════
    # Textures
    # ═══════════════════════════════════════════════════════════════════════

    def texture_for(self, href: str) -> Optional[Any]:
        """Cached texture for href, loading it on first use."""
        tex = self.textures.get(href)
        if tex is None:
            if href in self.failed:
                return None
            tex = load_texture(href)
            if not is_texture_valid(tex):
                self.failed.add(href)
                log(f"[RENDER][ERR] Failed to load texture: {href}")
                return None
            self.textures[href] = tex
            log(f"[RENDER] Texture loaded: {href} ({tex.width}x{tex.height})")
        return tex

    def sync_textures(self, viewer: "Lightbox") -> None:
        """Upload prefetched neighbors and release textures no longer needed."""
        keep = set(viewer.prefetched)
        entry = viewer.state.current_entry
        if entry is not None:
            keep.add(entry.href)
        for href in list(self.textures):
            if href not in keep:
                rl.UnloadTexture(self.textures.pop(href))
        for href in viewer.prefetched:
            if href not in self.textures:
                self.texture_for(href)

    def unload_all(self) -> None:
        for tex in self.textures.values():
            try:
                rl.UnloadTexture(tex)
            except Exception as e:
                log(f"[RENDER][ERR] UnloadTexture: {e!r}")
        self.textures.clear()

    # ═══════════════════════════════════════════════════════════════════════
    # Viewer
    # ═══════════════════════════════════════════════════════════════════════

    def draw_viewer(self, viewer: "Lightbox", mouse: Tuple[float, float]) -> Layout:
        """Draw every rendered element. Returns the layout used."""
        layout = compute_layout(viewer.nodes, viewer.host.viewport(), viewer.host.scroll_offset())
        self.last_layout = layout
        if not viewer.is_active:
            return layout

        self.sync_textures(viewer)
        n = viewer.nodes
        self.draw_overlay(n.overlay.element, layout["lb-overlay"])
        if not n.frame.element.is_rendered:
            return layout

        self.draw_image(n.image.element, layout["lb-image"])
        for node in (n.prev, n.next):
            el = node.element
            rect = layout[el.class_name]
            if el.is_rendered:
                hovered = rect.contains(*mouse) and n.nav.element.pointer_events
                self.draw_nav_link(el, rect, node is n.prev, element_alpha(el, hovered))
        self.draw_loader(n.loader.element, layout["lb-loader"])
        self.draw_error(viewer)
        self.draw_details(viewer, layout)
        return layout

    def draw_overlay(self, el, rect: Rect) -> None:
        if not el.is_rendered:
            return
        r, g, b = OVERLAY_COLOR
        alpha = element_alpha(el)
        rl.DrawRectangle(int(rect.x), int(rect.y), int(rect.w), int(rect.h),
                         RL_Color(r, g, b, int(255 * alpha)))

    def draw_image(self, el, rect: Rect) -> None:
        if not el.is_rendered or rect.w <= 0 or rect.h <= 0:
            return
        href = el.attrs.get("src")
        tex = self.texture_for(href) if href else None
        if tex is None:
            return
        alpha = element_alpha(el)
        r, g, b = FRAME_COLOR
        rl.DrawRectangle(int(rect.x - IMAGE_BORDER), int(rect.y - IMAGE_BORDER),
                         int(rect.w + IMAGE_BORDER * 2), int(rect.h + IMAGE_BORDER * 2),
                         RL_Color(r, g, b, int(255 * alpha)))
        rl.DrawTexturePro(
            tex,
            RL_Rect(0, 0, tex.width, tex.height),
            RL_Rect(rect.x, rect.y, rect.w, rect.h),
            RL_V2(0, 0), 0.0, RL_Color(255, 255, 255, int(255 * alpha)),
        )

    def draw_nav_link(self, el, rect: Rect, is_prev: bool, alpha: float) -> None:
        if alpha <= 0.01:
            return
        cx = rect.x + (NAV_ARROW_SIZE * 1.5 if is_prev else rect.w - NAV_ARROW_SIZE * 1.5)
        cy = rect.y + rect.h / 2.0
        color = RL_Color(255, 255, 255, int(255 * alpha))
        bg = RL_Color(0, 0, 0, int(140 * alpha))
        rl.DrawCircle(int(cx), int(cy), NAV_ARROW_SIZE, bg)
        d = 1 if is_prev else -1
        size = NAV_ARROW_SIZE * 0.7
        points = [
            RL_V2(cx + d * size * 0.4, cy - size * 0.6),
            RL_V2(cx - d * size * 0.4, cy),
            RL_V2(cx + d * size * 0.4, cy + size * 0.6),
        ]
        rl.DrawLineEx(points[0], points[1], 2.5, color)
        rl.DrawLineEx(points[1], points[2], 2.5, color)

    def draw_loader(self, el, rect: Rect) -> None:
        """Spinning arc while the current image loads."""
        if not el.is_rendered:
            return
        alpha = element_alpha(el)
        cx, cy = rect.center
        thickness = 4
        angle = (now() * 2.5 * 360.0) % 360.0
        rl.DrawRing(RL_V2(cx, cy), LOADER_RADIUS - thickness, LOADER_RADIUS,
                    angle, angle + 90, 32, RL_Color(255, 255, 255, int(220 * alpha)))

    def draw_details(self, viewer: "Lightbox", layout: Layout) -> None:
        n = viewer.nodes
        data = n.data_container.element
        if not data.is_rendered:
            return

        caption = n.caption.element
        if caption.is_rendered and caption.text:
            rect = layout["lb-caption"]
            text = self._fit_text(caption.text.replace("\n", " "), CAPTION_FONT_SIZE, rect.w)
            RL_DrawText(text, rect.x, rect.y, CAPTION_FONT_SIZE,
                        RL_Color(255, 255, 255, int(255 * element_alpha(caption))))

        number = n.number.element
        if number.is_rendered and number.text:
            rect = layout["lb-number"]
            RL_DrawText(number.text, rect.x, rect.y, NUMBER_FONT_SIZE,
                        RL_Color(190, 190, 190, int(255 * element_alpha(number))))

        close = n.close.element
        if close.is_rendered:
            self.draw_close_button(layout["lb-close"], element_alpha(close))

    def draw_close_button(self, rect: Rect, alpha: float) -> None:
        if alpha < 0.01:
            return
        cx, cy = rect.center
        color = RL_Color(255, 255, 255, int(255 * alpha))
        rl.DrawCircleLines(int(cx), int(cy), CLOSE_BTN_RADIUS, color)
        cross = CLOSE_BTN_RADIUS * 0.5
        rl.DrawLineEx(RL_V2(cx - cross, cy - cross), RL_V2(cx + cross, cy + cross), 2.0, color)
        rl.DrawLineEx(RL_V2(cx + cross, cy - cross), RL_V2(cx - cross, cy + cross), 2.0, color)

    def draw_error(self, viewer: "Lightbox") -> None:
        """Load failure message under the loader."""
        if viewer.last_error is None or not viewer.nodes.loader.element.is_rendered:
            return
        text = str(viewer.last_error)
        rect = self.last_layout.get("lb-loader")
        if rect is None:
            return
        width = RL_MeasureText(text, NUMBER_FONT_SIZE)
        cx, cy = rect.center
        RL_DrawText(text, cx - width // 2, cy + LOADER_RADIUS + 12, NUMBER_FONT_SIZE,
                    RL_Color(255, 120, 120, 230))

    @staticmethod
    def _fit_text(text: str, size: int, max_w: float) -> str:
        if max_w <= 0 or RL_MeasureText(text, size) <= max_w:
            return text
        ellipsis = "..."
        lo, hi = 0, len(text)
        while lo < hi:
            mid = math.ceil((lo + hi) / 2)
            if RL_MeasureText(text[:mid] + ellipsis, size) <= max_w:
                lo = mid
            else:
                hi = mid - 1
        return text[:lo] + ellipsis

