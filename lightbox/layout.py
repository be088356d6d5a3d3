"""Screen layout of the element tree and pointer hit-testing.

Pure geometry: the renderer draws these rectangles and the input handler
hit-tests against them, so both agree on where each element is.
"""

from __future__ import annotations
from typing import Dict, NamedTuple, Optional, Tuple

from .types import Dimension
from .elements import Element
from .markup import ViewerNodes
from .math_utils import point_in_rect
from .config import (
    CONTAINER_PADDING, IMAGE_BORDER, DATA_CONTAINER_HEIGHT,
    CLOSE_BTN_RADIUS, LOADER_RADIUS, CAPTION_FONT_SIZE,
    NAV_LINK_HOVER_OPACITY,
)

# Share of the container covered by each nav link
PREV_LINK_FRAC = 0.34
NEXT_LINK_FRAC = 0.64


class Rect(NamedTuple):
    x: float
    y: float
    w: float
    h: float

    def contains(self, px: float, py: float) -> bool:
        return self.w > 0 and self.h > 0 and point_in_rect(px, py, self.x, self.y, self.w, self.h)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.w / 2.0, self.y + self.h / 2.0)


Layout = Dict[str, Rect]


def _size(el: Element) -> Tuple[float, float]:
    return (el.width or 0.0, el.height or 0.0)


def compute_layout(nodes: ViewerNodes, viewport: Dimension,
                   scroll: Tuple[float, float] = (0.0, 0.0)) -> Layout:
    """Screen rectangle of every element, keyed by class name."""
    vw = viewport.width
    sx, sy = scroll
    rects: Layout = {}

    ow, oh = _size(nodes.overlay.element)
    rects["lb-overlay"] = Rect(-sx, -sy, ow, oh)

    top = nodes.frame.element.top - sy
    cw, ch = _size(nodes.outer_container.element)
    outer = Rect((vw - cw) / 2.0 - sx, top, cw, ch)
    rects["lb-outer-container"] = outer
    rects["lb-container"] = outer
    rects["lb-nav"] = outer

    iw, ih = _size(nodes.image.element)
    inset = CONTAINER_PADDING + IMAGE_BORDER
    rects["lb-image"] = Rect(outer.x + inset, outer.y + inset, iw, ih)

    _, prev_h = _size(nodes.prev.element)
    _, next_h = _size(nodes.next.element)
    rects["lb-prev"] = Rect(outer.x, outer.y, cw * PREV_LINK_FRAC, prev_h or ch)
    rects["lb-next"] = Rect(outer.x + cw * (1.0 - NEXT_LINK_FRAC), outer.y, cw * NEXT_LINK_FRAC, next_h or ch)

    cx, cy = outer.center
    spinner = Rect(cx - LOADER_RADIUS, cy - LOADER_RADIUS, LOADER_RADIUS * 2, LOADER_RADIUS * 2)
    rects["lb-loader"] = spinner
    rects["lb-cancel"] = spinner

    dw, _ = _size(nodes.data_container.element)
    data = Rect((vw - dw) / 2.0 - sx, outer.y + ch, dw, DATA_CONTAINER_HEIGHT)
    rects["lb-data-container"] = data

    btn = CLOSE_BTN_RADIUS * 2
    rects["lb-close"] = Rect(data.x + data.w - btn - CONTAINER_PADDING, data.y + CONTAINER_PADDING, btn, btn)
    text_w = max(0.0, data.w - btn - CONTAINER_PADDING * 3)
    rects["lb-caption"] = Rect(data.x + CONTAINER_PADDING, data.y + CONTAINER_PADDING, text_w, CAPTION_FONT_SIZE)
    rects["lb-number"] = Rect(data.x + CONTAINER_PADDING, data.y + CONTAINER_PADDING + CAPTION_FONT_SIZE + 2,
                              text_w, data.h - CAPTION_FONT_SIZE - CONTAINER_PADDING - 2)

    # The frame spans the full width, from the container to the bottom of the data row
    rects["lb"] = Rect(-sx, top, vw, ch + DATA_CONTAINER_HEIGHT)
    return rects


def receives_pointer(el: Element) -> bool:
    """Rendered and not excluded from pointer events by itself or an ancestor."""
    if not el.is_rendered:
        return False
    node: Optional[Element] = el
    while node is not None:
        if not node.pointer_events:
            return False
        node = node.parent
    return True


def hit_test(nodes: ViewerNodes, layout: Layout, x: float, y: float) -> Optional[str]:
    """Class name of the topmost element under (x, y), or None."""
    for node in reversed(list(nodes.iter())):
        el = node.element
        rect = layout.get(el.class_name)
        if rect is None or not rect.contains(x, y):
            continue
        if receives_pointer(el):
            return el.class_name
    return None


def element_alpha(el: Element, hovered: bool = False) -> float:
    """Opacity compounded over ancestors; unset nav opacity rises on hover."""
    if el.opacity is None and hovered:
        alpha = NAV_LINK_HOVER_OPACITY
    else:
        alpha = el.effective_opacity
    parent = el.parent
    while parent is not None:
        alpha *= parent.effective_opacity
        parent = parent.parent
    return max(0.0, min(1.0, alpha))
