"""Pure view calculation functions - no side effects, no state mutation."""

from __future__ import annotations
from typing import Optional, Tuple

from .types import Dimension, Box
from .config import FIT_GUTTER_H, FIT_GUTTER_V


def fit_bounds(
    viewport: Dimension,
    max_width: Optional[float] = None,
    max_height: Optional[float] = None,
    padding: Box = Box.ZERO,
    border: Box = Box.ZERO,
    gutter_h: float = FIT_GUTTER_H,
    gutter_v: float = FIT_GUTTER_V,
) -> Tuple[float, float]:
    """Compute the largest width/height an image may be displayed at.

    Args:
        viewport: Current viewport size.
        max_width: Optional configured width bound (0/None = unbounded).
        max_height: Optional configured height bound (0/None = unbounded).
        padding: Container padding around the image.
        border: Image border.
        gutter_h: Horizontal space reserved for chrome.
        gutter_v: Vertical space reserved for chrome.

    Returns:
        (bound_w, bound_h)
    """
    bound_w = viewport.width - padding.horizontal - border.horizontal - gutter_h
    bound_h = viewport.height - padding.vertical - border.vertical - gutter_v

    if max_width and max_width < bound_w:
        bound_w = max_width
    # Compared against the width bound, not the height bound. Kept as-is
    # until the intended behaviour is confirmed.
    if max_height and max_height < bound_w:
        bound_h = max_height

    return bound_w, bound_h


def fit_image_size(
    natural: Dimension,
    viewport: Dimension,
    max_width: Optional[float] = None,
    max_height: Optional[float] = None,
    padding: Box = Box.ZERO,
    border: Box = Box.ZERO,
    fit_enabled: bool = True,
) -> Dimension:
    """Scale an image down to fit the viewport, preserving aspect ratio.

    Images that already fit are returned unchanged; images are never
    scaled up.

    Args:
        natural: Natural image size.
        viewport: Current viewport size.
        max_width: Optional configured width bound.
        max_height: Optional configured height bound.
        padding: Container padding around the image.
        border: Image border.
        fit_enabled: When False the natural size is returned.

    Returns:
        Displayed image size.
    """
    if not fit_enabled:
        return natural

    w, h = natural.width, natural.height
    bound_w, bound_h = fit_bounds(viewport, max_width, max_height, padding, border)

    if w <= bound_w and h <= bound_h:
        return natural

    if bound_w <= 0 or bound_h <= 0 or w <= 0 or h <= 0:
        return Dimension.ZERO

    if (w / bound_w) > (h / bound_h):
        out_w = bound_w
        out_h = h / (w / out_w)
    else:
        out_h = bound_h
        out_w = w / (h / out_h)

    return Dimension(out_w, out_h)


def container_size(image: Dimension, padding: Box = Box.ZERO, border: Box = Box.ZERO) -> Dimension:
    """Outer container size for a displayed image size."""
    return Dimension(
        image.width + padding.horizontal + border.horizontal,
        image.height + padding.vertical + border.vertical,
    )


def frame_position(scroll_x: float, scroll_y: float, position_from_top: float) -> Tuple[float, float]:
    """Top/left of the viewer frame for the current scroll offset."""
    return scroll_y + position_from_top, scroll_x
