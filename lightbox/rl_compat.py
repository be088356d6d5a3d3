"""Raylib compatibility layer - struct constructors and str/bytes fallbacks for python-raylib."""

from __future__ import annotations
import string
from typing import Any, Dict

import raylib as rl

RL_VERSION = "python-raylib"
RL_WHITE = getattr(rl, "RAYWHITE", rl.WHITE)


def make_rect(x: float, y: float, w: float, h: float) -> Any:
    """Create a raylib Rectangle."""
    if hasattr(rl, 'Rectangle'):
        try:
            return rl.Rectangle(x, y, w, h)
        except Exception:
            pass
    r = rl.ffi.new("Rectangle *")
    r[0].x = float(x)
    r[0].y = float(y)
    r[0].width = float(w)
    r[0].height = float(h)
    return r[0]


def make_vec2(x: float, y: float) -> Any:
    """Create a raylib Vector2."""
    if hasattr(rl, 'Vector2'):
        try:
            return rl.Vector2(x, y)
        except Exception:
            pass
    v = rl.ffi.new("Vector2 *")
    v[0].x = float(x)
    v[0].y = float(y)
    return v[0]


def make_color(r: int, g: int, b: int, a: int) -> Any:
    """Create a raylib Color, alpha clamped to 0..255."""
    a = max(0, min(255, int(a)))
    ctor = getattr(rl, "Color", None)
    if ctor:
        try:
            return ctor(int(r), int(g), int(b), a)
        except Exception:
            pass
    c = rl.ffi.new("Color *")
    c[0].r, c[0].g, c[0].b, c[0].a = int(r), int(g), int(b), a
    return c[0]


def draw_text(text: str, x: int, y: int, size: int, color: Any) -> None:
    """Draw text with encoding fallback."""
    try:
        rl.DrawText(text, int(x), int(y), size, color)
    except TypeError:
        rl.DrawText(text.encode('utf-8'), int(x), int(y), size, color)


def measure_text(text: str, size: int) -> int:
    """Measure text width with encoding fallback."""
    try:
        return rl.MeasureText(text, size)
    except TypeError:
        return rl.MeasureText(text.encode('utf-8'), size)


def load_texture(path: str) -> Any:
    """Load a texture with encoding fallback."""
    try:
        return rl.LoadTexture(path)
    except TypeError:
        return rl.LoadTexture(path.encode('utf-8'))


def init_window(width: int, height: int, title: str) -> None:
    try:
        rl.InitWindow(width, height, title)
    except TypeError:
        rl.InitWindow(width, height, title.encode('utf-8'))


def get_texture_id(tex: Any) -> int:
    """Safely get texture ID."""
    return getattr(tex, 'id', 0) or 0


def is_texture_valid(tex: Any) -> bool:
    """Check if texture is valid and loaded."""
    return get_texture_id(tex) > 0


def _build_key_names() -> Dict[int, str]:
    names = {
        rl.KEY_ESCAPE: "Escape",
        rl.KEY_LEFT: "ArrowLeft",
        rl.KEY_RIGHT: "ArrowRight",
        rl.KEY_UP: "ArrowUp",
        rl.KEY_DOWN: "ArrowDown",
        rl.KEY_ENTER: "Enter",
        rl.KEY_SPACE: " ",
    }
    for ch in string.ascii_lowercase:
        code = getattr(rl, f"KEY_{ch.upper()}", None)
        if code is not None:
            names[code] = ch
    return names


# Raylib key codes -> key names used by KeyBindings
KEY_NAMES: Dict[int, str] = _build_key_names()


__all__ = [
    'rl',
    'RL_VERSION',
    'RL_WHITE',
    'KEY_NAMES',
    'make_rect',
    'make_vec2',
    'make_color',
    'draw_text',
    'measure_text',
    'load_texture',
    'init_window',
    'get_texture_id',
    'is_texture_valid',
]
