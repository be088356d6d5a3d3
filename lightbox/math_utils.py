"""Pure math utilities - no external dependencies."""

from __future__ import annotations


def clamp(v: float, a: float, b: float) -> float:
    """Clamp value v to range [a, b]."""
    return a if v < a else b if v > b else v


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation from a to b by factor t (clamped to [0, 1])."""
    t = clamp(t, 0.0, 1.0)
    return a + (b - a) * t


def point_in_rect(px: float, py: float, x: float, y: float, w: float, h: float) -> bool:
    """Check if point (px, py) lies inside the rectangle."""
    return x <= px <= x + w and y <= py <= y + h
