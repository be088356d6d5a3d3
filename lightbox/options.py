"""Viewer options - immutable configuration shared by every component."""

from __future__ import annotations
import re
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional, Tuple

from .config import (
    DEFAULT_ALBUM_LABEL, DEFAULT_FADE_MS, DEFAULT_IMAGE_FADE_MS,
    DEFAULT_RESIZE_MS, DEFAULT_POSITION_FROM_TOP,
    KEYS_CLOSE, KEYS_NEXT, KEYS_PREVIOUS,
)
from .errors import ConfigurationError


@dataclass(frozen=True)
class KeyBindings:
    """Key names bound to each viewer action."""
    close: Tuple[str, ...] = KEYS_CLOSE
    next: Tuple[str, ...] = KEYS_NEXT
    previous: Tuple[str, ...] = KEYS_PREVIOUS

    def action_for(self, key: str) -> Optional[str]:
        """Return 'close', 'next', 'previous' or None for a key name."""
        if key in self.previous:
            return "previous"
        if key in self.next:
            return "next"
        if key in self.close:
            return "close"
        return None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> KeyBindings:
        unknown = set(data) - {"close", "next", "previous"}
        if unknown:
            raise ConfigurationError(f"unknown key binding action(s): {sorted(unknown)}")
        kwargs = {}
        for action, keys in data.items():
            if isinstance(keys, str):
                keys = (keys,)
            kwargs[action] = tuple(str(k) for k in keys)
        return cls(**kwargs)


@dataclass(frozen=True)
class ViewerOptions:
    """Options applied to a viewer instance. Never mutated after construction."""
    album_label: str = DEFAULT_ALBUM_LABEL
    always_show_nav_on_touch_devices: bool = False
    fade_duration: int = DEFAULT_FADE_MS
    fit_images_in_viewport: bool = True
    image_fade_duration: int = DEFAULT_IMAGE_FADE_MS
    max_width: Optional[int] = None
    max_height: Optional[int] = None
    position_from_top: int = DEFAULT_POSITION_FROM_TOP
    resize_duration: int = DEFAULT_RESIZE_MS
    show_image_number_label: bool = True
    wrap_around: bool = False
    disable_scrolling: bool = False
    # Leave False only for trusted captions: unsanitized titles are kept
    # as rich markup. Enable for user-submitted captions.
    sanitize_title: bool = False
    enable_right_click: bool = True
    key_bindings: KeyBindings = field(default_factory=KeyBindings)

    def __post_init__(self) -> None:
        for name in ("fade_duration", "image_fade_duration", "resize_duration"):
            value = getattr(self, name)
            if value is None or value < 0:
                raise ConfigurationError(f"{name} must be >= 0, got {value!r}")
        for name in ("max_width", "max_height"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ConfigurationError(f"{name} must be >= 0, got {value!r}")

    def with_overrides(self, **changes: Any) -> ViewerOptions:
        """Return a new options value with some fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ViewerOptions:
        """Build options from a mapping of snake_case or camelCase keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name not in known:
                raise ConfigurationError(f"unknown viewer option: {key!r}")
            if name == "key_bindings" and isinstance(value, Mapping):
                value = KeyBindings.from_mapping(value)
            kwargs[name] = value
        return cls(**kwargs)


_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


def format_album_label(template: str, current: int, total: int) -> str:
    """Substitute %1 (1-based current index) and %2 (total) in a label."""
    return template.replace("%1", str(current)).replace("%2", str(total))
