"""Exceptions raised by the lightbox viewer."""

from __future__ import annotations


class LightboxError(Exception):
    """Base class for all viewer errors."""


class InvalidAlbumError(LightboxError):
    """An album was opened with no matching entries."""


class ImageLoadError(LightboxError):
    """The target image could not be loaded."""

    def __init__(self, href: str, reason: str = ""):
        self.href = href
        self.reason = reason
        msg = f"failed to load {href!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class UnsupportedInputError(LightboxError):
    """An input capability probe is not supported by the host."""


class ConfigurationError(LightboxError, ValueError):
    """Invalid viewer option value."""
