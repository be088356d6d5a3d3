"""State management submodules for the lightbox viewer."""

from .window import WindowState
from .gallery import GalleryState
from .input import InputState

__all__ = [
    'WindowState',
    'GalleryState',
    'InputState',
]
