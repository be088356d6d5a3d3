"""Core data types for the lightbox viewer."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, ClassVar
from enum import IntEnum


@dataclass(frozen=True)
class Dimension:
    """Immutable width/height pair."""
    width: float = 0.0
    height: float = 0.0

    ZERO: ClassVar["Dimension"]

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"negative dimension: {self.width}x{self.height}")

    def __iter__(self):
        yield self.width
        yield self.height


Dimension.ZERO = Dimension(0, 0)


@dataclass(frozen=True)
class Box:
    """Insets around a rectangle (padding, border)."""
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    ZERO: ClassVar["Box"]

    @classmethod
    def uniform(cls, value: float) -> Box:
        """Same inset on all four sides."""
        return cls(value, value, value, value)

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom


Box.ZERO = Box()


@dataclass(frozen=True)
class AlbumEntry:
    """One image of an album."""
    href: str
    alt: str = ""
    title: str = ""

    def __post_init__(self) -> None:
        if not self.href:
            raise ValueError("album entry requires a non-empty href")


@dataclass(frozen=True)
class ImageInfo:
    """Natural size of a loaded image."""
    href: str
    width: int
    height: int

    @property
    def size(self) -> Dimension:
        return Dimension(self.width, self.height)


class LoadPriority(IntEnum):
    """Priority levels for async image loading."""
    CURRENT = 0   # Image about to be displayed - highest priority
    NEIGHBOR = 1  # Prefetch of the previous/next image


@dataclass
class LoadTask:
    """A task for the async image loader."""
    href: str
    priority: LoadPriority
    callback: Callable
    timestamp: float = 0.0

    def __lt__(self, other: LoadTask) -> bool:
        """Compare tasks for priority queue ordering."""
        if self.priority != other.priority:
            return self.priority < other.priority
        return self.timestamp < other.timestamp


@dataclass
class UIEvent:
    """An event to be processed on the main/UI thread."""
    callback: Callable
    args: tuple
