"""Gallery state - open album and current image."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..types import AlbumEntry
from ..errors import InvalidAlbumError


@dataclass
class GalleryState:
    """Single source of truth for album contents and position.

    Only the owning viewer writes to it.
    """
    album: Tuple[AlbumEntry, ...] = ()
    current_index: int = 0
    user_can_hover: bool = False

    @property
    def count(self) -> int:
        """Number of entries in the open album."""
        return len(self.album)

    @property
    def current_entry(self) -> Optional[AlbumEntry]:
        if 0 <= self.current_index < len(self.album):
            return self.album[self.current_index]
        return None

    def open_album(self, entries: Iterable[AlbumEntry],
                   selected: Optional[AlbumEntry] = None) -> int:
        """Replace the album and move to the selected entry (default 0).

        Raises:
            InvalidAlbumError: if entries is empty.
        """
        album = tuple(entries)
        if not album:
            raise InvalidAlbumError("cannot open an empty album")

        index = 0
        if selected is not None:
            index = _position_of(album, selected)

        self.album = album
        self.current_index = index
        return index

    def go_to(self, index: int) -> None:
        """Set the current index. Bounds are the caller's responsibility."""
        self.current_index = index

    def is_first(self) -> bool:
        return self.current_index == 0

    def is_last(self) -> bool:
        return self.current_index == len(self.album) - 1

    def neighbors(self) -> List[int]:
        """Indices of the entries adjacent to the current one."""
        result = []
        if self.current_index + 1 < len(self.album):
            result.append(self.current_index + 1)
        if self.current_index > 0:
            result.append(self.current_index - 1)
        return result

    def mark_hover_capable(self) -> bool:
        """Record that a hover-capable pointer was seen. Returns True on first call."""
        if self.user_can_hover:
            return False
        self.user_can_hover = True
        return True

    def clear(self) -> None:
        """Drop the album; hover capability is kept."""
        self.album = ()
        self.current_index = 0


def _position_of(album: Tuple[AlbumEntry, ...], selected: AlbumEntry) -> int:
    for i, entry in enumerate(album):
        if entry is selected:
            return i
    for i, entry in enumerate(album):
        if entry == selected:
            return i
    return 0
