"""Album collection - turning an activated link into an ordered album."""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .types import AlbumEntry
from .errors import InvalidAlbumError
from .image_utils import list_images

SINGLE_REL = "lightbox"


@dataclass(frozen=True, eq=False)
class Link:
    """An activatable link to an image.

    group mirrors a data-lightbox attribute, rel a rel="lightbox[...]" one.
    """
    href: str
    group: Optional[str] = None
    rel: Optional[str] = None
    title: str = ""
    data_title: str = ""
    alt: str = ""

    def to_entry(self) -> AlbumEntry:
        return AlbumEntry(href=self.href, alt=self.alt or "", title=self.data_title or self.title or "")

    @property
    def activatable(self) -> bool:
        return bool(self.group) or bool(self.rel and self.rel.startswith(SINGLE_REL))


def collect_album(links: Sequence[Link], activated: Link) -> Tuple[List[AlbumEntry], int]:
    """Entries sharing the activated link's grouping key, in document order.

    Returns:
        (entries, index of the activated link)

    Raises:
        InvalidAlbumError: if the link carries no grouping key.
    """
    if activated.group:
        members = [link for link in links if link.group == activated.group]
    elif activated.rel == SINGLE_REL:
        members = [activated]
    elif activated.rel and activated.rel.startswith(SINGLE_REL):
        members = [link for link in links if link.rel == activated.rel]
    else:
        raise InvalidAlbumError(f"link {activated.href!r} has no lightbox group")

    if not members:
        members = [activated]

    index = 0
    for i, link in enumerate(members):
        if link is activated:
            index = i
            break
    return [link.to_entry() for link in members], index


def links_from_directory(dirpath: str) -> List[Link]:
    """One link per supported image in a directory, grouped by the directory."""
    group = os.path.abspath(dirpath)
    return [
        Link(href=path, group=group, title=os.path.basename(path), alt=os.path.basename(path))
        for path in list_images(dirpath)
    ]


def find_link(links: Sequence[Link], href: str) -> Optional[Link]:
    """Link pointing at href (compared as absolute paths)."""
    target = os.path.abspath(href)
    for link in links:
        if os.path.abspath(link.href) == target:
            return link
    return None
