"""Retained element tree read by the renderer.

An Element is the drawable counterpart of a display node: the renderer walks
the tree every frame and draws whatever the elements say (size, opacity,
visibility, text). Nothing here knows about raylib.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Dict, Iterator, List, Optional, Set


class _TextExtractor(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.parts: List[str] = []
        self.links: List[Dict[str, str]] = []

    def handle_starttag(self, tag, attrs):
        if tag == "a":
            self.links.append({k: (v or "") for k, v in attrs})
        elif tag == "br":
            self.parts.append("\n")

    def handle_data(self, data):
        self.parts.append(data)


def strip_markup(markup: str) -> str:
    """Plain text of a rich-content string."""
    parser = _TextExtractor()
    parser.feed(markup)
    parser.close()
    return "".join(parser.parts)


def extract_links(markup: str) -> List[Dict[str, str]]:
    """Attributes of every <a> tag in a rich-content string."""
    parser = _TextExtractor()
    parser.feed(markup)
    parser.close()
    return parser.links


@dataclass(eq=False)
class Element:
    """A drawable element identified by its class name."""
    class_name: str
    # Opacity the element settles at when its inline opacity is unset.
    resting_opacity: float = 1.0
    opacity: Optional[float] = None
    displayed: bool = True
    width: Optional[float] = None
    height: Optional[float] = None
    top: float = 0.0
    left: float = 0.0
    text: str = ""
    markup: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)
    classes: Set[str] = field(default_factory=set)
    pointer_events: bool = True
    children: List["Element"] = field(default_factory=list)
    parent: Optional["Element"] = field(default=None, repr=False)

    @property
    def effective_opacity(self) -> float:
        """Inline opacity when set, otherwise the resting opacity."""
        return self.resting_opacity if self.opacity is None else self.opacity

    @property
    def is_rendered(self) -> bool:
        """True if this element and every ancestor are displayed."""
        el: Optional[Element] = self
        while el is not None:
            if not el.displayed:
                return False
            el = el.parent
        return True

    def append(self, child: Element) -> None:
        if child.parent is not None and child.parent is not self:
            raise ValueError(f"{child.class_name} already attached to {child.parent.class_name}")
        if child.parent is self:
            return
        child.parent = self
        self.children.append(child)

    def iter(self) -> Iterator[Element]:
        """Depth-first traversal including self."""
        yield self
        for child in self.children:
            yield from child.iter()

    def find(self, class_name: str) -> Optional[Element]:
        """First element in the subtree with the given class name."""
        for el in self.iter():
            if el.class_name == class_name:
                return el
        return None

    def set_text(self, text: str) -> None:
        """Set plain text content (never interpreted as markup)."""
        self.text = text
        self.markup = None

    def set_markup(self, markup: str) -> None:
        """Set rich content; the plain text is derived for drawing."""
        self.markup = markup
        self.text = strip_markup(markup)

    @property
    def links(self) -> List[Dict[str, str]]:
        return extract_links(self.markup) if self.markup else []

    def set_size(self, width: Optional[float], height: Optional[float]) -> None:
        self.width = width
        self.height = height

    def add_class(self, name: str) -> None:
        self.classes.add(name)

    def remove_class(self, name: str) -> None:
        self.classes.discard(name)
