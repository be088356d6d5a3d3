"""Display nodes - uniform lifecycle for every visual part of the viewer.

A node owns one Element and an ordered list of child nodes. What a node does
on update/render is chosen when it is built (a NodeBehavior), so the image,
caption, number label, nav links, overlay and container are all the same
class wired with different behaviors.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple

from .types import Dimension
from .elements import Element
from .options import format_album_label
from .config import ANIM_DEFAULT_MS, NAV_LINK_RESTING_OPACITY, OVERLAY_OPACITY

if TYPE_CHECKING:
    from .effects import Effects
    from .state import GalleryState


NodeHook = Callable[["DisplayNode"], None]


@dataclass(frozen=True)
class NodeBehavior:
    """Capability set of a node kind."""
    kind: str
    update: Optional[NodeHook] = None
    render: Optional[NodeHook] = None


STATIC = NodeBehavior("static")


class DisplayNode:
    """A renderable unit: element, children, visibility and opacity."""

    def __init__(
        self,
        class_name: str,
        effects: "Effects",
        behavior: NodeBehavior = STATIC,
        dimension: Dimension = Dimension.ZERO,
        opacity: Optional[float] = 0.0,
        resting_opacity: float = 1.0,
        visible: bool = False,
    ):
        self.element = Element(class_name, resting_opacity=resting_opacity)
        self.effects = effects
        self.behavior = behavior
        self.dimension = dimension
        self.children: List[DisplayNode] = []
        self.current_opacity: Optional[float] = opacity
        self.visible = visible
        self._initialized = False
        self._parent: Optional[DisplayNode] = None

    def __repr__(self) -> str:
        return f"DisplayNode({self.name!r}, kind={self.kind}, visible={self.visible})"

    @property
    def name(self) -> str:
        return self.element.class_name

    @property
    def kind(self) -> str:
        return self.behavior.kind

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def resting_opacity(self) -> float:
        return self.element.resting_opacity

    # ── tree ────────────────────────────────────────────────────────────────

    def add_child(self, child: DisplayNode) -> DisplayNode:
        """Append a child node. Children are never reparented."""
        if child._parent is not None:
            raise ValueError(f"{child.name} already belongs to {child._parent.name}")
        child._parent = self
        self.children.append(child)
        return child

    def add_children(self, *children: DisplayNode) -> DisplayNode:
        for child in children:
            self.add_child(child)
        return self

    def iter(self):
        yield self
        for child in self.children:
            yield from child.iter()

    def find(self, class_name: str) -> Optional[DisplayNode]:
        for node in self.iter():
            if node.name == class_name:
                return node
        return None

    # ── lifecycle ───────────────────────────────────────────────────────────

    def init(self) -> None:
        """Initial render: attach children, apply opacity and visibility. Runs once."""
        if self._initialized:
            return
        for child in self.children:
            child.init()
            self.element.append(child.element)
        self.element.opacity = self.current_opacity
        self.element.displayed = self.visible
        self._initialized = True

    def show(self, duration: float = ANIM_DEFAULT_MS, callback: Optional[Callable[[], None]] = None):
        return self.effects.fade_in(self, duration, callback)

    def hide(self, duration: float = ANIM_DEFAULT_MS, callback: Optional[Callable[[], None]] = None):
        return self.effects.fade_out(self, duration, callback)

    def show_now(self) -> None:
        """Make visible immediately, without animation."""
        self.effects.stop(self)
        self.set_visible(True)

    def hide_now(self) -> None:
        """Hide immediately, cancelling any running tween."""
        self.effects.stop(self)
        self.set_visible(False)

    def update(self) -> None:
        """Recompute displayed content from state. Leaves visibility alone."""
        if self.behavior.update is not None:
            self.behavior.update(self)

    def render(self) -> None:
        if self.behavior.render is not None:
            self.behavior.render(self)
        else:
            self.show()

    # ── element mutation ───────────────────────────────────────────────────

    def set_opacity(self, opacity: Optional[float]) -> None:
        self.current_opacity = opacity
        self.element.opacity = opacity

    def set_visible(self, visible: bool) -> None:
        self.visible = visible
        self.element.displayed = visible

    def set_size(self, width: float, height: float) -> None:
        self.dimension = Dimension(max(0.0, width), max(0.0, height))
        self.element.set_size(self.dimension.width, self.dimension.height)

    def set_width(self, width: float) -> None:
        self.set_size(width, self.dimension.height)

    def set_height(self, height: float) -> None:
        self.set_size(self.dimension.width, height)

    def set_content(self, data: str) -> None:
        self.element.set_text(data)


# ═══════════════════════════════════════════════════════════════════════════
# Node kinds
# ═══════════════════════════════════════════════════════════════════════════

def static_node(class_name: str, effects: "Effects", opacity: Optional[float] = 0.0,
                visible: bool = False, resting_opacity: float = 1.0) -> DisplayNode:
    """A frame part with no content of its own."""
    return DisplayNode(class_name, effects, STATIC, opacity=opacity,
                       visible=visible, resting_opacity=resting_opacity)


def overlay_node(effects: "Effects") -> DisplayNode:
    """Dimmed backdrop behind the viewer."""
    return DisplayNode("lb-overlay", effects, NodeBehavior("overlay"),
                       resting_opacity=OVERLAY_OPACITY)


def container_node(effects: "Effects") -> DisplayNode:
    """Holds the image and nav layer; always displayed, opacity unset."""
    return DisplayNode("lb-container", effects, NodeBehavior("container"),
                       opacity=None, visible=True)


def image_node(state: "GalleryState", effects: "Effects") -> DisplayNode:
    """The displayed image. update() points it at the current entry."""

    def update(node: DisplayNode) -> None:
        entry = state.current_entry
        if entry is None:
            return
        node.element.attrs["src"] = entry.href
        node.element.attrs["alt"] = entry.alt

    return DisplayNode("lb-image", effects, NodeBehavior("image", update=update))


def caption_node(state: "GalleryState", effects: "Effects", sanitize: bool) -> DisplayNode:
    """Caption of the current entry.

    With sanitize the title is set as plain text; otherwise it is kept as rich
    markup, which is only safe for trusted captions.
    """

    def update(node: DisplayNode) -> None:
        entry = state.current_entry
        title = entry.title if entry is not None else ""
        if sanitize:
            node.element.set_text(title or "")
        else:
            node.element.set_markup(title or "")

    return DisplayNode("lb-caption", effects, NodeBehavior("caption", update=update))


def number_label_node(state: "GalleryState", effects: "Effects", template: str) -> DisplayNode:
    """'Image 2 of 5' style position label."""

    def update(node: DisplayNode) -> None:
        node.set_content(format_album_label(template, state.current_index + 1, state.count))

    return DisplayNode("lb-number", effects, NodeBehavior("number_label", update=update))


def nav_link_visibility(kind: str, state: "GalleryState", wrap_around: bool,
                        always_show_nav: bool) -> Tuple[bool, bool]:
    """Decide (visible, force_opaque) for a 'prev' or 'next' link."""
    if state.count <= 1:
        return False, False
    force_opaque = (not state.user_can_hover) or always_show_nav
    if wrap_around:
        return True, force_opaque
    if kind == "prev":
        visible = not state.is_first()
    elif kind == "next":
        visible = not state.is_last()
    else:
        raise ValueError(f"unknown nav link kind: {kind!r}")
    return visible, force_opaque and visible


def nav_link_node(state: "GalleryState", effects: "Effects", kind: str,
                  wrap_around: bool, always_show_nav: bool) -> DisplayNode:
    """Previous/next link whose visibility follows the album position."""
    if kind not in ("prev", "next"):
        raise ValueError(f"unknown nav link kind: {kind!r}")

    def render(node: DisplayNode) -> None:
        visible, force_opaque = nav_link_visibility(kind, state, wrap_around, always_show_nav)
        node.set_visible(visible)
        node.set_opacity(1.0 if force_opaque else None)

    return DisplayNode(f"lb-{kind}", effects, NodeBehavior("nav_link", render=render),
                       opacity=None, resting_opacity=NAV_LINK_RESTING_OPACITY)
