"""Markup - assembles the viewer's display-node tree."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator

from .nodes import (
    DisplayNode, static_node, overlay_node, container_node, image_node,
    caption_node, number_label_node, nav_link_node,
)
from .options import ViewerOptions
from .state import GalleryState
from .effects import Effects
from .config import INITIAL_CONTAINER_SIZE


@dataclass
class ViewerNodes:
    """Named handles into the assembled tree.

    Tree:
        lb-overlay
        lb
          lb-outer-container
            lb-container
              lb-image
              lb-nav (lb-prev, lb-next)
              lb-loader (lb-cancel)
          lb-data-container
            lb-caption, lb-number, lb-close
    """
    overlay: DisplayNode
    frame: DisplayNode
    outer_container: DisplayNode
    container: DisplayNode
    image: DisplayNode
    nav: DisplayNode
    prev: DisplayNode
    next: DisplayNode
    loader: DisplayNode
    cancel: DisplayNode
    data_container: DisplayNode
    caption: DisplayNode
    number: DisplayNode
    close: DisplayNode

    @property
    def roots(self) -> tuple:
        return (self.overlay, self.frame)

    def iter(self) -> Iterator[DisplayNode]:
        for root in self.roots:
            yield from root.iter()

    def find(self, class_name: str):
        for root in self.roots:
            node = root.find(class_name)
            if node is not None:
                return node
        return None


def build_nodes(state: GalleryState, options: ViewerOptions, effects: Effects) -> ViewerNodes:
    """Create and initialize every node of one viewer."""
    always_show_nav = options.always_show_nav_on_touch_devices

    nodes = ViewerNodes(
        overlay=overlay_node(effects),
        frame=static_node("lb", effects),
        outer_container=static_node("lb-outer-container", effects, opacity=None, visible=True),
        container=container_node(effects),
        image=image_node(state, effects),
        nav=static_node("lb-nav", effects, opacity=None),
        prev=nav_link_node(state, effects, "prev", options.wrap_around, always_show_nav),
        next=nav_link_node(state, effects, "next", options.wrap_around, always_show_nav),
        loader=static_node("lb-loader", effects),
        cancel=static_node("lb-cancel", effects, opacity=None, visible=True),
        data_container=static_node("lb-data-container", effects),
        caption=caption_node(state, effects, options.sanitize_title),
        number=number_label_node(state, effects, options.album_label),
        close=static_node("lb-close", effects, opacity=None, visible=True),
    )

    nodes.nav.add_children(nodes.prev, nodes.next)
    nodes.loader.add_child(nodes.cancel)
    nodes.container.add_children(nodes.image, nodes.nav, nodes.loader)
    nodes.outer_container.add_child(nodes.container)
    nodes.data_container.add_children(nodes.caption, nodes.number, nodes.close)
    nodes.frame.add_children(nodes.outer_container, nodes.data_container)

    nodes.outer_container.set_size(INITIAL_CONTAINER_SIZE, INITIAL_CONTAINER_SIZE)

    for root in nodes.roots:
        root.init()
    return nodes
