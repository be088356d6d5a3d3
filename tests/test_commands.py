"""Tests for input commands and their mapping from keys and clicks."""
import pytest

from lightbox.commands import (
    NavigateNext, NavigatePrev, OpenCaptionLink, CloseViewer,
    command_for_key, command_for_click,
)
from lightbox.options import KeyBindings
from lightbox.config import MOUSE_RIGHT

from conftest import make_album, DeferredLoader


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------

class TestMapping:

    @pytest.mark.parametrize("key, cls", [
        ("ArrowRight", NavigateNext),
        ("p", NavigatePrev),
        ("Escape", CloseViewer),
    ])
    def test_keys(self, key, cls):
        assert isinstance(command_for_key(KeyBindings(), key), cls)

    def test_unbound_key(self):
        assert command_for_key(KeyBindings(), "z") is None

    def test_custom_bindings(self):
        bindings = KeyBindings(next=("j",), previous=("k",), close=("q",))
        assert isinstance(command_for_key(bindings, "j"), NavigateNext)
        assert command_for_key(bindings, "n") is None

    @pytest.mark.parametrize("target", ["lb-overlay", "lb", "lb-loader", "lb-cancel", "lb-close"])
    def test_close_targets(self, target):
        assert isinstance(command_for_click(target), CloseViewer)

    def test_nav_targets(self):
        assert isinstance(command_for_click("lb-prev"), NavigatePrev)
        assert isinstance(command_for_click("lb-next"), NavigateNext)

    def test_caption_target(self):
        assert isinstance(command_for_click("lb-caption"), OpenCaptionLink)

    def test_inert_targets(self):
        assert command_for_click("lb-image") is None
        assert command_for_click("lb-data-container") is None

    def test_right_button_never_maps(self):
        assert command_for_click("lb-overlay", MOUSE_RIGHT) is None


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------

class TestGuards:

    def test_navigation_blocked_while_closed(self, make_viewer):
        viewer = make_viewer()
        assert NavigateNext().execute(viewer) is False
        assert CloseViewer().execute(viewer) is False

    def test_navigation_blocked_during_transition(self, make_viewer):
        viewer = make_viewer(loader=DeferredLoader())
        viewer.open_album(make_album(3))
        assert viewer.in_transition
        assert NavigateNext().can_execute(viewer) is False

    def test_caption_link_needs_markup_link(self, make_viewer, host):
        viewer = make_viewer()
        viewer.open_album(make_album(2))
        assert OpenCaptionLink().can_execute(viewer) is False
        assert OpenCaptionLink().execute(viewer) is False
        assert host.opened_links == []

    def test_close_allowed_during_transition(self, make_viewer):
        viewer = make_viewer(loader=DeferredLoader())
        viewer.open_album(make_album(3))
        assert CloseViewer().execute(viewer) is True
        assert not viewer.is_active
