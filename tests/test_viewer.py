"""Tests for the Lightbox navigation controller and ViewerRegistry."""
import pytest
from PIL import Image

from lightbox.viewer import Lightbox, ViewerPhase, ViewerRegistry
from lightbox.album import Link
from lightbox.options import KeyBindings
from lightbox.types import AlbumEntry, Dimension, LoadPriority
from lightbox.loader import ImmediateLoader
from lightbox.errors import ImageLoadError, InvalidAlbumError, UnsupportedInputError
from lightbox.config import MOUSE_RIGHT

from conftest import make_album, StubLoader, DeferredLoader


# ---------------------------------------------------------------------------
# Opening
# ---------------------------------------------------------------------------

class TestOpen:

    def test_open_shows_selected_image(self, make_viewer, host):
        viewer = make_viewer()
        album = make_album(3)
        assert viewer.open_album(album, album[1]) == 1

        assert viewer.phase is ViewerPhase.OPEN
        assert viewer.state.current_index == 1
        assert viewer.nodes.image.element.attrs["src"] == "img1.jpg"
        assert viewer.nodes.image.visible
        assert viewer.input.keyboard_enabled
        assert not viewer.in_transition
        assert host.embeds_hidden
        assert len(host.listeners) == 1

    def test_loader_hidden_after_load(self, make_viewer):
        viewer = make_viewer()
        viewer.open_album(make_album(2))
        assert not viewer.nodes.loader.visible
        assert "animating" not in viewer.nodes.outer_container.element.classes

    def test_overlay_covers_document(self, make_viewer, host):
        host.window.doc_h = 3000
        viewer = make_viewer()
        viewer.open_album(make_album(1))
        assert viewer.nodes.overlay.dimension == Dimension(1024, 3000)
        assert viewer.nodes.overlay.visible

    def test_frame_positioned_below_scroll(self, make_viewer, host):
        host.window.scroll_y = 400
        viewer = make_viewer(position_from_top=30)
        viewer.open_album(make_album(1))
        assert viewer.nodes.frame.element.top == 430

    def test_large_image_fitted(self, make_viewer):
        viewer = make_viewer(loader=StubLoader(default=(2000, 1000)))
        viewer.open_album(make_album(1))
        # 1024x768 viewport, 4px padding and border
        image = viewer.nodes.image.dimension
        assert (image.width, image.height) == (988, pytest.approx(494))
        outer = viewer.nodes.outer_container.dimension
        assert (outer.width, outer.height) == (1004, pytest.approx(510))
        assert viewer.nodes.data_container.dimension.width == 1004
        assert viewer.nodes.prev.dimension.height == pytest.approx(510)

    def test_empty_album_stays_closed(self, make_viewer, host):
        viewer = make_viewer()
        with pytest.raises(InvalidAlbumError):
            viewer.open_album([])
        assert viewer.phase is ViewerPhase.CLOSED
        assert host.listeners == []

    def test_start_from_links(self, make_viewer):
        viewer = make_viewer()
        links = [Link("a.jpg", group="g"), Link("b.jpg", group="g"), Link("c.jpg")]
        assert viewer.start(links, links[1]) == 1
        assert viewer.state.count == 2

    def test_disable_scrolling(self, make_viewer, host):
        viewer = make_viewer(disable_scrolling=True)
        viewer.open_album(make_album(1))
        assert host.scrolling_disabled
        viewer.close()
        assert not host.scrolling_disabled

    def test_neighbors_prefetched(self, make_viewer):
        loader = StubLoader()
        viewer = make_viewer(loader=loader)
        album = make_album(3)
        viewer.open_album(album, album[1])
        assert ("img1.jpg", LoadPriority.CURRENT) in loader.requests
        assert ("img2.jpg", LoadPriority.NEIGHBOR) in loader.requests
        assert ("img0.jpg", LoadPriority.NEIGHBOR) in loader.requests
        assert set(viewer.prefetched) == {"img0.jpg", "img2.jpg"}


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

class TestNavigation:

    def test_next_stops_at_last_without_wrap(self, make_viewer):
        viewer = make_viewer()
        viewer.open_album(make_album(2))
        assert viewer.next() is True
        assert viewer.state.current_index == 1
        assert viewer.next() is False
        assert viewer.state.current_index == 1

    def test_previous_stops_at_first_without_wrap(self, make_viewer):
        viewer = make_viewer()
        viewer.open_album(make_album(2))
        assert viewer.previous() is False
        assert viewer.state.current_index == 0

    def test_wrap_around(self, make_viewer):
        viewer = make_viewer(wrap_around=True)
        viewer.open_album(make_album(3))
        assert viewer.previous() is True
        assert viewer.state.current_index == 2
        assert viewer.next() is True
        assert viewer.state.current_index == 0

    def test_single_image_never_wraps(self, make_viewer):
        viewer = make_viewer(wrap_around=True)
        viewer.open_album(make_album(1))
        assert viewer.next() is False
        assert not viewer.nodes.prev.visible
        assert not viewer.nodes.next.visible
        assert not viewer.nodes.number.visible

    def test_nav_links_follow_position(self, make_viewer):
        viewer = make_viewer()
        viewer.open_album(make_album(3))
        assert not viewer.nodes.prev.visible and viewer.nodes.next.visible
        viewer.next()
        viewer.next()
        assert viewer.nodes.prev.visible and not viewer.nodes.next.visible

    def test_number_label_and_caption(self, make_viewer):
        viewer = make_viewer()
        viewer.open_album(make_album(3))
        viewer.next()
        assert viewer.nodes.number.element.text == "Image 2 of 3"
        assert viewer.nodes.number.visible
        assert viewer.nodes.caption.element.text == "Photo 1"
        assert viewer.nodes.caption.visible

    def test_untitled_entry_has_no_caption(self, make_viewer):
        viewer = make_viewer()
        viewer.open_album(make_album(2, titled=False))
        assert not viewer.nodes.caption.visible

    def test_number_label_disabled(self, make_viewer):
        viewer = make_viewer(show_image_number_label=False)
        viewer.open_album(make_album(3))
        assert not viewer.nodes.number.visible

    def test_out_of_range_index_rejected(self, make_viewer):
        viewer = make_viewer()
        viewer.open_album(make_album(3))
        assert viewer.change_image(3) is False
        assert viewer.change_image(-1) is False
        assert viewer.state.current_index == 0


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

class TestTransitions:

    def test_overlapping_change_is_noop(self, make_viewer):
        loader = DeferredLoader()
        viewer = make_viewer(loader=loader)
        viewer.open_album(make_album(3))
        assert viewer.in_transition
        assert viewer.phase is ViewerPhase.OPENING

        assert viewer.change_image(2) is False
        assert viewer.next() is False
        assert viewer.handle_key("ArrowRight") is False
        assert viewer.state.current_index == 0
        assert len(loader.pending) == 1

        loader.complete()
        assert viewer.phase is ViewerPhase.OPEN
        assert viewer.next() is True
        assert viewer.state.current_index == 1

    def test_animated_resize_holds_transition(self, make_viewer, frames, clock):
        viewer = make_viewer(resize_duration=700)
        viewer.open_album(make_album(2))
        assert viewer.in_transition
        assert viewer.nodes.loader.visible

        clock.advance(350)
        frames.run_frame()
        assert viewer.in_transition
        assert viewer.nodes.outer_container.dimension.width == pytest.approx((250 + 816) / 2)

        clock.advance(350)
        frames.run_frame()
        assert not viewer.in_transition
        assert viewer.phase is ViewerPhase.OPEN
        assert viewer.nodes.outer_container.dimension == Dimension(816, 616)

    def test_same_size_skips_resize_animation(self, make_viewer, frames, clock):
        viewer = make_viewer(resize_duration=700)
        viewer.open_album(make_album(2))
        clock.advance(700)
        frames.run_frame()
        assert viewer.phase is ViewerPhase.OPEN

        # Same natural size: container already matches, no tween needed
        assert viewer.next() is True
        assert not viewer.in_transition

    def test_oversized_image_reported_not_raised(self, make_viewer, tmp_path, monkeypatch):
        path = tmp_path / "huge.gif"
        Image.new("RGB", (64, 48), "green").save(path)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        viewer = make_viewer(loader=ImmediateLoader())
        viewer.open_album([AlbumEntry(str(path))])

        assert isinstance(viewer.last_error, ImageLoadError)
        assert viewer.nodes.loader.visible
        assert viewer.phase is ViewerPhase.OPENING
        viewer.close()
        assert viewer.phase is ViewerPhase.CLOSED

    def test_load_failure_keeps_loader_up(self, make_viewer):
        viewer = make_viewer(loader=StubLoader(failing={"img0.jpg"}))
        viewer.open_album(make_album(2))
        assert isinstance(viewer.last_error, ImageLoadError)
        assert viewer.nodes.loader.visible
        assert viewer.in_transition
        assert viewer.phase is ViewerPhase.OPENING
        assert viewer.next() is False
        assert viewer.state.current_index == 0

        assert viewer.handle_click("lb-loader") is True
        assert viewer.phase is ViewerPhase.CLOSED

    def test_stale_load_after_close_discarded(self, make_viewer):
        loader = DeferredLoader()
        viewer = make_viewer(loader=loader)
        viewer.open_album(make_album(2))
        viewer.close()
        assert viewer.phase is ViewerPhase.CLOSED

        loader.complete()
        assert "src" not in viewer.nodes.image.element.attrs
        assert viewer.current_image is None
        assert viewer.phase is ViewerPhase.CLOSED

    def test_stale_load_after_reopen_discarded(self, make_viewer):
        loader = DeferredLoader()
        viewer = make_viewer(loader=loader)
        viewer.open_album(make_album(2))
        viewer.open_album(make_album(3))
        loader.complete(0, size=(10, 10))
        assert viewer.in_transition
        loader.complete(0)
        assert not viewer.in_transition
        assert viewer.current_image.size == Dimension(800, 600)


# ---------------------------------------------------------------------------
# Closing
# ---------------------------------------------------------------------------

class TestClose:

    def test_close_releases_host(self, make_viewer, host):
        viewer = make_viewer()
        viewer.open_album(make_album(2))
        viewer.close()
        assert viewer.phase is ViewerPhase.CLOSED
        assert host.listeners == []
        assert not host.embeds_hidden
        assert not viewer.nodes.overlay.visible
        assert not viewer.nodes.frame.visible
        assert viewer.state.count == 0
        assert not viewer.input.keyboard_enabled

    def test_close_waits_for_fades(self, make_viewer, frames, clock):
        viewer = make_viewer(fade_duration=600)
        viewer.open_album(make_album(1))
        clock.advance(600)
        frames.run_frame()

        viewer.close()
        assert viewer.phase is ViewerPhase.CLOSING
        assert not viewer.is_open
        clock.advance(600)
        frames.run_frame()
        assert viewer.phase is ViewerPhase.CLOSED

    def test_close_is_idempotent(self, make_viewer):
        viewer = make_viewer()
        viewer.close()
        viewer.open_album(make_album(1))
        viewer.close()
        viewer.close()
        assert viewer.phase is ViewerPhase.CLOSED

    def test_close_then_open_resets(self, make_viewer):
        viewer = make_viewer()
        first = make_album(4)
        viewer.open_album(first, first[3])
        viewer.close()

        viewer.open_album(make_album(2))
        assert viewer.state.current_index == 0
        assert viewer.state.count == 2
        assert viewer.phase is ViewerPhase.OPEN

    def test_reopen_while_closing(self, make_viewer, frames, clock):
        viewer = make_viewer(fade_duration=600)
        viewer.open_album(make_album(1))
        viewer.close()
        viewer.open_album(make_album(2))

        clock.advance(600)
        frames.run_frame()
        assert viewer.phase is ViewerPhase.OPEN
        assert viewer.nodes.frame.visible
        assert viewer.nodes.overlay.visible


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class TestInput:

    def test_keys_navigate_and_close(self, make_viewer):
        viewer = make_viewer()
        viewer.open_album(make_album(3))
        assert viewer.handle_key("n") is True
        assert viewer.handle_key("ArrowLeft") is True
        assert viewer.state.current_index == 0
        assert viewer.handle_key("q") is False
        assert viewer.handle_key("Escape") is True
        assert viewer.phase is ViewerPhase.CLOSED

    def test_keys_ignored_when_closed(self, make_viewer):
        viewer = make_viewer()
        assert viewer.handle_key("Escape") is False

    def test_custom_key_bindings(self, make_viewer):
        viewer = make_viewer(key_bindings=KeyBindings(next=("j",), previous=("k",), close=("q",)))
        viewer.open_album(make_album(2))
        assert viewer.handle_key("n") is False
        assert viewer.handle_key("j") is True
        assert viewer.state.current_index == 1

    def test_click_targets(self, make_viewer):
        viewer = make_viewer()
        viewer.open_album(make_album(3))
        assert viewer.handle_click("lb-next") is True
        assert viewer.handle_click("lb-prev") is True
        assert viewer.handle_click("lb-image") is False
        assert viewer.handle_click("lb-overlay") is True
        assert viewer.phase is ViewerPhase.CLOSED

    def test_caption_link_click_opens_href(self, make_viewer, host):
        viewer = make_viewer()
        viewer.open_album([
            AlbumEntry("a.jpg", title='See <a href="https://example.org/a" target="_blank">source</a>'),
            AlbumEntry("b.jpg", title='<a href="/b">b</a>'),
        ])
        assert viewer.handle_click("lb-caption") is True
        viewer.next()
        assert viewer.handle_click("lb-caption") is True
        assert host.opened_links == [("https://example.org/a", "_blank"), ("/b", None)]
        assert viewer.phase is ViewerPhase.OPEN

    def test_sanitized_caption_links_inert(self, make_viewer, host):
        viewer = make_viewer(sanitize_title=True)
        viewer.open_album([AlbumEntry("a.jpg", title='<a href="/x">x</a>')])
        assert viewer.handle_click("lb-caption") is False
        assert host.opened_links == []

    def test_right_click_passthrough(self, make_viewer, frames):
        viewer = make_viewer()
        viewer.open_album(make_album(3))
        nav = viewer.nodes.nav.element

        assert viewer.handle_click("lb-next", MOUSE_RIGHT) is True
        assert nav.pointer_events is False

        viewer.handle_context_menu()
        assert nav.pointer_events is False
        frames.run_frame()
        assert nav.pointer_events is True
        assert not viewer.input.nav_passthrough

    def test_right_click_passthrough_disabled(self, make_viewer):
        viewer = make_viewer(enable_right_click=False)
        viewer.open_album(make_album(3))
        assert viewer.handle_click("lb-nav", MOUSE_RIGHT) is False
        assert viewer.nodes.nav.element.pointer_events is True

    def test_pointer_hover_releases_forced_opacity(self, make_viewer):
        viewer = make_viewer()
        viewer.open_album(make_album(3))
        assert viewer.nodes.next.current_opacity == 1.0

        viewer.handle_pointer_move(10, 10)
        assert viewer.state.user_can_hover
        assert viewer.nodes.next.current_opacity is None

    def test_hover_probe_failure_is_tolerated(self, make_viewer, host):
        def probe():
            raise UnsupportedInputError("no pointer")

        host.probe_hover = probe
        viewer = make_viewer()
        viewer.open_album(make_album(2))
        assert viewer.phase is ViewerPhase.OPEN
        assert not viewer.state.user_can_hover

    def test_resize_restretches_overlay(self, make_viewer, host):
        viewer = make_viewer()
        viewer.open_album(make_album(1))
        host.resize(1600, 1000)
        assert viewer.nodes.overlay.dimension == Dimension(1600, 1000)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:

    def test_close_all(self, host, effects):
        registry = ViewerRegistry()
        viewers = [
            registry.add(Lightbox(host=host, loader=StubLoader(), effects=effects))
            for _ in range(3)
        ]
        viewers[0].open_album(make_album(2))
        viewers[2].open_album(make_album(1))

        assert len(registry) == 3
        assert registry.close_all() == 2
        assert all(v.phase is ViewerPhase.CLOSING for v in (viewers[0], viewers[2]))

    def test_add_remove(self):
        registry = ViewerRegistry()
        viewer = registry.add(Lightbox(loader=StubLoader()))
        registry.add(viewer)
        assert len(registry) == 1
        assert viewer in registry
        registry.remove(viewer)
        assert list(registry) == []
