"""Tests for the async and immediate image loaders."""
import time

import pytest

from lightbox.loader import AsyncImageLoader, ImmediateLoader
from lightbox.types import ImageInfo, LoadPriority
from lightbox.errors import ImageLoadError


def _fake_info(href):
    if href.startswith("bad"):
        raise ImageLoadError(href, "broken")
    if href.startswith("crash"):
        raise RuntimeError("decoder exploded")
    return ImageInfo(href, 100, 50)


def _pump_until(loader, predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        loader.poll_ui_events()
        if predicate():
            return True
        time.sleep(0.01)
    return False


@pytest.fixture()
def async_loader():
    loader = AsyncImageLoader(_fake_info, workers=2)
    yield loader
    loader.shutdown()


class TestAsyncImageLoader:

    def test_results_delivered_on_poll(self, async_loader):
        results = []
        async_loader.submit("a.png", LoadPriority.CURRENT, lambda *args: results.append(args))
        assert _pump_until(async_loader, lambda: results)

        href, info, error = results[0]
        assert href == "a.png"
        assert info.width == 100
        assert error is None

    def test_errors_delivered_as_image_load_error(self, async_loader):
        results = []
        cb = lambda *args: results.append(args)
        async_loader.submit("bad.png", LoadPriority.CURRENT, cb)
        async_loader.submit("crash.png", LoadPriority.NEIGHBOR, cb)
        assert _pump_until(async_loader, lambda: len(results) == 2)

        for href, info, error in results:
            assert info is None
            assert isinstance(error, ImageLoadError)
            assert error.href == href

    def test_callback_failure_does_not_stop_pump(self, async_loader):
        results = []

        def boom(*args):
            raise RuntimeError("boom")

        async_loader.submit("a.png", LoadPriority.CURRENT, boom)
        async_loader.submit("b.png", LoadPriority.CURRENT, lambda *args: results.append(args))
        assert _pump_until(async_loader, lambda: results)


class TestImmediateLoader:

    def test_success(self):
        results = []
        ImmediateLoader(_fake_info).submit("a.png", LoadPriority.CURRENT, lambda *a: results.append(a))
        assert results == [("a.png", ImageInfo("a.png", 100, 50), None)]

    def test_failure(self):
        results = []
        ImmediateLoader(_fake_info).submit("bad.png", LoadPriority.CURRENT, lambda *a: results.append(a))
        href, info, error = results[0]
        assert info is None and isinstance(error, ImageLoadError)

    def test_unexpected_error_wrapped(self):
        results = []
        ImmediateLoader(_fake_info).submit("crash.png", LoadPriority.NEIGHBOR, lambda *a: results.append(a))
        href, info, error = results[0]
        assert href == "crash.png"
        assert info is None
        assert isinstance(error, ImageLoadError)
        assert "decoder exploded" in str(error)
