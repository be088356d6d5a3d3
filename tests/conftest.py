"""
Shared pytest fixtures for lightbox tests.

Everything here runs headless: no raylib window, no worker threads.
"""
import os
import sys

import pytest

# Ensure project root is on path for all tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from lightbox.logging import Logger, set_logger
from lightbox.effects import Effects, FrameCallbacks
from lightbox.host import HeadlessHost
from lightbox.options import ViewerOptions
from lightbox.types import AlbumEntry, ImageInfo
from lightbox.errors import ImageLoadError
from lightbox.viewer import Lightbox


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, t: float = 1000.0):
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, ms: float) -> None:
        self.t += ms


class StubLoader:
    """Resolves every href to a fixed size, synchronously."""

    def __init__(self, sizes=None, default=(800, 600), failing=()):
        self.sizes = dict(sizes or {})
        self.default = default
        self.failing = set(failing)
        self.requests = []

    def submit(self, href, priority, callback):
        self.requests.append((href, priority))
        if href in self.failing:
            callback(href, None, ImageLoadError(href, "broken"))
            return
        w, h = self.sizes.get(href, self.default)
        callback(href, ImageInfo(href, w, h), None)


class DeferredLoader:
    """Holds callbacks until the test completes them."""

    def __init__(self):
        self.pending = []

    def submit(self, href, priority, callback):
        self.pending.append((href, priority, callback))

    def complete(self, i=0, size=(800, 600)):
        href, _, callback = self.pending.pop(i)
        callback(href, ImageInfo(href, *size), None)

    def fail(self, i=0):
        href, _, callback = self.pending.pop(i)
        callback(href, None, ImageLoadError(href, "timeout"))


INSTANT = dict(fade_duration=0, image_fade_duration=0, resize_duration=0)


def make_album(n: int, titled: bool = True):
    return [
        AlbumEntry(href=f"img{i}.jpg", alt=f"alt {i}", title=f"Photo {i}" if titled else "")
        for i in range(n)
    ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def quiet_logger():
    logger = Logger()
    logger.enabled = False
    set_logger(logger)
    yield logger


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def frames():
    return FrameCallbacks()


@pytest.fixture()
def effects(frames, clock):
    return Effects(frames, clock=clock)


@pytest.fixture()
def host():
    return HeadlessHost()


@pytest.fixture()
def make_viewer(host, effects):
    """Factory for a viewer whose option-driven animations finish instantly."""

    def _make(loader=None, **overrides):
        options = ViewerOptions(**{**INSTANT, **overrides})
        return Lightbox(options=options, host=host, loader=loader or StubLoader(), effects=effects)

    return _make
