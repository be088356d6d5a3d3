"""Animation scheduler - time-driven opacity and size tweens.

Every tween is an explicit timed state machine advanced by a tick. The first
tick runs synchronously inside the call that starts the tween; later ticks are
requested from a frame source, so a tween keeps running for as long as the
host keeps pumping frames.
"""

from __future__ import annotations
import heapq
import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from .types import Dimension
from .math_utils import lerp
from .config import ANIM_DEFAULT_MS, FRAME_FALLBACK_MS
from .logging import log, now_ms


Callback = Optional[Callable[[], None]]


class Animatable(Protocol):
    """What a tween needs from its target node."""
    name: str
    resting_opacity: float
    current_opacity: Optional[float]
    dimension: Dimension

    def set_opacity(self, opacity: Optional[float]) -> None: ...
    def set_visible(self, visible: bool) -> None: ...
    def set_size(self, width: float, height: float) -> None: ...


# ═══════════════════════════════════════════════════════════════════════════
# Frame sources
# ═══════════════════════════════════════════════════════════════════════════

class FrameCallbacks:
    """Per-frame callback queue, drained once per rendered frame by the host loop."""

    def __init__(self):
        self._pending: List[Callable[[], None]] = []

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request(self, callback: Callable[[], None]) -> None:
        """Run callback on the next frame."""
        self._pending.append(callback)

    def run_frame(self) -> int:
        """Run every callback requested before this frame. Returns the count."""
        callbacks, self._pending = self._pending, []
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                log(f"[FRAME][ERR] Callback failed: {e!r}")
        return len(callbacks)


class TimerFrames:
    """Fixed-interval timer queue used when no per-frame callback exists."""

    def __init__(self, interval_ms: float = FRAME_FALLBACK_MS,
                 clock: Callable[[], float] = now_ms):
        self.interval_ms = interval_ms
        self.clock = clock
        self._heap: List[Tuple[float, int, Callable[[], None]]] = []
        self._seq = itertools.count()

    @property
    def pending(self) -> int:
        return len(self._heap)

    def request(self, callback: Callable[[], None]) -> None:
        """Run callback once the interval has elapsed."""
        heapq.heappush(self._heap, (self.clock() + self.interval_ms, next(self._seq), callback))

    def next_due(self) -> Optional[float]:
        return self._heap[0][0] if self._heap else None

    def run_frame(self) -> int:
        """Run every callback whose timer has expired. Returns the count."""
        t = self.clock()
        due = []
        while self._heap and self._heap[0][0] <= t:
            due.append(heapq.heappop(self._heap)[2])
        for callback in due:
            try:
                callback()
            except Exception as e:
                log(f"[TIMER][ERR] Callback failed: {e!r}")
        return len(due)


# ═══════════════════════════════════════════════════════════════════════════
# Tweens
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class Tween(ABC):
    """Base class for a running tween."""
    node: Animatable
    duration_ms: float = ANIM_DEFAULT_MS
    callback: Callback = None
    last: float = 0.0
    cancelled: bool = False

    @property
    @abstractmethod
    def channel(self) -> str:
        """Property animated by this tween ('opacity' or 'size')."""

    @abstractmethod
    def step(self, t: float) -> bool:
        """Advance to time t (ms). Returns True when finished."""


@dataclass(eq=False)
class Fade(Tween):
    """Linear opacity ramp: +/- elapsed/duration per tick."""
    direction: int = 1   # 1 = in, -1 = out
    target: float = 1.0

    @property
    def channel(self) -> str:
        return "opacity"

    def step(self, t: float) -> bool:
        if self.duration_ms <= 0:
            delta = 1.0
        else:
            delta = (t - self.last) / self.duration_ms
        self.last = t

        current = self.node.current_opacity or 0.0
        opacity = current + self.direction * delta

        if self.direction > 0:
            if opacity < self.target:
                self.node.set_opacity(opacity)
                return False
            self.node.set_opacity(self.target)
            return True

        if opacity > 0:
            self.node.set_opacity(opacity)
            return False
        self.node.set_visible(False)
        self.node.set_opacity(None)
        return True


@dataclass(eq=False)
class Resize(Tween):
    """Linear size interpolation from one dimension to another."""
    start: float = 0.0
    from_size: Dimension = Dimension.ZERO
    to_size: Dimension = Dimension.ZERO

    @property
    def channel(self) -> str:
        return "size"

    def step(self, t: float) -> bool:
        self.last = t
        if self.duration_ms <= 0:
            progress = 1.0
        else:
            progress = (t - self.start) / self.duration_ms
        if progress >= 1.0:
            self.node.set_size(self.to_size.width, self.to_size.height)
            return True
        self.node.set_size(
            lerp(self.from_size.width, self.to_size.width, progress),
            lerp(self.from_size.height, self.to_size.height, progress),
        )
        return False


class Effects:
    """Starts tweens on nodes and drives them through a frame source."""

    def __init__(self, frames=None, clock: Callable[[], float] = now_ms):
        self.clock = clock
        # Best available tick source: the host's per-frame callbacks,
        # otherwise a fixed-interval timer.
        self.frames = frames if frames is not None else TimerFrames(clock=clock)
        self._active: Dict[Tuple[int, str], Tween] = {}

    def fade_in(self, node: Animatable, duration: float = ANIM_DEFAULT_MS,
                callback: Callback = None) -> Fade:
        """Fade node from 0 to its resting opacity, making it visible."""
        target = node.resting_opacity
        node.set_opacity(0.0)
        node.set_visible(True)
        tween = Fade(node=node, duration_ms=duration, callback=callback,
                     last=self.clock(), direction=1, target=target)
        self._start(tween)
        return tween

    def fade_out(self, node: Animatable, duration: float = ANIM_DEFAULT_MS,
                 callback: Callback = None) -> Fade:
        """Fade node from 1 to 0, then hide it and unset its opacity."""
        node.set_opacity(1.0)
        tween = Fade(node=node, duration_ms=duration, callback=callback,
                     last=self.clock(), direction=-1, target=0.0)
        self._start(tween)
        return tween

    def resize(self, node: Animatable, size: Dimension, duration: float = ANIM_DEFAULT_MS,
               callback: Callback = None) -> Resize:
        """Animate node size to the given dimension."""
        t = self.clock()
        tween = Resize(node=node, duration_ms=duration, callback=callback,
                       last=t, start=t, from_size=node.dimension, to_size=size)
        self._start(tween)
        return tween

    def stop(self, node: Animatable) -> None:
        """Cancel pending tweens on node. Their callbacks never fire."""
        for key in [k for k in self._active if k[0] == id(node)]:
            tween = self._active.pop(key)
            tween.cancelled = True
            log(f"[ANIM] Stopped {tween.channel} on {node.name}")

    def is_animating(self, node: Animatable) -> bool:
        return any(k[0] == id(node) for k in self._active)

    @property
    def active_count(self) -> int:
        return len(self._active)

    def _start(self, tween: Tween) -> None:
        key = (id(tween.node), tween.channel)
        previous = self._active.get(key)
        if previous is not None:
            # A newer tween on the same channel supersedes the old chain
            previous.cancelled = True
        self._active[key] = tween
        log(f"[ANIM] Started {type(tween).__name__.lower()} on {tween.node.name} "
            f"duration={tween.duration_ms}ms")
        self._tick(tween)

    def _tick(self, tween: Tween) -> None:
        if tween.cancelled:
            return
        if not tween.step(self.clock()):
            self.frames.request(lambda: self._tick(tween))
            return
        key = (id(tween.node), tween.channel)
        if self._active.get(key) is tween:
            del self._active[key]
        if tween.callback:
            tween.callback()
