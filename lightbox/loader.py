"""Out-of-band image loading.

Workers resolve an image's natural size off the main thread and post the
result back as a UI event; poll_ui_events() runs those callbacks on the main
thread, so the viewer itself never sees a second thread.
"""

from __future__ import annotations
from collections import deque
from queue import PriorityQueue, Empty
from threading import Thread, Lock
from typing import Callable, Deque, List, Optional, Protocol

from .types import ImageInfo, LoadPriority, LoadTask, UIEvent
from .image_utils import read_image_info
from .errors import ImageLoadError
from .config import ASYNC_WORKERS
from .logging import log, now


LoadCallback = Callable[[str, Optional[ImageInfo], Optional[Exception]], None]


class ImageSource(Protocol):
    """Anything that can resolve an href to its natural size."""

    def submit(self, href: str, priority: LoadPriority, callback: LoadCallback) -> None: ...


class AsyncImageLoader:
    """Priority-ordered worker pool with main-thread result delivery."""

    def __init__(self, loader_func: Callable[[str], ImageInfo] = read_image_info,
                 workers: int = ASYNC_WORKERS):
        self.task_queue: "PriorityQueue[LoadTask]" = PriorityQueue()
        self.loader_func = loader_func
        self.running = True
        self.ui_events: Deque[UIEvent] = deque()
        self.ui_lock = Lock()
        self.workers: List[Thread] = []

        for _ in range(workers):
            worker = Thread(target=self._worker_loop, daemon=True)
            worker.start()
            self.workers.append(worker)

    def _worker_loop(self):
        while self.running:
            try:
                task = self.task_queue.get(timeout=0.1)
            except Empty:
                continue

            result = None
            error = None

            try:
                result = self.loader_func(task.href)
            except ImageLoadError as e:
                error = e
            except Exception as e:
                error = ImageLoadError(task.href, repr(e))

            self._push_ui_event(task.callback, (task.href, result, error))
            self.task_queue.task_done()

    def _push_ui_event(self, callback: Callable, args: tuple):
        with self.ui_lock:
            self.ui_events.append(UIEvent(callback, args))

    def poll_ui_events(self, max_events: int = 100) -> int:
        """Deliver finished loads on the calling (main) thread."""
        events_to_process = []
        with self.ui_lock:
            while self.ui_events and len(events_to_process) < max_events:
                events_to_process.append(self.ui_events.popleft())

        for event in events_to_process:
            try:
                event.callback(*event.args)
            except Exception as e:
                log(f"[UI_EVENT][ERR] {e!r}")
        return len(events_to_process)

    def submit(self, href: str, priority: LoadPriority, callback: LoadCallback) -> None:
        task = LoadTask(href, priority, callback, now())
        self.task_queue.put(task)

    def shutdown(self):
        self.running = False
        for worker in self.workers:
            worker.join(timeout=1.0)


class ImmediateLoader:
    """Resolves loads synchronously inside submit()."""

    def __init__(self, loader_func: Callable[[str], ImageInfo] = read_image_info):
        self.loader_func = loader_func

    def submit(self, href: str, priority: LoadPriority, callback: LoadCallback) -> None:
        try:
            info = self.loader_func(href)
        except ImageLoadError as e:
            callback(href, None, e)
            return
        except Exception as e:
            callback(href, None, ImageLoadError(href, repr(e)))
            return
        callback(href, info, None)
