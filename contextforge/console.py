"""Background log writer fed through a bounded queue."""

from __future__ import annotations

import json
import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any

_QUEUE_SIZE = 100
_BAD_KEY = "!BADKEY"


@dataclass(frozen=True)
class _Message:
    text: str
    is_error: bool
    args: tuple[Any, ...]


_STOP = object()


def _quote(text: str) -> str:
    if text == "" or any(ch.isspace() or ch in '="' for ch in text):
        return json.dumps(text)
    return text


def _format(text: str, args: tuple[Any, ...]) -> str:
    """Render ``text`` followed by key=value pairs taken from ``args``."""
    parts = [text]
    items = iter(args)
    for key in items:
        if not isinstance(key, str):
            parts.append(f"{_BAD_KEY}={_quote(str(key))}")
            continue
        try:
            value = next(items)
        except StopIteration:
            parts.append(f"{_BAD_KEY}={_quote(key)}")
            break
        parts.append(f"{_quote(key)}={_quote(str(value))}")
    return " ".join(parts)


class Console:
    """Logs messages from a worker thread; drops them when the queue is full."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("contextforge")
        self._queue: queue.Queue = queue.Queue(maxsize=_QUEUE_SIZE)
        self._lock = threading.Lock()
        self._disabled = False
        self._stopped = False
        self._thread: threading.Thread | None = None

    def __enter__(self) -> Console:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def disable(self) -> None:
        with self._lock:
            self._disabled = True

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("console already started")
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Write out queued messages and end the worker."""
        with self._lock:
            if self._stopped:
                raise RuntimeError("console already stopped")
            self._stopped = True
        if self._thread is not None:
            self._queue.put(_STOP)
            self._thread.join()

    def log(self, message: str, err_type: bool = False, *args: Any) -> None:
        if self._stopped:
            raise RuntimeError("console is stopped")
        try:
            self._queue.put_nowait(_Message(message, err_type, args))
        except queue.Full:
            pass

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            with self._lock:
                disabled = self._disabled
            if disabled:
                continue
            level = logging.ERROR if item.is_error else logging.INFO
            self._logger.log(level, "%s", _format(item.text, item.args))