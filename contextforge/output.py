"""Terminal output: styled printing, progress bars and a live status line."""

from __future__ import annotations

import os
import sys
import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import TextIO

STYLE_SYMBOLS = {
    "check": "✓",
    "cross": "✗",
    "warning": "!",
    "pending": "◉",
    "info": "ℹ",
    "arrow": "→",
    "bullet": "•",
    "dot": "·",
    "hline": "━",
}

_DEFAULT_BAR_WIDTH = 30
_CLEAR_TWO_LINES = "\033[2A\033[J"


def _color_enabled() -> bool:
    if "NO_COLOR" in os.environ:
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


@dataclass(frozen=True)
class _Style:
    color: int
    bold: bool = False

    def render(self, text: str) -> str:
        if not text or not _color_enabled():
            return text
        codes = ["1"] if self.bold else []
        codes.append(f"38;5;{self.color}")
        return f"\033[{';'.join(codes)}m{text}\033[0m"

    def bolded(self) -> _Style:
        return replace(self, bold=True)


SUCCESS_STYLE = _Style(37)
SUCCESS2_STYLE = _Style(2)
ERROR_STYLE = _Style(9)
WARNING_STYLE = _Style(11)
PENDING_STYLE = _Style(12)
INFO_STYLE = _Style(14)
DEBUG_STYLE = _Style(250)
DETAIL_STYLE = _Style(13)


def print_success(text: str) -> None:
    print(SUCCESS_STYLE.render(text))


def print_success2(text: str) -> None:
    print(SUCCESS2_STYLE.render(text))


def print_error(text: str) -> None:
    print(ERROR_STYLE.render(text))


def print_warning(text: str) -> None:
    print(WARNING_STYLE.render(text))


def print_info(text: str) -> None:
    print(INFO_STYLE.render(text))


def print_debug(text: str) -> None:
    print(DEBUG_STYLE.render(text))


def print_detail(text: str) -> None:
    print(DETAIL_STYLE.render(text))


def render_progress_bar(current: int, total: int, width: int = _DEFAULT_BAR_WIDTH) -> str:
    """Render a bar with the completed fraction and percentage."""
    if width <= 0:
        width = _DEFAULT_BAR_WIDTH
    percent = current / total if total else 0.0
    filled = max(0, min(int(percent * width), width))
    bullet = STYLE_SYMBOLS["bullet"]
    bar = bullet + STYLE_SYMBOLS["hline"] * filled + " " * (width - filled) + bullet
    return DEBUG_STYLE.render(f"{bar} {percent * 100:.1f}% {bullet} ")


def _format_duration(seconds: float) -> str:
    total = int(seconds + 0.5)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


class Status(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


class Manager:
    """A two-line status display refreshed from a background thread."""

    refresh_interval = 0.2

    def __init__(self, stream: TextIO | None = None) -> None:
        self.status = Status.PENDING
        self.message = ""
        self.progress = ""
        self.completed = False
        self.error: BaseException | None = None
        self.disabled = False
        self._stream = stream
        self._start_time = time.monotonic()
        self._lock = threading.RLock()
        self._done = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def _out(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def __enter__(self) -> Manager:
        self.start_display()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop_display()

    def disable(self) -> None:
        with self._lock:
            self.disabled = True

    def set_message(self, message: str) -> None:
        with self._lock:
            self.message = message

    def complete(self, message: str = "", err: BaseException | None = None) -> None:
        """Mark the work finished, successfully or with ``err``."""
        with self._lock:
            self.progress = ""
            self.message = message or "Completed"
            self.completed = True
            if err is not None:
                self.status = Status.ERROR
                self.error = err
            else:
                self.status = Status.SUCCESS

    def report_progress(self, outof: int, final: int, text: str) -> None:
        with self._lock:
            bar = render_progress_bar(max(0, outof), final, _DEFAULT_BAR_WIDTH)
            self.progress = bar + DEBUG_STYLE.render(text)

    def start_display(self) -> None:
        if self._thread is not None:
            raise RuntimeError("display already started")
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop_display(self) -> None:
        self._done.set()
        if self._thread is not None:
            self._thread.join()

    def _run(self) -> None:
        self._out.write("\n\n\n")
        self._update_display()
        while not self._done.wait(self.refresh_interval):
            self._update_display()
        with self._lock:
            self.progress = ""
        self._update_display()
        self._show_error()

    def _status_indicator(self) -> str:
        if self.status is Status.SUCCESS:
            return SUCCESS_STYLE.render(STYLE_SYMBOLS["check"])
        if self.status is Status.ERROR:
            return ERROR_STYLE.render(STYLE_SYMBOLS["cross"])
        if self.status is Status.WARNING:
            return WARNING_STYLE.render(STYLE_SYMBOLS["warning"])
        return PENDING_STYLE.render(STYLE_SYMBOLS["pending"])

    def _styled_message(self) -> str:
        styles = {
            Status.SUCCESS: SUCCESS_STYLE,
            Status.ERROR: ERROR_STYLE,
            Status.WARNING: WARNING_STYLE,
        }
        return styles.get(self.status, PENDING_STYLE).render(self.message)

    def _update_display(self) -> None:
        with self._lock:
            if self.disabled:
                return
            out = self._out
            out.write(_CLEAR_TWO_LINES)
            indicator = self._status_indicator()
            if not self.completed and self.status is Status.PENDING and not self.message:
                out.write(f"  {indicator} {PENDING_STYLE.render('Waiting...')}\n")
            else:
                elapsed = _format_duration(time.monotonic() - self._start_time)
                out.write(
                    f"  {indicator} {DEBUG_STYLE.render(elapsed)} {self._styled_message()}\n"
                )
            out.write(f"      {DEBUG_STYLE.render(self.progress)}\n")
            out.flush()

    def _show_error(self) -> None:
        with self._lock:
            if self.disabled or self.error is None:
                return
            out = self._out
            out.write("  " + ERROR_STYLE.bolded().render("Encountered Errors:") + "\n")
            out.write(f"    {DEBUG_STYLE.render(str(self.error))}\n")
            out.flush()