"""Ignore rules for source trees and a heuristic binary-content check."""

from __future__ import annotations

import functools
import os
import re
from collections.abc import Iterable

DEFAULT_IGNORES: tuple[str, ...] = (
    ".git",
    ".gitignore",
    ".gitmodules",
    ".gitattributes",
    "node_modules",
    "*.gz",
    "*.bz2",
    "*.zip",
    "*.tar",
    "*.tgz",
    "*.xz",
    "*.rar",
    "*.7z",
    "vendor",
    "*.exe",
    "*.dll",
    "*.so",
    "*.dylib",
    "*.tar.gz",
    "*.jpg",
    "*.jpeg",
    "*.png",
    "*.gif",
    "*.ico",
    "*.tif",
    "*.tiff",
    "*.bmp",
    "*.svg",
    "*.webp",
    "*.mpg",
    "*.mp2",
    "*.mpeg",
    "*.ogg",
    "*.mp3",
    "*.mp4",
    "*.avi",
    "*.pdf",
    "*.doc",
    "*.docx",
    "*.class",
    "*.pyc",
    "*.o",
    "poetry.lock",
    "yarn.lock",
    "package-lock.json",
    "composer.lock",
    "pytest_cache",
    "pypy_cache",
    "pyproject.toml",
    "poetry.toml",
    "bin",
    "LICENSE",
    "AUTHORS",
    "CONTRIBUTORS",
    "OWNERS",
    "CONTRIBUTING.md",
    "CHANGELOG.md",
    "go.sum",
    "go.mod",
    ".obsidian",
    ".vscode",
    ".idea",
    ".DS_Store",
    "*.apk",
    "*.ipa",
    "*.dmg",
    "*.iso",
    "*.msi",
    "*.deb",
    "*.rpm",
    "*.jar",
    "*.war",
    "*.ttf",
    "*.woff",
    "*.woff2",
    "*.otf",
)

_CUSTOM_PREFIX = "*/"
_BINARY_SAMPLE = 512
_NON_PRINTABLE_RATIO = 0.3

_SEPARATORS = "".join(sorted({"/", os.sep}))
_NOT_SEP = "[^" + re.escape(_SEPARATORS) + "]"
_ESCAPES = os.sep != "\\"


class _BadPattern(ValueError):
    pass


def _read_class_char(pattern: str, i: int) -> tuple[str, int]:
    if i >= len(pattern) or pattern[i] in "-]":
        raise _BadPattern(pattern)
    if pattern[i] == "\\" and _ESCAPES:
        i += 1
        if i >= len(pattern):
            raise _BadPattern(pattern)
    return pattern[i], i + 1


def _translate_class(pattern: str, i: int) -> tuple[str, int]:
    negate = i < len(pattern) and pattern[i] == "^"
    if negate:
        i += 1
    ranges: list[str] = []
    while True:
        if i < len(pattern) and pattern[i] == "]" and ranges:
            i += 1
            break
        lo, i = _read_class_char(pattern, i)
        hi = lo
        if i < len(pattern) and pattern[i] == "-":
            hi, i = _read_class_char(pattern, i + 1)
        if lo > hi:
            raise _BadPattern(pattern)
        ranges.append(re.escape(lo) if lo == hi else f"{re.escape(lo)}-{re.escape(hi)}")
    return "[" + ("^" if negate else "") + "".join(ranges) + "]", i


@functools.lru_cache(maxsize=None)
def _compile(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        i += 1
        if ch == "*":
            parts.append(_NOT_SEP + "*")
        elif ch == "?":
            parts.append(_NOT_SEP)
        elif ch == "[":
            cls, i = _translate_class(pattern, i)
            parts.append(cls)
        elif ch == "\\" and _ESCAPES:
            if i >= len(pattern):
                raise _BadPattern(pattern)
            parts.append(re.escape(pattern[i]))
            i += 1
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.DOTALL)


def _match(pattern: str, name: str) -> bool:
    """Shell-style match where wildcards never cross a path separator.

    A malformed pattern matches nothing.
    """
    try:
        return _compile(pattern).fullmatch(name) is not None
    except _BadPattern:
        return False


def _base_name(path: str) -> str:
    stripped = path.rstrip(_SEPARATORS)
    if not stripped:
        return os.sep if path else "."
    return re.split("[" + re.escape(_SEPARATORS) + "]", stripped)[-1]


class IgnorePatterns:
    """Built-in ignore rules plus user-supplied ones."""

    def __init__(self, additional_patterns: Iterable[str] = ()) -> None:
        self.default_patterns: list[str] = list(DEFAULT_IGNORES)
        self.custom_patterns: list[str] = [
            _CUSTOM_PREFIX + pattern for pattern in additional_patterns
        ]

    def should_ignore(self, path: str) -> bool:
        """Return True if ``path`` (relative to the scanned root) is excluded."""
        base = _base_name(path)
        if any(_match(pattern, base) for pattern in self.default_patterns):
            return True
        return any(
            _match(pattern, path) or _match(pattern.removeprefix(_CUSTOM_PREFIX), base)
            for pattern in self.custom_patterns
        )


def is_binary(content: bytes) -> bool:
    """Guess whether ``content`` is binary from its first 512 bytes."""
    sample = content[:_BINARY_SAMPLE]
    if not sample:
        return False
    if 0 in sample:
        return True
    non_printable = sum(1 for byte in sample if byte < 32 and byte not in b"\n\r\t")
    return non_printable / len(sample) > _NON_PRINTABLE_RATIO