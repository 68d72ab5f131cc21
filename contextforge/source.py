"""Collect a source tree into a single Markdown context document."""

from __future__ import annotations

import io
import os
import shutil
import stat
import tempfile
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from urllib.parse import urlsplit

import requests

from contextforge.ignores import IgnorePatterns, is_binary

_LANGUAGES = {
    ".go": "go",
    ".js": "javascript",
    ".ts": "typescript",
    ".py": "python",
    ".java": "java",
    ".c": "c",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".rb": "ruby",
    ".php": "php",
    ".swift": "swift",
    ".rs": "rust",
    ".sh": "bash",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".json": "json",
    ".md": "markdown",
    ".html": "html",
    ".css": "css",
    ".sql": "sql",
    ".dockerfile": "dockerfile",
}

_FENCE = "```"
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class SourceError(Exception):
    """Raised when a source tree cannot be collected or written."""


@dataclass
class FileEntry:
    path: str
    content: str
    language: str


@dataclass
class SourceContext:
    generation_date: str
    file_count: int = 0
    total_size: int = 0
    directory_tree: str = ""
    files: list[FileEntry] = field(default_factory=list)


@dataclass
class ProcessorConfig:
    output_path: str
    additional_ignores: list[str] = field(default_factory=list)


def _extension(path: str) -> str:
    """Return the suffix from the last dot of the final path element."""
    for index in range(len(path) - 1, -1, -1):
        ch = path[index]
        if ch in ("/", os.sep):
            return ""
        if ch == ".":
            return path[index:]
    return ""


def detect_language(path: str) -> str:
    """Map a file name to a code-fence language tag, or ``""``."""
    return _LANGUAGES.get(_extension(path).lower(), "")


def _now_rfc3339() -> str:
    stamp = datetime.now().astimezone().isoformat(timespec="seconds")
    return stamp[:-6] + "Z" if stamp.endswith("+00:00") else stamp


def render_markdown(context: SourceContext) -> str:
    """Render the collected context as a Markdown document."""
    header = (
        "# Source Code Context\n\n"
        f"Generated on: {context.generation_date}\n\n"
        "## Repository Overview\n"
        f"- Total Files: {context.file_count}\n"
        f"- Total Size: {context.total_size} bytes\n\n"
        "## Directory Structure\n"
        f"{_FENCE}\n{context.directory_tree}\n{_FENCE}\n\n"
        "## File Contents\n\n"
    )
    body = "".join(
        f"\n### File: {entry.path}\n\n"
        f"{_FENCE}{entry.language}\n{entry.content}\n{_FENCE}\n\n\n"
        for entry in context.files
    )
    return header + body


def _archive_location(url: str) -> tuple[str, dict[str, str]]:
    parts = urlsplit(url)
    if (parts.hostname or "") not in ("github.com", "www.github.com"):
        raise SourceError(f"failed to clone repository: not a GitHub URL: {url}")
    segments = [segment for segment in parts.path.split("/") if segment]
    if len(segments) < 2:
        raise SourceError(f"failed to clone repository: no repository in URL: {url}")
    owner, repo = segments[0], segments[1].removesuffix(".git")
    token = os.environ.get("GH_TOKEN", "")
    if token:
        return (
            f"https://api.github.com/repos/{owner}/{repo}/zipball",
            {"Authorization": f"Bearer {token}"},
        )
    return f"https://github.com/{owner}/{repo}/archive/HEAD.zip", {}


def _extract_archive(data: bytes, dest: Path) -> None:
    """Unpack a repository archive into ``dest``, dropping its top directory."""
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        for info in archive.infolist():
            _, _, inner = info.filename.partition("/")
            if not inner:
                continue
            target = (dest / inner).resolve()
            if target != dest and dest not in target.parents:
                raise SourceError(
                    f"failed to clone repository: unsafe archive entry {info.filename}"
                )
            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with archive.open(info) as src, open(target, "wb") as out:
                shutil.copyfileobj(src, out)


def download_repository(url: str, dest: str | os.PathLike[str]) -> None:
    """Fetch the default branch of a GitHub repository into ``dest``.

    A ``GH_TOKEN`` environment variable, if set, authenticates the request.
    """
    archive_url, headers = _archive_location(url)
    try:
        response = requests.get(archive_url, headers=headers)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise SourceError(f"failed to clone repository: {exc}") from exc
    try:
        _extract_archive(response.content, Path(dest).resolve())
    except zipfile.BadZipFile as exc:
        raise SourceError(f"failed to clone repository: {exc}") from exc


class Processor:
    """Walks a directory and writes its text files into one Markdown file."""

    def __init__(self, config: ProcessorConfig) -> None:
        self.config = config
        self.ignore_patterns = IgnorePatterns(config.additional_ignores)

    def _walk(self, root: str) -> Iterator[tuple[str, str, os.stat_result]]:
        """Yield ``(path, relative path, lstat)`` in lexical order, pruning ignores."""

        def visit(path: str, rel: str, info: os.stat_result):
            if self.ignore_patterns.should_ignore(rel):
                return
            yield path, rel, info
            if stat.S_ISDIR(info.st_mode):
                for name in sorted(os.listdir(path)):
                    child = os.path.join(path, name)
                    child_rel = name if rel == "." else os.path.join(rel, name)
                    yield from visit(child, child_rel, os.lstat(child))

        yield from visit(root, ".", os.lstat(root))

    def collect(self, root: str) -> SourceContext:
        """Gather every non-ignored text file under ``root``."""
        context = SourceContext(generation_date=_now_rfc3339())
        for path, rel, info in self._walk(root):
            if stat.S_ISDIR(info.st_mode):
                continue
            with open(path, "rb") as handle:
                data = handle.read()
            if is_binary(data):
                continue
            context.total_size += info.st_size
            context.files.append(
                FileEntry(
                    path=rel,
                    content=data.decode(_ENCODING, _ERRORS),
                    language=detect_language(rel),
                )
            )
        context.file_count = len(context.files)
        context.directory_tree = self.generate_directory_tree(root)
        return context

    def generate_directory_tree(self, root: str) -> str:
        """Return an indented listing of the non-ignored entries under ``root``."""
        try:
            lines = [
                "  " * rel.count(os.sep)
                + os.path.basename(path)
                + ("/" if stat.S_ISDIR(info.st_mode) else "")
                + "\n"
                for path, rel, info in self._walk(root)
                if rel != "."
            ]
        except OSError as exc:
            return f"Error generating tree: {exc}"
        return "".join(lines)

    def process_directory(self, path: str) -> None:
        """Collect ``path`` and write the document to the configured output."""
        try:
            context = self.collect(path)
        except OSError as exc:
            raise SourceError(f"failed to process directory: {exc}") from exc
        try:
            with open(
                self.config.output_path, "w", encoding=_ENCODING, errors=_ERRORS, newline=""
            ) as out:
                out.write(render_markdown(context))
        except OSError as exc:
            raise SourceError(f"failed to create output file: {exc}") from exc

    def process_github_url(self, url: str) -> None:
        """Download a GitHub repository and process it like a directory."""
        with tempfile.TemporaryDirectory(prefix="aicontext-clone-") as temp_dir:
            download_repository(url, temp_dir)
            self.process_directory(temp_dir)