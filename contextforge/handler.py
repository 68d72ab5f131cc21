"""Dispatch inputs (GitHub, local directories, web pages) to their collectors."""

from __future__ import annotations

import os
import re
import shutil
from concurrent.futures import ThreadPoolExecutor, as_completed
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from contextforge.console import Console
from contextforge.output import Manager
from contextforge.source import Processor, ProcessorConfig
from contextforge.web import process_web_content

CONTEXT_DIR = "context"
IMAGES_DIR = os.path.join(CONTEXT_DIR, "images")

URL_PATTERNS: dict[str, re.Pattern[str]] = {
    "gh": re.compile(r"https://github.com/.+"),
    "yt": re.compile(r"https://youtu.be/.+"),
    "yt1": re.compile(r"https://www.youtube.com/watch\?v=.+"),
    "yt2": re.compile(r"https://youtube.com/watch\?v=.+"),
    "dir": re.compile(r"^\.?\./.+|^/.*"),
}

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")
_NOISE = re.compile(r"https?_|www_|youtube_com_|github_com_|watch_v_|__|com_")
_LOCAL_PATH = re.compile(r"^\.?\.?/.*")


def get_out_file_name(text: str) -> str:
    """Derive a Markdown file name from a URL or path."""
    name = _NON_ALNUM.sub("_", text).lower()
    name = _NOISE.sub("", name).strip("_")
    return name + ".md"


def clean_url(raw_url: str) -> str:
    """Normalise an input: expand ``github/`` shorthand and drop tracking parts."""
    if raw_url.startswith("github/"):
        raw_url = "https://github.com/" + raw_url[len("github/"):]
    if _LOCAL_PATH.match(raw_url):
        return raw_url
    try:
        parts = urlsplit(raw_url)
    except ValueError as exc:
        raise ValueError(f"failed to parse url: {exc}") from exc
    query = ""
    if "youtube.com" in parts.netloc:
        video_ids = parse_qs(parts.query).get("v")
        if video_ids and video_ids[0]:
            query = urlencode({"v": video_ids[0]})
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, ""))


def classify_url(url: str) -> str | None:
    """Return ``gh``, ``yt``, ``dir``, ``generic`` or None for an unusable input."""
    for kind, pattern in URL_PATTERNS.items():
        if pattern.search(url):
            return "yt" if kind.startswith("yt") else kind
    if url.startswith("http"):
        return "generic"
    return None


def _process(url: str, kind: str, ignore_list: list[str], console: Console) -> None:
    if kind in ("gh", "dir"):
        output = os.path.join(CONTEXT_DIR, f"{kind}-{get_out_file_name(url)}")
        processor = Processor(ProcessorConfig(output, list(ignore_list)))
        if kind == "gh":
            console.log("discovered as type gh; starting collection", False)
            processor.process_github_url(url)
        else:
            processor.process_directory(url)
    elif kind == "generic":
        output = os.path.join(CONTEXT_DIR, f"web-{get_out_file_name(url)}")
        process_web_content(url, output)
    elif kind == "yt":
        raise RuntimeError("video transcripts are not supported")


def handler(urls, ignore_list=(), threads=10, detail_log=False) -> list[str]:
    """Collect every input into ``context/`` and return the error messages."""
    cleaned = []
    for url in urls:
        try:
            cleaned.append(clean_url(url))
        except ValueError:
            continue

    manager = Manager()
    console = Console()
    if detail_log:
        manager.disable()
    else:
        console.disable()
    errors: list[str] = []
    with manager, console:
        manager.set_message("Creating file structure")
        console.log("Creating file structure", False)
        try:
            os.makedirs(IMAGES_DIR, exist_ok=True)
        except OSError as exc:
            message = f"couldn't create context directory: {exc}"
            manager.complete("", RuntimeError(message))
            return [message]

        total = len(cleaned)
        plural = "" if total == 1 else "s"
        manager.set_message(f"Gathering {total} context file{plural}")
        console.log(f"Gathering {total} context file{plural}", False)

        jobs = [(url, kind) for url in cleaned if (kind := classify_url(url)) is not None]
        done = 0
        with ThreadPoolExecutor(max_workers=max(1, threads)) as pool:
            futures = {
                pool.submit(_process, url, kind, list(ignore_list), console): url
                for url, kind in jobs
            }
            for future in as_completed(futures):
                exc = future.exception()
                if exc is not None:
                    errors.append(f"failed to process {futures[future]}: {exc}")
                done += 1
                manager.report_progress(done, total, f"{done} finished")
                console.log("finished", False, "total completed", done, "total URLs", total)

        try:
            if not os.listdir(IMAGES_DIR):
                shutil.rmtree(IMAGES_DIR)
        except OSError as exc:
            manager.set_message("Operations Completed, error in cleanup")
            errors.append(f"couldn't clean up images directory: {exc}")

        if errors:
            summary = "".join(f"{error}\n" for error in errors)
            manager.complete("", RuntimeError(summary))
            console.log("Completed all operations", True, "errors", summary)
        else:
            manager.complete("All operations completed", None)
            console.log("Completed all operations", False)
    return errors