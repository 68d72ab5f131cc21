"""Command-line entry point."""

from __future__ import annotations

import argparse
import csv
import sys

from contextforge.handler import handler
from contextforge.output import print_error
from contextforge.server import run_server

VERSION = "dev"
DEFAULT_THREADS = 10


def read_url_list(path: str) -> list[str]:
    """Return the non-blank, stripped lines of ``path``."""
    with open(path, encoding="utf-8") as handle:
        return [line.strip() for line in handle if line.strip()]


def _split_ignores(values: list[str] | None) -> list[str]:
    patterns: list[str] = []
    for value in values or []:
        if value == "":
            continue
        for row in csv.reader([value]):
            patterns.extend(row)
    return patterns


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contextforge",
        description=(
            "Produce AI context-file for GitHub project, directory, or web page. "
            "Use 'serve' to launch a web server with a UI."
        ),
    )
    parser.add_argument("url", nargs="?", help="URL or directory to process")
    parser.add_argument("-f", "--file", default="", help="File with list of URLs to process")
    parser.add_argument(
        "-t",
        "--threads",
        type=int,
        default=DEFAULT_THREADS,
        help="Number of threads to use for processing",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        action="append",
        help="Additional patterns to ignore (e.g., 'tests,docs'); "
        "helpful with GitHub or local directories",
    )
    parser.add_argument("--log", action="store_true", help="Enable log-style output")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s version {VERSION}")
    return parser


def _parse(parser: argparse.ArgumentParser, argv: list[str]) -> argparse.Namespace | int:
    try:
        return parser.parse_args(argv)
    except SystemExit as exc:
        return 0 if exc.code in (0, None) else 1


def main(argv: list[str] | None = None) -> int:
    args_list = sys.argv[1:] if argv is None else list(argv)

    if args_list and args_list[0] == "serve":
        serve_parser = argparse.ArgumentParser(
            prog="contextforge serve",
            description="Launch a web server to use the AI Context tool through a UI.",
        )
        parsed = _parse(serve_parser, args_list[1:])
        if isinstance(parsed, int):
            return parsed
        run_server()
        return 0

    parsed = _parse(_build_parser(), args_list)
    if isinstance(parsed, int):
        return parsed

    if parsed.url is None and not parsed.file:
        print_error("no URL argument or list file provided")
        return 1
    if parsed.url is not None and parsed.file:
        print_error("received both URL argument and list file")
        return 1

    if parsed.file:
        try:
            urls = read_url_list(parsed.file)
        except OSError:
            print_error("failed to open list file")
            return 1
        except ValueError:
            print_error("failed to read list file")
            return 1
    else:
        urls = [parsed.url]

    handler(urls, _split_ignores(parsed.ignore), parsed.threads, parsed.log)
    return 0