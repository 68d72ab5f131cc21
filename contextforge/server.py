"""HTTP front end for generating and downloading context files."""

from __future__ import annotations

import io
import json
import logging
import os
import shutil
import zipfile
from glob import glob
from pathlib import Path

from flask import Flask, Response, request, send_from_directory

from contextforge.handler import CONTEXT_DIR, IMAGES_DIR
from contextforge.handler import handler as gather_context

WEB_DIR = Path(__file__).resolve().parent / "web"
DEFAULT_PORT = 8080

_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]

logger = logging.getLogger(__name__)


def _error(message: str, status: int) -> Response:
    return Response(
        message + "\n",
        status=status,
        content_type="text/plain; charset=utf-8",
        headers={"X-Content-Type-Options": "nosniff"},
    )


def _json(payload: dict) -> Response:
    return Response(json.dumps(payload) + "\n", content_type="application/json")


def cleanup_context_dir() -> None:
    """Delete generated Markdown files and the images directory."""
    for path in glob(os.path.join(CONTEXT_DIR, "*.md")):
        try:
            os.remove(path)
        except OSError as exc:
            logger.warning("Failed to remove file %s: %s", path, exc)
    if os.path.lexists(IMAGES_DIR):
        try:
            shutil.rmtree(IMAGES_DIR)
        except OSError as exc:
            logger.warning("Failed to remove images directory %s: %s", IMAGES_DIR, exc)


def find_generated_file() -> str:
    """Return the first Markdown file in the context directory, by name."""
    files = sorted(glob(os.path.join(CONTEXT_DIR, "*.md")))
    if not files:
        raise FileNotFoundError("no markdown file found in context directory")
    return files[0]


def _parse_generate_request(raw: bytes) -> tuple[str, list[str]]:
    payload = json.loads(raw)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValueError("request body must be an object")
    url = payload.get("url")
    if url is None:
        url = ""
    if not isinstance(url, str):
        raise ValueError("url must be a string")
    ignore = payload.get("ignore")
    if ignore is None:
        ignore = []
    if not isinstance(ignore, list) or not all(isinstance(item, str) for item in ignore):
        raise ValueError("ignore must be a list of strings")
    return url, ignore


def _read_text(path: str) -> str:
    with open(path, encoding="utf-8", errors="replace") as handle:
        return handle.read()


def _zip_with_images(md_path: str, md_content: bytes, images: list[os.DirEntry]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(os.path.basename(md_path), md_content)
        for image in images:
            if image.is_dir():
                continue
            try:
                data = Path(image.path).read_bytes()
            except OSError as exc:
                logger.warning("could not read image file %s: %s", image.path, exc)
                continue
            archive.writestr(f"images/{image.name}", data)
    return buffer.getvalue()


def create_app() -> Flask:
    """Build the web application."""
    app = Flask(__name__, static_folder=None)

    @app.route("/", methods=["GET"])
    def index():
        try:
            page = (WEB_DIR / "index.html").read_bytes()
        except OSError as exc:
            logger.error("Error reading index.html: %s", exc)
            return _error("Could not read index.html", 500)
        return Response(page, content_type="text/html; charset=utf-8")

    @app.route("/<path:subpath>", methods=["GET"])
    def static_files(subpath: str):
        return send_from_directory(WEB_DIR, subpath)

    @app.route("/clear", methods=_ALL_METHODS)
    def clear():
        if request.method != "POST":
            return _error("Only POST method is allowed", 405)
        try:
            cleanup_context_dir()
        except OSError as exc:
            logger.error("Error during cleanup: %s", exc)
            return _error("Failed to clear context file", 500)
        return Response(status=204)

    @app.route("/load", methods=_ALL_METHODS)
    def load():
        if request.method != "GET":
            return _error("Only GET method is allowed", 405)
        try:
            output_file = find_generated_file()
        except FileNotFoundError:
            return _json({"content": ""})
        try:
            content = _read_text(output_file)
        except OSError as exc:
            logger.error("Error reading output file %s: %s", output_file, exc)
            return _error("Failed to read context file", 500)
        return _json({"content": content})

    @app.route("/generate", methods=_ALL_METHODS)
    def generate():
        if request.method != "POST":
            return _error("Only POST method is allowed", 405)
        try:
            url, ignore = _parse_generate_request(request.get_data())
        except ValueError:
            return _error("Invalid request body", 400)
        if not url:
            return _error("URL is required", 400)
        try:
            cleanup_context_dir()
        except OSError as exc:
            logger.warning("could not clean up context directory: %s", exc)
        gather_context([url], ignore, 1, True)
        try:
            output_file = find_generated_file()
        except FileNotFoundError as exc:
            logger.error("Error finding generated file: %s", exc)
            return _error("Failed to find generated context file", 500)
        try:
            content = _read_text(output_file)
        except OSError as exc:
            logger.error("Error reading output file %s: %s", output_file, exc)
            return _error("Failed to read context file", 500)
        return _json({"content": content})

    @app.route("/download", methods=_ALL_METHODS)
    def download():
        if request.method != "GET":
            return _error("Only GET method is allowed", 405)
        try:
            md_path = find_generated_file()
        except FileNotFoundError as exc:
            logger.error("Error finding generated file for download: %s", exc)
            return _error("Could not find context file.", 404)
        try:
            md_content = Path(md_path).read_bytes()
        except OSError as exc:
            logger.error("Error reading context file %s for download: %s", md_path, exc)
            return _error("Could not read context file.", 500)
        md_name = os.path.basename(md_path)
        try:
            images = sorted(os.scandir(IMAGES_DIR), key=lambda entry: entry.name)
        except OSError:
            images = []
        if not images:
            return Response(
                md_content,
                content_type="text/markdown",
                headers={"Content-Disposition": f'attachment; filename="{md_name}"'},
            )
        data = _zip_with_images(md_path, md_content, images)
        zip_name = md_name.removesuffix(".md") + ".zip"
        return Response(
            data,
            content_type="application/zip",
            headers={"Content-Disposition": f'attachment; filename="{zip_name}"'},
        )

    return app


def run_server(port: int = DEFAULT_PORT) -> None:
    """Serve the web interface on all interfaces until interrupted."""
    app = create_app()
    print(f"Starting server at http://localhost:{port}")
    app.run(host="0.0.0.0", port=port)