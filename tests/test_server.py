import io
import os
import zipfile

import pytest

from contextforge.server import cleanup_context_dir, create_app, find_generated_file


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def client(workdir):
    app = create_app()
    app.testing = True
    return app.test_client()


def _write_context(workdir, files):
    context = workdir / "context"
    context.mkdir(exist_ok=True)
    for name, text in files.items():
        (context / name).write_text(text)
    return context


def test_find_generated_file_returns_first_by_name(workdir):
    _write_context(workdir, {"b.md": "b", "a.md": "a", "notes.txt": "x"})
    assert find_generated_file() == os.path.join("context", "a.md")


def test_find_generated_file_without_files_raises(workdir):
    (workdir / "context").mkdir()
    with pytest.raises(FileNotFoundError):
        find_generated_file()


def test_cleanup_removes_markdown_and_images(workdir):
    context = _write_context(workdir, {"a.md": "a", "keep.txt": "k"})
    (context / "images").mkdir()
    (context / "images" / "pic.png").write_bytes(b"\x89PNG")
    assert find_generated_file() == os.path.join("context", "a.md")
    cleanup_context_dir()
    with pytest.raises(FileNotFoundError):
        find_generated_file()
    assert sorted(os.listdir(context)) == ["keep.txt"]


def test_load_without_file_gives_empty_content(client):
    response = client.get("/load")
    assert response.status_code == 200
    assert response.get_json() == {"content": ""}


def test_load_returns_file_content(client, workdir):
    _write_context(workdir, {"x.md": "hello context"})
    assert client.get("/load").get_json() == {"content": "hello context"}


@pytest.mark.parametrize(
    ("method", "path", "message"),
    [
        ("get", "/generate", "Only POST method is allowed\n"),
        ("get", "/clear", "Only POST method is allowed\n"),
        ("post", "/load", "Only GET method is allowed\n"),
        ("post", "/download", "Only GET method is allowed\n"),
    ],
)
def test_wrong_method_rejected(client, method, path, message):
    response = getattr(client, method)(path)
    assert response.status_code == 405
    assert response.get_data(as_text=True) == message


def test_generate_rejects_invalid_body(client):
    response = client.post("/generate", data="not json", content_type="application/json")
    assert response.status_code == 400
    assert response.get_data(as_text=True) == "Invalid request body\n"


def test_generate_requires_url(client):
    response = client.post("/generate", json={"ignore": []})
    assert response.status_code == 400
    assert response.get_data(as_text=True) == "URL is required\n"


def test_generate_directory_then_load_and_clear(client, workdir):
    project = workdir / "proj"
    project.mkdir()
    (project / "main.py").write_text("print('hi')\n")
    (project / "skip.txt").write_text("skip me\n")

    response = client.post("/generate", json={"url": "./proj", "ignore": ["skip.txt"]})
    assert response.status_code == 200
    content = response.get_json()["content"]
    assert content.startswith("# Source Code Context")
    assert "### File: main.py" in content
    assert "skip.txt" not in content
    assert client.get("/load").get_json()["content"] == content

    assert client.post("/clear").status_code == 204
    assert client.get("/load").get_json() == {"content": ""}


def test_generate_failure_reports_missing_file(client, workdir):
    response = client.post("/generate", json={"url": "./does-not-exist"})
    assert response.status_code == 500
    assert response.get_data(as_text=True) == "Failed to find generated context file\n"


def test_download_without_file_is_not_found(client):
    response = client.get("/download")
    assert response.status_code == 404
    assert response.get_data(as_text=True) == "Could not find context file.\n"


def test_download_markdown_only(client, workdir):
    _write_context(workdir, {"page.md": "# Page"})
    response = client.get("/download")
    assert response.status_code == 200
    assert response.headers["Content-Type"] == "text/markdown"
    assert response.headers["Content-Disposition"] == 'attachment; filename="page.md"'
    assert response.data == b"# Page"


def test_download_zip_with_images(client, workdir):
    context = _write_context(workdir, {"page.md": "# Page"})
    (context / "images").mkdir()
    (context / "images" / "one.png").write_bytes(b"img-bytes")
    response = client.get("/download")
    assert response.status_code == 200
    assert response.headers["Content-Type"] == "application/zip"
    assert response.headers["Content-Disposition"] == 'attachment; filename="page.zip"'
    with zipfile.ZipFile(io.BytesIO(response.data)) as archive:
        assert sorted(archive.namelist()) == ["images/one.png", "page.md"]
        assert archive.read("page.md") == b"# Page"
        assert archive.read("images/one.png") == b"img-bytes"