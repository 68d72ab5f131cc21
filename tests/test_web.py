import pytest
import responses
from bs4 import BeautifulSoup

from contextforge.web import (
    WebError,
    clean_html,
    download_image,
    find_title,
    process_images,
    process_web_content,
)


def test_clean_html_removes_tags_and_classes():
    soup = BeautifulSoup(
        '<div><script>x</script><nav>n</nav><div class="Social-links">s</div>'
        '<p id="main">keep</p></div>',
        "html.parser",
    )
    clean_html(soup)
    assert soup.find("script") is None
    assert soup.find("nav") is None
    assert "Social" not in str(soup)
    assert soup.find("p").get_text() == "keep"


def test_find_title():
    soup = BeautifulSoup("<html><head><title>  Hello  </title></head></html>", "html.parser")
    assert find_title(soup) == "Hello"
    assert find_title(BeautifulSoup("<p>x</p>", "html.parser")) == ""


def test_download_image(tmp_path):
    target = tmp_path / "a.png"
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, "https://example.com/a.png", body=b"PNGDATA", status=200)
        download_image("https://example.com/a.png", target)
    assert target.read_bytes() == b"PNGDATA"


def test_download_image_bad_status(tmp_path):
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, "https://example.com/a.png", status=404)
        with pytest.raises(WebError):
            download_image("https://example.com/a.png", tmp_path / "a.png")


def test_process_images_rewrites_src(tmp_path):
    soup = BeautifulSoup('<img src="/img/pic.gif"><img src="missing">', "html.parser")
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, "https://example.com/img/pic.gif", body=b"GIF", status=200)
        mock.add(responses.GET, "https://example.com/missing", status=500)
        process_images(soup, "https://example.com/page", tmp_path)
    first, second = soup.find_all("img")
    assert first["src"].startswith("images/") and first["src"].endswith(".gif")
    saved = list(tmp_path.iterdir())
    assert len(saved) == 1 and saved[0].read_bytes() == b"GIF"
    assert second["src"] == "missing"


def test_process_web_content(tmp_path):
    html = (
        "<html><head><title>Page</title></head><body><nav>menu</nav>"
        "<h1>Head</h1><p>Body text</p></body></html>"
    )
    out = tmp_path / "web.md"
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, "https://example.com/doc", body=html, status=200)
        process_web_content("https://example.com/doc", out)
    text = out.read_text()
    assert text.startswith("# Webpage Context: Page\n\nSource: https://example.com/doc\n\n")
    assert "# Head" in text and "Body text" in text
    assert "menu" not in text


def test_process_web_content_title_falls_back_to_host(tmp_path):
    out = tmp_path / "web.md"
    with responses.RequestsMock() as mock:
        mock.add(responses.GET, "https://example.com/x", body="<p>hi</p>", status=200)
        process_web_content("https://example.com/x", out)
    assert out.read_text().startswith("# Webpage Context: example.com\n")