"""Tests for PageFetcher and the NewsParser batch base (HTTP is mocked)."""

import gzip
from unittest.mock import MagicMock

import pytest
import requests

from news_extractor.exceptions import TransportError
from news_extractor.fetcher import PageFetcher
from news_extractor.parser import NewsParser
from news_extractor.schemas import PreviewMetadata, TextItem


def make_session(responses: dict) -> MagicMock:
    """Session whose get() answers from a {uri: (status, body)} table."""
    session = MagicMock()
    session.headers = {}

    def get(uri, timeout=None):
        status, content = responses[uri]
        return MagicMock(status_code=status, content=content)

    session.get.side_effect = get
    return session


# --- PageFetcher ---

def test_fetch_returns_decoded_page():
    session = make_session({"https://news.example.com/a": (200, b"<p>Hello</p>")})

    html = PageFetcher(session=session).fetch("https://news.example.com/a")

    assert html == "<p>Hello</p>"
    assert "User-Agent" in session.headers


def test_fetch_reencodes_uri():
    session = make_session({"https://news.example.com/a%20b": (200, b"ok")})

    assert PageFetcher(session=session).fetch("https://news.example.com/a b") == "ok"


def test_fetch_unwraps_gzip_body():
    body = gzip.compress(b"<p>Packed</p>")
    session = make_session({"https://news.example.com/gz": (200, body)})

    assert PageFetcher(session=session).fetch("https://news.example.com/gz") == "<p>Packed</p>"


def test_fetch_decodes_declared_charset():
    page = '<meta charset="windows-1251"><p>Новости</p>'.encode("windows-1251")
    session = make_session({"https://news.example.com/ru": (200, page)})

    assert "Новости" in PageFetcher(session=session).fetch("https://news.example.com/ru")


def test_redirect_status_is_accepted():
    session = make_session({"https://news.example.com/r": (304, b"cached")})

    assert PageFetcher(session=session).fetch("https://news.example.com/r") == "cached"


@pytest.mark.parametrize("status", [199, 404, 500])
def test_bad_status_raises_transport_error(status):
    session = make_session({"https://news.example.com/x": (status, b"")})

    with pytest.raises(TransportError) as exc_info:
        PageFetcher(session=session).fetch("https://news.example.com/x")

    assert exc_info.value.status_code == status
    assert exc_info.value.uri == "https://news.example.com/x"


def test_network_error_raises_transport_error():
    session = MagicMock()
    session.headers = {}
    session.get.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(TransportError) as exc_info:
        PageFetcher(session=session).fetch("https://news.example.com/down")

    assert exc_info.value.status_code is None


# --- NewsParser ---

class ExampleNewsParser(NewsParser):
    """Minimal site parser over a fixed list of previews."""

    def __init__(self, previews, **kwargs):
        super().__init__(**kwargs)
        self.previews = previews

    def get_preview_list(self, min_count=10, max_count=100):
        return self.previews[:max_count]

    def parse_news_page(self, preview):
        html = self.fetch_page(preview.uri)
        return self.build_post(html, preview, content_selector="article")


def test_parse_skips_failed_articles_and_continues():
    session = make_session({
        "https://news.example.com/1": (200, b"<article><p>First story</p></article>"),
        "https://news.example.com/2": (500, b""),
        "https://news.example.com/3": (200, b"<article><p>No title here</p></article>"),
        "https://news.example.com/4": (200, b"<nav>menu</nav><article><p>Last story</p></article>"),
    })
    previews = [
        PreviewMetadata(title="One", uri="https://news.example.com/1"),
        PreviewMetadata(title="Two", uri="https://news.example.com/2"),
        PreviewMetadata(title="", uri="https://news.example.com/3"),
        PreviewMetadata(title="Four", uri="https://news.example.com/4", description="Given"),
    ]

    posts = ExampleNewsParser(previews, session=session).parse()

    assert [post.title for post in posts] == ["One", "Four"]
    assert posts[0].description == "First story"
    assert posts[1].items == [TextItem(body="Last story")]
    assert all(post.source_id == "ExampleNewsParser" for post in posts)


def test_parse_respects_max_count():
    session = make_session({"https://news.example.com/1": (200, b"<article><p>Only</p></article>")})
    previews = [
        PreviewMetadata(title="One", uri="https://news.example.com/1"),
        PreviewMetadata(title="Two", uri="https://news.example.com/2"),
    ]

    posts = ExampleNewsParser(previews, session=session).parse(max_count=1)

    assert len(posts) == 1
