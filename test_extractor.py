"""Tests for ArticleExtractor, the Preprocessor, settings, logging, the CLI and the document arena."""

import logging
from datetime import datetime

import pytest
from bs4 import BeautifulSoup
from pydantic import ValidationError

from news_extractor.config import load_settings
from news_extractor.document import DocumentTree
from news_extractor.exceptions import InvalidTitleError
from news_extractor.logger import resolve_level, setup_logger
from news_extractor.main import ArticleExtractor
from news_extractor.preprocessor import Preprocessor
from news_extractor.schemas import (
    ExtractionSettings, HeadingItem, LinkItem, PreviewMetadata, TextItem, VideoItem,
)

ARTICLE_PAGE = """
<html>
<head><title>Budget</title><script>track();</script></head>
<body>
  <nav><a href="/">Home</a><a href="/politics">Politics</a></nav>
  <div class="article-body">
    <img src="/media/lead.jpg" alt="Parliament">
    <p>The parliament <b>approved</b> the budget on Tuesday.</p>
    <h2>Reactions</h2>
    <p>Opposition leaders <a href="/people/smith">criticised</a> the plan.</p>
    <iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ"></iframe>
    <table><tr><td>Spending table</td></tr></table>
  </div>
  <footer>Copyright</footer>
</body>
</html>
"""


def metadata(**kwargs) -> PreviewMetadata:
    values = {
        "title": "Parliament passes budget",
        "uri": "https://news.example.com/politics/budget",
        "published_at": datetime(2024, 3, 5, 12, 0, 0),
    }
    values.update(kwargs)
    return PreviewMetadata(**values)


# --- ArticleExtractor ---

def test_parse_full_article():
    post = ArticleExtractor().parse(ARTICLE_PAGE, metadata(), content_selector="div.article-body",
                                    source_id="ExampleNews")

    assert post.source_id == "ExampleNews"
    assert post.lead_image == "https://news.example.com/media/lead.jpg"
    assert post.published_at == "2024-03-05 12:00:00"
    # Everything fits under the 200 character threshold: text, heading and
    # the video are consumed, only the link stays in the content
    assert post.description == (
        "The parliament approved the budget on Tuesday. Reactions "
        "Opposition leaders criticised the plan."
    )
    assert post.items == [
        LinkItem(url="https://news.example.com/people/smith", text="criticised"),
    ]


def test_parse_with_explicit_description_keeps_all_content():
    post = ArticleExtractor().parse(ARTICLE_PAGE, metadata(description="Summary"),
                                    content_selector="div.article-body")

    assert post.description == "Summary"
    assert post.items == [
        TextItem(body="The parliament approved the budget on Tuesday."),
        HeadingItem(body="Reactions", level=2),
        TextItem(body="Opposition leaders"),
        LinkItem(url="https://news.example.com/people/smith", text="criticised"),
        TextItem(body="the plan."),
        VideoItem(platform_id="dQw4w9WgXcQ"),
    ]


def test_missing_selector_match_falls_back_to_body():
    items = ArticleExtractor().extract_items(ARTICLE_PAGE, "https://news.example.com/",
                                             content_selector="div.does-not-exist")

    assert LinkItem(url="https://news.example.com/", text="Home") in items
    assert TextItem(body="Copyright") in items


def test_invalid_selector_falls_back_to_body():
    items = ArticleExtractor().extract_items("<p>Only text</p>", "https://news.example.com/",
                                             content_selector="div[")

    assert items == [TextItem(body="Only text")]


def test_parse_without_title_fails():
    with pytest.raises(InvalidTitleError):
        ArticleExtractor().parse(ARTICLE_PAGE, metadata(title=""))


def test_parse_file_honors_declared_charset(tmp_path):
    html = '<html><head><meta charset="windows-1251"></head><body><p>Бюджет принят</p></body></html>'
    page = tmp_path / "article.html"
    page.write_bytes(html.encode("windows-1251"))

    post = ArticleExtractor().parse_file(page, metadata(description="d"))

    assert post.items == [TextItem(body="Бюджет принят")]


# --- Preprocessor ---

def test_purify_counts_removed_elements():
    soup = BeautifulSoup(
        '<div><script>a()</script><table><tr><td><form></form></td></tr></table>'
        '<a href=" JavaScript:go()">go</a><a href="/ok">ok</a><video src="v.mp4"></video></div>',
        "html5lib",
    )

    removed = Preprocessor().purify(soup.div)

    assert removed == {"a": 1, "script": 1, "table": 1, "video": 1}
    assert [a["href"] for a in soup.find_all("a")] == ["/ok"]


def test_parse_repairs_malformed_markup():
    soup = Preprocessor().parse('<<p>>Text\x00 here</p><a href=="/x">x</a>')

    assert soup.find("p").get_text() == "Text here"
    assert soup.find("a")["href"] == "/x"


@pytest.mark.parametrize("raw, expected", [
    (b'<meta charset="utf-8">', "utf-8"),
    (b'<meta charset="ISO-8859-1">', "windows-1252"),
    (b'<meta http-equiv="Content-Type" content="text/html; charset=windows-1251">', "windows-1251"),
    (b'<meta charset="no-such-charset">', "utf-8"),
    (b'<p>no declaration</p>', "utf-8"),
])
def test_detect_charset_from_bytes(raw, expected):
    assert Preprocessor.detect_charset_from_bytes(raw) == expected


# --- Settings ---

def test_settings_defaults():
    settings = load_settings()

    assert settings.description_length == 200
    assert (settings.quote_depth, settings.heading_depth, settings.link_depth) == (5, 5, 5)
    assert settings.video_depth == 3
    assert settings.formatting_depth == 6
    assert settings.eviction_depth == 5


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("NEWS_EXTRACTOR_DESCRIPTION_LENGTH", "300")
    monkeypatch.setenv("NEWS_EXTRACTOR_VIDEO_DEPTH", "1")

    settings = load_settings({"video_depth": 2, "timeout": None})

    assert settings.description_length == 300
    assert settings.video_depth == 2
    assert settings.timeout == ExtractionSettings().timeout


def test_settings_reject_bad_values(monkeypatch):
    monkeypatch.setenv("NEWS_EXTRACTOR_EVICTION_DEPTH", "-1")

    with pytest.raises(ValidationError):
        load_settings()


# --- DocumentTree ---

def test_document_tree_indices_and_text():
    soup = BeautifulSoup("<div><p>One <b>two</b></p><!-- hidden --><br></div>", "html5lib")
    tree = DocumentTree(soup.div)

    names = [tree.name(i) for i in range(len(tree))]
    assert names == ["div", "p", "#text", "b", "#text", "#comment", "br"]
    assert tree.parent(0) is None
    assert tree.children(1) == [2, 3]
    assert tree.text_content(0) == "One two"
    assert list(tree.leaves()) == [2, 4, 5, 6]
    assert tree.find_first(0, "b") == 3


def test_document_tree_joins_multi_valued_attributes():
    soup = BeautifulSoup('<div><p class="lead big">x</p></div>', "html5lib")
    tree = DocumentTree(soup.div)

    assert tree.attr(1, "class") == "lead big"
    assert tree.attr(1, "missing") == ""


# --- Logging ---

def test_log_level_from_environment(monkeypatch):
    monkeypatch.setenv("NEWS_EXTRACTOR_LOG_LEVEL", "warning")

    assert resolve_level() == logging.WARNING
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(logging.ERROR) == logging.ERROR


def test_unknown_log_level_falls_back_to_info():
    assert resolve_level("chatty") == logging.INFO


def test_setup_logger_adjusts_configured_logger():
    logger = setup_logger("news_extractor.test_runtime", level="INFO")
    setup_logger("news_extractor.test_runtime", level=logging.DEBUG)

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.DEBUG


# --- CLI ---

def test_cli_rejects_bad_published_at(monkeypatch, tmp_path, capsys):
    import run_extractor

    page = tmp_path / "page.html"
    page.write_text("<p>Text</p>", encoding="utf-8")
    monkeypatch.setattr("sys.argv", [
        "run_extractor.py", str(page),
        "--uri", "https://news.example.com/a", "--title", "T",
        "--published-at", "yesterday",
    ])

    with pytest.raises(SystemExit) as excinfo:
        run_extractor.main()

    assert excinfo.value.code == 2
    assert "--published-at" in capsys.readouterr().err
