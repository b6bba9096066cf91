"""Shared fixtures for the news extractor tests."""

import pytest
from bs4 import BeautifulSoup

from news_extractor.pipeline import ClassificationPipeline
from news_extractor.preprocessor import Preprocessor

BASE_URI = "https://news.example.com/politics/article-1"


@pytest.fixture
def base_uri():
    return BASE_URI


@pytest.fixture
def body():
    """Parse a fragment and return its purified <body>."""
    def _body(html: str):
        soup = BeautifulSoup(html, "html5lib")
        Preprocessor().purify(soup.body)
        return soup.body
    return _body


@pytest.fixture
def classify_html(body):
    """Parse, purify and classify a fragment against BASE_URI."""
    def _classify(html: str, settings=None):
        return ClassificationPipeline(settings).classify(body(html), BASE_URI)
    return _classify
