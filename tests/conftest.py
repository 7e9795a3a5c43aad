import json

import pytest

from booksearch.config import Settings
from booksearch.core.loader import parse_index_document
from booksearch.core.page import MemoryHighlighter, MemoryHistory, MemoryPage
from booksearch.core.session import SearchSession

BOOK_ROOT = "https://book.example/"


def _doc(ref: str, title: str, body: str, breadcrumbs: str) -> dict:
    return {"id": ref, "title": title, "body": body, "breadcrumbs": breadcrumbs}


DOCS = {
    "intro.html#welcome": _doc(
        "intro.html#welcome",
        "Welcome",
        "Welcome to the book. This chapter covers borrowing and ownership at a high level.",
        "Introduction » Welcome",
    ),
    "ownership.html#borrowing": _doc(
        "ownership.html#borrowing",
        "Borrowing",
        "References let you borrow data without taking ownership. Borrowed data cannot outlive its owner.",
        "Ownership » Borrowing",
    ),
    "ownership.html": _doc(
        "ownership.html",
        "Ownership",
        "Ownership is a set of rules. Every value has an owner.",
        "Ownership",
    ),
    "closures.html#capture": _doc(
        "closures.html#capture",
        "Capturing the Environment",
        "Closures capture data from their environment. A closure can borrow immutably.",
        "Closures » Capturing the Environment",
    ),
}


def make_index_document(enable: bool = True, **option_overrides) -> dict:
    """Index document as the book renderer writes it."""
    if not enable:
        return {"enable": False}
    searchoptions = {
        "bool": "AND",
        "expand": True,
        "limit_results": 30,
        "teaser_word_count": 30,
        "fields": {
            "title": {"boost": 1},
            "body": {"boost": 1},
            "breadcrumbs": {"boost": 0},
        },
    }
    searchoptions.update(option_overrides)
    return {
        "enable": True,
        "searchoptions": searchoptions,
        "index": {
            "version": "0.9.5",
            "fields": ["title", "body", "breadcrumbs"],
            "ref": "id",
            "documentStore": {"docs": DOCS, "docInfo": {}, "length": len(DOCS), "save": True},
            "index": {},
            "pipeline": ["trimmer", "stopWordFilter", "stemmer"],
        },
    }


@pytest.fixture
def index_document() -> dict:
    return make_index_document()


@pytest.fixture
def loaded(index_document):
    result = parse_index_document(json.dumps(index_document))
    assert result.loaded, result.error
    yield result
    result.index.close()


@pytest.fixture
def settings() -> Settings:
    return Settings(site_root=BOOK_ROOT, hotkey="s")


@pytest.fixture
def page() -> MemoryPage:
    return MemoryPage()


@pytest.fixture
def highlighter() -> MemoryHighlighter:
    return MemoryHighlighter()


@pytest.fixture
def history() -> MemoryHistory:
    return MemoryHistory(BOOK_ROOT + "intro.html")


@pytest.fixture
def session(history, page, highlighter, settings, loaded) -> SearchSession:
    session = SearchSession(history, page, highlighter, settings)
    session.attach(loaded.options, loaded.index)
    return session
