"""HTML for the search results panel."""

import html
from typing import Sequence

from booksearch.core.schemas import SearchResult
from booksearch.core.teaser import make_teaser
from booksearch.core.urls import encode_param


def format_search_metric(count: int, term: str) -> str:
    """Header line above the results."""
    if count == 1:
        return f"{count} search result for '{term}':"
    elif count == 0:
        return f"No search results for '{term}'."
    else:
        return f"{count} search results for '{term}':"


def result_href(
    result: SearchResult,
    terms: Sequence[str],
    root_prefix: str,
    highlight_param: str = "highlight",
) -> str:
    """Link to a result; the highlight parameter sits between page and anchor."""
    highlight = encode_param(" ".join(terms))
    return f"{root_prefix}{result.path}?{highlight_param}={highlight}#{result.anchor}"


def format_search_result(
    result: SearchResult,
    terms: Sequence[str],
    href: str,
    teaser_word_count: int,
) -> str:
    teaser = make_teaser(result.body, terms, teaser_word_count)
    return (
        f'<a href="{html.escape(href)}">{html.escape(result.breadcrumbs)}</a>'
        '<span class="breadcrumbs"></span>'
        f'<span class="teaser">{teaser}</span>'
    )


__all__ = ["format_search_metric", "result_href", "format_search_result"]
