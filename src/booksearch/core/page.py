"""
In-memory page, history and highlighter.

These stand in for the browser when search runs headless (the CLI, tests).
They record what search asked of them and nothing more.
"""

import logging
from typing import Callable, List, Optional, Tuple

from booksearch.core.interfaces import IHighlighter, IHistory, IPage

logger = logging.getLogger(__name__)


class MemoryHistory(IHistory):
    """History stack with a cursor, like a browser tab."""

    def __init__(self, url: str):
        self.entries: List[str] = [url]
        self.position = 0
        self.commits: List[Tuple[str, str]] = []  # ("push"|"replace"|"navigate", url)
        self._listeners: List[Callable[[], None]] = []

    def current_url(self) -> str:
        return self.entries[self.position]

    def push(self, url: str) -> None:
        del self.entries[self.position + 1:]
        self.entries.append(url)
        self.position += 1
        self.commits.append(("push", url))

    def replace(self, url: str) -> None:
        self.entries[self.position] = url
        self.commits.append(("replace", url))

    def navigate(self, url: str) -> None:
        del self.entries[self.position + 1:]
        self.entries.append(url)
        self.position += 1
        self.commits.append(("navigate", url))
        logger.info(f"Navigated to {url}")

    def on_pop(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def back(self) -> bool:
        if self.position == 0:
            return False
        self.position -= 1
        self._fire_pop()
        return True

    def forward(self) -> bool:
        if self.position >= len(self.entries) - 1:
            return False
        self.position += 1
        self._fire_pop()
        return True

    def _fire_pop(self) -> None:
        for listener in self._listeners:
            listener()


class MemoryHighlighter(IHighlighter):
    def __init__(self):
        self.marked: List[str] = []

    def mark(self, terms: List[str]) -> None:
        self.marked = list(terms)

    def unmark(self) -> None:
        self.marked = []


class MemoryPage(IPage):
    """Records the visible state of the search UI."""

    def __init__(self):
        self.search_icon_visible = True
        self.searchbar_shown = False
        self.search_value = ""
        self.searchbar_active = False
        self.searchbar_focused = False
        self.results_visible = False
        self.results_header = ""
        self.results: List[Tuple[str, str]] = []  # (html, href)
        self.focused_result: Optional[int] = None

    def show_search_icon(self, visible: bool) -> None:
        self.search_icon_visible = visible

    def show_searchbar(self, visible: bool) -> None:
        self.searchbar_shown = visible

    def searchbar_visible(self) -> bool:
        return self.searchbar_shown

    def get_search_value(self) -> str:
        return self.search_value

    def set_search_value(self, value: str) -> None:
        self.search_value = value

    def set_searchbar_active(self, active: bool) -> None:
        self.searchbar_active = active

    def focus_searchbar(self) -> None:
        self.searchbar_focused = True

    def blur_searchbar(self) -> None:
        self.searchbar_focused = False

    def show_results(self, visible: bool) -> None:
        self.results_visible = visible

    def set_results_header(self, text: str) -> None:
        self.results_header = text

    def clear_results(self) -> None:
        self.results = []
        self.focused_result = None

    def append_result(self, html: str, href: str) -> None:
        self.results.append((html, href))

    def result_count(self) -> int:
        return len(self.results)

    def result_href(self, index: int) -> str:
        return self.results[index][1]

    def focus_result(self, index: Optional[int]) -> None:
        self.focused_result = index
