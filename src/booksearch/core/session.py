"""
Search session - keeps the search bar, results, URL and history in sync.

One SearchSession exists per page view. It is created at start-up, loads the
index once through init(), and is then driven by event handlers:

    - searchbar_changed()  the user typed in the search bar
    - apply_from_url()     page load and back/forward navigation
    - toggle_searchbar()   the search icon was clicked
    - handle_key()         a key was pressed anywhere on the page

All handlers run on one thread; nothing here locks.
"""

import logging
from enum import Enum
from typing import Optional

from booksearch.config import Settings, get_settings
from booksearch.core.formatting import format_search_metric, format_search_result, result_href
from booksearch.core.index import QueryExecutor, SearchIndex
from booksearch.core.interfaces import IHighlighter, IHistory, IPage
from booksearch.core.keyboard import KeyboardNavigator, KeyEvent
from booksearch.core.loader import IndexLoader, IndexLoadResult
from booksearch.core.schemas import SearchOptions
from booksearch.core.urls import decode_param, encode_param, parse_url, render_url

logger = logging.getLogger(__name__)


class NavigationAction(str, Enum):
    """How a URL change is committed to history."""
    PUSH = "push"
    REPLACE = "replace"
    PUSH_IF_NEW_SEARCH_ELSE_REPLACE = "push_if_new_search_else_replace"


class SearchSession:
    """
    All mutable search state of one page view.

    Attributes:
        options: Search options from the index document (None until loaded)
        index: Loaded index handle (None until loaded)
        keyboard: Focus state machine for this page
    """

    def __init__(
        self,
        history: IHistory,
        page: IPage,
        highlighter: IHighlighter,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.history = history
        self.page = page
        self.highlighter = highlighter

        self.options: Optional[SearchOptions] = None
        self.index: Optional[SearchIndex] = None
        self._executor: Optional[QueryExecutor] = None

        self.keyboard = KeyboardNavigator(self, hotkey=self.settings.hotkey)

    @property
    def ready(self) -> bool:
        return self._executor is not None

    @property
    def current_term(self) -> str:
        return self._executor.current_term if self._executor else ""

    async def init(self, loader: Optional[IndexLoader] = None) -> IndexLoadResult:
        """
        Load the index and restore search state from the URL.

        A disabled or failed load hides the search icon and leaves the session
        inert; nothing is retried.
        """
        loader = loader or IndexLoader.from_settings(self.settings)
        result = await loader.load(self.settings.index_path)

        if not result.loaded:
            self.page.show_search_icon(False)
            return result

        self.attach(result.options, result.index)
        self.history.on_pop(self.apply_from_url)
        self.apply_from_url()
        return result

    def attach(self, options: SearchOptions, index: SearchIndex) -> None:
        """Install a loaded index. Only once per session."""
        if self.index is not None:
            raise RuntimeError("Search index already loaded for this session")
        self.options = options
        self.index = index
        self._executor = QueryExecutor(index, options)

    def apply_from_url(self) -> None:
        """Run the search or highlighting requested by the current URL."""
        url = parse_url(self.history.current_url())

        raw_term = url.params.get(self.settings.search_param, "")
        if raw_term != "":
            self.page.show_searchbar(True)
            self.page.set_search_value(decode_param(raw_term))
            self.searchbar_changed()
        else:
            self.page.show_searchbar(False)

        if self.settings.highlight_param in url.params:
            raw_words = decode_param(url.params[self.settings.highlight_param])
            words = [word for word in raw_words.split(" ") if word]
            self.highlighter.mark(words)

    def searchbar_changed(self) -> None:
        """Search for the search bar's contents and record it in the URL."""
        term = self.page.get_search_value().strip()
        if term != "":
            self.page.set_searchbar_active(True)
            self.do_search(term)
        else:
            self.page.set_searchbar_active(False)
            self.page.show_results(False)
            self.page.clear_results()
            self.keyboard.results_replaced()
            if self._executor:
                self._executor.reset()

        self.set_url_parameters(term, NavigationAction.PUSH_IF_NEW_SEARCH_ELSE_REPLACE)
        self.highlighter.unmark()

    def do_search(self, term: str) -> bool:
        """
        Query the index and render the results.

        Returns:
            True if the results panel was rebuilt, False when the term is the
            one already shown or the index is not loaded yet
        """
        if self._executor is None:
            logger.debug(f"Ignoring search for {term!r}: index not loaded")
            return False

        results = self._executor.run(term)
        if results is None:
            return False

        terms = term.split()
        self.page.set_results_header(format_search_metric(len(results), term))
        self.page.clear_results()
        for result in results:
            href = result_href(result, terms, self.settings.site_root, self.settings.highlight_param)
            self.page.append_result(
                format_search_result(result, terms, href, self.options.teaser_word_count),
                href,
            )
        self.keyboard.results_replaced()
        self.page.show_results(True)
        return True

    def set_url_parameters(self, term: str, action: NavigationAction) -> str:
        """
        Write the search term into the URL and commit it to history.

        A non-empty term (or PUSH_IF_NEW_SEARCH_ELSE_REPLACE) sets the search
        parameter and drops highlighting and the fragment; otherwise the search
        parameter is removed. PUSH_IF_NEW_SEARCH_ELSE_REPLACE pushes only when
        the URL had no search parameter yet, so refining a search does not
        pile up history entries.

        Returns:
            The committed URL
        """
        url = parse_url(self.history.current_url())
        first_search = self.settings.search_param not in url.params

        if term != "" or action is NavigationAction.PUSH_IF_NEW_SEARCH_ELSE_REPLACE:
            url.params[self.settings.search_param] = encode_param(term)
            url.params.pop(self.settings.highlight_param, None)
            url.hash = ""
        else:
            url.params.pop(self.settings.search_param, None)

        target = render_url(url)
        if action is NavigationAction.PUSH or (
            action is NavigationAction.PUSH_IF_NEW_SEARCH_ELSE_REPLACE and first_search
        ):
            self.history.push(target)
            logger.debug(f"History push: {target}")
        else:
            self.history.replace(target)
            logger.debug(f"History replace: {target}")
        return target

    def open_search(self) -> None:
        self.page.show_searchbar(True)

    def close_search(self) -> None:
        """Clear the search from the URL, hide the UI and drop highlighting."""
        had_text = self.page.get_search_value().strip() != ""
        self.page.set_searchbar_active(False)
        self.set_url_parameters("", NavigationAction.PUSH if had_text else NavigationAction.REPLACE)
        self.page.show_searchbar(False)
        self.page.show_results(False)
        if self._executor:
            self._executor.reset()
        self.highlighter.unmark()

    def toggle_searchbar(self) -> None:
        """Search icon click: flip the search UI and focus the search bar."""
        visible = not self.page.searchbar_visible()
        self.page.show_searchbar(visible)
        self.page.show_results(visible)
        self.keyboard.focus_searchbar()

    def handle_key(self, event: KeyEvent) -> bool:
        if not self.ready:
            return False
        return self.keyboard.handle_key(event)


__all__ = ["NavigationAction", "SearchSession"]
