from abc import ABC, abstractmethod
from typing import Callable, List, Optional


# Abstract Interfaces

class IHistory(ABC):
    """Browsing location and navigation history."""

    @abstractmethod
    def current_url(self) -> str: ...

    @abstractmethod
    def push(self, url: str) -> None: ...

    @abstractmethod
    def replace(self, url: str) -> None: ...

    @abstractmethod
    def navigate(self, url: str) -> None:
        """Leave the current page for url (full page load)."""
        ...

    @abstractmethod
    def on_pop(self, listener: Callable[[], None]) -> None:
        """Register a callback for back/forward navigation."""
        ...


class IHighlighter(ABC):
    @abstractmethod
    def mark(self, terms: List[str]) -> None: ...

    @abstractmethod
    def unmark(self) -> None: ...


class IPage(ABC):
    """The parts of the page search writes into."""

    @abstractmethod
    def show_search_icon(self, visible: bool) -> None: ...

    @abstractmethod
    def show_searchbar(self, visible: bool) -> None: ...

    @abstractmethod
    def searchbar_visible(self) -> bool: ...

    @abstractmethod
    def get_search_value(self) -> str: ...

    @abstractmethod
    def set_search_value(self, value: str) -> None: ...

    @abstractmethod
    def set_searchbar_active(self, active: bool) -> None: ...

    @abstractmethod
    def focus_searchbar(self) -> None: ...

    @abstractmethod
    def blur_searchbar(self) -> None: ...

    @abstractmethod
    def show_results(self, visible: bool) -> None: ...

    @abstractmethod
    def set_results_header(self, text: str) -> None: ...

    @abstractmethod
    def clear_results(self) -> None: ...

    @abstractmethod
    def append_result(self, html: str, href: str) -> None: ...

    @abstractmethod
    def result_count(self) -> int: ...

    @abstractmethod
    def result_href(self, index: int) -> str: ...

    @abstractmethod
    def focus_result(self, index: Optional[int]) -> None:
        """Mark result `index` as focused; None clears the mark."""
        ...
