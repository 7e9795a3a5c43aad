"""Keyboard navigation between the search bar and the result list.

States:
    UNFOCUSED          nothing search-related has focus
    SEARCHBAR          the search input has focus
    RESULT(i)          result i carries the focus mark

Keys with any modifier held are ignored. Moves past either end of the
result list leave the state unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from booksearch.core.session import SearchSession

logger = logging.getLogger(__name__)


class Key(str, Enum):
    ESCAPE = "Escape"
    DOWN = "ArrowDown"
    UP = "ArrowUp"
    ENTER = "Enter"


@dataclass(frozen=True)
class KeyEvent:
    key: str
    alt: bool = False
    ctrl: bool = False
    meta: bool = False
    shift: bool = False

    @property
    def has_modifier(self) -> bool:
        return self.alt or self.ctrl or self.meta or self.shift


class FocusKind(str, Enum):
    UNFOCUSED = "unfocused"
    SEARCHBAR = "searchbar"
    RESULT = "result"


@dataclass(frozen=True)
class FocusState:
    kind: FocusKind
    index: Optional[int] = None

    @classmethod
    def unfocused(cls) -> FocusState:
        return cls(FocusKind.UNFOCUSED)

    @classmethod
    def searchbar(cls) -> FocusState:
        return cls(FocusKind.SEARCHBAR)

    @classmethod
    def result(cls, index: int) -> FocusState:
        if index < 0:
            raise ValueError("result index must be >= 0")
        return cls(FocusKind.RESULT, index)


class KeyboardNavigator:
    """Owns the focus state of one search session."""

    def __init__(self, session: SearchSession, hotkey: str = "s"):
        self.session = session
        self.hotkey = hotkey.lower()
        self.state = FocusState.unfocused()

    @property
    def page(self):
        return self.session.page

    def handle_key(self, event: KeyEvent) -> bool:
        """Process a key press.

        Returns:
            True if the key was consumed (the default action should be
            suppressed), False otherwise
        """
        if event.has_modifier:
            return False

        if event.key == Key.ESCAPE:
            self._escape()
            return True
        if event.key == Key.DOWN:
            return self._down()
        if event.key == Key.UP:
            return self._up()
        if event.key == Key.ENTER:
            return self._select()
        if event.key.lower() == self.hotkey and self.state.kind is not FocusKind.SEARCHBAR:
            self.session.open_search()
            self.focus_searchbar()
            return True
        return False

    def focus_searchbar(self) -> None:
        self.page.focus_result(None)
        self.page.focus_searchbar()
        self._move(FocusState.searchbar())

    def blur(self) -> None:
        self.page.blur_searchbar()
        self.page.focus_result(None)
        self._move(FocusState.unfocused())

    def results_replaced(self) -> None:
        """The result list was rebuilt; a focused result no longer exists."""
        if self.state.kind is FocusKind.RESULT:
            self._move(FocusState.unfocused())

    def _escape(self) -> None:
        self.session.close_search()
        self.blur()

    def _down(self) -> bool:
        count = self.page.result_count()
        if self.state.kind is FocusKind.SEARCHBAR:
            if count == 0:
                return False
            self.page.blur_searchbar()
            self.page.focus_result(0)
            self._move(FocusState.result(0))
            return True
        if self.state.kind is FocusKind.RESULT:
            following = self.state.index + 1
            if following < count:
                self.page.focus_result(following)
                self._move(FocusState.result(following))
            return True
        return False

    def _up(self) -> bool:
        if self.state.kind is not FocusKind.RESULT:
            return False
        if self.state.index == 0:
            self.focus_searchbar()
        else:
            previous = self.state.index - 1
            self.page.focus_result(previous)
            self._move(FocusState.result(previous))
        return True

    def _select(self) -> bool:
        if self.state.kind is not FocusKind.RESULT:
            return False
        self.session.history.navigate(self.page.result_href(self.state.index))
        return True

    def _move(self, state: FocusState) -> None:
        if state != self.state:
            logger.debug(f"Focus {self.state.kind.value}{self._suffix(self.state)} -> "
                         f"{state.kind.value}{self._suffix(state)}")
        self.state = state

    @staticmethod
    def _suffix(state: FocusState) -> str:
        return f"({state.index})" if state.index is not None else ""


__all__ = ["Key", "KeyEvent", "FocusKind", "FocusState", "KeyboardNavigator"]
