"""
booksearch core - search state for a book page.

Components:
- urls.py: URL parse/render and parameter coding
- loader.py: Fetches and validates searchindex.json
- index.py: SQLite FTS5 index and query executor
- teaser.py: Result excerpts with emphasized matches
- session.py: Search bar / results / URL / history synchronization
- keyboard.py: Focus state machine for keyboard navigation
- page.py: In-memory page, history and highlighter
"""

from .loader import IndexLoader, IndexLoadResult, LoadStatus
from .session import NavigationAction, SearchSession

__all__ = ["IndexLoader", "IndexLoadResult", "LoadStatus", "NavigationAction", "SearchSession"]
