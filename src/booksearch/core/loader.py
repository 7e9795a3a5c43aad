"""
Index loader - fetches and validates the book's search index document.

The document is fetched once per session. There is no retry and no timeout:
a hanging server keeps search unavailable without affecting anything else.

Outcomes:
    LOADED   - options and a ready SearchIndex
    DISABLED - the book was built without search ("enable": false), or the
               server has no index to give (4xx)
    FAILURE  - server error, transport error, or a malformed document
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urljoin, urlsplit

import httpx
from pydantic import ValidationError

from booksearch.config import Settings
from booksearch.core.index import SearchIndex, SearchIndexError
from booksearch.core.schemas import IndexDocument, SearchOptions

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    """Outcome of loading the index document."""
    LOADED = "loaded"
    DISABLED = "disabled"
    FAILURE = "failure"


@dataclass
class IndexLoadResult:
    """Result of an index load.

    Attributes:
        status: What happened
        options: Search options (LOADED only)
        index: The loaded index handle (LOADED only)
        error: Human-readable reason (DISABLED/FAILURE)
    """
    status: LoadStatus
    options: Optional[SearchOptions] = None
    index: Optional[SearchIndex] = None
    error: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return self.status is LoadStatus.LOADED

    @classmethod
    def disabled(cls, reason: str) -> "IndexLoadResult":
        return cls(status=LoadStatus.DISABLED, error=reason)

    @classmethod
    def failure(cls, reason: str) -> "IndexLoadResult":
        return cls(status=LoadStatus.FAILURE, error=reason)


def _is_remote(location: str) -> bool:
    return urlsplit(location).scheme in ("http", "https")


def parse_index_document(payload: Union[str, bytes]) -> IndexLoadResult:
    """
    Validate an index document and build the index it describes.

    Args:
        payload: Raw JSON text of searchindex.json

    Returns:
        IndexLoadResult (never raises)
    """
    try:
        document = IndexDocument.model_validate_json(payload)
    except ValidationError as e:
        return IndexLoadResult.failure(f"Malformed index document: {e.error_count()} validation error(s)")

    if not document.enable:
        return IndexLoadResult.disabled("Search is disabled for this book")

    try:
        index = SearchIndex.from_serialized(document.index)
    except SearchIndexError as e:
        return IndexLoadResult.failure(str(e))

    return IndexLoadResult(status=LoadStatus.LOADED, options=document.searchoptions, index=index)


def load_index_file(path: Union[str, Path]) -> IndexLoadResult:
    """Load an index document from the local filesystem."""
    path = Path(path)
    if not path.exists():
        return IndexLoadResult.disabled(f"No index document at {path}")
    try:
        payload = path.read_bytes()
    except OSError as e:
        return IndexLoadResult.failure(f"Could not read {path}: {e}")
    return parse_index_document(payload)


class IndexLoader:
    """
    Loads the index document relative to the site root.

    The site root may be an http(s) URL or a local directory of a built book.
    """

    def __init__(
        self,
        site_root: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize loader.

        Args:
            site_root: Base URL or directory of the built book
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.site_root = site_root
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "IndexLoader":
        return cls(settings.site_root)

    def resolve(self, resource_path: str) -> str:
        """Location of a resource relative to the site root.

        Absolute URLs and absolute paths are returned unchanged.
        """
        if _is_remote(resource_path):
            return resource_path
        if _is_remote(self.site_root):
            return urljoin(self.site_root, resource_path)
        return str(Path(self.site_root) / resource_path)

    async def load(self, resource_path: str = "searchindex.json") -> IndexLoadResult:
        """
        Fetch and parse the index document.

        Returns:
            IndexLoadResult with LOADED, DISABLED or FAILURE status
        """
        location = self.resolve(resource_path)
        if not _is_remote(location):
            result = load_index_file(location)
        else:
            result = await self._fetch(location)

        if result.loaded:
            logger.info(f"Search index loaded from {location}")
        elif result.status is LoadStatus.DISABLED:
            logger.info(f"Search disabled: {result.error}")
        else:
            logger.warning(f"Search index could not be loaded from {location}: {result.error}")
        return result

    async def _fetch(self, url: str) -> IndexLoadResult:
        try:
            async with httpx.AsyncClient(
                timeout=None,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            return IndexLoadResult.failure(f"Request failed: {e}")

        if 400 <= response.status_code < 500:
            return IndexLoadResult.disabled(f"HTTP {response.status_code}")
        if not 200 <= response.status_code < 400:
            return IndexLoadResult.failure(f"HTTP {response.status_code}: {response.text[:100]}")

        return parse_index_document(response.content)


__all__ = [
    "LoadStatus",
    "IndexLoadResult",
    "IndexLoader",
    "parse_index_document",
    "load_index_file",
]
