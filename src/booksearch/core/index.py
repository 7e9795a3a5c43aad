"""
Full-text search index using SQLite FTS5.

The stored documents of the serialized book index are loaded into an
in-memory FTS5 table (porter stemming, unicode tokenization). Matching and
bm25 ranking are done entirely by FTS5; this module only translates
SearchOptions into an FTS5 query and rows into SearchResult objects.
"""

import logging
import re
from functools import lru_cache
from typing import List, Optional

import snowballstemmer
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from booksearch.core.schemas import MatchMode, SearchOptions, SearchResult, SerializedIndex

logger = logging.getLogger(__name__)

INDEXED_FIELDS = ("title", "body", "breadcrumbs")
TOKEN_PATTERN = re.compile(r"\w+")

# Same algorithm as the FTS5 'porter' tokenizer
_porter = snowballstemmer.stemmer("porter")


@lru_cache(maxsize=8192)
def stem_word(word: str) -> str:
    """Reduce a word to its lowercased porter stem."""
    return _porter.stemWord(word.lower())


class SearchIndexError(Exception):
    """Raised when building or querying the full-text index fails."""
    pass


def build_match_query(term: str, options: SearchOptions) -> str:
    """
    Translate a raw search string into an FTS5 MATCH expression.

    - Tokens are the word characters of the input; each is quoted so FTS5
      operators typed by the user are taken literally.
    - `expand` turns every token into a prefix query.
    - `match_mode` joins tokens with AND or OR.
    - Only fields with a positive boost are searched.

    Returns:
        MATCH expression, or "" when nothing is searchable
    """
    columns = [name for name in INDEXED_FIELDS if options.boost(name) > 0]
    tokens = TOKEN_PATTERN.findall(term or "")
    if not columns or not tokens:
        return ""

    suffix = "*" if options.expand else ""
    joiner = " AND " if options.match_mode is MatchMode.AND else " OR "
    expression = joiner.join(f'"{token}"{suffix}' for token in tokens)
    return "{" + " ".join(columns) + "} : (" + expression + ")"


class SearchIndex:
    """
    Loaded, read-only full-text index over the book's sections.

    One instance per session. Never mutated after construction.
    """

    def __init__(self, engine: Engine, document_count: int):
        self._engine = engine
        self._document_count = document_count

    @classmethod
    def from_serialized(cls, serialized: SerializedIndex) -> "SearchIndex":
        """
        Build an FTS5 table from the stored documents of a serialized index.

        Raises:
            SearchIndexError: If the index declares fields the table does not
                have, or SQLite cannot create or fill the table
        """
        unsupported = [name for name in serialized.field_names if name not in INDEXED_FIELDS]
        if unsupported:
            raise SearchIndexError(f"Index declares unsupported fields: {', '.join(unsupported)}")

        engine = create_engine(
            "sqlite://",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

        rows = []
        for ref, doc in serialized.document_store.docs.items():
            rows.append({
                "ref": str(doc.get(serialized.ref) or ref),
                "title": str(doc.get("title") or ""),
                "body": str(doc.get("body") or ""),
                "breadcrumbs": str(doc.get("breadcrumbs") or ""),
            })

        try:
            with engine.begin() as conn:
                conn.execute(text("""
                    CREATE VIRTUAL TABLE doc_fts USING fts5(
                        ref UNINDEXED, title, body, breadcrumbs,
                        tokenize = 'porter unicode61'
                    )
                """))
                if rows:
                    conn.execute(text("""
                        INSERT INTO doc_fts(ref, title, body, breadcrumbs)
                        VALUES (:ref, :title, :body, :breadcrumbs)
                    """), rows)
        except SQLAlchemyError as e:
            engine.dispose()
            raise SearchIndexError(f"Failed to build full-text index: {e}") from e

        logger.info(f"Built search index with {len(rows)} documents")
        return cls(engine, len(rows))

    @property
    def document_count(self) -> int:
        return self._document_count

    def search(self, term: str, options: SearchOptions) -> List[SearchResult]:
        """
        Run a query and return ranked results.

        Args:
            term: Raw search string
            options: Match mode, prefix expansion, boosts and result limit

        Returns:
            Results ordered by relevance (best first), at most
            options.limit_results long

        Raises:
            SearchIndexError: If FTS5 rejects the query
        """
        match = build_match_query(term, options)
        if not match:
            return []

        # bm25() takes one weight per column, the UNINDEXED ref column included
        weights = ", ".join(str(float(options.boost(name))) for name in INDEXED_FIELDS)
        sql_query = text(f"""
            SELECT ref, title, body, breadcrumbs, bm25(doc_fts, 0.0, {weights}) AS score
            FROM doc_fts
            WHERE doc_fts MATCH :query
            ORDER BY score
            LIMIT :limit
        """)

        try:
            with self._engine.connect() as conn:
                rows = conn.execute(sql_query, {"query": match, "limit": options.limit_results}).all()
        except SQLAlchemyError as e:
            raise SearchIndexError(f"Search for {term!r} failed: {e}") from e

        # FTS5 bm25() is negative (lower = better); negate so higher = better
        return [
            SearchResult(ref=row[0], title=row[1], body=row[2], breadcrumbs=row[3], score=-float(row[4]))
            for row in rows
        ]

    def close(self) -> None:
        self._engine.dispose()


def query(index: Optional[SearchIndex], options: SearchOptions, term: str) -> List[SearchResult]:
    """Standalone query against a loaded index."""
    if index is None:
        raise SearchIndexError("Search index is not loaded yet")
    return index.search(term, options)


class QueryExecutor:
    """
    Runs queries for a session, skipping repeats of the current term.

    Re-running the term that produced the results on screen is a no-op
    until a different term (or reset()) comes in between.
    """

    def __init__(self, index: SearchIndex, options: SearchOptions):
        if index is None:
            raise ValueError("QueryExecutor requires a loaded SearchIndex")
        self.index = index
        self.options = options
        self.current_term = ""

    def run(self, term: str) -> Optional[List[SearchResult]]:
        """Query for term; None when term is already the current one."""
        if term == self.current_term:
            return None
        self.current_term = term

        results = self.index.search(term, self.options)
        logger.debug(f"Query {term!r} returned {len(results)} results")
        return results

    def reset(self) -> None:
        """Forget the current term (the search was cleared)."""
        self.current_term = ""


__all__ = [
    "INDEXED_FIELDS",
    "SearchIndex",
    "SearchIndexError",
    "QueryExecutor",
    "build_match_query",
    "query",
    "stem_word",
]
