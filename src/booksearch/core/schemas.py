"""
Pydantic schemas for the search index document.

The index document is produced by the book renderer as `searchindex.json`:

    {
        "enable": true,
        "searchoptions": {"bool": "AND", "expand": true, "limit_results": 30,
                          "teaser_word_count": 30,
                          "fields": {"title": {"boost": 1}, ...}},
        "index": {<elasticlunr serialization>}
    }

Everything is validated on load so that use-sites can trust the shape.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Enums

class MatchMode(str, Enum):
    """How query terms are combined."""
    AND = "AND"
    OR = "OR"


# Search options

class FieldBoost(BaseModel):
    """Weight of a single document field."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    boost: int = Field(1, ge=0, description="Relative weight; 0 excludes the field")


def _default_boosts() -> Dict[str, FieldBoost]:
    return {
        "title": FieldBoost(boost=1),
        "body": FieldBoost(boost=1),
        "breadcrumbs": FieldBoost(boost=0),
    }


class SearchOptions(BaseModel):
    """Query configuration shipped with the index. Immutable once loaded."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    match_mode: MatchMode = Field(MatchMode.AND, alias="bool", description="AND/OR combination of terms")
    expand: bool = Field(True, description="Treat every term as a prefix")
    teaser_word_count: int = Field(30, gt=0, description="Words per result teaser")
    limit_results: int = Field(30, gt=0, description="Maximum results shown")
    field_boosts: Dict[str, FieldBoost] = Field(
        default_factory=_default_boosts, alias="fields", description="Per-field weights"
    )

    def boost(self, field_name: str) -> int:
        """Boost for a field; fields not configured are not searched."""
        entry = self.field_boosts.get(field_name)
        return entry.boost if entry else 0


# Serialized index

class DocumentStore(BaseModel):
    """Stored documents of an elasticlunr index."""

    model_config = ConfigDict(extra="ignore")

    save: bool = True
    docs: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class SerializedIndex(BaseModel):
    """The parts of an elasticlunr serialization needed to rebuild the index.

    Only the stored documents are used; inverted index and pipeline sections
    are ignored and rebuilt by the full-text engine.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    version: Optional[str] = None
    ref: str = "id"
    field_names: List[str] = Field(
        default_factory=lambda: ["title", "body", "breadcrumbs"], alias="fields"
    )
    document_store: DocumentStore = Field(..., alias="documentStore")

    @model_validator(mode="after")
    def _require_stored_documents(self) -> "SerializedIndex":
        if not self.document_store.save:
            raise ValueError("index was serialized without stored documents")
        return self


class IndexDocument(BaseModel):
    """Top-level `searchindex.json` document."""

    model_config = ConfigDict(extra="ignore")

    enable: bool
    searchoptions: Optional[SearchOptions] = None
    index: Optional[SerializedIndex] = None

    @model_validator(mode="after")
    def _require_payload_when_enabled(self) -> "IndexDocument":
        if self.enable and (self.searchoptions is None or self.index is None):
            raise ValueError("enabled index document must carry searchoptions and index")
        return self


# Results

class SearchResult(BaseModel):
    """A single ranked hit."""

    ref: str = Field(..., description="Document reference, 'path#anchor' or 'path'")
    title: str = ""
    breadcrumbs: str = ""
    body: str = ""
    score: float = 0.0

    @property
    def path(self) -> str:
        return self.ref.split("#", 1)[0]

    @property
    def anchor(self) -> str:
        _, _, anchor = self.ref.partition("#")
        return anchor


__all__ = [
    "MatchMode",
    "FieldBoost",
    "SearchOptions",
    "DocumentStore",
    "SerializedIndex",
    "IndexDocument",
    "SearchResult",
]
