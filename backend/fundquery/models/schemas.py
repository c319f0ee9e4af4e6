"""Pydantic schemas for query criteria, results and API models."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from fundquery.services.vocabulary import DEFAULT_SORT_COLUMN, DISPLAY_COLUMNS


class DividendPolicy(str, Enum):
    NONE_SPECIFIED = "none-specified"
    EXCLUDE = "exclude-dividend"
    REQUIRE = "require-dividend"


# Query schemas
class QueryCriteria(BaseModel):
    """Filter, sort and limit parameters derived from one query."""

    model_config = ConfigDict(frozen=True)

    asset_types: Tuple[str, ...] = ()
    dividend_policy: DividendPolicy = DividendPolicy.NONE_SPECIFIED
    sort_key: str = DEFAULT_SORT_COLUMN
    limit: Optional[int] = Field(default=None, ge=1)  # None means unbounded


class QueryResult(BaseModel):
    criteria: QueryCriteria
    rows: List[Dict[str, Any]]
    columns: List[str] = Field(default_factory=lambda: list(DISPLAY_COLUMNS))
    summary: str
    total_matches: int = 0


class NarratedAnswer(BaseModel):
    """Deterministic summary plus the optional narrative gloss."""

    content: str
    narrative: Optional[str] = None
    narrative_error: Optional[str] = None


# List view schemas
SortDirection = Literal["asc", "desc"]


class SortConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: Optional[str] = None
    direction: SortDirection = "desc"


class ListFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    asset_type: str = "All"
    dividend: str = "All"
    search: str = ""


# Request/Response schemas
class QueryRequest(BaseModel):
    query: str = Field(..., max_length=2000)
    narrate: bool = True


class QueryResponse(BaseModel):
    query: str
    criteria: QueryCriteria
    columns: List[str]
    rows: List[Dict[str, Any]]
    summary: str
    total_matches: int
    content: str
    narrative: Optional[str] = None
    narrative_error: Optional[str] = None


class FundListResponse(BaseModel):
    columns: List[str]
    rows: List[Dict[str, Any]]
    total: int
    sort: SortConfig
    filters: ListFilters


class FilterOptionsResponse(BaseModel):
    asset_types: List[str]
    dividends: List[str]


class ImportRequest(BaseModel):
    markdown: str


class ImportResponse(BaseModel):
    record_count: int
    columns: List[str]
    message: str


class SourceResponse(BaseModel):
    markdown: str
    record_count: int


class FundAnalysisResponse(BaseModel):
    code: str
    fund: Dict[str, Any]
    analysis: Optional[str] = None
    error: Optional[str] = None
