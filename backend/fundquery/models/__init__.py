"""Query, result and API schemas."""
from fundquery.models.schemas import (
    DividendPolicy,
    QueryCriteria,
    QueryResult,
    NarratedAnswer,
    SortConfig,
    ListFilters,
)

__all__ = [
    "DividendPolicy",
    "QueryCriteria",
    "QueryResult",
    "NarratedAnswer",
    "SortConfig",
    "ListFilters",
]
