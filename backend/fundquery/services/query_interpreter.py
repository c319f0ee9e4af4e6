"""Rule-based interpretation of free-text fund queries."""
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from fundquery.models.schemas import DividendPolicy, QueryCriteria, QueryResult
from fundquery.services.fund_ranker import rank_funds
from fundquery.services.table_parser import FundRecord
from fundquery.services.vocabulary import (
    ASSET_TYPE_KEYWORDS,
    ASSET_TYPE_MARKER_PATTERN,
    ASSET_TYPE_MARKERS,
    DEFAULT_SORT_COLUMN,
    EXCLUDE_DIVIDEND_MARKERS,
    LIMIT_PATTERN,
    REQUIRE_DIVIDEND_MARKER,
    SORT_COLUMNS,
)

_MARKER_RE = re.compile(ASSET_TYPE_MARKER_PATTERN)
_LIMIT_RE = re.compile(LIMIT_PATTERN)


class QueryInterpreter:
    """Extract structured criteria from query text using fixed keyword tables."""

    def __init__(
        self,
        asset_types: Sequence[str] = ASSET_TYPE_KEYWORDS,
        sort_columns: Sequence[str] = SORT_COLUMNS,
        default_sort: str = DEFAULT_SORT_COLUMN,
    ):
        self.asset_types = tuple(asset_types)
        self.sort_columns = tuple(sort_columns)
        self.default_sort = default_sort

    def interpret(self, query: str) -> QueryCriteria:
        """
        Build query criteria from free text.

        Args:
            query: User query, e.g. '查詢標的類型"債券型"，給我"不配息"、"五年%"，績效前 5 名'

        Returns:
            Frozen criteria (asset types, dividend policy, sort key, limit)
        """
        text = query or ""
        return QueryCriteria(
            asset_types=self.extract_asset_types(text),
            dividend_policy=self.extract_dividend_policy(text),
            sort_key=self.extract_sort_key(text),
            limit=self.extract_limit(text),
        )

    def extract_asset_types(self, query: str) -> Tuple[str, ...]:
        """
        Collect every asset-type keyword contained in the query.

        When a "標的類型：" marker is present only the text after it counts,
        so keywords mentioned earlier in the sentence are ignored.
        """
        scope = query
        if any(marker in query for marker in ASSET_TYPE_MARKERS):
            # Segment between the first marker and the next one, if any
            scope = _MARKER_RE.split(query)[1]
        return tuple(_contained(self.asset_types, scope))

    @staticmethod
    def extract_dividend_policy(query: str) -> DividendPolicy:
        # Exclusion is checked first: "不配息" also contains "配息"
        if any(marker in query for marker in EXCLUDE_DIVIDEND_MARKERS):
            return DividendPolicy.EXCLUDE
        if REQUIRE_DIVIDEND_MARKER in query:
            return DividendPolicy.REQUIRE
        return DividendPolicy.NONE_SPECIFIED

    def extract_sort_key(self, query: str) -> str:
        for column in self.sort_columns:
            if column in query:
                return column
        return self.default_sort

    @staticmethod
    def extract_limit(query: str) -> Optional[int]:
        match = _LIMIT_RE.search(query)
        if not match:
            return None
        limit = int(match.group(1))
        return limit if limit > 0 else None


def _contained(keywords: Iterable[str], text: str) -> List[str]:
    return [keyword for keyword in keywords if keyword in text]


_default_interpreter = QueryInterpreter()


def interpret_query(query: str) -> QueryCriteria:
    """Interpret ``query`` with the built-in keyword tables."""
    return _default_interpreter.interpret(query)


def answer_query(query: str, records: Sequence[FundRecord]) -> QueryResult:
    """
    Interpret ``query`` and run it against ``records``.

    Args:
        query: Free-text query
        records: Current dataset

    Returns:
        Ranked, truncated result with its summary line
    """
    criteria = interpret_query(query)
    return rank_funds(records, criteria)
