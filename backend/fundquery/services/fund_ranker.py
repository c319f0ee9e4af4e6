"""Deterministic filtering and ranking of fund records."""
from typing import List, Sequence, Tuple

from fundquery.models.schemas import DividendPolicy, QueryCriteria, QueryResult
from fundquery.services.coercion import numeric_value
from fundquery.services.table_parser import FundRecord
from fundquery.services.vocabulary import (
    ACCUMULATING_MARKER,
    ALL_TYPES_LABEL,
    ASSET_TYPE_COLUMN,
    DISPLAY_COLUMNS,
    DIVIDEND_COLUMN,
    DIVIDEND_POLICY_LABELS,
    MISSING,
    NO_DIVIDEND_VALUES,
)


class FundRanker:
    """Apply query criteria to a dataset and rank the survivors."""

    def __init__(self, records: Sequence[FundRecord]):
        """
        Initialize ranker.

        Args:
            records: Dataset to query; never modified
        """
        self.records = records

    def run(self, criteria: QueryCriteria) -> QueryResult:
        """
        Filter, rank and truncate the dataset.

        Args:
            criteria: Interpreted query criteria

        Returns:
            Result with display rows, summary line and match count
        """
        matches = [record for record in self.records if self.matches(record, criteria)]
        ranked = self.rank(matches, criteria.sort_key)
        rows = ranked[:criteria.limit] if criteria.limit is not None else ranked

        return QueryResult(
            criteria=criteria,
            rows=rows,
            columns=list(DISPLAY_COLUMNS),
            summary=build_summary(criteria, len(rows)),
            total_matches=len(matches),
        )

    @staticmethod
    def matches(record: FundRecord, criteria: QueryCriteria) -> bool:
        return _type_matches(record, criteria.asset_types) and _dividend_matches(record, criteria.dividend_policy)

    @staticmethod
    def rank(records: Sequence[FundRecord], sort_key: str) -> List[FundRecord]:
        # sorted() is stable, so equal values keep dataset order even with reverse=True
        return sorted(records, key=lambda record: _rank_key(record.get(sort_key)), reverse=True)


def _text_field(record: FundRecord, column: str) -> str:
    value = record.get(column, MISSING)
    return value if isinstance(value, str) else str(value)


def _type_matches(record: FundRecord, asset_types: Tuple[str, ...]) -> bool:
    if not asset_types:
        return True
    asset_type = _text_field(record, ASSET_TYPE_COLUMN)
    return any(keyword in asset_type for keyword in asset_types)


def is_non_distributing(dividend: str) -> bool:
    """Return True for dividend cells meaning "no distribution" or "accumulating"."""
    return dividend in NO_DIVIDEND_VALUES or ACCUMULATING_MARKER in dividend


def _dividend_matches(record: FundRecord, policy: DividendPolicy) -> bool:
    dividend = _text_field(record, DIVIDEND_COLUMN)
    if policy is DividendPolicy.EXCLUDE:
        return is_non_distributing(dividend)
    if policy is DividendPolicy.REQUIRE:
        # "累積" values are not excluded here, only the three exact forms
        return dividend not in NO_DIVIDEND_VALUES
    return True


def _rank_key(value: object) -> Tuple[int, float]:
    # Missing values sit in their own lower tier and never tie with a number
    number = numeric_value(value)
    if number is None:
        return (0, 0.0)
    return (1, number)


def build_summary(criteria: QueryCriteria, count: int) -> str:
    """Describe how many funds matched, or why none did."""
    if count == 0:
        types = "、".join(criteria.asset_types) or ALL_TYPES_LABEL
        dividend = DIVIDEND_POLICY_LABELS[criteria.dividend_policy.value]
        return f"很抱歉，根據您的條件（{types}，{dividend}），找不到符合的基金資料。"
    return f"已為您找到 {count} 筆符合條件的基金，依照「{criteria.sort_key}」排序："


def rank_funds(records: Sequence[FundRecord], criteria: QueryCriteria) -> QueryResult:
    """
    Run ``criteria`` against ``records``.

    Args:
        records: Current dataset
        criteria: Interpreted query criteria

    Returns:
        QueryResult
    """
    ranker = FundRanker(records)
    return ranker.run(criteria)
