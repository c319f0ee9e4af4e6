"""Column sorting and exact-match filtering for the fund list view."""
from typing import Dict, List, Optional, Sequence, Tuple

from fundquery.models.schemas import ListFilters, SortConfig, SortDirection
from fundquery.services.fund_store import FundStore
from fundquery.services.table_parser import FundRecord
from fundquery.services.vocabulary import (
    ASSET_TYPE_COLUMN,
    CODE_COLUMN,
    DIVIDEND_COLUMN,
    MISSING,
    NAME_COLUMN,
)

ALL = "All"


def _sort_key(value: object) -> Tuple[int, float, str]:
    # "N/A" ranks as negative infinity; numbers sort below text in mixed columns
    if value is None or value == MISSING:
        return (0, 0.0, "")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (1, float(value), "")
    return (2, 0.0, str(value))


def sort_records(records: Sequence[FundRecord], key: str, direction: SortDirection = "desc") -> List[FundRecord]:
    """Return ``records`` ordered by column ``key`` (stable)."""
    return sorted(records, key=lambda record: _sort_key(record.get(key)), reverse=direction == "desc")


def next_sort_config(current: SortConfig, key: str) -> SortConfig:
    """
    Toggle the sort after a click on column ``key``.

    Clicking the active descending column flips it to ascending; every other
    click starts a descending sort.
    """
    if current.key == key and current.direction == "desc":
        return SortConfig(key=key, direction="asc")
    return SortConfig(key=key, direction="desc")


def _field(record: FundRecord, column: str) -> str:
    value = record.get(column, MISSING)
    return value if isinstance(value, str) else str(value)


def record_passes(record: FundRecord, filters: ListFilters) -> bool:
    if filters.asset_type != ALL and _field(record, ASSET_TYPE_COLUMN) != filters.asset_type:
        return False
    if filters.dividend != ALL and _field(record, DIVIDEND_COLUMN) != filters.dividend:
        return False
    if filters.search:
        return filters.search in _field(record, NAME_COLUMN) or filters.search in _field(record, CODE_COLUMN)
    return True


def filter_records(records: Sequence[FundRecord], filters: ListFilters) -> List[FundRecord]:
    """Apply the three list filters (AND) to the full dataset."""
    return [record for record in records if record_passes(record, filters)]


def _distinct(records: Sequence[FundRecord], column: str) -> List[str]:
    seen: Dict[str, None] = {}
    for record in records:
        seen.setdefault(_field(record, column), None)
    return [ALL, *seen]


def filter_options(records: Sequence[FundRecord]) -> Dict[str, List[str]]:
    """Drop-down values for the list filters, "All" first."""
    return {
        "asset_types": _distinct(records, ASSET_TYPE_COLUMN),
        "dividends": _distinct(records, DIVIDEND_COLUMN),
    }


class FundTableView:
    """Stateful list view over a fund store."""

    def __init__(self, store: FundStore):
        self.store = store
        self.sort = SortConfig()
        self.filters = ListFilters()
        self.rows: List[FundRecord] = list(store.records)

    def toggle_sort(self, key: str) -> List[FundRecord]:
        """Sort the visible rows by ``key``, flipping direction on repeat clicks."""
        self.sort = next_sort_config(self.sort, key)
        self.rows = sort_records(self.rows, key, self.sort.direction)
        return self.rows

    def set_filter(self, name: str, value: str) -> List[FundRecord]:
        """
        Change one filter and recompute rows from the full dataset.

        Args:
            name: "asset_type", "dividend" or "search"
            value: New filter value

        Returns:
            Visible rows, with the active sort re-applied
        """
        if name not in ListFilters.model_fields:
            raise ValueError(f"Unknown list filter: {name}")
        self.filters = self.filters.model_copy(update={name: value})
        return self.refresh()

    def refresh(self) -> List[FundRecord]:
        """Recompute rows, e.g. after the dataset was replaced."""
        rows = filter_records(self.store.records, self.filters)
        if self.sort.key is not None:
            rows = sort_records(rows, self.sort.key, self.sort.direction)
        self.rows = rows
        return self.rows


def list_funds(
    records: Sequence[FundRecord],
    filters: ListFilters,
    sort: Optional[SortConfig] = None,
) -> List[FundRecord]:
    """Filter then sort ``records`` in one call (stateless list view)."""
    rows = filter_records(records, filters)
    if sort is not None and sort.key:
        rows = sort_records(rows, sort.key, sort.direction)
    return rows
