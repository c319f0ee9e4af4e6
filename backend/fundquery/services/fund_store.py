"""In-memory owner of the currently loaded fund dataset."""

from __future__ import annotations

import logging
import threading
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from fundquery.config import get_settings
from fundquery.services.sample_data import SAMPLE_FUND_MARKDOWN
from fundquery.services.table_parser import FundRecord, extract_columns, parse_fund_table
from fundquery.services.vocabulary import CODE_COLUMN

logger = logging.getLogger(__name__)


class DatasetSnapshot:
    """Immutable view of one loaded dataset."""

    __slots__ = ("records", "columns", "source_text")

    def __init__(self, records: Tuple[FundRecord, ...], columns: Tuple[str, ...], source_text: str):
        self.records = records
        self.columns = columns
        self.source_text = source_text


class FundStore:
    """
    Single owner of the fund dataset.

    The dataset is only ever replaced as a whole. Readers grab a snapshot and
    keep working on it even if an import lands in the meantime.
    """

    def __init__(self, source_text: str = SAMPLE_FUND_MARKDOWN):
        self._lock = threading.Lock()
        self._snapshot = self._build_snapshot(source_text)

    @staticmethod
    def _build_snapshot(source_text: str) -> DatasetSnapshot:
        records = tuple(parse_fund_table(source_text))
        columns = tuple(extract_columns(source_text))
        return DatasetSnapshot(records, columns, source_text)

    def snapshot(self) -> DatasetSnapshot:
        return self._snapshot

    @property
    def records(self) -> Tuple[FundRecord, ...]:
        return self._snapshot.records

    @property
    def columns(self) -> Tuple[str, ...]:
        return self._snapshot.columns

    @property
    def source_text(self) -> str:
        return self._snapshot.source_text

    def replace(self, source_text: str) -> int:
        """
        Parse ``source_text`` and swap it in as the whole dataset.

        Returns:
            Number of records now loaded
        """
        # Parse outside the lock; only the swap needs to be exclusive
        snapshot = self._build_snapshot(source_text)
        with self._lock:
            self._snapshot = snapshot
        if not snapshot.records:
            logger.warning("Fund import produced an empty dataset")
        else:
            logger.info("Fund dataset replaced: %s records, %s columns", len(snapshot.records), len(snapshot.columns))
        return len(snapshot.records)

    def reset(self) -> int:
        """Restore the bundled sample dataset."""
        return self.replace(SAMPLE_FUND_MARKDOWN)

    def find(self, code: str) -> Optional[FundRecord]:
        """Return the first record whose code equals ``code``."""
        for record in self.records:
            if record.get(CODE_COLUMN) == code:
                return record
        return None


def _initial_source_text() -> str:
    settings = get_settings()
    if not settings.fund_data_file:
        return SAMPLE_FUND_MARKDOWN

    path = Path(settings.fund_data_file)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Unable to read fund data file %s, using bundled sample: %s", path, exc)
        return SAMPLE_FUND_MARKDOWN


@lru_cache()
def get_fund_store() -> FundStore:
    """Get the process-wide fund store."""
    return FundStore(_initial_source_text())
