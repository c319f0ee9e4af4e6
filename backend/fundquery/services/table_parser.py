"""Markdown fund table parsing service."""
import logging
from typing import Dict, List

from fundquery.services.coercion import FundValue, coerce_cell
from fundquery.services.vocabulary import MISSING

logger = logging.getLogger(__name__)

FundRecord = Dict[str, FundValue]

DELIMITER = "|"
# Header, separator and at least one data row
MIN_TABLE_LINES = 3


class FundTableParser:
    """Convert a pipe-delimited fund table into typed records."""

    def __init__(self, delimiter: str = DELIMITER):
        """
        Initialize parser.

        Args:
            delimiter: Column delimiter, also used before the first and after the last cell
        """
        self.delimiter = delimiter

    def parse(self, text: str) -> List[FundRecord]:
        """
        Parse table text into fund records.

        Rows with fewer cells than the header are skipped silently so that a
        ragged import degrades instead of failing.

        Args:
            text: Raw table text (header row, separator row, data rows)

        Returns:
            Records in source order, or an empty list for too-short input
        """
        lines = [line.strip() for line in (text or "").strip().split("\n")]
        if len(lines) < MIN_TABLE_LINES:
            return []

        columns = self.parse_header(lines[0])
        records: List[FundRecord] = []
        skipped = 0

        # lines[1] is the separator row, never validated
        for line in lines[2:]:
            cells = self._split_row(line)
            if len(cells) < len(columns):
                skipped += 1
                continue
            records.append(self._build_record(columns, cells))

        if skipped:
            logger.debug("Skipped %s malformed fund rows", skipped)
        return records

    def parse_header(self, line: str) -> List[str]:
        tokens = (token.strip() for token in line.split(self.delimiter))
        return [token for token in tokens if token]

    def _split_row(self, line: str) -> List[str]:
        # Drop whatever sits before the leading and after the trailing delimiter
        fragments = line.split(self.delimiter)
        return fragments[1:-1]

    def _build_record(self, columns: List[str], cells: List[str]) -> FundRecord:
        record: FundRecord = {}
        for index, column in enumerate(columns):
            raw = cells[index] if index < len(cells) else MISSING
            record[column] = coerce_cell(column, raw)
        return record


def parse_fund_table(text: str) -> List[FundRecord]:
    """
    Parse a Markdown fund table.

    Args:
        text: Raw table text

    Returns:
        List of fund records keyed by header column
    """
    parser = FundTableParser()
    return parser.parse(text)


def extract_columns(text: str) -> List[str]:
    """Return the header columns of ``text`` (empty for too-short input)."""
    lines = (text or "").strip().split("\n")
    if len(lines) < MIN_TABLE_LINES:
        return []
    return FundTableParser().parse_header(lines[0].strip())
