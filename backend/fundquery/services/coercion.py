"""Per-column value coercion shared by the parser, ranker and list view."""
import math
from typing import Optional, Union

from fundquery.services.vocabulary import MISSING

FundValue = Union[float, str]

# Substrings that flag a column as numeric. Only the ASCII percent sign counts;
# columns such as "標準差％" use the full-width form and stay textual.
NUMERIC_COLUMN_MARKERS = ("%", "值", "係數")
NUMERIC_SENTINELS = (MISSING, "-")


def is_numeric_column(column: str) -> bool:
    """Return True when values of ``column`` should be parsed as floats."""
    return any(marker in column for marker in NUMERIC_COLUMN_MARKERS)


def parse_number(raw: str) -> FundValue:
    """
    Convert a trimmed numeric cell to float.

    Sentinels, empty cells, garbage and non-finite values all degrade to the
    ``"N/A"`` string rather than raising or becoming zero.
    """
    if raw in NUMERIC_SENTINELS or not raw:
        return MISSING
    try:
        value = float(raw)
    except ValueError:
        return MISSING
    if not math.isfinite(value):
        return MISSING
    return value


def coerce_cell(column: str, raw: Optional[str]) -> FundValue:
    """Apply the numeric/categorical rule for ``column`` to a raw cell."""
    value = raw.strip() if raw is not None else ""
    if is_numeric_column(column):
        return parse_number(value)
    return value or MISSING


def numeric_value(value: object) -> Optional[float]:
    """Return the float behind a record value, or None for the sentinel."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None
