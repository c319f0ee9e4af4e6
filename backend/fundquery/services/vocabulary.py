"""Fixed keyword tables used to interpret fund queries.

Everything here is immutable data loaded once at import time. Matching logic
lives in the interpreter and ranker; extend these tables instead of adding
branches there.
"""
from typing import Tuple

# Column names of the bundled fund table
CODE_COLUMN = "代碼"
NAME_COLUMN = "標的名稱"
ASSET_TYPE_COLUMN = "標的類型"
DIVIDEND_COLUMN = "配息方式"

MISSING = "N/A"

# Canonical asset-type labels, matched by substring containment.
# Broad and specific labels overlap ("債券型" vs "債券型國內債券型"); both can match.
ASSET_TYPE_KEYWORDS: Tuple[str, ...] = (
    "債券型",
    "非投資等級債券",
    "固定收益",
    "公司債券",
    "REIT",
    "不動產證券化型",
    "可轉換債券",
    "市政債券",
    "全球組合型債券型",
    "多重資產型",
    "房地產",
    "短型債券",
    "債券型非投資等級債券型",
    "債券型海外債券投資等級",
    "債券型海外債券投資等級全球新興市場",
    "債券型國內債券型",
    "中小型股",
    "股票型",
)

# Text after either marker is the only place asset types are looked up
ASSET_TYPE_MARKERS: Tuple[str, ...] = ("標的類型：", "標的類型:")
ASSET_TYPE_MARKER_PATTERN = r"標的類型[：:]"

# "no distribution" / "accumulating"
EXCLUDE_DIVIDEND_MARKERS: Tuple[str, ...] = ("不配息", "無配息", "累積")
REQUIRE_DIVIDEND_MARKER = "配息"

# Dividend cell values that mean the fund does not distribute
NO_DIVIDEND_VALUES: Tuple[str, ...] = ("無", MISSING, "不配息")
ACCUMULATING_MARKER = "累積"

# Ascending by horizon; the first one found in the query wins
SORT_COLUMNS: Tuple[str, ...] = (
    "一個月%",
    "三個月%",
    "六個月%",
    "今年以來%",
    "一年%",
    "二年%",
    "三年%",
    "五年%",
)
DEFAULT_SORT_COLUMN = "五年%"

# "top N": 前5名, 前 10 名
LIMIT_PATTERN = r"前\s*(\d+)\s*名"

DISPLAY_COLUMNS: Tuple[str, ...] = (
    CODE_COLUMN,
    NAME_COLUMN,
    ASSET_TYPE_COLUMN,
    "一年%",
    "三年%",
    "五年%",
)

ALL_TYPES_LABEL = "所有類型"
DIVIDEND_POLICY_LABELS = {
    "none-specified": "不限配息",
    "exclude-dividend": "不配息",
    "require-dividend": "配息",
}
