"""Narrative gloss around deterministic query results."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from fundquery.models.schemas import NarratedAnswer, QueryResult
from fundquery.services.gemini_client import GeminiClient, get_gemini_client
from fundquery.services.gemini_exceptions import GeminiClientError
from fundquery.services.vocabulary import NAME_COLUMN

logger = logging.getLogger(__name__)

# Number of top-ranked funds quoted back to the model
PROMPT_TOP_FUNDS = 3

MATCH_HEADER = "✨ **AI 分析師點評**："
NO_MATCH_HEADER = "🤖 **AI 建議**："
MATCH_NOTICE = "AI 分析無法使用"
NO_MATCH_NOTICE = "AI 建議無法使用"


def build_match_prompt(query: str, result: QueryResult) -> str:
    """Prompt asking for a short commentary on the top ranked funds."""
    top_funds = ", ".join(
        f"{fund.get(NAME_COLUMN)} (一年:{fund.get('一年%')}%, 五年:{fund.get('五年%')}%)"
        for fund in result.rows[:PROMPT_TOP_FUNDS]
    )
    return (
        f"使用者查詢：「{query}」。\n"
        f"我已經根據規則篩選出結果，前幾名是：{top_funds}。\n\n"
        "請以「AI 基金分析師」的角度，針對這些篩選結果給予一段簡短的總結與投資建議（約 100 字）。\n"
        "強調這些基金的特色，並提醒投資風險。請用繁體中文。"
    )


def build_no_match_prompt(query: str) -> str:
    """Prompt used when the rules found nothing."""
    return (
        f"使用者問：「{query}」。\n"
        "但在我的資料庫中找不到完全符合篩選條件的基金。\n\n"
        "請以「AI 基金分析師」的角度，回答使用者的問題，或是解釋為什麼這樣的條件可能找不到基金"
        "（例如條件太嚴苛），並給予一些替代的投資建議。請用繁體中文。"
    )


def build_fund_analysis_prompt(fund: Dict[str, Any]) -> str:
    """Prompt for a ~200 word analyst note on a single fund."""
    return (
        "請扮演一位專業的資深基金分析師。請針對以下這檔基金的數據進行深入簡短的分析（約 200 字）：\n\n"
        f"基金名稱：{fund.get('標的名稱')}\n"
        f"類型：{fund.get('標的類型')}\n"
        f"一年報酬率：{fund.get('一年%')}%\n"
        f"三年報酬率：{fund.get('三年%')}%\n"
        f"五年報酬率：{fund.get('五年%')}%\n"
        f"標準差：{fund.get('標準差％')}%\n"
        f"夏普值：{fund.get('夏普值')}\n"
        f"Beta係數：{fund.get('β係數')}\n\n"
        "請分析：\n"
        "1. 績效表現：短期與長期表現如何？\n"
        "2. 風險評估：根據標準差與Beta係數，風險程度如何？\n"
        "3. 投資建議：適合什麼樣的投資人？（保守/穩健/積極）\n\n"
        "請用繁體中文回答，語氣專業且親切，使用 Markdown 格式條列重點。"
    )


class FundNarrator:
    """Ask Gemini to phrase results the engine has already computed."""

    def __init__(self, client_factory: Optional[Callable[[], GeminiClient]] = None):
        """
        Initialize narrator.

        Args:
            client_factory: Builds the Gemini client; defaults to the configured one
        """
        self.client_factory = client_factory or get_gemini_client

    def narrate(self, query: str, result: QueryResult, enabled: bool = True) -> NarratedAnswer:
        """
        Attach a narrative to ``result``.

        The summary is always kept. Any Gemini failure becomes a short notice
        appended to it; this method never raises for collaborator errors.
        """
        if not enabled:
            return NarratedAnswer(content=result.summary)

        if result.rows:
            prompt = build_match_prompt(query, result)
            header, notice = MATCH_HEADER, MATCH_NOTICE
        else:
            prompt = build_no_match_prompt(query)
            header, notice = NO_MATCH_HEADER, NO_MATCH_NOTICE

        try:
            narrative = self.client_factory().generate_text(prompt)
        except GeminiClientError as exc:
            logger.warning("Narrative generation failed for query %r: %s", query, exc)
            return NarratedAnswer(
                content=f"{result.summary}\n\n(⚠️ {notice}: {exc})",
                narrative_error=str(exc),
            )

        return NarratedAnswer(
            content=f"{result.summary}\n\n{header}\n{narrative}",
            narrative=narrative,
        )

    def analyze_fund(self, fund: Dict[str, Any]) -> str:
        """
        Generate an analyst note for one fund.

        Raises:
            GeminiClientError: When Gemini is unconfigured or the call fails
        """
        return self.client_factory().generate_text(build_fund_analysis_prompt(fund))


def get_fund_narrator() -> FundNarrator:
    """Get a narrator bound to the configured Gemini client."""
    return FundNarrator(get_gemini_client)
