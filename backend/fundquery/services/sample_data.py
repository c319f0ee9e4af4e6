"""Bundled fund table loaded when no import has happened yet."""

from __future__ import annotations

# Snapshot of the 2025-12 fund listing, Markdown table layout
SAMPLE_FUND_MARKDOWN = """
|代碼|標的名稱|幣別|標的類型|配息方式|一個月%|三個月%|六個月%|今年以來%|一年%|二年%|三年%|五年%|標準差％|夏普值|β係數|報酬％|＋ ∕ －指數|基金規模|成立日期|
|---|---|---|---|---|---|---|---|---|---|---|---|---|---|---|---|---|---|---|---|
|0110|景順美元極短期債券基金A股美元(已撤銷核備)|美元|債券型|N/A|0.36|1|2.34|4.5|4.66|10.56|16.48|16.89|0.23|4.21|0.05|0.01|0.01|98百萬|1991/01/02|
|0114|景順日本小型企業基金A股日圓|日圓|中小型股|無|-1.36|-2.89|7.56|16.54|16.9|33.25|39.45|28.9|17.89|0.26|0.68|-0.18|-4|12660百萬|1991/01/02|
|0115|景順全歐洲小型企業基金A股歐元|歐元|中小型股|無|1.54|-1.34|-0.16|12.68|13.12|28.57|38.49|40.77|17.11|0.21|1.18|-0.4|-0.15|88百萬|1991/01/02|
|0116|景順泛歐洲基金A股歐元|歐元|股票型|無|2.82|7.79|8.85|20.1|18.86|17.82|38.5|65.21|17.22|0.29|1.36|-0.03|-0.01|1100百萬|1991/01/02|
|0127|景順環球消費趨勢基金A股美元|美元|非必需消費股|無|3.27|-8.87|13.13|22.37|16.37|56.07|86.7|-1.21|38.33|0.16|1.64|1.92|1.77|2590百萬|1994/10/03|
|0132|景順歐元債券基金A股歐元(已撤銷核備)|歐元|債券型|無|-0.42|-0.25|0.16|1.14|0.52|4.71|10.48|-10.37|2.96|-0.07|0.22|0.02|0|595百萬|1996/04/01|
|0146|景順實現能源轉型基金A股美元|美元|能源|無|0|-0.77|11.87|19.56|17.37|17.78|22.12|10.31|13.38|0.34|0.21|-0.1|-0.01|41百萬|2001/02/01|
|0147|景順歐元極短期債券基金A股歐元(已撤銷核備)|歐元|債券型|無|0.14|0.47|1.04|2.28|2.37|6.29|9.77|7.52|0.19|1.67|0|0.01|0.02|331百萬|1999/10/14|
|0149|景順新興市場債券基金A(歐元對沖)股歐元(本基金有相當比重投資於非投資等級之高風險債券)|歐元|固定收益|無|0.58|1.14|6.47|8.69|7.34|15.28|21.1|-10.36|5.13|0.34|0.99|0.06|0.02|88百萬|2004/07/30|
"""
