"""Unit tests for the fund table parser and coercion rules."""
import pytest

from fundquery.services.coercion import coerce_cell, is_numeric_column, numeric_value, parse_number
from fundquery.services.sample_data import SAMPLE_FUND_MARKDOWN
from fundquery.services.table_parser import FundTableParser, extract_columns, parse_fund_table


@pytest.fixture
def sample_records():
    """Records parsed from the bundled table."""
    return parse_fund_table(SAMPLE_FUND_MARKDOWN)


class TestCoercion:
    """Test numeric/categorical coercion."""

    def test_numeric_column_markers(self):
        assert is_numeric_column("五年%")
        assert is_numeric_column("夏普值")
        assert is_numeric_column("β係數")
        assert not is_numeric_column("標的名稱")

    def test_full_width_percent_is_not_numeric(self):
        """'標準差％' uses the full-width sign and stays textual."""
        assert not is_numeric_column("標準差％")
        assert coerce_cell("標準差％", " 17.89 ") == "17.89"

    def test_parse_number(self):
        assert parse_number("4.66") == 4.66
        assert parse_number("-1.36") == -1.36
        assert parse_number("0") == 0.0

    @pytest.mark.parametrize("raw", ["N/A", "-", "", "abc", "12abc", "nan", "inf"])
    def test_unparseable_numbers_become_sentinel(self, raw):
        assert parse_number(raw) == "N/A"

    def test_categorical_empty_cell(self):
        assert coerce_cell("配息方式", "   ") == "N/A"
        assert coerce_cell("配息方式", None) == "N/A"
        assert coerce_cell("配息方式", " 無 ") == "無"

    def test_numeric_value(self):
        assert numeric_value(16.89) == 16.89
        assert numeric_value("N/A") is None
        assert numeric_value(None) is None
        assert numeric_value(True) is None


class TestFundTableParser:
    """Test FundTableParser."""

    def test_parses_bundled_sample(self, sample_records):
        assert len(sample_records) == 9
        assert [r["代碼"] for r in sample_records][:3] == ["0110", "0114", "0115"]

    def test_every_record_matches_header_arity(self, sample_records):
        columns = extract_columns(SAMPLE_FUND_MARKDOWN)
        assert len(columns) == 20
        for record in sample_records:
            assert list(record.keys()) == columns

    def test_column_types(self, sample_records):
        first = sample_records[0]
        assert first["五年%"] == 16.89
        assert first["夏普值"] == 4.21
        assert first["β係數"] == 0.05
        assert first["標準差％"] == "0.23"
        assert first["基金規模"] == "98百萬"
        assert first["配息方式"] == "N/A"
        assert isinstance(first["一個月%"], float)

    def test_reparse_is_idempotent(self):
        assert parse_fund_table(SAMPLE_FUND_MARKDOWN) == parse_fund_table(SAMPLE_FUND_MARKDOWN)

    @pytest.mark.parametrize("text", ["", "   ", "|a|b|", "|a|b|\n|---|---|"])
    def test_short_text_yields_empty_dataset(self, text):
        assert parse_fund_table(text) == []

    def test_short_rows_are_skipped(self):
        text = "|代碼|名稱|五年%|\n|---|---|---|\n|A|甲|1.5|\n|B|乙|\n|C|丙|2|"
        records = parse_fund_table(text)
        assert [r["代碼"] for r in records] == ["A", "C"]

    def test_row_without_leading_delimiter_loses_first_cell(self):
        """The fragment before the first delimiter is always discarded."""
        text = "|代碼|名稱|五年%|\n|---|---|---|\nA|甲|1.5|"
        assert parse_fund_table(text) == []

    def test_extra_cells_are_ignored(self):
        text = "|代碼|五年%|\n|---|---|\n|A|3.2|extra|"
        assert parse_fund_table(text) == [{"代碼": "A", "五年%": 3.2}]

    def test_separator_row_is_not_validated(self):
        text = "|代碼|五年%|\n|anything|goes|\n|A|-|"
        assert parse_fund_table(text) == [{"代碼": "A", "五年%": "N/A"}]

    def test_crlf_and_padding(self):
        text = "\r\n | 代碼 | 五年% | \r\n|---|---|\r\n|  A  |  28.9 |\r\n"
        assert parse_fund_table(text) == [{"代碼": "A", "五年%": 28.9}]

    def test_blank_data_lines_are_skipped(self):
        text = "|代碼|五年%|\n|---|---|\n|A|1|\n\n|B|2|"
        assert [r["代碼"] for r in parse_fund_table(text)] == ["A", "B"]

    def test_custom_delimiter(self):
        parser = FundTableParser(delimiter=";")
        records = parser.parse(";代碼;五年%;\n;-;-;\n;A;7.5;")
        assert records == [{"代碼": "A", "五年%": 7.5}]
