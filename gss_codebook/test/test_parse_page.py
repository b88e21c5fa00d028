"""Tests for page parsing: container extraction, layout detection, record assembly."""

import pytest
from bs4 import BeautifulSoup

from gss_codebook.errors import MalformedRecordError
from gss_codebook.models.codebook import FailureKind, MarginalsKind
from gss_codebook.parse.assemble import (
    EMPTY_MARGINALS_WARNING,
    assemble_records,
    extract_identifier,
    extract_marginals,
    extract_properties,
    extract_text,
)
from gss_codebook.parse.columns import deduplicate, normalize_column_name, normalize_grid
from gss_codebook.parse.html_tables import RawTable, extract_containers, read_table
from gss_codebook.parse.layout import FourTable, ThreeTable, detect_layout
from gss_codebook.parse.parse_gss_page import page_number_from_path, parse_page, parse_page_file

from conftest import html_container, html_page, html_table, question_container, recode_container


# ===== TABLE EXTRACTION TESTS =====

def test_extract_containers_returns_sub_tables_per_block():
    """Each variable block yields its own ordered list of sub-tables."""
    html = html_page(
        question_container("AGE", "Age of respondent", "How old are you?", [["2348", "18-89"]]),
        recode_container("ID", "Respondent id number", [["2348", "1-4510"]]),
    )
    containers = extract_containers(html, "vardesc", "dflt")
    assert [len(c) for c in containers] == [4, 3]
    assert containers[0][0].rows[0][0] == "AGE"


def test_extract_containers_ignores_unmarked_tables():
    """Tables without the sub-table class and content outside blocks are skipped."""
    html = html_page(
        html_table([["navigation"]], cls="nav"),
        html_container(
            html_table([["SEX", "", "Respondents sex"]]),
            html_table([["menu"]], cls="other"),
            html_table([["2348", "1-2"]]),
            html_table([["Data type:", "numeric"]]),
        ),
    )
    containers = extract_containers(BeautifulSoup(html, "html.parser"), "vardesc", "dflt")
    assert len(containers) == 1
    assert len(containers[0]) == 3


def test_read_table_header_rows_and_colspan():
    """Leading <th> rows are header rows; colspan cells are repeated and short rows padded."""
    soup = BeautifulSoup(
        '<table class="dflt">'
        "<tr><th>%</th><th>N</th><th>Value</th></tr>"
        '<tr><td colspan="2">merged</td><td>1</td></tr>'
        "<tr><td>only</td></tr>"
        "</table>",
        "html.parser",
    )
    table = read_table(soup.find("table"))
    assert table.header_rows == 1
    assert table.header == ["%", "N", "Value"]
    assert table.body == [["merged", "merged", "1"], ["only", "", ""]]
    assert table.width == 3


def test_read_table_skips_nested_table_rows():
    """Rows of a nested table do not leak into the outer table."""
    soup = BeautifulSoup(
        '<table class="dflt"><tr><td>outer<table><tr><td>inner</td></tr></table></td></tr></table>',
        "html.parser",
    )
    table = read_table(soup.find("table"))
    assert len(table.rows) == 1


def test_raw_table_cell_out_of_range():
    table = RawTable(rows=[["a", "b"]])
    assert table.cell(0, 1) == "b"
    assert table.cell(1, 0) is None
    assert table.cell(0, 5) is None


# ===== LAYOUT TESTS =====

def test_detect_layout_four_and_three_tables():
    """Four sub-tables are a question block, three a recode block."""
    t = RawTable(rows=[["x", "y"]])
    four = detect_layout([t, t, t, t])
    three = detect_layout([t, t, t])
    assert isinstance(four, FourTable) and four.has_text
    assert isinstance(three, ThreeTable) and not three.has_text
    assert three.text is None


@pytest.mark.parametrize("count", [0, 1, 2, 5])
def test_detect_layout_rejects_other_counts(count: int):
    """Blocks with fewer than 3 or more than 4 sub-tables are malformed."""
    tables = [RawTable(rows=[["VAR", "", "label"]])] * count
    with pytest.raises(MalformedRecordError) as excinfo:
        detect_layout(tables, page=7, container_index=2)
    err = excinfo.value
    assert err.page == 7
    assert err.container_index == 2
    assert str(count) in err.reason
    assert err.record_id == ("VAR" if count else None)


# ===== ASSEMBLY TESTS =====

def test_extract_identifier_uses_third_column():
    """The middle label column is ignored."""
    table = RawTable(rows=[["RACE", "ignored", "Race of respondent"]])
    assert extract_identifier(table) == ("RACE", "Race of respondent")


def test_extract_identifier_two_columns():
    """Without a third column the description is the last column."""
    table = RawTable(rows=[["RACE", "Race of respondent"]])
    assert extract_identifier(table) == ("RACE", "Race of respondent")


def test_extract_identifier_rejects_narrow_or_blank():
    with pytest.raises(MalformedRecordError):
        extract_identifier(RawTable(rows=[["RACE"]]))
    with pytest.raises(MalformedRecordError):
        extract_identifier(RawTable(rows=[["  ", "", "label"]]))


def test_extract_text_strips_newlines():
    """Question text is the second row's first cell, trimmed, with newlines removed."""
    t = RawTable(rows=[["x", "y"]])
    text_table = RawTable(rows=[["Text of this Question or Item"], ["  Do you\n approve?\n"]])
    layout = FourTable(identifier=t, text=text_table, marginals=t, properties=t)
    assert extract_text(layout) == "Do you approve?"


def test_parse_page_removes_hard_wraps_without_spacing():
    """Line breaks inside <pre> question text are deleted, not turned into spaces."""
    html = html_page(question_container("APPROVE", "Approval", "<pre>Do you\napprove?</pre>", [["1", "0-1"]]))
    result = parse_page(html, 1)
    assert result.ok
    assert result.records[0].text == "Do youapprove?"


def test_extract_text_missing_row_is_malformed():
    t = RawTable(rows=[["x", "y"]])
    layout = FourTable(identifier=t, text=RawTable(rows=[["Text only header"]]), marginals=t, properties=t)
    with pytest.raises(MalformedRecordError):
        extract_text(layout)


def test_extract_text_three_table_is_absent():
    t = RawTable(rows=[["x", "y"]])
    assert extract_text(ThreeTable(identifier=t, marginals=t, properties=t)) is None


def test_extract_marginals_two_columns_renamed():
    """Two raw columns become cases/range, in that order, whatever the header says."""
    table = RawTable(rows=[["Cases", "Range"], ["2348", "1-3"]], header_rows=1)
    marginals, warnings = extract_marginals(table)
    assert marginals.kind == MarginalsKind.RANGE
    assert marginals.columns == ["cases", "range"]
    assert marginals.rows == [{"cases": "2348", "range": "1-3"}]
    assert warnings == []


def test_extract_marginals_wide_drops_empty_columns():
    """Wide marginals lose all-empty columns and get canonical names."""
    table = RawTable(
        rows=[
            ["% Valid", "N", "Value", "Label", "Blank"],
            ["80.5", "52,033", " 1 ", "WHITE", ""],
            ["14.2", "9,187", "2", "BLACK", " "],
        ],
        header_rows=1,
    )
    marginals, warnings = extract_marginals(table)
    assert marginals.kind == MarginalsKind.WIDE
    assert marginals.columns == ["percent_valid", "n", "value", "label"]
    assert marginals.column("value") == ["1", "2"]
    assert warnings == []
    for col in marginals.columns:
        assert any(v for v in marginals.column(col))


def test_extract_marginals_all_empty_warns():
    """A wide table with nothing in it keeps the record but carries a warning."""
    table = RawTable(rows=[["a", "b", "c"], ["", "", ""]], header_rows=1)
    marginals, warnings = extract_marginals(table)
    assert marginals.is_empty
    assert marginals.rows == []
    assert warnings == [EMPTY_MARGINALS_WARNING]


def test_extract_marginals_zero_columns_is_malformed():
    with pytest.raises(MalformedRecordError):
        extract_marginals(RawTable(rows=[]))


def test_extract_properties_strips_trailing_colon():
    table = RawTable(rows=[["Data type:", "numeric"], ["Missing-data codes :", "0,98,99"], ["", ""]])
    props = extract_properties(table)
    assert [(p.property, p.value) for p in props] == [
        ("Data type", "numeric"),
        ("Missing-data codes", "0,98,99"),
    ]


def test_extract_properties_requires_two_columns():
    with pytest.raises(MalformedRecordError):
        extract_properties(RawTable(rows=[["a", "b", "c"]]))


def test_assemble_records_locates_errors():
    """Errors raised while assembling name the page, block and id."""
    good = detect_layout([
        RawTable(rows=[["AGE", "", "Age"]]),
        RawTable(rows=[["2348", "18-89"]]),
        RawTable(rows=[["Data type:", "numeric"]]),
    ])
    bad = detect_layout([
        RawTable(rows=[["SEX", "", "Sex"]]),
        RawTable(rows=[["2348", "1-2"]]),
        RawTable(rows=[["a", "b", "c"]]),
    ])
    with pytest.raises(MalformedRecordError) as excinfo:
        assemble_records([good, bad], page=3)
    assert excinfo.value.page == 3
    assert excinfo.value.container_index == 1
    assert excinfo.value.record_id == "SEX"


# ===== PAGE TESTS =====

def test_parse_page_race_scenario(race_page: str):
    """The four-table RACE block yields the full record."""
    result = parse_page(race_page, page=12)
    assert result.ok
    assert len(result.records) == 1
    record = result.records[0]
    assert record.id == "RACE"
    assert record.description == "Race of respondent"
    assert record.text == "What race do you consider yourself?"
    assert record.marginals.columns == ["cases", "range"]
    assert record.marginals.rows == [{"cases": "2348", "range": "1-3"}]
    assert [p.model_dump() for p in record.properties] == [{"property": "Type", "value": "numeric"}]
    assert record.page == 12


def test_parse_page_wtssall_scenario(wtssall_page: str):
    """The three-table WTSSALL block has no text and loses its empty columns."""
    result = parse_page(wtssall_page, page=40)
    record = result.records[0]
    assert record.id == "WTSSALL"
    assert record.text is None
    assert record.marginals.columns == ["percent", "n", "value"]
    assert "notes" not in record.marginals.columns
    assert "label" not in record.marginals.columns
    assert record.property_value("Record/columns") == "1/455-466"
    assert all(not p.property.endswith(":") for p in record.properties)


def test_parse_page_preserves_block_order():
    html = html_page(
        question_container("B", "second letter", "b?", [["1", "1-2"]]),
        recode_container("A", "first letter", [["1", "1-2"]]),
        question_container("C", "third letter", "c?", [["1", "1-2"]]),
    )
    result = parse_page(html, page=1)
    assert [r.id for r in result.records] == ["B", "A", "C"]
    assert [r.text for r in result.records] == ["b?", None, "c?"]


def test_parse_page_malformed_block_fails_page():
    """A block with two sub-tables fails the page with a located reason."""
    html = html_page(
        question_container("AGE", "Age", "How old?", [["2348", "18-89"]]),
        html_container(html_table([["BROKEN", "", "label"]]), html_table([["1", "2"]])),
    )
    result = parse_page(html, page=9)
    assert not result.ok
    assert result.records == []
    assert result.failure.kind == FailureKind.MALFORMED
    assert result.failure.page == 9
    assert result.failure.container_index == 1
    assert result.failure.record_id == "BROKEN"


def test_parse_page_is_idempotent(race_page: str, wtssall_page: str):
    """Parsing the same document twice gives byte-identical records."""
    for html in (race_page, wtssall_page):
        first = parse_page(html, page=5)
        second = parse_page(html, page=5)
        assert first.model_dump_json() == second.model_dump_json()


def test_parse_page_without_blocks():
    result = parse_page("<html><body><p>Index</p></body></html>", page=1)
    assert result.ok
    assert result.records == []


def test_parse_page_custom_marker_classes():
    html = html_page(html_container(
        html_table([["X1", "", "custom"]], cls="t"),
        html_table([["5", "0-9"]], cls="t"),
        html_table([["Data type:", "numeric"]], cls="t"),
        cls="var",
    ))
    result = parse_page(html, page=1, container_class="var", table_class="t")
    assert [r.id for r in result.records] == ["X1"]


def test_parse_page_file(tmp_path, race_page: str):
    """Page number comes from the file name."""
    path = tmp_path / "hcbk0012.htm"
    path.write_text(race_page, encoding="utf-8")
    result = parse_page_file(path)
    assert result.page == 12
    assert result.records[0].page == 12


def test_parse_page_file_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_page_file(tmp_path / "hcbk0001.htm")


def test_page_number_from_path_requires_digits(tmp_path):
    assert page_number_from_path(tmp_path / "hcbk0261.htm") == 261
    with pytest.raises(ValueError):
        page_number_from_path(tmp_path / "index.htm")


# ===== COLUMN NORMALISATION TESTS =====

def test_normalize_column_name_rules():
    assert normalize_column_name("Value", 1) == "value"
    assert normalize_column_name("% Valid", 1) == "percent_valid"
    assert normalize_column_name(" Cells contain: ", 2) == "cells_contain"
    assert normalize_column_name("", 3) == "x3"
    assert normalize_column_name("--", 4) == "x4"


def test_deduplicate_names():
    assert deduplicate(["n", "n", "n"]) == ["n", "n_2", "n_3"]
    assert deduplicate(["a", "a_2", "a"]) == ["a", "a_2", "a_3"]


def test_normalize_grid_without_header():
    columns, rows = normalize_grid(None, [["1", "", "x"], ["2", "", ""]])
    assert columns == ["x1", "x3"]
    assert rows == [["1", "x"], ["2", ""]]
