"""Turn the sub-tables of each variable block into VariableRecords."""

import re
from typing import Dict, List, Optional, Sequence, Tuple

from gss_codebook.errors import MalformedRecordError
from gss_codebook.models.codebook import (
    Marginals,
    MarginalsKind,
    VariableProperty,
    VariableRecord,
)
from gss_codebook.parse.columns import normalize_grid
from gss_codebook.parse.html_tables import RawTable, clean_cell
from gss_codebook.parse.layout import RecordLayout

RANGE_COLUMNS = ["cases", "range"]
EMPTY_MARGINALS_WARNING = "EmptyMarginals: no non-empty columns in marginals table"

_NEWLINES_RE = re.compile(r"[\r\n]+")
_TRAILING_COLON_RE = re.compile(r"\s*:+\s*$")


def extract_identifier(table: RawTable) -> Tuple[str, str]:
    """Return (id, description) from the identifier table.

    The id is the first cell of the first row. The description is the third
    cell when the table has one (the middle column is a label that is
    ignored), otherwise the last cell.
    """
    if not table.rows or table.width < 2:
        raise MalformedRecordError(
            f"identifier table needs at least 2 columns, found {table.width}"
        )
    row = table.rows[0]
    variable_id = clean_cell(row[0])
    if not variable_id:
        raise MalformedRecordError("identifier table has an empty variable id")
    description = clean_cell(row[2] if len(row) > 2 else row[-1])
    return variable_id, description


def extract_text(layout: RecordLayout) -> Optional[str]:
    """Question wording: second row, first column of the text table, newlines removed."""
    if not layout.has_text:
        return None
    raw = layout.text.cell(1, 0)
    if raw is None:
        raise MalformedRecordError("question text table has no second row")
    return _NEWLINES_RE.sub("", raw).strip()


def _value_as_string(value) -> str:
    # Value codes mix numeric-looking and text codes; keep them all as str.
    return clean_cell(str(value))


def extract_marginals(table: RawTable) -> Tuple[Marginals, List[str]]:
    """Normalise a marginals table.

    Returns:
        (marginals, warnings). Warnings is non-empty when no usable column
        survives dropping the empty ones.
    """
    if table.width == 0:
        raise MalformedRecordError("marginals table has no columns")
    body = [[clean_cell(c) for c in row] for row in table.body]

    if table.width == 2:
        rows = [dict(zip(RANGE_COLUMNS, row)) for row in body]
        return Marginals(kind=MarginalsKind.RANGE, columns=list(RANGE_COLUMNS), rows=rows), []

    header = [clean_cell(c) for c in table.header] if table.header else None
    columns, grid = normalize_grid(header, body)
    rows = [dict(zip(columns, row)) for row in grid]
    if "value" in columns:
        for row in rows:
            row["value"] = _value_as_string(row["value"])

    warnings: List[str] = []
    if not columns:
        warnings.append(EMPTY_MARGINALS_WARNING)
        rows = []
    return Marginals(kind=MarginalsKind.WIDE, columns=columns, rows=rows), warnings


def extract_properties(table: RawTable) -> List[VariableProperty]:
    """Read the (property, value) table; trailing colons are stripped from names."""
    if table.width != 2:
        raise MalformedRecordError(
            f"properties table needs exactly 2 columns, found {table.width}"
        )
    properties = []
    for row in table.rows:
        name, value = clean_cell(row[0]), clean_cell(row[1])
        if not name and not value:
            continue
        properties.append(VariableProperty(property=_TRAILING_COLON_RE.sub("", name), value=value))
    return properties


def assemble_records(
    layouts: Sequence[RecordLayout],
    page: Optional[int] = None,
) -> List[VariableRecord]:
    """Build one VariableRecord per block, in block order.

    Identifiers and texts are read as two parallel lists and joined on id
    (left join from identifiers; a missing text stays None). Marginals and
    properties are paired with their block by position.

    Raises:
        MalformedRecordError: Located at the page and block index at fault.
    """
    identifiers: List[Tuple[str, str]] = []
    for index, layout in enumerate(layouts):
        try:
            identifiers.append(extract_identifier(layout.identifier))
        except MalformedRecordError as e:
            raise e.locate(page=page, container_index=index)

    texts: List[Tuple[str, Optional[str]]] = []
    for index, layout in enumerate(layouts):
        variable_id = identifiers[index][0]
        try:
            texts.append((variable_id, extract_text(layout)))
        except MalformedRecordError as e:
            raise e.locate(page=page, container_index=index, record_id=variable_id)

    text_by_id: Dict[str, Optional[str]] = {}
    for variable_id, text in texts:
        text_by_id.setdefault(variable_id, text)

    records: List[VariableRecord] = []
    for index, (layout, (variable_id, description)) in enumerate(zip(layouts, identifiers)):
        try:
            marginals, warnings = extract_marginals(layout.marginals)
            properties = extract_properties(layout.properties)
        except MalformedRecordError as e:
            raise e.locate(page=page, container_index=index, record_id=variable_id)
        records.append(VariableRecord(
            id=variable_id,
            description=description,
            text=text_by_id.get(variable_id),
            properties=properties,
            marginals=marginals,
            page=page,
            warnings=warnings,
        ))
    return records
