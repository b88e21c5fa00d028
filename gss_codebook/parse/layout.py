"""Layout variants of a variable block.

A standard question block has four sub-tables (identifier, question text,
marginals, properties). Recode and id variables have no question text and
carry three. The variant is decided once per block, from the table count.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from gss_codebook.errors import MalformedRecordError
from gss_codebook.parse.html_tables import RawTable, clean_cell


@dataclass(frozen=True)
class FourTable:
    """Question variable: [identifier, text, marginals, properties]."""
    identifier: RawTable
    text: RawTable
    marginals: RawTable
    properties: RawTable

    has_text = True


@dataclass(frozen=True)
class ThreeTable:
    """Recode/id variable: [identifier, marginals, properties]."""
    identifier: RawTable
    marginals: RawTable
    properties: RawTable

    has_text = False
    text: Optional[RawTable] = None


RecordLayout = Union[FourTable, ThreeTable]


def _peek_id(tables: Sequence[RawTable]) -> Optional[str]:
    """Best-effort identifier for error messages."""
    if not tables:
        return None
    first = tables[0].cell(0, 0)
    return clean_cell(first) or None if first is not None else None


def detect_layout(
    tables: Sequence[RawTable],
    page: Optional[int] = None,
    container_index: Optional[int] = None,
) -> RecordLayout:
    """Classify a block's sub-tables as FourTable or ThreeTable.

    Raises:
        MalformedRecordError: If the block has fewer than 3 or more than 4
            sub-tables.
    """
    if len(tables) == 3:
        return ThreeTable(identifier=tables[0], marginals=tables[1], properties=tables[2])
    if len(tables) == 4:
        return FourTable(identifier=tables[0], text=tables[1], marginals=tables[2], properties=tables[3])
    raise MalformedRecordError(
        f"expected 3 or 4 sub-tables, found {len(tables)}",
        page=page,
        container_index=container_index,
        record_id=_peek_id(tables),
    )
