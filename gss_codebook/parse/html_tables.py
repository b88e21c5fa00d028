"""Locate variable blocks in a codebook page and read their tables into string grids."""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from bs4 import BeautifulSoup, Tag

_WS_RE = re.compile(r"\s+")


def clean_cell(text: str) -> str:
    """Collapse runs of whitespace (including newlines) and trim."""
    return _WS_RE.sub(" ", text or "").strip()


@dataclass(frozen=True)
class RawTable:
    """A table as a grid of raw cell strings.

    ``rows`` holds every row in document order, padded to ``width``. The first
    ``header_rows`` rows were made entirely of ``<th>`` cells.
    """
    rows: List[List[str]]
    header_rows: int = 0

    @property
    def width(self) -> int:
        return max((len(r) for r in self.rows), default=0)

    @property
    def header(self) -> Optional[List[str]]:
        """Column labels: the last leading header row, if any."""
        if not self.header_rows:
            return None
        return self.rows[self.header_rows - 1]

    @property
    def body(self) -> List[List[str]]:
        return self.rows[self.header_rows:]

    def cell(self, row: int, col: int) -> Optional[str]:
        """Return a raw cell, or None if the position does not exist."""
        if row < 0 or col < 0 or row >= len(self.rows) or col >= len(self.rows[row]):
            return None
        return self.rows[row][col]


def _outermost(elements: Sequence[Tag]) -> List[Tag]:
    """Drop elements nested inside another element of the same list."""
    ids = {id(e) for e in elements}
    return [e for e in elements if not any(id(p) in ids for p in e.parents)]


def _span(cell: Tag) -> int:
    try:
        return max(1, int(cell.get("colspan", 1)))
    except (TypeError, ValueError):
        return 1


def read_table(table: Tag) -> RawTable:
    """Read one ``<table>`` element into a RawTable.

    Only rows belonging to this table are read (rows of nested tables are
    skipped). A cell spanning several columns is repeated in each of them.
    """
    rows: List[List[str]] = []
    header_rows = 0
    in_header = True
    for tr in table.find_all("tr"):
        if tr.find_parent("table") is not table:
            continue
        cells = tr.find_all(["td", "th"], recursive=False)
        if not cells:
            continue
        row: List[str] = []
        for cell in cells:
            row.extend([cell.get_text(" ")] * _span(cell))
        rows.append(row)
        if in_header and all(c.name == "th" for c in cells):
            header_rows += 1
        else:
            in_header = False
    width = max((len(r) for r in rows), default=0)
    padded = [r + [""] * (width - len(r)) for r in rows]
    return RawTable(rows=padded, header_rows=header_rows)


def extract_containers(
    document: Union[str, BeautifulSoup],
    container_class: str,
    table_class: str,
) -> List[List[RawTable]]:
    """Return, per variable block on the page, its ordered sub-tables.

    Args:
        document: HTML text or an already parsed BeautifulSoup tree.
        container_class: CSS class marking one variable block.
        table_class: CSS class marking a sub-table inside a block.
    """
    soup = document if isinstance(document, BeautifulSoup) else BeautifulSoup(document, "html.parser")
    containers = _outermost(soup.find_all(class_=container_class))
    out: List[List[RawTable]] = []
    for container in containers:
        tables = _outermost(container.find_all("table", class_=table_class))
        out.append([read_table(t) for t in tables])
    return out
