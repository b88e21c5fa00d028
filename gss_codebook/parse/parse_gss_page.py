"""Parse one GSS codebook page (SDA HTML) into VariableRecords."""

from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup

from gss_codebook.config_loader import DEFAULT_CONTAINER_CLASS, DEFAULT_TABLE_CLASS
from gss_codebook.errors import MalformedRecordError
from gss_codebook.models.codebook import FailureKind, PageFailure, PageResult
from gss_codebook.parse.assemble import assemble_records
from gss_codebook.parse.html_tables import extract_containers
from gss_codebook.parse.layout import detect_layout


def parse_page(
    document: Union[str, BeautifulSoup],
    page: int,
    container_class: str = DEFAULT_CONTAINER_CLASS,
    table_class: str = DEFAULT_TABLE_CLASS,
) -> PageResult:
    """Parse one codebook page.

    A malformed variable block fails the whole page: the result carries a
    PageFailure naming the block instead of partial records. Parsing the same
    document twice gives identical records.

    Args:
        document: Page HTML or a parsed BeautifulSoup tree.
        page: Page number, used to locate errors and stamped on records.
        container_class: CSS class of a variable block.
        table_class: CSS class of a sub-table inside a block.
    """
    containers = extract_containers(document, container_class, table_class)
    try:
        layouts = [detect_layout(tables, page, index) for index, tables in enumerate(containers)]
        records = assemble_records(layouts, page=page)
    except MalformedRecordError as e:
        return PageResult(
            page=page,
            failure=PageFailure(
                page=page,
                kind=FailureKind.MALFORMED,
                reason=e.reason,
                container_index=e.container_index,
                record_id=e.record_id,
            ),
        )
    return PageResult(page=page, records=records)


def parse_page_file(
    html_path: Path,
    page: Optional[int] = None,
    container_class: str = DEFAULT_CONTAINER_CLASS,
    table_class: str = DEFAULT_TABLE_CLASS,
) -> PageResult:
    """Parse a saved page file (e.g. hcbk0012.htm).

    The page number is taken from the file name when not given.
    """
    if not html_path.exists():
        raise FileNotFoundError(f"Codebook page not found: {html_path}")
    if page is None:
        page = page_number_from_path(html_path)
    content = html_path.read_text(encoding="utf-8", errors="ignore")
    return parse_page(content, page, container_class=container_class, table_class=table_class)


def page_number_from_path(path: Path) -> int:
    """Extract the page number from a file name like hcbk0012.htm -> 12."""
    digits = "".join(ch for ch in path.stem if ch.isdigit())
    if not digits:
        raise ValueError(f"Cannot determine page number from path: {path}")
    return int(digits)


if __name__ == "__main__":
    import sys
    if len(sys.argv) > 1:
        result = parse_page_file(Path(sys.argv[1]))
        if result.ok:
            for record in result.records:
                print(f"{record.id:<16} {record.description}")
        else:
            print(f"ERROR: {result.failure.reason}")
