"""Combine per-page parse results into one CodebookTable."""

from datetime import datetime
from typing import Iterable, List, Optional

from gss_codebook.config_loader import DEFAULT_CONTAINER_CLASS, DEFAULT_TABLE_CLASS
from gss_codebook.fetch.fetch_pages import FetchedPage
from gss_codebook.models.codebook import (
    CodebookTable,
    FailureKind,
    PageFailure,
    PageResult,
    VariableRecord,
)
from gss_codebook.parse.parse_gss_page import parse_page


def parse_pages(
    fetched: Iterable[Optional[FetchedPage]],
    container_class: str = DEFAULT_CONTAINER_CLASS,
    table_class: str = DEFAULT_TABLE_CLASS,
) -> List[PageResult]:
    """Parse every fetched page, in input order.

    None entries are skipped. Failed fetches become failed PageResults without
    reaching the parser.
    """
    results: List[PageResult] = []
    for handle in fetched:
        if handle is None:
            continue
        if not handle.ok:
            results.append(PageResult(
                page=handle.page,
                failure=PageFailure(
                    page=handle.page,
                    kind=FailureKind.FETCH,
                    reason=handle.error or "no content",
                ),
            ))
            continue
        results.append(parse_page(
            handle.html,
            handle.page,
            container_class=container_class,
            table_class=table_class,
        ))
    return results


def combine_results(source: str, results: Iterable[PageResult]) -> CodebookTable:
    """Concatenate records of successful pages in order; collect the failures."""
    records: List[VariableRecord] = []
    failures: List[PageFailure] = []
    pages_parsed = 0
    for result in results:
        if result.ok:
            pages_parsed += 1
            records.extend(result.records)
        else:
            failures.append(result.failure)
    return CodebookTable(
        source=source,
        records=records,
        failures=failures,
        pages_parsed=pages_parsed,
        total_records=len(records),
        parsed_at=datetime.now(),
    )


def build_codebook_table(
    source: str,
    fetched: Iterable[Optional[FetchedPage]],
    container_class: str = DEFAULT_CONTAINER_CLASS,
    table_class: str = DEFAULT_TABLE_CLASS,
) -> CodebookTable:
    """Parse all fetched pages of a source and build its table."""
    results = parse_pages(fetched, container_class=container_class, table_class=table_class)
    return combine_results(source, results)
