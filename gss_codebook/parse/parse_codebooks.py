"""Main script for scraping GSS codebook pages and saving them to structured JSON."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from gss_codebook.config_loader import (
    get_pages_for_source,
    get_selectors_for_source,
    get_source_by_name,
)
from gss_codebook.errors import ConfigError
from gss_codebook.fetch.fetch_pages import fetch_pages, load_pages
from gss_codebook.models.codebook import CodebookTable, FailureKind
from gss_codebook.parse.build_table import build_codebook_table
from gss_codebook.parse.save_codebook import save_codebook_json, save_doc_fragments

_DATA_DIR = Path(__file__).parent.parent.parent / "data"


def parse_page_range(spec: Optional[str], configured: List[int]) -> List[int]:
    """Parse a --pages value like '1-10' or '3,7,12' (default: all configured pages)."""
    if not spec:
        return configured
    pages: List[int] = []
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            first, last = part.split("-", 1)
            pages.extend(range(int(first), int(last) + 1))
        else:
            pages.append(int(part))
    return pages


def run_source(
    source_name: str,
    raw_dir: Path,
    output_dir: Path,
    pages: Optional[List[int]] = None,
    fetch: bool = False,
    fragments: bool = False,
) -> CodebookTable:
    """Fetch (or load) the pages of one source, parse them and save the table."""
    source = get_source_by_name(source_name)
    selectors = get_selectors_for_source(source_name)
    if pages is None:
        pages = get_pages_for_source(source_name)

    if fetch:
        print(f"Fetching {len(pages)} page(s) for {source_name}")
        fetched = fetch_pages(source, pages, raw_dir)
    else:
        print(f"Loading {len(pages)} page(s) for {source_name} from {raw_dir / source_name}")
        fetched = load_pages(source, pages, raw_dir)

    table = build_codebook_table(source_name, fetched, **selectors)
    print(f"  Parsed {table.total_records} variables from {table.pages_parsed} page(s)")
    for record in table.records:
        for warning in record.warnings:
            print(f"  WARNING: page {record.page}, {record.id}: {warning}")
    for failure in table.failures:
        where = f" (container {failure.container_index}, id {failure.record_id})" if failure.kind == FailureKind.MALFORMED else ""
        print(f"  ERROR: page {failure.page} [{failure.kind.value}]{where}: {failure.reason}")

    out = save_codebook_json(table, output_dir)
    print(f"  Saved to: {out}")
    if fragments:
        print(f"  Saved fragments to: {save_doc_fragments(table, output_dir)}")
    return table


def main():
    """Main entry point for scraping and parsing codebooks."""
    parser = argparse.ArgumentParser(
        description="Scrape GSS codebook pages and save variables to structured JSON"
    )
    parser.add_argument(
        "--source",
        type=str,
        default="gss_cumulative",
        help="Source identifier from config/sources.yaml (e.g. gss_cumulative, gss_panel08)",
    )
    parser.add_argument(
        "--fetch",
        action="store_true",
        help="Download pages before parsing (otherwise parse pages already in --raw-dir)",
    )
    parser.add_argument(
        "--pages",
        type=str,
        help="Pages to process, e.g. '1-10' or '3,7,12' (default: all configured pages)",
    )
    parser.add_argument(
        "--raw-dir",
        type=Path,
        default=_DATA_DIR / "raw",
        help="Directory for raw HTML pages",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=_DATA_DIR / "parsed",
        help="Output directory for parsed JSON files",
    )
    parser.add_argument(
        "--fragments",
        action="store_true",
        help="Also write documentation fragments (id, description, question text)",
    )

    args = parser.parse_args()

    try:
        pages = parse_page_range(args.pages, get_pages_for_source(args.source))
        table = run_source(
            args.source,
            raw_dir=args.raw_dir,
            output_dir=args.output_dir,
            pages=pages,
            fetch=args.fetch,
            fragments=args.fragments,
        )
    except (ConfigError, ValueError) as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    if not table.records:
        print("No variables parsed!")
        sys.exit(1)
    print(f"\n[OK] Parsing complete! {table.total_records} variable(s), {len(table.failures)} failed page(s)")


if __name__ == "__main__":
    main()
