"""Codebook page parsing: page parser, record assembler, table builder and writer."""

from .build_table import build_codebook_table, combine_results, parse_pages
from .parse_gss_page import parse_page, parse_page_file

__all__ = [
    "build_codebook_table",
    "combine_results",
    "parse_page",
    "parse_page_file",
    "parse_pages",
]
