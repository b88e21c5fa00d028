"""Save parsed codebook tables to structured JSON files and documentation fragments."""

import json
from pathlib import Path
from typing import Iterable, List

from gss_codebook.models.codebook import CodebookTable, VariableRecord

ABSENT_TEXT = "None"
TABLE_FILE = "gss_doc.json"
INDEX_FILE = "variables_index.json"
FAILURES_FILE = "failures.json"
FRAGMENTS_FILE = "gss_doc_fragments.R"


def _dump(data, path: Path, pretty: bool) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(
            data,
            f,
            indent=2 if pretty else None,
            ensure_ascii=False,
            default=str,  # Handle datetime and enum serialization
        )


def save_codebook_json(
    table: CodebookTable,
    output_dir: Path,
    pretty: bool = True,
) -> Path:
    """Save a codebook table to a structured JSON file.

    Writes, under output_dir/<source>/:
    - gss_doc.json: the full table (records and failures)
    - variables_index.json: id, description and page per variable
    - failures.json: pages that produced no records

    Args:
        table: Parsed CodebookTable
        output_dir: Base output directory
        pretty: Whether to format JSON with indentation

    Returns:
        Path to the saved table file
    """
    output_path = output_dir / table.source
    output_path.mkdir(parents=True, exist_ok=True)

    table_file = output_path / TABLE_FILE
    _dump(table.model_dump(mode="json"), table_file, pretty)

    variables_index = {
        "source": table.source,
        "total_records": table.total_records,
        "variables": [
            {
                "id": r.id,
                "description": r.description,
                "page": r.page,
                "has_text": r.text is not None,
            }
            for r in table.records
        ],
    }
    _dump(variables_index, output_path / INDEX_FILE, pretty)

    failures = {
        "source": table.source,
        "failed_pages": table.failed_pages,
        "failed_record_ids": table.failed_record_ids,
        "failures": [f.model_dump(mode="json") for f in table.failures],
    }
    _dump(failures, output_path / FAILURES_FILE, pretty)

    return table_file


def load_codebook_json(table_file: Path) -> CodebookTable:
    """Read a table written by save_codebook_json."""
    if not table_file.exists():
        raise FileNotFoundError(f"Codebook table not found: {table_file}")
    with open(table_file, "r", encoding="utf-8") as f:
        return CodebookTable.model_validate(json.load(f))


def _escape_rd(text: str) -> str:
    # Rd treats % as a comment start and backslash as an escape.
    return text.replace("\\", "\\\\").replace("%", "\\%")


def render_doc_fragment(record: VariableRecord) -> str:
    """Render one roxygen documentation block for a variable.

    Absent question text is written as the literal "None".
    """
    text = record.text if record.text is not None else ABSENT_TEXT
    lines = [
        f"#' @section {_escape_rd(record.id)}:",
        f"#' {_escape_rd(record.description)}",
        "#'",
        f"#' Question: {_escape_rd(text)}",
        "#'",
    ]
    return "\n".join(lines)


def render_doc_fragments(records: Iterable[VariableRecord]) -> str:
    blocks: List[str] = [render_doc_fragment(r) for r in records]
    return "\n".join(blocks) + ("\n" if blocks else "")


def save_doc_fragments(table: CodebookTable, output_dir: Path) -> Path:
    """Write the documentation fragments of a table to output_dir/<source>/."""
    output_path = output_dir / table.source
    output_path.mkdir(parents=True, exist_ok=True)
    fragments_file = output_path / FRAGMENTS_FILE
    fragments_file.write_text(render_doc_fragments(table.records), encoding="utf-8")
    return fragments_file
