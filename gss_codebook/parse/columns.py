"""Column-name normalisation for marginals grids.

Pure functions over lists of string cells. Rules:

- a column is empty when every body cell in it is blank after trimming;
- ``%`` and ``#`` are spelled out as ``percent`` and ``number``;
- names are lower-cased, runs of non-alphanumerics become ``_`` and
  leading/trailing underscores are dropped (``% Valid`` -> ``percent_valid``);
- a blank name becomes ``x<position>`` (1-based, as in the raw table);
- repeated names get ``_2``, ``_3`` ... in order of appearance.
"""

import re
from typing import List, Optional, Sequence, Tuple

_NON_ALNUM_RE = re.compile(r"[^0-9a-z]+")
_SYMBOL_WORDS = {"%": " percent ", "#": " number "}


def normalize_column_name(name: str, position: int) -> str:
    """Canonical lower-case/underscore form of one header cell."""
    spelled = (name or "").strip().lower()
    for symbol, word in _SYMBOL_WORDS.items():
        spelled = spelled.replace(symbol, word)
    canonical = _NON_ALNUM_RE.sub("_", spelled).strip("_")
    return canonical or f"x{position}"


def deduplicate(names: Sequence[str]) -> List[str]:
    used = set()
    out = []
    for name in names:
        candidate, n = name, 1
        while candidate in used:
            n += 1
            candidate = f"{name}_{n}"
        used.add(candidate)
        out.append(candidate)
    return out


def nonempty_columns(body: Sequence[Sequence[str]], width: int) -> List[int]:
    """Indexes of columns with at least one non-blank body cell."""
    keep = []
    for col in range(width):
        if any(col < len(row) and (row[col] or "").strip() for row in body):
            keep.append(col)
    return keep


def normalize_grid(
    header: Optional[Sequence[str]],
    body: Sequence[Sequence[str]],
) -> Tuple[List[str], List[List[str]]]:
    """Drop all-empty columns and normalise the remaining column names.

    Args:
        header: Raw header labels, or None when the table has no header row.
        body: Raw body rows (already whitespace-cleaned).

    Returns:
        (columns, rows) where every row has one cell per column.
    """
    width = max([len(header or [])] + [len(r) for r in body])
    keep = nonempty_columns(body, width)
    labels = list(header or [])
    names = deduplicate([
        normalize_column_name(labels[i] if i < len(labels) else "", i + 1)
        for i in keep
    ])
    rows = [[row[i] if i < len(row) else "" for i in keep] for row in body]
    return names, rows
