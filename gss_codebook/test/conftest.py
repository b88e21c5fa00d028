"""Shared builders for codebook page HTML used across tests."""

from typing import List, Optional, Sequence

import pytest


def html_table(rows: Sequence[Sequence[str]], header: Optional[Sequence[str]] = None, cls: str = "dflt") -> str:
    parts = [f'<table class="{cls}">']
    if header:
        parts.append("<tr>" + "".join(f"<th>{h}</th>" for h in header) + "</tr>")
    for row in rows:
        parts.append("<tr>" + "".join(f"<td>{c}</td>" for c in row) + "</tr>")
    parts.append("</table>")
    return "".join(parts)


def html_container(*tables: str, cls: str = "vardesc") -> str:
    return f'<div class="{cls}">' + "".join(tables) + "</div>"


def html_page(*containers: str) -> str:
    return "<html><body><h1>GSS Codebook</h1>" + "".join(containers) + "</body></html>"


def question_container(
    variable_id: str,
    description: str,
    text: str,
    marginals_rows: List[List[str]],
    marginals_header: Optional[List[str]] = None,
    properties: Optional[List[List[str]]] = None,
) -> str:
    """A standard four-table variable block."""
    return html_container(
        html_table([[variable_id, "", description]]),
        html_table([["Text of this Question or Item"], [text]]),
        html_table(marginals_rows, header=marginals_header),
        html_table(properties or [["Data type:", "numeric"]]),
    )


def recode_container(
    variable_id: str,
    description: str,
    marginals_rows: List[List[str]],
    marginals_header: Optional[List[str]] = None,
    properties: Optional[List[List[str]]] = None,
) -> str:
    """A three-table (recode/id) variable block."""
    return html_container(
        html_table([[variable_id, "", description]]),
        html_table(marginals_rows, header=marginals_header),
        html_table(properties or [["Data type:", "numeric"]]),
    )


@pytest.fixture
def race_page() -> str:
    """Page with the RACE question block."""
    return html_page(question_container(
        "RACE",
        "Race of respondent",
        "What race do you consider yourself?\n",
        [["2348", "1-3"]],
        properties=[["Type:", "numeric"]],
    ))


@pytest.fixture
def wtssall_page() -> str:
    """Page with a recode block whose marginals have an all-empty column."""
    return html_page(recode_container(
        "WTSSALL",
        "Weight variable",
        [
            ["45.2", "29,372", "0.4446", "", ""],
            ["54.8", "35,442", "0.8893", "", ""],
        ],
        marginals_header=["%", "N", "Value", "Label", "Notes"],
        properties=[["Data type:", "numeric"], ["Missing-data codes:", "0"], ["Record/columns:", "1/455-466"]],
    ))
