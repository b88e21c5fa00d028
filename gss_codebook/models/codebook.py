"""Pydantic models for parsed GSS codebook pages.

A codebook page holds one block per survey variable. Each block becomes a
VariableRecord; the records of all pages are concatenated, in page order,
into a CodebookTable.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

# Panel codebooks suffix the wave number: RACE_1, RACE_2, RACE_3
_WAVE_SUFFIX_RE = re.compile(r"^(?P<base>.+?)_(?P<wave>\d{1,2})$")


def split_wave_suffix(variable_id: str) -> Tuple[str, Optional[int]]:
    """Split a panel variable id into (base id, wave).

    Examples:
        RACE_1 -> ("RACE", 1)
        RACE   -> ("RACE", None)
    """
    m = _WAVE_SUFFIX_RE.match(variable_id)
    if not m:
        return variable_id, None
    return m.group("base"), int(m.group("wave"))


def construct_panel_id(base_id: str, wave: int) -> str:
    """Construct the id used for a variable in a given panel wave."""
    return f"{base_id}_{wave}"


class MarginalsKind(str, Enum):
    """Shape of a marginals table."""
    RANGE = "range"
    WIDE = "wide"


class FailureKind(str, Enum):
    """Why a page produced no records."""
    FETCH = "fetch"
    MALFORMED = "malformed"


class VariableProperty(BaseModel):
    """One metadata row of a variable (e.g. Type: numeric)."""
    property: str = Field(..., description="Property name without trailing colon")
    value: str = Field("", description="Property value")

    class Config:
        frozen = True
        json_schema_extra = {"example": {"property": "Data type", "value": "numeric"}}


class Marginals(BaseModel):
    """Distribution of responses for one variable.

    Range form has exactly the columns ``cases`` and ``range``; wide form has
    one row per response category with a page-dependent column set.
    """
    kind: MarginalsKind = Field(..., description="range (cases/range) or wide (one row per category)")
    columns: List[str] = Field(default_factory=list, description="Column names in display order")
    rows: List[Dict[str, str]] = Field(default_factory=list, description="Rows keyed by column name")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "kind": "wide",
                "columns": ["percent", "n", "value", "label"],
                "rows": [
                    {"percent": "80.5", "n": "52,033", "value": "1", "label": "WHITE"},
                    {"percent": "14.2", "n": "9,187", "value": "2", "label": "BLACK"},
                ],
            }
        }

    @property
    def is_empty(self) -> bool:
        return not self.columns

    def column(self, name: str) -> List[str]:
        """Return the values of one column, in row order."""
        return [row.get(name, "") for row in self.rows]


class VariableRecord(BaseModel):
    """One survey variable parsed from a codebook page."""
    id: str = Field(..., min_length=1, description="Variable identifier (e.g. 'RACE', 'RACE_1')")
    description: str = Field("", description="Short variable label")
    text: Optional[str] = Field(None, description="Question wording; None for recode/id variables")
    properties: List[VariableProperty] = Field(default_factory=list, description="Metadata rows")
    marginals: Marginals = Field(..., description="Response marginals")
    page: Optional[int] = Field(None, description="Codebook page the variable was read from")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal parse warnings")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "RACE",
                "description": "Race of respondent",
                "text": "What race do you consider yourself?",
                "properties": [{"property": "Data type", "value": "numeric"}],
                "marginals": {"kind": "range", "columns": ["cases", "range"], "rows": [{"cases": "2348", "range": "1-3"}]},
                "page": 12,
                "warnings": [],
            }
        }

    def property_value(self, name: str) -> Optional[str]:
        """Return the value of the first property with this name, if any."""
        for p in self.properties:
            if p.property == name:
                return p.value
        return None


class PageFailure(BaseModel):
    """A page that produced no records, with enough context to find the problem."""
    page: int = Field(..., description="Page number")
    kind: FailureKind = Field(..., description="fetch or malformed")
    reason: str = Field(..., description="Human-readable reason")
    container_index: Optional[int] = Field(None, description="Index of the offending variable block on the page")
    record_id: Optional[str] = Field(None, description="Identifier of the offending variable, when readable")

    class Config:
        frozen = True


class PageResult(BaseModel):
    """Outcome of parsing one page: records on success, a failure otherwise."""
    page: int
    records: List[VariableRecord] = Field(default_factory=list)
    failure: Optional[PageFailure] = None

    class Config:
        frozen = True

    @property
    def ok(self) -> bool:
        return self.failure is None


class CodebookTable(BaseModel):
    """All variables of one codebook source, in page order."""
    source: str = Field(..., description="Source identifier (e.g. 'gss_cumulative')")
    records: List[VariableRecord] = Field(default_factory=list, description="Variables from successful pages")
    failures: List[PageFailure] = Field(default_factory=list, description="Pages that produced no records")
    pages_parsed: int = Field(0, description="Number of pages parsed successfully")
    total_records: int = Field(0, description="Number of variables")
    parsed_at: datetime = Field(default_factory=datetime.now, description="When the table was built")

    class Config:
        json_schema_extra = {
            "example": {
                "source": "gss_cumulative",
                "pages_parsed": 258,
                "total_records": 6108,
                "failures": [{"page": 17, "kind": "fetch", "reason": "HTTP 503"}],
            }
        }

    @property
    def failed_pages(self) -> List[int]:
        return [f.page for f in self.failures]

    @property
    def failed_record_ids(self) -> List[str]:
        return [f.record_id for f in self.failures if f.record_id]

    def get(self, variable_id: str) -> Optional[VariableRecord]:
        """Return the first record with this id, if any."""
        return next((r for r in self.records if r.id == variable_id), None)
