"""API response/summary models for the GSS codebook API."""

from typing import List, Optional
from pydantic import BaseModel, Field

from ...models.codebook import PageFailure, VariableRecord


class VariableSummary(BaseModel):
    """Summary of a variable for search/list results."""
    id: str
    source: str
    description: str
    page: Optional[int] = None
    has_text: bool = False


class VariableDetail(VariableRecord):
    """Full variable details (extends VariableRecord)."""
    source: str


class CodebookSummary(BaseModel):
    """Codebook table summary response."""
    source: str
    pages_parsed: int
    total_records: int
    failed_pages: List[int] = Field(default_factory=list)
    parsed_at: Optional[str] = None


class FailuresResponse(BaseModel):
    """Pages of a source that produced no records."""
    source: str
    failed_pages: List[int]
    failed_record_ids: List[str]
    failures: List[PageFailure]


class SearchResponse(BaseModel):
    """Search response model."""
    query: str
    total: int
    results: List[VariableSummary]
    limit: int


class SourceInfo(BaseModel):
    """A configured codebook source."""
    name: str
    description: str = ""
    url_pattern: str
    first_page: int
    last_page: int


class VariableWavesResponse(BaseModel):
    """Panel waves in which a variable appears."""
    base_id: str
    source: str
    waves: List[int]
    ids: List[str]
