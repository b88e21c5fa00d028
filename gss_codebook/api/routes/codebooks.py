"""Codebook endpoints."""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, HTTPException, Query, Path as PathParam

from .. import dependencies
from ..models import CodebookSummary, FailuresResponse
from ...database.load_codebooks import CODEBOOKS_COLLECTION

router = APIRouter(tags=["Codebooks"])


def _summary(cb: Dict[str, Any]) -> CodebookSummary:
    return CodebookSummary(
        source=cb["source"],
        pages_parsed=cb.get("pages_parsed", 0),
        total_records=cb.get("total_records", 0),
        failed_pages=[f["page"] for f in cb.get("failures", [])],
        parsed_at=str(cb["parsed_at"]) if cb.get("parsed_at") else None,
    )


@router.get("/codebooks", response_model=List[CodebookSummary])
async def get_codebooks(
    source: Optional[str] = Query(None, description="Filter by source (e.g., gss_cumulative)"),
):
    """Get list of loaded codebook tables."""
    client = dependencies.get_mongodb_client()
    collection = client.get_collection(CODEBOOKS_COLLECTION)
    query: Dict[str, Any] = {}
    if source:
        query["source"] = source
    codebooks = list(collection.find(query, {"_id": 0}))
    if not codebooks:
        raise HTTPException(status_code=404, detail="No codebooks found")
    return [_summary(cb) for cb in codebooks]


@router.get("/codebooks/{source}", response_model=CodebookSummary)
async def get_codebook(
    source: str = PathParam(..., description="Source name"),
):
    """Get one codebook table summary."""
    client = dependencies.get_mongodb_client()
    codebook = client.get_collection(CODEBOOKS_COLLECTION).find_one({"source": source}, {"_id": 0})
    if not codebook:
        raise HTTPException(status_code=404, detail=f"Codebook not found for source {source}")
    return _summary(codebook)


@router.get("/codebooks/{source}/failures", response_model=FailuresResponse)
async def get_codebook_failures(
    source: str = PathParam(..., description="Source name"),
):
    """Pages of a source that failed to fetch or parse."""
    client = dependencies.get_mongodb_client()
    codebook = client.get_collection(CODEBOOKS_COLLECTION).find_one({"source": source}, {"_id": 0})
    if not codebook:
        raise HTTPException(status_code=404, detail=f"Codebook not found for source {source}")
    failures = codebook.get("failures", [])
    return FailuresResponse(
        source=source,
        failed_pages=[f["page"] for f in failures],
        failed_record_ids=[f["record_id"] for f in failures if f.get("record_id")],
        failures=failures,
    )
