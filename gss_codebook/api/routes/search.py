"""Search endpoints."""

import re
from typing import Any, Dict, Optional
from fastapi import APIRouter, Query

from .. import dependencies
from ..models import SearchResponse
from ...database.load_codebooks import VARIABLES_COLLECTION
from .variables import to_summary

router = APIRouter(tags=["Search"])


@router.get("/search", response_model=SearchResponse)
async def search_variables(
    q: str = Query(..., min_length=1, description="Search query (variable ids, descriptions and question text)"),
    source: Optional[str] = Query(None, description="Filter by source"),
    limit: int = Query(50, ge=1, le=500, description="Maximum number of results"),
):
    """Search for variables by id, description or question text (case-insensitive)."""
    client = dependencies.get_mongodb_client()
    collection = client.get_collection(VARIABLES_COLLECTION)
    pattern = {"$regex": re.escape(q), "$options": "i"}
    query: Dict[str, Any] = {"$or": [{"id": pattern}, {"description": pattern}, {"text": pattern}]}
    if source:
        query["source"] = source
    total = collection.count_documents(query)
    docs = list(collection.find(query, {"_id": 0}).sort([("source", 1), ("position", 1)]).limit(limit))
    return SearchResponse(query=q, total=total, results=[to_summary(d) for d in docs], limit=limit)
