"""Variable endpoints."""

import re
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, HTTPException, Query, Path as PathParam

from .. import dependencies
from ..models import VariableSummary, VariableDetail, VariableWavesResponse
from ...database.load_codebooks import VARIABLES_COLLECTION
from ...models.codebook import construct_panel_id, split_wave_suffix

router = APIRouter(tags=["Variables"])

DEFAULT_SOURCE = "gss_cumulative"


def to_summary(var: Dict[str, Any]) -> VariableSummary:
    return VariableSummary(
        id=var["id"],
        source=var.get("source", ""),
        description=var.get("description", ""),
        page=var.get("page"),
        has_text=var.get("text") is not None,
    )


@router.get("/variables", response_model=List[VariableSummary])
async def get_variables(
    source: str = Query(DEFAULT_SOURCE, description="Source name"),
    page: Optional[int] = Query(None, description="Filter by codebook page"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of results"),
):
    """Get variables of a source in codebook order."""
    client = dependencies.get_mongodb_client()
    collection = client.get_collection(VARIABLES_COLLECTION)
    query: Dict[str, Any] = {"source": source}
    if page is not None:
        query["page"] = page
    variables = list(collection.find(query, {"_id": 0}).sort("position", 1).limit(limit))
    if not variables:
        raise HTTPException(status_code=404, detail=f"No variables found for source {source}")
    return [to_summary(var) for var in variables]


@router.get("/variables/{variable_id}", response_model=VariableDetail)
async def get_variable(
    variable_id: str = PathParam(..., description="Variable id (e.g. RACE, RACE_1)"),
    source: str = Query(DEFAULT_SOURCE, description="Source name"),
):
    """Get full details (text, marginals, properties) of one variable."""
    client = dependencies.get_mongodb_client()
    collection = client.get_collection(VARIABLES_COLLECTION)
    variable = collection.find_one({"source": source, "id": variable_id}, {"_id": 0})
    if not variable:
        raise HTTPException(status_code=404, detail=f"Variable '{variable_id}' not found in {source}")
    return VariableDetail(**variable)


@router.get("/variables/base/{base_id}", response_model=VariableWavesResponse)
async def get_variable_waves(
    base_id: str = PathParam(..., description="Base variable id without wave suffix (e.g. RACE)"),
    source: str = Query("gss_panel08", description="Panel source name"),
):
    """Get the panel waves in which a variable appears (RACE -> RACE_1, RACE_2, ...)."""
    client = dependencies.get_mongodb_client()
    collection = client.get_collection(VARIABLES_COLLECTION)
    pattern = f"^{re.escape(base_id)}_\\d+$"
    docs = list(collection.find({"source": source, "id": {"$regex": pattern}}, {"_id": 0, "id": 1}))
    waves = set()
    for doc in docs:
        base, wave = split_wave_suffix(doc["id"])
        if base == base_id and wave is not None:
            waves.add(wave)
    if not waves:
        raise HTTPException(status_code=404, detail=f"Variable with base id '{base_id}' not found in {source}")
    ordered = sorted(waves)
    return VariableWavesResponse(
        base_id=base_id,
        source=source,
        waves=ordered,
        ids=[construct_panel_id(base_id, w) for w in ordered],
    )
