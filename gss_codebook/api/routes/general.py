"""General endpoints: root, health, configured sources."""

from typing import List

from fastapi import APIRouter

from ... import __version__
from ...config_loader import get_pages_for_source, load_sources_config
from ..models import SourceInfo

router = APIRouter(tags=["General"])


@router.get("/")
async def root():
    """Root endpoint - returns API info."""
    return {
        "message": "GSS Codebook API",
        "version": __version__,
        "endpoints": {
            "sources": "/sources",
            "codebooks": "/codebooks",
            "variables": "/variables",
            "search": "/search",
        },
    }


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/sources", response_model=List[SourceInfo])
async def get_sources():
    """List the codebook sources configured in config/sources.yaml."""
    out = []
    for s in load_sources_config():
        if not s.get("name") or not s.get("url_pattern"):
            continue
        pages = get_pages_for_source(s["name"])
        out.append(SourceInfo(
            name=s["name"],
            description=s.get("description", ""),
            url_pattern=s["url_pattern"],
            first_page=pages[0],
            last_page=pages[-1],
        ))
    return out
