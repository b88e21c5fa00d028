"""API route modules."""

from .general import router as general_router
from .codebooks import router as codebooks_router
from .variables import router as variables_router
from .search import router as search_router

__all__ = [
    "general_router",
    "codebooks_router",
    "variables_router",
    "search_router",
]
