"""FastAPI application for querying parsed GSS codebook tables."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from .dependencies import close_mongodb_client
from .routes import (
    general_router,
    codebooks_router,
    variables_router,
    search_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_mongodb_client()


app = FastAPI(
    title="GSS Codebook API",
    description="API for querying variables parsed from GSS codebook pages",
    version=__version__,
    lifespan=lifespan,
)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(general_router)
app.include_router(codebooks_router)
app.include_router(variables_router)
app.include_router(search_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
