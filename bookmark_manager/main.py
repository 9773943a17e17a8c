"""
Bookmark Manager - FastAPI Application Entry Point

A personal bookmark manager: saved URLs organized into a folder tree,
tagged, searchable, with page metadata scraping.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import get_settings
from .database import init_db
from .exceptions import register_exception_handlers
from .routers import bookmarks, folders, tags

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Startup: Initialize database
    init_db()
    logger.info("Bookmark Manager %s started", __version__)
    yield


app = FastAPI(
    title="Bookmark Manager",
    description="Bookmarks organized in folders and tags, with search",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
register_exception_handlers(app)


@app.get("/")
async def root():
    """Root endpoint returning API information."""
    return {
        "name": "Bookmark Manager",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "bookmarks": "/api/bookmarks",
            "folders": "/api/folders",
            "tags": "/api/tags",
            "health": "/health",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Register routers
app.include_router(bookmarks.router)
app.include_router(folders.router)
app.include_router(tags.router)
