"""
FastAPI server for Country Cache.

Country metadata and exchange rates merged into a local store, with a summary image.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from country_cache.api import api_router
from country_cache.config import Config
from country_cache.database.engine import close_db, init_db, safe_url
from country_cache.logger import get_logger

# Setup logging
logger = get_logger(__name__, log_dir=Config.LOGS_DIR)

tags_metadata = [
    {
        "name": "Countries",
        "description": "Refresh from upstream sources, list, look up and delete countries, summary image",
    },
    {
        "name": "Status",
        "description": "Total countries and last refresh timestamp",
    },
    {
        "name": "System",
        "description": "API health checks",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app."""
    logger.info("🚀 Starting Country Cache API...")
    logger.info(f"Database: {safe_url(Config.DATABASE_URL)}")
    Config.ensure_directories()
    await init_db()

    yield

    logger.info("👋 Shutting down Country Cache API...")
    await close_db()


app = FastAPI(
    title="Country Cache API",
    description="Country data with currency exchange rates and estimated GDP.\n\n"
                "**Features:**\n"
                "- Refresh from the countries and exchange rates sources\n"
                "- Filter by region and currency, sort by GDP or name\n"
                "- Summary image of the top countries by estimated GDP",
    version="1.0.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        details.setdefault(field or "request", []).append(error.get("msg", "Invalid value"))
    return JSONResponse(status_code=400, content={"error": "Validation failed", "details": details})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "country_cache.main:app",
        host=Config.API_HOST,
        port=Config.API_PORT,
        reload=False,
        log_level="info",
    )
