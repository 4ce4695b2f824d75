"""
PhimAPI Channels - FastAPI Backend

Re-shapes the PhimAPI movie catalog into the channel/source/stream playlist
schema used by the player front end.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from phimchannels.config import get_settings
from phimchannels.responses import CORS_HEADERS, PrettyJSONResponse
from phimchannels.routers import movies
from phimchannels.services.exceptions import PhimAdapterError

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info(
        f"Starting {settings.app_name} (summary_mode={settings.summary_mode.value}, "
        f"episode_policy={settings.episode_policy.value}, image_field={settings.image_field.value})"
    )
    yield
    logger.info(f"Shutting down {settings.app_name}...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="PhimAPI catalog adapter for the playlist channel schema",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_cors_header(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.app_version}


# Include routers
app.include_router(movies.router)


# Error handlers
@app.exception_handler(PhimAdapterError)
async def adapter_exception_handler(request: Request, exc: PhimAdapterError):
    """Structured JSON for upstream and input errors."""
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.message} ({exc.details})")
    return PrettyJSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return PrettyJSONResponse(
        {"error": "Lỗi nội bộ của server.", "details": str(exc)},
        status_code=500,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "phimchannels.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
