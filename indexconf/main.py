"""FastAPI app entry: config, logging, health, and index option endpoints."""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from indexconf.config.logging import configure_logging, get_logger
from indexconf.config.settings import get_settings
from indexconf.controllers.routes.index import router as index_options_router
from indexconf.resources.storage.directories import get_directories, reset_directories

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: config, logging, and data directories. Shutdown: drop the shared directories."""
    settings = get_settings()
    configure_logging()
    logger.info("Application starting", extra={"app_name": settings.app_name, "environment": settings.environment})
    get_directories()
    yield
    logger.info("Application shutting down")
    reset_directories()
    logger.info("Shutdown complete")


app = FastAPI(
    title="Index Options Service",
    description="Validate and resolve search index options before an index is built",
    version="1.0.0",
    lifespan=lifespan,
)
app.include_router(index_options_router)


@app.get("/health")
async def health() -> dict[str, Any]:
    """Liveness: service is up."""
    return {"status": "ok"}


@app.exception_handler(Exception)
async def global_exception_handler(_request: Request, exc: Exception):
    """Centralized error handling: never leak stack traces or internal details to the client."""
    logger.exception("Unhandled error", extra={"error_type": type(exc).__name__})
    return JSONResponse(
        content={"detail": "An internal error occurred."},
        status_code=500,
    )


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "indexconf.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
