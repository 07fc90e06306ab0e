"""
FastAPI Production Application

Main entry point for the Syntera CRM API. Opens the database pool for the
lifetime of the process and, when ``STATIC_DIR`` points at a built browser
client, serves it with a single-page-app fallback.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
import structlog

from syntera.config import get_settings
from syntera.config.logging import configure_logging
from syntera.database.connection import init_database, close_database
from syntera.serving.api import create_api_app

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()

    logger.info("Starting Syntera CRM API", environment=settings.app_env)
    await init_database()

    yield

    logger.info("Shutting down...")
    await close_database()


def mount_frontend(app: FastAPI, frontend_path: Path) -> None:
    """Serve the built client; unknown non-API paths get index.html."""
    assets_path = frontend_path / "assets"
    if assets_path.exists():
        app.mount("/assets", StaticFiles(directory=assets_path), name="assets")

    index_file = frontend_path / "index.html"

    @app.get("/", include_in_schema=False)
    async def serve_frontend():
        return FileResponse(index_file)

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_spa(full_path: str):
        if full_path.startswith("api"):
            raise HTTPException(status_code=404)
        candidate = (frontend_path / full_path).resolve()
        if candidate.is_file() and frontend_path.resolve() in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(index_file)


app = create_api_app(lifespan=lifespan)

if settings.frontend.static_dir:
    frontend_dir = Path(settings.frontend.static_dir)
    if (frontend_dir / "index.html").exists():
        mount_frontend(app, frontend_dir)
    else:
        logger.warning("Static client directory has no index.html", static_dir=str(frontend_dir))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
