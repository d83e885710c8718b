import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coursewatcher.config import Settings, settings as default_settings
from coursewatcher.core.exceptions import CourseWatcherError, StorageInitError
from coursewatcher.database import Store
from coursewatcher.logging import log_config
from coursewatcher.services.library import LibraryService
from coursewatcher.services.notes import NotesService
from coursewatcher.services.progress import ProgressService
from coursewatcher.services.scanner import CourseScanner

# API Routes
from coursewatcher.api import modules, videos, search, stats, scan

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_settings: Settings = app.state.settings

    # Silence Uvicorn's default access logger to reduce noise (the player reports progress every few seconds)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    log_config.setup_logging(app_settings)
    logger.info(f"Starting {app_settings.app_name} in: {app_settings.course_path}")

    # --- STORE (fatal if it cannot be opened) ---
    store = Store(app_settings)
    try:
        store.initialize()
    except StorageInitError as e:
        logger.error(e.message)
        log_config.close()
        raise

    app.state.store = store
    app.state.scanner = CourseScanner(store, app_settings)
    app.state.library = LibraryService(store)
    app.state.progress = ProgressService(store, app_settings)
    app.state.notes = NotesService(store)

    try:
        if app_settings.scan_on_startup:
            app.state.scanner.scan()

        yield
    finally:
        # --- SHUTDOWN ---
        logger.info("Shutting down...")
        store.close()
        log_config.close()


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or default_settings

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.version,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # Local only tool: the UI may be served from another port during development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CourseWatcherError)
    async def app_exception_handler(request: Request, exc: CourseWatcherError):
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"}
        )

    # --- ROUTER REGISTRATION ---
    app.include_router(modules.router, prefix="/api/modules", tags=["modules"])
    app.include_router(videos.router, prefix="/api/videos", tags=["videos"])
    app.include_router(search.router, prefix="/api/search", tags=["search"])
    app.include_router(stats.router, prefix="/api/stats", tags=["stats"])
    app.include_router(scan.router, prefix="/api/scan", tags=["scan"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": "coursewatcher"}

    return app


app = create_app()
