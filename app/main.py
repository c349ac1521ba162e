"""
Sandbox server emulating the remote api.php landmark endpoint.

Used for local development (``python run.py serve``) and by the end-to-end
tests, which talk to it in-process through ``httpx.ASGITransport``.
"""

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from app.config.settings import Settings, get_settings
from app.core.error_handlers import error_handler, setup_error_handlers
from app.services.landmark_store import UPLOAD_URL_PREFIX, LandmarkStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[LandmarkStore] = None) -> FastAPI:
    """
    Create and configure the sandbox application.

    Args:
        settings: Settings to use; the global settings when omitted
        store: Pre-built store, e.g. one rooted in a test's tmp_path

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()
    upload_dir = Path(store.upload_dir if store else settings.sandbox.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)

    if store is None:
        store = LandmarkStore(upload_dir)
        if settings.sandbox.seed_sample_data:
            store.seed_samples()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.app_name} sandbox v{settings.app_version}")
        yield
        logger.info("Sandbox shutdown complete")

    app = FastAPI(
        title=f"{settings.app_name} Sandbox",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.store = store

    setup_error_handlers(app)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log requests and responses with timing information."""
        request_id = str(uuid.uuid4())
        start_time = time.time()

        response = await call_next(request)

        processing_time = (time.time() - start_time) * 1000
        logger.info(
            f"Request {request_id}: {request.method} {request.url.path} -> {response.status_code} ({processing_time:.2f}ms)",
            extra={
                'request_id': request_id,
                'status_code': response.status_code,
                'processing_time_ms': processing_time
            }
        )
        return response

    from app.api import landmark_router
    app.include_router(landmark_router)
    app.mount(f"/{UPLOAD_URL_PREFIX}", StaticFiles(directory=str(upload_dir)), name=UPLOAD_URL_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"Welcome to {settings.app_name} sandbox",
            "version": settings.app_version,
            "status": "running",
            "landmarks": len(store.list_records()),
            "errors": error_handler.get_error_statistics(),
        }

    return app
