"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from datetime import datetime
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from migration_console.api.endpoints.documents import documents_api
from migration_console.api.endpoints.policies import policies_api
from migration_console.error_handler import ConsoleError, ErrorHandler
from migration_console.utils.config_loader import ConsoleConfig, load_console_config

# Setup logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

SERVICE_NAME = "Migration Console API"
SERVICE_VERSION = "1.0.0"

error_handler = ErrorHandler()


def create_app(config: Optional[ConsoleConfig] = None) -> FastAPI:
    """Build the app around one config object shared by every request."""
    config = config or load_console_config()
    logging.getLogger("migration_console").setLevel(config.log_level)

    app = FastAPI(
        title=SERVICE_NAME,
        description="Catalyst policy, document and download proxy for the System 6 migration console",
        version=SERVICE_VERSION,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    app.include_router(documents_api, prefix="/api/policies")
    app.include_router(policies_api, prefix="/api/policies")

    @app.exception_handler(ConsoleError)
    async def console_error_handler(request: Request, exc: ConsoleError):
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s (upstream status=%s)", request.method, request.url.path, exc, exc.status)
        return JSONResponse(exc.envelope(), status_code=exc.status_code)

    @app.exception_handler(httpx.RequestError)
    async def upstream_transport_error_handler(request: Request, exc: httpx.RequestError):
        logger.error("Upstream request error on %s: %r", request.url.path, exc)
        message = str(exc) or "Unexpected error while calling UAT policy APIs."
        return JSONResponse({"error": message}, status_code=500)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        return JSONResponse(error_handler.handle_exception(exc, {"path": request.url.path}), status_code=500)

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"service": SERVICE_NAME, "status": "healthy", "version": SERVICE_VERSION, "timestamp": datetime.now().isoformat()}

    return app


app = create_app()
