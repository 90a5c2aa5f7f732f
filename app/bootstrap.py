import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware

from app.core.config import Settings, get_settings
from app.core.logging import setup_logging
from app.core.middleware import (
    CookiePolicyMiddleware,
    HSTSMiddleware,
    RequestLoggingMiddleware,
)
from app.api.home import error_payload
from app.api.router import api_router

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    settings = app_settings or get_settings()
    setup_logging(settings.log_level)

    # development: debug=True gives the detailed traceback page
    app = FastAPI(title=settings.app_name, debug=settings.is_development)
    app.state.settings = settings

    # -------------------------
    # Error handling
    # -------------------------
    if not settings.is_development:
        @app.exception_handler(Exception)
        async def unhandled_error(request: Request, exc: Exception):
            logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
            return JSONResponse(status_code=500, content=error_payload(request))

    # -------------------------
    # Middleware
    # add_middleware wraps, so the last added runs first
    # -------------------------
    app.add_middleware(
        CookiePolicyMiddleware,
        consent_cookie=settings.cookie_consent_name,
        essential=settings.essential_cookie_names,
    )

    if not settings.is_development:
        app.add_middleware(HSTSMiddleware, max_age=settings.hsts_max_age)
        app.add_middleware(HTTPSRedirectMiddleware)

    app.add_middleware(RequestLoggingMiddleware)

    # -------------------------
    # Static files
    # -------------------------
    if os.path.isdir(settings.static_dir):
        app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

    # -------------------------
    # Routers
    # -------------------------
    app.include_router(api_router)

    return app
