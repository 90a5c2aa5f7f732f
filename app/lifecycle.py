# app/lifecycle.py
import logging
from typing import Optional

from fastapi import FastAPI

from app.dependencies import ServiceFactory, init_repositories

logger = logging.getLogger(__name__)


def register_lifecycle(app: FastAPI, service_factory: Optional[ServiceFactory] = None) -> None:
    @app.on_event("startup")
    def on_startup() -> None:
        logger.info("Application startup begin")
        init_repositories(app, service_factory)
        logger.info("Application startup completed")

    @app.on_event("shutdown")
    def on_shutdown() -> None:
        logger.info("Application shutdown begin")

        service = getattr(app.state, "cosmos_service", None)
        if service is not None:
            service.close()

        logger.info("Application shutdown completed")
