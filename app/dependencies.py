import logging
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException, Request

from app.core.config import Settings
from app.repositories.base import ItemRepository
from app.repositories.cosmos_repo import CosmosItemRepository
from app.services.cosmos_initializer import initialize_cosmos_service
from app.services.cosmos_service import CosmosDbService

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[Settings], CosmosDbService]


def register_cosmos_service(app: FastAPI, service: CosmosDbService) -> None:
    """
    Publish the single Cosmos handle for this application.
    Registering a different instance later is an error.
    """
    existing = getattr(app.state, "cosmos_service", None)
    if existing is not None and existing is not service:
        raise RuntimeError("Cosmos service is already registered")
    app.state.cosmos_service = service
    app.state.item_repo = CosmosItemRepository(service)


def init_repositories(app: FastAPI, service_factory: Optional[ServiceFactory] = None) -> None:
    """
    Initialize infrastructure dependencies.
    Must be idempotent. Failures propagate and abort startup.
    """
    if getattr(app.state, "cosmos_service", None) is not None:
        logger.info("Cosmos service already registered, skipping init")
        return

    factory = service_factory or initialize_cosmos_service
    service = factory(app.state.settings)
    register_cosmos_service(app, service)
    logger.info("Repositories initialized")


def get_cosmos_service(request: Request) -> CosmosDbService:
    service = getattr(request.app.state, "cosmos_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Database not initialized")
    return service


def get_item_repository(request: Request) -> ItemRepository:
    repo = getattr(request.app.state, "item_repo", None)
    if repo is None:
        raise HTTPException(status_code=503, detail="Database not initialized")
    return repo
