from fastapi import APIRouter, Depends, Request

from app.dependencies import get_cosmos_service
from app.services.cosmos_service import CosmosDbService

router = APIRouter(tags=["health"])


@router.get("/live")
def live():
    return {"status": "alive"}


@router.get("/ready")
def ready(request: Request):
    ready = getattr(request.app.state, "cosmos_service", None) is not None
    return {"status": "ready" if ready else "degraded"}


@router.get("/db")
def database(service: CosmosDbService = Depends(get_cosmos_service)):
    return {
        "database": service.database_name,
        "container": service.container_name,
    }
