from fastapi import APIRouter

from app.api.health import router as health_router
from app.api.home import router as home_router
from app.api.items import router as items_router

api_router = APIRouter()

# -------------------------------------------------
# system / ops
# -------------------------------------------------
api_router.include_router(
    health_router,
    prefix="/health",
    tags=["health"],
)

# -------------------------------------------------
# error page
# -------------------------------------------------
api_router.include_router(home_router)

# -------------------------------------------------
# todo items, {controller=Item}/{action=Index}/{id?}
# -------------------------------------------------
api_router.include_router(items_router)
