from fastapi import APIRouter

from app.api.v1.endpoints.health import router as health_router
from app.api.v1.endpoints.api_keys import router as api_keys_router
from app.api.v1.endpoints.me import router as me_router
from app.api.v1.endpoints.agents import router as agents_router
from app.api.v1.endpoints.lists import router as lists_router


router = APIRouter(prefix="/v1")
router.include_router(health_router, tags=["health"])
router.include_router(api_keys_router, tags=["api-keys"])
router.include_router(me_router, tags=["me"])
router.include_router(agents_router, tags=["agents"])
router.include_router(lists_router, tags=["lists"])
