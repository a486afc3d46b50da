from fastapi import APIRouter
from .sites import router as sites_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(sites_router)
router.include_router(settings_router)
