from fastapi import APIRouter
from .analytics import router as analytics_router
from .comparison import router as comparison_router

api_router = APIRouter()
api_router.include_router(analytics_router)
api_router.include_router(comparison_router)
