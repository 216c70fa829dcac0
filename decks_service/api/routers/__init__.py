"""API routers"""

from fastapi import APIRouter

from .decks import router as decks_router
from .system import router as system_router

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(decks_router)

__all__ = ["v1_router", "system_router"]
