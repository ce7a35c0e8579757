from fastapi import APIRouter

from castify.api.v1 import casts

api_router = APIRouter(prefix="/api")
api_router.include_router(casts.router)

__all__ = ["api_router"]
