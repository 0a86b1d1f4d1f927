from fastapi import APIRouter

from .employees import router as employees_router
from .roles import router as roles_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(employees_router)
api_router.include_router(roles_router)

__all__ = ["api_router"]
