from .info import router as internal_router

__all__ = ["internal_router"]
