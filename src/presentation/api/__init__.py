"""HTTP API routers."""

from .routes.router import router as api_router

__all__ = ["api_router"]
