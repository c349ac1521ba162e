# Sandbox API routers

from .landmark_endpoints import router as landmark_router

__all__ = [
    "landmark_router",
]
