from fastapi import APIRouter

from .health import router as health_router
from .posts import router as posts_router
from .users import router as users_router

# Everything served under API_PREFIX
api_router = APIRouter()
api_router.include_router(users_router)
api_router.include_router(posts_router)

__all__ = ["api_router", "health_router", "users_router", "posts_router"]
