"""API route modules."""

from fastapi import APIRouter

from dega.entrypoints.api.routes.categories import router as categories_router
from dega.entrypoints.api.routes.media import router as media_router
from dega.entrypoints.api.routes.organizations import router as organizations_router
from dega.entrypoints.api.routes.users import router as users_router

# Create main API router
api_router = APIRouter()

# Include all route modules
api_router.include_router(categories_router)
api_router.include_router(organizations_router)
api_router.include_router(media_router)
api_router.include_router(users_router)

__all__ = ["api_router"]
