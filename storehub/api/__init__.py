"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from storehub.api.admin import router as admin_router
from storehub.api.health import router as health_router
from storehub.api.storefront import router as storefront_router

__all__ = [
    "admin_router",
    "health_router",
    "storefront_router",
]
