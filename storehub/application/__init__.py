"""Application layer module.

Contains application services (use cases) that orchestrate
domain logic and infrastructure.
"""

from storehub.application.access_service import (
    AccessService,
    get_access_service,
)
from storehub.application.product_lifecycle_service import ProductLifecycleService
from storehub.application.write_mode_service import (
    WriteModeService,
    WriteModeStatus,
    get_write_mode_service,
)

__all__ = [
    "AccessService",
    "get_access_service",
    "ProductLifecycleService",
    "WriteModeService",
    "WriteModeStatus",
    "get_write_mode_service",
]
