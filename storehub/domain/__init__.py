"""Domain layer.

Domain errors shared by the catalog, application and API layers.
"""

from storehub.domain.exceptions import (
    AccessCheckFailedError,
    AccessError,
    AdminAccessDeniedError,
    AuthenticationRequiredError,
    DomainError,
    ProductNotFoundError,
    WritesDisabledError,
)

__all__ = [
    "AccessCheckFailedError",
    "AccessError",
    "AdminAccessDeniedError",
    "AuthenticationRequiredError",
    "DomainError",
    "ProductNotFoundError",
    "WritesDisabledError",
]
