"""Domain exceptions.

Errors raised by the application layer when an admin request cannot be
served. Catalog reads never raise; they degrade and report instead.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the API layer.
    """

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Access Errors
# ============================================================================


class AccessError(DomainError):
    """Base class for authentication and authorization errors."""

    pass


class AuthenticationRequiredError(AccessError):
    """Raised when no authenticated identity is attached to the request."""

    error_code = "UNAUTHORIZED"

    def __init__(self) -> None:
        """Initialize authentication required error."""
        super().__init__("You must be signed in to perform this action.")


class AdminAccessDeniedError(AccessError):
    """Raised when the identity is not in the admin allow-list."""

    error_code = "ADMIN_REQUIRED"

    def __init__(self, user_id: str) -> None:
        """Initialize admin access denied error.

        Args:
            user_id: ID of the signed-in user.
        """
        super().__init__(
            "You do not have permission to manage inventory.",
            details={"user_id": user_id},
        )


class AccessCheckFailedError(AccessError):
    """Raised when the admin allow-list could not be read."""

    error_code = "ACCESS_CHECK_FAILED"

    def __init__(self, user_id: str) -> None:
        """Initialize access check failed error.

        Args:
            user_id: ID of the signed-in user.
        """
        super().__init__(
            "Unable to verify admin access. Please try again.",
            details={"user_id": user_id},
        )


# ============================================================================
# Inventory Errors
# ============================================================================


class WritesDisabledError(DomainError):
    """Raised when a mutation is attempted while view-only mode is active."""

    error_code = "WRITES_DISABLED"

    def __init__(self) -> None:
        """Initialize writes disabled error."""
        super().__init__("Inventory writes are currently disabled for maintenance.")


class ProductNotFoundError(DomainError):
    """Raised when a product does not exist."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_ref: str) -> None:
        """Initialize product not found error.

        Args:
            product_ref: Product ID or slug that was requested.
        """
        super().__init__(
            f"Product {product_ref} not found",
            details={"product": product_ref},
        )
