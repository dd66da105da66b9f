"""Domain exceptions.

Errors raised by catalog stores. The query engine catches these at its
fail-soft boundaries; nothing else in the read path raises them.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog exceptions."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize catalog error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Store Errors
# ============================================================================


class StoreError(CatalogError):
    """Raised when the backing store fails to answer a query."""

    def __init__(self, operation: str, reason: str) -> None:
        """Initialize store error.

        Args:
            operation: Store operation that failed (e.g., "fetch_products").
            reason: Underlying failure description.
        """
        super().__init__(
            f"Store operation '{operation}' failed: {reason}",
            details={"operation": operation, "reason": reason},
        )
        self.operation = operation
        self.reason = reason


class StoreUnavailableError(StoreError):
    """Raised when no store is configured or it cannot be reached."""

    def __init__(
        self,
        operation: str,
        reason: str = "catalog store is not configured",
    ) -> None:
        """Initialize store unavailable error.

        Args:
            operation: Store operation that was attempted.
            reason: Why the store is unavailable (e.g., connection refused).
        """
        super().__init__(operation, reason)
