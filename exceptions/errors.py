"""
Custom exception classes for the application.

Every error carries an HTTP status and a JSON-RPC error code so the /rpc
route can translate it without inspecting message text.
"""

from typing import Optional, Any


# JSON-RPC 2.0 error codes
RPC_PARSE_ERROR = -32700
RPC_INVALID_REQUEST = -32600
RPC_METHOD_NOT_FOUND = -32601
RPC_INVALID_PARAMS = -32602
RPC_INTERNAL_ERROR = -32603

# Server-defined range
RPC_SERVER_ERROR = -32000
RPC_CONFIGURATION_ERROR = -32001
RPC_RESOURCE_NOT_FOUND = -32002
RPC_AMBIGUOUS_MATCH = -32003


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        rpc_code: JSON-RPC error code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
        rpc_code: int = RPC_INTERNAL_ERROR
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.rpc_code = rpc_code
        self.details = details or {}
        super().__init__(message)

    def to_rpc_error(self) -> dict:
        """Convert to a JSON-RPC error object."""
        return {
            "code": self.rpc_code,
            "message": self.message,
            "data": {"code": self.code, **self.details}
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found: '{identifier}'",
            status_code=404,
            details={"identifier": identifier},
            rpc_code=RPC_RESOURCE_NOT_FOUND
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details,
            rpc_code=RPC_INVALID_PARAMS
        )


class ConflictError(AppError):
    """Conflict with existing resources (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details,
            rpc_code=RPC_AMBIGUOUS_MATCH
        )


class ExternalServiceError(AppError):
    """External service failure (502)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=502,
            details={"service": service, **(details or {})},
            rpc_code=RPC_SERVER_ERROR
        )


# ===================
# RPC ERRORS
# ===================

class MethodNotFoundError(AppError):
    """Unknown JSON-RPC method."""

    def __init__(self, method: str):
        super().__init__(
            code="METHOD_NOT_FOUND",
            message=f"Unsupported method: {method}",
            status_code=404,
            details={"method": method},
            rpc_code=RPC_METHOD_NOT_FOUND
        )


class InvalidParamsError(ValidationError):
    """JSON-RPC params missing or malformed."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="INVALID_PARAMS",
            message=message,
            details=details
        )


# ===================
# RESOLUTION ERRORS
# ===================

class InvalidIdentifierError(ValidationError):
    """Identifier to resolve is missing or empty."""

    def __init__(self, resource: str):
        super().__init__(
            code=f"{resource.upper()}_IDENTIFIER_REQUIRED",
            message=f"{resource} identifier cannot be empty.",
            details={"resource": resource}
        )


class CategoryNotFoundError(NotFoundError):
    """No WooCommerce category matches the name."""

    def __init__(self, name: str):
        super().__init__(
            resource="Category",
            identifier=name,
            code="CATEGORY_NOT_FOUND"
        )


class ProductNotFoundError(NotFoundError):
    """No WooCommerce product matches the name or SKU."""

    def __init__(self, identifier: str):
        super().__init__(
            resource="Product",
            identifier=identifier,
            code="PRODUCT_NOT_FOUND"
        )


class AmbiguousCategoryError(ConflictError):
    """Several categories match the name and none exactly."""

    def __init__(self, name: str, candidates: list[dict]):
        similar = ", ".join(f"'{c.get('name')}'" for c in candidates)
        super().__init__(
            code="CATEGORY_AMBIGUOUS",
            message=(
                f"Ambiguous category name: '{name}'. "
                f"Found multiple possible matches: {similar}"
            ),
            details={
                "identifier": name,
                "candidates": [
                    {"id": c.get("id"), "name": c.get("name")} for c in candidates
                ]
            }
        )


class AmbiguousProductError(ConflictError):
    """Several products match the name and none exactly."""

    def __init__(self, identifier: str, candidates: list[dict]):
        similar = ", ".join(
            f"'{c.get('name')}' (ID: {c.get('id')})" for c in candidates
        )
        super().__init__(
            code="PRODUCT_AMBIGUOUS",
            message=(
                f"Ambiguous product identifier: '{identifier}'. "
                f"Found multiple possible matches by name: {similar}"
            ),
            details={
                "identifier": identifier,
                "candidates": [
                    {"id": c.get("id"), "name": c.get("name"), "sku": c.get("sku")}
                    for c in candidates
                ]
            }
        )


class InvalidCategoryError(AppError):
    """WooCommerce rejected the category filter."""

    def __init__(self, category_id: Any):
        super().__init__(
            code="CATEGORY_INVALID",
            message=(
                "WooCommerce API Error (400): Invalid category specified. "
                "It might not exist or the ID is incorrect."
            ),
            status_code=404,
            details={"category_id": category_id},
            rpc_code=RPC_RESOURCE_NOT_FOUND
        )


# ===================
# UPSTREAM ERRORS
# ===================

class WooCommerceError(ExternalServiceError):
    """
    WooCommerce request failed.

    status_code of the upstream response (None for transport failures) and
    the WooCommerce error code are kept in details.
    """

    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        upstream_code: Optional[str] = None
    ):
        self.upstream_status = upstream_status
        self.upstream_code = upstream_code
        super().__init__(
            service="woocommerce",
            message=message,
            details={
                "upstream_status": upstream_status,
                "upstream_code": upstream_code
            }
        )

    def with_context(self, prefix: str) -> "WooCommerceError":
        """Return a copy whose message is prefixed with caller context."""
        return WooCommerceError(
            f"{prefix} Reason: {self.message}",
            upstream_status=self.upstream_status,
            upstream_code=self.upstream_code
        )
