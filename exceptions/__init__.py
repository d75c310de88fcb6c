"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    ExternalServiceError,

    # RPC
    MethodNotFoundError,
    InvalidParamsError,

    # Resolution
    InvalidIdentifierError,
    CategoryNotFoundError,
    ProductNotFoundError,
    AmbiguousCategoryError,
    AmbiguousProductError,
    InvalidCategoryError,

    # Upstream
    WooCommerceError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ExternalServiceError",

    # RPC
    "MethodNotFoundError",
    "InvalidParamsError",

    # Resolution
    "InvalidIdentifierError",
    "CategoryNotFoundError",
    "ProductNotFoundError",
    "AmbiguousCategoryError",
    "AmbiguousProductError",
    "InvalidCategoryError",

    # Upstream
    "WooCommerceError",
]
