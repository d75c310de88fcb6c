"""
Cache refresh results.
"""

from pydantic import Field

from models.base import BaseSchema


class CategoryRefreshResult(BaseSchema):
    """refresh_category_cache result."""
    status: str = "success"
    message: str
    count: int = Field(..., ge=0)


class ProductRefreshResult(BaseSchema):
    """refresh_product_map result. Name and SKU both count as mappings."""
    status: str = "success"
    message: str
    product_count: int = Field(..., ge=0, alias="productCount")
    mapping_count: int = Field(..., ge=0, alias="mappingCount")
