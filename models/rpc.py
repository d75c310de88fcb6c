"""
JSON-RPC envelope and per-method params.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from models.base import RpcParams


JSONRPC_VERSION = "2.0"

RequestId = Union[str, int, None]


# ===================
# ENVELOPE
# ===================

class JsonRpcRequest(BaseModel):
    """Incoming call. Validated by the /rpc route."""
    jsonrpc: str
    method: str = Field(..., min_length=1)
    params: Optional[dict[str, Any]] = None
    id: RequestId = None


class JsonRpcError(BaseModel):
    code: int
    message: str
    data: Optional[dict[str, Any]] = None


class JsonRpcResponse(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    result: Any = None
    error: Optional[JsonRpcError] = None
    id: RequestId = None

    def to_payload(self) -> dict:
        """Either result or error, never both."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result
        payload["id"] = self.id
        return payload


# ===================
# METHOD PARAMS
# ===================

class GetProductsParams(RpcParams):
    """get_products"""
    category_id: Optional[int] = Field(None, ge=1)
    category_name: Optional[str] = None
    per_page: int = Field(10, alias="perPage", ge=1, le=100)
    page: int = Field(1, ge=1)
    filters: dict[str, Any] = Field(default_factory=dict)


class ProductLookupParams(RpcParams):
    """
    get_product

    productId wins; otherwise product_name, then product_sku, is resolved.
    """
    product_id: Optional[int] = Field(None, alias="productId", ge=1)
    product_name: Optional[str] = None
    product_sku: Optional[str] = None

    @property
    def identifier(self) -> Optional[str]:
        return self.product_name or self.product_sku


class UpdateProductParams(ProductLookupParams):
    """update_product"""
    product_data: Optional[dict[str, Any]] = Field(None, alias="productData")
