"""
Pydantic schemas for the JSON-RPC gateway.
"""

from models.base import BaseSchema, RpcParams
from models.rpc import (
    JSONRPC_VERSION,
    JsonRpcRequest,
    JsonRpcError,
    JsonRpcResponse,
    GetProductsParams,
    ProductLookupParams,
    UpdateProductParams,
)
from models.catalog import CategoryRefreshResult, ProductRefreshResult

__all__ = [
    "BaseSchema",
    "RpcParams",
    "JSONRPC_VERSION",
    "JsonRpcRequest",
    "JsonRpcError",
    "JsonRpcResponse",
    "GetProductsParams",
    "ProductLookupParams",
    "UpdateProductParams",
    "CategoryRefreshResult",
    "ProductRefreshResult",
]
