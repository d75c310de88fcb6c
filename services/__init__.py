"""
Business logic services.

Each service handles one part of identifier resolution or RPC dispatch.
"""

from services.map_store import load_map, save_map
from services.identifier_cache import IdentifierCache
from services.match_policy import MatchKind, CandidateMatch, choose_candidate
from services.category_resolver import CategoryResolver
from services.product_resolver import ProductResolver
from services.cache_refresh_service import CacheRefreshService
from services.rpc_dispatcher import (
    RpcDispatcher,
    build_dispatcher,
    get_rpc_dispatcher,
)

__all__ = [
    "load_map",
    "save_map",
    "IdentifierCache",
    "MatchKind",
    "CandidateMatch",
    "choose_candidate",
    "CategoryResolver",
    "ProductResolver",
    "CacheRefreshService",
    "RpcDispatcher",
    "build_dispatcher",
    "get_rpc_dispatcher",
]
