"""
JSON-RPC method dispatch.

Maps a method name and its params onto the resolvers, the cache refresh
service and the WooCommerce pass-through calls. Errors are raised as
AppError subclasses; turning them into JSON-RPC errors is the route's job.
"""

from typing import Any, Callable, Optional

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from config.settings import Settings, get_settings
from exceptions import (
    InvalidCategoryError,
    InvalidParamsError,
    MethodNotFoundError,
    WooCommerceError,
)
from integrations.woocommerce import WooCommerceClient, get_woocommerce_client
from models.rpc import GetProductsParams, ProductLookupParams, UpdateProductParams
from services.cache_refresh_service import CacheRefreshService
from services.category_resolver import CategoryResolver
from services.identifier_cache import IdentifierCache
from services.product_resolver import ProductResolver

logger = structlog.get_logger(__name__)

INVALID_TERM_CODE = "woocommerce_rest_invalid_term"


class RpcDispatcher:
    """
    Routes JSON-RPC calls.

    Supported methods:
        get_products, get_product, update_product,
        refresh_category_cache, refresh_product_map
    """

    def __init__(
        self,
        client: WooCommerceClient,
        category_resolver: CategoryResolver,
        product_resolver: ProductResolver,
        refresh_service: CacheRefreshService
    ):
        self.client = client
        self.category_resolver = category_resolver
        self.product_resolver = product_resolver
        self.refresh_service = refresh_service

        self._methods: dict[str, Callable[[dict], Any]] = {
            "get_products": self.get_products,
            "get_product": self.get_product,
            "update_product": self.update_product,
            "refresh_category_cache": self.refresh_category_cache,
            "refresh_product_map": self.refresh_product_map,
        }

    @property
    def methods(self) -> list[str]:
        return sorted(self._methods)

    @property
    def category_cache(self) -> IdentifierCache:
        return self.category_resolver.cache

    @property
    def product_cache(self) -> IdentifierCache:
        return self.product_resolver.cache

    def dispatch(self, method: str, params: Optional[dict] = None) -> Any:
        """
        Execute one RPC method.

        Raises:
            MethodNotFoundError: unknown method
            InvalidParamsError: params failed validation
            AppError: any resolution or upstream failure
        """
        handler = self._methods.get(method)
        if handler is None:
            logger.warning("rpc_method_not_found", method=method)
            raise MethodNotFoundError(method)

        logger.info("rpc_dispatch", method=method)
        return handler(params or {})

    # ===================
    # PRODUCTS
    # ===================

    def get_products(self, params: dict) -> list[dict]:
        args = _parse(GetProductsParams, params)

        category_id = args.category_id
        if category_id is None and args.category_name:
            category_id = self.category_resolver.resolve(args.category_name)
            logger.info(
                "category_name_resolved",
                category=args.category_name,
                category_id=category_id
            )

        query: dict[str, Any] = {"per_page": args.per_page, "page": args.page}
        if category_id is not None:
            query["category"] = str(category_id)
        query.update(args.filters)

        try:
            return self.client.list_products(query)
        except WooCommerceError as e:
            if e.upstream_code == INVALID_TERM_CODE:
                raise InvalidCategoryError(category_id) from e
            raise

    def get_product(self, params: dict) -> dict:
        args = _parse(ProductLookupParams, params)
        product_id = self._resolve_product_id(args, "get_product")
        return self.client.get("products", product_id)

    def update_product(self, params: dict) -> dict:
        args = _parse(UpdateProductParams, params)
        if args.product_data is None:
            raise InvalidParamsError(
                "productData object is required for update_product",
                details={"param": "productData"}
            )

        product_id = self._resolve_product_id(args, "update_product")
        logger.info(
            "product_update",
            product_id=product_id,
            fields=sorted(args.product_data)
        )
        return self.client.put("products", product_id, args.product_data)

    def _resolve_product_id(self, args: ProductLookupParams, method: str) -> int:
        if args.product_id is not None:
            return args.product_id

        identifier = args.identifier
        if not identifier:
            raise InvalidParamsError(
                f"productId, product_name, or product_sku is required for {method}",
                details={"params": ["productId", "product_name", "product_sku"]}
            )

        product_id = self.product_resolver.resolve(identifier)
        logger.info("product_identifier_resolved", identifier=identifier, product_id=product_id)
        return product_id

    # ===================
    # CACHE REFRESH
    # ===================

    def refresh_category_cache(self, params: dict) -> dict:
        return self.refresh_service.refresh_categories().to_result()

    def refresh_product_map(self, params: dict) -> dict:
        return self.refresh_service.refresh_products().to_result()


def _parse(model: type[BaseModel], params: dict) -> Any:
    """Validate params, raising InvalidParamsError with field-level details."""
    if not isinstance(params, dict):
        raise InvalidParamsError("params must be an object")
    try:
        return model.model_validate(params)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise InvalidParamsError(
            f"Invalid params: {errors[0]['field']}: {errors[0]['message']}",
            details={"errors": errors}
        ) from e


# ===================
# WIRING
# ===================

def build_dispatcher(
    settings: Settings,
    client: Optional[WooCommerceClient] = None
) -> RpcDispatcher:
    """Create caches, load them from disk and wire the services."""
    client = client or get_woocommerce_client()

    category_cache = IdentifierCache("category", settings.category_map_path)
    product_cache = IdentifierCache("product", settings.product_map_path)
    category_cache.load()
    product_cache.load()

    return RpcDispatcher(
        client=client,
        category_resolver=CategoryResolver(client, category_cache),
        product_resolver=ProductResolver(client, product_cache),
        refresh_service=CacheRefreshService(client, category_cache, product_cache)
    )


_rpc_dispatcher: Optional[RpcDispatcher] = None


def get_rpc_dispatcher() -> RpcDispatcher:
    """Get or create the process-wide RpcDispatcher."""
    global _rpc_dispatcher
    if _rpc_dispatcher is None:
        _rpc_dispatcher = build_dispatcher(get_settings())
    return _rpc_dispatcher
