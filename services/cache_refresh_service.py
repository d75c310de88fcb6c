"""
Bulk rebuild of the category and product maps from full WooCommerce listings.

A refresh is the way to pick up renamed or re-created categories and
products. The new map is built completely before it replaces the live
one: a listing that fails halfway leaves the previous map untouched.
"""

from typing import Any, Optional
import structlog

from exceptions import WooCommerceError
from integrations.woocommerce import WooCommerceClient
from models.catalog import CategoryRefreshResult, ProductRefreshResult
from services.identifier_cache import IdentifierCache
from services.match_policy import record_id

logger = structlog.get_logger(__name__)

CATEGORY_PAGE_SIZE = 100
PRODUCT_PAGE_SIZE = 50


class CacheRefreshService:
    """Repopulates the identifier caches from WooCommerce."""

    def __init__(
        self,
        client: WooCommerceClient,
        category_cache: IdentifierCache,
        product_cache: IdentifierCache
    ):
        self.client = client
        self.category_cache = category_cache
        self.product_cache = product_cache

    # ===================
    # CATEGORIES
    # ===================

    def refresh_categories(self) -> CategoryRefreshResult:
        """
        Replace the category map with every category's name -> ID.

        Raises:
            WooCommerceError: listing failed (the old map is kept)
        """
        logger.info("category_refresh_started")

        try:
            categories = self._fetch_all(
                "categories",
                CATEGORY_PAGE_SIZE,
                {"orderby": "name", "order": "asc"}
            )
        except WooCommerceError as e:
            logger.error("category_refresh_failed", error=e.message)
            raise e.with_context("Failed to refresh category cache.") from e

        entries: dict[str, int] = {}
        for category in categories:
            name = category.get("name")
            if name:
                entries[name] = record_id(category)

        self.category_cache.replace(entries)
        count = len(self.category_cache)

        logger.info("category_refresh_complete", fetched=len(categories), count=count)
        return CategoryRefreshResult(
            message=(
                "Category cache refreshed successfully. "
                f"In-memory cache has {count} categories."
            ),
            count=count
        )

    # ===================
    # PRODUCTS
    # ===================

    def refresh_products(self) -> ProductRefreshResult:
        """
        Replace the product map with every product's name -> ID and SKU -> ID.

        Products of every status (draft, private, ...) are included.

        Raises:
            WooCommerceError: listing failed (the old map is kept)
        """
        logger.info("product_refresh_started")

        try:
            products = self._fetch_all(
                "products",
                PRODUCT_PAGE_SIZE,
                {"status": "any"}
            )
        except WooCommerceError as e:
            logger.error("product_refresh_failed", error=e.message)
            raise e.with_context("Failed to refresh product map.") from e

        entries: dict[str, int] = {}
        for product in products:
            product_id = record_id(product)
            if product.get("name"):
                entries[product["name"]] = product_id
            if product.get("sku"):
                entries[str(product["sku"])] = product_id

        self.product_cache.replace(entries)
        mapping_count = len(self.product_cache)

        logger.info(
            "product_refresh_complete",
            product_count=len(products),
            mapping_count=mapping_count
        )
        return ProductRefreshResult(
            message=(
                "Product map refreshed successfully. "
                f"Stored {mapping_count} mappings for {len(products)} products."
            ),
            product_count=len(products),
            mapping_count=mapping_count
        )

    # ===================
    # PAGINATION
    # ===================

    def _fetch_all(
        self,
        resource: str,
        per_page: int,
        extra_params: Optional[dict[str, Any]] = None
    ) -> list[dict]:
        """
        Fetch every page of a listing.

        The page count is taken from the first response only.
        """
        records, total_pages = self.client.list_page(resource, 1, per_page, extra_params)
        logger.info("listing_pages", resource=resource, total_pages=total_pages)

        all_records = list(records)
        for page in range(2, total_pages + 1):
            records, _ = self.client.list_page(resource, page, per_page, extra_params)
            all_records.extend(records)
            logger.debug(
                "listing_page_fetched",
                resource=resource,
                page=page,
                fetched=len(records),
                total=len(all_records)
            )

        return all_records
