"""
Product name/SKU -> WooCommerce product ID resolution.

Lookup order:
    1. product cache (exact key)
    2. SKU search - SKUs are unique business keys in WooCommerce
    3. name search - fuzzy, so an exact name match is preferred and a
       lone partial match is accepted

Every hit is remembered under the product's SKU, its name and the
identifier the caller used.
"""

from typing import Any, Optional
import structlog

from exceptions import (
    AmbiguousProductError,
    InvalidIdentifierError,
    ProductNotFoundError,
    WooCommerceError,
)
from integrations.woocommerce import WooCommerceClient
from services.identifier_cache import IdentifierCache
from services.match_policy import MatchKind, choose_candidate, record_id, record_name

logger = structlog.get_logger(__name__)

SEARCH_LIMIT = 5


class ProductResolver:
    """Resolves product names or SKUs using the product cache and WooCommerce search."""

    def __init__(self, client: WooCommerceClient, cache: IdentifierCache):
        self.client = client
        self.cache = cache

    def resolve(self, identifier: Any) -> int:
        """
        Get the product ID for a name or SKU.

        Args:
            identifier: Product name or SKU (non-strings are converted with str())

        Returns:
            WooCommerce product ID

        Raises:
            InvalidIdentifierError: identifier is None or empty
            ProductNotFoundError: neither SKU nor name search found anything
            AmbiguousProductError: several partial name matches, no exact one
            WooCommerceError: upstream request failed
        """
        if identifier is None or identifier == "":
            raise InvalidIdentifierError("Product")
        identifier = str(identifier)

        cached = self.cache.get(identifier)
        if cached is not None:
            logger.debug("product_cache_hit", identifier=identifier, product_id=cached)
            return cached

        logger.info("product_cache_miss", identifier=identifier)

        try:
            product = self._find_by_sku(identifier)
            if product is None:
                product = self._find_by_name(identifier)
        except WooCommerceError as e:
            logger.error("product_lookup_failed", identifier=identifier, error=e.message)
            raise e.with_context(f"Failed to retrieve product ID for '{identifier}'.") from e

        product_id = record_id(product)
        self._remember(identifier, product)
        return product_id

    # ===================
    # LOOKUP PHASES
    # ===================

    def _find_by_sku(self, identifier: str) -> Optional[dict]:
        """SKU search. None when no product has this SKU."""
        results = self.client.search("products", {"sku": identifier})

        if not results:
            logger.debug("product_sku_search_empty", identifier=identifier)
            return None

        if len(results) > 1:
            logger.warning(
                "product_sku_not_unique",
                identifier=identifier,
                matches=len(results),
                using_product_id=results[0].get("id")
            )

        product = results[0]
        logger.info(
            "product_resolved_by_sku",
            identifier=identifier,
            product_id=product.get("id"),
            name=record_name(product)
        )
        return product

    def _find_by_name(self, identifier: str) -> dict:
        """Name search with exact-match preference."""
        candidates = self.client.search(
            "products",
            {"search": identifier},
            limit=SEARCH_LIMIT
        )
        match = choose_candidate(identifier, candidates)

        if match.kind == MatchKind.NONE:
            raise ProductNotFoundError(identifier)

        if match.kind == MatchKind.AMBIGUOUS:
            logger.warning(
                "product_ambiguous",
                identifier=identifier,
                candidates=[c.get("id") for c in match.candidates]
            )
            raise AmbiguousProductError(identifier, match.candidates)

        product = match.candidate
        if match.kind == MatchKind.SINGLE:
            logger.warning(
                "product_partial_match_used",
                identifier=identifier,
                matched=record_name(product),
                product_id=product.get("id")
            )
        else:
            logger.info(
                "product_resolved_by_name",
                identifier=identifier,
                product_id=product.get("id"),
                sku=product.get("sku")
            )
        return product

    def _remember(self, identifier: str, product: dict) -> None:
        product_id = record_id(product)
        entries: dict[str, int] = {}

        sku = product.get("sku")
        if sku:
            entries[str(sku)] = product_id
        name = record_name(product)
        if name:
            entries[name] = product_id
        entries[identifier] = product_id

        self.cache.remember(entries)
