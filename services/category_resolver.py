"""
Category name -> WooCommerce category ID resolution.

Cached names are answered locally; anything else is searched upstream
and the result is remembered under both the requested name and the
category's canonical name.
"""

from typing import Optional
import structlog

from exceptions import (
    AmbiguousCategoryError,
    CategoryNotFoundError,
    InvalidIdentifierError,
    WooCommerceError,
)
from integrations.woocommerce import WooCommerceClient
from services.identifier_cache import IdentifierCache
from services.match_policy import MatchKind, choose_candidate, record_id, record_name

logger = structlog.get_logger(__name__)

SEARCH_LIMIT = 5


class CategoryResolver:
    """Resolves category names using the category cache and WooCommerce search."""

    def __init__(self, client: WooCommerceClient, cache: IdentifierCache):
        self.client = client
        self.cache = cache

    def resolve(self, name: Optional[str]) -> int:
        """
        Get the category ID for a name.

        Args:
            name: Category name as given by the caller

        Returns:
            WooCommerce category ID

        Raises:
            InvalidIdentifierError: name is empty
            CategoryNotFoundError: search returned nothing
            AmbiguousCategoryError: several partial matches, no exact one
            WooCommerceError: upstream request failed
        """
        if not name:
            raise InvalidIdentifierError("Category")

        cached = self.cache.get(name)
        if cached is not None:
            logger.debug("category_cache_hit", category=name, category_id=cached)
            return cached

        logger.info("category_cache_miss", category=name)

        try:
            candidates = self.client.search(
                "categories",
                {"search": name},
                limit=SEARCH_LIMIT
            )
        except WooCommerceError as e:
            logger.error("category_lookup_failed", category=name, error=e.message)
            raise e.with_context(f"Failed to retrieve category ID for '{name}'.") from e

        match = choose_candidate(name, candidates)

        if match.kind == MatchKind.NONE:
            raise CategoryNotFoundError(name)

        if match.kind == MatchKind.AMBIGUOUS:
            logger.warning(
                "category_ambiguous",
                category=name,
                candidates=[record_name(c) for c in match.candidates]
            )
            raise AmbiguousCategoryError(name, match.candidates)

        category = match.candidate
        category_id = record_id(category)
        canonical = record_name(category)

        if match.kind == MatchKind.SINGLE:
            logger.warning(
                "category_partial_match_used",
                category=name,
                matched=canonical,
                category_id=category_id
            )
        else:
            logger.info(
                "category_resolved",
                category=name,
                matched=canonical,
                category_id=category_id
            )

        self.cache.remember({name: category_id, canonical: category_id})
        return category_id
