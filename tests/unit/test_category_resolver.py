"""
Unit tests for CategoryResolver.

Run: pytest tests/unit/test_category_resolver.py -v
"""

import pytest
from unittest.mock import patch

from exceptions import (
    AmbiguousCategoryError,
    CategoryNotFoundError,
    InvalidIdentifierError,
    WooCommerceError,
)
from services.map_store import load_map
from tests.factories import CategoryFactory


class TestCategoryResolverCache:
    """Cache hits never reach WooCommerce."""

    def test_cache_hit_skips_upstream(self, category_resolver, category_cache, fake_wc):
        category_cache.remember({"Widgets": 7})

        assert category_resolver.resolve("Widgets") == 7
        assert fake_wc.calls == []

    def test_second_resolution_is_a_cache_hit(self, category_resolver, fake_wc):
        fake_wc.set_search("categories", {"search": "Widgets"}, [
            CategoryFactory.create(id=7, name="Widgets")
        ])

        first = category_resolver.resolve("Widgets")
        second = category_resolver.resolve("Widgets")

        assert first == second == 7
        assert len(fake_wc.calls_to("search")) == 1

    @pytest.mark.parametrize("name", ["", None])
    def test_empty_name_is_rejected(self, category_resolver, fake_wc, name):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            category_resolver.resolve(name)

        assert exc_info.value.status_code == 422
        assert fake_wc.calls == []


class TestCategoryResolverSearch:
    """Cache misses search WooCommerce and apply the match policy."""

    def test_exact_match_is_cached_and_persisted(self, category_resolver, category_cache, fake_wc):
        fake_wc.set_search("categories", {"search": "Widgets"}, [
            CategoryFactory.create(id=7, name="Widgets")
        ])

        assert category_resolver.resolve("Widgets") == 7
        assert category_cache.get("Widgets") == 7
        assert load_map(category_cache.path) == {"Widgets": 7}

    def test_search_uses_limit_of_five(self, category_resolver, fake_wc):
        fake_wc.set_search("categories", {"search": "Widgets"}, [
            CategoryFactory.create(id=7, name="Widgets")
        ])

        category_resolver.resolve("Widgets")

        assert fake_wc.calls == [("search", "categories", {"search": "Widgets"}, 5)]

    def test_case_insensitive_match_caches_both_spellings(self, category_resolver, category_cache, fake_wc):
        fake_wc.set_search("categories", {"search": "widgets"}, [
            CategoryFactory.create(id=7, name="Widgets")
        ])

        assert category_resolver.resolve("widgets") == 7
        assert category_cache.snapshot() == {"widgets": 7, "Widgets": 7}

    def test_exact_match_wins_among_several(self, category_resolver, fake_wc):
        fake_wc.set_search("categories", {"search": "Tools"}, [
            CategoryFactory.create(id=1, name="Hand Tools"),
            CategoryFactory.create(id=2, name="tools"),
            CategoryFactory.create(id=3, name="Power Tools"),
        ])

        assert category_resolver.resolve("Tools") == 2

    def test_single_partial_match_is_used(self, category_resolver, category_cache, fake_wc):
        fake_wc.set_search("categories", {"search": "Widget"}, [
            CategoryFactory.create(id=9, name="Blue Widgets")
        ])

        assert category_resolver.resolve("Widget") == 9
        assert category_cache.snapshot() == {"Widget": 9, "Blue Widgets": 9}

    def test_no_results_raises_not_found(self, category_resolver, category_cache, fake_wc):
        with pytest.raises(CategoryNotFoundError) as exc_info:
            category_resolver.resolve("Gadgets")

        assert exc_info.value.status_code == 404
        assert "Category not found: 'Gadgets'" in exc_info.value.message
        assert len(category_cache) == 0

    def test_several_partial_matches_raise_ambiguous(self, category_resolver, category_cache, fake_wc):
        fake_wc.set_search("categories", {"search": "Tools"}, [
            CategoryFactory.create(id=1, name="Hand Tools"),
            CategoryFactory.create(id=2, name="Power Tools"),
        ])

        with pytest.raises(AmbiguousCategoryError) as exc_info:
            category_resolver.resolve("Tools")

        error = exc_info.value
        assert error.status_code == 409
        assert "'Hand Tools', 'Power Tools'" in error.message
        assert error.details["candidates"] == [
            {"id": 1, "name": "Hand Tools"},
            {"id": 2, "name": "Power Tools"},
        ]
        assert len(category_cache) == 0

    def test_upstream_failure_names_the_category(self, category_resolver, fake_wc):
        fake_wc.errors["search"] = WooCommerceError(
            "WooCommerce API Error (500): boom",
            upstream_status=500
        )

        with pytest.raises(WooCommerceError) as exc_info:
            category_resolver.resolve("Widgets")

        error = exc_info.value
        assert error.message.startswith("Failed to retrieve category ID for 'Widgets'.")
        assert "boom" in error.message
        assert error.upstream_status == 500
        assert error.status_code == 502

    def test_save_failure_does_not_fail_resolution(self, category_resolver, category_cache, fake_wc):
        fake_wc.set_search("categories", {"search": "Widgets"}, [
            CategoryFactory.create(id=7, name="Widgets")
        ])

        with patch("services.identifier_cache.save_map", return_value=False):
            assert category_resolver.resolve("Widgets") == 7

        assert category_cache.get("Widgets") == 7
