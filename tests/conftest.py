"""
Shared test fixtures.
"""

import os
import sys
import tempfile
from pathlib import Path

# Add project root to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are required at import time of main.py
os.environ.setdefault("MCP_API_KEY", "test-api-key")
os.environ.setdefault("WOOCOMMERCE_URL", "https://shop.example.com")
os.environ.setdefault("WOOCOMMERCE_KEY", "ck_test")
os.environ.setdefault("WOOCOMMERCE_SECRET", "cs_test")
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="gateway-test-data-"))
os.environ.setdefault("ENVIRONMENT", "development")

import pytest
from typing import Any, Optional

from exceptions import WooCommerceError
from services.cache_refresh_service import CacheRefreshService
from services.category_resolver import CategoryResolver
from services.identifier_cache import IdentifierCache
from services.product_resolver import ProductResolver
from services.rpc_dispatcher import RpcDispatcher

TEST_API_KEY = os.environ["MCP_API_KEY"]


# ===================
# FAKE WOOCOMMERCE CLIENT
# ===================

class FakeWooCommerceClient:
    """
    In-memory stand-in for WooCommerceClient.

    Records every call in `calls` as (operation, resource, args...).
    """

    def __init__(self):
        self.calls: list[tuple] = []
        self._search: dict[tuple, list[dict]] = {}
        self._pages: dict[str, list[list[dict]]] = {}
        self._total_pages: dict[str, int] = {}
        self._page_errors: dict[tuple, Exception] = {}
        self._records: dict[tuple, dict] = {}
        self.product_listing: list[dict] = []
        self.errors: dict[str, Exception] = {}

    # --- configuration ---

    def set_search(self, resource: str, query: dict, results: list[dict]) -> None:
        self._search[(resource, _query_key(query))] = list(results)

    def set_pages(
        self,
        resource: str,
        pages: list[list[dict]],
        total_pages: Optional[int] = None
    ) -> None:
        self._pages[resource] = pages
        if total_pages is not None:
            self._total_pages[resource] = total_pages

    def fail_on_page(self, resource: str, page: int, error: Exception) -> None:
        self._page_errors[(resource, page)] = error

    def set_record(self, resource: str, record: dict) -> None:
        self._records[(resource, record["id"])] = record

    # --- client API ---

    def search(self, resource: str, query: dict, limit: Optional[int] = None) -> list[dict]:
        self.calls.append(("search", resource, dict(query), limit))
        if "search" in self.errors:
            raise self.errors["search"]
        return list(self._search.get((resource, _query_key(query)), []))

    def get(self, resource: str, record_id: int) -> dict:
        self.calls.append(("get", resource, record_id))
        if "get" in self.errors:
            raise self.errors["get"]
        try:
            return self._records[(resource, record_id)]
        except KeyError:
            raise WooCommerceError(
                "WooCommerce API Error (404): Invalid ID.",
                upstream_status=404,
                upstream_code="woocommerce_rest_product_invalid_id"
            )

    def put(self, resource: str, record_id: int, body: dict) -> dict:
        self.calls.append(("put", resource, record_id, body))
        if "put" in self.errors:
            raise self.errors["put"]
        record = {**self._records.get((resource, record_id), {"id": record_id}), **body}
        self._records[(resource, record_id)] = record
        return record

    def list_page(
        self,
        resource: str,
        page: int,
        per_page: int,
        extra_params: Optional[dict] = None
    ) -> tuple[list[dict], int]:
        self.calls.append(("list_page", resource, page, per_page, dict(extra_params or {})))
        if (resource, page) in self._page_errors:
            raise self._page_errors[(resource, page)]
        pages = self._pages.get(resource, [[]])
        records = pages[page - 1] if page <= len(pages) else []
        total = self._total_pages.get(resource, len(pages))
        return list(records), total

    def list_products(self, params: dict) -> list[dict]:
        self.calls.append(("list_products", "products", dict(params)))
        if "list_products" in self.errors:
            raise self.errors["list_products"]
        return list(self.product_listing)

    # --- assertions ---

    def calls_to(self, operation: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == operation]


def _query_key(query: dict) -> tuple:
    return tuple(sorted((k, str(v)) for k, v in query.items()))


# ===================
# FIXTURES
# ===================

@pytest.fixture
def fake_wc() -> FakeWooCommerceClient:
    """
    Fake WooCommerce client.

    Usage:
        def test_something(fake_wc):
            fake_wc.set_search("categories", {"search": "Widgets"}, [...])
    """
    return FakeWooCommerceClient()


@pytest.fixture
def data_dir(tmp_path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def category_cache(data_dir) -> IdentifierCache:
    return IdentifierCache("category", data_dir / "category_map.json")


@pytest.fixture
def product_cache(data_dir) -> IdentifierCache:
    return IdentifierCache("product", data_dir / "product_map.json")


@pytest.fixture
def category_resolver(fake_wc, category_cache) -> CategoryResolver:
    return CategoryResolver(fake_wc, category_cache)


@pytest.fixture
def product_resolver(fake_wc, product_cache) -> ProductResolver:
    return ProductResolver(fake_wc, product_cache)


@pytest.fixture
def refresh_service(fake_wc, category_cache, product_cache) -> CacheRefreshService:
    return CacheRefreshService(fake_wc, category_cache, product_cache)


@pytest.fixture
def dispatcher(fake_wc, category_resolver, product_resolver, refresh_service) -> RpcDispatcher:
    return RpcDispatcher(
        client=fake_wc,
        category_resolver=category_resolver,
        product_resolver=product_resolver,
        refresh_service=refresh_service
    )


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client(dispatcher, monkeypatch):
    """
    FastAPI test client wired to the fake WooCommerce client.

    Usage:
        def test_endpoint(test_client, fake_wc):
            response = test_client.post("/rpc", json={...}, headers=auth_headers)
    """
    from fastapi.testclient import TestClient
    from main import app

    monkeypatch.setattr("services.rpc_dispatcher._rpc_dispatcher", dispatcher)
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict:
    return {"X-API-Key": TEST_API_KEY}
