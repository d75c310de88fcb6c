"""
WooCommerce REST API client.

Thin wrapper over the /wp-json/wc/v3 endpoints used by the gateway.
Every failure, transport or HTTP, surfaces as WooCommerceError.
"""

from functools import lru_cache
from typing import Any, Optional

import requests
import structlog

from config.settings import get_settings
from exceptions import WooCommerceError

logger = structlog.get_logger(__name__)


# Resource names used by the services -> REST paths
RESOURCE_PATHS = {
    "categories": "products/categories",
    "products": "products",
}

TOTAL_PAGES_HEADER = "X-WP-TotalPages"


class WooCommerceClient:
    """
    WooCommerce v3 REST client.

    Authenticates with the consumer key/secret over HTTP basic auth.
    """

    def __init__(
        self,
        base_url: str,
        consumer_key: str,
        consumer_secret: str,
        timeout: float = 30,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = (consumer_key, consumer_secret)
        self.session.headers.update({"Content-Type": "application/json"})

    # ===================
    # RESOLVER-FACING API
    # ===================

    def search(
        self,
        resource: str,
        query: dict[str, Any],
        limit: Optional[int] = None
    ) -> list[dict]:
        """
        Search a resource.

        Args:
            resource: "categories" or "products"
            query: WooCommerce query params, e.g. {"search": "Tools"} or {"sku": "ABC-1"}
            limit: Maximum number of records (per_page)

        Returns:
            List of records (possibly empty)
        """
        params = dict(query)
        if limit is not None:
            params["per_page"] = limit

        response = self._request("GET", self._path(resource), params=params)
        return _as_list(_json(response))

    def get(self, resource: str, record_id: int) -> dict:
        """Fetch a single record by ID."""
        response = self._request("GET", f"{self._path(resource)}/{record_id}")
        return _json(response)

    def put(self, resource: str, record_id: int, body: dict) -> dict:
        """Update a single record by ID."""
        response = self._request(
            "PUT",
            f"{self._path(resource)}/{record_id}",
            json=body
        )
        return _json(response)

    def list_page(
        self,
        resource: str,
        page: int,
        per_page: int,
        extra_params: Optional[dict[str, Any]] = None
    ) -> tuple[list[dict], int]:
        """
        Fetch one page of a resource listing.

        Returns:
            Tuple of (records, total pages). Total pages is read from the
            X-WP-TotalPages header and defaults to 1 when missing.
        """
        params = {"per_page": per_page, "page": page, **(extra_params or {})}
        response = self._request("GET", self._path(resource), params=params)
        return _as_list(_json(response)), _total_pages(response)

    # ===================
    # PASS-THROUGH
    # ===================

    def list_products(self, params: dict[str, Any]) -> list[dict]:
        """GET /products with caller-supplied query params."""
        response = self._request("GET", self._path("products"), params=params)
        return _as_list(_json(response))

    # ===================
    # INTERNALS
    # ===================

    def _path(self, resource: str) -> str:
        try:
            return RESOURCE_PATHS[resource]
        except KeyError:
            raise ValueError(f"Unknown WooCommerce resource: {resource}")

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}/{path}"
        logger.debug(
            "woocommerce_request",
            method=method,
            path=path,
            params=kwargs.get("params")
        )

        try:
            response = self.session.request(
                method,
                url,
                timeout=self.timeout,
                **kwargs
            )
        except requests.exceptions.RequestException as e:
            logger.error(
                "woocommerce_request_failed",
                method=method,
                path=path,
                error=str(e),
                error_type=type(e).__name__
            )
            raise WooCommerceError(f"WooCommerce request failed: {e}") from e

        if not response.ok:
            message, code = _error_from_response(response)
            logger.error(
                "woocommerce_api_error",
                method=method,
                path=path,
                status=response.status_code,
                upstream_code=code,
                error=message
            )
            raise WooCommerceError(
                f"WooCommerce API Error ({response.status_code}): {message}",
                upstream_status=response.status_code,
                upstream_code=code
            )

        return response


# ===================
# HELPER FUNCTIONS
# ===================

def _json(response: requests.Response) -> Any:
    """Decode a 2xx body; HTML maintenance pages and the like are upstream failures."""
    try:
        return response.json()
    except ValueError:
        logger.error(
            "woocommerce_non_json_response",
            status=response.status_code,
            content_type=response.headers.get("Content-Type")
        )
        raise WooCommerceError(
            f"WooCommerce returned a non-JSON response ({response.status_code})",
            upstream_status=response.status_code
        )


def _as_list(payload: Any) -> list[dict]:
    if isinstance(payload, list):
        return payload
    return []


def _total_pages(response: requests.Response) -> int:
    raw = response.headers.get(TOTAL_PAGES_HEADER)
    try:
        return max(int(raw), 1)
    except (TypeError, ValueError):
        return 1


def _error_from_response(response: requests.Response) -> tuple[str, Optional[str]]:
    """Extract (message, WooCommerce error code) from an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or "Unknown error", None

    if isinstance(body, dict):
        message = body.get("message") or str(body)
        return message, body.get("code")
    return str(body), None


@lru_cache()
def get_woocommerce_client() -> WooCommerceClient:
    """
    Get cached WooCommerce client instance.

    Call get_woocommerce_client.cache_clear() after config changes.
    """
    settings = get_settings()
    logger.info(
        "woocommerce_client_created",
        url=settings.woocommerce_api_url
    )
    return WooCommerceClient(
        base_url=settings.woocommerce_api_url,
        consumer_key=settings.woocommerce_key,
        consumer_secret=settings.woocommerce_secret,
        timeout=settings.request_timeout_seconds
    )
