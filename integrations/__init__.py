"""
Clients for external services.
"""

from integrations.woocommerce import WooCommerceClient, get_woocommerce_client

__all__ = [
    "WooCommerceClient",
    "get_woocommerce_client",
]
