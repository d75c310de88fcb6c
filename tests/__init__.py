"""
Test suite for the WooCommerce catalog gateway.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_product_resolver.py -v
"""
