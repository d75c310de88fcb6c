"""
Rebuild the category and/or product maps from WooCommerce.

Useful after bulk renames in the shop, or to seed data/ before the first
deploy so the gateway starts with warm caches.

Usage:
    python scripts/refresh_caches.py
    python scripts/refresh_caches.py --only categories
    python scripts/refresh_caches.py --data-dir /srv/gateway/data
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from config import get_settings, configure_logging
from exceptions import AppError
from services.rpc_dispatcher import build_dispatcher


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Refresh the WooCommerce identifier maps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/refresh_caches.py                     # both maps
  python scripts/refresh_caches.py --only products     # product map only
"""
    )
    parser.add_argument(
        "--only",
        choices=["categories", "products"],
        help="Refresh a single map"
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Override DATA_DIR from the environment"
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.data_dir is not None:
        settings = settings.model_copy(update={"data_dir": args.data_dir})
    configure_logging(settings)

    dispatcher = build_dispatcher(settings)
    refresh = dispatcher.refresh_service

    try:
        if args.only in (None, "categories"):
            result = refresh.refresh_categories()
            print(f"[OK] {result.message}")
        if args.only in (None, "products"):
            result = refresh.refresh_products()
            print(f"[OK] {result.message}")
    except AppError as e:
        print(f"[ERROR] {e.message}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
