#!/usr/bin/env python3
"""
Create the storefront tables in DATABASE_URL

Usage:
    python scripts/init_db.py
"""
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / '.env')

from storefront.core.database import init_db  # noqa: E402


def main():
    logging.basicConfig(level=logging.INFO)
    try:
        init_db()
    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        return 1

    print("✅ Tables ready: users, products, cart_items, orders, order_items")
    return 0


if __name__ == "__main__":
    sys.exit(main())
