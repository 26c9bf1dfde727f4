"""
Datastore initialization script - creates an empty storefront document

Run once before the first start (the API refuses to start without it):
    python scripts/init_db.py [--path db.json] [--menu menu.json] [--force]
"""

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
import logging

load_dotenv()

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


def empty_document() -> dict:
    return {
        "user": [],
        "menu": {"categories": [], "products": [], "extras": []},
        "orders": [],
        "banners": [],
        "counters": {"user": 0},
    }


def build_document(menu_path=None, banners_path=None) -> dict:
    document = empty_document()

    if menu_path:
        menu = json.loads(Path(menu_path).read_text(encoding="utf-8"))
        document["menu"].update({k: menu.get(k, []) for k in ("categories", "products", "extras")})
        logger.info(f"  ✅ Menu imported from {menu_path}")

    if banners_path:
        document["banners"] = json.loads(Path(banners_path).read_text(encoding="utf-8"))
        logger.info(f"  ✅ Banners imported from {banners_path}")

    return document


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create an empty storefront datastore")
    parser.add_argument("--path", default=os.getenv("DB_PATH", "db.json"), help="Datastore file to create")
    parser.add_argument("--menu", help="JSON file with categories/products/extras to import")
    parser.add_argument("--banners", help="JSON file with a list of banners to import")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing datastore")
    args = parser.parse_args(argv)

    target = Path(args.path)
    if target.exists() and not args.force:
        logger.error(f"❌ {target} already exists (use --force to overwrite)")
        return 1

    document = build_document(args.menu, args.banners)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")

    logger.info(f"🎉 Datastore created at {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
