"""
app/services/catalog_service.py

Purpose: Read-only storefront reference data (menu, banners)
"""

from typing import Any, Dict, List

from app.db.store import get_store


async def get_menu() -> Dict[str, List[Any]]:
    menu = get_store().document.get("menu") or {}
    return {
        "categories": menu.get("categories") or [],
        "products": menu.get("products") or [],
        "extras": menu.get("extras") or [],
    }


async def get_banners() -> List[Any]:
    return get_store().document.get("banners") or []
