"""
app/api/catalog.py

Purpose: Public storefront data

- GET /menu     categories, products, extras
- GET /banners  home page banners
"""

from fastapi import APIRouter

from app.schemas.response import success_response
from app.services.catalog_service import get_menu, get_banners

router = APIRouter()


@router.get("/menu")
async def read_menu():
    return success_response("Fetched successfully", await get_menu())


@router.get("/banners")
async def read_banners():
    return success_response("Fetched successfully", {"list": await get_banners()})
