"""
app/api/orders.py

Purpose: Order endpoints

- POST /orders           place an order (no login required)
- GET  /orders/history   orders of the authenticated user
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from app.api.deps import get_current_user_id
from app.schemas.response import success_response
from app.services.order_service import create_order, get_order_history

router = APIRouter()


@router.post("/orders")
async def place_order(payload: Optional[Dict[str, Any]] = Body(None)):
    """
    Stores the request body as an order. Fields are not validated;
    `userId` links the order to a user's history.
    """
    order = await create_order(payload or {})
    return success_response(
        "Order created",
        {"orderId": order["orderId"], "timestamp": order["timestamp"]}
    )


@router.get("/orders/history")
async def order_history(user_id: str = Depends(get_current_user_id)):
    return success_response("Fetched successfully", await get_order_history(user_id))
