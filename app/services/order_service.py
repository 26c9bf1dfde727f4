"""
app/services/order_service.py

Purpose: Order ledger

- Appends orders with server-assigned orderId / timestamp
- Returns a user's order history
"""

from threading import Lock
from typing import Any, Dict, List

from app.core.logging import get_logger, LogContext
from app.db.store import get_store
from app.models.order import format_order_id, new_order_document
from utils.time_utils import epoch_millis, utc_now_iso

logger = get_logger(__name__)

_id_lock = Lock()
_last_order_millis = 0


def next_order_id() -> str:
    """
    order_<epoch millis>, bumped by one when the clock has not advanced
    since the previous order so IDs stay unique within the process.
    """
    global _last_order_millis

    with _id_lock:
        millis = max(epoch_millis(), _last_order_millis + 1)
        _last_order_millis = millis
    return format_order_id(millis)


async def create_order(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Stores an order.

    Args:
        fields: Caller-supplied order fields (items, total, userId, ...);
            not validated

    Returns:
        The stored order document
    """
    store = get_store()

    with store.transaction():
        order = new_order_document(fields, order_id=next_order_id(), timestamp=utc_now_iso())
        store.collection("orders").append(order)

    with LogContext(order_id=order["orderId"], user_id=order.get("userId")):
        logger.info("Order created")

    return order


async def get_order_history(user_id: str) -> List[Dict[str, Any]]:
    """
    Returns all orders whose userId is `user_id`, oldest first.
    Empty list when the user has none.
    """
    orders = get_store().collection("orders")
    return [order for order in orders if order.get("userId") == user_id]
